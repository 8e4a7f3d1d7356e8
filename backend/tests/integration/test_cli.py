"""
Integration tests for the click command-line front end.
"""

import pytest
from click.testing import CliRunner

from medeina.cli import cli

ADD_OWNER = (
    "add -o n/Tan Wei Ling p/98765432 e/weiling@example.com "
    "a/311, Clementi Ave 2 nr/S1234567Q t/friends"
)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from replacing the test run's log handlers."""
    monkeypatch.setattr("medeina.main.setup_logging", lambda **kwargs: None)
    monkeypatch.setattr("medeina.core.logging_config.setup_logging", lambda **kwargs: None)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'clinic.db'}"


@pytest.mark.integration
@pytest.mark.cli
class TestRunCommand:
    def test_add_owner_in_memory(self, runner):
        result = runner.invoke(cli, ["--store", "memory", "run", ADD_OWNER])

        assert result.exit_code == 0
        assert "New owner added: Tan Wei Ling" in result.output

    def test_failure_exits_non_zero(self, runner):
        result = runner.invoke(cli, ["--store", "memory", "run", "undo"])

        assert result.exit_code == 1
        assert "No more commands to undo!" in result.output

    def test_records_persist_between_runs(self, runner, db_url):
        first = runner.invoke(
            cli, ["--store", "sqlalchemy", "--database-url", db_url, "run", ADD_OWNER]
        )
        second = runner.invoke(
            cli, ["--store", "sqlalchemy", "--database-url", db_url, "run", "list -o"]
        )

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert "1 owners listed!" in second.output
        assert "NRIC: S1234567Q" in second.output

    def test_unknown_store_is_rejected(self, runner):
        result = runner.invoke(cli, ["--store", "redis", "run", "list"])
        assert result.exit_code == 2


@pytest.mark.integration
@pytest.mark.cli
class TestShellCommand:
    def test_reads_until_exit(self, runner):
        script = "\n".join([ADD_OWNER, "", "find -o n/Tan", "exit", "list"]) + "\n"

        result = runner.invoke(cli, ["--store", "memory", "shell"], input=script)

        assert result.exit_code == 0
        assert "New owner added" in result.output
        assert "1 owners listed!" in result.output
        assert "Listed" not in result.output

    def test_end_of_input_ends_shell(self, runner):
        result = runner.invoke(cli, ["--store", "memory", "shell"], input="help\n")

        assert result.exit_code == 0
        assert "add -o" in result.output


@pytest.mark.integration
@pytest.mark.cli
def test_init_db_creates_tables(runner, db_url, tmp_path):
    result = runner.invoke(cli, ["--database-url", db_url, "init-db"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "clinic.db").exists()
