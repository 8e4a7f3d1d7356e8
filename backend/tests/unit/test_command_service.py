"""
Unit tests for CommandService, the boundary every command line goes through.
"""

import logging
import threading
from unittest.mock import Mock

import pytest

from medeina.core import messages
from medeina.core.exceptions import RecordNotFoundError, UnknownCommandVariantError
from medeina.services.add_service import AddService
from medeina.services.command_service import CommandService
from tests.factories.entity_factories import make_owner

ADD_OWNER = (
    "add -o n/Tan Wei Ling p/98765432 e/weiling@example.com "
    "a/311, Clementi Ave 2 nr/S1234567Q t/friends"
)
ADD_PET = "add -p n/Jewel s/Cat b/Persian c/Calico bt/AB -o nr/S1234567Q"
ADD_APPOINTMENT = "add -a d/2018-12-31 12:30 r/nil t/checkup -o nr/S1234567Q -p n/Jewel"


@pytest.mark.unit
@pytest.mark.services
class TestCommandDispatch:
    def test_add_then_list(self, command_service):
        for line in (ADD_OWNER, ADD_PET, ADD_APPOINTMENT):
            result = command_service.execute(line)
            assert result.success, result.feedback

        result = command_service.execute("list")

        assert result.feedback == messages.MESSAGE_LIST_SUMMARY.format(
            owners=1, pet_patients=1, appointments=1
        )
        assert len(result.records) == 3

    def test_add_returns_inserted_records(self, command_service):
        result = command_service.execute(ADD_OWNER)
        assert result.feedback.startswith("New owner added: Tan Wei Ling")
        assert [o.nric for o in result.records] == ["S1234567Q"]

    def test_alias(self, command_service):
        assert command_service.execute(ADD_OWNER.replace("add", "a", 1)).success
        result = command_service.execute("l -o")
        assert result.feedback == "1 owners listed!"

    @pytest.mark.parametrize(
        "args, feedback",
        [("-o", "0 owners listed!"), ("-p", "0 pet patients listed!"), ("-a", "0 appointments listed!")],
    )
    def test_list_one_kind(self, command_service, args, feedback):
        assert command_service.execute(f"list {args}").feedback == feedback

    def test_list_with_bad_argument(self, command_service):
        result = command_service.execute("list everything")
        assert not result.success
        assert messages.MESSAGE_LIST_USAGE in result.feedback

    def test_find(self, command_service):
        command_service.execute(ADD_OWNER)
        command_service.execute(ADD_OWNER.replace("Tan Wei Ling", "Ong Hui").replace("S1234567Q", "T7654321A"))

        result = command_service.execute("find -o n/Tan")

        assert result.feedback == "1 owners listed!"
        assert [o.name for o in result.records] == ["Tan Wei Ling"]

    def test_find_with_tab_after_selector(self, command_service):
        command_service.execute(ADD_OWNER)
        result = command_service.execute("find -o\tn/Tan")
        assert result.success
        assert result.feedback == "1 owners listed!"

    def test_find_pet_patients(self, command_service):
        for line in (ADD_OWNER, ADD_PET):
            command_service.execute(line)
        result = command_service.execute("f -p s/Cat Dog")
        assert result.feedback == "1 pet patients listed!"

    def test_undo_redo_history(self, command_service, memory_store):
        command_service.execute(ADD_OWNER)

        history = command_service.execute("history")
        assert history.feedback == f"1. {ADD_OWNER}"

        undo = command_service.execute("undo")
        assert undo.feedback == messages.MESSAGE_UNDO_SUCCESS.format(command=ADD_OWNER)
        assert memory_store.get_owners() == []

        redo = command_service.execute("r")
        assert redo.feedback == messages.MESSAGE_REDO_SUCCESS.format(command=ADD_OWNER)
        assert len(memory_store.get_owners()) == 1

    def test_history_empty(self, command_service):
        assert command_service.execute("history").feedback == messages.MESSAGE_HISTORY_EMPTY

    def test_help(self, command_service):
        assert command_service.execute("h").feedback == messages.MESSAGE_HELP


@pytest.mark.unit
@pytest.mark.services
class TestCommandErrors:
    """Every error comes back as a failed result with one message."""

    def test_unknown_command(self, command_service):
        result = command_service.execute("delete -o nr/S1234567Q")
        assert not result.success
        assert result.feedback == messages.MESSAGE_UNKNOWN_COMMAND

    def test_blank_line(self, command_service):
        result = command_service.execute("   ")
        assert not result.success
        assert result.feedback.startswith("Invalid command format!")

    def test_duplicate_owner(self, command_service, memory_store):
        command_service.execute(ADD_OWNER)
        result = command_service.execute(ADD_OWNER)
        assert not result.success
        assert result.feedback == messages.MESSAGE_DUPLICATE_OWNER
        assert len(memory_store.get_owners()) == 1

    def test_unknown_reference(self, command_service):
        result = command_service.execute(ADD_PET)
        assert not result.success
        assert result.feedback == messages.MESSAGE_INVALID_NRIC

    def test_invalid_field(self, command_service):
        result = command_service.execute(ADD_OWNER.replace("p/98765432", "p/98"))
        assert not result.success
        assert result.feedback.startswith("Invalid phone '98'")

    def test_invalid_search(self, command_service):
        result = command_service.execute("find n/Tan")
        assert not result.success
        assert messages.MESSAGE_FIND_USAGE in result.feedback

    def test_nothing_to_undo(self, command_service):
        result = command_service.execute("u")
        assert not result.success
        assert result.feedback == "No more commands to undo!"

    def test_stale_undo_is_reported_and_dropped(self, command_service, memory_store):
        for line in (ADD_OWNER, ADD_PET, ADD_APPOINTMENT):
            command_service.execute(line)
        memory_store.remove_appointment(memory_store.get_appointments()[0].id)

        result = command_service.execute("undo")

        assert not result.success
        assert "Cannot undo: " + ADD_APPOINTMENT in result.feedback
        assert len(memory_store.get_pet_patients()) == 1
        history = command_service.execute("history").feedback
        assert history == f"1. {ADD_PET}\n2. {ADD_OWNER}"

    def test_store_error_is_recovered(self, mock_store):
        mock_store.remove_owner.side_effect = RecordNotFoundError("owner", "S1234567Q")
        service = CommandService(mock_store)
        service.execute(ADD_OWNER)
        mock_store.find_owner.return_value = make_owner()

        result = service.execute("undo")

        assert not result.success
        assert "S1234567Q" in result.feedback

    def test_unknown_variant_is_logged_as_fault(self, memory_store, caplog):
        add_service = Mock(spec=AddService)
        add_service.execute.side_effect = UnknownCommandVariantError("bad request")
        service = CommandService(memory_store, add_service=add_service)

        with caplog.at_level(logging.ERROR, logger="medeina.services.command_service"):
            result = service.execute(ADD_OWNER)

        assert not result.success
        assert result.feedback == "bad request"
        assert any(record.exc_info for record in caplog.records)


@pytest.mark.unit
@pytest.mark.services
class TestCommandExclusivity:
    def test_commands_do_not_interleave(self, memory_store):
        service = CommandService(memory_store)
        inside = []
        overlaps = []
        original = service._list

        def slow_list(args, line):
            inside.append(1)
            if len(inside) > 1:
                overlaps.append(True)
            threading.Event().wait(0.01)
            inside.pop()
            return original(args, line)

        service._handlers["list"] = slow_list
        threads = [threading.Thread(target=service.execute, args=("list",)) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
