"""Management commands for the Medeina clinic backend."""

from medeina.cli import cli

if __name__ == "__main__":
    cli()
