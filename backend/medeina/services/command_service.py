"""
Command service: the single entry point for command lines.

Splits a line into command word and arguments, dispatches to the matching
handler and turns every ``MedeinaError`` into a failed ``CommandResult``.
One command runs at a time per service.
"""

import logging
import re
import threading
import time
from typing import Callable, Dict, Optional

from medeina.core import messages
from medeina.core.exceptions import (
    CommandError,
    InvalidCommandFormatError,
    MedeinaError,
    UnknownCommandVariantError,
)
from medeina.core.logging_config import log_performance
from medeina.domain.interfaces import IClinicStore
from medeina.parsing.add_parser import parse_add_arguments
from medeina.schemas.dtos import CommandResult
from medeina.services.add_service import AddService
from medeina.services.search_service import TARGET_OWNERS, SearchService
from medeina.services.undo_service import UndoService

logger = logging.getLogger(__name__)

_COMMAND_FORMAT = re.compile(r"^(?P<word>\S+)(?P<arguments>.*)$", re.DOTALL)


class CommandService:
    """Executes command lines against one store."""

    def __init__(
        self,
        store: IClinicStore,
        add_service: Optional[AddService] = None,
        search_service: Optional[SearchService] = None,
        undo_service: Optional[UndoService] = None,
    ):
        self.store = store
        self.undo_service = undo_service or UndoService(store)
        self.add_service = add_service or AddService(store, self.undo_service)
        self.search_service = search_service or SearchService()
        self._lock = threading.Lock()

        handlers: Dict[str, Callable[[str, str], CommandResult]] = {
            messages.ADD_COMMAND_WORD: self._add,
            messages.FIND_COMMAND_WORD: self._find,
            messages.LIST_COMMAND_WORD: self._list,
            messages.UNDO_COMMAND_WORD: self._undo,
            messages.REDO_COMMAND_WORD: self._redo,
            messages.HISTORY_COMMAND_WORD: self._history,
            messages.HELP_COMMAND_WORD: self._help,
        }
        aliases = {
            messages.ADD_COMMAND_ALIAS: messages.ADD_COMMAND_WORD,
            messages.FIND_COMMAND_ALIAS: messages.FIND_COMMAND_WORD,
            messages.LIST_COMMAND_ALIAS: messages.LIST_COMMAND_WORD,
            messages.UNDO_COMMAND_ALIAS: messages.UNDO_COMMAND_WORD,
            messages.REDO_COMMAND_ALIAS: messages.REDO_COMMAND_WORD,
            messages.HELP_COMMAND_ALIAS: messages.HELP_COMMAND_WORD,
        }
        self._handlers = dict(handlers)
        for alias, word in aliases.items():
            self._handlers[alias] = handlers[word]

    def execute(self, line: str) -> CommandResult:
        """Run one command line and describe the outcome.

        Never raises for user errors: they come back as
        ``CommandResult(success=False)``.
        """
        start = time.time()
        match = _COMMAND_FORMAT.match((line or "").strip())
        word = match.group("word") if match else ""

        with self._lock:
            try:
                if match is None:
                    raise InvalidCommandFormatError(messages.MESSAGE_HELP)
                handler = self._handlers.get(word)
                if handler is None:
                    raise CommandError(messages.MESSAGE_UNKNOWN_COMMAND)
                result = handler(match.group("arguments").strip(), line.strip())
            except UnknownCommandVariantError as e:
                logger.error(
                    f"Unsupported command variant: {e}",
                    extra={"context": {"command": word}},
                    exc_info=True,
                )
                result = CommandResult(feedback=str(e), success=False)
            except MedeinaError as e:
                logger.info(
                    f"Command failed: {e}",
                    extra={"context": {"command": word, "error": type(e).__name__}},
                )
                result = CommandResult(feedback=_message_of(e), success=False)

        log_performance(
            "execute_command",
            (time.time() - start) * 1000,
            command=word,
            success=result.success,
        )
        return result

    # Handlers

    def _add(self, args: str, line: str) -> CommandResult:
        request = parse_add_arguments(args)
        outcome = self.add_service.execute(request, command_text=line)
        inserted = outcome.inserted
        records = [*inserted.owners, *inserted.pet_patients, *inserted.appointments]
        return CommandResult(feedback=outcome.feedback, records=records)

    def _find(self, args: str, line: str) -> CommandResult:
        target, matches = self.search_service.search(args, self.store)
        template = (
            messages.MESSAGE_OWNERS_LISTED
            if target == TARGET_OWNERS
            else messages.MESSAGE_PET_PATIENTS_LISTED
        )
        return CommandResult(feedback=template.format(count=len(matches)), records=matches)

    def _list(self, args: str, line: str) -> CommandResult:
        if args == "-o":
            owners = self.store.get_owners()
            return CommandResult(
                feedback=messages.MESSAGE_OWNERS_LISTED.format(count=len(owners)),
                records=owners,
            )
        if args == "-p":
            pet_patients = self.store.get_pet_patients()
            return CommandResult(
                feedback=messages.MESSAGE_PET_PATIENTS_LISTED.format(count=len(pet_patients)),
                records=pet_patients,
            )
        if args == "-a":
            appointments = self.store.get_appointments()
            return CommandResult(
                feedback=messages.MESSAGE_APPOINTMENTS_LISTED.format(count=len(appointments)),
                records=appointments,
            )
        if args:
            raise InvalidCommandFormatError(messages.MESSAGE_LIST_USAGE)

        owners = self.store.get_owners()
        pet_patients = self.store.get_pet_patients()
        appointments = self.store.get_appointments()
        return CommandResult(
            feedback=messages.MESSAGE_LIST_SUMMARY.format(
                owners=len(owners),
                pet_patients=len(pet_patients),
                appointments=len(appointments),
            ),
            records=[*owners, *pet_patients, *appointments],
        )

    def _undo(self, args: str, line: str) -> CommandResult:
        entry = self.undo_service.undo()
        return CommandResult(
            feedback=messages.MESSAGE_UNDO_SUCCESS.format(command=entry.command_text)
        )

    def _redo(self, args: str, line: str) -> CommandResult:
        entry = self.undo_service.redo()
        return CommandResult(
            feedback=messages.MESSAGE_REDO_SUCCESS.format(command=entry.command_text)
        )

    def _history(self, args: str, line: str) -> CommandResult:
        history = self.undo_service.list_history()
        if not history:
            return CommandResult(feedback=messages.MESSAGE_HISTORY_EMPTY, records=[])
        lines = [f"{i}. {item['command']}" for i, item in enumerate(history, start=1)]
        return CommandResult(feedback="\n".join(lines), records=history)

    def _help(self, args: str, line: str) -> CommandResult:
        return CommandResult(feedback=messages.MESSAGE_HELP)


def _message_of(error: MedeinaError) -> str:
    if isinstance(error, CommandError):
        return error.message
    return str(error)
