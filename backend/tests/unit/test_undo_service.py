"""
Unit tests for UndoService.
"""

from datetime import datetime

import pytest

from medeina.core.exceptions import (
    NothingToRedoError,
    NothingToUndoError,
    RecordNotFoundError,
    StaleHistoryEntryError,
)
from medeina.schemas.dtos import AddBundleRequest, AddOwnerRequest, InsertedRecords
from medeina.services.undo_service import UndoService
from tests.factories.entity_factories import (
    make_appointment,
    make_owner,
    make_pet_patient,
)


def add_bundle(add_service, nric="S1234567Q", hour=12):
    return add_service.execute(
        AddBundleRequest(
            owner=make_owner(nric=nric),
            pet_patient=make_pet_patient(),
            appointment=make_appointment(date_time=datetime(2019, 1, 1, hour, 0)),
        ),
        command_text=f"add bundle {nric}",
    )


@pytest.mark.unit
@pytest.mark.undo
class TestUndo:
    def test_undo_bundle_removes_exactly_its_records(
        self, add_service, undo_service, memory_store
    ):
        add_bundle(add_service, nric="T7654321A", hour=9)
        add_bundle(add_service, nric="S1234567Q", hour=10)

        entry = undo_service.undo()

        assert entry.command_text == "add bundle S1234567Q"
        assert [o.nric for o in memory_store.get_owners()] == ["T7654321A"]
        assert [p.owner_nric for p in memory_store.get_pet_patients()] == ["T7654321A"]
        assert [a.owner_nric for a in memory_store.get_appointments()] == ["T7654321A"]

    def test_nothing_to_undo(self, undo_service):
        with pytest.raises(NothingToUndoError) as exc_info:
            undo_service.undo()
        assert exc_info.value.message == "No more commands to undo!"

    def test_removal_order_is_reverse_of_insertion(self, mock_store):
        service = UndoService(mock_store, history_limit=5)
        owner = make_owner()
        pet = make_pet_patient().with_owner(owner.nric)
        appointment = make_appointment().with_references(owner.nric, pet.name)
        mock_store.find_owner.return_value = owner
        mock_store.find_pet_patient.return_value = pet
        mock_store.get_appointments.return_value = [appointment]
        service.record(
            "add",
            InsertedRecords(owners=[owner], pet_patients=[pet], appointments=[appointment]),
        )

        service.undo()

        removal_calls = [
            name for name, _, _ in mock_store.method_calls if name.startswith("remove_")
        ]
        assert removal_calls == ["remove_appointment", "remove_pet_patient", "remove_owner"]

    def test_missing_record_leaves_store_unchanged(
        self, add_service, undo_service, memory_store
    ):
        add_bundle(add_service)
        memory_store.remove_pet_patient("S1234567Q", "Jewel")

        with pytest.raises(StaleHistoryEntryError) as exc_info:
            undo_service.undo()

        assert "Pet patient S1234567Q/Jewel no longer exists" in exc_info.value.message
        assert len(memory_store.get_owners()) == 1
        assert len(memory_store.get_appointments()) == 1
        assert not undo_service.can_undo
        assert not undo_service.can_redo

    def test_stale_entry_does_not_block_older_entries(
        self, add_service, undo_service, memory_store
    ):
        add_bundle(add_service, nric="T7654321A", hour=9)
        outcome = add_bundle(add_service, nric="S1234567Q", hour=10)
        memory_store.remove_appointment(outcome.inserted.appointments[0].id)

        with pytest.raises(StaleHistoryEntryError):
            undo_service.undo()
        entry = undo_service.undo()

        assert entry.command_text == "add bundle T7654321A"
        assert [o.nric for o in memory_store.get_owners()] == ["S1234567Q"]
        assert memory_store.get_appointments() == []

    def test_failed_removal_is_restored(self, add_service, undo_service, memory_store):
        add_bundle(add_service)
        original_remove = memory_store.remove_pet_patient

        def vanish_then_remove(owner_nric, name):
            original_remove(owner_nric, name)
            raise RecordNotFoundError("pet patient", f"{owner_nric}/{name}")

        memory_store.remove_pet_patient = vanish_then_remove

        with pytest.raises(StaleHistoryEntryError):
            undo_service.undo()

        assert len(memory_store.get_owners()) == 1
        assert len(memory_store.get_appointments()) == 1
        assert not undo_service.can_undo


@pytest.mark.unit
@pytest.mark.undo
class TestRedo:
    def test_redo_restores_records(self, add_service, undo_service, memory_store):
        outcome = add_bundle(add_service)
        undo_service.undo()

        entry = undo_service.redo()

        assert entry.command_text == "add bundle S1234567Q"
        assert memory_store.get_appointments()[0].id == outcome.inserted.appointments[0].id
        assert len(memory_store.get_owners()) == 1
        assert undo_service.can_undo
        assert not undo_service.can_redo

    def test_nothing_to_redo(self, undo_service):
        with pytest.raises(NothingToRedoError):
            undo_service.redo()

    def test_record_added_again_blocks_redo_cleanly(
        self, add_service, undo_service, memory_store
    ):
        add_bundle(add_service)
        undo_service.undo()
        memory_store.add_owner(make_owner())

        with pytest.raises(StaleHistoryEntryError) as exc_info:
            undo_service.redo()

        assert "Owner S1234567Q already exists" in exc_info.value.message
        assert len(memory_store.get_owners()) == 1
        assert memory_store.get_pet_patients() == []
        assert memory_store.get_appointments() == []
        assert not undo_service.can_redo
        assert not undo_service.can_undo

    def test_new_add_clears_redo(self, add_service, undo_service):
        add_bundle(add_service)
        undo_service.undo()
        assert undo_service.can_redo

        add_service.execute(AddOwnerRequest(owner=make_owner(nric="T7654321A")))

        assert not undo_service.can_redo


@pytest.mark.unit
@pytest.mark.undo
class TestHistory:
    def test_empty_insert_is_not_recorded(self, undo_service):
        assert undo_service.record("noop", InsertedRecords()) is None
        assert undo_service.list_history() == []

    def test_newest_first(self, undo_service):
        undo_service.record("first", InsertedRecords(owners=[make_owner()]))
        undo_service.record("second", InsertedRecords(owners=[make_owner(nric="T7654321A")]))

        assert [h["command"] for h in undo_service.list_history()] == ["second", "first"]

    def test_history_is_bounded(self, memory_store):
        service = UndoService(memory_store, history_limit=2)
        for i, nric in enumerate(["S1111111A", "S2222222B", "S3333333C"]):
            service.record(f"add {i}", InsertedRecords(owners=[make_owner(nric=nric)]))

        assert [h["command"] for h in service.list_history()] == ["add 2", "add 1"]

    def test_limit_defaults_to_configuration(self, memory_store, monkeypatch):
        monkeypatch.setenv("MEDEINA_UNDO_HISTORY_LIMIT", "7")
        assert UndoService(memory_store).history_limit == 7

    def test_clear(self, undo_service):
        undo_service.record("first", InsertedRecords(owners=[make_owner()]))
        undo_service.clear()
        assert not undo_service.can_undo
