from datetime import date

import pytest

from booking import InvalidTransition, NotFoundError, SlotConflict, ValidationError

DAY = "2024-06-01"


def _fields(time="10:00", day=DAY, professional_id="p1", name="Fernanda Lima"):
    return {
        "client_name": name,
        "client_phone": "(82) 99888-7766",
        "date": day,
        "time": time,
        "service_id": "s1",
        "professional_id": professional_id,
    }


class TestAppend:
    def test_new_appointment_is_pending_with_fresh_id(self, engine):
        first = engine.ledger.append(_fields("09:00"))
        second = engine.ledger.append(_fields("10:00"))

        assert first.status == "pending"
        assert first.date == date(2024, 6, 1)
        assert first.id != second.id

    def test_same_slot_rejected_without_insert(self, engine):
        engine.ledger.append(_fields())
        with pytest.raises(SlotConflict) as exc:
            engine.ledger.append(_fields(name="Outra Pessoa"))

        assert exc.value.details == {"date": DAY, "professional_id": "p1", "time": "10:00"}
        assert len(engine.ledger.list_all()) == 1

    def test_missing_field_rejected(self, engine):
        fields = _fields()
        del fields["client_phone"]
        with pytest.raises(ValidationError):
            engine.ledger.append(fields)
        assert engine.ledger.list_all() == []

    def test_cancelled_slot_can_be_rebooked(self, engine):
        first = engine.ledger.append(_fields())
        engine.ledger.set_status(first.id, "cancelled")
        second = engine.ledger.append(_fields(name="Outra Pessoa"))

        assert second.status == "pending"
        assert [a.id for a in engine.ledger.find_active(DAY, "p1")] == [second.id]


class TestLists:
    def test_list_all_keeps_every_status(self, engine):
        a = engine.ledger.append(_fields("09:00"))
        b = engine.ledger.append(_fields("10:00"))
        engine.ledger.set_status(a.id, "cancelled")

        assert {x.id for x in engine.ledger.list_all()} == {a.id, b.id}

    def test_list_all_insertion_order(self, memory_engine):
        ids = [memory_engine.ledger.append(_fields(t)).id for t in ("15:00", "09:00", "11:00")]
        assert [a.id for a in memory_engine.ledger.list_all()] == ids

    def test_admin_list_sorted_by_date_then_time(self, engine):
        engine.ledger.append(_fields("15:00", day="2024-06-02"))
        engine.ledger.append(_fields("14:00"))
        engine.ledger.append(_fields("09:00", day="2024-06-02"))
        engine.ledger.append(_fields("09:00"))

        keys = [(a.date.isoformat(), a.time) for a in engine.ledger.list_for_admin()]
        assert keys == [
            ("2024-06-01", "09:00"),
            ("2024-06-01", "14:00"),
            ("2024-06-02", "09:00"),
            ("2024-06-02", "15:00"),
        ]

    def test_admin_list_breaks_ties_by_id(self, engine):
        first = engine.ledger.append(_fields())
        engine.ledger.set_status(first.id, "cancelled")
        second = engine.ledger.append(_fields())

        ids = [a.id for a in engine.ledger.list_for_admin()]
        assert ids == sorted([first.id, second.id])

    def test_find_active_filters(self, engine):
        kept = engine.ledger.append(_fields("09:00"))
        cancelled = engine.ledger.append(_fields("10:00"))
        engine.ledger.append(_fields("11:00", professional_id="p2"))
        engine.ledger.set_status(cancelled.id, "cancelled")

        assert [a.id for a in engine.ledger.find_active(DAY, "p1")] == [kept.id]


class TestStatusLifecycle:
    @pytest.mark.parametrize("path", [
        ["confirmed"],
        ["cancelled"],
        ["confirmed", "completed"],
        ["confirmed", "cancelled"],
    ])
    def test_allowed_paths(self, engine, path):
        appointment = engine.ledger.append(_fields())
        for status in path:
            appointment = engine.ledger.set_status(appointment.id, status)
        assert appointment.status == path[-1]

    @pytest.mark.parametrize("terminal", ["completed", "cancelled"])
    @pytest.mark.parametrize("target", ["pending", "confirmed", "completed", "cancelled"])
    def test_terminal_statuses_accept_nothing(self, engine, terminal, target):
        appointment = engine.ledger.append(_fields())
        if terminal == "completed":
            engine.ledger.set_status(appointment.id, "confirmed")
        engine.ledger.set_status(appointment.id, terminal)

        with pytest.raises(InvalidTransition):
            engine.ledger.set_status(appointment.id, target)
        assert engine.ledger.get(appointment.id).status == terminal

    def test_pending_cannot_skip_to_completed(self, engine):
        appointment = engine.ledger.append(_fields())
        with pytest.raises(InvalidTransition):
            engine.ledger.set_status(appointment.id, "completed")

    def test_double_cancel_does_not_free_twice(self, engine):
        first = engine.ledger.append(_fields())
        engine.ledger.set_status(first.id, "cancelled")
        second = engine.ledger.append(_fields(name="Outra Pessoa"))

        with pytest.raises(InvalidTransition):
            engine.ledger.set_status(first.id, "cancelled")
        assert engine.ledger.get(second.id).status == "pending"
        assert [a.id for a in engine.ledger.find_active(DAY, "p1")] == [second.id]

    def test_unknown_status(self, engine):
        appointment = engine.ledger.append(_fields())
        with pytest.raises(ValidationError):
            engine.ledger.set_status(appointment.id, "no_show")

    def test_unknown_id(self, engine):
        with pytest.raises(NotFoundError):
            engine.ledger.set_status("missing", "confirmed")


class TestUpdateFields:
    def test_patch_client_details(self, engine):
        appointment = engine.ledger.append(_fields())
        updated = engine.ledger.update_fields(appointment.id, {"client_name": "Fernanda L. Souza"})

        assert updated.client_name == "Fernanda L. Souza"
        assert updated.time == "10:00"

    def test_move_to_free_slot(self, engine):
        appointment = engine.ledger.append(_fields())
        engine.ledger.update_fields(appointment.id, {"time": "13:00", "date": "2024-06-03"})

        assert engine.ledger.find_active(DAY, "p1") == []
        assert [a.time for a in engine.ledger.find_active("2024-06-03", "p1")] == ["13:00"]

    def test_move_onto_taken_slot_rejected(self, engine):
        engine.ledger.append(_fields("09:00"))
        moving = engine.ledger.append(_fields("10:00"))

        with pytest.raises(SlotConflict):
            engine.ledger.update_fields(moving.id, {"time": "09:00"})
        assert engine.ledger.get(moving.id).time == "10:00"

    def test_change_professional_rechecks_slot(self, engine):
        engine.ledger.append(_fields(professional_id="p2"))
        moving = engine.ledger.append(_fields())

        with pytest.raises(SlotConflict):
            engine.ledger.update_fields(moving.id, {"professional_id": "p2"})

    def test_rewriting_own_slot_is_not_a_conflict(self, engine):
        appointment = engine.ledger.append(_fields())
        updated = engine.ledger.update_fields(appointment.id, {"time": "10:00", "date": DAY})
        assert updated.time == "10:00"

    def test_cancelled_appointment_may_point_at_taken_slot(self, engine):
        engine.ledger.append(_fields("09:00"))
        old = engine.ledger.append(_fields("10:00"))
        engine.ledger.set_status(old.id, "cancelled")

        updated = engine.ledger.update_fields(old.id, {"time": "09:00"})
        assert updated.time == "09:00"

    def test_status_not_editable_here(self, engine):
        appointment = engine.ledger.append(_fields())
        with pytest.raises(ValidationError):
            engine.ledger.update_fields(appointment.id, {"status": "confirmed"})

    def test_unknown_id(self, engine):
        with pytest.raises(NotFoundError):
            engine.ledger.update_fields("missing", {"client_name": "x"})
