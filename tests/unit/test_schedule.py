from __future__ import annotations

import pytest

from maint_reminder.errors import ConfigurationError
from maint_reminder.services.schedule import ENTRY_POINT, Trigger, apply_schedule, validate_schedule
from tests.conftest import InMemoryTriggerStore


def test_apply_creates_cross_product(trigger_store: InMemoryTriggerStore):
    created = apply_schedule(trigger_store, ["MONDAY", "SATURDAY"], [7, 14])
    assert [(t.weekday, t.hour) for t in created] == [
        ("MONDAY", 7),
        ("MONDAY", 14),
        ("SATURDAY", 7),
        ("SATURDAY", 14),
    ]
    assert len(trigger_store.list_triggers_for(ENTRY_POINT)) == 4


def test_apply_is_idempotent(trigger_store: InMemoryTriggerStore):
    apply_schedule(trigger_store, ["SATURDAY"], [7, 19])
    once = len(trigger_store.triggers)
    apply_schedule(trigger_store, ["SATURDAY"], [7, 19])
    assert len(trigger_store.triggers) == once == 2


def test_apply_replaces_previous_schedule(trigger_store: InMemoryTriggerStore):
    apply_schedule(trigger_store, ["SATURDAY"], [7])
    apply_schedule(trigger_store, ["SUNDAY"], [9])
    assert trigger_store.list_triggers_for(ENTRY_POINT) == [Trigger(ENTRY_POINT, "SUNDAY", 9)]


def test_apply_leaves_other_entry_points_alone():
    other = Trigger("backup", "SATURDAY", 7)
    store = InMemoryTriggerStore([other])
    apply_schedule(store, ["SUNDAY"], [9])
    apply_schedule(store, [], [])
    assert store.triggers == [other]


def test_apply_empty_disables_schedule(trigger_store: InMemoryTriggerStore):
    apply_schedule(trigger_store, ["SATURDAY"], [7])
    assert apply_schedule(trigger_store, ["SATURDAY"], []) == []
    assert trigger_store.triggers == []


def test_apply_invalid_input_keeps_existing(trigger_store: InMemoryTriggerStore):
    apply_schedule(trigger_store, ["SATURDAY"], [7])
    with pytest.raises(ConfigurationError):
        apply_schedule(trigger_store, ["SATURDAY"], [24])
    assert trigger_store.triggers == [Trigger(ENTRY_POINT, "SATURDAY", 7)]


def test_validate_schedule_normalizes_case():
    assert validate_schedule(["saturday", " Sunday "], [0, 23]) == (["SATURDAY", "SUNDAY"], [0, 23])


@pytest.mark.parametrize("days, hours", [(["FUNDAY"], [7]), (["MONDAY"], [-1]), (["MONDAY"], [True])])
def test_validate_schedule_rejects(days, hours):
    with pytest.raises(ConfigurationError):
        validate_schedule(days, hours)
