"""
Tests for the booking draft accumulated across the selection steps.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from maritimehub.domain.entities.booking_draft import BookingDraft
from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship

HULL = ServiceItem(id="SVC1", name="Hull cleaning", price=1500000)
ENGINE = ServiceItem(id="SVC2", name="Engine check", price=800000)
SLOT = DockSlot(id="S1", name="Berth A1")
SHIP = Ship(id="SH1", name="Sea Breeze", code="VN-0001")


def test_each_step_keeps_fields_from_earlier_steps():
    """Choosing slot then ship then times never drops the services chosen first."""
    draft = BookingDraft(boatyard_id="BY1", boatyard_name="Saigon Marina")
    draft = draft.with_services([HULL, ENGINE])
    draft = draft.with_slot(SLOT)
    draft = draft.with_ship(SHIP)
    start = datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)
    draft = draft.with_times(start, start + timedelta(hours=3))

    assert draft.boatyard_id == "BY1"
    assert draft.boatyard_name == "Saigon Marina"
    assert draft.service_ids == ["SVC1", "SVC2"]
    assert draft.slot == SLOT
    assert draft.ship == SHIP
    assert draft.end_time - draft.start_time == timedelta(hours=3)


def test_single_service_is_accepted():
    draft = BookingDraft(boatyard_id="BY1").with_services(HULL)
    assert draft.services == (HULL,)


def test_empty_service_selection_is_rejected():
    with pytest.raises(ValueError):
        BookingDraft(boatyard_id="BY1").with_services([])


def test_with_methods_do_not_mutate_original():
    original = BookingDraft(boatyard_id="BY1")
    original.with_ship(SHIP)
    assert original.ship is None


def test_total_price_sums_known_prices():
    draft = BookingDraft(boatyard_id="BY1").with_services([HULL, ENGINE, ServiceItem(id="SVC3")])
    assert draft.total_price == 2300000


def test_total_price_is_none_without_prices():
    draft = BookingDraft(boatyard_id="BY1").with_services([ServiceItem(id="SVC3")])
    assert draft.total_price is None


def test_naive_times_are_read_as_utc():
    start = datetime(2030, 5, 1, 8, 0)
    draft = BookingDraft(boatyard_id="BY1").with_times(start, start + timedelta(hours=1))
    assert draft.start_time == datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_times_are_normalized_to_utc():
    ict = timezone(timedelta(hours=7))
    start = datetime(2030, 5, 1, 15, 0, tzinfo=ict)
    draft = BookingDraft(boatyard_id="BY1").with_times(start, start + timedelta(hours=1))
    assert draft.start_time == datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)
    assert draft.start_time.tzinfo == timezone.utc


def test_default_times_fill_only_missing_window():
    """Confirmation step defaults to now .. now + 2h, truncated to the minute."""
    now = datetime(2030, 5, 1, 8, 12, 45, 123, tzinfo=timezone.utc)
    draft = BookingDraft(boatyard_id="BY1").with_default_times(now, 2)
    assert draft.start_time == datetime(2030, 5, 1, 8, 12, tzinfo=timezone.utc)
    assert draft.end_time == datetime(2030, 5, 1, 10, 12, tzinfo=timezone.utc)

    chosen_start = datetime(2030, 6, 1, 9, 0, tzinfo=timezone.utc)
    chosen = BookingDraft(boatyard_id="BY1").with_times(chosen_start, chosen_start + timedelta(hours=5))
    assert chosen.with_default_times(now, 2) == chosen
