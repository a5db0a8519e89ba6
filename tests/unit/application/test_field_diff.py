"""
Name: Field Diff Engine Tests

Responsibilities:
  - Only changed tracked fields produce deltas, in table order
  - Values are stringified at diff time
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from catalog.application.auditing.field_diff import (
    TRACKED_FIELDS,
    FieldDelta,
    PlateSnapshot,
    diff_plate,
    format_value,
)
from catalog.domain.entities import PlateStatus

pytestmark = pytest.mark.unit

NOW = datetime(2026, 1, 17, 10, 0, tzinfo=timezone.utc)


def test_tracked_fields_are_fixed_and_ordered():
    assert [name for name, _ in TRACKED_FIELDS] == [
        "Status",
        "PurchasePrice",
        "SalePrice",
        "ReservedDate",
        "SoldDate",
        "SoldPrice",
        "PromoCodeUsed",
    ]


def test_identical_snapshots_have_no_deltas(plate_factory):
    snapshot = PlateSnapshot.of(plate_factory.create())

    assert diff_plate(snapshot, snapshot) == []


def test_untracked_fields_are_ignored(plate_factory):
    plate = plate_factory.create()
    original = PlateSnapshot.of(plate)

    plate.registration = "ZZ99 ZZZ"
    plate.numbers = 99

    assert diff_plate(original, PlateSnapshot.of(plate)) == []


def test_value_equality_not_identity(plate_factory):
    plate = plate_factory.create(purchase_price="100.00")
    original = PlateSnapshot.of(plate)

    plate.purchase_price = Decimal("100.0")

    assert diff_plate(original, PlateSnapshot.of(plate)) == []


def test_reserve_produces_status_and_date_deltas(plate_factory):
    plate = plate_factory.create()
    original = PlateSnapshot.of(plate)

    plate.reserve(now=NOW)
    deltas = diff_plate(original, PlateSnapshot.of(plate))

    assert deltas == [
        FieldDelta("Status", PlateStatus.FOR_SALE, PlateStatus.RESERVED),
        FieldDelta("ReservedDate", None, NOW),
    ]
    assert [d.to_change() for d in deltas][0].new_value == "Reserved"
    assert deltas[1].to_change().new_value == NOW.isoformat()


def test_captured_change_does_not_follow_later_mutations(plate_factory):
    plate = plate_factory.create()
    original = PlateSnapshot.of(plate)
    plate.purchase_price = Decimal("150.00")

    change = diff_plate(original, PlateSnapshot.of(plate))[0].to_change()
    plate.purchase_price = Decimal("999.00")

    assert change.old_value == "100.00"
    assert change.new_value == "150.00"


def test_snapshot_is_immutable(plate_factory):
    snapshot = PlateSnapshot.of(plate_factory.create())

    with pytest.raises(Exception):
        snapshot.status = PlateStatus.SOLD  # type: ignore[misc]

    assert replace(snapshot, status=PlateStatus.SOLD) != snapshot


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (PlateStatus.SOLD, "Sold"),
        (Decimal("108.00"), "108.00"),
        (NOW, "2026-01-17T10:00:00+00:00"),
        ("DISCOUNT", "DISCOUNT"),
    ],
)
def test_format_value(value, expected):
    assert format_value(value) == expected
