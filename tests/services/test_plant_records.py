import logging
from datetime import date, datetime

import pytest

from app.schemas.plant import CarePolicy, PlantRecord
from app.services.dates import add_months, end_of_month, month_key, months_between, parse_date
from app.services.seasonal import adjusted_interval, resolve_override_for_month


def test_front_matter_keys_are_accepted():
    plant = PlantRecord.model_validate({
        "id": 42,
        "common": "Monstera",
        "acquired": "2024-03-02",
        "growth_phase": "active",
        "seasonal_overrides": [{"months": [11, 12], "water_factor": 0.7, "fertilise": "pause"}],
        "care": {
            "water": {"interval_days_hint": 9, "last": "2025-06-01", "flush_salts_months": 4},
            "fertilise": {"during": "active_only", "cadence": "monthly", "last": "2025-05-20"},
            "prune": {"interval_days_hint": 60, "last": "2025-04-01"},
            "repot": {"last": "2024-03-02", "guidance": "spring_preferred"},
        },
    })
    assert plant.id == "42"
    assert plant.common_name == "Monstera"
    assert plant.acquired_date == date(2024, 3, 2)
    assert plant.care.water.last_performed == date(2025, 6, 1)
    assert plant.care.water.flush_every_months == 4
    assert plant.care.fertilise.last_performed == date(2025, 5, 20)
    assert plant.care.prune.interval_days_hint == 60
    assert plant.care.repot.guidance == "spring_preferred"
    assert plant.seasonal_overrides[0].fertilise_mode == "pause"
    assert plant.seasonal_overrides[0].water_suppressed is False


def test_defaults_for_minimal_record():
    plant = PlantRecord(id="p1")
    assert plant.status == "active"
    assert plant.growth_phase == "auto"
    assert plant.seasonal_overrides == []
    assert plant.care.water is None
    assert plant.drought_stressed is False


def test_null_fields_take_their_defaults():
    plant = PlantRecord.model_validate({
        "id": "p1",
        "growth_phase": None,
        "status": None,
        "care": None,
        "drought_stressed": None,
        "seasonal_overrides": [{"months": [1], "water_suppressed": None}],
    })
    assert plant.growth_phase == "auto"
    assert plant.status == "active"
    assert plant.care.water is None
    assert plant.drought_stressed is False
    assert plant.seasonal_overrides[0].water_suppressed is False

    feed = PlantRecord(id="p2", care={"fertilise": {"during": None, "cadence": None}}).care.fertilise
    assert feed.during == "active_only"
    assert feed.cadence == "monthly"


@pytest.mark.parametrize("hint", [0, -3, "soon", None, float("nan")])
def test_invalid_water_interval_defaults_to_seven(hint):
    plant = PlantRecord(id="p1", care={"water": {"interval_days_hint": hint}})
    assert plant.care.water.interval_days_hint == 7


def test_fractional_interval_rounds_half_up():
    plant = PlantRecord(id="p1", care={"water": {"interval_days_hint": 4.5}})
    assert plant.care.water.interval_days_hint == 5


def test_invalid_prune_interval_is_absent():
    plant = PlantRecord(id="p1", care={"prune": {"interval_days_hint": 0}})
    assert plant.care.prune.interval_days_hint is None


def test_invalid_override_values_are_dropped():
    plant = PlantRecord(id="p1", seasonal_overrides=[{"months": [0, 3, 13, 3, "x"], "water_factor": 0}])
    override = plant.seasonal_overrides[0]
    assert override.months == [3]
    assert override.water_factor is None


def test_unparseable_dates_are_absent():
    plant = PlantRecord(
        id="p1",
        acquired="sometime last year",
        care={"water": {"last": "2025-02-30"}, "repot": {"last": 20240101}},
    )
    assert plant.acquired_date is None
    assert plant.care.water.last_performed is None
    assert plant.care.repot.last_performed is None


def test_overlapping_overrides_warn_and_first_wins(caplog):
    with caplog.at_level(logging.WARNING, logger="app.schemas.plant"):
        plant = PlantRecord(
            id="p1",
            seasonal_overrides=[
                {"months": [12, 1], "water_factor": 0.5},
                {"months": [1, 2], "water_factor": 0.8},
            ],
        )
    assert "overlapping seasonal overrides" in caplog.text
    assert resolve_override_for_month(plant, 1).water_factor == 0.5
    assert resolve_override_for_month(plant, 2).water_factor == 0.8
    assert resolve_override_for_month(plant, 6) is None


def test_policy_months_are_cleaned():
    assert CarePolicy(winter_months=[12, 12, 0, 1]).winter_months == [12, 1]
    assert CarePolicy().fertiliser_policy == "active-only"


# ── Calendar helpers ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("value,expected", [
    ("2025-06-01", date(2025, 6, 1)),
    (" 2025-06-01 ", date(2025, 6, 1)),
    ("2025-06-01T08:30:00", date(2025, 6, 1)),
    (datetime(2025, 6, 1, 8, 30), date(2025, 6, 1)),
    (date(2025, 6, 1), date(2025, 6, 1)),
    ("", None),
    ("2025-6-5", date(2025, 6, 5)),
    ("2025-06-5", date(2025, 6, 5)),
    ("2025-2-30", None),
    ("06/01/2025", None),
    (None, None),
    (True, None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


def test_month_arithmetic():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert months_between(date(2024, 5, 20), date(2025, 1, 1)) == 8
    assert months_between(date(2025, 3, 1), date(2025, 1, 1)) == -2
    assert month_key(date(2025, 3, 9)) == "2025-03"


def test_adjusted_interval():
    assert adjusted_interval(7, 0.6) == 12
    assert adjusted_interval(7, 2) == 4
    assert adjusted_interval(1, 5) == 1
    assert adjusted_interval(7, 0) == 7
