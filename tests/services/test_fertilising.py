from datetime import date

from app.schemas.plant import CarePolicy, PlantRecord
from app.services.fertilising import evaluate_fertilise

WINTER_DAY = date(2025, 1, 15)
SUMMER_DAY = date(2025, 6, 15)


def _plant(during="active_only", **kwargs) -> PlantRecord:
    return PlantRecord(id="p1", care={"fertilise": {"during": during, "cadence": "monthly"}}, **kwargs)


def test_allowed_in_growing_season():
    res = evaluate_fertilise(_plant(), SUMMER_DAY, CarePolicy())
    assert res.status == "allowed"
    assert res.allowed is True
    assert res.overridable is False


def test_paused_plant_is_blocked_before_drought_check():
    res = evaluate_fertilise(_plant(during="paused", drought_stressed=True), SUMMER_DAY, CarePolicy())
    assert res.status == "blocked"
    assert res.overridable is False
    assert res.reason == "Feeding paused for this plant"


def test_drought_stressed_is_blocked():
    res = evaluate_fertilise(_plant(drought_stressed=True), SUMMER_DAY, CarePolicy(fertiliser_policy="always"))
    assert res.status == "blocked"
    assert res.allowed is False
    assert "drought" in res.reason


def test_winter_suppressed_under_active_only_policy():
    res = evaluate_fertilise(_plant(), WINTER_DAY, CarePolicy())
    assert res.status == "suppressed"
    assert res.overridable is True
    assert res.allowed is False


def test_quiescent_suppressed_under_active_only_policy():
    res = evaluate_fertilise(_plant(growth_phase="quiescent"), SUMMER_DAY, CarePolicy())
    assert res.status == "suppressed"


def test_as_normal_override_lifts_winter_suppression():
    plant = _plant(seasonal_overrides=[{"months": [1], "fertilise": "as-normal"}])
    res = evaluate_fertilise(plant, WINTER_DAY, CarePolicy())
    assert res.status == "allowed"


def test_always_policy_ignores_winter():
    res = evaluate_fertilise(_plant(), WINTER_DAY, CarePolicy(fertiliser_policy="always"))
    assert res.status == "allowed"


def test_custom_winter_months():
    res = evaluate_fertilise(_plant(), WINTER_DAY, CarePolicy(winter_months=[12]))
    assert res.status == "allowed"


def test_paused_policy_suppresses():
    res = evaluate_fertilise(_plant(), SUMMER_DAY, CarePolicy(fertiliser_policy="paused"))
    assert res.status == "suppressed"
    assert res.overridable is True


def test_seasonal_pause_override_suppresses():
    plant = _plant(seasonal_overrides=[{"months": [6], "fertilise_mode": "pause"}])
    res = evaluate_fertilise(plant, SUMMER_DAY, CarePolicy(fertiliser_policy="always"))
    assert res.status == "suppressed"
    assert res.reason == "Seasonal feeding pause"


def test_missing_fertilise_record_defaults_to_active_only():
    res = evaluate_fertilise(PlantRecord(id="bare"), WINTER_DAY, CarePolicy())
    assert res.status == "suppressed"
