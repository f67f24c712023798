"""
Fertilising decision for a single plant on a given day.

Blocked decisions cannot be overridden (feeding paused on the plant, or the
plant is drought-stressed and needs water first). Suppressed decisions are
seasonal or policy holds the caller may choose to override.
"""
from datetime import date

from app.schemas.plant import CarePolicy, FertiliseCare, PlantRecord
from app.schemas.schedule import FertiliseDecision
from app.services.seasonal import (
    forces_fertilise,
    is_fertilise_paused,
    is_winter_month,
    resolve_override_for_month,
)


def evaluate_fertilise(plant: PlantRecord, today: date, policy: CarePolicy) -> FertiliseDecision:
    fertilise = plant.care.fertilise or FertiliseCare()
    override = resolve_override_for_month(plant, today.month)

    def decision(status: str, reason: str) -> FertiliseDecision:
        return FertiliseDecision(
            plant_id=plant.id,
            allowed=status == "allowed",
            status=status,
            overridable=status == "suppressed",
            reason=reason,
        )

    if fertilise.during == "paused":
        return decision("blocked", "Feeding paused for this plant")
    if plant.drought_stressed:
        return decision("blocked", "Plant is drought-stressed; water first")

    if policy.fertiliser_policy == "paused":
        return decision("suppressed", "Feeding paused by policy")
    if is_fertilise_paused(override):
        return decision("suppressed", "Seasonal feeding pause")

    if policy.fertiliser_policy == "active-only" and not forces_fertilise(override):
        if is_winter_month(today.month, policy.winter_months):
            return decision("suppressed", "Feeding suppressed for winter")
        if plant.growth_phase == "quiescent":
            return decision("suppressed", "Feeding suppressed while quiescent")

    return decision("allowed", "OK to feed")
