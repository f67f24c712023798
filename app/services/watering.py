"""
Point-in-time watering status for a single plant.

evaluate_water_due() classifies a plant as exactly one of overdue, due-today,
soon, suppressed or not-due for the given day. It is a pure function of the
record and `today`: nothing is read from settings and nothing is written.

Suppression only applies to true dormancy (growth_phase == "quiescent") or an
override that explicitly sets water_suppressed. An override that pauses
fertilising does not affect watering.
"""
import logging
from datetime import date

from app.schemas.plant import PlantRecord, WaterCare
from app.schemas.schedule import WaterDueResult
from app.services.dates import add_days
from app.services.seasonal import (
    adjusted_interval,
    is_water_suppressed,
    resolve_override_for_month,
    seasonal_water_factor,
)

logger = logging.getLogger(__name__)

SOON_WINDOW_DAYS = 3
SUPPRESSION_GRACE_DAYS = 2


def evaluate_water_due(plant: PlantRecord, today: date) -> WaterDueResult:
    water = plant.care.water or WaterCare()
    override = resolve_override_for_month(plant, today.month)
    factor = seasonal_water_factor(override)
    threshold = adjusted_interval(water.interval_days_hint, factor)

    def result(status, due, reason, days_since=None, next_due=None) -> WaterDueResult:
        return WaterDueResult(
            plant_id=plant.id,
            due=due,
            status=status,
            reason=reason,
            days_since=days_since,
            threshold=threshold,
            next_due_date=next_due or today,
            water_factor=factor,
        )

    last = water.last_performed
    if last is None:
        return result("overdue", True, "No watering logged yet")

    days_since = (today - last).days
    next_due = add_days(last, threshold)

    if days_since < 0:
        logger.debug(
            "evaluate_water_due: plant %s has a future-dated watering (%s)", plant.id, last.isoformat()
        )
        return result("not-due", False, "Last watering logged in the future", days_since, next_due)

    dormant = plant.growth_phase == "quiescent"
    if (dormant or is_water_suppressed(override)) and days_since < threshold + SUPPRESSION_GRACE_DAYS:
        reason = "Quiescent phase" if dormant else "Seasonal watering pause"
        return result("suppressed", False, reason, days_since, next_due)

    if days_since > threshold:
        return result(
            "overdue", True,
            f"{days_since} days since last watering (target {threshold})",
            days_since, next_due,
        )

    if days_since == threshold:
        return result("due-today", True, "Hit interval hint", days_since, next_due)

    days_remaining = threshold - days_since
    if days_remaining <= SOON_WINDOW_DAYS:
        return result("soon", False, f"Due in {days_remaining} day(s)", days_since, next_due)

    return result("not-due", False, f"{days_remaining} day(s) until hint interval", days_since, next_due)
