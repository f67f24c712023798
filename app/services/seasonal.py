"""
Seasonal override rules shared by watering, fertilising and the forecast.

Overrides are month-aware: each entry lists the calendar months it applies to.
When several entries cover the same month the first one in list order wins.
Never raises: missing or invalid values fall back to "no adjustment".
"""
import math
from typing import Iterable, Optional

from app.schemas.plant import PlantRecord, SeasonalOverride

SPRING_MONTHS = frozenset({3, 4, 5})


# ── Override lookup ───────────────────────────────────────────────────────────

def resolve_override_for_month(plant: PlantRecord, month: int) -> Optional[SeasonalOverride]:
    """Return the first seasonal override covering `month`, or None."""
    for override in plant.seasonal_overrides:
        if override.covers(month):
            return override
    return None


def seasonal_water_factor(override: Optional[SeasonalOverride]) -> float:
    if override is None or override.water_factor is None or override.water_factor <= 0:
        return 1.0
    return override.water_factor


def is_water_suppressed(override: Optional[SeasonalOverride]) -> bool:
    # Only the watering flag counts; a fertilise pause never silences watering.
    return override is not None and override.water_suppressed


def is_fertilise_paused(override: Optional[SeasonalOverride]) -> bool:
    return override is not None and override.fertilise_mode == "pause"


def forces_fertilise(override: Optional[SeasonalOverride]) -> bool:
    return override is not None and override.fertilise_mode == "as-normal"


# ── Interval math ─────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def adjusted_interval(base_days: int, factor: float) -> int:
    """
    Scale a day interval by a seasonal water factor.

    A factor below 1 stretches the interval (water less often), above 1
    shortens it. The result is never below one day.
    """
    if factor <= 0:
        factor = 1.0
    return max(1, round_half_up(base_days / factor))


def is_winter_month(month: int, winter_months: Iterable[int]) -> bool:
    return month in set(winter_months)
