"""
Forward-looking monthly care calendar.

compute_monthly_forecast() walks `months_horizon` calendar months and, for
every active plant, runs each task rule in TASK_RULES against the month. A rule
is a small pure function (plant, month window) -> TaskSummary | None; the
forecast only composes them. Rules apply the same seasonal overrides as the
watering evaluator, but prospectively for the month being forecast.

A rule that finds no date in the month returns None. The one exception is the
fertilise pause placeholder, which carries no dates and intensity "paused".
A plant is listed in a month only when at least one of its tasks has a date.
Never raises for well-formed records.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from app.schemas.plant import PlantRecord, WaterCare
from app.schemas.schedule import ForecastOptions, MonthBucket, PlantMonthSchedule, TaskSummary
from app.services.dates import (
    add_days,
    add_months,
    end_of_month,
    month_key,
    months_between,
    start_of_month,
)
from app.services.seasonal import (
    SPRING_MONTHS,
    adjusted_interval,
    is_fertilise_paused,
    is_winter_month,
    resolve_override_for_month,
    round_half_up,
    seasonal_water_factor,
)

logger = logging.getLogger(__name__)

MONTHLY_FEED_FALLBACK_DAY = 14
FEED_FALLBACK_DAY = 21
FLUSH_DAY = 2
REPOT_MIN_MONTHS = 12
REPOT_OVERDUE_MONTHS = 18


@dataclass(frozen=True)
class MonthWindow:
    start: date
    end: date
    winter_months: frozenset

    @property
    def month(self) -> int:
        return self.start.month

    @property
    def span(self) -> int:
        return (self.end - self.start).days

    def offset(self, days: int) -> date:
        """A date `days` into the month, clamped to the month's last day."""
        return add_days(self.start, max(0, min(days, self.span)))


def _occurrences(first: date, interval: int, window: MonthWindow) -> list[date]:
    """Every date first + k*interval (k >= 0) that falls inside the window."""
    cursor = first
    if cursor < window.start:
        behind = (window.start - cursor).days
        cursor = add_days(cursor, -(-behind // interval) * interval)
    dates = []
    while cursor <= window.end:
        dates.append(cursor)
        cursor = add_days(cursor, interval)
    return dates


def _interval_dates(first: date, interval: int, window: MonthWindow) -> list[date]:
    dates = _occurrences(first, interval, window)
    if not dates:
        # keep an active cadence visible in months the stepping skips over
        fallback = add_days(window.start, max(1, interval))
        if fallback <= window.end:
            dates.append(fallback)
    return dates


def _water_cadence(plant: PlantRecord, water: WaterCare, window: MonthWindow) -> tuple[int, float]:
    factor = seasonal_water_factor(resolve_override_for_month(plant, window.month))
    return adjusted_interval(water.interval_days_hint, factor), factor


def _water_dates(water: WaterCare, interval: int, window: MonthWindow) -> list[date]:
    if water.last_performed is not None:
        first = add_days(water.last_performed, interval)
    else:
        first = add_days(window.start, max(0, round_half_up(interval / 2)))
    return _interval_dates(first, interval, window)


def _next_monthly(last: date, month_start: date) -> date:
    """First monthly anniversary of `last` on or after `month_start`."""
    step = max(1, months_between(last, month_start))
    target = add_months(last, step)
    while target < month_start:
        step += 1
        target = add_months(last, step)
    return target


# ── Task rules ────────────────────────────────────────────────────────────────

def water_task(plant: PlantRecord, window: MonthWindow) -> Optional[TaskSummary]:
    water = plant.care.water
    if water is None:
        return None

    interval, factor = _water_cadence(plant, water, window)
    dates = _water_dates(water, interval, window)
    if not dates:
        return None

    intensity = "normal"
    if factor < 1:
        intensity = "reduced"
    elif factor > 1:
        intensity = "increased"

    note = f"Every ~{interval} days"
    if water.last_performed is not None:
        note += " (based on last log)"
    return TaskSummary(action="water", due_dates=dates, intensity=intensity, note=note)


def fertilise_task(plant: PlantRecord, window: MonthWindow) -> Optional[TaskSummary]:
    fertilise = plant.care.fertilise
    if fertilise is None or fertilise.during == "paused":
        return None

    if is_fertilise_paused(resolve_override_for_month(plant, window.month)):
        return TaskSummary(action="fertilise", due_dates=[], intensity="paused", note="Seasonal pause")

    if fertilise.during == "active_only" and is_winter_month(window.month, window.winter_months):
        return None

    dates: list[date] = []
    if fertilise.cadence == "monthly":
        if fertilise.last_performed is not None:
            target = _next_monthly(fertilise.last_performed, window.start)
            if target <= window.end:
                dates.append(target)
        if not dates:
            dates.append(window.offset(MONTHLY_FEED_FALLBACK_DAY))
        note = "Monthly feed"
    else:
        water = plant.care.water
        if water is not None:
            interval, _ = _water_cadence(plant, water, window)
            dates.extend(_water_dates(water, interval, window)[:2])
        note = "Quarter-strength alongside watering"

    if not dates:
        dates.append(window.offset(FEED_FALLBACK_DAY))

    return TaskSummary(
        action="fertilise",
        due_dates=list(dict.fromkeys(dates)),
        intensity="normal",
        note=note,
    )


def flush_task(plant: PlantRecord, window: MonthWindow) -> Optional[TaskSummary]:
    water = plant.care.water
    if water is None or not water.flush_every_months:
        return None
    if plant.acquired_date is None:
        return None

    every = water.flush_every_months
    elapsed = months_between(plant.acquired_date, window.start)
    if elapsed <= 0 or elapsed % every != 0:
        return None

    return TaskSummary(
        action="flush",
        due_dates=[window.offset(FLUSH_DAY)],
        intensity="normal",
        note=f"Flush salts (every {every} months)",
    )


def prune_task(plant: PlantRecord, window: MonthWindow) -> Optional[TaskSummary]:
    prune = plant.care.prune
    if prune is None or prune.interval_days_hint is None:
        return None

    interval = prune.interval_days_hint
    seed = prune.last_performed if prune.last_performed is not None else window.start
    dates = _interval_dates(add_days(seed, interval), interval, window)
    if not dates:
        return None
    return TaskSummary(action="prune", due_dates=dates, intensity="normal", note=f"Every ~{interval} days")


def repot_task(plant: PlantRecord, window: MonthWindow) -> Optional[TaskSummary]:
    repot = plant.care.repot
    if repot is None:
        return None

    spring_only = repot.guidance == "spring_preferred"
    if spring_only and window.month not in SPRING_MONTHS:
        return None

    reference = repot.last_performed or plant.acquired_date
    overdue = False
    if reference is not None:
        elapsed = months_between(reference, window.start)
        if elapsed < REPOT_MIN_MONTHS:
            return None
        overdue = elapsed >= REPOT_OVERDUE_MONTHS

    if spring_only:
        note = "Spring repot window (overdue)" if overdue else "Spring repot window"
    else:
        note = "Repot if rootbound" if overdue else "Review pot size"

    return TaskSummary(
        action="repot",
        due_dates=[window.start],
        intensity="increased" if overdue else "normal",
        note=note,
    )


TaskRule = Callable[[PlantRecord, MonthWindow], Optional[TaskSummary]]

TASK_RULES: tuple[TaskRule, ...] = (water_task, fertilise_task, flush_task, prune_task, repot_task)


# ── Forecast ──────────────────────────────────────────────────────────────────

def collect_tasks_for_month(plant: PlantRecord, window: MonthWindow) -> list[TaskSummary]:
    tasks = []
    for rule in TASK_RULES:
        task = rule(plant, window)
        if task is not None:
            tasks.append(task)
    return tasks


def compute_monthly_forecast(
    plants: Sequence[PlantRecord],
    options: Optional[ForecastOptions] = None,
) -> list[MonthBucket]:
    """
    Build one MonthBucket per month of the horizon, starting with the month
    containing options.start_date (today when unset).

    Plants whose status is not "active" are skipped. Buckets are always
    returned for every month, even when no plant has a task in it.
    """
    options = options or ForecastOptions()
    horizon = max(1, options.months_horizon)
    base = start_of_month(options.start_date or date.today())
    winter = frozenset(options.winter_months)

    buckets: list[MonthBucket] = []
    for offset in range(horizon):
        month_start = add_months(base, offset)
        window = MonthWindow(start=month_start, end=end_of_month(month_start), winter_months=winter)

        entries = []
        for plant in plants:
            if plant.status != "active":
                continue
            tasks = collect_tasks_for_month(plant, window)
            if not any(task.due_dates for task in tasks):
                continue
            entries.append(PlantMonthSchedule(
                plant_id=plant.id,
                plant_name=plant.common_name,
                location=plant.location,
                tasks=tasks,
            ))

        buckets.append(MonthBucket(month=month_key(month_start), month_start=month_start, plants=entries))

    logger.debug(
        "compute_monthly_forecast: %d plants over %d months from %s",
        len(plants), horizon, month_key(base),
    )
    return buckets
