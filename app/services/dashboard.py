from datetime import date
from typing import Iterable, Optional, Sequence

from app.schemas.plant import PlantRecord
from app.schemas.schedule import MonthBucket, Reminder, TodayDashboard, TodayItem
from app.services.watering import evaluate_water_due

REMINDER_LOOKAHEAD_DAYS = 3

_STATUS_GROUPS = {
    "overdue": "overdue",
    "due-today": "due_today",
    "soon": "soon",
    "suppressed": "suppressed",
}


def build_today_dashboard(plants: Sequence[PlantRecord], today: date) -> TodayDashboard:
    """Group plants by watering status; plants that are not due are left out."""
    groups: dict[str, list[TodayItem]] = {name: [] for name in _STATUS_GROUPS.values()}

    for plant in plants:
        water = evaluate_water_due(plant, today)
        group = _STATUS_GROUPS.get(water.status)
        if group is None:
            continue
        groups[group].append(TodayItem(
            plant_id=plant.id,
            plant_name=plant.common_name,
            location=plant.location,
            water=water,
        ))

    return TodayDashboard(
        today=today,
        all_within_hints=not any(groups.values()),
        **groups,
    )


def filter_forecast(
    buckets: Sequence[MonthBucket],
    plant_id: Optional[str] = None,
    location: Optional[str] = None,
) -> list[MonthBucket]:
    """Keep every month but only the plants matching the given filters."""
    filtered = []
    for bucket in buckets:
        plants = [
            p for p in bucket.plants
            if (not plant_id or p.plant_id == plant_id) and (not location or p.location == location)
        ]
        filtered.append(bucket.model_copy(update={"plants": plants}))
    return filtered


def list_locations(plants: Iterable[PlantRecord]) -> list[str]:
    seen: list[str] = []
    for plant in plants:
        location = plant.location.strip()
        if location and location not in seen:
            seen.append(location)
    return sorted(seen, key=str.casefold)


def upcoming_reminders(
    buckets: Sequence[MonthBucket],
    today: date,
    lookahead_days: int = REMINDER_LOOKAHEAD_DAYS,
    already_notified: Iterable[str] = (),
) -> list[Reminder]:
    """
    Reminders for forecast tasks due between today and today + lookahead_days.

    Each task date yields at most one reminder, keyed
    "<plant_id>:<action>:<YYYY-MM-DD>"; keys in already_notified are skipped.
    """
    notified = set(already_notified)
    reminders = []
    for bucket in buckets:
        for plant in bucket.plants:
            for task in plant.tasks:
                for due in task.due_dates:
                    days_until = (due - today).days
                    if days_until < 0 or days_until > lookahead_days:
                        continue
                    key = f"{plant.plant_id}:{task.action}:{due.isoformat()}"
                    if key in notified:
                        continue
                    notified.add(key)
                    reminders.append(Reminder(
                        key=key,
                        plant_id=plant.plant_id,
                        plant_name=plant.plant_name,
                        action=task.action,
                        due_date=due,
                        days_until=days_until,
                        message=f"Upcoming {task.action.title()} • {plant.plant_name} on {due.isoformat()}",
                    ))
    return reminders
