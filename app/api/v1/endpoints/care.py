from typing import Optional

from fastapi import APIRouter, HTTPException

from app.core.config import settings
from app.core.deps import Policy, resolve_today
from app.schemas.schedule import (
    FertiliseDecision,
    ForecastOptions,
    ForecastRequest,
    MonthBucket,
    PlantBatch,
    Reminder,
    ReminderRequest,
    TodayDashboard,
    WaterDueResult,
)
from app.services.dashboard import build_today_dashboard, filter_forecast, list_locations, upcoming_reminders
from app.services.dates import add_days, months_between
from app.services.fertilising import evaluate_fertilise
from app.services.forecast import compute_monthly_forecast
from app.services.watering import evaluate_water_due

router = APIRouter(prefix="/care", tags=["care"])


# ── Helpers ────────────────────────────────────────────────────────────────────


def _checked_horizon(months_horizon: Optional[int]) -> int:
    horizon = settings.FORECAST_MONTHS if months_horizon is None else months_horizon
    if horizon > settings.MAX_FORECAST_MONTHS:
        raise HTTPException(
            status_code=422,
            detail=f"months_horizon may not exceed {settings.MAX_FORECAST_MONTHS}",
        )
    return max(1, horizon)


# ── Point-in-time endpoints ────────────────────────────────────────────────────


@router.post("/water-status", response_model=list[WaterDueResult])
async def water_status(data: PlantBatch):
    today = resolve_today(data.today)
    return [evaluate_water_due(plant, today) for plant in data.plants]


@router.post("/today", response_model=TodayDashboard)
async def today_dashboard(data: PlantBatch):
    return build_today_dashboard(data.plants, resolve_today(data.today))


@router.post("/fertilise", response_model=list[FertiliseDecision])
async def fertilise_decisions(data: PlantBatch, policy: Policy):
    today = resolve_today(data.today)
    return [evaluate_fertilise(plant, today, policy) for plant in data.plants]


@router.post("/locations", response_model=list[str])
async def locations(data: PlantBatch):
    return list_locations(data.plants)


# ── Forecast endpoints ─────────────────────────────────────────────────────────


@router.post("/forecast", response_model=list[MonthBucket])
async def forecast(data: ForecastRequest, policy: Policy):
    options = ForecastOptions(
        months_horizon=_checked_horizon(data.months_horizon),
        start_date=resolve_today(data.start_date),
        winter_months=data.winter_months if data.winter_months is not None else policy.winter_months,
    )
    buckets = compute_monthly_forecast(data.plants, options)
    return filter_forecast(buckets, plant_id=data.plant_id, location=data.location)


@router.post("/reminders", response_model=list[Reminder])
async def reminders(data: ReminderRequest, policy: Policy):
    today = resolve_today(data.today)
    lookahead = settings.REMINDER_LOOKAHEAD_DAYS if data.lookahead_days is None else data.lookahead_days
    if data.months_horizon is None:
        # enough months to reach the end of the look-ahead window
        horizon = months_between(today, add_days(today, lookahead)) + 1
    else:
        horizon = data.months_horizon
    options = ForecastOptions(
        months_horizon=_checked_horizon(horizon),
        start_date=today,
        winter_months=policy.winter_months,
    )
    buckets = compute_monthly_forecast(data.plants, options)
    return upcoming_reminders(buckets, today, lookahead, data.already_notified)
