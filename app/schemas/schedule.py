from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.plant import DEFAULT_WINTER_MONTHS, PlantRecord, calendar_months

WaterStatus = Literal["overdue", "due-today", "soon", "suppressed", "not-due"]
TaskAction = Literal["water", "fertilise", "flush", "prune", "repot"]
TaskIntensity = Literal["normal", "reduced", "increased", "paused"]


class WaterDueResult(BaseModel):
    plant_id: str
    due: bool
    status: WaterStatus
    reason: str
    days_since: Optional[int] = None
    threshold: int
    next_due_date: date
    water_factor: float = 1.0


class FertiliseDecision(BaseModel):
    plant_id: str
    allowed: bool
    status: Literal["allowed", "suppressed", "blocked"]
    overridable: bool
    reason: str


class TaskSummary(BaseModel):
    action: TaskAction
    due_dates: list[date] = []
    note: Optional[str] = None
    intensity: TaskIntensity = "normal"


class PlantMonthSchedule(BaseModel):
    plant_id: str
    plant_name: str
    location: str
    tasks: list[TaskSummary]


class MonthBucket(BaseModel):
    month: str  # YYYY-MM
    month_start: date
    plants: list[PlantMonthSchedule] = []


class ForecastOptions(BaseModel):
    months_horizon: int = 6
    start_date: Optional[date] = None
    winter_months: list[int] = Field(default_factory=lambda: list(DEFAULT_WINTER_MONTHS))

    @field_validator("months_horizon", mode="before")
    @classmethod
    def at_least_one_month(cls, v):
        if v is None:
            return 6
        if isinstance(v, int) and not isinstance(v, bool) and v < 1:
            return 1
        return v

    @field_validator("winter_months", mode="before")
    @classmethod
    def keep_calendar_months(cls, v):
        return calendar_months(v)


class TodayItem(BaseModel):
    plant_id: str
    plant_name: str
    location: str
    water: WaterDueResult


class TodayDashboard(BaseModel):
    today: date
    overdue: list[TodayItem] = []
    due_today: list[TodayItem] = []
    soon: list[TodayItem] = []
    suppressed: list[TodayItem] = []
    all_within_hints: bool = True


class Reminder(BaseModel):
    key: str
    plant_id: str
    plant_name: str
    action: TaskAction
    due_date: date
    days_until: int
    message: str


# ── Request bodies ────────────────────────────────────────────────────────────


class PlantBatch(BaseModel):
    plants: list[PlantRecord]
    today: Optional[date] = None


class ForecastRequest(BaseModel):
    plants: list[PlantRecord]
    months_horizon: Optional[int] = None
    start_date: Optional[date] = None
    winter_months: Optional[list[int]] = None
    plant_id: Optional[str] = None
    location: Optional[str] = None


class ReminderRequest(BaseModel):
    plants: list[PlantRecord]
    today: Optional[date] = None
    lookahead_days: Optional[int] = Field(default=None, ge=0)
    months_horizon: Optional[int] = None
    already_notified: list[str] = []
