"""
Plant care records as handed over by the storage layer.

Field names are snake_case; the front-matter keys used by stored plant notes
("common", "last", "acquired", "fertilise", "flush_salts_months") are accepted
as aliases. Invalid numbers and unparseable dates degrade to their documented
defaults instead of failing validation.
"""
import logging
import math
from datetime import date
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from app.services.dates import parse_date

logger = logging.getLogger(__name__)

DEFAULT_WATER_INTERVAL_DAYS = 7
DEFAULT_WINTER_MONTHS = [11, 12, 1, 2]

GrowthPhase = Literal["auto", "active", "quiescent"]
PlantStatus = Literal["active", "dormant", "gifted", "dead"]
FertiliserPolicy = Literal["active-only", "always", "paused"]


def _positive_int(value: Any) -> Optional[int]:
    """Round a positive number half-up to an int >= 1; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return max(1, math.floor(number + 0.5))


def calendar_months(v: Any) -> list[int]:
    """Distinct months in 1..12, in input order; everything else is dropped."""
    if v is None:
        return []
    if isinstance(v, int):
        v = [v]
    months: list[int] = []
    for m in v:
        if isinstance(m, bool) or not isinstance(m, int):
            continue
        if 1 <= m <= 12 and m not in months:
            months.append(m)
    return months


def _last_alias(name: str) -> AliasChoices:
    return AliasChoices(name, "last")


class SeasonalOverride(BaseModel):
    months: list[int] = []
    water_factor: Optional[float] = None
    fertilise_mode: Optional[Literal["pause", "as-normal"]] = Field(
        default=None, validation_alias=AliasChoices("fertilise_mode", "fertilise")
    )
    water_suppressed: bool = False

    @field_validator("months", mode="before")
    @classmethod
    def keep_calendar_months(cls, v):
        return calendar_months(v)

    @field_validator("water_suppressed", mode="before")
    @classmethod
    def unset_flag(cls, v):
        return False if v is None else v

    @field_validator("water_factor", mode="before")
    @classmethod
    def drop_non_positive_factor(cls, v):
        if v is None or isinstance(v, bool):
            return None
        try:
            factor = float(v)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(factor) or factor <= 0:
            return None
        return factor

    def covers(self, month: int) -> bool:
        return month in self.months


class WaterCare(BaseModel):
    interval_days_hint: int = DEFAULT_WATER_INTERVAL_DAYS
    last_performed: Optional[date] = Field(default=None, validation_alias=_last_alias("last_performed"))
    flush_every_months: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("flush_every_months", "flush_salts_months")
    )

    @field_validator("interval_days_hint", mode="before")
    @classmethod
    def default_interval(cls, v):
        interval = _positive_int(v)
        return DEFAULT_WATER_INTERVAL_DAYS if interval is None else interval

    @field_validator("flush_every_months", mode="before")
    @classmethod
    def positive_flush(cls, v):
        return _positive_int(v)

    @field_validator("last_performed", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)


class FertiliseCare(BaseModel):
    during: Literal["active_only", "always", "paused"] = "active_only"
    cadence: Literal["monthly", "every_watering_quarter_strength"] = "monthly"
    last_performed: Optional[date] = Field(default=None, validation_alias=_last_alias("last_performed"))
    product: Optional[str] = None

    @field_validator("during", "cadence", mode="before")
    @classmethod
    def unset_choice(cls, v, info):
        return cls.model_fields[info.field_name].default if v is None else v

    @field_validator("last_performed", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)


class PruneCare(BaseModel):
    interval_days_hint: Optional[int] = None
    last_performed: Optional[date] = Field(default=None, validation_alias=_last_alias("last_performed"))

    @field_validator("interval_days_hint", mode="before")
    @classmethod
    def positive_interval(cls, v):
        return _positive_int(v)

    @field_validator("last_performed", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)


class RepotCare(BaseModel):
    last_performed: Optional[date] = Field(default=None, validation_alias=_last_alias("last_performed"))
    guidance: Optional[Literal["spring_preferred"]] = None

    @field_validator("last_performed", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)


class CareSchedule(BaseModel):
    water: Optional[WaterCare] = None
    fertilise: Optional[FertiliseCare] = None
    prune: Optional[PruneCare] = None
    repot: Optional[RepotCare] = None


class PlantRecord(BaseModel):
    id: str
    common_name: str = Field(default="", validation_alias=AliasChoices("common_name", "common"))
    location: str = ""
    growth_phase: GrowthPhase = "auto"
    status: PlantStatus = "active"
    seasonal_overrides: list[SeasonalOverride] = []
    care: CareSchedule = Field(default_factory=CareSchedule)
    acquired_date: Optional[date] = Field(
        default=None, validation_alias=AliasChoices("acquired_date", "acquired")
    )
    drought_stressed: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("common_name", "location", mode="before")
    @classmethod
    def blank_text(cls, v):
        return "" if v is None else v

    @field_validator("seasonal_overrides", mode="before")
    @classmethod
    def no_overrides(cls, v):
        return [] if v is None else v

    @field_validator("growth_phase", "status", "drought_stressed", mode="before")
    @classmethod
    def unset_to_default(cls, v, info):
        return cls.model_fields[info.field_name].default if v is None else v

    @field_validator("care", mode="before")
    @classmethod
    def no_care(cls, v):
        return CareSchedule() if v is None else v

    @field_validator("acquired_date", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date(v)

    @model_validator(mode="after")
    def warn_on_overlapping_overrides(self) -> "PlantRecord":
        seen: set[int] = set()
        overlap: set[int] = set()
        for override in self.seasonal_overrides:
            overlap.update(seen.intersection(override.months))
            seen.update(override.months)
        if overlap:
            logger.warning(
                "PlantRecord: plant %s has overlapping seasonal overrides for months %s; first match wins",
                self.id, sorted(overlap),
            )
        return self


class CarePolicy(BaseModel):
    winter_months: list[int] = Field(default_factory=lambda: list(DEFAULT_WINTER_MONTHS))
    fertiliser_policy: FertiliserPolicy = "active-only"

    @field_validator("winter_months", mode="before")
    @classmethod
    def keep_calendar_months(cls, v):
        return calendar_months(v)
