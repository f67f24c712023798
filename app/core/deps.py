from datetime import date
from typing import Annotated, Optional

from fastapi import Depends

from app.core.config import settings
from app.schemas.plant import CarePolicy


def get_care_policy() -> CarePolicy:
    return CarePolicy(
        winter_months=settings.winter_months,
        fertiliser_policy=settings.FERTILISER_POLICY,
    )


def resolve_today(today: Optional[date]) -> date:
    """One reference day per request; callers pass it through every engine call."""
    return today or date.today()


Policy = Annotated[CarePolicy, Depends(get_care_policy)]
