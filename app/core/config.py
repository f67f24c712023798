from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Care policy
    WINTER_MONTHS: str = "11,12,1,2"
    FERTILISER_POLICY: Literal["active-only", "always", "paused"] = "active-only"

    # Forecast
    FORECAST_MONTHS: int = 6
    MAX_FORECAST_MONTHS: int = 24
    REMINDER_LOOKAHEAD_DAYS: int = 3

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:5173,http://localhost:5174"

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def winter_months(self) -> List[int]:
        months = []
        for part in self.WINTER_MONTHS.split(","):
            part = part.strip()
            if part.isdigit() and 1 <= int(part) <= 12 and int(part) not in months:
                months.append(int(part))
        return months or [11, 12, 1, 2]


settings = Settings()
