"""
Runtime settings, read from the environment (prefix ``WORKTIME_``) and ``.env``.
"""

from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from worktime.models import Company, CompanyLocation

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WORKTIME_",
        env_ignore_empty=True,
        case_sensitive=False,
    )

    APP_NAME: str = "WorkTime"
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    DB_PATH: Path = Path("db") / "db.json"
    TIMEZONE: str = "Europe/Warsaw"
    LOG_LEVEL: str = "INFO"

    MIN_HOURLY_RATE: float = 0.0
    DEFAULT_MONTHLY_GOAL_HOURS: float = 160.0
    CLOCK_IN_EARLY_MINUTES: int = 30
    ALLOW_OVERNIGHT_SHIFTS: bool = False
    REQUIRE_GEOFENCE_ON_CLOCK_IN: bool = False
    SEED_DEMO_DATA: bool = False

    COMPANY_NAME: str = "WorkTime"
    COMPANY_LATITUDE: float = 52.2297
    COMPANY_LONGITUDE: float = 21.0122
    COMPANY_RADIUS: float = 100.0
    COMPANY_ADDRESS: str = ""

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.TIMEZONE)

    def default_company(self) -> Company:
        return Company(
            name=self.COMPANY_NAME,
            location=CompanyLocation(
                latitude=self.COMPANY_LATITUDE,
                longitude=self.COMPANY_LONGITUDE,
                radius=self.COMPANY_RADIUS,
                address=self.COMPANY_ADDRESS,
                name=self.COMPANY_NAME,
            ),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
