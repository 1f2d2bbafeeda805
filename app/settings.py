import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

# Load .env once at import so from_env() sees it
load_dotenv()

CLIMATIQ_ESTIMATE_URL = "https://api.climatiq.io/data/v1/estimate"
CLIMATIQ_DATA_VERSION = "28.28"

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseModel):
    climatiq_api_key: str | None = Field(default=None, alias="CLIMATIQ_API_KEY")
    climatiq_estimate_url: str = Field(
        default=CLIMATIQ_ESTIMATE_URL, alias="CLIMATIQ_ESTIMATE_URL"
    )
    climatiq_data_version: str = Field(
        default=CLIMATIQ_DATA_VERSION, alias="CLIMATIQ_DATA_VERSION"
    )
    log_level: LogLevel = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls):
        data = {
            "CLIMATIQ_API_KEY": os.getenv("CLIMATIQ_API_KEY"),
            "CLIMATIQ_ESTIMATE_URL": os.getenv(
                "CLIMATIQ_ESTIMATE_URL", CLIMATIQ_ESTIMATE_URL
            ),
            "CLIMATIQ_DATA_VERSION": os.getenv(
                "CLIMATIQ_DATA_VERSION", CLIMATIQ_DATA_VERSION
            ),
            "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        }
        return cls.model_validate(data)
