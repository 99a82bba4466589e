"""Runtime settings."""
import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


LOG_LEVEL_ENV = "CALCULATOR_LOG_LEVEL"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    """
    Settings shared by every command.

    Attributes
    ----------
    log_level : LogLevel
        Level of the calculator logger.
    """

    model_config = ConfigDict(frozen=True)

    log_level: LogLevel = Field(default="WARNING", description="Calculator logger level")

    @field_validator("log_level", mode="before")
    def normalize_level(cls, v):
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the process environment.

        :return: Settings with values taken from environment variables, or defaults
        :rtype: Settings
        """
        values = {}
        if os.environ.get(LOG_LEVEL_ENV):
            values["log_level"] = os.environ[LOG_LEVEL_ENV]
        return cls(**values)
