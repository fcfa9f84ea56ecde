import logging
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.rate_limiter import RateLimit

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_NAME = "rate-limited-queue"


class QueueConfig(BaseSettings):
    """Configuration for a rate limited queue."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMITED_QUEUE_")

    max_calls_per_second: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    rate_limit: Optional[str] = None
    name: str = DEFAULT_QUEUE_NAME

    @field_validator("rate_limit")
    @classmethod
    def _check_rate_limit(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            RateLimit.from_string(value)
        return value

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "QueueConfig":
        """Create configuration from a dictionary."""
        return cls.model_validate(config_dict)

    def calls_per_second(self) -> float:
        """Effective rate; a rate_limit string takes precedence over max_calls_per_second."""
        if self.rate_limit is not None:
            return RateLimit.from_string(self.rate_limit).calls_per_second
        return self.max_calls_per_second
