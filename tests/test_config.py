from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rate_limited_queue.config import QueueConfig


class TestQueueConfig:
    """Test cases for QueueConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = QueueConfig()

        assert config.max_calls_per_second == 1.0
        assert config.rate_limit is None
        assert config.name == "rate-limited-queue"
        assert config.calls_per_second() == 1.0

    def test_custom_values(self):
        """Test custom configuration values."""
        config = QueueConfig(max_calls_per_second=0.2, name="slow-api")

        assert config.max_calls_per_second == 0.2
        assert config.name == "slow-api"
        assert config.calls_per_second() == 0.2

    def test_rate_limit_takes_precedence(self):
        """Test that a rate limit string overrides max_calls_per_second."""
        config = QueueConfig(max_calls_per_second=50, rate_limit="30/1m")

        assert config.calls_per_second() == pytest.approx(0.5)

    @pytest.mark.parametrize("rate", [0, -1, float("inf"), float("nan")])
    def test_invalid_rate(self, rate):
        """Test that non-positive or non-finite rates are rejected."""
        with pytest.raises(ValidationError):
            QueueConfig(max_calls_per_second=rate)

    def test_invalid_rate_limit_string(self):
        """Test that malformed rate limit strings are rejected at load."""
        with pytest.raises(ValidationError):
            QueueConfig(rate_limit="lots")

    def test_environment_variable_loading(self):
        """Test loading config from environment variables."""
        with patch.dict(
            "os.environ",
            {
                "RATE_LIMITED_QUEUE_MAX_CALLS_PER_SECOND": "3",
                "RATE_LIMITED_QUEUE_RATE_LIMIT": "10/60s",
                "RATE_LIMITED_QUEUE_NAME": "env-queue",
            },
        ):
            config = QueueConfig()

            assert config.max_calls_per_second == 3.0
            assert config.rate_limit == "10/60s"
            assert config.name == "env-queue"
            assert config.calls_per_second() == pytest.approx(10 / 60)

    def test_explicit_values_override_environment(self):
        """Test that constructor arguments win over environment variables."""
        with patch.dict(
            "os.environ", {"RATE_LIMITED_QUEUE_MAX_CALLS_PER_SECOND": "3"}
        ):
            config = QueueConfig(max_calls_per_second=7)

            assert config.max_calls_per_second == 7.0

    def test_from_dict(self):
        """Test creating configuration from a dictionary."""
        config = QueueConfig.from_dict(
            {"max_calls_per_second": 4, "name": "from-dict"}
        )

        assert config.max_calls_per_second == 4.0
        assert config.name == "from-dict"

    def test_from_dict_invalid(self):
        """Test that from_dict validates values."""
        with pytest.raises(ValidationError):
            QueueConfig.from_dict({"max_calls_per_second": -2})
