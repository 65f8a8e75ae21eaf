"""
Unit tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from delaytask.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.default_interval == 1000
        assert settings.cursor_ttl_seconds == 7200
        assert settings.bucket_ttl_seconds == 86400
        assert settings.pull_batch_size == 100

    def test_bucket_ttl_must_outlive_cursor_ttl(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, bucket_ttl_seconds=60, cursor_ttl_seconds=7200)

    @pytest.mark.parametrize("field", ["default_interval", "pull_batch_size", "cursor_ttl_seconds"])
    def test_rejects_non_positive(self, field: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("PULL_BATCH_SIZE", "10")
        monkeypatch.setenv("SWEEPER_TASKNAMES", '["orders", "emails"]')

        settings = Settings(_env_file=None)

        assert settings.pull_batch_size == 10
        assert settings.sweeper_tasknames == ["orders", "emails"]
