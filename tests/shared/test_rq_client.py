"""Unit tests for queue helpers and settings."""
from unittest.mock import patch

from shared.queue import rq_client
from shared.utils.config import get_settings


class TestDefaultRetry:
    """Tests for default_retry."""

    def test_retries_one_fewer_than_attempts(self, monkeypatch):
        monkeypatch.setenv("JOB_MAX_ATTEMPTS", "3")
        monkeypatch.setenv("JOB_RETRY_INTERVALS", "[30, 120, 600]")
        get_settings.cache_clear()

        retry = rq_client.default_retry()
        assert retry.max == 2
        assert retry.intervals == [30, 120]

    def test_single_attempt_means_no_retry(self, monkeypatch):
        monkeypatch.setenv("JOB_MAX_ATTEMPTS", "1")
        get_settings.cache_clear()
        assert rq_client.default_retry() is None


class TestQueues:
    """Tests for get_queue."""

    def test_queue_uses_job_timeout(self, monkeypatch):
        monkeypatch.setenv("JOB_TIMEOUT", "120")
        get_settings.cache_clear()
        with patch.object(rq_client, "get_redis_connection") as mock_redis, \
                patch.object(rq_client, "Queue") as mock_queue_cls:
            rq_client.get_queue(rq_client.ANALYTICS_QUEUE)
        mock_queue_cls.assert_called_once_with(
            "analytics", connection=mock_redis.return_value, default_timeout=120
        )

    def test_queue_priority_order(self):
        assert rq_client.ALL_QUEUES == ("scheduled", "notifications", "analytics")


class TestSettings:
    """Tests for Settings defaults."""

    def test_optional_gateway_settings(self):
        settings = get_settings()
        assert settings.twilio_from_number is None
        assert settings.notification_chunk_size == 200
        assert settings.twilio_base_url == "https://api.twilio.com/2010-04-01"
