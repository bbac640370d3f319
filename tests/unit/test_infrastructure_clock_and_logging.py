"""Unit tests for ZonedClock windows and the structlog console adapter."""

import json
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfoNotFoundError

import pytest
from freezegun import freeze_time

from src.infrastructure.logging import ConsoleAdapter
from src.infrastructure.logging.console_adapter import REDACTED, redact_sensitive
from src.infrastructure.time import ZonedClock


@pytest.mark.unit
class TestZonedClock:
    @freeze_time("2026-01-15 07:30:00")
    def test_day_window_follows_local_calendar(self):
        # 23:30 on Jan 14 in Los Angeles (PST, UTC-8)
        window = ZonedClock("America/Los_Angeles").current_day()

        assert window.start == datetime(2026, 1, 14, 8, 0, tzinfo=UTC)
        assert window.end == datetime(2026, 1, 15, 8, 0, tzinfo=UTC)

    @freeze_time("2026-03-08 20:00:00")
    def test_spring_forward_day_is_23_hours(self):
        window = ZonedClock("America/Los_Angeles").current_day()

        assert window.end - window.start == timedelta(hours=23)

    @freeze_time("2026-11-01 20:00:00")
    def test_fall_back_day_is_25_hours(self):
        window = ZonedClock("America/Los_Angeles").current_day()

        assert window.end - window.start == timedelta(hours=25)

    @freeze_time("2026-01-15 07:30:00")
    def test_utc_clock_uses_utc_midnight(self):
        window = ZonedClock("UTC").current_day()

        assert window.start == datetime(2026, 1, 15, tzinfo=UTC)

    @freeze_time("2026-01-15 07:30:45")
    def test_hour_window(self):
        window = ZonedClock().current_hour()

        assert window.start == datetime(2026, 1, 15, 7, 0, tzinfo=UTC)
        assert window.contains(ZonedClock().now())

    def test_unknown_timezone_is_rejected(self):
        with pytest.raises(ZoneInfoNotFoundError):
            ZonedClock("Mars/Olympus_Mons")


@pytest.mark.unit
class TestConsoleAdapter:
    def _last_entry(self, capsys):
        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        return json.loads(lines[-1])

    def test_redact_processor_masks_credentials(self):
        event = {"event": "x", "password": "Secret@123", "refresh_token": "r", "user_id": "1"}

        redacted = redact_sensitive(None, "info", event)

        assert redacted["password"] == REDACTED
        assert redacted["refresh_token"] == REDACTED
        assert redacted["user_id"] == "1"

    def test_json_output_carries_event_and_level(self, capsys):
        logger = ConsoleAdapter(use_json=True)

        logger.info("login_received", login_type="credentials", code="A1B2C3")

        entry = self._last_entry(capsys)
        assert entry["event"] == "login_received"
        assert entry["level"] == "info"
        assert entry["login_type"] == "credentials"
        assert entry["code"] == REDACTED
        assert "timestamp" in entry

    def test_error_adds_exception_fields(self, capsys):
        logger = ConsoleAdapter(use_json=True)

        logger.error("login_failed_unexpectedly", error=RuntimeError("db down"))

        entry = self._last_entry(capsys)
        assert entry["error_type"] == "RuntimeError"
        assert entry["error_message"] == "db down"

    def test_bind_keeps_context_without_mutating_parent(self, capsys):
        logger = ConsoleAdapter(use_json=True)

        logger.bind(user_id="42").info("session_persisted")
        bound_entry = self._last_entry(capsys)
        logger.info("unbound")
        unbound_entry = self._last_entry(capsys)

        assert bound_entry["user_id"] == "42"
        assert "user_id" not in unbound_entry

    def test_level_filtering(self, capsys):
        logger = ConsoleAdapter(use_json=True, level="WARNING")

        logger.info("quiet")
        logger.warning("loud")

        out = capsys.readouterr().out
        assert "quiet" not in out
        assert "loud" in out
