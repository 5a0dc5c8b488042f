"""
Tests for the error hierarchy, message catalog, logging helpers and
configuration.
"""
import pytest
from loguru import logger
from sqlalchemy.exc import IntegrityError, OperationalError

from config import Settings, get_settings, reset_settings
from error_handling.exceptions import (
    AuthenticationError,
    CapacityExceededError,
    DatabaseConnectionError,
    DatabaseError,
    DatabaseQueryError,
    DuplicateEntryError,
    NotFoundError,
    ValidationError,
)
from error_handling.error_messages import format_request_errors, get_error_message
from error_handling.handlers import handle_database_error
from error_handling.logging_config import LogContext, log_booking_event, log_performance


@pytest.fixture
def captured_logs():
    """Collect loguru records emitted during a test."""
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)


class TestStatusCodes:

    @pytest.mark.parametrize("error,status", [
        (ValidationError("Missing fields"), 400),
        (AuthenticationError(), 401),
        (NotFoundError("Restaurant not found"), 404),
        (CapacityExceededError("No tables available at this time"), 409),
        (DuplicateEntryError("Already in favorites"), 409),
        (DatabaseQueryError("boom"), 500),
    ])
    def test_status_code(self, error, status):
        assert error.status_code == status

    def test_authentication_default_message(self):
        assert AuthenticationError().user_message == "No active user"


class TestErrorMessages:

    def test_client_errors_return_their_message(self):
        assert get_error_message(NotFoundError("Review not found")) == "Review not found"
        assert get_error_message(DuplicateEntryError("Already in favorites")) == "Already in favorites"

    def test_database_errors_hide_details(self):
        error = DatabaseQueryError("UPDATE failed: near 'SELEC': syntax error")
        assert get_error_message(error) == "Internal server error"

    def test_unexpected_errors_hide_details(self):
        assert get_error_message(KeyError("secret")) == "Internal server error"

    def test_missing_fields_reported_generically(self):
        errors = [
            {"type": "missing", "loc": ("body", "restaurantId")},
            {"type": "int_parsing", "loc": ("body", "partySize")},
        ]
        assert format_request_errors(errors) == "Missing fields"

    def test_invalid_field_named(self):
        errors = [{"type": "int_parsing", "loc": ("body", "partySize")}]
        assert format_request_errors(errors) == "Invalid value for partySize"


class TestDatabaseErrorTranslation:

    def test_operational_error_is_connection_error(self):
        error = handle_database_error(OperationalError("SELECT 1", {}, Exception("locked")), "reserve")
        assert isinstance(error, DatabaseConnectionError)
        assert isinstance(error, DatabaseError)

    def test_other_errors_are_query_errors(self):
        error = handle_database_error(IntegrityError("INSERT", {}, Exception("UNIQUE")), "add_favorite")
        assert isinstance(error, DatabaseQueryError)


class TestLogging:

    def test_booking_events_are_tagged(self, captured_logs):
        log_booking_event("CREATED", user_id=3, reservation_id=11, details={"time": "18:00"})

        booking_records = [r for r in captured_logs if r["extra"].get("category") == "BOOKING"]
        assert len(booking_records) == 1
        assert "BOOKING CREATED" in booking_records[0]["message"]
        assert "reservation_id=11" in booking_records[0]["message"]

    def test_log_context_binds_fields(self, captured_logs):
        with LogContext(request_id="abc123"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = [r for r in captured_logs if r["message"] in ("inside", "outside")]
        assert inside["extra"]["request_id"] == "abc123"
        assert "request_id" not in outside["extra"]

    def test_log_performance_reraises(self, captured_logs):
        @log_performance("failing_operation")
        def fail():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            fail()

        messages = [r["message"] for r in captured_logs if r["extra"].get("category") == "PERFORMANCE"]
        assert any("failing_operation" in m and "success=False" in m for m in messages)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DATABASE_URL", "PORT", "RECOMMENDATION_TIE_BREAK", "DEFAULT_TABLE_CAPACITY"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.port == 5050
        assert settings.default_table_capacity == 5
        assert settings.recommendation_tie_break == "stable"
        assert settings.recommendation_limit == 3

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///custom.db")
        monkeypatch.setenv("RECOMMENDATION_TIE_BREAK", "random")
        reset_settings()
        try:
            settings = get_settings()
            assert settings.database_url == "sqlite:///custom.db"
            assert settings.recommendation_tie_break == "random"
            assert get_settings() is settings
        finally:
            reset_settings()

    def test_rejects_unknown_tie_break(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, recommendation_tie_break="alphabetical")
