"""Tests for database decorators and context managers."""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from moodjournal.core.exceptions import DatabaseError, ValidationError
from moodjournal.core.logging_manager import JournalLogger
from moodjournal.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)


class _Worker:
    """Minimal object carrying a logger, like a manager."""

    def __init__(self, logger=None):
        self.logger = logger

    @log_database_operation("do_work")
    def work(self, value):
        return value * 2

    @log_database_operation("fail_work")
    def fail(self):
        raise ValueError("bad input")

    @handle_db_errors
    def integrity(self):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    @handle_db_errors
    def storage(self):
        raise SQLAlchemyError("disk I/O error")

    @handle_db_errors
    def domain(self):
        raise ValidationError("bad date")


class TestLogDatabaseOperation:
    """Tests for the log_database_operation decorator."""

    def test_logs_completion(self):
        mock_logger = MagicMock(spec=JournalLogger)
        assert _Worker(mock_logger).work(21) == 42

        mock_logger.log_debug.assert_called_once()
        call_args = mock_logger.log_operation.call_args
        assert call_args[0][0] == "do_work_completed"
        assert call_args[0][1]["success"] is True
        assert call_args[0][1]["duration_seconds"] >= 0

    def test_logs_and_reraises_errors(self):
        mock_logger = MagicMock(spec=JournalLogger)
        with pytest.raises(ValueError, match="bad input"):
            _Worker(mock_logger).fail()

        mock_logger.log_error.assert_called_once()
        assert mock_logger.log_error.call_args[0][1]["operation"] == "fail_work"
        mock_logger.log_operation.assert_not_called()

    def test_works_without_logger(self):
        assert _Worker().work(1) == 2


class TestHandleDbErrors:
    """Tests for the handle_db_errors decorator."""

    def test_integrity_error(self):
        with pytest.raises(DatabaseError, match="Data integrity violation"):
            _Worker().integrity()

    def test_sqlalchemy_error(self):
        with pytest.raises(DatabaseError, match="Database operation failed"):
            _Worker().storage()

    def test_domain_errors_pass_through(self):
        with pytest.raises(ValidationError):
            _Worker().domain()


class TestDatabaseOperation:
    """Tests for DatabaseOperation context manager."""

    def test_successful_operation(self):
        """DatabaseOperation should log completion on success."""
        mock_logger = MagicMock(spec=JournalLogger)

        with DatabaseOperation(mock_logger, "seed_user", {"user_id": 1}):
            result = 1 + 1

        assert result == 2
        call_args = mock_logger.log_operation.call_args
        assert call_args[0][0] == "seed_user_completed"
        assert call_args[0][1]["user_id"] == 1
        assert call_args[0][1]["success"] is True

    def test_successful_operation_with_none_logger(self):
        with DatabaseOperation(None, "test_operation"):
            result = 1 + 1
        assert result == 2

    def test_integrity_error_raises_database_error(self):
        mock_logger = MagicMock(spec=JournalLogger)

        with pytest.raises(DatabaseError) as exc_info:
            with DatabaseOperation(mock_logger, "test_operation"):
                raise IntegrityError("statement", {}, Exception("duplicate"))

        assert "Data integrity violation" in str(exc_info.value)
        mock_logger.log_error.assert_called_once()

    def test_sqlalchemy_error_raises_database_error(self):
        mock_logger = MagicMock(spec=JournalLogger)

        with pytest.raises(DatabaseError, match="Database operation failed"):
            with DatabaseOperation(mock_logger, "test_operation"):
                raise SQLAlchemyError("connection failed")

    def test_other_exceptions_propagate(self):
        mock_logger = MagicMock(spec=JournalLogger)

        with pytest.raises(ValueError):
            with DatabaseOperation(mock_logger, "test_operation"):
                raise ValueError("custom error")

        mock_logger.log_error.assert_called_once()

    def test_log_start_option(self):
        mock_logger = MagicMock(spec=JournalLogger)

        with DatabaseOperation(mock_logger, "test_operation", log_start=True):
            pass

        mock_logger.log_debug.assert_called_once()
        assert "Starting test_operation" in mock_logger.log_debug.call_args[0][0]

    def test_no_log_start_by_default(self):
        mock_logger = MagicMock(spec=JournalLogger)

        with DatabaseOperation(mock_logger, "test_operation"):
            pass

        mock_logger.log_debug.assert_not_called()
