import pytest

from app.core.error_classifier import ErrorType, classify_error, classify_message


class TestClassifyMessage:
    @pytest.mark.parametrize(
        "message, expected",
        [
            ("UNIQUE constraint failed: users.email", ErrorType.CONFLICT),
            ('duplicate key value violates unique constraint "uq_user_course"', ErrorType.CONFLICT),
            ("NOT NULL constraint failed: courses.title", ErrorType.VALIDATION),
            ('null value in column "title" violates not-null constraint', ErrorType.VALIDATION),
            ("FOREIGN KEY constraint failed", ErrorType.VALIDATION),
            ("connect ETIMEDOUT 10.0.0.1:5432", ErrorType.NETWORK),
            ("something odd happened", ErrorType.UNKNOWN),
        ],
    )
    def test_maps_messages_to_types(self, message, expected):
        error_type, _ = classify_message(message)

        assert error_type == expected

    def test_conflict_message_is_localized(self):
        assert classify_message("unique constraint")[1] == "이미 존재하는 정보입니다."


class TestClassifyError:
    def test_timeout_error_is_retryable_network_error(self):
        classified = classify_error(TimeoutError())

        assert classified.type == ErrorType.NETWORK
        assert classified.status_code == 503
        assert classified.retryable is True
        assert classified.recoverable is False
        assert classified.message == "TimeoutError"

    def test_connection_error_is_network_error(self):
        assert classify_error(ConnectionRefusedError("refused")).type == ErrorType.NETWORK

    def test_unique_violation_is_conflict(self):
        classified = classify_error(Exception("UNIQUE constraint failed: reviews.user_id"))

        assert classified.status_code == 409
        assert classified.to_payload() == {
            "code": "CONFLICT",
            "message": "이미 존재하는 정보입니다.",
            "details": {"recoverable": False, "retryable": False},
        }

    def test_validation_is_recoverable(self):
        classified = classify_error(ValueError("NOT NULL constraint failed: x"))

        assert classified.status_code == 400
        assert classified.recoverable is True

    def test_unknown_keeps_context(self):
        classified = classify_error(RuntimeError("boom"), context={"path": "/api/v1/cart"})

        assert classified.type == ErrorType.UNKNOWN
        assert classified.status_code == 500
        assert classified.context == {"path": "/api/v1/cart"}
