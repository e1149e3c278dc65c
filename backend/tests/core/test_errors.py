"""Error Hierarchy - tests for codes, statuses and the REST envelope."""

from seat_allocator.core.errors import (
    AuthenticationError, ConflictError, ErrorCategory, ErrorContext,
    NotFoundError, StorageError, ValidationError,
)


def test_domain_errors_are_400():
    assert ValidationError("bad", "name").http_status == 400
    assert NotFoundError("seat not found").http_status == 400
    assert ConflictError("seat already occupied").http_status == 400


def test_infrastructure_and_auth_statuses():
    assert StorageError("boom", "commit").http_status == 500
    assert AuthenticationError("Invalid token").http_status == 401


def test_response_envelope_carries_message_and_code():
    body = ConflictError("seat already occupied").to_response()["error"]
    assert body["code"] == "CONFLICT"
    assert body["message"] == "seat already occupied"
    assert body["category"] == ErrorCategory.CONFLICT.value
    assert "timestamp" in body


def test_validation_error_names_field():
    body = ValidationError("Capacity must be greater than 0", "capacity").to_response()
    assert body["error"]["field"] == "capacity"


def test_storage_error_message_is_generic():
    err = StorageError("Connection or operational error", "assign_seat")
    assert err.message == "Storage assign_seat failed: Connection or operational error"
    assert err.code == "STORAGE_ERROR"


def test_log_extra_exposes_identifiers():
    err = NotFoundError("seat not found", ErrorContext(seat_id="abc"))
    extra = err.log_extra()
    assert extra["seat_id"] == "abc"
    assert extra["error_code"] == "RESOURCE_NOT_FOUND"
