from __future__ import annotations

from sqlalchemy.exc import IntegrityError, OperationalError

from potluck.core.errors import (
    AuthorizationError,
    NotFoundError,
    StorageError,
    UnknownError,
    ValidationError,
    classify,
    is_storage_error,
)


def test_status_codes():
    assert ValidationError("name", "required").status_code == 422
    assert AuthorizationError("unauthenticated").status_code == 401
    assert AuthorizationError().status_code == 403
    assert NotFoundError("meals", 4).status_code == 404
    assert StorageError().status_code == 503
    assert UnknownError().status_code == 500


def test_error_payloads():
    assert ValidationError("name", "required").to_dict() == {
        "detail": "name: required",
        "code": "validation_error",
        "field": "name",
        "reason": "required",
    }
    assert NotFoundError("meals", 4).to_dict()["table"] == "meals"
    assert AuthorizationError().to_dict()["reason"] == "forbidden"


def test_storage_errors_are_recognised():
    assert is_storage_error(OperationalError("SELECT 1", {}, Exception("boom")))
    assert is_storage_error(RuntimeError("connect ECONNREFUSED 127.0.0.1:5432"))
    assert not is_storage_error(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
    assert not is_storage_error(ValueError("bad value"))


def test_classify_hides_causes():
    storage = classify(RuntimeError("password authentication failed for user app"))
    assert isinstance(storage, StorageError)
    assert "password" not in storage.message

    unknown = classify(KeyError("secret detail"))
    assert isinstance(unknown, UnknownError)
    assert unknown.message == "An unexpected error occurred."

    known = NotFoundError("days", 1)
    assert classify(known) is known
