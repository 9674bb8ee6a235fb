"""Test error handling functionality.

Verifies that custom exceptions carry the right status codes and that the
handlers render them in the shared error envelope.
"""
import asyncio
import json

import pytest
from starlette.requests import Request

from core.error_handlers import app_exception_handler, create_error_response, generic_exception_handler
from core.exceptions import (
    ConflictError,
    DatabaseError,
    DivisionByZeroError,
    InvalidArgumentError,
    NotFoundError,
    ValidationError,
)
from database.database import ReadSessionLocal
from api.deps import get_current_user_id
from api.users import get_user


def _request(path="/api/recipes/1/scale", headers=None):
    scope = {
        "type": "http",
        "method": "POST",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


def _body(response):
    return json.loads(response.body)


def test_unknown_user_raises_404():
    """Test that requesting non-existent user raises NotFoundError."""
    db = ReadSessionLocal()
    try:
        with pytest.raises(NotFoundError) as exc_info:
            get_user(user_id=99999999, db=db)
        assert "User" in exc_info.value.message
        assert exc_info.value.status_code == 404

        with pytest.raises(NotFoundError):
            get_current_user_id(x_user_id=99999999, db=db)
    finally:
        db.close()


def test_exception_classes_have_proper_attributes():
    """Test that custom exception classes have expected attributes."""
    exc = NotFoundError("Recipe", 123)
    assert exc.status_code == 404
    assert "Recipe" in exc.message
    assert "123" in exc.message

    exc = NotFoundError("Ingredient", 7, message="key ingredient not present in this recipe")
    assert exc.message == "key ingredient not present in this recipe"
    assert exc.details == {"resource": "Ingredient", "id": 7}

    exc = ValidationError("Invalid input", field="servings")
    assert exc.status_code == 400
    assert exc.details == {"field": "servings"}

    exc = InvalidArgumentError("multiplier must be greater than zero", field="multiplier", value=-2)
    assert isinstance(exc, ValidationError)
    assert exc.status_code == 400
    assert exc.details == {"field": "multiplier", "value": "-2"}

    assert DivisionByZeroError("zero baseline").status_code == 422
    assert ConflictError("duplicate", resource="SafeFood").status_code == 409
    assert DatabaseError("boom", operation="create").details == {"operation": "create"}


def test_create_error_response_envelope():
    response = create_error_response("Not here", status_code=404, details={"id": 3}, request_id="abc")
    assert response.status_code == 404
    assert _body(response) == {
        "error": {"message": "Not here", "status_code": 404, "details": {"id": 3}, "request_id": "abc"}
    }


def test_domain_error_rendered_with_its_status_code():
    exc = DivisionByZeroError("cannot scale from a zero amount", details={"ingredient_id": 4})
    response = asyncio.run(app_exception_handler(_request(headers={"X-Request-ID": "req-1"}), exc))
    assert response.status_code == 422
    body = _body(response)
    assert body["error"]["message"] == "cannot scale from a zero amount"
    assert body["error"]["details"] == {"ingredient_id": 4}
    assert body["error"]["request_id"] == "req-1"


def test_unexpected_error_is_hidden():
    response = asyncio.run(generic_exception_handler(_request(), RuntimeError("secret detail")))
    assert response.status_code == 500
    body = _body(response)
    assert "secret" not in body["error"]["message"]
    assert body["error"]["details"] == {"type": "internal_error"}
