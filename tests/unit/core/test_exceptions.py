"""Unit tests for the domain error taxonomy and its DRF rendering."""

from __future__ import annotations

import pytest
from rest_framework import exceptions as drf_exceptions

from modules.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
    api_exception_handler,
)
from modules.orders.exceptions import InvalidOrderStatus, OrderConflict, OrderNotFound

pytestmark = pytest.mark.unit


class TestApiExceptionHandler:
    @pytest.mark.parametrize(
        ("exc", "status_code", "error_type"),
        [
            (ValidationError("bad"), 400, "validation_error"),
            (NotFoundError("gone"), 404, "not_found"),
            (ConflictError("busy"), 409, "conflict"),
            (InternalError(), 500, "internal_error"),
        ],
    )
    def test_maps_family_to_status(self, exc, status_code, error_type):
        response = api_exception_handler(exc, {})
        assert response.status_code == status_code
        assert response.data["type"] == error_type
        assert response.data["errors"][0]["code"] == exc.code

    def test_module_errors_inherit_family(self):
        assert api_exception_handler(OrderNotFound("x"), {}).status_code == 404
        assert api_exception_handler(OrderConflict("x"), {}).status_code == 409
        response = api_exception_handler(InvalidOrderStatus("x"), {})
        assert response.status_code == 400
        assert response.data["errors"][0]["code"] == "invalid_status"

    def test_internal_error_detail_is_opaque(self):
        response = api_exception_handler(InternalError("db host 10.0.0.3 down"), {})
        assert "10.0.0.3" not in response.data["errors"][0]["detail"]

    def test_drf_validation_errors_are_flattened_with_field(self):
        exc = drf_exceptions.ValidationError({"items": ["This list may not be empty."]})
        response = api_exception_handler(exc, {})
        assert response.status_code == 400
        assert response.data["type"] == "validation_error"
        assert response.data["errors"][0]["field"] == "items"

    def test_unknown_exceptions_are_left_to_django(self):
        assert api_exception_handler(RuntimeError("boom"), {}) is None
