"""Unit tests for order status parsing.

Any status may follow any other; parsing is the only gate on the
requested value.
"""

from __future__ import annotations

import pytest

from modules.orders.constants import OrderStatus, parse_status
from modules.orders.exceptions import InvalidOrderStatus

pytestmark = pytest.mark.unit


class TestParseStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("PENDING", OrderStatus.PENDING),
            ("processing", OrderStatus.PROCESSING),
            ("Shipped", OrderStatus.SHIPPED),
            (" delivered ", OrderStatus.DELIVERED),
            ("CANCELLED", OrderStatus.CANCELLED),
        ],
    )
    def test_names_are_case_insensitive(self, raw, expected):
        assert parse_status(raw) is expected

    def test_enum_passes_through(self):
        assert parse_status(OrderStatus.SHIPPED) is OrderStatus.SHIPPED

    @pytest.mark.parametrize("raw", ["SHIPED", "", "ENTREGADO", "done"])
    def test_unknown_names_are_rejected(self, raw):
        with pytest.raises(InvalidOrderStatus):
            parse_status(raw)

    @pytest.mark.parametrize("raw", [None, 3, ["DELIVERED"]])
    def test_non_strings_are_rejected(self, raw):
        with pytest.raises(InvalidOrderStatus):
            parse_status(raw)

    def test_labels_are_spanish(self):
        assert OrderStatus.DELIVERED.label == "Entregado"
