"""
Unit tests for the order domain models
"""
from decimal import Decimal


class TestEnrichedOrder:
    def test_order_number_uses_last_uuid_segment(self, enriched_order):
        assert enriched_order.short_id == "0C1D2E3F4A5B"
        assert enriched_order.order_number == "WK-WEB-0C1D2E3F4A5B"

    def test_item_count_sums_quantities(self, enriched_order):
        assert enriched_order.item_count == 6

    def test_line_total(self, enriched_order):
        assert enriched_order.items[1].line_total == Decimal("14.00")

    def test_to_dict_is_json_friendly(self, enriched_order):
        data = enriched_order.to_dict()

        assert data['total_price'] == 20.40
        assert data['order_number'] == "WK-WEB-0C1D2E3F4A5B"
        assert data['is_pending'] is True
        assert data['item_count'] == 6
        assert data['items'][0]['price_at_purchase'] == 3.20
        assert data['items'][0]['line_total'] == 6.40
        assert data['location_name'] == "Wanka's Huancayo Centro"
