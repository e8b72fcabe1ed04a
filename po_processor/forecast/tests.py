"""
Test suite for Forecast module
Tests: purchase matching, 12 month window, statistics, stock decision and API endpoints
"""
from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.forecast.services import analyze_material, months_between


def add_purchase(po_date, item_code='WT-001', quantity=Decimal('10.00'), lead_days=30, item_name='Water Tap'):
    purchase_order = TestDataFactory.create_purchase_order(
        po_date=po_date,
        expiry_date=po_date + timedelta(days=lead_days),
    )
    TestDataFactory.create_line_item(purchase_order, item_name=item_name, item_code=item_code, quantity=quantity)
    return purchase_order


class MaterialForecastTests(TestCase):
    """Test material forecast analysis"""

    def setUp(self):
        self.today = date(2026, 10, 19)

    def test_no_matching_purchases(self):
        add_purchase(date(2026, 5, 1), item_code='VB-002')
        self.assertIsNone(analyze_material('WT-001', self.today))

    def test_regular_purchases_recommend_stock(self):
        add_purchase(date(2026, 1, 10), lead_days=45)
        add_purchase(date(2026, 2, 9), lead_days=45)
        add_purchase(date(2026, 3, 11), lead_days=45)

        forecast = analyze_material('WT-001', self.today)

        self.assertEqual(forecast['material_name'], 'Water Tap')
        self.assertEqual(forecast['purchase_count_last_12_months'], 3)
        self.assertEqual(forecast['total_quantity_last_12_months'], 30.0)
        self.assertEqual(forecast['average_lead_time_days'], 45.0)
        self.assertEqual(forecast['average_days_between_purchases'], 30.0)
        self.assertEqual(forecast['purchase_frequency_consistency'], 1.0)
        self.assertAlmostEqual(forecast['consumption_rate_per_month'], 30 / (2 + 1 / 30.0))
        self.assertEqual(forecast['predicted_next_order_date'], date(2026, 4, 10))
        self.assertEqual(forecast['recommendation'], 'Stock')
        self.assertEqual(
            forecast['recommendation_reason'],
            'Recommended to stock because: Purchase pattern is consistent, '
            'Frequent purchases (every 30 days), Long lead time (45 days), '
            'High consumption rate (14.8 units/month).'
        )

    def test_purchase_history_is_date_ordered(self):
        add_purchase(date(2026, 3, 11))
        add_purchase(date(2026, 1, 10))
        forecast = analyze_material('WT-001', self.today)
        dates = [purchase['purchase_date'] for purchase in forecast['purchase_history']]
        self.assertEqual(dates, [date(2026, 1, 10), date(2026, 3, 11)])

    def test_fewer_than_three_purchases(self):
        add_purchase(date(2026, 1, 10))
        add_purchase(date(2026, 2, 9))
        forecast = analyze_material('WT-001', self.today)
        self.assertEqual(forecast['recommendation'], 'Do Not Stock')
        self.assertIn('Insufficient purchase history', forecast['recommendation_reason'])

    def test_infrequent_small_purchases(self):
        add_purchase(date(2026, 1, 1), quantity=Decimal('1.00'), lead_days=10)
        add_purchase(date(2026, 4, 11), quantity=Decimal('1.00'), lead_days=10)
        add_purchase(date(2026, 7, 20), quantity=Decimal('1.00'), lead_days=10)

        forecast = analyze_material('WT-001', self.today)

        self.assertEqual(forecast['average_days_between_purchases'], 100.0)
        self.assertEqual(forecast['recommendation'], 'Do Not Stock')
        reason = forecast['recommendation_reason']
        self.assertTrue(reason.startswith('Recommended not to stock because:'))
        self.assertIn('Infrequent purchases (every 100 days)', reason)
        self.assertIn('Short lead time (10 days)', reason)
        self.assertIn('Low consumption rate (0.5 units/month)', reason)
        self.assertTrue(reason.endswith('. Order on-demand.'))

    def test_inconsistent_purchases(self):
        add_purchase(date(2025, 12, 1), quantity=Decimal('50.00'))
        add_purchase(date(2025, 12, 2), quantity=Decimal('50.00'))
        add_purchase(date(2025, 12, 3), quantity=Decimal('50.00'))
        add_purchase(date(2026, 9, 29), quantity=Decimal('50.00'))

        forecast = analyze_material('WT-001', self.today)

        self.assertLess(forecast['purchase_frequency_consistency'], 0.5)
        self.assertEqual(forecast['recommendation'], 'Do Not Stock')
        self.assertTrue(forecast['recommendation_reason'].startswith(
            'Recommended not to stock because: Purchase pattern is inconsistent'
        ))
        self.assertEqual(forecast['predicted_next_order_date'], date(2027, 1, 8))

    def test_same_day_purchases(self):
        """No positive intervals: no predicted date and a yearly consumption rate"""
        for _ in range(3):
            add_purchase(date(2026, 6, 1), quantity=Decimal('12.00'))

        forecast = analyze_material('WT-001', self.today)

        self.assertEqual(forecast['average_days_between_purchases'], 0.0)
        self.assertEqual(forecast['purchase_frequency_consistency'], 1.0)
        self.assertIsNone(forecast['predicted_next_order_date'])
        self.assertEqual(forecast['consumption_rate_per_month'], 3.0)

    def test_non_positive_lead_times_default_to_thirty_days(self):
        add_purchase(date(2026, 6, 1), lead_days=0)
        forecast = analyze_material('WT-001', self.today)
        self.assertEqual(forecast['average_lead_time_days'], 30.0)

    def test_case_insensitive_partial_match(self):
        add_purchase(date(2026, 6, 1), item_code='WT-001-A')
        add_purchase(date(2026, 7, 1), item_code='wt-001')
        forecast = analyze_material('  Wt-001 ', self.today)
        self.assertEqual(forecast['purchase_count_last_12_months'], 2)

    def test_old_purchases_skipped_once_two_collected(self):
        # Created first, so scanned last
        add_purchase(date(2024, 1, 1))
        add_purchase(date(2026, 5, 1))
        add_purchase(date(2026, 6, 1))
        add_purchase(date(2026, 7, 1))

        forecast = analyze_material('WT-001', self.today)

        self.assertEqual(forecast['purchase_count_last_12_months'], 3)
        self.assertNotIn(date(2024, 1, 1), [p['purchase_date'] for p in forecast['purchase_history']])

    def test_old_purchases_kept_while_history_is_short(self):
        add_purchase(date(2026, 7, 1))
        add_purchase(date(2024, 1, 1))

        forecast = analyze_material('WT-001', self.today)

        self.assertEqual(forecast['purchase_count_last_12_months'], 2)

    def test_window_boundary(self):
        add_purchase(date(2025, 10, 18))
        # Exactly twelve months before today is inside the window
        add_purchase(date(2025, 10, 19))
        add_purchase(date(2026, 1, 1))
        add_purchase(date(2026, 2, 1))

        forecast = analyze_material('WT-001', self.today)

        dates = [purchase['purchase_date'] for purchase in forecast['purchase_history']]
        self.assertIn(date(2025, 10, 19), dates)
        self.assertNotIn(date(2025, 10, 18), dates)

    def test_months_between(self):
        self.assertEqual(months_between(date(2026, 1, 10), date(2026, 1, 10)), 0)
        self.assertAlmostEqual(months_between(date(2025, 12, 15), date(2026, 2, 5)), 2 - 10 / 30.0)


class ForecastAPITests(TestCase):
    """Test forecast endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        today = timezone.localdate()
        for days_ago in (90, 60, 30):
            add_purchase(today - timedelta(days=days_ago))
        add_purchase(today - timedelta(days=10), item_code=' VB-002 ', item_name='V-Belt')

    def test_material_codes(self):
        response = self.client.get('/api/v1/forecast/materials/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['material_codes'], ['VB-002', 'WT-001'])
        self.assertEqual(response.data['count'], 2)

    def test_material_codes_search(self):
        response = self.client.get('/api/v1/forecast/materials/?search=vb')
        self.assertEqual(response.data['material_codes'], ['VB-002'])

    def test_forecast_by_path(self):
        response = self.client.get('/api/v1/forecast/materials/WT-001/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['material_code'], 'WT-001')
        self.assertEqual(response.data['purchase_count_last_12_months'], 3)
        self.assertEqual(response.data['recommendation'], 'Stock')
        self.assertTrue(response.data['should_stock'])
        self.assertEqual(len(response.data['purchase_history']), 3)

    def test_forecast_by_query(self):
        response = self.client.get('/api/v1/forecast/?code=vb-002')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['material_name'], 'V-Belt')
        self.assertFalse(response.data['should_stock'])

    def test_forecast_requires_code(self):
        response = self.client.get('/api/v1/forecast/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_material(self):
        response = self.client.get('/api/v1/forecast/materials/ZZ-999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/forecast/materials/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
