"""
Test suite for Reports module
Tests: dashboard totals, expiring orders, pipeline counts and caching
"""
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.orders.filters import PurchaseOrderFilter
from po_processor.orders.models import PurchaseOrder
from po_processor.reports.services import build_dashboard_stats, dashboard_stats


class DashboardStatsTests(TestCase):
    """Test dashboard statistics"""

    def setUp(self):
        self.today = timezone.localdate()
        TestDataFactory.create_purchase_order(
            po_number='PO-TODAY', po_date=self.today,
            expiry_date=self.today + timedelta(days=3), total_amount=Decimal('100.00')
        )
        TestDataFactory.create_purchase_order(
            po_number='PO-LATER', po_date=self.today - timedelta(days=40),
            expiry_date=self.today + timedelta(days=20), total_amount=Decimal('50.00')
        )
        TestDataFactory.create_purchase_order(
            po_number='PO-ENDS-TODAY', po_date=self.today - timedelta(days=30),
            expiry_date=self.today, total_amount=Decimal('25.00')
        )

    def test_order_totals(self):
        stats = build_dashboard_stats(self.today)
        self.assertEqual(stats['total_pos'], 3)
        self.assertEqual(stats['today_pos'], 1)
        self.assertEqual(stats['total_value'], '175.00')
        self.assertEqual(stats['today_value'], '100.00')

    def test_expiring_this_week_excludes_today(self):
        stats = build_dashboard_stats(self.today)
        self.assertEqual(stats['expiring_this_week'], 1)
        self.assertEqual([po['po_number'] for po in stats['expiring_pos']], ['PO-TODAY'])

    def test_expiring_window_upper_bound(self):
        TestDataFactory.create_purchase_order(
            po_number='PO-WEEK', po_date=self.today, expiry_date=self.today + timedelta(days=7)
        )
        TestDataFactory.create_purchase_order(
            po_number='PO-EIGHT', po_date=self.today, expiry_date=self.today + timedelta(days=8)
        )
        stats = build_dashboard_stats(self.today)
        numbers = [po['po_number'] for po in stats['expiring_pos']]
        self.assertIn('PO-WEEK', numbers)
        self.assertNotIn('PO-EIGHT', numbers)

    def test_pipeline_counts(self):
        TestDataFactory.create_inquiry(status='pending')
        TestDataFactory.create_inquiry(status='pending')
        TestDataFactory.create_inquiry(status='quoted')
        TestDataFactory.create_quotation(status='sent')
        TestDataFactory.create_supplier_order(status='in_transit')
        TestDataFactory.create_delivery_document(status='generated')

        pipeline = build_dashboard_stats(self.today)['pipeline']

        self.assertEqual(pipeline['inquiries']['pending'], 2)
        self.assertEqual(pipeline['inquiries']['quoted'], 1)
        self.assertEqual(pipeline['inquiries']['converted_to_po'], 0)
        self.assertEqual(pipeline['quotations']['sent'], 1)
        self.assertEqual(pipeline['purchase_orders'], {'active': 1, 'expiring_soon': 2, 'expired': 0})
        self.assertEqual(pipeline['supplier_orders']['in_transit'], 1)
        self.assertEqual(pipeline['delivery_documents']['generated'], 1)

    def test_purchase_order_counts_follow_expiry_dates(self):
        expired = TestDataFactory.create_purchase_order(
            po_number='PO-LAPSED', po_date=self.today - timedelta(days=32), expiry_date=self.today - timedelta(days=2)
        )
        # Stored status not yet refreshed
        PurchaseOrder.objects.filter(pk=expired.pk).update(status='active')

        pipeline = build_dashboard_stats(self.today)['pipeline']

        self.assertEqual(pipeline['purchase_orders'], {'active': 1, 'expiring_soon': 2, 'expired': 1})

        filtered_counts = {
            value: PurchaseOrderFilter({'status': value}, queryset=PurchaseOrder.objects.all()).qs.count()
            for value in ('active', 'expiring_soon', 'expired')
        }
        self.assertEqual(pipeline['purchase_orders'], filtered_counts)

    def test_empty_book(self):
        stats = build_dashboard_stats(self.today + timedelta(days=400))
        self.assertEqual(stats['today_pos'], 0)
        self.assertEqual(stats['today_value'], '0.00')
        self.assertEqual(stats['expiring_this_week'], 0)

    @override_settings(CACHES={'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'}})
    def test_stats_are_cached_per_day(self):
        cache.clear()
        first = dashboard_stats(self.today)
        TestDataFactory.create_purchase_order(po_date=self.today)
        second = dashboard_stats(self.today)
        self.assertEqual(first['total_pos'], second['total_pos'])
        self.assertEqual(dashboard_stats(self.today + timedelta(days=1))['total_pos'], 4)
        cache.clear()


class DashboardAPITests(TestCase):
    """Test dashboard endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard(self):
        TestDataFactory.create_purchase_order(total_amount=Decimal('80.00'))
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_pos'], 1)
        self.assertEqual(response.data['total_value'], '80.00')
        self.assertIn('pipeline', response.data)

    def test_dashboard_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
