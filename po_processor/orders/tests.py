"""
Test suite for Orders module
Tests: purchase order model expiry logic, CRUD API, filters, expiring/expired lists and status refresh
"""
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.orders.models import PurchaseOrder
from po_processor.orders.services import material_codes, recalculate_total, refresh_statuses


class PurchaseOrderModelTests(TestCase):
    """Test PurchaseOrder and LineItem model methods"""

    def setUp(self):
        self.today = timezone.localdate()

    def test_purchase_order_str(self):
        purchase_order = TestDataFactory.create_purchase_order(po_number='PO-1001')
        self.assertEqual(str(purchase_order), 'PO-1001')

    def test_status_derived_on_save(self):
        active = TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=30))
        soon = TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=7))
        expired = TestDataFactory.create_purchase_order(
            po_date=self.today - timedelta(days=40), expiry_date=self.today - timedelta(days=1)
        )
        self.assertEqual(active.status, 'active')
        self.assertEqual(soon.status, 'expiring_soon')
        self.assertEqual(expired.status, 'expired')

    def test_expiry_helpers(self):
        purchase_order = TestDataFactory.create_purchase_order(expiry_date=self.today)
        self.assertEqual(purchase_order.days_until_expiry(), 0)
        self.assertFalse(purchase_order.is_expired())
        self.assertTrue(purchase_order.is_expiring_soon())
        self.assertTrue(purchase_order.is_expired(self.today + timedelta(days=1)))
        self.assertEqual(purchase_order.effective_status(self.today + timedelta(days=1)), 'expired')

    def test_line_total_and_subtotal(self):
        purchase_order = TestDataFactory.create_purchase_order()
        item = TestDataFactory.create_line_item(purchase_order, quantity=Decimal('2.50'), unit_price=Decimal('4.00'))
        TestDataFactory.create_line_item(purchase_order, quantity=Decimal('1.00'), unit_price=Decimal('5.00'))
        self.assertEqual(item.get_line_total(), Decimal('10.0000'))
        self.assertEqual(purchase_order.get_subtotal(), Decimal('15.00'))

    def test_recalculate_total(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_line_item(purchase_order, quantity=Decimal('3.00'), unit_price=Decimal('2.50'))
        self.assertEqual(recalculate_total(purchase_order), Decimal('7.50'))
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.total_amount, Decimal('7.50'))


class PurchaseOrderServiceTests(TestCase):
    """Test status refresh and material code look-ups"""

    def setUp(self):
        self.today = timezone.localdate()

    def test_refresh_statuses(self):
        purchase_order = TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=10))
        self.assertEqual(purchase_order.status, 'active')

        changed = refresh_statuses(self.today + timedelta(days=11))

        self.assertEqual(changed, 1)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.status, 'expired')

    def test_refresh_statuses_invalidates_dashboard_once(self):
        TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=10))
        TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=20))
        with mock.patch('po_processor.orders.services.invalidate_dashboard_cache') as invalidate:
            self.assertEqual(refresh_statuses(self.today + timedelta(days=25)), 2)
        invalidate.assert_called_once_with()

    def test_refresh_statuses_no_changes(self):
        TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=30))
        self.assertEqual(refresh_statuses(self.today), 0)

    def test_refresh_command(self):
        TestDataFactory.create_purchase_order(expiry_date=self.today + timedelta(days=30))
        out = StringIO()
        call_command('refresh_po_statuses', stdout=out)
        self.assertIn('Updated 0 purchase order status(es)', out.getvalue())

    def test_material_codes(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_line_item(purchase_order, item_code='WT-001')
        TestDataFactory.create_line_item(purchase_order, item_code=' GL-003 ')
        TestDataFactory.create_line_item(purchase_order, item_code='WT-001')
        TestDataFactory.create_line_item(purchase_order, item_code='')
        self.assertEqual(material_codes(), ['GL-003', 'WT-001'])


class PurchaseOrderAPITests(TestCase):
    """Test PurchaseOrder API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def test_create_purchase_order(self):
        data = {
            'po_number': 'PO-2026-001',
            'po_date': self.today.isoformat(),
            'expiry_date': (self.today + timedelta(days=30)).isoformat(),
            'customer_name': 'Gulf Pipes LLC',
            'items': [
                {'item_name': 'Water Tap', 'item_code': 'WT-001', 'quantity': '2.00', 'unit_price': '15.50'},
                {'item_name': 'V-Belt', 'item_code': 'VB-002', 'quantity': '1.00', 'unit_price': '4.00'},
            ]
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(response.data['items'][0]['total'], '31.00')
        self.assertEqual(response.data['total_amount'], '35.00')
        self.assertEqual(response.data['formatted_total'], 'AED 35.00')
        self.assertEqual(response.data['status'], 'active')
        self.assertEqual(response.data['status_display']['color'], 'green')
        self.assertEqual(response.data['created_by'], self.user.id)
        self.assertTrue(AuditLog.objects.filter(action='create', object_reference='PO-2026-001').exists())

    def test_create_keeps_given_total(self):
        data = {
            'po_number': 'PO-2026-002',
            'po_date': self.today.isoformat(),
            'expiry_date': (self.today + timedelta(days=30)).isoformat(),
            'customer_name': 'Gulf Pipes LLC',
            'total_amount': '99.00',
            'items': [{'item_name': 'Water Tap', 'quantity': '1.00', 'unit_price': '15.50'}],
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '99.00')

    def test_expiry_before_po_date_rejected(self):
        data = {
            'po_number': 'PO-BAD',
            'po_date': self.today.isoformat(),
            'expiry_date': (self.today - timedelta(days=1)).isoformat(),
            'customer_name': 'Gulf Pipes LLC',
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('expiry_date', response.data)

    def test_duplicate_po_number_rejected(self):
        TestDataFactory.create_purchase_order(po_number='PO-DUP')
        data = {
            'po_number': 'PO-DUP',
            'po_date': self.today.isoformat(),
            'expiry_date': (self.today + timedelta(days=5)).isoformat(),
            'customer_name': 'Gulf Pipes LLC',
        }
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('po_number', response.data)

    def test_list_purchase_orders_paginated(self):
        for _ in range(3):
            TestDataFactory.create_purchase_order()
        response = self.client.get('/api/v1/purchase-orders/?limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['next'], 2)
        self.assertIsNone(response.data['previous'])

    def test_search_by_item_code(self):
        purchase_order = TestDataFactory.create_purchase_order(customer_name='Emirates Steel')
        TestDataFactory.create_line_item(purchase_order, item_code='LB-004')
        TestDataFactory.create_line_item(purchase_order, item_code='LB-005')
        TestDataFactory.create_purchase_order(customer_name='Other Customer')

        response = self.client.get('/api/v1/purchase-orders/?search=lb-00')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['customer_name'], 'Emirates Steel')

    def test_filter_by_status(self):
        TestDataFactory.create_purchase_order(po_number='PO-ACTIVE', expiry_date=self.today + timedelta(days=30))
        TestDataFactory.create_purchase_order(po_number='PO-SOON', expiry_date=self.today + timedelta(days=2))
        TestDataFactory.create_purchase_order(
            po_number='PO-OLD', po_date=self.today - timedelta(days=60), expiry_date=self.today - timedelta(days=3)
        )
        for status_value, expected in [('active', 'PO-ACTIVE'), ('expiring_soon', 'PO-SOON'), ('expired', 'PO-OLD')]:
            response = self.client.get(f'/api/v1/purchase-orders/?status={status_value}')
            self.assertEqual([po['po_number'] for po in response.data['results']], [expected])

    def test_filter_by_date_range(self):
        TestDataFactory.create_purchase_order(po_number='PO-OLD', po_date=self.today - timedelta(days=20))
        TestDataFactory.create_purchase_order(po_number='PO-NEW', po_date=self.today)
        response = self.client.get(f'/api/v1/purchase-orders/?date_from={(self.today - timedelta(days=5)).isoformat()}')
        self.assertEqual([po['po_number'] for po in response.data['results']], ['PO-NEW'])

    def test_update_replaces_items(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_line_item(purchase_order)
        data = {'items': [{'item_name': 'Gloves', 'quantity': '4.00', 'unit_price': '2.50'}]}
        response = self.client.patch(f'/api/v1/purchase-orders/{purchase_order.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['total_amount'], '10.00')

    def test_update_header_keeps_items(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_line_item(purchase_order)
        response = self.client.patch(f'/api/v1/purchase-orders/{purchase_order.id}/', {'notes': 'Urgent'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'Urgent')
        self.assertEqual(len(response.data['items']), 1)

    def test_delete_purchase_order(self):
        purchase_order = TestDataFactory.create_purchase_order(po_number='PO-DEL')
        response = self.client.delete(f'/api/v1/purchase-orders/{purchase_order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PurchaseOrder.objects.filter(pk=purchase_order.id).exists())
        self.assertTrue(AuditLog.objects.filter(action='delete', object_reference='PO-DEL').exists())

    def test_get_missing_purchase_order(self):
        response = self.client.get('/api/v1/purchase-orders/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_expiring_and_expired_lists(self):
        TestDataFactory.create_purchase_order(po_number='PO-SOON', expiry_date=self.today + timedelta(days=3))
        TestDataFactory.create_purchase_order(po_number='PO-LATER', expiry_date=self.today + timedelta(days=30))
        TestDataFactory.create_purchase_order(
            po_number='PO-GONE', po_date=self.today - timedelta(days=60), expiry_date=self.today - timedelta(days=1)
        )

        response = self.client.get('/api/v1/purchase-orders/expiring/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([po['po_number'] for po in response.data], ['PO-SOON'])

        response = self.client.get('/api/v1/purchase-orders/expired/')
        self.assertEqual([po['po_number'] for po in response.data], ['PO-GONE'])
        self.assertTrue(response.data[0]['is_expired'])

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
