"""
Test suite for Purchasing module
Tests: supplier order numbering, totals, lifecycle transitions and creation from purchase orders
"""
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.purchasing import services
from po_processor.purchasing.models import SupplierOrder


class SupplierOrderTransitionTests(TestCase):
    """Test the supplier order lifecycle"""

    def test_allowed_transitions(self):
        self.assertTrue(services.can_transition('pending', 'confirmed'))
        self.assertTrue(services.can_transition('pending', 'cancelled'))
        self.assertTrue(services.can_transition('confirmed', 'in_transit'))
        self.assertTrue(services.can_transition('confirmed', 'cancelled'))
        self.assertTrue(services.can_transition('in_transit', 'delivered'))

    def test_forbidden_transitions(self):
        self.assertFalse(services.can_transition('pending', 'delivered'))
        self.assertFalse(services.can_transition('in_transit', 'cancelled'))
        self.assertFalse(services.can_transition('delivered', 'pending'))
        self.assertFalse(services.can_transition('cancelled', 'confirmed'))

    def test_full_lifecycle(self):
        order = TestDataFactory.create_supplier_order()
        for new_status in ('confirmed', 'in_transit', 'delivered'):
            services.transition(order, new_status)
        order.refresh_from_db()
        self.assertEqual(order.status, 'delivered')

    def test_illegal_transition_leaves_status(self):
        order = TestDataFactory.create_supplier_order()
        with self.assertRaises(ValidationError):
            services.transition(order, 'delivered')
        order.refresh_from_db()
        self.assertEqual(order.status, 'pending')


class CreateFromPurchaseOrderTests(TestCase):
    """Test raising supplier orders from customer purchase orders"""

    def setUp(self):
        self.purchase_order = TestDataFactory.create_purchase_order(po_number='PO-1001')
        TestDataFactory.create_line_item(
            self.purchase_order, item_name='Water Tap', item_code='WT-001',
            quantity=Decimal('2.00'), unit_price=Decimal('10.00')
        )
        TestDataFactory.create_line_item(
            self.purchase_order, item_name='V-Belt', item_code='VB-002',
            quantity=Decimal('3.00'), unit_price=Decimal('4.00')
        )
        self.supplier = {'name': 'Al Noor Trading', 'email': 'sales@alnoor.test'}

    def test_copies_all_items(self):
        order = services.create_from_purchase_order(self.purchase_order, self.supplier)

        today = timezone.localdate()
        self.assertEqual(order.order_number, f"SO-{today.strftime('%Y%m%d')}-0001")
        self.assertEqual(order.supplier_name, 'Al Noor Trading')
        self.assertEqual(order.supplier_email, 'sales@alnoor.test')
        self.assertEqual(order.purchase_order, self.purchase_order)
        self.assertEqual(order.status, 'pending')
        self.assertEqual(order.items.count(), 2)
        self.assertEqual(order.total_amount, Decimal('32.00'))

    def test_selected_item_codes(self):
        order = services.create_from_purchase_order(self.purchase_order, self.supplier, item_codes=[' wt-001 '])
        self.assertEqual([item.item_name for item in order.items.all()], ['Water Tap'])
        self.assertEqual(order.total_amount, Decimal('20.00'))

    def test_no_matching_items(self):
        with self.assertRaises(ValidationError):
            services.create_from_purchase_order(self.purchase_order, self.supplier, item_codes=['ZZ-999'])
        self.assertEqual(SupplierOrder.objects.count(), 0)

    def test_sequential_numbers(self):
        first = services.create_from_purchase_order(self.purchase_order, self.supplier)
        second = services.create_from_purchase_order(self.purchase_order, self.supplier)
        self.assertTrue(first.order_number.endswith('-0001'))
        self.assertTrue(second.order_number.endswith('-0002'))


class SupplierOrderAPITests(TestCase):
    """Test SupplierOrder API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier_order(self):
        data = {
            'supplier_name': 'Al Noor Trading',
            'items': [
                {'item_name': 'Gloves', 'quantity': '10.00', 'unit_price': '1.50'},
                {'item_name': 'Lubricant', 'quantity': '2.00', 'unit_price': '12.00'},
            ]
        }
        response = self.client.post('/api/v1/supplier-orders/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['order_number'].startswith('SO-'))
        self.assertEqual(response.data['total_amount'], '39.00')
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['status_display']['label'], 'Pending')
        self.assertIsNone(response.data['delivery_document'])
        self.assertTrue(AuditLog.objects.filter(model_name='SupplierOrder', action='create').exists())

    def test_duplicate_order_number(self):
        TestDataFactory.create_supplier_order(order_number='SO-FIXED')
        response = self.client.post(
            '/api/v1/supplier-orders/', {'order_number': 'SO-FIXED', 'supplier_name': 'X'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('order_number', response.data)

    def test_update_items_recalculates_total(self):
        order = TestDataFactory.create_supplier_order()
        TestDataFactory.create_supplier_order_item(order)
        data = {'items': [{'item_name': 'Gloves', 'quantity': '4.00', 'unit_price': '2.50'}]}

        response = self.client.patch(f'/api/v1/supplier-orders/{order.id}/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['total_amount'], '10.00')

    def test_status_endpoint(self):
        order = TestDataFactory.create_supplier_order()
        response = self.client.post(f'/api/v1/supplier-orders/{order.id}/status/', {'status': 'confirmed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'confirmed')

        log = AuditLog.objects.get(model_name='SupplierOrder', action='status_change')
        self.assertEqual(log.changes, {'old_status': 'pending', 'new_status': 'confirmed'})

    def test_status_endpoint_rejects_illegal_move(self):
        order = TestDataFactory.create_supplier_order(status='delivered')
        response = self.client.post(f'/api/v1/supplier-orders/{order.id}/status/', {'status': 'pending'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_status_endpoint_rejects_unknown_status(self):
        order = TestDataFactory.create_supplier_order()
        response = self.client.post(f'/api/v1/supplier-orders/{order.id}/status/', {'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_from_purchase_order(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_line_item(purchase_order, item_code='WT-001', quantity=Decimal('2.00'))
        TestDataFactory.create_line_item(purchase_order, item_code='VB-002')
        data = {
            'purchase_order': purchase_order.id,
            'supplier': {'name': 'Al Noor Trading'},
            'item_codes': ['VB-002'],
        }

        response = self.client.post('/api/v1/supplier-orders/from-purchase-order/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['po_number'], purchase_order.po_number)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['total_amount'], '10.00')
        self.assertTrue(AuditLog.objects.filter(model_name='PurchaseOrder', action='convert').exists())

    def test_from_missing_purchase_order(self):
        data = {'purchase_order': 99999, 'supplier': {'name': 'Al Noor Trading'}}
        response = self.client.post('/api/v1/supplier-orders/from-purchase-order/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_from_purchase_order_requires_supplier_name(self):
        purchase_order = TestDataFactory.create_purchase_order()
        data = {'purchase_order': purchase_order.id, 'supplier': {}}
        response = self.client.post('/api/v1/supplier-orders/from-purchase-order/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filters(self):
        purchase_order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_supplier_order(supplier_name='Al Noor Trading', purchase_order=purchase_order)
        TestDataFactory.create_supplier_order(supplier_name='Gulf Hardware', status='confirmed')

        response = self.client.get('/api/v1/supplier-orders/?search=noor')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/supplier-orders/?status=confirmed')
        self.assertEqual(response.data['results'][0]['supplier_name'], 'Gulf Hardware')
        response = self.client.get(f'/api/v1/supplier-orders/?purchase_order={purchase_order.id}')
        self.assertEqual(response.data['count'], 1)

    def test_delivery_document_link(self):
        order = TestDataFactory.create_supplier_order()
        document = TestDataFactory.create_delivery_document(supplier_order=order)
        response = self.client.get(f'/api/v1/supplier-orders/{order.id}/')
        self.assertEqual(response.data['delivery_document']['document_number'], document.document_number)

    def test_delete(self):
        order = TestDataFactory.create_supplier_order()
        response = self.client.delete(f'/api/v1/supplier-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SupplierOrder.objects.filter(pk=order.id).exists())
