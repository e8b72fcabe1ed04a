"""
Test suite for Delivery module
Tests: document totals, creation from purchase orders, status flow and API endpoints
"""
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.delivery import services
from po_processor.delivery.models import DeliveryDocument


class DeliveryTotalsTests(TestCase):
    """Test delivery document arithmetic"""

    def test_totals_with_vat(self):
        totals = services.calculate_totals([Decimal('60.00'), Decimal('40.00')], Decimal('5'))
        self.assertEqual(totals['subtotal'], Decimal('100.00'))
        self.assertEqual(totals['vat_amount'], Decimal('5.00'))
        self.assertEqual(totals['total_amount'], Decimal('105.00'))

    def test_totals_without_vat(self):
        totals = services.calculate_totals([Decimal('12.50')], Decimal('0'))
        self.assertIsNone(totals['vat_amount'])
        self.assertEqual(totals['total_amount'], Decimal('12.50'))

    def test_totals_without_items(self):
        totals = services.calculate_totals([], None)
        self.assertEqual(totals['subtotal'], Decimal('0.00'))
        self.assertIsNone(totals['vat_amount'])


class DeliveryWorkflowTests(TestCase):
    """Test delivery document services"""

    def setUp(self):
        self.purchase_order = TestDataFactory.create_purchase_order(customer_name='Gulf Pipes LLC')
        TestDataFactory.create_line_item(self.purchase_order, quantity=Decimal('2.00'), unit_price=Decimal('25.00'))
        TestDataFactory.create_line_item(self.purchase_order, quantity=Decimal('5.00'), unit_price=Decimal('10.00'))

    def test_create_from_purchase_order(self):
        document = services.create_from_purchase_order(
            self.purchase_order, document_type='commercial_invoice', vat_percent=Decimal('5')
        )

        today = timezone.localdate()
        self.assertEqual(document.document_number, f"DOC-{today.strftime('%Y%m%d')}-0001")
        self.assertEqual(document.customer_name, 'Gulf Pipes LLC')
        self.assertEqual(document.document_type, 'commercial_invoice')
        self.assertEqual(document.status, 'draft')
        self.assertEqual(document.items.count(), 2)
        self.assertEqual(document.subtotal, Decimal('100.00'))
        self.assertEqual(document.vat_amount, Decimal('5.00'))
        self.assertEqual(document.total_amount, Decimal('105.00'))

    def test_create_without_vat(self):
        document = services.create_from_purchase_order(self.purchase_order)
        self.assertEqual(document.document_type, 'both')
        self.assertIsNone(document.vat_amount)
        self.assertEqual(document.total_amount, Decimal('100.00'))

    def test_linked_supplier_order(self):
        supplier_order = TestDataFactory.create_supplier_order(purchase_order=self.purchase_order)
        document = services.create_from_purchase_order(self.purchase_order, supplier_order=supplier_order)
        self.assertEqual(supplier_order.delivery_document, document)

    def test_supplier_order_of_other_purchase_order(self):
        other = TestDataFactory.create_purchase_order()
        supplier_order = TestDataFactory.create_supplier_order(purchase_order=other)
        with self.assertRaises(ValidationError):
            services.create_from_purchase_order(self.purchase_order, supplier_order=supplier_order)
        self.assertEqual(DeliveryDocument.objects.count(), 0)

    def test_status_flow(self):
        document = TestDataFactory.create_delivery_document()
        with self.assertRaises(ValidationError):
            services.mark_sent(document)
        self.assertEqual(services.mark_generated(document), 'draft')
        self.assertEqual(services.mark_sent(document), 'generated')
        with self.assertRaises(ValidationError):
            services.mark_generated(document)
        document.refresh_from_db()
        self.assertEqual(document.status, 'sent')

    def test_update_totals(self):
        document = TestDataFactory.create_delivery_document()
        document.vat_percent = Decimal('10')
        TestDataFactory.create_delivery_item(document, quantity=Decimal('3.00'), unit_price=Decimal('10.00'))
        services.update_totals(document)
        document.refresh_from_db()
        self.assertEqual(document.subtotal, Decimal('30.00'))
        self.assertEqual(document.vat_amount, Decimal('3.00'))
        self.assertEqual(document.total_amount, Decimal('33.00'))


class DeliveryDocumentAPITests(TestCase):
    """Test DeliveryDocument API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_document(self):
        data = {
            'customer_name': 'Emirates Steel',
            'document_type': 'delivery_order',
            'vat_percent': '5',
            'items': [
                {'item_name': 'Gloves', 'quantity': '10.00', 'unit_price': '6.00'},
                {'item_name': 'Lubricant', 'quantity': '1.00', 'unit_price': '40.00'},
            ]
        }
        response = self.client.post('/api/v1/delivery-documents/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['document_number'].startswith('DOC-'))
        self.assertEqual(response.data['subtotal'], '100.00')
        self.assertEqual(response.data['vat_amount'], '5.00')
        self.assertEqual(response.data['total_amount'], '105.00')
        self.assertEqual(response.data['amount_in_words'], 'One Hundred Five Dirhams')
        self.assertEqual(response.data['formatted_total'], 'AED 105.00')
        self.assertEqual(response.data['type_display']['label'], 'Delivery Order')
        self.assertEqual(response.data['status'], 'draft')
        self.assertTrue(AuditLog.objects.filter(model_name='DeliveryDocument', action='create').exists())

    def test_create_document_without_vat(self):
        data = {'customer_name': 'Emirates Steel', 'items': [{'item_name': 'Gloves', 'unit_price': '6.00'}]}
        response = self.client.post('/api/v1/delivery-documents/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['vat_amount'])
        self.assertEqual(response.data['total_amount'], '6.00')
        self.assertEqual(response.data['document_type'], 'both')

    def test_invalid_document_type(self):
        data = {'customer_name': 'Emirates Steel', 'document_type': 'receipt'}
        response = self.client.post('/api/v1/delivery-documents/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_vat_recomputes_totals(self):
        document = TestDataFactory.create_delivery_document()
        TestDataFactory.create_delivery_item(document, quantity=Decimal('2.00'), unit_price=Decimal('50.00'))

        response = self.client.patch(f'/api/v1/delivery-documents/{document.id}/', {'vat_percent': '5'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['vat_amount'], '5.00')
        self.assertEqual(response.data['total_amount'], '105.00')

    def test_from_purchase_order(self):
        purchase_order = TestDataFactory.create_purchase_order(po_number='PO-7001')
        TestDataFactory.create_line_item(purchase_order, quantity=Decimal('4.00'), unit_price=Decimal('25.00'))
        supplier_order = TestDataFactory.create_supplier_order(purchase_order=purchase_order)
        data = {
            'purchase_order': purchase_order.id,
            'supplier_order': supplier_order.id,
            'document_type': 'commercial_invoice',
            'vat_percent': '5',
            'customer_trn': '100123456700003',
        }

        response = self.client.post('/api/v1/delivery-documents/from-purchase-order/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['po_number'], 'PO-7001')
        self.assertEqual(response.data['supplier_order_number'], supplier_order.order_number)
        self.assertEqual(response.data['customer_trn'], '100123456700003')
        self.assertEqual(response.data['total_amount'], '105.00')
        self.assertEqual(len(response.data['items']), 1)

        response = self.client.get(f'/api/v1/supplier-orders/{supplier_order.id}/')
        self.assertEqual(response.data['delivery_document']['status'], 'draft')

    def test_from_missing_purchase_order(self):
        response = self.client.post(
            '/api/v1/delivery-documents/from-purchase-order/', {'purchase_order': 99999}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_generate_and_send(self):
        document = TestDataFactory.create_delivery_document()

        response = self.client.post(f'/api/v1/delivery-documents/{document.id}/send/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(f'/api/v1/delivery-documents/{document.id}/generate/')
        self.assertEqual(response.data['status'], 'generated')
        response = self.client.post(f'/api/v1/delivery-documents/{document.id}/send/')
        self.assertEqual(response.data['status'], 'sent')
        self.assertEqual(response.data['status_display']['color'], 'green')
        self.assertEqual(AuditLog.objects.filter(model_name='DeliveryDocument', action='status_change').count(), 2)

    def test_filters(self):
        purchase_order = TestDataFactory.create_purchase_order(po_number='PO-FIND-ME')
        TestDataFactory.create_delivery_document(purchase_order=purchase_order, document_type='delivery_order')
        TestDataFactory.create_delivery_document(customer_name='Dubai Aluminium', status='sent')

        response = self.client.get('/api/v1/delivery-documents/?search=find-me')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/delivery-documents/?document_type=delivery_order')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/delivery-documents/?status=sent')
        self.assertEqual(response.data['results'][0]['customer_name'], 'Dubai Aluminium')

    def test_delete(self):
        document = TestDataFactory.create_delivery_document()
        TestDataFactory.create_delivery_item(document)
        response = self.client.delete(f'/api/v1/delivery-documents/{document.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(DeliveryDocument.objects.filter(pk=document.id).exists())
