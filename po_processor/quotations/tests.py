"""
Test suite for Quotations module
Tests: totals, pending item pricing, status transitions, conversion to purchase orders and expiry
"""
from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.orders.models import PurchaseOrder
from po_processor.quotations import services
from po_processor.quotations.models import Quotation
from po_processor.quotations.pricing import calculate_totals, catalog_price, price_for


class QuotationPricingTests(TestCase):
    """Test quotation arithmetic"""

    def test_totals_with_vat(self):
        items = [
            {'quantity': Decimal('2'), 'unit_price': Decimal('10.00')},
            {'quantity': Decimal('3'), 'unit_price': Decimal('1.15')},
        ]
        totals = calculate_totals(items, Decimal('5'))
        self.assertEqual(totals['subtotal'], Decimal('23.45'))
        self.assertEqual(totals['vat_amount'], Decimal('1.17'))
        self.assertEqual(totals['grand_total'], Decimal('24.62'))

    def test_totals_without_items(self):
        totals = calculate_totals([], Decimal('5'))
        self.assertEqual(totals['grand_total'], Decimal('0.00'))

    def test_price_lookup(self):
        quotation = TestDataFactory.create_quotation()
        item = TestDataFactory.create_quotation_item(quotation, item_name='Water Tap')
        self.assertEqual(price_for({str(item.id): Decimal('4.5')}, item), Decimal('4.50'))
        self.assertEqual(price_for({'Water Tap': Decimal('3')}, item), Decimal('3.00'))
        self.assertEqual(price_for({'Other': Decimal('3')}, item), Decimal('0.00'))
        self.assertEqual(price_for(None, item), Decimal('0.00'))

    def test_catalog_price(self):
        self.assertEqual(catalog_price('Water Tap'), Decimal('37.00'))
        self.assertEqual(catalog_price('Fitting', description='galvanised pipe 2"'), Decimal('20.00'))
        self.assertEqual(catalog_price('Gloves'), Decimal('0.00'))
        self.assertEqual(catalog_price('', ''), Decimal('0.00'))

    def test_catalog_price_first_keyword_wins(self):
        self.assertEqual(catalog_price('Water tap with pipe'), Decimal('37.00'))


class QuotationModelTests(TestCase):
    """Test validity and display status"""

    def test_validity(self):
        today = timezone.localdate()
        quotation = TestDataFactory.create_quotation(validity_date=today + timedelta(days=3))
        self.assertEqual(quotation.days_until_validity(today), 3)
        self.assertTrue(quotation.is_expiring_soon(today))
        self.assertFalse(quotation.is_expired(today))
        self.assertTrue(quotation.is_expired(today + timedelta(days=4)))
        self.assertFalse(quotation.is_expiring_soon(today - timedelta(days=10)))

    def test_display_status_pending_while_items_unpriced(self):
        quotation = TestDataFactory.create_quotation(status='sent')
        TestDataFactory.create_quotation_item(quotation, unit_price=Decimal('5.00'))
        self.assertEqual(quotation.display_status, 'sent')
        TestDataFactory.create_quotation_item(quotation)
        self.assertEqual(quotation.display_status, 'pending')


class QuotationWorkflowTests(TestCase):
    """Test quotation services"""

    def setUp(self):
        self.inquiry = TestDataFactory.create_inquiry(customer_name='Gulf Pipes LLC')
        TestDataFactory.create_inquiry_item(self.inquiry, item_name='Water Tap', item_code='WT-001')
        TestDataFactory.create_inquiry_item(self.inquiry, item_name='V-Belt', item_code='VB-002')
        self.quotation = TestDataFactory.create_quotation(customer_name='Gulf Pipes LLC', inquiry=self.inquiry)
        self.tap = TestDataFactory.create_quotation_item(
            self.quotation, item_name='Water Tap', item_code='WT-001', quantity=Decimal('2.00')
        )
        self.belt = TestDataFactory.create_quotation_item(
            self.quotation, item_name='V-Belt', item_code='VB-002', quantity=Decimal('1.00')
        )

    def test_price_some_pending_items(self):
        priced = services.price_pending_items(self.quotation, {str(self.tap.id): Decimal('10.00')})

        self.assertEqual([item.id for item in priced], [self.tap.id])
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, 'draft')
        self.assertEqual(self.quotation.total_amount, Decimal('21.00'))

        self.tap.refresh_from_db()
        self.assertTrue(self.tap.is_priced)
        self.assertEqual(self.tap.status, 'ready')
        self.assertEqual(self.tap.total, Decimal('20.00'))

        self.assertEqual(self.inquiry.items.get(item_name='Water Tap').status, 'quoted')
        self.assertEqual(self.inquiry.items.get(item_name='V-Belt').status, 'pending')
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'partially_quoted')

    def test_price_all_pending_items(self):
        services.price_pending_items(self.quotation, {'Water Tap': Decimal('10.00'), 'V-Belt': Decimal('5.00')})
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, 'ready')
        self.assertEqual(self.quotation.total_amount, Decimal('26.25'))
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'quoted')

    def test_zero_price_leaves_item_pending(self):
        priced = services.price_pending_items(self.quotation, {'Water Tap': Decimal('0')})
        self.assertEqual(priced, [])
        self.tap.refresh_from_db()
        self.assertEqual(self.tap.status, 'pending')

    def test_price_without_pending_items(self):
        quotation = TestDataFactory.create_quotation()
        TestDataFactory.create_quotation_item(quotation, unit_price=Decimal('3.00'))
        with self.assertRaises(ValidationError):
            services.price_pending_items(quotation, {'anything': Decimal('1.00')})

    def test_send_and_reject(self):
        self.assertEqual(services.send(self.quotation), 'draft')
        self.assertEqual(self.quotation.status, 'sent')
        with self.assertRaises(ValidationError):
            services.send(self.quotation)
        self.assertEqual(services.reject(self.quotation), 'sent')
        with self.assertRaises(ValidationError):
            services.reject(self.quotation)

    def test_accept_requires_sent_or_ready(self):
        with self.assertRaises(ValidationError):
            services.accept(self.quotation)
        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, 'draft')

    def test_accept_without_purchase_order(self):
        self.quotation.status = 'sent'
        self.quotation.save()
        self.assertIsNone(services.accept(self.quotation))
        self.assertEqual(self.quotation.status, 'accepted')
        self.inquiry.refresh_from_db()
        self.assertNotEqual(self.inquiry.status, 'converted_to_po')

    def test_accept_with_purchase_order(self):
        services.price_pending_items(self.quotation, {'Water Tap': Decimal('10.00'), 'V-Belt': Decimal('5.00')})
        self.quotation.refresh_from_db()

        purchase_order = services.accept(self.quotation, po_number='PO-5500', po_date=timezone.localdate())

        self.assertEqual(purchase_order.customer_name, 'Gulf Pipes LLC')
        self.assertEqual(purchase_order.total_amount, Decimal('26.25'))
        self.assertEqual(purchase_order.quotation_reference, self.quotation.quotation_number)
        self.assertEqual(purchase_order.expiry_date, purchase_order.po_date + timedelta(days=30))
        self.assertEqual(purchase_order.items.count(), 2)

        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, 'accepted')
        self.assertEqual(self.quotation.purchase_order, purchase_order)
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'converted_to_po')
        self.assertEqual(self.inquiry.purchase_order, purchase_order)

    def test_accept_with_existing_po_number_rolls_back(self):
        TestDataFactory.create_purchase_order(po_number='PO-5500')
        self.quotation.status = 'ready'
        self.quotation.save()

        with self.assertRaises(ValidationError):
            services.accept(self.quotation, po_number='PO-5500')

        self.quotation.refresh_from_db()
        self.assertEqual(self.quotation.status, 'ready')
        self.assertEqual(PurchaseOrder.objects.count(), 1)

    def test_expire_overdue(self):
        today = timezone.localdate()
        past = today - timedelta(days=1)
        TestDataFactory.create_quotation(validity_date=past, status='draft')
        TestDataFactory.create_quotation(validity_date=past, status='sent')
        accepted = TestDataFactory.create_quotation(validity_date=past, status='accepted')
        current = TestDataFactory.create_quotation(validity_date=today, status='sent')

        self.assertEqual(services.expire_overdue(today), 2)

        accepted.refresh_from_db()
        current.refresh_from_db()
        self.assertEqual(accepted.status, 'accepted')
        self.assertEqual(current.status, 'sent')
        self.assertEqual(Quotation.objects.filter(status='expired').count(), 2)

    def test_expire_overdue_invalidates_dashboard(self):
        TestDataFactory.create_quotation(validity_date=timezone.localdate() - timedelta(days=1), status='sent')
        with mock.patch('po_processor.quotations.services.invalidate_dashboard_cache') as invalidate:
            services.expire_overdue()
            services.expire_overdue()
        invalidate.assert_called_once_with()

    def test_expire_command(self):
        TestDataFactory.create_quotation(validity_date=timezone.localdate() - timedelta(days=5), status='ready')
        out = StringIO()
        call_command('expire_quotations', stdout=out)
        self.assertIn('Expired 1 quotation(s)', out.getvalue())

    def test_price_history(self):
        other = TestDataFactory.create_quotation(customer_name='Dubai Aluminium')
        TestDataFactory.create_quotation_item(other, item_code='wt-001', unit_price=Decimal('9.00'))
        TestDataFactory.create_quotation_item(other, item_code='WT-001', unit_price=Decimal('9.50'))

        history = list(services.price_history(' WT-001 '))
        self.assertEqual(len(history), 2)
        self.assertEqual(list(services.price_history('WT-001', customer='dubai')), [other])


class QuotationAPITests(TestCase):
    """Test Quotation API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def test_create_quotation_with_defaults(self):
        data = {
            'customer_name': 'Emirates Steel',
            'items': [
                {'item_name': 'Water Tap', 'quantity': '2.00', 'unit_price': '10.00'},
                {'item_name': 'V-Belt', 'quantity': '1.00'},
            ]
        }
        response = self.client.post('/api/v1/quotations/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quotation_number'], f"ALK {self.today.strftime('%d-%m-%Y')}-100000")
        self.assertEqual(response.data['validity_date'], str(self.today + timedelta(days=30)))
        self.assertEqual(response.data['vat_percent'], '5.00')
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(response.data['display_status'], 'pending')
        self.assertEqual(response.data['total_amount'], '21.00')
        self.assertEqual(response.data['totals']['subtotal'], 20.0)
        self.assertEqual(response.data['totals']['vat_amount'], 1.0)
        self.assertEqual(response.data['items'][0]['total'], '20.00')
        self.assertFalse(response.data['items'][1]['is_priced'])
        self.assertTrue(AuditLog.objects.filter(model_name='Quotation', action='create').exists())

    def test_create_fully_priced_quotation_is_ready(self):
        data = {
            'customer_name': 'Emirates Steel',
            'vat_percent': '0',
            'items': [{'item_name': 'Water Tap', 'quantity': '2.00', 'unit_price': '10.00'}],
        }
        response = self.client.post('/api/v1/quotations/', data, format='json')
        self.assertEqual(response.data['status'], 'ready')
        self.assertEqual(response.data['total_amount'], '20.00')

    def test_second_quotation_number(self):
        self.client.post('/api/v1/quotations/', {'customer_name': 'A'}, format='json')
        response = self.client.post('/api/v1/quotations/', {'customer_name': 'B'}, format='json')
        self.assertTrue(response.data['quotation_number'].endswith('-100002'))

    def test_update_items_recomputes_totals(self):
        quotation = TestDataFactory.create_quotation(status='ready')
        TestDataFactory.create_quotation_item(quotation, unit_price=Decimal('5.00'))
        data = {'items': [{'item_name': 'Gloves', 'quantity': '4.00', 'unit_price': '0'}]}

        response = self.client.patch(f'/api/v1/quotations/{quotation.id}/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(response.data['total_amount'], '0.00')

    def test_update_items_marks_inquiry_items_quoted(self):
        inquiry = TestDataFactory.create_inquiry()
        TestDataFactory.create_inquiry_item(inquiry, item_name='Gloves', item_code='GL-003')
        TestDataFactory.create_inquiry_item(inquiry, item_name='V-Belt', item_code='VB-002')
        quotation = TestDataFactory.create_quotation(inquiry=inquiry)
        data = {'items': [
            {'item_name': 'Gloves', 'item_code': 'GL-003', 'quantity': '4.00', 'unit_price': '2.50'},
            {'item_name': 'V-Belt', 'item_code': 'VB-002', 'quantity': '1.00', 'unit_price': '0'},
        ]}

        response = self.client.patch(f'/api/v1/quotations/{quotation.id}/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(inquiry.items.get(item_name='Gloves').status, 'quoted')
        self.assertEqual(inquiry.items.get(item_name='V-Belt').status, 'pending')
        inquiry.refresh_from_db()
        self.assertEqual(inquiry.status, 'partially_quoted')

    def test_status_is_read_only(self):
        quotation = TestDataFactory.create_quotation()
        response = self.client.patch(f'/api/v1/quotations/{quotation.id}/', {'status': 'accepted'}, format='json')
        self.assertEqual(response.data['status'], 'draft')

    def test_price_items_endpoint(self):
        quotation = TestDataFactory.create_quotation()
        item = TestDataFactory.create_quotation_item(quotation, quantity=Decimal('3.00'))
        response = self.client.post(
            f'/api/v1/quotations/{quotation.id}/price-items/',
            {'prices': {str(item.id): '2.00'}},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['priced_count'], 1)
        self.assertEqual(response.data['quotation']['status'], 'ready')
        self.assertEqual(response.data['quotation']['total_amount'], '6.30')
        self.assertTrue(AuditLog.objects.filter(model_name='Quotation', action='price_update').exists())

    def test_price_items_requires_prices(self):
        quotation = TestDataFactory.create_quotation()
        TestDataFactory.create_quotation_item(quotation)
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/price-items/', {'prices': {}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_send_then_accept_with_purchase_order(self):
        inquiry = TestDataFactory.create_inquiry()
        quotation = TestDataFactory.create_quotation(inquiry=inquiry)
        TestDataFactory.create_quotation_item(quotation, unit_price=Decimal('10.00'))

        response = self.client.post(f'/api/v1/quotations/{quotation.id}/send/')
        self.assertEqual(response.data['status'], 'sent')

        data = {'create_purchase_order': True, 'po_number': ' PO-9001 '}
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/accept/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quotation']['status'], 'accepted')
        self.assertEqual(response.data['quotation']['po_number'], 'PO-9001')
        self.assertEqual(response.data['purchase_order']['po_number'], 'PO-9001')
        self.assertEqual(len(response.data['purchase_order']['items']), 1)
        self.assertTrue(AuditLog.objects.filter(model_name='Quotation', action='convert').exists())

        inquiry.refresh_from_db()
        self.assertEqual(inquiry.status, 'converted_to_po')

    def test_accept_without_purchase_order(self):
        quotation = TestDataFactory.create_quotation(status='ready')
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/accept/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quotation']['status'], 'accepted')
        self.assertNotIn('purchase_order', response.data)

    def test_accept_requires_po_number(self):
        quotation = TestDataFactory.create_quotation(status='sent')
        response = self.client.post(
            f'/api/v1/quotations/{quotation.id}/accept/', {'create_purchase_order': True}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('po_number', response.data)

    def test_accept_duplicate_po_number(self):
        TestDataFactory.create_purchase_order(po_number='PO-9001')
        quotation = TestDataFactory.create_quotation(status='sent')
        data = {'create_purchase_order': True, 'po_number': 'PO-9001'}
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/accept/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        quotation.refresh_from_db()
        self.assertEqual(quotation.status, 'sent')

    def test_illegal_transition(self):
        quotation = TestDataFactory.create_quotation(status='rejected')
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/send/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

        response = self.client.post(f'/api/v1/quotations/{quotation.id}/accept/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reject(self):
        quotation = TestDataFactory.create_quotation()
        response = self.client.post(f'/api/v1/quotations/{quotation.id}/reject/')
        self.assertEqual(response.data['status'], 'rejected')
        self.assertEqual(response.data['status_display']['color'], 'red')

    def test_expire_overdue_endpoint(self):
        TestDataFactory.create_quotation(validity_date=self.today - timedelta(days=1))
        response = self.client.post('/api/v1/quotations/expire-overdue/')
        self.assertEqual(response.data, {'expired': 1})

    def test_history(self):
        quotation = TestDataFactory.create_quotation()
        TestDataFactory.create_quotation_item(quotation, item_code='WT-001', unit_price=Decimal('7.00'))

        response = self.client.get('/api/v1/quotations/history/?material_code=wt-001')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['items'][0]['unit_price'], '7.00')

        response = self.client.get('/api/v1/quotations/history/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filters(self):
        TestDataFactory.create_quotation(customer_name='Dubai Aluminium', validity_date=self.today + timedelta(days=2))
        TestDataFactory.create_quotation(customer_name='Gulf Pipes', status='sent')

        response = self.client.get('/api/v1/quotations/?expiring=true')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/quotations/?status=sent')
        self.assertEqual(response.data['results'][0]['customer_name'], 'Gulf Pipes')
        response = self.client.get('/api/v1/quotations/?customer=dubai')
        self.assertEqual(response.data['count'], 1)

    def test_delete(self):
        quotation = TestDataFactory.create_quotation()
        response = self.client.delete(f'/api/v1/quotations/{quotation.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Quotation.objects.filter(pk=quotation.id).exists())
