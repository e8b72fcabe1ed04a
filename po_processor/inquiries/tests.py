"""
Test suite for Inquiries module
Tests: inquiry numbering, status derivation, review, quotation generation and API filters
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.inquiries import services
from po_processor.inquiries.models import CustomerInquiry
from po_processor.quotations.models import Quotation


class InquiryStatusTests(TestCase):
    """Test status derivation from item statuses"""

    def setUp(self):
        self.inquiry = TestDataFactory.create_inquiry()

    def test_no_items_stays_pending(self):
        self.assertEqual(services.derive_status(self.inquiry), 'pending')

    def test_all_items_quoted(self):
        TestDataFactory.create_inquiry_item(self.inquiry, status='quoted')
        TestDataFactory.create_inquiry_item(self.inquiry, status='quoted')
        self.assertEqual(services.derive_status(self.inquiry), 'quoted')

    def test_some_items_quoted(self):
        TestDataFactory.create_inquiry_item(self.inquiry, status='quoted')
        TestDataFactory.create_inquiry_item(self.inquiry, status='pending')
        self.assertEqual(services.derive_status(self.inquiry), 'partially_quoted')

    def test_reviewed_kept_until_quoted(self):
        self.inquiry.status = 'reviewed'
        TestDataFactory.create_inquiry_item(self.inquiry, status='pending')
        self.assertEqual(services.derive_status(self.inquiry), 'reviewed')

    def test_converted_never_changes(self):
        self.inquiry.status = 'converted_to_po'
        TestDataFactory.create_inquiry_item(self.inquiry, status='pending')
        self.assertEqual(services.derive_status(self.inquiry), 'converted_to_po')

    def test_refresh_status_persists(self):
        TestDataFactory.create_inquiry_item(self.inquiry, status='quoted')
        self.assertEqual(services.refresh_status(self.inquiry), 'quoted')
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'quoted')

    def test_mark_reviewed(self):
        self.assertEqual(services.mark_reviewed(self.inquiry), 'reviewed')

    def test_mark_reviewed_converted_rejected(self):
        self.inquiry.status = 'converted_to_po'
        with self.assertRaises(ValidationError):
            services.mark_reviewed(self.inquiry)

    def test_item_counts(self):
        TestDataFactory.create_inquiry_item(self.inquiry, status='quoted')
        TestDataFactory.create_inquiry_item(self.inquiry, status='pending')
        TestDataFactory.create_inquiry_item(self.inquiry, status='pending')
        self.assertEqual(self.inquiry.item_counts(), (1, 2))


class CreateQuotationServiceTests(TestCase):
    """Test generating quotations from inquiries"""

    def setUp(self):
        self.today = timezone.localdate()
        self.inquiry = TestDataFactory.create_inquiry(customer_name='Gulf Pipes LLC')
        self.tap = TestDataFactory.create_inquiry_item(self.inquiry, item_name='Water Tap', item_code='WT-001', quantity=Decimal('2.00'))
        self.belt = TestDataFactory.create_inquiry_item(self.inquiry, item_name='V-Belt', item_code='VB-002', quantity=Decimal('3.00'))

    def test_partially_priced(self):
        quotation = services.create_quotation(self.inquiry, prices={str(self.tap.id): Decimal('10.00')}, today=self.today)

        self.assertTrue(quotation.quotation_number.startswith(f"ALK {self.today.strftime('%d-%m-%Y')}-"))
        self.assertEqual(quotation.status, 'draft')
        self.assertEqual(quotation.inquiry, self.inquiry)
        self.assertEqual(quotation.customer_name, 'Gulf Pipes LLC')
        # 2 x 10.00 plus 5% VAT
        self.assertEqual(quotation.total_amount, Decimal('21.00'))
        self.assertEqual(quotation.validity_date, self.today + timedelta(days=30))

        items = {item.item_name: item for item in quotation.items.all()}
        self.assertTrue(items['Water Tap'].is_priced)
        self.assertEqual(items['Water Tap'].status, 'ready')
        self.assertFalse(items['V-Belt'].is_priced)
        self.assertEqual(items['V-Belt'].unit_price, Decimal('0.00'))

        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'partially_quoted')

    def test_fully_priced_by_name(self):
        quotation = services.create_quotation(
            self.inquiry,
            prices={'Water Tap': Decimal('10.00'), 'V-Belt': Decimal('4.00')},
            vat_percent=Decimal('0'),
            today=self.today,
        )
        self.assertEqual(quotation.status, 'ready')
        self.assertEqual(quotation.total_amount, Decimal('32.00'))
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'quoted')
        self.assertEqual(self.inquiry.quotation, quotation)

    def test_no_prices_without_catalog(self):
        quotation = services.create_quotation(self.inquiry, use_catalog=False, today=self.today)
        self.assertEqual(quotation.status, 'draft')
        self.assertEqual(quotation.total_amount, Decimal('0.00'))
        self.inquiry.refresh_from_db()
        self.assertEqual(self.inquiry.status, 'pending')

    def test_catalog_prices_unpriced_items(self):
        quotation = services.create_quotation(self.inquiry, vat_percent=Decimal('0'), today=self.today)

        items = {item.item_name: item for item in quotation.items.all()}
        self.assertEqual(items['Water Tap'].unit_price, Decimal('37.00'))
        self.assertEqual(items['Water Tap'].total, Decimal('74.00'))
        self.assertEqual(items['Water Tap'].status, 'ready')
        self.assertEqual(items['V-Belt'].unit_price, Decimal('0.00'))
        self.assertEqual(items['V-Belt'].status, 'pending')
        self.assertEqual(quotation.status, 'draft')
        self.assertEqual(quotation.total_amount, Decimal('74.00'))

    def test_given_price_wins_over_catalog(self):
        quotation = services.create_quotation(
            self.inquiry, prices={'Water Tap': Decimal('30.00')}, vat_percent=Decimal('0'), today=self.today
        )
        self.assertEqual(quotation.items.get(item_name='Water Tap').unit_price, Decimal('30.00'))

    def test_all_items_matched_by_catalog(self):
        inquiry = TestDataFactory.create_inquiry()
        TestDataFactory.create_inquiry_item(inquiry, item_name='Brass water tap', quantity=Decimal('2.00'))
        fitting = TestDataFactory.create_inquiry_item(inquiry, item_name='PVC fitting', quantity=Decimal('3.00'))
        fitting.description = 'Schedule 40 pipe'
        fitting.save()

        quotation = services.create_quotation(inquiry, vat_percent=Decimal('0'), today=self.today)

        # 2 x 37.00 + 3 x 20.00
        self.assertEqual(quotation.status, 'ready')
        self.assertEqual(quotation.total_amount, Decimal('134.00'))
        inquiry.refresh_from_db()
        self.assertEqual(inquiry.status, 'quoted')

    def test_converted_inquiry_rejected(self):
        self.inquiry.status = 'converted_to_po'
        self.inquiry.save()
        with self.assertRaises(ValidationError):
            services.create_quotation(self.inquiry)
        self.assertEqual(Quotation.objects.count(), 0)

    def test_inquiry_without_items_rejected(self):
        empty = TestDataFactory.create_inquiry()
        with self.assertRaises(ValidationError):
            services.create_quotation(empty)

    def test_second_quotation_gets_next_serial(self):
        first = services.create_quotation(self.inquiry, today=self.today)
        second = services.create_quotation(self.inquiry, today=self.today)
        self.assertEqual(int(second.quotation_number[-6:]), int(first.quotation_number[-6:]) + 2)
        self.assertEqual(self.inquiry.quotation, second)


class InquiryAPITests(TestCase):
    """Test CustomerInquiry API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def test_create_inquiry_generates_number(self):
        data = {
            'customer_name': 'Emirates Steel',
            'sender_email': 'rfq@emiratessteel.test',
            'items': [
                {'item_name': 'Gloves', 'item_code': 'GL-003', 'quantity': '100.00'},
                {'item_name': 'Lubricant', 'item_code': 'LB-004', 'quantity': '5.00', 'plant': 'P1'},
            ]
        }
        response = self.client.post('/api/v1/inquiries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['inquiry_number'], f"INQ-{self.today.strftime('%Y%m%d')}-0001")
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['pending_count'], 2)
        self.assertEqual(response.data['quoted_count'], 0)
        self.assertEqual(response.data['items'][0]['unit'], 'EA')
        self.assertIsNone(response.data['quotation'])
        self.assertTrue(AuditLog.objects.filter(model_name='CustomerInquiry', action='create').exists())

    def test_create_inquiry_with_given_number(self):
        data = {'inquiry_number': 'RFQ-7788', 'customer_name': 'Emirates Steel'}
        response = self.client.post('/api/v1/inquiries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['inquiry_number'], 'RFQ-7788')

        response = self.client.post('/api/v1/inquiries/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_inquiry_with_quoted_items(self):
        data = {
            'customer_name': 'Emirates Steel',
            'items': [{'item_name': 'Gloves', 'status': 'quoted'}],
        }
        response = self.client.post('/api/v1/inquiries/', data, format='json')
        self.assertEqual(response.data['status'], 'quoted')

    def test_update_items_rederives_status(self):
        inquiry = TestDataFactory.create_inquiry()
        TestDataFactory.create_inquiry_item(inquiry)
        data = {'items': [{'item_name': 'Gloves', 'status': 'quoted'}, {'item_name': 'Tap'}]}
        response = self.client.patch(f'/api/v1/inquiries/{inquiry.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(response.data['status'], 'partially_quoted')

    def test_status_is_read_only(self):
        inquiry = TestDataFactory.create_inquiry()
        response = self.client.patch(f'/api/v1/inquiries/{inquiry.id}/', {'status': 'quoted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'pending')

    def test_filter_quoted_includes_partially_quoted(self):
        TestDataFactory.create_inquiry(status='quoted')
        TestDataFactory.create_inquiry(status='partially_quoted')
        TestDataFactory.create_inquiry(status='pending')
        response = self.client.get('/api/v1/inquiries/?status=quoted')
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/v1/inquiries/?status=pending')
        self.assertEqual(response.data['count'], 1)

    def test_search(self):
        TestDataFactory.create_inquiry(customer_name='Dubai Aluminium')
        TestDataFactory.create_inquiry(inquiry_number='INQ-SPECIAL', customer_name='Other')
        response = self.client.get('/api/v1/inquiries/?search=aluminium')
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/inquiries/?search=special')
        self.assertEqual(response.data['results'][0]['inquiry_number'], 'INQ-SPECIAL')

    def test_mark_reviewed(self):
        inquiry = TestDataFactory.create_inquiry()
        response = self.client.post(f'/api/v1/inquiries/{inquiry.id}/review/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'reviewed')
        self.assertEqual(response.data['status_display']['color'], 'blue')

    def test_mark_reviewed_converted(self):
        inquiry = TestDataFactory.create_inquiry(status='converted_to_po')
        response = self.client.post(f'/api/v1/inquiries/{inquiry.id}/review/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_create_quotation_endpoint(self):
        inquiry = TestDataFactory.create_inquiry()
        item = TestDataFactory.create_inquiry_item(inquiry, item_name='Gloves', quantity=Decimal('10.00'))
        data = {'prices': {str(item.id): '2.50'}, 'vat_percent': '5.00', 'currency': 'AED'}

        response = self.client.post(f'/api/v1/inquiries/{inquiry.id}/quotation/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'ready')
        self.assertEqual(response.data['total_amount'], '26.25')
        self.assertEqual(response.data['inquiry'], inquiry.id)
        self.assertEqual(response.data['inquiry_number'], inquiry.inquiry_number)
        self.assertTrue(AuditLog.objects.filter(model_name='CustomerInquiry', action='convert').exists())

        response = self.client.get(f'/api/v1/inquiries/{inquiry.id}/')
        self.assertEqual(response.data['status'], 'quoted')
        self.assertIsNotNone(response.data['quotation_number'])

    def test_create_quotation_without_items(self):
        inquiry = TestDataFactory.create_inquiry()
        response = self.client.post(f'/api/v1/inquiries/{inquiry.id}/quotation/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_inquiry(self):
        inquiry = TestDataFactory.create_inquiry()
        TestDataFactory.create_inquiry_item(inquiry)
        response = self.client.delete(f'/api/v1/inquiries/{inquiry.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(CustomerInquiry.objects.filter(pk=inquiry.id).exists())
