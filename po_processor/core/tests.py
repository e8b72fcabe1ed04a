"""
Test suite for Core module
Tests: authentication, users, settings, audit logs, global search, status display,
currency and amount helpers, document numbering and cache utilities
"""
from datetime import date
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError

from po_processor.core.cache_utils import cached_query, invalidate_dashboard_cache, make_cache_key
from po_processor.core.currency import detect_currency, format_amount, get_currency_symbol, to_money
from po_processor.core.display import status_display
from po_processor.core.models import AuditLog, Setting
from po_processor.core.number_words import amount_in_words, number_to_words
from po_processor.core.numbering import next_document_number, next_quotation_number
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.core.utils import create_audit_log
from po_processor.inquiries.models import CustomerInquiry

User = get_user_model()


class StatusDisplayTests(TestCase):
    """Test status to label/colour/icon mapping"""

    def test_inquiry_statuses(self):
        self.assertEqual(
            status_display('inquiry', 'pending'),
            {'status': 'pending', 'label': 'Pending', 'color': 'orange', 'icon': 'hourglass_empty'}
        )
        self.assertEqual(status_display('inquiry', 'partially_quoted')['color'], 'teal')
        self.assertEqual(status_display('inquiry', 'converted_to_po')['label'], 'Converted to PO')

    def test_purchase_order_falls_back_to_active(self):
        """Any unrecognised purchase order status renders as active"""
        result = status_display('purchase_order', 'something_else')
        self.assertEqual(result['status'], 'something_else')
        self.assertEqual(result['color'], 'green')
        self.assertEqual(result['icon'], 'check_circle')

    def test_purchase_order_expired(self):
        result = status_display('purchase_order', 'expired')
        self.assertEqual(result['color'], 'red')
        self.assertEqual(result['icon'], 'error')

    def test_unknown_status(self):
        result = status_display('quotation', 'archived')
        self.assertEqual(result, {'status': 'archived', 'label': 'archived', 'color': 'grey', 'icon': 'help_outline'})

    def test_delivery_type(self):
        self.assertEqual(status_display('delivery_type', 'delivery_order')['icon'], 'local_shipping')
        self.assertEqual(status_display('delivery_type', 'commercial_invoice')['label'], 'Commercial Invoice')

    def test_unknown_kind_raises(self):
        with self.assertRaises(KeyError):
            status_display('invoice', 'paid')


class CurrencyTests(TestCase):
    """Test currency symbols, formatting and detection"""

    def test_currency_symbols(self):
        self.assertEqual(get_currency_symbol(''), '₹')
        self.assertEqual(get_currency_symbol(None), '₹')
        self.assertEqual(get_currency_symbol('aed'), 'AED ')
        self.assertEqual(get_currency_symbol('USD'), '$')
        self.assertEqual(get_currency_symbol('EUR'), '€')
        self.assertEqual(get_currency_symbol('GBP'), '£')
        self.assertEqual(get_currency_symbol('XYZ'), 'XYZ ')

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal('1234.5'), 'USD'), '$1234.50')
        self.assertEqual(format_amount(10, 'AED'), 'AED 10.00')
        self.assertEqual(format_amount(Decimal('0.125'), 'GBP'), '£0.13')

    def test_detect_currency(self):
        self.assertEqual(detect_currency('Total 500 Dirham only'), 'AED')
        self.assertEqual(detect_currency('Price: $20'), 'USD')
        self.assertEqual(detect_currency('Paid in rupees'), 'INR')
        self.assertEqual(detect_currency('Amount in KWD'), 'KWD')
        self.assertIsNone(detect_currency('no currency here'))
        self.assertIsNone(detect_currency(''))

    def test_detect_currency_uses_first_match_in_order(self):
        """AED is checked before USD"""
        self.assertEqual(detect_currency('USD or AED accepted'), 'AED')

    def test_to_money(self):
        self.assertEqual(to_money('2.345'), Decimal('2.35'))
        self.assertEqual(to_money(None), Decimal('0.00'))


class AmountInWordsTests(TestCase):
    """Test amount to words conversion"""

    def test_small_numbers(self):
        self.assertEqual(number_to_words(0), 'Zero')
        self.assertEqual(number_to_words(7), 'Seven')
        self.assertEqual(number_to_words(21), 'Twenty-One')
        self.assertEqual(number_to_words(40), 'Forty')

    def test_hundreds_and_thousands(self):
        self.assertEqual(number_to_words(305), 'Three Hundred Five')
        self.assertEqual(number_to_words(1250), 'One Thousand Two Hundred Fifty')

    def test_lakh_and_million_scale(self):
        self.assertEqual(number_to_words(150000), 'One Lakh Fifty Thousand')
        self.assertEqual(number_to_words(2500000), 'Two Million Five Lakh')

    def test_amount_with_cents(self):
        self.assertEqual(
            amount_in_words(Decimal('1250.50'), 'AED'),
            'One Thousand Two Hundred Fifty Dirhams and Fifty Cents'
        )

    def test_singular_currency_and_cent(self):
        self.assertEqual(amount_in_words(Decimal('1.01'), 'USD'), 'One Dollar and One Cent')

    def test_other_currency_appended(self):
        self.assertEqual(amount_in_words(10, 'EUR'), 'Ten EUR')

    def test_negative_amount_rejected(self):
        with self.assertRaises(ValueError):
            amount_in_words(Decimal('-1.00'))


class NumberingTests(TestCase):
    """Test document number generation"""

    def setUp(self):
        self.today = date(2026, 10, 19)

    def test_first_quotation_number_of_day(self):
        self.assertEqual(next_quotation_number(self.today), 'ALK 19-10-2026-100000')

    def test_quotation_serial_steps_by_two(self):
        TestDataFactory.create_quotation(quotation_number='ALK 19-10-2026-100000')
        self.assertEqual(next_quotation_number(self.today), 'ALK 19-10-2026-100002')

    def test_odd_serial_steps_to_even(self):
        TestDataFactory.create_quotation(quotation_number='ALK 19-10-2026-100003')
        self.assertEqual(next_quotation_number(self.today), 'ALK 19-10-2026-100004')

    def test_other_days_ignored(self):
        TestDataFactory.create_quotation(quotation_number='ALK 18-10-2026-100010')
        self.assertEqual(next_quotation_number(self.today), 'ALK 19-10-2026-100000')

    def test_last_serial_of_day(self):
        TestDataFactory.create_quotation(quotation_number='ALK 19-10-2026-999997')
        self.assertEqual(next_quotation_number(self.today), 'ALK 19-10-2026-999998')

    def test_serials_exhausted(self):
        TestDataFactory.create_quotation(quotation_number='ALK 19-10-2026-999998')
        with self.assertRaises(ValidationError):
            next_quotation_number(self.today)

    def test_document_number_sequence(self):
        self.assertEqual(
            next_document_number('INQ', CustomerInquiry, 'inquiry_number', self.today),
            'INQ-20261019-0001'
        )
        TestDataFactory.create_inquiry(inquiry_number='INQ-20261019-0007')
        self.assertEqual(
            next_document_number('INQ', CustomerInquiry, 'inquiry_number', self.today),
            'INQ-20261019-0008'
        )


class CacheUtilsTests(TestCase):
    """Test cache helpers against the non-Redis test cache"""

    def test_make_cache_key_is_stable(self):
        key = make_cache_key('material_forecast', 'WT-001')
        self.assertTrue(key.startswith('material_forecast:'))
        self.assertEqual(key, make_cache_key('material_forecast', 'WT-001'))
        self.assertNotEqual(key, make_cache_key('material_forecast', 'VB-002'))

    def test_cached_query_returns_result(self):
        calls = []

        @cached_query(cache_ttl=60, key_prefix="test_query")
        def compute(value):
            calls.append(value)
            return value * 2

        self.assertEqual(compute(3), 6)
        self.assertEqual(calls, [3])

    def test_pattern_invalidation_skipped_without_redis(self):
        invalidate_dashboard_cache()

    def test_purchase_order_change_invalidates_caches(self):
        with mock.patch('po_processor.core.cache_signals.invalidate_dashboard_cache') as dashboard, \
                mock.patch('po_processor.core.cache_signals.invalidate_forecast_cache') as forecast:
            with self.captureOnCommitCallbacks(execute=True):
                TestDataFactory.create_purchase_order()
        self.assertTrue(dashboard.called)
        self.assertTrue(forecast.called)

    def test_material_change_does_not_invalidate(self):
        with mock.patch('po_processor.core.cache_signals.invalidate_dashboard_cache') as dashboard:
            with self.captureOnCommitCallbacks(execute=True):
                TestDataFactory.create_material()
        self.assertFalse(dashboard.called)


class AuditLogTests(TestCase):
    """Test audit log helper and endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_audit_log(self):
        log = create_audit_log(
            user=self.user, action='create', model_name='PurchaseOrder',
            object_id=5, object_reference='PO-5', changes={'total_amount': '10.00'}
        )
        self.assertIsNotNone(log)
        self.assertEqual(log.object_id, '5')
        self.assertEqual(log.object_reference, 'PO-5')

    def test_create_audit_log_missing_fields(self):
        self.assertIsNone(create_audit_log(user=self.user, model_name='PurchaseOrder', object_id=1))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_non_staff_sees_own_logs(self):
        create_audit_log(user=self.user, action='create', model_name='Quotation', object_id=1)
        create_audit_log(user=self.other, action='create', model_name='Quotation', object_id=2)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['object_id'], '1')

    def test_filter_by_action(self):
        create_audit_log(user=self.user, action='create', model_name='Quotation', object_id=1)
        create_audit_log(user=self.user, action='delete', model_name='Quotation', object_id=1)
        response = self.client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(len(response.data), 1)

    def test_other_users_log_forbidden(self):
        log = create_audit_log(user=self.other, action='create', model_name='Quotation', object_id=2)
        response = self.client.get(f'/api/v1/audit-logs/{log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AuthAPITests(TestCase):
    """Test authentication endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='operator', password='testpass123')
        self.client = AuthenticatedAPIClient()

    def test_login(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'operator', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'operator')

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'operator', 'password': 'wrong'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'operator')
        self.assertFalse(response.data['is_admin'])

    def test_register(self):
        data = {
            'username': 'newbuyer',
            'email': 'newbuyer@test.com',
            'password': 'Procure!2026x',
            'password_confirm': 'Procure!2026x',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertTrue(User.objects.get(username='newbuyer').check_password('Procure!2026x'))

    def test_register_password_mismatch(self):
        data = {
            'username': 'newbuyer',
            'password': 'Procure!2026x',
            'password_confirm': 'Different!2026x',
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AdministrationAPITests(TestCase):
    """Test user and setting administration"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()

    def test_users_require_admin(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_lists_users(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_admin_cannot_delete_self(self):
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_setting_crud(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/settings/', {'key': 'company_name', 'value': 'Alkhaleej'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        setting_id = response.data['id']

        response = self.client.patch(f'/api/v1/settings/{setting_id}/', {'value': 'Alkhaleej LLC'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Setting.objects.get(pk=setting_id).value, 'Alkhaleej LLC')

        response = self.client.delete(f'/api/v1/settings/{setting_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class GlobalSearchAPITests(TestCase):
    """Test search across pipeline documents"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_empty_query(self):
        response = self.client.get('/api/v1/search/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['inquiries'], [])
        self.assertEqual(response.data['delivery_documents'], [])

    def test_search_by_customer_and_number(self):
        TestDataFactory.create_inquiry(customer_name='Acme Trading')
        TestDataFactory.create_quotation(customer_name='Acme Trading')
        TestDataFactory.create_purchase_order(po_number='PO-77120', customer_name='Gulf Pipes')
        TestDataFactory.create_supplier_order(supplier_name='Acme Supplies')

        response = self.client.get('/api/v1/search/?q=acme')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['inquiries']), 1)
        self.assertEqual(len(response.data['quotations']), 1)
        self.assertEqual(len(response.data['supplier_orders']), 1)
        self.assertEqual(len(response.data['purchase_orders']), 0)

        response = self.client.get('/api/v1/search/?q=77120')
        self.assertEqual(len(response.data['purchase_orders']), 1)


class StatusDisplayAPITests(TestCase):
    """Test the status display endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_single_status(self):
        response = self.client.get('/api/v1/display/status/?kind=supplier_order&status=in_transit')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['label'], 'In Transit')
        self.assertEqual(response.data['color'], 'purple')

    def test_unknown_kind(self):
        response = self.client.get('/api/v1/display/status/?kind=invoice&status=paid')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_whole_table(self):
        response = self.client.get('/api/v1/display/status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('delivery_status', response.data)

    def test_one_kind(self):
        response = self.client.get('/api/v1/display/status/?kind=delivery_status')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([entry['status'] for entry in response.data['delivery_status']], ['draft', 'generated', 'sent'])


class CreateDefaultAdminCommandTests(TestCase):
    """Test the create_default_admin management command"""

    def test_creates_admin_when_no_users(self):
        call_command('create_default_admin', stdout=StringIO())
        admin = User.objects.get(username='admin')
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password('admin123'))

    def test_skips_when_users_exist(self):
        TestDataFactory.create_user()
        call_command('create_default_admin', stdout=StringIO())
        self.assertFalse(User.objects.filter(username='admin').exists())
