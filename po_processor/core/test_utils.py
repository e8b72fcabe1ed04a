"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from po_processor.delivery.models import DeliveryDocument, DeliveryItem
from po_processor.inquiries.models import CustomerInquiry, InquiryItem
from po_processor.inventory.models import InventoryMaterial
from po_processor.orders.models import PurchaseOrder, LineItem
from po_processor.purchasing.models import SupplierOrder, SupplierOrderItem
from po_processor.quotations.models import Quotation, QuotationItem
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_purchase_order(po_number=None, po_date=None, expiry_date=None, customer_name='Test Customer',
                              total_amount=Decimal('0.00'), user=None, created_at=None):
        """Create a test purchase order; expires 30 days after the PO date by default"""
        if not po_number:
            po_number = f'PO-{TestDataFactory.random_string(8).upper()}'
        po_date = po_date or timezone.localdate()
        expiry_date = expiry_date or po_date + timedelta(days=30)
        purchase_order = PurchaseOrder.objects.create(
            po_number=po_number,
            po_date=po_date,
            expiry_date=expiry_date,
            customer_name=customer_name,
            total_amount=total_amount,
            created_by=user
        )
        if created_at:
            # auto_now_add ignores explicit values on create
            PurchaseOrder.objects.filter(pk=purchase_order.pk).update(created_at=created_at)
            purchase_order.refresh_from_db()
        return purchase_order

    @staticmethod
    def create_line_item(purchase_order, item_name=None, item_code='', quantity=Decimal('1.00'),
                         unit='pcs', unit_price=Decimal('10.00')):
        """Create a test purchase order line item"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        return LineItem.objects.create(
            purchase_order=purchase_order,
            item_name=item_name,
            item_code=item_code,
            quantity=quantity,
            unit=unit,
            unit_price=unit_price,
            total=quantity * unit_price
        )

    @staticmethod
    def create_inquiry(inquiry_number=None, customer_name='Test Customer', status='pending', user=None):
        """Create a test customer inquiry"""
        if not inquiry_number:
            inquiry_number = f'INQ-{TestDataFactory.random_string(8).upper()}'
        return CustomerInquiry.objects.create(
            inquiry_number=inquiry_number,
            customer_name=customer_name,
            customer_email='buyer@test.com',
            status=status,
            created_by=user
        )

    @staticmethod
    def create_inquiry_item(inquiry, item_name=None, item_code='', quantity=Decimal('1.00'), status='pending'):
        """Create a test inquiry item"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        return InquiryItem.objects.create(
            inquiry=inquiry,
            item_name=item_name,
            item_code=item_code,
            quantity=quantity,
            status=status
        )

    @staticmethod
    def create_quotation(quotation_number=None, quotation_date=None, validity_date=None, customer_name='Test Customer',
                         status='draft', inquiry=None, vat_percent=Decimal('5.00'), user=None):
        """Create a test quotation valid for 30 days"""
        if not quotation_number:
            quotation_number = f'QT-{TestDataFactory.random_string(8).upper()}'
        quotation_date = quotation_date or timezone.localdate()
        return Quotation.objects.create(
            quotation_number=quotation_number,
            quotation_date=quotation_date,
            validity_date=validity_date or quotation_date + timedelta(days=30),
            customer_name=customer_name,
            status=status,
            inquiry=inquiry,
            vat_percent=vat_percent,
            created_by=user
        )

    @staticmethod
    def create_quotation_item(quotation, item_name=None, item_code='', quantity=Decimal('1.00'),
                              unit_price=Decimal('0.00')):
        """Create a test quotation item; priced when unit_price is positive"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        priced = unit_price > 0
        return QuotationItem.objects.create(
            quotation=quotation,
            item_name=item_name,
            item_code=item_code,
            quantity=quantity,
            unit_price=unit_price,
            total=quantity * unit_price,
            is_priced=priced,
            status='ready' if priced else 'pending'
        )

    @staticmethod
    def create_supplier_order(order_number=None, supplier_name='Test Supplier', status='pending',
                              purchase_order=None, user=None):
        """Create a test supplier order"""
        if not order_number:
            order_number = f'SO-{TestDataFactory.random_string(8).upper()}'
        return SupplierOrder.objects.create(
            order_number=order_number,
            supplier_name=supplier_name,
            status=status,
            purchase_order=purchase_order,
            created_by=user
        )

    @staticmethod
    def create_supplier_order_item(supplier_order, item_name=None, quantity=Decimal('1.00'), unit_price=Decimal('10.00')):
        """Create a test supplier order item"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        return SupplierOrderItem.objects.create(
            supplier_order=supplier_order,
            item_name=item_name,
            quantity=quantity,
            unit_price=unit_price,
            total=quantity * unit_price
        )

    @staticmethod
    def create_delivery_document(document_number=None, customer_name='Test Customer', document_type='both',
                                 status='draft', purchase_order=None, supplier_order=None, user=None):
        """Create a test delivery document"""
        if not document_number:
            document_number = f'DOC-{TestDataFactory.random_string(8).upper()}'
        return DeliveryDocument.objects.create(
            document_number=document_number,
            customer_name=customer_name,
            document_type=document_type,
            status=status,
            purchase_order=purchase_order,
            supplier_order=supplier_order,
            created_by=user
        )

    @staticmethod
    def create_delivery_item(document, item_name=None, quantity=Decimal('1.00'), unit_price=Decimal('10.00')):
        """Create a test delivery item"""
        if not item_name:
            item_name = f'Item_{TestDataFactory.random_string(6)}'
        return DeliveryItem.objects.create(
            document=document,
            item_name=item_name,
            quantity=quantity,
            unit_price=unit_price,
            total=quantity * unit_price
        )

    @staticmethod
    def create_material(material_code=None, material_name=None, current_stock=Decimal('100.00'),
                        predicted_demand=Decimal('100.00')):
        """Create a test inventory material"""
        if not material_code:
            material_code = f'MAT-{TestDataFactory.random_string(6).upper()}'
        return InventoryMaterial.objects.create(
            material_code=material_code,
            material_name=material_name or f'Material {material_code}',
            current_stock=current_stock,
            predicted_demand=predicted_demand
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
