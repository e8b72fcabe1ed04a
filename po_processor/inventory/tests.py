"""
Test suite for Inventory module
Tests: stock status, health scoring, recommendations, what-if analysis and seeding
"""
from decimal import Decimal
from io import StringIO

from django.conf import settings
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status

from po_processor.core.models import AuditLog
from po_processor.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from po_processor.inventory import health
from po_processor.inventory.models import InventoryMaterial


class InventoryHealthTests(TestCase):
    """Test health scoring and recommendations"""

    def test_stock_status(self):
        material = TestDataFactory.create_material(current_stock=Decimal('80'), predicted_demand=Decimal('100'))
        self.assertEqual(material.delta, Decimal('-20'))
        self.assertEqual(material.stock_status, 'Understock')
        material.current_stock = Decimal('100')
        self.assertEqual(material.stock_status, 'Surplus')

    def test_understock_score(self):
        result = health.compute_health(1870, 1280 - 1870)
        self.assertAlmostEqual(result['health_score'], 50 - 590 / 1870 * 50 - 85 / 1870 * 25 - 5.5)
        self.assertEqual(result['health_label'], 'At Risk')
        self.assertEqual(result['display'], '28% At Risk')

    def test_surplus_score(self):
        result = health.compute_health(300, 150)
        self.assertAlmostEqual(result['health_score'], 75 - 85 / 300 * 25 - 5.5)
        self.assertEqual(result['display'], '62% Moderate')

    def test_surplus_bonus_is_capped(self):
        capped = health.compute_health(100, 60)
        larger = health.compute_health(100, 500)
        self.assertEqual(capped['health_score'], larger['health_score'])

    def test_empty_stock_is_critical(self):
        result = health.compute_health(100, -100)
        self.assertEqual(result['health_score'], 0.0)
        self.assertEqual(result['display'], '0% Critical')

    def test_zero_demand(self):
        result = health.compute_health(0, 0)
        self.assertAlmostEqual(result['health_score'], 50 - 25 - 5.5)

    def test_labels(self):
        self.assertEqual(health.health_label(75), 'Healthy')
        self.assertEqual(health.health_label(74.9), 'Moderate')
        self.assertEqual(health.health_label(50), 'Moderate')
        self.assertEqual(health.health_label(25), 'At Risk')
        self.assertEqual(health.health_label(24.9), 'Critical')

    def test_recommendations_for_understock(self):
        recs = health.recommendations(80, 100, -20)
        self.assertEqual([rec['category'] for rec in recs], ['stock_level', 'dead_stock'])
        self.assertEqual(recs[0]['priority'], 'high')
        self.assertIn('Delta = -20', recs[0]['description'])

    def test_recommendations_when_aligned(self):
        config = {**settings.PO_PROCESSOR, 'INVENTORY_DEAD_STOCK_UNITS': 0}
        with self.settings(PO_PROCESSOR=config):
            recs = health.recommendations(120, 100, 20)
        self.assertEqual(len(recs), 1)
        self.assertEqual(recs[0]['category'], 'monitoring')

    def test_trend(self):
        trend = health.past_month_trend(100)
        self.assertEqual([week['label'] for week in trend], ['Week 1', 'Week 2', 'Week 3', 'Week 4'])
        for week, expected in zip(trend, [22.5, 23.75, 25.0, 26.25]):
            self.assertAlmostEqual(week['consumption'], expected)

    def test_analyze_with_override(self):
        material = TestDataFactory.create_material(current_stock=Decimal('50'), predicted_demand=Decimal('100'))
        result = health.analyze(material, Decimal('150'))
        self.assertTrue(result['is_override'])
        self.assertEqual(result['current_stock'], 150.0)
        self.assertEqual(result['delta'], 50.0)
        self.assertEqual(result['status'], 'Surplus')
        self.assertEqual(result['modifiers'], {'dead_stock_units': 85.0, 'wastage_percent': 2.2})

        material.refresh_from_db()
        self.assertEqual(material.current_stock, Decimal('50.00'))


class InventoryAPITests(TestCase):
    """Test inventory material endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_material(self):
        data = {
            'material_name': 'Water Tap',
            'material_code': 'WT-001',
            'current_stock': '1280',
            'predicted_demand': '1870',
        }
        response = self.client.post('/api/v1/inventory/materials/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['delta'], '-590.00')
        self.assertEqual(response.data['stock_status'], 'Understock')
        self.assertEqual(response.data['status_display']['color'], 'orange')
        self.assertEqual(response.data['health']['health_label'], 'At Risk')
        self.assertTrue(AuditLog.objects.filter(model_name='InventoryMaterial', action='create').exists())

    def test_create_duplicate_code(self):
        TestDataFactory.create_material(material_code='WT-001')
        data = {'material_name': 'Tap', 'material_code': 'WT-001', 'current_stock': '1', 'predicted_demand': '1'}
        response = self.client.post('/api/v1/inventory/materials/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_negative_stock_rejected(self):
        data = {'material_name': 'Tap', 'material_code': 'WT-009', 'current_stock': '-1', 'predicted_demand': '1'}
        response = self.client.post('/api/v1/inventory/materials/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_and_search(self):
        TestDataFactory.create_material(material_code='VB-002', material_name='V-Belt')
        TestDataFactory.create_material(material_code='GL-003', material_name='Gloves')

        response = self.client.get('/api/v1/inventory/materials/')
        self.assertEqual([row['material_code'] for row in response.data], ['GL-003', 'VB-002'])

        response = self.client.get('/api/v1/inventory/materials/?search=belt')
        self.assertEqual(len(response.data), 1)

    def test_update_stock(self):
        material = TestDataFactory.create_material(current_stock=Decimal('10'), predicted_demand=Decimal('100'))
        response = self.client.post(
            f'/api/v1/inventory/materials/{material.id}/stock/', {'current_stock': '120'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock_status'], 'Surplus')

        log = AuditLog.objects.get(model_name='InventoryMaterial', action='stock_update')
        self.assertEqual(log.changes, {'old_stock': '10.00', 'new_stock': '120.00'})

    def test_patch_demand(self):
        material = TestDataFactory.create_material(current_stock=Decimal('100'), predicted_demand=Decimal('50'))
        response = self.client.patch(
            f'/api/v1/inventory/materials/{material.id}/', {'predicted_demand': '150'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock_status'], 'Understock')

    def test_analysis(self):
        material = TestDataFactory.create_material(current_stock=Decimal('80'), predicted_demand=Decimal('100'))
        response = self.client.get(f'/api/v1/inventory/materials/{material.id}/analysis/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_override'])
        self.assertEqual(response.data['status'], 'Understock')
        self.assertEqual(len(response.data['trend']), 4)

    def test_what_if_analysis(self):
        material = TestDataFactory.create_material(current_stock=Decimal('80'), predicted_demand=Decimal('100'))
        response = self.client.get(f'/api/v1/inventory/materials/{material.id}/analysis/?current_stock=140')
        self.assertTrue(response.data['is_override'])
        self.assertEqual(response.data['delta'], 40.0)

        response = self.client.get(f'/api/v1/inventory/materials/{material.id}/analysis/?current_stock=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete(self):
        material = TestDataFactory.create_material()
        response = self.client.delete(f'/api/v1/inventory/materials/{material.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(InventoryMaterial.objects.filter(pk=material.id).exists())

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/inventory/materials/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class SeedInventoryCommandTests(TestCase):
    """Test the seed_inventory_materials command"""

    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command('seed_inventory_materials', stdout=out)
        self.assertIn('4 created, 0 reset', out.getvalue())
        self.assertEqual(InventoryMaterial.objects.count(), 4)

        out = StringIO()
        call_command('seed_inventory_materials', stdout=out)
        self.assertIn('0 created, 0 reset', out.getvalue())

    def test_reset(self):
        call_command('seed_inventory_materials', stdout=StringIO())
        InventoryMaterial.objects.filter(material_code='WT-001').update(current_stock=Decimal('1'))

        out = StringIO()
        call_command('seed_inventory_materials', '--reset', stdout=out)

        self.assertIn('0 created, 4 reset', out.getvalue())
        self.assertEqual(InventoryMaterial.objects.get(material_code='WT-001').current_stock, Decimal('1280.00'))
