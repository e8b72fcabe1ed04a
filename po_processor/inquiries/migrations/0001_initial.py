import django.db.models.deletion
import django.utils.timezone
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CustomerInquiry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('inquiry_number', models.CharField(max_length=100, unique=True)),
                ('inquiry_date', models.DateField(default=django.utils.timezone.localdate)),
                ('customer_name', models.CharField(max_length=255)),
                ('customer_address', models.TextField(blank=True)),
                ('customer_email', models.CharField(blank=True, max_length=255)),
                ('customer_phone', models.CharField(blank=True, max_length=50)),
                ('sender_email', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('pdf_path', models.CharField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('reviewed', 'Reviewed'), ('quoted', 'Quoted'), ('partially_quoted', 'Partially Quoted'), ('converted_to_po', 'Converted to PO')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inquiries', to=settings.AUTH_USER_MODEL)),
                ('purchase_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inquiries', to='orders.purchaseorder')),
            ],
            options={
                'verbose_name_plural': 'customer inquiries',
                'db_table': 'customer_inquiries',
                'ordering': ['-inquiry_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_inquiry_status'),
                    models.Index(fields=['customer_name'], name='idx_inquiry_customer'),
                    models.Index(fields=['-inquiry_date', '-created_at'], name='idx_inquiry_date_created'),
                ],
            },
        ),
        migrations.CreateModel(
            name='InquiryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=255)),
                ('item_code', models.CharField(blank=True, max_length=100)),
                ('description', models.TextField(blank=True)),
                ('quantity', models.DecimalField(decimal_places=2, default=Decimal('1.00'), max_digits=12)),
                ('unit', models.CharField(default='EA', max_length=20)),
                ('manufacturer_part', models.CharField(blank=True, max_length=255)),
                ('class_code', models.CharField(blank=True, max_length=100)),
                ('plant', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('quoted', 'Quoted')], default='pending', max_length=20)),
                ('inquiry', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='inquiries.customerinquiry')),
            ],
            options={
                'db_table': 'inquiry_items',
                'ordering': ['id'],
            },
        ),
    ]
