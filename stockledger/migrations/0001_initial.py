"""
Initial migration for Stock Ledger models.
"""

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stock Ledger models: Item, Warehouse, StockRecord, Movement."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=100, unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('item_type', models.CharField(choices=[('STOCK', 'Stock'), ('ASSET', 'Asset')], default='STOCK', max_length=50, verbose_name='Type')),
                ('usage_type', models.CharField(default='CONSUMABLE', max_length=50, verbose_name='Usage type')),
                ('unit', models.CharField(default='PCS', max_length=50, verbose_name='Unit of measure')),
                ('is_loanable', models.BooleanField(default=False, verbose_name='Loanable')),
                ('requires_return', models.BooleanField(default=False, verbose_name='Requires return')),
                ('max_loan_duration_days', models.PositiveIntegerField(default=30, verbose_name='Max loan duration (days)')),
                ('standard_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Standard cost')),
                ('last_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Last cost')),
                ('average_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Average cost')),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20, verbose_name='Status')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Items',
                'ordering': ['code'],
                'indexes': [models.Index(fields=['item_type'], name='item_type_idx')],
            },
        ),
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(help_text='Unique identifier (e.g. WH001)', max_length=50, unique=True, verbose_name='Code')),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('warehouse_type', models.CharField(default='STANDARD', max_length=50, verbose_name='Type')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Warehouse',
                'verbose_name_plural': 'Warehouses',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='StockRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity_on_hand', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=15, verbose_name='On hand')),
                ('quantity_reserved', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=15, verbose_name='Reserved')),
                ('min_level', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=15, verbose_name='Min level')),
                ('max_level', models.DecimalField(decimal_places=4, default=Decimal('0'), max_digits=15, verbose_name='Max level')),
                ('reorder_point', models.DecimalField(decimal_places=4, default=Decimal('0'), help_text='Replenishment alert when available <= this value', max_digits=15, verbose_name='Reorder point')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Last unit cost')),
                ('average_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Moving average cost')),
                ('last_movement_at', models.DateTimeField(blank=True, null=True, verbose_name='Last movement')),
                ('last_receipt_at', models.DateTimeField(blank=True, null=True, verbose_name='Last receipt')),
                ('last_issue_at', models.DateTimeField(blank=True, null=True, verbose_name='Last issue')),
                ('last_sequence', models.PositiveBigIntegerField(default=0, verbose_name='Last movement sequence')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_records', to='stockledger.item', verbose_name='Item')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_records', to='stockledger.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock record',
                'verbose_name_plural': 'Stock records',
                'indexes': [models.Index(fields=['warehouse', 'reorder_point'], name='stock_warehouse_reorder_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('item', 'warehouse'), name='unique_stock_record_key'),
                    models.CheckConstraint(condition=models.Q(('quantity_on_hand__gte', 0)), name='stock_on_hand_non_negative'),
                    models.CheckConstraint(condition=models.Q(('quantity_reserved__gte', 0)), name='stock_reserved_non_negative'),
                    models.CheckConstraint(condition=models.Q(('quantity_reserved__lte', models.F('quantity_on_hand'))), name='stock_reserved_within_on_hand'),
                    models.CheckConstraint(condition=models.Q(('max_level__gte', 0), ('min_level__gte', 0), ('reorder_point__gte', 0)), name='stock_levels_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sequence', models.PositiveBigIntegerField(verbose_name='Sequence')),
                ('movement_type', models.CharField(choices=[('RECEIPT', 'Receipt'), ('ISSUE', 'Issue'), ('RESERVE', 'Reserve'), ('RELEASE', 'Release'), ('ADJUSTMENT', 'Adjustment')], max_length=20, verbose_name='Type')),
                ('on_hand_delta', models.DecimalField(decimal_places=4, help_text='Positive = in, negative = out', max_digits=15, verbose_name='On hand delta')),
                ('reserved_delta', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='Reserved delta')),
                ('on_hand_after', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='On hand after')),
                ('reserved_after', models.DecimalField(decimal_places=4, max_digits=15, verbose_name='Reserved after')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Unit cost')),
                ('average_cost_after', models.DecimalField(blank=True, decimal_places=4, max_digits=15, null=True, verbose_name='Average cost after')),
                ('actor', models.CharField(max_length=150, verbose_name='Actor')),
                ('reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Reason')),
                ('reference', models.CharField(blank=True, db_index=True, default='', help_text='External context, e.g. order number or deduplication key', max_length=255, verbose_name='Reference')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('record', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockledger.stockrecord', verbose_name='Stock record')),
            ],
            options={
                'verbose_name': 'Movement',
                'verbose_name_plural': 'Movements',
                'ordering': ['record', 'sequence'],
                'indexes': [models.Index(fields=['movement_type', 'timestamp'], name='movement_type_time_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('record', 'sequence'), name='unique_movement_sequence'),
                ],
            },
        ),
    ]
