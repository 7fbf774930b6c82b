"""
Management command to rebuild stock balances from the movement log.

Usage:
    python manage.py reconcile_stock
    python manage.py reconcile_stock --warehouse WH001
    python manage.py reconcile_stock --dry-run
"""

from django.core.management.base import BaseCommand

from stockledger import ledger
from stockledger.models import StockRecord


class Command(BaseCommand):
    """Reconcile stock records command."""

    help = 'Replays the movement log of every stock record and fixes drifted balances'

    def add_arguments(self, parser):
        parser.add_argument(
            '--warehouse',
            help='Only reconcile this warehouse code',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report drift without correcting it',
        )

    def handle(self, *args, **options):
        records = StockRecord.objects.select_related('item', 'warehouse').order_by('pk')
        if options['warehouse']:
            records = records.filter(warehouse__code=options['warehouse'])

        drifted = 0
        for record in records.iterator():
            balance, changed = ledger.reconcile(
                record.item, record.warehouse, dry_run=options['dry_run']
            )
            if changed:
                drifted += 1
                self.stdout.write(
                    f'{record.item.code}@{record.warehouse.code}: '
                    f'log on_hand={balance.on_hand} reserved={balance.reserved}'
                )

        if options['dry_run']:
            self.stdout.write(f'{drifted} record(s) would be corrected')
        else:
            self.stdout.write(self.style.SUCCESS(f'{drifted} record(s) corrected'))
