"""
Management command to list records at or below their reorder point.

Usage:
    python manage.py scan_low_stock
    python manage.py scan_low_stock --warehouse WH001
    python manage.py scan_low_stock --notify
"""

from django.core.management.base import BaseCommand, CommandError

from stockledger import ledger
from stockledger.exceptions import NotFound


class Command(BaseCommand):
    """Scan for low stock command."""

    help = 'Lists stock records whose available quantity is at or below the reorder point'

    def add_arguments(self, parser):
        parser.add_argument(
            '--warehouse',
            help='Only scan this warehouse code',
        )
        parser.add_argument(
            '--notify',
            action='store_true',
            help='Also send low_stock_detected for every alert',
        )

    def handle(self, *args, **options):
        warehouse = options['warehouse']
        try:
            if options['notify']:
                alerts = ledger.check_low_stock(warehouse)
            else:
                alerts = list(ledger.scan_low_stock(warehouse))
        except NotFound as e:
            raise CommandError(str(e)) from e

        for alert in alerts:
            self.stdout.write(
                f'{alert.item}@{alert.warehouse}: available {alert.quantity_available} '
                f'<= reorder point {alert.reorder_point} (deficit {alert.deficit})'
            )

        self.stdout.write(
            self.style.WARNING(f'{len(alerts)} low stock record(s)')
            if alerts else self.style.SUCCESS('No low stock')
        )
