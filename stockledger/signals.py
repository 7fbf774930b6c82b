"""
Signals emitted by Stock Ledger.

low_stock_detected is the alert sink: connect a receiver to forward
StockAlert objects to notifications, purchasing, dashboards, etc.

    from stockledger.signals import low_stock_detected

    @receiver(low_stock_detected)
    def on_low_stock(sender, alert, **kwargs):
        notify_buyer(alert.item, alert.warehouse, alert.deficit)
"""

import logging

from django.dispatch import Signal

logger = logging.getLogger('stockledger')

# Sent with: alert (StockAlert)
low_stock_detected = Signal()


def notify_low_stock(alert) -> None:
    """Log and dispatch one low-stock alert."""
    logger.warning("stock.alert.low_stock", extra=alert.as_dict())
    low_stock_detected.send(sender=alert.__class__, alert=alert)
