"""Display helpers: INR amounts and DD Mon YYYY dates."""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

logger = logging.getLogger(__name__)

RUPEE = '₹'


def _group_indian(digits):
    # 1234567 -> 12,34,567 (last three, then pairs)
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ','.join(pairs + [tail])


def format_inr(amount):
    """Formats an amount as whole rupees, e.g. 125000 -> '₹1,25,000'."""
    if amount is None or amount == '':
        amount = 0
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        logger.warning("Cannot format %r as currency", amount)
        return f"{RUPEE}{amount}"

    rounded = value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if rounded < 0 else ''
    return f"{sign}{RUPEE}{_group_indian(str(abs(int(rounded))))}"


def format_date(value):
    """Formats a date as '05 Oct 2024'; unparsable strings come back unchanged."""
    if not value:
        return ''
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime('%d %b %Y')
    try:
        return date.fromisoformat(str(value)[:10]).strftime('%d %b %Y')
    except ValueError:
        logger.warning("Cannot format %r as a date", value)
        return str(value)
