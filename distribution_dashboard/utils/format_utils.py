# distribution_dashboard/utils/format_utils.py
"""Display strings for amounts and statuses."""

RUPEE = '₹'


def format_lakhs(amount: float) -> str:
    """Format an amount in lakhs, e.g. 250000 -> '₹2.5L'."""
    return f"{RUPEE}{(amount or 0) / 100000:.1f}L"


def format_thousands(amount: float) -> str:
    """Format an amount in thousands, e.g. 12500 -> '₹12K'."""
    return f"{RUPEE}{(amount or 0) / 1000:.0f}K"


def format_rupees(amount: float) -> str:
    """Format an amount with Indian digit grouping, e.g. 1250000 -> '₹12,50,000'."""
    amount = amount or 0
    sign = '-' if amount < 0 else ''
    whole, _, fraction = f"{abs(amount):.2f}".partition('.')

    # Last three digits, then groups of two
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ','.join(groups + [tail])

    if fraction == '00':
        return f"{sign}{RUPEE}{grouped}"
    return f"{sign}{RUPEE}{grouped}.{fraction}"


def status_label(status) -> str:
    """Display label of an order status, e.g. 'out_for_delivery' -> 'OUT FOR DELIVERY'."""
    value = getattr(status, 'value', status) or ''
    return str(value).replace('_', ' ').upper()
