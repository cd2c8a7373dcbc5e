from .date_utils import parse_timestamp, parse_date, is_same_day, weekday_label
from .math_utils import safe_divide, percentage, sum_values
from .format_utils import format_lakhs, format_thousands, format_rupees, status_label

__all__ = [
    'parse_timestamp',
    'parse_date',
    'is_same_day',
    'weekday_label',
    'safe_divide',
    'percentage',
    'sum_values',
    'format_lakhs',
    'format_thousands',
    'format_rupees',
    'status_label'
]
