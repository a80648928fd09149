"""
Report period resolution.

Every report accepts either a named `period` or an explicit
`from_date`/`to_date` pair (YYYY-MM-DD). Named periods are calendar based.
"""
import calendar
from datetime import date, datetime

from django.db.models import Min

from backend.core.utils import today

PERIOD_CHOICES = [
    'this-month', 'last-month', 'this-quarter', 'last-quarter',
    'this-year', 'last-year', 'all-time',
]
DEFAULT_PERIOD = 'this-month'


class PeriodError(ValueError):
    pass


def month_start(day):
    return day.replace(day=1)


def month_end(day):
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def shift_months(day, months):
    """Move a date by whole months, clamping the day to the target month's length"""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def quarter_start(day):
    return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)


def iter_months(from_date, to_date):
    """First day of every month touched by [from_date, to_date]"""
    current = month_start(from_date)
    while current <= to_date:
        yield current
        current = shift_months(current, 1)


def earliest_activity_date():
    """First date anything financial happened; used for the all-time period"""
    from backend.billing.models import Invoice, Payment
    from backend.expenses.models import Expense
    from backend.team.models import SalaryPayment

    candidates = [
        Invoice.objects.aggregate(first=Min('issue_date'))['first'],
        Payment.objects.aggregate(first=Min('payment_date'))['first'],
        Expense.objects.aggregate(first=Min('expense_date'))['first'],
    ]
    first_month = SalaryPayment.objects.aggregate(first=Min('month'))['first']
    if first_month:
        candidates.append(datetime.strptime(first_month, '%Y-%m').date())
    candidates = [c for c in candidates if c]
    return min(candidates) if candidates else month_start(today())


def named_period(name, reference=None):
    """(from_date, to_date, label) for a named period"""
    now = reference or today()

    if name == 'this-month':
        start = month_start(now)
        return start, month_end(now), start.strftime('%B %Y')
    if name == 'last-month':
        start = shift_months(month_start(now), -1)
        return start, month_end(start), start.strftime('%B %Y')
    if name == 'this-quarter':
        start = quarter_start(now)
        end = month_end(shift_months(start, 2))
        return start, end, f"Q{(start.month - 1) // 3 + 1} {start.year}"
    if name == 'last-quarter':
        start = shift_months(quarter_start(now), -3)
        end = month_end(shift_months(start, 2))
        return start, end, f"Q{(start.month - 1) // 3 + 1} {start.year}"
    if name == 'this-year':
        return date(now.year, 1, 1), date(now.year, 12, 31), str(now.year)
    if name == 'last-year':
        return date(now.year - 1, 1, 1), date(now.year - 1, 12, 31), str(now.year - 1)
    if name == 'all-time':
        return earliest_activity_date(), now, 'All Time'
    raise PeriodError(f"Unknown period '{name}'. Choose one of: {', '.join(PERIOD_CHOICES)}")


def _parse_date(value, field):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise PeriodError(f"{field} must be in YYYY-MM-DD format")


def resolve_period(query_params):
    """
    Work out the reporting window from request query params.

    Explicit dates win over `period`; a missing side of an explicit range
    falls back to the matching side of this month.
    """
    from_date = query_params.get('from_date')
    to_date = query_params.get('to_date')

    if from_date or to_date:
        default_from, default_to, _ = named_period(DEFAULT_PERIOD)
        start = _parse_date(from_date, 'from_date') if from_date else default_from
        end = _parse_date(to_date, 'to_date') if to_date else default_to
        if end < start:
            raise PeriodError('to_date cannot be before from_date')
        label = f"{start.strftime('%d %b %Y')} - {end.strftime('%d %b %Y')}"
        return start, end, label

    return named_period(query_params.get('period') or DEFAULT_PERIOD)


def period_payload(from_date, to_date, label):
    return {'from': from_date.isoformat(), 'to': to_date.isoformat(), 'label': label}


def previous_window(from_date, to_date, months):
    """The same window moved back by `months`; month-end dates stay month-end"""
    start = shift_months(from_date, -months)
    end = shift_months(to_date, -months)
    if to_date == month_end(to_date):
        end = month_end(end)
    return start, end
