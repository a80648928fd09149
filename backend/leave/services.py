"""
Leave balances and the leave request workflow.

A balance row exists per (member, leave type, year). used/pending/available
are always derived from the member's requests for that year, never edited
directly, so every state change ends with recalculate_leave_balance().
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from backend.core.exceptions import BusinessRuleError
from backend.core.utils import get_agency_setting, quantize, today
from backend.team.models import JobRole, TeamMember
from .models import LeaveBalance, LeavePolicy, LeaveRequest, LeaveType

logger = logging.getLogger('backend.leave')

ZERO = Decimal('0.00')

# (annual quota, carry-forward limit) per leave type category
CATEGORY_DEFAULTS = {
    'CASUAL': (Decimal('12'), Decimal('3')),
    'SICK': (Decimal('10'), Decimal('0')),
    'EARNED': (Decimal('15'), Decimal('5')),
    'MATERNITY': (Decimal('180'), Decimal('0')),
    'PATERNITY': (Decimal('15'), Decimal('0')),
    'UNPAID': (Decimal('30'), Decimal('0')),
    'COMPENSATORY': (Decimal('10'), Decimal('5')),
    'OTHER': (Decimal('5'), Decimal('0')),
}

DEFAULT_LEAVE_TYPES = [
    {'name': 'Casual Leave', 'code': 'CL', 'category': 'CASUAL', 'description': 'For personal or casual reasons'},
    {'name': 'Sick Leave', 'code': 'SL', 'category': 'SICK', 'description': 'For health-related absences'},
    {'name': 'Earned Leave', 'code': 'EL', 'category': 'EARNED', 'description': 'Accrued leave based on service'},
]


def _days(value):
    """Render a day count without trailing zeros (10, 7.5)"""
    return f"{float(value):g}"


def prorated_quota(annual_quota, joined_date, year):
    """Members who joined during `year` get the remaining months' share"""
    if joined_date is None or joined_date.year != year:
        return quantize(annual_quota)
    remaining_months = 12 - (joined_date.month - 1)
    return quantize(Decimal(annual_quota) * remaining_months / 12)


def annual_quota_for(member, leave_type):
    """Policy quota for the member's job role, else the category default"""
    policy = LeavePolicy.objects.filter(
        job_role__title__iexact=member.role_title,
        leave_type=leave_type,
        is_active=True,
    ).first() if member.role_title else None
    if policy is not None:
        return policy.annual_quota
    default = CATEGORY_DEFAULTS.get(leave_type.category)
    if default:
        return default[0]
    return Decimal(str(get_agency_setting('DEFAULT_LEAVE_QUOTA', 10)))


def _get_or_create_balance(member, leave_type, year):
    balance = LeaveBalance.objects.filter(team_member=member, leave_type=leave_type, year=year).first()
    if balance is not None:
        return balance, False
    quota = prorated_quota(annual_quota_for(member, leave_type), member.joined_date, year)
    balance = LeaveBalance.objects.create(
        team_member=member,
        leave_type=leave_type,
        year=year,
        total_quota=quota,
        carry_forward=ZERO,
        available=quota,
    )
    return balance, True


@transaction.atomic
def initialize_leave_balances_for_member(member, year=None):
    """Create missing balances for every active leave type; returns the new ones"""
    year = year or today().year
    created = []
    for leave_type in LeaveType.objects.filter(is_active=True):
        balance, was_created = _get_or_create_balance(member, leave_type, year)
        if was_created:
            created.append(balance)
    if created:
        logger.info(f"Initialized {len(created)} leave balance(s) for member {member.id} in {year}")
    return created


@transaction.atomic
def reinitialize_leave_balances_for_member(member, year=None):
    """Drop the member's balances for the year and rebuild them from policies"""
    year = year or today().year
    LeaveBalance.objects.filter(team_member=member, year=year).delete()
    balances = initialize_leave_balances_for_member(member, year)
    for balance in balances:
        recalculate_leave_balance(member, balance.leave_type, year)
    return list(LeaveBalance.objects.filter(team_member=member, year=year).select_related('leave_type'))


def reinitialize_all_leave_balances(year=None):
    year = year or today().year
    members = TeamMember.objects.filter(status='ACTIVE')
    total = 0
    for member in members:
        total += len(reinitialize_leave_balances_for_member(member, year))
    logger.info(f"Re-initialized leave balances for {members.count()} active member(s): {total} balance(s)")
    return {'members': members.count(), 'balances': total, 'year': year}


def recalculate_leave_balance(member, leave_type, year):
    """Recompute used/pending/available from the member's requests in `year`"""
    requests = LeaveRequest.objects.filter(
        team_member=member,
        leave_type=leave_type,
        start_date__year=year,
    )
    used = requests.filter(status='APPROVED').aggregate(total=Sum('total_days'))['total'] or ZERO
    pending = requests.filter(status='PENDING').aggregate(total=Sum('total_days'))['total'] or ZERO

    balance, _ = _get_or_create_balance(member, leave_type, year)
    balance.used = used
    balance.pending = pending
    balance.available = balance.compute_available()
    balance.save(update_fields=['used', 'pending', 'available', 'updated_at'])
    return balance


def check_availability(team_member_id, leave_type_id, requested_days, year=None):
    """Whether `requested_days` fit in the member's remaining balance"""
    year = year or today().year
    requested_days = Decimal(str(requested_days))
    leave_type = LeaveType.objects.filter(pk=leave_type_id).first()
    leave_type_name = leave_type.name if leave_type else 'Unknown'

    result = {
        'available': False,
        'balance': 0.0,
        'pending': 0.0,
        'used': 0.0,
        'total_quota': 0.0,
        'requested_days': float(requested_days),
        'shortfall': float(requested_days),
        'leave_type_name': leave_type_name,
    }

    member = TeamMember.objects.filter(pk=team_member_id).first()
    if member is None:
        result['message'] = 'Team member not found'
        return result
    if leave_type is None:
        result['message'] = (
            f"No leave balance found for {leave_type_name}. Please contact HR to set up your leave policy."
        )
        return result

    balance, _ = _get_or_create_balance(member, leave_type, year)
    total_quota = balance.total_quota + balance.carry_forward
    available_balance = max(ZERO, total_quota - balance.used - balance.pending)
    shortfall = max(ZERO, requested_days - available_balance)
    is_available = requested_days <= available_balance

    if is_available:
        message = (
            f"You have {_days(available_balance)} {leave_type_name} days available. "
            f"After this request, you will have {_days(available_balance - requested_days)} days remaining."
        )
    else:
        message = (
            f"Insufficient {leave_type_name} balance. You have {_days(available_balance)} days available "
            f"but requested {_days(requested_days)} days. You are short by {_days(shortfall)} days."
        )

    result.update({
        'available': is_available,
        'balance': float(available_balance),
        'pending': float(balance.pending),
        'used': float(balance.used),
        'total_quota': float(total_quota),
        'shortfall': float(shortfall),
        'message': message,
    })
    return result


@transaction.atomic
def create_leave_request(data):
    """Create a PENDING request after re-checking the balance"""
    member = data['team_member']
    leave_type = data['leave_type']
    year = data['start_date'].year
    availability = check_availability(member.pk, leave_type.pk, data['total_days'], year)
    if not availability['available']:
        raise BusinessRuleError(availability['message'])

    leave_request = LeaveRequest.objects.create(status='PENDING', **data)
    recalculate_leave_balance(member, leave_type, year)
    logger.info(f"Leave request {leave_request.id} created for member {member.id}: {leave_request.total_days} day(s)")
    return leave_request


def _transition(leave_request, new_status):
    if not leave_request.can_transition_to(new_status):
        raise BusinessRuleError(
            f"Cannot change a {leave_request.status.lower()} leave request to {new_status.lower()}."
        )
    leave_request.status = new_status


@transaction.atomic
def approve_leave_request(leave_request, user):
    _transition(leave_request, 'APPROVED')
    leave_request.approved_by = user if user and user.is_authenticated else None
    leave_request.approved_at = timezone.now()
    leave_request.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    recalculate_leave_balance(leave_request.team_member, leave_request.leave_type, leave_request.start_date.year)
    return leave_request


@transaction.atomic
def reject_leave_request(leave_request, reason=''):
    _transition(leave_request, 'REJECTED')
    leave_request.rejection_reason = reason or ''
    leave_request.save(update_fields=['status', 'rejection_reason', 'updated_at'])
    recalculate_leave_balance(leave_request.team_member, leave_request.leave_type, leave_request.start_date.year)
    return leave_request


@transaction.atomic
def cancel_leave_request(leave_request):
    _transition(leave_request, 'CANCELLED')
    leave_request.save(update_fields=['status', 'updated_at'])
    recalculate_leave_balance(leave_request.team_member, leave_request.leave_type, leave_request.start_date.year)
    return leave_request


@transaction.atomic
def delete_leave_request(leave_request):
    member, leave_type, year = leave_request.team_member, leave_request.leave_type, leave_request.start_date.year
    leave_request.delete()
    recalculate_leave_balance(member, leave_type, year)


@transaction.atomic
def seed_default_leave_types():
    created = 0
    for entry in DEFAULT_LEAVE_TYPES:
        _, was_created = LeaveType.objects.get_or_create(code=entry['code'], defaults=entry)
        created += int(was_created)
    return {'created': created, 'skipped': len(DEFAULT_LEAVE_TYPES) - created}


@transaction.atomic
def seed_default_leave_policies():
    """One policy per active (job role, leave type) pair, using category defaults"""
    created = skipped = 0
    leave_types = list(LeaveType.objects.filter(is_active=True))
    for role in JobRole.objects.filter(is_active=True):
        for leave_type in leave_types:
            annual, carry_forward = CATEGORY_DEFAULTS.get(leave_type.category, CATEGORY_DEFAULTS['OTHER'])
            _, was_created = LeavePolicy.objects.get_or_create(
                job_role=role,
                leave_type=leave_type,
                defaults={'annual_quota': annual, 'carry_forward_limit': carry_forward},
            )
            if was_created:
                created += 1
            else:
                skipped += 1
    logger.info(f"Seeded leave policies: {created} created, {skipped} skipped")
    return {'created': created, 'skipped': skipped}
