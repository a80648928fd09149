"""Utility functions for audit logging, document numbering and secrets"""
import logging
import re
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.utils import timezone
from django.utils.crypto import get_random_string

from .models import AuditLog

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')
MASK_CHAR = '*'


def get_agency_setting(name, default=None):
    """Read a business constant from settings.AGENCY"""
    return getattr(settings, 'AGENCY', {}).get(name, default)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, payment_add, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., client name)
        object_reference: Reference identifier (e.g., invoice number)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=_json_safe(changes or {}),
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def _json_safe(value):
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def quantize(value):
    """Round a money value to two places, half-up"""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def next_document_number(model, field, prefix, width=4):
    """
    Next sequential number like INV-0001 for `model.field`.

    Only values of the form PREFIX-<digits> take part in the sequence, so
    manually entered numbers never break it.
    """
    pattern = re.compile(rf'^{re.escape(prefix)}-(\d+)$')
    highest = 0
    existing = model.objects.filter(**{f'{field}__startswith': f'{prefix}-'}).values_list(field, flat=True)
    for value in existing:
        match = pattern.match(value or '')
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{prefix}-{str(highest + 1).zfill(width)}"


def generate_onboarding_token():
    return get_random_string(32)


def mask_secret(value):
    """Mask a secret for display, keeping the first and last four characters"""
    if not value:
        return ''
    if len(value) <= 8:
        return MASK_CHAR * len(value)
    return f"{value[:4]}{MASK_CHAR * (len(value) - 8)}{value[-4:]}"


def is_masked(value):
    """True for any display value produced by mask_secret"""
    return bool(value) and MASK_CHAR in value


def today():
    return timezone.localdate()
