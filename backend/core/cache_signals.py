"""
Cache invalidation signals
Drop cached dashboard figures whenever billing data changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from backend.billing.models import Invoice, Payment
from backend.clients.models import Client
from .cache_utils import invalidate_dashboard_cache

logger = logging.getLogger(__name__)


@receiver([post_save, post_delete], sender=Invoice)
@receiver([post_save, post_delete], sender=Payment)
@receiver([post_save, post_delete], sender=Client)
def invalidate_dashboard_on_change(sender, instance, **kwargs):
    try:
        invalidate_dashboard_cache()
    except Exception as e:
        logger.warning(f"Error invalidating dashboard cache for {sender.__name__}: {str(e)}")
