import logging

from django.db import transaction

from .defaults import DEFAULT_EXPENSE_CATEGORIES
from .models import ExpenseCategory

logger = logging.getLogger('backend.expenses')


@transaction.atomic
def seed_default_categories():
    """Create the default categories whose code is not taken yet"""
    existing = {code.upper() for code in ExpenseCategory.objects.values_list('code', flat=True)}
    created = 0
    for code, name, group in DEFAULT_EXPENSE_CATEGORIES:
        if code in existing:
            continue
        ExpenseCategory.objects.create(code=code, name=name, group=group)
        created += 1
    skipped = len(DEFAULT_EXPENSE_CATEGORIES) - created
    logger.info(f"Seeded expense categories: {created} created, {skipped} skipped")
    return {'created': created, 'skipped': skipped}
