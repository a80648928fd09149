import logging

from django.db import transaction

from .defaults import DEFAULT_JOB_ROLES
from .models import JobRole

logger = logging.getLogger('backend.team')


@transaction.atomic
def seed_default_job_roles():
    existing = {title.lower() for title in JobRole.objects.values_list('title', flat=True)}
    created = 0
    for title, department, description in DEFAULT_JOB_ROLES:
        if title.lower() in existing:
            continue
        JobRole.objects.create(title=title, department=department, description=description)
        created += 1
    skipped = len(DEFAULT_JOB_ROLES) - created
    logger.info(f"Seeded job roles: {created} created, {skipped} skipped")
    return {'created': created, 'skipped': skipped}
