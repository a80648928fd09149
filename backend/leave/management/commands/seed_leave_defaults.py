from django.core.management.base import BaseCommand

from backend.leave.services import seed_default_leave_policies, seed_default_leave_types


class Command(BaseCommand):
    help = 'Create the default leave types (CL, SL, EL) and a policy per active job role'

    def handle(self, *args, **options):
        types = seed_default_leave_types()
        policies = seed_default_leave_policies()
        self.stdout.write(self.style.SUCCESS(
            f"Leave types: {types['created']} created. "
            f"Leave policies: {policies['created']} created, {policies['skipped']} skipped"
        ))
