from django.core.management.base import BaseCommand

from backend.team.services import seed_default_job_roles


class Command(BaseCommand):
    help = 'Create the default agency job roles'

    def handle(self, *args, **options):
        result = seed_default_job_roles()
        self.stdout.write(self.style.SUCCESS(
            f"Job roles: {result['created']} created, {result['skipped']} already present"
        ))
