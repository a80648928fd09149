from django.core.management.base import BaseCommand

from backend.expenses.services import seed_default_categories


class Command(BaseCommand):
    help = 'Create the default agency expense categories that do not exist yet'

    def handle(self, *args, **options):
        result = seed_default_categories()
        self.stdout.write(self.style.SUCCESS(
            f"Expense categories: {result['created']} created, {result['skipped']} already present"
        ))
