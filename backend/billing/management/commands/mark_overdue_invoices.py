from django.core.management.base import BaseCommand

from backend.billing.services import mark_overdue_invoices


class Command(BaseCommand):
    help = 'Mark sent / partially paid invoices past their due date as OVERDUE'

    def handle(self, *args, **options):
        updated = mark_overdue_invoices()
        self.stdout.write(self.style.SUCCESS(f'{updated} invoice(s) marked overdue'))
