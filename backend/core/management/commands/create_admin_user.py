from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

User = get_user_model()


class Command(BaseCommand):
    help = 'Create (or promote) an ADMIN user that logs in with email and password'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True)
        parser.add_argument('--password', required=True)
        parser.add_argument('--name', default='')

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        if not email:
            raise CommandError('Email is required')

        user = User.objects.filter(email=email).first()
        if user:
            user.role = 'ADMIN'
            user.is_staff = True
            user.set_password(options['password'])
            if options['name']:
                user.name = options['name']
            user.save()
            self.stdout.write(self.style.WARNING(f'User {email} already existed - promoted to ADMIN and password reset'))
            return

        User.objects.create_user(
            username=email,
            email=email,
            password=options['password'],
            name=options['name'],
            role='ADMIN',
            is_staff=True,
        )
        self.stdout.write(self.style.SUCCESS(f'Created ADMIN user {email}'))
