"""
Management command to create the default administrator account
"""
from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "Creates the default admin account when no user exists yet"

    def add_arguments(self, parser):
        parser.add_argument('--username', default=settings.PO_PROCESSOR['DEFAULT_ADMIN_USERNAME'])
        parser.add_argument('--password', default=settings.PO_PROCESSOR['DEFAULT_ADMIN_PASSWORD'])

    def handle(self, *args, **options):
        User = get_user_model()
        if User.objects.exists():
            self.stdout.write(self.style.WARNING("Users already exist, default admin not created"))
            return

        User.objects.create_superuser(
            username=options['username'],
            email='',
            password=options['password'],
        )
        self.stdout.write(self.style.SUCCESS(f"Created default admin user '{options['username']}'"))
