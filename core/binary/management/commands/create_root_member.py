from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand, CommandError
from core.binary.exceptions import PlacementError
from core.binary.utils import create_root_member


class Command(BaseCommand):
    help = 'Create the root member of the binary tree (the company account)'

    def add_arguments(self, parser):
        parser.add_argument('username', type=str)
        parser.add_argument('--password', type=str, help='Login password for the root member')
        parser.add_argument('--email', type=str)
        parser.add_argument('--first-name', type=str, default='')
        parser.add_argument('--last-name', type=str, default='')
        parser.add_argument('--country-id', type=int)
        parser.add_argument('--region-id', type=int)
        parser.add_argument('--package-id', type=int)

    def handle(self, *args, **options):
        registration = {
            'username': options['username'],
            'email': options['email'],
            'first_name': options['first_name'],
            'last_name': options['last_name'],
            'country_id': options['country_id'],
            'region_id': options['region_id'],
            'package_id': options['package_id'],
            'password_hash': make_password(options['password']) if options['password'] else None,
            'registered_by': 'system',
        }

        try:
            node = create_root_member(registration)
        except PlacementError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(
            f"Created root member {options['username']} (member {node.pk})"
        ))
