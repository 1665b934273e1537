from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Create or update a staff user that can sign in to the admin API."

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("--password", help="Password to set (prompted for when omitted)")

    def handle(self, *args, **options):
        password = options.get("password")
        if not password:
            from getpass import getpass

            password = getpass("Password: ")
        if not password:
            raise CommandError("A password is required.")
        User = get_user_model()
        user, created = User.objects.get_or_create(username=options["username"])
        user.is_staff = True
        user.set_password(password)
        user.save()
        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} admin user {user.username}"))
