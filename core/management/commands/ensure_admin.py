# core/management/commands/ensure_admin.py
from django.core.management.base import BaseCommand, CommandError

from core.models import User
from core.services.users import normalize_email


class Command(BaseCommand):
    help = "Ensure an active admin account exists with the given password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", required=True)
        parser.add_argument("--password", required=True)
        parser.add_argument("--name", default="Administrator")

    def handle(self, *args, **opts):
        email = normalize_email(opts["email"])
        password = opts["password"]
        if len(password) < 6:
            raise CommandError("Password must be at least 6 characters long")

        u = User.objects.filter(email=email).first()
        if u is None:
            User.objects.create_superuser(email, password, name=opts["name"])
            self.stdout.write(self.style.SUCCESS(f"created admin: {email}"))
            return

        # repair password, role and active flag
        u.set_password(password)
        u.role = User.ROLE_ADMIN
        u.is_active = True
        u.save(update_fields=["password", "role", "is_active", "updated_at"])
        self.stdout.write(self.style.SUCCESS(f"updated admin: {email}"))
