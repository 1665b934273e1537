import json

from django.core.management.base import BaseCommand

from portfolio.models import Education, Experience


class Command(BaseCommand):
    help = "Copy education entries embedded on experiences into Education rows (skips duplicates)."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Report what would be created without saving")

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        created = 0
        skipped = 0
        failed = 0
        experiences = [exp for exp in Experience.objects.order_by("id") if exp.education]
        self.stdout.write(f"Found {len(experiences)} experiences with education data")
        for exp in experiences:
            for raw in exp.education or []:
                try:
                    data = json.loads(raw) if isinstance(raw, str) else raw
                    name = data["name"]
                except (TypeError, ValueError, KeyError):
                    failed += 1
                    self.stderr.write(f"Unparsable education entry on experience {exp.pk}: {raw!r}")
                    continue
                category = data.get("category") or "Other"
                if Education.objects.filter(name=name, category=category).exists():
                    skipped += 1
                    continue
                if not dry_run:
                    Education.objects.create(
                        name=name,
                        category=category,
                        link=data.get("link") or None,
                        date=data.get("date") or None,
                        sort_order=Education.objects.filter(category=category).count(),
                    )
                created += 1
                self.stdout.write(f"Migrated: {name} ({category})")
        prefix = "[dry run] " if dry_run else ""
        self.stdout.write(
            self.style.SUCCESS(f"{prefix}Education migrated. Created: {created}, Skipped: {skipped}, Failed: {failed}")
        )
