import json

from django.core.management.base import BaseCommand

from portfolio.models import CaseStudy


def _document(*blocks):
    return json.dumps({"time": 1700000000000, "blocks": list(blocks), "version": "2.28.0"})


def _header(text, level=2):
    return {"type": "header", "data": {"text": text, "level": level}}


def _paragraph(text):
    return {"type": "paragraph", "data": {"text": text}}


def _list(items, style="unordered"):
    return {"type": "list", "data": {"style": style, "items": items}}


DATA = [
    {
        "title": "Scheduled Exports for Finance Teams",
        "slug": "scheduled-exports",
        "description": "Turned a top support request into a self-serve feature and cut reporting tickets by 30%.",
        "tags": ["Product Strategy", "B2B SaaS", "Analytics"],
        "is_published": True,
        "is_featured": True,
        "content": _document(
            _header("Challenge"),
            _paragraph(
                "Finance users rebuilt the same reports every month and asked support to email them CSVs. "
                "Ticket volume for exports had doubled in a year."
            ),
            _header("Approach"),
            _list(
                [
                    "Interviewed 24 customers about their month-end close",
                    "Sized the opportunity from support and usage data",
                    "Shipped a scheduled-export beta to ten accounts",
                ]
            ),
            {"type": "quote", "data": {"text": "We stopped chasing numbers at month end.", "caption": "Finance lead, beta customer"}},
            {"type": "delimiter", "data": {}},
            _header("Results"),
            _list(["30% fewer reporting tickets", "Feature adopted by 45% of paying accounts"], style="ordered"),
        ),
    },
    {
        "title": "Reducing Appointment No-Shows",
        "slug": "appointment-no-shows",
        "description": "Reminder and rescheduling flows that lowered the clinic no-show rate by 18%.",
        "tags": ["Healthcare", "Mobile", "Experimentation"],
        "is_published": True,
        "is_featured": False,
        "content": _document(
            _header("Challenge"),
            _paragraph("One in five booked appointments went unused, costing clinics capacity and revenue."),
            _header("Solution"),
            _paragraph("We tested reminder timing and added one-tap rescheduling to the reminder itself."),
            {
                "type": "code",
                "data": {"code": "SELECT clinic_id, AVG(no_show) FROM appointments GROUP BY clinic_id;"},
            },
            _header("Impact"),
            _paragraph("No-shows fell by <b>18%</b> across the pilot regions."),
        ),
    },
    {
        "title": "Warehouse On-Time Dashboard",
        "slug": "warehouse-on-time-dashboard",
        "description": "A shared delivery dashboard that gave regional managers one source of truth.",
        "tags": ["Operations", "Dashboards"],
        "is_published": False,
        "is_featured": False,
        "content": _document(
            _header("Draft"),
            _paragraph("Write-up in progress."),
        ),
    },
]


class Command(BaseCommand):
    help = "Seed CaseStudy records with predefined dataset (idempotent by slug)."

    def handle(self, *args, **options):
        created = 0
        updated = 0
        for item in DATA:
            defaults = {k: v for k, v in item.items() if k != "slug"}
            obj, was_created = CaseStudy.objects.update_or_create(slug=item["slug"], defaults=defaults)
            if was_created:
                created += 1
            else:
                updated += 1
        self.stdout.write(self.style.SUCCESS(f"Case studies seeded. Created: {created}, Updated: {updated}"))
