from django.core.management.base import BaseCommand

from portfolio.entries import stringify_entries
from portfolio.models import Experience

DATA = [
    {
        "job_title": "Senior Product Manager",
        "company": "Northwind Analytics",
        "industry": "Data & Analytics",
        "start_date": "2023-08",
        "end_date": None,
        "is_current_job": True,
        "description": (
            "Own the self-serve reporting product used by mid-market finance teams.\n"
            "- Set the quarterly roadmap with engineering and design\n"
            "- Run discovery interviews with **20+ customers** a quarter"
        ),
        "accomplishments": (
            "- Shipped scheduled exports, cutting support tickets by 30%\n"
            "- Grew weekly active accounts from 1.2k to 3.4k"
        ),
        "tools": [
            {"name": "Jira", "usage": "Roadmap and sprint planning"},
            {"name": "Amplitude", "usage": "Funnel and retention analysis"},
            {"name": "SQL", "usage": "Ad-hoc usage queries"},
        ],
        "education": [
            {"name": "Product Analytics Certification", "category": "Certifications", "date": "2023"},
        ],
    },
    {
        "job_title": "Product Manager",
        "company": "Harbor Health",
        "industry": "Healthcare",
        "start_date": "2020-03",
        "end_date": "2023-07",
        "is_current_job": False,
        "description": (
            "Led the patient scheduling experience across web and mobile.\n"
            "- Partnered with clinic operations on rollout\n"
            "  - Piloted in three regions before general release"
        ),
        "accomplishments": (
            "- Reduced no-show rate by 18% with reminder flows\n"
            "- Launched online rescheduling used by 60% of patients"
        ),
        "tools": [
            {"name": "Jira", "usage": "Backlog management"},
            {"name": "Figma", "usage": "Reviewing flows with design"},
            {"name": "SQL", "usage": "Appointment funnel reporting"},
        ],
        "education": [
            {"name": "Certified Scrum Product Owner", "category": "Certifications", "date": "2021"},
        ],
    },
    {
        "job_title": "Business Analyst",
        "company": "Lakeside Logistics",
        "industry": "Logistics",
        "start_date": "2017-06",
        "end_date": "2020-02",
        "is_current_job": False,
        "description": "Translated warehouse operations needs into requirements for the routing team.",
        "accomplishments": "- Built the on-time delivery dashboard used by regional managers",
        "tools": [
            {"name": "Excel", "usage": "Capacity models"},
            {"name": "Tableau", "usage": "Operations dashboards"},
        ],
        "education": [
            {"name": "BSc Industrial Engineering", "category": "Degrees", "date": "2017"},
        ],
    },
]


class Command(BaseCommand):
    help = "Seed Experience records with predefined dataset (idempotent)."

    def handle(self, *args, **options):
        created = 0
        updated = 0
        for order, item in enumerate(DATA):
            defaults = {k: v for k, v in item.items() if k not in ("job_title", "company", "start_date")}
            defaults["tools"] = stringify_entries(item["tools"])
            defaults["education"] = stringify_entries(item["education"])
            defaults["sort_order"] = order
            obj, was_created = Experience.objects.update_or_create(
                job_title=item["job_title"],
                company=item["company"],
                start_date=item["start_date"],
                defaults=defaults,
            )
            if was_created:
                created += 1
            else:
                updated += 1
        self.stdout.write(self.style.SUCCESS(f"Experiences seeded. Created: {created}, Updated: {updated}"))
