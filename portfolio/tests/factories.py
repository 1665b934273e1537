import json

from django.contrib.auth.models import User

from portfolio.models import CaseStudy, Education, Experience


def make_admin(username="admin", password="s3cret-pass!"):
    return User.objects.create_user(username=username, password=password, is_staff=True)


def make_experience(**overrides):
    data = {
        "job_title": "Product Manager",
        "company": "Acme",
        "industry": "Software",
        "start_date": "2020-01",
        "end_date": "2021-06",
        "description": "Led the roadmap.",
        "accomplishments": "- Shipped things",
        "tools": [json.dumps({"name": "Jira", "usage": "Planning"})],
    }
    data.update(overrides)
    return Experience.objects.create(**data)


def make_education(**overrides):
    data = {"name": "BSc Computer Science", "category": "Degrees"}
    data.update(overrides)
    return Education.objects.create(**data)


def make_case_study(**overrides):
    data = {
        "title": "Growth Experiment",
        "description": "A short summary.",
        "content": json.dumps({"time": 1, "blocks": [{"type": "paragraph", "data": {"text": "Hello"}}]}),
        "is_published": True,
    }
    data.update(overrides)
    return CaseStudy.objects.create(**data)
