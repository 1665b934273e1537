import re

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models

year_month_validator = RegexValidator(
    regex=r"^\d{4}-(0[1-9]|1[0-2])$",
    message="Use the YYYY-MM format.",
)


def generate_slug(title: str) -> str:
    """Lowercase, collapse every run of non ``[a-z0-9]`` into ``-``, trim dashes."""
    return re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")


class Profile(models.Model):
    # Singleton row; Profile.load() creates it on first read
    name = models.CharField(max_length=120, blank=True, default="")
    brief_intro = models.TextField(blank=True, default="")
    education_categories = models.JSONField(
        default=list, blank=True, help_text="Category names offered when editing education"
    )
    tools_order = models.JSONField(default=list, blank=True, help_text="Display order of tool names")
    industries_order = models.JSONField(default=list, blank=True, help_text="Display order of industry names")
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name or "Profile"

    def save(self, *args, **kwargs):
        # Enforce singleton: only one row allowed
        if not self.pk and type(self).objects.exists():
            raise ValidationError("Only one Profile instance is allowed. Update the existing profile instead.")
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "Profile":
        profile = cls.objects.order_by("id").first()
        if profile is None:
            profile = cls.objects.create()
        return profile


class Experience(models.Model):
    job_title = models.CharField(max_length=200)
    company = models.CharField(max_length=200, blank=True, default="")
    industry = models.CharField(max_length=120)
    start_date = models.CharField(max_length=7, validators=[year_month_validator], help_text="YYYY-MM")
    end_date = models.CharField(
        max_length=7, blank=True, null=True, validators=[year_month_validator], help_text="YYYY-MM, empty if current"
    )
    is_current_job = models.BooleanField(default=False)
    description = models.TextField()
    accomplishments = models.TextField()
    # Each entry is an embedded JSON string: {"name": ..., "usage": ...}
    tools = models.JSONField(default=list, blank=True)
    # Each entry is an embedded JSON string: {"name": ..., "category": ..., "link"?, "date"?}
    education = models.JSONField(default=list, blank=True)
    sort_order = models.IntegerField(default=0)

    def __str__(self):
        if self.company:
            return f"{self.job_title} @ {self.company}"
        return self.job_title

    class Meta:
        ordering = ["-start_date", "-id"]


class Education(models.Model):
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=80)
    link = models.URLField(blank=True, null=True)
    date = models.CharField(max_length=40, blank=True, null=True)
    sort_order = models.IntegerField(default=0)

    def __str__(self):
        return f"{self.name} ({self.category})"

    class Meta:
        ordering = ["category", "sort_order", "id"]
        verbose_name_plural = "education"


class CaseStudy(models.Model):
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True, blank=True)
    description = models.TextField()
    # Block-document JSON exactly as the editor saved it
    content = models.TextField(blank=True, default="")
    featured_image = models.URLField(max_length=500, blank=True, null=True)
    tags = models.JSONField(default=list, blank=True)
    is_published = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = generate_slug(self.title)
        super().save(*args, **kwargs)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "case studies"
