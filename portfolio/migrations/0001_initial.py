import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(blank=True, default="", max_length=120)),
                ("brief_intro", models.TextField(blank=True, default="")),
                (
                    "education_categories",
                    models.JSONField(blank=True, default=list, help_text="Category names offered when editing education"),
                ),
                ("tools_order", models.JSONField(blank=True, default=list, help_text="Display order of tool names")),
                (
                    "industries_order",
                    models.JSONField(blank=True, default=list, help_text="Display order of industry names"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="Experience",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("job_title", models.CharField(max_length=200)),
                ("company", models.CharField(blank=True, default="", max_length=200)),
                ("industry", models.CharField(max_length=120)),
                (
                    "start_date",
                    models.CharField(
                        help_text="YYYY-MM",
                        max_length=7,
                        validators=[
                            django.core.validators.RegexValidator(
                                message="Use the YYYY-MM format.", regex="^\\d{4}-(0[1-9]|1[0-2])$"
                            )
                        ],
                    ),
                ),
                (
                    "end_date",
                    models.CharField(
                        blank=True,
                        help_text="YYYY-MM, empty if current",
                        max_length=7,
                        null=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message="Use the YYYY-MM format.", regex="^\\d{4}-(0[1-9]|1[0-2])$"
                            )
                        ],
                    ),
                ),
                ("is_current_job", models.BooleanField(default=False)),
                ("description", models.TextField()),
                ("accomplishments", models.TextField()),
                ("tools", models.JSONField(blank=True, default=list)),
                ("education", models.JSONField(blank=True, default=list)),
                ("sort_order", models.IntegerField(default=0)),
            ],
            options={
                "ordering": ["-start_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Education",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("category", models.CharField(max_length=80)),
                ("link", models.URLField(blank=True, null=True)),
                ("date", models.CharField(blank=True, max_length=40, null=True)),
                ("sort_order", models.IntegerField(default=0)),
            ],
            options={
                "ordering": ["category", "sort_order", "id"],
                "verbose_name_plural": "education",
            },
        ),
        migrations.CreateModel(
            name="CaseStudy",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(blank=True, max_length=220, unique=True)),
                ("description", models.TextField()),
                ("content", models.TextField(blank=True, default="")),
                ("featured_image", models.URLField(blank=True, max_length=500, null=True)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("is_published", models.BooleanField(default=False)),
                ("is_featured", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "verbose_name_plural": "case studies",
            },
        ),
    ]
