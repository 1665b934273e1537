import json

from django.conf import settings
from rest_framework import serializers

from .content import block_types, render_document, render_formatted_text
from .entries import format_date_range, parse_education, parse_tools, stringify_entries
from .models import CaseStudy, Education, Experience, Profile, generate_slug


class ToolEntrySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    usage = serializers.CharField(allow_blank=True, required=False, default="")


class EducationEntrySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=80, required=False, default="Other")
    link = serializers.URLField(required=False, allow_blank=True)
    date = serializers.CharField(required=False, allow_blank=True, max_length=40)


class EmbeddedEntryListField(serializers.ListField):
    """List of embedded JSON-string entries.

    Reads come back as objects; writes accept objects or JSON strings and are
    stored as JSON strings.
    """

    def __init__(self, *, entry_serializer, parser, **kwargs):
        self.entry_serializer = entry_serializer
        self.parser = parser
        kwargs.setdefault("child", serializers.JSONField())
        kwargs.setdefault("required", False)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        items = super().to_internal_value(data)
        entries = []
        errors = {}
        for index, item in enumerate(items):
            if isinstance(item, str):
                try:
                    item = json.loads(item)
                except ValueError:
                    item = {"name": item}
            entry = self.entry_serializer(data=item)
            if entry.is_valid():
                entries.append({k: v for k, v in entry.validated_data.items() if v not in ("", None) or k == "usage"})
            else:
                errors[index] = entry.errors
        if errors:
            raise serializers.ValidationError(errors)
        return stringify_entries(entries)

    def to_representation(self, data):
        return self.parser(data)


class ProfileSerializer(serializers.ModelSerializer):
    education_categories = serializers.ListField(child=serializers.CharField(max_length=80), required=False)
    tools_order = serializers.ListField(child=serializers.CharField(max_length=120), required=False)
    industries_order = serializers.ListField(child=serializers.CharField(max_length=120), required=False)

    class Meta:
        model = Profile
        fields = [
            "id",
            "name",
            "brief_intro",
            "education_categories",
            "tools_order",
            "industries_order",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_at"]


class ExperienceSerializer(serializers.ModelSerializer):
    tools = EmbeddedEntryListField(entry_serializer=ToolEntrySerializer, parser=parse_tools)
    education = EmbeddedEntryListField(entry_serializer=EducationEntrySerializer, parser=parse_education)
    date_range = serializers.SerializerMethodField()
    description_html = serializers.SerializerMethodField()
    accomplishments_html = serializers.SerializerMethodField()

    class Meta:
        model = Experience
        fields = [
            "id",
            "job_title",
            "company",
            "industry",
            "start_date",
            "end_date",
            "is_current_job",
            "date_range",
            "description",
            "description_html",
            "accomplishments",
            "accomplishments_html",
            "tools",
            "education",
            "sort_order",
        ]
        read_only_fields = ["id", "date_range", "description_html", "accomplishments_html"]

    def get_date_range(self, obj: Experience):
        return format_date_range(obj.start_date, obj.end_date, obj.is_current_job)

    def get_description_html(self, obj: Experience):
        return render_formatted_text(obj.description)

    def get_accomplishments_html(self, obj: Experience):
        return render_formatted_text(obj.accomplishments)

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        # YYYY-MM strings compare chronologically
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": ["End date cannot be before the start date."]})
        if attrs.get("is_current_job"):
            attrs["end_date"] = None
        elif attrs.get("end_date") and "is_current_job" not in attrs:
            # An end date closes a current job
            attrs["is_current_job"] = False
        return attrs


class EducationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = ["id", "name", "category", "link", "date", "sort_order"]
        read_only_fields = ["id"]


class CaseStudySerializer(serializers.ModelSerializer):
    tags = serializers.ListField(child=serializers.CharField(max_length=60), required=False)
    slug = serializers.SlugField(max_length=220, required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    class Meta:
        model = CaseStudy
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "content",
            "featured_image",
            "tags",
            "is_published",
            "is_featured",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        slug = attrs.get("slug")
        if not slug and (self.instance is None or "slug" in attrs):
            title = attrs.get("title") or getattr(self.instance, "title", "")
            slug = generate_slug(title)
            if not slug:
                raise serializers.ValidationError({"slug": ["Could not derive a slug from the title."]})
            attrs["slug"] = slug
        if slug:
            clash = CaseStudy.objects.filter(slug=slug)
            if self.instance is not None:
                clash = clash.exclude(pk=self.instance.pk)
            if clash.exists():
                raise serializers.ValidationError({"slug": ["A case study with this slug already exists."]})
        return attrs


class CaseStudyDetailSerializer(CaseStudySerializer):
    content_html = serializers.SerializerMethodField()
    block_types = serializers.SerializerMethodField()

    class Meta(CaseStudySerializer.Meta):
        fields = CaseStudySerializer.Meta.fields + ["content_html", "block_types"]
        read_only_fields = CaseStudySerializer.Meta.read_only_fields + ["content_html", "block_types"]

    def get_content_html(self, obj: CaseStudy):
        return render_document(obj.content)

    def get_block_types(self, obj: CaseStudy):
        return block_types(obj.content)


def _unique_ids(ids):
    if len(set(ids)) != len(ids):
        raise serializers.ValidationError("Ids must be unique.")
    return ids


class ExperienceReorderSerializer(serializers.Serializer):
    experience_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)

    def validate_experience_ids(self, value):
        return _unique_ids(value)


class EducationReorderSerializer(serializers.Serializer):
    education_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)

    def validate_education_ids(self, value):
        return _unique_ids(value)


class ToolsOrderSerializer(serializers.Serializer):
    tools_order = serializers.ListField(child=serializers.CharField(max_length=120), allow_empty=True)


class IndustriesOrderSerializer(serializers.Serializer):
    industries_order = serializers.ListField(child=serializers.CharField(max_length=120), allow_empty=True)


class GroupedExperienceSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    job_title = serializers.CharField()
    company = serializers.CharField()
    industry = serializers.CharField()
    date_range = serializers.CharField()
    usage = serializers.CharField(required=False)
    accomplishments = serializers.CharField(required=False)


class ExperienceGroupSerializer(serializers.Serializer):
    name = serializers.CharField()
    experience_count = serializers.IntegerField()
    experiences = GroupedExperienceSerializer(many=True)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(max_length=256, trim_whitespace=False, style={"input_type": "password"})


class AdminUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()
    width = serializers.IntegerField(required=False, min_value=100, max_value=2000)
    height = serializers.IntegerField(required=False, min_value=100, max_value=2000)
    maintain_aspect_ratio = serializers.BooleanField(required=False, default=True)
    image_type = serializers.ChoiceField(choices=[("content", "content"), ("featured", "featured")], default="content")

    def validate_image(self, value):
        content_type = getattr(value, "content_type", "") or ""
        if not content_type.startswith("image/"):
            raise serializers.ValidationError("Only image files can be uploaded.")
        max_bytes = getattr(settings, "IMAGE_UPLOAD_MAX_BYTES", None)
        if max_bytes and value.size > max_bytes:
            raise serializers.ValidationError(f"Image is larger than {max_bytes} bytes.")
        return value

    def validate(self, attrs):
        if bool(attrs.get("width")) != bool(attrs.get("height")):
            raise serializers.ValidationError({"height": ["Width and height must be given together."]})
        return attrs


class ImageUploadResponseSerializer(serializers.Serializer):
    success = serializers.IntegerField()
    file = serializers.DictField(child=serializers.CharField())
