from django.contrib import admin
from .models import Profile, Experience, Education, CaseStudy

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "updated_at")
    readonly_fields = ("updated_at",)

    def has_add_permission(self, request):
        return not Profile.objects.exists()

@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = ("job_title", "company", "industry", "start_date", "end_date", "is_current_job", "sort_order")
    list_filter = ("industry", "is_current_job")
    search_fields = ("job_title", "company", "description")
    ordering = ("sort_order", "-start_date")

@admin.register(Education)
class EducationAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "date", "sort_order")
    list_filter = ("category",)
    search_fields = ("name",)

@admin.register(CaseStudy)
class CaseStudyAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "is_published", "is_featured", "created_at")
    list_filter = ("is_published", "is_featured")
    search_fields = ("title", "slug", "description")
    prepopulated_fields = {"slug": ("title",)}
