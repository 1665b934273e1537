import logging

from django.contrib.auth import authenticate, login, logout
from drf_spectacular.utils import extend_schema
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .images import ImageServiceError, ResizeDirective, upload_image
from .models import CaseStudy, Education, Experience, Profile
from .ordering import group_by_industry, group_by_tool, reorder, set_order_array
from .permissions import IsPortfolioAdmin
from .serializers import (
    AdminUserSerializer,
    CaseStudyDetailSerializer,
    CaseStudySerializer,
    EducationReorderSerializer,
    EducationSerializer,
    ExperienceGroupSerializer,
    ExperienceReorderSerializer,
    ExperienceSerializer,
    ImageUploadResponseSerializer,
    ImageUploadSerializer,
    IndustriesOrderSerializer,
    LoginSerializer,
    ProfileSerializer,
    ToolsOrderSerializer,
)

logger = logging.getLogger(__name__)


class NamedNotFoundMixin:
    """404 bodies say which kind of record was missing."""

    not_found_message = "Not found"

    def get_object(self):
        lookup = self.kwargs.get(self.lookup_url_kwarg or self.lookup_field)
        if self.lookup_field == "pk" and not str(lookup).isdigit():
            raise NotFound(self.not_found_message)
        obj = self.get_queryset().filter(**{self.lookup_field: lookup}).first()
        if obj is None:
            raise NotFound(self.not_found_message)
        self.check_object_permissions(self.request, obj)
        return obj


class ProfileView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(responses={200: ProfileSerializer})
    def get(self, request):
        return Response(ProfileSerializer(Profile.load()).data)


class ExperienceViewSet(NamedNotFoundMixin, viewsets.ReadOnlyModelViewSet):
    """Public experience list, most recent start date first."""

    queryset = Experience.objects.order_by("-start_date", "-id")
    serializer_class = ExperienceSerializer
    permission_classes = [AllowAny]
    filter_backends = [filters.SearchFilter]
    search_fields = ["job_title", "company", "industry"]
    not_found_message = "Experience not found"

    @extend_schema(responses={200: ExperienceGroupSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def tools(self, request):
        groups = group_by_tool(self.get_queryset(), Profile.load().tools_order)
        return Response(ExperienceGroupSerializer(groups, many=True).data)

    @extend_schema(responses={200: ExperienceGroupSerializer(many=True)})
    @action(detail=False, methods=["get"])
    def industries(self, request):
        groups = group_by_industry(self.get_queryset(), Profile.load().industries_order)
        return Response(ExperienceGroupSerializer(groups, many=True).data)


class EducationViewSet(NamedNotFoundMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Education.objects.order_by("category", "sort_order", "id")
    serializer_class = EducationSerializer
    permission_classes = [AllowAny]
    filterset_fields = ["category"]
    not_found_message = "Education not found"


class CaseStudyViewSet(NamedNotFoundMixin, viewsets.ReadOnlyModelViewSet):
    """Published case studies; detail is looked up by slug."""

    queryset = CaseStudy.objects.filter(is_published=True).order_by("-is_featured", "-created_at", "-id")
    permission_classes = [AllowAny]
    lookup_field = "slug"
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["is_featured"]
    search_fields = ["title", "description"]
    not_found_message = "Case study not found"

    def get_serializer_class(self):
        if self.action == "retrieve":
            return CaseStudyDetailSerializer
        return CaseStudySerializer


class AdminLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=LoginSerializer, responses={200: AdminUserSerializer})
    def post(self, request):
        s = LoginSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        user = authenticate(request, username=s.validated_data["username"], password=s.validated_data["password"])
        if user is None or not user.is_staff:
            logger.warning("Failed admin login for %r", s.validated_data["username"])
            return Response({"message": "Invalid credentials"}, status=status.HTTP_401_UNAUTHORIZED)
        login(request, user)
        logger.info("Admin %s signed in", user.username)
        return Response(AdminUserSerializer({"id": user.pk, "username": user.username}).data)


class AdminLogoutView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(request=None, responses={200: None})
    def post(self, request):
        logout(request)
        return Response({"message": "Logged out"})


class AdminMeView(APIView):
    permission_classes = [IsPortfolioAdmin]

    @extend_schema(responses={200: AdminUserSerializer})
    def get(self, request):
        return Response(AdminUserSerializer({"id": request.user.pk, "username": request.user.username}).data)


class AdminProfileView(APIView):
    permission_classes = [IsPortfolioAdmin]

    @extend_schema(request=ProfileSerializer, responses={200: ProfileSerializer})
    def put(self, request):
        s = ProfileSerializer(Profile.load(), data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        s.save()
        return Response(s.data)


class AdminExperienceViewSet(NamedNotFoundMixin, viewsets.ModelViewSet):
    """All experiences in admin display order."""

    queryset = Experience.objects.order_by("sort_order", "-start_date", "-id")
    serializer_class = ExperienceSerializer
    permission_classes = [IsPortfolioAdmin]
    not_found_message = "Experience not found"

    def perform_create(self, serializer):
        # New rows go to the end of the admin list
        last = Experience.objects.order_by("-sort_order").values_list("sort_order", flat=True).first()
        serializer.save(sort_order=(last + 1) if last is not None else 0)

    @extend_schema(request=ExperienceReorderSerializer, responses={204: None})
    @action(detail=False, methods=["put"])
    def reorder(self, request):
        s = ExperienceReorderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        reorder(Experience, s.validated_data["experience_ids"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminEducationViewSet(NamedNotFoundMixin, viewsets.ModelViewSet):
    queryset = Education.objects.order_by("category", "sort_order", "id")
    serializer_class = EducationSerializer
    permission_classes = [IsPortfolioAdmin]
    filterset_fields = ["category"]
    not_found_message = "Education not found"

    def perform_create(self, serializer):
        category = serializer.validated_data["category"]
        if "sort_order" in serializer.validated_data:
            serializer.save()
            return
        last = (
            Education.objects.filter(category=category)
            .order_by("-sort_order")
            .values_list("sort_order", flat=True)
            .first()
        )
        serializer.save(sort_order=(last + 1) if last is not None else 0)

    @extend_schema(request=EducationReorderSerializer, responses={204: None})
    @action(detail=False, methods=["put"])
    def reorder(self, request):
        s = EducationReorderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        reorder(Education, s.validated_data["education_ids"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminCaseStudyViewSet(NamedNotFoundMixin, viewsets.ModelViewSet):
    """Drafts included."""

    queryset = CaseStudy.objects.order_by("-created_at", "-id")
    permission_classes = [IsPortfolioAdmin]
    filterset_fields = ["is_published", "is_featured"]
    not_found_message = "Case study not found"

    def get_serializer_class(self):
        if self.action == "retrieve":
            return CaseStudyDetailSerializer
        return CaseStudySerializer


class ToolsOrderView(APIView):
    permission_classes = [IsPortfolioAdmin]

    @extend_schema(request=ToolsOrderSerializer, responses={200: ProfileSerializer})
    def patch(self, request):
        s = ToolsOrderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        profile = set_order_array("tools_order", s.validated_data["tools_order"])
        return Response(ProfileSerializer(profile).data)


class IndustriesOrderView(APIView):
    permission_classes = [IsPortfolioAdmin]

    @extend_schema(request=IndustriesOrderSerializer, responses={200: ProfileSerializer})
    def patch(self, request):
        s = IndustriesOrderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        profile = set_order_array("industries_order", s.validated_data["industries_order"])
        return Response(ProfileSerializer(profile).data)


class ImageUploadView(APIView):
    permission_classes = [IsPortfolioAdmin]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(request=ImageUploadSerializer, responses={200: ImageUploadResponseSerializer})
    def post(self, request):
        s = ImageUploadSerializer(data=request.data)
        if not s.is_valid():
            message = "Only image files can be uploaded" if "image" in s.errors else "Validation error"
            return Response(
                {"success": 0, "message": message, "errors": s.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = s.validated_data
        directive = ResizeDirective.from_request(
            data.get("width"), data.get("height"), data.get("maintain_aspect_ratio", True)
        )
        try:
            url = upload_image(data["image"], directive, data["image_type"])
        except ImageServiceError as e:
            logger.error("Image upload failed: %s", e)
            return Response({"success": 0, "message": "Image upload failed"}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({"success": 1, "file": {"url": url}})
