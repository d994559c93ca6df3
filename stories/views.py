# stories/views.py
import logging

from django.conf import settings
from django.db.models import Count, Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.views import View
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, permissions, status, filters
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsCmsAuthor
from newsletter.services import dispatch_story_newsletter, DispatchStatus
from .exceptions import (
    SlugAlreadyInUse, SlugColumnMissing, SlugLookupFailed, SlugResolutionExhausted, StoryError,
)
from .models import Story, Comment
from .repository import StoryRepository
from .serializers import StoryCmsListSerializer, StoryWriteSerializer, CommentSerializer
from .services import (
    READ_TIME_OPTIONS, TAGS, build_storefront, find_story, load_story_rows, save_story, structured_data,
)
from .sitemap import build_sitemap_xml

logger = logging.getLogger("stories")

NEWSLETTER_SOFT_FAILURE = "Gespeichert, aber Newsletter-Versand konnte nicht angestoßen werden."


def _story_error_response(exc: StoryError) -> Response:
    if isinstance(exc, SlugLookupFailed):
        return Response({"detail": exc.message}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    if isinstance(exc, SlugAlreadyInUse):
        return Response({"detail": exc.message, "code": "slug_in_use"}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, SlugResolutionExhausted):
        return Response({"detail": exc.message, "code": "slug_exhausted"}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, SlugColumnMissing):
        return Response({"detail": exc.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)


def _default_author(user) -> str:
    return (getattr(user, "first_name", "") or "").strip() or getattr(user, "email", "") or ""


# =============
#   STOREFRONT
# =============

class StorefrontView(APIView):
    """
    GET /api/stories/?tag=<Rubrik>
    Aufmacher, Archiv (ohne Filter die drei neuesten), Rubriken.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        front = build_storefront(tag=request.query_params.get("tag"))
        return Response({
            "issue_number": front.issue_number,
            "lead": front.lead,
            "archive": front.archive,
            "tags": front.tags,
            "active_tag": front.active_tag,
            "notice": front.notice,
            "results": front.stories,
        })


class StoryReaderView(APIView):
    """
    GET /api/stories/<slug>/
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, slug: str):
        stories, notice = load_story_rows()
        story = find_story(stories, slug)
        if story is None:
            return Response({"detail": "Geschichte nicht gefunden."}, status=status.HTTP_404_NOT_FOUND)
        url = f"{settings.SITE_URL}/stories/{story['slug']}"
        return Response({
            "story": story,
            "notice": notice,
            "structured_data": structured_data(story, url),
        })


class StoryCommentListCreateView(generics.ListCreateAPIView):
    """
    GET/POST /api/stories/<slug>/comments/
    Nur freigegebene Kommentare, neueste zuerst.
    """
    serializer_class = CommentSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = []

    def get_story(self) -> Story:
        if not hasattr(self, "_story"):
            self._story = get_object_or_404(Story, slug=self.kwargs.get("slug"))
        return self._story

    def get_queryset(self):
        return (
            Comment.objects
            .filter(story=self.get_story(), status=Comment.Status.APPROVED)
            .order_by("-created_at", "-id")
        )

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        if self.request.method == "POST":
            ctx["story"] = self.get_story()
        return ctx

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        comment = serializer.save()
        logger.info("Kommentar gespeichert", extra={"story_id": comment.story_id, "id": comment.id})
        return Response(
            {"message": "Danke für deinen Kommentar!", "comment": self.get_serializer(comment).data},
            status=status.HTTP_201_CREATED,
        )


# ======
#   CMS
# ======

def _cms_queryset():
    return Story.objects.annotate(
        comments_count=Count("comments", filter=Q(comments__status=Comment.Status.APPROVED))
    )


class CmsStoryListCreateView(generics.ListAPIView):
    """
    GET  /api/cms/stories/   alle Geschichten mit Kommentarzahl
    POST /api/cms/stories/   neue Geschichte, danach Newsletter
    """
    serializer_class = StoryCmsListSerializer
    permission_classes = [permissions.IsAuthenticated, IsCmsAuthor]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["tag", "category", "author"]
    search_fields = ["title", "slug", "author", "tag"]
    ordering_fields = ["created_at", "date", "title"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return _cms_queryset()

    def post(self, request):
        form = StoryWriteSerializer(data=request.data)
        if not form.is_valid():
            return Response(form.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            story = save_story(form.validated_data, default_author=_default_author(request.user))
        except StoryError as exc:
            return _story_error_response(exc)

        # Versandfehler rollen das Anlegen nicht zurück
        result = dispatch_story_newsletter(story.id)
        if result.status == DispatchStatus.ERROR:
            message = NEWSLETTER_SOFT_FAILURE
        else:
            message = "Geschichte gespeichert."

        return Response(
            {
                "message": message,
                "newsletter_status": result.status,
                "story": StoryCmsListSerializer(_cms_queryset().get(pk=story.pk)).data,
            },
            status=status.HTTP_201_CREATED,
        )


class CmsStoryDetailView(APIView):
    """
    GET/PUT/PATCH/DELETE /api/cms/stories/<int:pk>/
    """
    permission_classes = [permissions.IsAuthenticated, IsCmsAuthor]

    def get(self, request, pk: int):
        story = get_object_or_404(_cms_queryset(), pk=pk)
        return Response(StoryCmsListSerializer(story).data)

    def _update(self, request, pk: int, partial: bool):
        story = get_object_or_404(Story, pk=pk)
        data = request.data
        if partial:
            # fehlende Felder aus dem Bestand, damit PATCH den Slug nicht neu erzeugt
            current = {
                "title": story.title, "slug": story.slug, "date": story.date,
                "read_time": story.read_time, "tag": story.tag, "excerpt": story.excerpt,
                "body": story.body, "author": story.author,
            }
            current.update({k: v for k, v in request.data.items() if k in current})
            data = current

        form = StoryWriteSerializer(data=data)
        if not form.is_valid():
            return Response(form.errors, status=status.HTTP_400_BAD_REQUEST)

        validated = dict(form.validated_data)
        validated["category"] = story.category
        try:
            story = save_story(validated, story_id=story.pk, default_author=_default_author(request.user))
        except StoryError as exc:
            return _story_error_response(exc)

        return Response({
            "message": "Geschichte aktualisiert.",
            "story": StoryCmsListSerializer(_cms_queryset().get(pk=story.pk)).data,
        })

    def put(self, request, pk: int):
        return self._update(request, pk, partial=False)

    def patch(self, request, pk: int):
        return self._update(request, pk, partial=True)

    def delete(self, request, pk: int):
        deleted = StoryRepository().delete(pk)
        if not deleted:
            return Response({"detail": "Geschichte nicht gefunden."}, status=status.HTTP_404_NOT_FOUND)
        logger.info("Geschichte gelöscht", extra={"id": pk})
        return Response(status=status.HTTP_204_NO_CONTENT)


class CmsOptionsView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsCmsAuthor]

    def get(self, request):
        return Response({"read_time_options": READ_TIME_OPTIONS, "tag_options": TAGS})


# =========
#  SITEMAP
# =========

class SitemapView(View):
    def get(self, request):
        return HttpResponse(build_sitemap_xml(), content_type="application/xml; charset=utf-8")
