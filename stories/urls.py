from django.urls import path
from .views import (
    StorefrontView, StoryReaderView, StoryCommentListCreateView,
    CmsStoryListCreateView, CmsStoryDetailView, CmsOptionsView,
)

urlpatterns = [
    # Storefront / Leser
    path("stories/", StorefrontView.as_view(), name="stories-front"),
    path("stories/<slug:slug>/comments/", StoryCommentListCreateView.as_view(), name="story-comments"),
    path("stories/<slug:slug>/", StoryReaderView.as_view(), name="story-reader"),

    # CMS (nur Autor:innen)
    path("cms/stories/", CmsStoryListCreateView.as_view(), name="cms-stories"),
    path("cms/stories/<int:pk>/", CmsStoryDetailView.as_view(), name="cms-story-detail"),
    path("cms/options/", CmsOptionsView.as_view(), name="cms-options"),
]
