"""
URL configuration for the Levitenleser backend.

Public storefront and reader under /api/stories/, the author CMS under
/api/cms/, newsletter signup and dispatch under /api/newsletter/.
"""
from django.contrib import admin
from django.urls import path, include

from stories.views import SitemapView


urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include('accounts.urls')),
    path('api/', include('stories.urls')),
    path('api/newsletter/', include('newsletter.urls')),
    path('sitemap.xml', SitemapView.as_view(), name='sitemap'),
]
