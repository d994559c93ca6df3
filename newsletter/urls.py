from django.urls import path
from .views import NewsletterSignupView, NewsletterStatusView, NewsletterDispatchView

urlpatterns = [
    path("", NewsletterSignupView.as_view(), name="newsletter-signup"),
    path("status/", NewsletterStatusView.as_view(), name="newsletter-status"),
    path("dispatch/", NewsletterDispatchView.as_view(), name="newsletter-dispatch"),
]
