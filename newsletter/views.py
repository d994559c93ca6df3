import logging

from django.db import IntegrityError, transaction
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsCmsAuthor
from .models import NewsletterSignup
from .serializers import SignupSerializer, DispatchSerializer
from .services import DispatchStatus, dispatch_story_newsletter

logger = logging.getLogger("newsletter")


class NewsletterSignupView(APIView):
    """
    POST /api/newsletter/   {email}
    Ohne Double-Opt-in: die Adresse wird direkt gespeichert.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        email = serializer.validated_data["email"]

        try:
            with transaction.atomic():
                NewsletterSignup.objects.create(email=email)
        except IntegrityError:
            return Response(
                {"detail": "Diese Adresse ist bereits eingetragen.", "subscribed": True},
                status=status.HTTP_409_CONFLICT,
            )

        logger.info("Neue Newsletter-Anmeldung")
        return Response(
            {
                "message": "Danke! Du bekommst eine Nachricht, sobald ein neuer Text erscheint.",
                "subscribed": True,
            },
            status=status.HTTP_201_CREATED,
        )


class NewsletterStatusView(APIView):
    """
    GET /api/newsletter/status/?email=...
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request):
        email = (request.query_params.get("email") or "").strip().lower()
        subscribed = bool(email) and NewsletterSignup.objects.filter(email=email).exists()
        return Response({"subscribed": subscribed})


class NewsletterDispatchView(APIView):
    """
    POST /api/newsletter/dispatch/   {storyId}
    Manuelles Auslösen, z. B. wenn der automatische Versand nach dem Anlegen fehlschlug.
    """
    permission_classes = [permissions.IsAuthenticated, IsCmsAuthor]

    def post(self, request):
        serializer = DispatchSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        story_id = serializer.validated_data.get("storyId")
        if not story_id:
            return Response({"detail": "storyId fehlt"}, status=status.HTTP_400_BAD_REQUEST)

        result = dispatch_story_newsletter(story_id)
        payload = {"status": result.status, "recipients": result.recipients}

        if result.status == DispatchStatus.STORY_NOT_FOUND:
            return Response({**payload, "detail": "Story nicht gefunden"}, status=status.HTTP_404_NOT_FOUND)
        if result.status == DispatchStatus.ERROR:
            return Response({**payload, "detail": result.detail}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(payload, status=status.HTTP_200_OK)
