import logging

from django.contrib.auth import logout
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import AuthorAllowlist
from .serializers import RegisterSerializer, UserProfileSerializer

logger = logging.getLogger("accounts")


class RegisterView(APIView):
    """
    Registrierung für das CMS, nur mit E-Mail aus der Allowlist.
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        email = (request.data.get("email") or "").strip().lower()
        entry = AuthorAllowlist.objects.filter(email=email).first() if email else None
        if entry is None:
            logger.info("Registrierung abgelehnt: nicht auf der Allowlist")
            return Response(
                {"detail": "Diese E-Mail ist nicht für das CMS freigeschaltet."},
                status=status.HTTP_403_FORBIDDEN,
            )

        data = request.data.copy()
        if not (data.get("name") or "").strip():
            data["name"] = entry.name

        serializer = RegisterSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        user = serializer.save()
        logger.info("Autor:in registriert", extra={"user_id": user.id})
        return Response({"message": "Registrierung erfolgreich."}, status=status.HTTP_201_CREATED)


class LogoutView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        logout(request)
        return Response({"message": "Abgemeldet."})


class UserProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data)

    def patch(self, request):
        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
