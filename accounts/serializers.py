from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)

    def validate_email(self, value: str):
        value = value.strip().lower()
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Für diese E-Mail gibt es bereits ein Konto.")
        return value

    def validate(self, data):
        validate_password(data["password"])
        return data

    def create(self, validated_data):
        # Login per E-Mail: username == email
        email = validated_data["email"]
        user = User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
            first_name=(validated_data.get("name") or "").strip()[:150],
        )
        return user


class UserProfileSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="first_name", required=False, allow_blank=True, max_length=150)

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "is_staff"]
        read_only_fields = ["id", "username", "email", "is_staff"]
