from rest_framework import serializers


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField(
        required=False,
        allow_blank=True,
        max_length=254,
        error_messages={"invalid": "Die E-Mail-Adresse wirkt nicht gültig."},
    )

    def validate_email(self, value: str):
        value = (value or "").strip().lower()
        if not value:
            raise serializers.ValidationError("Bitte eine E-Mail-Adresse eintragen.")
        return value

    def validate(self, data):
        if "email" not in data:
            raise serializers.ValidationError({"email": "Bitte eine E-Mail-Adresse eintragen."})
        return data


class DispatchSerializer(serializers.Serializer):
    storyId = serializers.IntegerField(required=False)
