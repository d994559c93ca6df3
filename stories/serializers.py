# stories/serializers.py
from rest_framework import serializers

from .models import Story, Comment
from .normalizer import date_picker_value, normalize_date_input, normalize_read_time, slugify


class StoryCmsListSerializer(serializers.ModelSerializer):
    comments_count = serializers.IntegerField(read_only=True)
    date_iso = serializers.SerializerMethodField()
    openable = serializers.BooleanField(source="is_openable", read_only=True)

    class Meta:
        model = Story
        fields = [
            "id", "title", "slug", "category", "tag", "date", "date_iso", "read_time",
            "excerpt", "body", "author", "openable", "comments_count", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def get_date_iso(self, obj: Story) -> str:
        return date_picker_value(obj.date)


class StoryWriteSerializer(serializers.Serializer):
    """
    Formular des CMS. Speichern übernimmt services.save_story, hier wird nur
    geprüft und normalisiert.
    """
    title = serializers.CharField(required=False, allow_blank=True, max_length=255)
    slug = serializers.CharField(required=False, allow_blank=True, max_length=255)
    date = serializers.CharField(required=False, allow_blank=True, max_length=64)
    read_time = serializers.CharField(required=False, allow_blank=True, max_length=32)
    tag = serializers.CharField(required=False, allow_blank=True, max_length=100)
    excerpt = serializers.CharField(required=False, allow_blank=True)
    body = serializers.CharField(required=False, allow_blank=True)
    author = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_slug(self, value):
        return slugify(value)

    def validate_date(self, value):
        return normalize_date_input(value)

    def validate_read_time(self, value):
        return normalize_read_time(value)

    def validate(self, data):
        title = (data.get("title") or "").strip()
        excerpt = (data.get("excerpt") or "").strip()
        if not title or not data.get("date") or not excerpt:
            raise serializers.ValidationError("Titel, Datum und Excerpt sind Pflicht.")
        data["title"] = title
        return data


class CommentSerializer(serializers.ModelSerializer):
    # Honeypot: echte Leser:innen füllen das Feld nie aus
    trap = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = Comment
        fields = ["id", "author_name", "body", "created_at", "trap"]
        read_only_fields = ["id", "created_at"]
        extra_kwargs = {
            "author_name": {"required": False, "allow_blank": True},
            "body": {"required": False, "allow_blank": True},
        }

    def validate_trap(self, value):
        if value:
            raise serializers.ValidationError("Ungültige Eingabe.")
        return value

    def validate_body(self, value: str):
        value = (value or "").strip()
        if len(value) > 5000:
            raise serializers.ValidationError("Kommentar ist zu lang (max. 5000 Zeichen).")
        return value

    def validate(self, data):
        if not data.get("body"):
            raise serializers.ValidationError({"body": "Bitte einen Kommentar eintragen."})
        data["author_name"] = (data.get("author_name") or "").strip() or "Leser:in"
        data.pop("trap", None)
        return data

    def create(self, validated_data):
        validated_data["story"] = self.context["story"]
        validated_data["status"] = Comment.Status.APPROVED
        return super().create(validated_data)
