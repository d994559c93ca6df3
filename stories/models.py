from django.db import models


class Story(models.Model):
    title      = models.CharField(max_length=255)
    # Eindeutigkeit wird hier erzwungen, resolve_unique_slug ist nur die Vorprüfung
    slug       = models.SlugField(max_length=255, unique=True)
    category   = models.CharField(max_length=100, blank=True, default="Feuilleton")
    tag        = models.CharField(max_length=100, blank=True, default="")
    # Freitext ("13. Oktober 2024"), muss für parse_story_date lesbar sein
    date       = models.CharField(max_length=64)
    read_time  = models.CharField(max_length=32, blank=True, default="")
    excerpt    = models.TextField()
    body       = models.TextField(blank=True, default="")
    author     = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Geschichte"
        verbose_name_plural = "Geschichten"
        indexes = [
            models.Index(fields=["tag"], name="story_tag_idx"),
            models.Index(fields=["created_at"], name="story_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_openable(self) -> bool:
        return bool((self.body or "").strip())


class Comment(models.Model):
    class Status(models.TextChoices):
        PENDING  = "pending", "Wartet auf Freigabe"
        APPROVED = "approved", "Freigegeben"
        REJECTED = "rejected", "Abgelehnt"

    story       = models.ForeignKey(Story, on_delete=models.CASCADE, related_name="comments")
    author_name = models.CharField(max_length=120, default="Leser:in")
    body        = models.TextField()
    status      = models.CharField(max_length=16, choices=Status.choices, default=Status.APPROVED)
    created_at  = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["story", "status", "created_at"], name="comment_story_status_idx")]

    def __str__(self) -> str:
        return f"Kommentar von {self.author_name} zu {self.story.title}"
