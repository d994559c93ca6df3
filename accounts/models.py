from django.db import models


class AuthorAllowlist(models.Model):
    """E-Mails, die sich für das CMS registrieren dürfen."""
    email      = models.EmailField(unique=True)
    name       = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["email"]
        verbose_name = "Freigeschaltete Autor:in"
        verbose_name_plural = "Allowlist"

    def save(self, *args, **kwargs):
        self.email = (self.email or "").strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.email} ({self.name})" if self.name else self.email

    @classmethod
    def is_allowed(cls, email: str) -> bool:
        email = (email or "").strip().lower()
        return bool(email) and cls.objects.filter(email=email).exists()
