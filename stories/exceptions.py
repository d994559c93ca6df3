"""
Fehlerklassen rund um Slugs und das Speichern von Geschichten.

Ohne DRF-Abhängigkeit; die Views übersetzen diese Fehler in Responses.
"""


class StoryError(Exception):
    """Basisklasse für alle Fehler beim Anlegen/Aktualisieren von Geschichten."""

    default_message = "Geschichte konnte nicht gespeichert werden."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class SlugLookupFailed(StoryError):
    """Die Existenzprüfung für einen Slug konnte nicht beantwortet werden."""

    default_message = "Slug-Prüfung fehlgeschlagen. Bitte später erneut versuchen."


class SlugResolutionExhausted(StoryError):
    default_message = "Konnte keinen eindeutigen Slug erzeugen."

    def __init__(self, base: str, attempts: int):
        super().__init__(self.default_message)
        self.base = base
        self.attempts = attempts


class SlugAlreadyInUse(StoryError):
    """Der Unique-Constraint der Datenbank hat den Schreibvorgang abgelehnt."""

    default_message = "Dieser Slug ist bereits vergeben. Bitte erneut speichern."

    def __init__(self, slug: str):
        super().__init__(self.default_message)
        self.slug = slug


class SlugColumnMissing(StoryError):
    default_message = "Spalte slug fehlt in der Datenbank. Bitte Migration ausführen."
