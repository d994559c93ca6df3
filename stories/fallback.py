"""
Statische Geschichten für den Fall, dass die Datenbank nicht erreichbar ist
oder noch leer ist. Gleiche Form wie StoryRepository.list_rows().
"""

FALLBACK_STORIES = [
    {
        "id": 1,
        "title": "Die Stille hinter den Schiebetüren",
        "category": "Feuilleton",
        "date": "13. Oktober 2024",
        "read_time": "8 Min",
        "tag": "Digitales Feuilleton",
        "excerpt": (
            "In einem Pendlerzug entdecken Fremde eine flüchtige Gemeinschaft: ein Chor aus Kopfhörern, "
            "Bildschirmen und Gesten, die nichts bedeuten sollen und doch alles verraten."
        ),
        "body": (
            "Der Zug atmete im Takt der Türen. Zwischen den Haltestellen flimmerte ein stummes Gespräch aus "
            "Kopfhörern, Bildschirmen und gestischen Abbrüchen. Niemand wollte auffallen, alle gehörten dazu. "
            "Als das Signal ertönte, stand eine Frau auf, ließ ihr Handy absichtlich liegen – und der Wagen "
            "hielt für einen Moment den Atem an."
        ),
    },
    {
        "id": 2,
        "title": "Das Telefon der Großmutter",
        "category": "Erzählung",
        "date": "29. September 2024",
        "read_time": "6 Min",
        "tag": "Erinnerung",
        "excerpt": (
            "Auf dem Speicher liegt ein schwarzes Wählscheibenmodell, das noch immer klingeln könnte. "
            "Wer hebt ab, wenn niemand mehr angerufen wird?"
        ),
        "body": (
            "Das schwere Bakelit lag kühl in der Hand. Der Zeigefinger drehte die Scheibe, als wäre es noch "
            "gestern. In der Stille nach dem letzten Klick hörte der Enkel ein Summen, das keins war – nur "
            "Erinnerung, eingraviert in das Klingeln, das nie wieder kommen würde."
        ),
    },
    {
        "id": 3,
        "title": "Aufrecht gehen die Schatten",
        "category": "Feuilleton",
        "date": "15. September 2024",
        "read_time": "7 Min",
        "tag": "Stadtspaziergang",
        "excerpt": (
            "Zwischen Kiosken und Kirchhöfen wandert ein Erzähler durch eine Stadt, die jeden Schritt "
            "mitliest – und sich dabei selbst vergisst."
        ),
        "body": (
            "Er zählte die Kameras mit den Augen, die Plakate mit den Händen, die Blicke mit den Schultern. "
            "An der nächsten Ecke saß ein alter Mann und nickte ihm zu, als wüsste er, dass hier jeder Weg "
            "protokolliert wird – bis einer beschließt, einfach stehenzubleiben."
        ),
    },
    {
        "id": 4,
        "title": "Die Leselampe",
        "category": "Miniatur",
        "date": "1. September 2024",
        "read_time": "4 Min",
        "tag": "Alltag",
        "excerpt": (
            "Ein Lichtkegel, ein alter Sessel, ein Stapel Bücher – und der Versuch, dem Tag noch ein "
            "einziges Kapitel abzuringen."
        ),
        "body": (
            "Das Zimmer war klein genug, dass das Licht reichte. Der Sessel kannte jede Faser des Pullovers. "
            "Ein weiteres Kapitel, nur eines, dann schlafen – versprach sie sich. Als die Lampe flackerte, "
            "hielt sie den Atem an, bis das Licht wieder stand."
        ),
    },
]


def fallback_rows() -> list[dict]:
    # Kopien, damit Aufrufer die Vorlage nicht verändern
    return [dict(row) for row in FALLBACK_STORIES]
