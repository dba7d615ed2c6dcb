"""Datenmodell für eine Lehrkraft (Pydantic v2)."""

from pydantic import BaseModel, field_validator


class Teacher(BaseModel):
    """Eintrag im Lehrkräfte-Verzeichnis des Aufrufers.

    Die Engine selbst prüft nur zeitliche Exklusivität; Fach und Filiale
    dienen dem Vorfiltern der Kandidaten.
    """

    id: str
    name: str                     # "Müller, Hans"
    subjects: list[str] = []      # Unterrichtbare Fächer
    branch_ids: list[str] = []    # Filialen, an denen die Lehrkraft arbeitet

    @field_validator("id")
    @classmethod
    def normalize_id(cls, v: str) -> str:
        return v.strip()

    def teaches(self, subject: str) -> bool:
        """Fachvergleich ohne Groß-/Kleinschreibung."""
        wanted = subject.strip().casefold()
        return any(s.casefold() == wanted for s in self.subjects)

    def works_at(self, branch_id: str) -> bool:
        return branch_id in self.branch_ids
