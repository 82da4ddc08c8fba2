"""Version tag for distilled artifacts."""

import re
from dataclasses import dataclass
from datetime import date

from docbundle.domain.exceptions import InvalidVersionTag

LATEST = "latest"

_DATE_TAG = re.compile(r"\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class VersionTag:
    """Either the literal "latest" or a calendar date (YYYY-MM-DD)."""

    value: str

    def __post_init__(self) -> None:
        if self.value == LATEST:
            return
        if not _DATE_TAG.fullmatch(self.value):
            raise InvalidVersionTag(f"Invalid version tag: {self.value!r}")
        try:
            date.fromisoformat(self.value)
        except ValueError as e:
            raise InvalidVersionTag(f"Invalid version tag: {self.value!r}") from e

    @classmethod
    def parse(cls, value: str | None) -> "VersionTag":
        return cls((value or LATEST).strip())

    @classmethod
    def latest(cls) -> "VersionTag":
        return cls(LATEST)

    @classmethod
    def for_date(cls, day: date) -> "VersionTag":
        return cls(day.isoformat())

    @property
    def is_latest(self) -> bool:
        return self.value == LATEST

    def __str__(self) -> str:
        return self.value
