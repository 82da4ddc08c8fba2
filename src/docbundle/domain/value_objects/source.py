"""Source repository identity."""

from dataclasses import dataclass

from docbundle.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Source:
    """Owner and repository pair identifying one origin of documents."""

    owner: str
    repo: str

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValidationError("Source owner and repo must be non-empty")
        if "/" in self.owner or "/" in self.repo:
            raise ValidationError("Source owner and repo must not contain '/'")

    @property
    def key(self) -> str:
        return f"{self.owner}/{self.repo}"

    @classmethod
    def parse(cls, value: str) -> "Source":
        """Parse "owner/repo"."""
        owner, sep, repo = value.strip().partition("/")
        if not sep:
            raise ValidationError(f"Invalid source {value!r}, expected 'owner/repo'")
        return cls(owner=owner, repo=repo)

    def __str__(self) -> str:
        return self.key
