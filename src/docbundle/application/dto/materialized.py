"""Materialized bundle DTOs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MaterializedDocument:
    path: str
    display_path: str
    content: str


def render_documents(documents: "tuple[MaterializedDocument, ...] | list[MaterializedDocument]", prompt: str | None) -> str:
    """`## path` blocks separated by blank lines, followed by the instruction annotation."""
    body = "\n\n".join(f"## {d.display_path}\n\n{d.content}" for d in documents)
    if prompt:
        body += f"\n\nInstructions for LLMs: <SYSTEM>{prompt}</SYSTEM>"
    return body


@dataclass(frozen=True)
class MaterializedBundle:
    """Ordered result of evaluating a preset against the store."""

    preset_key: str
    documents: tuple[MaterializedDocument, ...]

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self):
        return iter(self.documents)

    @property
    def is_empty(self) -> bool:
        return not self.documents

    @property
    def paths(self) -> list[str]:
        return [d.path for d in self.documents]

    def render(self, prompt: str | None = None) -> str:
        return render_documents(self.documents, prompt)
