"""Preset definition DTOs."""

from dataclasses import dataclass, field

from docbundle.domain.value_objects import MinimizeOptions, PathPattern, Source

DEFAULT_DISTILLATION_PROMPT = """
You are an expert technical writer. Your task is to condense and distill the documentation below into a concise format while preserving the most important information.
Shorten the text information AS MUCH AS POSSIBLE while covering key concepts.

Focus on:
1. Code examples with short explanations of how they work
2. Key concepts and APIs with their usage patterns
3. Important gotchas and best practices

Remove redundant explanations, marketing language and legacy or deprecated content.

Keep your output in markdown format. Preserve code blocks with their language annotations.
All code examples MUST come from the documentation verbatim. Do NOT create or modify code examples.

Here is the documentation you must condense:

"""


@dataclass(frozen=True)
class DistilledGroup:
    """Named partition of distillation results, selected by display-path prefix."""

    name: str
    path_prefixes: tuple[str, ...] = ()

    def includes(self, display_path: str) -> bool:
        if not self.path_prefixes:
            return True
        return any(display_path.startswith(p) for p in self.path_prefixes)


@dataclass(frozen=True)
class PresetDefinition:
    """Named selection of documents from one source."""

    key: str
    title: str
    source: Source
    include: tuple[tuple[PathPattern, ...], ...]
    ignore: tuple[PathPattern, ...] = ()
    description: str | None = None
    minimize: MinimizeOptions | None = None
    prompt: str | None = None
    display_prefix: str | None = None
    distilled: bool = False
    distilled_groups: tuple[DistilledGroup, ...] = field(default=())
    distillation_prompt: str = DEFAULT_DISTILLATION_PROMPT

    def display_path(self, path: str) -> str:
        """Store path with the configured prefix removed."""
        if self.display_prefix and path.startswith(self.display_prefix):
            return path[len(self.display_prefix) :]
        return path

    def groups(self) -> tuple[DistilledGroup, ...]:
        """Distilled groupings, defaulting to a single group named after the preset."""
        return self.distilled_groups or (DistilledGroup(name=self.key),)
