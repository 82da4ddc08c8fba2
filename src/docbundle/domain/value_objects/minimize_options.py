"""Content minimization settings."""

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class MinimizeOptions:
    """Every recognised minimization flag, with its default."""

    remove_generated_notice: bool = True
    remove_diff_markers: bool = True
    remove_legacy: bool = False
    remove_note_blocks: bool = True
    remove_details_blocks: bool = True
    remove_playground_links: bool = False
    remove_prettier_ignore: bool = True
    remove_html_comments: bool = False
    normalize_whitespace: bool = False

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))
