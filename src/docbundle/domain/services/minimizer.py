"""Markdown minimization transforms.

Transforms run in a fixed order: later ones (whitespace collapse in
particular) would hide the markers earlier ones look for.
"""

import re

from docbundle.domain.value_objects import MinimizeOptions

DEFAULT_OPTIONS = MinimizeOptions()

_GENERATED_NOTICE = re.compile(r"NOTE: do not edit this file, it is generated in.*$", re.MULTILINE)
_PLAYGROUND_LINK = re.compile(r"\[([^\]]+)\]\(/playground[^)]+\)")
_HTML_COMMENT = re.compile(r"<!--[\s\S]*?-->")
_WHITESPACE = re.compile(r"\s+")
_PRETTIER_IGNORE = "<!-- prettier-ignore -->"

_TRAILING_TRIPLE = re.compile(r"(\+{3}|-{3})\s*$")
_LEADING_TRIPLE = re.compile(r"^(\s*)(\+{3}|-{3})\s*")
_LEADING_SINGLE = re.compile(r"^(\s*)[+\-](\s)")
_INNER_TRIPLE = re.compile(r"\s*(\+{3}|-{3})\s*")


def remove_generated_notice(content: str) -> str:
    return _GENERATED_NOTICE.sub("", content)


def remove_diff_markers(content: str) -> str:
    """Strip +/- diff markers, only inside fenced code blocks."""
    in_code = False
    out: list[str] = []
    for line in content.split("\n"):
        if line.strip().startswith("```"):
            in_code = not in_code
            out.append(line)
            continue
        if in_code:
            line = _TRAILING_TRIPLE.sub("", line)
            line = _LEADING_TRIPLE.sub(r"\1", line)
            line = _LEADING_SINGLE.sub(r"\1", line)
            line = _INNER_TRIPLE.sub("", line)
        out.append(line)
    return "\n".join(out)


def remove_quote_blocks(content: str, tag: str) -> str:
    """Drop `> [!TAG]` admonitions together with their `>` continuation lines."""
    marker = f"> [!{tag.upper()}]"
    out: list[str] = []
    skipping = False
    for line in content.split("\n"):
        if line.strip().startswith(marker):
            skipping = True
            continue
        if skipping and line.startswith(">"):
            continue
        skipping = False
        out.append(line)
    return "\n".join(out)


def remove_playground_links(content: str) -> str:
    return _PLAYGROUND_LINK.sub(r"[\1](/REMOVED)", content)


def remove_prettier_ignore(content: str) -> str:
    return "\n".join(line for line in content.split("\n") if line.strip() != _PRETTIER_IGNORE)


def remove_html_comments(content: str) -> str:
    # Repeat until stable so "<!<!-- -->-- -->" cannot reassemble into a comment.
    while True:
        stripped = _HTML_COMMENT.sub("", content)
        if stripped == content:
            return stripped
        content = stripped


def normalize_whitespace(content: str) -> str:
    return _WHITESPACE.sub(" ", content)


def minimize(content: str, options: MinimizeOptions | None = None) -> str:
    """Apply the enabled transforms in order, then trim."""
    opts = options or DEFAULT_OPTIONS
    result = content
    if opts.remove_generated_notice:
        result = remove_generated_notice(result)
    if opts.remove_diff_markers:
        result = remove_diff_markers(result)
    if opts.remove_legacy:
        result = remove_quote_blocks(result, "LEGACY")
    if opts.remove_note_blocks:
        result = remove_quote_blocks(result, "NOTE")
    if opts.remove_details_blocks:
        result = remove_quote_blocks(result, "DETAILS")
    if opts.remove_playground_links:
        result = remove_playground_links(result)
    if opts.remove_prettier_ignore:
        result = remove_prettier_ignore(result)
    if opts.remove_html_comments:
        result = remove_html_comments(result)
    if opts.normalize_whitespace:
        result = normalize_whitespace(result)
    return result.strip()
