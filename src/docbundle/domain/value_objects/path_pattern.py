"""Glob pattern matching for source-relative document paths."""

import re
from dataclasses import dataclass, field


def _split_top_level(body: str) -> list[str]:
    """Split a brace body on commas that are not inside a nested brace."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, c in enumerate(body):
        if c == "{":
            depth += 1
        elif c == "}" and depth:
            depth -= 1
        elif c == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
    parts.append(body[start:])
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` alternations, nested ones included, into plain globs.

    A brace group with a single option or without a closing brace is kept
    literally.
    """
    depth = 0
    start = 0
    for i, c in enumerate(pattern):
        if c == "{":
            if depth == 0:
                start = i
            depth += 1
        elif c == "}" and depth:
            depth -= 1
            if depth:
                continue
            options = _split_top_level(pattern[start + 1 : i])
            if len(options) < 2:
                continue
            prefix, suffix = pattern[:start], pattern[i + 1 :]
            return [p for o in options for p in expand_braces(prefix + o + suffix)]
    return [pattern]


def _translate_segment(segment: str) -> str:
    """Translate one path segment of a glob into a regex fragment."""
    out: list[str] = []
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        if c == "*":
            while i + 1 < n and segment[i + 1] == "*":
                i += 1
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = segment.find("]", i + 1)
            if end in (-1, i + 1):
                out.append(re.escape(c))
            else:
                body = segment[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = end
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


def _translate_glob(pattern: str) -> str:
    segments = pattern.split("/")
    last = len(segments) - 1
    rx = ""
    for i, seg in enumerate(segments):
        if seg == "**":
            if i == last:
                rx += ".*" if i == 0 else "(?:/.*)?"
            else:
                rx += "(?:[^/]+/)*" if i == 0 else "/(?:[^/]+/)*"
            continue
        if i > 0 and segments[i - 1] != "**":
            rx += "/"
        rx += _translate_segment(seg)
    return rx


def translate(pattern: str) -> str:
    """Translate a minimatch-style glob into an anchored-free regex body.

    Braces are expanded first, so an alternative may span several segments.
    `*` and `?` never cross a `/`; a `**` segment matches zero or more
    whole segments.
    """
    expansions = expand_braces(pattern)
    if len(expansions) == 1:
        return _translate_glob(expansions[0])
    return "(?:" + "|".join(_translate_glob(p) for p in expansions) + ")"


@dataclass(frozen=True)
class PathPattern:
    """Compiled glob pattern."""

    pattern: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.pattern:
            raise ValueError("Glob pattern must be non-empty")
        object.__setattr__(self, "_regex", re.compile(translate(self.pattern)))

    def matches(self, path: str) -> bool:
        return self._regex.fullmatch(path) is not None

    def __str__(self) -> str:
        return self.pattern


def matches_any(path: str, patterns: "tuple[PathPattern, ...] | list[PathPattern]") -> bool:
    """True when any pattern matches path."""
    return any(p.matches(path) for p in patterns)
