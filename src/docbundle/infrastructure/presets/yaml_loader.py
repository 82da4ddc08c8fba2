"""Preset loader.

Presets live in a YAML file under a top-level `presets` mapping keyed by
preset key. Every recognised field is listed below; anything else is a
configuration error rather than something silently ignored.
"""

from pathlib import Path
from typing import Any

import yaml

from docbundle.application.dto import DEFAULT_DISTILLATION_PROMPT, DistilledGroup, PresetDefinition
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.domain.exceptions import ValidationError
from docbundle.domain.value_objects import MinimizeOptions, PathPattern, Source

_PRESET_KEYS = frozenset(
    {
        "title",
        "description",
        "source",
        "include",
        "ignore",
        "minimize",
        "prompt",
        "display_prefix",
        "distilled",
        "distilled_groups",
        "distillation_prompt",
    }
)
_GROUP_KEYS = frozenset({"name", "path_prefixes"})


def _check_keys(where: str, data: dict, allowed: frozenset[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValidationError(f"{where}: unknown keys {', '.join(map(str, unknown))}")


def _str_list(where: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{where}: expected a string or list of strings")
    return value


def _patterns(where: str, value: Any) -> tuple[PathPattern, ...]:
    try:
        return tuple(PathPattern(p) for p in _str_list(where, value))
    except ValueError as e:
        raise ValidationError(f"{where}: {e}") from e


def _minimize(where: str, value: Any) -> MinimizeOptions | None:
    if not value:
        return None
    if not isinstance(value, dict):
        raise ValidationError(f"{where}: expected a mapping of flags")
    _check_keys(where, value, MinimizeOptions.field_names())
    for flag, enabled in value.items():
        if not isinstance(enabled, bool):
            raise ValidationError(f"{where}.{flag}: expected true or false")
    return MinimizeOptions(**value)


def _groups(where: str, value: Any) -> tuple[DistilledGroup, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ValidationError(f"{where}: expected a list")
    groups = []
    for i, item in enumerate(value):
        item_where = f"{where}[{i}]"
        if not isinstance(item, dict) or not item.get("name"):
            raise ValidationError(f"{item_where}: expected a mapping with a name")
        _check_keys(item_where, item, _GROUP_KEYS)
        groups.append(
            DistilledGroup(
                name=str(item["name"]),
                path_prefixes=tuple(_str_list(f"{item_where}.path_prefixes", item.get("path_prefixes"))),
            )
        )
    return tuple(groups)


def parse_preset(key: str, data: Any) -> PresetDefinition:
    """Build one PresetDefinition from its YAML mapping."""
    where = f"preset {key}"
    if not isinstance(data, dict):
        raise ValidationError(f"{where}: expected a mapping")
    _check_keys(where, data, _PRESET_KEYS)
    if not data.get("source"):
        raise ValidationError(f"{where}: source is required")
    include_raw = data.get("include")
    if not include_raw or not isinstance(include_raw, list):
        raise ValidationError(f"{where}: include must be a non-empty list")
    include = tuple(
        _patterns(f"{where}.include[{i}]", group) for i, group in enumerate(include_raw)
    )
    if any(not group for group in include):
        raise ValidationError(f"{where}: include groups must not be empty")

    return PresetDefinition(
        key=key,
        title=str(data.get("title") or key),
        description=data.get("description"),
        source=Source.parse(str(data["source"])),
        include=include,
        ignore=_patterns(f"{where}.ignore", data.get("ignore")),
        minimize=_minimize(f"{where}.minimize", data.get("minimize")),
        prompt=data.get("prompt") or None,
        display_prefix=data.get("display_prefix") or None,
        distilled=bool(data.get("distilled", False)),
        distilled_groups=_groups(f"{where}.distilled_groups", data.get("distilled_groups")),
        distillation_prompt=data.get("distillation_prompt") or DEFAULT_DISTILLATION_PROMPT,
    )


def parse_presets(data: Any) -> PresetRegistry:
    if not isinstance(data, dict) or not isinstance(data.get("presets"), dict):
        raise ValidationError("Preset file must contain a 'presets' mapping")
    return PresetRegistry(parse_preset(str(k), v) for k, v in data["presets"].items())


def load_presets(path: str | Path) -> PresetRegistry:
    """Load and validate the preset file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValidationError(f"Cannot read preset file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in preset file {path}: {e}") from e
    return parse_presets(data)
