"""Unit tests for the YAML preset loader and PresetRegistry."""

from pathlib import Path

import pytest

from docbundle.application.dto import DEFAULT_DISTILLATION_PROMPT, PresetDefinition
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.domain.exceptions import PresetNotFound, ValidationError
from docbundle.domain.value_objects import MinimizeOptions, PathPattern, Source
from docbundle.infrastructure.presets.yaml_loader import load_presets, parse_preset, parse_presets

REPO_PRESETS = Path(__file__).resolve().parents[2] / "presets.yaml"


def _preset(key: str, source: str = "acme/docs", distilled: bool = False) -> PresetDefinition:
    return PresetDefinition(
        key=key,
        title=key,
        source=Source.parse(source),
        include=((PathPattern("**/*.md"),),),
        distilled=distilled,
    )


def test_parse_minimal_preset() -> None:
    preset = parse_preset("lib", {"source": "acme/docs", "include": ["docs/**/*.md"]})

    assert preset.title == "lib"
    assert preset.source == Source("acme", "docs")
    assert [[p.pattern for p in g] for g in preset.include] == [["docs/**/*.md"]]
    assert preset.minimize is None
    assert preset.distilled is False
    assert preset.distillation_prompt == DEFAULT_DISTILLATION_PROMPT


def test_include_entries_are_groups() -> None:
    preset = parse_preset(
        "lib",
        {
            "source": "acme/docs",
            "include": ["intro.md", ["guide/*.md", "api/*.md"]],
            "ignore": "**/draft-*.md",
        },
    )

    assert [[p.pattern for p in g] for g in preset.include] == [["intro.md"], ["guide/*.md", "api/*.md"]]
    assert [p.pattern for p in preset.ignore] == ["**/draft-*.md"]


def test_minimize_flags_merge_over_defaults() -> None:
    preset = parse_preset(
        "lib",
        {"source": "acme/docs", "include": ["*.md"], "minimize": {"remove_legacy": True}},
    )

    assert preset.minimize == MinimizeOptions(remove_legacy=True)
    assert preset.minimize.remove_note_blocks is True


@pytest.mark.parametrize("value", [None, {}])
def test_empty_minimize_means_none(value) -> None:
    preset = parse_preset("lib", {"source": "acme/docs", "include": ["*.md"], "minimize": value})
    assert preset.minimize is None


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ({"source": "acme/docs", "include": ["*.md"], "colour": "red"}, "unknown keys colour"),
        ({"include": ["*.md"]}, "source is required"),
        ({"source": "acme", "include": ["*.md"]}, "owner/repo"),
        ({"source": "acme/docs"}, "include must be a non-empty list"),
        ({"source": "acme/docs", "include": [[]]}, "must not be empty"),
        ({"source": "acme/docs", "include": ["*.md"], "minimize": {"shrink": True}}, "unknown keys shrink"),
        ({"source": "acme/docs", "include": ["*.md"], "minimize": {"remove_legacy": "yes"}}, "true or false"),
        ({"source": "acme/docs", "include": ["*.md"], "distilled_groups": [{"path_prefixes": ["a/"]}]}, "name"),
    ],
)
def test_invalid_preset_rejected(data, message) -> None:
    with pytest.raises(ValidationError, match=message):
        parse_preset("lib", data)


def test_distilled_groups() -> None:
    preset = parse_preset(
        "lib-distilled",
        {
            "source": "acme/docs",
            "include": ["docs/**"],
            "distilled": True,
            "distilled_groups": [
                {"name": "everything"},
                {"name": "core", "path_prefixes": ["core/", "shared/"]},
            ],
            "distillation_prompt": "Shorten:",
        },
    )

    assert [g.name for g in preset.groups()] == ["everything", "core"]
    assert preset.groups()[1].includes("shared/x.md")
    assert not preset.groups()[1].includes("kit/x.md")
    assert preset.groups()[0].includes("kit/x.md")
    assert preset.distillation_prompt == "Shorten:"


def test_parse_presets_requires_mapping() -> None:
    with pytest.raises(ValidationError):
        parse_presets({"svelte": {}})
    with pytest.raises(ValidationError):
        parse_presets([])


def test_load_presets_from_file(tmp_path) -> None:
    path = tmp_path / "presets.yaml"
    path.write_text(
        "presets:\n"
        "  a:\n"
        "    source: acme/docs\n"
        "    include: ['*.md']\n"
        "  b:\n"
        "    source: acme/docs\n"
        "    include: ['*.md']\n"
        "    distilled: true\n",
        encoding="utf-8",
    )

    registry = load_presets(path)

    assert [p.key for p in registry.all()] == ["a", "b"]


def test_load_presets_errors(tmp_path) -> None:
    with pytest.raises(ValidationError, match="Cannot read"):
        load_presets(tmp_path / "missing.yaml")
    broken = tmp_path / "broken.yaml"
    broken.write_text("presets: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValidationError, match="Invalid YAML"):
        load_presets(broken)


def test_shipped_preset_file_loads() -> None:
    registry = load_presets(REPO_PRESETS)
    assert len(registry) >= 1
    assert registry.distilled()


# --- Registry ---


def test_registry_lookup_and_partition() -> None:
    registry = PresetRegistry([_preset("a"), _preset("b", distilled=True), _preset("c", "acme/site")])

    assert registry.get("b").distilled
    assert "c" in registry
    assert [p.key for p in registry.distilled()] == ["b"]
    assert [p.key for p in registry.non_distilled()] == ["a", "c"]
    assert registry.sources() == [Source("acme", "docs"), Source("acme", "site")]
    assert registry.sources(registry.distilled()) == [Source("acme", "docs")]


def test_registry_unknown_key() -> None:
    with pytest.raises(PresetNotFound):
        PresetRegistry().get("nope")


def test_registry_duplicate_key() -> None:
    with pytest.raises(ValidationError, match="Duplicate"):
        PresetRegistry([_preset("a"), _preset("a")])
