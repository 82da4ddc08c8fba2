"""Unit tests for preset materialization."""

from datetime import UTC, datetime

import pytest

from docbundle.application.dto import PresetDefinition
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.preset.get_materialized import GetMaterializedUseCase
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.domain.entities import DistilledArtifact
from docbundle.domain.exceptions import NoContentForPreset, PresetNotFound
from docbundle.domain.value_objects import MinimizeOptions, PathPattern, Source

from tests.conftest import SOURCE, make_document


def _preset(
    groups: list[list[str]],
    ignore: list[str] | None = None,
    key: str = "docs",
    **kwargs,
) -> PresetDefinition:
    return PresetDefinition(
        key=key,
        title=key,
        source=SOURCE,
        include=tuple(tuple(PathPattern(p) for p in g) for g in groups),
        ignore=tuple(PathPattern(p) for p in ignore or []),
        **kwargs,
    )


@pytest.mark.asyncio
async def test_scenario_ignore_and_order(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(
        make_document("docs/a/02-y.md", "y"),
        make_document("docs/a/99-skip.md", "skip"),
        make_document("docs/a/01-x.md", "x"),
    )
    preset = _preset([["docs/a/**"]], ignore=["docs/a/99-*.md"])

    bundle = await MaterializePresetUseCase(uow_factory).execute(preset)

    assert [(d.path, d.content) for d in bundle] == [("docs/a/01-x.md", "x"), ("docs/a/02-y.md", "y")]


@pytest.mark.asyncio
async def test_first_group_wins(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(
        make_document("guide/intro.md"),
        make_document("guide/shared.md"),
        make_document("api/ref.md"),
    )
    preset = _preset([["guide/shared.md"], ["guide/*.md", "api/*.md"]])

    bundle = await MaterializePresetUseCase(uow_factory).execute(preset)

    assert bundle.paths == ["guide/shared.md", "api/ref.md", "guide/intro.md"]


@pytest.mark.asyncio
async def test_parent_before_child(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(make_document("a/b.md"), make_document("a/index.md"))
    bundle = await MaterializePresetUseCase(uow_factory).execute(_preset([["a/**"]]))
    assert bundle.paths == ["a/index.md", "a/b.md"]


@pytest.mark.asyncio
async def test_deterministic(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(
        *[make_document(p, f"content of {p}") for p in ["b/index.md", "a/x.md", "b/c.md", "a/index.md"]]
    )
    preset = _preset([["b/**"], ["a/**"]], prompt="Be brief.")
    materializer = MaterializePresetUseCase(uow_factory)

    first = (await materializer.execute(preset)).render(preset.prompt)
    second = (await materializer.execute(preset)).render(preset.prompt)

    assert first == second
    assert first.index("## b/index.md") < first.index("## b/c.md") < first.index("## a/index.md")


@pytest.mark.asyncio
async def test_other_sources_are_ignored(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(make_document("a.md", source=Source("other", "repo")))
    bundle = await MaterializePresetUseCase(uow_factory).execute(_preset([["**/*.md"]]))
    assert bundle.is_empty


@pytest.mark.asyncio
async def test_minimize_and_display_path(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(
        make_document("content/docs/a.md", "text\n> [!NOTE]\n> note\n<!-- c -->"),
    )
    preset = _preset(
        [["content/**"]],
        minimize=MinimizeOptions(remove_html_comments=True),
        display_prefix="content/",
    )
    materializer = MaterializePresetUseCase(uow_factory)

    minimized = (await materializer.execute(preset)).documents[0]
    raw = (await materializer.execute(preset, apply_minimize=False)).documents[0]

    assert minimized.display_path == "docs/a.md"
    assert minimized.content == "text"
    assert "<!-- c -->" in raw.content


def test_render_format() -> None:
    from docbundle.application.dto import MaterializedBundle, MaterializedDocument

    bundle = MaterializedBundle(
        preset_key="p",
        documents=(
            MaterializedDocument("x/a.md", "a.md", "A"),
            MaterializedDocument("x/b.md", "b.md", "B"),
        ),
    )
    assert bundle.render() == "## a.md\n\nA\n\n## b.md\n\nB"
    assert bundle.render("Use runes.").endswith(
        "\n\nInstructions for LLMs: <SYSTEM>Use runes.</SYSTEM>"
    )


# --- GetMaterializedUseCase ---


def _get_materialized(uow_factory, *presets: PresetDefinition) -> GetMaterializedUseCase:
    return GetMaterializedUseCase(
        unit_of_work_factory=uow_factory,
        registry=PresetRegistry(presets),
        materializer=MaterializePresetUseCase(uow_factory),
    )


@pytest.mark.asyncio
async def test_get_materialized_text(uow_factory, fake_uow) -> None:
    fake_uow.documents.add(make_document("a.md", "A"))
    use_case = _get_materialized(uow_factory, _preset([["*.md"]], prompt="P"))
    assert await use_case.execute("docs") == "## a.md\n\nA\n\nInstructions for LLMs: <SYSTEM>P</SYSTEM>"


@pytest.mark.asyncio
async def test_get_materialized_empty_raises_no_content(uow_factory) -> None:
    use_case = _get_materialized(uow_factory, _preset([["*.md"]]))
    with pytest.raises(NoContentForPreset):
        await use_case.execute("docs")


@pytest.mark.asyncio
async def test_get_materialized_unknown_preset(uow_factory) -> None:
    with pytest.raises(PresetNotFound):
        await _get_materialized(uow_factory).execute("missing")


@pytest.mark.asyncio
async def test_get_materialized_distilled_uses_latest_artifact(uow_factory, fake_uow) -> None:
    await fake_uow.distilled_artifacts.upsert(
        DistilledArtifact(
            group_name="docs",
            version="latest",
            content="condensed",
            size_kb=1,
            document_count=1,
            created_at=datetime.now(UTC),
        )
    )
    use_case = _get_materialized(uow_factory, _preset([["*.md"]], distilled=True))
    assert await use_case.execute("docs") == "condensed"
