"""Tests for MetadataReader."""

import threading

import pytest

from pyqt_metadata import (
    Annotation,
    MetaData,
    MetadataReader,
    SafeHtml,
    SimpleTemplate,
    TemplateRegistryBuilder,
    UnresolvedPlaceholder,
)
from pyqt_metadata.exceptions import MissingFallbackTemplate


class Icon(Annotation):
    path: str
    width: int = 16
    height: int = 16


class Piece:
    pass


@MetaData(name="Knight", description="Moves along <roads>", wiki_page="https://example.org/Knight")
class Knight(Piece):
    pass


@MetaData(name="City")
@Icon(path="city.png", width=32, height=32)
class City(Piece):
    pass


@SimpleTemplate("<img src='{Icon.path}' width='{Icon.width}' height='{Icon.height}'/>", annotated_with=Icon)
@SimpleTemplate("<a href='{MetaData.wiki_page}'>{MetaData.name}</a>: {MetaData.description}", of_type=Piece)
@SimpleTemplate("unknown")
class PieceReader(MetadataReader):
    pass


@SimpleTemplate("only pieces", of_type=Piece)
class BrokenReader(MetadataReader):
    pass


def test_render_html_uses_type_template():
    html = PieceReader().render_html(Knight())
    assert html == (
        "<a href='https://example.org/Knight'>Knight</a>: Moves along &lt;roads&gt;"
    )
    assert isinstance(html, SafeHtml)


def test_render_html_uses_annotation_template():
    assert PieceReader().render_html(City()) == "<img src='city.png' width='32' height='32'/>"


def test_render_html_fallback():
    assert PieceReader().render_html(42) == "unknown"


def test_resolve_by_type():
    reader = PieceReader()
    assert reader.resolve(City).annotated_with is Icon
    assert reader.resolve(Knight).of_type is Piece


def test_registry_built_once_per_class():
    assert PieceReader.registry() is PieceReader.registry()
    assert PieceReader().template_registry is PieceReader.registry()


def test_registry_not_shared_with_subclasses():
    @SimpleTemplate("sub")
    class SubReader(PieceReader):
        pass

    assert [r.template for r in SubReader.registry()] == ["sub"]


def test_registry_built_once_across_threads():
    @SimpleTemplate("threaded")
    class ThreadedReader(MetadataReader):
        pass

    results = []
    threads = [threading.Thread(target=lambda: results.append(ThreadedReader.registry())) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len({id(r) for r in results}) == 1


def test_failed_build_not_published():
    with pytest.raises(MissingFallbackTemplate):
        BrokenReader()
    assert "_template_registry" not in vars(BrokenReader)


def test_explicit_registry():
    registry = TemplateRegistryBuilder().add("{MetaData.name}", of_type=Piece).add("?").build()
    reader = MetadataReader(registry=registry)
    assert reader.render_html(Knight()) == "Knight"


def test_unresolved_placeholder_is_local_to_call():
    registry = TemplateRegistryBuilder().add("{MetaData.name}").build()
    reader = MetadataReader(registry=registry)
    with pytest.raises(UnresolvedPlaceholder):
        reader.render_html(object())
    assert reader.render_html(Knight()) == "Knight"


def test_render_returns_label(qapp):
    label = PieceReader().render(City())
    assert label.markup() == "<img src='city.png' width='32' height='32'/>"
    assert label.text() == label.markup()


def test_provider_key_shares_name_with_annotation_kind():
    """Provider data named like an unrelated annotation still renders."""
    from pyqt_metadata import MetadataProvider

    class Marker(MetadataProvider["Marker"]):
        def get_data(self, obj):
            return {"icon": "anchor"}

    registry = TemplateRegistryBuilder().add("{icon}").build()
    assert MetadataReader(registry=registry).render_html(Marker()) == "anchor"


def test_self_provider_without_annotation():
    """An unbound instance implementing MetadataProvider supplies its own data."""
    from pyqt_metadata import MetadataProvider

    class Town(MetadataProvider["Town"]):
        def get_data(self, town):
            return {"pop": 7}

    registry = TemplateRegistryBuilder().add("{pop}").build()
    assert MetadataReader(registry=registry).render_html(Town()) == "7"
