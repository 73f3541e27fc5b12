"""Tests for placeholder substitution."""

import pytest

from pyqt_metadata.annotations import (
    Annotation,
    HasRuntimeMetadata,
    HasTypedRuntimeMetadata,
    MetaData,
    safe_attribute,
)
from pyqt_metadata.exceptions import UnresolvedPlaceholder
from pyqt_metadata.protocols import MetadataProvider
from pyqt_metadata.registry import TemplateRule, TypeDescriptor
from pyqt_metadata.rendering import PlaceholderRenderer, ProviderResolver, SafeHtml


class Emblem(Annotation):
    path: str
    width: int = 16


class Caption(Annotation):
    value: str


class Heraldry(Annotation, inherited=True):
    value: str


class Markup(Annotation):
    value: str = safe_attribute()


@Emblem(path="x.png")
@Caption("Tom & <Jerry>")
@Markup("<i>trusted</i>")
@Heraldry("lion")
class Castle:
    pass


class Tower(Castle):
    pass


class Plain:
    pass


class CountingProvider(MetadataProvider["Village"]):
    calls = 0
    safe_keys = frozenset({"badge"})

    def get_data(self, village):
        CountingProvider.calls += 1
        return {"Population": village.population, "badge": "<u>capital</u>", "motto": "<b>"}


@HasRuntimeMetadata(CountingProvider)
class Village:
    def __init__(self, population):
        self.population = population


class Hamlet(Village):
    pass


class SelfDescribing(MetadataProvider["SelfDescribing"]):
    def get_data(self, obj):
        return {"id": id(obj), "kind": "self"}


@HasTypedRuntimeMetadata(SelfDescribing)
class Describable(SelfDescribing):
    pass


class Oddity(Describable):
    pass


def _render(template, instance, renderer=None):
    renderer = renderer or PlaceholderRenderer()
    return renderer.render(TemplateRule(template, 0), TypeDescriptor.of_instance(instance), instance)


def test_attribute_placeholder():
    assert _render("<b>{Emblem.path}</b>", Castle()) == "<b>x.png</b>"


def test_default_value_attribute():
    assert _render("{Heraldry}", Castle()) == "lion"


def test_names_are_case_insensitive_and_may_be_qualified():
    assert _render("{emblem.WIDTH}", Castle()) == "16"
    assert _render(f"{{{Emblem.qualified_name()}.path}}", Castle()) == "x.png"


def test_literal_template_renders_unchanged():
    assert _render("<p>No placeholders here</p>", Plain()) == "<p>No placeholders here</p>"


def test_result_is_safe_html():
    assert isinstance(_render("{Emblem.path}", Castle()), SafeHtml)


def test_unsafe_values_escaped():
    assert _render("{Caption}", Castle()) == "Tom &amp; &lt;Jerry&gt;"


def test_safe_attribute_not_escaped():
    assert _render("{Markup}", Castle()) == "<i>trusted</i>"


def test_inherited_annotation_on_subclass():
    assert _render("{Heraldry}", Tower()) == "lion"


def test_non_inherited_annotation_missing_on_subclass():
    with pytest.raises(UnresolvedPlaceholder):
        _render("{Emblem.path}", Tower())


def test_missing_annotation_raises():
    with pytest.raises(UnresolvedPlaceholder) as excinfo:
        _render("<b>{Emblem.path}</b>", Plain())
    assert excinfo.value.token == "Emblem.path"


def test_unknown_attribute_raises():
    with pytest.raises(UnresolvedPlaceholder, match="Available attributes"):
        _render("{Emblem.height}", Castle())


def test_provider_data():
    assert _render("{population}", Village(1200)) == "1200"


def test_provider_safe_keys():
    village = Village(10)
    assert _render("{badge}|{motto}", village) == "<u>capital</u>|&lt;b&gt;"


def test_provider_called_once_per_render():
    CountingProvider.calls = 0
    _render("{population} {badge} {motto}", Village(5))
    assert CountingProvider.calls == 1


def test_provider_not_called_without_provider_placeholders():
    CountingProvider.calls = 0
    _render("static", Village(5))
    assert CountingProvider.calls == 0


def test_has_runtime_metadata_not_inherited():
    with pytest.raises(UnresolvedPlaceholder):
        _render("{population}", Hamlet(3))


def test_self_provider_uses_instance():
    instance = Oddity()
    assert _render("{id}:{kind}", instance) == f"{id(instance)}:self"


def test_safe_html_provider_value_not_escaped():
    class Provider(MetadataProvider[Plain]):
        def get_data(self, obj):
            return {"html": SafeHtml("<br/>"), "text": "<br/>"}

    renderer = PlaceholderRenderer(ProviderResolver({Plain: Provider()}))
    assert _render("{html}{text}", Plain(), renderer) == "<br/>&lt;br/&gt;"


def test_registry_binding_applies_to_subclasses():
    class Provider(MetadataProvider[Castle]):
        def get_data(self, obj):
            return {"floors": 4}

    renderer = PlaceholderRenderer(ProviderResolver({Castle: Provider}))
    assert _render("{floors}", Tower(), renderer) == "4"


def test_binding_must_be_metadata_provider():
    renderer = PlaceholderRenderer(ProviderResolver({Plain: object()}))
    with pytest.raises(TypeError):
        _render("{anything}", Plain(), renderer)


def test_annotation_takes_precedence_over_provider():
    @MetaData(name="Annotated")
    @HasRuntimeMetadata(CountingProvider)
    class Both(Village):
        pass

    CountingProvider.calls = 0
    assert _render("{MetaData.name}", Both(1)) == "Annotated"
    assert CountingProvider.calls == 0


def test_value_formatting():
    @Caption("")
    class Flags:
        pass

    class Provider(MetadataProvider[Flags]):
        def get_data(self, obj):
            return {"on": True, "none": None, "cls": Plain}

    renderer = PlaceholderRenderer(ProviderResolver({Flags: Provider()}))
    assert _render("{on}|{none}|{cls}", Flags(), renderer) == f"true||{Plain.__module__}.Plain"


def test_value_service_handles_every_source():
    from pyqt_metadata.rendering import PlaceholderValueService, ValueSource

    service = PlaceholderValueService()
    assert set(service.get_registered_strategies()) == set(ValueSource)
    assert service.has_strategy(ValueSource.PROVIDER_DATA)


def test_unbound_provider_instance_uses_itself():
    class Harbor(MetadataProvider["Harbor"]):
        def get_data(self, harbor):
            return {"berths": id(harbor)}

    harbor = Harbor()
    assert _render("{berths}", harbor) == str(id(harbor))


def test_shared_provider_created_once_across_threads():
    import threading

    from pyqt_metadata.rendering.providers import _shared_provider

    class SlowProvider(MetadataProvider[Plain]):
        created = 0

        def __init__(self):
            SlowProvider.created += 1

        def get_data(self, obj):
            return {}

    barrier = threading.Barrier(8)
    results = []

    def worker():
        barrier.wait()
        results.append(_shared_provider(SlowProvider))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert SlowProvider.created == 1
    assert len({id(r) for r in results}) == 1
