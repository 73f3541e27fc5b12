"""Tests for annotation kinds."""

import dataclasses

import pytest

from pyqt_metadata.annotations import (
    Annotation,
    MetaData,
    declared_annotations,
    find_annotation_kinds,
    get_annotation,
    is_annotation_present,
    safe_attribute,
)


class Pennant(Annotation):
    color: str
    size: int = 3


class Lineage(Annotation, inherited=True):
    value: str


class Trusted(Annotation):
    value: str = safe_attribute()
    label: str = ""


@Pennant(color="red")
@MetaData(name="Fort")
@Lineage("walls")
class Fort:
    pass


class Keep(Fort):
    pass


def test_declared_annotations_keep_source_order():
    """Stacked decorators are recorded top-most first."""
    kinds = [type(a) for a in declared_annotations(Fort)]
    assert kinds == [Pennant, MetaData, Lineage]


def test_annotations_are_frozen():
    """Annotation values cannot be modified after creation."""
    pennant = get_annotation(Fort, Pennant)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pennant.color = "blue"


def test_attributes_and_defaults():
    pennant = get_annotation(Fort, Pennant)
    assert pennant.attributes() == {"color": "red", "size": 3}
    assert Pennant.attribute_names() == ("color", "size")


def test_non_inherited_annotation_not_visible_on_subclass():
    assert declared_annotations(Keep) == ()
    assert not is_annotation_present(Keep, Pennant)
    assert not is_annotation_present(Keep, MetaData)


def test_inherited_annotation_visible_on_subclass():
    assert Lineage.is_inherited()
    assert get_annotation(Keep, Lineage) == Lineage("walls")


def test_safe_attributes():
    assert Trusted.safe_attributes() == frozenset({"value"})
    assert Pennant.safe_attributes() == frozenset()


def test_case_insensitive_name_matching():
    assert Pennant.matches_name("pennant")
    assert Pennant.matches_name(f"{__name__}.PENNANT")
    assert not Pennant.matches_name("flag")


def test_kinds_auto_register():
    """Defining a kind registers it under simple and qualified names."""
    assert Pennant in find_annotation_kinds("PENNANT")
    assert Pennant in find_annotation_kinds(Pennant.qualified_name())


def test_annotation_rejects_non_class_targets():
    with pytest.raises(TypeError):
        Pennant(color="red")(lambda: None)
