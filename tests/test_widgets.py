"""Tests for metadata widgets."""

import pytest
from PyQt6.QtCore import Qt

from pyqt_metadata.protocols import MetadataConfig
from pyqt_metadata.rendering import SafeHtml
from pyqt_metadata.widgets import MetadataLabel


def test_metadata_label_rich_text(qapp):
    """Test MetadataLabel shows SafeHtml as rich text."""
    label = MetadataLabel(SafeHtml("<b>Knight</b>"))
    assert label.textFormat() == Qt.TextFormat.RichText
    assert label.text() == "<b>Knight</b>"
    assert label.wordWrap()


def test_metadata_label_rejects_plain_str(qapp):
    label = MetadataLabel()
    with pytest.raises(TypeError):
        label.set_markup("<b>unchecked</b>")
    assert label.markup() == ""


def test_metadata_label_config(qapp):
    config = MetadataConfig(label_word_wrap=False, label_open_external_links=False)
    label = MetadataLabel(SafeHtml("x"), config=config)
    assert not label.wordWrap()
    assert not label.openExternalLinks()
