"""Rich-text label showing rendered metadata markup."""

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QLabel, QWidget

from pyqt_metadata.protocols import MetadataConfig, get_metadata_config
from pyqt_metadata.rendering import SafeHtml


class MetadataLabel(QLabel):
    """
    QLabel that only accepts SafeHtml.

    Usage:
        label = MetadataLabel(reader.render_html(knight), parent=self)
        layout.addWidget(label)
    """

    def __init__(self, markup: Optional[SafeHtml] = None,
                 config: Optional[MetadataConfig] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        config = config or get_metadata_config()
        self._markup = SafeHtml("")

        self.setTextFormat(Qt.TextFormat.RichText)
        self.setWordWrap(config.label_word_wrap)
        self.setOpenExternalLinks(config.label_open_external_links)

        if markup is not None:
            self.set_markup(markup)

    def markup(self) -> SafeHtml:
        return self._markup

    def set_markup(self, markup: SafeHtml) -> None:
        """
        Show rendered markup.

        Raises:
            TypeError: If markup is a plain str rather than SafeHtml
        """
        if not isinstance(markup, SafeHtml):
            raise TypeError(
                f"MetadataLabel requires SafeHtml, got {type(markup).__name__}. "
                f"Use SafeHtml.escape() for untrusted text."
            )
        self._markup = markup
        self.setText(markup)
