"""pytest configuration and fixtures for pyqt-metadata tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pyqt_metadata.protocols import set_metadata_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_config():
    """Reset the global metadata config around every test."""
    set_metadata_config(None)
    yield
    set_metadata_config(None)
