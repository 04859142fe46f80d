"""Shared fixtures for chronicle tests."""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sdk.logging import configureLogging, resetLogging


@pytest.fixture(autouse=True)
def quietLogging():
    """Diagnostics off the console so capsys only sees command output"""
    resetLogging()
    configureLogging(console=False)
    yield
    resetLogging()


@pytest.fixture
def tempDir():
    """Create and cleanup temp directory"""
    dirPath = Path(tempfile.mkdtemp())
    yield dirPath
    shutil.rmtree(dirPath, ignore_errors=True)
