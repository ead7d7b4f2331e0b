"""
Pytest configuration and shared fixtures for settingsgen tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
import textwrap
from typing import Any

import pytest
import yaml

from settingsgen.imports import ImportContext
from settingsgen.logging import RecordingLogger


@pytest.fixture
def write_document(tmp_path: Path):
    """
    Factory fixture for creating settings XML documents.

    The content is dedented and stripped of leading blank lines, so the
    root element sits on line 1.

    Usage:
        path = write_document("settings.xml", "<Settings/>")
    """

    def _create(filename: str, content: str) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
        return path

    return _create


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("settingsgen.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that keeps warnings and messages in memory."""
    return RecordingLogger()


@pytest.fixture
def import_context(recording_logger: RecordingLogger) -> ImportContext:
    """Provide a fresh import context wired to the recording logger."""
    return ImportContext(logger=recording_logger)


@pytest.fixture
def sample_settings_xml() -> str:
    """Provide a native-grammar document using every top-level element."""
    return """
        <Settings name="AppSettings" prefix="APP_EXPORT">
            <Include local="true">custom/types.h</Include>
            <Include>QtCore/QUrl</Include>
            <Backend class="Demo::IniAccessor">
                <Param type="QString" asStr="true">settings.ini</Param>
                <Param type="int">3</Param>
            </Backend>
            <TypeMapping key="url" type="QUrl"/>
            <TypeMapping key="range" type="QPair&lt;int, int&gt;"/>
            <Node key="network">
                <Entry key="proxy" type="bool" default="false">
                    <Entry key="host" type="QString" default="localhost" tr="true"/>
                </Entry>
                <Entry key="home" type="url"/>
            </Node>
            <Entry key="window/size" type="range">
                <Default>640, 480</Default>
            </Entry>
        </Settings>
    """
