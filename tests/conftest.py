"""Shared fixtures: sample XML files, sessions and an isolated config directory."""

from pathlib import Path
from typing import Callable

import pytest

from xml_table_editor.config import reset_config_manager
from xml_table_editor.core import TableDocument, TableSession

from .samples import MULTI_TABLE_XML, PEOPLE_XML


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Path:
    """Point the config manager at an empty directory and clear env overrides."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("XML_TABLE_EDITOR_CONFIG_DIR", str(config_dir))
    for name in (
        "XML_TABLE_EDITOR_INDENT",
        "XML_TABLE_EDITOR_ENCODING",
        "XML_TABLE_EDITOR_STRICT_TABLE_NAMES",
        "XML_TABLE_EDITOR_CONFIRM",
        "XML_TABLE_EDITOR_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config_manager()
    yield config_dir
    reset_config_manager()


@pytest.fixture
def write_xml(tmp_path) -> Callable[[str, str], Path]:
    """Factory writing XML text to a file under tmp_path."""

    def _write(content: str, name: str = "data.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def people_file(write_xml) -> Path:
    return write_xml(PEOPLE_XML, "people.xml")


@pytest.fixture
def multi_table_file(write_xml) -> Path:
    return write_xml(MULTI_TABLE_XML, "inventory.xml")


@pytest.fixture
def multi_table_document() -> TableDocument:
    return TableDocument.parse(MULTI_TABLE_XML.encode("utf-8"))


@pytest.fixture
def people_session(people_file) -> TableSession:
    """Session with people.xml loaded and People selected."""
    session = TableSession()
    session.open(people_file)
    session.select_table("People")
    return session
