# tests/unit/test_manifest.py
"""
Unit tests for pyproject.toml lookup.
"""

import tomllib

import pytest

from health_info.manifest import find_project_manifest

PYPROJECT = """
[project]
name = "test-app"
description = "My test app"
version = "0.1.0"
"""


def test_finds_manifest_in_parent(tmp_path):
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    sub = tmp_path / "sub" / "deeper"
    sub.mkdir(parents=True)

    manifest = find_project_manifest(sub)

    assert manifest is not None
    assert manifest.path == tmp_path.resolve() / "pyproject.toml"
    assert manifest.to_dict() == {
        "name": "test-app",
        "description": "My test app",
        "version": "0.1.0",
    }


def test_nearest_manifest_wins(tmp_path):
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "pyproject.toml").write_text(
        '[project]\nname = "inner"\nversion = "2.0.0"\n', encoding="utf-8"
    )

    manifest = find_project_manifest(sub)

    assert manifest.to_dict() == {"name": "inner", "version": "2.0.0"}


def test_skips_manifest_without_project_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "pyproject.toml").write_text("[tool.black]\nline-length = 100\n", encoding="utf-8")

    manifest = find_project_manifest(sub)

    assert manifest.to_dict()["name"] == "test-app"


def test_poetry_table(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        '[tool.poetry]\nname = "poetry-app"\nversion = "3.1.0"\ndescription = "Poetry"\n',
        encoding="utf-8",
    )

    manifest = find_project_manifest(tmp_path)

    assert manifest.to_dict() == {
        "name": "poetry-app",
        "description": "Poetry",
        "version": "3.1.0",
    }


def test_defaults_to_cwd(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert find_project_manifest().to_dict()["name"] == "test-app"


def test_invalid_toml_raises(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project\n", encoding="utf-8")

    with pytest.raises(tomllib.TOMLDecodeError):
        find_project_manifest(tmp_path)
