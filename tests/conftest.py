"""Shared fixtures for hierval tests."""

import json
from pathlib import Path

import pytest
import yaml

from hierval.diagnostics import ValidationLogger
from hierval.models.node import ContentNode, NodeKind


def make_node(uid, kind, children=(), source_path=None, locale="en-us", **tokens):
    """Build a ContentNode with a title token unless one is given."""
    tokens.setdefault("title", f"Title of {uid}")
    return ContentNode(
        uid=uid,
        kind=kind,
        children=list(children),
        source_path=source_path or f"learn/{uid}.yml",
        locale=locale,
        tokens=tokens,
    )


@pytest.fixture(name="make_node")
def make_node_fixture():
    return make_node


@pytest.fixture(name="write_yaml")
def write_yaml_fixture():
    return write_yaml


@pytest.fixture(name="write_json")
def write_json_fixture():
    return write_json


@pytest.fixture
def validation_logger():
    return ValidationLogger()


@pytest.fixture
def valid_nodes():
    """A learning path with one module holding two units."""
    return [
        make_node("path-a", NodeKind.LEARNING_PATH, ["module-a"]),
        make_node("module-a", NodeKind.MODULE, ["unit-1", "unit-2"]),
        make_node("unit-1", NodeKind.UNIT),
        make_node("unit-2", NodeKind.UNIT),
    ]


def write_yaml(path: Path, document: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def docset(tmp_path):
    """Docset on disk: a module with two units plus its node manifest."""
    root = tmp_path / "docset"
    write_yaml(root / "learn/intro/index.yml", {
        "uid": "learn.intro",
        "title": "Introduction",
        "summary": "Start here",
        "units": ["learn.intro.overview", "learn.intro.summary"],
    })
    write_yaml(root / "learn/intro/1-overview.yml", {
        "uid": "learn.intro.overview",
        "title": "Overview",
        "metadata": {"description": "Overview unit"},
    })
    write_yaml(root / "learn/intro/2-summary.yml", {
        "uid": "learn.intro.summary",
        "title": "Summary",
    })

    manifest = tmp_path / "nodes.manifest.json"
    write_json(manifest, {"files": [
        {"sourcePath": "learn/intro/index.yml", "type": "Module"},
        {"sourcePath": "learn/intro/1-overview.yml", "type": "Unit"},
        {"sourcePath": "learn/intro/2-summary.yml", "type": "Unit"},
    ]})
    return {"root": root, "manifest": manifest}


@pytest.fixture
def publish_file(tmp_path):
    """Publish manifest with three entries; the last one already has an error."""
    path = tmp_path / ".publish.json"
    write_json(path, {
        "files": [
            {"sourcePath": "learn/intro/index.yml", "outputPath": "learn/intro/index.json", "hasError": False},
            {"sourcePath": "learn/intro/1-overview.yml", "outputPath": "learn/intro/1-overview.json", "hasError": False},
            {"sourcePath": "learn/intro/2-summary.yml", "outputPath": "learn/intro/2-summary.json", "hasError": True},
        ],
        "metadata": {"build": "42"},
    })
    return path
