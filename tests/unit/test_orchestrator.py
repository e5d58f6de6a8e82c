"""Tests for the validation orchestrator and the run_validation entry point."""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from hierval.config import DocsetConfig, HiervalConfig
from hierval.diagnostics import ErrorCode, ValidationLogger
from hierval.errors import ManifestIOError
from hierval.models.node import NodeKind
from hierval.orchestrator import OrchestratorState, ValidationOrchestrator, run_validation


def docset_config(**overrides):
    data = {
        "repo_url": "git@github.com:Contoso/learn-docs.git",
        "repo_branch": "live",
        "docset_name": "learn-docs",
        "manifest_file_path": "unused.json",
        "docset_output_path": "_site",
    }
    data.update(overrides)
    return DocsetConfig(**data)


def accessor_returning(*results):
    accessor = Mock()
    accessor.hierarchy_drysync.return_value = json.dumps([
        {"branch": "live", "locale": locale, "isValid": is_valid, "message": message}
        for locale, is_valid, message in results
    ])
    return accessor


class TestDefaultLocale:
    """Default-locale workflow."""

    def test_skip_sync_valid_without_network(self, valid_nodes, validation_logger):
        # Scenario A
        accessor = Mock()
        orchestrator = ValidationOrchestrator(
            docset_config(no_drysync=True), validation_logger, accessor, node_source=lambda cfg: valid_nodes
        )

        assert orchestrator.run() is True
        assert accessor.hierarchy_drysync.call_count == 0
        assert orchestrator.hierarchy is not None
        assert orchestrator.state == OrchestratorState.DONE

    def test_duplicate_uid_short_circuits_sync(self, make_node, valid_nodes, validation_logger):
        # Scenario B
        nodes = valid_nodes + [make_node("unit-1", NodeKind.UNIT, source_path="learn/unit-1-copy.yml")]
        accessor = accessor_returning(("en-us", True, ""))
        orchestrator = ValidationOrchestrator(
            docset_config(no_drysync=False), validation_logger, accessor, node_source=lambda cfg: nodes
        )

        assert orchestrator.run() is False
        assert accessor.hierarchy_drysync.call_count == 0
        assert orchestrator.hierarchy is None
        assert validation_logger.file_has_error("learn/unit-1-copy.yml")

    def test_sync_result_is_returned(self, valid_nodes, validation_logger):
        accessor = accessor_returning(("de-de", True, ""), ("en-us", False, "Unit unit-2 moved"))
        orchestrator = ValidationOrchestrator(
            docset_config(), validation_logger, accessor, node_source=lambda cfg: valid_nodes
        )

        assert orchestrator.run() is False
        assert accessor.hierarchy_drysync.call_count == 1
        drysync_errors = [item for item in validation_logger.items if item.code == ErrorCode.DRYSYNC_ERROR]
        assert drysync_errors[0].message == "Unit unit-2 moved"

    def test_sync_sends_normalized_repo_url_and_default_locale(self, valid_nodes, validation_logger):
        accessor = accessor_returning(("en-us", True, ""))
        orchestrator = ValidationOrchestrator(
            docset_config(locale="de-de"), validation_logger, accessor, node_source=lambda cfg: valid_nodes
        )

        assert orchestrator.run() is True
        body = json.loads(accessor.hierarchy_drysync.call_args.args[0])
        assert body["repoUrl"] == "https://github.com/Contoso/learn-docs"
        assert body["locale"] == "en-us"
        assert body["branch"] == "live"

    def test_sync_failure_fails_open(self, valid_nodes, validation_logger):
        accessor = Mock()
        accessor.hierarchy_drysync.side_effect = TimeoutError("read timed out")
        orchestrator = ValidationOrchestrator(
            docset_config(), validation_logger, accessor, node_source=lambda cfg: valid_nodes
        )

        assert orchestrator.run() is True
        assert accessor.hierarchy_drysync.call_count == 1
        assert validation_logger.items == []

    def test_accessor_required_when_syncing(self, valid_nodes, validation_logger):
        orchestrator = ValidationOrchestrator(docset_config(), validation_logger, node_source=lambda cfg: valid_nodes)

        with pytest.raises(ValueError, match="accessor"):
            orchestrator.run()


@pytest.fixture
def localized_build(tmp_path, write_yaml, write_json):
    """Localized docset, its fallback and a publish manifest.

    path -> module-x -> unit-y
         -> module-w -> unit-v
    """
    fallback = tmp_path / "fallback"
    localized = tmp_path / "localized"
    documents = {
        "learn/path/index.yml": {"uid": "path", "type": "LearningPath", "title": "Path", "modules": ["module-x", "module-w"]},
        "learn/x/index.yml": {"uid": "module-x", "type": "Module", "title": "X", "units": ["unit-y"]},
        "learn/x/unit-y.yml": {"uid": "unit-y", "type": "Unit", "title": "Y"},
        "learn/w/index.yml": {"uid": "module-w", "type": "Module", "title": "W", "units": ["unit-v"]},
        "learn/w/unit-v.yml": {"uid": "unit-v", "type": "Unit", "title": "V"},
    }
    for source_path, document in documents.items():
        write_yaml(fallback / source_path, document)
        write_yaml(localized / source_path, document)

    # module-x carries a token the default locale does not have
    write_yaml(localized / "learn/x/index.yml", dict(documents["learn/x/index.yml"], banner="Neu!"))

    write_json(tmp_path / "nodes.json", {"files": [{"sourcePath": source_path} for source_path in documents]})
    write_json(tmp_path / "publish.json", {"files": [
        {"sourcePath": "learn/path/index.yml", "outputPath": "path.json", "hasError": False},
        {"sourcePath": "learn/x/index.yml", "outputPath": "x.json", "hasError": False},
        {"sourcePath": "learn/x/unit-y.yml", "outputPath": "y.json", "hasError": False},
        {"sourcePath": "learn/w/index.yml", "outputPath": "w.json", "hasError": True},
        {"sourcePath": "learn/w/unit-v.yml", "outputPath": "v.json", "hasError": False},
        {"sourcePath": "learn/w/media/diagram.png", "outputPath": "diagram.png", "hasError": False},
    ]})

    return docset_config(
        locale="de-de",
        is_localization_build=True,
        docset_path=str(localized),
        fallback_docset_path=str(fallback),
        manifest_file_path=str(tmp_path / "nodes.json"),
        publish_file_path=str(tmp_path / "publish.json"),
        dependency_file_path=str(tmp_path / "missing-deps.json"),
    )


class TestOtherLocale:
    """Localized workflow."""

    def test_token_failure_excludes_subtree(self, localized_build, validation_logger):
        # Scenario C
        validation_logger.error(ErrorCode.CONTENT_ERROR, "broken image", file="learn/w/media/diagram.png")
        accessor = Mock()
        orchestrator = ValidationOrchestrator(localized_build, validation_logger, accessor)

        assert orchestrator.run() is False
        assert orchestrator.files_to_delete == {"learn/x/index.yml", "learn/x/unit-y.yml"}
        assert accessor.hierarchy_drysync.call_count == 0

        with open(localized_build.publish_file_path, encoding="utf-8") as f:
            files = {item["sourcePath"]: item["hasError"] for item in json.load(f)["files"]}
        assert files == {
            "learn/path/index.yml": False,
            "learn/w/index.yml": True,
            "learn/w/unit-v.yml": False,
            "learn/w/media/diagram.png": True,
        }

    def test_structural_failure_still_reconciles(self, localized_build, make_node, validation_logger):
        nodes = [
            make_node(
                "module-w", NodeKind.MODULE, ["unit-v", "ghost"],
                source_path="learn/w/index.yml", locale="de-de", title="W"
            ),
            make_node("unit-v", NodeKind.UNIT, source_path="learn/w/unit-v.yml", locale="de-de", title="V"),
        ]
        orchestrator = ValidationOrchestrator(localized_build, validation_logger, node_source=lambda cfg: nodes)

        assert orchestrator.run() is False
        assert orchestrator.files_to_delete == {"learn/w/index.yml", "learn/w/unit-v.yml"}
        assert orchestrator.hierarchy is not None

        with open(localized_build.publish_file_path, encoding="utf-8") as f:
            sources = [item["sourcePath"] for item in json.load(f)["files"]]
        assert "learn/w/index.yml" not in sources
        assert "learn/x/index.yml" in sources

    def test_valid_localized_build(self, localized_build, write_yaml, validation_logger):
        write_yaml(
            Path(localized_build.docset_path) / "learn/x/index.yml",
            {"uid": "module-x", "type": "Module", "title": "X (de)", "units": ["unit-y"]},
        )
        orchestrator = ValidationOrchestrator(localized_build, validation_logger)

        assert orchestrator.run() is True
        assert orchestrator.files_to_delete == set()

    def test_manifest_io_error_propagates(self, localized_build, validation_logger):
        config = localized_build.model_copy(update={"publish_file_path": "/nonexistent/dir/publish.json"})

        with pytest.raises(ManifestIOError):
            ValidationOrchestrator(config, validation_logger).run()


class TestRunValidation:
    """Test the run_validation entry point."""

    def test_skip_sync_does_not_build_accessor(self, docset, monkeypatch):
        created = []
        monkeypatch.setattr("hierval.orchestrator.HttpLearnServiceAccessor", lambda cfg: created.append(cfg))
        config = HiervalConfig(docset=docset_config(
            no_drysync=True,
            docset_path=str(docset["root"]),
            manifest_file_path=str(docset["manifest"]),
        ))

        received = []
        assert run_validation(config, write_log=received.append) is True
        assert created == []
        assert received == []

    def test_uses_given_logger(self, docset, write_yaml):
        write_yaml(docset["root"] / "learn/intro/2-summary.yml", {"uid": "learn.intro.summary"})
        config = HiervalConfig(docset=docset_config(
            no_drysync=True,
            docset_path=str(docset["root"]),
            manifest_file_path=str(docset["manifest"]),
        ))
        validation_logger = ValidationLogger()

        assert run_validation(config, validation_logger=validation_logger) is False
        assert validation_logger.file_has_error("learn/intro/2-summary.yml")
