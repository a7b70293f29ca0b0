"""Tests for ecodocs.document: generation, loading and merging."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta, timezone

from ecodocs.config import ComponentSpec
from ecodocs.document import generate_document, load_existing_document, merge_documents
from ecodocs.models import PackageMetadata, RevisionInfo, isoformat

from tests._fixtures.clock import FIXED_NOW, FIXED_NOW_ISO

METADATA = PackageMetadata(
    name="proto",
    version="4.0.0",
    description="Lending protocol",
    author="Core Team",
    license="MIT",
    repository={"type": "git", "url": "https://example.com/proto.git"},
    homepage="https://example.com",
)
REVISION = RevisionInfo(
    commit_hash="a1b2c3d", commit_date="2025-12-20 10:11:12 +0000", branch="main"
)

CURATED = {
    "name": "proto",
    "version": "3.9.0",
    "components": {
        "core": {"description": "old", "status": "deprecated", "mainContracts": ["Pool", "Hub"]},
        "periphery": {"mainContracts": ["Oracle"]},
        "legacy": {"mainContracts": ["V1Pool"]},
    },
    "ecosystem": {
        "networks": [{"name": "mainnet", "chainId": 1}],
        "deployments": [{"network": "mainnet", "address": "0xabc"}],
        "notes": "kept out of the merge",
    },
}


def test_isoformat_renders_utc_with_milliseconds() -> None:
    moment = datetime(2025, 12, 26, 5, 56, 26, 123456, tzinfo=timezone(timedelta(hours=2)))

    assert isoformat(moment) == "2025-12-26T03:56:26.123Z"


def test_generate_document_copies_manifest_fields() -> None:
    doc = generate_document(METADATA, REVISION, FIXED_NOW)

    for field, value in METADATA.as_dict().items():
        assert doc[field] == value


def test_generate_document_populates_fixed_schema() -> None:
    doc = generate_document(METADATA, REVISION, FIXED_NOW, updated_by="release-bot")

    timestamp = FIXED_NOW_ISO
    assert doc["releaseInfo"] == {
        "releaseDate": timestamp,
        "commitHash": "a1b2c3d",
        "commitDate": "2025-12-20 10:11:12 +0000",
        "branch": "main",
    }
    assert doc["documentation"] == {
        "readme": "README.md",
        "changelog": "CHANGELOG.md",
        "contributing": "CONTRIBUTING.md",
    }
    assert doc["components"] == {
        "core": {"description": "Core protocol contracts", "status": "active", "mainContracts": []},
        "periphery": {
            "description": "Peripheral contracts and utilities",
            "status": "active",
            "mainContracts": [],
        },
    }
    assert doc["ecosystem"] == {"networks": [], "deployments": []}
    assert doc["metadata"] == {
        "lastUpdated": timestamp,
        "updatedBy": "release-bot",
        "generatedAt": timestamp,
    }
    assert list(doc)[-5:] == ["releaseInfo", "documentation", "components", "ecosystem", "metadata"]


def test_generate_document_always_includes_required_components() -> None:
    doc = generate_document(
        METADATA,
        REVISION,
        FIXED_NOW,
        components=[ComponentSpec(key="governance", description="Governance", status="beta")],
    )

    assert list(doc["components"]) == ["core", "periphery", "governance"]
    assert doc["components"]["governance"]["status"] == "beta"


def test_merge_with_no_existing_document_is_identity() -> None:
    doc = generate_document(METADATA, REVISION, FIXED_NOW)
    snapshot = copy.deepcopy(doc)

    merged = merge_documents(doc, None)

    assert merged == snapshot


def test_merge_preserves_curated_fields_only() -> None:
    doc = generate_document(METADATA, REVISION, FIXED_NOW)
    existing = copy.deepcopy(CURATED)

    merged = merge_documents(doc, existing)

    assert merged["version"] == "4.0.0"
    assert merged["ecosystem"] == {
        "networks": [{"name": "mainnet", "chainId": 1}],
        "deployments": [{"network": "mainnet", "address": "0xabc"}],
    }
    assert merged["components"]["core"] == {
        "description": "Core protocol contracts",
        "status": "active",
        "mainContracts": ["Pool", "Hub"],
    }
    assert merged["components"]["periphery"]["mainContracts"] == ["Oracle"]
    assert "legacy" not in merged["components"]
    assert existing == CURATED
    assert doc["components"]["core"]["mainContracts"] == []


def test_merge_defaults_missing_curated_values_to_empty() -> None:
    doc = generate_document(METADATA, REVISION, FIXED_NOW)
    existing = {
        "components": {"core": {"description": "no contracts listed"}},
        "ecosystem": {"networks": "mainnet"},
    }

    merged = merge_documents(doc, existing)

    assert merged["components"]["core"]["mainContracts"] == []
    assert merged["ecosystem"] == {"networks": [], "deployments": []}


def test_merge_is_idempotent_across_runs() -> None:
    first = merge_documents(generate_document(METADATA, REVISION, FIXED_NOW), CURATED)
    later = FIXED_NOW + timedelta(days=3)

    second = merge_documents(generate_document(METADATA, REVISION, later), first)

    assert second["ecosystem"]["networks"] == CURATED["ecosystem"]["networks"]
    assert second["ecosystem"]["deployments"] == CURATED["ecosystem"]["deployments"]
    assert second["components"]["core"]["mainContracts"] == ["Pool", "Hub"]
    assert second["components"]["periphery"]["mainContracts"] == ["Oracle"]
    assert second["metadata"]["generatedAt"] == isoformat(later)


def test_load_existing_document_returns_none_when_absent(tmp_path) -> None:
    assert load_existing_document(tmp_path / "ecosystem.json") is None


def test_load_existing_document_reads_json_object(project_builder) -> None:
    path = project_builder.write_json("ecosystem.json", CURATED)

    assert load_existing_document(path) == CURATED


def test_load_existing_document_tolerates_corrupt_file(project_builder, caplog) -> None:
    project_builder.write({"ecosystem.json": "{ truncated"})

    with caplog.at_level(logging.WARNING, logger="ecodocs"):
        loaded = load_existing_document(project_builder.path() / "ecosystem.json")

    assert loaded is None
    assert "Could not load existing ecosystem.json" in caplog.text


def test_load_existing_document_ignores_non_object(project_builder) -> None:
    path = project_builder.write_json("ecosystem.json", [1, 2, 3])

    assert load_existing_document(path) is None
