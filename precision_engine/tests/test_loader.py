"""
Tests: Workspace corpus loading and the CLI entry point.

Run with:
    pytest precision_engine/tests/test_loader.py -v
"""

import json

import pytest

from precision_engine.corpus import load_corpus
from precision_engine.main import main, run
from precision_engine.models.documents import Capability, Enabler


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def workspace(tmp_path):
    _write(tmp_path / "capabilities.json", {
        "documents": [
            {
                "id": "CAP-0001",
                "title": "Billing",
                "description": "Everything customers need for invoices and payments.",
                "status": "Draft",
                "priority": "High",
                "owner": "Billing Team",
            }
        ]
    })
    _write(tmp_path / "enablers.json", [
        {
            "id": "ENB-0001",
            "capabilityId": "CAP-0001",
            "title": "Invoice Export",
            "description": "Exports monthly invoices to the accounting system as CSV.",
            "status": "In Draft",
            "priority": "Medium",
            "owner": "Billing Team",
            "implementationPlan": "Nightly export job.",
            "acceptanceCriteria": "Export file present every morning.",
        }
    ])
    return tmp_path


class TestLoadCorpus:
    def test_directory(self, workspace):
        docs = load_corpus(workspace)
        assert [type(d) for d in docs] == [Capability, Enabler]
        assert docs[1].capability_id == "CAP-0001"

    def test_single_file(self, workspace):
        docs = load_corpus(workspace / "enablers.json")
        assert [d.identifier for d in docs] == ["ENB-0001"]

    def test_bare_document_file(self, tmp_path):
        _write(tmp_path / "one.json", {"id": "CAP-0007", "title": "Solo"})
        assert [d.identifier for d in load_corpus(tmp_path)] == ["CAP-0007"]

    def test_bad_files_and_records_are_skipped(self, workspace):
        (workspace / "broken.json").write_text("{oops", encoding="utf-8")
        _write(workspace / "mystery.json", [{"title": "no kind, no id"}, {"id": "CAP-0009"}])
        docs = load_corpus(workspace)
        assert sorted(d.identifier for d in docs) == ["CAP-0001", "CAP-0009", "ENB-0001"]

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_corpus(tmp_path / "nope")


class TestRun:
    def test_run_validates_workspace(self, workspace):
        batch = run(str(workspace))
        assert batch.summary.total_documents == 2
        assert batch.summary.valid_documents == 2

    def test_main_exit_codes(self, workspace):
        assert main([str(workspace)]) == 0
        _write(workspace / "bad.json", {"id": "ENB-0002", "capabilityId": "CAP-0404"})
        assert main([str(workspace)]) == 1
