"""
Tests: Batch and workspace validation, plus auto-fix suggestions.

Run with:
    pytest precision_engine/tests/test_batch.py -v
"""

import asyncio

from precision_engine.config import Settings
from precision_engine.engine import PrecisionEngine
from precision_engine.engine.orchestrator import DEFAULT_CHECKERS, summarize
from precision_engine.models.enums import CheckPhase, DocumentKind, FindingCategory, FixAction


class TestBatchValidate:
    def test_one_valid_one_invalid(self, settings, capability, make_capability):
        engine = PrecisionEngine(settings)
        invalid = make_capability(id="CAP-0002", title="")
        batch = asyncio.run(engine.batch_validate([capability, invalid]))

        assert batch.summary.total_documents == 2
        assert batch.summary.valid_documents == 1
        assert batch.summary.invalid_documents == 1
        assert batch.summary.total_errors == 1
        assert [r.document_id for r in batch.results] == ["CAP-0001", "CAP-0002"]

    def test_average_quality_score(self, settings, capability, make_capability):
        engine = PrecisionEngine(settings)
        # Two errors plus the long-description bonus: 100 - 20 + 5 = 85
        invalid = make_capability(id="CAP-0002", status="Done", priority="Urgent")
        batch = asyncio.run(engine.batch_validate([capability, invalid]))
        assert batch.results[1].quality_score == 85
        assert batch.summary.average_quality_score == 92.5

    def test_empty_batch(self, settings):
        batch = asyncio.run(PrecisionEngine(settings).batch_validate([]))
        assert batch.results == []
        assert batch.summary.total_documents == 0
        assert batch.summary.average_quality_score == 0.0

    def test_engine_wide_limit_holds_for_fifty_documents(self, make_capability, make_tracker):
        tracker = make_tracker()
        engine = PrecisionEngine(
            Settings(max_concurrent_validations=10),
            checkers=[(CheckPhase.STRUCTURE, tracker)],
        )
        docs = [make_capability(id=f"CAP-{i:04d}") for i in range(50)]
        batch = asyncio.run(engine.batch_validate(docs))
        engine.close()

        assert len(batch.results) == 50
        assert [r.document_id for r in batch.results] == [d.id for d in docs]
        assert len({r.document_id for r in batch.results}) == 50
        # One checker per document, so in-flight checkers equal in-flight documents
        assert tracker.calls == 50
        assert tracker.peak == 10
        assert engine.validation_limiter.in_flight == 0

    def test_failure_isolated_to_one_document(self, settings, capability, make_capability):
        def picky(document, kind, corpus, catalog):
            if document.identifier == "CAP-0002":
                raise KeyError("broken record")
            return []

        checkers = [*DEFAULT_CHECKERS, (CheckPhase.BUSINESS_LOGIC, picky)]
        engine = PrecisionEngine(settings, checkers=checkers)
        batch = asyncio.run(engine.batch_validate([capability, make_capability(id="CAP-0002")]))

        assert batch.results[0].is_valid is True
        assert batch.results[1].is_valid is False
        assert batch.results[1].findings[-1].category == FindingCategory.VALIDATION_ERROR

    def test_unreadable_dict_reported_in_place(self, settings, capability):
        batch = asyncio.run(PrecisionEngine(settings).batch_validate([{"note": "?"}, capability]))
        assert batch.results[0].findings[0].category == FindingCategory.VALIDATION_ERROR
        assert batch.results[1].is_valid is True

    def test_engine_reusable_across_event_loops(self, settings, capability):
        engine = PrecisionEngine(settings)
        asyncio.run(engine.batch_validate([capability]))
        engine.clear_cache()
        batch = asyncio.run(engine.batch_validate([capability]))
        assert batch.summary.valid_documents == 1

    def test_summarize_counts(self, settings, capability, make_capability):
        engine = PrecisionEngine(settings)
        batch = asyncio.run(engine.batch_validate([capability, make_capability(id="CAP-0002", title="")]))
        summary = summarize(batch.results, 12.5)
        assert summary.total_documents == 2
        assert summary.processing_time_ms == 12.5


class TestValidateWorkspace:
    def test_reference_resolved_within_workspace(self, settings, capability, enabler):
        batch = asyncio.run(PrecisionEngine(settings).validate_workspace([capability, enabler]))
        assert batch.summary.valid_documents == 2

    def test_dangling_capability_reference(self, settings, make_enabler):
        batch = asyncio.run(
            PrecisionEngine(settings).validate_workspace([make_enabler(capability_id="CAP-0404")])
        )
        categories = [f.category for f in batch.results[0].errors]
        assert categories == [FindingCategory.INVALID_CAPABILITY_REFERENCE]

    def test_cycle_across_documents(self, settings, make_capability):
        docs = [
            make_capability(id="CAP-0001", dependencies=["CAP-0002"]),
            make_capability(id="CAP-0002", dependencies=["CAP-0001"]),
        ]
        batch = asyncio.run(PrecisionEngine(settings).validate_workspace(docs))
        for result in batch.results:
            assert FindingCategory.CIRCULAR_DEPENDENCY in [f.category for f in result.errors]

    def test_accepts_raw_dicts(self, settings):
        docs = [
            {
                "id": "CAP-0001",
                "title": "Billing",
                "description": "Everything to do with invoices and payments for customers.",
                "status": "Draft",
                "priority": "High",
                "owner": "Billing Team",
            },
            {"id": "ENB-0001", "capabilityId": "CAP-0009", "title": "Invoices"},
        ]
        batch = asyncio.run(PrecisionEngine(settings).validate_workspace(docs))
        assert batch.results[0].is_valid is True
        assert FindingCategory.INVALID_CAPABILITY_REFERENCE in [f.category for f in batch.results[1].errors]


class TestAutoFix:
    def _results(self, engine, *docs):
        return asyncio.run(engine.batch_validate(list(docs))).results

    def test_missing_field_defaults(self, settings, make_capability):
        engine = PrecisionEngine(settings)
        results = self._results(engine, make_capability(owner=None, priority=None))
        fixes = {f.field: f for f in engine.generate_auto_fix_suggestions(results)}

        assert fixes["owner"].action == FixAction.ADD_FIELD
        assert fixes["owner"].suggested_value == "Product Team"
        assert fixes["owner"].confidence == 0.8
        assert fixes["priority"].suggested_value == "Medium"

    def test_missing_status_uses_kind_default(self, settings, make_enabler):
        engine = PrecisionEngine(settings)
        results = self._results(engine, make_enabler(status=None))
        fixes = engine.generate_auto_fix_suggestions(results)
        assert [(f.field, f.suggested_value) for f in fixes] == [("status", "In Draft")]

    def test_invalid_id_gets_conforming_id(self, settings, make_capability):
        engine = PrecisionEngine(settings)
        result = self._results(engine, make_capability(id="CAP-7"))[0]
        fixes = engine.generate_auto_fix_suggestions(result)

        assert len(fixes) == 1
        assert fixes[0].action == FixAction.FORMAT_ID
        assert fixes[0].confidence == 0.9
        assert fixes[0].document_id == "CAP-7"
        assert engine.catalog.id_pattern(DocumentKind.CAPABILITY).fullmatch(fixes[0].suggested_value)

    def test_generated_ids_are_distinct(self, settings, make_capability):
        engine = PrecisionEngine(settings)
        results = self._results(engine, make_capability(id="CAP-1"), make_capability(id="CAP-2"))
        values = [f.suggested_value for f in engine.generate_auto_fix_suggestions(results)]
        assert len(values) == 2
        assert values[0] != values[1]

    def test_other_categories_skipped(self, settings, make_enabler):
        engine = PrecisionEngine(settings)
        results = self._results(engine, make_enabler(status="Implemented", approval="NotApproved"))
        assert engine.generate_auto_fix_suggestions(results) == []

    def test_clean_results_give_nothing(self, settings, capability):
        engine = PrecisionEngine(settings)
        assert engine.generate_auto_fix_suggestions(self._results(engine, capability)) == []
