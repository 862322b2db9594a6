"""Sanity checks for the JSON object store."""

from datetime import date

from reqspec.core.builder.requirement_builder import RequirementBuilder
from reqspec.core.models import CandidateRecord, DraftRecord, SubmissionReceipt
from reqspec.core.storage.object_store import ObjectStore


def _spec():
    builder = RequirementBuilder(region="gulf")
    builder.set_title("Store Manager")
    builder.set_description("Run a flagship store.")
    builder.set_job_location("Doha")
    builder.add_include_skill("retail operations")
    builder.set_resume_freshness("2025-02-01")
    return builder.finalize().unwrap()


def test_object_store_roundtrip(tmp_path):
    store = ObjectStore(tmp_path / "store")
    spec = _spec()

    # Drafts
    draft = DraftRecord(spec=spec, note="waiting on headcount approval")
    store.save_draft(draft)
    loaded_draft = store.load_draft(draft.id)
    assert loaded_draft and loaded_draft.spec == spec
    assert loaded_draft.spec.resume_freshness == date(2025, 2, 1)
    assert loaded_draft.note == "waiting on headcount approval"
    assert [d.id for d in store.list_drafts()] == [draft.id]

    assert store.delete_draft(draft.id) is True
    assert store.delete_draft(draft.id) is False
    assert store.load_draft(draft.id) is None
    assert store.list_drafts() == []

    # Receipts
    receipt = SubmissionReceipt(
        requirement_id="req-42",
        region=spec.region,
        title=spec.title,
        payload={"title": spec.title, "region": "gulf"},
    )
    store.save_receipt(receipt)
    loaded_receipt = store.load_receipt(receipt.id)
    assert loaded_receipt and loaded_receipt.requirement_id == "req-42"
    assert loaded_receipt.payload["region"] == "gulf"
    assert len(store.list_receipts()) == 1

    # Candidate pools
    pool = [
        CandidateRecord(candidate_id="c1", skills=["Retail Operations"]),
        CandidateRecord(candidate_id="c2", current_location="Doha"),
    ]
    store.save_candidate_pool("doha", pool)
    assert store.load_candidate_pool("doha") == pool
    assert store.load_candidate_pool("missing") == []


def test_store_creates_missing_directories(tmp_path):
    base = tmp_path / "nested" / "dir"
    ObjectStore(base)
    assert base.is_dir()
