"""File-based object store for requirement drafts, submission receipts and candidate pools.

Each artifact is a JSON file under a per-kind directory, so drafts can be
inspected and edited by hand and candidate pools can be dropped in for
offline matching.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..models.candidate import CandidateRecord
from ..models.submission import DraftRecord, SubmissionReceipt


class ObjectStore:
    """Simple JSON-backed persistence layer."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir else Path("data/requirements")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _kind_dir(self, kind: str) -> Path:
        path = self.base_dir / kind
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _dump(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _load(self, path: Path) -> Any | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------
    def save_draft(self, draft: DraftRecord) -> Path:
        path = self._kind_dir("drafts") / f"{draft.id}.json"
        self._dump(path, draft.model_dump(mode="json"))
        return path

    def load_draft(self, draft_id: str) -> DraftRecord | None:
        data = self._load(self._kind_dir("drafts") / f"{draft_id}.json")
        return DraftRecord(**data) if data else None

    def list_drafts(self) -> list[DraftRecord]:
        drafts: list[DraftRecord] = []
        for path in self._kind_dir("drafts").glob("*.json"):
            data = self._load(path)
            if data:
                drafts.append(DraftRecord(**data))
        drafts.sort(key=lambda d: d.created_at)
        return drafts

    def delete_draft(self, draft_id: str) -> bool:
        path = self._kind_dir("drafts") / f"{draft_id}.json"
        if not path.exists():
            return False
        path.unlink()
        return True

    # ------------------------------------------------------------------
    # Submission receipts
    # ------------------------------------------------------------------
    def save_receipt(self, receipt: SubmissionReceipt) -> Path:
        path = self._kind_dir("receipts") / f"{receipt.id}.json"
        self._dump(path, receipt.model_dump(mode="json"))
        return path

    def load_receipt(self, receipt_id: str) -> SubmissionReceipt | None:
        data = self._load(self._kind_dir("receipts") / f"{receipt_id}.json")
        return SubmissionReceipt(**data) if data else None

    def list_receipts(self) -> list[SubmissionReceipt]:
        receipts: list[SubmissionReceipt] = []
        for path in self._kind_dir("receipts").glob("*.json"):
            data = self._load(path)
            if data:
                receipts.append(SubmissionReceipt(**data))
        receipts.sort(key=lambda r: r.created_at)
        return receipts

    # ------------------------------------------------------------------
    # Candidate pools
    # ------------------------------------------------------------------
    def save_candidate_pool(self, name: str, candidates: list[CandidateRecord]) -> Path:
        path = self._kind_dir("candidates") / f"{name}.json"
        self._dump(path, [c.model_dump(mode="json") for c in candidates])
        return path

    def load_candidate_pool(self, name: str) -> list[CandidateRecord]:
        data = self._load(self._kind_dir("candidates") / f"{name}.json")
        return [CandidateRecord(**item) for item in data or []]
