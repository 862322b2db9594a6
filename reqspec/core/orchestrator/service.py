"""RequirementService - finalizes, serializes and submits requirements."""

import os
from typing import Any

import httpx

from ..builder.payload import to_payload
from ..builder.requirement_builder import RequirementBuilder
from ..models.requirement import RequirementSpec
from ..models.submission import DraftRecord, SubmissionOutcome, SubmissionReceipt
from ..storage.object_store import ObjectStore
from ...integrations.requirements_client import (
    RequirementsClient,
    SubmissionFailed,
    extract_created_id,
)
from ...observability.logger import get_logger

logger = get_logger(__name__)


class RequirementService:
    """Single submit step between a builder session and the backend."""

    def __init__(
        self,
        client: RequirementsClient,
        store: ObjectStore | None = None,
    ):
        self.client = client
        self.store = store

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        store: ObjectStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "RequirementService":
        """Create a service whose client is configured from the ``backend`` section.

        The bearer token is read from the environment variable named by
        ``backend.token_env``; ``transport`` is passed through to httpx.
        """
        backend = config.get("backend", {})
        token_env = backend.get("token_env", "REQSPEC_API_TOKEN")
        client = RequirementsClient(
            base_url=backend.get("base_url", "http://localhost:8000/api"),
            token=os.getenv(token_env),
            company_id=backend.get("company_id"),
            timeout=backend.get("timeout", 30),
            max_retries=backend.get("max_retries", 3),
            transport=transport,
        )
        return cls(client, store)

    async def submit(self, requirement: RequirementBuilder | RequirementSpec) -> SubmissionOutcome:
        """Finalize (if needed) and submit a requirement.

        Validation problems and categorized backend failures are returned in
        the outcome; nothing is sent when validation fails.

        Args:
            requirement: Builder session or already finalized spec

        Returns:
            SubmissionOutcome
        """
        if isinstance(requirement, RequirementBuilder):
            result = requirement.finalize()
            if not result.success:
                return SubmissionOutcome(success=False, validation_errors=result.errors)
            spec = result.unwrap()
        else:
            spec = requirement

        payload = to_payload(spec)

        try:
            body = await self.client.create_requirement(payload)
        except SubmissionFailed as e:
            logger.warning(
                "requirement_not_created",
                title=spec.title,
                category=e.category.value,
            )
            return SubmissionOutcome(
                success=False,
                error_category=e.category,
                error_title=e.title,
                error_message=e.user_message,
            )

        receipt = SubmissionReceipt(
            requirement_id=extract_created_id(body),
            region=spec.region,
            title=spec.title,
            payload=payload,
            message=body.get("message"),
        )
        if self.store:
            self.store.save_receipt(receipt)

        logger.info(
            "requirement_created",
            requirement_id=receipt.requirement_id,
            region=receipt.region,
        )
        return SubmissionOutcome(success=True, receipt=receipt)

    def save_draft(self, spec: RequirementSpec, note: str | None = None) -> DraftRecord:
        """Persist a finalized spec locally without submitting it."""
        if not self.store:
            raise ValueError("A store is required to save drafts")
        draft = DraftRecord(spec=spec, note=note)
        self.store.save_draft(draft)
        logger.info("draft_saved", draft_id=draft.id, title=spec.title)
        return draft
