"""HTTP client for the requirements backend with retry logic and error classification."""

from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..core.models.enums import SubmissionErrorCategory
from ..observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to create requirement. Please try again."

# Category -> (title, replacement message); None keeps the backend message
_CATEGORY_TEXT: dict[SubmissionErrorCategory, tuple[str, str | None]] = {
    SubmissionErrorCategory.QUOTA_EXCEEDED: (
        "Quota Limit Reached",
        "You have reached your monthly requirement posting limit. "
        "Upgrade your plan to post more requirements or contact support.",
    ),
    SubmissionErrorCategory.PERMISSION_DENIED: (
        "Permission Denied",
        "You do not have permission to create requirements. "
        "Please contact your administrator.",
    ),
    SubmissionErrorCategory.DUPLICATE: (
        "Duplicate Requirement",
        "A similar requirement already exists. Please check your existing requirements.",
    ),
    SubmissionErrorCategory.INVALID_INPUT: ("Invalid Input", None),
    SubmissionErrorCategory.GENERIC: ("Creation Failed", None),
}


class SubmissionFailed(Exception):
    """The backend rejected or never received a requirement."""

    def __init__(
        self,
        category: SubmissionErrorCategory,
        raw_message: str | None = None,
        status_code: int | None = None,
        details: Any = None,
    ):
        self.category = category
        self.raw_message = raw_message
        self.status_code = status_code
        self.details = details
        self.title, replacement = _CATEGORY_TEXT[category]
        self.user_message = replacement or raw_message or DEFAULT_FAILURE_MESSAGE
        super().__init__(f"{self.title}: {self.user_message}")


def classify_submission_error(
    message: str | None, status_code: int | None = None
) -> SubmissionErrorCategory:
    """Map a backend failure to a user-facing category.

    Args:
        message: Backend error message
        status_code: HTTP status code, if a response was received

    Returns:
        SubmissionErrorCategory
    """
    text = (message or "").lower()

    if "quota" in text:
        return SubmissionErrorCategory.QUOTA_EXCEEDED
    if "unauthorized" in text or "permission" in text or status_code in (401, 403):
        return SubmissionErrorCategory.PERMISSION_DENIED
    if "already exists" in text or "duplicate" in text or status_code == 409:
        return SubmissionErrorCategory.DUPLICATE
    if "invalid" in text or "validation" in text or status_code in (400, 422):
        return SubmissionErrorCategory.INVALID_INPUT
    return SubmissionErrorCategory.GENERIC


def extract_created_id(body: dict[str, Any]) -> str | None:
    """Pull the new requirement id from ``data.id`` or ``data.data.id``."""
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    created = data.get("id")
    if created is None and isinstance(data.get("data"), dict):
        created = data["data"].get("id")
    return str(created) if created is not None else None


class RequirementsClient:
    """Async client for ``POST /requirements``."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        company_id: str | None = None,
        timeout: float = 30,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize requirements client.

        Args:
            base_url: Backend API root (e.g. "https://host/api")
            token: Bearer token for the employer session
            company_id: Company attached to payloads that lack ``companyId``
            timeout: Request timeout in seconds
            max_retries: Attempts for transient transport failures
            transport: Optional httpx transport (used for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.company_id = company_id
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def create_requirement(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Submit a requirement payload.

        Transport failures are retried with exponential backoff; identical
        payloads are safe to resend. HTTP error responses are not retried.

        Args:
            payload: Serialized requirement

        Returns:
            Parsed response body of a successful submission

        Raises:
            SubmissionFailed: If the backend rejects the requirement or
                cannot be reached
        """
        body = dict(payload)
        if self.company_id and not body.get("companyId"):
            body["companyId"] = self.company_id

        logger.info(
            "submitting_requirement",
            title=body.get("title"),
            region=body.get("region", "default"),
        )

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers(),
                transport=self.transport,
            ) as client:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(self.max_retries),
                    wait=wait_exponential(multiplier=1, min=2, max=10),
                    retry=retry_if_exception_type(httpx.TransportError),
                    reraise=True,
                ):
                    with attempt:
                        response = await client.post("/requirements", json=body)
        except httpx.TransportError as e:
            logger.error("requirement_submission_unreachable", error=str(e), exc_info=True)
            raise SubmissionFailed(
                SubmissionErrorCategory.GENERIC,
                raw_message=f"Could not reach the requirements service: {e}",
            ) from e

        result = _parse_body(response)

        if not response.is_success or result.get("success") is False:
            message = result.get("message") or response.reason_phrase
            category = classify_submission_error(message, response.status_code)
            logger.error(
                "requirement_submission_failed",
                status_code=response.status_code,
                category=category.value,
                message=message,
                errors=result.get("errors"),
            )
            raise SubmissionFailed(
                category,
                raw_message=message,
                status_code=response.status_code,
                details=result.get("errors"),
            )

        logger.info(
            "requirement_submitted",
            status_code=response.status_code,
            requirement_id=extract_created_id(result),
        )
        return result


def _parse_body(response: httpx.Response) -> dict[str, Any]:
    try:
        parsed = response.json()
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}
