"""Extraction use-case: check the upload, ask the provider, reconcile the reply."""
from __future__ import annotations

from datetime import date
from typing import Any

from weeksheet.config import settings
from weeksheet.domain.exceptions import ExtractionError, UploadRejectedError, WeeksheetError
from weeksheet.domain.reconcile import ReconcileOutcome, reconcile_extraction
from weeksheet.extraction.prompt import build_prompt
from weeksheet.extraction.providers import ExtractionProvider, UploadedDocument, parse_model_json
from weeksheet.logging import logger

ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/webp",
    "application/pdf",
    "text/plain",
    "text/csv",
})


class ExtractionService:
    def __init__(self, provider: ExtractionProvider, max_upload_bytes: int | None = None) -> None:
        self._provider = provider
        self._max_upload_bytes = max_upload_bytes or settings.max_upload_bytes

    def validate_upload(self, document: UploadedDocument, employee_name: str) -> None:
        """Raises UploadRejectedError when the upload may not be sent to the provider."""
        if not employee_name.strip():
            raise UploadRejectedError("Employee name is required before uploading.")
        if document.size_bytes == 0:
            raise UploadRejectedError("No file provided")
        if document.size_bytes > self._max_upload_bytes:
            limit_mb = self._max_upload_bytes // (1024 * 1024)
            raise UploadRejectedError(f"File too large (max {limit_mb}MB)")
        if document.content_type not in ALLOWED_CONTENT_TYPES:
            raise UploadRejectedError(f"Unsupported file type: {document.content_type}")

    def extract(self, document: UploadedDocument, employee_name: str) -> Any:
        """Raw (untrusted) JSON payload for *document*."""
        self.validate_upload(document, employee_name)
        logger.info(
            "Extracting %s (%s, %d bytes) via %s",
            document.filename, document.content_type, document.size_bytes, self._provider.name,
        )
        try:
            raw = self._provider.complete(
                prompt=build_prompt(employee_name.strip()), document=document,
            )
        except WeeksheetError:
            raise
        except Exception as exc:
            logger.exception("Provider %s failed", self._provider.name)
            raise ExtractionError(f"Extraction failed: {exc}") from exc
        return parse_model_json(raw)

    def extract_and_reconcile(
        self,
        document: UploadedDocument,
        *,
        employee_name: str,
        email: str = "",
        reference: date | None = None,
    ) -> ReconcileOutcome:
        payload = self.extract(document, employee_name)
        outcome = reconcile_extraction(
            payload, employee_name=employee_name, email=email, reference=reference,
        )
        logger.info(
            "Extraction of %s: %s (%d warning(s))",
            document.filename, outcome.status.value, len(outcome.warnings),
        )
        return outcome
