"""
Error taxonomy shared by services and HTTP handlers.

Services raise these; `marketplace.main` renders them as `{"error": ..., "details": [...]}`.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError

GENERIC_ERROR = "Erreur interne du serveur"
INVALID_DATA = "Données invalides"


class MarketplaceError(Exception):
    status_code: int = 500

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(MarketplaceError):
    status_code = 400


class NotFoundError(MarketplaceError):
    status_code = 404


class StoreError(MarketplaceError):
    status_code = 500


def _field_name(loc: tuple[Any, ...]) -> str:
    # drop the "body"/"query" prefix FastAPI adds
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "__root__"


def field_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"field": _field_name(tuple(e.get("loc", ()))), "message": e.get("msg", "")} for e in errors]


def validation_error_from(errors: list[dict[str, Any]]) -> ValidationError:
    details = field_details(errors)
    summary = "; ".join(f"{d['field']}: {d['message']}" for d in details)
    return ValidationError(f"{INVALID_DATA}: {summary}" if summary else INVALID_DATA, details=details)


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    return validation_error_from(exc.errors())
