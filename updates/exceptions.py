"""
API error envelope.

Every error response from the API carries a JSON ``message``. Validation
failures additionally include ``errors`` with the per-field details.
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _summarize(detail) -> str:
    """Flatten DRF's nested error detail into a single readable line."""
    if isinstance(detail, dict):
        parts = []
        for field, value in detail.items():
            text = _summarize(value)
            parts.append(text if field == "non_field_errors" else f"{field}: {text}")
        return "; ".join(parts)
    if isinstance(detail, (list, tuple)):
        return " ".join(_summarize(item) for item in detail)
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            response.data = {"message": _summarize(exc.detail), "errors": exc.detail}
        else:
            detail = getattr(exc, "detail", None) or response.data.get("detail", "")
            response.data = {"message": _summarize(detail)}
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown view"

    if isinstance(exc, DatabaseError):
        logger.exception(f"Database error in {view_name}")
        return Response({"message": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.exception(f"Unhandled error in {view_name}")
    return Response(
        {"message": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
