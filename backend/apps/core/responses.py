from __future__ import annotations

from math import ceil
from typing import Any, Optional

from django.utils import timezone
from rest_framework import status as http_status
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _meta(pagination: Optional[dict] = None) -> dict:
    meta = {"timestamp": timezone.now().isoformat()}
    if pagination:
        meta["pagination"] = pagination
    return meta


def success_response(
    message: str,
    data: Any = None,
    status: int = http_status.HTTP_200_OK,
    pagination: Optional[dict] = None,
) -> Response:
    """
    Standard envelope for successful calls:
    { "success": true, "message": ..., "data": ..., "meta": { "timestamp": ..., "pagination"?: ... } }
    """
    body = {"success": True, "message": message, "data": data, "meta": _meta(pagination)}
    return Response(body, status=status)


def error_response(
    message: str,
    code: str,
    status: int = http_status.HTTP_400_BAD_REQUEST,
    details: Any = None,
) -> Response:
    body = {
        "success": False,
        "message": message,
        "error": {"code": code, "details": details},
        "meta": _meta(),
    }
    return Response(body, status=status)


def _positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def paginate(queryset, request):
    """
    Optional page/limit pagination. Without a ?page parameter the whole queryset
    is returned and no pagination meta is produced.
    """
    if "page" not in request.query_params:
        return queryset, None
    page = _positive_int(request.query_params.get("page"), 1)
    limit = min(_positive_int(request.query_params.get("limit"), DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    total = queryset.count()
    start = (page - 1) * limit
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": ceil(total / limit) if total else 0,
    }
    return queryset[start : start + limit], pagination
