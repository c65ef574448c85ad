"""DRF exception handler that keeps the ``{"ok": false, "error": ...}`` shape.

Framework-level rejections (unsupported media type, malformed multipart,
wrong method) never reach the views' own error mapping.
"""

from rest_framework.views import exception_handler


def agenda_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None
    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    response.data = {"ok": False, "error": str(detail) if detail else "Bad request"}
    return response
