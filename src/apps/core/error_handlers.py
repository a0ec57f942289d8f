from __future__ import annotations

import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.core.contracts.errors import ApiErrorPayload

LOGGER = logging.getLogger("hoepel.rebuild")


class UnifiedErrorMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(self, request: HttpRequest, exception: Exception) -> HttpResponse:
        request_id = str(getattr(request, "request_id", ""))
        LOGGER.error(
            "request_failed request_id=%s path=%s error=%s",
            request_id,
            request.path_info,
            type(exception).__name__,
            exc_info=exception,
        )
        payload = ApiErrorPayload(
            code="internal_error",
            message="An internal error occurred.",
            request_id=request_id,
        )
        return JsonResponse(payload.to_dict(), status=500)
