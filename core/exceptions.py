from rest_framework import exceptions, status
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response
import logging

logger = logging.getLogger("vmatch")


class ConflictError(exceptions.APIException):
    """
    Raised when a request is well-formed but the current state forbids it:
    illegal status transition, duplicate application, closed project,
    exhausted capacity.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request conflicts with the current state of the resource."
    default_code = "conflict"


def _first_message(detail):
    """
    Pull one human readable line out of a DRF error detail
    (string, list or nested dict of field errors).
    """
    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for field, value in detail.items():
            message = _first_message(value)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into the API response envelope:
    {"status": <code>, "message": <text>, "data": <payload or null>}

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        data = None
        if isinstance(exc, exceptions.ValidationError) and isinstance(response.data, dict):
            data = response.data

        response.data = {
            "status": response.status_code,
            "message": _first_message(response.data),
            "data": data,
        }
        return response

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "message": "Server error",
            "data": None,
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
