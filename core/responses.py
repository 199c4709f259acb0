from rest_framework import status
from rest_framework.response import Response

from .querying import paginate, requested_fields


def api_response(message: str, data=None, status_code=status.HTTP_200_OK):
    """
    Standard success envelope for every endpoint.
    Always returns: {"status": <code>, "message": "<message>", "data": <payload or null>}
    """
    return Response(
        {
            "status": status_code,
            "message": message,
            "data": data,
        },
        status=status_code,
    )


def paginated_response(message: str, queryset, params, serializer_class, context=None):
    """
    List envelope: data = {"results": [...], "pagination": {total, page, limit, pages}}.
    Honors ?page, ?limit and ?fields.
    """
    page, meta = paginate(queryset, params)
    serializer = serializer_class(
        page,
        many=True,
        context=context or {},
        fields=requested_fields(params),
    )
    return api_response(message, {"results": serializer.data, "pagination": meta})
