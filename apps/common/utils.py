"""
Common utility functions for API responses
"""
from django.conf import settings
from rest_framework.response import Response
from rest_framework import status


def success_response(data=None, message="Success", status_code=status.HTTP_200_OK):
    """
    Standard success response format
    """
    response_data = {
        "code": 200,
        "msg": message,
        "data": data
    }
    return Response(response_data, status=status_code)


def error_response(message="Error", errors=None, status_code=status.HTTP_400_BAD_REQUEST):
    """
    Standard error response format
    """
    response_data = {
        "code": status_code,
        "msg": message
    }
    if errors:
        response_data["errors"] = errors
    return Response(response_data, status=status_code)


def paginated_response(queryset, serializer_class, request, message="Success"):
    """
    Standard paginated response format
    """
    from rest_framework.pagination import PageNumberPagination

    paginator = PageNumberPagination()
    paginator.page_size = settings.REST_FRAMEWORK.get('PAGE_SIZE', 20)
    paginator.page_size_query_param = 'limit'
    page = paginator.paginate_queryset(queryset, request)

    if page is not None:
        serializer = serializer_class(page, many=True)
        return success_response({
            "list": serializer.data,
            "page": {
                "pageNum": paginator.page.number,
                "pageSize": paginator.get_page_size(request),
                "total": paginator.page.paginator.count,
                "totalPages": paginator.page.paginator.num_pages
            }
        }, message)

    serializer = serializer_class(queryset, many=True)
    return success_response({
        "list": serializer.data,
        "page": {
            "pageNum": 1,
            "pageSize": len(serializer.data),
            "total": len(serializer.data),
            "totalPages": 1
        }
    }, message)


def request_user(request):
    """Authenticated user of the request, or None for anonymous callers"""
    user = getattr(request, 'user', None)
    return user if user is not None and user.is_authenticated else None
