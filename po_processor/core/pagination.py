from django.core.paginator import Paginator
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 15


def paginated_response(request, queryset, serializer_class, context=None):
    """Serialize one page of a queryset with the page metadata clients expect"""
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', DEFAULT_PAGE_SIZE))
    except (TypeError, ValueError):
        page, limit = 1, DEFAULT_PAGE_SIZE
    limit = max(limit, 1)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })
