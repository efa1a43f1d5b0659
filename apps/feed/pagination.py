from rest_framework.exceptions import ValidationError
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class PostIdCursorPagination(BasePagination):
    """
    Infinite-scroll pagination keyed on the post id
    - ?limit= page size, ?cursor= id of the last item already seen
    - newest first: the next page holds ids strictly below the cursor
    - response: {"items": [...], "next_cursor": <id or null>}
    """
    page_size = 20
    max_page_size = 100
    ordering = '-id'
    cursor_query_param = 'cursor'
    page_size_query_param = 'limit'

    def paginate_queryset(self, queryset, request, view=None):
        self.limit = self._parse_int(request, self.page_size_query_param, self.page_size)
        if not 1 <= self.limit <= self.max_page_size:
            raise ValidationError(
                {self.page_size_query_param: [f"limit must be between 1 and {self.max_page_size}."]}
            )

        cursor = self._parse_int(request, self.cursor_query_param, None)
        descending = self.ordering.startswith('-')
        if cursor is not None:
            queryset = queryset.filter(id__lt=cursor) if descending else queryset.filter(id__gt=cursor)

        # One extra row tells us whether another page exists
        rows = list(queryset.order_by(self.ordering)[:self.limit + 1])
        has_more = len(rows) > self.limit
        rows = rows[:self.limit]
        self.next_cursor = rows[-1].id if has_more else None
        return rows

    def get_paginated_response(self, data):
        return Response({"items": data, "next_cursor": self.next_cursor})

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'items': schema,
                'next_cursor': {'type': 'integer', 'nullable': True},
            },
        }

    def _parse_int(self, request, param, default):
        raw = request.query_params.get(param)
        if raw in (None, ''):
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError({param: [f"{param} must be an integer."]})


class CommentIdCursorPagination(PostIdCursorPagination):
    """
    Replies read top to bottom: oldest first, next page holds ids above the cursor
    """
    page_size = 10
    max_page_size = 50
    ordering = 'id'
