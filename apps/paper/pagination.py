from rest_framework.exceptions import ValidationError
from rest_framework.pagination import LimitOffsetPagination


class PaperLimitOffsetPagination(LimitOffsetPagination):
    """
    Offset pagination for the paper directory (?limit=&offset=)
    - limit 1..100 (default 50), offset >= 0
    - out-of-range or non-integer values are rejected, not clamped
    """
    default_limit = 50
    max_limit = 100

    def get_limit(self, request):
        limit = self._parse_int(request, self.limit_query_param, self.default_limit)
        if not 1 <= limit <= self.max_limit:
            raise ValidationError(
                {self.limit_query_param: [f"limit must be between 1 and {self.max_limit}."]}
            )
        return limit

    def get_offset(self, request):
        offset = self._parse_int(request, self.offset_query_param, 0)
        if offset < 0:
            raise ValidationError({self.offset_query_param: ["offset cannot be negative."]})
        return offset

    def _parse_int(self, request, param, default):
        raw = request.query_params.get(param)
        if raw in (None, ''):
            return default
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationError({param: [f"{param} must be an integer."]})
