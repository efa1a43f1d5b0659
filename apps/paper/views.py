import logging

from django.db.models import Q
from rest_framework import generics, permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import SEMESTER_SEASONS, Department, Paper, PaperType
from .pagination import PaperLimitOffsetPagination
from .serializers import ALL, PaperCreateSerializer, PaperSearchSerializer, PaperSerializer

logger = logging.getLogger(__name__)


class PaperListCreateView(generics.ListCreateAPIView):
    """
    GET  /papers/  -> newest first, with optional search and filters
        ?search=      course name / course code / professor (OR, case-insensitive)
        ?department=  ?semester=  ?paper_type=   (AND, "All" = no filter)
        ?limit=  ?offset=
    POST /papers/  -> contribute a paper (login required)
    """
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    pagination_class = PaperLimitOffsetPagination
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PaperCreateSerializer
        return PaperSerializer

    def get_queryset(self):
        queryset = Paper.objects.select_related('created_by__profile').order_by('-created_at', '-id')
        if self.request.method != 'GET':
            return queryset

        params = PaperSearchSerializer(data=self.request.query_params)
        params.is_valid(raise_exception=True)
        filters = params.validated_data

        search = filters.get('search')
        if search:
            queryset = queryset.filter(
                Q(course_name__icontains=search) |
                Q(course_code__icontains=search) |
                Q(professor_name__icontains=search)
            )

        if filters.get('department'):
            queryset = queryset.filter(department=filters['department'])
        if filters.get('semester'):
            queryset = queryset.filter(semester=filters['semester'])
        if filters.get('paper_type'):
            queryset = queryset.filter(paper_type=filters['paper_type'])

        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        paper = serializer.save()
        logger.info("Paper %s created by user_id=%s", paper.id, request.user.id)

        read_serializer = PaperSerializer(paper, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)


class PaperDetailView(generics.RetrieveAPIView):
    """
    GET /papers/<paper_id>/
    """
    serializer_class = PaperSerializer
    permission_classes = [permissions.AllowAny]
    queryset = Paper.objects.select_related('created_by__profile')
    lookup_field = 'id'
    lookup_url_kwarg = 'paper_id'


class PaperFilterOptionsView(APIView):
    """
    Values a client can offer in the browse filters
    GET /papers/filters/
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        semesters = list(
            Paper.objects.order_by().values_list('semester', flat=True).distinct()
        )
        semesters.sort(key=_semester_sort_key, reverse=True)

        return Response(
            {
                "departments": [ALL] + list(Department.values),
                "semesters": [ALL] + semesters,
                "paper_types": [ALL] + list(PaperType.values),
            },
            status=status.HTTP_200_OK
        )


def _semester_sort_key(semester):
    season, _, year = semester.partition('-')
    order = SEMESTER_SEASONS.index(season) if season in SEMESTER_SEASONS else -1
    return (year, order)
