from django.urls import path

from .views import PaperDetailView, PaperFilterOptionsView, PaperListCreateView

urlpatterns = [
    # Browse / search + contribute
    path('', PaperListCreateView.as_view(), name='paper-list-create'),

    # Filter values for the browse page
    path('filters/', PaperFilterOptionsView.as_view(), name='paper-filters'),

    path('<int:paper_id>/', PaperDetailView.as_view(), name='paper-detail'),
]
