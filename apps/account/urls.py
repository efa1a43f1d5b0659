from django.urls import path

from .views import (
    LoginView, LogoutView, ProfileImageUploadView, ProfileView,
    TokenRefreshView, UserSignupView,
)

urlpatterns = [
    path('signup/', UserSignupView.as_view(), name='user-signup'),
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('token-refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # The caller's own profile
    path('profile/', ProfileView.as_view(), name='profile'),
    path('profile/image/', ProfileImageUploadView.as_view(), name='profile-image-upload'),
]
