import logging

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from core.authentication import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from core.supabase_utils import IMAGE_EXTENSIONS, upload_file_to_supabase, validate_upload

from .serializers import (
    LoginSerializer, ProfileImageUploadSerializer, ProfileUpdateSerializer,
    UserProfileSerializer, UserSignupSerializer,
)

logger = logging.getLogger(__name__)


def set_token_on_response_cookie(user: User, status_code=status.HTTP_200_OK) -> Response:
    """
    Issue a refresh/access pair for user and return their profile with both
    tokens set as HTTP-only cookies.
    """
    token = RefreshToken.for_user(user)
    profile_data = UserProfileSerializer(user.profile).data

    res = Response(profile_data, status=status_code)
    cookie_options = {
        "httponly": True,
        "secure": not settings.DEBUG,
        "samesite": "None" if not settings.DEBUG else "Lax",
    }
    res.set_cookie(REFRESH_TOKEN_COOKIE, value=str(token), **cookie_options)
    res.set_cookie(ACCESS_TOKEN_COOKIE, value=str(token.access_token), **cookie_options)
    return res


class UserSignupView(APIView):
    """
    Sign up with email + password + display name
    POST /account/signup/
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = UserSignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("New account created: user_id=%s", user.id)
        return set_token_on_response_cookie(user, status_code=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Email + password login
    POST /account/login/
    """
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data['email']
        password = serializer.validated_data['password']

        user = User.objects.filter(email__iexact=email).first()
        if not user:
            return Response({"error": "No account found with this email."}, status=status.HTTP_400_BAD_REQUEST)

        if not user.is_active:
            return Response(
                {"error": "This account has been deactivated. Please contact support."},
                status=status.HTTP_403_FORBIDDEN
            )

        user = authenticate(request, username=email, password=password)
        if not user:
            return Response({"error": "Incorrect password."}, status=status.HTTP_400_BAD_REQUEST)

        return set_token_on_response_cookie(user)


class LogoutView(APIView):
    """
    Log out everywhere
    - every outstanding refresh token of the user is blacklisted
    - access_token / refresh_token cookies are cleared
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        for token in OutstandingToken.objects.filter(user=request.user):
            BlacklistedToken.objects.get_or_create(token=token)

        response = Response({"detail": "You have been logged out in all devices."}, status=status.HTTP_200_OK)
        response.delete_cookie(ACCESS_TOKEN_COOKIE)
        response.delete_cookie(REFRESH_TOKEN_COOKIE)
        return response


class TokenRefreshView(APIView):
    """
    Reissue the access token from the refresh_token cookie
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_TOKEN_COOKIE) or request.data.get("refresh_token")
        if not refresh_token:
            return Response({"error": "No refresh_token"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            refresh = RefreshToken(refresh_token)
            refresh.check_blacklist()
            new_access_token = str(refresh.access_token)
        except TokenError:
            return Response(
                {"error": "Invalid refresh token. Please log in again."},
                status=status.HTTP_401_UNAUTHORIZED
            )

        response = Response({"message": "Access token has been refreshed."}, status=status.HTTP_200_OK)
        response.set_cookie(
            ACCESS_TOKEN_COOKIE, value=new_access_token, httponly=True,
            secure=not settings.DEBUG, samesite="None" if not settings.DEBUG else "Lax"
        )
        return response


class ProfileView(APIView):
    """
    GET   /account/profile/ -> the caller's profile
    PATCH /account/profile/ -> { "name": "...", "email": "...", "image": "https://..." }
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserProfileSerializer(request.user.profile).data, status=status.HTTP_200_OK)

    def patch(self, request):
        profile = request.user.profile
        serializer = ProfileUpdateSerializer(profile, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)


class ProfileImageUploadView(APIView):
    """
    Upload a new profile image (multipart field "image", max 4MB)
    POST /account/profile/image/
    """
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def post(self, request):
        serializer = ProfileImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        image = validate_upload(
            serializer.validated_data['image'], IMAGE_EXTENSIONS, settings.PROFILE_IMAGE_MAX_SIZE
        )

        uploaded_url = upload_file_to_supabase(image, "profile_images")
        if not uploaded_url:
            return Response({"error": "Image upload failed."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        profile = request.user.profile
        profile.image = uploaded_url
        profile.save()
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)
