import logging

from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from core.responses import api_response
from users.serializers import UserSerializer
from .serializers import LoginSerializer, SignupSerializer

logger = logging.getLogger("vmatch")


def tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


class SignupView(APIView):
    # allow unauthenticated
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User registered: user={user.id}, role={user.role}")

        return api_response(
            "User registered successfully",
            {"user": UserSerializer(user).data, **tokens_for(user)},
            status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    # allow unauthenticated; default authenticators kept so failures answer 401
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning("Failed login attempt")
            raise AuthenticationFailed("Invalid credentials")

        user = serializer.validated_data["user"]
        return api_response(
            "Login successful",
            {"user": UserSerializer(user).data, **tokens_for(user)},
        )


class RefreshView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = TokenRefreshSerializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise AuthenticationFailed(str(e))
        return api_response("Token refreshed successfully", serializer.validated_data)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_response("User retrieved successfully", UserSerializer(request.user).data)
