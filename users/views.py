# users/views.py - Profile API

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from core.responses import api_response
from .serializers import UserSerializer, UpdateProfileSerializer


class MyProfileView(APIView):
    """
    GET   /api/users/me/  -> current user profile
    PATCH /api/users/me/  -> update bio / phone / location / skills / password
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_response("Profile retrieved successfully", UserSerializer(request.user).data)

    def patch(self, request):
        serializer = UpdateProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return api_response("Profile updated successfully", UserSerializer(user).data)
