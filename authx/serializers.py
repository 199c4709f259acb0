from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

from core.constants import ROLE_ORGANIZER, ROLE_VOLUNTEER
from projects.sanitizers import sanitize_skills

User = get_user_model()

# admin accounts are created through the Django admin, never by signup
SIGNUP_ROLES = (ROLE_VOLUNTEER, ROLE_ORGANIZER)


class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=SIGNUP_ROLES, default=ROLE_VOLUNTEER)
    skills = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'role', 'phone', 'location', 'skills']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with that email already exists.")
        return value.lower()

    def validate_skills(self, value):
        return sanitize_skills(value)

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    """Accepts either a username or an email in `username` (or `email`)."""
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = (attrs.get("username") or attrs.get("email") or "").strip()
        if not identifier:
            raise serializers.ValidationError({"username": ["Username or email is required."]})

        username = identifier
        if "@" in identifier:
            match = User.objects.filter(email__iexact=identifier).first()
            if match is not None:
                username = match.username

        # Django still authenticates by username
        user = authenticate(username=username, password=attrs.get("password"))
        if not user:
            raise serializers.ValidationError("Invalid credentials")

        attrs["user"] = user
        return attrs
