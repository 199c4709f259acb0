from rest_framework import serializers
from .models import User
from projects.sanitizers import sanitize_skills, sanitize_text


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'role',
            'phone',
            'bio',
            'location',
            'skills',
            'date_joined',
        ]
        read_only_fields = ['id', 'username', 'role', 'date_joined']


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user block nested inside project/application payloads."""

    class Meta:
        model = User
        fields = ['id', 'username', 'email']


class UpdateProfileSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False)
    skills = serializers.ListField(child=serializers.CharField(max_length=100), required=False)

    class Meta:
        model = User
        fields = ['email', 'phone', 'bio', 'location', 'skills', 'password']

    def validate_bio(self, value):
        return sanitize_text(value, max_length=2000)

    def validate_skills(self, value):
        return sanitize_skills(value)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
