import re

from django.contrib.auth.models import User
from rest_framework import serializers

from .models import UserProfile


def validate_password_strength(password):
    """
    At least 8 characters, one digit and one special character.
    """
    if len(password) < 8:
        raise serializers.ValidationError("Password must be at least 8 characters long.")
    if not re.search(r"[0-9]", password):
        raise serializers.ValidationError("Password must contain at least one number.")
    if not re.search(r"[!@#$%^&*(),.?\":{}|<>_\-+=/\\\[\]~`';]", password):
        raise serializers.ValidationError("Password must contain at least one special character.")
    return password


class UserProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source='user.id', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = UserProfile
        fields = ['id', 'name', 'email', 'image', 'created_at', 'updated_at']
        read_only_fields = fields


class AuthorSerializer(serializers.ModelSerializer):
    """
    Compact user shape embedded in posts and papers: {id, name, image}
    """
    name = serializers.SerializerMethodField()
    image = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'image']

    def get_name(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.display_name if profile else obj.username

    def get_image(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.image if profile else None


class UserSignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(min_length=2, max_length=100)

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value.lower()

    def validate_password(self, value):
        return validate_password_strength(value)

    def create(self, validated_data):
        email = validated_data['email']
        user = User.objects.create(username=email, email=email)
        user.set_password(validated_data['password'])
        user.save()

        profile = user.profile
        profile.name = validated_data['name']
        profile.save()
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class ProfileUpdateSerializer(serializers.Serializer):
    """
    email is validated but never changed; the account e-mail is fixed at signup
    """
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    image = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)

    def update(self, instance, validated_data):
        instance.name = validated_data['name']
        if 'image' in validated_data:
            instance.image = validated_data['image'] or None
        instance.save()
        return instance


class ProfileImageUploadSerializer(serializers.Serializer):
    image = serializers.FileField()
