from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from django.core.exceptions import ObjectDoesNotExist
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from .authentication import check_session
from .models import User, Role


class UserSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField(source='username', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'user_id', 'email', 'role', 'display_name', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['role', 'created_at', 'updated_at']


class FieldUserCreateSerializer(serializers.Serializer):
    """Validates a new field user before anything is written"""
    user_id = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, validators=[validate_password])
    confirm_password = serializers.CharField(write_only=True)
    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True)

    def validate_user_id(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("User ID is required")
        if '@' in value or any(ch.isspace() for ch in value):
            raise serializers.ValidationError("User ID cannot contain spaces or '@'")
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("User ID already exists")
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return attrs

    def create(self, validated_data):
        user_id = validated_data['user_id']
        password = validated_data['password']
        email = settings.FIELD_USER_EMAIL_TEMPLATE.format(user_id=user_id)
        return User.objects.create_user(
            username=user_id,
            email=email,
            password=password,
            role=Role.USER,
            is_active=True,
            display_name=validated_data.get('display_name', '').strip(),
            shared_password=password,
        )


class FieldUserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['display_name', 'is_active']


class SharedCredentialSerializer(serializers.ModelSerializer):
    user_id = serializers.CharField(source='username', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'user_id', 'display_name', 'email', 'shared_password']


class PasswordResetSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])


class LoginSerializer(TokenObtainPairSerializer):
    """Accepts either a field user id or an email address as the username"""
    default_error_messages = {
        'no_active_account': 'Invalid credentials',
    }

    def validate(self, attrs):
        login = (attrs.get(self.username_field) or '').strip()
        if '@' in login:
            match = User.objects.filter(email__iexact=login).only('username').first()
            if match:
                login = match.username
        attrs[self.username_field] = login

        # Tell deactivated field users why, but only once the password matched
        candidate = User.objects.filter(username=login).first()
        if candidate and not candidate.is_active and candidate.check_password(attrs.get('password', '')):
            check_session(candidate)

        data = super().validate(attrs)

        check_session(self.user)
        data['user'] = UserSerializer(self.user).data
        data['redirect_to'] = self.user.dashboard_path
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class SessionRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that treats tokens of deleted users as invalid"""

    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')
