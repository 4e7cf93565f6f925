from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

User = get_user_model()


class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    # Admins are promoted out of band, never self-registered
    role = serializers.ChoiceField(
        choices=[User.ROLE_STUDENT, User.ROLE_FACULTY],
        default=User.ROLE_STUDENT,
    )

    class Meta:
        model = User
        fields = ['username', 'email', 'password', 'role', 'first_name', 'department', 'roll_number']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already registered")
        return value.lower()

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data.get('email', ''),
            password=validated_data['password'],
            role=validated_data.get('role', User.ROLE_STUDENT),
            first_name=validated_data.get('first_name', ''),
            department=validated_data.get('department'),
            roll_number=validated_data.get('roll_number') or None,
        )
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        email = attrs.get("email")
        password = attrs.get("password")

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise serializers.ValidationError("Invalid credentials")

        user = authenticate(
            username=user.username,  # Django still authenticates by username
            password=password
        )

        if not user:
            raise serializers.ValidationError("Invalid credentials")

        attrs["user"] = user
        return attrs
