from django.contrib.auth.hashers import make_password
from rest_framework import serializers
from core.binary.models import SIDES


class RegistrationSerializer(serializers.Serializer):
    """
    Registration form as submitted by a logged-in member.
    Password and transaction PIN arrive in plain text and leave hashed.
    """
    username = serializers.CharField(min_length=3, max_length=50)
    sponsor_username = serializers.CharField(max_length=150)
    first_name = serializers.CharField(min_length=2, max_length=100)
    last_name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=10, max_length=20)
    country_id = serializers.IntegerField(min_value=1)
    region_id = serializers.IntegerField(min_value=1)
    package_id = serializers.IntegerField(min_value=1)

    # Either a parent id or a parent username; neither means automatic placement under the sponsor
    placement_parent_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    placement_username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    placement_side = serializers.CharField(required=False, allow_blank=True)

    password = serializers.CharField(min_length=6, write_only=True)
    transaction_pin = serializers.RegexField(r'^[0-9]{4}$', write_only=True)

    def validate_placement_side(self, value):
        if not value:
            return None
        value = value.lower()
        if value not in SIDES:
            raise serializers.ValidationError("Placement side must be 'left' or 'right'")
        return value

    def validate_phone(self, value):
        if not value.lstrip('+').isdigit():
            raise serializers.ValidationError("Invalid phone number format")
        return value

    def validate(self, attrs):
        if attrs.get('placement_parent_id') and attrs.get('placement_username'):
            raise serializers.ValidationError({
                'placement_username': "Give either placement_parent_id or placement_username, not both"
            })

        attrs['password_hash'] = make_password(attrs.pop('password'))
        attrs['pin_hash'] = make_password(attrs.pop('transaction_pin'))
        return attrs
