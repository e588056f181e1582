from rest_framework import serializers
from .models import PlatformSettings


class PlatformSettingsSerializer(serializers.ModelSerializer):
    updated_by_username = serializers.CharField(source='updated_by.username', read_only=True)

    class Meta:
        model = PlatformSettings
        fields = [
            'id',
            'binary_propagation_depth_cap',
            'binary_slot_search_max_depth',
            'binary_tree_default_placement_side',
            'new_member_window_days',
            'updated_at',
            'updated_by',
            'updated_by_username',
        ]
        read_only_fields = ['id', 'updated_at', 'updated_by']

    def validate_binary_propagation_depth_cap(self, value):
        """
        Validate that the cap is either None (propagate to root) or a positive integer.
        """
        if value is not None and value < 1:
            raise serializers.ValidationError(
                "binary_propagation_depth_cap must be at least 1 or null (propagate to the root)"
            )
        return value

    def validate_binary_slot_search_max_depth(self, value):
        if value < 0:
            raise serializers.ValidationError("binary_slot_search_max_depth cannot be negative")
        return value

    def validate_new_member_window_days(self, value):
        if value < 1:
            raise serializers.ValidationError("new_member_window_days must be at least 1 day")
        return value
