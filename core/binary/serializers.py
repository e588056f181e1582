from rest_framework import serializers
from .models import SIDES, MetricRecord, TreeNode


class MetricRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = MetricRecord
        fields = [
            'member', 'personal_pv', 'personal_bv',
            'left_pv', 'right_pv', 'total_pv',
            'left_bv', 'right_bv', 'total_bv', 'updated_at'
        ]
        read_only_fields = fields


class TreeNodeSerializer(serializers.ModelSerializer):
    """Flat tree row for a single member, without nested children"""
    member_username = serializers.CharField(source='member.username', read_only=True)
    metrics = MetricRecordSerializer(source='member.metrics', read_only=True)

    class Meta:
        model = TreeNode
        fields = [
            'member', 'member_username', 'parent', 'side',
            'left_child', 'right_child', 'level', 'metrics', 'created_at'
        ]
        read_only_fields = fields


class OpenSlotQuerySerializer(serializers.Serializer):
    side = serializers.ChoiceField(choices=SIDES, required=False)
    max_depth = serializers.IntegerField(required=False, min_value=0)

    def to_internal_value(self, data):
        data = data.copy()
        if isinstance(data.get('side'), str):
            data['side'] = data['side'].lower()
        return super().to_internal_value(data)


class PlacementResultSerializer(serializers.Serializer):
    member_id = serializers.IntegerField()
    assigned_parent_id = serializers.IntegerField()
    assigned_side = serializers.CharField()
    resulting_metrics = serializers.DictField()
