from django.contrib import admin
from .models import MetricRecord, TreeNode


class ReadOnlyAdmin(admin.ModelAdmin):
    """Tree rows are only written by the placement engine"""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(TreeNode)
class TreeNodeAdmin(ReadOnlyAdmin):
    list_display = ('member', 'parent', 'side', 'left_child', 'right_child', 'level', 'created_at')
    list_filter = ('side', 'level', 'created_at')
    search_fields = ('member__username', 'member__email')
    list_select_related = ('member', 'parent__member', 'left_child__member', 'right_child__member')


@admin.register(MetricRecord)
class MetricRecordAdmin(ReadOnlyAdmin):
    list_display = (
        'member', 'personal_pv', 'left_pv', 'right_pv', 'total_pv',
        'left_bv', 'right_bv', 'total_bv', 'updated_at'
    )
    search_fields = ('member__username',)
    list_select_related = ('member',)
