from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Member


@admin.register(Member)
class MemberAdmin(BaseUserAdmin):
    list_display = (
        'username', 'full_name', 'email', 'phone', 'sponsor_value',
        'package', 'country', 'status', 'is_staff', 'created_at'
    )
    list_filter = ('status', 'country', 'package', 'is_staff', 'is_superuser')
    search_fields = ('username', 'email', 'phone', 'first_name', 'last_name')
    ordering = ('-created_at',)
    # Identity is fixed at registration; admins only change status and permissions
    readonly_fields = (
        'username', 'sponsor', 'country', 'region', 'package',
        'total_amount', 'registered_by', 'last_login', 'created_at'
    )

    fieldsets = (
        (None, {'fields': ('username', 'password', 'status')}),
        ('Personal info', {'fields': ('first_name', 'last_name', 'email', 'phone')}),
        ('Registration', {'fields': ('sponsor', 'country', 'region', 'package', 'total_amount', 'registered_by')}),
        ('Permissions', {'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'created_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'password1', 'password2'),
        }),
    )

    @admin.display(description='Full name')
    def full_name(self, obj):
        return obj.get_full_name()

    @admin.display(description='Sponsor', ordering='sponsor__username')
    def sponsor_value(self, obj):
        return obj.sponsor or '-'

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ()
        return self.readonly_fields
