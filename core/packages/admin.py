from django.contrib import admin
from .models import Package, PackagePrice


class PackagePriceInline(admin.TabularInline):
    """Inline admin for per-country package prices"""
    model = PackagePrice
    extra = 1
    fields = ('country', 'price')


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'pv', 'bv', 'bottles', 'package_type', 'status', 'created_at')
    list_filter = ('status', 'package_type')
    search_fields = ('name', 'description')
    readonly_fields = ('created_at', 'updated_at')
    list_editable = ('status',)  # Allow quick status changes
    inlines = [PackagePriceInline]
