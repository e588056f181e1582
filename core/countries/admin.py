from django.contrib import admin
from .models import Country, Region


class RegionInline(admin.TabularInline):
    model = Region
    extra = 0
    fields = ('name', 'code', 'status')


@admin.register(Country)
class CountryAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'currency', 'pv_rate', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('name', 'code')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [RegionInline]


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'country', 'status')
    list_filter = ('status', 'country')
    search_fields = ('name', 'code', 'country__name')
