from django.contrib import admin
from .models import Application

@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ('volunteer', 'project', 'status', 'date_applied', 'decided_at')
    list_filter = ('status', 'date_applied')
    search_fields = ('volunteer__username', 'project__title')
    readonly_fields = ('skills_index', 'date_applied', 'withdrawn_at', 'decided_at', 'updated_at')
