from django.contrib import admin
from .models import Project

@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'organizer', 'volunteer_count', 'max_volunteers', 'application_deadline')
    list_filter = ('status', 'category', 'application_deadline')
    search_fields = ('title', 'description', 'organizer__username', 'location')
    date_hierarchy = 'start_date'
    # capacity is owned by the lifecycle engine
    readonly_fields = ('volunteer_count', 'skills_index', 'created_at', 'updated_at')
    filter_horizontal = ('assigned_volunteers',)
