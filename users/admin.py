from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class VolunteerMatchUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'location', 'is_active')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'location')
    fieldsets = UserAdmin.fieldsets + (
        ('Volunteering profile', {'fields': ('role', 'phone', 'bio', 'location', 'skills')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Volunteering profile', {'fields': ('email', 'role')}),
    )
