from django.contrib import admin
from .models import Client, Project


class ProjectInline(admin.TabularInline):
    model = Project
    extra = 0
    fields = ['name', 'status', 'start_date', 'end_date']


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_name', 'email', 'phone', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'contact_name', 'email', 'gstin']
    readonly_fields = ['onboarding_token', 'onboarding_completed_at', 'created_at', 'updated_at']
    inlines = [ProjectInline]


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['name', 'client', 'status', 'start_date', 'end_date']
    list_filter = ['status']
    search_fields = ['name', 'client__name']
