from django.contrib import admin
from .models import Activity, Participation


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'department', 'category', 'created_by', 'start_date', 'capacity', 'available_seats')
    list_filter = ('status', 'category', 'department', 'start_date')
    search_fields = ('title', 'description', 'created_by__username')
    date_hierarchy = 'start_date'
    # Seat counts are only written by the enrollment path
    readonly_fields = ('available_seats', 'created_at', 'updated_at')


@admin.register(Participation)
class ParticipationAdmin(admin.ModelAdmin):
    list_display = ('user', 'activity', 'status', 'enrolled_at')
    list_filter = ('status', 'activity__department')
    search_fields = ('user__username', 'user__email', 'activity__title')
    readonly_fields = ('status', 'enrolled_at', 'updated_at')
