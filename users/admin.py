from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'department', 'roll_number', 'is_staff')
    list_filter = ('role', 'department', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name', 'roll_number')
    fieldsets = UserAdmin.fieldsets + (
        ('Campus', {'fields': ('role', 'department', 'roll_number')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Campus', {'fields': ('role', 'department', 'roll_number')}),
    )
