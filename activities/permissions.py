from rest_framework.permissions import BasePermission


def user_has_role(user, *roles) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "role", None) in roles


def user_can_manage_activity(user, activity) -> bool:
    """
    Who can edit/delete an activity or see its participants?
    - the faculty member who created it
    - platform admins (role == 'admin' or superuser)
    """
    if not user or not getattr(user, "is_authenticated", False):
        return False

    if user.is_platform_admin:
        return True

    return activity.created_by_id == user.id


class IsStudent(BasePermission):
    message = "Insufficient permissions: student role required"

    def has_permission(self, request, view):
        return user_has_role(request.user, "student")


class IsFacultyOrAdmin(BasePermission):
    message = "Insufficient permissions: faculty or admin role required"

    def has_permission(self, request, view):
        if getattr(request.user, "is_superuser", False):
            return True
        return user_has_role(request.user, "faculty", "admin")


class IsPlatformAdmin(BasePermission):
    message = "Insufficient permissions: admin role required"

    def has_permission(self, request, view):
        if getattr(request.user, "is_superuser", False):
            return True
        return user_has_role(request.user, "admin")
