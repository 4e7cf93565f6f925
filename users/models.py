# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_STUDENT = 'student'
    ROLE_FACULTY = 'faculty'
    ROLE_ADMIN = 'admin'

    ROLE_CHOICES = (
        (ROLE_STUDENT, 'Student'),
        (ROLE_FACULTY, 'Faculty'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_STUDENT
    )

    department = models.CharField(max_length=100, blank=True, null=True)
    # Unique only when present; NULLs never collide
    roll_number = models.CharField(max_length=50, blank=True, null=True, unique=True)

    @property
    def is_student(self):
        return self.role == self.ROLE_STUDENT

    @property
    def is_faculty(self):
        return self.role == self.ROLE_FACULTY

    @property
    def is_platform_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser

    def __str__(self):
        return self.username
