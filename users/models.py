from django.db import models


class User(models.Model):
    ROLE_TENANT = 'tenant'
    ROLE_LANDLORD = 'landlord'
    ROLE_AGENT = 'agent'
    ROLE_CHOICES = [
        (ROLE_TENANT, 'Tenant'),
        (ROLE_LANDLORD, 'Landlord'),
        (ROLE_AGENT, 'Agent'),
    ]

    user_id = models.CharField(max_length=100, unique=True, primary_key=True)
    user_name = models.CharField(max_length=100)
    email = models.EmailField(max_length=255, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_TENANT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['user_name'], name='users_user_na_8f2a1c_idx'),
            models.Index(fields=['email'], name='users_email_4b7d9e_idx'),
        ]

    def __str__(self):
        return f"{self.user_name} ({self.user_id})"
