from django.contrib.auth.models import User
from django.db import models


class UserProfile(models.Model):
    """
    Public-facing identity of a user
    - name: display name shown on posts and papers
    - image: profile image URL (Supabase Storage or an external URL)
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')
    name = models.CharField(max_length=100, blank=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user.username}'s Profile"

    @property
    def display_name(self):
        return self.name if self.name else self.user.username
