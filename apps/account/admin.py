from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from apps.account.models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ('user_link', 'name', 'image_preview', 'created_at')
    search_fields = ('user__username', 'user__email', 'name')
    readonly_fields = ('user', 'created_at', 'updated_at', 'image_preview')

    def user_link(self, obj):
        url = reverse('admin:account_userprofile_change', args=[obj.id])
        return format_html('<a href="{}">{}</a>', url, obj.user.email)
    user_link.short_description = "USER"

    def image_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" width="50" height="50" style="border-radius:5px;" />',
                obj.image
            )
        return "No image"
    image_preview.short_description = "Profile image"
