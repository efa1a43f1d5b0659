from django.contrib import admin

from .models import Hashtag, Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'author', 'short_content', 'reply_to',
        'like_count', 'retweet_count', 'reply_count', 'view_count', 'created_at',
    )
    list_display_links = ('id', 'short_content')
    list_filter = ('is_sensitive', 'is_pinned', 'created_at')
    search_fields = ('content', 'author__email')
    raw_id_fields = ('author', 'reply_to')
    readonly_fields = ('like_count', 'retweet_count', 'reply_count', 'view_count', 'created_at', 'updated_at')

    def short_content(self, obj):
        return obj.content[:40]
    short_content.short_description = "Content"


@admin.register(Hashtag)
class HashtagAdmin(admin.ModelAdmin):
    list_display = ('name', 'post_count', 'created_at')
    search_fields = ('name',)
    ordering = ('-post_count',)
