import re

from django.contrib.auth.models import User
from django.db import models

HASHTAG_PATTERN = re.compile(r"#(\w+)")
HASHTAG_MAX_LENGTH = 100


class Post(models.Model):
    """
    A short user-authored entry on the explore feed
    - reply_to: parent post when this post is a reply (comment), None for top-level posts
    - media_urls: attached image URLs
    - like_count / retweet_count / reply_count: denormalised counters kept in step
      with PostLike / PostRetweet rows and direct replies
    """
    content = models.CharField(max_length=1000)
    media_urls = models.JSONField(default=list, blank=True)
    reply_to = models.ForeignKey(
        'self', null=True, blank=True, on_delete=models.CASCADE, related_name='replies'
    )
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name='posts')

    like_count = models.PositiveIntegerField(default=0)
    retweet_count = models.PositiveIntegerField(default=0)
    reply_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    is_sensitive = models.BooleanField(default=False)
    is_pinned = models.BooleanField(default=False)

    hashtags = models.ManyToManyField('Hashtag', through='PostHashtag', related_name='posts', blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['created_at'], name='post_created_at_idx'),
        ]

    def __str__(self):
        return f"Post({self.id}) by {self.author.username}: {self.content[:20]}"


class PostLike(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='likes')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='post_likes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('post', 'user')

    def __str__(self):
        return f"{self.user.username} LIKE post {self.post_id}"


class PostRetweet(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='retweets')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='post_retweets')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('post', 'user')

    def __str__(self):
        return f"{self.user.username} RETWEET post {self.post_id}"


class PostBookmark(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='bookmarks')
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='post_bookmarks')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('post', 'user')

    def __str__(self):
        return f"{self.user.username} BOOKMARK post {self.post_id}"


class Hashtag(models.Model):
    name = models.CharField(max_length=100, unique=True)
    post_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"#{self.name}"


class PostHashtag(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE)
    hashtag = models.ForeignKey(Hashtag, on_delete=models.CASCADE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('post', 'hashtag')


def extract_hashtags(content):
    """
    '#Exam tips for #exam week #CS101' -> ['exam', 'cs101']
    Tags longer than HASHTAG_MAX_LENGTH are skipped.
    """
    seen = []
    for match in HASHTAG_PATTERN.findall(content):
        name = match.lower()
        if len(name) <= HASHTAG_MAX_LENGTH and name not in seen:
            seen.append(name)
    return seen
