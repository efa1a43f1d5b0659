from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.shortcuts import get_object_or_404
from rest_framework import serializers

from apps.account.serializers import AuthorSerializer
from core.supabase_utils import IMAGE_EXTENSIONS, upload_file_to_supabase, validate_upload

from .models import Hashtag, Post, PostBookmark, PostHashtag, PostLike, PostRetweet, extract_hashtags


def build_interaction_context(user, posts):
    """
    Which of `posts` the user has liked / retweeted / bookmarked, one query per
    interaction type. Anonymous users get empty sets.
    """
    if user is None or not user.is_authenticated or not posts:
        return {"liked_ids": set(), "retweeted_ids": set(), "bookmarked_ids": set()}

    post_ids = [post.id for post in posts]
    return {
        "liked_ids": set(
            PostLike.objects.filter(user=user, post_id__in=post_ids).values_list('post_id', flat=True)
        ),
        "retweeted_ids": set(
            PostRetweet.objects.filter(user=user, post_id__in=post_ids).values_list('post_id', flat=True)
        ),
        "bookmarked_ids": set(
            PostBookmark.objects.filter(user=user, post_id__in=post_ids).values_list('post_id', flat=True)
        ),
    }


class PostSerializer(serializers.ModelSerializer):
    author = AuthorSerializer(read_only=True)
    reply_to_id = serializers.IntegerField(read_only=True)
    hashtags = serializers.SlugRelatedField(slug_field='name', many=True, read_only=True)
    user_interactions = serializers.SerializerMethodField()

    class Meta:
        model = Post
        fields = [
            'id', 'content', 'media_urls', 'reply_to_id', 'author',
            'like_count', 'retweet_count', 'reply_count', 'view_count',
            'is_sensitive', 'is_pinned', 'hashtags',
            'created_at', 'updated_at', 'user_interactions',
        ]
        read_only_fields = fields

    def get_user_interactions(self, obj):
        """ The current user's like / retweet / bookmark state for this post """
        interactions = self.context
        if "liked_ids" not in interactions:
            request = self.context.get('request')
            interactions = build_interaction_context(request.user if request else None, [obj])

        return {
            "liked": obj.id in interactions["liked_ids"],
            # replies cannot be retweeted
            "retweeted": obj.reply_to_id is None and obj.id in interactions["retweeted_ids"],
            "bookmarked": obj.id in interactions["bookmarked_ids"],
        }


class PostCreateSerializer(serializers.ModelSerializer):
    """
    Create a post or, with reply_to_id, a reply
    - media_urls: URLs of already uploaded media
    - images: files sent as multipart/form-data, uploaded to Supabase here
    At most POST_IMAGE_MAX_COUNT media in total.
    """
    content = serializers.CharField(min_length=1, max_length=1000)
    media_urls = serializers.ListField(child=serializers.URLField(max_length=500), required=False)
    reply_to_id = serializers.IntegerField(required=False, allow_null=True)
    is_sensitive = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = Post
        fields = ['content', 'media_urls', 'reply_to_id', 'is_sensitive']

    def _uploaded_images(self):
        request = self.context.get('request')
        if request is None or not hasattr(request, 'FILES'):
            return []
        return request.FILES.getlist("images")

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Post content cannot be blank.")
        return value

    def validate(self, data):
        images = self._uploaded_images()
        media_total = len(data.get('media_urls', [])) + len(images)
        if media_total > settings.POST_IMAGE_MAX_COUNT:
            raise serializers.ValidationError(
                f"A post can have at most {settings.POST_IMAGE_MAX_COUNT} media attachments."
            )
        for image in images:
            validate_upload(image, IMAGE_EXTENSIONS, settings.POST_IMAGE_MAX_SIZE)
        return data

    def create(self, validated_data):
        reply_to_id = validated_data.pop('reply_to_id', None)
        parent = get_object_or_404(Post, id=reply_to_id) if reply_to_id is not None else None

        media_urls = list(validated_data.pop('media_urls', []))
        for image in self._uploaded_images():
            image_url = upload_file_to_supabase(image, "posts")
            if not image_url:
                raise serializers.ValidationError("Image upload failed. Please try again.")
            media_urls.append(image_url)

        with transaction.atomic():
            post = Post.objects.create(
                author=self.context['request'].user,
                reply_to=parent,
                media_urls=media_urls,
                **validated_data
            )

            if parent is not None:
                Post.objects.filter(id=parent.id).update(reply_count=F('reply_count') + 1)

            for name in extract_hashtags(post.content):
                hashtag, _ = Hashtag.objects.get_or_create(name=name)
                PostHashtag.objects.create(post=post, hashtag=hashtag)
                Hashtag.objects.filter(id=hashtag.id).update(post_count=F('post_count') + 1)

        return post


# Last millisecond of 9999-12-31, the largest instant a datetime can hold
MAX_SINCE_MS = 253402300799999


class NewPostsQuerySerializer(serializers.Serializer):
    """ ?since=<epoch milliseconds> """
    since = serializers.IntegerField(min_value=0, max_value=MAX_SINCE_MS)


class HashtagSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hashtag
        fields = ['id', 'name', 'post_count']
