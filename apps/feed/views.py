import logging
from datetime import datetime, timezone

from django.conf import settings
from django.db import transaction
from django.db.models import Count, F
from django.db.models.functions import Greatest
from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from sentry_sdk import capture_exception

from .models import Hashtag, Post, PostBookmark, PostHashtag, PostLike, PostRetweet
from .pagination import CommentIdCursorPagination, PostIdCursorPagination
from .serializers import (
    HashtagSerializer, NewPostsQuerySerializer, PostCreateSerializer, PostSerializer,
    build_interaction_context,
)
from .tasks import delete_post_media

logger = logging.getLogger(__name__)

NEW_POSTS_LIMIT = 100


def post_queryset():
    return (
        Post.objects
        .select_related('author__profile')
        .prefetch_related('hashtags')
    )


class InteractionListMixin:
    """
    Serialize a page of posts with the caller's like / retweet / bookmark state
    fetched in one batch instead of once per post.
    """
    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)

        context = self.get_serializer_context()
        context.update(build_interaction_context(request.user, page))
        serializer = PostSerializer(page, many=True, context=context)
        return self.get_paginated_response(serializer.data)


class PostListCreateView(InteractionListMixin, generics.ListCreateAPIView):
    """
    GET  /feed/posts/  -> top-level posts, newest first (?limit=&cursor=&hashtag=)
    POST /feed/posts/  -> new post, or a reply when reply_to_id is given
    """
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    pagination_class = PostIdCursorPagination
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return PostCreateSerializer
        return PostSerializer

    def get_queryset(self):
        queryset = post_queryset().filter(reply_to__isnull=True)

        hashtag = self.request.query_params.get('hashtag', '').strip().lstrip('#').lower()
        if hashtag:
            queryset = queryset.filter(hashtags__name=hashtag)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = serializer.save()
        logger.info("Post %s created by user_id=%s (reply_to=%s)", post.id, request.user.id, post.reply_to_id)

        read_serializer = PostSerializer(post_queryset().get(id=post.id), context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)


class NewPostsView(APIView):
    """
    Background polling for the explore feed
    GET /feed/posts/new/?since=<epoch ms>
    => top-level posts created after `since`, newest first
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        params = NewPostsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        since = datetime.fromtimestamp(params.validated_data['since'] / 1000, tz=timezone.utc)

        posts = list(
            post_queryset()
            .filter(reply_to__isnull=True, created_at__gt=since)
            .order_by('-created_at', '-id')[:NEW_POSTS_LIMIT]
        )
        context = {"request": request, **build_interaction_context(request.user, posts)}
        items = PostSerializer(posts, many=True, context=context).data
        return Response({"items": items, "count": len(items)}, status=status.HTTP_200_OK)


class LatestPostView(APIView):
    """
    GET /feed/posts/latest/ => the newest post of any kind, or null
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        post = post_queryset().order_by('-created_at', '-id').first()
        data = PostSerializer(post, context={"request": request}).data if post else None
        return Response({"post": data}, status=status.HTTP_200_OK)


class PostDetailView(generics.RetrieveDestroyAPIView):
    """
    GET    /feed/posts/<post_id>/  -> post detail (counts a view)
    DELETE /feed/posts/<post_id>/  -> author only
    """
    serializer_class = PostSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    lookup_field = 'id'
    lookup_url_kwarg = 'post_id'

    def get_queryset(self):
        if self.request.method == 'DELETE':
            # someone else's post looks the same as a missing one
            return Post.objects.filter(author=self.request.user)
        return post_queryset()

    def retrieve(self, request, *args, **kwargs):
        Post.objects.filter(id=self.kwargs['post_id']).update(view_count=F('view_count') + 1)
        return super().retrieve(request, *args, **kwargs)

    def perform_destroy(self, instance):
        post_id = instance.id
        thread = _collect_thread(instance)
        thread_ids = [post.id for post in thread]
        media_urls = [url for post in thread for url in (post.media_urls or [])]

        with transaction.atomic():
            if instance.reply_to_id:
                Post.objects.filter(id=instance.reply_to_id).update(
                    reply_count=Greatest(F('reply_count') - 1, 0)
                )

            tag_counts = (
                PostHashtag.objects.filter(post_id__in=thread_ids)
                .values('hashtag_id')
                .annotate(n=Count('id'))
            )
            for row in tag_counts:
                Hashtag.objects.filter(id=row['hashtag_id']).update(
                    post_count=Greatest(F('post_count') - row['n'], 0)
                )

            instance.delete()

        logger.info("Post %s deleted with %s replies", post_id, len(thread) - 1)
        if media_urls:
            transaction.on_commit(lambda: _enqueue_media_cleanup(media_urls))


def _collect_thread(post):
    """ The post and every reply below it, at any depth """
    thread = [post]
    frontier = [post.id]
    while frontier:
        children = list(Post.objects.filter(reply_to_id__in=frontier).only('id', 'media_urls'))
        thread.extend(children)
        frontier = [child.id for child in children]
    return thread


def _enqueue_media_cleanup(media_urls):
    try:
        delete_post_media.delay(media_urls)
    except Exception as e:
        logger.warning("Could not enqueue media cleanup for %s files: %s", len(media_urls), e)
        capture_exception(e)


class CommentListView(InteractionListMixin, generics.ListAPIView):
    """
    Direct replies of a post, oldest first
    GET /feed/posts/<post_id>/comments/?limit=&cursor=
    """
    serializer_class = PostSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = CommentIdCursorPagination

    def get_queryset(self):
        post = get_object_or_404(Post, id=self.kwargs['post_id'])
        return post_queryset().filter(reply_to=post)


class CounterToggleView(generics.GenericAPIView):
    """
    Flip a (post, user) join row and move the post's counter with it,
    in one transaction on a locked post row.
    """
    permission_classes = [permissions.IsAuthenticated]
    model = None
    counter_field = None
    state_key = None

    def check_target(self, post):
        pass

    @transaction.atomic
    def post(self, request, post_id):
        post = get_object_or_404(Post.objects.select_for_update(), id=post_id)
        self.check_target(post)

        deleted, _ = self.model.objects.filter(post=post, user=request.user).delete()
        if deleted:
            Post.objects.filter(id=post.id).update(
                **{self.counter_field: Greatest(F(self.counter_field) - 1, 0)}
            )
            active = False
        else:
            self.model.objects.create(post=post, user=request.user)
            Post.objects.filter(id=post.id).update(**{self.counter_field: F(self.counter_field) + 1})
            active = True

        post.refresh_from_db(fields=[self.counter_field])
        return Response(
            {self.state_key: active, self.counter_field: getattr(post, self.counter_field)},
            status=status.HTTP_200_OK
        )


class PostLikeToggleView(CounterToggleView):
    """
    POST /feed/posts/<post_id>/like/ => {"liked": bool, "like_count": int}
    """
    model = PostLike
    counter_field = 'like_count'
    state_key = 'liked'


class PostRetweetToggleView(CounterToggleView):
    """
    POST /feed/posts/<post_id>/retweet/ => {"retweeted": bool, "retweet_count": int}
    """
    model = PostRetweet
    counter_field = 'retweet_count'
    state_key = 'retweeted'

    def check_target(self, post):
        if post.reply_to_id is not None:
            raise ValidationError({"post": ["Replies cannot be retweeted."]})


class PostBookmarkToggleView(generics.GenericAPIView):
    """
    POST /feed/posts/<post_id>/bookmark/ => {"bookmarked": bool}
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, post_id):
        post = get_object_or_404(Post, id=post_id)
        deleted, _ = PostBookmark.objects.filter(post=post, user=request.user).delete()
        if deleted:
            return Response({"bookmarked": False, "detail": "Bookmark removed."}, status=status.HTTP_200_OK)

        PostBookmark.objects.get_or_create(post=post, user=request.user)
        return Response({"bookmarked": True, "detail": "Post bookmarked."}, status=status.HTTP_200_OK)


class BookmarkListView(InteractionListMixin, generics.ListAPIView):
    """
    GET /feed/bookmarks/ => posts the caller bookmarked
    """
    serializer_class = PostSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = PostIdCursorPagination

    def get_queryset(self):
        return post_queryset().filter(bookmarks__user=self.request.user)


class TrendingHashtagView(generics.ListAPIView):
    """
    GET /feed/hashtags/trending/?limit=10
    """
    serializer_class = HashtagSerializer
    permission_classes = [permissions.AllowAny]
    pagination_class = None

    def get_queryset(self):
        try:
            limit = int(self.request.query_params.get('limit', 10))
        except ValueError:
            raise ValidationError({"limit": ["limit must be an integer."]})
        if not 1 <= limit <= 50:
            raise ValidationError({"limit": ["limit must be between 1 and 50."]})

        return Hashtag.objects.filter(post_count__gt=0).order_by('-post_count', 'name')[:limit]


class PollingConfigView(APIView):
    """
    GET /feed/polling-config/ => how often clients should poll, and cache lifetimes (ms)
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response(
            {"polling": settings.FEED_POLLING, "cache": settings.FEED_CACHE},
            status=status.HTTP_200_OK
        )
