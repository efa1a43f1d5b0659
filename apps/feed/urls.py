from django.urls import path

from .views import (
    BookmarkListView, CommentListView, LatestPostView, NewPostsView,
    PollingConfigView, PostBookmarkToggleView, PostDetailView,
    PostLikeToggleView, PostListCreateView, PostRetweetToggleView,
    TrendingHashtagView,
)

urlpatterns = [
    # Explore feed (infinite scroll) + new post / reply
    path('posts/', PostListCreateView.as_view(), name='post-list-create'),

    # Polling for posts newer than the client's last check
    path('posts/new/', NewPostsView.as_view(), name='post-new'),
    path('posts/latest/', LatestPostView.as_view(), name='post-latest'),

    path('posts/<int:post_id>/', PostDetailView.as_view(), name='post-detail'),
    path('posts/<int:post_id>/comments/', CommentListView.as_view(), name='post-comments'),

    # Toggles
    path('posts/<int:post_id>/like/', PostLikeToggleView.as_view(), name='post-like-toggle'),
    path('posts/<int:post_id>/retweet/', PostRetweetToggleView.as_view(), name='post-retweet-toggle'),
    path('posts/<int:post_id>/bookmark/', PostBookmarkToggleView.as_view(), name='post-bookmark-toggle'),

    path('bookmarks/', BookmarkListView.as_view(), name='bookmark-list'),
    path('hashtags/trending/', TrendingHashtagView.as_view(), name='hashtag-trending'),
    path('polling-config/', PollingConfigView.as_view(), name='polling-config'),
]
