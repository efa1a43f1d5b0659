"""
URL configuration for paperdir project.

    /account/  signup, login, tokens and the caller's profile
    /papers/   past papers directory
    /feed/     posts, replies, likes, retweets, bookmarks, hashtags
"""
from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path


def index(request):
    return HttpResponse("OK", status=200)


urlpatterns = [
    path('', index),
    path('admin/', admin.site.urls),
    path('account/', include('apps.account.urls')),
    path('papers/', include('apps.paper.urls')),
    path('feed/', include('apps.feed.urls')),
]
