# tests/conftest.py
from unittest import mock

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from paperdir.celery import app as celery_app

PASSWORD = "s3cret-pass!"


@pytest.fixture(autouse=True)
def supabase_client():
    """
    Storage calls never leave the process: the lazily created Supabase client
    is replaced by a MagicMock for every test.
    """
    client = mock.MagicMock(name="supabase")
    with mock.patch("core.supabase_utils.get_supabase_client", return_value=client):
        yield client


@pytest.fixture(autouse=True)
def eager_celery(settings):
    """
    Tasks run in-process. Reading conf finalizes it from the CELERY_* Django
    settings, so both the setting and the finalized configuration are switched.
    """
    previous = celery_app.conf.task_always_eager
    settings.CELERY_TASK_ALWAYS_EAGER = True
    celery_app.conf.update(task_always_eager=True)
    yield
    celery_app.conf.update(task_always_eager=previous)


def make_user(email, name="Test User", password=PASSWORD):
    user = User.objects.create_user(username=email, email=email, password=password)
    profile = user.profile
    profile.name = name
    profile.save()
    return user


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    return make_user("alice@example.edu", name="Alice")


@pytest.fixture
def other_user(db):
    return make_user("bob@example.edu", name="Bob")


@pytest.fixture
def auth_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    client.force_authenticate(user=other_user)
    return client
