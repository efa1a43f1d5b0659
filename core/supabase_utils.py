import logging
import uuid
from functools import lru_cache

from django.conf import settings
from rest_framework.exceptions import ValidationError
from sentry_sdk import capture_exception
from supabase import Client, create_client

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "webp"]
PDF_EXTENSIONS = ["pdf"]


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_PUBLIC_KEY)


def public_url_for(storage_path):
    return f"{settings.SUPABASE_URL}/storage/v1/object/public/{settings.SUPABASE_BUCKET}/{storage_path}"


def validate_upload(django_file, allowed_extensions, max_size):
    """
    Reject files with an unexpected extension or over max_size bytes.
    """
    file_ext = django_file.name.rsplit('.', 1)[-1].lower() if '.' in django_file.name else ''
    if file_ext not in allowed_extensions:
        allowed = ", ".join(ext.upper() for ext in allowed_extensions)
        raise ValidationError({"file": [f"Unsupported file format. Only {allowed} are allowed."]})

    if django_file.size > max_size:
        raise ValidationError({"file": [f"File size cannot exceed {max_size // (1024 * 1024)}MB."]})
    return django_file


def upload_file_to_supabase(django_file, folder):
    """
    - django_file : an UploadedFile from request.FILES
    - folder : path prefix inside the bucket ("papers", "posts", "profile_images")
    Uploads to Supabase Storage and returns the public URL, or None on failure.
    """
    try:
        file_ext = django_file.name.rsplit('.', 1)[-1].lower()
        storage_path = f"{folder}/{uuid.uuid4()}.{file_ext}"

        file_data = django_file.read()
        content_type = getattr(django_file, 'content_type', None) or 'application/octet-stream'

        get_supabase_client().storage.from_(settings.SUPABASE_BUCKET).upload(
            path=storage_path,
            file=file_data,
            file_options={"content-type": content_type},
        )
        return public_url_for(storage_path)
    except Exception as e:
        logger.exception("Supabase upload failed for %s", django_file.name)
        capture_exception(e)
        return None


def delete_file_from_supabase(file_url):
    """
    Remove one object given its public URL. URLs that do not point into our
    bucket are ignored. Returns True when the object was removed.
    """
    marker = f"/object/public/{settings.SUPABASE_BUCKET}/"
    if marker not in file_url:
        logger.info("Skipping delete of foreign storage URL: %s", file_url)
        return False

    storage_path = file_url.split(marker, 1)[-1]
    try:
        get_supabase_client().storage.from_(settings.SUPABASE_BUCKET).remove([storage_path])
        return True
    except Exception as e:
        logger.exception("Supabase delete failed for %s", storage_path)
        capture_exception(e)
        return False
