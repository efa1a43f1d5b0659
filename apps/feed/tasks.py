import logging

from celery import shared_task

from core.supabase_utils import delete_file_from_supabase

logger = logging.getLogger(__name__)


@shared_task
def delete_post_media(media_urls):
    """
    Remove a deleted post's images from Supabase Storage
    """
    removed = 0
    for url in media_urls:
        if delete_file_from_supabase(url):
            removed += 1
    logger.info("Removed %s of %s media files", removed, len(media_urls))
    return removed
