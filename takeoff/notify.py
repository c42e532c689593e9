import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def user_group(user_id):
    return f"background_jobs_{user_id}"


# =================== FRONTEND NOTIFY ===================
def notify_user(user_id, event_type, **kwargs):
    """Push an event to every socket the user has open. Never raises."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(
            user_group(user_id),
            {"type": event_type, **kwargs}
        )
    except Exception as e:
        logger.warning("Could not notify user %s (%s): %s", user_id, event_type, e)
