import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .notify import user_group

logger = logging.getLogger(__name__)


class BackgroundJobsConsumer(AsyncJsonWebsocketConsumer):
    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            await self.close()
            return

        self.group_name = user_group(user.pk)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info("Job status socket connected for user %s", user.pk)

        await self.send_json({
            "type": "connected",
            "message": "Connected. Extraction progress will be streamed here.",
        })

    async def disconnect(self, close_code):
        group_name = getattr(self, "group_name", None)
        if group_name:
            await self.channel_layer.group_discard(group_name, self.channel_name)

    async def job_updated(self, event):
        await self.send_json({"type": "job_updated", "job": event["job"]})

    async def job_notification(self, event):
        await self.send_json({
            "type": "notification",
            "title": event["title"],
            "description": event["description"],
            "variant": event.get("variant", "default"),
            "jobId": event.get("job_id"),
        })
