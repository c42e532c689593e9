from django.urls import path

from .consumer import BackgroundJobsConsumer

websocket_urlpatterns = [
    path("ws/jobs/", BackgroundJobsConsumer.as_asgi()),
]
