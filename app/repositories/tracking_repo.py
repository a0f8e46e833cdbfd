from typing import Optional
import logging
import threading
import pika
from pika.adapters.blocking_connection import BlockingChannel
from pika.exceptions import AMQPError

from app.exceptions import TrackingPublishError

logger = logging.getLogger(__name__)

APPLICATION_JSON = "application/json"


class RabbitMqTrackingRepository:
    """
    Publishes tracking data to the tracking queue through the default exchange.

    A pika BlockingConnection must not be used from several threads at once,
    so every publish holds a lock. The channel runs in publisher-confirm mode:
    returning normally means the broker accepted the message.
    """

    def __init__(self, rabbitmq_url: str, queue: str):
        self.queue = queue
        self._parameters = pika.URLParameters(rabbitmq_url)
        self._lock = threading.Lock()
        self._connection: Optional[pika.BlockingConnection] = None
        self._channel: Optional[BlockingChannel] = None

    def connect(self) -> None:
        with self._lock:
            self._open()
        logger.info(f"✅ Tracking publisher connected (queue={self.queue})")

    def _open(self) -> BlockingChannel:
        self._connection = pika.BlockingConnection(self._parameters)
        self._channel = self._connection.channel()
        self._channel.confirm_delivery()
        return self._channel

    def _ready_channel(self) -> BlockingChannel:
        if self._connection is None or self._connection.is_closed \
                or self._channel is None or self._channel.is_closed:
            logger.warning("Tracking publisher connection closed, reopening")
            return self._open()
        try:
            # services heartbeats and surfaces a connection the broker dropped
            self._connection.process_data_events(time_limit=0)
        except AMQPError as e:
            logger.warning(f"Tracking publisher connection lost ({e!r}), reopening")
            return self._open()
        return self._channel

    def publish_tracking_data(self, message: bytes) -> None:
        with self._lock:
            try:
                channel = self._ready_channel()
                channel.basic_publish(
                    exchange="",
                    routing_key=self.queue,
                    body=message,
                    properties=pika.BasicProperties(
                        content_type=APPLICATION_JSON),
                )
            except AMQPError as e:
                logger.error(f"Failed to publish tracking data: {e!r}")
                raise TrackingPublishError(
                    f"failed to publish tracking data: {e!r}") from e

    def close(self) -> None:
        with self._lock:
            connection, self._connection, self._channel = self._connection, None, None
            if connection is not None and connection.is_open:
                connection.close()
