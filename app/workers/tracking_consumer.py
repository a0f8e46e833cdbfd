"""
Background worker that consumes tracking data from the vehicle queue and
applies it to the vehicle store.

The pika connection lives on the worker's own thread. Each delivery is
handed to a thread pool; acks and nacks are sent back through
``add_callback_threadsafe`` because only the connection thread may touch
the channel.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional
from pydantic import ValidationError
import functools
import logging
import threading
import pika

from app.schemas.tracking import TrackingDataRequest
from app.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)

ACK = "ack"
NACK = "nack"
PREFETCH_PER_WORKER = 2


class TrackingConsumer:
    def __init__(
        self,
        rabbitmq_url: str,
        queue: str,
        vehicle_service: VehicleService,
        on_error: Optional[Callable[[BaseException], None]] = None,
        max_workers: int = 10,
    ):
        self.queue = queue
        self.vehicle_service = vehicle_service
        self.on_error = on_error
        self.prefetch_count = max_workers * PREFETCH_PER_WORKER
        self._parameters = pika.URLParameters(rabbitmq_url)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="tracking-worker")
        self._connection = None
        self._channel = None
        self._thread: Optional[threading.Thread] = None
        self._stopping = threading.Event()

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._run, name="tracking-consumer", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        try:
            self._connection = pika.BlockingConnection(self._parameters)
            self._channel = self._connection.channel()
            self._channel.queue_declare(
                queue=self.queue, durable=True, exclusive=False, auto_delete=False)
            self._channel.basic_qos(prefetch_count=self.prefetch_count)
            self._channel.basic_consume(
                queue=self.queue, on_message_callback=self._on_message, auto_ack=False)
            logger.info(f"🚀 Tracking consumer listening on {self.queue}")
            self._channel.start_consuming()
        except Exception as e:
            if self._stopping.is_set():
                logger.info(f"Tracking consumer stopped: {e!r}")
            else:
                logger.error(f"❌ Tracking consumer failed: {e!r}")
                if self.on_error is not None:
                    self.on_error(e)
        finally:
            if self._connection is not None and self._connection.is_open:
                try:
                    self._connection.close()
                except Exception as e:
                    logger.warning(
                        f"Failed to close consumer connection: {e!r}")

    def _on_message(self, channel, method, properties, body: bytes) -> None:
        if self._stopping.is_set():
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=True)
            return
        try:
            self._executor.submit(self.process, method.delivery_tag, body)
        except RuntimeError:
            # Executor already shut down
            channel.basic_nack(delivery_tag=method.delivery_tag, requeue=True)

    def handle(self, body: bytes) -> str:
        """Apply one message to the store and say whether to ack or nack it."""
        try:
            tracking_data = TrackingDataRequest.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Dropping malformed tracking message: {e}")
            return NACK

        logger.info(
            f"Received tracking data for vehicle {tracking_data.vehicle_id}")
        try:
            self.vehicle_service.tracking_vehicle(
                tracking_data.vehicle_id,
                tracking_data.mileage,
                tracking_data.vehicle_status,
            )
        except Exception as e:
            logger.error(
                f"Failed to track vehicle {tracking_data.vehicle_id}: {e}")
            return NACK
        return ACK

    def process(self, delivery_tag: int, body: bytes) -> str:
        outcome = self.handle(body)
        if outcome == ACK:
            callback = functools.partial(
                self._channel.basic_ack, delivery_tag=delivery_tag)
        else:
            callback = functools.partial(
                self._channel.basic_nack, delivery_tag=delivery_tag, requeue=False)
        try:
            self._connection.add_callback_threadsafe(callback)
        except Exception as e:
            logger.error(f"Failed to {outcome} message {delivery_tag}: {e!r}")
        return outcome

    def stop(self, timeout: Optional[float] = 10.0) -> None:
        self._stopping.set()
        # Let in-flight workers finish so their acks are queued before the stop
        self._executor.shutdown(wait=True)
        connection, channel = self._connection, self._channel
        if connection is not None and connection.is_open and channel is not None:
            try:
                connection.add_callback_threadsafe(channel.stop_consuming)
            except Exception as e:
                logger.warning(f"Failed to stop tracking consumer: {e!r}")
        if self._thread is not None:
            self._thread.join(timeout)
        logger.info("🛑 Tracking consumer stopped")
