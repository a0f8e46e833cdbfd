from typing import Optional
import logging
import queue
import signal
import threading
import uvicorn

from app.config import Settings
from app.database import connect, get_database
from app.main import create_app
from app.repositories.tracking_repo import RabbitMqTrackingRepository
from app.repositories.vehicle_repo import MongoVehicleRepository
from app.services.vehicle_service import VehicleService
from app.workers.tracking_consumer import TrackingConsumer

logger = logging.getLogger(__name__)

SERVER_JOIN_TIMEOUT = 10


class Application:
    """
    Wires the store, the broker and the HTTP server together.

    Signals, startup failures, consumer failures and an unexpected HTTP
    server exit all post to ``shutdown``. It holds a single item: only the
    first post triggers shutdown, later ones are logged and dropped.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.shutdown: "queue.Queue[Optional[BaseException]]" = queue.Queue(
            maxsize=1)
        self._closing = threading.Event()
        self.mongo_client = None
        self.publisher: Optional[RabbitMqTrackingRepository] = None
        self.consumer: Optional[TrackingConsumer] = None
        self.server: Optional[uvicorn.Server] = None
        self._server_thread: Optional[threading.Thread] = None

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        logger.info(f"Received signal {signal.Signals(signum).name}")
        self.report(None)

    def report(self, error: Optional[BaseException]) -> None:
        try:
            self.shutdown.put_nowait(error)
        except queue.Full:
            if error is not None:
                logger.warning(f"Shutdown already requested, dropping: {error!r}")

    def run(self) -> None:
        try:
            self._start()
        except Exception as e:
            logger.error(f"❌ Startup failed: {e!r}")
            self.report(e)

    def _start(self) -> None:
        settings = self.settings

        self.mongo_client = connect(settings.database_url)
        vehicle_repo = MongoVehicleRepository(get_database(self.mongo_client))

        self.publisher = RabbitMqTrackingRepository(
            settings.rabbitmq_url, settings.tracking_queue)
        self.publisher.connect()

        vehicle_service = VehicleService(vehicle_repo, self.publisher)

        self.consumer = TrackingConsumer(
            settings.rabbitmq_url,
            settings.vehicle_queue,
            vehicle_service,
            on_error=self.report,
            max_workers=settings.consumer_workers,
        )
        self.consumer.start()

        app = create_app(vehicle_service, cors_origins=settings.cors_origins)
        self.server = uvicorn.Server(uvicorn.Config(
            app, host=settings.host, port=settings.port, log_config=None))
        self._server_thread = threading.Thread(
            target=self._serve, name="http-server", daemon=True)
        self._server_thread.start()
        logger.info(
            f"🚀 Vehicle service started on {settings.host}:{settings.port}")

    def _serve(self) -> None:
        error = None
        try:
            self.server.run()
        except (Exception, SystemExit) as e:
            error = e
        if not self._closing.is_set():
            self.report(error or RuntimeError("HTTP server exited"))

    def wait(self) -> Optional[BaseException]:
        """Block until shutdown is requested, then close everything."""
        while True:
            try:
                error = self.shutdown.get(timeout=1.0)
                break
            except queue.Empty:
                continue
        self.close()
        return error

    def close(self) -> None:
        self._closing.set()
        logger.info("🔄 Vehicle service shutting down...")

        if self.server is not None:
            self.server.should_exit = True
            if self._server_thread is not None:
                self._server_thread.join(SERVER_JOIN_TIMEOUT)

        if self.consumer is not None:
            try:
                self.consumer.stop()
            except Exception as e:
                logger.warning(f"Failed to stop tracking consumer: {e!r}")

        if self.publisher is not None:
            try:
                self.publisher.close()
            except Exception as e:
                logger.warning(f"Failed to close RabbitMQ connection: {e!r}")

        if self.mongo_client is not None:
            try:
                self.mongo_client.close()
            except Exception as e:
                logger.warning(f"Failed to disconnect from database: {e!r}")
