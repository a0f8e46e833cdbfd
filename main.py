from app.config import load_settings
from app.exceptions import ConfigError
from app.lifecycle import Application
import logging
import sys


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(__name__).error(f"Failed to load config: {e}")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    logger = logging.getLogger(__name__)

    application = Application(settings)
    application.install_signal_handlers()
    application.run()

    error = application.wait()
    if error is not None:
        logger.error(f"❌ Vehicle service stopped after error: {error!r}")
        return 1
    logger.info("✅ Vehicle service shut down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
