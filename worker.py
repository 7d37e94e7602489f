"""Run the event engine against the live database."""

import logging
import signal
import threading

from chill import create_app
from chill.extensions import backend
from chill.store.feed import ChangeFeed


def main():
    """Listen for database changes until interrupted."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    app = create_app()
    stopped = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stopped.set())
    signal.signal(signal.SIGINT, lambda *_: stopped.set())

    with app.app_context():
        feed = ChangeFeed(backend.dispatcher)
        feed.start()
        app.logger.info("Event engine started.")
        stopped.wait()
        feed.stop()
        backend.dispatcher.shutdown()
    app.logger.info("Event engine stopped.")


if __name__ == "__main__":
    main()
