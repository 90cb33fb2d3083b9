"""
sponsorship-notify Core Module.

This module provides the console entry point. It wires the service together
and embeds Gunicorn to run the webhook receiver as a production-ready WSGI
application:

1. Parse command-line flags (--version, --debug)
2. Configure logging (rotating file + stdout, optional Pushover forwarding)
3. Load config.yml, the required secrets and the image asset
4. Build the NotificationDispatcher and the Flask app
5. Serve on 0.0.0.0:5000 through Gunicorn

Missing secrets abort startup before any traffic is accepted.

Functions:
    main(argv=None) -> None:
        Entry point for the sponsorship-notify console script.

Example:
    $ sponsorship-notify --version
    0.0.4
    $ sponsorship-notify
    Starting Gunicorn for sponsorship webhook receiver
"""
import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List, Optional

from gunicorn.app.base import BaseApplication

from config import ConfigurationError, get_timeout, load_config, load_credentials
from notifications.pushover import PushoverLoggingHandler, PushoverNotifier
from sponsorship_notify.media import load_media_asset
from webhook import gunicorn_config
from webhook.dispatcher import NotificationDispatcher
from webhook.webhook import create_app

__version__ = "0.0.4"
NAME = "sponsorship-notify"

# Configure logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StandaloneApplication(BaseApplication):
    """Custom Gunicorn application for embedding within the entry point."""

    def __init__(self, app, options: Optional[Dict[str, Any]] = None):
        self.options = options or {}
        self.application = app
        super().__init__()

    def load_config(self):
        # Settings come from webhook/gunicorn_config.py, then explicit options
        for key, value in vars(gunicorn_config).items():
            if key in self.cfg.settings and value is not None:
                self.cfg.set(key.lower(), value)

        for key, value in self.options.items():
            if key in self.cfg.settings and value is not None:
                self.cfg.set(key.lower(), value)

    def load(self):
        return self.application


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        prog=NAME,
        description="Post a thank-you to X/Twitter when a GitHub sponsorship is created."
    )
    parser.add_argument("--version", action="store_true", help="show version and exit")
    parser.add_argument("--debug", action="store_true",
                        help="verbose logging and no worker timeout (breakpoint debugging)")
    parser.add_argument("--config", default=None, help="path to config.yml")
    return parser.parse_args(argv)


def configure_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """Configure the root logger with a rotating file and stdout.

    Args:
        debug: Log at DEBUG instead of INFO
        log_file: Path of the rotating log file (None disables file logging)
    """
    log_level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates (e.g., from gunicorn)
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file:
        # 10MB per file, 3 backups
        log_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=3
        )
        log_handler.setLevel(log_level)
        log_handler.setFormatter(formatter)
        root_logger.addHandler(log_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the sponsorship-notify console command.

    Starts Gunicorn with the sponsorship webhook Flask app on port 5000, or
    prints the version and exits when --version is given.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Raises:
        SystemExit: 0 after --version, 1 when required secrets are missing
    """
    args = parse_args(argv)

    if args.version:
        print(__version__)
        sys.exit(0)

    debug = args.debug or os.environ.get("SPONSORSHIP_NOTIFY_DEBUG", "").lower() in ("true", "1", "yes")

    # Bootstrap console logging so config loading is visible, then reconfigure
    configure_logging(debug)
    config = load_config(args.config)
    configure_logging(debug, (config.get("logging") or {}).get("file", "sponsorship-notify.log"))

    if debug:
        logger.info("Debug mode enabled: verbose logging and worker timeout disabled for breakpoint debugging")

    try:
        credentials = load_credentials()
    except ConfigurationError as e:
        logger.critical(str(e))
        sys.exit(1)

    asset = load_media_asset((config.get("asset") or {}).get("path"))

    notifier = PushoverNotifier.from_config(config)
    if notifier.enabled:
        pushover_handler = PushoverLoggingHandler(notifier)
        pushover_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(pushover_handler)

    dispatcher = NotificationDispatcher(
        credentials,
        asset,
        notifier=notifier,
        timeout=get_timeout(config),
    )
    app = create_app(dispatcher)

    logger.info(f"{NAME} {__version__} listening on {gunicorn_config.bind}")

    options = {
        "loglevel": "debug" if debug else None,
        "timeout": 0 if debug else None,
    }
    StandaloneApplication(app, options).run()


# Allow running as a script for development/testing
if __name__ == "__main__":
    main()
