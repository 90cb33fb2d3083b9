"""
GitHub Sponsors Webhook Receiver - Flask Application.

This module exposes the NotificationDispatcher over HTTP.

Endpoints:
    POST /        GitHub sponsorship webhook (all other methods answer 405);
                  any other path is served by the same handler
    GET  /health  Liveness probe for Docker and load balancers

Responses from the webhook route are plain text, matching what GitHub shows
in the "Recent Deliveries" view:
    - 200 "OK": event accepted (thank-you posted, or nothing to do)
    - 400: body unreadable, body not a sponsorship event, or publish failure
    - 403: missing or wrong X-Hub-Signature-256
    - 405: any method other than POST
    - 500: unexpected error inside the handler

The dispatcher is injected through create_app() and stored in app.config,
so tests can pass one wired to mocked clients.

Example:
    $ curl -X POST http://localhost:5000/ \\
           -H "X-Hub-Signature-256: sha256=..." \\
           -d '{"action": "created"}'
    OK
"""
import logging
from typing import TYPE_CHECKING

from flask import Flask, Response, current_app, jsonify, request

from webhook.signature import SIGNATURE_HEADER

if TYPE_CHECKING:
    from webhook.dispatcher import NotificationDispatcher

# Logging is configured in sponsorship_notify.main() - this module uses the configured logger
logger = logging.getLogger(__name__)

WEBHOOK_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _plain_text(message: str, status: int) -> Response:
    return Response(f"{message}\n", status=status, mimetype="text/plain")


def create_app(dispatcher: "NotificationDispatcher") -> Flask:
    """Factory function to create and configure the Flask application.

    Args:
        dispatcher: NotificationDispatcher that handles each webhook delivery

    Returns:
        Configured Flask application instance

    Example:
        >>> app = create_app(dispatcher)
        >>> client = app.test_client()
    """
    app = Flask(__name__)

    app.config["DISPATCHER"] = dispatcher

    # Every method and path is routed here so the 405 body stays plain text.
    # /health is a static rule and takes precedence for GET.
    @app.route("/", methods=WEBHOOK_METHODS, provide_automatic_options=False)
    @app.route("/<path:_path>", methods=WEBHOOK_METHODS, provide_automatic_options=False)
    def receive_sponsorship_webhook(_path=""):
        """Webhook endpoint for GitHub sponsorship events.

        Returns:
            Plain-text Response with the dispatcher's status and message
        """
        if request.method != "POST":
            logger.debug(f"Rejected {request.method} request to webhook endpoint")
            return _plain_text("only POST is supported", 405)

        dispatcher = current_app.config["DISPATCHER"]

        try:
            result = dispatcher.handle(
                request.stream,
                request.headers.get(SIGNATURE_HEADER, ""),
                remote_addr=request.remote_addr,
            )
        except Exception as e:
            logger.error(f"Unexpected error processing sponsorship webhook: {e}", exc_info=True)
            return _plain_text("Internal server error", 500)

        return _plain_text(result.message, result.status_code)

    @app.route("/health", methods=["GET"])
    def health_check():
        """Health check endpoint for monitoring and load balancers.

        Example:
            $ curl http://localhost:5000/health
            {"status": "healthy"}
        """
        return jsonify({"status": "healthy"}), 200

    return app
