from __future__ import annotations

import json
import logging

from flask import Flask, jsonify, request

from ..container import Container
from ..core.constants import DEFAULT_STORE_RETRY_ATTEMPTS
from ..core.exceptions import StoreUnavailableError, ValidationError
from .router import failure, is_retryable

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    retry_attempts = int(app.config.get("STORE_RETRY_ATTEMPTS", DEFAULT_STORE_RETRY_ATTEMPTS))

    @app.route("/", methods=["GET"], endpoint="health")
    def health():
        return "GeoClock backend is running."

    @app.route("/api", methods=["POST"], endpoint="api")
    def api():
        # Web clients post JSON as text/plain to skip CORS preflight, so parse the raw body.
        raw = request.get_data(as_text=True)
        try:
            envelope = json.loads(raw) if raw.strip() else None
        except ValueError:
            return jsonify(failure(ValidationError.code, "Request body is not valid JSON"))

        action = envelope.get("action") if isinstance(envelope, dict) else None
        attempts = 1 + (retry_attempts if is_retryable(envelope) else 0)
        response = None
        for attempt in range(1, attempts + 1):
            try:
                response = container.router.dispatch(envelope)
            except Exception:
                logger.exception("unhandled error while dispatching %r", action)
                response = failure("InternalError", "Unexpected server error")
                break
            if response.get("code") != StoreUnavailableError.code:
                break
            logger.warning("store unavailable (attempt %d/%d)", attempt, attempts)

        return jsonify(response)
