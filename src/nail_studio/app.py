from __future__ import annotations

import logging
import os
from contextlib import closing
import sqlite3
from pathlib import Path
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import BadRequest, HTTPException

from .db import connect, fetch_order_owner, init_db, insert_custom_order, replace_order_images, resolve_identity
from .models import StudioStateError
from .pricing import pricing_catalog
from .serialization import configuration_from_payload
from .studio import STEP_NAMES, CustomStudio
from .validation import OrderValidationError, validate_custom_order, validate_image_update

CORS_ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"


def _db_path(app: Flask) -> Path:
    return Path(app.config["DATABASE_PATH"])


def _configure_observability(app: Flask, app_name: str) -> None:
    app.config["APP_NAME"] = app_name
    level_name = os.environ.get("APP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)


def _is_api_request() -> bool:
    return request.path.startswith("/api/")


def _configure_error_handlers(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest) -> Any:
        app.logger.warning("bad_request", extra={"path": request.path, "method": request.method, "error": str(error)})
        if _is_api_request():
            return jsonify({"error": "invalid request payload"}), 400
        return error

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> Any:
        app.logger.warning(
            "http_error",
            extra={"path": request.path, "method": request.method, "status_code": error.code, "error": error.description},
        )
        if _is_api_request():
            return jsonify({"error": error.description}), error.code
        return error

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> Any:
        app.logger.exception("unexpected_error", extra={"path": request.path, "method": request.method})
        if _is_api_request():
            return jsonify({"error": "Internal server error"}), 500
        raise error


def _configure_cors(app: Flask) -> None:
    @app.after_request
    def add_cors_headers(response: Any) -> Any:
        response.headers["Access-Control-Allow-Origin"] = app.config["ALLOWED_ORIGIN"]
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOWED_HEADERS
        return response


def _json_body() -> Any:
    return request.get_json(force=True, silent=False)


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _rejection(message: str, status_code: int) -> Any:
    return jsonify({"error": message}), status_code


def create_studio_app(database_path: str | None = None) -> Flask:
    app = Flask(__name__)
    _configure_observability(app, "studio")
    _configure_error_handlers(app)
    app.config["DATABASE_PATH"] = database_path or os.environ.get("STUDIO_DB_PATH", "./studio.db")
    app.config["ALLOWED_ORIGIN"] = os.environ.get("STUDIO_ALLOWED_ORIGIN", "*")
    init_db(_db_path(app))
    _configure_cors(app)

    @app.get("/healthz")
    def healthz() -> Any:
        return jsonify({"status": "ok", "app": app.config["APP_NAME"]})

    @app.get("/api/studio/options")
    def studio_options() -> Any:
        return jsonify({"steps": list(STEP_NAMES), **pricing_catalog()})

    @app.post("/api/studio/price")
    def studio_price() -> Any:
        body = _json_body()
        try:
            studio = CustomStudio(configuration_from_payload(body))
        except StudioStateError as exc:
            return _rejection(str(exc), 400)
        return jsonify(studio.price_breakdown().to_dict())

    @app.post("/api/custom-orders")
    def create_custom_order() -> Any:
        body = _json_body()
        try:
            order = validate_custom_order(body)
        except OrderValidationError as exc:
            app.logger.info("custom_order_rejected", extra={"field": exc.field, "error": exc.message})
            return _rejection(exc.message, 400)

        token = _bearer_token()
        with closing(connect(_db_path(app))) as conn:
            # Unrecognized tokens are treated as guest checkouts.
            user_id = resolve_identity(conn, token) if token else None
            try:
                with conn:
                    order_id = insert_custom_order(conn, order, user_id)
            except sqlite3.Error:
                app.logger.exception("custom_order_insert_failed", extra={"user_id": user_id})
                return _rejection("Failed to create order", 500)

        app.logger.info(
            "custom_order_created",
            extra={
                "order_id": order_id,
                "user_id": user_id,
                "requires_quote": order["requires_quote"],
                "estimated_price": order["estimated_price"],
            },
        )
        return jsonify({"id": order_id})

    @app.post("/api/custom-orders/images")
    def update_order_images() -> Any:
        token = _bearer_token()
        if token is None:
            return _rejection("Authorization required", 401)
        with closing(connect(_db_path(app))) as conn:
            user_id = resolve_identity(conn, token)
            if user_id is None:
                app.logger.warning("order_images_invalid_token")
                return _rejection("Invalid authorization", 401)

            try:
                order_id, images = validate_image_update(_json_body())
            except OrderValidationError as exc:
                app.logger.info("order_images_rejected", extra={"user_id": user_id, "field": exc.field, "error": exc.message})
                return _rejection(exc.message, 400)

            try:
                with conn:
                    existing = fetch_order_owner(conn, order_id)
                    if existing is None:
                        app.logger.info("order_images_not_found", extra={"order_id": order_id, "user_id": user_id})
                        return _rejection("Order not found", 404)
                    if existing["user_id"] != user_id:
                        app.logger.warning(
                            "order_images_forbidden",
                            extra={"order_id": order_id, "order_user_id": existing["user_id"], "user_id": user_id},
                        )
                        return _rejection("Unauthorized", 403)
                    # Ownership is checked again by the write itself.
                    if not replace_order_images(conn, order_id, user_id, images):
                        app.logger.warning("order_images_ownership_changed", extra={"order_id": order_id, "user_id": user_id})
                        return _rejection("Unauthorized", 403)
            except sqlite3.Error:
                app.logger.exception("order_images_update_failed", extra={"order_id": order_id, "user_id": user_id})
                return _rejection("Failed to update order", 500)

            app.logger.info(
                "order_images_updated",
                extra={"order_id": order_id, "user_id": user_id, "image_count": len(images)},
            )
            return jsonify({"success": True})

    return app
