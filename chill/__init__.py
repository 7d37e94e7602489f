"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .extensions import backend


def _env_flag(name, default):
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def init_firebase(app):
    """Initialize the Firebase Admin SDK from the best credentials available."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    project_id = json.load(f).get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        database_url = app.config.get("FIREBASE_DATABASE_URL")
        if not database_url and project_id:
            database_url = f"https://{project_id}-default-rtdb.firebaseio.com"

        firebase_options = {"databaseURL": database_url}
        if project_id:
            firebase_options["projectId"] = project_id
        try:
            firebase_admin.initialize_app(cred, firebase_options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_DATABASE_URL=os.environ.get("FIREBASE_DATABASE_URL"),
        STORE_BACKEND=os.environ.get("STORE_BACKEND") or "firebase",
        EVENTS_INLINE=_env_flag("EVENTS_INLINE", "false"),
        EVENT_MAX_ATTEMPTS=int(os.environ.get("EVENT_MAX_ATTEMPTS") or 3),
        EVENT_RETRY_DELAY=float(os.environ.get("EVENT_RETRY_DELAY") or 0.5),
        EVENT_MAX_WORKERS=int(os.environ.get("EVENT_MAX_WORKERS") or 8),
        EVENTS_SHARED_SECRET=os.environ.get("EVENTS_SHARED_SECRET"),
        ENFORCE_HANGOUT_CREATOR=_env_flag("ENFORCE_HANGOUT_CREATOR", "false"),
        RESTRICT_ATTENDED_HANGOUT_DELETE=_env_flag(
            "RESTRICT_ATTENDED_HANGOUT_DELETE", "false"
        ),
        NOTIFICATION_CHANNEL_ID=os.environ.get("NOTIFICATION_CHANNEL_ID") or "hangouts",
        NOTIFICATION_CLICK_ACTION=os.environ.get("NOTIFICATION_CLICK_ACTION")
        or "OPEN_HANGOUT_DETAILS",
    )

    if test_config:
        app.config.update(test_config)
        # Tests run against the in-memory store with handlers inline.
        if app.config.get("TESTING"):
            if "STORE_BACKEND" not in test_config:
                app.config["STORE_BACKEND"] = "memory"
            if "EVENTS_INLINE" not in test_config:
                app.config["EVENTS_INLINE"] = True
            if "EVENT_RETRY_DELAY" not in test_config:
                app.config["EVENT_RETRY_DELAY"] = 0

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        init_firebase(app)

    backend.init_app(app)

    from . import gateway as gateway_bp

    app.register_blueprint(gateway_bp.bp)

    from . import webhooks as webhooks_bp

    app.register_blueprint(webhooks_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
