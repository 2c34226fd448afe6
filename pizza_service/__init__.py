import os
import atexit
import logging

from flask import Flask, jsonify
from appdirs import user_data_dir
from werkzeug.exceptions import HTTPException

from .extensions import db
from .exceptions import StatusCodeError
from .metrics import events, install_request_tracker, metrics_registry, metrics_reporter
from .utils.responses import error_response

logger = logging.getLogger(__name__)


def create_app(config_overrides=None):
    """Creates and configures the Flask application.

    Args:
        config_overrides: Optional dictionary of config values to override.
                         Typically used for testing.

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Load configuration from config.py (environment-based)
    from config import get_config

    config_class = get_config()
    app.config.from_object(config_class)

    # Apply test-specific or instance-specific overrides
    if config_overrides:
        app.config.from_mapping(config_overrides)

    logging.getLogger("pizza_service").setLevel(app.config.get("LOG_LEVEL", "INFO"))
    if app.config.get("ENV") == "development":
        logging.getLogger("werkzeug").setLevel(logging.WARNING)

    # Database configuration - set default path if not configured
    if app.config.get("SQLALCHEMY_DATABASE_URI") is None:
        data_dir = user_data_dir("JWTPizza", "JWTPizza")
        os.makedirs(data_dir, exist_ok=True)
        db_path = os.path.join(data_dir, "pizza.db")
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    db.init_app(app)
    _init_metrics(app)

    from .auth import load_current_user

    app.before_request(load_current_user)

    from .blueprints.auth import auth as auth_blueprint
    from .blueprints.franchise import franchise as franchise_blueprint
    from .blueprints.order import order as order_blueprint
    from .blueprints.monitoring import monitoring as monitoring_blueprint

    app.register_blueprint(auth_blueprint)
    app.register_blueprint(franchise_blueprint)
    app.register_blueprint(order_blueprint)
    app.register_blueprint(monitoring_blueprint)

    @app.route("/")
    def index():
        return jsonify({
            "message": "welcome to JWT Pizza",
            "version": app.config.get("SERVICE_VERSION", ""),
        })

    _register_error_handlers(app)

    with app.app_context():
        db.create_all()
        from .services import UserService

        UserService.ensure_default_admin(
            app.config.get("ADMIN_NAME", "Admin"),
            app.config.get("ADMIN_EMAIL"),
            app.config.get("ADMIN_PASSWORD"),
        )

    return app


def _init_metrics(app):
    """Wire request instrumentation and the background reporter."""
    if not app.config.get("METRICS_ENABLED", True):
        events.disconnect(metrics_registry)
        return

    events.connect(metrics_registry)
    install_request_tracker(app)

    metrics_reporter.configure(
        enabled=True,
        url=app.config.get("METRICS_URL", ""),
        source=app.config.get("METRICS_SOURCE", "jwt-pizza-service"),
        user_id=app.config.get("METRICS_USER_ID", ""),
        api_key=app.config.get("METRICS_API_KEY", ""),
        interval_seconds=app.config.get("METRICS_INTERVAL_SECONDS", 30.0),
        timeout_seconds=app.config.get("METRICS_TIMEOUT_SECONDS", 10.0),
    )
    if metrics_reporter.url:
        metrics_reporter.start()
        atexit.register(metrics_reporter.stop)


def _register_error_handlers(app):
    @app.errorhandler(StatusCodeError)
    def handle_status_code_error(e):
        return error_response(e.message, e.status_code)

    @app.errorhandler(404)
    def handle_not_found(e):
        return error_response("unknown endpoint", 404)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception(f"Unhandled error: {e}")
        return error_response(str(e), 500)
