# --- mdpage_lib/server.py ---
import logging

from flask import Blueprint, Flask, current_app, jsonify, request

from .api import handle_message
from .canvas import SVGCanvas
from .config import DEFAULT_CONFIG_PATH, ConfigService, font_dirs_from
from .constants import DEFAULT_FONT_FAMILY, MARKDOWN_ELEMENTS
from .fonts import FontProvider

log = logging.getLogger("mdpage.server")

bp = Blueprint("build", __name__)


@bp.route("/build", methods=["POST"])
def build_document():
    """Builds pages from a build message and returns the notification plus SVG."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "Missing request body"}), 400

    settings = current_app.config_service.get_settings()
    family = settings.get("Fonts", {}).get("family") or DEFAULT_FONT_FAMILY
    canvas = SVGCanvas(current_app.font_provider, family)
    if data.get("updateRun"):
        canvas.create_selected_run(MARKDOWN_ELEMENTS["paragraph"]["font_size"])

    result = handle_message(data, canvas, current_app.font_provider, settings)
    if result["type"] == "ignored":
        return jsonify(result), 400
    if result["type"] == "error":
        return jsonify(result), 500

    result["svg"] = canvas.render()
    log.info("Built %s: %d page(s), %d run(s).", result["mode"], result["pages"], result["runs"])
    return jsonify(result)


def create_app(config_overrides=None):
    """
    Creates and configs an instance of the Flask application.
    """
    app = Flask(__name__)
    app.config.from_mapping(
        CONFIG_PATH=DEFAULT_CONFIG_PATH,
        FONT_DIRS=None,
    )

    if config_overrides:
        app.config.from_mapping(config_overrides)
        log.info("Applied runtime configuration overrides.")

    # --- Initialize Services ---
    app.config_service = ConfigService(app.config["CONFIG_PATH"])
    font_dirs = app.config["FONT_DIRS"]
    if font_dirs is None:
        font_dirs = font_dirs_from(app.config_service.get_settings())
    app.font_provider = FontProvider(font_dirs)

    app.register_blueprint(bp, url_prefix="/api")

    # --- Global Error Handler ---
    @app.errorhandler(Exception)
    def handle_exception(e):
        """Catches all unhandled exceptions, logs them, and returns JSON."""
        if hasattr(e, "code") and e.code < 500:
            return jsonify(error=str(e)), e.code
        log.exception("An unhandled exception occurred: %s", e)
        return jsonify(error="An internal server error occurred."), 500

    @app.route("/health")
    def health_check():
        return "OK"

    return app
