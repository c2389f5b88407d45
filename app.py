from flask import Flask, jsonify

from system.log_utils import debug, info

APP_VERSION = "1.0.0"


def create_app(prefs_file=None) -> Flask:
    debug("starting service", version=APP_VERSION)

    from system.device.device_init import init_all
    init_all(prefs_file)

    from system import services
    services.display_adapter.show_text(services.program_selector.label())

    from washer.routes import washer_bp

    app = Flask(__name__)
    app.register_blueprint(washer_bp, url_prefix="/washer")

    @app.route('/')
    def index():
        return jsonify({"service": "washer", "version": APP_VERSION})

    info("[APP] ready")
    return app


def cleanup():
    """Stop the motor and release GPIO before exit."""
    from system import services
    debug("Cleaning up resources...")
    if services.engine_service is not None:
        services.engine_service.stop()
    if services.gpio_service is not None:
        services.gpio_service.close()
    debug("Cleanup complete")


if __name__ == '__main__':
    import atexit

    app = create_app()
    atexit.register(cleanup)
    app.run(host="0.0.0.0", port=5001, debug=False, use_reloader=False)
