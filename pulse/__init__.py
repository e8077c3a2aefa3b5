# pulse/__init__.py

import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify, request
from .config import Config, DevelopmentConfig, ProductionConfig
from .extensions import cors, jwt, limiter
import os

def create_app(config_object=None):
    app = Flask(__name__)

    # Load configuration based on FLASK_ENV unless one is passed in
    if config_object is not None:
        app.config.from_object(config_object)
    elif os.getenv('FLASK_ENV', 'development') == 'production':
        app.config.from_object(ProductionConfig)
    else:
        app.config.from_object(DevelopmentConfig)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", Config.LOG_LEVEL))

    origins = [o.strip() for o in app.config.get("CORS_ORIGIN", "").split(",") if o.strip()]
    cors.init_app(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)

    # Initialize JWT and rate limiter
    jwt.init_app(app)
    limiter.init_app(app)

    from pulse.coach.routes import coach_bp
    from pulse.chats.routes import chats_bp
    from pulse.workouts.routes import workouts_bp

    app.register_blueprint(coach_bp, url_prefix="/coach")
    app.register_blueprint(chats_bp, url_prefix="/chats")
    app.register_blueprint(workouts_bp, url_prefix="/workouts")

    # Set up logging if not in debug mode
    if not app.debug:
        handler = RotatingFileHandler('error.log', maxBytes=100000, backupCount=3)
        handler.setLevel(logging.ERROR)
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)

    # Error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not Found"}), 404

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({"error": "Too many requests", "code": "RATE_LIMITED"}), 429

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error(f"Server Error: {error}, Path: {request.path}")
        return jsonify({"error": "Internal Server Error", "code": "INTERNAL_ERROR"}), 500

    return app
