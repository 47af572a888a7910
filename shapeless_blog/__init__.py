import logging
import os
from logging.handlers import TimedRotatingFileHandler

from flask import Flask, jsonify, request
from flask_cors import CORS
from sqlalchemy import event
from sqlalchemy.engine import Engine
from apscheduler.schedulers.background import BackgroundScheduler

from .config import Config
from .models import db
from .cli import register_cli_commands
from .passwords import check_hasher


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # sqlite ignores foreign keys unless asked on every connection
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def configure_logging(app):
    app.logger.setLevel(logging.INFO)
    log_directory = app.config.get('LOG_DIRECTORY')
    if not log_directory:
        return

    os.makedirs(log_directory, exist_ok=True)
    handler = TimedRotatingFileHandler(
        os.path.join(log_directory, 'shapeless-blog.log'), when='midnight', backupCount=14
    )
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
    app.logger.addHandler(handler)


def start_token_sweeper(app):
    """Sweep expired tokens in the background every few minutes."""
    from .services.cleanup import cleanup_expired_tokens

    # Create a wrapper function that provides app context
    def scheduled_cleanup():
        with app.app_context():
            cleanup_expired_tokens(db.session)

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        func=scheduled_cleanup,
        trigger="interval",
        minutes=app.config['TOKEN_SWEEP_INTERVAL_MINUTES'],
    )
    scheduler.start()
    return scheduler


def create_app(config_class=Config):
    """Factory function to create and configure the Flask app."""

    # Create the Flask app instance
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    if not app.testing:
        # A broken hash primitive is a deployment error: refuse to start.
        check_hasher()

    CORS(app,
        resources={
            r"/api/*": {
                "origins": app.config['CORS_ORIGINS'],
                "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"]
            }
        })

    # Initialize extensions with the app
    db.init_app(app)

    # Import and register blueprints
    from .routes import api_bp, limiter
    from .web import web_bp, not_found_page
    limiter.init_app(app)
    app.register_blueprint(api_bp)
    app.register_blueprint(web_bp)

    @app.errorhandler(404)
    def page_not_found(e):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'the requested resource could not be found'}), 404
        return not_found_page()

    # Ensure app context is available for db operations
    with app.app_context():
        db.create_all()

    register_cli_commands(app)

    if app.config['SCHEDULER_ENABLED']:
        app.extensions['token_sweeper'] = start_token_sweeper(app)

    return app
