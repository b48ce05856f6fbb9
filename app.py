"""
Hotel Reservations - reservation availability and lifecycle core
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import extensions
from extensions import init_extensions

# Import database functions
from database import close_db, init_db


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    config_class = config[config_name]
    if config_name == 'production':
        config_class.validate()

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)

    # Initialize extensions
    init_extensions(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def register_error_handlers(app):
    """Register error handlers."""
    from utils.api_response import api_error
    from utils.errors import ReservationError
    from utils.messages import get_message

    @app.errorhandler(ReservationError)
    def reservation_error(error):
        """Render reservation errors with their status code."""
        return api_error(error.message, status=error.status_code, **error.context)

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error('Recurso no encontrado', status=404)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db is not None and db.in_transaction:
            db.rollback()
        return api_error(get_message('unexpected_error', action='procesar la solicitud'), status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db_command():
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db()
        click.echo('Database initialized successfully!')

    @app.cli.command('create-room')
    @click.argument('number', type=int)
    @click.option('--type', 'type_name', default='Simple', help='Room type name')
    def create_room_command(number, type_name):
        """Create a new room."""
        from models.room import create_room, get_room_type_by_name

        with app.app_context():
            room_type = get_room_type_by_name(type_name)
            if room_type is None:
                click.echo(f'Unknown room type: {type_name}', err=True)
                return

            try:
                room_id = create_room(number, room_type['id'])
                click.echo(f'Room created successfully! ID: {room_id}')
            except Exception as e:
                click.echo(f'Error creating room: {str(e)}', err=True)

    @app.cli.command('cleanup-audit')
    @click.option('--days', type=int, default=None, help='Retention in days')
    def cleanup_audit_command(days):
        """Delete audit log entries older than the retention period."""
        from models.audit_log import cleanup_old_logs

        with app.app_context():
            retention = days if days is not None else app.config.get('AUDIT_RETENTION_DAYS', 90)
            deleted = cleanup_old_logs(retention)
        click.echo(f'Deleted {deleted} audit log entries older than {retention} days')


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    root_logger = logging.getLogger()

    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/hotel.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        # Module loggers (services, models, database) propagate to the root
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.INFO)

        app.logger.setLevel(logging.INFO)
        app.logger.info(f'{app.config.get("APP_NAME", "Hotel Reservations")} startup')
    else:
        # Development logging
        root_logger.setLevel(logging.DEBUG)
        app.logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
