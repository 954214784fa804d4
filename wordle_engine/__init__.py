"""
Wordle Engine Application Package

Word-guessing puzzle engine: guess evaluation, the game session state
machine, statistics with achievements, persistence, and a Flask HTTP
surface over them.
"""

from flask import Flask
from flask_cors import CORS
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance with all blueprints registered
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.dictionary_controller import dictionary_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(dictionary_bp, url_prefix='/api')

    return app
