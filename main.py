"""
Wordle Engine - Main Entry Point

This is the main entry point for the Wordle engine HTTP server.
It initializes the game service and starts the Flask application.
"""

import os

from wordle_engine import create_app
from wordle_engine.config import config
from wordle_engine.services.game_service import initialize_game_service
from wordle_engine.services.persistence import PersistenceGateway, build_storage
from wordle_engine.services.word_validator import WordValidator
from wordle_engine.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    config_class = config[os.getenv('APP_ENV', 'default')]

    try:
        print("Initializing services...")

        storage = build_storage(config_class)
        gateway = PersistenceGateway(storage, key=config_class.STATE_KEY)
        game_service = initialize_game_service(
            validator=WordValidator(),
            gateway=gateway,
            max_guesses=config_class.MAX_GUESSES
        )
        print(f"✓ Game service initialized ({config_class.STORAGE_BACKEND} storage, "
              f"{len(game_service.validator)} words)")

        removed = game_service.cleanup_old_data(config_class.HISTORY_DAYS)
        if removed:
            game_logger.logger.info(f"Pruned {removed} history records older than {config_class.HISTORY_DAYS} days")

        print("Creating Flask application...")
        app = create_app(config_class)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Wordle Engine Starting")

        print(f"\nStarting Wordle Engine on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print("=" * 50)

        app.run(host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Wordle Engine shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
