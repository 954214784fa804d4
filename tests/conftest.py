import os
import tempfile

# Keep test logs out of the working directory; set before the package is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='wordle-logs-'))

import pytest

from wordle_engine import create_app
from wordle_engine.config import TestingConfig
from wordle_engine.services import game_service as game_service_module
from wordle_engine.services.game_service import GameService, initialize_game_service
from wordle_engine.services.persistence import MemoryStorage, PersistenceGateway
from wordle_engine.services.word_validator import WordValidator


@pytest.fixture
def validator():
    return WordValidator()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def gateway(storage):
    return PersistenceGateway(storage)


@pytest.fixture
def service(validator, gateway):
    return GameService(validator=validator, gateway=gateway)


@pytest.fixture
def app():
    initialize_game_service(validator=WordValidator(), gateway=PersistenceGateway(MemoryStorage()))
    app = create_app(TestingConfig)
    yield app
    game_service_module._game_service = None


@pytest.fixture
def client(app):
    return app.test_client()
