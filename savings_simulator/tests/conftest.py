import pytest
from flask.testing import FlaskClient

from savings_simulator.app import create_app
from savings_simulator.config import Settings


@pytest.fixture()
def app():
    return create_app(Settings(env="test", log_level="WARNING"))


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
