import pytest

from config import Settings
from engine import ManualScheduler, Stepper
from main import create_app
from store import VisualizationStore


@pytest.fixture
def store(tmp_path):
    return VisualizationStore(str(tmp_path / "visualizations.db"))


@pytest.fixture
def app(tmp_path):
    settings = Settings(
        database_path=str(tmp_path / "app.db"),
        cors_origins=["http://localhost:3000"],
        testing=True,
    )
    return create_app(settings)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def stepper(scheduler):
    return Stepper(scheduler=scheduler)
