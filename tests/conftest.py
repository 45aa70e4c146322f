import pytest

from chip8 import settings


@pytest.fixture(autouse=True)
def quiet_logs():
    settings.set_logging(False)
    yield
    settings.set_logging(False)
