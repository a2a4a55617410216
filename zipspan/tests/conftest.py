import pytest

from zipspan import runtime_config


@pytest.fixture(autouse=True)
def reset_runtime_config():
    yield
    runtime_config.reset()
