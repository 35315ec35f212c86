"""
Shared test fixtures for the Orchestr test suite.
"""

import pytest

from orchestr.container import Container
from orchestr.events import Dispatcher
from orchestr.foundation import Application
from orchestr.support import Facade


@pytest.fixture
def container():
    return Container()


@pytest.fixture
def events(container):
    return Dispatcher(container)


@pytest.fixture
def app(tmp_path):
    return Application(str(tmp_path))


@pytest.fixture(autouse=True)
def reset_facades():
    yield
    Facade.set_facade_application(None)


class Recorder:
    """Collects listener calls."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)

    def listener(self, name, response=None):
        def handle(*args):
            self.calls.append((name, *args))
            return response
        return handle


@pytest.fixture
def recorder():
    return Recorder()
