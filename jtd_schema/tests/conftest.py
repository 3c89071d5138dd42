import pytest

from .builders import GraphBuilder


@pytest.fixture
def graph():
    return GraphBuilder()
