import pytest

from core.config import EditorSettings
from core.session import EditorSession
from flowgraph.model import FlowGraph


@pytest.fixture
def graph():
    return FlowGraph()


@pytest.fixture
def settings():
    return EditorSettings()


@pytest.fixture
def session(settings):
    return EditorSession(settings)


@pytest.fixture
def linear_flow(graph):
    """start -> message -> end, fully connected"""
    message = graph.add_node("message", (300, 100))
    end = graph.add_node("end", (500, 100))
    graph.add_connection("start-1", message.id)
    graph.add_connection(message.id, end.id)
    return graph, message, end
