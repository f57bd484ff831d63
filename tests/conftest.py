import pytest
from graph_factories import make_graph

from raider_route.domain.entities.graph import Graph


@pytest.fixture
def abcd_graph() -> Graph:
    return make_graph([("A", "B", 1.0), ("B", "C", 1.0), ("A", "C", 5.0), ("C", "D", 1.0)])
