import pytest
from starlette.testclient import TestClient

from subgraph.accounts import app

ENTITIES_QUERY = """
query ($representations: [_Any!]!) {
  _entities(representations: $representations) {
    ... on User {
      id
      username
    }
  }
}
"""


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def entities_query():
    return ENTITIES_QUERY
