from starlette.testclient import TestClient

from subgraph.accounts import create_app, fetch_user_by_id, schema
from subgraph.asgi import GraphQL

ME_QUERY = '{ me { id username } }'


def test_me(client):
    response = client.post('/graphql', json={'query': ME_QUERY})
    assert response.status_code == 200
    assert response.json() == {'data': {'me': {'id': '1', 'username': '@ava'}}}


def test_me_is_idempotent(client):
    first = client.post('/graphql', json={'query': ME_QUERY})
    second = client.post('/graphql', json={'query': ME_QUERY})
    assert first.json() == second.json()


def test_me_get_and_root_path(client):
    response = client.get('/graphql', params={'query': ME_QUERY})
    assert response.json() == {'data': {'me': {'id': '1', 'username': '@ava'}}}

    response = client.post('/', json={'query': ME_QUERY})
    assert response.json() == {'data': {'me': {'id': '1', 'username': '@ava'}}}


def test_application_graphql_body(client):
    response = client.post(
        '/graphql', content=ME_QUERY.encode(), headers={'Content-Type': 'application/graphql'}
    )
    assert response.json()['data']['me']['id'] == '1'


def test_entities(client, entities_query):
    response = client.post(
        '/graphql',
        json={
            'query': entities_query,
            'variables': {'representations': [{'__typename': 'User', 'id': '1'}]},
        },
    )
    assert response.status_code == 200
    assert response.json() == {'data': {'_entities': [{'id': '1', 'username': '@ava'}]}}


def test_entities_unknown_id(client, entities_query):
    response = client.post(
        '/graphql',
        json={
            'query': entities_query,
            'variables': {'representations': [{'__typename': 'User', 'id': '404'}]},
        },
    )
    assert response.json() == {'data': {'_entities': [None]}}


def test_entities_with_injected_fetcher(entities_query):
    async def fetch(id):
        return {'id': id, 'username': f'user-{id}'}

    client = TestClient(create_app(fetch_user_by_id=fetch))
    response = client.post(
        '/graphql',
        json={
            'query': entities_query,
            'variables': {'representations': [{'__typename': 'User', 'id': '9'}]},
        },
    )
    assert response.json() == {'data': {'_entities': [{'id': '9', 'username': 'user-9'}]}}


def test_entities_without_fetcher(entities_query):
    client = TestClient(GraphQL(schema))
    response = client.post(
        '/graphql',
        json={
            'query': entities_query,
            'variables': {'representations': [{'__typename': 'User', 'id': '1'}]},
        },
    )
    body = response.json()
    assert body['data'] == {'_entities': [None]}
    assert body['errors'][0]['message'] == 'fetch_user_by_id is not available in the request context.'
    assert body['errors'][0]['path'] == ['_entities', 0]


def test_service_sdl(client):
    response = client.post('/graphql', json={'query': '{ _service { sdl } }'})
    sdl = response.json()['data']['_service']['sdl']
    assert 'type User @key(fields: "id")' in sdl
    assert 'me: User' in sdl


def test_malformed_query(client):
    response = client.post('/graphql', json={'query': '{ me { id '})
    assert response.status_code == 400
    body = response.json()
    assert body['data'] is None
    assert body['errors'][0]['message'].startswith('Syntax Error')

    response = client.post('/graphql', json={'query': ME_QUERY})
    assert response.status_code == 200


def test_unknown_field(client):
    response = client.post('/graphql', json={'query': '{ you { id } }'})
    assert response.status_code == 400
    assert "Cannot query field 'you'" in response.json()['errors'][0]['message']


def test_transport_errors(client):
    assert client.post('/graphql', json={'variables': {}}).status_code == 400
    assert client.post('/graphql', json=[{'query': ME_QUERY}]).status_code == 400
    assert client.post('/graphql', json={'query': 1}).status_code == 400
    assert client.post(
        '/graphql', content=b'{bad', headers={'Content-Type': 'application/json'}
    ).status_code == 400
    assert client.post('/graphql', content=b'x', headers={'Content-Type': 'text/plain'}).status_code == 415
    assert client.put('/graphql', json={'query': ME_QUERY}).status_code == 405


def test_variables_must_be_an_object(client):
    for variables in ([1], 5, '[1]', '"x"'):
        response = client.post('/graphql', json={'query': ME_QUERY, 'variables': variables})
        assert response.status_code == 400
        assert response.text == 'Variables must be a JSON object'

    response = client.get('/graphql', params={'query': ME_QUERY, 'variables': '[1]'})
    assert response.status_code == 400

    response = client.get('/graphql', params={'query': ME_QUERY, 'variables': '{}'})
    assert response.status_code == 200


def test_graphql_body_must_be_utf8(client):
    response = client.post(
        '/graphql', content=b'{ me \xff }', headers={'Content-Type': 'application/graphql'}
    )
    assert response.status_code == 400
    assert response.text == 'Invalid UTF-8 body'


def test_routes_are_not_mutated():
    routes = []
    GraphQL(schema, routes=routes)
    assert routes == []


def test_fetch_user_by_id():
    user = fetch_user_by_id('1')
    assert user == {'id': '1', 'username': '@ava'}
    user['username'] = 'changed'
    assert fetch_user_by_id('1') == {'id': '1', 'username': '@ava'}
    assert fetch_user_by_id('2') is None
