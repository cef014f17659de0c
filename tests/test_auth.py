import pytest

from app import create_app
from app.errors import ConfigurationError
from app.config import TestingConfig, config


def register(client, **overrides):
    payload = {'username': 'luna', 'email': 'Luna@Example.com', 'password': 'secret123'}
    payload.update(overrides)
    return client.post('/api/auth/register', json=payload)


def test_register_returns_token_and_user(client):
    response = register(client)

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['token']
    assert data['user']['email'] == 'luna@example.com'
    assert data['user']['level'] == 1
    assert data['user']['moodStats'] == {
        'happy': 0, 'sad': 0, 'excited': 0, 'calm': 0, 'anxious': 0, 'joyful': 0, 'tired': 0
    }


def test_register_rejects_duplicates(client):
    register(client)

    assert register(client, email='other@example.com').status_code == 409
    assert register(client, username='other').status_code == 409


def test_register_collects_validation_errors(client):
    response = register(client, username='ab', email='not-an-email', password='123')

    assert response.status_code == 400
    assert len(response.get_json()['errors']) == 3


def test_login_and_me(client):
    register(client)

    login = client.post('/api/auth/login', json={'email': 'luna@example.com', 'password': 'secret123'})
    assert login.status_code == 200
    token = login.get_json()['data']['token']

    me = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    assert me.get_json()['data']['user']['username'] == 'luna'


def test_login_with_wrong_password(client):
    register(client)
    response = client.post('/api/auth/login', json={'email': 'luna@example.com', 'password': 'nope123'})

    assert response.status_code == 401
    assert response.get_json()['success'] is False


def test_unknown_route_is_json_404(client):
    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json() == {'success': False, 'message': 'Route not found'}


def test_health(client):
    body = client.get('/api/health').get_json()
    assert body['status'] == 'OK'
    assert body['environment'] == 'testing'


def test_missing_api_keys_is_fatal_at_startup(monkeypatch):
    class NoKeysConfig(TestingConfig):
        AI_API_KEYS = []
        AI_REQUIRE_KEYS = True

    monkeypatch.setitem(config, 'nokeys', NoKeysConfig)
    with pytest.raises(ConfigurationError):
        create_app('nokeys')


@pytest.mark.parametrize('path', ['/api/auth/register', '/api/auth/login'])
@pytest.mark.parametrize('body', [[1, 2], 'luna', 7])
def test_non_object_body_is_rejected(client, path, body):
    response = client.post(path, json=body)

    assert response.status_code == 400
    assert response.get_json()['message'] == 'Request body must be a JSON object'


def test_malformed_json_is_rejected(client):
    response = client.post('/api/auth/login', data='{"email":', content_type='application/json')
    assert response.status_code == 400


def test_non_string_fields_are_validation_errors(client):
    response = register(client, username=12345, email=['luna@example.com'], password=123456)

    assert response.status_code == 400
    assert len(response.get_json()['errors']) == 3
