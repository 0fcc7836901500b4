import asyncio

from fastapi.testclient import TestClient

from app.config import settings
from app.database import get_db
from app.main import app


def test_health_is_ok_without_touching_the_database(broken_client):
    resp = broken_client.get('/api/health')
    assert resp.status_code == 200
    body = resp.json()
    assert body['status'] == 'OK'
    assert body['timestamp']
    assert set(body) == {'status', 'timestamp', 'message', 'database'}
    # same store is unreachable for real queries
    assert broken_client.get('/api/test-db').status_code == 500


def test_unknown_api_path_lists_available_endpoints(client):
    resp = client.get('/api/nope')
    assert resp.status_code == 404
    body = resp.json()
    assert body['error'] == 'API endpoint not found'
    assert body['requested_path'] == '/api/nope'
    assert body['method'] == 'GET'
    assert 'GET /api/health' in body['available_endpoints']
    assert len(body['available_endpoints']) == 15


def test_unhandled_error_returns_generic_500():
    def exploding_db():
        raise RuntimeError('boom')
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = exploding_db
    try:
        resp = TestClient(app, raise_server_exceptions=False).get('/api/stats')
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    body = resp.json()
    assert body['error'] == 'Internal Server Error'
    assert body['message'] == 'boom'
    assert body['timestamp']


def test_slow_request_times_out_with_408(monkeypatch, db_session):
    async def slow_db():
        await asyncio.sleep(0.5)
        yield db_session

    monkeypatch.setattr(settings, 'REQUEST_TIMEOUT_SECONDS', 0.05)
    app.dependency_overrides[get_db] = slow_db
    try:
        resp = TestClient(app).get('/api/stats')
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 408
    assert resp.json() == {'error': 'Request Timeout'}


def test_cors_allows_local_dashboard_origin(client):
    resp = client.get('/api/health', headers={'Origin': 'http://localhost:4200'})
    assert resp.headers['access-control-allow-origin'] == 'http://localhost:4200'
    assert resp.headers['access-control-allow-credentials'] == 'true'


def test_cors_rejects_other_origins(client):
    resp = client.get('/api/health', headers={'Origin': 'http://evil.example'})
    assert 'access-control-allow-origin' not in resp.headers


def test_root_describes_service(client):
    body = client.get('/').json()
    assert body['version'] == settings.VERSION
    assert body['docs'] == '/docs'
