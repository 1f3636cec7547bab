"""
Tests for the log relay endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from bytlog.core import Logger, get_root_logger
from bytlog.levels import Level
from log_relay.api import app


@pytest.fixture
def root(sink):
    return Logger(sink=sink)


@pytest.fixture
def client(root):
    app.dependency_overrides[get_root_logger] = lambda: root
    yield TestClient(app)
    app.dependency_overrides.clear()


class ExplodingLogger(Logger):
    """Fails when asked for any child other than the relay's own"""

    def _spawn(self, context):
        if context['module'] == 'log-relay':
            return Logger(context=context, sink=self.sink, level_filter=self.level_filter)
        raise RuntimeError('sink offline: db-password=hunter2')


class TestRelayEndpoint:
    """Test POST /api/log"""

    def test_replays_info_call(self, client, sink):
        response = client.post('/api/log', json={
            'level': 'info',
            'message': 'User logged in',
            'context': {'module': 'auth', 'userId': 'u-1'},
        })

        assert response.status_code == 200
        assert response.json() == {}
        assert len(sink.records) == 1
        level, line = sink.records[0]
        assert level is Level.INFO
        assert '[auth]' in line
        assert '[u-1]' in line
        assert 'User logged in' in line

    def test_extra_context_and_data(self, client, sink):
        client.post('/api/log', json={
            'level': 'error',
            'message': 'Checkout failed',
            'data': {'code': 'E42'},
            'context': {'module': 'checkout', 'cart': 'c-9'},
        })

        line = sink.lines()[0]
        assert '"code": "E42"' in line
        assert '"cart": "c-9"' in line

    def test_missing_module_defaults_to_app(self, client, sink):
        client.post('/api/log', json={'level': 'warn', 'message': 'hm', 'context': {}})

        assert '[app]' in sink.lines()[0]

    def test_context_is_optional(self, client, sink):
        response = client.post('/api/log', json={'level': 'warn', 'message': 'hm'})

        assert response.status_code == 200
        assert len(sink.records) == 1

    def test_server_level_filter_applies(self, client, sink, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'warn')

        response = client.post('/api/log', json={'level': 'info', 'message': 'quiet'})

        assert response.status_code == 200
        assert sink.records == []

    def test_does_not_touch_root_context(self, client, root):
        client.post('/api/log', json={
            'level': 'info', 'message': 'x', 'context': {'module': 'a', 'userId': 'u-1'},
        })

        assert root.context == {'module': 'app'}

    @pytest.mark.parametrize('body', [
        {'level': 'loud', 'message': 'x'},
        {'level': 'info'},
        {'message': 'x'},
        {'level': 'info', 'message': 'x', 'data': 'not-an-object'},
    ])
    def test_invalid_payload(self, client, sink, body):
        response = client.post('/api/log', json=body)

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid log payload'}
        level, line = sink.records[-1]
        assert level is Level.ERROR
        assert '[log-relay]' in line

    def test_malformed_json(self, client):
        response = client.post('/api/log', content=b'{not json',
                               headers={'Content-Type': 'application/json'})

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid log payload'}

    def test_processing_error_is_sanitized(self, sink):
        app.dependency_overrides[get_root_logger] = lambda: ExplodingLogger(sink=sink)
        try:
            response = TestClient(app).post('/api/log', json={'level': 'info', 'message': 'x'})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {'error': 'Failed to process log'}
        assert 'hunter2' not in response.text
        assert 'hunter2' in sink.lines(Level.ERROR)[0]


class TestHealth:
    """Test GET /health"""

    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json() == {'status': 'healthy'}
