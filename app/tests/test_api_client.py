import pytest
import requests

from app.client.api_client import ConnectivityFailure, MeterApiClient, ServerError
from app.tests.fakes import FakeResponse, FakeSession


def make_client(handler):
    session = FakeSession(handler)
    return MeterApiClient(base_url='http://meters.test/', session=session), session


def test_get_json_returns_decoded_body():
    client, session = make_client(lambda path, params: FakeResponse(200, [{'id': 1}]))
    assert client.get_json('/api/months') == [{'id': 1}]
    assert session.calls == [('/api/months', {})]


def test_base_url_trailing_slash_is_trimmed():
    client, _ = make_client(lambda path, params: FakeResponse(200, {}))
    assert client.url_for('/api/health') == 'http://meters.test/api/health'


@pytest.mark.parametrize('error', [requests.ConnectionError('refused'), requests.Timeout('slow')])
def test_unreachable_server_is_a_connectivity_failure(error):
    client, _ = make_client(lambda path, params: error)
    with pytest.raises(ConnectivityFailure) as info:
        client.get_json('/api/years')
    assert info.value.status == 0
    assert info.value.message == 'Cannot connect to server at http://meters.test'


def test_error_status_is_a_server_error_with_details():
    body = {'error': 'Internal Server Error', 'details': 'relation does not exist'}
    client, _ = make_client(lambda path, params: FakeResponse(500, body))
    with pytest.raises(ServerError) as info:
        client.get_json('/api/chart2')
    assert info.value.status == 500
    assert info.value.message == 'Internal Server Error: relation does not exist'


def test_error_status_with_non_json_body():
    client, _ = make_client(lambda path, params: FakeResponse(502, text='Bad Gateway', json_error=True))
    with pytest.raises(ServerError) as info:
        client.get_json('/api/chart2')
    assert info.value.status == 502
    assert info.value.message == 'Bad Gateway'


def test_invalid_json_on_success_is_a_server_error():
    client, _ = make_client(lambda path, params: FakeResponse(200, json_error=True))
    with pytest.raises(ServerError):
        client.get_json('/api/years')


def test_get_all_data_sends_paging_as_strings():
    client, session = make_client(lambda path, params: FakeResponse(200, {}))
    client.get_all_data(page=2, page_size=50)
    assert session.calls == [('/api/alldata', {'page': '2', 'pageSize': '50'})]
