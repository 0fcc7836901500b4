import threading

import pytest
import requests

from app.client.api_client import ConnectivityFailure, MeterApiClient
from app.client.reference_cache import ReferenceDataCache
from app.tests.fakes import FakeClock, FakeResponse, FakeSession

YEARS = [{'id': '2023-24', 'name': '2023-24'}, {'id': '2022-23', 'name': '2022-23'}]


def make_cache(handler, **kwargs):
    session = FakeSession(handler)
    client = MeterApiClient(base_url='http://meters.test', session=session)
    clock = FakeClock()
    sleeps = []
    cache = ReferenceDataCache(
        client,
        ttl=300,
        retry_count=2,
        retry_delay=2,
        clock=clock,
        sleep=sleeps.append,
        **kwargs
    )
    return cache, session, clock, sleeps


def test_second_lookup_within_window_is_served_from_cache():
    cache, session, clock, _ = make_cache(lambda path, params: FakeResponse(200, YEARS))

    first = cache.get_years()
    clock.advance(299)
    second = cache.get_years()

    assert first.ok and second.ok
    assert [item.id for item in second.items] == ['2023-24', '2022-23']
    assert session.count('/api/years') == 1


def test_entry_expires_after_window_even_if_read():
    cache, session, clock, _ = make_cache(lambda path, params: FakeResponse(200, YEARS))

    cache.get_years()
    clock.advance(200)
    cache.get_years()
    clock.advance(101)
    cache.get_years()

    assert session.count('/api/years') == 2


def test_keys_are_cached_independently():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(200, []))

    cache.get_years()
    cache.get_divisions()
    cache.get_industries()
    cache.get_divisions()

    assert session.count('/api/years') == 1
    assert session.count('/api/divisions') == 1
    assert session.count('/api/industries') == 1


def test_failure_retries_twice_then_reports_error():
    cache, session, _, sleeps = make_cache(
        lambda path, params: requests.ConnectionError('refused')
    )

    result = cache.get_divisions()

    assert result.ok is False
    assert result.items == []
    assert result.error == 'Cannot connect to server at http://meters.test'
    assert session.count('/api/divisions') == 3
    assert sleeps == [2, 2]


def test_failure_is_not_cached():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(500, {'error': 'down'}))

    cache.get_years()
    cache.get_years()

    assert session.count('/api/years') == 6


def test_recovers_when_a_retry_succeeds():
    responses = iter([requests.Timeout('slow'), FakeResponse(200, YEARS)])
    cache, session, _, sleeps = make_cache(lambda path, params: next(responses))

    result = cache.get_years()

    assert result.ok
    assert len(result.items) == 2
    assert sleeps == [2]
    cache.get_years()
    assert session.count('/api/years') == 2


def test_empty_list_is_ok_and_cached():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(200, []))

    result = cache.get_industries()
    cache.get_industries()

    assert result.ok is True
    assert result.items == []
    assert session.count('/api/industries') == 1


@pytest.mark.parametrize('payload', [{'years': YEARS}, [{'name': 'missing id'}]])
def test_invalid_format_is_reported(payload):
    cache, session, _, sleeps = make_cache(lambda path, params: FakeResponse(200, payload))

    result = cache.get_years()

    assert result.ok is False
    assert result.error == 'Invalid response format'
    assert sleeps == []
    assert session.count('/api/years') == 1


def test_concurrent_lookups_share_one_request():
    release = threading.Event()
    started = threading.Event()

    def handler(path, params):
        started.set()
        release.wait(5)
        return FakeResponse(200, YEARS)

    cache, session, _, _ = make_cache(handler)
    results = []

    def lookup():
        results.append(cache.get_years())

    threads = [threading.Thread(target=lookup) for _ in range(5)]
    threads[0].start()
    assert started.wait(5)
    assert cache.loading is True
    for t in threads[1:]:
        t.start()
    release.set()
    for t in threads:
        t.join(5)

    assert len(results) == 5
    assert all(r.ok and len(r.items) == 2 for r in results)
    assert session.count('/api/years') == 1
    assert cache.loading is False


def test_clear_cache_forces_refetch():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(200, YEARS))

    cache.get_years()
    cache.clear_cache()
    cache.get_years()

    assert session.count('/api/years') == 2


def test_unknown_key_is_rejected():
    cache, _, _, _ = make_cache(lambda path, params: FakeResponse(200, []))
    with pytest.raises(KeyError):
        cache.get('months')


def test_connection_check_uses_health_endpoint():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(200, {'status': 'OK'}))
    assert cache.test_connection() == {'status': 'OK'}
    assert session.count('/api/health') == 1


def test_connection_check_raises_when_unreachable():
    cache, _, _, _ = make_cache(lambda path, params: requests.ConnectionError('refused'))
    with pytest.raises(ConnectivityFailure):
        cache.test_connection()


def test_callers_cannot_empty_the_cached_list():
    cache, session, _, _ = make_cache(lambda path, params: FakeResponse(200, YEARS))

    first = cache.get_years()
    first.items.clear()
    second = cache.get_years()
    second.items.append('junk')

    assert [item.id for item in cache.get_years().items] == ['2023-24', '2022-23']
    assert session.count('/api/years') == 1


def test_retry_waits_use_configured_delay():
    session = FakeSession(lambda path, params: requests.ConnectionError('refused'))
    client = MeterApiClient(base_url='http://meters.test', session=session)
    sleeps = []
    cache = ReferenceDataCache(client, ttl=300, retry_count=3, retry_delay=0.5, sleep=sleeps.append)

    result = cache.get_industries()

    assert result.ok is False
    assert session.count('/api/industries') == 4
    assert sleeps == [0.5, 0.5, 0.5]


def test_unexpected_errors_are_not_retried():
    cache, session, _, sleeps = make_cache(lambda path, params: RuntimeError('bug'))

    with pytest.raises(RuntimeError):
        cache.get_years()

    assert session.count('/api/years') == 1
    assert sleeps == []
    assert cache.loading is False
