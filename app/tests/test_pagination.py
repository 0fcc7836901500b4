import pytest

from app.utils.pagination import build_page, has_more, page_offset, parse_page_params, total_pages


@pytest.mark.parametrize('page, size, expected', [
    (None, None, (0, 20)),
    ('2', '50', (2, 50)),
    (3, 10, (3, 10)),
    ('abc', 'xyz', (0, 20)),
    ('', '', (0, 20)),
    ('-1', '10', (0, 10)),
    ('1', '0', (1, 20)),
    ('1', '-5', (1, 20)),
    (' 4 ', ' 25 ', (4, 25)),
])
def test_parse_page_params(page, size, expected):
    assert parse_page_params(page, size, default_page_size=20, max_page_size=1000) == expected


def test_parse_page_params_caps_page_size():
    assert parse_page_params('0', '5000', default_page_size=20, max_page_size=1000) == (0, 1000)


def test_page_offset():
    assert page_offset(0, 20) == 0
    assert page_offset(3, 25) == 75


@pytest.mark.parametrize('total, size, pages', [(0, 20, 0), (1, 20, 1), (20, 20, 1), (21, 20, 2), (1000, 3, 334)])
def test_total_pages_rounds_up(total, size, pages):
    assert total_pages(total, size) == pages


def test_has_more_on_exact_multiple():
    # 40 rows in pages of 20: page 1 is the last one
    assert has_more(0, 20, 40) is True
    assert has_more(1, 20, 40) is False


def test_has_more_with_partial_last_page():
    assert has_more(1, 20, 41) is True
    assert has_more(2, 20, 41) is False


def test_has_more_beyond_last_page():
    assert has_more(10, 20, 41) is False


def test_build_page_metadata():
    page = build_page(['a', 'b'], total=12, page=1, page_size=5)
    assert page == {
        'data': ['a', 'b'],
        'total': 12,
        'page': 1,
        'pageSize': 5,
        'hasMore': True,
        'totalPages': 3,
        'currentPageRecords': 2,
    }


def test_build_page_on_empty_table():
    page = build_page([], total=0, page=0, page_size=20)
    assert page['hasMore'] is False
    assert page['totalPages'] == 0
    assert page['currentPageRecords'] == 0
