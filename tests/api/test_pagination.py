"""
Tests for page arithmetic and absolute page links.
"""

import pytest
from fastapi.testclient import TestClient

from api.pagination import PageLinkBuilder, has_next_page, has_previous_page, total_pages


@pytest.mark.parametrize(
    "total_count, page_size, expected",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (7, 2, 4)],
)
def test_total_pages(total_count, page_size, expected):
    assert total_pages(total_count, page_size) == expected


def test_has_next_page():
    assert has_next_page(1, 2, 7) is True
    assert has_next_page(4, 2, 7) is False
    assert has_next_page(1, 10, 0) is False


def test_has_previous_page():
    assert has_previous_page(1) is False
    assert has_previous_page(2) is True


@pytest.mark.parametrize(
    "host, scheme",
    [("localhost", "http"), ("127.0.0.1", "http"), ("api.example.com", "https"), (None, "https")],
)
def test_scheme_policy(host, scheme):
    assert PageLinkBuilder(None, "list_books").scheme_for(host) == scheme


def test_public_host_links_use_https(app):
    with TestClient(app, base_url="http://bookstore.example.com") as client:
        response = client.get("/api/v1/Books", params={"PageNumber": 2, "PageSize": 3})

    data = response.json()
    assert data["nextPage"] == "https://bookstore.example.com/api/v1/Books?PageNumber=3&PageSize=3"
    assert data["previousPage"] == "https://bookstore.example.com/api/v1/Books?PageNumber=1&PageSize=3"


def test_loopback_address_links_use_http(app):
    with TestClient(app, base_url="https://127.0.0.1") as client:
        response = client.get("/api/v1/Books", params={"PageSize": 5})

    assert response.json()["nextPage"] == "http://127.0.0.1/api/v1/Books?PageNumber=2&PageSize=5"
