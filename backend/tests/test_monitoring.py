"""Tests for Prometheus request metrics"""
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from chirpy.middleware.monitoring import UNMATCHED_ENDPOINT


def sample(name: str, labels: dict) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_requests_labeled_by_route_template(client: TestClient):
    """Test that different chirp ids are counted under one endpoint label"""
    labels = {"method": "GET", "endpoint": "/api/chirps/{chirp_id}", "status": "404"}
    before = sample("chirpy_http_requests_total", labels)

    client.get("/api/chirps/101")
    client.get("/api/chirps/202")

    assert sample("chirpy_http_requests_total", labels) == before + 2
    assert REGISTRY.get_sample_value(
        "chirpy_http_requests_total",
        {"method": "GET", "endpoint": "/api/chirps/101", "status": "404"},
    ) is None


def test_unknown_paths_share_unmatched_label(client: TestClient):
    labels = {"method": "GET", "endpoint": UNMATCHED_ENDPOINT, "status": "404"}
    before = sample("chirpy_http_requests_total", labels)

    client.get("/api/no-such-thing")
    client.get("/also/missing")

    assert sample("chirpy_http_requests_total", labels) == before + 2


def test_auth_failures_labeled_by_route_template(client: TestClient):
    labels = {"endpoint": "/api/chirps/{chirp_id}"}
    before = sample("chirpy_authentication_failures_total", labels)

    response = client.delete("/api/chirps/7")

    assert response.status_code == 401
    assert sample("chirpy_authentication_failures_total", labels) == before + 1
