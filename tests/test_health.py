import pytest

from pitch2angels.client import ApplicationClient, ApplicationClientError
from pitch2angels.config import Settings


def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "pitch2angels-api"
    assert body["database"] == {"status": "connected"}
    assert body["storage"] == "local"
    assert body["process"]["memory_mb"] > 0
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"


def test_ping(client):
    assert client.get("/api/health/ping").json()["status"] == "pong"


def test_root(client):
    body = client.get("/").json()

    assert body["status"] == "ok"
    assert body["docs"] == "/docs"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found", "success": False}


def test_client_raises_with_server_message(client):
    api = ApplicationClient(http=client)

    with pytest.raises(ApplicationClientError) as exc_info:
        api.get_application(31337)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Application not found"
    assert exc_info.value.payload["success"] is False


def test_client_admin_calls(client, make_application):
    application = make_application(region="Ashanti")
    api = ApplicationClient(http=client)

    listing = api.list_applications(region="Ashanti", search=None)
    assert listing["pagination"]["total"] == 1

    updated = api.update_review(application.id, reviewed=True, review_status="shortlisted")
    assert updated["review_status"] == "shortlisted"

    assert api.statistics()["byStatus"]["shortlisted"] == 1
    assert api.export_csv().startswith("ID,")
    assert api.delete_application(application.id)["success"] is True
    assert api.health()["status"] == "healthy"


@pytest.mark.parametrize("env, expected", [
    ({"DATABASE_URL": "postgres://u:p@db:5432/app"}, "postgresql://u:p@db:5432/app"),
    (
        {"DATABASE_URL": "", "PGUSER": "app", "PGPASSWORD": "p@ss", "PGHOST": "db", "PGDATABASE": "pitch"},
        "postgresql://app:p%40ss@db:5432/pitch",
    ),
    ({"DATABASE_URL": "", "PGHOST": None}, "sqlite:///./pitch2angels.db"),
])
def test_database_url(env, expected):
    settings = Settings(_env_file=None, **env)

    assert settings.database_url == expected


def test_cors_origins_are_split():
    settings = Settings(_env_file=None, CORS_ORIGIN="https://a.example.com, https://b.example.com,")

    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]


def test_cors_echoes_allowed_origin(client):
    response = client.get("/api/health/ping", headers={"Origin": "https://pitch2angels.com"})

    assert response.headers["access-control-allow-origin"] == "https://pitch2angels.com"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_preflight_allows_patch(client):
    response = client.options("/api/admin/applications/1", headers={
        "Origin": "https://www.pitch2angels.com",
        "Access-Control-Request-Method": "PATCH",
    })

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://www.pitch2angels.com"
    assert "PATCH" in response.headers["access-control-allow-methods"]


def test_cors_ignores_foreign_origin(client):
    response = client.get("/api/health/ping", headers={"Origin": "https://evil.example.com"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_requests_without_origin_pass(client):
    response = client.get("/api/health/ping")

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
