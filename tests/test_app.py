"""
Salary Service Tests - API Tests.

Tests for the HTTP endpoints, CORS handling and error responses.
"""

from fastapi.testclient import TestClient

from salary_service.app import create_app
from salary_service.store import RecordStore


def test_data_on_empty_store(client: TestClient) -> None:
    """GET /data on a fresh store returns empty collections."""
    response = client.get("/data")

    assert response.status_code == 200
    assert response.json() == {"names": [], "entries": []}


def test_startup_loads_data_file(test_settings, store, write_rows) -> None:
    """The lifespan hook loads well-formed rows and skips malformed ones."""
    write_rows("Alice,50000.00 NOK,2023", "Bob,notanumber,2024")

    with TestClient(create_app(test_settings, store)) as client:
        response = client.get("/data")

    assert response.json() == {
        "names": ["Alice"],
        "entries": [{"name": "Alice", "salary": 50000.0, "year": 2023}],
    }


def test_post_entry(client: TestClient, data_file) -> None:
    """POST /entries persists a row and returns all entries."""
    response = client.post("/entries", json={"name": "Carol", "salary": 60000, "year": 2024})

    assert response.status_code == 200
    assert response.json() == [{"name": "Carol", "salary": 60000.0, "year": 2024}]
    assert client.get("/data").json()["names"] == ["Carol"]
    assert data_file.read_text(encoding="utf-8").splitlines() == ["Carol,60000.00 NOK,2024"]


def test_post_entry_coerces_numeric_strings(client: TestClient) -> None:
    response = client.post("/entries", json={"name": "Dan", "salary": "1500.5", "year": "2022"})

    assert response.status_code == 200
    assert response.json() == [{"name": "Dan", "salary": 1500.5, "year": 2022}]


def test_post_name_is_idempotent(client: TestClient) -> None:
    """Registering the same name twice keeps a single occurrence."""
    client.post("/names", json={"name": "Alice"})
    response = client.post("/names", json={"name": "Alice"})

    assert response.status_code == 200
    assert response.json() == ["Alice"]


def test_registered_names_are_independent_of_entries(client: TestClient, data_file) -> None:
    client.post("/names", json={"name": "Zoe"})
    client.post("/entries", json={"name": "Carol", "salary": 1, "year": 2024})

    data = client.get("/data").json()
    assert data["names"] == ["Zoe", "Carol"]
    assert [entry["name"] for entry in data["entries"]] == ["Carol"]
    assert "Zoe" not in data_file.read_text(encoding="utf-8")


def test_invalid_json_is_bad_request(client: TestClient) -> None:
    response = client.post(
        "/entries",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text


def test_wrong_type_is_bad_request(client: TestClient) -> None:
    response = client.post("/entries", json={"name": "Eve", "salary": "lots", "year": 2024})

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert "body.salary" in response.text
    assert client.get("/data").json()["entries"] == []


def test_unencodable_name_is_bad_request(client: TestClient, data_file) -> None:
    """A lone surrogate in a name is rejected before anything is written."""
    response = client.post(
        "/entries",
        content='{"name": "\\ud800", "salary": 1, "year": 2024}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert "body.name" in response.text
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert not data_file.exists()
    assert client.get("/data").json()["entries"] == []


def test_unencodable_registered_name_is_bad_request(client: TestClient) -> None:
    response = client.post(
        "/names",
        content='{"name": "\\udfff"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert client.get("/data").json()["names"] == []


def test_missing_name_is_bad_request(client: TestClient) -> None:
    response = client.post("/names", json={})

    assert response.status_code == 400
    assert "body.name" in response.text


def test_persistence_failure_is_server_error(test_settings, tmp_path) -> None:
    """A backing path that cannot be appended to yields 500 and no state change."""
    directory = tmp_path / "dir-not-file"
    directory.mkdir()
    store = RecordStore(directory)

    with TestClient(create_app(test_settings, store)) as client:
        response = client.post("/entries", json={"name": "Carol", "salary": 1, "year": 2024})
        data = client.get("/data").json()

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert "Is a directory" in response.text
    assert data == {"names": [], "entries": []}


def test_cors_headers_on_every_response(client: TestClient) -> None:
    for response in (
        client.get("/data"),
        client.post("/names", json={"name": "Alice"}),
        client.post("/entries", json={"name": "Alice"}),
    ):
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"
        assert response.headers["Access-Control-Allow-Headers"] == "Content-Type"


def test_preflight_returns_empty_success(client: TestClient) -> None:
    response = client.options(
        "/entries",
        headers={
            "Origin": "http://localhost:4200",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_bare_options_returns_empty_success(client: TestClient) -> None:
    response = client.options("/data")

    assert response.status_code == 200
    assert response.content == b""


def test_entries_survive_restart(test_settings, data_file) -> None:
    """Entries written by one app instance are loaded by the next."""
    with TestClient(create_app(test_settings, RecordStore(data_file))) as client:
        client.post("/entries", json={"name": "Carol", "salary": 60000, "year": 2024})
        client.post("/entries", json={"name": "Alice", "salary": 50000.75, "year": 2023})

    with TestClient(create_app(test_settings, RecordStore(data_file))) as client:
        data = client.get("/data").json()

    assert data == {
        "names": ["Carol", "Alice"],
        "entries": [
            {"name": "Carol", "salary": 60000.0, "year": 2024},
            {"name": "Alice", "salary": 50000.75, "year": 2023},
        ],
    }


def test_health_check(client: TestClient) -> None:
    client.post("/names", json={"name": "Alice"})

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "salary-service"
    assert data["names"] == 1
    assert data["entries"] == 0


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/data", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_metrics_endpoint(client: TestClient) -> None:
    client.post("/entries", json={"name": "Carol", "salary": 1, "year": 2024})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "salary_store_operations_total" in response.text
    assert "salary_http_requests_total" in response.text
