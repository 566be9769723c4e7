from datetime import date
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from checklist.api import deps
from checklist.config import settings
from checklist.data.local_repository import LocalProfileRepository, LocalVisitRepository
from checklist.errors import AuthenticationError
from checklist.main import create_app
from checklist.persistence.filesystem import FileStorage
from checklist.persistence.preferences import PreferenceStore
from checklist.services.auth import AuthSession
from checklist.services.geocoding import ReverseGeocoder
from checklist.services.profiles import ProfileService

SALESPERSON = {"X-User-Id": "1"}  # Ricardo Mendes
MANAGER = {"X-User-Id": "2"}  # Ana Silva
ADMIN = {"X-User-Id": "3"}  # João Silva


class StubAuth:
    def __init__(self) -> None:
        self.passwords: dict[str, str] = {}

    def sign_in(self, email: str, password: str) -> AuthSession:
        if password != "secret1":
            raise AuthenticationError("E-mail ou senha incorretos")
        return AuthSession(access_token="tok", refresh_token=None, expires_in=3600, user_id="1", email=email)

    def invite_user(self, name: str, email: str) -> str:
        return "99"

    def update_password(self, user_id: str, new_password: str) -> None:
        self.passwords[user_id] = new_password


def _nominatim(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"address": {"city": "Belo Horizonte", "state": "Minas Gerais"}})


@pytest.fixture
def stub_auth() -> StubAuth:
    return StubAuth()


@pytest.fixture
def api_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, stub_auth: StubAuth) -> TestClient:
    db_path = tmp_path / "visitlog.db"
    monkeypatch.setattr(settings, "storage_backend", "sqlite")
    monkeypatch.setattr(settings, "sqlite_path", db_path)

    visits = LocalVisitRepository(db_path)
    profiles = LocalProfileRepository(db_path)
    preferences = PreferenceStore(FileStorage(root=tmp_path))
    geocoder = ReverseGeocoder(base_url="https://geo.test", transport=httpx.MockTransport(_nominatim))

    app = create_app()
    app.dependency_overrides[deps.get_visit_repo] = lambda: visits
    app.dependency_overrides[deps.get_profile_repo] = lambda: profiles
    app.dependency_overrides[deps.get_preference_store] = lambda: preferences
    app.dependency_overrides[deps.get_geocoder] = lambda: geocoder
    app.dependency_overrides[deps.get_auth_service] = lambda: stub_auth
    app.dependency_overrides[deps.get_profile_service] = lambda: ProfileService(profiles, storage_client_factory=lambda: None)
    return TestClient(app)


def _log_visit(client: TestClient, headers: dict, client_name: str = "Supermercados Alvorada", **fields) -> dict:
    body = {"client_name": client_name, "client_type": "posto", "type": "prospeccao", "result": "parcial"}
    body.update(fields)
    response = client.post("/api/visits", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/api/health").json() == {"status": "ok"}

    payload = api_client.get("/api/health/database").json()
    assert payload["backend"] == "sqlite"
    assert payload["connected"] is True
    assert payload["visits_count"] == 0


def test_current_user_and_views(api_client: TestClient) -> None:
    anonymous = api_client.get("/api/me").json()
    assert anonymous["user"] is None
    assert anonymous["views"] == ["home", "bi", "visits", "users", "profile"]

    me = api_client.get("/api/me", headers=SALESPERSON).json()
    assert me["user"]["name"] == "Ricardo Mendes"
    assert me["user"]["role"] == "VENDEDOR"
    assert me["views"] == ["home", "visits", "profile"]

    assert api_client.get("/api/me", headers={"X-User-Id": "abc"}).status_code == 400
    assert api_client.get("/api/me", headers={"X-User-Id": "404"}).status_code == 401


def test_log_and_list_visits(api_client: TestClient) -> None:
    created = _log_visit(
        api_client,
        SALESPERSON,
        details={"opportunity": "sim", "vehicle_qty": 4},
        latitude=-19.92,
        longitude=-43.94,
    )

    visit = created["visit"]
    assert created["id"] == visit["id"]
    assert visit["user_name"] == "Ricardo Mendes"
    assert visit["client_type"] == "POSTO"
    assert visit["result"] == "PARCIAL"
    assert visit["date"] == date.today().isoformat()
    assert visit["details"] == {"opportunity": "sim"}

    listed = api_client.get("/api/visits", params={"search": "alvorada"}).json()
    assert [item["id"] for item in listed] == [visit["id"]]
    assert api_client.get(f"/api/visits/{visit['id']}", headers=MANAGER).json()["client_name"] == "Supermercados Alvorada"
    assert api_client.get("/api/visits/9999").status_code == 404


def test_salesperson_sees_only_own_visits(api_client: TestClient) -> None:
    own = _log_visit(api_client, SALESPERSON)["id"]
    other = _log_visit(api_client, ADMIN, client_name="Farmácia Vida Saudável")["id"]

    listed = api_client.get("/api/visits", headers=SALESPERSON).json()
    assert [item["id"] for item in listed] == [own]
    assert api_client.get(f"/api/visits/{other}", headers=SALESPERSON).status_code == 403

    options = api_client.get("/api/visits/options", headers=MANAGER).json()
    assert options["salespeople"][0] == "Todos"
    assert set(options["salespeople"][1:]) == {"Ricardo Mendes", "João Silva"}


def test_legacy_payload_is_accepted(api_client: TestClient) -> None:
    response = api_client.post(
        "/api/visits",
        json={
            "client_name": "Supermercados Alvorada",
            "user_id": 1,
            "date": "2025-03-10",
            "type": "RELACIONAMENTO",
            "result": "ALCANCADO",
            "volume": 1200,
            "competitor": "Ipiranga",
            "summary": "Visita de rotina",
        },
    )

    assert response.status_code == 201
    assert response.json()["visit"]["user_name"] == "Ricardo Mendes"


def test_invalid_visit_is_rejected(api_client: TestClient) -> None:
    assert api_client.post("/api/visits", json={"client_name": ""}).status_code == 422
    assert api_client.post("/api/visits", json={"client_name": "X", "latitude": 120}).status_code == 422


def test_dashboard_and_home(api_client: TestClient) -> None:
    _log_visit(api_client, SALESPERSON, details={"opportunity": "sim"}, region="Belo Horizonte-MG")
    _log_visit(api_client, SALESPERSON, client_name="Posto Estrela", region="Contagem-MG")
    _log_visit(api_client, MANAGER, client_name="Posto Estrela", region="Contagem-MG", result="alcancado")

    stats = api_client.get("/api/stats", headers=ADMIN).json()
    assert stats["totalVisits"] == 3
    assert stats["uniqueClients"] == 2
    assert stats["opportunities"] == 1
    assert stats["topAssessores"][0] == {"name": "Ricardo Mendes", "visits": 2, "percent": 100.0}
    assert stats["topRegions"][0]["name"] == "Contagem-MG"
    assert len(stats["visitsByPeriod"]) == 7
    assert stats["visitsByPeriod"][-1]["isToday"] is True
    assert stats["visitsByPeriod"][-1]["count"] == 3

    scoped = api_client.get("/api/stats", headers=SALESPERSON).json()
    assert scoped["totalVisits"] == 2

    home = api_client.get("/api/home", headers=SALESPERSON).json()
    assert home["today"] == 2
    assert home["pending"] == 2
    assert len(home["recent"]) == 2


def test_manager_notifications(api_client: TestClient) -> None:
    assert api_client.get("/api/notifications", headers=SALESPERSON).status_code == 403

    first = api_client.get("/api/notifications", headers=MANAGER).json()
    assert first == {"items": [], "unread": 0}

    _log_visit(api_client, SALESPERSON, client_name="Posto Estrela")
    inbox = api_client.get("/api/notifications", headers=MANAGER).json()
    assert inbox["unread"] == 1
    [item] = inbox["items"]
    assert item["message"] == "Nova visita: Ricardo Mendes em Posto Estrela"

    read = api_client.post(f"/api/notifications/{item['id']}/read", headers=MANAGER)
    assert read.json()["read"] is True
    assert api_client.get("/api/notifications", headers=MANAGER).json()["unread"] == 0

    assert api_client.delete(f"/api/notifications/{item['id']}", headers=MANAGER).status_code == 204
    assert api_client.delete(f"/api/notifications/{item['id']}", headers=MANAGER).status_code == 404

    _log_visit(api_client, SALESPERSON)
    assert api_client.delete("/api/notifications", headers=MANAGER).status_code == 204
    assert api_client.get("/api/notifications", headers=MANAGER).json()["items"] == []


def test_user_administration(api_client: TestClient) -> None:
    assert api_client.get("/api/users", headers=SALESPERSON).status_code == 403

    users = api_client.get("/api/users", headers=ADMIN).json()
    assert [user["name"] for user in users] == ["Ana Silva", "João Silva", "Ricardo Mendes"]
    assert [u["name"] for u in api_client.get("/api/users", params={"role": "Gestor"}, headers=ADMIN).json()] == ["Ana Silva"]

    updated = api_client.patch("/api/users/1", json={"role": "gestor"}, headers=ADMIN)
    assert updated.json()["role"] == "GESTOR"

    toggled = api_client.post("/api/users/1/toggle-active", headers=ADMIN)
    assert toggled.json()["active"] is False
    assert api_client.get("/api/me", headers=SALESPERSON).status_code == 403

    invited = api_client.post("/api/users", json={"name": "Bruna Costa", "email": "bruna@example.com"}, headers=ADMIN)
    assert invited.status_code == 201
    assert invited.json()["id"] == "99"

    assert api_client.delete("/api/users/1", headers=ADMIN).status_code == 204
    assert api_client.delete("/api/users/1", headers=ADMIN).status_code == 404


def test_profile_edits(api_client: TestClient) -> None:
    assert api_client.get("/api/profile").status_code == 401

    response = api_client.patch("/api/profile", json={"phone": "(31) 98765-4321"}, headers=SALESPERSON)
    assert response.status_code == 200
    assert response.json()["phone"] == "31987654321"
    assert response.json()["phone_display"] == "(31) 98765-4321"

    _log_visit(api_client, SALESPERSON)
    month = date.today().isoformat()[:7]
    interactions = api_client.get("/api/profile/interactions", params={"month": month}, headers=SALESPERSON).json()
    assert interactions == {"month": month, "count": 1}
    assert api_client.get("/api/profile/interactions", params={"month": "bad"}, headers=SALESPERSON).status_code == 400

    upload = api_client.post(
        "/api/profile/avatar",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=SALESPERSON,
    )
    assert upload.status_code == 503


def test_password_change(api_client: TestClient, stub_auth: StubAuth) -> None:
    response = api_client.post("/api/auth/password", json={"password": "novaSenha"}, headers=SALESPERSON)

    assert response.status_code == 200
    assert stub_auth.passwords == {"1": "novaSenha"}


def test_login_remembers_email_per_device(api_client: TestClient) -> None:
    device = {"X-Device-Id": "browser-1"}
    assert api_client.get("/api/preferences").status_code == 400

    login = api_client.post(
        "/api/auth/login",
        json={"email": "ricardo@visitlog.com", "password": "secret1", "remember_me": True, "device_id": "browser-1"},
    )
    assert login.status_code == 200
    assert login.json()["access_token"] == "tok"

    prefs = api_client.get("/api/preferences", headers=device).json()
    assert prefs["rememberMe"] is True
    assert prefs["rememberedEmail"] == "ricardo@visitlog.com"

    failed = api_client.post("/api/auth/login", json={"email": "ricardo@visitlog.com", "password": "nope"})
    assert failed.status_code == 401
    assert failed.json()["detail"] == "E-mail ou senha incorretos"

    updated = api_client.put("/api/preferences", json={"theme": "dark"}, headers=device).json()
    assert updated["theme"] == "dark"
    assert updated["rememberedEmail"] == "ricardo@visitlog.com"


def test_unsafe_device_ids_are_rejected(api_client: TestClient, tmp_path: Path) -> None:
    bad = {"X-Device-Id": "../../etc/passwd"}

    assert api_client.get("/api/preferences", headers=bad).status_code == 400
    assert api_client.put("/api/preferences", json={"theme": "dark"}, headers=bad).status_code == 400

    login = api_client.post(
        "/api/auth/login",
        json={"email": "ricardo@visitlog.com", "password": "secret1", "remember_me": True, "device_id": "a/b"},
    )
    assert login.status_code == 400
    assert not (tmp_path / "etc").exists()


def test_reverse_geocode(api_client: TestClient) -> None:
    response = api_client.get("/api/geocode/reverse", params={"lat": -19.92, "lon": -43.94})

    assert response.status_code == 200
    assert response.json()["region"] == "Belo Horizonte-MG"
    assert response.json()["resolved"] is True
    assert api_client.get("/api/geocode/reverse", params={"lat": 91, "lon": 0}).status_code == 422
