import base64
import json
from datetime import datetime, timezone

import pytest
import requests

from app.domain.errors import LoadError, PersistenceError
from app.domain.models.invoice import InvoiceStatus
from app.domain.models.transaction import Transaction
from app.domain.services.invoice_factory import parse_invoice_input
from app.infrastructure.persistence.database import create_session_factory
from app.infrastructure.persistence.models import EstadoAplicacion
from app.infrastructure.persistence.sql_state_adapter import SQLStateStorage
from app.infrastructure.storage.github_contents_adapter import GitHubContentsStorage
from app.infrastructure.storage.local_file_adapter import LocalFileStorage
from app.infrastructure.storage.rest_api_adapter import RestApiStorage


@pytest.fixture
def snapshot(store, invoice_form):
    store.create_invoice(parse_invoice_input(invoice_form))
    paid = store.create_invoice(parse_invoice_input(dict(invoice_form, amount="250.75", igv_rate="10")))
    store.set_status(paid.id, InvoiceStatus.PAGADA)
    state = store.snapshot()
    state.transactions.append(Transaction(type="Egreso", amount="80.10", date="2026-10-02", description="Útiles"))
    return state


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("sin cuerpo JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code}", response=self)


class FakeSession:
    """Responde con lo que el test encole por método y guarda cada llamada."""

    def __init__(self, **responses):
        self.responses = {method: list(items) for method, items in responses.items()}
        self.calls = []

    def _respond(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses[method].pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._respond("get", url, **kwargs)

    def post(self, url, **kwargs):
        return self._respond("post", url, **kwargs)

    def put(self, url, **kwargs):
        return self._respond("put", url, **kwargs)


# --- Archivo local ---

def test_local_round_trip_is_lossless(tmp_path, snapshot):
    storage = LocalFileStorage(str(tmp_path / "data" / "database.json"))
    storage.save(snapshot)

    loaded = storage.load()

    assert loaded.model_dump() == snapshot.model_dump()
    assert loaded.invoices[1].status == InvoiceStatus.PAGADA


def test_local_missing_file_starts_empty(tmp_path):
    state = LocalFileStorage(str(tmp_path / "nuevo.json")).load()
    assert state.invoices == []
    assert state.invoice_counter == 1
    assert state.user.username == "Usuario"


def test_local_corrupt_file_is_a_load_error(tmp_path):
    path = tmp_path / "database.json"
    path.write_text("{no es json", encoding="utf-8")
    with pytest.raises(LoadError):
        LocalFileStorage(str(path)).load()


def test_local_reads_documents_written_by_the_web_panel(tmp_path):
    path = tmp_path / "database.json"
    path.write_text(json.dumps({
        "invoices": [{
            "id": 1760800000000,
            "invoice_number": "F001-00000007",
            "client_ruc": "20100055237",
            "client_name": "Cliente",
            "description": "Servicio",
            "amount": 100,
            "igv_rate": 18,
            "igv_amount": 18,
            "total": 118,
            "issue_date": "2026-10-01",
            "due_date": "2026-10-31",
            "status": "Pendiente",
            "created_at": "2026-10-01T12:00:00.000Z",
        }],
        "transactions": None,
        "invoiceCounter": 8,
    }), encoding="utf-8")

    state = LocalFileStorage(str(path)).load()

    assert state.invoices[0].id == 1760800000000
    assert state.invoices[0].created_at == datetime(2026, 10, 1, 12, tzinfo=timezone.utc)
    assert state.transactions == []
    assert state.invoice_counter == 8


def test_local_tolerates_blank_dates_from_the_web_panel(tmp_path):
    path = tmp_path / "database.json"
    path.write_text(json.dumps({
        "invoices": [{
            "id": 1760800000001,
            "invoice_number": "F001-00000001",
            "client_ruc": "20100055237",
            "client_name": "Cliente",
            "description": "Servicio",
            "amount": 100,
            "igv_rate": 18,
            "igv_amount": 18,
            "total": 118,
            "issue_date": "2026-10-01",
            "due_date": "",
            "status": "Pagada",
            "created_at": "ayer",
        }],
        "invoiceCounter": 2,
    }), encoding="utf-8")

    state = LocalFileStorage(str(path)).load()

    invoice = state.invoices[0]
    assert invoice.due_date is None
    assert invoice.created_at is None
    assert invoice.issue_date.isoformat() == "2026-10-01"
    assert invoice.total == 118


def test_local_writes_amounts_as_json_numbers(tmp_path, snapshot):
    path = tmp_path / "database.json"
    LocalFileStorage(str(path)).save(snapshot)

    document = json.loads(path.read_text(encoding="utf-8"))

    invoice = document["invoices"][0]
    assert invoice["total"] == 1180
    assert invoice["igv_amount"] == 180
    assert isinstance(invoice["amount"], float)
    assert document["transactions"][0]["amount"] == 80.1
    assert document["invoiceCounter"] == 3


# --- SQL ---

def test_sql_round_trip_and_counter_column(tmp_path, snapshot):
    session_factory = create_session_factory(f"sqlite:///{tmp_path / 'tecsitel.db'}")
    storage = SQLStateStorage(session_factory)

    assert storage.load().invoices == []
    storage.save(snapshot)
    storage.save(snapshot)

    assert storage.load().model_dump() == snapshot.model_dump()
    db = session_factory()
    try:
        rows = db.query(EstadoAplicacion).all()
        assert len(rows) == 1
        assert rows[0].correlativo_facturas == 3
        assert rows[0].total_facturas == 2
    finally:
        db.close()


# --- API REST ---

def test_rest_save_writes_cache_then_posts(tmp_path, snapshot):
    session = FakeSession(post=[FakeResponse(200, {"success": True})])
    storage = RestApiStorage("https://panel.example/api/database", str(tmp_path / "cache.json"), session=session, timeout=3)

    storage.save(snapshot)

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("post", "https://panel.example/api/database")
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 3
    assert json.loads(kwargs["data"].decode("utf-8")) == snapshot.to_document()
    assert LocalFileStorage(str(tmp_path / "cache.json")).load().model_dump() == snapshot.model_dump()


def test_rest_failed_post_raises_but_keeps_cache(tmp_path, snapshot):
    session = FakeSession(post=[FakeResponse(500, {"error": "Failed to update data."})])
    storage = RestApiStorage("https://panel.example/api/database", str(tmp_path / "cache.json"), session=session)

    with pytest.raises(PersistenceError):
        storage.save(snapshot)
    assert storage.cache.exists()


def test_rest_load_refreshes_cache(tmp_path, snapshot):
    session = FakeSession(get=[FakeResponse(200, snapshot.to_document())])
    storage = RestApiStorage("https://panel.example/api/database", str(tmp_path / "cache.json"), session=session)

    assert storage.load().model_dump() == snapshot.model_dump()
    assert storage.cache.exists()


def test_rest_load_falls_back_to_cache(tmp_path, snapshot):
    LocalFileStorage(str(tmp_path / "cache.json")).save(snapshot)
    session = FakeSession(get=[requests.exceptions.ConnectionError("sin red")])
    storage = RestApiStorage("https://panel.example/api/database", str(tmp_path / "cache.json"), session=session)

    assert len(storage.load().invoices) == 2


def test_rest_load_without_cache_is_fatal(tmp_path):
    session = FakeSession(get=[requests.exceptions.Timeout("lento")])
    storage = RestApiStorage("https://panel.example/api/database", str(tmp_path / "cache.json"), session=session)

    with pytest.raises(LoadError):
        storage.load()


def test_rest_requires_url(monkeypatch):
    monkeypatch.setattr("config.REST_API_URL", "")
    with pytest.raises(ValueError):
        RestApiStorage()


# --- GitHub ---

def _github_storage(session):
    return GitHubContentsStorage(
        repo="tecsitel/tecsitel-database",
        token="ghp_test",
        committer_name="tecsitel-bot",
        committer_email="bot@tecsitel.pe",
        session=session,
        timeout=5,
    )


def _contents_payload(document, sha="abc123"):
    encoded = base64.encodebytes(json.dumps(document).encode("utf-8")).decode("ascii")
    return {"sha": sha, "content": encoded, "encoding": "base64"}


def test_github_load_decodes_contents(snapshot):
    session = FakeSession(get=[FakeResponse(200, _contents_payload(snapshot.to_document()))])

    loaded = _github_storage(session).load()

    assert loaded.model_dump() == snapshot.model_dump()
    method, url, kwargs = session.calls[0]
    assert url == "https://api.github.com/repos/tecsitel/tecsitel-database/contents/database.json"
    assert kwargs["headers"]["Authorization"] == "token ghp_test"


def test_github_load_missing_file_is_fatal():
    session = FakeSession(get=[FakeResponse(404, {"message": "Not Found"})])
    with pytest.raises(LoadError):
        _github_storage(session).load()


def test_github_save_sends_current_sha(snapshot):
    session = FakeSession(
        get=[FakeResponse(200, _contents_payload({}, sha="sha-vigente"))],
        put=[FakeResponse(200, {"content": {"sha": "sha-nuevo"}})],
    )

    _github_storage(session).save(snapshot)

    method, url, kwargs = session.calls[1]
    assert method == "put"
    body = kwargs["json"]
    assert body["sha"] == "sha-vigente"
    assert body["message"] == "chore: update database [skip ci]"
    assert body["committer"] == {"name": "tecsitel-bot", "email": "bot@tecsitel.pe"}
    assert json.loads(base64.b64decode(body["content"]).decode("utf-8")) == snapshot.to_document()


def test_github_save_creates_missing_file(snapshot):
    session = FakeSession(get=[FakeResponse(404, {"message": "Not Found"})], put=[FakeResponse(201, {})])

    _github_storage(session).save(snapshot)

    assert "sha" not in session.calls[1][2]["json"]


def test_github_conflict_is_a_persistence_error(snapshot):
    session = FakeSession(
        get=[FakeResponse(200, _contents_payload({}))],
        put=[FakeResponse(409, {"message": "sha mismatch"})],
    )
    with pytest.raises(PersistenceError, match="Conflicto"):
        _github_storage(session).save(snapshot)


def test_github_requires_credentials(monkeypatch):
    monkeypatch.delenv("GITHUB_REPO", raising=False)
    monkeypatch.delenv("GITHUB_PAT", raising=False)
    with pytest.raises(ValueError):
        GitHubContentsStorage(session=FakeSession())
