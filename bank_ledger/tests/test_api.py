from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from ..core.db import create_engine_for_url, get_session, set_engine
from ..core import db as db_module
from ..main import app

@pytest.fixture
def client(tmp_path) -> TestClient:
    test_db = tmp_path / "test.db"
    engine = create_engine_for_url(f"sqlite:///{test_db}")
    original_engine = db_module.engine
    set_engine(engine)
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)

    def _get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    set_engine(original_engine)


def _register(client: TestClient, username: str, password: str = "pw1", balance=0):
    return client.post(
        "/customers",
        json={"username": username, "password": password, "initial_balance": balance},
    )


def _login(client: TestClient, username: str, password: str = "pw1", caller: str | None = None):
    headers = {"X-Caller-Id": caller} if caller else {}
    return client.post(
        "/sessions", json={"username": username, "password": password}, headers=headers
    )


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_register_login_withdraw_walkthrough(client: TestClient) -> None:
    response = _register(client, "alice", balance=100)
    assert response.status_code == 201
    assert response.json()["username"] == "alice"
    customer_id = response.json()["id"]

    assert _login(client, "alice").status_code == 200

    withdraw = client.post("/transactions", json={"amount": 30, "operation": "withdraw"})
    assert withdraw.status_code == 201
    assert Decimal(withdraw.json()["balance"]) == Decimal("70")

    overdraw = client.post("/transactions", json={"amount": 1000, "operation": "withdraw"})
    assert overdraw.status_code == 409
    assert overdraw.json()["code"] == "InsufficientFunds"

    balance = client.get("/me/balance").json()
    assert Decimal(balance["balance"]) == Decimal("70")
    assert balance["message"].startswith("Your balance is: 70")

    transactions = client.get("/me/transactions").json()
    assert len(transactions) == 1
    assert Decimal(transactions[0]["amount"]) == Decimal("30")
    assert transactions[0]["operation"] == "withdraw"
    assert transactions[0]["customer_id"] == customer_id


def test_duplicate_username_rejected(client: TestClient) -> None:
    assert _register(client, "bob").status_code == 201
    response = _register(client, "bob", password="other")
    assert response.status_code == 409
    assert response.json()["code"] == "DuplicateUsername"
    assert _register(client, "Bob").status_code == 201


def test_negative_initial_balance_rejected(client: TestClient) -> None:
    response = _register(client, "carol", balance=-5)
    assert response.status_code == 400
    assert response.json()["code"] == "InvalidAmount"


def test_authenticate_failures(client: TestClient) -> None:
    _register(client, "dave", password="secret")

    missing = _login(client, "nobody")
    assert missing.status_code == 404
    assert missing.json()["code"] == "NotFound"

    wrong = _login(client, "dave", password="SECRET")
    assert wrong.status_code == 401
    assert wrong.json()["code"] == "InvalidCredentials"


def test_sign_out_clears_current_user(client: TestClient) -> None:
    _register(client, "erin", balance=5)
    _login(client, "erin")

    me = client.get("/me").json()
    assert me["username"] == "erin"
    assert "password" not in me
    assert "password_hash" not in me

    assert client.delete("/sessions").json() == {"message": "Logged out."}

    response = client.get("/me")
    assert response.status_code == 401
    assert response.json()["code"] == "NoActiveSession"
    assert client.delete("/sessions").json()["code"] == "NoActiveSession"


def test_operations_require_session(client: TestClient) -> None:
    for method, url in (
        ("get", "/me/balance"),
        ("get", "/me/transactions"),
        ("get", "/me"),
    ):
        response = getattr(client, method)(url)
        assert response.status_code == 401

    response = client.post("/transactions", json={"amount": 1, "operation": "deposit"})
    assert response.json()["code"] == "NoActiveSession"


def test_non_positive_amount_rejected(client: TestClient) -> None:
    _register(client, "frank", balance=10)
    _login(client, "frank")

    for amount in (0, -3):
        response = client.post("/transactions", json={"amount": amount, "operation": "deposit"})
        assert response.status_code == 400
        assert response.json()["code"] == "InvalidAmount"

    assert Decimal(client.get("/me/balance").json()["balance"]) == Decimal("10")


def test_unknown_operation_is_a_validation_error(client: TestClient) -> None:
    _register(client, "gina")
    _login(client, "gina")
    response = client.post("/transactions", json={"amount": 1, "operation": "transfer"})
    assert response.status_code == 422


def test_callers_keep_separate_sessions(client: TestClient) -> None:
    _register(client, "hank", balance=1)
    _register(client, "iris", balance=2)
    _login(client, "hank", caller="caller-a")
    _login(client, "iris", caller="caller-b")

    assert client.get("/me", headers={"X-Caller-Id": "caller-a"}).json()["username"] == "hank"
    assert client.get("/me", headers={"X-Caller-Id": "caller-b"}).json()["username"] == "iris"
    assert client.get("/me").status_code == 401


def test_anonymous_callers_share_one_slot(client: TestClient) -> None:
    _register(client, "jack")
    _register(client, "kate")
    _login(client, "jack")
    _login(client, "kate")
    assert client.get("/me").json()["username"] == "kate"


def test_balance_survives_sign_out(client: TestClient) -> None:
    _register(client, "liam", balance=20)
    _login(client, "liam")
    client.post("/transactions", json={"amount": "5.25", "operation": "deposit"})
    client.delete("/sessions")

    _login(client, "liam")
    assert Decimal(client.get("/me/balance").json()["balance"]) == Decimal("25.25")


def test_bank_summary_reconciles(client: TestClient) -> None:
    summary = client.get("/bank").json()
    assert Decimal(summary["total_deposit"]) == 0
    assert summary["customer_count"] == 0

    _register(client, "mona", balance=100)
    _register(client, "nick", balance=50)
    _login(client, "mona")
    client.post("/transactions", json={"amount": 40, "operation": "withdraw"})
    client.post("/transactions", json={"amount": 15, "operation": "deposit"})
    client.post("/transactions", json={"amount": 500, "operation": "withdraw"})

    summary = client.get("/bank").json()
    assert Decimal(summary["total_deposit"]) == Decimal("125")
    assert Decimal(summary["customer_balance_total"]) == Decimal("125")
    assert summary["reconciled"] is True
    assert summary["customer_count"] == 2
    assert summary["transaction_count"] == 2
    assert [c["username"] for c in summary["customers"]] == ["mona", "nick"]


def test_amounts_beyond_supported_precision_rejected(client: TestClient) -> None:
    too_long = _register(client, "olga", balance="1234567890123456.78")
    assert too_long.status_code == 422

    assert _register(client, "olga", balance="9999999999999.99").status_code == 201
    _login(client, "olga")
    response = client.post("/transactions", json={"amount": "0.01", "operation": "deposit"})
    assert response.status_code == 400
    assert response.json()["code"] == "InvalidAmount"
    assert Decimal(client.get("/me/balance").json()["balance"]) == Decimal("9999999999999.99")
