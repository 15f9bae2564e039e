import pytest
from fastapi.testclient import TestClient

from mangopay_connect.dependencies import get_connection
from mangopay_connect.main import app
from mangopay_connect.settings import get_settings


@pytest.fixture
def client(connection):
    app.dependency_overrides[get_connection] = lambda: connection
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestUsersApi:

    def test_create_person(self, client, fake_mangopay):
        fake_mangopay.add("POST", "/users/natural", {"Id": "u1", "PersonType": "NATURAL"})

        resp = client.post("/users/persons", json={
            "email": "jane@example.com", "first_name": "Jane", "last_name": "Doe",
            "birthday": 631152000, "nationality": "FR", "country_of_residence": "FR",
        })

        assert resp.status_code == 200
        assert resp.json() == {"id": "u1"}

    def test_missing_attributes_is_bad_request(self, client, fake_mangopay):
        resp = client.post("/users/persons", json={"email": "jane@example.com"})

        assert resp.status_code == 400
        assert "required attributes" in resp.json()["detail"]
        assert fake_mangopay.requests == []

    def test_update_unknown_company_is_not_found(self, client):
        resp = client.put("/users/companies/missing", json={"name": "Acme"})
        assert resp.status_code == 404

    def test_list_users_pagination(self, client, fake_mangopay):
        fake_mangopay.add("GET", "/users", [{"Id": "u1", "PersonType": "NATURAL"}],
                          headers={"X-Number-Of-Pages": "5", "X-Number-Of-Items": "5"})

        resp = client.get("/users", params={"page": 3, "per_page": 1})

        assert resp.json()["current_page"] == 3
        assert resp.json()["total_pages"] == 5
        assert fake_mangopay.requests[-1].url.params["page"] == "3"


class TestWalletsApi:

    def test_get_missing_wallet(self, client):
        assert client.get("/wallets/missing").status_code == 404

    def test_transaction_type_filter(self, client, fake_mangopay):
        fake_mangopay.add("GET", "/wallets/w1/transactions", [])

        resp = client.get("/wallets/w1/transactions", params={"type": "PAYOUT"})

        assert resp.status_code == 200
        assert fake_mangopay.requests[-1].url.params["Type"] == "PAYOUT"

    def test_transfer(self, client, fake_mangopay, funds, fees):
        fake_mangopay.add("POST", "/transfers", {"Id": "tr1", "Status": "SUCCEEDED"})

        resp = client.post("/transfers", json={
            "author_id": "u1", "from_wallet_id": "w1", "to_wallet_id": "w2", "funds": funds, "fees": fees,
        })

        assert resp.json() == {"succeeded": True}

    def test_transfer_with_non_numeric_amount_is_bad_request(self, client, fake_mangopay, fees):
        resp = client.post("/transfers", json={
            "author_id": "u1", "from_wallet_id": "w1", "to_wallet_id": "w2",
            "funds": {"amount": "ten", "currency": "EUR"}, "fees": fees,
        })

        assert resp.status_code == 400
        assert resp.json() == {"detail": "funds amount must be an integer number of minor units."}
        assert fake_mangopay.requests == []

    def test_vendor_error_is_bad_gateway(self, client, fake_mangopay):
        fake_mangopay.add("POST", "/wallets", {"Message": "Invalid currency", "errors": {"Currency": "bad"}},
                          status_code=400)

        resp = client.post("/wallets", json={"owners": ["u1"], "currency": "XXX", "description": "Main"})

        assert resp.status_code == 502
        assert resp.json() == {"detail": "Invalid currency", "mangopay_status": 400, "errors": {"Currency": "bad"}}


class TestPaymentsApi:

    def test_payin_methods(self, client):
        resp = client.get("/payins/methods", params=[("currency", "EUR"), ("currency", "GBP")])

        assert resp.status_code == 200
        assert "maestro" in resp.json()["EUR"]
        assert "maestro" not in resp.json()["GBP"]

    def test_payin_with_unknown_method(self, client, funds, fees):
        resp = client.post("/payins", json={
            "method": "bitcoin", "author_id": "u1", "wallet_id": "w1", "funds": funds, "fees": fees,
            "return_url": "https://r", "culture": "EN",
        })
        assert resp.status_code == 400

    def test_create_bank_account(self, client, fake_mangopay):
        fake_mangopay.add("POST", "/users/u1/bankaccounts/gb", {"Id": "b1", "Type": "GB"})

        resp = client.post("/users/u1/bank-accounts", json={
            "type": "GB", "owner_name": "Jane Doe", "owner_address": "1 Main St",
            "account_number": "63956474", "sort_code": "200000",
        })

        assert resp.json() == {"id": "b1", "type": "GB"}

    def test_payout(self, client, fake_mangopay, funds, fees):
        fake_mangopay.add("POST", "/payouts/bankwire", {"Id": "po1", "DebitedWalletId": "w1"})

        resp = client.post("/payouts", json={
            "user_id": "u1", "wallet_id": "w1", "bank_account_id": "b1", "funds": funds, "fees": fees,
        })

        assert resp.json() == {"id": "po1", "wallet_id": "w1"}


def test_startup_prepares_token_store(monkeypatch, tmp_path):
    token_db = tmp_path / "store" / "tokens.sqlite3"
    monkeypatch.setenv("MANGOPAY_CLIENT_ID", "client")
    monkeypatch.setenv("MANGOPAY_PASSWORD", "secret")
    monkeypatch.setenv("TOKEN_DB_FILE", str(token_db))
    get_settings.cache_clear()
    try:
        with TestClient(app) as c:
            assert c.get("/health").status_code == 200
        assert token_db.exists()
    finally:
        get_settings.cache_clear()
