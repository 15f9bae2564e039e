import pytest

from mangopay_connect.exceptions import InvalidArgumentError, NotFoundError
from mangopay_connect.services.wallets import WalletService

WALLET = {
    "Id": "w1",
    "Owners": ["u1"],
    "Description": "Main",
    "Currency": "EUR",
    "Balance": {"Currency": "EUR", "Amount": 2500},
    "FundsType": "DEFAULT",
}


@pytest.fixture
def service(connection):
    return WalletService(connection)


class TestCreateWallet:

    @pytest.mark.asyncio
    async def test_creates_wallet(self, service, fake_mangopay):
        fake_mangopay.add("POST", "/wallets", {**WALLET, "Balance": {"Currency": "EUR", "Amount": 0}})

        result = await service.create_wallet(["u1"], "EUR", "Main", tag="shop")

        assert result == {"id": "w1", "currency": "EUR", "balance": 0}
        assert fake_mangopay.last_json() == {
            "Owners": ["u1"], "Currency": "EUR", "Description": "Main", "Tag": "shop",
        }

    @pytest.mark.asyncio
    async def test_tag_is_optional(self, service, fake_mangopay):
        fake_mangopay.add("POST", "/wallets", WALLET)
        await service.create_wallet(["u1"], "EUR", "Main")
        assert "Tag" not in fake_mangopay.last_json()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("owners,currency,description", [
        ([], "EUR", "Main"),
        (["u1"], None, "Main"),
        (["u1"], "EUR", None),
    ])
    async def test_rejects_incomplete_input(self, service, fake_mangopay, owners, currency, description):
        with pytest.raises(InvalidArgumentError):
            await service.create_wallet(owners, currency, description)
        assert fake_mangopay.requests == []


class TestWalletLookup:

    @pytest.mark.asyncio
    async def test_get_wallet(self, service, fake_mangopay):
        fake_mangopay.add("GET", "/wallets/w1", WALLET)
        assert await service.get_wallet("w1") == {"id": "w1", "currency": "EUR", "balance": 2500}

    @pytest.mark.asyncio
    async def test_get_missing_wallet_returns_none(self, service):
        assert await service.get_wallet("missing") is None

    @pytest.mark.asyncio
    async def test_update_only_description_and_tag(self, service, fake_mangopay):
        fake_mangopay.add("GET", "/wallets/w1", WALLET)
        fake_mangopay.add("PUT", "/wallets/w1", {**WALLET, "Description": "Savings"})

        result = await service.update_wallet("w1", {"description": "Savings", "currency": "USD"})

        assert result["id"] == "w1"
        assert fake_mangopay.last_json() == {"Description": "Savings"}

    @pytest.mark.asyncio
    async def test_update_missing_wallet(self, service):
        with pytest.raises(NotFoundError):
            await service.update_wallet("missing", {"tag": "x"})


class TestTransactions:

    TRANSACTION = {
        "Id": "t1",
        "AuthorId": "u1",
        "CreditedUserId": "u2",
        "Tag": "order-7",
        "CreationDate": 1700000000,
        "Status": "SUCCEEDED",
        "ResultCode": "000000",
        "ResultMessage": "Success",
        "Type": "TRANSFER",
        "Nature": "REGULAR",
        "CreditedFunds": {"Currency": "EUR", "Amount": 990},
        "DebitedFunds": {"Currency": "EUR", "Amount": 1000},
        "Fees": {"Currency": "EUR", "Amount": 10},
    }

    @pytest.mark.asyncio
    async def test_projects_transactions(self, service, fake_mangopay):
        fake_mangopay.add("GET", "/wallets/w1/transactions", [self.TRANSACTION],
                          headers={"X-Number-Of-Pages": "1", "X-Number-Of-Items": "1"})

        result = await service.get_transactions("w1")

        assert result["transactions"] == [{
            "id": "t1",
            "author_id": "u1",
            "credited_id": "u2",
            "tag": "order-7",
            "created_date": 1700000000,
            "status": "SUCCEEDED",
            "code": "000000",
            "message": "Success",
            "type": "TRANSFER",
            "nature": "REGULAR",
            "credited_currency": "EUR",
            "credited_amount": 990,
            "debited_currency": "EUR",
            "debited_amount": 1000,
            "fees_currency": "EUR",
            "fees_amount": 10,
        }]
        assert result["total_items"] == 1
        assert result["current_page"] == 1
        assert result["items_per_page"] == 100

    @pytest.mark.asyncio
    async def test_filters_are_sent_when_supplied(self, service, fake_mangopay):
        fake_mangopay.add("GET", "/wallets/w1/transactions", [])

        await service.get_transactions("w1", {"status": "FAILED", "type": "PAYIN", "direction": None})

        params = fake_mangopay.requests[-1].url.params
        assert params["Status"] == "FAILED"
        assert params["Type"] == "PAYIN"
        assert "Direction" not in params
        assert "Nature" not in params

    @pytest.mark.asyncio
    async def test_user_wallets(self, service, fake_mangopay):
        fake_mangopay.add("GET", "/users/u1/wallets", [WALLET],
                          headers={"X-Number-Of-Pages": "4", "X-Number-Of-Items": "4"})

        result = await service.get_user_wallets("u1", page=2, per_page=1)

        assert result == {
            "wallets": [{"id": "w1", "currency": "EUR", "balance": 2500}],
            "total_items": 4,
            "total_pages": 4,
            "current_page": 2,
            "items_per_page": 1,
        }


class TestTransfer:

    @pytest.mark.asyncio
    async def test_succeeded_transfer(self, service, fake_mangopay, funds, fees):
        fake_mangopay.add("POST", "/transfers", {"Id": "tr1", "Status": "SUCCEEDED"})

        assert await service.transfer("u1", "w1", "w2", funds, fees) is True
        assert fake_mangopay.last_json() == {
            "AuthorId": "u1",
            "DebitedWalletId": "w1",
            "CreditedWalletId": "w2",
            "DebitedFunds": {"Amount": 1000, "Currency": "EUR"},
            "Fees": {"Amount": 10, "Currency": "EUR"},
        }

    @pytest.mark.asyncio
    async def test_failed_transfer(self, service, fake_mangopay, funds, fees):
        fake_mangopay.add("POST", "/transfers", {"Id": "tr1", "Status": "FAILED"})
        assert await service.transfer("u1", "w1", "w2", funds, fees) is False

    @pytest.mark.asyncio
    async def test_rejects_incomplete_funds(self, service, fees):
        with pytest.raises(InvalidArgumentError):
            await service.transfer("u1", "w1", "w2", {"amount": 1000}, fees)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [10.99, "ten", True])
    async def test_rejects_non_integral_amount(self, service, fake_mangopay, fees, amount):
        with pytest.raises(InvalidArgumentError, match="funds amount must be an integer"):
            await service.transfer("u1", "w1", "w2", {"amount": amount, "currency": "EUR"}, fees)
        assert fake_mangopay.requests == []

    @pytest.mark.asyncio
    async def test_integral_float_amount_is_sent_as_int(self, service, fake_mangopay, fees):
        fake_mangopay.add("POST", "/transfers", {"Id": "tr1", "Status": "SUCCEEDED"})

        await service.transfer("u1", "w1", "w2", {"amount": 1000.0, "currency": "EUR"}, fees)

        assert fake_mangopay.last_json()["DebitedFunds"] == {"Amount": 1000, "Currency": "EUR"}
