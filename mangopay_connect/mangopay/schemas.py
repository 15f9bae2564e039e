from pydantic import BaseModel
from typing import Optional, Any, Dict, List, ClassVar, Set

# Field names follow the Mangopay REST API (v2.01) so that models can be
# dumped straight into request bodies and validated straight from responses.


class MangopayModel(BaseModel):
    model_config = {"extra": "allow"}

    # Fields the API assigns itself; never sent back
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate"}

    def payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, exclude=self.READ_ONLY)


class Money(BaseModel):
    Amount: Optional[int] = None
    Currency: Optional[str] = None


class Pagination(BaseModel):
    Page: int = 1
    ItemsPerPage: int = 100
    TotalPages: Optional[int] = None
    TotalItems: Optional[int] = None

    def params(self) -> Dict[str, int]:
        return {"page": self.Page, "per_page": self.ItemsPerPage}


# ---- Users ----

class UserNatural(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "PersonType"}

    Id: Optional[str] = None
    PersonType: str = "NATURAL"
    Email: Optional[str] = None
    FirstName: Optional[str] = None
    LastName: Optional[str] = None
    Birthday: Optional[int] = None
    Nationality: Optional[str] = None
    CountryOfResidence: Optional[str] = None
    Address: Optional[Any] = None
    Occupation: Optional[str] = None
    IncomeRange: Optional[str] = None
    ProofOfIdentity: Optional[str] = None
    ProofOfAddress: Optional[str] = None
    Tag: Optional[str] = None


class UserLegal(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "PersonType"}

    Id: Optional[str] = None
    PersonType: str = "LEGAL"
    Email: Optional[str] = None
    Name: Optional[str] = None
    LegalPersonType: Optional[str] = None
    LegalRepresentativeFirstName: Optional[str] = None
    LegalRepresentativeLastName: Optional[str] = None
    LegalRepresentativeBirthday: Optional[int] = None
    LegalRepresentativeNationality: Optional[str] = None
    LegalRepresentativeCountryOfResidence: Optional[str] = None
    LegalRepresentativeEmail: Optional[str] = None
    LegalRepresentativeAddress: Optional[Any] = None
    HeadquartersAddress: Optional[Any] = None
    Tag: Optional[str] = None


# ---- Wallets / transactions ----

class Wallet(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "Balance", "FundsType"}

    Id: Optional[str] = None
    Owners: Optional[List[str]] = None
    Description: Optional[str] = None
    Currency: Optional[str] = None
    Tag: Optional[str] = None
    Balance: Optional[Money] = None
    FundsType: Optional[str] = None


class Transaction(MangopayModel):
    Id: Optional[str] = None
    AuthorId: Optional[str] = None
    CreditedUserId: Optional[str] = None
    Tag: Optional[str] = None
    CreationDate: Optional[int] = None
    Status: Optional[str] = None
    ResultCode: Optional[str] = None
    ResultMessage: Optional[str] = None
    Type: Optional[str] = None
    Nature: Optional[str] = None
    CreditedFunds: Optional[Money] = None
    DebitedFunds: Optional[Money] = None
    Fees: Optional[Money] = None


class TransactionFilter(BaseModel):
    Direction: Optional[str] = None
    Nature: Optional[str] = None
    Status: Optional[str] = None
    Type: Optional[str] = None

    def params(self) -> Dict[str, str]:
        return self.model_dump(exclude_none=True)


class Transfer(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "Status", "CreditedFunds", "ResultCode", "ResultMessage"}

    Id: Optional[str] = None
    AuthorId: Optional[str] = None
    DebitedWalletId: Optional[str] = None
    CreditedWalletId: Optional[str] = None
    DebitedFunds: Optional[Money] = None
    Fees: Optional[Money] = None
    CreditedFunds: Optional[Money] = None
    Status: Optional[str] = None
    Tag: Optional[str] = None


# ---- Bank accounts ----

class BankAccount(MangopayModel):
    """
    Flat bank account record. ``Type`` selects which detail fields apply:
      IBAN  - IBAN, BIC
      GB    - AccountNumber, SortCode
      US    - AccountNumber, ABA
      CA    - AccountNumber, BankName, InstitutionNumber, BranchCode
      OTHER - Country, AccountNumber, BIC
    The type itself travels in the URL, not in the body.
    """
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "Type", "Active"}

    Id: Optional[str] = None
    Type: Optional[str] = None
    UserId: Optional[str] = None
    OwnerName: Optional[str] = None
    OwnerAddress: Optional[Any] = None
    IBAN: Optional[str] = None
    BIC: Optional[str] = None
    AccountNumber: Optional[str] = None
    SortCode: Optional[str] = None
    ABA: Optional[str] = None
    BankName: Optional[str] = None
    InstitutionNumber: Optional[str] = None
    BranchCode: Optional[str] = None
    Country: Optional[str] = None
    Active: Optional[bool] = None


# ---- Money movements ----

class PayInCardWeb(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {
        "Id", "CreationDate", "Status", "CreditedFunds", "RedirectURL",
        "PaymentType", "ExecutionType", "ResultCode", "ResultMessage",
    }

    Id: Optional[str] = None
    AuthorId: Optional[str] = None
    CreditedWalletId: Optional[str] = None
    DebitedFunds: Optional[Money] = None
    Fees: Optional[Money] = None
    CreditedFunds: Optional[Money] = None
    CardType: Optional[str] = None
    Culture: Optional[str] = None
    ReturnURL: Optional[str] = None
    TemplateURL: Optional[str] = None
    TemplateURLOptions: Optional[Dict[str, str]] = None
    RedirectURL: Optional[str] = None
    Status: Optional[str] = None
    PaymentType: Optional[str] = "CARD"
    ExecutionType: Optional[str] = "WEB"


class PayOutBankWire(MangopayModel):
    READ_ONLY: ClassVar[Set[str]] = {"Id", "CreationDate", "Status", "PaymentType", "ResultCode", "ResultMessage"}

    Id: Optional[str] = None
    AuthorId: Optional[str] = None
    DebitedWalletId: Optional[str] = None
    DebitedFunds: Optional[Money] = None
    Fees: Optional[Money] = None
    BankAccountId: Optional[str] = None
    BankWireRef: Optional[str] = None
    Status: Optional[str] = None
    PaymentType: Optional[str] = "BANK_WIRE"
