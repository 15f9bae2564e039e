from typing import Any, Dict, Optional

import structlog

from ..exceptions import NotFoundError
from ..mangopay.client import MangopayNotFoundError
from ..mangopay.schemas import Pagination, UserLegal, UserNatural
from .base import BaseService, page_result, require

logger = structlog.get_logger(__name__)

COMPANY_USER_TYPE = "COMPANY"
PERSON_USER_TYPE = "PERSON"

# attribute key -> Mangopay field
NATURAL_FIELDS = {
    "email": "Email",
    "first_name": "FirstName",
    "last_name": "LastName",
    "birthday": "Birthday",
    "nationality": "Nationality",
    "country_of_residence": "CountryOfResidence",
    "tag": "Tag",
    "address": "Address",
    "occupation": "Occupation",
    "income_range": "IncomeRange",
    "proof_of_identity": "ProofOfIdentity",
    "proof_of_address": "ProofOfAddress",
}

LEGAL_FIELDS = {
    "email": "Email",
    "name": "Name",
    "first_name": "LegalRepresentativeFirstName",
    "last_name": "LegalRepresentativeLastName",
    "birthday": "LegalRepresentativeBirthday",
    "nationality": "LegalRepresentativeNationality",
    "country_of_residence": "LegalRepresentativeCountryOfResidence",
    "representative_email": "LegalRepresentativeEmail",
    "representative_address": "LegalRepresentativeAddress",
    "address": "HeadquartersAddress",
    "tag": "Tag",
}

PERSON_REQUIRED = ("email", "first_name", "last_name", "birthday", "nationality", "country_of_residence")
COMPANY_REQUIRED = ("email", "name", "is_business", "first_name", "last_name", "birthday",
                    "nationality", "country_of_residence")


def natural_user(attributes: Dict[str, Any]) -> UserNatural:
    """Builds a natural user from the supplied attribute keys only."""
    values = {field: attributes[key] for key, field in NATURAL_FIELDS.items() if attributes.get(key) is not None}
    return UserNatural(**values)


def legal_user(attributes: Dict[str, Any]) -> UserLegal:
    """Builds a legal user from the supplied attribute keys only."""
    values = {field: attributes[key] for key, field in LEGAL_FIELDS.items() if attributes.get(key) is not None}
    if attributes.get("is_business") is not None:
        values["LegalPersonType"] = "BUSINESS" if attributes["is_business"] else "ORGANIZATION"
    return UserLegal(**values)


class UserService(BaseService):
    """Adapter to the Mangopay users API."""

    async def create_person(self, attributes: Dict[str, Any]) -> str:
        """
        Creates a natural user. Required keys:
        email, first_name, last_name, birthday, nationality, country_of_residence.
        """
        require(attributes, PERSON_REQUIRED,
                "To create person user please specify all required attributes: " + ", ".join(PERSON_REQUIRED))

        user = await self.api.create_user(natural_user(attributes))
        logger.info("mangopay_user_created", user_id=user.Id, user_type=PERSON_USER_TYPE)
        return user.Id

    async def update_person(self, user_id: str, attributes: Optional[Dict[str, Any]] = None) -> str:
        await self._expect(user_id, UserNatural, "Person")
        user = await self.api.update_user(str(user_id), natural_user(attributes or {}))
        return user.Id

    async def create_company(self, attributes: Dict[str, Any]) -> str:
        """
        Creates a legal user. Required keys: email, name, is_business (bool),
        first_name, last_name, birthday, nationality, country_of_residence.
        The name/birthday/... keys describe the legal representative.
        """
        require(attributes, COMPANY_REQUIRED,
                "To create company user please specify all required attributes: " + ", ".join(COMPANY_REQUIRED))

        user = await self.api.create_user(legal_user(attributes))
        logger.info("mangopay_user_created", user_id=user.Id, user_type=COMPANY_USER_TYPE)
        return user.Id

    async def update_company(self, user_id: str, attributes: Optional[Dict[str, Any]] = None) -> str:
        await self._expect(user_id, UserLegal, "Company")
        user = await self.api.update_user(str(user_id), legal_user(attributes or {}))
        return user.Id

    async def get_all_users(self, page: int = 1, per_page: int = 100) -> Dict[str, Any]:
        pagination = Pagination(Page=page, ItemsPerPage=per_page)
        users = await self.api.get_users(pagination)

        extracted = [
            {
                "type": COMPANY_USER_TYPE if isinstance(user, UserLegal) else PERSON_USER_TYPE,
                "id": user.Id,
            }
            for user in users
        ]
        return page_result("users", extracted, pagination)

    async def _expect(self, user_id: str, kind: type, label: str):
        try:
            user = await self.api.get_user(str(user_id))
        except MangopayNotFoundError:
            user = None
        if not isinstance(user, kind):
            raise NotFoundError(f"{label} user with id {user_id} not found in Mangopay")
        return user
