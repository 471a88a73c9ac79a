"""External Accounts: saved counterparty bank accounts used as transfer destinations."""

from __future__ import annotations

from datetime import datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, optional, required
from increase_models.core.model import Model
from increase_models.core.params import Params


class AccountHolder(ApiEnum):
    BUSINESS = "business"
    INDIVIDUAL = "individual"
    UNKNOWN = "unknown"


class Funding(ApiEnum):
    CHECKING = "checking"
    SAVINGS = "savings"
    OTHER = "other"


class Status(ApiEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class Type(ApiEnum):
    EXTERNAL_ACCOUNT = "external_account"


class ExternalAccount(Model):
    id = required(str)
    account_holder = required(AccountHolder)
    account_number = required(str)
    created_at = required(datetime)
    description = required(str)
    funding = required(Funding)
    idempotency_key = required(str, nullable=True)
    routing_number = required(str, doc="American Bankers' Association routing transit number.")
    status = required(Status)
    type = required(Type)


class ExternalAccountCreateParams(Params):
    account_number = required(str)
    description = required(str)
    routing_number = required(str)
    account_holder = optional(AccountHolder)
    funding = optional(Funding)


class ExternalAccountUpdateParams(Params):
    account_holder = optional(AccountHolder)
    description = optional(str)
    funding = optional(Funding)
    status = optional(Status)


class StatusFilter(Model):
    in_ = optional(list_of(Status))


class ExternalAccountListParams(Params):
    cursor = optional(str)
    idempotency_key = optional(str)
    limit = optional(int)
    routing_number = optional(str)
    status = optional(StatusFilter)


__all__ = [
    "AccountHolder",
    "ExternalAccount",
    "ExternalAccountCreateParams",
    "ExternalAccountListParams",
    "ExternalAccountUpdateParams",
    "Funding",
    "Status",
    "StatusFilter",
    "Type",
]
