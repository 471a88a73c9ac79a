"""Account Transfers: book transfers between two of your own accounts."""

from __future__ import annotations

from datetime import datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import optional, required
from increase_models.core.model import Model
from increase_models.core.params import Params


class Currency(ApiEnum):
    CAD = "CAD"
    CHF = "CHF"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    USD = "USD"


class AccountTransferStatus(ApiEnum):
    PENDING_APPROVAL = "pending_approval"
    CANCELED = "canceled"
    COMPLETE = "complete"


class AccountTransferType(ApiEnum):
    ACCOUNT_TRANSFER = "account_transfer"


class CreatedByCategory(ApiEnum):
    API_KEY = "api_key"
    OAUTH_APPLICATION = "oauth_application"
    USER = "user"


class Approval(Model):
    """Set when the transfer required approval and was approved."""

    approved_at = required(datetime)
    approved_by = required(str, nullable=True)


class Cancellation(Model):
    """Set when the transfer required approval and was canceled instead."""

    canceled_at = required(datetime)
    canceled_by = required(str, nullable=True)


class ApiKey(Model):
    description = required(str, nullable=True)


class OAuthApplication(Model):
    name = required(str)


class User(Model):
    email = required(str)


class CreatedBy(Model):
    """Who created the transfer; exactly one detail object matches ``category``."""

    category = required(CreatedByCategory)
    api_key = optional(ApiKey, nullable=True)
    oauth_application = optional(OAuthApplication, nullable=True)
    user = optional(User, nullable=True)


class AccountTransfer(Model):
    """An Account Transfer as returned by the API."""

    id = required(str)
    account_id = required(str, doc="The Account the transfer was sent from.")
    amount = required(int, doc="Amount in the minor unit of ``currency``.")
    approval = required(Approval, nullable=True)
    cancellation = required(Cancellation, nullable=True)
    created_at = required(datetime)
    created_by = required(CreatedBy, nullable=True)
    currency = required(Currency)
    description = required(str)
    destination_account_id = required(str)
    destination_transaction_id = required(str, nullable=True)
    idempotency_key = required(str, nullable=True)
    pending_transaction_id = required(str, nullable=True)
    status = required(AccountTransferStatus)
    transaction_id = required(str, nullable=True)
    type = required(AccountTransferType)


class AccountTransferCreateParams(Params):
    account_id = required(str)
    amount = required(int)
    description = required(str)
    destination_account_id = required(str)
    require_approval = optional(bool)


class CreatedAtFilter(Model):
    after = optional(datetime)
    before = optional(datetime)
    on_or_after = optional(datetime)
    on_or_before = optional(datetime)


class AccountTransferListParams(Params):
    account_id = optional(str)
    created_at = optional(CreatedAtFilter)
    cursor = optional(str)
    idempotency_key = optional(str)
    limit = optional(int)


__all__ = [
    "AccountTransfer",
    "AccountTransferCreateParams",
    "AccountTransferListParams",
    "AccountTransferStatus",
    "AccountTransferType",
    "ApiKey",
    "Approval",
    "Cancellation",
    "CreatedAtFilter",
    "CreatedBy",
    "CreatedByCategory",
    "Currency",
    "OAuthApplication",
    "User",
]
