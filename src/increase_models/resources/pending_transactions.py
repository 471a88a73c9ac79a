"""Pending Transactions: holds and in-flight movements not yet booked as Transactions.

``Source`` is a tagged object: ``category`` names which one of the detail
fields is populated. Detail objects this library has not modelled yet arrive
as preserved extra fields rather than errors.
"""

from __future__ import annotations

from datetime import datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, map_of, optional, required
from increase_models.core.model import Model
from increase_models.core.params import Params


class Currency(ApiEnum):
    CAD = "CAD"
    CHF = "CHF"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    USD = "USD"


class SourceCategory(ApiEnum):
    ACCOUNT_TRANSFER_INSTRUCTION = "account_transfer_instruction"
    ACH_TRANSFER_INSTRUCTION = "ach_transfer_instruction"
    CARD_AUTHORIZATION = "card_authorization"
    CHECK_DEPOSIT_INSTRUCTION = "check_deposit_instruction"
    CHECK_TRANSFER_INSTRUCTION = "check_transfer_instruction"
    INBOUND_FUNDS_HOLD = "inbound_funds_hold"
    USER_INITIATED_HOLD = "user_initiated_hold"
    REAL_TIME_PAYMENTS_TRANSFER_INSTRUCTION = "real_time_payments_transfer_instruction"
    WIRE_TRANSFER_INSTRUCTION = "wire_transfer_instruction"
    INBOUND_WIRE_TRANSFER_REVERSAL = "inbound_wire_transfer_reversal"
    SWIFT_TRANSFER_INSTRUCTION = "swift_transfer_instruction"
    CARD_PUSH_TRANSFER_INSTRUCTION = "card_push_transfer_instruction"
    FEDNOW_TRANSFER_INSTRUCTION = "fednow_transfer_instruction"
    OTHER = "other"


class Status(ApiEnum):
    PENDING = "pending"
    COMPLETE = "complete"


class RouteType(ApiEnum):
    ACCOUNT_NUMBER = "account_number"
    CARD = "card"
    LOCKBOX = "lockbox"


class Type(ApiEnum):
    PENDING_TRANSACTION = "pending_transaction"


class HoldStatus(ApiEnum):
    HELD = "held"
    COMPLETE = "complete"


class HoldType(ApiEnum):
    INBOUND_FUNDS_HOLD = "inbound_funds_hold"


class AccountTransferInstruction(Model):
    amount = required(int)
    currency = required(Currency)
    transfer_id = required(str)


class InboundFundsHold(Model):
    amount = required(int)
    automatically_releases_at = required(datetime)
    created_at = required(datetime)
    currency = required(Currency)
    held_transaction_id = required(str, nullable=True)
    pending_transaction_id = required(str, nullable=True)
    released_at = required(datetime, nullable=True)
    status = required(HoldStatus)
    type = required(HoldType)


class Source(Model):
    category = required(SourceCategory)
    account_transfer_instruction = optional(AccountTransferInstruction, nullable=True)
    inbound_funds_hold = optional(InboundFundsHold, nullable=True)
    user_initiated_hold = optional(
        map_of(object),
        nullable=True,
        doc="Free-form hold details; present when ``category`` is ``user_initiated_hold``.",
    )


class PendingTransaction(Model):
    id = required(str)
    account_id = required(str)
    amount = required(int)
    completed_at = required(datetime, nullable=True)
    created_at = required(datetime)
    currency = required(Currency)
    description = required(str)
    held_amount = required(int)
    route_id = required(str, nullable=True)
    route_type = required(RouteType, nullable=True)
    source = required(Source)
    status = required(Status)
    type = required(Type)


class CategoryFilter(Model):
    in_ = optional(list_of(SourceCategory))


class CreatedAtFilter(Model):
    after = optional(datetime)
    before = optional(datetime)
    on_or_after = optional(datetime)
    on_or_before = optional(datetime)


class StatusFilter(Model):
    in_ = optional(list_of(Status))


class PendingTransactionListParams(Params):
    account_id = optional(str)
    category = optional(CategoryFilter)
    created_at = optional(CreatedAtFilter)
    cursor = optional(str)
    limit = optional(int)
    route_id = optional(str)
    status = optional(StatusFilter)


__all__ = [
    "AccountTransferInstruction",
    "CategoryFilter",
    "CreatedAtFilter",
    "Currency",
    "HoldStatus",
    "HoldType",
    "InboundFundsHold",
    "PendingTransaction",
    "PendingTransactionListParams",
    "RouteType",
    "Source",
    "SourceCategory",
    "Status",
    "StatusFilter",
    "Type",
]
