"""Accounts: deposit and loan accounts held at a partner bank."""

from __future__ import annotations

from datetime import date, datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, optional, required
from increase_models.core.model import Model
from increase_models.core.params import Params


class Bank(ApiEnum):
    CORE_BANK = "core_bank"
    FIRST_INTERNET_BANK = "first_internet_bank"
    GRASSHOPPER_BANK = "grasshopper_bank"


class Currency(ApiEnum):
    CAD = "CAD"
    CHF = "CHF"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    USD = "USD"


class Funding(ApiEnum):
    LOAN = "loan"
    DEPOSITS = "deposits"


class Status(ApiEnum):
    CLOSED = "closed"
    OPEN = "open"


class Type(ApiEnum):
    ACCOUNT = "account"


class StatementPaymentType(ApiEnum):
    BALANCE = "balance"
    INTEREST_UNTIL_MATURITY = "interest_until_maturity"


class Loan(Model):
    """Loan terms; present only on loan-funded accounts."""

    credit_limit = required(int)
    grace_period_days = required(int)
    maturity_date = required(date, nullable=True)
    statement_day_of_month = required(int)
    statement_payment_type = required(StatementPaymentType)


class Account(Model):
    """An Account as returned by the API.

    Rates and accrued interest are decimal strings (``"0.01"`` is 1%).
    """

    id = required(str)
    account_revenue_rate = required(str, nullable=True)
    bank = required(Bank)
    closed_at = required(datetime, nullable=True)
    created_at = required(datetime)
    currency = required(Currency)
    entity_id = required(str)
    funding = required(Funding)
    idempotency_key = required(str, nullable=True)
    informational_entity_id = required(str, nullable=True)
    interest_accrued = required(str)
    interest_accrued_at = required(date, nullable=True)
    interest_rate = required(str)
    loan = required(Loan, nullable=True)
    name = required(str)
    program_id = required(str)
    status = required(Status)
    type = required(Type)


class LoanParams(Model):
    credit_limit = required(int)
    grace_period_days = required(int)
    statement_day_of_month = required(int)
    statement_payment_type = required(StatementPaymentType)
    maturity_date = optional(date)


class AccountCreateParams(Params):
    name = required(str)
    entity_id = optional(str)
    funding = optional(Funding)
    informational_entity_id = optional(str)
    loan = optional(LoanParams)
    program_id = optional(str)


class CreatedAtFilter(Model):
    after = optional(datetime)
    before = optional(datetime)
    on_or_after = optional(datetime)
    on_or_before = optional(datetime)


class StatusFilter(Model):
    in_ = optional(list_of(Status), doc="Return accounts whose status is one of these.")


class AccountListParams(Params):
    created_at = optional(CreatedAtFilter)
    cursor = optional(str)
    entity_id = optional(str)
    idempotency_key = optional(str)
    informational_entity_id = optional(str)
    limit = optional(int)
    program_id = optional(str)
    status = optional(StatusFilter)


__all__ = [
    "Account",
    "AccountCreateParams",
    "AccountListParams",
    "Bank",
    "CreatedAtFilter",
    "Currency",
    "Funding",
    "Loan",
    "LoanParams",
    "StatementPaymentType",
    "Status",
    "StatusFilter",
    "Type",
]
