"""Hand-declared resource models; import the submodule for the resource you need."""

from increase_models.resources import (
    account_transfers,
    accounts,
    entities,
    events,
    external_accounts,
    pending_transactions,
)
from increase_models.resources.account_transfers import (
    AccountTransfer,
    AccountTransferCreateParams,
    AccountTransferListParams,
)
from increase_models.resources.accounts import Account, AccountCreateParams, AccountListParams
from increase_models.resources.entities import Entity
from increase_models.resources.events import (
    Event,
    EventListParams,
    EventSubscription,
    EventSubscriptionCreateParams,
)
from increase_models.resources.external_accounts import (
    ExternalAccount,
    ExternalAccountCreateParams,
    ExternalAccountListParams,
    ExternalAccountUpdateParams,
)
from increase_models.resources.pending_transactions import (
    PendingTransaction,
    PendingTransactionListParams,
)

__all__ = [
    "Account",
    "AccountCreateParams",
    "AccountListParams",
    "AccountTransfer",
    "AccountTransferCreateParams",
    "AccountTransferListParams",
    "Entity",
    "Event",
    "EventListParams",
    "EventSubscription",
    "EventSubscriptionCreateParams",
    "ExternalAccount",
    "ExternalAccountCreateParams",
    "ExternalAccountListParams",
    "ExternalAccountUpdateParams",
    "PendingTransaction",
    "PendingTransactionListParams",
    "account_transfers",
    "accounts",
    "entities",
    "events",
    "external_accounts",
    "pending_transactions",
]
