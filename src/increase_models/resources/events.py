"""Events and Event Subscriptions (webhook delivery configuration)."""

from __future__ import annotations

from datetime import datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, optional, required
from increase_models.core.model import Model
from increase_models.core.params import Params


class Category(ApiEnum):
    """Event categories; the API adds new ones regularly, so expect unknown strings."""

    ACCOUNT_CREATED = "account.created"
    ACCOUNT_UPDATED = "account.updated"
    ACCOUNT_TRANSFER_CREATED = "account_transfer.created"
    ACCOUNT_TRANSFER_UPDATED = "account_transfer.updated"
    ENTITY_CREATED = "entity.created"
    ENTITY_UPDATED = "entity.updated"
    EVENT_SUBSCRIPTION_CREATED = "event_subscription.created"
    EVENT_SUBSCRIPTION_UPDATED = "event_subscription.updated"
    EXTERNAL_ACCOUNT_CREATED = "external_account.created"
    EXTERNAL_ACCOUNT_UPDATED = "external_account.updated"
    PENDING_TRANSACTION_CREATED = "pending_transaction.created"
    PENDING_TRANSACTION_UPDATED = "pending_transaction.updated"


class EventType(ApiEnum):
    EVENT = "event"


class Event(Model):
    """A webhook or polled Event pointing at the object that changed."""

    id = required(str)
    associated_object_id = required(str)
    associated_object_type = required(str)
    category = required(Category)
    created_at = required(datetime)
    type = required(EventType)


class CategoryFilter(Model):
    in_ = optional(list_of(Category))


class CreatedAtFilter(Model):
    after = optional(datetime)
    before = optional(datetime)
    on_or_after = optional(datetime)
    on_or_before = optional(datetime)


class EventListParams(Params):
    associated_object_id = optional(str)
    category = optional(CategoryFilter)
    created_at = optional(CreatedAtFilter)
    cursor = optional(str)
    limit = optional(int)


class SubscriptionStatus(ApiEnum):
    ACTIVE = "active"
    DISABLED = "disabled"
    DELETED = "deleted"
    REQUIRES_ATTENTION = "requires_attention"


class SubscriptionType(ApiEnum):
    EVENT_SUBSCRIPTION = "event_subscription"


class EventSubscription(Model):
    id = required(str)
    created_at = required(datetime)
    idempotency_key = required(str, nullable=True)
    oauth_connection_id = required(str, nullable=True)
    selected_event_category = required(
        Category,
        nullable=True,
        doc="When set, only Events of this category are delivered.",
    )
    status = required(SubscriptionStatus)
    type = required(SubscriptionType)
    url = required(str)


class EventSubscriptionCreateParams(Params):
    url = required(str)
    oauth_connection_id = optional(str)
    selected_event_category = optional(Category)
    shared_secret = optional(str, doc="Signing secret for webhook payloads.")
    status = optional(SubscriptionStatus)


__all__ = [
    "Category",
    "CategoryFilter",
    "CreatedAtFilter",
    "Event",
    "EventListParams",
    "EventSubscription",
    "EventSubscriptionCreateParams",
    "EventType",
    "SubscriptionStatus",
    "SubscriptionType",
]
