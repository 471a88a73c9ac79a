"""Entities: the legal persons that own accounts.

Only the corporation structure is modelled in depth. The other structure
detail objects (``natural_person``, ``joint``, ``trust``, ...) are kept as
preserved extra fields and re-emitted untouched.
"""

from __future__ import annotations

from datetime import date, datetime

from increase_models.core.enums import ApiEnum
from increase_models.core.fields import list_of, required
from increase_models.core.model import Model


class Prong(ApiEnum):
    CONTROL = "control"
    OWNERSHIP = "ownership"


class EntityStatus(ApiEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    DISABLED = "disabled"


class Structure(ApiEnum):
    CORPORATION = "corporation"
    NATURAL_PERSON = "natural_person"
    JOINT = "joint"
    TRUST = "trust"
    GOVERNMENT_AUTHORITY = "government_authority"


class EntityType(ApiEnum):
    ENTITY = "entity"


class SupplementalDocumentType(ApiEnum):
    ENTITY_SUPPLEMENTAL_DOCUMENT = "entity_supplemental_document"


class Address(Model):
    city = required(str, nullable=True)
    country = required(str, doc="Two-letter ISO 3166-1 alpha-2 country code.")
    line1 = required(str)
    line2 = required(str, nullable=True)
    state = required(str, nullable=True)
    zip = required(str, nullable=True)


class Individual(Model):
    address = required(Address)
    date_of_birth = required(date)
    name = required(str)


class BeneficialOwner(Model):
    beneficial_owner_id = required(str)
    company_title = required(str, nullable=True)
    individual = required(Individual)
    prong = required(Prong)


class CorporationAddress(Model):
    city = required(str)
    line1 = required(str)
    line2 = required(str, nullable=True)
    state = required(str)
    zip = required(str)


class Corporation(Model):
    address = required(CorporationAddress)
    beneficial_owners = required(list_of(BeneficialOwner))
    email = required(str, nullable=True)
    incorporation_state = required(str, nullable=True)
    industry_code = required(str, nullable=True)
    name = required(str)
    tax_identifier = required(str, nullable=True)
    website = required(str, nullable=True)


class SupplementalDocument(Model):
    created_at = required(datetime)
    entity_id = required(str)
    file_id = required(str)
    idempotency_key = required(str, nullable=True)
    type = required(SupplementalDocumentType)


class Entity(Model):
    id = required(str)
    corporation = required(Corporation, nullable=True)
    created_at = required(datetime)
    description = required(str, nullable=True)
    details_confirmed_at = required(datetime, nullable=True)
    idempotency_key = required(str, nullable=True)
    status = required(EntityStatus)
    structure = required(Structure)
    supplemental_documents = required(list_of(SupplementalDocument))
    type = required(EntityType)


__all__ = [
    "Address",
    "BeneficialOwner",
    "Corporation",
    "CorporationAddress",
    "Entity",
    "EntityStatus",
    "EntityType",
    "Individual",
    "Prong",
    "Structure",
    "SupplementalDocument",
    "SupplementalDocumentType",
]
