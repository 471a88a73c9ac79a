"""Model binding engine: declaration, coercion, validation, serialization."""

from increase_models.core.coercion import DEFAULT_OPTIONS, BindingOptions, JSONValue
from increase_models.core.enums import ApiEnum, coerce_enum, is_known, known_values
from increase_models.core.errors import (
    BindingError,
    MissingRequiredFieldsError,
    SchemaDeclarationError,
    TypeCoercionError,
)
from increase_models.core.fields import (
    FieldSpec,
    FieldType,
    Kind,
    list_of,
    map_of,
    optional,
    required,
    to_snake_case,
    union_of,
)
from increase_models.core.model import Model
from increase_models.core.params import Params, RequestOptions
from increase_models.core.registry import REGISTRY, ModelSchema, SchemaRegistry
from increase_models.core.schema_loader import load_schema_document, load_schema_file

__all__ = [
    "DEFAULT_OPTIONS",
    "REGISTRY",
    "ApiEnum",
    "BindingError",
    "BindingOptions",
    "FieldSpec",
    "FieldType",
    "JSONValue",
    "Kind",
    "MissingRequiredFieldsError",
    "Model",
    "ModelSchema",
    "Params",
    "RequestOptions",
    "SchemaDeclarationError",
    "SchemaRegistry",
    "TypeCoercionError",
    "coerce_enum",
    "is_known",
    "known_values",
    "list_of",
    "load_schema_document",
    "load_schema_file",
    "map_of",
    "optional",
    "required",
    "to_snake_case",
    "union_of",
]
