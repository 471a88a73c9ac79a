"""
increase-models — package root.

File: src/increase_models/__init__.py

Purpose
- Model-binding layer for the Increase banking API: schema-declared models,
  lazy validation, copy-on-write mutation, wire serialization.

Import boundaries
- No side effects at import time (no config loading, no logging setup).
- ``increase_models.resources`` is imported on demand by callers.
"""

from increase_models.core import (
    ApiEnum,
    BindingError,
    BindingOptions,
    MissingRequiredFieldsError,
    Model,
    Params,
    RequestOptions,
    SchemaDeclarationError,
    TypeCoercionError,
    list_of,
    map_of,
    optional,
    required,
    union_of,
)

__version__ = "0.1.0"

__all__ = [
    "ApiEnum",
    "BindingError",
    "BindingOptions",
    "MissingRequiredFieldsError",
    "Model",
    "Params",
    "RequestOptions",
    "SchemaDeclarationError",
    "TypeCoercionError",
    "__version__",
    "list_of",
    "map_of",
    "optional",
    "required",
    "union_of",
]
