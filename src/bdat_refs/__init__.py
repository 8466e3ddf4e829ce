"""bdat_refs - Cross-reference resolution for tabular game data."""

from bdat_refs.collection import TableCollection
from bdat_refs.config import ResolverConfig
from bdat_refs.errors import (
    BdatRefError,
    CyclicReference,
    InvalidFieldValue,
    SchemaError,
    UnknownField,
    UnknownTable,
)
from bdat_refs.resolver import Resolver, apply_metadata, resolve
from bdat_refs.routing import IdRange, TableRouter
from bdat_refs.table import Row, Table
from bdat_refs.types import (
    ConditionType,
    EnumRegistry,
    EnumTypeDefinition,
    EnumVariantDefinition,
    FieldKind,
    FieldSchema,
    ShopType,
    TaskType,
)
from bdat_refs.value import ResolveState, Value

__all__ = [
    # Main API
    "apply_metadata",
    "resolve",
    "Resolver",
    "ResolverConfig",
    "TableRouter",
    "IdRange",
    # Record store
    "TableCollection",
    "Table",
    "Row",
    "Value",
    "ResolveState",
    # Schema
    "FieldKind",
    "FieldSchema",
    "EnumRegistry",
    "EnumTypeDefinition",
    "EnumVariantDefinition",
    "ConditionType",
    "TaskType",
    "ShopType",
    # Errors
    "BdatRefError",
    "UnknownTable",
    "UnknownField",
    "InvalidFieldValue",
    "CyclicReference",
    "SchemaError",
]

__version__ = "0.1.0"
