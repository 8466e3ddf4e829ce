"""Reference resolution: turning raw field ids into display text.

Each value with resolution metadata is resolved at most once. Resolving a
reference resolves its target first, so chains of references are followed
recursively, and every reference is recorded on its target as a
back-reference from the referring row.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bdat_refs.captions import enhance_caption, pouch_buff_caption
from bdat_refs.config import ResolverConfig
from bdat_refs.errors import CyclicReference, InvalidFieldValue, UnknownTable
from bdat_refs.formatting import render_enum, weather_id_map
from bdat_refs.routing import TableRouter, to_type_code
from bdat_refs.types import ConditionType, FieldKind, FieldSchema, ShopType, TaskType
from bdat_refs.value import ResolveState, Value

if TYPE_CHECKING:
    from bdat_refs.collection import TableCollection

logger = logging.getLogger(__name__)


def parse_int(value: Value) -> int:
    """Parse a value's raw payload as an integer."""
    try:
        return int(value.raw)
    except ValueError as e:
        raise InvalidFieldValue(value.raw, "integer", value.location) from e


class Resolver:
    """Resolves values against the tables of their collection."""

    def __init__(
        self,
        router: TableRouter | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        """Initialize a resolver.

        Args:
            router: Maps ids and type codes to table names.
            config: Table names and options for the leaf formatters.
        """
        self.router = router if router is not None else TableRouter()
        self.config = config if config is not None else ResolverConfig()

    def resolve(self, value: Value) -> None:
        """Compute a value's display text, resolving its targets first.

        Raises:
            CyclicReference: If the value's own resolution led back to it.
            InvalidFieldValue: If a raw payload that must be a number is not.
        """
        if value.state is ResolveState.RESOLVED:
            return
        if value.state is ResolveState.IN_PROGRESS:
            raise CyclicReference(value.location)

        schema = value.schema
        if schema is None:
            value.state = ResolveState.RESOLVED
            return

        value.state = ResolveState.IN_PROGRESS
        try:
            self._resolve_value(value, schema)
        except Exception:
            value.state = ResolveState.UNRESOLVED
            raise
        value.state = ResolveState.RESOLVED

    def _resolve_value(self, value: Value, schema: FieldSchema) -> None:
        ref_id = parse_int(value) + schema.adjust
        kind = schema.kind

        if kind is FieldKind.MESSAGE:
            self._apply_message(value, schema.ref_table, ref_id)
        elif kind is FieldKind.REFERENCE:
            self._apply_ref(value, schema.ref_table, ref_id)
        elif kind is FieldKind.ITEM:
            self._apply_ref(value, self.router.table_for_item_kind(ref_id), ref_id)
        elif kind is FieldKind.EVENT:
            self._apply_ref(value, self.router.table_for_event_kind(ref_id), ref_id)
        elif kind is FieldKind.QUEST_FLAG:
            self._apply_ref(value, self.router.table_for_quest_kind(ref_id), ref_id)
        elif kind is FieldKind.CHARACTER:
            self._apply_ref(value, self.router.table_for_character(ref_id), ref_id)
        elif kind is FieldKind.CONDITION:
            condition_type = to_type_code(ConditionType, self._discriminator(value, schema))
            self._apply_ref(value, self.router.table_for_condition_type(condition_type), ref_id)
        elif kind is FieldKind.TASK:
            task_type = to_type_code(TaskType, self._discriminator(value, schema))
            self._apply_ref(value, self.router.table_for_task_type(task_type), ref_id)
        elif kind is FieldKind.SHOP_TABLE:
            shop_type = to_type_code(ShopType, self._discriminator(value, schema))
            self._apply_ref(value, self.router.table_for_shop_type(shop_type), ref_id)
        elif kind is FieldKind.ENHANCE:
            value.display = enhance_caption(value, ref_id, self.resolve, self.config)
        elif kind is FieldKind.WEATHER_ID_MAP:
            value.display = weather_id_map(
                ref_id, value.row.table.collection, self.resolve, self.config
            )
        elif kind is FieldKind.POUCH_BUFF:
            # The caption row is addressed by the raw id; adjust does not apply.
            value.display = pouch_buff_caption(value, parse_int(value), self.resolve, self.config)

        # Enum names win over whatever the kind produced.
        if schema.enum_type is not None:
            value.display = render_enum(schema.enum_type, ref_id, self.config.flag_separator)

    def _discriminator(self, value: Value, schema: FieldSchema) -> int:
        sibling = value.row[schema.ref_field]
        return parse_int(sibling)

    def _apply_message(self, value: Value, table_name: str, ref_id: int) -> None:
        collection = value.row.table.collection
        if collection is None:
            raise UnknownTable(table_name)
        row = collection[table_name].get_row(ref_id)
        text = None
        if row is not None:
            message = row[self.config.message_text_field]
            if not message.resolved:
                self.resolve(message)
            text = message.display_string
        value.display = text
        if (text is None or not text.strip()) and ref_id > 0:
            value.display = str(ref_id)

    def _apply_ref(self, value: Value, table_name: str | None, ref_id: int) -> None:
        collection = value.row.table.collection
        target_row = None
        if table_name is not None and collection is not None:
            if table_name in collection:
                target_row = collection[table_name].get_row(ref_id)
            else:
                logger.debug("%s routes to missing table '%s'", value.location, table_name)

        if target_row is None:
            value.display = None if ref_id == 0 else str(ref_id)
            return

        target = target_row.display
        if target is None:
            # The row exists but has no text to show; link to the row itself.
            value.display = None
            value.reference = target_row
            target_row.add_referrer(value.row)
            return

        if not target.resolved:
            self.resolve(target)

        text = target.display_string
        if text is not None and text.strip():
            value.display = target

        value.reference = target
        target.referenced_by.append(value.row)


_default_resolver: Resolver | None = None


def resolve(value: Value, resolver: Resolver | None = None) -> None:
    """Resolve a single value with the given or the default resolver."""
    global _default_resolver
    if resolver is None:
        if _default_resolver is None:
            _default_resolver = Resolver()
        resolver = _default_resolver
    resolver.resolve(value)


def apply_metadata(
    collection: TableCollection,
    router: TableRouter | None = None,
    config: ResolverConfig | None = None,
) -> int:
    """Resolve every value of every column that carries resolution metadata.

    Errors are not caught: a malformed value aborts the pass.

    Returns:
        The number of indexed values that were unresolved when the pass began.
    """
    resolver = Resolver(router, config)
    pending = [
        row[field_name]
        for table_name, field_name in collection.field_index
        for row in collection[table_name]
        if not row[field_name].resolved
    ]
    for value in pending:
        resolver.resolve(value)
    logger.info(
        "Resolved %d values across %d tables", len(pending), len(collection.list_tables())
    )
    return len(pending)
