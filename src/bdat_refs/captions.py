"""Caption tags and parameter substitution.

Captions carry markup tags such as ``[ML:PouchParam ]`` or ``<param/>``
marking where a runtime number is shown. Substitution replaces the
numeric-parameter tags with a value read from the caption's row and leaves
every other tag in place for a later rendering stage.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from bdat_refs.errors import InvalidFieldValue
from bdat_refs.parsing import CaptionLexer

if TYPE_CHECKING:
    from bdat_refs.config import ResolverConfig
    from bdat_refs.value import Value

logger = logging.getLogger(__name__)

_BRACKET_TAG_RE = re.compile(r"\[(?P<group>[A-Za-z_]\w*):(?P<subtype>[A-Za-z_]\w*)(?P<attrs>[^\[\]]*)\]")
_ANGLE_TAG_RE = re.compile(r"<(?P<subtype>[A-Za-z_]\w*)(?P<attrs>(?:\s[^<>]*)?)/>")
_ATTR_RE = re.compile(r"(\w+)=(\S*)")


@dataclass
class CaptionTag:
    """A markup tag found in a caption, located by character offset."""

    start: int
    length: int
    subtype: str
    group: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""

    @property
    def end(self) -> int:
        return self.start + self.length


_lexer: CaptionLexer | None = None


def _get_lexer() -> CaptionLexer:
    global _lexer
    if _lexer is None:
        _lexer = CaptionLexer()
        _lexer.build()
    return _lexer


def parse_tags(text: str) -> list[CaptionTag]:
    """Return the tags embedded in a caption, in order of appearance."""
    tags = []
    for tok in _get_lexer().tokenize(text):
        if tok.type == "BRACKET_TAG":
            m = _BRACKET_TAG_RE.fullmatch(tok.value)
            group = m.group("group")
        elif tok.type == "ANGLE_TAG":
            m = _ANGLE_TAG_RE.fullmatch(tok.value)
            group = None
        else:
            continue
        tags.append(
            CaptionTag(
                start=tok.lexpos,
                length=len(tok.value),
                subtype=m.group("subtype"),
                group=group,
                attributes=dict(_ATTR_RE.findall(m.group("attrs"))),
                text=tok.value,
            )
        )
    return tags


def substitute_tags(
    text: str,
    tags: list[CaptionTag],
    replace: Callable[[CaptionTag], str | None],
) -> str:
    """Rebuild ``text`` with each tag's span swapped for ``replace(tag)``.

    Tags for which ``replace`` returns None are kept verbatim. The output is
    built in a single pass over the tags sorted by offset, so every span is
    read against the original text.
    """
    parts = []
    pos = 0
    for tag in sorted(tags, key=lambda t: t.start):
        if tag.start < pos:
            continue  # overlapping span
        replacement = replace(tag)
        if replacement is None:
            continue
        parts.append(text[pos:tag.start])
        parts.append(replacement)
        pos = tag.end
    parts.append(text[pos:])
    return "".join(parts)


def format_number(number: float) -> str:
    """Render a parameter the way captions show it: no trailing ``.0``."""
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_number(value: Value) -> float:
    try:
        return float(value.raw)
    except ValueError as e:
        raise InvalidFieldValue(value.raw, "numeric", value.location) from e


def pouch_buff_caption(
    value: Value,
    target_id: int,
    resolve: Callable[[Value], None],
    config: ResolverConfig,
) -> str | None:
    """Render a pouch buff caption with its parameter filled in.

    The caption comes from row ``target_id`` of the pouch buff table; every
    numeric-parameter tag in it is replaced by the number in the sibling
    column named by the field's ``ref_field``.
    """
    collection = value.row.table.collection
    if collection is None or config.pouch_buff_table not in collection:
        logger.debug("No table '%s' for %s", config.pouch_buff_table, value.location)
        return None

    row = collection[config.pouch_buff_table].get_row(target_id)
    if row is None:
        return None
    caption_value = row[config.pouch_buff_caption_field]
    if not caption_value.resolved:
        resolve(caption_value)

    caption = caption_value.display_string
    if not caption:
        return None

    param = value.row[value.schema.ref_field]
    number: str | None = None

    def replace(tag: CaptionTag) -> str | None:
        nonlocal number
        if tag.subtype not in config.param_subtypes:
            return None
        if number is None:
            number = format_number(parse_number(param))
        return number

    return substitute_tags(caption, parse_tags(caption), replace)


def enhance_caption(
    value: Value,
    target_id: int,
    resolve: Callable[[Value], None],
    config: ResolverConfig,
) -> str | None:
    """Render an enhance effect's caption with its parameters filled in.

    ``[ML:Enhance kind=Param2 ]`` takes the enhance row's ``Param2``; a tag
    without ``kind`` takes the default parameter column.
    """
    collection = value.row.table.collection
    table_name = value.schema.ref_table or config.enhance_table
    if collection is None or table_name not in collection:
        return str(target_id) if target_id != 0 else None

    row = collection[table_name].get_row(target_id)
    if row is None:
        return str(target_id) if target_id != 0 else None

    caption_value = row[config.enhance_caption_field]
    if not caption_value.resolved:
        resolve(caption_value)
    caption = caption_value.display_string
    if not caption or not caption.strip():
        return str(target_id)

    def replace(tag: CaptionTag) -> str | None:
        if tag.subtype != config.enhance_subtype:
            return None
        column = tag.attributes.get("kind", config.enhance_default_param)
        if column not in row:
            return None
        return format_number(parse_number(row[column]))

    return substitute_tags(caption, parse_tags(caption), replace)
