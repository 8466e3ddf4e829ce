"""Parsing module for caption markup."""

from bdat_refs.parsing.caption_lexer import CaptionLexer

__all__ = [
    "CaptionLexer",
]
