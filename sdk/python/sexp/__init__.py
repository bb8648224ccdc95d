from .types import TokenKind, Token, Sexp, ParseStatus, ParseResult
from .tokenizer import Tokenizer, UnreadError
from .parser import (
    ParseError, DepthExceeded,
    parse, must_parse, try_parse, parse_all, to_text,
)

__all__ = [
    "TokenKind", "Token", "Sexp", "ParseStatus", "ParseResult",
    "Tokenizer", "UnreadError",
    "ParseError", "DepthExceeded",
    "parse", "must_parse", "try_parse", "parse_all", "to_text",
]
