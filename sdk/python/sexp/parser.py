"""Tree builder and canonical serializer for S-expressions.

Both directions walk nested lists with an explicit stack of frames, so
nesting depth is bounded by memory rather than the interpreter's
recursion limit.
"""

import logging
from typing import Iterator, Optional, Union

from .tokenizer import Source, Tokenizer
from .types import ParseResult, ParseStatus, Sexp, Token, TokenKind

logger = logging.getLogger(__name__)


class ParseError(SyntaxError):
    def __init__(self, msg: str, token: Optional[Token] = None):
        super().__init__(msg)
        self.token = token

    @property
    def kind(self) -> Optional[TokenKind]:
        return self.token.kind if self.token is not None else None


class DepthExceeded(RuntimeError):
    pass


def _tokenizer(source: Union[Source, Tokenizer]) -> Tokenizer:
    if isinstance(source, Tokenizer):
        return source
    return Tokenizer(source)


def parse(source: Union[Source, Tokenizer], *, max_depth: Optional[int] = None) -> Optional[Sexp]:
    """Parse one expression from a string, text stream or tokenizer.

    A bare atom is a complete expression. Tokens after the expression are
    left unread in the tokenizer.

    Args:
        source: Text, a text stream, or a tokenizer to continue from.
        max_depth: Optional cap on list nesting; unlimited when None.

    Returns:
        The tree, or None when the input is empty or ends before the
        outermost list is closed.

    Raises:
        ParseError: a token appears where the grammar forbids it.
        DepthExceeded: lists nest deeper than max_depth.
    """
    return _parse(_tokenizer(source), max_depth)


def _enter_list(lex: Tokenizer, frames: list[list[Sexp]], max_depth: Optional[int]) -> None:
    lex.next_token()  # the "(" handed back by the caller
    if max_depth is not None and len(frames) >= max_depth:
        logger.debug("nesting depth %d exceeds limit", len(frames) + 1)
        raise DepthExceeded(f"max nesting depth {max_depth} exceeded")
    frames.append([])


def _parse(lex: Tokenizer, max_depth: Optional[int]) -> Optional[Sexp]:
    token = lex.next_token()
    if token is None:
        return None
    if token.kind.is_atom:
        return Sexp.leaf(token)
    if token.kind is not TokenKind.OPEN_PAREN:
        logger.debug("stray %s after %d tokens", token.kind, len(lex.history) - 1)
        raise ParseError(f"expected an opening delimiter but found {token.kind}", token)

    # One frame per open list, holding the children read so far.
    frames: list[list[Sexp]] = []
    lex.unread()
    _enter_list(lex, frames, max_depth)
    while True:
        token = lex.next_token()
        if token is None:
            logger.debug("input ended inside a list at depth %d", len(frames))
            return None
        if token.kind is TokenKind.OPEN_PAREN:
            lex.unread()
            _enter_list(lex, frames, max_depth)
        elif token.kind is TokenKind.CLOSE_PAREN:
            node = Sexp.of(*frames.pop())
            if not frames:
                return node
            frames[-1].append(node)
        else:
            frames[-1].append(Sexp.leaf(token))


def must_parse(source: Union[Source, Tokenizer], *, max_depth: Optional[int] = None) -> Sexp:
    """Like parse, but a missing or truncated expression is an error."""
    tree = parse(source, max_depth=max_depth)
    if tree is None:
        raise ParseError("unexpected end of input")
    return tree


def try_parse(source: Union[Source, Tokenizer], *, max_depth: Optional[int] = None) -> ParseResult:
    """Parse one expression, reporting the outcome instead of raising.

    Distinguishes input that holds no tokens at all (EMPTY) from input
    that ends before its outermost list closes (INCOMPLETE). A depth
    limit is not a grammar fault; DepthExceeded still propagates.
    """
    lex = _tokenizer(source)
    if lex.peek() is None:
        return ParseResult(ParseStatus.EMPTY)
    try:
        tree = _parse(lex, max_depth)
    except ParseError as e:
        return ParseResult(ParseStatus.MALFORMED, error=e)
    if tree is None:
        return ParseResult(ParseStatus.INCOMPLETE)
    return ParseResult(ParseStatus.OK, tree=tree)


def parse_all(source: Union[Source, Tokenizer], *, max_depth: Optional[int] = None) -> Iterator[Sexp]:
    """Yield every top-level expression in the input, in order."""
    lex = _tokenizer(source)
    while lex.peek() is not None:
        tree = _parse(lex, max_depth)
        if tree is None:
            raise ParseError("unterminated list")
        yield tree


def to_text(node: Sexp) -> str:
    """Render a tree as canonical text: atoms verbatim, lists space-joined."""
    if node.atom is not None:
        return node.atom.text

    out = ["("]
    stack = [iter(node.children)]
    sep = False
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            out.append(")")
            sep = True
            continue
        if sep:
            out.append(" ")
        if child.atom is not None:
            out.append(child.atom.text)
            sep = True
        else:
            out.append("(")
            stack.append(iter(child.children))
            sep = False
    return "".join(out)
