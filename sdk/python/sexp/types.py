from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TokenKind(Enum):
    OPEN_PAREN = "OpenParen"
    CLOSE_PAREN = "CloseParen"
    SYMBOL = "Symbol"
    NUMBER = "Number"
    STRING = "String"

    def __str__(self) -> str:
        return self.value

    @property
    def is_atom(self) -> bool:
        return self in (TokenKind.SYMBOL, TokenKind.NUMBER, TokenKind.STRING)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str  # exact source text, quotes included for strings

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Sexp:
    """A tree node: an atom wrapping one token, or a list of child nodes.

    Exactly one of the two shapes holds. The empty list is
    ``Sexp(children=())``.
    """

    atom: Optional[Token] = None
    children: tuple["Sexp", ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.atom is not None:
            if self.children:
                raise ValueError("a node cannot be both an atom and a list")
            if not self.atom.kind.is_atom:
                raise ValueError(f"{self.atom.kind} token cannot be an atom")
        # Accept any iterable of children but store a tuple.
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Sexp):
                raise ValueError(f"list child must be a Sexp, not {type(child).__name__}")
        object.__setattr__(self, "children", children)

    @classmethod
    def leaf(cls, token: Token) -> "Sexp":
        return cls(atom=token)

    @classmethod
    def of(cls, *children: "Sexp") -> "Sexp":
        return cls(children=children)

    @property
    def is_atom(self) -> bool:
        return self.atom is not None

    @property
    def is_list(self) -> bool:
        return self.atom is None

    def __str__(self) -> str:
        from .parser import to_text
        return to_text(self)


class ParseStatus(Enum):
    EMPTY = "empty"
    INCOMPLETE = "incomplete"
    MALFORMED = "malformed"
    OK = "ok"


@dataclass(frozen=True)
class ParseResult:
    status: ParseStatus
    tree: Optional[Sexp] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.OK
