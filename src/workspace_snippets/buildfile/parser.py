"""Recursive-descent parser for build-file snippets.

Tokens come from the standard library ``tokenize`` module: the snippet
grammar is lexically a subset of Python, so its tokenizer already knows
about string quoting, bracket nesting and comments.
"""

import ast
import io
from dataclasses import replace
import keyword
import tokenize
from typing import Callable, List, Optional, Tuple

from ..errors import BuildSyntaxError
from .syntax import (
    Assign,
    BinaryExpr,
    Call,
    Comments,
    DictEntry,
    DictExpr,
    DotExpr,
    File,
    Ident,
    ListExpr,
    Node,
    Number,
    String,
)

_CONSTANTS = frozenset({'True', 'False', 'None'})


def parse(source: str) -> File:
    """Parse ``source`` into a syntax tree.

    Raises:
        BuildSyntaxError: If the source uses anything outside the supported subset.
    """
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(source).readline))
    except (tokenize.TokenError, SyntaxError) as e:
        raise BuildSyntaxError(f"can't tokenize: {e}") from e
    try:
        return _Parser(tokens).parse_file()
    except RecursionError as e:
        raise BuildSyntaxError("nesting too deep") from e


def _attach(node: Node, before=(), suffix=()) -> Node:
    """Return ``node`` with extra comments around it."""
    if not before and not suffix:
        return node
    comments = Comments(
        before=tuple(before) + node.comments.before,
        suffix=node.comments.suffix + tuple(suffix),
        after=node.comments.after,
    )
    return replace(node, comments=comments)


def _strip_blanks(comments: List[str]) -> List[str]:
    """Drop blank lines directly after an opening bracket or at the start of the file."""
    while comments and not comments[0]:
        comments = comments[1:]
    return comments


class _Parser:
    def __init__(self, tokens: List[tokenize.TokenInfo]):
        self.tokens = tokens
        self.pos = 0
        self.last: Optional[tokenize.TokenInfo] = None

    # Token helpers

    @property
    def current(self) -> tokenize.TokenInfo:
        return self.tokens[self.pos]

    def _advance(self) -> tokenize.TokenInfo:
        token = self.tokens[self.pos]
        if token.type != tokenize.ENDMARKER:
            self.pos += 1
        self.last = token
        return token

    def _at_op(self, op: str) -> bool:
        token = self.current
        return token.type == tokenize.OP and token.string == op

    def _accept_op(self, op: str) -> bool:
        if self._at_op(op):
            self._advance()
            return True
        return False

    def _expect_op(self, op: str) -> tokenize.TokenInfo:
        if not self._at_op(op):
            self._fail(f"expected {op!r}")
        return self._advance()

    def _fail(self, message: str):
        token = self.current
        found = token.string or tokenize.tok_name[token.type]
        raise BuildSyntaxError(f"{message}, found {found!r}", token.start[0])

    def _skip_newlines(self):
        while self.current.type in (tokenize.NL, tokenize.NEWLINE):
            self._advance()
        if self.current.type == tokenize.COMMENT:
            self._fail("comment inside an expression")

    def _line_comments(self) -> List[str]:
        """Consume blank lines and own-line comments, returning the comments.

        A run of blank lines is returned as a single empty string.
        """
        comments = []
        while self.current.type in (tokenize.NL, tokenize.NEWLINE, tokenize.COMMENT):
            token = self._advance()
            if token.type == tokenize.COMMENT:
                comments.append(token.string.rstrip())
            elif not token.line.strip() and comments[-1:] != ['']:
                comments.append('')
        return comments

    def _suffix(self) -> List[str]:
        """Consume a comment on the same line as the last consumed token."""
        token = self.current
        if (token.type == tokenize.COMMENT and self.last is not None
                and token.start[0] == self.last.end[0]):
            self._advance()
            return [token.string.rstrip()]
        return []

    # Grammar

    def parse_file(self) -> File:
        statements = []
        while True:
            before = self._line_comments()
            if not statements:
                before = _strip_blanks(before)
            token = self.current
            if token.type == tokenize.ENDMARKER:
                while before and not before[-1]:
                    before.pop()
                return File(tuple(statements), comments=Comments(after=tuple(before)))
            if token.type in (tokenize.INDENT, tokenize.DEDENT):
                self._fail("unexpected indentation")
            statement = self._statement()
            suffix = self._suffix()
            if self.current.type not in (tokenize.NEWLINE, tokenize.NL, tokenize.ENDMARKER):
                self._fail("expected end of statement")
            statements.append(_attach(statement, before, suffix))

    def _statement(self) -> Node:
        expr = self._expression()
        if isinstance(expr, Ident) and self._accept_op('='):
            return Assign(expr, self._expression())
        return expr

    def _expression(self) -> Node:
        left = self._postfix()
        while self._at_op('+'):
            self._advance()
            left = BinaryExpr(left, '+', self._postfix())
        return left

    def _postfix(self) -> Node:
        expr = self._primary()
        while True:
            if self._accept_op('.'):
                name = self._advance()
                if name.type != tokenize.NAME:
                    self._fail("expected attribute name")
                expr = DotExpr(expr, name.string)
            elif self._at_op('('):
                expr = self._call(expr)
            else:
                return expr

    def _primary(self) -> Node:
        self._skip_newlines()
        token = self.current
        if token.type == tokenize.NAME:
            if keyword.iskeyword(token.string) and token.string not in _CONSTANTS:
                self._fail("unsupported keyword")
            self._advance()
            return Ident(token.string)
        if token.type == tokenize.NUMBER:
            self._advance()
            return Number(token.string)
        if self._at_op('-'):
            self._advance()
            number = self.current
            if number.type != tokenize.NUMBER:
                self._fail("expected number after '-'")
            self._advance()
            return Number('-' + number.string)
        if token.type == tokenize.STRING:
            self._advance()
            return String(self._string_value(token), token.string)
        if self._at_op('['):
            return self._list()
        if self._at_op('{'):
            return self._dict()
        self._fail("unexpected token")

    def _string_value(self, token: tokenize.TokenInfo) -> str:
        try:
            value = ast.literal_eval(token.string)
        except (ValueError, SyntaxError) as e:
            raise BuildSyntaxError(f"invalid string literal {token.string!r}", token.start[0]) from e
        if not isinstance(value, str):
            raise BuildSyntaxError(f"unsupported literal {token.string!r}", token.start[0])
        return value

    def _sequence(self, close: str, item: Callable[[], Node]) -> Tuple[List[Node], List[str], tokenize.TokenInfo]:
        """Parse comma-separated items up to and including ``close``.

        Returns the items, the comments just before the closing bracket and
        the closing token.
        """
        items = []
        while True:
            before = self._line_comments()
            if not items:
                before = _strip_blanks(before)
            if self._at_op(close):
                return items, before, self._advance()
            node = item()
            has_comma = self._accept_op(',')
            items.append(_attach(node, before, self._suffix()))
            if not has_comma:
                after = self._line_comments()
                return items, after, self._expect_op(close)

    def _call(self, func: Node) -> Call:
        opening = self._expect_op('(')
        args, after, closing = self._sequence(')', self._argument)
        return Call(
            func,
            tuple(args),
            multiline=closing.start[0] != opening.start[0],
            comments=Comments(after=tuple(after)),
        )

    def _argument(self) -> Node:
        token = self.current
        if token.type == tokenize.NAME:
            following = self.tokens[self.pos + 1]
            if following.type == tokenize.OP and following.string == '=':
                self._advance()
                self._advance()
                return Assign(Ident(token.string), self._expression())
        return self._expression()

    def _list(self) -> ListExpr:
        opening = self._expect_op('[')
        items, after, closing = self._sequence(']', self._expression)
        return ListExpr(
            tuple(items),
            multiline=closing.start[0] != opening.start[0],
            comments=Comments(after=tuple(after)),
        )

    def _dict(self) -> DictExpr:
        opening = self._expect_op('{')
        entries, after, closing = self._sequence('}', self._entry)
        return DictExpr(
            tuple(entries),
            multiline=closing.start[0] != opening.start[0],
            comments=Comments(after=tuple(after)),
        )

    def _entry(self) -> DictEntry:
        key = self._expression()
        self._expect_op(':')
        return DictEntry(key, self._expression())
