"""Rewrite commit hashes, checksums and dates inside a single stanza.

The stanza text is located by :mod:`.locator`; here it is parsed into a
syntax tree, transformed and printed again. Stanzas that can't be parsed
are returned untouched.
"""

import re
from dataclasses import dataclass, replace
from typing import Callable, Dict

from ..buildfile import (
    Assign,
    BinaryExpr,
    Call,
    Comments,
    DictEntry,
    DictExpr,
    DotExpr,
    File,
    ListExpr,
    Node,
    String,
    format_file,
    parse,
)
from ..errors import BuildSyntaxError
from ..models.context import UpdateContext
from .locator import Stanza, apply_prefix, strip_prefix

DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
HEX_PATTERN = re.compile(r'[0-9A-Fa-f]*')
ARCHIVE_URL_PATTERN = re.compile(r'(.*/)[0-9A-Fa-f]*(\.zip)', re.DOTALL)
# "repo-<hash>", optionally followed by a subdirectory
STRIP_PREFIX_PATTERN = re.compile(r'([^/]*-)[0-9A-Fa-f]*((?:/.*)?)', re.DOTALL)


@dataclass(frozen=True)
class StanzaRewrite:
    """Result of rewriting one stanza; ``parsed`` is False if it was passed through."""
    text: str
    parsed: bool


def rewrite_stanza(stanza: Stanza, context: UpdateContext) -> StanzaRewrite:
    """Rewrite ``stanza`` for ``context``, preserving its line prefix and line endings."""
    crlf = '\r\n' in stanza.text
    body = strip_prefix(stanza.text.replace('\r\n', '\n'), stanza.prefix)
    if body is None:
        return StanzaRewrite(stanza.text, parsed=False)
    try:
        tree = parse(body)
    except BuildSyntaxError:
        return StanzaRewrite(stanza.text, parsed=False)
    text = format_file(rewrite(tree, context))
    if text.endswith('\n'):
        text = text[:-1]
    text = apply_prefix(text, stanza.prefix)
    if crlf:
        text = text.replace('\n', '\r\n')
    return StanzaRewrite(text, parsed=True)


def rewrite(node: Node, context: UpdateContext) -> Node:
    """Return a copy of ``node`` with hashes, checksums and date comments updated."""
    comments = _rewrite_comments(node.comments, context.date)
    if isinstance(node, File):
        node = replace(node, statements=tuple(rewrite(s, context) for s in node.statements))
    elif isinstance(node, Call):
        node = replace(node, func=rewrite(node.func, context),
                       args=tuple(rewrite(a, context) for a in node.args))
    elif isinstance(node, ListExpr):
        node = replace(node, items=tuple(rewrite(i, context) for i in node.items))
    elif isinstance(node, DictExpr):
        node = replace(node, entries=tuple(rewrite(e, context) for e in node.entries))
    elif isinstance(node, DictEntry):
        node = replace(node, key=rewrite(node.key, context), value=rewrite(node.value, context))
    elif isinstance(node, DotExpr):
        node = replace(node, target=rewrite(node.target, context))
    elif isinstance(node, BinaryExpr):
        node = replace(node, left=rewrite(node.left, context), right=rewrite(node.right, context))
    elif isinstance(node, Assign):
        value = rewrite(node.value, context)
        field = _FIELDS.get(node.name.name)
        if field is not None:
            value = field(value, context)
        node = replace(node, value=value)
    if comments != node.comments:
        node = replace(node, comments=comments)
    return node


def _rewrite_comments(comments: Comments, date: str) -> Comments:
    if not comments:
        return comments

    def update(lines):
        return tuple(DATE_PATTERN.sub(date, line) for line in lines)

    return Comments(
        before=update(comments.before),
        suffix=update(comments.suffix),
        after=update(comments.after),
    )


def _commit(value: Node, context: UpdateContext) -> Node:
    if isinstance(value, String) and HEX_PATTERN.fullmatch(value.value):
        return value.with_value(context.commit_hash)
    return value


def _urls(value: Node, context: UpdateContext) -> Node:
    if not isinstance(value, ListExpr) or len(value.items) != 1:
        return value
    item = value.items[0]
    if not isinstance(item, String):
        return value
    match = ARCHIVE_URL_PATTERN.fullmatch(item.value)
    if match is None:
        return value
    url = match.group(1) + context.commit_hash + match.group(2)
    return replace(value, items=(item.with_value(url),))


def _sha256(value: Node, context: UpdateContext) -> Node:
    if isinstance(value, String) and HEX_PATTERN.fullmatch(value.value):
        return value.with_value(context.archive_checksum)
    return value


def _integrity(value: Node, context: UpdateContext) -> Node:
    if isinstance(value, String) and context.archive_integrity:
        return value.with_value(context.archive_integrity)
    return value


def _strip_prefix(value: Node, context: UpdateContext) -> Node:
    if not isinstance(value, String):
        return value
    match = STRIP_PREFIX_PATTERN.fullmatch(value.value)
    if match is None:
        return value
    return value.with_value(match.group(1) + context.commit_hash + match.group(2))


_FIELDS: Dict[str, Callable[[Node, UpdateContext], Node]] = {
    'commit': _commit,
    'urls': _urls,
    'sha256': _sha256,
    'integrity': _integrity,
    'strip_prefix': _strip_prefix,
}
