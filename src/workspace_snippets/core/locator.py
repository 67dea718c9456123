"""Find git_override and http_archive stanzas in arbitrary text.

A stanza starts at a line like ``http_archive(`` and ends at the next line
that consists of the same prefix followed by a closing parenthesis. The
prefix is the leading whitespace plus an optional run of comment markers
(``#``, ``//``), so stanzas that are commented out line by line are found
as well.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from ..errors import StanzaNotFoundError, UnterminatedStanzaError


class StanzaKind(Enum):
    """Rules whose stanzas get updated."""
    GIT_OVERRIDE = "git_override"
    HTTP_ARCHIVE = "http_archive"


BEGIN_PATTERN = re.compile(
    r'^([ \t]*(?://+|#+)?[ \t]*)(' + '|'.join(kind.value for kind in StanzaKind) + r')\((?=\r?$)',
    re.MULTILINE,
)


@dataclass(frozen=True)
class Stanza:
    """A located stanza.

    ``start`` is the offset of the begin marker line including its prefix,
    ``end`` the offset just past the closing parenthesis. ``text`` is
    ``content[start:end]``.
    """
    kind: StanzaKind
    prefix: str
    start: int
    end: int
    text: str
    line: int  # 1-based line number of the begin marker


def _end_pattern(prefix: str) -> "re.Pattern[str]":
    return re.compile(rf'^{re.escape(prefix)}[ \t]*\)(?=\r?$)', re.MULTILINE)


def find_stanzas(content: str) -> Iterator[Stanza]:
    """Yield the stanzas of ``content`` in order.

    Raises:
        UnterminatedStanzaError: If a begin marker has no matching end marker.
        StanzaNotFoundError: If ``content`` has no begin marker at all.
    """
    found = False
    pos = 0
    while True:
        begin = BEGIN_PATTERN.search(content, pos)
        if begin is None:
            break
        prefix = begin.group(1)
        kind = StanzaKind(begin.group(2))
        line = content.count('\n', 0, begin.start()) + 1
        end = _end_pattern(prefix).search(content, begin.end())
        if end is None:
            raise UnterminatedStanzaError(kind.value, line)
        found = True
        yield Stanza(
            kind=kind,
            prefix=prefix,
            start=begin.start(),
            end=end.end(),
            text=content[begin.start():end.end()],
            line=line,
        )
        pos = end.end()
    if not found:
        raise StanzaNotFoundError("no git_override or http_archive stanza found")


def strip_prefix(text: str, prefix: str) -> Optional[str]:
    """Remove ``prefix`` from every line of ``text``.

    A line consisting of the prefix without its trailing whitespace becomes
    empty. Returns None if any other line doesn't start with the prefix.
    """
    bare = prefix.rstrip()
    lines = []
    for line in text.split('\n'):
        if line.startswith(prefix):
            lines.append(line[len(prefix):])
        elif line == bare:
            lines.append('')
        else:
            return None
    return '\n'.join(lines)


def apply_prefix(text: str, prefix: str) -> str:
    """Prepend ``prefix`` to every line of ``text``, without trailing whitespace on empty lines."""
    bare = prefix.rstrip()
    return '\n'.join(prefix + line if line else bare for line in text.split('\n'))
