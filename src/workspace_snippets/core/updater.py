"""Update workspace snippets in files."""

import os
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import requests

from ..errors import FileUpdateError, StanzaNotFoundError, UnterminatedStanzaError
from ..models.context import UpdateContext
from .archive import archive_url, fetch_archive_metadata
from .locator import Stanza, find_stanzas
from .remote import resolve_remote_head
from .rewriter import rewrite_stanza


def build_context(directory: str, url_prefix: str, session: Optional[requests.Session] = None,
                  timeout: float = 60) -> UpdateContext:
    """Resolve the latest commit of the GitHub remote and describe its archive.

    This performs all network access of a run, before any file is touched.

    Raises:
        ConfigurationError: If the repository or its remotes can't be used.
        NetworkError: If the remote or the archive can't be fetched.
    """
    head = resolve_remote_head(directory, url_prefix)
    metadata = fetch_archive_metadata(archive_url(head.url, head.commit_hash), session, timeout)
    return UpdateContext.from_metadata(head, metadata)


@dataclass
class FileUpdate:
    """Outcome of updating one file."""
    path: Path
    changed: bool
    skipped_stanzas: List[Stanza] = field(default_factory=list)


class Updater:
    """Updates Bazel workspace and module snippets for one resolved commit."""

    def __init__(self, context: UpdateContext):
        self.context = context

    @classmethod
    def from_repository(cls, directory: str, url_prefix: str,
                        session: Optional[requests.Session] = None,
                        timeout: float = 60) -> "Updater":
        """Create an updater for the GitHub remote of the repository containing ``directory``."""
        return cls(build_context(directory, url_prefix, session, timeout))

    def update_text(self, content: str) -> Tuple[str, List[Stanza]]:
        """Rewrite every stanza in ``content``.

        Returns:
            The new content and the stanzas that couldn't be parsed and were
            left as they are.

        Raises:
            StanzaNotFoundError: If ``content`` has no stanza.
            UnterminatedStanzaError: If a stanza has no closing parenthesis.
        """
        out = []
        skipped = []
        pos = 0
        for stanza in find_stanzas(content):
            out.append(content[pos:stanza.start])
            result = rewrite_stanza(stanza, self.context)
            if not result.parsed:
                skipped.append(stanza)
            out.append(result.text)
            pos = stanza.end
        out.append(content[pos:])
        return ''.join(out), skipped

    def update(self, file: Union[str, Path], dry_run: bool = False) -> FileUpdate:
        """Update commit hashes, archive checksums and dates within ``file``.

        The file must contain at least one stanza of the form::

            http_archive(
                name = "...",
                urls = ["https://github.com/owner/repo/archive/<hash>.zip"],
                sha256 = "...",
                strip_prefix = "repo-<hash>",
            )

        or a ``git_override`` stanza with a ``commit`` field. The file is
        replaced atomically; nothing is written if any stanza is malformed.

        Raises:
            FileUpdateError: If the file can't be read, updated or written.
        """
        path = Path(file)
        try:
            content = path.read_bytes().decode('utf-8')
        except OSError as e:
            raise FileUpdateError(f"can't read file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise FileUpdateError(f"file {path} isn't valid UTF-8: {e}") from e

        try:
            updated, skipped = self.update_text(content)
        except StanzaNotFoundError as e:
            raise FileUpdateError(f"no git_override or http_archive stanza in file {path}") from e
        except UnterminatedStanzaError as e:
            raise FileUpdateError(f"file {path}: {e}") from e

        changed = updated != content
        if not dry_run:
            write_atomically(path, updated.encode('utf-8'))
        return FileUpdate(path=path, changed=changed, skipped_stanzas=skipped)


def write_atomically(path: Path, data: bytes):
    """Replace ``path`` with ``data`` through a temporary file in the same directory."""
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
        fd, temp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
    except OSError as e:
        raise FileUpdateError(f"can't create temporary output file for {path}: {e}") from e
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.chmod(temp, mode)
        os.replace(temp, path)
    except OSError as e:
        try:
            os.unlink(temp)
        except FileNotFoundError:
            pass
        raise FileUpdateError(f"can't write {path}: {e}") from e
