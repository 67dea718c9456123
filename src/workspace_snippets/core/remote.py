"""Resolve the GitHub remote of a local repository and its default-branch commit."""

from typing import List, Optional, Tuple

from git import Remote, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import ConfigurationError, NetworkError
from ..models.context import RemoteHead


def resolve_remote_head(directory: str, url_prefix: str) -> RemoteHead:
    """Find the remote whose URL starts with ``url_prefix`` and its HEAD commit.

    Args:
        directory: Any directory inside a checked-out Git repository.
        url_prefix: Required URL prefix, normally ``https://github.com/``.

    Returns:
        RemoteHead: The remote URL and the hash its default branch points to.

    Raises:
        ConfigurationError: If the arguments are empty, ``directory`` isn't in a
            Git repository, or there isn't exactly one matching remote with a
            HEAD reference.
        NetworkError: If listing the remote references fails.
    """
    if not url_prefix:
        raise ConfigurationError("empty URL prefix")
    if not directory:
        raise ConfigurationError("empty directory")
    try:
        repo = Repo(directory, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise ConfigurationError(f"can't open Git repository in {directory}: {e}") from e

    try:
        remote, url = _matching_remote(repo, url_prefix)
    except ConfigurationError as e:
        raise ConfigurationError(f"no GitHub remote for Git repository in {directory}: {e}") from e
    return RemoteHead(url=url, commit_hash=_default_branch_hash(repo, remote))


def _matching_remote(repo: Repo, prefix: str) -> Tuple[Remote, str]:
    matches: List[Tuple[Remote, str]] = []
    for remote in repo.remotes:
        url = _matching_url(remote, prefix)
        if url is not None:
            matches.append((remote, url))
    if not matches:
        raise ConfigurationError(f"no remote URL starts with {prefix}")
    if len(matches) > 1:
        names = ', '.join(remote.name for remote, _ in matches)
        raise ConfigurationError(f"multiple remotes match {prefix}: {names}")
    return matches[0]


def _matching_url(remote: Remote, prefix: str) -> Optional[str]:
    for url in remote.urls:
        if url.startswith(prefix):
            return url
    return None


def _default_branch_hash(repo: Repo, remote: Remote) -> str:
    """Ask the remote which commit its HEAD points to."""
    try:
        output = repo.git.ls_remote(remote.name, 'HEAD')
    except GitCommandError as e:
        raise NetworkError(f"can't list remote {remote.name}: {e}") from e
    for line in output.splitlines():
        fields = line.split('\t')
        if len(fields) == 2 and fields[1] == 'HEAD':
            return fields[0]
    raise ConfigurationError(f"no default branch reference in remote {remote.name} found")
