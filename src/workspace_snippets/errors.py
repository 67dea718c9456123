"""Error types raised while updating workspace snippets."""


class UpdaterError(Exception):
    """Base class for all errors raised by the updater."""


class ConfigurationError(UpdaterError):
    """The environment can't be used: bad arguments, repository or remotes.

    Fatal for the whole run.
    """


class NetworkError(UpdaterError):
    """Listing the remote or downloading the archive failed. Fatal for the whole run."""


class FileUpdateError(UpdaterError):
    """A single file couldn't be updated. Other files are still processed."""


class StanzaError(ValueError):
    """Base class for stanza boundary errors found by the locator."""


class StanzaNotFoundError(StanzaError):
    """No begin marker was found anywhere in the content."""


class UnterminatedStanzaError(StanzaError):
    """A begin marker has no matching end marker."""

    def __init__(self, kind: str, line: int):
        super().__init__(f"{kind} stanza starting on line {line} is not properly terminated")
        self.kind = kind
        self.line = line


class BuildSyntaxError(ValueError):
    """A stanza body isn't valid build-file syntax."""

    def __init__(self, message: str, line: int = 0):
        if line:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line
