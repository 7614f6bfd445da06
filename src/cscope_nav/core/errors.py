class CscopeNavError(Exception):
    """Base class for errors raised by cscope-nav."""


class SpawnFailure(CscopeNavError):
    """The indexer process could not be started."""

    def __init__(self, command: str, cause: OSError) -> None:
        super().__init__(f"cannot run {command!r}: {cause}")
        self.command = command
        self.cause = cause


class ProcessFailure(CscopeNavError):
    """The indexer process exited with a nonzero status."""

    def __init__(self, exit_code: int, stderr: str) -> None:
        super().__init__(stderr or f"process exited with code {exit_code}")
        self.exit_code = exit_code
        self.stderr = stderr


class ParseError(CscopeNavError):
    """An output line does not have the ``file function line text`` shape."""

    def __init__(self, line: str) -> None:
        super().__init__(f"cannot parse: {line!r}")
        self.line = line
