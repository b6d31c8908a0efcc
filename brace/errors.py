from brace.types import ErrorVal


class BraceError(Exception):
    """Exception type used to report fatal Brace errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err

    @property
    def name(self) -> str:
        return self.err.name


class ScanError(BraceError):
    """Malformed program text, detected before execution starts."""


class ExecutionError(BraceError):
    """Error raised while a program is running."""


class SourceError(BraceError):
    """A program source could not be opened."""
