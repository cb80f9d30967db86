"""Classified failures raised by parsers and caught by the aggregators."""

from .models import ErrorKind, ToolError


class ToolFailure(Exception):
    """A tool's output could not be turned into a payload."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_error(self) -> ToolError:
        return ToolError(kind=self.kind, message=self.message)


class NotInstalled(ToolFailure):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.NOT_INSTALLED, message)


class NotAuthenticated(ToolFailure):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.NOT_AUTHENTICATED, message)


class CommandFailed(ToolFailure):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.COMMAND_FAILED, message)


class ParseFailure(ToolFailure):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.PARSE_FAILURE, message)
