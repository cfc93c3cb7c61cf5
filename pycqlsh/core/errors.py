# Error taxonomy shared by the dispatcher, handlers and engines.
from enum import Enum, auto

class ErrorCategory(Enum):
    USAGE = auto()
    EXECUTION = auto()
    LOOKUP = auto()
    STATE = auto()
    IO = auto()
    CONNECTION = auto()
    INTERNAL = auto()

class ShellError(Exception):
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, *, category: ErrorCategory | None = None):
        super().__init__(message)
        if category:
            self.category = category

    @property
    def message(self) -> str:
        return str(self)

class UsageError(ShellError):
    category = ErrorCategory.USAGE

class ExecutionError(ShellError):
    category = ErrorCategory.EXECUTION

class MetadataLookupError(ShellError, LookupError):
    category = ErrorCategory.LOOKUP

class StateError(ShellError):
    category = ErrorCategory.STATE

class ScriptFileError(ShellError):
    category = ErrorCategory.IO

class EngineConnectionError(ShellError):
    category = ErrorCategory.CONNECTION

__all__ = [
    'ErrorCategory', 'ShellError', 'UsageError', 'ExecutionError', 'MetadataLookupError',
    'StateError', 'ScriptFileError', 'EngineConnectionError'
]
