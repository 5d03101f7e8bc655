"""
Protocol Command and Response Definitions

Data structures for commands sent to the TCP front end and the
responses it returns.
"""

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


class CommandType(Enum):
    """Enumeration of supported command types."""
    SET = auto()
    GET = auto()
    UPDATE = auto()
    DELETE = auto()
    EXISTS = auto()
    KEYS = auto()
    BUCKETS = auto()
    BUCKET = auto()
    LOADFACTOR = auto()
    PREFIX = auto()
    USER = auto()
    QUIT = auto()
    UNKNOWN = auto()


# Commands that take no arguments
NO_ARG_COMMANDS = (CommandType.KEYS, CommandType.BUCKETS, CommandType.LOADFACTOR, CommandType.QUIT)

# Commands that take exactly one key (or prefix / user id) argument
KEY_COMMANDS = (
    CommandType.GET,
    CommandType.DELETE,
    CommandType.EXISTS,
    CommandType.BUCKET,
    CommandType.PREFIX,
    CommandType.USER,
)

# Commands that take a key and a value
KEY_VALUE_COMMANDS = (CommandType.SET, CommandType.UPDATE)


class ResponseStatus(Enum):
    """Enumeration of response statuses."""
    OK = "OK"
    ERROR = "ERROR"


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        key: The key (or prefix / user id) argument, empty if not applicable
        value: The value for SET and UPDATE, empty otherwise
        raw: The original raw command string
    """
    type: CommandType
    key: str = ""
    value: str = ""
    raw: str = ""

    def __post_init__(self):
        self.key = str(self.key) if self.key else ""
        self.value = str(self.value) if self.value else ""

    @property
    def is_valid(self) -> bool:
        """Check if the command carries the arguments its type needs."""
        if self.type == CommandType.UNKNOWN:
            return False
        if self.type in NO_ARG_COMMANDS:
            return True
        if self.type in KEY_COMMANDS:
            return bool(self.key)
        if self.type in KEY_VALUE_COMMANDS:
            return bool(self.key) and bool(self.value)
        return False


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or ERROR
        message: Response message or error description
        value: The value returned (for GET and structured replies)
    """
    status: ResponseStatus
    message: str = ""
    value: Optional[str] = None

    @classmethod
    def ok(cls, message: str = "", value: Optional[str] = None) -> "Response":
        """Create a successful response."""
        return cls(status=ResponseStatus.OK, message=message, value=value)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def created(cls) -> "Response":
        return cls.ok(message="created")

    @classmethod
    def updated(cls) -> "Response":
        return cls.ok(message="updated")

    @classmethod
    def deleted(cls) -> "Response":
        return cls.ok(message="deleted")

    @classmethod
    def key_not_found(cls) -> "Response":
        return cls.error(message="key not found")

    @classmethod
    def key_exists(cls) -> "Response":
        return cls.error(message="key already exists")

    @classmethod
    def exists_response(cls, exists: bool) -> "Response":
        """Create an EXISTS response."""
        return cls.ok(message="1" if exists else "0")

    @classmethod
    def value_response(cls, value: str) -> "Response":
        """Create a GET response with a value."""
        return cls.ok(value=value)

    @classmethod
    def json_response(cls, payload: Any) -> "Response":
        """Create a response carrying a compact JSON document."""
        return cls.ok(value=json.dumps(payload, separators=(",", ":")))
