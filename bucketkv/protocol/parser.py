"""
Protocol Parser Module

Parses raw protocol lines into Command objects and formats Response
objects back into protocol lines.
"""

from .commands import (
    Command,
    CommandType,
    KEY_COMMANDS,
    KEY_VALUE_COMMANDS,
    NO_ARG_COMMANDS,
    Response,
)
from ..config.settings import settings


class ProtocolParser:
    """
    Parser for the bucketkv text protocol.

    Protocol Format:
        Request:  <COMMAND> [ARGS...]\\n
        Response: <STATUS> [DATA]\\n

    Commands:
        SET <key> <value>        -> OK created | ERROR key already exists
        GET <key>                -> OK <value> | ERROR key not found
        UPDATE <key> <value>     -> OK updated | ERROR key not found
        DELETE <key>             -> OK deleted | ERROR key not found
        EXISTS <key>             -> OK 1 | OK 0
        KEYS                     -> OK {"count":..,"keys":[..],"data":{..}}
        BUCKETS                  -> OK {"totalBuckets":..,...}
        BUCKET <key>             -> OK {"key":..,"bucketIndex":..,...}
        LOADFACTOR               -> OK {"currentLoadFactor":..,...}
        PREFIX <prefix>          -> OK [..]
        USER <id>                -> OK {"userId":..,"data":{..}} | ERROR user not found
        QUIT                     -> (connection closed)

    Constraints:
        - Keys: max MAX_KEY_LENGTH characters, no whitespace
        - Values: max MAX_VALUE_LENGTH characters, the rest of the line
    """

    def __init__(self):
        """Initialize the parser with constraints from settings."""
        self.max_key_length = settings.MAX_KEY_LENGTH
        self.max_value_length = settings.MAX_VALUE_LENGTH

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request string into a Command object.

        Args:
            data: Raw request string (may include trailing newline)

        Returns:
            Command object representing the parsed request.
            Returns Command with type=UNKNOWN for invalid/malformed requests.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("SET greeting hello world")
            >>> cmd.type == CommandType.SET
            True
            >>> cmd.value
            'hello world'
        """
        raw = data.strip()
        if not raw:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        name = raw.split(None, 1)[0].upper()
        command_type = CommandType.__members__.get(name)
        if command_type is None or command_type == CommandType.UNKNOWN:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        if command_type in NO_ARG_COMMANDS:
            return self._parse_no_args(command_type, raw)
        if command_type in KEY_COMMANDS:
            return self._parse_key(command_type, raw)
        if command_type in KEY_VALUE_COMMANDS:
            return self._parse_key_value(command_type, raw)

        return Command(type=CommandType.UNKNOWN, raw=raw)

    def _parse_no_args(self, command_type: CommandType, raw: str) -> Command:
        """
        Parse a command without arguments.

        Format: KEYS | BUCKETS | LOADFACTOR | QUIT
        """
        if len(raw.split()) != 1:
            return Command(type=CommandType.UNKNOWN, raw=raw)
        return Command(type=command_type, raw=raw)

    def _parse_key(self, command_type: CommandType, raw: str) -> Command:
        """
        Parse a single-argument command.

        Format: <COMMAND> <key>
        """
        parts = raw.split()
        if len(parts) != 2:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        key = parts[1]
        if len(key) > self.max_key_length:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        return Command(type=command_type, key=key, raw=raw)

    def _parse_key_value(self, command_type: CommandType, raw: str) -> Command:
        """
        Parse a SET or UPDATE command.

        Format: <COMMAND> <key> <value...>

        The value is everything after the key, inner spaces included.
        """
        parts = raw.split(None, 2)
        if len(parts) != 3:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        key, value = parts[1], parts[2]
        if len(key) > self.max_key_length or len(value) > self.max_value_length:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        return Command(type=command_type, key=key, value=value, raw=raw)

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Args:
            response: Response object to format

        Returns:
            Formatted response string WITH trailing newline. Newlines inside
            the body are sent as a backslash followed by 'n'.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.created())
            'OK created\\n'
            >>> parser.format_response(Response.error("key not found"))
            'ERROR key not found\\n'
        """
        prefix = response.status.value

        if response.value is not None:
            body = response.value
        else:
            body = response.message

        if body:
            body = body.replace("\n", "\\n")
            return f"{prefix} {body}\n"
        return f"{prefix}\n"
