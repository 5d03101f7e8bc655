"""
Tests for the Protocol Parser

These tests verify the ProtocolParser class:
- parse_request(): Parse raw commands into Command objects
- format_response(): Format Response objects into protocol strings

Run with: python -m pytest tests/test_protocol.py -v
"""

import json

import pytest
from bucketkv.protocol.parser import ProtocolParser
from bucketkv.protocol.commands import Command, CommandType, Response, ResponseStatus


class TestParseKeyValueCommands:
    """Test parsing SET and UPDATE."""

    def test_parse_set_basic(self, parser: ProtocolParser):
        cmd = parser.parse_request("SET key value")

        assert cmd.type == CommandType.SET
        assert cmd.key == "key"
        assert cmd.value == "value"

    def test_parse_set_value_with_spaces(self, parser: ProtocolParser):
        cmd = parser.parse_request("SET greeting hello big world\n")

        assert cmd.type == CommandType.SET
        assert cmd.key == "greeting"
        assert cmd.value == "hello big world"

    def test_parse_update(self, parser: ProtocolParser):
        cmd = parser.parse_request("UPDATE key new:value")

        assert cmd.type == CommandType.UPDATE
        assert cmd.key == "key"
        assert cmd.value == "new:value"

    def test_parse_case_insensitive(self, parser: ProtocolParser):
        for variant in ["set", "SET", "Set", "sEt"]:
            cmd = parser.parse_request(f"{variant} key value")
            assert cmd.type == CommandType.SET, f"Failed for '{variant}'"

    @pytest.mark.parametrize("raw", ["SET", "SET key", "UPDATE", "UPDATE key"])
    def test_missing_arguments(self, parser: ProtocolParser, raw):
        assert parser.parse_request(raw).type == CommandType.UNKNOWN

    def test_key_too_long(self, parser: ProtocolParser):
        key = "k" * (parser.max_key_length + 1)
        assert parser.parse_request(f"SET {key} v").type == CommandType.UNKNOWN

    def test_value_too_long(self, parser: ProtocolParser):
        value = "v" * (parser.max_value_length + 1)
        assert parser.parse_request(f"SET k {value}").type == CommandType.UNKNOWN

    def test_key_at_max_length(self, parser: ProtocolParser):
        key = "k" * parser.max_key_length
        cmd = parser.parse_request(f"SET {key} v")
        assert cmd.type == CommandType.SET
        assert cmd.key == key


class TestParseKeyCommands:
    """Test parsing single-argument commands."""

    @pytest.mark.parametrize("name,expected", [
        ("GET", CommandType.GET),
        ("DELETE", CommandType.DELETE),
        ("EXISTS", CommandType.EXISTS),
        ("BUCKET", CommandType.BUCKET),
        ("PREFIX", CommandType.PREFIX),
        ("USER", CommandType.USER),
    ])
    def test_parse(self, parser: ProtocolParser, name, expected):
        cmd = parser.parse_request(f"{name.lower()} user1")

        assert cmd.type == expected
        assert cmd.key == "user1"
        assert cmd.value == ""

    @pytest.mark.parametrize("raw", ["GET", "GET a b", "DELETE", "EXISTS x y"])
    def test_wrong_argument_count(self, parser: ProtocolParser, raw):
        assert parser.parse_request(raw).type == CommandType.UNKNOWN


class TestParseNoArgCommands:
    """Test parsing commands without arguments."""

    @pytest.mark.parametrize("name,expected", [
        ("KEYS", CommandType.KEYS),
        ("BUCKETS", CommandType.BUCKETS),
        ("LOADFACTOR", CommandType.LOADFACTOR),
        ("QUIT", CommandType.QUIT),
        ("quit", CommandType.QUIT),
    ])
    def test_parse(self, parser: ProtocolParser, name, expected):
        assert parser.parse_request(name).type == expected

    def test_extra_arguments(self, parser: ProtocolParser):
        assert parser.parse_request("KEYS now").type == CommandType.UNKNOWN
        assert parser.parse_request("QUIT please").type == CommandType.UNKNOWN


class TestParseInvalid:
    """Test malformed input."""

    @pytest.mark.parametrize("raw", ["", "   ", "\n", "PUT key value", "FLY away", "UNKNOWN x"])
    def test_unknown(self, parser: ProtocolParser, raw):
        cmd = parser.parse_request(raw)
        assert cmd.type == CommandType.UNKNOWN
        assert cmd.is_valid is False


class TestCommandValidity:
    """Test Command.is_valid."""

    def test_set_requires_key_and_value(self):
        assert Command(CommandType.SET, key="k", value="v").is_valid
        assert not Command(CommandType.SET, key="k").is_valid
        assert not Command(CommandType.SET, value="v").is_valid

    def test_get_requires_key(self):
        assert Command(CommandType.GET, key="k").is_valid
        assert not Command(CommandType.GET).is_valid

    def test_no_arg_commands_always_valid(self):
        assert Command(CommandType.KEYS).is_valid
        assert Command(CommandType.QUIT).is_valid


class TestFormatResponse:
    """Test format_response()."""

    def test_simple_messages(self, parser: ProtocolParser):
        assert parser.format_response(Response.created()) == "OK created\n"
        assert parser.format_response(Response.updated()) == "OK updated\n"
        assert parser.format_response(Response.deleted()) == "OK deleted\n"

    def test_errors(self, parser: ProtocolParser):
        assert parser.format_response(Response.key_not_found()) == "ERROR key not found\n"
        assert parser.format_response(Response.key_exists()) == "ERROR key already exists\n"

    def test_exists(self, parser: ProtocolParser):
        assert parser.format_response(Response.exists_response(True)) == "OK 1\n"
        assert parser.format_response(Response.exists_response(False)) == "OK 0\n"

    def test_value(self, parser: ProtocolParser):
        assert parser.format_response(Response.value_response("hello world")) == "OK hello world\n"

    def test_value_with_newline_stays_on_one_line(self, parser: ProtocolParser):
        line = parser.format_response(Response.value_response("a\nb"))
        assert line == "OK a\\nb\n"
        assert line.count("\n") == 1

    def test_json(self, parser: ProtocolParser):
        line = parser.format_response(Response.json_response({"count": 1, "keys": ["k"]}))
        assert line == 'OK {"count":1,"keys":["k"]}\n'

    def test_empty_body(self, parser: ProtocolParser):
        assert parser.format_response(Response.ok()) == "OK\n"

    def test_status_values(self):
        assert Response.ok().status == ResponseStatus.OK
        assert Response.error("x").status == ResponseStatus.ERROR
        assert json.loads(Response.json_response([1, 2]).value) == [1, 2]
