#!/usr/bin/env python3
"""
Interactive Client for bucketkv

A small command-line client for poking at a running bucketkv server.
Structured replies (KEYS, BUCKETS, BUCKET, LOADFACTOR, PREFIX, USER) are
pretty-printed.

Usage:
    python scripts/client.py                  # Connect to localhost:3000
    python scripts/client.py --host 1.2.3.4   # Connect to specific host
    python scripts/client.py --port 8080      # Connect to specific port
"""

import argparse
import json
import socket
import sys

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass

STRUCTURED_COMMANDS = ("KEYS", "BUCKETS", "BUCKET", "LOADFACTOR", "PREFIX", "USER")


class BucketKVClient:
    """Blocking line client for the bucketkv protocol."""

    def __init__(self, host: str, port: int, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock = None
        self._file = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> bool:
        """Connect to the server."""
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            print(f"Connection error: {e}")
            self._sock = None
            return False
        self._file = self._sock.makefile("rb")
        return True

    def disconnect(self) -> None:
        """Disconnect from the server."""
        if self._file:
            self._file.close()
            self._file = None
        if self._sock:
            self._sock.close()
            self._sock = None

    def send_command(self, command: str) -> str:
        """Send one command line and return the response line."""
        if not self._sock:
            return "ERROR not connected"

        try:
            self._sock.sendall(command.rstrip("\n").encode("utf-8") + b"\n")
            line = self._file.readline()
        except socket.timeout:
            return "ERROR request timed out"
        except OSError as e:
            return f"ERROR {e}"

        if not line:
            return "ERROR connection closed by server"
        return line.decode("utf-8").rstrip("\r\n")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()


def render(command: str, response: str) -> str:
    """Pretty-print JSON bodies of structured replies."""
    name = command.split(None, 1)[0].upper()
    status, _, body = response.partition(" ")
    if status != "OK" or name not in STRUCTURED_COMMANDS:
        return response
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return response


def print_help():
    """Print help message."""
    print("""
bucketkv Commands:
------------------
  SET <key> <value>         Create a key (fails if it already exists)
  GET <key>                 Retrieve the value for a key
  UPDATE <key> <value>      Change the value of an existing key
  DELETE <key>              Delete a key
  EXISTS <key>              Check if a key exists (returns 1 or 0)
  KEYS                      List all keys and values
  BUCKETS                   Show the bucket layout
  BUCKET <key>              Show which bucket a key maps to
  LOADFACTOR                Show load factor and resize threshold
  PREFIX <prefix>           List keys starting with prefix
  USER <id>                 Collect <id>_<field> keys into one record
  QUIT                      Close connection and exit

Client Commands:
----------------
  help                      Show this help message
  exit                      Exit the client
  reconnect                 Reconnect to the server

Examples:
---------
  SET user1_name Ada        Store "Ada" under "user1_name"
  USER user1                {"userId": "user1", "data": {"name": "Ada"}}
""")


def main():
    parser = argparse.ArgumentParser(description="Interactive client for bucketkv")
    parser.add_argument("--host", type=str, default="localhost", help="Server host (default: localhost)")
    parser.add_argument("--port", type=int, default=3000, help="Server port (default: 3000)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Socket timeout in seconds (default: 5.0)")
    args = parser.parse_args()

    print(f"Connecting to {args.host}:{args.port}...")
    client = BucketKVClient(args.host, args.port, args.timeout)

    if not client.connect():
        print("Failed to connect. Is the server running?")
        print(f"  Try: python -m bucketkv.server --port {args.port}")
        sys.exit(1)

    print("Connected! Type 'help' for commands.\n")

    try:
        while True:
            try:
                command = input(">>> ").strip()
            except EOFError:
                print()
                break

            if not command:
                continue

            lower_cmd = command.lower()
            if lower_cmd == "help":
                print_help()
                continue
            if lower_cmd in ("exit", "quit"):
                client.send_command("QUIT")
                break
            if lower_cmd == "reconnect":
                client.disconnect()
                print("Reconnected!" if client.connect() else "Reconnection failed.")
                continue

            print(render(command, client.send_command(command)))

    except KeyboardInterrupt:
        print("\nInterrupted.")
    finally:
        client.disconnect()
        print("Goodbye!")


if __name__ == "__main__":
    main()
