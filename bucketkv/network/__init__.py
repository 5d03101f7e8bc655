"""Network module for bucketkv."""

from .tcp_server import KVServer

__all__ = ["KVServer"]
