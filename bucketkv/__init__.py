"""
bucketkv: Bucketed Hash Map Key-Value Store

An in-memory key-value store with separate chaining, load-factor driven
resizing and write-through persistence to a flat text file, served over
raw TCP with Python asyncio.
"""

__version__ = "1.0.0"
