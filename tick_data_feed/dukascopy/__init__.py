"""Dukascopy historical tick feed.

Builds hour file URLs, fetches them through a pluggable data supplier,
inflates the LZMA payloads and decodes the fixed-size tick records.
"""

__all__ = [
    "api",
    "decode",
    "errors",
    "service",
    "supplier",
    "validation",
]
