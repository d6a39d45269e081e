# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata sink helpers

A sink is any mutable string-keyed mapping owned by the caller. A plain
dict keeps insertion order, which is the order tags appear in the file.

Copyright 2025 DNAi inc.
"""

from typing import MutableMapping


def add_metadata(metadata: MutableMapping[str, str], name: str, value: str) -> str:
    """
    Insert a value without overwriting an existing entry.

    The first value keeps the plain name. Later values for the same name
    get a numeric suffix: "Name#1", "Name#2", and so on.

    Args:
        metadata: Destination sink
        name: Tag name
        value: Rendered value

    Returns:
        The key the value was stored under
    """
    key = name
    suffix = 1
    while key in metadata:
        key = f"{name}#{suffix}"
        suffix += 1
    metadata[key] = value
    return key


def merge_metadata(target: MutableMapping[str, str], source: MutableMapping[str, str]) -> None:
    """Copy every entry of source into target with add_metadata."""
    for name, value in source.items():
        add_metadata(target, name, value)
