"""
Struct field tag decoding.

Follows the conventional ``key:"name,opt1,opt2"`` format: space separated
pairs, keys without spaces, quotes or colons, values as quoted strings.
"""

import json
from typing import Dict, List

from ..models.entities import StructTag


class StructTagSyntaxError(ValueError):
    """Raised when a tag does not follow the key:"value" convention"""
    pass


class StructTagParser:
    """Decodes a tag string into StructTag entries keyed by tag key"""

    def parse(self, tag: str) -> Dict[str, StructTag]:
        """
        Parse a tag string (without the enclosing literal quotes).

        A key repeated later in the tag replaces the earlier entry.

        Raises:
            StructTagSyntaxError: Malformed key or value
        """
        tags: Dict[str, StructTag] = {}
        for key, value in self._pairs(tag):
            name, *options = value.split(",")
            tags[key] = StructTag(key=key, name=name, options=options)
        return tags

    def _pairs(self, tag: str) -> List[tuple]:
        pairs = []
        i, n = 0, len(tag)
        while i < n:
            while i < n and tag[i] == " ":
                i += 1
            if i >= n:
                break

            j = i
            while j < n and tag[j] > " " and tag[j] not in ':"' and tag[j] != "\x7f":
                j += 1
            if j == i:
                raise StructTagSyntaxError(f"bad tag key at offset {i}: {tag!r}")
            if j + 1 >= n or tag[j] != ":" or tag[j + 1] != '"':
                raise StructTagSyntaxError(f"tag key {tag[i:j]!r} is not followed by a quoted value")
            key = tag[i:j]

            i = j + 1
            j = i + 1
            while j < n and tag[j] != '"':
                if tag[j] == "\\":
                    j += 1
                j += 1
            if j >= n:
                raise StructTagSyntaxError(f"unterminated value for tag key {key!r}")

            try:
                value = json.loads(tag[i:j + 1])
            except ValueError as e:
                raise StructTagSyntaxError(f"bad value for tag key {key!r}: {e}") from e

            pairs.append((key, value))
            i = j + 1
        return pairs
