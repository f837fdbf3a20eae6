"""
Purpose: Prefix-indexed location store.
What it does:
Keeps driver ids in a character trie keyed by geohash so that every driver
inside a cell (at any prefix length) can be collected in one walk.

The trie only holds ids; driver records live in drivers.registry.
Keeping one entry per driver is the caller's job (remove old, then insert new).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Set


@dataclass
class TrieNode:
    children: Dict[str, "TrieNode"] = field(default_factory=dict)
    occupants: Set[int] = field(default_factory=set)


class GeohashTrie:
    """
    Character trie over fixed-alphabet geohash strings.

    No rebalancing is needed: depth is bounded by the geohash length.
    """

    def __init__(self):
        self._root = TrieNode()

    def insert(self, geohash: str, driver_id: int) -> None:
        node = self._root
        for symbol in geohash:
            node = node.children.setdefault(symbol, TrieNode())
        #set semantics: inserting twice is a no-op
        node.occupants.add(driver_id)

    def remove(self, geohash: str, driver_id: int) -> None:
        node = self._find(geohash)
        if node is None:
            return
        node.occupants.discard(driver_id)

    def query_by_prefix(self, prefix: str) -> Set[int]:
        """
        All ids stored at the node for `prefix` or anywhere below it.
        Empty set if no stored geohash starts with `prefix`.
        """
        node = self._find(prefix)
        if node is None:
            return set()

        result: Set[int] = set()
        stack = [node]
        while stack:
            current = stack.pop()
            result.update(current.occupants)
            stack.extend(current.children.values())
        return result

    def occupants_at(self, geohash: str) -> Set[int]:
        """
        Ids stored exactly at `geohash` (subtree excluded).
        """
        node = self._find(geohash)
        if node is None:
            return set()
        return set(node.occupants)

    def _find(self, path: str) -> Optional[TrieNode]:
        node = self._root
        for symbol in path:
            node = node.children.get(symbol)
            if node is None:
                return None
        return node
