"""
Incremental Merkle tree over field elements.

The tree is a stateless path computer: every insertion is computed from a
caller-supplied checkpoint (root, next index and, optionally, the frontier of
filled left subtrees). Persisting checkpoints between insertions is the job of
the external ledger; the caller-supplied root is trusted, not re-verified.

Empty slots hold EMPTY_LEAF; the empty subtree of height i+1 is
h(zeros[i], zeros[i]).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import DEFAULT_TREE_DEPTH, EMPTY_LEAF, MAX_TREE_DEPTH
from .exceptions import IndexOutOfRange, InvalidCheckpoint
from .field import FieldAdapter, get_default_adapter

logger = logging.getLogger(__name__)

# (sibling, is_left): is_left means the sibling sits left of the running node
PathEntry = Tuple[int, bool]

# Empty-subtree hashes per (hash_fn, modulus, depth)
_ZEROS_CACHE: Dict[Tuple[object, int, int], Tuple[int, ...]] = {}


@dataclass(frozen=True)
class TreeCheckpoint:
    """
    Tree state threaded between insertions.

    Attributes:
        root: Current root, or None before the first insertion
        next_index: Index the next leaf will be inserted at
        depth: Tree depth
        frontier: Filled left-subtree roots per level (may be empty)
    """

    root: Optional[int]
    next_index: int
    depth: int = DEFAULT_TREE_DEPTH
    frontier: Tuple[int, ...] = ()

    @classmethod
    def empty(cls, depth: int = DEFAULT_TREE_DEPTH) -> "TreeCheckpoint":
        return cls(root=None, next_index=0, depth=depth)

    def to_dict(self) -> dict:
        return {
            "root": None if self.root is None else str(self.root),
            "next_index": self.next_index,
            "depth": self.depth,
            "frontier": [str(node) for node in self.frontier],
        }

    @classmethod
    def from_dict(
        cls, data: dict, adapter: Optional[FieldAdapter] = None
    ) -> "TreeCheckpoint":
        """Accepts decimal strings, 0x-hex strings or ints for root and frontier."""
        field = adapter or get_default_adapter()
        root = data.get("root")
        return cls(
            root=None if root is None else field.decode(root, "root"),
            next_index=int(data.get("next_index", 0)),
            depth=int(data.get("depth", DEFAULT_TREE_DEPTH)),
            frontier=tuple(
                field.decode(node, "frontier node") for node in data.get("frontier", ())
            ),
        )


@dataclass(frozen=True)
class InsertResult:
    new_root: int
    path: Tuple[PathEntry, ...]
    index: int
    leaf: int
    depth: int
    frontier: Tuple[int, ...]

    @property
    def path_elements(self) -> List[int]:
        return [sibling for sibling, _ in self.path]

    @property
    def path_indices(self) -> List[int]:
        return [1 if is_left else 0 for _, is_left in self.path]

    @property
    def checkpoint(self) -> TreeCheckpoint:
        """Checkpoint to persist for the next insertion."""
        return TreeCheckpoint(
            root=self.new_root,
            next_index=self.index + 1,
            depth=self.depth,
            frontier=self.frontier,
        )


def _validate_depth(depth: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError("depth must be int")
    if not 1 <= depth <= MAX_TREE_DEPTH:
        raise ValueError(f"depth must be in [1, {MAX_TREE_DEPTH}], got {depth}")
    return depth


class IncrementalMerkleTree:
    """
    Fixed-depth, append-only binary Merkle tree.

    Example:
        >>> tree = IncrementalMerkleTree(depth=4)
        >>> result = tree.insert(None, 0, leaf)
        >>> assert verify_path(leaf, result.path, result.new_root)
        >>> nxt = tree.advance(result.checkpoint, other_leaf)
    """

    def __init__(
        self, depth: int = DEFAULT_TREE_DEPTH, adapter: Optional[FieldAdapter] = None
    ) -> None:
        self.depth = _validate_depth(depth)
        self.field = adapter or get_default_adapter()
        self.zeros = self._compute_zeros()

    def _compute_zeros(self) -> Tuple[int, ...]:
        key = (self.field.hash_fn, self.field.modulus, self.depth)
        cached = _ZEROS_CACHE.get(key)
        if cached is None:
            zeros = [EMPTY_LEAF]
            for _ in range(self.depth):
                zeros.append(self.field.combine2(zeros[-1], zeros[-1]))
            cached = _ZEROS_CACHE.setdefault(key, tuple(zeros))
        return cached

    @property
    def empty_root(self) -> int:
        return self.zeros[self.depth]

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    def insert(
        self,
        current_root: Optional[int],
        index: int,
        leaf: int,
        frontier: Sequence[int] = (),
    ) -> InsertResult:
        """
        Insert a leaf at index and compute the new root and inclusion path.

        Args:
            current_root: Root before insertion, None for an empty tree
            index: Leaf slot, in [0, 2**depth)
            leaf: Tree leaf (field element)
            frontier: Filled left-subtree roots per level; when omitted, left
                siblings default to the empty-subtree constants

        Returns:
            InsertResult with new_root, path and updated frontier

        Raises:
            IndexOutOfRange: If index is outside [0, 2**depth)
            InvalidCheckpoint: If current_root is None for a non-zero index,
                or the frontier length does not match the depth
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError("index must be int")
        if index < 0 or index >= self.capacity:
            raise IndexOutOfRange(index, self.depth)
        if current_root is None and index != 0:
            raise InvalidCheckpoint(
                f"empty root is only valid for index 0, got index {index}"
            )
        if current_root is not None:
            self.field.check(current_root, "current_root")
        if frontier and len(frontier) != self.depth:
            raise InvalidCheckpoint(
                f"frontier has {len(frontier)} levels, expected {self.depth}"
            )

        filled = list(frontier) if frontier else list(self.zeros[: self.depth])
        node = self.field.check(leaf, "leaf")
        path: List[PathEntry] = []

        position = index
        for level in range(self.depth):
            if position & 1 == 0:
                filled[level] = node
                sibling = self.zeros[level]
                path.append((sibling, False))
                node = self.field.combine2(node, sibling)
            else:
                sibling = self.field.check(filled[level], f"frontier[{level}]")
                path.append((sibling, True))
                node = self.field.combine2(sibling, node)
            position >>= 1

        logger.debug("inserted leaf at index %d (depth %d)", index, self.depth)
        return InsertResult(
            new_root=node,
            path=tuple(path),
            index=index,
            leaf=leaf,
            depth=self.depth,
            frontier=tuple(filled),
        )

    def advance(self, checkpoint: TreeCheckpoint, leaf: int) -> InsertResult:
        """Insert at checkpoint.next_index; result.checkpoint is the next state."""
        if checkpoint.depth != self.depth:
            raise InvalidCheckpoint(
                f"checkpoint depth {checkpoint.depth} != tree depth {self.depth}"
            )
        return self.insert(
            checkpoint.root, checkpoint.next_index, leaf, checkpoint.frontier
        )

    def compute_root(self, leaves: Iterable[int]) -> int:
        """Root of a tree holding leaves at indices 0..n-1, rest empty."""
        level = [self.field.check(leaf, "leaf") for leaf in leaves]
        if len(level) > self.capacity:
            raise IndexOutOfRange(len(level) - 1, self.depth)
        for height in range(self.depth):
            if len(level) % 2 == 1:
                level.append(self.zeros[height])
            level = [
                self.field.combine2(level[i], level[i + 1])
                for i in range(0, len(level), 2)
            ]
        return level[0] if level else self.empty_root


def path_indices(index: int, depth: int) -> List[int]:
    """Per-level index bits, leaf level first (1 = node is a right child)."""
    return [(index >> level) & 1 for level in range(depth)]


def root_from_path(
    leaf: int, path: Sequence[PathEntry], *, adapter: Optional[FieldAdapter] = None
) -> int:
    """Fold a leaf up its inclusion path."""
    field = adapter or get_default_adapter()
    current = leaf
    for sibling, is_left in path:
        if is_left:
            current = field.combine2(sibling, current)
        else:
            current = field.combine2(current, sibling)
    return current


def verify_path(
    leaf: int,
    path: Sequence[PathEntry],
    root: int,
    *,
    adapter: Optional[FieldAdapter] = None,
) -> bool:
    """
    Verify a Merkle inclusion path.

    Returns:
        True if folding leaf up path reproduces root, False otherwise
    """
    return root_from_path(leaf, path, adapter=adapter) == root
