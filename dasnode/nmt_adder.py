"""Collecting NMT nodes into a block store while the tree is computed."""

from __future__ import annotations

from typing import Protocol

from .plugin import Block, Cid, NmtLeafNode, NmtNode, cid_from_namespaced_sha256

DEFAULT_MAX_BATCH_SIZE = 8 << 20


class BlockPutter(Protocol):
    def put(self, block: Block) -> None: ...


class NmtNodeAdder:
    """Adds the nodes visited during NMT construction to a store in batches.

    Not thread-safe.
    """

    def __init__(self, store: BlockPutter, max_size: int = DEFAULT_MAX_BATCH_SIZE) -> None:
        self._store = store
        self._max_size = max_size
        self._pending: list[Block] = []
        self._pending_size = 0
        self._leaves: set[Cid] = set()
        self._error: Exception | None = None

    def visit(self, hash: bytes, *args: bytes) -> None:
        """Record the node with namespaced ``hash`` and its children."""
        if self._error is not None:
            return
        cid = cid_from_namespaced_sha256(hash)
        if len(args) == 1:
            if cid in self._leaves:
                return
            self._leaves.add(cid)
            node = NmtLeafNode(cid, bytes(args[0]))
        elif len(args) == 2:
            node = NmtNode(cid, bytes(args[0]), bytes(args[1]))
        else:
            raise ValueError("expected a binary tree")
        try:
            self._add(Block(cid, node.raw_data()))
        except Exception as exc:  # kept until commit, further visits are ignored
            self._error = exc

    def _add(self, block: Block) -> None:
        self._pending.append(block)
        self._pending_size += len(block.data)
        if self._pending_size >= self._max_size:
            self._flush()

    def _flush(self) -> None:
        pending, self._pending, self._pending_size = self._pending, [], 0
        for block in pending:
            self._store.put(block)

    def commit(self) -> None:
        """Raise the error met while visiting, or write all pending nodes."""
        if self._error is not None:
            raise self._error
        self._flush()


def batch_size(square_size: int) -> int:
    """Number of nodes generated from an extended square of ``square_size``.

    Every tree (rows and columns) has ``square_size*2-1`` nodes, while the
    leaves shared between rows and columns are counted once.
    """
    return (square_size * 2 - 1) * square_size * 2 - square_size * square_size