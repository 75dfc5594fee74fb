"""Content identifiers, blocks and IPLD nodes of namespaced Merkle trees."""

from __future__ import annotations

import base64
import hashlib
import threading
from dataclasses import dataclass
from typing import ClassVar, Protocol, Union

from .share import NAMESPACE_SIZE

# Multicodec of leaf and inner nodes of a namespaced Merkle tree.
NMT_CODEC = 0x7700
# Multihash code of blocks holding an NMT node (inner and leaf nodes).
SHA256_NAMESPACE8_FLAGGED = 0x7701

CID_V1 = 1

# Domain separators of NMT leaves and inner nodes.
LEAF_PREFIX = 0x00
NODE_PREFIX = 0x01

# Size of a digest created by an NMT in bytes.
NMT_HASH_SIZE = 2 * NAMESPACE_SIZE + hashlib.sha256().digest_size

# Size of the multihash header (code and length) for namespaced digests.
CID_PREFIX_SIZE = 4


class BlockNotFoundError(LookupError):
    """Raised when a requested block is not in the store."""


def _varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _multihash_encode(digest: bytes, code: int) -> bytes:
    return _varint(code) + _varint(len(digest)) + digest


@dataclass(frozen=True)
class Cid:
    """A version 1 content identifier."""

    codec: int
    multihash: bytes
    version: int = CID_V1

    @property
    def hash(self) -> bytes:
        return self.multihash

    def to_bytes(self) -> bytes:
        """Binary form: version, codec and multihash."""
        return _varint(self.version) + _varint(self.codec) + self.multihash

    def __str__(self) -> str:
        encoded = base64.b32encode(self.to_bytes()).decode("ascii")
        return "b" + encoded.rstrip("=").lower()


@dataclass(frozen=True)
class Link:
    """A link to another node."""

    cid: Cid


@dataclass(frozen=True)
class Block:
    """Raw bytes stored under a content identifier."""

    cid: Cid
    data: bytes


def cid_from_namespaced_sha256(namespaced_hash: bytes) -> Cid:
    """Create a CID from a namespaced hash of an NMT node."""
    if len(namespaced_hash) != NMT_HASH_SIZE:
        raise ValueError(
            f"invalid namespaced hash length, got: {len(namespaced_hash)}, "
            f"want: {NMT_HASH_SIZE}"
        )
    multihash = _multihash_encode(bytes(namespaced_hash), SHA256_NAMESPACE8_FLAGGED)
    return Cid(NMT_CODEC, multihash)


def namespaced_sha256_from_cid(cid: Cid) -> bytes:
    """Derive the namespaced hash from the given CID."""
    return cid.hash[CID_PREFIX_SIZE:]


@dataclass(frozen=True)
class NmtNode:
    """An inner node holding the namespaced hashes of its two children."""

    cid: Cid
    left: bytes
    right: bytes

    _CHILDREN: ClassVar[tuple[str, ...]] = ("0", "1")

    def raw_data(self) -> bytes:
        return bytes([NODE_PREFIX]) + self.left + self.right

    def links(self) -> list[Link]:
        return [
            Link(cid_from_namespaced_sha256(self.left)),
            Link(cid_from_namespaced_sha256(self.right)),
        ]

    def resolve(self, path: list[str]) -> tuple[Link, list[str]]:
        if path and path[0] == "0":
            return Link(cid_from_namespaced_sha256(self.left)), list(path[1:])
        if path and path[0] == "1":
            return Link(cid_from_namespaced_sha256(self.right)), list(path[1:])
        raise ValueError("invalid path for inner node")

    def resolve_link(self, path: list[str]) -> tuple[Link, list[str]]:
        obj, rest = self.resolve(path)
        if not isinstance(obj, Link):
            raise ValueError("was not a link")
        return obj, rest

    def tree(self, path: str, depth: int) -> list[str]:
        if path != "" or depth != -1:
            raise ValueError("only the full tree of an inner node can be listed")
        return list(self._CHILDREN)

    def copy(self) -> NmtNode:
        return NmtNode(self.cid, bytes(self.left), bytes(self.right))

    def __str__(self) -> str:
        cid_hash = self.cid.hash.hex() if self.cid else ""
        return (
            f"\nnode {{\n\thash: {cid_hash},\n\tl: {self.left.hex()},\n"
            f"\tr: {self.right.hex()}\"\n}}"
        )


@dataclass(frozen=True)
class NmtLeafNode:
    """A leaf node holding namespaced share data."""

    cid: Cid | None
    data: bytes

    _CHILDREN: ClassVar[tuple[str, ...]] = ()

    def raw_data(self) -> bytes:
        return bytes([LEAF_PREFIX]) + self.data

    def links(self) -> list[Link]:
        return [Link(self.cid)]

    def resolve(self, path: list[str]) -> tuple[Link, list[str]]:
        message = "invalid path for leaf node"
        if path:
            message = f"{message}: {'/'.join(path)}"
        raise ValueError(message)

    def resolve_link(self, path: list[str]) -> tuple[Link, list[str]]:
        obj, rest = self.resolve(path)
        if not isinstance(obj, Link):
            raise ValueError("was not a link")
        return obj, rest

    def tree(self, path: str, depth: int) -> list[str]:
        """List child paths; a leaf has none."""
        return list(self._CHILDREN)

    def __str__(self) -> str:
        cid_hash = self.cid.hash.hex() if self.cid else ""
        return f"\nleaf {{\n\thash: \t\t{cid_hash},\n\tlen(Data): \t{len(self.data)}\n}}"


Node = Union[NmtNode, NmtLeafNode]


class BlockGetter(Protocol):
    def get_block(self, cid: Cid) -> Block: ...


class MemoryBlockStore:
    """A thread-safe in-memory block store."""

    def __init__(self) -> None:
        self._blocks: dict[Cid, Block] = {}
        self._lock = threading.Lock()

    def put(self, block: Block) -> None:
        with self._lock:
            self._blocks[block.cid] = block

    def get_block(self, cid: Cid) -> Block:
        with self._lock:
            try:
                return self._blocks[cid]
            except KeyError:
                raise BlockNotFoundError(f"block not found: {cid}") from None

    def has(self, cid: Cid) -> bool:
        with self._lock:
            return cid in self._blocks

    def keys(self) -> list[Cid]:
        with self._lock:
            return list(self._blocks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)


def decode_block(block: Block) -> Node:
    """Decode a raw block into a leaf or an inner node."""
    data = block.data
    if not data:
        return NmtLeafNode(cid=None, data=b"")
    separator = data[0]
    if separator == LEAF_PREFIX:
        return NmtLeafNode(cid=block.cid, data=data[1:])
    if separator == NODE_PREFIX:
        return NmtNode(
            cid=block.cid,
            left=data[1 : 1 + NMT_HASH_SIZE],
            right=data[1 + NMT_HASH_SIZE :],
        )
    raise ValueError(
        "expected first byte of block to be either the leaf or inner node prefix: "
        f"({LEAF_PREFIX:02x}, {NODE_PREFIX:02x}), got: {separator:02x})"
    )


def get_node(getter: BlockGetter, root: Cid) -> Node:
    """Fetch the block under ``root`` and decode it into a node."""
    return decode_block(getter.get_block(root))