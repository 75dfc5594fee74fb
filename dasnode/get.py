"""Walking NMT trees stored as IPLD blocks to fetch leaves, shares and proofs."""

from __future__ import annotations

from .plugin import BlockGetter, Cid, Node, get_node, namespaced_sha256_from_cid
from .share import NAMESPACE_SIZE, sanity_check_nid


def leaf_to_share(node: Node) -> bytes:
    """Convert an NMT leaf into a share.

    The first byte is the node type and the following namespace is the one
    prepended to every leaf (so parity data carries a parity namespace);
    both are cut off.
    """
    return node.raw_data()[1 + NAMESPACE_SIZE :]


def get_leaf(getter: BlockGetter, root: Cid, leaf: int, total: int) -> Node:
    """Walk down the tree under ``root`` and return the raw leaf at ``leaf``."""
    while True:
        node = get_node(getter, root)
        links = node.links()
        if len(links) == 1:
            # the bottom of the tree is reached, request the leaf itself
            return get_node(getter, links[0].cid)
        total //= 2  # every step down a binary tree halves the leaves
        if leaf < total:
            root = links[0].cid
        else:
            root = links[1].cid
            leaf -= total


def get_share(getter: BlockGetter, root: Cid, leaf_index: int, total_leafs: int) -> bytes:
    """Fetch the share at ``leaf_index`` of the tree under ``root``.

    ``total_leafs`` is the width of the extended square.
    """
    return leaf_to_share(get_leaf(getter, root, leaf_index, total_leafs))


def _collect_proof(
    getter: BlockGetter, root: Cid, proof: list[Cid], leaf: int, total: int
) -> list[Cid]:
    node = get_node(getter, root)
    links = node.links()
    if len(links) == 1:
        return list(proof)
    total //= 2
    if leaf < total:
        return _collect_proof(getter, links[0].cid, proof + [links[1].cid], leaf, total)
    deeper = _collect_proof(getter, links[1].cid, proof, leaf - total, total)
    return deeper + [links[0].cid]


def get_proof(getter: BlockGetter, root: Cid, leaf: int, total: int) -> list[Cid]:
    """Return the CIDs of the sibling nodes proving the leaf at ``leaf``.

    Reversed, the list holds the proof nodes in left-to-right tree order.
    """
    return _collect_proof(getter, root, [], leaf, total)


def get_leaves_by_namespace(getter: BlockGetter, root: Cid, nid: bytes) -> list[Node]:
    """Return all leaves under ``root`` with namespace ``nid``, in tree order.

    An empty list is returned when the namespace is not present.
    """
    sanity_check_nid(nid)
    nid = bytes(nid)
    root_hash = namespaced_sha256_from_cid(root)
    min_ns = root_hash[:NAMESPACE_SIZE]
    max_ns = root_hash[NAMESPACE_SIZE : 2 * NAMESPACE_SIZE]
    if nid < min_ns or not nid <= max_ns:
        return []
    node = get_node(getter, root)
    links = node.links()
    if len(links) == 1:
        return [node]
    leaves: list[Node] = []
    for link in links:
        leaves.extend(get_leaves_by_namespace(getter, link.cid, nid))
    return leaves


def get_shares_by_namespace(getter: BlockGetter, root: Cid, nid: bytes) -> list[bytes]:
    """Return all shares under ``root`` with namespace ``nid``."""
    return [leaf_to_share(leaf) for leaf in get_leaves_by_namespace(getter, root, nid)]