import hashlib
import random

import pytest

from dasnode.get import (
    get_leaf,
    get_leaves_by_namespace,
    get_proof,
    get_share,
    get_shares_by_namespace,
    leaf_to_share,
)
from dasnode.nmt_adder import NmtNodeAdder
from dasnode.plugin import (
    BlockNotFoundError,
    MemoryBlockStore,
    NmtLeafNode,
    cid_from_namespaced_sha256,
)
from dasnode.share import NAMESPACE_SIZE, SHARE_SIZE

NS = NAMESPACE_SIZE


def _leaf_hash(data):
    nid = data[:NS]
    return nid + nid + hashlib.sha256(b"\x00" + data).digest()


def _node_hash(left, right):
    return left[:NS] + right[NS : 2 * NS] + hashlib.sha256(b"\x01" + left + right).digest()


def _rand_shares(total, seed):
    rng = random.Random(seed)
    nids = sorted(rng.randbytes(NS) for _ in range(total))
    return [nid + rng.randbytes(SHARE_SIZE - NS) for nid in nids]


def _build(store, shares):
    """Store an NMT over ``shares`` and return its levels of hashes, bottom up."""
    adder = NmtNodeAdder(store)
    level = []
    for share in shares:
        data = share[:NS] + share
        digest = _leaf_hash(data)
        adder.visit(digest, data)
        level.append(digest)
    levels = [level]
    while len(level) > 1:
        nxt = []
        for left, right in zip(level[::2], level[1::2]):
            digest = _node_hash(left, right)
            adder.visit(digest, left, right)
            nxt.append(digest)
        level = nxt
        levels.append(level)
    adder.commit()
    return levels


def _root_cid(levels):
    return cid_from_namespaced_sha256(levels[-1][0])


def _root_from_proof(nodes, leaf_digest, index, total):
    it = iter(nodes)

    def rec(lo, hi):
        if hi - lo == 1:
            return leaf_digest
        mid = (lo + hi) // 2
        if index < mid:
            left = rec(lo, mid)
            right = next(it)
        else:
            left = next(it)
            right = rec(mid, hi)
        return _node_hash(left, right)

    return rec(0, total)


def test_get_share():
    store = MemoryBlockStore()
    shares = _rand_shares(8, 1)
    root = _root_cid(_build(store, shares))
    for pos, share in enumerate(shares):
        assert get_share(store, root, pos, 8) == share


def test_get_share_missing_root():
    store = MemoryBlockStore()
    levels = _build(MemoryBlockStore(), _rand_shares(4, 2))
    with pytest.raises(BlockNotFoundError):
        get_share(store, _root_cid(levels), 0, 4)


def test_get_leaf_returns_raw_leaf():
    store = MemoryBlockStore()
    shares = _rand_shares(4, 3)
    root = _root_cid(_build(store, shares))
    node = get_leaf(store, root, 2, 4)
    assert node.raw_data()[1:] == shares[2][:NS] + shares[2]


def test_leaf_to_share():
    share = _rand_shares(1, 4)[0]
    data = share[:NS] + share
    node = NmtLeafNode(cid_from_namespaced_sha256(_leaf_hash(data)), data)
    assert leaf_to_share(node) == share


def test_get_proof_order():
    store = MemoryBlockStore()
    levels = _build(store, _rand_shares(4, 5))
    root = _root_cid(levels)
    cid = cid_from_namespaced_sha256
    assert get_proof(store, root, 0, 4) == [cid(levels[1][1]), cid(levels[0][1])]
    assert get_proof(store, root, 3, 4) == [cid(levels[0][2]), cid(levels[1][0])]


@pytest.mark.parametrize("width", [2, 4, 8])
def test_get_proof_verifies(width):
    store = MemoryBlockStore()
    levels = _build(store, _rand_shares(width, width))
    root = _root_cid(levels)
    for index in range(width):
        proof = get_proof(store, root, index, width)
        leaf = get_leaf(store, root, index, width)
        nodes = [cid.hash[4:] for cid in reversed(proof)]
        digest = _leaf_hash(leaf.raw_data()[1:])
        assert _root_from_proof(nodes, digest, index, width) == levels[-1][0]


@pytest.mark.parametrize("total", [4, 16])
def test_get_shares_by_namespace(total):
    store = MemoryBlockStore()
    shares = _rand_shares(total, total + 100)
    expected = shares[total // 2]
    shares[total // 2 + 1] = expected
    root = _root_cid(_build(store, shares))
    found = get_shares_by_namespace(store, root, expected[:NS])
    assert found == [expected, expected]


def _replace_nid(share, nid):
    return nid + share[NS:]


def _missing_cases():
    shares = _rand_shares(16, 7)
    n = len(shares)
    min_missing = list(shares)
    min_missing[0] = _replace_nid(shares[0], shares[1][:NS])
    max_missing = list(shares)
    max_missing[n - 1] = _replace_nid(shares[n - 1], shares[n - 2][:NS])
    mid_missing = list(shares)
    mid_missing[n // 2] = _replace_nid(shares[n // 2], shares[n // 2 + 1][:NS])
    return [
        (min_missing, shares[0][:NS]),
        (max_missing, shares[n - 1][:NS]),
        (mid_missing, shares[n // 2][:NS]),
    ]


@pytest.mark.parametrize("data,missing", _missing_cases())
def test_get_leaves_by_namespace_absent(data, missing):
    store = MemoryBlockStore()
    root = _root_cid(_build(store, data))
    assert get_leaves_by_namespace(store, root, missing) == []


def test_get_leaves_by_namespace_common_namespace():
    store = MemoryBlockStore()
    shares = _rand_shares(16, 8)
    common = shares[0]
    shares = [common] * 15 + [shares[-1]]
    root = _root_cid(_build(store, shares))
    nodes = get_leaves_by_namespace(store, root, common[:NS])
    assert len(nodes) == 15
    for node in nodes:
        assert node.raw_data()[1:][NS:] == common


def test_get_leaves_by_namespace_bad_nid_size():
    store = MemoryBlockStore()
    root = _root_cid(_build(store, _rand_shares(4, 9)))
    with pytest.raises(ValueError, match="expected namespace ID of size"):
        get_leaves_by_namespace(store, root, b"\x00" * (NS - 1))