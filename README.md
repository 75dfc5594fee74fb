# dasnode

Building blocks for a data availability sampling node. The package has no
dependencies beyond the standard library. File locking uses `fcntl`, so it
runs on POSIX systems only.

## Modules

- `dasnode.plugin`: version 1 content identifiers (`Cid`) for namespaced
  SHA-256 hashes (`cid_from_namespaced_sha256`, `namespaced_sha256_from_cid`).
  It also holds the inner and leaf nodes of a namespaced Merkle tree
  (`NmtNode`, `NmtLeafNode`), block decoding (`decode_block`, `get_node`) and
  a thread-safe in-memory block store (`MemoryBlockStore`). A missing block
  raises `BlockNotFoundError`.
- `dasnode.share`: share constants (`NAMESPACE_SIZE`, `SHARE_SIZE`,
  `MAX_SQUARE_SIZE`) and helpers that split a share into its namespace ID and
  its data (`share_id`, `share_data`). `sanity_check_nid` raises `ValueError`
  for a namespace ID of the wrong size.
- `dasnode.nmt_adder`: `NmtNodeAdder`, a visitor that is called for every node
  while a tree is computed. It collects the nodes in batches and writes them
  to a block store on `commit()`. Leaves that appear more than once are stored
  once. `batch_size(square_size)` gives the number of nodes that an extended
  square of that width produces.
- `dasnode.get`: walks a stored tree.
  - `get_leaf(getter, root, leaf, total)`
  - `get_share(getter, root, leaf_index, total_leafs)`
  - `get_proof(getter, root, leaf, total)` returns the CIDs of the sibling nodes.
  - `get_leaves_by_namespace(getter, root, nid)` and
    `get_shares_by_namespace(getter, root, nid)` return an empty list when the
    namespace lies outside the root's range.
  - `leaf_to_share(node)`
- `dasnode.get_shares`: `get_shares(getter, root, shares, put, cancel=None)`
  fetches every leaf under a root concurrently on a shared thread pool. It
  calls `put(position, share)` for each leaf it fetches and skips failed
  fetches. Setting the `threading.Event` passed as `cancel` stops it early.
- `dasnode.quadrant`: `Quadrant` and `new_quadrants(row_roots, column_roots, rng=None)`.
  `new_quadrants` builds the 4 quadrants of each source (rows and columns), 8
  in total, in random order. `Quadrant.index(root_idx, cell_idx)` maps a share
  to its position in the square, flattened by rows.
- `dasnode.fslock`: an exclusive, non-blocking lock file (`Locker`, `lock`).
  Locking a file that is already locked raises `LockedError`.
- `dasnode.keystore`: private key storage (`PrivKey`).
  - `MapKeystore` keeps keys in memory.
  - `FSKeystore` keeps one file per key in a directory.
  - Both implement the abstract `Keystore`.
  - `key_name_to_base32` and `key_name_from_base32` encode key names.
- `dasnode.fsutil`: `exists(path)`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Store the nodes of a tree and read a leaf back:

```python
from dasnode.nmt_adder import NmtNodeAdder
from dasnode.plugin import MemoryBlockStore, NMT_HASH_SIZE, cid_from_namespaced_sha256, get_node

store = MemoryBlockStore()
adder = NmtNodeAdder(store)
leaf_hash = bytes(NMT_HASH_SIZE)
adder.visit(leaf_hash, b"\x00" * 8 + b"share data")
adder.commit()

node = get_node(store, cid_from_namespaced_sha256(leaf_hash))
print(node.data)
```

Hold a working directory for one process only:

```python
from dasnode.fslock import LockedError, Locker

with Locker("/tmp/node/.lock"):
    ...
```

A second attempt to lock the same path raises `LockedError` until the first
holder unlocks. The lock file contains the owner's process id and is removed
on unlock.

Store a key:

```python
from dasnode.keystore import FSKeystore, PrivKey

store = FSKeystore("/tmp/node/keys")
store.put("validator", PrivKey(body=b"placeholder"))
assert store.get("validator").body == b"placeholder"
print(store.list())
```

Key files are written with mode 0600. A key file whose permissions let group
or others in is refused when it is read. A missing key raises
`KeyNotFoundError`. Other failures raise `KeystoreError`.

## What the package does not do

- There is no command-line program.
- There is no networking. Blocks come from whatever object offers
  `get_block(cid)`, such as `MemoryBlockStore`.
- There is no erasure coding. Nothing extends or repairs a data square, or
  reconstructs a whole square from its quadrants.
- There is no verification of inclusion proofs.
- There are no preset log levels. Configure logging with the standard
  `logging` module.