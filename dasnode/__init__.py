"""Namespaced Merkle tree nodes, share retrieval, quadrants, file locks and keystores for data availability nodes."""

__version__ = "0.1.0"