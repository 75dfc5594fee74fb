"""File system helpers."""

from __future__ import annotations

import os


def exists(path: str | os.PathLike[str]) -> bool:
    """Report whether a file or directory exists at ``path``.

    Only a missing path counts as absent; other stat failures do not.
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True