"""
h5.py
=====

Read-side HDF5 helpers used to list the variables stored in a file.

Design notes
------------
• Read only: figtidy never writes HDF5.
• Paths use UNIX-style: "/group/dataset".

Dependencies
------------
• h5py
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Tuple, Union

import h5py


# ============================================================
# TYPES
# ============================================================

PathLike = Union[str, Path]


# ============================================================
# FILE OPEN CONVENIENCE
# ============================================================

def open_h5(path: PathLike, mode: str = "r") -> h5py.File:
    """
    Convenience wrapper to open an HDF5 file with a normalized Path.

    Parameters
    ----------
    path : str or Path
        Path to HDF5 file.
    mode : str
        h5py open mode ("r", "r+", "a", ...)

    Returns
    -------
    h5py.File
    """
    p = Path(path).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"HDF5 file not found: {p}")
    return h5py.File(p, mode)


# ============================================================
# TRAVERSAL
# ============================================================

def h5_iter_datasets(h5: h5py.Group) -> Iterator[Tuple[str, h5py.Dataset]]:
    """
    Yield (path, dataset) for every dataset below `h5`, in sorted path order.

    Groups are walked recursively. Soft and external links are not followed.
    """
    found = []

    def _visit(name: str, obj) -> None:
        if isinstance(obj, h5py.Dataset):
            found.append(("/" + name, obj))

    h5.visititems(_visit)
    found.sort(key=lambda item: item[0])
    yield from found
