"""
workspace.py
============

List variables and how much memory they use, as a table.

Two halves:
• describe_*(): build VariableDescriptor records for the variables of a
  namespace (e.g. globals()), an .npz archive or an HDF5 file
• summarize_workspace(): turn descriptor records into a pandas DataFrame
  with readable columns (sizes as "3x4", bytes converted to megabytes)

Usage
-----
    a = np.zeros((3, 4))
    print_workspace_summary(describe_namespace(globals()))

Columns of the printed table: Name, Size, Megabytes, Class, Sparse, Complex.
"""

from __future__ import annotations

import inspect
import sys
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy import sparse

from .errors import MissingFieldError
from .io.h5 import h5_iter_datasets, open_h5


PathLike = Union[str, Path]

REQUIRED_FIELDS = ("name", "size", "bytes", "class", "complex")

# Scope markers reported by MATLAB-style variable listings; never shown
SCOPE_FIELDS = ("global", "persistent", "nesting")

BYTES_PER_MB = 2 ** 20


# ============================================================
# DESCRIPTORS
# ============================================================

@dataclass(frozen=True)
class VariableDescriptor:
    """One variable: name, shape, memory footprint and type."""

    name: str
    size: Tuple[int, ...]
    bytes: int
    class_: str
    sparse: bool = False
    complex: bool = False

    def as_record(self) -> Dict[str, Any]:
        """Plain mapping in listing order: name, size, bytes, class, sparse, complex."""
        return {
            "name": self.name,
            "size": tuple(self.size),
            "bytes": int(self.bytes),
            "class": self.class_,
            "sparse": bool(self.sparse),
            "complex": bool(self.complex),
        }


def _normalize_shape(shape: Sequence[int]) -> Tuple[int, ...]:
    # scalars are 1x1, vectors are row vectors (1xN)
    shape = tuple(int(n) for n in shape)
    if len(shape) == 0:
        return (1, 1)
    if len(shape) == 1:
        return (1, shape[0])
    return shape


def _is_complex(value: Any) -> bool:
    dtype = getattr(value, "dtype", None)
    if isinstance(dtype, np.dtype):
        return bool(np.issubdtype(dtype, np.complexfloating))
    return isinstance(value, complex)


def _sparse_nbytes(value: Any) -> int:
    total = 0
    for attr in ("data", "indices", "indptr", "row", "col", "offsets"):
        arr = getattr(value, attr, None)
        if isinstance(arr, np.ndarray):
            total += arr.nbytes
    return total or sys.getsizeof(value)


def describe_value(name: str, value: Any) -> VariableDescriptor:
    """Descriptor for a single Python object."""
    if sparse.issparse(value):
        return VariableDescriptor(
            name=name,
            size=_normalize_shape(value.shape),
            bytes=_sparse_nbytes(value),
            class_=value.dtype.name,
            sparse=True,
            complex=_is_complex(value),
        )

    if isinstance(value, (np.ndarray, np.generic)):
        return VariableDescriptor(
            name=name,
            size=_normalize_shape(value.shape),
            bytes=int(value.nbytes),
            class_=value.dtype.name,
            complex=_is_complex(value),
        )

    shape = getattr(value, "shape", None)
    if shape is None:
        if isinstance(value, (str, bytes, list, tuple, set, frozenset)):
            shape = (1, len(value))
        else:
            shape = ()

    nbytes = getattr(value, "nbytes", None)
    if not isinstance(nbytes, (int, np.integer)):
        nbytes = sys.getsizeof(value)

    return VariableDescriptor(
        name=name,
        size=_normalize_shape(shape),
        bytes=int(nbytes),
        class_=type(value).__name__,
        complex=_is_complex(value),
    )


def _is_variable(name: str, value: Any) -> bool:
    if name.startswith("_"):
        return False
    return not (inspect.ismodule(value) or inspect.isclass(value) or inspect.isroutine(value))


def describe_namespace(namespace: Mapping[str, Any]) -> List[VariableDescriptor]:
    """
    Descriptors for the variables of a namespace, sorted by name.

    Private names (leading underscore), modules, classes and functions are
    skipped, so describe_namespace(globals()) lists only data.
    """
    return [
        describe_value(name, value)
        for name, value in sorted(namespace.items())
        if _is_variable(name, value)
    ]


def describe_npz(path: PathLike) -> List[VariableDescriptor]:
    """Descriptors for the arrays stored in an .npz archive."""
    path = Path(path).expanduser().resolve()
    with np.load(path, allow_pickle=False) as data:
        return [describe_value(key, data[key]) for key in sorted(data.files)]


def describe_h5(path: PathLike) -> List[VariableDescriptor]:
    """Descriptors for every dataset in an HDF5 file; names are full dataset paths."""
    out: List[VariableDescriptor] = []
    with open_h5(path, "r") as h5:
        for dset_path, dset in h5_iter_datasets(h5):
            out.append(
                VariableDescriptor(
                    name=dset_path,
                    size=_normalize_shape(dset.shape),
                    bytes=int(dset.size * dset.dtype.itemsize),
                    class_=dset.dtype.name,
                    complex=bool(np.issubdtype(dset.dtype, np.complexfloating)),
                )
            )
    return out


# ============================================================
# TABLE
# ============================================================

def _format_size(size: Any) -> str:
    if isinstance(size, str):
        return size
    return "x".join(str(int(n)) for n in np.ravel(size))


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _as_record(descriptor: Union[VariableDescriptor, Mapping[str, Any]]) -> Dict[str, Any]:
    if isinstance(descriptor, VariableDescriptor):
        return descriptor.as_record()
    if isinstance(descriptor, MappingABC):
        return dict(descriptor)
    raise TypeError(f"Expected a VariableDescriptor or a mapping, got {type(descriptor).__name__}")


def summarize_workspace(
    descriptors: Iterable[Union[VariableDescriptor, Mapping[str, Any]]],
) -> pd.DataFrame:
    """
    Build the workspace table.

    One row per descriptor, in input order. Columns follow the field order of
    the records; "bytes" becomes "megabytes" (rounded to 2 decimals) and every
    column name gets an upper-case first letter.

    Raises
    ------
    MissingFieldError
        A record lacks one of name, size, bytes, class, complex.
    """
    records = [_as_record(d) for d in descriptors]

    for i, rec in enumerate(records):
        for field in SCOPE_FIELDS:
            rec.pop(field, None)
        missing = [f for f in REQUIRED_FIELDS if f not in rec]
        if missing:
            raise MissingFieldError(
                f"Variable descriptor #{i} ({rec.get('name', '?')}) is missing "
                f"field(s): {', '.join(missing)}"
            )

    if not records:
        columns = list(VariableDescriptor("", (), 0, "").as_record())
        table = pd.DataFrame(columns=columns)
    else:
        table = pd.DataFrame.from_records(records)
        table["size"] = table["size"].map(_format_size)
        table["bytes"] = (table["bytes"].astype(float) / BYTES_PER_MB).round(2)

    table = table.rename(columns={"bytes": "megabytes"})
    table.columns = [_capitalize(str(c)) for c in table.columns]
    return table


def print_workspace_summary(
    descriptors: Iterable[Union[VariableDescriptor, Mapping[str, Any]]],
    file: Optional[IO[str]] = None,
) -> pd.DataFrame:
    """Print the workspace table (without index) and return it."""
    table = summarize_workspace(descriptors)
    print(table.to_string(index=False), file=file)
    return table
