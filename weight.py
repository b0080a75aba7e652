"""
Weight tables for the n-tuple networks.

A WeightStore owns one dense float32 table per feature slot. Tables are
allocated once and never resized; loading a file replaces the whole set or
nothing.

File layout (little-endian):
    uint32 table_count
    table_count x ( uint64 length, length x float32 )
"""

import logging
import threading

import numpy as np

from errors import ConfigurationError, IndexOutOfRange, PersistenceError

logger = logging.getLogger(__name__)

COUNT_DTYPE = np.dtype("<u4")
LENGTH_DTYPE = np.dtype("<u8")
WEIGHT_DTYPE = np.dtype("<f4")


class WeightStore:
    def __init__(self):
        self._tables = None
        self._locks = []

    @property
    def initialized(self):
        return self._tables is not None

    def __len__(self):
        return len(self._tables) if self._tables is not None else 0

    def sizes(self):
        return tuple(len(t) for t in self._tables or ())

    def table(self, table_index):
        """Direct view of one table (for inspection and tests)."""
        self._check_table(table_index)
        return self._tables[table_index]

    def initialize(self, sizes):
        if self.initialized:
            raise ConfigurationError("weight store is already initialized")
        sizes = list(sizes)
        if not sizes:
            raise ConfigurationError("at least one weight table size is required")
        for size in sizes:
            if int(size) <= 0:
                raise ConfigurationError(f"weight table size must be positive, got {size}")
        self._install([np.zeros(int(size), dtype=np.float32) for size in sizes])
        logger.info("initialized %d weight tables (%s)", len(sizes), ",".join(str(s) for s in sizes))

    def _install(self, tables):
        if self._tables is None:
            self._locks = [threading.Lock() for _ in tables]
            self._tables = tables
            return
        # a live store keeps its shape and its locks; swap under every lock
        sizes = tuple(len(t) for t in tables)
        if sizes != self.sizes():
            raise ConfigurationError(
                f"cannot replace weight tables {list(self.sizes())} with {list(sizes)}")
        for lock in self._locks:
            lock.acquire()
        try:
            self._tables = tables
        finally:
            for lock in self._locks:
                lock.release()

    # ---- indexed access ----
    def _check_table(self, table_index):
        if self._tables is None:
            raise IndexOutOfRange("weight store is not initialized")
        if not 0 <= table_index < len(self._tables):
            raise IndexOutOfRange(f"table {table_index} out of range [0, {len(self._tables)})")

    def _check(self, table_index, key):
        self._check_table(table_index)
        size = len(self._tables[table_index])
        if not 0 <= key < size:
            raise IndexOutOfRange(f"key {key} out of range [0, {size}) in table {table_index}")

    def read(self, table_index, key):
        self._check(table_index, key)
        return float(self._tables[table_index][key])

    def accumulate(self, table_index, key, delta):
        self._check(table_index, key)
        with self._locks[table_index]:
            self._tables[table_index][key] += delta

    # ---- persistence ----
    def load(self, path):
        """
        Replace every table with the contents of `path`. On a store that is
        already initialized the file must hold the same table sizes; the swap
        waits for any accumulate in progress.
        """
        try:
            with open(path, "rb") as f:
                tables = _read_tables(f, path)
        except PersistenceError:
            raise
        except OSError as e:
            raise PersistenceError(f"cannot load weights from {path}: {e}") from e
        if not tables:
            raise PersistenceError(f"{path} holds no weight tables")
        self._install(tables)
        logger.info("loaded %d weight tables from %s", len(tables), path)

    def save(self, path):
        if self._tables is None:
            raise PersistenceError("cannot save an uninitialized weight store")
        try:
            with open(path, "wb") as f:
                f.write(np.array([len(self._tables)], dtype=COUNT_DTYPE).tobytes())
                for table in self._tables:
                    f.write(np.array([len(table)], dtype=LENGTH_DTYPE).tobytes())
                    f.write(table.astype(WEIGHT_DTYPE, copy=False).tobytes())
        except OSError as e:
            raise PersistenceError(f"cannot save weights to {path}: {e}") from e
        logger.info("saved %d weight tables to %s", len(self._tables), path)


def _read_exact(f, nbytes, path):
    data = f.read(nbytes)
    if len(data) != nbytes:
        raise PersistenceError(f"{path} is truncated")
    return data


def _read_tables(f, path):
    count = int(np.frombuffer(_read_exact(f, COUNT_DTYPE.itemsize, path), dtype=COUNT_DTYPE)[0])
    tables = []
    for _ in range(count):
        length = int(np.frombuffer(_read_exact(f, LENGTH_DTYPE.itemsize, path), dtype=LENGTH_DTYPE)[0])
        if length == 0:
            raise PersistenceError(f"{path} holds an empty weight table")
        raw = _read_exact(f, length * WEIGHT_DTYPE.itemsize, path)
        tables.append(np.frombuffer(raw, dtype=WEIGHT_DTYPE).astype(np.float32))
    return tables
