# -*- coding: utf-8 -*-
import numpy as np


__all__ = ['Partition']


class Partition(object):
    """An ordered division of the indices ``0..n-1`` into contiguous,
    non-empty blocks. Used both for populations over isolates and for
    linkage groups over loci.

    Parameters
    ----------
    n : int
        Number of items being partitioned.
    sizes : sequence of ints, optional
        Block sizes. If not given, all items form a single block.

    Examples
    --------

    >>> from multilocus.model.partition import Partition
    >>> p = Partition(5, sizes=[2, 3])
    >>> p.n_parts
    2
    >>> p.bounds(1)
    (2, 4)
    >>> p.split_all()
    >>> p.sizes
    [1, 1, 1, 1, 1]

    """

    def __init__(self, n, sizes=None):
        n = int(n)
        if n < 1:
            raise ValueError('partition must cover at least one item, found %s' % n)
        self._n = n
        self._stops = np.array([n], dtype='i8')
        if sizes is not None:
            self.set_sizes(sizes)

    @property
    def n(self):
        return self._n

    @property
    def n_parts(self):
        return len(self._stops)

    def __len__(self):
        return self.n_parts

    @property
    def sizes(self):
        return np.diff(self._stops, prepend=0).tolist()

    def bounds(self, i):
        """Return the inclusive ``(start, stop)`` bounds of block `i`."""
        if not 0 <= i < self.n_parts:
            raise IndexError('block index out of range: %s' % i)
        start = int(self._stops[i - 1]) if i > 0 else 0
        return start, int(self._stops[i]) - 1

    def __iter__(self):
        for i in range(self.n_parts):
            yield self.bounds(i)

    def block_of(self, index):
        """Return the index of the block containing item `index`."""
        if not 0 <= index < self._n:
            raise IndexError('item index out of range: %s' % index)
        return int(np.searchsorted(self._stops, index, side='right'))

    def merge_all(self):
        self._stops = np.array([self._n], dtype='i8')

    def split_all(self):
        self._stops = np.arange(1, self._n + 1, dtype='i8')

    def set_sizes(self, sizes):
        """Replace all blocks. Block sizes must be positive and sum to `n`;
        otherwise a ValueError is raised and the partition is unchanged."""
        sizes = np.asarray(sizes)
        if sizes.ndim != 1 or sizes.size == 0:
            raise ValueError('expected a non-empty sequence of block sizes')
        if sizes.dtype.kind not in 'iu':
            raise ValueError('block sizes must be integers, found %s' % sizes.tolist())
        sizes = sizes.astype('i8')
        if np.any(sizes < 1):
            raise ValueError('block sizes must be positive, found %s' % sizes.tolist())
        if sizes.sum() != self._n:
            raise ValueError('block sizes must sum to %s, found %s' %
                             (self._n, int(sizes.sum())))
        self._stops = np.cumsum(sizes)

    def copy(self):
        other = Partition(self._n)
        other._stops = self._stops.copy()
        return other

    def __eq__(self, other):
        return isinstance(other, Partition) and self._n == other._n and \
            np.array_equal(self._stops, other._stops)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return 'Partition(%s, sizes=%r)' % (self._n, self.sizes)
