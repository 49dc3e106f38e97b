# -*- coding: utf-8 -*-
import re


import numpy as np


from multilocus.constants import HAPLOID, DIPLOID, MISSING_UNKNOWN, MISSING_GAP, \
    MISSING_SYMBOLS, CODE_UNKNOWN, CODE_GAP, MISSING_FREE, \
    ALLELE_DELIMITER
from multilocus.errors import DomainError
from multilocus.model.partition import Partition
from multilocus.util import asarray_ndim


__all__ = ['GenotypeMatrix', 'is_valid_allele', 'is_rankable_allele']


_ALLELE_PATTERN = re.compile(r'^[A-Za-z0-9]+$')

_RANKABLE_PATTERN = re.compile(r'^[0-9]+$')


def is_valid_allele(s):
    """An allele is valid if it is a missing symbol or alphanumeric."""
    return s in MISSING_SYMBOLS or _ALLELE_PATTERN.match(s) is not None


def is_rankable_allele(s):
    return s in MISSING_SYMBOLS or _RANKABLE_PATTERN.match(s) is not None


def _encode(labels, s):
    if s == MISSING_UNKNOWN:
        return CODE_UNKNOWN
    if s == MISSING_GAP:
        return CODE_GAP
    try:
        return labels[s]
    except KeyError:
        code = labels[s] = len(labels)
        return code


class GenotypeMatrix(object):
    """Allele data for a set of isolates typed at a set of loci.

    Alleles are stored as integer codes. A non-negative code indexes into
    :attr:`alleles`, while -1 and -2 stand for the "unknown" (``?``) and
    "gap" (``-``) missing symbols respectively.

    The matrix keeps three copies of the data: the original data as loaded,
    the working data which exclusions and shuffles act upon, and an optional
    backup of the working data taken around a batch of randomizations.

    Parameters
    ----------
    values : array_like, int, shape (n_isolates, n_loci) or (n_isolates, n_loci, 2)
        Allele codes. A 2-dimensional array holds haploid data, a
        3-dimensional array holds diploid data.
    alleles : sequence of strings
        Allele labels, indexed by code.

    Examples
    --------

    >>> from multilocus.model.matrix import GenotypeMatrix
    >>> gm = GenotypeMatrix.from_strings([['A', 'B', 'C'],
    ...                                   ['A', 'A', '?']])
    >>> gm.shape
    (2, 3)
    >>> gm.get_data_string(1, 2)
    '?'
    >>> gm.exclude_missing_loci()
    True
    >>> gm.n_loci
    2

    """

    def __init__(self, values, alleles):
        values = asarray_ndim(values, 2, 3, dtype='i4')
        if values.ndim == 3 and values.shape[2] != DIPLOID:
            raise ValueError('diploid data must have 2 alleles per call, found %s' %
                             values.shape[2])
        if values.shape[0] < 1 or values.shape[1] < 1:
            raise ValueError('matrix must have at least one isolate and one locus')
        alleles = tuple(alleles)
        if values.size and values.max() >= len(alleles):
            raise ValueError('allele code %s has no label' % values.max())
        if np.any(values < CODE_GAP):
            raise ValueError('bad allele code %s' % values.min())
        self._alleles = alleles
        self._original = values.copy()
        self._original.setflags(write=False)
        self._values = values.copy()
        self._backup = None
        self.missing_policy = MISSING_FREE
        self.excluded_isolates = False
        self.excluded_loci = False
        self._reset_partitions()

    @classmethod
    def from_strings(cls, rows):
        """Build a matrix from rows of allele strings.

        Each cell is either a single allele (haploid) or an ``A/B`` string or
        a 2-tuple of alleles (diploid). All cells must have the same ploidy.

        """
        labels = dict()
        data = []
        for row in rows:
            out = []
            for cell in row:
                if isinstance(cell, str) and ALLELE_DELIMITER in cell:
                    cell = cell.split(ALLELE_DELIMITER)
                if isinstance(cell, str):
                    out.append(_encode(labels, cell.strip()))
                else:
                    out.append([_encode(labels, a.strip()) for a in cell])
            data.append(out)
        alleles = sorted(labels, key=labels.get)
        return cls(data, alleles)

    def _reset_partitions(self):
        self.populations = Partition(self.n_isolates)
        self.linkage_groups = Partition(self.n_loci)
        self.linkage_groups.split_all()

    @property
    def values(self):
        """Working allele codes."""
        return self._values

    @property
    def original(self):
        """Allele codes as originally loaded, read-only."""
        return self._original

    @property
    def alleles(self):
        return self._alleles

    @property
    def ploidy(self):
        return HAPLOID if self._values.ndim == 2 else DIPLOID

    @property
    def is_haploid(self):
        return self.ploidy == HAPLOID

    @property
    def shape(self):
        return self._values.shape

    @property
    def n_isolates(self):
        return self._values.shape[0]

    @property
    def n_loci(self):
        return self._values.shape[1]

    @property
    def n_pairs_isolates(self):
        n = self.n_isolates
        return n * (n - 1) // 2

    @property
    def n_pairs_loci(self):
        n = self.n_loci
        return n * (n - 1) // 2

    def label(self, code):
        if code == CODE_UNKNOWN:
            return MISSING_UNKNOWN
        if code == CODE_GAP:
            return MISSING_GAP
        return self._alleles[code]

    def get_data_string(self, i, j):
        """Return the allele data at isolate `i`, locus `j` as text."""
        cell = self._values[i, j]
        if self.is_haploid:
            return self.label(cell)
        return ALLELE_DELIMITER.join(self.label(c) for c in cell)

    def is_missing(self):
        """Return a boolean array of shape (n_isolates, n_loci), True where a
        call has any missing allele."""
        missing = self._values < 0
        if not self.is_haploid:
            missing = np.any(missing, axis=2)
        return missing

    def is_missing_cell(self, i, j):
        return bool(np.any(self._values[i, j] < 0))

    @property
    def is_rankable(self):
        """True if every non-missing allele in the working data is a string
        of decimal digits."""
        codes = np.unique(self._values[self._values >= 0])
        return all(is_rankable_allele(self._alleles[c]) for c in codes)

    def ranks(self):
        """Return an int array of shape (n_isolates, n_loci) giving the rank of
        each call. Alleles are read as integers, missing alleles count as 0
        and diploid calls sum both alleles."""
        if not self.is_rankable:
            raise DomainError('data are not rankable')
        table = np.zeros(len(self._alleles) + 2, dtype='i8')
        for code, label in enumerate(self._alleles):
            if _RANKABLE_PATTERN.match(label):
                table[code] = int(label)
        # missing codes are negative and index the trailing zeros
        r = table[self._values]
        if not self.is_haploid:
            r = r.sum(axis=2)
        return r

    # exclusion

    def include_all(self):
        """Restore the original data, discarding any exclusions."""
        self._check_no_backup()
        self._values = self._original.copy()
        self.excluded_isolates = self.excluded_loci = False
        self._reset_partitions()

    def exclude_missing_isolates(self):
        """Remove isolates with missing data at any locus. Returns False,
        leaving the data unchanged, if every isolate has missing data."""
        self._check_no_backup()
        keep = ~np.any(self.is_missing(), axis=1)
        if not np.any(keep):
            return False
        self._values = self._values[keep]
        self.excluded_isolates = True
        self._reset_partitions()
        return True

    def exclude_missing_loci(self):
        """Remove loci with missing data in any isolate. Returns False,
        leaving the data unchanged, if every locus has missing data."""
        self._check_no_backup()
        keep = ~np.any(self.is_missing(), axis=0)
        if not np.any(keep):
            return False
        self._values = self._values[:, keep]
        self.excluded_loci = True
        self._reset_partitions()
        return True

    # snapshots

    @property
    def has_backup(self):
        return self._backup is not None

    def _check_no_backup(self):
        if self._backup is not None:
            raise RuntimeError('operation not allowed while a backup is outstanding')

    def backup(self):
        self._check_no_backup()
        self._backup = self._values.copy()

    def restore(self):
        """Copy the backup into the working data. The backup is kept."""
        if self._backup is None:
            raise RuntimeError('no backup to restore')
        np.copyto(self._values, self._backup)

    def discard_backup(self):
        self._backup = None

    def copy(self):
        other = GenotypeMatrix(self._original, self._alleles)
        other._values = self._values.copy()
        other.missing_policy = self.missing_policy
        other.excluded_isolates = self.excluded_isolates
        other.excluded_loci = self.excluded_loci
        other.populations = self.populations.copy()
        other.linkage_groups = self.linkage_groups.copy()
        return other

    def __repr__(self):
        return '<GenotypeMatrix shape=%s ploidy=%s>' % (self.shape, self.ploidy)
