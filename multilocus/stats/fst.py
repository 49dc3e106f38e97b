# -*- coding: utf-8 -*-
import logging


import numpy as np


from multilocus.errors import DomainError
from multilocus.util import ignore_invalid, check_min_populations


logger = logging.getLogger(__name__)
debug = logger.debug


def population_rows(partition, pops=None):
    """Return a list of row index arrays, one per population block.

    Parameters
    ----------
    partition : Partition
        Population partition over isolates.
    pops : sequence of ints, optional
        Only these blocks, in sorted order.

    """
    if pops is None:
        pops = range(partition.n_parts)
    else:
        pops = sorted(set(int(p) for p in pops))
    rows = []
    for p in pops:
        start, stop = partition.bounds(p)
        rows.append(np.arange(start, stop + 1))
    return rows


def allele_counts(gm, rows, locus):
    """Count alleles at one locus in each group of rows.

    Returns
    -------
    ac : ndarray, int, shape (n_groups, n_alleles)
        Missing alleles are not counted.

    """
    n_alleles = max(len(gm.alleles), 1)
    ac = np.zeros((len(rows), n_alleles), dtype='i8')
    for ix, r in enumerate(rows):
        a = gm.values[r, locus].ravel()
        a = a[a >= 0]
        ac[ix] = np.bincount(a, minlength=n_alleles)
    return ac


def _theta_components(ac):
    # per-locus Q2 and Q3 following Weir (1996), ac has shape (r, n_alleles)
    r = ac.shape[0]
    n = ac.sum(axis=1).astype('f8')
    total = ac.sum(axis=0).astype('f8')
    n_total = n.sum()
    y = np.sum(total ** 2)
    with ignore_invalid():
        x = np.sum(np.where(ac > 0, ac ** 2 / n[:, None], 0))
        n_bar = n_total / r
        n_c = (n_total - np.sum(n ** 2) / n_total) / (r - 1)
        q2 = (x - r) / (r * (n_bar - 1))
        q3 = (1 / (r * (r - 1) * n_bar * n_c)) * \
            (y - (n_bar * (n_c - 1) / (n_bar - 1)) * x)
        q3 += ((n_bar - n_c) / (n_c * (n_bar - 1))) * (1 - x / (r - 1))
    return q2, q3


def weir_theta(gm, pops=None):
    """Estimate theta, a measure of population differentiation, following
    Weir (1996) Genetic Data Analysis II, p170.

    Parameters
    ----------
    gm : GenotypeMatrix
        Populations are given by ``gm.populations``.
    pops : sequence of ints, optional
        Indices of population blocks to compare. By default all blocks.

    Returns
    -------
    theta : float

    Raises
    ------
    DomainError
        If fewer than two populations are compared, or no locus has at
        least two distinct alleles.

    Notes
    -----
    Missing alleles are excluded from counts and both alleles of diploid
    calls are counted. Populations of size one are allowed. Loci with fewer
    than two distinct alleles across the compared populations are skipped.

    Examples
    --------

    >>> import multilocus
    >>> gm = multilocus.GenotypeMatrix.from_strings([['A', 'X'],
    ...                                              ['A', 'X'],
    ...                                              ['B', 'X'],
    ...                                              ['B', 'Y']])
    >>> gm.populations.set_sizes([2, 2])
    >>> round(multilocus.weir_theta(gm), 4)
    0.6667

    """

    rows = population_rows(gm.populations, pops)
    check_min_populations(len(rows), 2)

    n_sites = 0
    sum_q2 = sum_q3 = 0.0
    for locus in range(gm.n_loci):
        ac = allele_counts(gm, rows, locus)
        if np.count_nonzero(ac.sum(axis=0)) < 2:
            continue
        n_sites += 1
        q2, q3 = _theta_components(ac)
        sum_q2 += q2
        sum_q3 += q3

    debug('n_sites: %s; sum_q2: %r; sum_q3: %r', n_sites, sum_q2, sum_q3)
    if n_sites == 0:
        raise DomainError('need to be able to sample at least 1 polymorphic locus')
    with ignore_invalid():
        return float((np.float64(sum_q2) - sum_q3) / (n_sites - sum_q3))
