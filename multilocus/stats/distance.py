# -*- coding: utf-8 -*-
import logging


import numpy as np


from multilocus.constants import ALLELE_DELIMITER, MISSING_SYMBOLS, CODE_UNKNOWN
from multilocus.util import ignore_invalid


logger = logging.getLogger(__name__)
debug = logger.debug


def haploid_distance(a, b, strict=False):
    """Compute the distance between haploid calls.

    Parameters
    ----------
    a, b : array_like, int
        Allele codes, broadcastable against each other. Negative codes are
        missing.
    strict : bool, optional
        If False, a missing allele matches anything. If True, a missing
        allele never matches.

    Returns
    -------
    d : ndarray, int
        0 where the calls match, otherwise 1.

    """
    a = np.asarray(a)
    b = np.asarray(b)
    known = (a >= 0) & (b >= 0)
    if strict:
        d = ~known | (a != b)
    else:
        d = known & (a != b)
    return d.astype('i4')


def _match(x, y):
    # missing matches anything
    return (x < 0) | (y < 0) | (x == y)


def _strict_match(x, y):
    return (x >= 0) & (y >= 0) & (x == y)


def diploid_distance(a, b, strict=False):
    """Compute the distance between unordered diploid calls.

    Parameters
    ----------
    a, b : array_like, int, shape (..., 2)
        Allele codes, broadcastable against each other. Negative codes are
        missing.
    strict : bool, optional
        If False, a missing allele matches anything. If True, a missing
        allele never matches.

    Returns
    -------
    d : ndarray, int
        Number of alleles by which the calls differ, 0, 1 or 2.

    Notes
    -----
    In the relaxed form two calls are at distance 0 if they match in either
    allele order, and at distance 2 only if all four alleles are known and
    no allele of one call is found in the other.

    """
    a = np.asarray(a)
    b = np.asarray(b)
    a1, a2 = a[..., 0], a[..., 1]
    b1, b2 = b[..., 0], b[..., 1]

    if strict:
        m11 = _strict_match(a1, b1)
        m22 = _strict_match(a2, b2)
        m12 = _strict_match(a1, b2)
        m21 = _strict_match(a2, b1)
        d = np.where(m11, np.where(m22, 0, 1),
                     np.where(m12, np.where(m21, 0, 1),
                              np.where(m21 | m22, 1, 2)))
        return d.astype('i4')

    same = (_match(a1, b1) & _match(a2, b2)) | (_match(a1, b2) & _match(a2, b1))
    known = (a1 >= 0) & (a2 >= 0) & (b1 >= 0) & (b2 >= 0)
    disjoint = known & (a1 != b1) & (a1 != b2) & (a2 != b1) & (a2 != b2)
    d = np.where(same, 0, np.where(disjoint, 2, 1))
    return d.astype('i4')


def _parse_call(x, codes):
    if isinstance(x, str):
        x = x.split(ALLELE_DELIMITER) if ALLELE_DELIMITER in x else x
    if isinstance(x, str):
        alleles = [x]
    else:
        alleles = list(x)
    out = []
    for allele in alleles:
        if allele in MISSING_SYMBOLS:
            out.append(CODE_UNKNOWN)
        else:
            out.append(codes.setdefault(allele, len(codes)))
    return out


def distance(x, y, strict=False):
    """Compute the distance between two calls given as allele strings.

    Parameters
    ----------
    x, y : string or pair of strings
        Haploid alleles, or diploid calls as ``'A/B'`` strings or pairs.
    strict : bool, optional
        If True, missing alleles never match.

    Returns
    -------
    d : int

    Examples
    --------

    >>> from multilocus.stats.distance import distance
    >>> distance('A', 'B')
    1
    >>> distance('A', '?')
    0
    >>> distance('A', '?', strict=True)
    1
    >>> distance('A/B', 'B/A')
    0
    >>> distance('A/B', 'C/D')
    2

    """
    codes = dict()
    a = _parse_call(x, codes)
    b = _parse_call(y, codes)
    if len(a) != len(b):
        raise ValueError('calls have different ploidy: %r, %r' % (x, y))
    if len(a) == 1:
        return int(haploid_distance(a[0], b[0], strict=strict))
    if len(a) == 2:
        return int(diploid_distance(a, b, strict=strict))
    raise ValueError('unsupported ploidy: %s' % len(a))


def locus_distances(gm, strict=False, loci=None):
    """Compute the distance at each locus for every pair of isolates.

    Parameters
    ----------
    gm : GenotypeMatrix
    strict : bool, optional
        If True, missing alleles never match.
    loci : array_like, int, optional
        Only use these loci.

    Returns
    -------
    d : ndarray, int, shape (n_pairs, n_loci)
        Pairs are ordered as in a condensed distance matrix, i.e., (0, 1),
        (0, 2), ..., (1, 2), ...

    """
    values = gm.values
    if loci is not None:
        values = values[:, np.asarray(loci)]
    i, j = np.triu_indices(gm.n_isolates, k=1)
    if gm.is_haploid:
        return haploid_distance(values[i], values[j], strict=strict)
    return diploid_distance(values[i], values[j], strict=strict)


def pairwise_isolate_distance(gm, strict=False, loci=None):
    """Compute the distance between every pair of isolates, summed over
    loci.

    Parameters
    ----------
    gm : GenotypeMatrix
    strict : bool, optional
        If True, missing alleles never match.
    loci : array_like, int, optional
        Only use these loci.

    Returns
    -------
    dist : ndarray, int, shape (n_isolates * (n_isolates - 1) / 2,)
        Distance matrix in condensed form.

    Examples
    --------

    >>> import multilocus
    >>> gm = multilocus.GenotypeMatrix.from_strings([['A', 'B', 'C'],
    ...                                              ['A', 'A', 'C'],
    ...                                              ['B', '?', 'C']])
    >>> multilocus.pairwise_isolate_distance(gm)
    array([1, 1, 1])
    >>> multilocus.pairwise_isolate_distance(gm, strict=True)
    array([1, 2, 2])

    """
    d = locus_distances(gm, strict=strict, loci=loci)
    return d.sum(axis=1)


def condensed_coords(i, j, n):
    """Transform square distance matrix coordinates to the corresponding
    index into a condensed, 1D form of the matrix.

    Parameters
    ----------
    i : int
        Row index.
    j : int
        Column index.
    n : int
        Size of the square matrix (length of first or second dimension).

    Returns
    -------
    ix : int

    """

    # guard conditions
    if i == j or i >= n or j >= n or i < 0 or j < 0:
        raise ValueError('invalid coordinates: %s, %s' % (i, j))

    # normalise order
    i, j = sorted([i, j])

    # items in rows before this one, then previous items in this row
    return i * (2 * n - i - 1) // 2 + j - i - 1


def _variance(d, axis=0):
    # population variance over pairs, as sum of squares less the square of
    # sums
    d = np.asarray(d, dtype='f8')
    n = d.shape[axis]
    with ignore_invalid():
        return (np.sum(d ** 2, axis=axis) - np.sum(d, axis=axis) ** 2 / n) / n


def _max_sum_cov(var):
    # sum over pairs of loci of sqrt(v_i * v_j)
    s = np.sqrt(var)
    i, j = np.triu_indices(s.shape[0], k=1)
    return np.sum(s[i] * s[j])


def distance_variances(gm, strict=False):
    """Compute the variance of pairwise isolate distances at each locus.

    Parameters
    ----------
    gm : GenotypeMatrix
    strict : bool, optional
        If True, missing alleles never match.

    Returns
    -------
    var : ndarray, float, shape (n_loci,)
        Variance of pairwise distances at each locus.
    sum_var : float
        Sum of the per-locus variances, the expected variance of summed
        distances if loci are unlinked.
    max_sum_cov : float
        Sum over all pairs of loci of ``sqrt(var[i] * var[j])``, the largest
        possible sum of covariances between loci.

    """
    d = locus_distances(gm, strict=strict)
    var = _variance(d, axis=0)
    sum_var = float(np.sum(var))
    max_sum_cov = float(_max_sum_cov(var))
    debug('var: %r; sum_var: %r; max_sum_cov: %r', var, sum_var, max_sum_cov)
    return var, sum_var, max_sum_cov
