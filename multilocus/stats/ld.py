# -*- coding: utf-8 -*-
import logging
import itertools


import numpy as np


from multilocus.stats.distance import pairwise_isolate_distance, \
    locus_distances, distance_variances, _variance, _max_sum_cov
from multilocus.util import ignore_invalid


logger = logging.getLogger(__name__)
debug = logger.debug


def _two_locus_genotypes(gm, i, j):
    """Collect the distinct two-locus genotypes observed at loci `i` and `j`,
    in order of first appearance."""
    values = gm.values
    missing = gm.is_missing()
    seen = dict()
    for k in range(gm.n_isolates):
        if missing[k, i] or missing[k, j]:
            continue
        if gm.is_haploid:
            new = [(values[k, i], values[k, j])]
        else:
            (ia, ib), (ja, jb) = values[k, i], values[k, j]
            # decompose into haplotypes unless heterozygous at both loci
            if ia == ib:
                new = [(ia, ja), (ia, jb)]
            elif ja == jb:
                new = [(ia, ja), (ib, ja)]
            else:
                new = []
        for g in reversed(new):
            seen.setdefault((int(g[0]), int(g[1])), None)
    return list(seen)


def is_compatible(genotypes):
    """Test whether a set of two-locus genotypes is compatible, i.e., could
    have arisen without recombination or homoplasy.

    Genotypes are placed one at a time on a lattice. A genotype joins the
    lattice if it shares an allele with the lattice at exactly one of the
    two loci. If it shares alleles at both loci it closes a cycle, and the
    set is incompatible. Genotypes sharing nothing with the lattice are left
    to seed a new lattice.

    Parameters
    ----------
    genotypes : list of pairs
        Distinct two-locus genotypes.

    Returns
    -------
    compatible : bool

    Examples
    --------

    >>> from multilocus.stats.ld import is_compatible
    >>> is_compatible([('A', 'X'), ('A', 'Y'), ('B', 'Y')])
    True
    >>> is_compatible([('A', 'X'), ('A', 'Y'), ('B', 'X'), ('B', 'Y')])
    False

    """
    genotypes = list(genotypes)
    while genotypes:
        graph = [genotypes.pop()]
        k = 0
        while k < len(genotypes):
            first, second = genotypes[k]
            unique_first = all(g[0] != first for g in graph)
            unique_second = all(g[1] != second for g in graph)
            if not unique_first and not unique_second:
                return False
            if unique_first != unique_second:
                graph.append(genotypes.pop(k))
                # look again from the start with the grown lattice
                k = 0
            else:
                k += 1
    return True


def proportion_compatible(gm):
    """Compute the proportion of pairs of loci that are phylogenetically
    compatible, following Estabrook and Landrum (1975).

    Parameters
    ----------
    gm : GenotypeMatrix

    Returns
    -------
    pc : float
        Proportion of locus pairs whose two-locus genotypes are compatible.
        Isolates with missing data at either locus of a pair are ignored for
        that pair. Diploid calls are decomposed into haplotypes where at
        least one locus is homozygous; double heterozygotes are ignored.

    """
    n_pairs = gm.n_pairs_loci
    n_incompatible = 0
    for i, j in itertools.combinations(range(gm.n_loci), 2):
        if not is_compatible(_two_locus_genotypes(gm, i, j)):
            n_incompatible += 1
    debug('incompatible: %s of %s', n_incompatible, n_pairs)
    with ignore_invalid():
        return np.float64(n_pairs - n_incompatible) / n_pairs


def index_association(gm, variances=None):
    """Compute the index of association and the standardised index rBarD,
    after Maynard Smith et al. (1993) and Agapow and Burt (2001).

    Parameters
    ----------
    gm : GenotypeMatrix
    variances : tuple, optional
        Output of :func:`multilocus.stats.distance.distance_variances`, if
        already computed. These do not change when isolates are shuffled,
        so can be computed once before a series of randomizations.

    Returns
    -------
    ia : float
        Index of association, the ratio of the observed to the expected
        variance of pairwise distances, less one.
    rbar_d : float
        Observed less expected variance, scaled by the largest possible sum
        of covariances between loci.

    """
    if variances is None:
        variances = distance_variances(gm)
    _, sum_var, max_sum_cov = variances
    dist = pairwise_isolate_distance(gm)
    var_obs = _variance(dist)
    debug('var_obs: %r; sum_var: %r', var_obs, sum_var)
    with ignore_invalid():
        ia = np.float64(var_obs) / sum_var - 1
        rbar_d = (var_obs - np.float64(sum_var)) / (2 * max_sum_cov)
    return float(ia), float(rbar_d)


def rank_variances(gm):
    """Compute the variance of allele ranks at each locus, for use in
    :func:`rbar_s`.

    Returns
    -------
    var : ndarray, float, shape (n_loci,)
    sum_var : float
    max_sum_cov : float

    """
    ranks = gm.ranks()
    var = _variance(ranks, axis=0)
    return var, float(np.sum(var)), float(_max_sum_cov(var))


def rbar_s(gm, variances=None):
    """Compute rBarS, the analogue of rBarD computed on allele ranks rather
    than pairwise distances. Only defined for data where every allele is
    an integer.

    Parameters
    ----------
    gm : GenotypeMatrix
    variances : tuple, optional
        Output of :func:`rank_variances`, if already computed.

    Returns
    -------
    rbar_s : float

    """
    if variances is None:
        variances = rank_variances(gm)
    _, sum_var, max_sum_cov = variances
    totals = gm.ranks().sum(axis=1)
    var_obs = _variance(totals)
    with ignore_invalid():
        return float((var_obs - np.float64(sum_var)) / (2 * max_sum_cov))


def pairwise_r(gm, variances=None):
    """Compute rBarD for every pair of loci.

    Parameters
    ----------
    gm : GenotypeMatrix
    variances : tuple, optional
        Output of :func:`multilocus.stats.distance.distance_variances`, if
        already computed.

    Returns
    -------
    r : ndarray, float, shape (n_loci * (n_loci - 1) / 2,)
        Values in condensed form. NaN for pairs that include a locus with no
        variation.

    """
    if variances is None:
        variances = distance_variances(gm)
    var = variances[0]
    d = locus_distances(gm)
    r = np.empty(gm.n_pairs_loci, dtype='f8')
    for ix, (i, j) in enumerate(itertools.combinations(range(gm.n_loci), 2)):
        if var[i] == 0 or var[j] == 0:
            r[ix] = np.nan
            continue
        v = _variance(d[:, i] + d[:, j])
        r[ix] = (v - (var[i] + var[j])) / (2 * np.sqrt(var[i] * var[j]))
    return r
