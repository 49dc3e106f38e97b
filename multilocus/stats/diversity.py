# -*- coding: utf-8 -*-
import logging


import numpy as np


from multilocus.stats.distance import pairwise_isolate_distance
from multilocus.util import asarray_ndim, ignore_invalid, check_min_loci, \
    get_random_state


logger = logging.getLogger(__name__)
debug = logger.debug


def _n_from_condensed(dist):
    n = int(np.ceil(np.sqrt(2 * dist.shape[0])))
    if n * (n - 1) // 2 != dist.shape[0]:
        raise ValueError('bad length for condensed distance matrix: %s' % dist.shape[0])
    return n


def genotype_frequencies(dist, n=None):
    """Group isolates into genotypes and count the isolates in each.

    Parameters
    ----------
    dist : array_like, int, shape (n * (n - 1) / 2,)
        Pairwise isolate distances in condensed form.
    n : int, optional
        Number of isolates. Derived from the length of `dist` if not given.

    Returns
    -------
    freq : ndarray, int, shape (n,)
        For each isolate, the number of isolates assigned to its genotype if
        it heads a genotype, otherwise 0.

    Notes
    -----
    Isolates are visited in order. Each isolate that has not already been
    assigned absorbs every later unassigned isolate at distance 0. Under
    missing data, distance 0 is not transitive, so the result depends on
    isolate order; a missing allele may join an isolate to the first of two
    otherwise distinct genotypes.

    Examples
    --------

    >>> from multilocus.stats.diversity import genotype_frequencies
    >>> genotype_frequencies([0, 1, 1])
    array([2, 0, 1])

    """
    dist = asarray_ndim(dist, 1)
    if n is None:
        n = _n_from_condensed(dist)
    freq = np.ones(n, dtype='i8')
    start = 0
    for i in range(n - 1):
        stop = start + n - i - 1
        if freq[i]:
            same = (dist[start:stop] == 0) & (freq[i + 1:] > 0)
            freq[i] += np.count_nonzero(same)
            freq[i + 1:][same] = 0
        start = stop
    return freq


def count_genotypes(dist, n=None):
    """Count distinct genotypes from pairwise isolate distances.

    Returns
    -------
    n_genotypes : int
        Number of distinct genotypes.
    max_freq : int
        Number of isolates carrying the most common genotype.

    """
    freq = genotype_frequencies(dist, n)
    return int(np.count_nonzero(freq)), int(freq.max())


def genotypic_diversity(dist):
    """Proportion of pairs of isolates that have distinct genotypes.

    Parameters
    ----------
    dist : array_like, int, shape (n_pairs,)
        Pairwise isolate distances in condensed form.

    Returns
    -------
    div : float

    """
    dist = asarray_ndim(dist, 1)
    with ignore_invalid():
        return np.float64(np.count_nonzero(dist)) / dist.shape[0]


def _sem(x):
    from scipy.stats import sem
    if x.shape[0] < 2:
        return 0.
    return float(sem(x, ddof=1))


def diversity_curve(gm, n_samples=100, random_state=None):
    """Estimate how the number of genotypes and genotypic diversity grow
    with the number of loci typed.

    For each number of loci k from 1 to the total number of loci, `n_samples`
    random sets of k loci are drawn and the number of genotypes and diversity
    computed from those loci. When all loci are used a single set is drawn
    and its standard errors are zero.

    Parameters
    ----------
    gm : GenotypeMatrix
    n_samples : int, optional
        Number of random loci sets drawn for each k.
    random_state : None, int or RandomState, optional

    Returns
    -------
    n_loci : ndarray, int, shape (n_loci,)
        Number of loci sampled.
    genotypes_mean, genotypes_se : ndarray, float, shape (n_loci,)
        Mean and standard error of the number of genotypes.
    diversity_mean, diversity_se : ndarray, float, shape (n_loci,)
        Mean and standard error of genotypic diversity.

    """
    check_min_loci(gm.n_loci, 2)
    if n_samples < 1:
        raise ValueError('n_samples must be positive, found %s' % n_samples)
    rs = get_random_state(random_state)

    n_loci = np.arange(1, gm.n_loci + 1)
    genotypes_mean = np.empty(gm.n_loci)
    genotypes_se = np.empty(gm.n_loci)
    diversity_mean = np.empty(gm.n_loci)
    diversity_se = np.empty(gm.n_loci)

    for ix, k in enumerate(n_loci):
        n = 1 if k == gm.n_loci else n_samples
        genotypes = np.empty(n)
        diversity = np.empty(n)
        for s in range(n):
            loci = np.sort(rs.choice(gm.n_loci, size=k, replace=False))
            dist = pairwise_isolate_distance(gm, loci=loci)
            genotypes[s] = count_genotypes(dist, gm.n_isolates)[0]
            diversity[s] = genotypic_diversity(dist)
        genotypes_mean[ix] = genotypes.mean()
        genotypes_se[ix] = _sem(genotypes)
        diversity_mean[ix] = diversity.mean()
        diversity_se[ix] = _sem(diversity)
        debug('k: %s; genotypes: %s; diversity: %s', k, genotypes_mean[ix],
              diversity_mean[ix])

    return n_loci, genotypes_mean, genotypes_se, diversity_mean, diversity_se
