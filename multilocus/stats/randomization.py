# -*- coding: utf-8 -*-
"""Permutation tests.

Isolates are shuffled within populations, with each linkage group moved
independently, and statistics recomputed on each shuffled replicate to give
an empirical null distribution.

"""
import logging


import numpy as np


from multilocus.constants import MISSING_FIXED, MISSING_FREE, GREATER, LESS, \
    EXTREME, PROGRESS_STEP, PARTITION_PROGRESS_STEP
from multilocus.model.partition import Partition
from multilocus.stats.distance import pairwise_isolate_distance, \
    distance_variances
from multilocus.stats.diversity import count_genotypes, genotypic_diversity
from multilocus.stats.ld import proportion_compatible, index_association, \
    rank_variances, rbar_s, pairwise_r
from multilocus.stats.fst import weir_theta, population_rows
from multilocus.stats.subdivision import find_partitions
from multilocus.util import get_random_state, check_min_populations


logger = logging.getLogger(__name__)
debug = logger.debug


DIVERSITY_STATISTICS = ('NumDiff', 'MaxFreq', 'Diver', 'PrCompat', 'IndAssoc',
                        'rBarD', 'rBarS')

DIVERSITY_DIRECTIONS = (LESS, GREATER, LESS, GREATER, GREATER, GREATER, EXTREME)


def _meets(observed, value, directions):
    with np.errstate(invalid='ignore'):
        greater = value >= observed
        less = value <= observed
        extreme = np.where(observed < 0, less, greater)
    return np.select([directions == GREATER, directions == LESS,
                      directions == EXTREME], [greater, less, extreme], False)


class ReplicateResult(object):
    """Values of one or more statistics on the observed data and on each
    randomized replicate.

    Parameters
    ----------
    names : sequence of strings
        Statistic names.
    directions : sequence of strings
        For each statistic, which way a replicate value must fall relative
        to the observed value to count towards the p-value. One of 'greater'
        (or equal), 'less' (or equal), or 'extreme', meaning at least as far
        from zero on the same side as the observed value.
    observed : ndarray, float, shape (n_statistics,)
    replicates : ndarray, float, shape (n, n_statistics)
    counts : ndarray, int, shape (n_statistics,)
        Number of replicates meeting the criterion.

    """

    def __init__(self, names, directions, observed, replicates, counts):
        self.names = tuple(names)
        self.directions = tuple(directions)
        self.observed = observed
        self.replicates = replicates
        self.counts = counts

    @property
    def n(self):
        return self.replicates.shape[0]

    @property
    def scales(self):
        # extreme values are counted on one side only, so double them
        return np.array([2 if d == EXTREME else 1 for d in self.directions])

    def pvalues(self):
        """Return the p-value for each statistic, or None if no replicates
        were run. NaN where the observed value is NaN."""
        if self.n == 0:
            return None
        p = self.scales * self.counts / float(self.n)
        return np.where(np.isnan(self.observed), np.nan, p)

    def subset(self, start, stop, names=None):
        sl = slice(start, stop)
        return ReplicateResult(names if names is not None else self.names[sl],
                               self.directions[sl], self.observed[sl],
                               self.replicates[:, sl], self.counts[sl])

    def __repr__(self):
        return '<ReplicateResult n=%s statistics=%s>' % (self.n, len(self.names))


class RandomizationEngine(object):
    """Shuffle the working data of a genotype matrix and run statistics over
    repeated shuffles.

    Parameters
    ----------
    gm : GenotypeMatrix
    random_state : None, int or RandomState, optional

    """

    def __init__(self, gm, random_state=None):
        self.gm = gm
        self.random_state = get_random_state(random_state)

    def _shuffle_block(self, rows, loci, missing):
        # each row swaps with a random row from the same block
        values = self.gm.values
        rs = self.random_state
        n = rows.shape[0]
        for i in range(n):
            j = rs.randint(0, n)
            if j == i:
                continue
            ri, rj = rows[i], rows[j]
            cols = loci
            if missing is not None:
                # fixed missing data stays where it is
                cols = loci[~(missing[ri, loci] | missing[rj, loci])]
            tmp = values[ri, cols].copy()
            values[ri, cols] = values[rj, cols]
            values[rj, cols] = tmp

    def _missing(self, missing_policy):
        if missing_policy is None:
            missing_policy = self.gm.missing_policy
        if missing_policy not in (MISSING_FIXED, MISSING_FREE):
            raise ValueError('bad missing data policy: %r' % missing_policy)
        if missing_policy == MISSING_FIXED:
            return self.gm.is_missing()
        return None

    def shuffle_dataset(self, populations=None, linkage_groups=None,
                        missing_policy=None):
        """Shuffle isolates within each population, moving each linkage group
        independently.

        Parameters
        ----------
        populations : Partition, optional
            Defaults to the matrix's population partition.
        linkage_groups : Partition, optional
            Defaults to the matrix's linkage group partition.
        missing_policy : {'fixed', 'free'}, optional
            Defaults to the matrix's missing data policy.

        """
        gm = self.gm
        if populations is None:
            populations = gm.populations
        if linkage_groups is None:
            linkage_groups = gm.linkage_groups
        missing = self._missing(missing_policy)
        for start, stop in populations:
            if start == stop:
                continue
            rows = np.arange(start, stop + 1)
            for lstart, lstop in linkage_groups:
                self._shuffle_block(rows, np.arange(lstart, lstop + 1), missing)

    def shuffle_rows(self, rows, missing_policy=None):
        """Shuffle whole isolates among the given rows, which need not be
        contiguous."""
        rows = np.asarray(rows, dtype=int)
        loci = np.arange(self.gm.n_loci)
        self._shuffle_block(rows, loci, self._missing(missing_policy))

    def run_replicates(self, n, statistic, names=None, directions=GREATER,
                       shuffle=None, on_progress=None, progress_step=PROGRESS_STEP):
        """Compute statistics on the observed data and on `n` shuffled
        replicates.

        The working data are backed up first, restored after each replicate,
        and are unchanged when this returns, whether or not an error is
        raised.

        Parameters
        ----------
        n : int
            Number of replicates.
        statistic : function
            Called with the genotype matrix, returns a value or a 1D sequence
            of values.
        names : sequence of strings, optional
            Statistic names.
        directions : string or sequence of strings, optional
            Direction for each statistic, see :class:`ReplicateResult`.
        shuffle : function, optional
            Called with no arguments to shuffle the working data. Defaults
            to :meth:`shuffle_dataset`.
        on_progress : function, optional
            Called as ``on_progress(i, n)`` every `progress_step` replicates.
            If not given, progress is logged.
        progress_step : int, optional

        Returns
        -------
        result : ReplicateResult

        """
        if n < 0:
            raise ValueError('number of replicates must not be negative, found %s' % n)
        if shuffle is None:
            shuffle = self.shuffle_dataset
        gm = self.gm

        gm.backup()
        try:
            observed = np.atleast_1d(np.asarray(statistic(gm), dtype='f8'))
            k = observed.shape[0]
            if isinstance(directions, str):
                directions = (directions,) * k
            dirs = np.asarray(directions)
            if dirs.shape != (k,):
                raise ValueError('expected %s directions, found %s' % (k, dirs.shape))
            if names is None:
                names = tuple(str(i) for i in range(k))
            replicates = np.empty((n, k), dtype='f8')
            counts = np.zeros(k, dtype='i8')
            for i in range(1, n + 1):
                if i % progress_step == 0:
                    if on_progress is not None:
                        on_progress(i, n)
                    else:
                        logger.info('doing randomization %s of %s', i, n)
                shuffle()
                value = np.atleast_1d(np.asarray(statistic(gm), dtype='f8'))
                replicates[i - 1] = value
                counts += _meets(observed, value, dirs)
                gm.restore()
        finally:
            gm.restore()
            gm.discard_backup()

        debug('counts: %r', counts)
        return ReplicateResult(names, directions, observed, replicates, counts)


def diversity_statistics(gm, variances=None, rank_vars=None):
    """Compute the statistics reported by :func:`diversity_test`.

    Returns
    -------
    values : ndarray, float, shape (7,)
        Number of genotypes, frequency of the commonest genotype, genotypic
        diversity, proportion of compatible locus pairs, index of
        association, rBarD and rBarS. rBarS is NaN if the data are not
        rankable.

    """
    dist = pairwise_isolate_distance(gm)
    n_genotypes, max_freq = count_genotypes(dist, gm.n_isolates)
    ia, rbar_d = index_association(gm, variances)
    if gm.is_rankable:
        rs = rbar_s(gm, rank_vars)
    else:
        rs = np.nan
    return np.array([n_genotypes, max_freq, genotypic_diversity(dist),
                     proportion_compatible(gm), ia, rbar_d, rs])


def diversity_test(gm, n, pairwise=False, random_state=None, on_progress=None,
                   progress_step=PROGRESS_STEP):
    """Test for linkage disequilibrium and clonality by comparing genotypic
    diversity and association statistics against shuffled data.

    Parameters
    ----------
    gm : GenotypeMatrix
    n : int
        Number of randomizations.
    pairwise : bool, optional
        If True, also compute rBarD for every pair of loci.
    random_state : None, int or RandomState, optional
    on_progress : function, optional
    progress_step : int, optional

    Returns
    -------
    result : ReplicateResult
        Statistics named as in :data:`DIVERSITY_STATISTICS`.
    pairs : ReplicateResult or None
        Pairwise rBarD, if requested.

    """
    # distance and rank variances at each locus survive shuffling
    variances = distance_variances(gm)
    rank_vars = rank_variances(gm) if gm.is_rankable else None
    n_stats = len(DIVERSITY_STATISTICS)

    if pairwise:
        def statistic(g):
            return np.concatenate([diversity_statistics(g, variances, rank_vars),
                                   pairwise_r(g, variances)])
        directions = DIVERSITY_DIRECTIONS + (GREATER,) * gm.n_pairs_loci
    else:
        def statistic(g):
            return diversity_statistics(g, variances, rank_vars)
        directions = DIVERSITY_DIRECTIONS

    engine = RandomizationEngine(gm, random_state)
    result = engine.run_replicates(n, statistic, directions=directions,
                                   on_progress=on_progress,
                                   progress_step=progress_step)
    stats = result.subset(0, n_stats, names=DIVERSITY_STATISTICS)
    if not pairwise:
        return stats, None
    pair_names = ['%s-%s' % (i + 1, j + 1)
                  for i in range(gm.n_loci) for j in range(i + 1, gm.n_loci)]
    pairs = result.subset(n_stats, None, names=pair_names)
    return stats, pairs


def theta_test(gm, n, random_state=None, on_progress=None,
               progress_step=PROGRESS_STEP):
    """Test population differentiation by comparing theta against data with
    isolates shuffled across all populations.

    Each replicate shuffles whole isolates over the full dataset, with
    missing data free to move, then recomputes theta with the original
    population boundaries.

    Returns
    -------
    result : ReplicateResult

    """
    check_min_populations(gm.populations.n_parts, 2)
    engine = RandomizationEngine(gm, random_state)

    def shuffle():
        engine.shuffle_dataset(populations=Partition(gm.n_isolates),
                               linkage_groups=Partition(gm.n_loci),
                               missing_policy=MISSING_FREE)

    return engine.run_replicates(n, weir_theta, names=('Theta',),
                                 directions=GREATER, shuffle=shuffle,
                                 on_progress=on_progress,
                                 progress_step=progress_step)


def theta_subset_test(gm, pops, n, random_state=None, on_progress=None,
                      progress_step=PROGRESS_STEP):
    """As :func:`theta_test`, but only comparing the selected populations.

    Each replicate pools the isolates of the selected populations and
    shuffles whole isolates among them, keeping the matrix's missing data
    policy.

    Parameters
    ----------
    gm : GenotypeMatrix
    pops : sequence of ints
        Indices of at least two population blocks.
    n : int

    Returns
    -------
    result : ReplicateResult

    """
    pops = sorted(set(int(p) for p in pops))
    check_min_populations(len(pops), 2)
    rows = np.concatenate(population_rows(gm.populations, pops))
    engine = RandomizationEngine(gm, random_state)

    def statistic(g):
        return weir_theta(g, pops)

    def shuffle():
        engine.shuffle_rows(rows)

    return engine.run_replicates(n, statistic, names=('Theta',),
                                 directions=GREATER, shuffle=shuffle,
                                 on_progress=on_progress,
                                 progress_step=progress_step)


def partition_test(gm, n, random_state=None, on_progress=None,
                   progress_step=PARTITION_PROGRESS_STEP):
    """Count partitions (see :func:`multilocus.stats.subdivision.find_partitions`)
    in the observed data and in shuffled replicates.

    Returns
    -------
    parts : list of tuples
        Partitions found in the observed data.
    freq : OrderedDict
        Partition size frequencies in the observed data.
    result : ReplicateResult
        Number of partitions in the observed data and in each replicate.

    """
    parts, freq = find_partitions(gm)
    engine = RandomizationEngine(gm, random_state)

    def statistic(g):
        return len(find_partitions(g)[0])

    result = engine.run_replicates(n, statistic, names=('Partitions',),
                                   directions=GREATER, on_progress=on_progress,
                                   progress_step=progress_step)
    return parts, freq, result
