# -*- coding: utf-8 -*-
from collections import OrderedDict
import itertools
import logging


import numpy as np


from multilocus.constants import HAPLOID
from multilocus.util import check_ploidy, check_min_isolates


logger = logging.getLogger(__name__)
debug = logger.debug


def is_partition(gm, members):
    """Test whether a set of isolates and its complement could be two
    non-recombining subpopulations, i.e., at every locus the two sets share
    at most one allele.

    Parameters
    ----------
    gm : GenotypeMatrix
        Haploid data.
    members : sequence of ints
        Indices of isolates in one set. All other isolates form the other.

    Returns
    -------
    b : bool

    """
    values = gm.values
    mask = np.zeros(gm.n_isolates, dtype=bool)
    mask[np.asarray(members, dtype=int)] = True
    for locus in range(gm.n_loci):
        a = values[mask, locus]
        b = values[~mask, locus]
        shared = np.intersect1d(a[a >= 0], b[b >= 0])
        if shared.shape[0] > 1:
            return False
    return True


def find_partitions(gm):
    """Search for subdivisions of the isolates into two sets that share at
    most one allele at every locus.

    Every set of between 2 and half the isolates is tested against its
    complement. Each split is tested once: where both halves have the same
    size, only the half holding the first isolate is reported.

    Parameters
    ----------
    gm : GenotypeMatrix
        Haploid data with at least 4 isolates.

    Returns
    -------
    parts : list of tuples
        For each partition found, the isolate indices in the smaller set.
    freq : OrderedDict
        Number of partitions found for each size of the smaller set.

    """
    check_ploidy(gm.ploidy, HAPLOID)
    n = gm.n_isolates
    check_min_isolates(n, 4)

    parts = []
    freq = OrderedDict()
    for k in range(2, n // 2 + 1):
        for members in itertools.combinations(range(n), k):
            if 2 * k == n and members[0] != 0:
                continue
            if is_partition(gm, members):
                parts.append(members)
                freq[k] = freq.get(k, 0) + 1
    debug('found %s partitions', len(parts))
    return parts, freq
