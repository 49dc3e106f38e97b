# -*- coding: utf-8 -*-
# flake8: noqa
"""
This sub-package provides statistical functions for use with multilocus
genotype data.

"""


from multilocus.stats.distance import distance, haploid_distance, \
    diploid_distance, locus_distances, pairwise_isolate_distance, \
    condensed_coords, distance_variances

from multilocus.stats.diversity import genotype_frequencies, count_genotypes, \
    genotypic_diversity, diversity_curve

from multilocus.stats.ld import is_compatible, proportion_compatible, \
    index_association, rank_variances, rbar_s, pairwise_r

from multilocus.stats.fst import weir_theta

from multilocus.stats.subdivision import is_partition, find_partitions

from multilocus.stats.randomization import RandomizationEngine, \
    ReplicateResult, diversity_statistics, diversity_test, theta_test, \
    theta_subset_test, partition_test
