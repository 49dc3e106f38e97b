# -*- coding: utf-8 -*-
# flake8: noqa

from .model.partition import Partition
from .model.matrix import GenotypeMatrix

from .io.scanner import Scanner, StringScanner, StreamScanner
from .io.matrix_read import read_genotype_matrix, parse_genotype_matrix
from .io.report import format_pvalue, format_settings, format_dataset, \
    format_diversity_table, format_pairwise_table, format_theta_results, \
    format_partition_results, format_diversity_curve, write_report

from .stats.distance import distance, haploid_distance, diploid_distance, \
    locus_distances, pairwise_isolate_distance, condensed_coords, \
    distance_variances

from .stats.diversity import genotype_frequencies, count_genotypes, \
    genotypic_diversity, diversity_curve

from .stats.ld import is_compatible, proportion_compatible, index_association, \
    rank_variances, rbar_s, pairwise_r

from .stats.fst import weir_theta

from .stats.subdivision import is_partition, find_partitions

from .stats.randomization import RandomizationEngine, ReplicateResult, \
    diversity_statistics, diversity_test, theta_test, theta_subset_test, \
    partition_test

from .errors import ParseError, EndOfSourceError, UnterminatedCommentError, \
    FormatError, CommentConfigError, DomainError

from .version import version as __version__
