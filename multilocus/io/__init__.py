# -*- coding: utf-8 -*-
# flake8: noqa
"""
This sub-package provides functions for reading genotype data and writing
result reports.

"""


from multilocus.io.scanner import Scanner, StringScanner, StreamScanner

from multilocus.io.matrix_read import read_genotype_matrix, parse_genotype_matrix

from multilocus.io.report import format_value, format_pvalue, format_settings, \
    format_dataset, format_diversity_table, format_pairwise_table, \
    format_theta_results, format_partition_results, format_diversity_curve, \
    write_report
