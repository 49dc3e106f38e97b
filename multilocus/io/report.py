# -*- coding: utf-8 -*-
"""Plain text reports of analysis results, as tab-delimited tables."""
import numpy as np


NA = 'N/A'


__all__ = ['format_value', 'format_pvalue', 'format_settings', 'format_dataset',
           'format_diversity_table', 'format_pairwise_table',
           'format_theta_results', 'format_partition_results',
           'format_diversity_curve', 'write_report']


def format_value(v):
    if v is None or np.isnan(v):
        return NA
    return '%g' % v


def format_pvalue(count, n, scale=1):
    """Format a p-value estimated from `count` of `n` replicates.

    If no replicate met the criterion the p-value is reported as less than
    the smallest resolvable value.

    Examples
    --------

    >>> from multilocus.io.report import format_pvalue
    >>> format_pvalue(0, 5)
    '< 0.2'
    >>> format_pvalue(3, 10)
    '0.3'
    >>> format_pvalue(0, 10, scale=2)
    '< 0.2'

    """
    if n == 0:
        return NA
    if count == 0:
        return '< %g' % (scale / float(n))
    return '%g' % (scale * count / float(n))


def _pvalues(result):
    out = []
    for obs, count, scale in zip(result.observed, result.counts, result.scales):
        if np.isnan(obs):
            out.append(NA)
        else:
            out.append(format_pvalue(count, result.n, scale))
    return out


def _format_bounds(partition):
    out = []
    for start, stop in partition:
        if start == stop:
            out.append('%s ' % (start + 1))
        else:
            out.append('%s-%s ' % (start + 1, stop + 1))
    return ''.join(out)


def format_settings(gm):
    """Describe the linkage groups, populations and data exclusions."""
    lines = []
    n = gm.linkage_groups.n_parts
    if n == 1:
        head = 'There is 1 linkage group: '
    else:
        head = 'There are %s linkage groups: ' % n
    lines.append(head + _format_bounds(gm.linkage_groups))
    n = gm.populations.n_parts
    if n == 1:
        head = 'There is 1 population: '
    else:
        head = 'There are %s populations: ' % n
    lines.append(head + _format_bounds(gm.populations))
    if gm.excluded_loci:
        lines.append('Loci with missing data excluded.')
    elif gm.excluded_isolates:
        lines.append('Isolates with missing data excluded.')
    else:
        lines.append('All datapoints included.')
    return '\n'.join(lines) + '\n'


def _column_width(gm):
    width = 3
    for i in range(gm.n_isolates):
        for j in range(gm.n_loci):
            width = max(width, len(gm.get_data_string(i, j)))
    return width + 1


def _format_row(gm, i, width):
    return ''.join(gm.get_data_string(i, j).rjust(width) for j in range(gm.n_loci))


def format_dataset(gm):
    """List the working data, one isolate per row, in aligned columns."""
    width = _column_width(gm)
    lines = ['Iso   Loci: ' + ''.join(str(j + 1).rjust(width)
                                      for j in range(gm.n_loci)), '']
    for i in range(gm.n_isolates):
        lines.append('%3d       : ' % (i + 1) + _format_row(gm, i, width))
    return '\n'.join(lines) + '\n'


def _format_table(result, header):
    lines = ['\t'.join(['Replicate'] + list(header))]
    lines.append('\t'.join(['Observed'] + [format_value(v) for v in result.observed]))
    for i, row in enumerate(result.replicates):
        lines.append('\t'.join([str(i + 1)] + [format_value(v) for v in row]))
    return lines


def format_diversity_table(result):
    """Format the result of :func:`multilocus.diversity_test` as a table with
    one row per replicate and a final row of p-values."""
    lines = _format_table(result, result.names)
    if result.n:
        lines.append('')
        lines.append('\t'.join(['P_Values'] + _pvalues(result)))
    return '\n'.join(lines) + '\n'


def format_pairwise_table(result):
    """Format pairwise rBarD values, with N/A for pairs that include a locus
    with no variation."""
    lines = _format_table(result, result.names)
    if result.n:
        lines.append('')
        lines.append('\t'.join(['P Values'] + _pvalues(result)))
    return '\n'.join(lines) + '\n'


def format_theta_results(result, pops=None):
    """Format the result of :func:`multilocus.theta_test` or
    :func:`multilocus.theta_subset_test`."""
    lines = []
    if pops is not None:
        lines.append('Populations selected for analysis:' +
                     ''.join(' %s' % (p + 1) for p in sorted(pops)))
        lines += ['', '---', '']
    lines.append('Theta:\t' + format_value(result.observed[0]))
    if result.n:
        lines += ['', 'Randomizations', '--------------', '']
        for i, v in enumerate(result.replicates[:, 0]):
            lines.append('Randomization #%s:\t%s' % (i + 1, format_value(v)))
        lines += ['', 'P value:\t' + _pvalues(result)[0]]
    return '\n'.join(lines) + '\n'


def format_partition_results(gm, parts, freq, result=None):
    """Format the result of :func:`multilocus.partition_test`, listing each
    partition found in the observed data."""
    lines = ['Testing for Partitions, Observed Data:',
             '--------------------------------------', '']
    lines.append(format_settings(gm))
    lines.append(format_dataset(gm))
    lines += ['----', '']
    width = _column_width(gm)
    for members in parts:
        lines.append('* Partition of size %s and %s found:' %
                     (len(members), gm.n_isolates - len(members)))
        for i in members:
            lines.append('Isolate %3d : ' % (i + 1) + _format_row(gm, i, width))
        lines.append('')
    if freq:
        lines.append('Partition_Size\tFrequency')
        for size, count in freq.items():
            lines.append('%s\t%s' % (size, count))
        lines.append('')
    if not parts:
        lines += ['No partitions found', '']
    if result is not None and result.n:
        lines += ['Randomizations', '--------------', '']
        for i, v in enumerate(result.replicates[:, 0]):
            lines.append('Replicate %s:\t%d partitions' % (i + 1, v))
        lines += ['', 'P value:\t' + _pvalues(result)[0]]
    return '\n'.join(lines) + '\n'


def format_diversity_curve(curve):
    """Format the output of :func:`multilocus.diversity_curve`."""
    lines = ['#Loci_Sampled\tMean_#Genotypes\tStd_Error\tMean_Diversity\tStd_Error',
             '']
    for row in zip(*curve):
        k, rest = row[0], row[1:]
        lines.append('\t'.join([str(k)] + [format_value(v) for v in rest]))
    return '\n'.join(lines) + '\n'


def write_report(path, text, mode='w'):
    """Write report text to a file. Use ``mode='a'`` to append."""
    with open(path, mode=mode) as f:
        f.write(text)
