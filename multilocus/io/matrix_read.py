# -*- coding: utf-8 -*-
import logging
import warnings


from multilocus.constants import COLUMN_DELIMITER, ALLELE_DELIMITER, \
    COMMENT_DELIMITER
from multilocus.errors import FormatError
from multilocus.io.scanner import Scanner, StringScanner, StreamScanner, \
    TERMINATORS
from multilocus.model.matrix import GenotypeMatrix, is_valid_allele, _encode


logger = logging.getLogger(__name__)
debug = logger.debug


__all__ = ['read_genotype_matrix', 'parse_genotype_matrix']


def read_genotype_matrix(path):
    """Read a tab-delimited genotype table from a file.

    Parameters
    ----------
    path : string
        File path.

    Returns
    -------
    gm : GenotypeMatrix

    See Also
    --------
    parse_genotype_matrix

    """
    # keep line terminators as they are in the file
    with open(path, mode='r', newline='') as f:
        gm = parse_genotype_matrix(StreamScanner(f))
    debug('read %r: %s isolates, %s loci, ploidy %s', path, gm.n_isolates,
          gm.n_loci, gm.ploidy)
    return gm


def parse_genotype_matrix(source):
    """Parse a tab-delimited genotype table.

    One row per isolate, one tab-delimited column per locus. Diploid calls
    are written as ``A/B``. Alleles are alphanumeric, or ``?`` or ``-`` for
    missing data. Text from ``#`` to the end of a line is ignored, and an
    empty line ends the data.

    The first row decides the ploidy: if it holds no ``/`` the data are
    haploid, otherwise there must be exactly one ``/`` per column.

    Parameters
    ----------
    source : string or Scanner
        Text to parse, or a scanner positioned at the start of the table.

    Returns
    -------
    gm : GenotypeMatrix

    Raises
    ------
    FormatError
        If the table is malformed. The error carries the line number.

    """

    if isinstance(source, Scanner):
        scanner = source
    else:
        scanner = StringScanner(source)
    scanner.set_comments('', '')
    scanner.set_line_comment(COMMENT_DELIMITER)
    scanner.comments_as_space = True

    _skip_comment_lines(scanner, blank=True)
    n_columns, diploid = _read_layout(scanner)
    debug('layout: %s columns, diploid %s', n_columns, diploid)

    labels = dict()
    data = []
    while True:
        _skip_comment_lines(scanner)
        if not scanner.has_more() or scanner.at_line_end():
            break
        data.append(_read_row(scanner, labels, n_columns, diploid))

    if not data:
        raise FormatError('no data found', line=scanner.line_index())

    alleles = sorted(labels, key=labels.get)
    return GenotypeMatrix(data, alleles)


def _skip_comment_lines(scanner, blank=False):
    while scanner.has_more():
        if scanner.is_delimiter(COMMENT_DELIMITER):
            scanner.consume_line()
        elif blank and scanner.at_line_end():
            scanner.consume_line()
        else:
            return


def _read_layout(scanner):
    start = scanner.get_position()
    line = scanner.read_line()
    scanner.goto(start)

    columns = line.split(COLUMN_DELIMITER)
    n_columns = len(columns)
    while n_columns and not columns[n_columns - 1].strip():
        n_columns -= 1
    if n_columns == 0:
        raise FormatError('no data found', line=scanner.line_index())
    if n_columns < len(columns):
        warnings.warn('trimmed %s empty trailing columns' %
                      (len(columns) - n_columns))

    n_separators = line.count(ALLELE_DELIMITER)
    if n_separators == 0:
        return n_columns, False
    if n_separators != n_columns:
        raise FormatError('missing column delimiter: found %s allele separators '
                          'in %s columns' % (n_separators, n_columns),
                          line=scanner.line_index())
    return n_columns, True


def _row_error(scanner, row_start, msg):
    scanner.goto(row_start)
    return FormatError(msg, line=scanner.line_index())


def _check_allele(scanner, row_start, labels, token, column):
    token = token.strip()
    if not token or not is_valid_allele(token):
        raise _row_error(scanner, row_start, 'invalid allele %r in column %s' %
                         (token, column + 1))
    return _encode(labels, token)


def _read_row(scanner, labels, n_columns, diploid):
    row_start = scanner.get_position()
    row = []
    for j in range(n_columns):
        last = j == n_columns - 1
        if diploid:
            token, stop = scanner.read_until(ALLELE_DELIMITER + TERMINATORS,
                                             eat=True)
            if stop != ALLELE_DELIMITER:
                raise _row_error(scanner, row_start,
                                 'expected allele pair in column %s' % (j + 1))
            first = _check_allele(scanner, row_start, labels, token, j)
        if last:
            token = scanner.read_line()
        else:
            token, stop = scanner.read_until(COLUMN_DELIMITER + TERMINATORS,
                                             eat=True)
            if stop != COLUMN_DELIMITER:
                raise _row_error(scanner, row_start,
                                 'expected %s columns, found %s' % (n_columns, j + 1))
        allele = _check_allele(scanner, row_start, labels, token, j)
        row.append([first, allele] if diploid else allele)
    return row
