# -*- coding: utf-8 -*-
import io
import os
import warnings


import pytest
import numpy as np
from numpy.testing import assert_array_equal


from multilocus.io.matrix_read import read_genotype_matrix, parse_genotype_matrix
from multilocus.io.scanner import StreamScanner
from multilocus.errors import FormatError


warnings.simplefilter('always')


def fixture_path(fn):
    return os.path.join(os.path.dirname(__file__), os.pardir, 'data', fn)


def _strings(gm):
    return [[gm.get_data_string(i, j) for j in range(gm.n_loci)]
            for i in range(gm.n_isolates)]


def test_parse_haploid():
    text = 'A\tB\tC\tD\nE\tF\tG\tH\nI\tJ\tK\tL\n'
    gm = parse_genotype_matrix(text)
    assert (3, 4) == gm.shape
    assert 1 == gm.ploidy
    expect = [['A', 'B', 'C', 'D'],
              ['E', 'F', 'G', 'H'],
              ['I', 'J', 'K', 'L']]
    assert expect == _strings(gm)
    assert ('A', 'B', 'C', 'D', 'E', 'F', 'G', 'H', 'I', 'J', 'K', 'L') == gm.alleles


def test_parse_strips_whitespace():
    gm = parse_genotype_matrix(' A \tB\n A\t B \n')
    assert [['A', 'B'], ['A', 'B']] == _strings(gm)
    assert_array_equal([[0, 1], [0, 1]], gm.values)


def test_parse_no_final_terminator():
    gm = parse_genotype_matrix('A\tB\nC\tD')
    assert [['A', 'B'], ['C', 'D']] == _strings(gm)


def test_read_haploid():
    gm = read_genotype_matrix(fixture_path('haploid.txt'))
    assert (4, 4) == gm.shape
    assert gm.is_haploid
    assert ['A', 'B', 'C', '1'] == _strings(gm)[0]
    assert '?' == gm.get_data_string(2, 2)
    assert '-' == gm.get_data_string(3, 1)
    assert not gm.is_rankable


def test_read_diploid():
    gm = read_genotype_matrix(fixture_path('diploid.txt'))
    assert (3, 2, 2) == gm.shape
    assert 2 == gm.ploidy
    assert '2/3' == gm.get_data_string(0, 1)
    assert '-/3' == gm.get_data_string(2, 1)
    assert gm.is_rankable


def test_read_missing_column_delimiter():
    with pytest.raises(FormatError) as excinfo:
        read_genotype_matrix(fixture_path('bad_separator.txt'))
    assert 1 == excinfo.value.line


def test_comments():
    text = '# header\nA\tB\n# middle\nC\tD # trailing\n'
    gm = parse_genotype_matrix(text)
    assert [['A', 'B'], ['C', 'D']] == _strings(gm)


def test_leading_blank_lines():
    gm = parse_genotype_matrix('\n\nA\tB\n')
    assert [['A', 'B']] == _strings(gm)


def test_empty_line_ends_data():
    gm = parse_genotype_matrix('A\tB\nC\tD\n\nE\tF\n')
    assert 2 == gm.n_isolates


def test_trailing_empty_columns():
    with pytest.warns(UserWarning):
        gm = parse_genotype_matrix('A\tB\t\t\nC\tD\t\t\n')
    assert (2, 2) == gm.shape
    assert [['A', 'B'], ['C', 'D']] == _strings(gm)


def test_invalid_allele():
    with pytest.raises(FormatError) as excinfo:
        parse_genotype_matrix('A\tB\nA\tB*\n')
    assert 2 == excinfo.value.line


def test_empty_allele():
    with pytest.raises(FormatError):
        parse_genotype_matrix('A\tB\nA\t \n')


def test_short_row():
    with pytest.raises(FormatError) as excinfo:
        parse_genotype_matrix('A\tB\tC\nA\tB\nA\tB\tC\n')
    assert 2 == excinfo.value.line


def test_haploid_row_with_separator():
    with pytest.raises(FormatError):
        parse_genotype_matrix('A\tB\nA/C\tB\n')


def test_diploid_row_missing_separator():
    with pytest.raises(FormatError) as excinfo:
        parse_genotype_matrix('A/B\tC/D\nA/B\tC\n')
    assert 2 == excinfo.value.line


def test_no_data():
    with pytest.raises(FormatError):
        parse_genotype_matrix('')
    with pytest.raises(FormatError):
        parse_genotype_matrix('# nothing here\n')


def test_crlf(tmp_path):
    path = str(tmp_path / 'crlf.txt')
    with open(path, mode='wb') as f:
        f.write(b'A\tB\r\nC\tD\r\n')
    gm = read_genotype_matrix(path)
    assert [['A', 'B'], ['C', 'D']] == _strings(gm)


def test_crlf_error_line(tmp_path):
    path = str(tmp_path / 'crlf.txt')
    with open(path, mode='wb') as f:
        f.write(b'A\tB\r\nC\tD\r\nE\t*\r\n')
    with pytest.raises(FormatError) as excinfo:
        read_genotype_matrix(path)
    assert 3 == excinfo.value.line


def test_cr():
    gm = parse_genotype_matrix('1\t2\r3\t4\r')
    assert [['1', '2'], ['3', '4']] == _strings(gm)


def test_stream_scanner():
    gm = parse_genotype_matrix(StreamScanner(io.StringIO('A/B\t?/C\nB/B\tC/C\n')))
    assert 2 == gm.ploidy
    assert '?/C' == gm.get_data_string(0, 1)
    assert_array_equal(np.array([[False, True], [False, False]]), gm.is_missing())
