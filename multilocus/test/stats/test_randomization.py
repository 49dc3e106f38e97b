# -*- coding: utf-8 -*-
import pytest
import numpy as np
from numpy.testing import assert_array_equal, assert_allclose


from multilocus.model.matrix import GenotypeMatrix
from multilocus.constants import MISSING_FIXED, GREATER, LESS, EXTREME
from multilocus.stats.randomization import RandomizationEngine, \
    ReplicateResult, diversity_statistics, diversity_test, theta_test, \
    theta_subset_test, partition_test, DIVERSITY_STATISTICS
from multilocus.stats.distance import pairwise_isolate_distance
from multilocus.stats.diversity import count_genotypes
from multilocus.stats.fst import weir_theta
from multilocus.errors import DomainError


def _matrix():
    rows = [['A', 'X', 'P', '1'],
            ['A', 'Y', 'P', '2'],
            ['B', 'X', 'Q', '1'],
            ['B', 'Y', 'P', '3'],
            ['C', 'X', 'Q', '2'],
            ['A', 'Z', 'R', '1'],
            ['C', 'Y', 'P', '3'],
            ['B', 'X', 'R', '2']]
    return GenotypeMatrix.from_strings(rows)


def _rankable():
    rows = [['1', '2', '1'],
            ['1', '1', '2'],
            ['2', '2', '1'],
            ['2', '1', '3'],
            ['3', '2', '2'],
            ['1', '3', '1']]
    return GenotypeMatrix.from_strings(rows)


def _blocks(gm):
    for start, stop in gm.populations:
        for lstart, lstop in gm.linkage_groups:
            block = gm.values[start:stop + 1, lstart:lstop + 1]
            yield sorted(map(tuple, block.tolist()))


def test_shuffle_preserves_blocks():
    gm = _matrix()
    gm.populations.set_sizes([3, 5])
    gm.linkage_groups.set_sizes([2, 2])
    before = list(_blocks(gm))
    engine = RandomizationEngine(gm, random_state=42)
    changed = False
    for _ in range(20):
        values = gm.values.copy()
        engine.shuffle_dataset()
        assert before == list(_blocks(gm))
        changed = changed or not np.array_equal(values, gm.values)
    assert changed


def test_shuffle_fixed_missing():
    gm = GenotypeMatrix.from_strings([['A', '?', 'P'],
                                      ['B', 'X', '-'],
                                      ['?', 'Y', 'Q'],
                                      ['C', 'X', 'P'],
                                      ['A', 'Y', 'R']])
    gm.missing_policy = MISSING_FIXED
    missing = gm.is_missing()
    codes = gm.values[missing]
    column_sets = [sorted(gm.values[:, j].tolist()) for j in range(gm.n_loci)]
    engine = RandomizationEngine(gm, random_state=1)
    for _ in range(20):
        engine.shuffle_dataset()
        assert_array_equal(missing, gm.is_missing())
        assert_array_equal(codes, gm.values[missing])
        assert column_sets == [sorted(gm.values[:, j].tolist())
                               for j in range(gm.n_loci)]


def _diploid():
    rows = [['A/A', 'X/Y', 'P/Q'],
            ['A/B', '?/X', 'P/P'],
            ['B/B', 'Y/Y', 'Q/-'],
            ['?/?', 'X/X', 'Q/Q'],
            ['A/B', 'X/Y', 'R/P'],
            ['B/C', 'Y/Y', 'P/?']]
    return GenotypeMatrix.from_strings(rows)


def test_shuffle_preserves_blocks_diploid():
    gm = _diploid()
    gm.populations.set_sizes([2, 4])
    gm.linkage_groups.set_sizes([1, 2])
    before = list(_blocks(gm))
    engine = RandomizationEngine(gm, random_state=42)
    changed = False
    for _ in range(20):
        values = gm.values.copy()
        engine.shuffle_dataset()
        assert (6, 3, 2) == gm.values.shape
        assert before == list(_blocks(gm))
        changed = changed or not np.array_equal(values, gm.values)
    assert changed


def test_shuffle_fixed_missing_diploid():
    gm = _diploid()
    gm.missing_policy = MISSING_FIXED
    missing = gm.is_missing()
    codes = gm.values[missing]
    column_sets = [sorted(map(tuple, gm.values[:, j].tolist()))
                   for j in range(gm.n_loci)]
    engine = RandomizationEngine(gm, random_state=1)
    for _ in range(20):
        engine.shuffle_dataset()
        assert_array_equal(missing, gm.is_missing())
        # both alleles of a partly missing call stay in place
        assert_array_equal(codes, gm.values[missing])
        assert column_sets == [sorted(map(tuple, gm.values[:, j].tolist()))
                               for j in range(gm.n_loci)]


def test_shuffle_singleton_populations():
    gm = _matrix()
    gm.populations.split_all()
    before = gm.values.copy()
    RandomizationEngine(gm, random_state=0).shuffle_dataset()
    assert_array_equal(before, gm.values)


def test_shuffle_rows():
    gm = _matrix()
    before = gm.values.copy()
    engine = RandomizationEngine(gm, random_state=3)
    for _ in range(10):
        engine.shuffle_rows([0, 1, 4, 5])
        assert_array_equal(before[[2, 3, 6, 7]], gm.values[[2, 3, 6, 7]])
        assert sorted(map(tuple, before[[0, 1, 4, 5]].tolist())) == \
            sorted(map(tuple, gm.values[[0, 1, 4, 5]].tolist()))


def test_bad_missing_policy():
    gm = _matrix()
    with pytest.raises(ValueError):
        RandomizationEngine(gm).shuffle_dataset(missing_policy='sometimes')


def test_run_replicates_restores():
    gm = _matrix()
    before = gm.values.copy()
    engine = RandomizationEngine(gm, random_state=7)
    result = engine.run_replicates(20, lambda g: g.values[:, 0].sum())
    assert 20 == result.n
    assert_array_equal(before, gm.values)
    assert not gm.has_backup


def test_run_replicates_restores_on_error():
    gm = _matrix()
    before = gm.values.copy()
    calls = []

    def statistic(g):
        calls.append(1)
        if len(calls) == 3:
            raise RuntimeError('boom')
        return 0

    engine = RandomizationEngine(gm, random_state=7)
    with pytest.raises(RuntimeError):
        engine.run_replicates(10, statistic)
    assert_array_equal(before, gm.values)
    assert not gm.has_backup


def test_run_replicates_none():
    gm = _matrix()
    result = RandomizationEngine(gm).run_replicates(0, lambda g: [1.0, 2.0])
    assert 0 == result.n
    assert_array_equal([1.0, 2.0], result.observed)
    assert result.pvalues() is None


def test_run_replicates_negative():
    gm = _matrix()
    with pytest.raises(ValueError):
        RandomizationEngine(gm).run_replicates(-1, lambda g: 0)


def _counted(observed, values, direction):
    gm = _matrix()
    it = iter([observed] + values)
    engine = RandomizationEngine(gm)
    return engine.run_replicates(len(values), lambda g: next(it),
                                 directions=direction, shuffle=lambda: None)


def test_counting():
    result = _counted(5, [4, 5, 6, 7], GREATER)
    assert_array_equal([3], result.counts)
    assert_allclose([0.75], result.pvalues())
    result = _counted(5, [4, 5, 6, 7], LESS)
    assert_array_equal([2], result.counts)
    result = _counted(-1, [-2, 0, -1, 3], EXTREME)
    assert_array_equal([2], result.counts)
    assert_allclose([1.0], result.pvalues())
    result = _counted(2, [-2, 0, 2, 3], EXTREME)
    assert_array_equal([2], result.counts)


def test_counting_nan():
    result = _counted(np.nan, [1, 2], GREATER)
    assert_array_equal([0], result.counts)
    assert np.isnan(result.pvalues()[0])


def test_progress():
    gm = _matrix()
    calls = []
    engine = RandomizationEngine(gm, random_state=0)
    engine.run_replicates(25, lambda g: 0,
                          on_progress=lambda i, n: calls.append((i, n)))
    assert [(10, 25), (20, 25)] == calls


def test_replicate_result_subset():
    result = ReplicateResult(['a', 'b', 'c'], [GREATER, LESS, EXTREME],
                             np.array([1., 2., -3.]),
                             np.zeros((4, 3)), np.array([1, 2, 3]))
    assert_array_equal([1, 1, 2], result.scales)
    sub = result.subset(1, None)
    assert ('b', 'c') == sub.names
    assert (4, 2) == sub.replicates.shape
    assert_allclose([0.5, 1.5], sub.pvalues())


def test_diversity_statistics():
    gm = _matrix()
    values = diversity_statistics(gm)
    assert (7,) == values.shape
    dist = pairwise_isolate_distance(gm)
    assert count_genotypes(dist) == tuple(values[:2])
    assert np.isnan(values[6])
    values = diversity_statistics(_rankable())
    assert not np.isnan(values[6])


def test_diversity_test():
    gm = _rankable()
    before = gm.values.copy()
    result, pairs = diversity_test(gm, 15, random_state=42)
    assert pairs is None
    assert DIVERSITY_STATISTICS == result.names
    assert (15, 7) == result.replicates.shape
    assert_allclose(diversity_statistics(gm), result.observed)
    p = result.pvalues()
    assert np.all((p >= 0) & (p <= 2))
    assert_array_equal(before, gm.values)

    # genotypes with all loci linked are never broken up
    gm.linkage_groups.merge_all()
    result, _ = diversity_test(gm, 10, random_state=1)
    assert_array_equal(result.observed[0], result.replicates[:, 0])


def test_diversity_test_reproducible():
    a, _ = diversity_test(_matrix(), 10, random_state=5)
    b, _ = diversity_test(_matrix(), 10, random_state=5)
    assert_array_equal(a.replicates, b.replicates)
    assert_array_equal(a.counts, b.counts)


def test_diversity_test_pairwise():
    gm = _rankable()
    result, pairs = diversity_test(gm, 5, pairwise=True, random_state=0)
    assert 7 == len(result.names)
    assert ('1-2', '1-3', '2-3') == pairs.names
    assert (5, 3) == pairs.replicates.shape
    assert (3,) == pairs.counts.shape


def _populations():
    gm = GenotypeMatrix.from_strings([['A', 'X'],
                                      ['A', 'X'],
                                      ['A', 'Y'],
                                      ['B', 'Y'],
                                      ['B', 'Y'],
                                      ['B', 'X']])
    gm.populations.set_sizes([3, 3])
    return gm


def test_theta_test():
    gm = _populations()
    gm.missing_policy = MISSING_FIXED
    before = gm.values.copy()
    result = theta_test(gm, 10, random_state=2)
    assert ('Theta',) == result.names
    assert_allclose([weir_theta(gm)], result.observed)
    assert (10, 1) == result.replicates.shape
    assert np.all(np.isfinite(result.replicates))
    assert_array_equal(before, gm.values)
    assert MISSING_FIXED == gm.missing_policy
    assert [3, 3] == gm.populations.sizes


def test_theta_test_one_population():
    gm = _populations()
    gm.populations.merge_all()
    with pytest.raises(DomainError):
        theta_test(gm, 10)


def test_theta_subset_test():
    gm = _populations()
    gm.populations.set_sizes([2, 2, 2])
    result = theta_subset_test(gm, [2, 0], 10, random_state=4)
    assert_allclose([weir_theta(gm, [0, 2])], result.observed)
    assert (10, 1) == result.replicates.shape
    with pytest.raises(DomainError):
        theta_subset_test(gm, [1, 1], 10)


def test_partition_test():
    gm = GenotypeMatrix.from_strings([['A', 'X'],
                                      ['A', 'X'],
                                      ['B', 'Y'],
                                      ['B', 'Y']])
    calls = []
    parts, freq, result = partition_test(
        gm, 5, random_state=0, on_progress=lambda i, n: calls.append(i)
    )
    assert [(0, 1)] == parts
    assert [1] == result.observed.tolist()
    assert (5, 1) == result.replicates.shape
    assert [2, 4] == calls
    assert np.all(result.replicates >= 0)
