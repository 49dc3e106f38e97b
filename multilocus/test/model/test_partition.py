# -*- coding: utf-8 -*-
import unittest


from multilocus.model.partition import Partition


def _covered(p):
    out = []
    for start, stop in p:
        assert start <= stop
        out.extend(range(start, stop + 1))
    return out


class TestPartition(unittest.TestCase):

    def test_default(self):
        p = Partition(5)
        self.assertEqual(1, p.n_parts)
        self.assertEqual((0, 4), p.bounds(0))
        self.assertEqual([5], p.sizes)

    def test_sizes(self):
        p = Partition(5, sizes=[2, 3])
        self.assertEqual(2, len(p))
        self.assertEqual((0, 1), p.bounds(0))
        self.assertEqual((2, 4), p.bounds(1))
        self.assertEqual([(0, 1), (2, 4)], list(p))
        self.assertEqual([2, 3], p.sizes)

    def test_bad_sizes(self):
        p = Partition(5, sizes=[2, 3])
        for sizes in [[2, 2], [5, 0], [], [1, 1, 1, 1, 2]]:
            with self.assertRaises(ValueError):
                p.set_sizes(sizes)
            self.assertEqual([2, 3], p.sizes)

    def test_non_integer_sizes(self):
        p = Partition(4, sizes=[1, 3])
        for sizes in [[2.7, 2.3], [2.0, 2.0], ['2', '2']]:
            with self.assertRaises(ValueError):
                p.set_sizes(sizes)
            self.assertEqual([1, 3], p.sizes)

    def test_bad_n(self):
        with self.assertRaises(ValueError):
            Partition(0)

    def test_bounds_out_of_range(self):
        p = Partition(3)
        with self.assertRaises(IndexError):
            p.bounds(1)

    def test_split_merge(self):
        p = Partition(4)
        p.split_all()
        self.assertEqual(4, p.n_parts)
        self.assertEqual([(0, 0), (1, 1), (2, 2), (3, 3)], list(p))
        p.merge_all()
        self.assertEqual(1, p.n_parts)
        self.assertEqual((0, 3), p.bounds(0))

    def test_block_of(self):
        p = Partition(6, sizes=[1, 3, 2])
        self.assertEqual([0, 1, 1, 1, 2, 2], [p.block_of(i) for i in range(6)])
        with self.assertRaises(IndexError):
            p.block_of(6)

    def test_covers_all_items(self):
        for n in range(1, 7):
            p = Partition(n)
            self.assertEqual(list(range(n)), _covered(p))
            p.split_all()
            self.assertEqual(list(range(n)), _covered(p))
            p.set_sizes([n])
            self.assertEqual(list(range(n)), _covered(p))
            if n > 1:
                p.set_sizes([1, n - 1])
                self.assertEqual(list(range(n)), _covered(p))
            p.merge_all()
            self.assertEqual(list(range(n)), _covered(p))

    def test_copy(self):
        p = Partition(4, sizes=[1, 3])
        q = p.copy()
        self.assertEqual(p, q)
        q.split_all()
        self.assertNotEqual(p, q)
        self.assertEqual([1, 3], p.sizes)
