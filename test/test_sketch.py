import copy
import unittest
import numpy as np
from sketchsim import sketch
from sketchsim.sampler import make_rng, sample_set


class TestBottomK(unittest.TestCase):

    def test_bottom_k(self):
        s = sketch.bottom_k([1, 4, 9, 12, 30], 3)
        self.assertListEqual(s.tolist(), [1, 4, 9])

    def test_bottom_k_whole_set(self):
        s = sketch.bottom_k([1, 4, 9], 3)
        self.assertListEqual(s.tolist(), [1, 4, 9])

    def test_bottom_k_undersized(self):
        with self.assertRaises(ValueError):
            sketch.bottom_k([1, 4], 3)
        with self.assertRaises(ValueError):
            sketch.bottom_k([1, 4], 0)

    def test_bottom_k_random(self):
        rng = make_rng(3)
        for _ in range(5):
            s = sample_set(5000, 0.1, rng)
            b = sketch.bottom_k(s, 64)
            self.assertEqual(len(b), 64)
            self.assertTrue(np.all(np.diff(b) > 0))
            self.assertTrue(np.array_equal(b, np.sort(s)[:64]))
            self.assertTrue(np.all(np.isin(b, s)))

    def test_bottom_k_does_not_share_memory(self):
        s = np.arange(10, dtype=np.int64)
        b = sketch.bottom_k(s, 4)
        b[0] = 100
        self.assertEqual(s[0], 0)


class TestKPartition(unittest.TestCase):

    def test_k_partition(self):
        s = [2, 3, 25, 30, 44, 67, 68, 88, 99]
        p = sketch.k_partition(s, 100, 5)
        self.assertListEqual(p.tolist(), [2, 25, 44, 67, 88])

    def test_k_partition_empty_partitions(self):
        p = sketch.k_partition([2, 45, 99], 100, 5)
        self.assertListEqual(p.tolist(), [2, 45, 99])
        self.assertListEqual(
            sketch.partition_indices(p, 100, 5).tolist(), [0, 2, 4])

    def test_k_partition_empty_set(self):
        p = sketch.k_partition([], 100, 5)
        self.assertEqual(len(p), 0)

    def test_k_partition_remainder(self):
        # Width 3; 9 falls in the remainder and joins the last partition.
        self.assertListEqual(sketch.k_partition([0, 4, 9], 10, 3).tolist(), [0, 4, 9])
        self.assertListEqual(sketch.k_partition([7, 9], 10, 3).tolist(), [7])
        self.assertListEqual(
            sketch.partition_indices([0, 3, 6, 9], 10, 3).tolist(), [0, 1, 2, 2])

    def test_k_partition_invalid(self):
        with self.assertRaises(ValueError):
            sketch.k_partition([1, 2], 10, 0)
        with self.assertRaises(ValueError):
            sketch.k_partition([1, 2], 10, 11)

    def test_k_partition_random(self):
        rng = make_rng(5)
        n, k = 10000, 40
        width = n // k
        for p in (0.001, 0.01, 0.1):
            s = sample_set(n, p, rng)
            kp = sketch.k_partition(s, n, k)
            self.assertLessEqual(len(kp), k)
            self.assertTrue(np.all(np.diff(kp) > 0))
            idx = kp // width
            # One entry per non-empty partition, each being its minimum.
            self.assertTrue(np.array_equal(idx, np.unique(s // width)))
            for i, v in zip(idx, kp):
                members = s[(s >= i * width) & (s < (i + 1) * width)]
                self.assertEqual(v, members.min())


class TestBottomKSketch(unittest.TestCase):

    def setUp(self):
        self.a = [1, 3, 5, 7, 11]
        self.b = [2, 3, 6, 9, 10]

    def test_init(self):
        m = sketch.BottomKSketch(4)
        self.assertEqual(len(m), 0)
        self.assertFalse(m.is_full())
        with self.assertRaises(ValueError):
            sketch.BottomKSketch(0)
        with self.assertRaises(ValueError):
            sketch.BottomKSketch(2, values=[1, 2, 3])

    def test_from_set(self):
        m = sketch.BottomKSketch.from_set(self.a, 4)
        self.assertTrue(m.is_full())
        self.assertListEqual(m.digest().tolist(), [1, 3, 5, 7])

    def test_jaccard(self):
        m1 = sketch.BottomKSketch.from_set(self.a, 4)
        m2 = sketch.BottomKSketch.from_set(self.b, 4)
        self.assertEqual(m1.jaccard(m1.copy()), 1.0)
        self.assertEqual(m1.jaccard(m2), 0.25)

    def test_jaccard_incompatible(self):
        m1 = sketch.BottomKSketch.from_set(self.a, 4)
        m2 = sketch.BottomKSketch.from_set(self.b, 3)
        with self.assertRaises(ValueError):
            m1.jaccard(m2)
        with self.assertRaises(ValueError):
            m1.jaccard(sketch.BottomKSketch(4, values=[1, 2]))
        with self.assertRaises(ValueError):
            m1.jaccard(sketch.KPartitionSketch.from_set(self.a, 20, 4))

    def test_union(self):
        m1 = sketch.BottomKSketch.from_set(self.a, 4)
        m2 = sketch.BottomKSketch.from_set(self.b, 4)
        u = sketch.BottomKSketch.union(m1, m2)
        self.assertListEqual(u.digest().tolist(), [1, 2, 3, 5])
        self.assertEqual(u, sketch.BottomKSketch.from_set(np.union1d(self.a, self.b), 4))
        with self.assertRaises(ValueError):
            sketch.BottomKSketch.union(m1)

    def test_union_many(self):
        c = [0, 4, 8, 12]
        sketches = [sketch.BottomKSketch.from_set(s, 4) for s in (self.a, self.b, c)]
        u = sketch.BottomKSketch.union(*sketches)
        expected = sketch.bottom_k(np.union1d(np.union1d(self.a, self.b), c), 4)
        self.assertTrue(np.array_equal(u.digest(), expected))

    def test_eq(self):
        m1 = sketch.BottomKSketch.from_set(self.a, 4)
        m2 = sketch.BottomKSketch.from_set(self.a, 4)
        m3 = sketch.BottomKSketch.from_set(self.b, 4)
        m4 = sketch.BottomKSketch.from_set(self.a, 3)
        self.assertEqual(m1, m2)
        self.assertNotEqual(m1, m3)
        self.assertNotEqual(m1, m4)

    def test_copy(self):
        m1 = sketch.BottomKSketch.from_set(self.a, 4)
        m2 = copy.copy(m1).copy()
        self.assertEqual(m1, m2)
        m2.values[0] = 0
        self.assertNotEqual(m1, m2)


class TestKPartitionSketch(unittest.TestCase):

    def setUp(self):
        self.a = [2, 25, 44, 67, 88]
        self.b = [5, 21, 41, 70, 95]

    def test_init(self):
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch(10, 0)
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch(10, 11)
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch(10, 2, values=[1, 6, 8])

    def test_is_complete(self):
        m = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        self.assertTrue(m.is_complete())
        self.assertListEqual(m.partitions().tolist(), [0, 1, 2, 3, 4])
        m = sketch.KPartitionSketch.from_set([2, 45, 99], 100, 5)
        self.assertFalse(m.is_complete())

    def test_union(self):
        m1 = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        m2 = sketch.KPartitionSketch.from_set(self.b, 100, 5)
        u = sketch.KPartitionSketch.union(m1, m2)
        self.assertListEqual(u.digest().tolist(), [2, 21, 41, 67, 88])
        self.assertEqual(
            u, sketch.KPartitionSketch.from_set(np.union1d(self.a, self.b), 100, 5))

    def test_union_incompatible(self):
        m1 = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch.union(m1)
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch.union(
                m1, sketch.KPartitionSketch.from_set(self.b, 200, 5))
        with self.assertRaises(ValueError):
            sketch.KPartitionSketch.union(
                m1, sketch.KPartitionSketch.from_set([2, 45, 99], 100, 5))

    def test_jaccard(self):
        m1 = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        m2 = sketch.KPartitionSketch.from_set([2, 21, 44, 70, 95], 100, 5)
        self.assertEqual(m1.jaccard(m1), 1.0)
        self.assertAlmostEqual(m1.jaccard(m2), 0.4)
        with self.assertRaises(ValueError):
            m1.jaccard(sketch.KPartitionSketch.from_set([2, 45, 99], 100, 5))

    def test_eq(self):
        m1 = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        m2 = sketch.KPartitionSketch.from_set(self.a, 100, 5)
        m3 = sketch.KPartitionSketch.from_set(self.a, 200, 5)
        self.assertEqual(m1, m2)
        self.assertEqual(m1, m2.copy())
        self.assertNotEqual(m1, m3)


if __name__ == "__main__":
    unittest.main()
