import unittest
import numpy as np
from loose_concat.ir.dtypes import DType
from loose_concat.ir.tensor import Tensor, Owned, AliasOf
from loose_concat.ops.errors import ShapeMismatchError


class TestTensor(unittest.TestCase):
    def test_count_and_offset(self):
        t = Tensor((2, 3, 4, 5), name="t")
        self.assertEqual(t.count(), 120)
        self.assertEqual(t.count(1), 60)
        self.assertEqual(t.count(0, 2), 6)
        self.assertEqual(t.offset(1, 2, 3), ((1 * 3 + 2) * 4 + 3) * 5)
        self.assertEqual(t.offset(1, 2, 3, 4), t.offset(1, 2, 3) + 4)

        # Offsets agree with numpy's row-major layout
        t.data[:] = np.arange(120, dtype=np.float32)
        self.assertEqual(t.value[1, 2, 3, 4], t.data[t.offset(1, 2, 3, 4)])

    def test_legacy_accessors_pad_missing_axes(self):
        t = Tensor((6, 7))
        self.assertEqual((t.num, t.channels, t.height, t.width), (6, 7, 1, 1))
        self.assertEqual(t.offset(2, 3), 2 * 7 + 3)

    def test_legacy_accessors_reject_high_rank(self):
        t = Tensor((1, 1, 1, 1, 2))
        with self.assertRaises(ShapeMismatchError):
            _ = t.width

    def test_offset_bounds(self):
        t = Tensor((2, 2, 2, 2))
        # One past the end is allowed, like a C++ end pointer
        self.assertEqual(t.offset(2), 16)
        with self.assertRaises(IndexError):
            t.offset(3)
        with self.assertRaises(IndexError):
            t.offset(0, -1)

    def test_reshape_keeps_storage_for_same_count(self):
        t = Tensor((2, 6))
        buffer = t.data
        t.reshape((3, 4))
        self.assertIs(t.data, buffer)
        self.assertEqual(t.value.shape, (3, 4))

        t.reshape((5, 5))
        self.assertIsNot(t.data, buffer)
        self.assertEqual(t.data.size, 25)
        self.assertIsInstance(t.ownership, Owned)

    def test_reshape_validation(self):
        t = Tensor((1,))
        with self.assertRaises(ShapeMismatchError):
            t.reshape((2, -1))
        with self.assertRaises(ShapeMismatchError):
            t.reshape((1,) * 33)
        self.assertEqual(t.shape, (1,))

    def test_share_buffers(self):
        src = Tensor.from_array(np.arange(6, dtype=np.float32).reshape(2, 3), name="src")
        dst = Tensor((3, 2), name="dst")
        dst.share_buffers(src)

        self.assertTrue(dst.is_alias_of(src))
        self.assertIsInstance(dst.ownership, AliasOf)
        self.assertIs(dst.data, src.data)
        self.assertIs(dst.diff, src.diff)

        src.data[0] = 42.0
        self.assertEqual(dst.value[0, 0], 42.0)

        dst.allocate()
        self.assertIsInstance(dst.ownership, Owned)
        self.assertFalse(np.shares_memory(dst.data, src.data))

    def test_share_requires_equal_count(self):
        with self.assertRaises(ShapeMismatchError):
            Tensor((2, 2)).share_data(Tensor((3,)))

    def test_shape_at_negative_axis(self):
        t = Tensor((2, 3, 4))
        self.assertEqual(t.shape_at(-1), 4)
        self.assertEqual(t.shape_at(0), 2)
        with self.assertRaises(IndexError):
            t.shape_at(3)

    def test_from_array(self):
        arr = np.random.randn(2, 3).astype(np.float64)
        t = Tensor.from_array(arr)
        self.assertEqual(t.dtype, DType.FP64)
        np.testing.assert_array_equal(t.value, arr)
        np.testing.assert_array_equal(t.grad, np.zeros_like(arr))
        self.assertEqual(t.size_bytes, 6 * 8)


if __name__ == "__main__":
    unittest.main()
