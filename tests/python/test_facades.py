"""
Tests for the vector and matrix facades.
"""

import math

import pytest
import numpy as np
import flatvec.math as fm
from flatvec import (
    Array,
    Vector2,
    Vector3,
    Vector4,
    Matrix2,
    Matrix3,
    Matrix4,
    view,
    DomainViolationError,
    LengthMismatchError,
    RangeViolationError,
)
from flatvec.vector import vector_class
from flatvec.matrix import matrix_class
from flatvec.math import linalg


class TestVectorConstruction:
    """Test owning and viewing vectors."""

    def test_defaults_to_zero(self):
        """Test a vector without arguments is all zeros."""
        assert Vector3().get() == (0, 0, 0)

    def test_exact_component_count(self):
        """Test constructors require exactly N components."""
        assert Vector2(1, 2).get() == (1, 2)
        with pytest.raises(LengthMismatchError):
            Vector3(1, 2)

    def test_view_writes_through(self):
        """Test component writes land in the viewed container."""
        data = [0, 0, 0, 10, 20, 30]
        v = Vector3.view(data, 3)
        v.x = 11
        v[2] = 33
        assert data == [0, 0, 0, 11, 20, 33]
        assert v.get() == (11, 20, 33)

    def test_view_over_numpy(self):
        """Test viewing a numpy buffer."""
        data = np.zeros(8)
        Vector4.view(data, 4).set(1.0, 2.0, 3.0, 4.0)
        assert data.tolist() == [0.0] * 4 + [1.0, 2.0, 3.0, 4.0]

    def test_view_over_sequence(self):
        """Test a view over a Sequence uses its own indices."""
        seq = view.offset([1, 2, 3, 4], 6)
        assert Vector2.view(seq, 8).get() == (3, 4)
        with pytest.raises(RangeViolationError):
            Vector2.view(seq, 0)

    def test_view_out_of_range(self):
        """Test views must fit in the container."""
        with pytest.raises(RangeViolationError):
            Vector3.view([1, 2, 3, 4], 2)

    def test_vector_class(self):
        """Test size lookup."""
        assert vector_class(3) is Vector3
        with pytest.raises(LengthMismatchError):
            vector_class(5)


class TestVectorAccess:
    """Test component access."""

    def test_components(self):
        """Test named component properties."""
        v = Vector4(1, 2, 3, 4)
        assert (v.x, v.y, v.z, v.w) == (1, 2, 3, 4)
        assert not hasattr(Vector2(1, 2), 'z')

    def test_index_bounds(self):
        """Test out-of-range components raise RangeViolationError."""
        v = Vector2(1, 2)
        with pytest.raises(RangeViolationError):
            v[2]
        with pytest.raises(IndexError):
            v[-1] = 0

    def test_swizzle(self):
        """Test reading components by letter."""
        v = Vector3(1, 2, 3)
        assert v.swizzle('zyx') == (3, 2, 1)
        assert v.swizzle('xx') == (1, 1)
        with pytest.raises(RangeViolationError):
            v.swizzle('w')

    def test_copy_is_independent(self):
        """Test copy() owns its storage."""
        data = [1, 2]
        v = Vector2.view(data)
        dup = v.copy()
        dup.x = 9
        assert data == [1, 2]

    def test_copy_into(self):
        """Test writing components into a container."""
        dest = Array(5, dtype='float64')
        Vector2(1.5, 2.5).copy_into(dest, 3)
        assert dest.tolist() == [0.0, 0.0, 0.0, 1.5, 2.5]

    def test_iteration_and_unpacking(self):
        """Test vectors unpack like tuples."""
        x, y, z = Vector3(1, 2, 3)
        assert (x, y, z) == (1, 2, 3)
        assert len(Vector3()) == 3


class TestVectorArithmetic:
    """Test vector arithmetic and operators."""

    def test_operators(self):
        """Test +, -, *, / and unary minus."""
        a, b = Vector3(1, 2, 3), Vector3(4, 5, 6)
        assert (a + b).get() == (5, 7, 9)
        assert (b - a).get() == (3, 3, 3)
        assert (a * 2).get() == (2, 4, 6)
        assert (2 * a).get() == (2, 4, 6)
        assert (b / 2).get() == (2.0, 2.5, 3.0)
        assert (-a).get() == (-1, -2, -3)

    def test_plain_containers_as_operands(self):
        """Test any N-element container mixes with vectors."""
        assert (Vector2(1, 2) + [10, 20]).get() == (11, 22)
        assert Vector2(1, 2).dot((3, 4)) == 11

    def test_division_by_zero(self):
        """Test zero divisors raise DomainViolationError."""
        with pytest.raises(DomainViolationError):
            Vector2(1, 2) / 0
        with pytest.raises(DomainViolationError):
            Vector2(1, 2) / Vector2(1, 0)

    def test_size_mismatch(self):
        """Test operands of another size are rejected."""
        with pytest.raises(LengthMismatchError):
            Vector3(1, 2, 3) + Vector2(1, 2)

    def test_into(self):
        """Test *_into methods write into caller storage."""
        dest = [0] * 5
        Vector2(1, 2).add_into(Vector2(3, 4), dest, 1)
        assert dest == [0, 4, 6, 0, 0]
        Vector2(1, 2).mul_into(10, dest, 3)
        assert dest == [0, 4, 6, 10, 20]

    def test_in_place_through_views(self, points_xyz):
        """Test translating packed points through views."""
        offset = Vector3(1, 1, 1)
        for start in (0, 3, 6):
            p = Vector3.view(points_xyz, start)
            p.add_into(offset, points_xyz, start)
        assert points_xyz == [2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0, 10.0]

    def test_length_and_normalize(self):
        """Test lengths and unit vectors."""
        v = Vector2(3, 4)
        assert v.length() == 5.0
        assert v.length_squared() == 25
        assert v.normalize().get() == (0.6, 0.8)
        with pytest.raises(DomainViolationError):
            Vector3().normalize()

    def test_normalize_into(self):
        """Test normalizing into a slice."""
        dest = [0.0] * 4
        Vector3(0, 0, 5).normalize_into(dest, 1)
        assert dest == [0.0, 0.0, 0.0, 1.0]

    def test_cross(self):
        """Test the Vector3 cross product."""
        a, b = Vector3(1, 2, 3), Vector3(4, 5, 6)
        assert a.cross(b).get() == (-3, 6, -3)
        dest = [0, 0, 0]
        Vector3(1, 0, 0).cross_into(Vector3(0, 1, 0), dest)
        assert dest == [0, 0, 1]

    def test_equality(self):
        """Test exact equality and tolerance equality."""
        assert Vector2(1, 2) == Vector2(1, 2)
        assert Vector2(1, 2) == [1, 2]
        assert Vector2(1, 2) != Vector2(1, 3)
        assert Vector2(1.0, 2.0).equals([1.0, 2.0 + 1e-12])
        assert not Vector2(1.0, 2.0).equals([1.0, 2.1])

    def test_unhashable(self):
        """Test mutable vectors are not hashable."""
        with pytest.raises(TypeError):
            hash(Vector2(1, 2))

    def test_repr(self):
        """Test repr shows components."""
        assert repr(Vector3(1, 2, 3)) == "Vector3(1, 2, 3)"


class TestMatrixConstruction:
    """Test matrix construction and access."""

    def test_identity(self):
        """Test identity matrices."""
        assert Matrix3.identity().get() == (1, 0, 0, 0, 1, 0, 0, 0, 1)
        assert Matrix2().get() == (0, 0, 0, 0)

    def test_exact_element_count(self):
        """Test constructors require exactly N*N elements."""
        with pytest.raises(LengthMismatchError):
            Matrix2(1, 2, 3)

    def test_get_set(self):
        """Test column-major element access."""
        m = Matrix2(2, 4, 3, 1)
        assert m.get(1, 0) == 3
        assert m.get(0, 1) == 4
        m.set(1, 1, 9)
        assert m.get() == (2, 4, 3, 9)
        with pytest.raises(RangeViolationError):
            m.get(2, 0)

    def test_set_all(self):
        """Test overwriting every element."""
        m = Matrix2()
        m.set_all(1, 2, 3, 4)
        assert list(m) == [1, 2, 3, 4]
        with pytest.raises(LengthMismatchError):
            m.set_all(1, 2)

    def test_view_and_column(self):
        """Test matrix views and column views share storage."""
        data = [0.0] * 20
        m = Matrix4.view(data, 4)
        m.set_all(*fm.mat4_identity())
        col = m.column(3)
        col.set(5.0, 6.0, 7.0, 1.0)
        assert data[16:20] == [5.0, 6.0, 7.0, 1.0]
        assert m.get(3, 0) == 5.0
        with pytest.raises(RangeViolationError):
            m.column(4)

    def test_matrix_class(self):
        """Test size lookup."""
        assert matrix_class(4) is Matrix4
        with pytest.raises(LengthMismatchError):
            matrix_class(1)


class TestMatrixArithmetic:
    """Test products and element-wise operations."""

    def test_matmul_matrix(self):
        """Test @ with a matrix."""
        product = Matrix2(2, 4, 3, 1) @ Matrix2(5, 1, 2, 6)
        assert isinstance(product, Matrix2)
        assert product.get() == (13, 21, 22, 14)

    def test_matmul_vector(self):
        """Test @ with an N-vector."""
        result = Matrix2(2, 4, 3, 1) @ Vector2(1, 1)
        assert isinstance(result, Vector2)
        assert result.get() == (5, 5)

    def test_matmul_homogeneous(self):
        """Test Matrix3 @ Vector2 and Matrix4 @ Vector3 treat w as 1."""
        t3 = Matrix3(*fm.mat3_translate(2, 3))
        assert (t3 @ Vector2(1, 1)).get() == (3, 4)
        t4 = Matrix4(*fm.mat4_translate(1, 2, 3))
        result = t4 @ Vector3(1, 1, 1)
        assert isinstance(result, Vector3)
        assert result.get() == (2, 3, 4)

    def test_matmul_bad_operand(self):
        """Test operands of unsupported sizes."""
        with pytest.raises(LengthMismatchError):
            Matrix2.identity() @ [1, 2, 3]
        with pytest.raises(LengthMismatchError):
            Matrix3.identity() @ 5

    def test_matmul_into(self):
        """Test writing a product into a slice."""
        dest = [0] * 6
        Matrix2(2, 4, 3, 1).matmul_into(Matrix2(5, 1, 2, 6), dest, 2)
        assert dest == [0, 0, 13, 21, 22, 14]
        point = [1.0, 1.0]
        Matrix3(*fm.mat3_scale(2, 3)).matmul_into(Vector2.view(point), point)
        assert point == [2.0, 3.0]

    def test_rotation_composition(self):
        """Test two quarter turns make a half turn."""
        r = Matrix3(*fm.mat3_rotate(math.pi / 2))
        half = r @ r
        assert half.equals(fm.mat3_rotate(math.pi), eps=1e-12)

    def test_transpose(self):
        """Test transpose and its involution."""
        m = Matrix2(1, 2, 3, 4)
        assert m.transpose().get() == (1, 3, 2, 4)
        assert m.transpose().transpose() == m
        dest = [0] * 4
        m.transpose_into(dest)
        assert dest == [1, 3, 2, 4]

    def test_element_wise(self):
        """Test +, -, scalar * and /, unary minus."""
        a = Matrix2(1, 2, 3, 4)
        assert (a + a).get() == (2, 4, 6, 8)
        assert (a - a).get() == (0, 0, 0, 0)
        assert (a * 2).get() == (2, 4, 6, 8)
        assert (2 * a).get() == (2, 4, 6, 8)
        assert (a / 2).get() == (0.5, 1.0, 1.5, 2.0)
        assert (-a).get() == (-1, -2, -3, -4)
        with pytest.raises(DomainViolationError):
            a / 0

    def test_add_into(self):
        """Test element-wise results into a slice."""
        dest = [0] * 4
        Matrix2(1, 2, 3, 4).sub_into(Matrix2(1, 1, 1, 1), dest)
        assert dest == [0, 1, 2, 3]

    def test_equality_and_repr(self):
        """Test equality and column-wise repr."""
        assert Matrix2(1, 2, 3, 4) == [1, 2, 3, 4]
        assert Matrix2(1, 2, 3, 4) != Matrix2.identity()
        assert repr(Matrix2(1, 2, 3, 4)) == "Matrix2((1, 2), (3, 4))"


class TestKernelDelegation:
    """Test facade results are filled by the extended-form kernels."""

    @staticmethod
    def _record(monkeypatch, name):
        calls = []
        kernel = getattr(linalg, name)

        def recorded(*args):
            calls.append(args)
            return kernel(*args)

        monkeypatch.setattr(linalg, name, recorded)
        return calls

    def test_vector_operators(self, monkeypatch):
        """Test + and scalar * write through add_vec3_ex and mul_vec3_constant_ex."""
        added = self._record(monkeypatch, 'add_vec3_ex')
        scaled = self._record(monkeypatch, 'mul_vec3_constant_ex')
        a = Vector3(1, 2, 3)
        assert (a + [10, 20, 30]).get() == linalg.add_vec3(a, [10, 20, 30])
        assert (a * 2).get() == linalg.mul_vec3_constant(a, 2)
        assert len(added) == 1 and len(scaled) == 1

    def test_vector_operand_length(self):
        """Test container operands must have exactly N elements."""
        with pytest.raises(LengthMismatchError, match="exactly 3 elements required, got 4"):
            Vector3(1, 2, 3) + [1, 2, 3, 4]
        with pytest.raises(LengthMismatchError):
            Vector3(1, 2, 3).cross([1, 2])
        dest = [0, 0, 0, 0]
        with pytest.raises(LengthMismatchError):
            Vector3(1, 2, 3).add_into([1, 2, 3, 4], dest)
        assert dest == [0, 0, 0, 0]

    def test_matrix_methods(self, monkeypatch):
        """Test matrix products and negation write through their _ex kernels."""
        products = self._record(monkeypatch, 'matmul_mat2x2_mat2x2_ex')
        negated = self._record(monkeypatch, 'negate_mat2_ex')
        a, b = Matrix2(2, 4, 3, 1), Matrix2(5, 1, 2, 6)
        assert (a @ b).get() == linalg.matmul_mat2_mat2(a, b)
        assert (-a).get() == linalg.negate_mat2(a)
        assert len(products) == 1 and len(negated) == 1

    def test_matrix_scaling_and_vectors(self):
        """Test scaled matrices and matrix-vector products keep their values."""
        m = Matrix3(*fm.mat3_scale(2, 3))
        assert m.mul(2).get() == tuple(2 * v for v in m.get())
        assert (m @ Vector3(1, 1, 1)).get() == linalg.matmul_mat3_vec3(m, [1, 1, 1])
        with pytest.raises(LengthMismatchError):
            Matrix2(1, 2, 3, 4) + [1, 2, 3]
