import numpy as np
import pytest

from onnxlite.errors import InputError
from onnxlite.fixtures import tensor_with_backing_fixture
from onnxlite.opset13.elementwise import (
    Abs,
    Acos,
    Acosh,
    Asin,
    Asinh,
    Atan,
    Atanh,
    Cos,
    Cosh,
)

FLOAT_OPS = [Acos, Acosh, Asin, Asinh, Atan, Atanh, Cos, Cosh]


def _f32(values):
    return np.array(values, dtype=np.float32)


@pytest.mark.parametrize(
    "backing, shape, expected",
    [
        ([-2, -1, 0, 1], (2, 2), [2, 1, 0, 1]),
        ([1, 3, 4, 5], (1, 4), [1, 3, 4, 5]),
        ([-1, -1, -1, -1], (1, 4), [1, 1, 1, 1]),
    ],
)
def test_abs(backing, shape, expected):
    op = Abs()
    op.init(None)
    res = op.apply([tensor_with_backing_fixture(_f32(backing), *shape)])
    assert res[0].dtype == np.float32
    assert res[0].shape == shape
    np.testing.assert_array_equal(res[0].ravel(), _f32(expected))


CASES = [
    (Acos, [-1, -1, 0, 1], (2, 2), [3.1415927, 3.1415927, 1.5707964, 0]),
    (Acos, [1, 0.5, 0.0, -0.5], (1, 4), [0, 1.0471976, 1.5707964, 2.0943952]),
    (Acos, [-1, -1, -1, -1], (1, 4), [3.1415927] * 4),
    (Acosh, [1, 2, 3, 4], (2, 2), [0, 1.316958, 1.7627472, 2.063437]),
    (Acosh, [1, 2, 3, 4], (1, 4), [0, 1.316958, 1.7627472, 2.063437]),
    (Acosh, [2, 2, 2, 2], (1, 4), [1.316958] * 4),
    (Asin, [-1, -1, 0, 1], (2, 2), [-1.5707964, -1.5707964, 0, 1.5707964]),
    (Asin, [1, 0.5, 0.0, -0.5], (1, 4), [1.5707964, 0.5235988, 0, -0.5235988]),
    (Asin, [-1, -1, -1, -1], (1, 4), [-1.5707964] * 4),
    (Asinh, [1, 2, 3, 4], (2, 2), [0.8813736, 1.4436355, 1.8184465, 2.0947125]),
    (Asinh, [1, 2, 3, 4], (1, 4), [0.8813736, 1.4436355, 1.8184465, 2.0947125]),
    (Asinh, [2, 2, 2, 2], (1, 4), [1.4436355] * 4),
    (Atan, [1, 2, 3, 4], (2, 2), [0.7853982, 1.1071488, 1.2490457, 1.3258177]),
    (Atan, [1, 2, 3, 4], (1, 4), [0.7853982, 1.1071488, 1.2490457, 1.3258177]),
    (Atan, [2, 2, 2, 2], (1, 4), [1.1071488] * 4),
    (Atanh, [-0.9, -0.5, 0, 0.5], (2, 2), [-1.4722193, -0.54930615, 0, 0.54930615]),
    (Atanh, [-0.9, -0.5, 0, 0.5], (1, 4), [-1.4722193, -0.54930615, 0, 0.54930615]),
    (Atanh, [0.5, 0.5, 0.5, 0.5], (1, 4), [0.54930615] * 4),
    (Cos, [-2, -1, 0, 1], (2, 2), [-0.41614684, 0.5403023, 1, 0.5403023]),
    (Cos, [1, 3, 4, 5], (1, 4), [0.5403023, -0.9899925, -0.6536436, 0.2836622]),
    (Cos, [-1, -1, -1, -1], (1, 4), [0.5403023] * 4),
    (Cosh, [-2, -1, 0, 1], (2, 2), [3.7621956, 1.5430807, 1, 1.5430807]),
    (Cosh, [1, 3, 4, 5], (1, 4), [1.5430807, 10.067662, 27.308233, 74.209946]),
    (Cosh, [-1, -1, -1, -1], (1, 4), [1.5430807] * 4),
]


@pytest.mark.parametrize("op_class, backing, shape, expected", CASES)
def test_float_operators(op_class, backing, shape, expected):
    op = op_class()
    op.init(None)
    res = op.apply([tensor_with_backing_fixture(_f32(backing), *shape)])
    assert len(res) == 1
    assert res[0].dtype == np.float32
    assert res[0].shape == shape
    np.testing.assert_allclose(res[0].ravel(), _f32(expected), rtol=1e-6, atol=1e-7)


@pytest.mark.parametrize("op_class", FLOAT_OPS)
def test_float64_input_keeps_dtype(op_class):
    backing = np.array([0.5, 0.25], dtype=np.float64)
    if op_class is Acosh:
        backing = backing + 1.0
    x = tensor_with_backing_fixture(backing, 2)
    res = op_class().apply([x])
    assert res[0].dtype == np.float64
    assert res[0].shape == (2,)


def test_cos_float64_value():
    res = Cos().apply([np.array([0.0, np.pi], dtype=np.float64)])
    np.testing.assert_allclose(res[0], [1.0, -1.0])


@pytest.mark.parametrize("op_class", FLOAT_OPS)
def test_apply_rejects_integer_tensor(op_class):
    op = op_class()
    with pytest.raises(InputError) as excinfo:
        op.apply([np.array([1, 2], dtype=np.int64)])
    assert excinfo.value == InputError.invalid_type(0, "int64", op_class())


@pytest.mark.parametrize(
    "dtype",
    [
        np.uint8, np.uint16, np.uint32, np.uint64,
        np.int8, np.int16, np.int32, np.int64,
        np.float32, np.float64,
    ],
)
def test_abs_validation_accepts(dtype):
    inputs = [tensor_with_backing_fixture(np.array([1, 2], dtype=dtype), 2)]
    validated = Abs().validate_inputs(inputs)
    assert len(validated) == 1
    assert validated[0] is inputs[0]


def test_abs_validation_no_inputs():
    with pytest.raises(InputError) as excinfo:
        Abs().validate_inputs([])
    assert excinfo.value == InputError.count(0, Abs())
    assert str(excinfo.value) == "abs operator: expected 1 input tensors, got 0"


def test_abs_validation_wrong_type():
    inputs = [np.array([True, False])]
    with pytest.raises(InputError) as excinfo:
        Abs().validate_inputs(inputs)
    assert excinfo.value == InputError.invalid_type(0, "bool", Abs())


@pytest.mark.parametrize("op_class", FLOAT_OPS)
@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_float_validation_accepts(op_class, dtype):
    inputs = [tensor_with_backing_fixture(np.array([1, 2], dtype=dtype), 2)]
    validated = op_class().validate_inputs(inputs)
    assert len(validated) == 1
    assert validated[0] is inputs[0]


@pytest.mark.parametrize("op_class", FLOAT_OPS)
def test_float_validation_no_inputs(op_class):
    with pytest.raises(InputError) as excinfo:
        op_class().validate_inputs([])
    assert excinfo.value == InputError.count(0, op_class())


@pytest.mark.parametrize("op_class", FLOAT_OPS)
def test_float_validation_wrong_type(op_class):
    inputs = [tensor_with_backing_fixture(np.array([1, 2], dtype=np.int64), 2)]
    with pytest.raises(InputError) as excinfo:
        op_class().validate_inputs(inputs)
    assert excinfo.value == InputError.invalid_type(0, "int64", op_class())
    assert str(excinfo.value) == f"input 0 for op {op_class()} does not allow dtype int64"


@pytest.mark.parametrize(
    "op_class, name",
    [
        (Abs, "abs operator"),
        (Acos, "acos operator"),
        (Acosh, "acosh operator"),
        (Asin, "asin operator"),
        (Asinh, "asinh operator"),
        (Atan, "atan operator"),
        (Atanh, "atanh operator"),
        (Cos, "cos operator"),
        (Cosh, "cosh operator"),
    ],
)
def test_operator_names(op_class, name):
    assert str(op_class()) == name


def test_acos_out_of_domain_is_nan():
    res = Acos().apply([np.array([2.0], dtype=np.float32)])
    assert np.isnan(res[0][0])


def test_abs_integer_input():
    res = Abs().apply([np.array([-3, 4, -5], dtype=np.int32)])
    assert res[0].dtype == np.int32
    np.testing.assert_array_equal(res[0], [3, 4, 5])