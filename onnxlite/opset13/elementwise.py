"""Element-wise unary operators: Abs and the trigonometric and hyperbolic functions."""

from __future__ import annotations

from typing import Callable, ClassVar, Sequence

import numpy as np

from ..errors import InputError
from ..operator import FLOAT_TYPES, NUMERIC_TYPES, Operator


class _UnaryFloatOperator(Operator):
    """An operator that maps every element of one float tensor through a function."""

    min_inputs = 1
    max_inputs = 1
    input_type_constraints = (FLOAT_TYPES,)

    def _map(self, inputs: Sequence[np.ndarray], func: Callable[[np.ndarray], np.ndarray]):
        x = np.asarray(inputs[0])
        if x.dtype not in FLOAT_TYPES:
            raise InputError.invalid_type(0, x.dtype.name, self)
        # Computed in double precision and rounded back to the input's type.
        with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
            out = func(x.astype(np.float64)).astype(x.dtype)
        return [out]


class Abs(Operator):
    """The absolute value of every element."""

    name: ClassVar[str] = "abs operator"
    min_inputs = 1
    max_inputs = 1
    input_type_constraints = (NUMERIC_TYPES,)

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return [np.abs(np.asarray(inputs[0]))]


class Acos(_UnaryFloatOperator):
    """The arc cosine of every element."""

    name: ClassVar[str] = "acos operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arccos)


class Acosh(_UnaryFloatOperator):
    """The inverse hyperbolic cosine of every element."""

    name: ClassVar[str] = "acosh operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arccosh)


class Asin(_UnaryFloatOperator):
    """The arc sine of every element."""

    name: ClassVar[str] = "asin operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arcsin)


class Asinh(_UnaryFloatOperator):
    """The inverse hyperbolic sine of every element."""

    name: ClassVar[str] = "asinh operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arcsinh)


class Atan(_UnaryFloatOperator):
    """The arc tangent of every element."""

    name: ClassVar[str] = "atan operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arctan)


class Atanh(_UnaryFloatOperator):
    """The inverse hyperbolic tangent of every element."""

    name: ClassVar[str] = "atanh operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.arctanh)


class Cos(_UnaryFloatOperator):
    """The cosine of every element."""

    name: ClassVar[str] = "cos operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.cos)


class Cosh(_UnaryFloatOperator):
    """The hyperbolic cosine of every element."""

    name: ClassVar[str] = "cosh operator"

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return self._map(inputs, np.cosh)