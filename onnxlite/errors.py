"""Exceptions raised while loading models and running operators."""

from __future__ import annotations

from enum import Enum
from typing import Any, Sequence

from .proto import Dim, format_shape


def _format_ints(values: Sequence[int]) -> str:
    return "[" + " ".join(str(int(value)) for value in values) + "]"


class OnnxError(Exception):
    """Base class of every error of this package.

    Two errors are equal when they are of the same class and carry the same message.
    """

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash((type(self), str(self)))


class AttributeErrorKind(str, Enum):
    """What went wrong with an operator's attributes."""

    COUNT = "count"
    OPTIONAL_COUNT = "optional_count"
    INVALID = "invalid"
    UNSUPPORTED = "unsupported"


class OperatorAttributeError(OnnxError, ValueError):
    """An operator was given attributes it cannot use."""

    def __init__(
        self,
        kind: AttributeErrorKind,
        operator: Any,
        *,
        attribute_name: str = "",
        attribute_count: int = 0,
        expected_count: int = 0,
        min_count: int = 0,
        max_count: int = 0,
    ) -> None:
        self.kind = AttributeErrorKind(kind)
        self.operator = operator
        self.attribute_name = attribute_name
        self.attribute_count = attribute_count
        self.expected_count = expected_count
        self.min_count = min_count
        self.max_count = max_count
        super().__init__(self._message())

    def _message(self) -> str:
        prefix = f"{self.operator} attribute error:"
        if self.kind is AttributeErrorKind.COUNT:
            return f"{prefix} invalid count {self.attribute_count} expected {self.expected_count}"
        if self.kind is AttributeErrorKind.OPTIONAL_COUNT:
            return (
                f"{prefix} invalid count {self.attribute_count} "
                f"expected {self.min_count} - {self.max_count}"
            )
        if self.kind is AttributeErrorKind.INVALID:
            return f"{prefix} invalid attribute {self.attribute_name}"
        return f"{prefix} unsupported attribute {self.attribute_name}"

    @classmethod
    def invalid(cls, attribute_name: str, operator: Any) -> OperatorAttributeError:
        """An attribute with a name or value the operator does not accept."""
        return cls(AttributeErrorKind.INVALID, operator, attribute_name=attribute_name)

    @classmethod
    def count(cls, expected: int, actual: int, operator: Any) -> OperatorAttributeError:
        """The operator needs exactly ``expected`` attributes."""
        return cls(
            AttributeErrorKind.COUNT,
            operator,
            attribute_count=actual,
            expected_count=expected,
        )

    @classmethod
    def optional_count(
        cls, min_count: int, max_count: int, actual: int, operator: Any
    ) -> OperatorAttributeError:
        """The operator needs between ``min_count`` and ``max_count`` attributes."""
        return cls(
            AttributeErrorKind.OPTIONAL_COUNT,
            operator,
            attribute_count=actual,
            min_count=min_count,
            max_count=max_count,
        )

    @classmethod
    def unsupported(cls, attribute_name: str, operator: Any) -> OperatorAttributeError:
        """A valid attribute this implementation does not support."""
        return cls(AttributeErrorKind.UNSUPPORTED, operator, attribute_name=attribute_name)


class TypeAssertError(OnnxError, TypeError):
    """A value had another type than the one required."""

    def __init__(self, expected_type: str, actual: Any) -> None:
        self.expected_type = expected_type
        self.actual = actual
        super().__init__(
            f"type assert error: expected {expected_type}, got {type(actual).__name__}"
        )


class InputErrorKind(str, Enum):
    """What went wrong with an operator's input tensors."""

    TYPE = "type"
    COUNT = "count"
    UNSUPPORTED = "unsupported"
    INVALID = "invalid"


class InputError(OnnxError, ValueError):
    """An operator was given input tensors it cannot use."""

    def __init__(
        self,
        kind: InputErrorKind,
        operator: Any,
        *,
        reason: str = "",
        input_number: int = 0,
        actual_type: str = "",
        has_optional_inputs: bool = False,
        actual_count: int = 0,
        input_name: str = "",
    ) -> None:
        self.kind = InputErrorKind(kind)
        self.operator = operator
        self.reason = reason
        self.input_number = input_number
        self.actual_type = actual_type
        self.has_optional_inputs = has_optional_inputs
        self.actual_count = actual_count
        self.input_name = input_name
        super().__init__(self._message())

    def _message(self) -> str:
        op = self.operator
        if self.kind is InputErrorKind.TYPE:
            return f"input {self.input_number} for op {op} does not allow dtype {self.actual_type}"
        if self.kind is InputErrorKind.COUNT:
            if self.has_optional_inputs:
                return (
                    f"{op}: expected {op.min_inputs}-{op.max_inputs} input tensors, "
                    f"got {self.actual_count}"
                )
            return f"{op}: expected {op.min_inputs} input tensors, got {self.actual_count}"
        if self.kind is InputErrorKind.UNSUPPORTED:
            return f"unsupported input for {op}: {self.input_name}"
        return f"invalid input tensor for {op}: {self.reason}"

    @classmethod
    def invalid_type(cls, input_number: int, dtype: Any, operator: Any) -> InputError:
        """Input ``input_number`` has a dtype the operator does not allow."""
        return cls(
            InputErrorKind.TYPE, operator, input_number=input_number, actual_type=str(dtype)
        )

    @classmethod
    def count(cls, actual: int, operator: Any) -> InputError:
        """The operator got the wrong number of inputs."""
        return cls(InputErrorKind.COUNT, operator, actual_count=actual)

    @classmethod
    def optional_count(cls, actual: int, operator: Any) -> InputError:
        """The operator, which has optional inputs, got too few or too many."""
        return cls(
            InputErrorKind.COUNT, operator, actual_count=actual, has_optional_inputs=True
        )

    @classmethod
    def unsupported(cls, input_name: str, operator: Any) -> InputError:
        """A valid input this implementation does not support."""
        return cls(InputErrorKind.UNSUPPORTED, operator, input_name=input_name)

    @classmethod
    def invalid(cls, reason: str, operator: Any) -> InputError:
        """An input tensor that is invalid for the given reason."""
        return cls(InputErrorKind.INVALID, operator, reason=reason)


class BroadcastError(OnnxError, ValueError):
    """Two tensors could not be broadcast to each other."""

    def __init__(
        self,
        broadcast_type: str,
        shape_a: Sequence[int],
        shape_b: Sequence[int],
        cause: Exception | None = None,
    ) -> None:
        self.broadcast_type = broadcast_type
        self.shape_a = tuple(int(d) for d in shape_a)
        self.shape_b = tuple(int(d) for d in shape_b)
        self.cause = cause
        prefix = f"{cause}: " if cause is not None else ""
        super().__init__(
            f"{prefix}could not perform {broadcast_type}, inputs with shape "
            f"{_format_ints(self.shape_a)} and {_format_ints(self.shape_b)}."
        )

    @classmethod
    def multidirectional(
        cls, shape_a: Sequence[int], shape_b: Sequence[int], cause: Exception | None
    ) -> BroadcastError:
        """A failed multidirectional broadcast."""
        return cls("multidirectional broadcast", shape_a, shape_b, cause)

    @classmethod
    def unidirectional(cls, shape_a: Sequence[int], shape_b: Sequence[int]) -> BroadcastError:
        """A failed unidirectional broadcast."""
        return cls("Unidirectional broadcast", shape_a, shape_b)


class InvalidTensorError(OnnxError, ValueError):
    """An operator found a tensor it cannot work with."""

    def __init__(self, reason: str, operator: Any) -> None:
        self.reason = reason
        self.operator = operator
        super().__init__(f"{operator} invalid tensor found, reason: {reason}")


class UnsupportedOperatorError(OnnxError, ValueError):
    """A model uses an operator type that is not available."""

    def __init__(self, operator_type: str) -> None:
        self.operator_type = operator_type
        super().__init__(f"unsupported operator: {operator_type}")


class AxisOutOfRangeError(OnnxError, ValueError):
    """An axis, or one of several axes, lies outside ``-minimum <= x < maximum``."""

    def __init__(self, minimum: int, maximum: int, actual: int | None = None) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.actual = actual
        if actual is None:
            detail = f"all indices entries must be in the range -{minimum} <= x < {maximum}"
        else:
            detail = (
                f"axis argument must be in the range -{minimum} <= x < {maximum}, was {actual}"
            )
        super().__init__(f"axis out of range: {detail}")


class UnsupportedOpsetVersionError(OnnxError, ValueError):
    """A model asks for an operator set version that is not available."""

    def __init__(self, version: int | None = None) -> None:
        self.version = version
        message = "unsupported opset version"
        if version is not None:
            message += f": {version}"
        super().__init__(message)


class DimensionError(OnnxError, ValueError):
    """Tensor dimensions do not fit together."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        if reason is None:
            super().__init__("dimensions error: incompatible dimensions")
        else:
            super().__init__(f"dimension error: {reason}")

    @classmethod
    def incompatible(cls) -> DimensionError:
        """Dimensions that are not equal and of which neither is one."""
        return cls()


class ConversionError(OnnxError, TypeError):
    """A tensor could not be converted to another element type."""

    @classmethod
    def invalid_type(cls, dtype: Any, new_type: int) -> ConversionError:
        """Tensors of ``dtype`` cannot be converted."""
        return cls(f"unable to convert: type {dtype}, to {int(new_type)} is invalid")

    @classmethod
    def not_supported(cls, new_type: int) -> ConversionError:
        """Conversion to the element type ``new_type`` is not supported."""
        return cls(f"unable to convert: to {int(new_type)} is not supported yet")


class ActivationNotImplementedError(OnnxError, ValueError):
    """An activation function was requested that is not available."""

    def __init__(self, activation: str) -> None:
        self.activation = activation
        super().__init__(
            f"the given activation function is not implemented: {activation}"
        )


class ModelError(OnnxError, ValueError):
    """Setting up or running a model failed."""

    def __init__(self, message: str) -> None:
        self.detail = message
        super().__init__(f"model error: {message}")


class InvalidShapeError(OnnxError, ValueError):
    """An input tensor does not have the shape the model declares."""

    def __init__(self, expected: Sequence[Dim], actual: Sequence[int]) -> None:
        self.expected = list(expected)
        self.actual = [int(d) for d in actual]
        super().__init__(
            f"invalid shape error expected: {format_shape(self.expected)} "
            f"actual {_format_ints(self.actual)}"
        )