"""The Constant and ConstantOfShape operators."""

from __future__ import annotations

from typing import ClassVar, Sequence

import numpy as np

from ..errors import InvalidTensorError, OperatorAttributeError
from ..operator import Operator
from ..proto import NodeProto, tensor_from_proto

_UNSUPPORTED_VALUES = frozenset({"sparse_value", "value_string", "value_strings"})


class Constant(Operator):
    """Produces the tensor given by its single attribute."""

    name: ClassVar[str] = "constant operator"
    min_inputs = 0
    max_inputs = 0
    input_type_constraints = ()

    def __init__(self) -> None:
        self.value: np.ndarray | None = None

    def init(self, node: NodeProto | None) -> None:
        """Read the constant from ``value``, ``value_float(s)`` or ``value_int(s)``."""
        attributes = node.attribute if node is not None else []
        if len(attributes) != 1:
            raise OperatorAttributeError.count(1, len(attributes), self)

        attr = attributes[0]
        if attr.name in _UNSUPPORTED_VALUES:
            raise OperatorAttributeError.unsupported(attr.name, self)

        match attr.name:
            case "value":
                if attr.t is None:
                    raise OperatorAttributeError.invalid(attr.name, self)
                self.value = tensor_from_proto(attr.t)
            case "value_float":
                self.value = np.array(attr.f, dtype=np.float32)
            case "value_floats":
                self.value = np.array(attr.floats, dtype=np.float32)
            case "value_int":
                self.value = np.array(attr.i, dtype=np.int64)
            case "value_ints":
                self.value = np.array(attr.ints, dtype=np.int64)
            case _:
                raise OperatorAttributeError.unsupported(attr.name, self)

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        return [self.value]


class ConstantOfShape(Operator):
    """Produces a tensor of a given shape filled with one value, float32 zero by default."""

    name: ClassVar[str] = "constant of shape operator"
    min_inputs = 1
    max_inputs = 1
    input_type_constraints = ((np.dtype(np.int64),),)

    def __init__(self) -> None:
        self.value: np.ndarray = np.array(0.0, dtype=np.float32)

    def init(self, node: NodeProto | None) -> None:
        """Read the fill value from the optional one-element ``value`` tensor."""
        attributes = node.attribute if node is not None else []
        if len(attributes) > 1:
            raise OperatorAttributeError.count(1, len(attributes), self)

        if not attributes:
            self.value = np.array(0.0, dtype=np.float32)
            return

        attr = attributes[0]
        if attr.name != "value" or attr.t is None:
            raise OperatorAttributeError.invalid(attr.name, self)
        values = tensor_from_proto(attr.t)
        if values.size != 1:
            raise InvalidTensorError("expected tensor to have one element", self)
        self.value = values.reshape(())

    def apply(self, inputs: Sequence[np.ndarray]) -> list[np.ndarray]:
        shape = [int(dim) for dim in np.asarray(inputs[0]).reshape(-1)]
        if any(dim <= 0 for dim in shape):
            raise InvalidTensorError("empty dimensions are not allowed", self)
        return [np.full(shape, self.value, dtype=self.value.dtype)]