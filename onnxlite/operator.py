"""The interface every operator implements, and the input validation they share."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Sequence

import numpy as np

from .errors import InputError
from .proto import NodeProto

UNSIGNED_TYPES: tuple[np.dtype, ...] = tuple(
    np.dtype(t) for t in (np.uint8, np.uint16, np.uint32, np.uint64)
)
SIGNED_TYPES: tuple[np.dtype, ...] = tuple(
    np.dtype(t) for t in (np.int8, np.int16, np.int32, np.int64)
)
FLOAT_TYPES: tuple[np.dtype, ...] = (np.dtype(np.float32), np.dtype(np.float64))
NUMERIC_TYPES: tuple[np.dtype, ...] = UNSIGNED_TYPES + SIGNED_TYPES + FLOAT_TYPES
ALL_TYPES: tuple[np.dtype, ...] = NUMERIC_TYPES + (np.dtype(bool),)


class Operator(ABC):
    """An ONNX operator: configured from a node, then applied to input tensors.

    Subclasses set ``name``, ``min_inputs``, ``max_inputs`` and
    ``input_type_constraints``, the allowed dtypes of each input in turn.
    """

    name: ClassVar[str] = "operator"
    min_inputs: int = 1
    max_inputs: int = 1
    input_type_constraints: Sequence[Sequence[np.dtype]] = ()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def init(self, node: NodeProto | None) -> None:
        """Configure the operator from the node's attributes; by default there are none."""

    @abstractmethod
    def apply(self, inputs: Sequence[np.ndarray | None]) -> list[np.ndarray]:
        """Apply the operator and return its output tensors."""

    def validate_inputs(self, inputs: Sequence[np.ndarray | None]) -> list[np.ndarray | None]:
        """Check the number and dtypes of the inputs.

        Missing optional inputs are filled in with None up to ``max_inputs``.
        """
        inputs = list(inputs)
        count = len(inputs)
        if not self.min_inputs <= count <= self.max_inputs:
            if self.min_inputs == self.max_inputs:
                raise InputError.count(count, self)
            raise InputError.optional_count(count, self)

        inputs.extend([None] * (self.max_inputs - count))

        for index, (tensor, allowed) in enumerate(zip(inputs, self.input_type_constraints)):
            if tensor is None:
                continue
            if tensor.dtype not in allowed:
                raise InputError.invalid_type(index, tensor.dtype.name, self)

        return inputs