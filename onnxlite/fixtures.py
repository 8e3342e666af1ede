"""Ready-made tensors and nodes for exercising operators."""

from __future__ import annotations

import math

import numpy as np

from .proto import NodeProto


def float32_tensor_fixture(*args: int) -> np.ndarray:
    """A float32 tensor of the given shape holding 0, 1, 2, ... in order."""
    return np.arange(math.prod(args), dtype=np.float32).reshape(args)


def random_float32_tensor_fixture(rng: np.random.Generator, *args: int) -> np.ndarray:
    """A float32 tensor of the given shape with uniform values in [0, 1) drawn from ``rng``."""
    return rng.random(math.prod(args), dtype=np.float32).reshape(args)


def tensor_with_backing_fixture(backing, *args: int) -> np.ndarray:
    """A tensor of the given shape holding the values of ``backing``."""
    return np.asarray(backing).reshape(args)


def tensor_inputs_fixture(n_tensors: int) -> list[np.ndarray]:
    """A list of ``n_tensors`` single-element float32 tensors holding zero."""
    return [np.zeros(1, dtype=np.float32) for _ in range(n_tensors)]


def empty_node_proto() -> NodeProto:
    """A node without attributes."""
    return NodeProto(attribute=[])