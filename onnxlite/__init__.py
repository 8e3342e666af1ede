"""ONNX model decoding and numpy implementations of a set of ONNX operators."""

__version__ = "0.1.0"