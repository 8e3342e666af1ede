"""ONNX protocol-buffer messages and the conversion of their tensors to numpy arrays."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator

import numpy as np


class DataType(IntEnum):
    """Element types of an ONNX tensor, numbered as in the ONNX format."""

    UNDEFINED = 0
    FLOAT = 1
    UINT8 = 2
    INT8 = 3
    UINT16 = 4
    INT16 = 5
    INT32 = 6
    INT64 = 7
    STRING = 8
    BOOL = 9
    FLOAT16 = 10
    DOUBLE = 11
    UINT32 = 12
    UINT64 = 13
    COMPLEX64 = 14
    COMPLEX128 = 15
    BFLOAT16 = 16


class InvalidTypeError(ValueError):
    """Raised when a tensor holds a data type that cannot be read."""

    def __init__(self, message: str = "invalid type") -> None:
        super().__init__(message)


# Protocol-buffer wire format.

_VARINT, _I64, _LEN, _I32 = 0, 1, 2, 5


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
        if shift >= 70:
            raise ValueError("varint too long")


def _fields(data: bytes) -> Iterator[tuple[int, int, object]]:
    data = bytes(data)
    pos = 0
    end = len(data)
    while pos < end:
        key, pos = _read_varint(data, pos)
        number, wire = key >> 3, key & 7
        if wire == _VARINT:
            value, pos = _read_varint(data, pos)
        elif wire == _I64:
            value, pos = data[pos:pos + 8], pos + 8
        elif wire == _LEN:
            length, pos = _read_varint(data, pos)
            value, pos = data[pos:pos + length], pos + length
        elif wire == _I32:
            value, pos = data[pos:pos + 4], pos + 4
        else:
            raise ValueError(f"unsupported wire type {wire}")
        if pos > end:
            raise ValueError("truncated message")
        yield number, wire, value


def _signed(value: int) -> int:
    return value - (1 << 64) if value >= 1 << 63 else value


def _varints(wire: int, value) -> list[int]:
    if wire != _LEN:
        return [value]
    out = []
    pos = 0
    while pos < len(value):
        item, pos = _read_varint(value, pos)
        out.append(item)
    return out


def _fixed(wire: int, value, fmt: str) -> list[float]:
    size = struct.calcsize(fmt)
    if wire == _LEN:
        if len(value) % size:
            raise ValueError("truncated packed field")
        return [item for (item,) in struct.iter_unpack(fmt, value)]
    if len(value) != size:
        raise ValueError("truncated fixed field")
    return [struct.unpack(fmt, value)[0]]


def _text(value) -> str:
    return bytes(value).decode("utf-8")


# Messages.


@dataclass
class TensorProto:
    """A serialized tensor: its name, element type, dimensions and data."""

    name: str = ""
    data_type: int = DataType.UNDEFINED
    dims: list[int] = field(default_factory=list)
    float_data: list[float] = field(default_factory=list)
    int32_data: list[int] = field(default_factory=list)
    int64_data: list[int] = field(default_factory=list)
    double_data: list[float] = field(default_factory=list)
    uint64_data: list[int] = field(default_factory=list)
    string_data: list[bytes] = field(default_factory=list)
    raw_data: bytes = b""

    @classmethod
    def from_bytes(cls, data: bytes) -> TensorProto:
        """Decode a tensor from its wire encoding."""
        tp = cls()
        for number, wire, value in _fields(data):
            match number:
                case 1:
                    tp.dims.extend(_signed(v) for v in _varints(wire, value))
                case 2:
                    tp.data_type = _signed(value)
                case 4:
                    tp.float_data.extend(_fixed(wire, value, "<f"))
                case 5:
                    tp.int32_data.extend(_signed(v) for v in _varints(wire, value))
                case 6:
                    tp.string_data.append(bytes(value))
                case 7:
                    tp.int64_data.extend(_signed(v) for v in _varints(wire, value))
                case 8:
                    tp.name = _text(value)
                case 9:
                    tp.raw_data = bytes(value)
                case 10:
                    tp.double_data.extend(_fixed(wire, value, "<d"))
                case 11:
                    tp.uint64_data.extend(_varints(wire, value))
        return tp


@dataclass
class AttributeProto:
    """A named attribute of a node."""

    name: str = ""
    type: int = 0
    f: float = 0.0
    i: int = 0
    s: bytes = b""
    t: TensorProto | None = None
    floats: list[float] = field(default_factory=list)
    ints: list[int] = field(default_factory=list)
    strings: list[bytes] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> AttributeProto:
        """Decode an attribute from its wire encoding."""
        attr = cls()
        for number, wire, value in _fields(data):
            match number:
                case 1:
                    attr.name = _text(value)
                case 2:
                    attr.f = _fixed(wire, value, "<f")[0]
                case 3:
                    attr.i = _signed(value)
                case 4:
                    attr.s = bytes(value)
                case 5:
                    attr.t = TensorProto.from_bytes(value)
                case 7:
                    attr.floats.extend(_fixed(wire, value, "<f"))
                case 8:
                    attr.ints.extend(_signed(v) for v in _varints(wire, value))
                case 9:
                    attr.strings.append(bytes(value))
                case 20:
                    attr.type = _signed(value)
        return attr


@dataclass
class NodeProto:
    """One operation of a graph with its inputs, outputs and attributes."""

    name: str = ""
    op_type: str = ""
    domain: str = ""
    input: list[str] = field(default_factory=list)
    output: list[str] = field(default_factory=list)
    attribute: list[AttributeProto] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> NodeProto:
        """Decode a node from its wire encoding."""
        node = cls()
        for number, _wire, value in _fields(data):
            match number:
                case 1:
                    node.input.append(_text(value))
                case 2:
                    node.output.append(_text(value))
                case 3:
                    node.name = _text(value)
                case 4:
                    node.op_type = _text(value)
                case 5:
                    node.attribute.append(AttributeProto.from_bytes(value))
                case 7:
                    node.domain = _text(value)
        return node


@dataclass
class DimProto:
    """One dimension of a declared tensor shape: a fixed size or a symbolic name."""

    dim_value: int = 0
    dim_param: str = ""

    @classmethod
    def from_bytes(cls, data: bytes) -> DimProto:
        """Decode a dimension from its wire encoding."""
        dim = cls()
        for number, _wire, value in _fields(data):
            if number == 1:
                dim.dim_value = _signed(value)
            elif number == 2:
                dim.dim_param = _text(value)
        return dim


@dataclass
class ValueInfoProto:
    """A declared graph input or output; ``shape`` is None when no tensor shape is given."""

    name: str = ""
    elem_type: int = DataType.UNDEFINED
    shape: list[DimProto] | None = None

    @classmethod
    def from_bytes(cls, data: bytes) -> ValueInfoProto:
        """Decode a value declaration from its wire encoding."""
        info = cls()
        for number, _wire, value in _fields(data):
            if number == 1:
                info.name = _text(value)
            elif number == 2:
                info._read_type(value)
        return info

    def _read_type(self, data: bytes) -> None:
        for number, _wire, tensor_type in _fields(data):
            if number != 1:
                continue
            for inner, _w, value in _fields(tensor_type):
                if inner == 1:
                    self.elem_type = _signed(value)
                elif inner == 2:
                    self.shape = [
                        DimProto.from_bytes(dim)
                        for dim_number, _d, dim in _fields(value)
                        if dim_number == 1
                    ]


@dataclass
class Dim:
    """A dimension of an input or output; a size of zero marks it as dynamic."""

    is_dynamic: bool
    name: str
    size: int

    def __str__(self) -> str:
        dynamic = "true" if self.is_dynamic else "false"
        return f"dynamic: {dynamic}, name: {self.name}, size: {self.size}\n"


def format_shape(shape: list[Dim]) -> str:
    """Render a shape as its list of sizes, e.g. ``[0 3]``."""
    return "[" + " ".join(str(dim.size) for dim in shape) + "]"


def _shapes(values: list[ValueInfoProto]) -> dict[str, list[Dim]]:
    return {
        value.name: [
            Dim(is_dynamic=dim.dim_value == 0, name=dim.dim_param, size=dim.dim_value)
            for dim in value.shape
        ]
        for value in values
        if value.shape
    }


@dataclass
class GraphProto:
    """The computational graph: nodes, initializers and declared inputs and outputs."""

    name: str = ""
    node: list[NodeProto] = field(default_factory=list)
    initializer: list[TensorProto] = field(default_factory=list)
    input: list[ValueInfoProto] = field(default_factory=list)
    output: list[ValueInfoProto] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> GraphProto:
        """Decode a graph from its wire encoding."""
        graph = cls()
        for number, _wire, value in _fields(data):
            match number:
                case 1:
                    graph.node.append(NodeProto.from_bytes(value))
                case 2:
                    graph.name = _text(value)
                case 5:
                    graph.initializer.append(TensorProto.from_bytes(value))
                case 11:
                    graph.input.append(ValueInfoProto.from_bytes(value))
                case 12:
                    graph.output.append(ValueInfoProto.from_bytes(value))
        return graph

    def input_names(self) -> list[str]:
        """Names of the declared inputs, in order."""
        return [value.name for value in self.input]

    def input_shapes(self) -> dict[str, list[Dim]]:
        """Shapes of the declared inputs that have one."""
        return _shapes(self.input)

    def output_names(self) -> list[str]:
        """Names of the declared outputs, in order."""
        return [value.name for value in self.output]

    def output_shapes(self) -> dict[str, list[Dim]]:
        """Shapes of the declared outputs that have one."""
        return _shapes(self.output)

    def param_names(self) -> list[str]:
        """Names of the initializers, in order."""
        return [tp.name for tp in self.initializer]

    def params(self) -> dict[str, np.ndarray]:
        """The initializers as arrays, keyed by name."""
        return {tp.name: tensor_from_proto(tp) for tp in self.initializer}


@dataclass
class OpsetImport:
    """An operator set the model relies on."""

    domain: str = ""
    version: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> OpsetImport:
        """Decode an operator set reference from its wire encoding."""
        opset = cls()
        for number, _wire, value in _fields(data):
            if number == 1:
                opset.domain = _text(value)
            elif number == 2:
                opset.version = _signed(value)
        return opset


@dataclass
class ModelProto:
    """A complete ONNX model."""

    ir_version: int = 0
    producer_name: str = ""
    graph: GraphProto = field(default_factory=GraphProto)
    opset_import: list[OpsetImport] = field(default_factory=list)

    @classmethod
    def from_bytes(cls, data: bytes) -> ModelProto:
        """Decode a model from the bytes of an ONNX file."""
        model = cls()
        for number, _wire, value in _fields(data):
            match number:
                case 1:
                    model.ir_version = _signed(value)
                case 2:
                    model.producer_name = _text(value)
                case 7:
                    model.graph = GraphProto.from_bytes(value)
                case 8:
                    model.opset_import.append(OpsetImport.from_bytes(value))
        return model


# Tensor data.

_RAW_DTYPES: dict[DataType, np.dtype] = {
    DataType.FLOAT: np.dtype(np.float32),
    DataType.UINT8: np.dtype(np.uint8),
    DataType.INT8: np.dtype(np.int8),
    DataType.UINT16: np.dtype(np.uint16),
    DataType.INT16: np.dtype(np.int16),
    DataType.UINT32: np.dtype(np.uint32),
    DataType.INT32: np.dtype(np.int32),
    DataType.UINT64: np.dtype(np.uint64),
    DataType.INT64: np.dtype(np.int64),
    DataType.DOUBLE: np.dtype(np.float64),
}

# The typed field each element type is stored in, when raw data is not used.
_TYPED_FIELDS: dict[DataType, str] = {
    DataType.FLOAT: "float_data",
    DataType.UINT8: "int32_data",
    DataType.INT8: "int32_data",
    DataType.UINT16: "int32_data",
    DataType.INT16: "int32_data",
    DataType.UINT32: "uint64_data",
    DataType.INT32: "int32_data",
    DataType.UINT64: "uint64_data",
    DataType.INT64: "int64_data",
    DataType.DOUBLE: "double_data",
}

_FIELD_DTYPES: dict[str, type] = {
    "float_data": np.float32,
    "int32_data": np.int64,
    "int64_data": np.int64,
    "double_data": np.float64,
    "uint64_data": np.uint64,
}

# Fields tried, in order, when the element type is undefined or unsupported.
_FALLBACK: list[tuple[str, type]] = [
    ("float_data", np.float32),
    ("int32_data", np.int32),
    ("int64_data", np.int64),
    ("double_data", np.float64),
    ("uint64_data", np.uint64),
]


def decode_raw(data: bytes, data_type: int) -> np.ndarray:
    """Decode little-endian raw tensor bytes into a flat array of the given type.

    Booleans are one byte each and true when the byte is non-zero.
    """
    if data_type == DataType.BOOL:
        return np.frombuffer(bytes(data), dtype=np.uint8) > 0
    try:
        dtype = _RAW_DTYPES[DataType(data_type)]
    except (ValueError, KeyError):
        raise InvalidTypeError() from None
    if len(data) % dtype.itemsize:
        raise ValueError(
            f"raw data of {len(data)} bytes is not a whole number of {dtype.itemsize}-byte elements"
        )
    return np.frombuffer(bytes(data), dtype=dtype.newbyteorder("<")).astype(dtype)


def _typed_values(values: list, source: type, target: type) -> np.ndarray:
    return np.array(values, dtype=source).astype(target)


def _proto_values(tp: TensorProto) -> np.ndarray:
    try:
        kind = DataType(tp.data_type)
    except ValueError:
        kind = None

    if kind == DataType.BOOL:
        if tp.int32_data:
            return np.array([value == 1 for value in tp.int32_data], dtype=bool)
        return decode_raw(tp.raw_data, DataType.BOOL)

    if kind in _TYPED_FIELDS:
        name = _TYPED_FIELDS[kind]
        values = getattr(tp, name)
        if values:
            return _typed_values(values, _FIELD_DTYPES[name], _RAW_DTYPES[kind])
        return decode_raw(tp.raw_data, kind)

    for name, target in _FALLBACK:
        values = getattr(tp, name)
        if values:
            return _typed_values(values, _FIELD_DTYPES[name], target)
    raise InvalidTypeError()


def tensor_from_proto(tp: TensorProto) -> np.ndarray:
    """Build an array from a tensor proto, shaped by its dimensions."""
    values = _proto_values(tp)
    shape = tuple(int(dim) for dim in tp.dims)
    if int(np.prod(shape, dtype=np.int64)) != values.size:
        raise ValueError(
            f"tensor {tp.name!r} has {values.size} elements, which do not fit shape {list(shape)}"
        )
    return values.reshape(shape)