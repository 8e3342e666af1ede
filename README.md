# onnxlite

Reads serialized ONNX models into plain Python objects, turns their stored
tensors into numpy arrays, and provides a set of ONNX operators that work on
numpy arrays.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Reading a model

`onnxlite.proto` decodes the protocol-buffer encoding of an ONNX file itself;
no protobuf library is needed.

```python
from pathlib import Path
from onnxlite.proto import ModelProto

model = ModelProto.from_bytes(Path("mlp.onnx").read_bytes())
graph = model.graph

print([opset.version for opset in model.opset_import])
print(graph.input_names())    # declared inputs, in order
print(graph.input_shapes())   # {name: [Dim(is_dynamic, name, size), ...]}
print(graph.output_names())
print(graph.output_shapes())
print(graph.param_names())    # names of the initializers
params = graph.params()       # {name: numpy array}
for node in graph.node:
    print(node.op_type, node.input, node.output)
```

A dimension whose declared size is zero is reported as dynamic. Only inputs
and outputs that declare a tensor shape appear in the shape mappings.
`format_shape(shape)` renders a shape as its sizes, e.g. `[0 3]`.

`tensor_from_proto(tp)` builds an array from a `TensorProto`, reading either
its typed data fields or its little-endian `raw_data`, and shaping it by its
`dims`. Supported element types are float32/64, signed and unsigned 8–64 bit
integers and bool (see `DataType`). Anything else raises `InvalidTypeError`.
`decode_raw(data, data_type)` decodes raw bytes on their own.

## Operators

Every operator derives from `onnxlite.operator.Operator`:

* `init(node)` reads the attributes of a `NodeProto`;
* `validate_inputs(inputs)` checks the number of inputs and their dtypes,
  filling missing optional inputs with `None`, and raises `InputError`;
* `apply(inputs)` returns the list of output arrays.

`onnxlite.opset13.elementwise` has `Abs` (any numeric dtype) and the
float32/float64 functions `Acos`, `Acosh`, `Asin`, `Asinh`, `Atan`, `Atanh`,
`Cos` and `Cosh`. `onnxlite.opset13.constant` has `Constant` and
`ConstantOfShape`.

```python
import numpy as np
from onnxlite.fixtures import empty_node_proto
from onnxlite.opset13.constant import ConstantOfShape
from onnxlite.opset13.elementwise import Acos

acos = Acos()
x = np.array([1.0, 0.5, 0.0, -0.5], dtype=np.float32)
(out,) = acos.apply(acos.validate_inputs([x]))

fill = ConstantOfShape()
fill.init(empty_node_proto())
(zeros,) = fill.apply([np.array([2, 2], dtype=np.int64)])  # 2x2 float32 zeros
```

`onnxlite.fixtures` holds small helpers for building test tensors and empty
nodes.

## Errors

All exceptions derive from `onnxlite.errors.OnnxError`; two errors compare
equal when they have the same class and message. Operators raise
`OperatorAttributeError` for bad attributes, `InputError` for bad inputs and
`InvalidTensorError` for unusable tensor values. The module also defines
`BroadcastError`, `ConversionError`, `DimensionError`, `ModelError`,
`InvalidShapeError` and the other error types for use by callers.

## What it does not do

There is no model runner: the package decodes a model and offers operators,
but does not walk a graph's nodes to compute its outputs, and it has no
command-line tool. Only the operators listed above are available; binary
arithmetic, casting, concatenation and convolution are not.