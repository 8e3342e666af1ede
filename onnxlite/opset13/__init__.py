"""Opset 13 operators: element-wise unary functions, Constant and ConstantOfShape."""