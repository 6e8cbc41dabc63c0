# compilertoolkit

This package collects a few small tools from a compilers course. You use them as a library.

- **`compilertoolkit.ast`** holds expression trees. `Node` is a dataclass with `kind`, `label`, `value`, `left` and `right`. `NodeKind`, `Function` and `Operator` are enums. The builders are:
  - `function_node`
  - `operator_node`
  - `unary_node`
  - `identifier_node`
  - `x_node`
  - `constant_node`

  `operator_node` and `unary_node` raise `ValueError` for an operator of the wrong arity. `post_order(node, precision)` returns the tree in RPN form, with each token followed by a space. `contains_kind(node, kind)` tells whether any node of the tree has that kind.
- **`compilertoolkit.graphics`** holds a fixed 25 x 80 character canvas. `Limits` is a low/high interval. `Graphics` keeps the horizontal and vertical views and the options `draw_axis`, `erase_plot` and `connect_dots`. It has three methods:
  - `clear()` blanks the screen and draws the axes if they are enabled.
  - `plot_point(x, y)` marks a cell with `*` and returns whether the point fell on the screen.
  - `render()` returns the screen as text.
- **`compilertoolkit.matrix`** holds matrix tools:
  - `Matrix`, with `row_count`, `column_count` and `is_square()`.
  - `MatrixBuilder`, which fills a matrix value by value and row by row. It pads short rows with zeros. It raises `MatrixLimitError` when a dimension would pass 10.
  - `lu_decomposition`, which works without pivoting.
  - `determinant`.
  - `solve_linear_system`, which takes an augmented n x (n + 1) matrix and returns a `LinearSystemResult`. The result has `determinant`, `solution`, `has_solution` and `infinitely_many`.
  - `count_digits` and `format_matrix`.
- **`compilertoolkit.dcmat`** holds `DCMat`, the calculator state. It writes every report to a text stream, which defaults to `sys.stdout`. It can:
  - evaluate expression trees
  - compute sums over integer ranges and Riemann integrals
  - plot functions on the character canvas
  - keep a symbol table of numbers and matrices
  - build, show and solve matrices (determinant and linear systems)
  - keep its settings: views, float precision, integral steps, and the axis, erase and connect-dots switches

  Errors are reported as text on the stream, listed in `Error`. They are not raised.
- **`compilertoolkit.linearscan`** holds `LinearScan`, which does linear-scan register allocation over live intervals:
  - `allocate(k)` returns each virtual register mapped to its physical register, or to `None` when it was spilled.
  - `allocate_all()` runs every k from the register count down to 2 and returns the report.
  - `summary()` lists, for each k, the iterations where a spill happened.
  - `NotConfiguredError` is raised if the register count was never set.
- **`compilertoolkit.regalloc`** holds `RegisterAllocator`, which colours an interference graph. Vertices whose key is below the colour count are physical registers.
  - `color(k)` returns the push/pop transcript.
  - `evaluate_colorings()` runs every k down to 2.
  - `summary()` reports success or spill per k.
  - `describe_settings()` and `describe_graph()` give text views.
  - `color` raises `NotConfiguredError` if the graph id or the colour count is missing.

The package needs Python 3.10 or later and has no other dependencies.

## Installation

```
pip install .
```

## Examples

Evaluating an expression:

```python
from compilertoolkit.ast import Operator, constant_node, operator_node, post_order
from compilertoolkit.dcmat import DCMat

tree = operator_node(Operator.ADD, constant_node(2), constant_node(3))
print(post_order(tree, 2))          # "2.00 3.00 + "

calc = DCMat()
calc.show_expression(tree)          # writes "\n5.000000" to stdout
```

Linear-scan allocation:

```python
from compilertoolkit.linearscan import LinearScan

scan = LinearScan()
scan.set_register_count(3)
scan.add_virtual_register(1, 0, 5)
scan.add_virtual_register(2, 1, 3)
scan.add_virtual_register(3, 2, 8)
print(scan.allocate_all())
print(scan.summary())
```

Graph colouring:

```python
from compilertoolkit.regalloc import RegisterAllocator

alloc = RegisterAllocator()
alloc.set_graph_id(1)
alloc.set_colors(3)
alloc.add_edge(4)
alloc.add_edge(5)
alloc.add_vertex(6)
print(alloc.describe_settings())
print(alloc.evaluate_colorings())
print(alloc.summary())
```

Matrices:

```python
from compilertoolkit.matrix import MatrixBuilder, determinant

builder = MatrixBuilder()
for value in (2, 1):
    builder.add_column(value)
builder.add_row()
for value in (1, 3):
    builder.add_column(value)
print(determinant(builder.build()))   # 5.0
```

## What it does not do

- There is no command-line program and no input language. The calculator, the linear-scan allocator and the graph colourer do not read commands, expressions, intervals or graphs from text. You build trees and call the methods yourself.
- The `connect_dots` setting is stored and shown by `DCMat.show_settings()`, but plotting always draws separate points.

## Running the tests

```
pip install .[test]
pytest
```