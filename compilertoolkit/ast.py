"""Expression trees used by the calculator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class NodeKind(Enum):
    """Kind of element held by a tree node."""

    FUNCTION = "function"
    OPERATOR = "operator"
    UNARY = "unary"
    IDENTIFIER = "identifier"
    X_VARIABLE = "x_variable"
    CONSTANT = "constant"


class Function(Enum):
    """Built-in functions; the value is the label shown in RPN output."""

    SINE = "SEN"
    COSINE = "COS"
    TANGENT = "TAN"
    ABSOLUTE = "ABS"


class Operator(Enum):
    """Binary and unary operators."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    POWER = "power"
    POSITIVE = "positive"
    NEGATIVE = "negative"


_BINARY_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "*",
    Operator.DIVIDE: "/",
    Operator.MODULO: "%",
    Operator.POWER: "^",
}

_UNARY_SYMBOLS = {
    Operator.POSITIVE: "+",
    Operator.NEGATIVE: "-",
}


@dataclass
class Node:
    """A node of an expression tree."""

    kind: NodeKind = NodeKind.CONSTANT
    label: str = ""
    value: float = 0.0
    left: Optional[Node] = None
    right: Optional[Node] = None

    def children(self) -> Iterator[Node]:
        """Yield the present children, left first."""
        if self.left is not None:
            yield self.left
        if self.right is not None:
            yield self.right


def function_node(function: Function, child: Optional[Node]) -> Node:
    """Create a function application node."""
    return Node(kind=NodeKind.FUNCTION, label=function.value, left=child)


def operator_node(operator: Operator, left: Optional[Node], right: Optional[Node]) -> Node:
    """Create a binary operator node."""
    try:
        symbol = _BINARY_SYMBOLS[operator]
    except KeyError:
        raise ValueError(f"{operator.name} is not a binary operator") from None
    return Node(kind=NodeKind.OPERATOR, label=symbol, left=left, right=right)


def unary_node(operator: Operator, child: Optional[Node]) -> Node:
    """Create a unary sign node."""
    try:
        symbol = _UNARY_SYMBOLS[operator]
    except KeyError:
        raise ValueError(f"{operator.name} is not a unary operator") from None
    return Node(kind=NodeKind.UNARY, label=symbol, left=child)


def identifier_node(name: str) -> Node:
    """Create a node referring to a named symbol."""
    return Node(kind=NodeKind.IDENTIFIER, label=name)


def x_node(name: str) -> Node:
    """Create a node for the plotting variable x."""
    return Node(kind=NodeKind.X_VARIABLE, label=name)


def constant_node(value: float) -> Node:
    """Create a numeric constant node."""
    return Node(kind=NodeKind.CONSTANT, value=float(value))


def _post_order_tokens(node: Node, precision: int) -> Iterator[str]:
    for child in node.children():
        yield from _post_order_tokens(child, precision)
    if node.kind is NodeKind.CONSTANT:
        yield f"{node.value:.{precision}f}"
    else:
        yield node.label


def post_order(node: Optional[Node], precision: int) -> str:
    """Return the tree in RPN form, each token followed by a space."""
    if node is None:
        return ""
    return "".join(f"{token} " for token in _post_order_tokens(node, precision))


def contains_kind(node: Optional[Node], kind: NodeKind) -> bool:
    """Tell whether any node of the tree has the given kind."""
    if node is None:
        return False
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind is kind:
            return True
        if current.right is not None:
            stack.append(current.right)
        if current.left is not None:
            stack.append(current.left)
    return False