"""Interactive calculator state: settings, expressions, plots, matrices and symbols."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TextIO

from compilertoolkit.ast import Node, NodeKind, contains_kind, post_order
from compilertoolkit.graphics import SCREEN_WIDTH, Graphics, Limits
from compilertoolkit.matrix import (
    Matrix,
    MatrixBuilder,
    MatrixLimitError,
    determinant,
    format_matrix,
    solve_linear_system as _solve_system,
)

DEFAULT_FLOAT_PRECISION = 6
DEFAULT_INTEGRAL_STEPS = 1000
MAX_FLOAT_PRECISION = 8


class Error(Enum):
    """Errors reported by the calculator."""

    DIVIDED_BY_ZERO = "divided_by_zero"
    VARIABLE_X = "variable_x"
    UNDEFINED_SYMBOL = "undefined_symbol"
    NO_MATRIX = "no_matrix"
    MATRIX_LIMITS = "matrix_limits"
    MATRIX_FORMAT = "matrix_format"


class SymbolType(Enum):
    """Kind of value a symbol holds."""

    FLOAT = "FLOAT"
    MATRIX = "MATRIX"


@dataclass
class Symbol:
    """An entry of the symbol table."""

    type: SymbolType
    value: float = 0.0
    matrix: Optional[Matrix] = None


def _guarded(function: Callable[..., float], *args: float) -> float:
    try:
        return function(*args)
    except ValueError:
        return math.nan


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        odd = exponent.is_integer() and int(exponent) % 2 == 1
        return -math.inf if base < 0 and odd else math.inf


_FUNCTIONS: dict[str, Callable[[float], float]] = {
    "SEN": math.sin,
    "COS": math.cos,
    "TAN": math.tan,
    "ABS": abs,
}


class DCMat:
    """Calculator state; every report is written to ``out``."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.graphics = Graphics()
        self.float_precision = DEFAULT_FLOAT_PRECISION
        self.integral_steps = DEFAULT_INTEGRAL_STEPS
        self.reset_settings()
        self.matrix: Optional[Matrix] = None
        self.symbols: dict[str, Symbol] = {}
        self.functions: list[Node] = []
        self._builder = MatrixBuilder()
        self._axis_changed = True
        self._reset_flags()

    def _write(self, text: str) -> None:
        self.out.write(text)

    def _reset_flags(self) -> None:
        self._error = False
        self._undefined = False
        self._inf = False

    def _error_message(self, message: str) -> None:
        self._write(f"\nERROR: {message}\n\n")

    # Settings

    def set_h_view(self, low: float, high: float) -> None:
        """Set the horizontal plotting range."""
        if low >= high:
            self._error_message("h_view_lo must be smaller than h_view_hi")
            return
        view = self.graphics.h_view
        if view.low != low or view.high != high:
            self._axis_changed = True
            self.graphics.h_view = Limits(low, high)

    def set_v_view(self, low: float, high: float) -> None:
        """Set the vertical plotting range."""
        if low >= high:
            self._error_message("v_view_lo must be smaller than v_view_hi")
            return
        view = self.graphics.v_view
        if view.low != low or view.high != high:
            self._axis_changed = True
            self.graphics.v_view = Limits(low, high)

    def set_float_precision(self, precision: int) -> None:
        """Set the number of decimals shown, from 0 to 8."""
        if not 0 <= precision <= MAX_FLOAT_PRECISION:
            self._error_message("float precision must be from 0 to 8")
        else:
            self.float_precision = precision

    def set_integral_steps(self, steps: int) -> None:
        """Set the number of Riemann sum steps."""
        if steps <= 0:
            self._error_message("integral_steps must be a positive non-zero integer")
        else:
            self.integral_steps = steps

    def set_draw_axis(self, state: bool) -> None:
        """Turn drawing of the axes on or off."""
        self.graphics.draw_axis = state
        self._axis_changed = True

    def set_erase_plot(self, state: bool) -> None:
        """Choose whether earlier functions are erased when plotting."""
        self.graphics.erase_plot = state

    def set_connect_dots(self, state: bool) -> None:
        """Choose whether plotted points are connected."""
        self.graphics.connect_dots = state

    def show_error(self, error: Error) -> None:
        """Report an error and mark the current operation as failed."""
        if error is Error.DIVIDED_BY_ZERO:
            self._write("\ninf")
            self._inf = True
        elif error is Error.VARIABLE_X:
            self._write("\nThe x variable cannot be present on expressions.")
        elif error is Error.UNDEFINED_SYMBOL:
            self._write("\nUndefined symbol")
            self._undefined = True
        elif error is Error.NO_MATRIX:
            self._write("\nNo matrix defined!")
        elif error is Error.MATRIX_LIMITS:
            self._error_message("Matrix limits out of boundaries.")
        elif error is Error.MATRIX_FORMAT:
            self._write("\nMatrix format incorrect!")
        self._error = True

    def show_about(self) -> None:
        """Show the program banner."""
        self._write(
            "\n+----------------------------------------------+"
            "\n|                                              |"
            "\n|              DCMAT - V. 2024.01              |"
            "\n|                                              |"
            "\n+----------------------------------------------+"
        )

    def show_settings(self) -> None:
        """Show the current settings."""
        g = self.graphics
        on_off = {True: "ON", False: "OFF"}
        self._write(
            f"\nh_view_lo: {g.h_view.low:.6f}"
            f"\nh_view_hi: {g.h_view.high:.6f}"
            f"\nv_view_lo: {g.v_view.low:.6f}"
            f"\nv_view_hi: {g.v_view.high:.6f}"
            f"\nfloat_precision: {self.float_precision}"
            f"\nintegral_steps: {self.integral_steps}"
            f"\n\nDraw Axis: {on_off[bool(g.draw_axis)]}"
            f"\nErase Plot: {on_off[bool(g.erase_plot)]}"
            f"\nConnect Dots: {on_off[bool(g.connect_dots)]}"
        )

    def reset_settings(self) -> None:
        """Restore the default settings."""
        g = self.graphics
        g.h_view = Limits(-6.5, 6.5)
        g.v_view = Limits(-3.5, 3.5)
        g.draw_axis = True
        g.erase_plot = True
        g.connect_dots = False
        self.float_precision = DEFAULT_FLOAT_PRECISION
        self.integral_steps = DEFAULT_INTEGRAL_STEPS

    # Expressions

    def evaluate(
        self,
        root: Optional[Node],
        x_value: Optional[float] = None,
        bound_name: Optional[str] = None,
        bound_value: float = 0.0,
    ) -> float:
        """Compute the value of a tree.

        ``x_value`` is the value of x, or None when x is not allowed;
        ``bound_name`` names an identifier that takes ``bound_value``.
        Errors are reported and the offending part counts as zero.
        """
        if root is None:
            return 0.0

        def recurse(node: Optional[Node]) -> float:
            return self.evaluate(node, x_value, bound_name, bound_value)

        kind = root.kind
        if kind is NodeKind.FUNCTION:
            return _guarded(_FUNCTIONS[root.label], recurse(root.left))
        if kind is NodeKind.OPERATOR:
            right = recurse(root.right)
            symbol = root.label
            if symbol == "/":
                if right == 0:
                    if not self._inf and not self._undefined:
                        self.show_error(Error.DIVIDED_BY_ZERO)
                    return 0.0
                return recurse(root.left) / right
            if symbol == "%":
                if right == 0:
                    self.show_error(Error.DIVIDED_BY_ZERO)
                    return 0.0
                return _guarded(math.fmod, recurse(root.left), right)
            left = recurse(root.left)
            if symbol == "+":
                return left + right
            if symbol == "-":
                return left - right
            if symbol == "*":
                return left * right
            if symbol == "^":
                return _power(left, right)
            raise ValueError(f"unknown operator {symbol!r}")
        if kind is NodeKind.UNARY:
            value = recurse(root.left)
            return -value if root.label == "-" else value
        if kind is NodeKind.IDENTIFIER:
            if self._inf:
                return 0.0
            if bound_name is not None and root.label == bound_name:
                return float(bound_value)
            return self.get_symbol(root.label)
        if kind is NodeKind.X_VARIABLE:
            if x_value is not None:
                return float(x_value)
            self._error = True
            return 0.0
        return root.value

    def calculate_sum(
        self, root: Node, limits: Limits, x_variable: bool, name: str
    ) -> float:
        """Sum the expression over the integers between the limits.

        Without ``x_variable`` the result is stored in the symbol ``name``.
        """
        lower, upper = sorted((limits.low, limits.high))
        total = 0.0
        index = int(lower)
        while index <= upper:
            if x_variable:
                total += self.evaluate(root, x_value=index)
            else:
                total += self.evaluate(root, bound_name=name, bound_value=index)
            if self._undefined or self._inf:
                break
            index += 1

        if not x_variable:
            if not self._error and not self._undefined:
                self.assign_value(name, total)
            else:
                self._reset_flags()
        return total

    def calculate_integral(self, limits: Limits, root: Node) -> Optional[float]:
        """Integrate over x by a Riemann sum and show the result."""
        result: Optional[float] = None
        if limits.low > limits.high:
            self._write("\nERROR: lower limit must be smaller than upper limit")
        else:
            step = (limits.high - limits.low) / self.integral_steps
            total = 0.0
            x = limits.low + step
            while x < limits.high:
                total += self.evaluate(root, x_value=x)
                x += step
                if self._error:
                    break
            total *= step
            if not self._error:
                self._show_value(total)
                result = total
        self._reset_flags()
        return result

    def _show_value(self, value: float) -> None:
        if not self._error and not self._undefined:
            self._write(f"\n{value:.{self.float_precision}f}")
        self._reset_flags()

    def show_rpn_expression(self, root: Node) -> None:
        """Show the expression in reverse Polish notation."""
        self._write("\nExpression in RPN format:\n\n")
        self._write(post_order(root, self.float_precision))

    def show_expression(self, root: Node) -> None:
        """Compute and show the value of an expression without x."""
        if contains_kind(root, NodeKind.X_VARIABLE):
            self.show_error(Error.VARIABLE_X)
        else:
            self._show_value(self.evaluate(root))

    def _erase_functions(self) -> None:
        self.functions = self.functions[-1:]

    def _calculate_points(self, root: Node) -> None:
        g = self.graphics
        x = g.h_view.low
        for _ in range(SCREEN_WIDTH):
            y = self.evaluate(root, x_value=x)
            if self._undefined:
                break
            if g.h_view.low <= y <= g.h_view.high:
                g.plot_point(x, y)
            x += g.delta_x

    def _redraw_if_needed(self) -> bool:
        if not (self._axis_changed or self.graphics.erase_plot):
            return False
        self.graphics.clear()
        if self.graphics.erase_plot:
            self._erase_functions()
        return True

    def plot_function(self, root: Optional[Node] = None) -> None:
        """Plot a new function, or replot the stored ones when root is None."""
        recompute = False
        if root is None:
            if not self.functions:
                self._write("\nNo function defined!")
                return
            if self._redraw_if_needed():
                for function in self.functions:
                    self._calculate_points(function)
        else:
            self.functions.append(root)
            recompute = True

        if self._redraw_if_needed():
            recompute = True

        if recompute:
            for function in self.functions:
                self._calculate_points(function)

        if not self._undefined:
            self._write(self.graphics.render())
        self._reset_flags()
        self._axis_changed = False

    # Matrices

    def show_matrix(self, matrix: Optional[Matrix] = None) -> None:
        """Show the given matrix, or the current one."""
        if matrix is None:
            matrix = self.matrix
        if matrix is None:
            self.show_error(Error.NO_MATRIX)
        else:
            self._write(format_matrix(matrix, self.float_precision))

    def add_matrix_column(self, number: float) -> None:
        """Add a value to the row of the matrix being built."""
        if self._error:
            return
        try:
            self._builder.add_column(number)
        except MatrixLimitError:
            self.show_error(Error.MATRIX_LIMITS)

    def add_matrix_row(self) -> None:
        """Start a new row of the matrix being built."""
        if self._error:
            return
        try:
            self._builder.add_row()
        except MatrixLimitError:
            self.show_error(Error.MATRIX_LIMITS)

    def commit_matrix(self) -> None:
        """Make the matrix being built the current matrix."""
        if self._error:
            self._reset_flags()
            return
        self.matrix = self._builder.build()

    def solve_determinant(self) -> None:
        """Show the determinant of the current square matrix."""
        if self.matrix is None:
            self.show_error(Error.NO_MATRIX)
        elif not self.matrix.is_square():
            self.show_error(Error.MATRIX_FORMAT)
        else:
            self._show_value(determinant(self.matrix))
        self._reset_flags()

    def solve_linear_system(self) -> None:
        """Solve the current n x (n + 1) matrix as a linear system."""
        matrix = self.matrix
        if matrix is None:
            self.show_error(Error.NO_MATRIX)
        elif matrix.column_count != matrix.row_count + 1:
            self.show_error(Error.MATRIX_FORMAT)
        else:
            result = _solve_system(matrix)
            if result.determinant == 0:
                if result.has_solution:
                    self._write("\nSPI - The Linear System has infinitely many solutions")
                else:
                    self._write("\nSI - The Linear System has no solution")
            else:
                self._write("\nMatrix x:\n")
                for value in result.solution or ():
                    self._show_value(value)
        self._reset_flags()

    # Symbols

    def show_all_symbols(self) -> None:
        """List every symbol with its type."""
        for name, symbol in self.symbols.items():
            self._write(f"\n{name} - ")
            if symbol.type is SymbolType.FLOAT or symbol.matrix is None:
                self._write("FLOAT")
                continue
            rows, columns = symbol.matrix.row_count, symbol.matrix.column_count
            self._write(f"MATRIX [{rows}]")
            if rows != 1 or columns > 1:
                self._write(f"[{columns}]")
        if self.symbols:
            self._write("\n\n")

    def show_symbol(self, name: str) -> None:
        """Show the value of a symbol."""
        symbol = self.symbols.get(name)
        if symbol is None:
            self.show_error(Error.UNDEFINED_SYMBOL)
        elif symbol.type is SymbolType.MATRIX:
            self.show_matrix(symbol.matrix)
        else:
            self._write(f"\n{name} = {symbol.value:.{self.float_precision}f}")
        self._reset_flags()

    def get_symbol(self, name: str) -> float:
        """Return the value of a symbol, reporting it when undefined."""
        symbol = self.symbols.get(name)
        if symbol is not None:
            return symbol.value
        self._write(f"\nUndefined symbol [{name}]")
        self._error = True
        self._undefined = True
        return 0.0

    def assign_expression(self, name: str, root: Node) -> None:
        """Store the value of an expression without x under a name."""
        if contains_kind(root, NodeKind.X_VARIABLE):
            self.show_error(Error.VARIABLE_X)
        else:
            self.assign_value(name, self.evaluate(root))

    def assign_value(self, name: str, value: float) -> None:
        """Store a number under a name and show it."""
        if not self._error:
            self.symbols[name] = Symbol(SymbolType.FLOAT, float(value))
            self._show_value(value)
        self._reset_flags()

    def assign_matrix(self, name: str) -> None:
        """Store the matrix being built under a name and show it."""
        if not self._error:
            matrix = self._builder.build()
            self.symbols[name] = Symbol(SymbolType.MATRIX, 0.0, matrix)
            self.show_matrix(matrix)
            self._write("\n\n")
        self._reset_flags()