"""Matrix components (Maths > Matrix)."""

import math
from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import CoercionError, ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import Boolean, List, Matrix, Null, Number, Value

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, arg, require_inputs
from .sets import MAX_SEQUENCE_LENGTH

table = ComponentTable(ComponentCategory.MATHS)

DEFAULT_TOLERANCE = 1e-10


def _dimension(value: Value, context: str) -> int:
    number = co.coerce_number(value, context)
    if not math.isfinite(number) or math.trunc(number) <= 0:
        msg = f"{context} needs a positive integer dimension, got {co.format_number(number)}"
        raise ComponentMessageError(msg)
    return math.trunc(number)


def create_matrix(rows: int, columns: int, values: Sequence[float]) -> Matrix:
    """Fill a ``rows`` x ``columns`` matrix row-major from ``values``.

    Missing entries are zero; extra values are ignored. Without any values
    the result is the identity (on the leading diagonal).
    """
    total = rows * columns
    flat = [0.0] * total
    count = min(len(values), total)
    flat[:count] = values[:count]
    if count == 0:
        for i in range(min(rows, columns)):
            flat[i * columns + i] = 1.0
    return Matrix(rows, columns, tuple(flat))


def transpose_matrix(matrix: Matrix) -> Matrix:
    values = [0.0] * (matrix.rows * matrix.columns)
    for r in range(matrix.rows):
        for c in range(matrix.columns):
            values[c * matrix.rows + r] = matrix.at(r, c)
    return Matrix(matrix.columns, matrix.rows, tuple(values))


def invert_matrix(matrix: Matrix, tolerance: float = DEFAULT_TOLERANCE) -> Matrix | None:
    """Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    Args:
        matrix: The matrix to invert.
        tolerance: Pivots at or below this magnitude count as zero; result
            entries at or below it are flushed to zero.

    Returns:
        The inverse, or None if the matrix is not square or is singular
        within ``tolerance``.

    """
    if matrix.rows != matrix.columns:
        return None
    size = matrix.rows
    augmented = [
        [*matrix.row(r), *(1.0 if r == c else 0.0 for c in range(size))]
        for r in range(size)
    ]

    for col in range(size):
        pivot_row = max(range(col, size), key=lambda r: abs(augmented[r][col]))
        if abs(augmented[pivot_row][col]) <= tolerance:
            return None
        augmented[col], augmented[pivot_row] = augmented[pivot_row], augmented[col]
        pivot = augmented[col][col]
        augmented[col] = [v / pivot for v in augmented[col]]
        for r in range(size):
            if r == col:
                continue
            factor = augmented[r][col]
            if abs(factor) > tolerance:
                augmented[r] = [v - factor * p for v, p in zip(augmented[r], augmented[col], strict=True)]
            augmented[r][col] = 0.0

    values = [
        0.0 if abs(augmented[r][size + c]) <= tolerance else augmented[r][size + c]
        for r in range(size)
        for c in range(size)
    ]
    return Matrix(size, size, tuple(values))


def _tolerance(value: Value) -> float:
    """Positive tolerance from an optional input; the default otherwise."""
    if isinstance(value, Null):
        return DEFAULT_TOLERANCE
    try:
        tolerance = abs(co.coerce_number(value, "Invert Matrix"))
    except CoercionError:
        return DEFAULT_TOLERANCE
    return tolerance if tolerance > 0 else DEFAULT_TOLERANCE


@table.component(
    "Construct Matrix",
    guids=["54ac80cf-74f3-43f7-834c-0e3fe94632c6"],
    names=["Matrix"],
    inputs=["R", "C", "V"],
    outputs=["M"],
    optional=["V"],
)
def construct_matrix(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 2, "Construct Matrix")
    rows = _dimension(inputs[0], "Construct Matrix")
    columns = _dimension(inputs[1], "Construct Matrix")
    if rows * columns > MAX_SEQUENCE_LENGTH:
        msg = f"Construct Matrix size {rows}x{columns} exceeds {MAX_SEQUENCE_LENGTH} entries"
        raise ComponentMessageError(msg)
    values = co.collect_numbers(arg(inputs, 2), "Construct Matrix")
    return {"M": create_matrix(rows, columns, values)}


@table.component(
    "Deconstruct Matrix",
    guids=["3aa2a080-e322-4be3-8c6e-baf6c8000cf1"],
    names=["DeMatrix"],
    inputs=["M"],
    outputs=["R", "C", "V"],
)
def deconstruct_matrix(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Deconstruct Matrix")
    matrix = co.coerce_matrix(inputs[0], "Deconstruct Matrix")
    return {
        "R": Number(float(matrix.rows)),
        "C": Number(float(matrix.columns)),
        "V": List(tuple(Number(v) for v in matrix.values)),
    }


@table.component(
    "Transpose Matrix",
    guids=["0e90b1f3-b870-4e09-8711-4bf819675d90"],
    names=["Transpose"],
    inputs=["M"],
    outputs=["M"],
)
def transpose(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Transpose Matrix")
    return {"M": transpose_matrix(co.coerce_matrix(inputs[0], "Transpose Matrix"))}


@table.component(
    "Invert Matrix",
    guids=["f986e79a-1215-4822-a1e7-3311dbdeb851"],
    names=["MInvert"],
    inputs=["M", "T"],
    outputs=["M", "S"],
    optional=["T"],
)
def invert(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    require_inputs(inputs, 1, "Invert Matrix")
    matrix = co.coerce_matrix(inputs[0], "Invert Matrix")
    inverted = invert_matrix(matrix, _tolerance(arg(inputs, 1)))
    if inverted is None:
        return {"S": Boolean(False)}
    return {"M": inverted, "S": Boolean(True)}


REGISTRATIONS = tuple(table.kinds)
