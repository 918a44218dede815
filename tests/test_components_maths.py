"""Tests for the Maths components: operators, matrices, domains and utilities."""

import datetime as dt
import math

import pytest

from ghx_documents import RunComponent
from ghx_engine._errors import CoercionError, ComponentMessageError
from ghx_engine._value import (
    NULL,
    Boolean,
    Complex,
    DateTime,
    Domain1D,
    Domain2D,
    List,
    Matrix,
    Number,
    Point,
    Text,
    Vector,
)


def _numbers(*values: float) -> List:
    return List(tuple(Number(v) for v in values))


def _multiply(a: Matrix, b: Matrix) -> list[float]:
    return [
        sum(a.values[i * a.columns + k] * b.values[k * b.columns + j] for k in range(a.columns))
        for i in range(a.rows)
        for j in range(b.columns)
    ]


def _identity(size: int) -> list[float]:
    return [1.0 if i == j else 0.0 for i in range(size) for j in range(size)]


class TestOperators:
    """Tests for arithmetic operators and longest-list matching."""

    def test_addition(self, run_component: RunComponent) -> None:
        assert run_component("Addition", Number(1.0), Number(2.0)) == {"R": Number(3.0)}

    def test_addition_of_points(self, run_component: RunComponent) -> None:
        result = run_component("Addition", Point(1.0, 0.0, 0.0), Vector(0.0, 2.0, 0.0))

        assert result == {"R": Point(1.0, 2.0, 0.0)}

    def test_longest_list_matching(self, run_component: RunComponent) -> None:
        """The shorter input repeats its last item."""
        result = run_component("Multiplication", _numbers(1.0, 2.0, 3.0), _numbers(10.0, 100.0))

        assert result == {"R": _numbers(10.0, 200.0, 300.0)}

    def test_empty_list_gives_empty_list(self, run_component: RunComponent) -> None:
        assert run_component("Subtraction", List(()), Number(1.0)) == {"R": List(())}

    def test_division_by_zero(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="Division by zero"):
            run_component("Division", Number(1.0), Number(0.0))

    @pytest.mark.parametrize(("a", "b", "expected"), [(7.0, 3.0, 1.0), (-7.0, 3.0, 2.0), (7.0, -3.0, -2.0)])
    def test_modulus_takes_sign_of_divisor(
        self,
        run_component: RunComponent,
        a: float,
        b: float,
        expected: float,
    ) -> None:
        result = run_component("Modulus", Number(a), Number(b))

        assert result == {"R": Number(expected)}

    @pytest.mark.parametrize(("a", "b"), [(5.0, math.inf), (math.inf, 2.0), (-math.inf, -math.inf)])
    def test_modulus_of_non_finite_operands(self, run_component: RunComponent, a: float, b: float) -> None:
        with pytest.raises(ComponentMessageError, match="Modulus of .* is undefined"):
            run_component("Modulus", Number(a), Number(b))

    def test_power_undefined(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="undefined"):
            run_component("Power", Number(-8.0), Number(0.5))

    def test_factorial(self, run_component: RunComponent) -> None:
        assert run_component("Factorial", Number(5.0)) == {"F": Number(120.0)}
        with pytest.raises(ComponentMessageError, match="non-negative integer"):
            run_component("Factorial", Number(2.5))
        with pytest.raises(ComponentMessageError, match="overflows"):
            run_component("Factorial", Number(171.0))

    def test_missing_inputs(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="expects 2 inputs, got 1"):
            run_component("Addition", Number(1.0))

    def test_text_that_is_not_a_number(self, run_component: RunComponent) -> None:
        with pytest.raises(CoercionError, match="Negative"):
            run_component("Negative", Text("abc"))


class TestMassOperators:
    """Tests for Mass Addition and Mass Multiplication."""

    def test_mass_addition(self, run_component: RunComponent) -> None:
        result = run_component("Mass Addition", _numbers(1.0, 2.0, 3.0))

        assert result == {"R": Number(6.0), "Pr": _numbers(1.0, 3.0, 6.0)}

    def test_mass_addition_flattens_and_skips_null(self, run_component: RunComponent) -> None:
        result = run_component("Mass Addition", List((Number(1.0), List((Number(2.0), NULL)))))

        assert result["R"] == Number(3.0)

    def test_empty_inputs(self, run_component: RunComponent) -> None:
        assert run_component("Mass Addition", List(())) == {"R": Number(0.0), "Pr": List(())}
        assert run_component("Mass Multiplication", List(())) == {"R": Number(1.0), "Pr": List(())}

    def test_mass_multiplication_scales_vectors(self, run_component: RunComponent) -> None:
        result = run_component("Mass Multiplication", List((Number(2.0), Vector(1.0, 2.0, 3.0))))

        assert result["R"] == Vector(2.0, 4.0, 6.0)


class TestComparisons:
    """Tests for comparison and boolean gates."""

    def test_larger_than(self, run_component: RunComponent) -> None:
        result = run_component("Larger Than", Number(2.0), Number(2.0))

        assert result == {">": Boolean(False), ">=": Boolean(True)}

    def test_smaller_than(self, run_component: RunComponent) -> None:
        result = run_component("Smaller Than", _numbers(1.0, 3.0), Number(2.0))

        assert result["<"] == List((Boolean(True), Boolean(False)))

    def test_equality_with_tolerance(self, run_component: RunComponent) -> None:
        result = run_component("Equality", Number(1.0), Number(1.0 + 1e-12))

        assert result == {"=": Boolean(True), "≠": Boolean(False)}

    def test_equality_of_text(self, run_component: RunComponent) -> None:
        assert run_component("Equality", Text("a"), Text("b"))["="] == Boolean(False)

    def test_gates(self, run_component: RunComponent) -> None:
        assert run_component("Gate And", Boolean(True), Number(0.0)) == {"R": Boolean(False)}
        assert run_component("Gate Or", Boolean(False), Text("true")) == {"R": Boolean(True)}
        assert run_component("Gate Not", Boolean(False)) == {"R": Boolean(True)}


class TestMatrix:
    """Tests for matrix components."""

    def test_construct_pads_with_zeros(self, run_component: RunComponent) -> None:
        result = run_component("Construct Matrix", Number(2.0), Number(2.0), _numbers(1.0, 2.0, 3.0))

        assert result == {"M": Matrix(2, 2, (1.0, 2.0, 3.0, 0.0))}

    def test_construct_without_values_is_identity(self, run_component: RunComponent) -> None:
        result = run_component("Construct Matrix", Number(2.0), Number(3.0), NULL)

        assert result == {"M": Matrix(2, 3, (1.0, 0.0, 0.0, 0.0, 1.0, 0.0))}

    def test_construct_rejects_non_positive_dimension(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="positive integer"):
            run_component("Construct Matrix", Number(0.0), Number(2.0), NULL)

    def test_construct_rejects_oversized_matrix(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="exceeds"):
            run_component("Construct Matrix", Number(1e6), Number(1e6), NULL)
        with pytest.raises(ComponentMessageError, match="exceeds"):
            run_component("Construct Matrix", Number(1001.0), Number(1000.0), NULL)

    def test_transpose(self, run_component: RunComponent) -> None:
        result = run_component("Transpose Matrix", Matrix(2, 3, (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)))

        assert result == {"M": Matrix(3, 2, (1.0, 4.0, 2.0, 5.0, 3.0, 6.0))}

    def test_invert(self, run_component: RunComponent) -> None:
        result = run_component("Invert Matrix", Matrix(2, 2, (2.0, 0.0, 0.0, 4.0)), NULL)

        assert result == {"M": Matrix(2, 2, (0.5, 0.0, 0.0, 0.25)), "S": Boolean(True)}

    def test_transpose_twice_is_identity(self, run_component: RunComponent) -> None:
        matrix = Matrix(2, 3, (1.0, 2.0, 3.0, 4.0, 5.0, 6.0))

        once = run_component("Transpose Matrix", matrix)["M"]

        assert run_component("Transpose Matrix", once) == {"M": matrix}

    @pytest.mark.parametrize(
        "matrix",
        [
            Matrix(2, 2, (0.0, 1.0, 2.0, 3.0)),
            Matrix(3, 3, (0.0, 2.0, 1.0, 1.0, 1.0, 0.0, 3.0, 0.0, 4.0)),
        ],
    )
    def test_invert_with_row_swaps(self, run_component: RunComponent, matrix: Matrix) -> None:
        result = run_component("Invert Matrix", matrix, NULL)
        inverse = result["M"]

        assert result["S"] == Boolean(True)
        assert isinstance(inverse, Matrix)
        assert _multiply(inverse, matrix) == pytest.approx(_identity(matrix.rows))

    def test_invert_singular_reports_failure_only(self, run_component: RunComponent) -> None:
        result = run_component("Invert Matrix", Matrix(2, 2, (1.0, 2.0, 2.0, 4.0)), NULL)

        assert result == {"S": Boolean(False)}

    def test_deconstruct(self, run_component: RunComponent) -> None:
        result = run_component("Deconstruct Matrix", Matrix(1, 2, (5.0, 6.0)))

        assert result == {"R": Number(1.0), "C": Number(2.0), "V": _numbers(5.0, 6.0)}


class TestDomain:
    """Tests for domain components."""

    def test_construct_and_deconstruct(self, run_component: RunComponent) -> None:
        built = run_component("Construct Domain", Number(5.0), Number(1.0))["I"]

        assert built == Domain1D(5.0, 1.0)
        assert run_component("Deconstruct Domain", built) == {"S": Number(5.0), "E": Number(1.0)}

    def test_construct_rejects_infinite_bounds(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="finite"):
            run_component("Construct Domain", Number(0.0), Number(math.inf))

    def test_construct_domain2(self, run_component: RunComponent) -> None:
        result = run_component("Construct Domain²", Domain1D(0.0, 1.0), Number(2.0))

        assert result == {"I²": Domain2D(Domain1D(0.0, 1.0), Domain1D(2.0, 2.0))}

    def test_remap(self, run_component: RunComponent) -> None:
        result = run_component("Remap Numbers", _numbers(5.0, 20.0), Domain1D(0.0, 10.0), Domain1D(0.0, 1.0))

        assert result == {"R": _numbers(0.5, 2.0), "C": _numbers(0.5, 1.0)}

    def test_bounds(self, run_component: RunComponent) -> None:
        assert run_component("Bounds", _numbers(3.0, -1.0, 7.0)) == {"I": Domain1D(-1.0, 7.0)}
        with pytest.raises(ComponentMessageError, match="finite number"):
            run_component("Bounds", List(()))


class TestUtil:
    """Tests for utility, trigonometry, complex and time components."""

    def test_pi(self, run_component: RunComponent) -> None:
        assert run_component("Pi", NULL) == {"y": Number(math.pi)}
        assert run_component("Pi", Number(2.0)) == {"y": Number(2 * math.pi)}

    def test_average(self, run_component: RunComponent) -> None:
        assert run_component("Average", _numbers(1.0, 2.0, 6.0)) == {"AM": Number(3.0)}
        assert run_component("Average", List(())) == {"AM": NULL}

    @pytest.mark.parametrize("values", [(1e308, 1e308), (math.inf, -math.inf)])
    def test_average_that_cannot_be_summed(self, run_component: RunComponent, values: tuple[float, float]) -> None:
        with pytest.raises(ComponentMessageError, match="Average is undefined"):
            run_component("Average", _numbers(*values))

    @pytest.mark.parametrize(("x", "nearest", "floor", "ceiling"), [(2.5, 3.0, 2.0, 3.0), (-2.5, -3.0, -3.0, -2.0)])
    def test_round(
        self,
        run_component: RunComponent,
        x: float,
        nearest: float,
        floor: float,
        ceiling: float,
    ) -> None:
        result = run_component("Round", Number(x))

        assert result == {"N": Number(nearest), "F": Number(floor), "C": Number(ceiling)}

    def test_trigonometry(self, run_component: RunComponent) -> None:
        assert run_component("Degrees", Number(math.pi)) == {"D": Number(180.0)}
        assert run_component("Cosine", Number(0.0)) == {"y": Number(1.0)}
        with pytest.raises(ComponentMessageError, match="infinite angle"):
            run_component("Sine", Number(math.inf))

    def test_complex(self, run_component: RunComponent) -> None:
        created = run_component("Create Complex", Number(3.0), NULL)["C"]

        assert created == Complex(3.0, 0.0)
        assert run_component("Complex Modulus", Complex(3.0, 4.0)) == {"R": Number(5.0)}

    def test_construct_date_keeps_nanoseconds(self, run_component: RunComponent) -> None:
        result = run_component(
            "Construct Date",
            Number(2024.0),
            Number(2.0),
            Number(29.0),
            Number(13.0),
            Number(5.0),
            Number(7.000001500),
        )

        assert result == {"D": DateTime(dt.datetime(2024, 2, 29, 13, 5, 7, 1), 500)}  # noqa: DTZ001

    def test_construct_date_rejects_invalid_day(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="invalid date"):
            run_component("Construct Date", Number(2023.0), Number(2.0), Number(29.0), NULL, NULL, NULL)

    def test_construct_date_requires_year(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="requires year"):
            run_component("Construct Date", NULL, Number(1.0), Number(1.0))
