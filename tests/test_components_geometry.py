"""Tests for the Vector, Curve, Mesh and Display components."""

import pytest

from ghx_documents import RunComponent
from ghx_engine._errors import CoercionError, ComponentMessageError
from ghx_engine._value import (
    NULL,
    Boolean,
    Color,
    CurveLine,
    List,
    Material,
    Mesh,
    Number,
    Plane,
    Point,
    Text,
    Vector,
)


def _points(*coords: tuple[float, float, float]) -> List:
    return List(tuple(Point(*c) for c in coords))


class TestPointComponents:
    """Tests for point construction and measurement."""

    def test_construct_point_defaults_to_origin(self, run_component: RunComponent) -> None:
        assert run_component("Construct Point") == {"Pt": Point(0.0, 0.0, 0.0)}

    def test_construct_point_broadcasts(self, run_component: RunComponent) -> None:
        result = run_component("Construct Point", List((Number(1.0), Number(2.0))), Number(5.0), NULL)

        assert result == {"Pt": _points((1.0, 5.0, 0.0), (2.0, 5.0, 0.0))}

    def test_deconstruct_point(self, run_component: RunComponent) -> None:
        result = run_component("Deconstruct Point", Point(1.0, 2.0, 3.0))

        assert result == {"X": Number(1.0), "Y": Number(2.0), "Z": Number(3.0)}

    def test_deconstruct_coordinate_triple(self, run_component: RunComponent) -> None:
        """Three bare numbers are one point, not three."""
        result = run_component("Deconstruct Point", List((Number(1.0), Number(2.0), Number(3.0))))

        assert result["X"] == Number(1.0)

    def test_deconstruct_list_of_points(self, run_component: RunComponent) -> None:
        result = run_component("Deconstruct Point", _points((1.0, 2.0, 3.0), (4.0, 5.0, 6.0)))

        assert result["Y"] == List((Number(2.0), Number(5.0)))

    def test_distance(self, run_component: RunComponent) -> None:
        result = run_component("Distance", Point(0.0, 0.0, 0.0), Point(3.0, 4.0, 0.0))

        assert result == {"D": Number(5.0)}

    def test_numbers_to_points(self, run_component: RunComponent) -> None:
        numbers = List(tuple(Number(float(n)) for n in range(7)))

        assert run_component("Numbers to Points", numbers, NULL) == {
            "P": _points((0.0, 1.0, 2.0), (3.0, 4.0, 5.0)),
        }

    def test_numbers_to_points_with_mask(self, run_component: RunComponent) -> None:
        numbers = List((Number(1.0), Number(2.0)))

        assert run_component("Numbers to Points", numbers, Text("zx")) == {"P": _points((2.0, 0.0, 1.0))}


class TestVectorComponents:
    """Tests for vector construction and products."""

    def test_vector_xyz(self, run_component: RunComponent) -> None:
        result = run_component("Vector XYZ", Number(3.0), Number(4.0), NULL)

        assert result == {"V": Vector(3.0, 4.0, 0.0), "L": Number(5.0)}

    def test_unit_axes(self, run_component: RunComponent) -> None:
        assert run_component("Unit Z", NULL) == {"V": Vector(0.0, 0.0, 1.0)}
        assert run_component("Unit X", Number(2.0)) == {"V": Vector(2.0, 0.0, 0.0)}

    def test_vector_2pt(self, run_component: RunComponent) -> None:
        result = run_component("Vector 2Pt", Point(1.0, 1.0, 1.0), Point(1.0, 1.0, 3.0), Boolean(True))

        assert result == {"V": Vector(0.0, 0.0, 1.0), "L": Number(2.0)}

    def test_amplitude_of_zero_vector(self, run_component: RunComponent) -> None:
        assert run_component("Amplitude", Vector(0.0, 0.0, 0.0), Number(5.0)) == {"V": Vector(0.0, 0.0, 0.0)}

    def test_cross_product(self, run_component: RunComponent) -> None:
        result = run_component("Cross Product", Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0), NULL)

        assert result == {"V": Vector(0.0, 0.0, 1.0), "L": Number(1.0)}

    def test_dot_product(self, run_component: RunComponent) -> None:
        assert run_component("Dot Product", Vector(1.0, 2.0, 3.0), Vector(4.0, 5.0, 6.0), NULL) == {"D": Number(32.0)}
        assert run_component("Dot Product", Vector(0.0, 0.0, 0.0), Vector(1.0, 0.0, 0.0), Boolean(True)) == {
            "D": Number(0.0),
        }

    def test_vector_rejects_text(self, run_component: RunComponent) -> None:
        with pytest.raises(CoercionError, match="expected vector"):
            run_component("Unit Vector", Text("up"))


class TestPlaneComponents:
    """Tests for plane construction."""

    def test_xy_plane(self, run_component: RunComponent) -> None:
        result = run_component("XY Plane", Point(1.0, 2.0, 3.0))

        assert result == {"P": Plane((1.0, 2.0, 3.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))}

    def test_construct_plane_orthogonalizes_y(self, run_component: RunComponent) -> None:
        result = run_component("Construct Plane", NULL, Vector(2.0, 0.0, 0.0), Vector(1.0, 1.0, 0.0))

        plane = result["Pl"]
        assert isinstance(plane, Plane)
        assert plane.y_axis == pytest.approx((0.0, 1.0, 0.0))
        assert plane.z_axis == pytest.approx((0.0, 0.0, 1.0))

    def test_plane_3pt_collinear(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="not collinear"):
            run_component("Plane 3Pt", Point(0.0, 0.0, 0.0), Point(1.0, 0.0, 0.0), Point(2.0, 0.0, 0.0))

    def test_deconstruct_plane(self, run_component: RunComponent) -> None:
        result = run_component("Deconstruct Plane", List((Point(0.0, 0.0, 5.0), Vector(0.0, 0.0, 2.0))))

        assert result["O"] == Point(0.0, 0.0, 5.0)
        assert result["Z"] == Vector(0.0, 0.0, 1.0)

    def test_plane_origin(self, run_component: RunComponent) -> None:
        source = Plane((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0), (0.0, 0.0, 1.0))

        result = run_component("Plane Origin", source, Point(4.0, 4.0, 4.0))

        assert result == {"Pl": Plane((4.0, 4.0, 4.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0), (0.0, 0.0, 1.0))}


class TestCurveComponents:
    """Tests for lines and polylines."""

    def test_line_broadcasts_a_number(self, run_component: RunComponent) -> None:
        result = run_component("Line", Point(0.0, 0.0, 0.0), Number(2.0))

        assert result == {"L": CurveLine((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))}

    def test_line_longest_list(self, run_component: RunComponent) -> None:
        result = run_component("Line", Point(0.0, 0.0, 0.0), _points((1.0, 0.0, 0.0), (0.0, 0.0, 0.0)))

        assert result == {"L": List((CurveLine((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)), NULL))}

    def test_line_needs_an_end(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="end point"):
            run_component("Line", Point(0.0, 0.0, 0.0), NULL)

    def test_line_sdl(self, run_component: RunComponent) -> None:
        result = run_component("Line SDL", Point(1.0, 0.0, 0.0), Vector(0.0, 3.0, 0.0), Number(2.0))

        assert result == {"L": CurveLine((1.0, 0.0, 0.0), (1.0, 2.0, 0.0))}

    def test_polyline_closed(self, run_component: RunComponent) -> None:
        vertices = _points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0))

        result = run_component("Polyline", vertices, Boolean(True))

        assert result == {"Pl": _points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 0.0, 0.0))}


class TestMeshComponents:
    """Tests for mesh construction."""

    def test_quad_is_fan_triangulated(self, run_component: RunComponent) -> None:
        vertices = _points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0))
        face = run_component("Mesh Quad", Number(0.0), Number(1.0), Number(2.0), Number(3.0))["F"]

        mesh = run_component("Construct Mesh", vertices, face, NULL)["M"]

        assert isinstance(mesh, Mesh)
        assert mesh.triangles == [(0, 1, 2), (0, 2, 3)]
        assert mesh.diagnostics is not None
        assert mesh.diagnostics.triangle_count == 2
        assert mesh.diagnostics.warnings == ()

    def test_colours_are_reported_not_stored(self, run_component: RunComponent) -> None:
        vertices = _points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        faces = List((List((Number(0.0), Number(1.0), Number(2.0))),))

        mesh = run_component("Construct Mesh", vertices, faces, Color(1.0, 0.0, 0.0))["M"]

        assert isinstance(mesh, Mesh)
        assert mesh.diagnostics is not None
        assert mesh.diagnostics.warnings == ("vertex colours are not stored",)

    def test_face_out_of_range(self, run_component: RunComponent) -> None:
        vertices = _points((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        with pytest.raises(ComponentMessageError, match="outside"):
            run_component("Construct Mesh", vertices, List((Number(0.0), Number(1.0), Number(5.0))), NULL)

    def test_triangle_rejects_negative_index(self, run_component: RunComponent) -> None:
        with pytest.raises(ComponentMessageError, match="non-negative integer index"):
            run_component("Mesh Triangle", Number(0.0), Number(-1.0), Number(2.0))


class TestDisplayComponents:
    """Tests for Create Material."""

    def test_create_material(self, run_component: RunComponent) -> None:
        red = Color(1.0, 0.0, 0.0)

        result = run_component("Create Material", red, red, Text("0,0,0"), Number(0.5), Number(30.0))

        assert result == {"M": Material(red, red, Color(0.0, 0.0, 0.0), 0.5, 30.0)}

    @pytest.mark.parametrize(("transparency", "shine", "message"), [(1.5, 10.0, "transparency"), (0.0, 101.0, "shine")])
    def test_create_material_ranges(
        self,
        run_component: RunComponent,
        transparency: float,
        shine: float,
        message: str,
    ) -> None:
        red = Color(1.0, 0.0, 0.0)
        with pytest.raises(ComponentMessageError, match=message):
            run_component("Create Material", red, red, red, Number(transparency), Number(shine))
