"""Display components (Display > Preview)."""

from collections.abc import Sequence

from ghx_engine import _coerce as co
from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import Material, Value

from ._base import ComponentCategory, ComponentOutputs, ComponentTable, require_inputs

table = ComponentTable(ComponentCategory.DISPLAY)


@table.component(
    "Create Material",
    guids=["76975309-75a6-446a-afed-f8653720a9f2"],
    names=["Material"],
    inputs=["Kd", "Ks", "Ke", "T", "S"],
    outputs=["M"],
)
def create_material(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    """Material from diffuse, specular and emission colours, transparency and shine.

    Transparency is a fraction in [0, 1]; shine is in [0, 100].
    """
    require_inputs(inputs, 5, "Create Material")
    diffuse = co.coerce_color(inputs[0], "Create Material diffuse")
    specular = co.coerce_color(inputs[1], "Create Material specular")
    emission = co.coerce_color(inputs[2], "Create Material emission")
    transparency = co.coerce_number(inputs[3], "Create Material transparency")
    shine = co.coerce_number(inputs[4], "Create Material shine")
    if not 0.0 <= transparency <= 1.0:
        msg = f"Create Material transparency must be in [0, 1], got {co.format_number(transparency)}"
        raise ComponentMessageError(msg)
    if not 0.0 <= shine <= 100.0:  # noqa: PLR2004
        msg = f"Create Material shine must be in [0, 100], got {co.format_number(shine)}"
        raise ComponentMessageError(msg)
    return {"M": Material(diffuse, specular, emission, transparency, shine)}


REGISTRATIONS = tuple(table.kinds)
