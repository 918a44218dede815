"""Shared fixtures: the default registry, a component runner and small documents."""

import pytest

from ghx_documents import (
    LINE_GUID,
    SLIDER_GUID,
    RunComponent,
    archive_object,
    param_input,
    param_output,
    slider_chunk,
    wrap_archive,
)
from ghx_engine._components import ComponentOutputs, ComponentRegistry
from ghx_engine._graph import MetaMap
from ghx_engine._value import Value


@pytest.fixture(scope="session")
def registry() -> ComponentRegistry:
    return ComponentRegistry.default()


@pytest.fixture
def run_component(registry: ComponentRegistry) -> RunComponent:
    """Evaluate a component kind, looked up by name, on positional inputs."""

    def run(name: str, *inputs: Value, meta: MetaMap | None = None) -> ComponentOutputs:
        kind = registry.resolve(name=name)
        assert kind is not None, f"no component named {name!r}"
        return kind.evaluate(list(inputs), meta or {})

    return run


@pytest.fixture
def slider_line_archive() -> str:
    """Slider (Value=2, Min=0, Max=10) wired into B of a Line whose A is a persistent origin point."""
    slider = archive_object(
        SLIDER_GUID,
        {"InstanceGuid": "{aaaaaaaa-0000-0000-0000-000000000001}", "Name": "Number Slider", "NickName": "S"},
        slider_chunk(Value="2", Min="0", Max="10"),
    )
    origin = '<items><item name="point" type_name="gh_point3d"><X>0</X><Y>0</Y><Z>0</Z></item></items>'
    line = archive_object(
        LINE_GUID,
        {"InstanceGuid": "bbbbbbbb-0000-0000-0000-000000000002", "Name": "Line", "NickName": "Ln"},
        param_input(0, {"NickName": "A"}, origin)
        + param_input(1, {"NickName": "B", "Source": "aaaaaaaa-0000-0000-0000-000000000001"})
        + param_output(0, {"NickName": "L", "InstanceGuid": "cccccccc-0000-0000-0000-000000000003"}),
    )
    return wrap_archive([slider, line])


@pytest.fixture
def slider_number_ghx() -> str:
    """Compact document: slider S (0..10, step 0.5, value 3) feeding a Number param."""
    return """<?xml version="1.0" encoding="utf-8"?>
<ghx>
  <objects>
    <object id="0" name="Number Slider" nickname="S">
      <slider min="0" max="10" value="3" step="0.5"/>
    </object>
    <object id="1" name="Number" nickname="N">
      <inputs><input name="Num"/></inputs>
      <outputs><output name="Num"/></outputs>
    </object>
  </objects>
  <wires>
    <wire from="0:OUT" to="1:Num"/>
  </wires>
</ghx>
"""


@pytest.fixture
def points_ghx() -> str:
    """Compact document: two points, a line between them and a polyline through them."""
    return """<ghx>
  <objects>
    <object id="0" name="Construct Point"/>
    <object id="1" name="Construct Point">
      <inputs><input name="X" value="1"/><input name="Y" value="2"/></inputs>
    </object>
    <object id="2" name="Line"/>
    <object id="3" name="Polyline"/>
  </objects>
  <wires>
    <wire from="0:Pt" to="2:A"/>
    <wire from="1:Pt" to="2:B"/>
    <wire from="1:Pt" to="3:V"/>
    <wire from="0:Pt" to="3:V"/>
  </wires>
</ghx>
"""
