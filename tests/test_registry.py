"""Tests for the component registry."""

from collections.abc import Sequence

from ghx_engine._components import ComponentCategory, ComponentKind, ComponentOutputs, ComponentRegistry
from ghx_engine._graph import MetaMap, Node
from ghx_engine._value import Number, Value


def _constant(inputs: Sequence[Value], meta: MetaMap) -> ComponentOutputs:
    return {"y": Number(1.0)}


def _kind(name: str, guids: tuple[str, ...] = (), names: tuple[str, ...] = ()) -> ComponentKind:
    return ComponentKind(
        name=name,
        category=ComponentCategory.MATHS,
        guids=guids,
        names=(name, *names),
        evaluate=_constant,
        outputs=("y",),
    )


class TestResolve:
    """Tests for lookup by guid, name and nickname."""

    def test_guid_first(self) -> None:
        registry = ComponentRegistry()
        by_guid = _kind("ByGuid", guids=("{AAAA-0001}",))
        by_name = _kind("ByName")
        registry.register_all([by_guid, by_name])

        assert registry.resolve(guid="aaaa-0001", name="ByName") is by_guid

    def test_unknown_guid_falls_through_to_name(self) -> None:
        registry = ComponentRegistry()
        kind = _kind("Thing")
        registry.register(kind)

        assert registry.resolve(guid="ffff-ffff", name="  THING ") is kind

    def test_nickname_last(self) -> None:
        registry = ComponentRegistry()
        kind = _kind("Thing", names=("Th",))
        registry.register(kind)

        assert registry.resolve(name="Unknown", nickname="th") is kind
        assert registry.resolve(name="Unknown", nickname="nope") is None
        assert registry.resolve() is None

    def test_first_registration_wins(self) -> None:
        registry = ComponentRegistry()
        first = _kind("First", guids=("g-1",), names=("Shared",))
        second = _kind("Second", guids=("g-1",), names=("Shared",))
        registry.register_all([first, second])

        assert registry.resolve(guid="g-1") is first
        assert registry.resolve(name="shared") is first
        assert len(registry) == 2

    def test_resolve_node(self) -> None:
        registry = ComponentRegistry()
        kind = _kind("Thing")
        registry.register(kind)

        assert registry.resolve_node(Node(name="Other", nickname="thing")) is kind


class TestDefaultRegistry:
    """Tests for the built-in component catalogue."""

    def test_every_category_is_populated(self, registry: ComponentRegistry) -> None:
        categories = {kind.category for kind in registry}

        assert categories == set(ComponentCategory)

    def test_well_known_guids(self, registry: ComponentRegistry) -> None:
        slider = registry.resolve(guid="{57DA07BD-ECAB-415D-9D86-AF36D7073ABC}")
        construct_point = registry.resolve(guid="3581f42a-9592-4549-bd6b-1c0fc39d067b")

        assert slider is not None
        assert slider.name == "Number Slider"
        assert construct_point is not None
        assert construct_point.name == "Construct Point"

    def test_second_slider_guid(self, registry: ComponentRegistry) -> None:
        node = Node(guid="{5E0B22AB-F3AA-4CC2-8329-7E548BB9A58B}", nickname="Span")

        kind = registry.resolve_node(node)

        assert kind is not None
        assert kind.name == "Number Slider"

    def test_list_item_has_several_guids(self, registry: ComponentRegistry) -> None:
        names = {
            kind.name
            for guid in (
                "285ddd8a-5398-4a3e-b3c2-361025711a51",
                "59daf374-bc21-4a5e-8282-5504fb7ae9ae",
                "6e2ba21a-2252-42f4-8d3f-f5e0f49cc4ef",
            )
            if (kind := registry.resolve(guid=guid)) is not None
        }

        assert names == {"List Item"}

    def test_shared_nickname_goes_to_first_kind(self, registry: ComponentRegistry) -> None:
        """``Mod`` is both Modulus and Complex Modulus; the operator is registered first."""
        kind = registry.resolve(nickname="Mod")

        assert kind is not None
        assert kind.name == "Modulus"

    def test_search(self, registry: ComponentRegistry) -> None:
        names = [kind.name for kind in registry.search("matrix")]

        assert "Invert Matrix" in names
        assert "Construct Matrix" in names
        assert all(kind.category == ComponentCategory.MESH for kind in registry.search("Mesh"))

    def test_kinds_are_in_registration_order(self, registry: ComponentRegistry) -> None:
        kinds = registry.kinds()

        assert kinds[0].category == ComponentCategory.PARAMS
        assert kinds[-1].category == ComponentCategory.DISPLAY
