"""Component kind descriptors and the per-category registration tables."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from ghx_engine._errors import ComponentMessageError
from ghx_engine._graph import MetaMap
from ghx_engine._value import NULL, List, Null, Value

type ComponentOutputs = dict[str, Value]
type EvaluateFn = Callable[[Sequence[Value], MetaMap], ComponentOutputs]


class ComponentCategory(StrEnum):
    """Category tab a component kind belongs to."""

    PARAMS = "Params"
    INPUT = "Input"
    MATHS = "Maths"
    VECTOR = "Vector"
    CURVE = "Curve"
    SETS = "Sets"
    MESH = "Mesh"
    DISPLAY = "Display"


@dataclass(frozen=True, slots=True)
class ComponentKind:
    """One executable component kind.

    Attributes:
        name: Human-readable name.
        category: Category tab.
        guids: Unique ids under which the kind is registered.
        names: Canonical names and nicknames under which the kind is registered.
        evaluate: Function from the positional input vector and the node's
            metadata to an output map. Raises ComponentError on failure.
        inputs: Documented input pin names, in positional order.
        outputs: Documented output pin names.
        optional_inputs: Input pins that are replaced by Null when they are
            neither wired nor defaulted.

    """

    name: str
    category: ComponentCategory
    guids: tuple[str, ...]
    names: tuple[str, ...]
    evaluate: EvaluateFn = field(repr=False, compare=False)
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    optional_inputs: tuple[str, ...] = ()

    def is_optional(self, pin: str) -> bool:
        return pin in self.optional_inputs


@dataclass(slots=True)
class ComponentTable:
    """Static registration table for one category.

    Category modules create a table and register evaluate functions on it
    with the :meth:`component` decorator. The registry later reads
    :attr:`kinds` in declaration order.

    Example:
        >>> table = ComponentTable(ComponentCategory.MATHS)
        >>> @table.component("Pi", guids=["0d2ccfb3-..."], outputs=["y"])
        ... def pi(inputs, meta):
        ...     return {"y": Number(math.pi)}

    """

    category: ComponentCategory
    kinds: list[ComponentKind] = field(default_factory=list)

    def component(
        self,
        name: str,
        *,
        guids: Sequence[str],
        names: Sequence[str] = (),
        inputs: Sequence[str] = (),
        outputs: Sequence[str] = (),
        optional: Sequence[str] = (),
    ) -> Callable[[EvaluateFn], EvaluateFn]:
        """Register the decorated function as a component kind.

        The human-readable ``name`` is always registered as a name; ``names``
        adds further names and nicknames.
        """

        def decorator(func: EvaluateFn) -> EvaluateFn:
            all_names = (name, *(n for n in names if n != name))
            self.kinds.append(
                ComponentKind(
                    name=name,
                    category=self.category,
                    guids=tuple(guids),
                    names=all_names,
                    evaluate=func,
                    inputs=tuple(inputs),
                    outputs=tuple(outputs),
                    optional_inputs=tuple(optional),
                ),
            )
            return func

        return decorator


def arg(inputs: Sequence[Value], index: int) -> Value:
    """Return the input at ``index``, or Null when the vector is shorter."""
    if index < len(inputs):
        return inputs[index]
    return NULL


def broadcast(values: Sequence[Value], func: Callable[..., Value]) -> Value:
    """Apply ``func`` element-wise with longest-list matching.

    Scalars are applied directly. When any argument is a List, the shorter
    arguments repeat their last item (a scalar counts as a one-item list)
    and the results are collected into a List; nesting recurses.

    Example:
        >>> broadcast([List((Number(1), Number(2))), Number(10)], add)
        List(items=(Number(value=11), Number(value=12)))

    """
    if not any(isinstance(value, List) for value in values):
        return func(*values)
    sequences = [value.items if isinstance(value, List) else (value,) for value in values]
    if any(not sequence for sequence in sequences):
        return List(())
    count = max(len(sequence) for sequence in sequences)
    return List(
        tuple(
            broadcast([sequence[min(i, len(sequence) - 1)] for sequence in sequences], func)
            for i in range(count)
        ),
    )


def broadcast_pins(
    values: Sequence[Value],
    func: Callable[..., ComponentOutputs],
    pins: Sequence[str],
) -> ComponentOutputs:
    """Broadcast a function that returns several pins, one output List per pin."""
    if not any(isinstance(value, List) for value in values):
        return func(*values)
    return {pin: broadcast(values, lambda *args, pin=pin: func(*args)[pin]) for pin in pins}


def or_default(value: Value, default: Value) -> Value:
    """Substitute ``default`` for an unwired optional input."""
    return default if isinstance(value, Null) else value


def require_inputs(inputs: Sequence[Value], count: int, component: str) -> None:
    """Fail unless at least ``count`` inputs were supplied."""
    if len(inputs) < count:
        msg = f"{component} expects {count} inputs, got {len(inputs)}"
        raise ComponentMessageError(msg)
