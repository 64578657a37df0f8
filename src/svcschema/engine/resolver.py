"""Resolve named shapes into a normalized, cycle-safe type tree.

A raw service description defines its types as a flat map of named *shapes*
that reference each other by name (``{"shape": "BucketName"}``). This module
walks that graph from a root shape and produces a
:class:`~svcschema.models.ResolvedType` tree the rest of the engine (and any
downstream generator) can consume without chasing names.

Cycles are detected via a ``visited`` set of shape names on the current
ancestor chain. The set is a :class:`frozenset` passed by value and extended
with ``visited | {name}`` on every descent, so sibling branches start from
the same base set and only a true ancestor repeat is reported as circular.
The node that would close the cycle is emitted as ``Any`` with
``circular=True`` and is not expanded.

Descent stops at :data:`MAX_DEPTH` shapes below the root; a reference that
would go deeper is emitted as ``Any`` and not expanded, so a pathologically
deep chain cannot exhaust the interpreter stack.

Resolution never raises. A reference to a shape that does not exist degrades
to a constraint-free ``String``; an unrecognized or missing shape ``type``
degrades to ``Any``. One malformed field therefore never aborts a build.

The public functions are :func:`resolve_shape` and :func:`resolve_ref`.
"""

from __future__ import annotations

from typing import Any

from svcschema.models import ResolvedType, ShapeKind, TypeConstraints, TypeKind

_PRIMITIVE_KINDS = {
    ShapeKind.STRING: TypeKind.STRING,
    ShapeKind.INTEGER: TypeKind.INTEGER,
    ShapeKind.LONG: TypeKind.INTEGER,
}

_SCALAR_KINDS = {
    ShapeKind.BOOLEAN: TypeKind.BOOLEAN,
    ShapeKind.TIMESTAMP: TypeKind.TIMESTAMP,
    ShapeKind.BLOB: TypeKind.BINARY,
}

MAX_DEPTH = 64


def resolve_shape(
    name: str,
    shapes: dict[str, Any],
    visited: frozenset[str] = frozenset(),
) -> ResolvedType:
    """Resolve the shape called *name* into a :class:`~svcschema.models.ResolvedType`.

    The root name itself is added to *visited* before descending, so a shape
    that refers back to itself is cut at its first self-reference.

    Args:
        name: The shape name to resolve.
        shapes: The specification's complete ``shapes`` map.
        visited: Shape names already on the ancestor chain. Callers start
            with the default empty set.

    Returns:
        The resolved type tree. Never raises; a missing shape yields a
        constraint-free ``String`` and an unknown shape type yields ``Any``.

    Example::

        shapes = {
            "Node": {"type": "structure", "members": {"next": {"shape": "Node"}}},
        }
        tree = resolve_shape("Node", shapes)
        assert tree.children["next"].circular
    """
    return _resolve_named(name, shapes or {}, visited)


def resolve_ref(
    ref: Any,
    shapes: dict[str, Any],
    visited: frozenset[str] = frozenset(),
) -> ResolvedType:
    """Resolve a ``{"shape": name}`` reference.

    A reference that is not a dict or carries no usable ``shape`` name
    resolves to ``Any``.
    """
    name = _ref_name(ref)
    if name is None:
        return ResolvedType(kind=TypeKind.ANY)
    return _resolve_reference(name, shapes or {}, visited)


def _ref_name(ref: Any) -> str | None:
    """Extract the target shape name from a reference dict."""
    if not isinstance(ref, dict):
        return None
    name = ref.get("shape")
    if not isinstance(name, str) or not name:
        return None
    return name


def _resolve_reference(
    name: str, shapes: dict[str, Any], visited: frozenset[str]
) -> ResolvedType:
    """Gate every named reference through the cycle and existence checks."""
    if name in visited:
        return ResolvedType(kind=TypeKind.ANY, shape=name, circular=True)
    if name not in shapes:
        return ResolvedType(kind=TypeKind.STRING, shape=name)
    return _resolve_named(name, shapes, visited)


def _resolve_named(
    name: str, shapes: dict[str, Any], visited: frozenset[str]
) -> ResolvedType:
    """Dispatch on the declared kind of the shape called *name*."""
    if name not in shapes:
        return ResolvedType(kind=TypeKind.STRING, shape=name)

    if len(visited) >= MAX_DEPTH:
        return ResolvedType(kind=TypeKind.ANY, shape=name)

    visited = visited | {name}
    shape = shapes[name]
    if not isinstance(shape, dict):
        return ResolvedType(kind=TypeKind.ANY, shape=name)

    documentation = shape.get("documentation")
    if not isinstance(documentation, str):
        documentation = None

    try:
        kind = ShapeKind(shape.get("type"))
    except ValueError:
        return ResolvedType(kind=TypeKind.ANY, shape=name, documentation=documentation)

    if kind is ShapeKind.STRUCTURE:
        children = _resolve_members(shape, shapes, visited)
        return ResolvedType(
            kind=TypeKind.RECORD,
            shape=name,
            children=children,
            documentation=documentation,
        )

    if kind is ShapeKind.LIST:
        return ResolvedType(
            kind=TypeKind.LIST,
            shape=name,
            children={"member": resolve_ref(shape.get("member"), shapes, visited)},
            documentation=documentation,
        )

    if kind is ShapeKind.MAP:
        return ResolvedType(
            kind=TypeKind.MAP,
            shape=name,
            children={
                "key": resolve_ref(shape.get("key"), shapes, visited),
                "value": resolve_ref(shape.get("value"), shapes, visited),
            },
            documentation=documentation,
        )

    if kind in _PRIMITIVE_KINDS:
        return ResolvedType(
            kind=_PRIMITIVE_KINDS[kind],
            shape=name,
            constraints=_constraints(shape),
            documentation=documentation,
        )

    return ResolvedType(kind=_SCALAR_KINDS[kind], shape=name, documentation=documentation)


def _resolve_members(
    shape: dict[str, Any], shapes: dict[str, Any], visited: frozenset[str]
) -> dict[str, ResolvedType]:
    """Resolve every member of a structure shape.

    Each member starts from the same *visited* set; membership in the
    structure's ``required`` list is an exact string match.
    """
    members = shape.get("members")
    if not isinstance(members, dict):
        return {}

    required = shape.get("required")
    if not isinstance(required, list):
        required = []
    required_names = {item for item in required if isinstance(item, str)}

    children: dict[str, ResolvedType] = {}
    for member_name, ref in members.items():
        resolved = resolve_ref(ref, shapes, visited)
        if member_name in required_names:
            resolved = resolved.model_copy(update={"required": True})
        children[member_name] = resolved
    return children


def _constraints(shape: dict[str, Any]) -> TypeConstraints:
    """Copy ``min``/``max``/``pattern``/``enum`` from a primitive shape.

    Values of the wrong type are dropped rather than rejected.
    """
    bounds = {}
    for key in ("min", "max"):
        value = shape.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            bounds[key] = value
    pattern = shape.get("pattern")
    enum = shape.get("enum")
    return TypeConstraints(
        **bounds,
        pattern=pattern if isinstance(pattern, str) else None,
        enum=list(enum) if isinstance(enum, list) else None,
    )
