"""Classify operations as paginated or not.

Two sources are consulted, in priority order:

1. **Explicit config** -- ``raw_spec["pagination"]`` keyed by the
   operation's canonical name. Its fields are copied verbatim.
2. **Member heuristic** -- the top-level members of the operation's input
   and output structures are read straight from the raw shapes. Nothing
   below the top level is resolved. An operation is paginated only when the
   input exposes both a next-token and a max-results member and the output
   exposes a next-token member.

Only the two conventional spellings of each member are recognised
(``NextToken``/``nextToken`` and ``MaxResults``/``maxResults``).
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from svcschema.models import OperationDescriptor, PaginationDescriptor, ShapeKind

_TOKEN_NAMES = ("NextToken", "nextToken")
_LIMIT_NAMES = ("MaxResults", "maxResults")


def detect_pagination(
    op: OperationDescriptor, raw_spec: dict[str, Any]
) -> PaginationDescriptor:
    """Return the :class:`~svcschema.models.PaginationDescriptor` for *op*.

    Args:
        op: A canonical operation descriptor.
        raw_spec: The raw specification dict the operation came from.

    Returns:
        ``paginated=True`` with token/limit names filled in when either the
        explicit config or the heuristic says so; otherwise a bare
        ``paginated=False`` descriptor.
    """
    explicit = _explicit_config(op.name, raw_spec)
    if explicit is not None:
        return explicit

    shapes = raw_spec.get("shapes") if isinstance(raw_spec, dict) else None
    if not isinstance(shapes, dict):
        return PaginationDescriptor(paginated=False)
    if not op.input_shape or op.input_shape not in shapes:
        return PaginationDescriptor(paginated=False)
    if not op.output_shape or op.output_shape not in shapes:
        return PaginationDescriptor(paginated=False)

    input_members = _top_level_members(op.input_shape, shapes)
    output_members = _top_level_members(op.output_shape, shapes)

    input_token = _find_member(input_members, _TOKEN_NAMES)
    limit_key = _find_member(input_members, _LIMIT_NAMES)
    output_token = _find_member(output_members, _TOKEN_NAMES)
    if input_token is None or limit_key is None or output_token is None:
        return PaginationDescriptor(paginated=False)

    return PaginationDescriptor(
        paginated=True,
        input_token=input_token,
        output_token=output_token,
        limit_key=limit_key,
        result_key=_find_result_key(output_members, output_token, shapes),
    )


def _explicit_config(name: str, raw_spec: Any) -> PaginationDescriptor | None:
    """Copy an explicit paginator entry for *name*, if one is declared."""
    if not isinstance(raw_spec, dict):
        return None
    pagination = raw_spec.get("pagination")
    if not isinstance(pagination, dict):
        return None
    config = pagination.get(name)
    if not isinstance(config, dict):
        return None
    try:
        return PaginationDescriptor.model_validate({**config, "paginated": True})
    except ValidationError:
        # Unusable explicit entry -- defer to the heuristic.
        return None


def _top_level_members(name: str, shapes: dict[str, Any]) -> dict[str, Any]:
    """Raw member refs of the structure shape *name*; empty for any other kind."""
    shape = shapes.get(name)
    if not isinstance(shape, dict) or shape.get("type") != ShapeKind.STRUCTURE.value:
        return {}
    members = shape.get("members")
    return members if isinstance(members, dict) else {}


def _find_member(members: dict[str, Any], names: tuple[str, ...]) -> str | None:
    for name in names:
        if name in members:
            return name
    return None


def _find_result_key(members: dict[str, Any], token: str, shapes: dict[str, Any]) -> str | None:
    """First list-typed output member other than the token."""
    for name, ref in members.items():
        if name == token or not isinstance(ref, dict):
            continue
        target_name = ref.get("shape")
        target = shapes.get(target_name) if isinstance(target_name, str) else None
        if isinstance(target, dict) and target.get("type") == ShapeKind.LIST.value:
            return name
    return None
