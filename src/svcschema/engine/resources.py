"""Best-effort classification of operations into logical resources.

Resources are guessed purely from canonical operation names:

* **Verb prefixes** -- ``list-``, ``create-``, ``describe-``, ``update-`` and
  ``delete-`` are stripped and the remainder becomes a candidate resource
  (``list_inferred`` for ``list``, ``crud_inferred`` for the rest).
* **ARN operations** -- any name with an ``arn`` segment becomes a candidate
  with the whole segments ``arn``, ``get`` and ``describe`` removed
  (``arn_inferred``). ``get-target-arn`` yields ``target``; a name such as
  ``learn-things`` has no ``arn`` segment and is ignored.

Candidates are concatenated in the fixed order
list -> create -> describe -> update -> delete -> arn and de-duplicated by
name, keeping only the first occurrence. A later candidate with a name that
was already seen is dropped, *not* merged: ``create-widgets`` arriving after
``list-widgets`` leaves the ``widgets`` resource with ``["list-widgets"]``.
"""

from __future__ import annotations

from svcschema.models import OperationDescriptor, ResourceDescriptor, ResourceKind

_VERBS: tuple[tuple[str, ResourceKind], ...] = (
    ("list", ResourceKind.LIST_INFERRED),
    ("create", ResourceKind.CRUD_INFERRED),
    ("describe", ResourceKind.CRUD_INFERRED),
    ("update", ResourceKind.CRUD_INFERRED),
    ("delete", ResourceKind.CRUD_INFERRED),
)

_ARN_MARKER = "arn"
_ARN_STRIP = frozenset({"arn", "get", "describe"})


def infer_resources(operations: list[OperationDescriptor]) -> list[ResourceDescriptor]:
    """Infer :class:`~svcschema.models.ResourceDescriptor` groupings.

    Args:
        operations: Canonical operation descriptors, in document order.

    Returns:
        Resources with unique names, first occurrence wins.
    """
    candidates: list[ResourceDescriptor] = []
    for verb, kind in _VERBS:
        prefix = f"{verb}-"
        for op in operations:
            if not op.name.startswith(prefix):
                continue
            remainder = op.name[len(prefix):]
            if remainder:
                candidates.append(
                    ResourceDescriptor(name=remainder, kind=kind, operations=[op.name])
                )

    for op in operations:
        if _ARN_MARKER not in op.name.split("-"):
            continue
        remainder = _strip_arn_name(op.name)
        if remainder:
            candidates.append(
                ResourceDescriptor(
                    name=remainder, kind=ResourceKind.ARN_INFERRED, operations=[op.name]
                )
            )

    seen: set[str] = set()
    resources: list[ResourceDescriptor] = []
    for candidate in candidates:
        if candidate.name in seen:
            continue
        seen.add(candidate.name)
        resources.append(candidate)
    return resources


def _strip_arn_name(name: str) -> str:
    """Drop the ARN marker segments and rejoin what is left."""
    return "-".join(seg for seg in name.split("-") if seg and seg not in _ARN_STRIP)
