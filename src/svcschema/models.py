"""Canonical Pydantic models shared across all svcschema modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`SourceConfig`, :class:`CacheConfig`, :class:`BuildConfig`, and
    :class:`GlobalConfig`.

**Engine models** -- produced by the resolution engine and persisted in the
schema document:
    :class:`ShapeKind`, :class:`TypeKind`, :class:`TypeConstraints`,
    :class:`ResolvedType`, :class:`PaginationDescriptor`,
    :class:`OperationDescriptor`, :class:`ErrorDescriptor`,
    :class:`ResourceKind`, :class:`ResourceDescriptor`,
    :class:`ServiceMetadata`, and :class:`SchemaDocument`.

**Result models** -- returned by validation and batch builds:
    :class:`ValidationResult` and :class:`ServiceBuildResult`.

The raw specification itself is not modelled. It stays a plain ``dict`` and
every reader checks value types before use.

Document-facing models use camelCase aliases with ``populate_by_name`` so
Python code works with snake_case attributes while the persisted JSON keeps
the keys downstream generators expect. Always dump them with
``by_alias=True``.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# --- Config ---


class SourceConfig(BaseModel):
    """Where raw service specifications are fetched from.

    Templates are formatted with ``{service}`` and ``{version}`` and may
    resolve to an HTTP(S) URL or a local file path.
    """

    spec_template: str = Field(
        default="specs/{service}.json",
        description="URL or path template for a service's raw spec",
    )
    paginators_template: Optional[str] = Field(
        default=None,
        description="Optional URL or path template for a paginator config document",
    )
    version: str = Field(
        default="latest", description="Spec version; also part of the cache key"
    )
    timeout: int = Field(default=30, description="Fetch timeout in seconds")


class CacheConfig(BaseModel):
    """Raw spec cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable the raw spec cache")
    ttl_seconds: Optional[int] = Field(
        default=None, description="Entry lifetime in seconds; None keeps entries forever"
    )
    directory: Optional[str] = Field(
        default=None, description="Cache directory; resolved from XDG when unset"
    )


class BuildConfig(BaseModel):
    """Batch build defaults stored in :class:`GlobalConfig`."""

    output_dir: str = Field(default="schemas", description="Directory for {service}.json")
    workers: int = Field(default=4, ge=1, description="Parallel schema builds")
    continue_on_error: bool = Field(
        default=False, description="Record failures and keep going instead of aborting"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/svcschema/config.json``.

    Loaded and saved by :func:`~svcschema.config.load_global_config` and
    :func:`~svcschema.config.save_global_config`. See
    :func:`~svcschema.config.resolve_config` for the full precedence chain.
    """

    source: SourceConfig = Field(default_factory=SourceConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)


# --- Engine: shapes and resolved types ---


class ShapeKind(str, enum.Enum):
    """Shape ``type`` tags the resolver recognises.

    Anything outside this set resolves to :attr:`TypeKind.ANY`.
    """

    STRUCTURE = "structure"
    LIST = "list"
    MAP = "map"
    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    BLOB = "blob"


class TypeKind(str, enum.Enum):
    """Kinds of a :class:`ResolvedType` node."""

    RECORD = "record"
    LIST = "list"
    MAP = "map"
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    ANY = "any"


class TypeConstraints(BaseModel):
    """Primitive constraints copied verbatim from the shape; absent means ``None``."""

    min: Optional[int | float] = None
    max: Optional[int | float] = None
    pattern: Optional[str] = None
    enum: Optional[list[Any]] = None


class ResolvedType(BaseModel):
    """A node in the normalized, cycle-safe type tree.

    ``children`` holds record members by name, ``member`` for lists, and
    ``key``/``value`` for maps. A node with ``circular=True`` closes a cycle
    in the shape graph and is never expanded further.
    """

    kind: TypeKind
    shape: Optional[str] = None
    children: dict[str, ResolvedType] = Field(default_factory=dict)
    constraints: TypeConstraints = Field(default_factory=TypeConstraints)
    required: bool = False
    circular: bool = False
    documentation: Optional[str] = None


ResolvedType.model_rebuild()


# --- Engine: descriptors ---


class PaginationDescriptor(BaseModel):
    """How an operation exposes continuation tokens, if at all.

    Accepts both camelCase and botocore-style snake_case keys on input so an
    explicit paginator config can be copied in verbatim.
    """

    model_config = ConfigDict(populate_by_name=True)

    paginated: bool = False
    input_token: Optional[Any] = Field(
        default=None,
        alias="inputToken",
        validation_alias=AliasChoices("inputToken", "input_token"),
    )
    output_token: Optional[Any] = Field(
        default=None,
        alias="outputToken",
        validation_alias=AliasChoices("outputToken", "output_token"),
    )
    limit_key: Optional[Any] = Field(
        default=None,
        alias="limitKey",
        validation_alias=AliasChoices("limitKey", "limit_key"),
    )
    result_key: Optional[Any] = Field(
        default=None,
        alias="resultKey",
        validation_alias=AliasChoices("resultKey", "result_key"),
    )


class OperationDescriptor(BaseModel):
    """A single API operation in canonical form.

    ``name`` is the kebab-case canonical name; ``original_name`` keeps the
    upstream spelling. ``pagination`` is attached by the assembler.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    original_name: str = Field(alias="originalName")
    http_method: str = Field(default="POST", alias="httpMethod")
    http_path: str = Field(default="/", alias="httpUri")
    input_shape: Optional[str] = Field(default=None, alias="inputShape")
    output_shape: Optional[str] = Field(default=None, alias="outputShape")
    errors: list[str] = Field(default_factory=list)
    documentation: Optional[str] = None
    deprecated: bool = False
    pagination: Optional[PaginationDescriptor] = None


class ErrorDescriptor(BaseModel):
    """An exception shape from the service's error taxonomy.

    ``retryable`` reflects only the shape's ``retryable.throttling`` flag.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    http_status: int = Field(default=500, alias="httpStatus")
    retryable: bool = False
    sender_fault: bool = Field(default=False, alias="senderFault")
    code: Optional[str] = None
    documentation: Optional[str] = None


class ResourceKind(str, enum.Enum):
    """Which heuristic produced a :class:`ResourceDescriptor`."""

    LIST_INFERRED = "list_inferred"
    CRUD_INFERRED = "crud_inferred"
    ARN_INFERRED = "arn_inferred"


class ResourceDescriptor(BaseModel):
    """A heuristically inferred logical resource and the operations behind it."""

    name: str
    kind: ResourceKind
    operations: list[str] = Field(default_factory=list)


class ServiceMetadata(BaseModel):
    """Service-level metadata with defaults applied by the assembler.

    Unknown upstream metadata keys are preserved in ``model_extra``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_version: str = Field(default="unknown", alias="apiVersion")
    protocol: str = "json"
    service_full_name: str = Field(alias="serviceFullName")
    endpoint_prefix: str = Field(alias="endpointPrefix")
    signature_version: str = Field(default="v4", alias="signatureVersion")


class SchemaDocument(BaseModel):
    """The assembled, versioned schema for one service.

    Immutable once built; identified by ``(service, schema_version)``.
    ``generated_at`` is stamped exactly once, at assembly time.

    See Also:
        :func:`~svcschema.engine.assembler.build_schema`: The only producer.
        :func:`~svcschema.engine.validator.validate_schema`: Structural check.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    service: str
    operations: list[OperationDescriptor] = Field(default_factory=list)
    errors: list[ErrorDescriptor] = Field(default_factory=list)
    resources: list[ResourceDescriptor] = Field(default_factory=list)
    metadata: ServiceMetadata
    generated_at: str = Field(alias="generatedAt")
    schema_version: str = Field(alias="schemaVersion")


# --- Results ---


class ValidationResult(BaseModel):
    """Outcome of :func:`~svcschema.engine.validator.validate_schema`."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


class ServiceBuildResult(BaseModel):
    """Per-service outcome recorded by :func:`~svcschema.builder.build_many`."""

    service: str
    success: bool
    path: Optional[str] = None
    error: Optional[str] = None
    operations: int = 0
    errors: int = 0
    resources: int = 0
