"""Canonical Pydantic models shared across all swaggen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- loaded from ``swaggen.json`` or built from CLI
flags:
    :class:`FolderRule`, :class:`GenerationOptions`, :class:`SourceConfig`,
    and :class:`GeneratorConfig`.

**Parser output models** -- produced by the Schema Resolver and Endpoint
Extractor, immutable once built:
    :class:`Document`, the Schema Body variants (:class:`PrimitiveSchema`,
    :class:`ArraySchema`, :class:`ObjectSchema`, :class:`CompositeSchema`,
    :class:`ReferenceSchema`), :class:`Parameter`, and
    :class:`OperationRecord`.

**Generator output models** -- produced by the synthesizers and consumed by
the writer and runner:
    :class:`GeneratedType`, :class:`EndpointGroup`, :class:`ClientModule`,
    :class:`GenerationOutput`, :class:`SourceResult`, and
    :class:`RunResults`.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TRANSPORT_IMPORT_PATH = "../../../BaseAPIClient"
"""Import path from ``generatedClients/<Service>/<Folder>/`` to the transport."""

DEFAULT_VERSION_SEGMENTS = ("api", "v1", "v2", "v3")
"""Path segments ignored by resource naming and folder grouping."""

GENERATED_CLIENTS_DIRNAME = "generatedClients"


# --- Configuration models ---


class FolderRule(BaseModel):
    """Route every path containing ``match`` into a dedicated ``folder``.

    Matching is a case-insensitive substring test against each static path
    segment (after version segments are dropped).

    Example::

        FolderRule(match="therapist", folder="Therapist")
    """

    match: str
    folder: str


def _default_folder_rules() -> list[FolderRule]:
    return [FolderRule(match="therapist", folder="Therapist")]


class GenerationOptions(BaseModel):
    """Per-document settings handed to :func:`~swaggen.generator.pipeline.generate`."""

    service_name_override: Optional[str] = None
    transport_import_path: str = DEFAULT_TRANSPORT_IMPORT_PATH
    folder_rules: list[FolderRule] = Field(default_factory=_default_folder_rules)
    version_segments: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VERSION_SEGMENTS)
    )
    resource_window: int = Field(
        default=3, ge=1, description="Trailing path segments used for resource names"
    )


class SourceType(str, enum.Enum):
    """Where a :class:`SourceConfig` reads its document from."""

    FILE = "file"
    URL = "url"


class SourceConfig(BaseModel):
    """One Swagger/OpenAPI source listed in ``swaggen.json``.

    A ``file`` source may point at a directory, in which case every JSON or
    YAML file inside it is generated separately.
    """

    type: SourceType = SourceType.FILE
    source: str = Field(description="File path, directory, or http(s) URL")
    service_name: Optional[str] = Field(
        default=None, description="Override the service name derived from info.title"
    )
    output_dir: Optional[str] = Field(
        default=None, description="Override the global output directory"
    )
    skip: bool = False


class GeneratorConfig(BaseModel):
    """Project configuration persisted as ``swaggen.json``.

    Loaded by :func:`~swaggen.config.load_project_config` and resolved with
    CLI and environment overrides by :func:`~swaggen.config.resolve_config`.
    """

    output_dir: str = "src/clients"
    sources: list[SourceConfig] = Field(default_factory=list)
    transport_import_path: str = DEFAULT_TRANSPORT_IMPORT_PATH
    clean_output: bool = True
    parallel: bool = False
    folder_rules: list[FolderRule] = Field(default_factory=_default_folder_rules)
    version_segments: list[str] = Field(
        default_factory=lambda: list(DEFAULT_VERSION_SEGMENTS)
    )
    resource_window: int = Field(default=3, ge=1)

    def generation_options(self, service_name: Optional[str] = None) -> GenerationOptions:
        """Build the per-document options for one source."""
        return GenerationOptions(
            service_name_override=service_name,
            transport_import_path=self.transport_import_path,
            folder_rules=self.folder_rules,
            version_segments=self.version_segments,
            resource_window=self.resource_window,
        )


# --- Parser output models ---

_FROZEN = ConfigDict(frozen=True)


class SpecVersion(str, enum.Enum):
    """The two document families understood by the Schema Resolver."""

    SWAGGER_2 = "2.0"
    OPENAPI_3 = "3.x"


class HTTPMethod(str, enum.Enum):
    """HTTP methods turned into client members, in extraction order."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    @property
    def carries_body(self) -> bool:
        """Whether a request-body argument is accepted for this method."""
        return self is not HTTPMethod.GET


class ParameterLocation(str, enum.Enum):
    """Parameter locations kept on an :class:`OperationRecord`."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"


class CompositeMode(str, enum.Enum):
    """Schema composition keyword of a :class:`CompositeSchema`."""

    ALL_OF = "allOf"
    ONE_OF = "oneOf"
    ANY_OF = "anyOf"


class PrimitiveSchema(BaseModel):
    """A scalar schema, optionally restricted to a set of enum literals.

    ``type`` keeps the raw JSON Schema type (``string``, ``integer``,
    ``file``...) or ``None`` when the source declared none.
    """

    model_config = _FROZEN

    kind: Literal["primitive"] = "primitive"
    type: Optional[str] = None
    format: Optional[str] = None
    enum_values: Optional[list[Any]] = None
    nullable: bool = False


class ArraySchema(BaseModel):
    """An array whose elements all share one element schema."""

    model_config = _FROZEN

    kind: Literal["array"] = "array"
    items: SchemaBody
    nullable: bool = False


class ObjectSchema(BaseModel):
    """An object schema.

    ``properties`` is ``None`` for dictionary-like objects, which render as
    ``Record<string, T>`` using ``additional_properties`` for ``T`` when set.
    Property order follows the source document.
    """

    model_config = _FROZEN

    kind: Literal["object"] = "object"
    properties: Optional[dict[str, SchemaBody]] = None
    required: list[str] = Field(default_factory=list)
    additional_properties: Optional[SchemaBody] = None
    nullable: bool = False


class CompositeSchema(BaseModel):
    """``allOf`` / ``oneOf`` / ``anyOf`` over a sequence of member schemas."""

    model_config = _FROZEN

    kind: Literal["composite"] = "composite"
    mode: CompositeMode
    members: list[SchemaBody] = Field(default_factory=list)
    nullable: bool = False


class ReferenceSchema(BaseModel):
    """A ``$ref`` pointer, resolved lazily against the schema index."""

    model_config = _FROZEN

    kind: Literal["reference"] = "reference"
    ref: str
    nullable: bool = False

    @property
    def name(self) -> str:
        """The last pointer segment, e.g. ``Pet`` for ``#/definitions/Pet``."""
        return self.ref.rsplit("/", 1)[-1]


SchemaBody = Annotated[
    Union[PrimitiveSchema, ArraySchema, ObjectSchema, CompositeSchema, ReferenceSchema],
    Field(discriminator="kind"),
]


class ApiInfo(BaseModel):
    """The subset of the *Info Object* used for naming."""

    model_config = _FROZEN

    title: Optional[str] = None
    version: Optional[str] = None
    description: Optional[str] = None


class Document(BaseModel):
    """A loaded Swagger 2.0 or OpenAPI 3.x document.

    ``definitions`` is the version-appropriate schema container
    (``definitions`` or ``components.schemas``) so downstream code never
    branches on the version to find schemas.
    """

    model_config = _FROZEN

    version: SpecVersion
    version_string: str
    info: ApiInfo = Field(default_factory=ApiInfo)
    paths: dict[str, Any] = Field(default_factory=dict)
    definitions: dict[str, Any] = Field(default_factory=dict)
    base_url: str = "https://api.example.com"
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def is_swagger2(self) -> bool:
        return self.version is SpecVersion.SWAGGER_2

    @property
    def schema_ref_prefix(self) -> str:
        """Prefix of fully-qualified schema references for this version."""
        if self.is_swagger2:
            return "#/definitions/"
        return "#/components/schemas/"


class Parameter(BaseModel):
    """A path, query, or header parameter of an operation."""

    model_config = _FROZEN

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_body: SchemaBody = Field(default_factory=lambda: PrimitiveSchema(type="string"))


class OperationRecord(BaseModel):
    """One (path, method) pair with its normalised inputs and outputs.

    Parameters are partitioned by location and keep declaration order, with
    path-item parameters first and operation overrides applied.
    ``responses`` only holds status codes that declared a schema.
    """

    model_config = _FROZEN

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    path_params: list[Parameter] = Field(default_factory=list)
    query_params: list[Parameter] = Field(default_factory=list)
    header_params: list[Parameter] = Field(default_factory=list)
    request_body: Optional[SchemaBody] = None
    responses: dict[str, SchemaBody] = Field(default_factory=dict)
    deprecated: bool = False

    @property
    def key(self) -> str:
        """Stable identity used in provenance tags, e.g. ``GET:/pets``."""
        return f"{self.method.value.upper()}:{self.path}"


# --- Generator output models ---


class GeneratedType(BaseModel):
    """One emitted type declaration.

    ``source`` is the provenance tag: ``schema:<definition>`` or
    ``endpoint:<METHOD>:<path>:request|response``.
    """

    model_config = _FROZEN

    name: str
    body: str
    source: str


class EndpointGroup(BaseModel):
    """Operations that share one output folder and one client module."""

    folder: list[str]
    operations: list[OperationRecord] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return "/".join(self.folder)

    @property
    def client_name(self) -> str:
        """Client module name: folder segments concatenated plus ``Client``."""
        return "".join(self.folder) + "Client"


class FunctionParam(BaseModel):
    """One parameter of a generated client member."""

    name: str
    type: str
    optional: bool = False

    def render(self) -> str:
        return f"{self.name}{'?' if self.optional else ''}: {self.type}"


class ClientFunction(BaseModel):
    """A member of a generated client module."""

    name: str
    params: list[FunctionParam] = Field(default_factory=list)
    return_type: str
    body_lines: list[str] = Field(default_factory=list)
    doc_lines: list[str] = Field(default_factory=list)

    @property
    def signature(self) -> str:
        return ", ".join(p.render() for p in self.params)


class ClientModule(BaseModel):
    """A generated client class for one :class:`EndpointGroup`."""

    name: str
    functions: list[ClientFunction] = Field(default_factory=list)
    imports: list[str] = Field(default_factory=list)


class GeneratedFile(BaseModel):
    """A rendered file body; ``name`` has no extension."""

    name: str
    body: str

    @property
    def filename(self) -> str:
        return f"{self.name}.ts"


class GroupOutput(BaseModel):
    """The ``types`` and client files of one folder."""

    folder: list[str]
    files: list[GeneratedFile] = Field(default_factory=list)


class GenerationOutput(BaseModel):
    """Everything the writer needs for one document."""

    service_name: str
    spec_version: SpecVersion
    operation_count: int = 0
    groups: list[GroupOutput] = Field(default_factory=list)
    preview: str = ""


class SourceResult(BaseModel):
    """Outcome of generating one document."""

    source: str = ""
    success: bool
    service_name: str = ""
    files_written: list[str] = Field(default_factory=list)
    folder_structure: str = ""
    errors: list[str] = Field(default_factory=list)


class RunResults(BaseModel):
    """Summary of a multi-source run."""

    total_sources: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    results: list[SourceResult] = Field(default_factory=list)


for _model in (ArraySchema, ObjectSchema, CompositeSchema, Parameter, OperationRecord):
    _model.model_rebuild()
