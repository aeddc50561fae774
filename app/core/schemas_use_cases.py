"""Pydantic schemas for use case form records.

Wire names are camelCase (the form client speaks camelCase); Python attributes are
snake_case. Every model accepts either spelling on input.
"""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.schemas_generation import ProviderId

# First word of a use case name: Spanish infinitive
INFINITIVE_RE = re.compile(r"^[a-záéíóúñ]+(ar|er|ir)$")
SHORT_INFINITIVES = {"ver", "ser", "ir"}

# Two letters + three digits + name, e.g. AB123GestionarUsuarios
FILE_NAME_RE = re.compile(r"^[A-Z]{2}\d{3}.+$")
FILE_EXTENSION_RE = re.compile(r"\.(json|docx|xml|txt|pdf)$", re.IGNORECASE)

INFINITIVE_MESSAGE = "Debe comenzar con un verbo en infinitivo (terminar en -ar, -er, -ir)"
FILE_NAME_MESSAGE = (
    "Formato requerido: 2 letras + 3 números + nombre del caso de uso "
    "(ej: AB123GestionarUsuarios)"
)


def starts_with_infinitive(text: str | None) -> bool:
    """True when the first word of text is a Spanish infinitive."""
    if not text or not text.strip():
        return False
    first_word = text.strip().split()[0].lower()
    return first_word in SHORT_INFINITIVES or bool(INFINITIVE_RE.match(first_word))


def strip_file_extension(value: str) -> str:
    """Drop a trailing document extension from a file name."""
    return FILE_EXTENSION_RE.sub("", value.strip()).strip()


class UseCaseType(str, Enum):
    """Use case variants; each one selects its own optional field group."""

    ENTITY = "entity"
    API = "api"
    SERVICE = "service"


class EntityFieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DECIMAL = "decimal"
    DATE = "date"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    EMAIL = "email"


class TestStepStatus(str, Enum):
    PENDING = "pending"
    PASS = "pass"
    FAIL = "fail"


# Legacy single-letter statuses used by older form clients
_LEGACY_STATUS = {"": "pending", "p": "pass", "f": "fail"}


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class EntityFieldSpec(CamelModel):
    """One attribute of the entity managed by an entity use case."""

    name: str = Field(..., min_length=1)
    type: EntityFieldType = EntityFieldType.TEXT
    length: int | None = None
    mandatory: bool = False
    description: str = ""
    validation_rules: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def empty_type_is_text(cls, v: Any) -> Any:
        return v or EntityFieldType.TEXT

    @field_validator("length", mode="before")
    @classmethod
    def falsy_length_is_none(cls, v: Any) -> Any:
        if v in (None, "", 0, "0"):
            return None
        return v

    @field_validator("description", "validation_rules", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return v or ""


class TestStep(CamelModel):
    """One row of the test case table."""

    __test__ = False

    number: int = 0
    action: str = ""
    input_data: str = ""
    expected_result: str = ""
    observations: str = ""
    status: TestStepStatus = TestStepStatus.PENDING

    @field_validator("action", "input_data", "expected_result", "observations", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        if v is None:
            return TestStepStatus.PENDING
        if isinstance(v, str):
            return _LEGACY_STATUS.get(v.strip().lower(), v.strip().lower())
        return v


def renumber_test_steps(steps: list[TestStep]) -> list[TestStep]:
    """Number steps 1..N in list order, in place."""
    for index, step in enumerate(steps, start=1):
        step.number = index
    return steps


class GeneratedWireframes(CamelModel):
    """Image references (data URIs or relative paths) for the two wireframes."""

    search_wireframe: str | None = None
    form_wireframe: str | None = None


_TEXT_FIELDS = (
    "client_name",
    "project_name",
    "use_case_code",
    "use_case_name",
    "file_name",
    "description",
    "filters_description",
    "columns_description",
    "fields_description",
    "wireframes_description",
    "api_endpoint",
    "http_method",
    "request_format",
    "response_format",
    "service_frequency",
    "execution_time",
    "configuration_paths",
    "web_service_credentials",
    "preconditions",
    "postconditions",
    "test_case_objective",
    "test_case_preconditions",
)

_LIST_FIELDS = (
    "search_filters",
    "result_columns",
    "entity_fields",
    "wireframe_descriptions",
    "error_codes",
    "test_steps",
)


class UseCaseForm(CamelModel):
    """Shared field set of a use case form; no identity validation."""

    use_case_type: UseCaseType = UseCaseType.ENTITY

    client_name: str = ""
    project_name: str = ""
    use_case_code: str = ""
    use_case_name: str = ""
    file_name: str = ""
    description: str = ""

    # entity
    search_filters: list[str] = Field(default_factory=list)
    filters_description: str = ""
    result_columns: list[str] = Field(default_factory=list)
    columns_description: str = ""
    entity_fields: list[EntityFieldSpec] = Field(default_factory=list)
    fields_description: str = ""

    # api
    api_endpoint: str = ""
    http_method: str = ""
    request_format: str = ""
    response_format: str = ""
    error_codes: list[str] = Field(default_factory=list)

    # service
    service_frequency: str = ""
    execution_time: str = ""
    configuration_paths: str = ""
    web_service_credentials: str = ""

    business_rules: str = ""
    special_requirements: str = ""
    preconditions: str = ""
    postconditions: str = ""

    generate_wireframes: bool = False
    wireframe_descriptions: list[str] = Field(default_factory=list)
    wireframes_description: str = ""
    generated_wireframes: GeneratedWireframes | None = None

    generate_test_case: bool = False
    test_case_objective: str = ""
    test_case_preconditions: str = ""
    test_steps: list[TestStep] = Field(default_factory=list)

    ai_model: ProviderId = ProviderId.DEMO
    is_ai_generated: bool = Field(default=False, alias="isAIGenerated")

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("business_rules", "special_requirements", mode="before")
    @classmethod
    def join_lines(cls, v: Any) -> str:
        """Accept either one item per line or a list of items."""
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(str(item) for item in v if str(item).strip())
        return str(v)

    @field_validator("error_codes", mode="before")
    @classmethod
    def coerce_error_codes(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [code.strip() for code in v.split(",") if code.strip()]
        return [str(code).strip() for code in v if str(code).strip()]

    @field_validator("test_steps")
    @classmethod
    def renumber_steps(cls, steps: list[TestStep]) -> list[TestStep]:
        """Step numbers are always contiguous 1..N in list order."""
        return renumber_test_steps(steps)

    def remove_test_step(self, index: int) -> TestStep:
        """Remove the step at index and renumber the survivors.

        Args:
            index: Zero-based position of the step to remove

        Returns:
            The removed step

        Raises:
            IndexError: If index is out of range
        """
        removed = self.test_steps.pop(index)
        renumber_test_steps(self.test_steps)
        return removed

    @property
    def relevant_groups(self) -> tuple[str, ...]:
        """Optional field groups read for this use case type."""
        return TYPE_FIELD_GROUPS[self.use_case_type]


class FormRecord(UseCaseForm):
    """A validated use case record, the subject of generation and assembly."""

    id: str | None = None
    generated_content: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("client_name")
    @classmethod
    def client_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre del cliente es requerido")
        return v

    @field_validator("project_name")
    @classmethod
    def project_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre del proyecto es requerido")
        return v

    @field_validator("use_case_code")
    @classmethod
    def code_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El código del caso de uso es requerido")
        return v

    @field_validator("description")
    @classmethod
    def description_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("La descripción es requerida")
        return v

    @field_validator("use_case_name")
    @classmethod
    def name_starts_with_infinitive(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("El nombre del caso de uso es requerido")
        if not starts_with_infinitive(v):
            raise ValueError(INFINITIVE_MESSAGE)
        return v

    @field_validator("file_name")
    @classmethod
    def file_name_pattern(cls, v: str) -> str:
        cleaned = strip_file_extension(v)
        if not cleaned:
            raise ValueError("El nombre del archivo es requerido")
        if not FILE_NAME_RE.match(cleaned):
            raise ValueError(FILE_NAME_MESSAGE)
        return cleaned


class PartialFormRecord(UseCaseForm):
    """Draft produced by minute analysis; identity fields may still be wrong or empty."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    @model_validator(mode="after")
    def clean_file_name(self) -> "PartialFormRecord":
        if self.file_name:
            self.file_name = strip_file_extension(self.file_name)
        return self


TYPE_FIELD_GROUPS: dict[UseCaseType, tuple[str, ...]] = {
    UseCaseType.ENTITY: (
        "search_filters",
        "filters_description",
        "result_columns",
        "columns_description",
        "entity_fields",
        "fields_description",
    ),
    UseCaseType.API: (
        "api_endpoint",
        "http_method",
        "request_format",
        "response_format",
        "error_codes",
    ),
    UseCaseType.SERVICE: (
        "service_frequency",
        "execution_time",
        "configuration_paths",
        "web_service_credentials",
    ),
}


# =============================================================================
# Request / response bodies
# =============================================================================


class UseCaseGenerateResponse(CamelModel):
    success: bool = True
    use_case: dict[str, Any]
    content: str
    expanded_description: str | None = None


class UseCaseEditRequest(CamelModel):
    instructions: str = Field(..., min_length=1)
    ai_model: ProviderId = ProviderId.DEMO


class UseCaseEditResponse(CamelModel):
    success: bool = True
    use_case: dict[str, Any]
    content: str


class ImproveFieldRequest(CamelModel):
    field_name: str | None = None
    field_value: str | None = ""
    field_type: str | None = None
    context: dict[str, Any] | None = None
    ai_model: ProviderId = ProviderId.DEMO


class AnalyzeMinuteRequest(CamelModel):
    minute_content: str | None = None
    use_case_type: UseCaseType = UseCaseType.ENTITY
    ai_model: ProviderId = ProviderId.DEMO
    file_name: str | None = None


class TestCasesRequest(CamelModel):
    __test__ = False

    form_data: dict[str, Any] | None = None
    ai_model: ProviderId = ProviderId.DEMO
    suggestions: str | None = None


class TestCasesResult(CamelModel):
    __test__ = False

    objective: str
    preconditions: str
    test_steps: list[TestStep] = Field(default_factory=list)
    analysis_notes: str = ""


class ExportRequest(CamelModel):
    content: str | None = None
    file_name: str | None = None
    use_case_name: str | None = None
    form_data: dict[str, Any] | None = None
    custom_header_image: str | None = None


class WireframeRequest(CamelModel):
    type: str = Field(..., pattern="^(search|form)$")
    title: str = ""
    filters: list[str] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    fields: list[EntityFieldSpec | str] = Field(default_factory=list)
