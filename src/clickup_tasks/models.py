"""
Modelos de domínio do ClickUp.

O ClickUp é a fonte da verdade: estes modelos apenas tipam as respostas JSON
da API. Campos desconhecidos são preservados (extra="allow") para que nada da
resposta original se perca ao serializar de volta.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, field_validator
from pydantic import Tag as UnionTag


class ClickUpModel(BaseModel):
    """Base para recursos retornados pela API."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# ============================================================================
# REFERÊNCIAS E SUB-RECURSOS
# ============================================================================

class TaskStatus(ClickUpModel):
    status: Optional[str] = None
    color: Optional[str] = None
    type: Optional[str] = None
    orderindex: Optional[int] = None


class LocationRef(ClickUpModel):
    """Referência a list, folder ou space dentro de uma task."""
    id: Optional[str] = None
    name: Optional[str] = None
    access: Optional[bool] = None


class User(ClickUpModel):
    id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None
    color: Optional[str] = None


class Tag(ClickUpModel):
    name: str
    tag_fg: Optional[str] = None
    tag_bg: Optional[str] = None
    creator: Optional[int] = None


class Comment(ClickUpModel):
    id: str
    comment_text: Optional[str] = None
    user: Optional[User] = None
    date: Optional[str] = None
    resolved: Optional[bool] = None
    assignee: Optional[User] = None
    hist_id: Optional[str] = None

    @field_validator("id", "date", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        return str(v) if v is not None else v


class Attachment(ClickUpModel):
    id: str
    title: Optional[str] = None
    url: Optional[str] = None
    extension: Optional[str] = None
    size: Optional[int] = None
    date: Optional[str] = None
    version: Optional[str] = None
    thumbnail_small: Optional[str] = None
    thumbnail_large: Optional[str] = None

    @field_validator("id", "date", "version", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        return str(v) if v is not None else v


class ListContext(ClickUpModel):
    """Metadados da list dona de uma task (anexados sob demanda)."""
    id: str
    name: Optional[str] = None
    folder: Optional[LocationRef] = None
    space: Optional[LocationRef] = None
    task_count: Optional[int] = None


# ============================================================================
# CUSTOM FIELDS (união etiquetada pelo tipo do campo)
# ============================================================================

TEXT_FIELD_TYPES = {"text", "short_text", "email", "phone", "url"}
NUMBER_FIELD_TYPES = {"number", "currency", "emoji", "progress", "automatic_progress", "manual_progress"}
RELATION_FIELD_TYPES = {"users", "tasks", "list_relationship"}


class _CustomFieldBase(ClickUpModel):
    id: str
    name: Optional[str] = None
    type: str
    type_config: Optional[Dict[str, Any]] = None


class TextFieldValue(_CustomFieldBase):
    kind: Literal["text"] = "text"
    value: Optional[str] = None


class NumberFieldValue(_CustomFieldBase):
    kind: Literal["number"] = "number"
    # Progress chega como objeto ({"percent_complete": ...})
    value: Optional[Union[float, str, Dict[str, Any]]] = None


class DateFieldValue(_CustomFieldBase):
    kind: Literal["date"] = "date"
    value: Optional[Union[int, str]] = None


class CheckboxFieldValue(_CustomFieldBase):
    kind: Literal["checkbox"] = "checkbox"
    value: Optional[Union[bool, str]] = None


class DropdownFieldValue(_CustomFieldBase):
    kind: Literal["drop_down"] = "drop_down"
    value: Optional[Union[int, str]] = None


class LabelsFieldValue(_CustomFieldBase):
    kind: Literal["labels"] = "labels"
    value: Optional[List[Any]] = None


class RelationFieldValue(_CustomFieldBase):
    kind: Literal["relation"] = "relation"
    value: Optional[List[Any]] = None


class OpaqueFieldValue(_CustomFieldBase):
    """Tipo de campo não modelado: o valor é repassado sem interpretação."""
    kind: Literal["opaque"] = "opaque"
    value: Any = None


def custom_field_kind(field: Any) -> str:
    """Discriminador: mapeia o tipo ClickUp do campo para a variante da união."""
    if isinstance(field, dict):
        field_type = field.get("type")
    else:
        field_type = getattr(field, "type", None)
    if field_type in TEXT_FIELD_TYPES:
        return "text"
    if field_type in NUMBER_FIELD_TYPES:
        return "number"
    if field_type in RELATION_FIELD_TYPES:
        return "relation"
    if field_type in ("date", "checkbox", "drop_down", "labels"):
        return field_type
    return "opaque"


CustomFieldValue = Annotated[
    Union[
        Annotated[TextFieldValue, UnionTag("text")],
        Annotated[NumberFieldValue, UnionTag("number")],
        Annotated[DateFieldValue, UnionTag("date")],
        Annotated[CheckboxFieldValue, UnionTag("checkbox")],
        Annotated[DropdownFieldValue, UnionTag("drop_down")],
        Annotated[LabelsFieldValue, UnionTag("labels")],
        Annotated[RelationFieldValue, UnionTag("relation")],
        Annotated[OpaqueFieldValue, UnionTag("opaque")],
    ],
    Discriminator(custom_field_kind),
]


class CustomFieldUpdate(BaseModel):
    """Par (ID do campo, valor) para atualização em lote."""
    model_config = ConfigDict(str_strip_whitespace=True)
    id: str = Field(..., description="ID do custom field", min_length=1)
    value: Any = Field(..., description="Valor do campo (formato depende do tipo)")
    value_options: Optional[Dict[str, Any]] = Field(default=None, description="Opções adicionais (ex: {'time': true} para date)")


# ============================================================================
# TASK
# ============================================================================

class Task(ClickUpModel):
    id: str
    custom_id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    text_content: Optional[str] = None
    status: Optional[TaskStatus] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    date_closed: Optional[str] = None
    due_date: Optional[str] = None
    start_date: Optional[str] = None
    url: Optional[str] = None
    priority: Optional[Dict[str, Any]] = None
    parent: Optional[str] = None
    assignees: List[User] = Field(default_factory=list)
    tags: List[Tag] = Field(default_factory=list)
    custom_fields: Dict[str, CustomFieldValue] = Field(default_factory=dict)
    attachments: List[Attachment] = Field(default_factory=list)
    # "list" sombreia o builtin no corpo da classe: manter após os default_factory=list
    list: Optional[LocationRef] = None
    folder: Optional[LocationRef] = None
    space: Optional[LocationRef] = None
    list_context: Optional[ListContext] = None

    @field_validator("id", "date_created", "date_updated", "date_closed", "due_date", "start_date", mode="before")
    @classmethod
    def _coerce_str(cls, v):
        return str(v) if v is not None else v

    @field_validator("custom_fields", mode="before")
    @classmethod
    def _fields_by_id(cls, v):
        # A API devolve uma lista; o domínio trabalha com ID -> valor
        if v is None:
            return {}
        if isinstance(v, list):
            return {field["id"]: field for field in v if isinstance(field, dict) and field.get("id")}
        return v

    @property
    def updated_at(self) -> int:
        """date_updated em ms (0 quando ausente)."""
        try:
            return int(self.date_updated) if self.date_updated else 0
        except ValueError:
            return 0

    def summary(self) -> "TaskSummary":
        return TaskSummary(
            id=self.id,
            name=self.name,
            status=self.status.status if self.status else None,
            list=self.list,
            due_date=self.due_date,
            url=self.url,
            priority=self.priority.get("priority") if self.priority else None,
            tags=[t.name for t in self.tags],
        )


class TaskSummary(BaseModel):
    """Versão enxuta de uma task para listagens grandes."""
    id: str
    name: str
    status: Optional[str] = None
    due_date: Optional[str] = None
    url: Optional[str] = None
    priority: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    list: Optional[LocationRef] = None


# ============================================================================
# FILTROS E PARÂMETROS
# ============================================================================

class OrderBy(str, Enum):
    """Opções de ordenação para listagem de tasks."""
    ID = "id"
    CREATED = "created"
    UPDATED = "updated"
    DUE_DATE = "due_date"


class DetailLevel(str, Enum):
    SUMMARY = "summary"
    DETAILED = "detailed"


class TaskFilters(BaseModel):
    """Filtros de consulta de tasks (list, view ou workspace)."""
    model_config = ConfigDict(str_strip_whitespace=True)
    page: int = Field(default=0, ge=0)
    order_by: Optional[OrderBy] = None
    reverse: Optional[bool] = None
    subtasks: Optional[bool] = None
    archived: Optional[bool] = None
    include_closed: Optional[bool] = None
    statuses: Optional[List[str]] = None
    assignees: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    space_ids: Optional[List[str]] = None
    project_ids: Optional[List[str]] = Field(default=None, description="IDs de folders")
    list_ids: Optional[List[str]] = None
    due_date_gt: Optional[int] = None
    due_date_lt: Optional[int] = None
    date_created_gt: Optional[int] = None
    date_created_lt: Optional[int] = None
    date_updated_gt: Optional[int] = None
    date_updated_lt: Optional[int] = None
    detail_level: DetailLevel = DetailLevel.SUMMARY

    def to_query_params(self) -> Dict[str, Any]:
        """Parâmetros de query para a API (sem campos vazios nem detail_level)."""
        data = self.model_dump(exclude_none=True, exclude={"detail_level"}, mode="json")
        return data


class FindTasksParams(BaseModel):
    """Referência (frouxa) a uma ou mais tasks para resolução."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: Optional[str] = None
    custom_task_id: Optional[str] = None
    task_name: Optional[str] = None
    list_id: Optional[str] = None
    list_name: Optional[str] = None
    allow_multiple_matches: bool = False
    use_smart_disambiguation: bool = False
    include_full_details: bool = False
    include_list_context: bool = False
    require_exact_match: bool = False


class CreateTaskData(BaseModel):
    """Payload de criação de task (apenas campos definidos são enviados)."""
    model_config = ConfigDict(str_strip_whitespace=True)
    name: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    markdown_description: Optional[str] = None
    assignees: Optional[List[int]] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    due_date: Optional[int] = None
    due_date_time: Optional[bool] = None
    start_date: Optional[int] = None
    start_date_time: Optional[bool] = None
    time_estimate: Optional[int] = None
    notify_all: Optional[bool] = None
    parent: Optional[str] = None
    custom_fields: Optional[List[Dict[str, Any]]] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UpdateTaskData(BaseModel):
    """Payload de atualização de task (apenas campos definidos são enviados)."""
    model_config = ConfigDict(str_strip_whitespace=True)
    name: Optional[str] = None
    description: Optional[str] = None
    markdown_description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[int] = Field(default=None, ge=1, le=4)
    due_date: Optional[int] = None
    due_date_time: Optional[bool] = None
    start_date: Optional[int] = None
    start_date_time: Optional[bool] = None
    time_estimate: Optional[int] = None
    archived: Optional[bool] = None
    parent: Optional[str] = None
    assignees_add: Optional[List[int]] = None
    assignees_remove: Optional[List[int]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude_none=True, exclude={"assignees_add", "assignees_remove"})
        if self.assignees_add or self.assignees_remove:
            payload["assignees"] = {}
            if self.assignees_add:
                payload["assignees"]["add"] = self.assignees_add
            if self.assignees_remove:
                payload["assignees"]["rem"] = self.assignees_remove
        return payload


# ============================================================================
# RESPOSTAS PAGINADAS
# ============================================================================

class WorkspaceTasksResponse(BaseModel):
    summaries: List[TaskSummary]
    total_count: int
    has_more: bool
    next_page: int


class DetailedTaskResponse(BaseModel):
    tasks: List[Task]
    total_count: int
    has_more: bool
    next_page: int
