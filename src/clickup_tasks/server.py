#!/usr/bin/env python3
"""
ClickUp Tasks MCP Server
========================
Tools MCP sobre o TaskService:
- CRUD de tasks (criar, ler, editar, deletar, mover, duplicar)
- Resolução de tasks por ID, custom ID ou nome
- Busca de tasks no workspace
- Comentários, tags, anexos e custom fields

Erros não são convertidos em texto: propagam para o runtime MCP, que os
reporta como falha da tool.
"""

import base64
import binascii
import sys
from typing import Any, Dict, List, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, ConfigDict, Field

from clickup_tasks import config
from clickup_tasks.errors import ValidationError
from clickup_tasks.formatting import (
    ResponseFormat,
    format_attachment,
    format_comments,
    format_custom_fields,
    format_summaries_compact,
    format_tags,
    format_task_markdown,
    format_tasks_compact,
    to_json,
)
from clickup_tasks.logs import configure_logging, set_new_correlation_id
from clickup_tasks.models import (
    CreateTaskData,
    CustomFieldUpdate,
    DetailedTaskResponse,
    FindTasksParams,
    OrderBy,
    TaskFilters,
    UpdateTaskData,
)
from clickup_tasks.task.service import TaskService

mcp = FastMCP("clickup_tasks_mcp")

# ============================================================================
# SERVIÇO
# ============================================================================

_service: Optional[TaskService] = None


def get_task_service() -> TaskService:
    """Retorna o TaskService configurado a partir do ambiente."""
    global _service
    if _service is None:
        _service = TaskService(
            config.API_KEY,
            config.TEAM_ID,
            base_url=config.API_BASE_URL,
            read_only=config.READ_ONLY_MODE
        )
    return _service


def _start_tool(tool_name: str, **details: Any) -> None:
    cid = set_new_correlation_id()
    logger.bind(correlation_id=cid).info(f"{tool_name} | {details}")


# ============================================================================
# MODELOS DE INPUT
# ============================================================================

class GetTaskInput(BaseModel):
    """Input para buscar uma task específica."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task (ou custom ID, ex: DEV-123)", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class GetTasksInput(BaseModel):
    """Input para listar tasks de uma list."""
    model_config = ConfigDict(str_strip_whitespace=True)
    list_id: str = Field(..., description="ID da list", min_length=1)
    page: int = Field(default=0, description="Página (começa em 0)", ge=0)
    include_closed: bool = Field(default=False, description="Incluir tasks fechadas")
    subtasks: bool = Field(default=False, description="Incluir subtasks")
    order_by: Optional[OrderBy] = Field(default=None, description="Ordenar por: id, created, updated, due_date")
    statuses: Optional[List[str]] = Field(default=None, description="Filtrar por status")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class CreateTaskInput(CreateTaskData):
    """Input para criar uma nova task."""
    list_id: str = Field(..., description="ID da list onde criar a task", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class UpdateTaskInput(UpdateTaskData):
    """Input para atualizar uma task existente."""
    task_id: str = Field(..., description="ID da task a atualizar", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class UpdateTaskByNameInput(UpdateTaskData):
    """Input para atualizar uma task identificada pelo nome exato."""
    list_id: str = Field(..., description="ID da list da task", min_length=1)
    task_name: str = Field(..., description="Nome exato da task", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class DeleteTaskInput(BaseModel):
    """Input para deletar uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task a deletar", min_length=1)


class MoveTaskInput(BaseModel):
    """Input para mover uma task para outra list."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task a mover", min_length=1)
    list_id: str = Field(..., description="ID da list de destino", min_length=1)


class DuplicateTaskInput(BaseModel):
    """Input para duplicar uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task a duplicar", min_length=1)
    list_id: Optional[str] = Field(default=None, description="ID da list de destino (default: a mesma)")


class FindTasksInput(FindTasksParams):
    """Input para localizar tasks por ID, custom ID ou nome."""
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class GetWorkspaceTasksInput(TaskFilters):
    """Input para busca filtrada de tasks em todo o workspace."""
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class GetTaskCommentsInput(BaseModel):
    """Input para buscar comentários de uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    start: Optional[int] = Field(default=None, description="Timestamp (ms) do último comentário já lido")
    start_id: Optional[str] = Field(default=None, description="ID do último comentário já lido")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class CreateTaskCommentInput(BaseModel):
    """Input para criar comentário em uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    comment_text: str = Field(..., description="Texto do comentário", min_length=1)
    assignee: Optional[int] = Field(default=None, description="ID do usuário a atribuir")
    notify_all: bool = Field(default=False, description="Notificar todos")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class TaskTagsInput(BaseModel):
    """Input para listar tags de uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class TagToTaskInput(BaseModel):
    """Input para adicionar/remover tag de uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    tag_name: str = Field(..., description="Nome da tag", min_length=1)


class UpdateTaskTagsInput(BaseModel):
    """Input para substituir as tags de uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    tag_names: List[str] = Field(..., description="Conjunto final de tags da task")


class SetCustomFieldValueInput(BaseModel):
    """Input para definir valor de um custom field em uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    field_id: str = Field(..., description="ID do custom field", min_length=1)
    value: Any = Field(
        ...,
        description="Valor do campo. Formato varia por tipo: text='string', number=123, drop_down='option_id', checkbox=true/false, date=timestamp_ms, labels=['id1','id2'], users={'add':['id'],'rem':['id']}"
    )
    value_options: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Opções adicionais. Para date: {'time': true} para mostrar horário"
    )


class SetCustomFieldValuesInput(BaseModel):
    """Input para definir vários custom fields (sequencial, sem rollback)."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    custom_fields: List[CustomFieldUpdate] = Field(..., description="Lista de {'id': field_id, 'value': valor}", min_length=1)


class CustomFieldInput(BaseModel):
    """Input para ler ou remover um custom field."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    field_id: str = Field(..., description="ID do custom field", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class GetCustomFieldValuesInput(BaseModel):
    """Input para listar os custom fields de uma task."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


class UploadAttachmentInput(BaseModel):
    """Input para anexar arquivo a uma task (base64 ou URL)."""
    model_config = ConfigDict(str_strip_whitespace=True)
    task_id: str = Field(..., description="ID da task", min_length=1)
    file_name: Optional[str] = Field(default=None, description="Nome do arquivo (obrigatório com file_data)")
    file_data: Optional[str] = Field(default=None, description="Conteúdo do arquivo em base64")
    file_url: Optional[str] = Field(default=None, description="URL do arquivo a baixar e anexar")
    auth_header: Optional[str] = Field(default=None, description="Header Authorization para baixar de file_url")
    response_format: ResponseFormat = Field(default=ResponseFormat.MARKDOWN)


def _payload(params: BaseModel, model: type) -> Any:
    """Extrai do input da tool apenas os campos do modelo de domínio."""
    return model.model_validate(params.model_dump(include=set(model.model_fields)))


# ============================================================================
# TOOLS - TASKS
# ============================================================================

@mcp.tool(
    name="clickup_get_task",
    annotations={
        "title": "Buscar Task Específica",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_task(params: GetTaskInput) -> str:
    """
    Busca detalhes completos de uma task pelo ID ou custom ID.

    Returns:
        Detalhes da task incluindo status, datas, tags e custom fields.
    """
    _start_tool("get_task", task_id=params.task_id)
    task = await get_task_service().find_tasks(FindTasksParams(task_id=params.task_id))

    if params.response_format == ResponseFormat.JSON:
        return to_json(task)
    return format_task_markdown(task)


@mcp.tool(
    name="clickup_get_tasks",
    annotations={
        "title": "Listar Tasks de uma List",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_tasks(params: GetTasksInput) -> str:
    """Lista as tasks de uma list (uma página de até 100)."""
    _start_tool("get_tasks", list_id=params.list_id, page=params.page)
    filters = TaskFilters(
        page=params.page,
        include_closed=params.include_closed,
        subtasks=params.subtasks,
        order_by=params.order_by,
        statuses=params.statuses
    )
    tasks = await get_task_service().get_tasks(params.list_id, filters)

    if params.response_format == ResponseFormat.JSON:
        return to_json({"tasks": tasks, "page": params.page})
    return format_tasks_compact(tasks)


@mcp.tool(
    name="clickup_create_task",
    annotations={
        "title": "Criar Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False
    }
)
async def create_task(params: CreateTaskInput) -> str:
    """
    Cria uma nova task em uma list.

    Custom fields podem ser definidos na criação: [{'id': 'field_id', 'value': valor}].
    """
    _start_tool("create_task", list_id=params.list_id, name=params.name)
    task = await get_task_service().create_task(params.list_id, _payload(params, CreateTaskData))

    if params.response_format == ResponseFormat.JSON:
        return to_json(task)
    return f"✅ Task '{task.name}' criada com sucesso!\n- **ID:** `{task.id}`\n- **URL:** {task.url}"


@mcp.tool(
    name="clickup_update_task",
    annotations={
        "title": "Atualizar Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def update_task(params: UpdateTaskInput) -> str:
    """Atualiza uma task existente. Apenas os campos informados são enviados."""
    _start_tool("update_task", task_id=params.task_id)
    task = await get_task_service().update_task(params.task_id, _payload(params, UpdateTaskData))

    if params.response_format == ResponseFormat.JSON:
        return to_json(task)
    return f"✅ Task '{task.name}' atualizada com sucesso!"


@mcp.tool(
    name="clickup_update_task_by_name",
    annotations={
        "title": "Atualizar Task pelo Nome",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def update_task_by_name(params: UpdateTaskByNameInput) -> str:
    """
    Atualiza a task de nome exato dentro de uma list.

    Falha sem atualizar nada se o nome não existir ou se houver mais de uma
    task com esse nome.
    """
    _start_tool("update_task_by_name", list_id=params.list_id, task_name=params.task_name)
    task = await get_task_service().update_task_by_name(
        params.list_id,
        params.task_name,
        _payload(params, UpdateTaskData)
    )

    if params.response_format == ResponseFormat.JSON:
        return to_json(task)
    return f"✅ Task '{task.name}' (`{task.id}`) atualizada com sucesso!"


@mcp.tool(
    name="clickup_delete_task",
    annotations={
        "title": "Deletar Task",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def delete_task(params: DeleteTaskInput) -> str:
    """Deleta uma task. ATENÇÃO: Esta ação é irreversível!"""
    _start_tool("delete_task", task_id=params.task_id)
    await get_task_service().delete_task(params.task_id)
    return f"✅ Task `{params.task_id}` deletada com sucesso!"


@mcp.tool(
    name="clickup_move_task",
    annotations={
        "title": "Mover Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def move_task(params: MoveTaskInput) -> str:
    """Move uma task para outra list."""
    _start_tool("move_task", task_id=params.task_id, list_id=params.list_id)
    await get_task_service().move_task(params.task_id, params.list_id)
    return f"✅ Task `{params.task_id}` movida para list `{params.list_id}` com sucesso!"


@mcp.tool(
    name="clickup_duplicate_task",
    annotations={
        "title": "Duplicar Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False
    }
)
async def duplicate_task(params: DuplicateTaskInput) -> str:
    """Cria uma cópia de uma task existente."""
    _start_tool("duplicate_task", task_id=params.task_id, list_id=params.list_id)
    task = await get_task_service().duplicate_task(params.task_id, params.list_id)
    return f"✅ Task duplicada com sucesso!\n- **Nova ID:** `{task.id}`\n- **Nome:** {task.name}\n- **URL:** {task.url}"


# ============================================================================
# TOOLS - BUSCA
# ============================================================================

@mcp.tool(
    name="clickup_find_tasks",
    annotations={
        "title": "Localizar Tasks",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def find_tasks(params: FindTasksInput) -> str:
    """
    Localiza tasks por ID, custom ID ou nome.

    - task_id/custom_task_id têm prioridade sobre o nome.
    - Com list_id ou list_name a busca fica restrita à list; sem eles,
      todo o workspace é varrido.
    - Vários resultados geram erro, a menos que allow_multiple_matches
      ou use_smart_disambiguation (escolhe a mais recente) sejam usados.
    """
    _start_tool("find_tasks", **params.model_dump(exclude_defaults=True, exclude={"response_format"}))
    result = await get_task_service().find_tasks(_payload(params, FindTasksParams))

    if params.response_format == ResponseFormat.JSON:
        return to_json(result)
    if result is None:
        return f"Nenhuma task encontrada para '{params.task_name}'."
    if isinstance(result, list):
        return format_tasks_compact(result)
    return format_task_markdown(result)


@mcp.tool(
    name="clickup_get_workspace_tasks",
    annotations={
        "title": "Buscar Tasks do Workspace (Filtros Avançados)",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_workspace_tasks(params: GetWorkspaceTasksInput) -> str:
    """
    Busca tasks em todo o workspace com filtros avançados.

    detail_level=summary (default) devolve 1 linha por task;
    detailed devolve as tasks completas.
    """
    _start_tool("get_workspace_tasks", page=params.page, detail_level=params.detail_level.value)
    response = await get_task_service().get_workspace_tasks(_payload(params, TaskFilters))

    if params.response_format == ResponseFormat.JSON:
        return to_json(response)
    if isinstance(response, DetailedTaskResponse):
        return "\n\n".join(format_task_markdown(t) for t in response.tasks) or "Nenhuma task encontrada."
    return format_summaries_compact(response.summaries, response.has_more, response.next_page)


# ============================================================================
# TOOLS - COMMENTS
# ============================================================================

@mcp.tool(
    name="clickup_get_task_comments",
    annotations={
        "title": "Listar Comentários da Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_task_comments(params: GetTaskCommentsInput) -> str:
    """Lista os comentários de uma task (25 por página)."""
    _start_tool("get_task_comments", task_id=params.task_id)
    comments = await get_task_service().get_task_comments(params.task_id, params.start, params.start_id)

    if params.response_format == ResponseFormat.JSON:
        return to_json({"comments": comments})
    return format_comments(comments)


@mcp.tool(
    name="clickup_create_task_comment",
    annotations={
        "title": "Criar Comentário",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": False
    }
)
async def create_task_comment(params: CreateTaskCommentInput) -> str:
    """Adiciona um comentário a uma task."""
    _start_tool("create_task_comment", task_id=params.task_id)
    comment = await get_task_service().create_task_comment(
        params.task_id,
        params.comment_text,
        params.notify_all,
        params.assignee
    )

    if params.response_format == ResponseFormat.JSON:
        return to_json(comment)
    return f"✅ Comentário adicionado com sucesso! (`{comment.id}`)"


# ============================================================================
# TOOLS - TAGS
# ============================================================================

@mcp.tool(
    name="clickup_get_task_tags",
    annotations={
        "title": "Listar Tags da Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_task_tags(params: TaskTagsInput) -> str:
    """Lista as tags de uma task."""
    _start_tool("get_task_tags", task_id=params.task_id)
    tags = await get_task_service().get_task_tags(params.task_id)

    if params.response_format == ResponseFormat.JSON:
        return to_json({"tags": tags})
    return format_tags(tags)


@mcp.tool(
    name="clickup_add_tag_to_task",
    annotations={
        "title": "Adicionar Tag à Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def add_tag_to_task(params: TagToTaskInput) -> str:
    """
    Adiciona uma tag a uma task.

    A tag pertence ao space da task.
    """
    _start_tool("add_tag_to_task", task_id=params.task_id, tag_name=params.tag_name)
    await get_task_service().add_tag_to_task(params.task_id, params.tag_name)
    return f"✅ Tag '{params.tag_name}' adicionada à task!"


@mcp.tool(
    name="clickup_remove_tag_from_task",
    annotations={
        "title": "Remover Tag da Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def remove_tag_from_task(params: TagToTaskInput) -> str:
    """Remove uma tag de uma task."""
    _start_tool("remove_tag_from_task", task_id=params.task_id, tag_name=params.tag_name)
    await get_task_service().remove_tag_from_task(params.task_id, params.tag_name)
    return f"✅ Tag '{params.tag_name}' removida da task!"


@mcp.tool(
    name="clickup_update_task_tags",
    annotations={
        "title": "Substituir Tags da Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def update_task_tags(params: UpdateTaskTagsInput) -> str:
    """Deixa a task exatamente com as tags informadas."""
    _start_tool("update_task_tags", task_id=params.task_id, tag_names=params.tag_names)
    await get_task_service().update_task_tags(params.task_id, params.tag_names)
    return f"✅ Tags da task `{params.task_id}` atualizadas: {', '.join(params.tag_names) or '(nenhuma)'}"


# ============================================================================
# TOOLS - CUSTOM FIELDS
# ============================================================================

@mcp.tool(
    name="clickup_set_custom_field_value",
    annotations={
        "title": "Definir Valor de Custom Field",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def set_custom_field_value(params: SetCustomFieldValueInput) -> str:
    """
    Define o valor de um custom field em uma task existente.

    Para campos do tipo drop_down, use o ID da opção (não o nome).
    """
    _start_tool("set_custom_field_value", task_id=params.task_id, field_id=params.field_id)
    await get_task_service().set_custom_field_value(
        params.task_id,
        params.field_id,
        params.value,
        params.value_options
    )
    return f"✅ Custom field atualizado com sucesso!\n- **Task:** `{params.task_id}`\n- **Field:** `{params.field_id}`"


@mcp.tool(
    name="clickup_set_custom_field_values",
    annotations={
        "title": "Definir Vários Custom Fields",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def set_custom_field_values(params: SetCustomFieldValuesInput) -> str:
    """
    Define vários custom fields, um de cada vez, na ordem informada.

    Se um campo falhar, os anteriores permanecem gravados e os seguintes
    não são enviados.
    """
    _start_tool("set_custom_field_values", task_id=params.task_id, fields=[f.id for f in params.custom_fields])
    await get_task_service().set_custom_field_values(params.task_id, params.custom_fields)
    return f"✅ {len(params.custom_fields)} custom fields atualizados na task `{params.task_id}`!"


@mcp.tool(
    name="clickup_get_custom_field_values",
    annotations={
        "title": "Listar Custom Fields da Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_custom_field_values(params: GetCustomFieldValuesInput) -> str:
    """Lista os custom fields de uma task com seus valores."""
    _start_tool("get_custom_field_values", task_id=params.task_id)
    fields = await get_task_service().get_custom_field_values(params.task_id)

    if params.response_format == ResponseFormat.JSON:
        return to_json(fields)
    return format_custom_fields(fields)


@mcp.tool(
    name="clickup_get_custom_field_value",
    annotations={
        "title": "Buscar Custom Field da Task",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def get_custom_field_value(params: CustomFieldInput) -> str:
    """Retorna um custom field da task. Falha se o campo não existe na task."""
    _start_tool("get_custom_field_value", task_id=params.task_id, field_id=params.field_id)
    field = await get_task_service().get_custom_field_value(params.task_id, params.field_id)

    if params.response_format == ResponseFormat.JSON:
        return to_json(field)
    return format_custom_fields({params.field_id: field})


@mcp.tool(
    name="clickup_remove_custom_field_value",
    annotations={
        "title": "Remover Valor de Custom Field",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def remove_custom_field_value(params: CustomFieldInput) -> str:
    """Remove o valor de um custom field de uma task (deixa o campo vazio)."""
    _start_tool("remove_custom_field_value", task_id=params.task_id, field_id=params.field_id)
    await get_task_service().remove_custom_field_value(params.task_id, params.field_id)
    return f"✅ Valor do custom field removido!\n- **Task:** `{params.task_id}`\n- **Field:** `{params.field_id}`"


# ============================================================================
# TOOLS - ANEXOS
# ============================================================================

@mcp.tool(
    name="clickup_upload_attachment",
    annotations={
        "title": "Anexar Arquivo à Task",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def upload_attachment(params: UploadAttachmentInput) -> str:
    """
    Anexa um arquivo a uma task.

    Informe file_data (base64) + file_name, ou file_url (o arquivo é baixado
    e reenviado; file_name é opcional).
    """
    _start_tool("upload_attachment", task_id=params.task_id, file_name=params.file_name, file_url=params.file_url)
    service = get_task_service()

    if bool(params.file_data) == bool(params.file_url):
        raise ValidationError("Informe exatamente um entre file_data e file_url")

    if params.file_url:
        attachment = await service.upload_task_attachment_from_url(
            params.task_id,
            params.file_url,
            params.file_name,
            params.auth_header
        )
    else:
        if not params.file_name:
            raise ValidationError("file_name é obrigatório junto com file_data")
        try:
            file_bytes = base64.b64decode(params.file_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"file_data não é base64 válido: {e}") from e
        attachment = await service.upload_task_attachment(params.task_id, file_bytes, params.file_name)

    if params.response_format == ResponseFormat.JSON:
        return to_json(attachment)
    return format_attachment(attachment)


# ============================================================================
# MAIN
# ============================================================================

def main() -> None:
    """Inicializa logging, valida a configuração e sobe o servidor MCP."""
    configure_logging(config.LOG_LEVEL, config.LOG_FILE or None)
    try:
        config.validate_config()
        get_task_service()
        logger.info("Servidor ClickUp Tasks MCP iniciando")
        mcp.run()
    except Exception as e:
        logger.opt(exception=e).critical(f"Falha fatal no bootstrap: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
