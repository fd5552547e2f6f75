"""
Testes do núcleo do serviço de tasks (CRUD, mover, duplicar, read-only).
"""
import json

import pytest
import respx
from httpx import Response
from loguru import logger

from clickup_tasks.errors import (
    ClickUpAPIError,
    ErrorCode,
    NotFoundError,
    ReadOnlyModeError,
    ValidationError,
)
from clickup_tasks.models import CreateTaskData, CustomFieldValue, TaskFilters, UpdateTaskData

API_BASE = "https://api.clickup.com/api/v2"


class TestGetTask:
    """Testes de leitura de task."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_returns_requested_id(self, service, mock_task):
        """A task retornada deve ter o ID pedido."""
        respx.get(f"{API_BASE}/task/abc123").mock(
            return_value=Response(200, json=mock_task)
        )

        task = await service.get_task("abc123")

        assert task.id == "abc123"
        assert task.name == "Notificação Extrajudicial - Pirataria - Cliente X"
        assert task.list.id == "list1"
        assert [t.name for t in task.tags] == ["urgente", "juridico"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_sends_auth_header(self, service, mock_task):
        """Deve autenticar com o token da API."""
        route = respx.get(f"{API_BASE}/task/abc123").mock(
            return_value=Response(200, json=mock_task)
        )

        await service.get_task("abc123")

        assert route.calls.last.request.headers["Authorization"] == "pk_test_token_123456789"

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_not_found(self, service):
        """404 deve virar NotFoundError."""
        respx.get(f"{API_BASE}/task/nope").mock(
            return_value=Response(404, json={"err": "Task not found", "ECODE": "ITEM_015"})
        )

        with pytest.raises(NotFoundError) as exc:
            await service.get_task("nope")

        assert "nope" in str(exc.value)
        assert exc.value.code == ErrorCode.NOT_FOUND

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_server_error_keeps_status(self, service):
        """Erros da API mantêm status e ganham contexto."""
        respx.get(f"{API_BASE}/task/abc123").mock(
            return_value=Response(500, json={"err": "Internal error"})
        )

        with pytest.raises(ClickUpAPIError) as exc:
            await service.get_task("abc123")

        assert exc.value.status_code == 500
        assert str(exc.value).startswith("Falha ao buscar task 'abc123'")

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_task_by_custom_id(self, service, mock_task):
        """Custom ID usa custom_task_ids + team_id."""
        route = respx.get(f"{API_BASE}/task/DEV-42").mock(
            return_value=Response(200, json={**mock_task, "custom_id": "DEV-42"})
        )

        task = await service.get_task_by_custom_id("DEV-42")

        params = route.calls.last.request.url.params
        assert params["custom_task_ids"] == "true"
        assert params["team_id"] == "team123"
        assert task.custom_id == "DEV-42"

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_tasks_list_filters(self, service, make_task):
        """Filtros em lista usam o formato chave[]."""
        route = respx.get(f"{API_BASE}/list/list1/task").mock(
            return_value=Response(200, json={"tasks": [make_task("t1", "A"), make_task("t2", "B")]})
        )

        tasks = await service.get_tasks("list1", TaskFilters(statuses=["open", "review"], include_closed=True))

        request = route.calls.last.request
        assert request.url.params.get_list("statuses[]") == ["open", "review"]
        assert request.url.params["include_closed"] == "true"
        assert [t.id for t in tasks] == ["t1", "t2"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_subtasks(self, service, make_task):
        """Deve retornar as subtasks da task."""
        respx.get(f"{API_BASE}/task/t1").mock(
            return_value=Response(200, json=make_task("t1", "Pai", subtasks=[make_task("t2", "Filha", parent="t1")]))
        )

        subtasks = await service.get_subtasks("t1")

        assert len(subtasks) == 1
        assert subtasks[0].parent == "t1"


class TestCustomFieldVariants:
    """Testes da união de tipos de custom field."""

    def test_variants_by_type(self, mock_task):
        """Cada tipo do ClickUp vira a variante correspondente."""
        from clickup_tasks.models import (
            DropdownFieldValue,
            NumberFieldValue,
            OpaqueFieldValue,
            Task,
            TextFieldValue,
        )

        mock_task["custom_fields"].append({"id": "field4", "name": "Fórmula", "type": "formula", "value": {"x": 1}})
        task = Task.model_validate(mock_task)

        assert isinstance(task.custom_fields["field1"], NumberFieldValue)
        assert isinstance(task.custom_fields["field2"], DropdownFieldValue)
        assert isinstance(task.custom_fields["field3"], TextFieldValue)
        assert task.custom_fields["field3"].value is None
        assert isinstance(task.custom_fields["field4"], OpaqueFieldValue)
        assert task.custom_fields["field4"].value == {"x": 1}

    def test_union_accepts_plain_dict(self):
        """A união pode ser validada isoladamente."""
        from pydantic import TypeAdapter

        field = TypeAdapter(CustomFieldValue).validate_python(
            {"id": "f", "type": "checkbox", "value": True}
        )
        assert field.kind == "checkbox"
        assert field.value is True


class TestWriteOperations:
    """Testes de criação, atualização e remoção."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_create_task_sends_only_defined_fields(self, service, make_task):
        """Campos None não vão no payload."""
        route = respx.post(f"{API_BASE}/list/list1/task").mock(
            return_value=Response(200, json=make_task("new1", "Nova task"))
        )

        task = await service.create_task("list1", CreateTaskData(name="Nova task", priority=2))

        body = json.loads(route.calls.last.request.content)
        assert body == {"name": "Nova task", "priority": 2}
        assert task.id == "new1"

    @respx.mock
    @pytest.mark.asyncio
    async def test_update_task_assignees_payload(self, service, make_task):
        """assignees_add/remove viram {'add': [...], 'rem': [...]}."""
        route = respx.put(f"{API_BASE}/task/t1").mock(
            return_value=Response(200, json=make_task("t1", "Renomeada"))
        )

        await service.update_task("t1", UpdateTaskData(name="Renomeada", assignees_add=[5], assignees_remove=[7]))

        body = json.loads(route.calls.last.request.content)
        assert body == {"name": "Renomeada", "assignees": {"add": [5], "rem": [7]}}

    @respx.mock
    @pytest.mark.asyncio
    async def test_update_task_empty_payload(self, service):
        """Atualização sem campos é rejeitada antes de chamar a API."""
        route = respx.put(f"{API_BASE}/task/t1").mock(return_value=Response(200, json={}))

        with pytest.raises(ValidationError):
            await service.update_task("t1", UpdateTaskData())

        assert not route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_delete_task(self, service):
        """DELETE com 204 retorna True."""
        route = respx.delete(f"{API_BASE}/task/t1").mock(return_value=Response(204))

        assert await service.delete_task("t1") is True
        assert route.called


class TestReadOnlyMode:
    """Testes de bloqueio de escrita."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_create_blocked(self, read_only_service):
        """create_task bloqueado em READ_ONLY."""
        route = respx.post(f"{API_BASE}/list/list1/task").mock(return_value=Response(200, json={}))

        with pytest.raises(ReadOnlyModeError) as exc:
            await read_only_service.create_task("list1", CreateTaskData(name="X"))

        assert "READ_ONLY" in str(exc.value)
        assert not route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_delete_blocked(self, read_only_service):
        """delete_task bloqueado em READ_ONLY."""
        with pytest.raises(ReadOnlyModeError):
            await read_only_service.delete_task("t1")

    @respx.mock
    @pytest.mark.asyncio
    async def test_reads_allowed(self, read_only_service, mock_task):
        """Leitura continua liberada em READ_ONLY."""
        respx.get(f"{API_BASE}/task/abc123").mock(return_value=Response(200, json=mock_task))

        task = await read_only_service.get_task("abc123")
        assert task.id == "abc123"


class TestMoveAndDuplicate:
    """Testes de mover e duplicar task."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_move_task(self, service, make_task):
        """Adiciona na list de destino e remove da original."""
        respx.get(f"{API_BASE}/task/t1").mock(side_effect=[
            Response(200, json=make_task("t1", "Mover", list_id="list1")),
            Response(200, json=make_task("t1", "Mover", list_id="list2")),
        ])
        add_route = respx.post(f"{API_BASE}/list/list2/task/t1").mock(return_value=Response(200, json={}))
        remove_route = respx.delete(f"{API_BASE}/list/list1/task/t1").mock(return_value=Response(200, json={}))

        task = await service.move_task("t1", "list2")

        assert add_route.called
        assert remove_route.called
        assert task.list.id == "list2"

    @respx.mock
    @pytest.mark.asyncio
    async def test_move_task_destination_error(self, service, make_task):
        """Falha ao adicionar no destino não remove da list original."""
        respx.get(f"{API_BASE}/task/t1").mock(
            return_value=Response(200, json=make_task("t1", "Mover", list_id="list1"))
        )
        respx.post(f"{API_BASE}/list/list2/task/t1").mock(
            return_value=Response(403, json={"err": "Forbidden"})
        )
        remove_route = respx.delete(f"{API_BASE}/list/list1/task/t1").mock(return_value=Response(200, json={}))

        with pytest.raises(ClickUpAPIError) as exc:
            await service.move_task("t1", "list2")

        assert exc.value.code == ErrorCode.UNAUTHORIZED
        assert not remove_route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_duplicate_task(self, service, mock_task, make_task):
        """A cópia leva nome, prioridade e tags da original."""
        respx.get(f"{API_BASE}/task/abc123").mock(return_value=Response(200, json=mock_task))
        route = respx.post(f"{API_BASE}/list/list1/task").mock(
            return_value=Response(200, json=make_task("copy1", f"{mock_task['name']} (cópia)"))
        )

        task = await service.duplicate_task("abc123")

        body = json.loads(route.calls.last.request.content)
        assert body["name"] == "Notificação Extrajudicial - Pirataria - Cliente X (cópia)"
        assert body["priority"] == 2
        assert body["tags"] == ["urgente", "juridico"]
        assert body["assignees"] == [1]
        assert task.id == "copy1"


class TestOperationLog:
    """Registro de operações do serviço."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_operation_inputs_logged_at_info(self, service, mock_task):
        """Com LOG_LEVEL padrão (INFO), a operação e seus parâmetros aparecem no log."""
        messages = []
        sink_id = logger.add(messages.append, level="INFO", format="{level} {message}")
        respx.get(f"{API_BASE}/task/abc123").mock(return_value=Response(200, json=mock_task))

        try:
            await service.get_task("abc123")
        finally:
            logger.remove(sink_id)

        assert any(m.startswith("INFO [TaskService] get_task") and "abc123" in m for m in messages)
