"""
Núcleo do serviço de tasks.

Concentra o acesso HTTP (`make_request`), a tradução de erros
(`handle_error`) e o log de operações (`log_operation`). Os módulos de busca,
comentários, tags, anexos e custom fields recebem uma instância deste núcleo
por composição.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from loguru import logger

from clickup_tasks import config
from clickup_tasks.client import ClickUpClient
from clickup_tasks.errors import (
    ClickUpAPIError,
    ClickUpError,
    ClickUpServiceError,
    NotFoundError,
    ReadOnlyModeError,
    ValidationError,
)
from clickup_tasks.models import CreateTaskData, Task, TaskFilters, UpdateTaskData

T = TypeVar("T")


class TaskServiceCore:
    """Operações básicas de task e infraestrutura compartilhada."""

    def __init__(
        self,
        api_key: str,
        team_id: str,
        base_url: Optional[str] = None,
        client: Optional[ClickUpClient] = None,
        read_only: bool = False
    ):
        self.api_key = api_key
        self.team_id = team_id
        self.base_url = base_url or config.API_BASE_URL
        self.read_only = read_only
        self.client = client or ClickUpClient(api_key, base_url=self.base_url)

    # ------------------------------------------------------------------
    # Infraestrutura
    # ------------------------------------------------------------------

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Registra a operação e seus parâmetros antes da execução."""
        logger.info(f"[TaskService] {operation} | {details or {}}")

    async def make_request(self, call: Callable[[], Awaitable[T]]) -> T:
        """Executa uma chamada ao adaptador HTTP. Uma tentativa, sem retry."""
        return await call()

    def handle_error(self, error: Exception, message: str) -> ClickUpError:
        """
        Traduz uma exceção em erro do serviço com contexto.

        Erros ClickUpError mantêm o tipo (NotFound, Ambiguous, API...) e
        ganham `message` como prefixo; qualquer outra exceção vira
        ClickUpServiceError. O chamador deve relançar o retorno.
        """
        if isinstance(error, ClickUpError):
            wrapped = error.with_context(message)
        else:
            wrapped = ClickUpServiceError(f"{message}: {error}")
        logger.debug(f"Erro traduzido: {wrapped} ({wrapped.code.value})")
        return wrapped

    def check_write_permission(self, operation: str) -> None:
        """
        Verifica se operações de escrita são permitidas.

        Raises:
            ReadOnlyModeError: Se o serviço está em modo read-only
        """
        if self.read_only:
            raise ReadOnlyModeError(
                f"Operação '{operation}' bloqueada: servidor em modo READ_ONLY. "
                f"Para habilitar escrita, configure READ_ONLY_MODE=false"
            )

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    async def get_task(self, task_id: str) -> Task:
        """
        Busca uma task pelo ID.

        Raises:
            NotFoundError: Se a task não existe
        """
        self.log_operation("get_task", {"task_id": task_id})
        try:
            data = await self.make_request(
                lambda: self.client.get(f"/task/{task_id}", params={"include_subtasks": True})
            )
            return Task.model_validate(data)
        except ClickUpAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(
                    f"Task '{task_id}' não encontrada",
                    context={"task_id": task_id}
                ) from e
            raise self.handle_error(e, f"Falha ao buscar task '{task_id}'") from e
        except Exception as e:
            raise self.handle_error(e, f"Falha ao buscar task '{task_id}'") from e

    async def get_task_by_custom_id(self, custom_task_id: str) -> Task:
        """Busca uma task pelo custom ID (ex: DEV-123) dentro do workspace."""
        self.log_operation("get_task_by_custom_id", {"custom_task_id": custom_task_id})
        params = {"custom_task_ids": True, "team_id": self.team_id, "include_subtasks": True}
        try:
            data = await self.make_request(lambda: self.client.get(f"/task/{custom_task_id}", params=params))
            return Task.model_validate(data)
        except ClickUpAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(
                    f"Task com custom ID '{custom_task_id}' não encontrada",
                    context={"custom_task_id": custom_task_id}
                ) from e
            raise self.handle_error(e, f"Falha ao buscar task '{custom_task_id}'") from e
        except Exception as e:
            raise self.handle_error(e, f"Falha ao buscar task '{custom_task_id}'") from e

    async def get_tasks(self, list_id: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        """Lista as tasks de uma list (uma página)."""
        filters = filters or TaskFilters()
        self.log_operation("get_tasks", {"list_id": list_id, "filters": filters.to_query_params()})
        try:
            data = await self.make_request(
                lambda: self.client.get(f"/list/{list_id}/task", params=filters.to_query_params())
            )
            return [Task.model_validate(t) for t in data.get("tasks", [])]
        except Exception as e:
            raise self.handle_error(e, f"Falha ao listar tasks da list '{list_id}'") from e

    async def get_subtasks(self, task_id: str) -> List[Task]:
        self.log_operation("get_subtasks", {"task_id": task_id})
        try:
            data = await self.make_request(
                lambda: self.client.get(f"/task/{task_id}", params={"include_subtasks": True})
            )
            return [Task.model_validate(t) for t in data.get("subtasks") or []]
        except Exception as e:
            raise self.handle_error(e, f"Falha ao buscar subtasks de '{task_id}'") from e

    # ------------------------------------------------------------------
    # Escrita
    # ------------------------------------------------------------------

    async def create_task(self, list_id: str, task_data: CreateTaskData) -> Task:
        self.log_operation("create_task", {"list_id": list_id, "name": task_data.name})
        try:
            self.check_write_permission("create_task")
            data = await self.make_request(
                lambda: self.client.post(f"/list/{list_id}/task", json_data=task_data.to_payload())
            )
            return Task.model_validate(data)
        except Exception as e:
            raise self.handle_error(e, f"Falha ao criar task na list '{list_id}'") from e

    async def update_task(self, task_id: str, update_data: UpdateTaskData) -> Task:
        payload = update_data.to_payload()
        self.log_operation("update_task", {"task_id": task_id, "update": payload})
        try:
            self.check_write_permission("update_task")
            if not payload:
                raise ValidationError("Nenhum campo informado para atualização")
            data = await self.make_request(
                lambda: self.client.put(f"/task/{task_id}", json_data=payload)
            )
            return Task.model_validate(data)
        except Exception as e:
            raise self.handle_error(e, f"Falha ao atualizar task '{task_id}'") from e

    async def delete_task(self, task_id: str) -> bool:
        self.log_operation("delete_task", {"task_id": task_id})
        try:
            self.check_write_permission("delete_task")
            await self.make_request(lambda: self.client.delete(f"/task/{task_id}"))
            return True
        except Exception as e:
            raise self.handle_error(e, f"Falha ao deletar task '{task_id}'") from e

    async def move_task(self, task_id: str, destination_list_id: str) -> Task:
        """
        Move uma task para outra list.

        Adiciona a task à list de destino e depois a remove da list original.
        As duas chamadas não são atômicas.
        """
        self.log_operation("move_task", {"task_id": task_id, "destination_list_id": destination_list_id})
        try:
            self.check_write_permission("move_task")
            task = await self.get_task(task_id)
            current_list_id = task.list.id if task.list else None

            await self.make_request(
                lambda: self.client.post(f"/list/{destination_list_id}/task/{task_id}")
            )
            if current_list_id and str(current_list_id) != str(destination_list_id):
                await self.make_request(
                    lambda: self.client.delete(f"/list/{current_list_id}/task/{task_id}")
                )
            return await self.get_task(task_id)
        except Exception as e:
            raise self.handle_error(e, f"Falha ao mover task '{task_id}' para a list '{destination_list_id}'") from e

    async def duplicate_task(self, task_id: str, list_id: Optional[str] = None) -> Task:
        """Cria uma cópia da task na mesma list (ou em `list_id`)."""
        self.log_operation("duplicate_task", {"task_id": task_id, "list_id": list_id})
        try:
            self.check_write_permission("duplicate_task")
            original = await self.get_task(task_id)
            target_list_id = list_id or (original.list.id if original.list else None)
            if not target_list_id:
                raise ValidationError(f"Task '{task_id}' sem list de origem; informe list_id")

            copy_data = CreateTaskData(
                name=f"{original.name} (cópia)",
                description=original.description or None,
                status=original.status.status if original.status else None,
                priority=int(original.priority["id"]) if original.priority and original.priority.get("id") else None,
                tags=[t.name for t in original.tags] or None,
                assignees=[u.id for u in original.assignees if u.id is not None] or None,
                due_date=int(original.due_date) if original.due_date else None,
            )
            return await self.create_task(target_list_id, copy_data)
        except Exception as e:
            raise self.handle_error(e, f"Falha ao duplicar task '{task_id}'") from e
