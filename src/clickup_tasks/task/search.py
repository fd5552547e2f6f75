"""
Busca e resolução de tasks.

Transforma uma referência frouxa (ID, custom ID ou nome, com ou sem list)
na task, ou nas tasks, que o chamador quis dizer. Ordem de resolução:

1. `task_id` / `custom_task_id`: busca direta, ignora o nome.
2. `task_name` + `list_id`/`list_name`: varre a list. Match exato primeiro;
   sem `require_exact_match`, cai para case-insensitive, substring e fuzzy.
3. `task_name` sozinho: varre o workspace e filtra por igualdade de nome.
4. Vários matches sem `allow_multiple_matches`: aplica a política de
   desambiguação (se habilitada) ou falha com AmbiguousMatchError.
5. `include_full_details` / `include_list_context` moldam o resultado.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple, Union

from loguru import logger
from rapidfuzz import fuzz, process, utils

from clickup_tasks import config
from clickup_tasks.errors import AmbiguousMatchError, NotFoundError, ValidationError
from clickup_tasks.models import (
    DetailLevel,
    DetailedTaskResponse,
    FindTasksParams,
    ListContext,
    Task,
    TaskFilters,
    UpdateTaskData,
    WorkspaceTasksResponse,
)
from clickup_tasks.task.core import TaskServiceCore
from clickup_tasks.workspace import WorkspaceService

# A API do ClickUp pagina tasks em blocos de 100
PAGE_SIZE = 100

CUSTOM_ID_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*-\d+$")

FindTasksResult = Union[Task, List[Task], None]

# Recebe os candidatos empatados e devolve o escolhido, ou None se inconclusivo
DisambiguationPolicy = Callable[[List[Task]], Optional[Task]]


def most_recently_updated(candidates: List[Task]) -> Optional[Task]:
    """
    Política padrão: escolhe a task atualizada mais recentemente.

    Empate no date_updated é inconclusivo.
    """
    if not candidates:
        return None
    ordered = sorted(candidates, key=lambda t: t.updated_at, reverse=True)
    if len(ordered) > 1 and ordered[0].updated_at == ordered[1].updated_at:
        return None
    return ordered[0]


def looks_like_custom_id(task_id: str) -> bool:
    """IDs no formato PREFIXO-123 são custom IDs do ClickUp."""
    return bool(CUSTOM_ID_PATTERN.match(task_id))


def match_task_names(
    tasks: List[Task],
    task_name: str,
    require_exact_match: bool = False,
    fuzzy_threshold: float = config.FUZZY_MATCH_THRESHOLD
) -> List[Task]:
    """
    Filtra tasks pelo nome, em camadas. A primeira camada com resultado vence.

    Camadas: exato (case-sensitive); depois, se permitido, igualdade
    case-insensitive, substring case-insensitive e similaridade fuzzy
    (rapidfuzz WRatio >= fuzzy_threshold), ordenada por relevância.
    """
    exact = [t for t in tasks if t.name == task_name]
    if exact or require_exact_match:
        return exact

    wanted = task_name.casefold()
    same_name = [t for t in tasks if t.name.casefold() == wanted]
    if same_name:
        return same_name

    containing = [t for t in tasks if wanted in t.name.casefold()]
    if containing:
        return containing

    choices = {i: t.name for i, t in enumerate(tasks) if t.name}
    if not choices:
        return []
    matches = process.extract(
        task_name,
        choices,
        scorer=fuzz.WRatio,
        processor=utils.default_process,
        score_cutoff=fuzzy_threshold * 100,
        limit=None
    )
    return [tasks[key] for _, _, key in matches]


class TaskServiceSearch:
    """Busca por nome, consultas no workspace e resolução de referências."""

    def __init__(
        self,
        core: TaskServiceCore,
        workspace: Optional[WorkspaceService] = None,
        disambiguation: DisambiguationPolicy = most_recently_updated,
        fuzzy_threshold: float = config.FUZZY_MATCH_THRESHOLD,
        max_pages: int = config.SEARCH_MAX_PAGES
    ):
        self.core = core
        self.workspace = workspace or WorkspaceService(core)
        self.disambiguation = disambiguation
        self.fuzzy_threshold = fuzzy_threshold
        self.max_pages = max_pages

    # ------------------------------------------------------------------
    # Paginação
    # ------------------------------------------------------------------

    async def _fetch_pages(self, endpoint: str, params: Dict, first_page: int = 0) -> Tuple[List[Task], bool]:
        """
        Percorre as páginas de `endpoint` até a última ou até `max_pages`.

        Returns:
            (tasks, truncated): truncated indica que o limite de páginas foi
            atingido antes da última página
        """
        tasks: List[Task] = []
        for page in range(first_page, first_page + self.max_pages):
            data = await self.core.make_request(
                lambda: self.core.client.get(endpoint, params={**params, "page": page})
            )
            page_tasks = data.get("tasks", [])
            tasks.extend(Task.model_validate(t) for t in page_tasks)
            if data.get("last_page", len(page_tasks) < PAGE_SIZE) or not page_tasks:
                return tasks, False

        logger.warning(
            f"Paginação de {endpoint} interrompida após {self.max_pages} páginas "
            f"({len(tasks)} tasks); resultado incompleto"
        )
        return tasks, True

    def _check_complete(self, truncated: bool, task_name: str) -> None:
        """Uma busca por nome incompleta não pode concluir 'nenhum' ou 'único'."""
        if truncated:
            raise ValidationError(
                f"Busca por '{task_name}' truncada após {self.max_pages} páginas; "
                f"restrinja com list_id ou use task_id",
                context={"task_name": task_name, "max_pages": self.max_pages}
            )

    async def _list_tasks(self, list_id: str, task_name: str) -> List[Task]:
        tasks, truncated = await self._fetch_pages(
            f"/list/{list_id}/task",
            {"include_closed": True, "subtasks": True}
        )
        self._check_complete(truncated, task_name)
        return tasks

    async def _workspace_name_matches(self, task_name: str, require_exact_match: bool = True) -> List[Task]:
        tasks, truncated = await self._fetch_pages(
            f"/team/{self.core.team_id}/task",
            {"include_closed": True, "subtasks": True}
        )
        self._check_complete(truncated, task_name)
        exact = [t for t in tasks if t.name == task_name]
        if exact or require_exact_match:
            return exact
        wanted = task_name.casefold()
        return [t for t in tasks if t.name.casefold() == wanted]

    # ------------------------------------------------------------------
    # Busca por nome
    # ------------------------------------------------------------------

    async def find_task_by_name(self, list_id: str, task_name: str) -> Optional[Task]:
        """
        Procura uma task pelo nome dentro de uma list.

        Returns:
            A melhor correspondência (a mais recente em caso de empate) ou None
        """
        self.core.log_operation("find_task_by_name", {"list_id": list_id, "task_name": task_name})
        try:
            matches = match_task_names(
                await self._list_tasks(list_id, task_name),
                task_name,
                fuzzy_threshold=self.fuzzy_threshold
            )
            if not matches:
                return None
            return max(matches, key=lambda t: t.updated_at)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar task '{task_name}' na list '{list_id}'") from e

    async def find_task_by_name_globally(self, task_name: str) -> Optional[Task]:
        """
        Procura uma task pelo nome exato em todo o workspace.

        Não encontrar nada não é erro: retorna None. Com vários matches,
        retorna o atualizado mais recentemente.
        """
        self.core.log_operation("find_task_by_name_globally", {"task_name": task_name})
        try:
            matches = await self._workspace_name_matches(task_name)
            if not matches:
                return None
            return max(matches, key=lambda t: t.updated_at)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar task '{task_name}' no workspace") from e

    # ------------------------------------------------------------------
    # Resolução
    # ------------------------------------------------------------------

    async def find_tasks(self, params: FindTasksParams) -> FindTasksResult:
        """
        Resolve uma referência de task.

        Returns:
            Task única; lista de tasks (apenas com allow_multiple_matches);
            None quando a busca por nome não encontra nada

        Raises:
            NotFoundError: ID inexistente ou list_name desconhecido
            AmbiguousMatchError: Vários matches sem desambiguação conclusiva
            ValidationError: Nenhum identificador informado
        """
        self.core.log_operation("find_tasks", params.model_dump(exclude_defaults=True))
        reference = params.task_id or params.custom_task_id or params.task_name
        try:
            if params.task_id or params.custom_task_id:
                task = await self._get_by_identifier(params)
                shaped = await self._shape([task], params, refetch=False)
                return shaped if params.allow_multiple_matches else shaped[0]

            if not params.task_name:
                raise ValidationError("Informe task_id, custom_task_id ou task_name")

            if params.list_id or params.list_name:
                list_id = params.list_id or await self.workspace.find_list_id_by_name(params.list_name)
                matches = match_task_names(
                    await self._list_tasks(list_id, params.task_name),
                    params.task_name,
                    require_exact_match=params.require_exact_match,
                    fuzzy_threshold=self.fuzzy_threshold
                )
            else:
                matches = await self._workspace_name_matches(
                    params.task_name,
                    require_exact_match=params.require_exact_match
                )

            if not matches:
                return None

            if len(matches) > 1 and not params.allow_multiple_matches:
                matches = [self._disambiguate(matches, params)]

            shaped = await self._shape(matches, params)
            return shaped if params.allow_multiple_matches else shaped[0]
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao localizar task '{reference}'") from e

    async def _get_by_identifier(self, params: FindTasksParams) -> Task:
        if params.custom_task_id:
            return await self.core.get_task_by_custom_id(params.custom_task_id)
        if looks_like_custom_id(params.task_id):
            return await self.core.get_task_by_custom_id(params.task_id)
        return await self.core.get_task(params.task_id)

    def _disambiguate(self, matches: List[Task], params: FindTasksParams) -> Task:
        if params.use_smart_disambiguation:
            chosen = self.disambiguation(matches)
            if chosen is not None:
                self.core.log_operation("disambiguate", {"task_name": params.task_name, "chosen": chosen.id})
                return chosen

        raise AmbiguousMatchError(
            f"{len(matches)} tasks correspondem a '{params.task_name}'; informe task_id ou list",
            candidates=[
                {
                    "id": t.id,
                    "name": t.name,
                    "list": t.list.name if t.list else None,
                    "date_updated": t.date_updated,
                }
                for t in matches
            ]
        )

    async def _shape(self, tasks: List[Task], params: FindTasksParams, refetch: bool = True) -> List[Task]:
        """Aplica include_full_details e include_list_context."""
        if params.include_full_details and refetch:
            tasks = [await self.core.get_task(t.id) for t in tasks]

        if params.include_list_context:
            contexts: Dict[str, ListContext] = {}
            shaped = []
            for task in tasks:
                list_id = task.list.id if task.list else None
                if list_id and list_id not in contexts:
                    contexts[list_id] = await self.workspace.get_list(list_id)
                shaped.append(task.model_copy(update={"list_context": contexts.get(list_id)}))
            tasks = shaped

        return tasks

    async def update_task_by_name(self, list_id: str, task_name: str, update_data: UpdateTaskData) -> Task:
        """
        Atualiza a task de nome exato `task_name` na list.

        A atualização só é enviada se o nome resolver para exatamente uma task.
        """
        self.core.log_operation("update_task_by_name", {"list_id": list_id, "task_name": task_name})
        try:
            task = await self.find_tasks(FindTasksParams(
                list_id=list_id,
                task_name=task_name,
                require_exact_match=True
            ))
            if task is None:
                raise NotFoundError(
                    f"Task '{task_name}' não encontrada na list '{list_id}'",
                    context={"list_id": list_id, "task_name": task_name}
                )
            return await self.core.update_task(task.id, update_data)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao atualizar task '{task_name}'") from e

    # ------------------------------------------------------------------
    # Consultas no workspace e em views
    # ------------------------------------------------------------------

    async def get_workspace_tasks(self, filters: Optional[TaskFilters] = None) -> Union[DetailedTaskResponse, WorkspaceTasksResponse]:
        """
        Consulta tasks de todo o workspace (uma página) com filtros.

        `detail_level=summary` devolve resumos; `detailed` devolve tasks completas.
        """
        filters = filters or TaskFilters()
        query = filters.to_query_params()
        self.core.log_operation("get_workspace_tasks", {"filters": query, "detail_level": filters.detail_level.value})
        try:
            data = await self.core.make_request(
                lambda: self.core.client.get(f"/team/{self.core.team_id}/task", params=query)
            )
            tasks = [Task.model_validate(t) for t in data.get("tasks", [])]
            has_more = not data.get("last_page", len(tasks) < PAGE_SIZE)
            page_info = {"total_count": len(tasks), "has_more": has_more, "next_page": filters.page + 1}

            if filters.detail_level == DetailLevel.DETAILED:
                return DetailedTaskResponse(tasks=tasks, **page_info)
            return WorkspaceTasksResponse(summaries=[t.summary() for t in tasks], **page_info)
        except Exception as e:
            raise self.core.handle_error(e, "Falha ao consultar tasks do workspace") from e

    async def get_task_summaries(self, filters: Optional[TaskFilters] = None) -> WorkspaceTasksResponse:
        filters = (filters or TaskFilters()).model_copy(update={"detail_level": DetailLevel.SUMMARY})
        return await self.get_workspace_tasks(filters)

    async def get_task_details(self, filters: Optional[TaskFilters] = None) -> DetailedTaskResponse:
        filters = (filters or TaskFilters()).model_copy(update={"detail_level": DetailLevel.DETAILED})
        return await self.get_workspace_tasks(filters)

    async def get_list_views(self, list_id: str) -> Optional[str]:
        """Retorna o ID da view padrão (tipo list) de uma list, ou None."""
        self.core.log_operation("get_list_views", {"list_id": list_id})
        try:
            data = await self.core.make_request(lambda: self.core.client.get(f"/list/{list_id}/view"))
            required = (data.get("required_views") or {}).get("list")
            if required and required.get("id"):
                return str(required["id"])
            for view in data.get("views", []):
                if view.get("type") == "list":
                    return str(view["id"])
            return None
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar views da list '{list_id}'") from e

    async def get_tasks_from_view(self, view_id: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        """
        Lista as tasks de uma view, página a página, até a última.

        Acima de `max_pages` páginas o resultado é parcial (com warning no
        log); continue a partir de `filters.page + max_pages`.
        """
        filters = filters or TaskFilters()
        self.core.log_operation("get_tasks_from_view", {"view_id": view_id, "page": filters.page})
        try:
            query = filters.to_query_params()
            first_page = query.pop("page", 0)
            tasks, _ = await self._fetch_pages(f"/view/{view_id}/task", query, first_page=first_page)
            return tasks
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar tasks da view '{view_id}'") from e
