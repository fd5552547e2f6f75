"""
Consultas à hierarquia do workspace (Space > Folder > List).

Usado pela resolução de tasks para traduzir `list_name` em ID e para anexar
o contexto da list a uma task.
"""

from typing import Dict, List

from clickup_tasks.errors import AmbiguousMatchError, ClickUpAPIError, NotFoundError
from clickup_tasks.models import ListContext
from clickup_tasks.task.core import TaskServiceCore


class WorkspaceService:
    """Leitura da estrutura do workspace configurado."""

    def __init__(self, core: TaskServiceCore):
        self.core = core

    async def get_list(self, list_id: str) -> ListContext:
        self.core.log_operation("get_list", {"list_id": list_id})
        try:
            data = await self.core.make_request(lambda: self.core.client.get(f"/list/{list_id}"))
            return ListContext.model_validate(data)
        except ClickUpAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(f"List '{list_id}' não encontrada", context={"list_id": list_id}) from e
            raise self.core.handle_error(e, f"Falha ao buscar list '{list_id}'") from e
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar list '{list_id}'") from e

    async def _all_lists(self) -> List[Dict]:
        """Percorre spaces, folders e lists sem folder do workspace."""
        client = self.core.client
        spaces_data = await self.core.make_request(
            lambda: client.get(f"/team/{self.core.team_id}/space", params={"archived": False})
        )

        lists: List[Dict] = []
        for space in spaces_data.get("spaces", []):
            space_id = space.get("id")
            folders_data = await self.core.make_request(
                lambda: client.get(f"/space/{space_id}/folder", params={"archived": False})
            )
            for folder in folders_data.get("folders", []):
                lists.extend(folder.get("lists", []))

            folderless_data = await self.core.make_request(
                lambda: client.get(f"/space/{space_id}/list", params={"archived": False})
            )
            lists.extend(folderless_data.get("lists", []))
        return lists

    async def find_list_id_by_name(self, list_name: str) -> str:
        """
        Resolve o nome de uma list (sem diferenciar maiúsculas) para o seu ID.

        Raises:
            NotFoundError: Nenhuma list com esse nome
            AmbiguousMatchError: Mais de uma list com esse nome
        """
        self.core.log_operation("find_list_id_by_name", {"list_name": list_name})
        try:
            wanted = list_name.strip().casefold()
            matches = [
                lst for lst in await self._all_lists()
                if (lst.get("name") or "").strip().casefold() == wanted
            ]
            if not matches:
                raise NotFoundError(f"List '{list_name}' não encontrada no workspace", context={"list_name": list_name})
            if len(matches) > 1:
                raise AmbiguousMatchError(
                    f"{len(matches)} lists chamadas '{list_name}'",
                    candidates=[{"id": lst.get("id"), "name": lst.get("name")} for lst in matches]
                )
            return str(matches[0]["id"])
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao localizar list '{list_name}'") from e
