"""
Tags de tasks.

As tags precisam existir no space da task; o ClickUp cria a tag no space se
ela ainda não existir ao adicioná-la.
"""

from typing import List
from urllib.parse import quote

from clickup_tasks.models import Tag
from clickup_tasks.task.core import TaskServiceCore


class TaskServiceTags:

    def __init__(self, core: TaskServiceCore):
        self.core = core

    async def get_task_tags(self, task_id: str) -> List[Tag]:
        self.core.log_operation("get_task_tags", {"task_id": task_id})
        try:
            task = await self.core.get_task(task_id)
            return list(task.tags)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar tags da task '{task_id}'") from e

    async def add_tag_to_task(self, task_id: str, tag_name: str) -> bool:
        self.core.log_operation("add_tag_to_task", {"task_id": task_id, "tag_name": tag_name})
        try:
            self.core.check_write_permission("add_tag_to_task")
            await self.core.make_request(
                lambda: self.core.client.post(f"/task/{task_id}/tag/{quote(tag_name, safe='')}")
            )
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao adicionar a tag '{tag_name}' à task '{task_id}'") from e

    async def remove_tag_from_task(self, task_id: str, tag_name: str) -> bool:
        self.core.log_operation("remove_tag_from_task", {"task_id": task_id, "tag_name": tag_name})
        try:
            self.core.check_write_permission("remove_tag_from_task")
            await self.core.make_request(
                lambda: self.core.client.delete(f"/task/{task_id}/tag/{quote(tag_name, safe='')}")
            )
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao remover a tag '{tag_name}' da task '{task_id}'") from e

    async def update_task_tags(self, task_id: str, tag_names: List[str]) -> bool:
        """
        Substitui as tags da task por `tag_names`.

        Remove as que sobram e adiciona as que faltam, uma chamada por tag,
        sem rollback em caso de falha no meio.
        """
        self.core.log_operation("update_task_tags", {"task_id": task_id, "tag_names": tag_names})
        try:
            current = {tag.name for tag in await self.get_task_tags(task_id)}
            wanted = list(dict.fromkeys(tag_names))

            for name in sorted(current - set(wanted)):
                await self.remove_tag_from_task(task_id, name)
            for name in wanted:
                if name not in current:
                    await self.add_tag_to_task(task_id, name)
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao atualizar tags da task '{task_id}'") from e
