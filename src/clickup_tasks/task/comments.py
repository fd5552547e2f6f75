"""Comentários de tasks."""

from typing import Any, Dict, List, Optional

from clickup_tasks.errors import ValidationError
from clickup_tasks.models import Comment
from clickup_tasks.task.core import TaskServiceCore


class TaskServiceComments:

    def __init__(self, core: TaskServiceCore):
        self.core = core

    async def get_task_comments(
        self,
        task_id: str,
        start: Optional[int] = None,
        start_id: Optional[str] = None
    ) -> List[Comment]:
        """
        Lista comentários da task (o ClickUp devolve 25 por vez).

        Args:
            task_id: ID da task
            start: Timestamp (ms) do último comentário da página anterior
            start_id: ID do último comentário da página anterior
        """
        self.core.log_operation("get_task_comments", {"task_id": task_id, "start": start, "start_id": start_id})
        params: Dict[str, Any] = {}
        if start is not None:
            params["start"] = start
        if start_id:
            params["start_id"] = start_id
        try:
            data = await self.core.make_request(
                lambda: self.core.client.get(f"/task/{task_id}/comment", params=params)
            )
            return [Comment.model_validate(c) for c in data.get("comments", [])]
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao listar comentários da task '{task_id}'") from e

    async def create_task_comment(
        self,
        task_id: str,
        comment_text: str,
        notify_all: bool = False,
        assignee: Optional[int] = None
    ) -> Comment:
        self.core.log_operation("create_task_comment", {
            "task_id": task_id,
            "notify_all": notify_all,
            "assignee": assignee
        })
        try:
            self.core.check_write_permission("create_task_comment")
            if not comment_text or not comment_text.strip():
                raise ValidationError("Texto do comentário não pode ser vazio")

            payload: Dict[str, Any] = {"comment_text": comment_text, "notify_all": notify_all}
            if assignee is not None:
                payload["assignee"] = assignee

            data = await self.core.make_request(
                lambda: self.core.client.post(f"/task/{task_id}/comment", json_data=payload)
            )
            # A API responde apenas {id, hist_id, date}
            return Comment.model_validate({"comment_text": comment_text, **data})
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao criar comentário na task '{task_id}'") from e
