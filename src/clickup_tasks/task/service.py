"""
TaskService: fachada única sobre os módulos de task.

Compõe o núcleo e os módulos de busca, anexos, comentários, tags e custom
fields, expondo todos os métodos como uma API plana para a camada MCP.
"""

from typing import Any, Dict, List, Optional, Union

from clickup_tasks import config
from clickup_tasks.client import ClickUpClient
from clickup_tasks.models import (
    Attachment,
    Comment,
    CreateTaskData,
    CustomFieldUpdate,
    CustomFieldValue,
    DetailedTaskResponse,
    FindTasksParams,
    Tag,
    Task,
    TaskFilters,
    UpdateTaskData,
    WorkspaceTasksResponse,
)
from clickup_tasks.task.attachments import TaskServiceAttachments
from clickup_tasks.task.comments import TaskServiceComments
from clickup_tasks.task.core import TaskServiceCore
from clickup_tasks.task.custom_fields import TaskServiceCustomFields
from clickup_tasks.task.search import (
    DisambiguationPolicy,
    FindTasksResult,
    TaskServiceSearch,
    most_recently_updated,
)
from clickup_tasks.task.tags import TaskServiceTags
from clickup_tasks.workspace import WorkspaceService


class TaskService:
    """API completa de tasks do ClickUp."""

    def __init__(
        self,
        api_key: str,
        team_id: str,
        base_url: Optional[str] = None,
        client: Optional[ClickUpClient] = None,
        read_only: bool = config.READ_ONLY_MODE,
        disambiguation: DisambiguationPolicy = most_recently_updated,
        fuzzy_threshold: float = config.FUZZY_MATCH_THRESHOLD,
        max_pages: int = config.SEARCH_MAX_PAGES
    ):
        self.core = TaskServiceCore(api_key, team_id, base_url=base_url, client=client, read_only=read_only)
        self.core.log_operation("constructor", {"team_id": team_id, "read_only": read_only})

        self.workspace = WorkspaceService(self.core)
        self.search = TaskServiceSearch(
            self.core,
            workspace=self.workspace,
            disambiguation=disambiguation,
            fuzzy_threshold=fuzzy_threshold,
            max_pages=max_pages
        )
        self.attachments = TaskServiceAttachments(self.core)
        self.comments = TaskServiceComments(self.core)
        self.tags = TaskServiceTags(self.core)
        self.custom_fields = TaskServiceCustomFields(self.core)

    async def aclose(self) -> None:
        await self.core.client.aclose()

    async def __aenter__(self) -> "TaskService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ===== CORE =====

    async def get_task(self, task_id: str) -> Task:
        return await self.core.get_task(task_id)

    async def get_task_by_custom_id(self, custom_task_id: str) -> Task:
        return await self.core.get_task_by_custom_id(custom_task_id)

    async def get_tasks(self, list_id: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        return await self.core.get_tasks(list_id, filters)

    async def get_subtasks(self, task_id: str) -> List[Task]:
        return await self.core.get_subtasks(task_id)

    async def create_task(self, list_id: str, task_data: CreateTaskData) -> Task:
        return await self.core.create_task(list_id, task_data)

    async def update_task(self, task_id: str, update_data: UpdateTaskData) -> Task:
        return await self.core.update_task(task_id, update_data)

    async def delete_task(self, task_id: str) -> bool:
        return await self.core.delete_task(task_id)

    async def move_task(self, task_id: str, destination_list_id: str) -> Task:
        return await self.core.move_task(task_id, destination_list_id)

    async def duplicate_task(self, task_id: str, list_id: Optional[str] = None) -> Task:
        return await self.core.duplicate_task(task_id, list_id)

    # ===== SEARCH =====

    async def find_task_by_name(self, list_id: str, task_name: str) -> Optional[Task]:
        return await self.search.find_task_by_name(list_id, task_name)

    async def find_task_by_name_globally(self, task_name: str) -> Optional[Task]:
        return await self.search.find_task_by_name_globally(task_name)

    async def find_tasks(self, params: FindTasksParams) -> FindTasksResult:
        return await self.search.find_tasks(params)

    async def update_task_by_name(self, list_id: str, task_name: str, update_data: UpdateTaskData) -> Task:
        return await self.search.update_task_by_name(list_id, task_name, update_data)

    async def get_workspace_tasks(self, filters: Optional[TaskFilters] = None) -> Union[DetailedTaskResponse, WorkspaceTasksResponse]:
        return await self.search.get_workspace_tasks(filters)

    async def get_task_summaries(self, filters: Optional[TaskFilters] = None) -> WorkspaceTasksResponse:
        return await self.search.get_task_summaries(filters)

    async def get_task_details(self, filters: Optional[TaskFilters] = None) -> DetailedTaskResponse:
        return await self.search.get_task_details(filters)

    async def get_list_views(self, list_id: str) -> Optional[str]:
        return await self.search.get_list_views(list_id)

    async def get_tasks_from_view(self, view_id: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        return await self.search.get_tasks_from_view(view_id, filters)

    # ===== ATTACHMENTS =====

    async def upload_task_attachment(self, task_id: str, file_data: bytes, file_name: str) -> Attachment:
        return await self.attachments.upload_task_attachment(task_id, file_data, file_name)

    async def upload_task_attachment_from_url(
        self,
        task_id: str,
        file_url: str,
        file_name: Optional[str] = None,
        auth_header: Optional[str] = None
    ) -> Attachment:
        return await self.attachments.upload_task_attachment_from_url(task_id, file_url, file_name, auth_header)

    # ===== COMMENTS =====

    async def get_task_comments(self, task_id: str, start: Optional[int] = None, start_id: Optional[str] = None) -> List[Comment]:
        return await self.comments.get_task_comments(task_id, start, start_id)

    async def create_task_comment(
        self,
        task_id: str,
        comment_text: str,
        notify_all: bool = False,
        assignee: Optional[int] = None
    ) -> Comment:
        return await self.comments.create_task_comment(task_id, comment_text, notify_all, assignee)

    # ===== TAGS =====

    async def get_task_tags(self, task_id: str) -> List[Tag]:
        return await self.tags.get_task_tags(task_id)

    async def add_tag_to_task(self, task_id: str, tag_name: str) -> bool:
        return await self.tags.add_tag_to_task(task_id, tag_name)

    async def remove_tag_from_task(self, task_id: str, tag_name: str) -> bool:
        return await self.tags.remove_tag_from_task(task_id, tag_name)

    async def update_task_tags(self, task_id: str, tag_names: List[str]) -> bool:
        return await self.tags.update_task_tags(task_id, tag_names)

    # ===== CUSTOM FIELDS =====

    async def set_custom_field_value(
        self,
        task_id: str,
        field_id: str,
        value: Any,
        value_options: Optional[Dict[str, Any]] = None
    ) -> bool:
        return await self.custom_fields.set_custom_field_value(task_id, field_id, value, value_options)

    async def set_custom_field_values(self, task_id: str, custom_fields: List[CustomFieldUpdate]) -> bool:
        return await self.custom_fields.set_custom_field_values(task_id, custom_fields)

    async def remove_custom_field_value(self, task_id: str, field_id: str) -> bool:
        return await self.custom_fields.remove_custom_field_value(task_id, field_id)

    async def get_custom_field_values(self, task_id: str) -> Dict[str, CustomFieldValue]:
        return await self.custom_fields.get_custom_field_values(task_id)

    async def get_custom_field_value(self, task_id: str, field_id: str) -> CustomFieldValue:
        return await self.custom_fields.get_custom_field_value(task_id, field_id)
