"""
Custom fields de tasks.

Atualizações em lote são sequenciais e não atômicas: a primeira falha
interrompe o lote e os campos já gravados permanecem gravados.
"""

from typing import Any, Dict, List, Optional

from clickup_tasks.errors import NotFoundError
from clickup_tasks.models import CustomFieldUpdate, CustomFieldValue
from clickup_tasks.task.core import TaskServiceCore


class TaskServiceCustomFields:
    """Leitura e escrita de valores de custom fields."""

    def __init__(self, core: TaskServiceCore):
        self.core = core

    async def set_custom_field_value(
        self,
        task_id: str,
        field_id: str,
        value: Any,
        value_options: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Define o valor de um custom field em uma task.

        Formatos de valor por tipo:
        - text/short_text/email/phone/url: "string"
        - number/currency: 123
        - drop_down: "option_id"
        - labels: ["label_id_1", "label_id_2"]
        - checkbox: true/false
        - date: 1234567890000 (timestamp ms), value_options={"time": true}
        - users/tasks: {"add": ["id1"], "rem": ["id2"]}
        """
        self.core.log_operation("set_custom_field_value", {"task_id": task_id, "field_id": field_id, "value": value})
        try:
            self.core.check_write_permission("set_custom_field_value")
            payload: Dict[str, Any] = {"value": value}
            if value_options:
                payload["value_options"] = value_options

            await self.core.make_request(
                lambda: self.core.client.post(f"/task/{task_id}/field/{field_id}", json_data=payload)
            )
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao definir o custom field '{field_id}'") from e

    async def set_custom_field_values(self, task_id: str, custom_fields: List[CustomFieldUpdate]) -> bool:
        """
        Define vários custom fields, um por vez, na ordem recebida.

        Sem rollback: se o campo K falhar, os campos 1..K-1 continuam
        gravados, K..N não são enviados e o erro nomeia o campo K.
        """
        self.core.log_operation("set_custom_field_values", {
            "task_id": task_id,
            "fields": [f.id for f in custom_fields]
        })
        try:
            for field in custom_fields:
                await self.set_custom_field_value(task_id, field.id, field.value, field.value_options)
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao definir custom fields da task '{task_id}'") from e

    async def remove_custom_field_value(self, task_id: str, field_id: str) -> bool:
        """Remove o valor de um custom field (deixa o campo vazio)."""
        self.core.log_operation("remove_custom_field_value", {"task_id": task_id, "field_id": field_id})
        try:
            self.core.check_write_permission("remove_custom_field_value")
            await self.core.make_request(
                lambda: self.core.client.delete(f"/task/{task_id}/field/{field_id}")
            )
            return True
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao remover o custom field '{field_id}'") from e

    async def get_custom_field_values(self, task_id: str) -> Dict[str, CustomFieldValue]:
        """Retorna os custom fields da task indexados pelo ID (vazio se não houver)."""
        self.core.log_operation("get_custom_field_values", {"task_id": task_id})
        try:
            task = await self.core.get_task(task_id)
            return dict(task.custom_fields)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar custom fields da task '{task_id}'") from e

    async def get_custom_field_value(self, task_id: str, field_id: str) -> CustomFieldValue:
        """
        Retorna um custom field da task.

        Raises:
            NotFoundError: Se o campo não existe na task
        """
        self.core.log_operation("get_custom_field_value", {"task_id": task_id, "field_id": field_id})
        try:
            custom_fields = await self.get_custom_field_values(task_id)
            if field_id not in custom_fields:
                raise NotFoundError(
                    f"Custom field '{field_id}' não encontrado na task",
                    context={"task_id": task_id, "field_id": field_id}
                )
            return custom_fields[field_id]
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao buscar o custom field '{field_id}'") from e
