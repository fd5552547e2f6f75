"""
Anexos de tasks.

O upload é multipart (campo `attachment`). Para upload a partir de URL o
arquivo é baixado em memória e depois enviado ao ClickUp.
"""

import mimetypes
from typing import Optional
from urllib.parse import unquote, urlparse

from clickup_tasks.errors import ValidationError
from clickup_tasks.models import Attachment
from clickup_tasks.task.core import TaskServiceCore


def file_name_from_url(file_url: str) -> str:
    """Último segmento do path da URL (ex: .../relatorio.pdf -> relatorio.pdf)."""
    path = urlparse(file_url).path
    return unquote(path.rstrip("/").rsplit("/", 1)[-1]) if path else ""


class TaskServiceAttachments:

    def __init__(self, core: TaskServiceCore):
        self.core = core

    async def upload_task_attachment(self, task_id: str, file_data: bytes, file_name: str) -> Attachment:
        """Envia um arquivo em memória como anexo da task."""
        self.core.log_operation("upload_task_attachment", {
            "task_id": task_id,
            "file_name": file_name,
            "size": len(file_data) if file_data else 0
        })
        try:
            self.core.check_write_permission("upload_task_attachment")
            if not file_name:
                raise ValidationError("Nome do arquivo é obrigatório")
            if not file_data:
                raise ValidationError(f"Arquivo '{file_name}' está vazio")

            content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
            files = {"attachment": (file_name, file_data, content_type)}
            data = await self.core.make_request(
                lambda: self.core.client.post(f"/task/{task_id}/attachment", files=files)
            )
            return Attachment.model_validate(data)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao anexar '{file_name}' à task '{task_id}'") from e

    async def upload_task_attachment_from_url(
        self,
        task_id: str,
        file_url: str,
        file_name: Optional[str] = None,
        auth_header: Optional[str] = None
    ) -> Attachment:
        """
        Baixa um arquivo de `file_url` e o anexa à task.

        Args:
            task_id: ID da task
            file_url: URL pública (ou autenticada via auth_header) do arquivo
            file_name: Nome do anexo (default: último segmento da URL)
            auth_header: Valor do header Authorization para baixar o arquivo
        """
        self.core.log_operation("upload_task_attachment_from_url", {
            "task_id": task_id,
            "file_url": file_url,
            "file_name": file_name
        })
        try:
            self.core.check_write_permission("upload_task_attachment")
            if urlparse(file_url).scheme not in ("http", "https"):
                raise ValidationError(f"URL inválida: '{file_url}'")

            name = file_name or file_name_from_url(file_url) or "attachment"
            file_data = await self.core.make_request(
                lambda: self.core.client.download(file_url, auth_header=auth_header)
            )
            return await self.upload_task_attachment(task_id, file_data, name)
        except Exception as e:
            raise self.core.handle_error(e, f"Falha ao anexar arquivo de '{file_url}' à task '{task_id}'") from e
