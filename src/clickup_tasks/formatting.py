"""
Formatação de resultados para as tools MCP (Markdown ou JSON).
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

from clickup_tasks.models import Attachment, Comment, Tag, Task, TaskSummary


class ResponseFormat(str, Enum):
    """Formato de resposta das ferramentas."""
    MARKDOWN = "markdown"
    JSON = "json"


def format_timestamp(ts: Optional[Any]) -> Optional[str]:
    """
    Converte timestamp em milissegundos para string legível.

    Args:
        ts: Timestamp em milissegundos (int ou string)

    Returns:
        String formatada YYYY-MM-DD HH:MM:SS ou None
    """
    if ts is None:
        return None
    try:
        dt = datetime.fromtimestamp(int(ts) / 1000)
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, TypeError, OSError):
        return str(ts)


def to_json(data: Any) -> str:
    """Serializa modelos pydantic (ou listas/dicts deles) em JSON legível."""
    def _plain(value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json", exclude_none=True)
        if isinstance(value, dict):
            return {k: _plain(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_plain(v) for v in value]
        return value

    return json.dumps(_plain(data), indent=2, ensure_ascii=False)


def format_task_markdown(task: Task) -> str:
    """Formata uma task em Markdown."""
    lines = [f"## {task.name or 'Sem nome'}"]
    lines.append(f"- **ID:** `{task.id}`")
    if task.custom_id:
        lines.append(f"- **Custom ID:** `{task.custom_id}`")
    lines.append(f"- **Status:** {task.status.status if task.status else 'N/A'}")
    lines.append(f"- **URL:** {task.url or 'N/A'}")

    date_created = format_timestamp(task.date_created)
    date_updated = format_timestamp(task.date_updated)
    due_date = format_timestamp(task.due_date)
    if date_created:
        lines.append(f"- **Criado em:** {date_created}")
    if date_updated:
        lines.append(f"- **Modificado em:** {date_updated}")
    if due_date:
        lines.append(f"- **Prazo:** {due_date}")

    if task.priority:
        lines.append(f"- **Prioridade:** {task.priority.get('priority', 'N/A')}")

    if task.assignees:
        names = [a.username or a.email or 'N/A' for a in task.assignees]
        lines.append(f"- **Responsáveis:** {', '.join(names)}")

    if task.tags:
        lines.append(f"- **Tags:** {', '.join(t.name for t in task.tags)}")

    if task.list:
        lines.append(f"- **List:** {task.list.name or task.list.id}")
    if task.folder and task.folder.name:
        lines.append(f"- **Folder:** {task.folder.name}")
    if task.list_context:
        ctx = task.list_context
        location = " > ".join(
            part for part in (
                ctx.space.name if ctx.space else None,
                ctx.folder.name if ctx.folder else None,
                ctx.name,
            ) if part
        )
        lines.append(f"- **Localização:** {location} (`{ctx.id}`)")

    if task.custom_fields:
        lines.append("- **Custom fields:**")
        for field_id, field in task.custom_fields.items():
            lines.append(f"  - {field.name or field_id}: {field.value if field.value is not None else '-'}")

    if task.description:
        lines.append(f"\n### Descrição\n{task.description}")

    return "\n".join(lines)


def format_tasks_compact(tasks: Sequence[Task], header: Optional[str] = None) -> str:
    """
    Formata tasks em modo compacto: 1 linha por task.

    Formato: {i}. [{status}] {nome} | {list} | `{id}`
    """
    if not tasks:
        return "Nenhuma task encontrada."

    lines = [header or f"**{len(tasks)} tasks:**\n"]
    for i, task in enumerate(tasks, 1):
        status = (task.status.status if task.status else None) or '?'
        list_name = task.list.name if task.list and task.list.name else '-'
        lines.append(f"{i}. [{status[:12]}] {task.name[:60]} | {list_name} | `{task.id}`")
    return "\n".join(lines)


def format_summaries_compact(summaries: Sequence[TaskSummary], has_more: bool = False, next_page: int = 0) -> str:
    if not summaries:
        return "Nenhuma task encontrada."

    lines = [f"**{len(summaries)} tasks:**\n"]
    for i, summary in enumerate(summaries, 1):
        due = format_timestamp(summary.due_date)
        lines.append(f"{i}. [{(summary.status or '?')[:12]}] {summary.name[:60]} | {due[:10] if due else '-'} | `{summary.id}`")

    if has_more:
        lines.append(f"\n_Há mais resultados. Use `page={next_page}` para continuar._")
    return "\n".join(lines)


def format_comments(comments: List[Comment]) -> str:
    if not comments:
        return "Nenhum comentário encontrado."

    lines = [f"**{len(comments)} comentários:**\n"]
    for i, comment in enumerate(comments, 1):
        user = comment.user.username if comment.user and comment.user.username else 'Anônimo'
        date = format_timestamp(comment.date)
        lines.append(f"{i}. {user} ({date[:10] if date else '-'}): {comment.comment_text or ''}")
    return "\n".join(lines)


def format_tags(tags: List[Tag]) -> str:
    if not tags:
        return "Nenhuma tag nesta task."
    return f"**{len(tags)} tags:** " + ", ".join(t.name for t in tags)


def format_custom_fields(fields: Dict[str, Any]) -> str:
    if not fields:
        return "Nenhum custom field nesta task."

    lines = [f"**{len(fields)} custom fields:**\n"]
    for i, (field_id, field) in enumerate(fields.items(), 1):
        value = field.value if field.value is not None else '-'
        lines.append(f"{i}. {field.name or 'Sem nome'} | {field.type} | {value} | `{field_id}`")
    return "\n".join(lines)


def format_attachment(attachment: Attachment) -> str:
    title = attachment.title or 'Sem título'
    return f"✅ Anexo '{title}' enviado!\n- **ID:** `{attachment.id}`\n- **URL:** {attachment.url or 'N/A'}"
