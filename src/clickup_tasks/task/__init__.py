"""Módulos do serviço de tasks (núcleo, busca, anexos, comentários, tags, custom fields)."""
