"""Translate Supabase client failures into storage errors."""

from typing import Any

from memory_splat.domain.errors import StorageError


def execute(query: Any, action: str) -> Any:
    """Run a Supabase query builder, raising StorageError on any client fault."""
    try:
        return query.execute()
    except Exception as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc
