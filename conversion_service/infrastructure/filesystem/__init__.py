"""Local filesystem helpers."""

from .workspace import conversion_workspace, remove_dir_safe

__all__ = ["conversion_workspace", "remove_dir_safe"]
