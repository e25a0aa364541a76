"""Generate a Discord bot project skeleton."""

from .core import scaffold_project
from .layout import PlannedFile, ProjectLayout, plan_layout
from .options import (
    InstallError,
    ScaffoldError,
    ScaffoldOptions,
    default_package_manager,
    parse_domains,
)

__all__ = [
    "InstallError",
    "PlannedFile",
    "ProjectLayout",
    "ScaffoldError",
    "ScaffoldOptions",
    "default_package_manager",
    "parse_domains",
    "plan_layout",
    "scaffold_project",
]
