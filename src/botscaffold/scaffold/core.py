from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import partial
from pathlib import Path

import anyio

from ..logging import get_logger
from .install import install_dependencies
from .layout import ProjectLayout, plan_layout
from .options import ScaffoldError, ScaffoldOptions
from .templates import TemplateRenderer, build_context, render_pyproject

logger = get_logger(__name__)

InstallFn = Callable[[Path, ScaffoldOptions], None]


def write_file(project_dir: Path, file_path: str, content: str) -> Path:
    full_path = project_dir / file_path
    full_path.parent.mkdir(parents=True, exist_ok=True)
    full_path.write_text(content.lstrip(), encoding="utf-8")
    return full_path


def create_folders(folders: Iterable[Path]) -> None:
    for folder in folders:
        folder.mkdir(parents=True, exist_ok=True)


def _install(project_dir: Path, options: ScaffoldOptions) -> None:
    anyio.run(partial(install_dependencies, project_dir, options.package_manager))


def render_layout(
    project_dir: Path,
    layout: ProjectLayout,
    options: ScaffoldOptions,
    *,
    renderer: TemplateRenderer,
) -> list[Path]:
    context = build_context(options)
    written = [write_file(project_dir, "pyproject.toml", render_pyproject(options))]
    for planned in layout.files:
        content = "" if planned.template is None else renderer.render(planned.template, context)
        written.append(write_file(project_dir, planned.path, content))
    return written


def scaffold_project(
    options: ScaffoldOptions,
    *,
    cwd: Path,
    renderer: TemplateRenderer | None = None,
    install_fn: InstallFn = _install,
) -> Path:
    """Create ``cwd/<project_name>`` and fill it from templates."""
    project_dir = Path(cwd) / options.project_name
    if project_dir.exists():
        raise ScaffoldError(f'Directory "{options.project_name}" already exists.')

    logger.info("scaffold.creating", project=options.project_name, path=str(project_dir))
    layout = plan_layout(options)
    create_folders([project_dir, *(project_dir / d for d in layout.directories)])
    written = render_layout(
        project_dir, layout, options, renderer=renderer or TemplateRenderer()
    )
    logger.info("scaffold.files_written", count=len(written))

    if options.install:
        logger.info("scaffold.installing", package_manager=options.package_manager)
        install_fn(project_dir, options)

    logger.info("scaffold.ready", project=options.project_name)
    return project_dir
