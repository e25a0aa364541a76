"""Jinja2 rendering for generated project files.

Templates live next to this module under ``templates/`` and are rendered
with a context built from :class:`~botscaffold.scaffold.options.ScaffoldOptions`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import tomli_w
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .. import __version__
from .layout import DOMAINS_DIR, PACKAGE_DIR
from .options import ScaffoldOptions

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pyrepr"] = _pyrepr_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        template = self.env.get_template(template_path)
        return template.render(**context)

    def list_templates(self) -> list[str]:
        return sorted(
            str(p.relative_to(self.template_dir))
            for p in self.template_dir.rglob("*.j2")
        )


def _pyrepr_filter(value: Any) -> str:
    """Render a JSON-compatible value as a Python literal."""
    return json.dumps(value)


def build_context(options: ScaffoldOptions) -> dict[str, Any]:
    return {
        "project_name": options.project_name,
        "distribution_name": options.distribution_name,
        "domains": list(options.domains),
        "first_domain": options.domains[0],
        "with_prisma": options.with_prisma,
        "with_mongo": options.with_mongo,
        "minimal": options.minimal,
        "package_dir": PACKAGE_DIR,
        "domains_dir": DOMAINS_DIR,
        "package_manager": options.package_manager,
        "botscaffold_version": __version__,
    }


def project_dependencies(options: ScaffoldOptions) -> list[str]:
    deps = [f"botscaffold>={__version__}"]
    if options.with_prisma:
        deps.append("prisma")
    if options.with_mongo:
        deps.append("pymongo")
    return deps


def render_pyproject(options: ScaffoldOptions) -> str:
    data: dict[str, Any] = {
        "project": {
            "name": options.distribution_name,
            "version": "0.0.1",
            "description": f"{options.project_name} Discord bot",
            "readme": "README.md",
            "requires-python": ">=3.11",
            "dependencies": project_dependencies(options),
            "optional-dependencies": {"dev": ["pytest"]},
            "scripts": {
                "dev": f"{PACKAGE_DIR}.main:main",
                "deploy": f"{PACKAGE_DIR}.deploy:main",
            },
        },
        "build-system": {
            "requires": ["hatchling"],
            "build-backend": "hatchling.build",
        },
        "tool": {
            "hatch": {"build": {"targets": {"wheel": {"packages": [PACKAGE_DIR]}}}},
        },
    }
    return tomli_w.dumps(data)
