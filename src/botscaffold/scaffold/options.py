from __future__ import annotations

import re
import shutil
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DOMAIN = "general"
DOMAIN_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

PackageManager = Literal["uv", "pip"]


class ScaffoldError(RuntimeError):
    pass


class InstallError(ScaffoldError):
    pass


def parse_domains(raw: str | None) -> list[str]:
    """Split ``"general, admin"`` style input into domain names."""
    if raw is None:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def default_package_manager() -> PackageManager:
    return "uv" if shutil.which("uv") else "pip"


class ScaffoldOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    project_name: str
    domains: list[str] = Field(default_factory=lambda: [DEFAULT_DOMAIN])
    with_prisma: bool = False
    with_mongo: bool = False
    minimal: bool = False
    install: bool = True
    package_manager: PackageManager = "pip"

    @field_validator("project_name", mode="before")
    @classmethod
    def _validate_project_name(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("project name must be a string")
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("project name must be a non-empty string")
        if cleaned in {".", ".."} or "/" in cleaned or "\\" in cleaned:
            raise ValueError(f"project name {cleaned!r} must be a plain directory name")
        return cleaned

    @field_validator("domains", mode="before")
    @classmethod
    def _validate_domains(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = parse_domains(value)
        if not isinstance(value, list | tuple):
            raise ValueError("domains must be a list of names")
        domains: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError("domain names must be strings")
            name = item.strip()
            if not DOMAIN_RE.match(name):
                raise ValueError(
                    f"invalid domain {name!r}; use letters, digits, '-' or '_'"
                )
            if name in domains:
                raise ValueError(f"duplicate domain {name!r}")
            domains.append(name)
        if not domains:
            raise ValueError("at least one domain is required")
        return domains

    @property
    def distribution_name(self) -> str:
        slug = re.sub(r"[^A-Za-z0-9._-]+", "-", self.project_name).strip("-.")
        return slug.lower() or "bot"
