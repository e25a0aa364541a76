from __future__ import annotations

from dataclasses import dataclass

from .options import ScaffoldOptions

PACKAGE_DIR = "bot"
DOMAINS_DIR = f"{PACKAGE_DIR}/domains"

_SUPPORT_PACKAGES = ("middlewares", "services", "utils")


@dataclass(frozen=True, slots=True)
class PlannedFile:
    path: str
    # None writes an empty file
    template: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectLayout:
    directories: tuple[str, ...]
    files: tuple[PlannedFile, ...]

    def paths(self) -> list[str]:
        return [planned.path for planned in self.files]


def commands_dir(domain: str) -> str:
    return f"{DOMAINS_DIR}/{domain}/commands"


def plan_layout(options: ScaffoldOptions) -> ProjectLayout:
    directories: list[str] = [PACKAGE_DIR, DOMAINS_DIR]
    files: list[PlannedFile] = [
        PlannedFile(".env", "env.j2"),
        PlannedFile(".gitignore", "gitignore.j2"),
        PlannedFile("README.md", "readme.md.j2"),
        PlannedFile(f"{PACKAGE_DIR}/__init__.py"),
        PlannedFile(f"{PACKAGE_DIR}/config.py", "config.py.j2"),
        PlannedFile(f"{PACKAGE_DIR}/main.py", "main.py.j2"),
        PlannedFile(f"{PACKAGE_DIR}/deploy.py", "deploy.py.j2"),
    ]

    for index, domain in enumerate(options.domains):
        directory = commands_dir(domain)
        directories.append(directory)
        if index == 0:
            files.append(PlannedFile(f"{directory}/ping.py", "ping.py.j2"))
        else:
            files.append(PlannedFile(f"{directory}/.gitkeep"))

    if not options.minimal:
        for name in _SUPPORT_PACKAGES:
            directories.append(f"{PACKAGE_DIR}/{name}")
            files.append(PlannedFile(f"{PACKAGE_DIR}/{name}/__init__.py"))
        files.append(PlannedFile("Makefile", "makefile.j2"))

    if options.with_prisma or options.with_mongo:
        directories.append(f"{PACKAGE_DIR}/db")
        files.append(PlannedFile(f"{PACKAGE_DIR}/db/__init__.py"))
    if options.with_prisma:
        directories.append("prisma")
        files.append(PlannedFile("prisma/schema.prisma", "schema.prisma.j2"))
        files.append(PlannedFile(f"{PACKAGE_DIR}/db/prisma_client.py", "prisma_client.py.j2"))
    if options.with_mongo:
        files.append(PlannedFile(f"{PACKAGE_DIR}/db/mongo_client.py", "mongo_client.py.j2"))

    return ProjectLayout(directories=tuple(directories), files=tuple(files))
