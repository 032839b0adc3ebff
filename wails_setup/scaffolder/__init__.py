"""Wails project scaffolder: fixed directory layout and template files.

Quick usage::

    from wails_setup.config import Config
    from wails_setup.scaffolder import ProjectScaffolder

    scaffolder = ProjectScaffolder(Config(project_root="/path/to/wails-app"))
    scaffolder.check_project()
    created, existing = await scaffolder.create_directories()
    written = await scaffolder.write_templates()
"""

from wails_setup.scaffolder.generator import (
    DIRECTORIES,
    MARKERS,
    TEMPLATE_FILES,
    ProjectScaffolder,
)
from wails_setup.scaffolder.templates import TemplateRenderer

__all__ = [
    "DIRECTORIES",
    "MARKERS",
    "TEMPLATE_FILES",
    "ProjectScaffolder",
    "TemplateRenderer",
]
