"""wc-scaffold scaffolder -- renders the files of a web-components project.

Quick usage::

    from wc_scaffold.scaffolder import ProjectGenerator, ScaffoldRequest

    generator = ProjectGenerator(ScaffoldRequest(project_name="my-app"))
    artifacts = generator.render()          # pure
    paths = await generator.write("/tmp/my-app")
"""

from wc_scaffold.scaffolder.component import (
    component_section_names,
    render_component_template,
)
from wc_scaffold.scaffolder.generator import ProjectGenerator
from wc_scaffold.scaffolder.models import FileArtifact, ScaffoldRequest
from wc_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "FileArtifact",
    "ProjectGenerator",
    "ScaffoldRequest",
    "TemplateRenderer",
    "component_section_names",
    "render_component_template",
]
