"""Component template rendering.

A generated component is an ordered list of named sections.  Some sections
only appear in verbose mode; rendering filters on the flag and joins what is
left between a fixed class header and footer:

    header
    externalListeners, listeners, setup      (verbose only)
    css, build
    afterBuild, afterPatch                    (verbose only)
    footer

The order is fixed so users always find the same method in the same place.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass

from .templates import TemplateRenderer

# Module alias resolved through webpack's ``resolve.modules`` (src/).
COMPONENT_MODULE = "Component"

# The listener types are imported even when the stubs that use them are not
# emitted, so adding a listener later needs no import edit.
COMPONENT_IMPORTS = "Component, Listeners, ExternalListeners"

MEMBER_INDENT = "    "


@dataclass(frozen=True)
class Section:
    """A named, optionally verbose-gated slice of a component class body."""

    name: str
    template: str
    verbose_only: bool = False


_HEADER = """\
import { {{ imports }} } from '{{ component_module }}'

export class {{ class_name }} extends Component {"""

_FOOTER = "}"

COMPONENT_SECTIONS: tuple[Section, ...] = (
    Section(
        "externalListeners",
        """\
protected readonly externalListeners: ExternalListeners = {
    //'the-thing-happened': this.handleTheThing,
}""",
        verbose_only=True,
    ),
    Section(
        "listeners",
        """\
protected readonly listeners: Listeners = {
    //'.placeholder:click': this.handleClick,
}""",
        verbose_only=True,
    ),
    Section(
        "setup",
        """\
protected async setup(): Promise<void> {

}""",
        verbose_only=True,
    ),
    Section(
        "css",
        """\
protected css(): string {
    return /*css*/ `

    `
}""",
    ),
    Section(
        "build",
        """\
protected build(): HTMLElement {
    const container = document.createElement('div')

    // content here

    return container
}""",
    ),
    Section(
        "afterBuild",
        """\
protected afterBuild(): void {

}""",
        verbose_only=True,
    ),
    Section(
        "afterPatch",
        """\
protected afterPatch(): void {

}""",
        verbose_only=True,
    ),
)

_renderer = TemplateRenderer()


def component_section_names(verbose: bool = False) -> list[str]:
    """Names of the sections a component gets, in output order."""
    return [s.name for s in COMPONENT_SECTIONS if verbose or not s.verbose_only]


def render_component_template(class_name: str, verbose: bool = False) -> str:
    """Render the TypeScript source of a component named *class_name*.

    Args:
        class_name: Inserted verbatim as the class identifier.
        verbose: Add listener declarations, ``setup`` and the
            ``afterBuild``/``afterPatch`` hooks.

    Returns:
        The component source with no leading or trailing blank lines.
    """
    context = {
        "class_name": class_name,
        "imports": COMPONENT_IMPORTS,
        "component_module": COMPONENT_MODULE,
    }

    members = [
        textwrap.indent(section.template, MEMBER_INDENT)
        for section in COMPONENT_SECTIONS
        if verbose or not section.verbose_only
    ]
    header = _renderer.render_string(_HEADER, context)
    output = "\n".join([header, "\n\n".join(members), _FOOTER])
    return output.strip()
