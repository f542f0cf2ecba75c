"""Project file generation.

Turns a ``ScaffoldRequest`` into the fixed set of ``FileArtifact`` values of
an event-driven web-components project and writes them under a project root.
Rendering is pure; only :meth:`ProjectGenerator.write` touches the disk.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from .component import COMPONENT_MODULE
from .models import FileArtifact, ScaffoldRequest
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Cross-file conventions
# ---------------------------------------------------------------------------

RUNTIME_PACKAGE = "event-driven-web-components"
ROOT_COMPONENT_CLASS = "App"
ROOT_COMPONENT_MODULE = "Components/App"
ROOT_COMPONENT_TAG = "app-root"
REGISTRY_MODULE = "config"
BUNDLE_PATH = "./dist/index.js"

# (template, output path) pairs for the text templates.
PROJECT_TEMPLATES: tuple[tuple[str, str], ...] = (
    ("public/index.html.j2", "public/index.html"),
    ("src/Events.ts.j2", "src/Events.ts"),
    ("src/Component.ts.j2", "src/Component.ts"),
    ("src/Components/App.ts.j2", "src/Components/App.ts"),
    ("src/config.ts.j2", "src/config.ts"),
    ("src/index.ts.j2", "src/index.ts"),
    ("README.md.j2", "README.md"),
    ("gitignore.j2", ".gitignore"),
    ("webpack.config.js.j2", "webpack.config.js"),
)

MANIFEST_PATH = "package.json"
COMPILER_CONFIG_PATH = "tsconfig.json"


# ---------------------------------------------------------------------------
# Manifest and compiler configuration
# ---------------------------------------------------------------------------

DEPENDENCIES: dict[str, str] = {
    RUNTIME_PACKAGE: "^2.0.4",
    "express": "^4.21.2",
    "multer": "^1.4.5-lts.2",
    "uuid": "^11.1.0",
}

DEV_DEPENDENCIES: dict[str, str] = {
    "@types/express": "^5.0.1",
    "@types/multer": "^1.4.12",
    "@typescript-eslint/eslint-plugin": "^7.15.0",
    "@typescript-eslint/parser": "^7.15.0",
    "css-loader": "^7.1.2",
    "file-loader": "^6.2.0",
    "mini-css-extract-plugin": "^2.9.2",
    "sass": "^1.77.8",
    "sass-loader": "^14.2.1",
    "style-loader": "^4.0.0",
    "ts-loader": "^9.2.6",
    "tslint": "^6.1.3",
    "typescript": "^4.9.5",
    "webpack": "^5.38.1",
    "webpack-cli": "^4.7.2",
    "webpack-node-externals": "^3.0.0",
    "serve": "^14.2.1",
    "open": "^9.0.0",
}

COMPILER_OPTIONS: dict[str, Any] = {
    "experimentalDecorators": True,
    "emitDecoratorMetadata": True,
    "target": "esnext",
    "module": "commonjs",
    "outDir": "./public/dist",
    "baseUrl": "src",
    "sourceMap": True,
    "strict": True,
    "lib": ["dom", "es6"],
    "esModuleInterop": True,
    "skipLibCheck": True,
    "forceConsistentCasingInFileNames": True,
}


def build_manifest(project_name: str) -> dict[str, Any]:
    """Return the ``package.json`` structure for *project_name*."""
    return {
        "name": project_name,
        "scripts": {
            "watch": "webpack --watch",
        },
        "dependencies": dict(DEPENDENCIES),
        "devDependencies": dict(DEV_DEPENDENCIES),
    }


def build_compiler_config() -> dict[str, Any]:
    """Return the ``tsconfig.json`` structure."""
    return {
        "compilerOptions": dict(COMPILER_OPTIONS),
        "include": ["src/**/*"],
        "exclude": ["node_modules"],
    }


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Renders and writes every file of a new web-components project.

    Given a ``ScaffoldRequest``, produces:
    - ``public/index.html`` shell loading the webpack bundle
    - ``src/`` base classes, component registry, entry point and ``App``
    - ``webpack.config.js``, ``package.json`` and ``tsconfig.json``
    - ``README.md`` and ``.gitignore``
    """

    def __init__(
        self, request: ScaffoldRequest, renderer: TemplateRenderer | None = None
    ) -> None:
        self.request = request
        self.renderer = renderer or TemplateRenderer()

        missing = sorted(
            {template for template, _ in PROJECT_TEMPLATES}
            - set(self.renderer.list_templates())
        )
        if missing:
            raise FileNotFoundError(
                f"Missing project templates in {self.renderer.template_dir}: {', '.join(missing)}"
            )

    # -- Public API --------------------------------------------------------

    def render(self) -> list[FileArtifact]:
        """Render every artifact.  No I/O besides reading templates."""
        context = self._build_context()
        artifacts = [
            FileArtifact(
                relative_path=output_path,
                content=self.renderer.render(template_path, context).strip(),
            )
            for template_path, output_path in PROJECT_TEMPLATES
        ]
        artifacts.append(
            FileArtifact(
                relative_path=MANIFEST_PATH,
                content=json.dumps(build_manifest(self.request.project_name), indent=2, ensure_ascii=False),
            )
        )
        artifacts.append(
            FileArtifact(
                relative_path=COMPILER_CONFIG_PATH,
                content=json.dumps(build_compiler_config(), indent=2, ensure_ascii=False),
            )
        )
        return artifacts

    async def write(self, project_root: str | Path) -> list[Path]:
        """Render all artifacts and write them under *project_root*.

        Writes run concurrently; the call returns once every file is on
        disk.  Parent directories are created as needed.

        Returns:
            The written file paths, in artifact order.
        """
        root = Path(project_root)
        artifacts = self.render()
        paths = [root / artifact.relative_path for artifact in artifacts]
        await asyncio.gather(
            *(
                asyncio.to_thread(_write_file, path, artifact.content)
                for path, artifact in zip(paths, artifacts)
            )
        )
        return paths

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the request."""
        return {
            "project_name": self.request.project_name,
            "runtime_package": RUNTIME_PACKAGE,
            "component_module": COMPONENT_MODULE,
            "root_component_class": ROOT_COMPONENT_CLASS,
            "root_component_module": ROOT_COMPONENT_MODULE,
            "root_component_tag": ROOT_COMPONENT_TAG,
            "registry_module": REGISTRY_MODULE,
            "bundle_path": BUNDLE_PATH,
        }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
