"""Create a new project tree from a template directory."""

from __future__ import annotations

import logging
import os
import stat
import subprocess
from collections.abc import Iterable
from pathlib import Path

from taurusgen.components import (
    ALL_COMPONENTS,
    Component,
    ComponentDependencyError,
    get_optional_components,
    get_required_components,
    validate_components,
)
from taurusgen.wire import WireGenerationError, generate_wire

logger = logging.getLogger(__name__)

DEFAULT_GO_VERSION = "1.21"
PROJECT_NAME_PLACEHOLDER = b"{{.ProjectName}}"
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


class GenerationError(Exception):
    """The project could not be generated."""


def get_system_go_version() -> str:
    """Return the major.minor version of the installed Go toolchain."""
    try:
        result = subprocess.run(
            ["go", "version"],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise GenerationError(f"failed to get Go version: {exc}") from exc

    version = (result.stdout or "").strip()
    parts = version.split(" ")
    if len(parts) < 3:
        raise GenerationError(f"cannot parse Go version information: {version}")

    number = parts[2].removeprefix("go")
    pieces = number.split(".")
    if len(pieces) < 2:
        raise GenerationError(f"cannot parse version number: {number}")
    return f"{pieces[0]}.{pieces[1]}"


def render_go_mod(module_name: str, go_version: str, components: Iterable[str]) -> str:
    """Return go.mod text requiring every required and each selected optional component."""
    lines = ["require ("]
    added: set[str] = set()

    def add(comp: Component) -> None:
        if comp.package not in added:
            lines.append(f"\t{comp.package} {comp.version}")
            added.add(comp.package)

    for comp in ALL_COMPONENTS:
        if comp.required:
            add(comp)
    for name in components:
        for comp in ALL_COMPONENTS:
            if comp.name == name and not comp.required:
                add(comp)
    lines.append(")")
    return f"module {module_name}\n\ngo {go_version}\n\n" + "\n".join(lines)


def _run(args: list[str], cwd: Path) -> None:
    command = " ".join(args)
    try:
        subprocess.run(
            args,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        raise GenerationError(
            f"running {command} failed: {exc}\noutput: {exc.output}"
        ) from exc
    except OSError as exc:
        raise GenerationError(f"running {command} failed: {exc}") from exc


class ProjectGenerator:
    """Builds a project directory from templates and the chosen components."""

    def __init__(self, project_path, components, template_dir=None):
        self.project_path = Path(os.fspath(project_path))
        self.components = list(components)
        self.template_dir = (
            Path(os.fspath(template_dir)) if template_dir is not None else DEFAULT_TEMPLATE_DIR
        )
        self.component_config: bytes = b""
        try:
            validate_components(self.components)
        except ComponentDependencyError as exc:
            logger.warning("component dependency check failed: %s", exc)

    @property
    def project_name(self) -> str:
        """The last element of the project path."""
        return self.project_path.name or "."

    def generate(self) -> None:
        """Write the whole project tree, go.mod, wire.go and the component config."""
        required = ", ".join(comp.name for comp in get_required_components())
        print(f"Generating project with required components: {required}")
        optional = get_optional_components()
        if optional:
            print("Optional components: " + ", ".join(comp.name for comp in optional))

        if not self.template_dir.exists():
            raise GenerationError(f"template directory does not exist: {self.template_dir}")

        try:
            self.project_path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise GenerationError(f"failed to create project directory: {exc}") from exc

        try:
            self._copy_templates()
        except OSError as exc:
            raise GenerationError(f"failed to copy template files: {exc}") from exc

        try:
            self._write_go_mod()
        except OSError as exc:
            raise GenerationError(f"failed to generate go.mod: {exc}") from exc

        self._generate_wire(self.project_path / "app")

        config_dir = self.project_path / "config" / "autoload" / "components"
        try:
            config_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise GenerationError(f"failed to create config directory: {exc}") from exc
        try:
            (config_dir / "components.yaml").write_bytes(self.component_config)
        except OSError as exc:
            raise GenerationError(f"failed to save component config: {exc}") from exc

        print("Project files generated successfully")

    def _copy_templates(self) -> None:
        self._copy_dir(self.template_dir, Path("."))

    def _copy_dir(self, src_dir: Path, rel_dir: Path) -> None:
        dir_mode = stat.S_IMODE(src_dir.stat().st_mode)
        os.makedirs(self.project_path / rel_dir, mode=dir_mode, exist_ok=True)
        with os.scandir(src_dir) as entries:
            ordered = sorted(entries, key=lambda entry: entry.name)
        for entry in ordered:
            rel = rel_dir / entry.name
            if entry.is_dir(follow_symlinks=False):
                self._copy_dir(Path(entry.path), rel)
            elif rel.as_posix() != "go.mod":
                self._copy_file(Path(entry.path), self.project_path / rel)

    def _copy_file(self, src: Path, dst: Path) -> None:
        mode = stat.S_IMODE(src.stat().st_mode)
        content = src.read_bytes().replace(
            PROJECT_NAME_PLACEHOLDER, self.project_name.encode("utf-8")
        )
        dst.write_bytes(content)
        os.chmod(dst, mode)

    def _write_go_mod(self) -> None:
        try:
            go_version = get_system_go_version()
        except GenerationError as exc:
            logger.warning(
                "could not get the system Go version, using %s: %s", DEFAULT_GO_VERSION, exc
            )
            print(f"Warning: could not get the system Go version, using {DEFAULT_GO_VERSION}")
            go_version = DEFAULT_GO_VERSION
        content = render_go_mod(self.project_name, go_version, self.components)
        (self.project_path / "go.mod").write_text(content, encoding="utf-8")

    def _generate_wire(self, app_path: Path) -> None:
        try:
            app_path.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise GenerationError(f"failed to create app directory: {exc}") from exc
        try:
            generate_wire(app_path)
        except WireGenerationError as exc:
            raise GenerationError(f"failed to generate wire.go: {exc}") from exc
        _run(["go", "mod", "tidy"], cwd=self.project_path)
        _run(["wire"], cwd=app_path)