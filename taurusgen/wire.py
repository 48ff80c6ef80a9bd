"""Write the wire.go injector for a generated project."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from taurusgen.scanner import ScanError, Scanner

logger = logging.getLogger(__name__)


class WireGenerationError(Exception):
    """wire.go could not be produced."""


def get_module_name(project_root) -> str:
    """Return the module path declared in project_root/go.mod."""
    go_mod = Path(project_root) / "go.mod"
    try:
        content = go_mod.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise WireGenerationError(f"failed to read go.mod: {exc}") from exc
    for line in content.split("\n"):
        if line.startswith("module "):
            return line[len("module "):].strip()
    raise WireGenerationError("module name not found in go.mod")


def render_wire(
    module_name: str,
    imports: Iterable[str],
    provider_sets: Iterable[str],
    fields: Iterable[str],
) -> str:
    """Return the text of wire.go for the given imports, sets and fields."""
    import_lines = "".join(f'\n\t"{module_name}/{imp}"' for imp in imports)
    field_lines = "".join(f"\n\t{field}" for field in fields)
    set_lines = "".join(f"\n\t\t{name}," for name in provider_sets)
    return (
        "//go:build wireinject\n"
        "// +build wireinject\n"
        "\n"
        "package app\n"
        "\n"
        "import (\n"
        '\t"github.com/google/wire"'
        f"{import_lines}\n"
        ")\n"
        "\n"
        "// Taurus is the application structure\n"
        "type Taurus struct {"
        f"{field_lines}\n"
        "}\n"
        "\n"
        "\n"
        "// BuildTaurus builds the application\n"
        "func BuildTaurus() (*Taurus, func(), error) {\n"
        "\twire.Build(\n"
        "\t\t// application structure\n"
        '\t\twire.Struct(new(Taurus), "*"),\n'
        "\t\t// scanned provider sets"
        f"{set_lines}\n"
        "\t)\n"
        "\n"
        "\treturn new(Taurus), nil, nil\n"
        "}"
    )


def generate_wire(scanner_path) -> Path:
    """Scan scanner_path for provider sets and write wire.go into it."""
    scanner_path = Path(os.fspath(scanner_path))
    project_root = scanner_path.parent
    module_name = get_module_name(project_root)

    scanner = Scanner(project_root, module_name)
    try:
        scanner.scan_dir(scanner_path)
    except ScanError as exc:
        raise WireGenerationError(f"failed to scan directory: {exc}") from exc

    provider_sets = scanner.provider_sets
    logger.info("Found %d provider sets:", len(provider_sets))
    for info in provider_sets:
        logger.info(
            "  - %s.%s (%s)",
            info.pkg_path.rsplit("/", 1)[-1],
            info.name,
            info.struct_type,
        )

    text = render_wire(
        module_name,
        scanner.generate_wire_imports(),
        scanner.generate_wire_provider_sets(),
        scanner.generate_application_fields(),
    )
    target = scanner_path / "wire.go"
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise WireGenerationError(f"failed to create wire.go: {exc}") from exc
    logger.info("Successfully generated wire.go")
    return target