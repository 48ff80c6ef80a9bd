"""Command-line interface for creating new projects."""

from __future__ import annotations

import argparse
import os
import re
from collections.abc import Iterable, Sequence

import yaml

from taurusgen.components import (
    Component,
    get_component_by_name,
    get_optional_components,
    get_required_components,
)
from taurusgen.generator import GenerationError, ProjectGenerator


def generate_component_config(selected: Iterable[str]) -> bytes:
    """Return the YAML component configuration for the selected components."""
    components: dict[str, dict[str, object]] = {}
    for name in selected:
        comp = get_component_by_name(name)
        if comp is None:
            continue
        entry: dict[str, object] = {
            "package": comp.package,
            "version": comp.version,
            "description": comp.description,
            "enabled": True,
            "is_custom": comp.is_custom,
        }
        if comp.dependencies:
            entry["dependencies"] = list(comp.dependencies)
        components[name] = entry
    text = yaml.safe_dump({"components": components}, sort_keys=True, allow_unicode=True)
    return text.encode("utf-8")


def _option_label(comp: Component) -> str:
    return f"{comp.description} ({comp.package})"


def parse_selection(answers: Iterable[str], optional: Iterable[Component]) -> list[str]:
    """Map chosen option labels back to the names of the optional components."""
    candidates = list(optional)
    names: list[str] = []
    for answer in answers:
        start = answer.find("(") + 1
        end = answer.find(")")
        if start > 0 and end > start:
            package = answer[start:end]
            match = next((c for c in candidates if c.package == package), None)
            if match is not None:
                names.append(match.name)
    return names


def _ask_path(default: str) -> str:
    answer = input(f"Enter the project path [{default}]: ")
    return answer or default


def _ask_components(options: Sequence[str]) -> list[str]:
    print("Select the components to include:")
    for number, label in enumerate(options, start=1):
        print(f"  {number}) {label}")
    while True:
        answer = input("Numbers separated by spaces or commas, empty for none: ")
        tokens = [t for t in re.split(r"[\s,]+", answer.strip()) if t]
        try:
            chosen = {int(token) for token in tokens}
        except ValueError:
            print("Please enter option numbers only.")
            continue
        if any(not 1 <= number <= len(options) for number in chosen):
            print(f"Please choose numbers between 1 and {len(options)}.")
            continue
        return [label for number, label in enumerate(options, start=1) if number in chosen]


def run_create(project_name: str, template_dir=None) -> str:
    """Ask for a path and components, generate the project and return its path."""
    optional = get_optional_components()
    options = [_option_label(comp) for comp in optional]
    required_names = [comp.name for comp in get_required_components()]

    project_path = _ask_path(os.path.join(".", project_name))
    answers = _ask_components(options) if options else []

    if not project_path.endswith(project_name):
        project_path = os.path.join(project_path, project_name)

    selected = parse_selection(answers, optional) + required_names

    generator = ProjectGenerator(project_path, selected, template_dir)
    generator.component_config = generate_component_config(selected)
    generator.generate()

    print(f"\nProject created at: {project_path}")
    print("\nIncluded components:")
    print("Required components:")
    for name in required_names:
        comp = get_component_by_name(name)
        if comp is not None:
            print(f"- {_option_label(comp)}")

    extra = [name for name in selected if name not in required_names]
    if extra:
        print("\nOptional components:")
        for name in extra:
            comp = get_component_by_name(name)
            if comp is not None:
                print(f"- {_option_label(comp)}")

    return project_path


def main(argv=None) -> int:
    """Run the command line and return the exit status."""
    parser = argparse.ArgumentParser(
        prog="taurus",
        description="Taurus Pro is a CLI tool for creating and managing Go microservice projects",
    )
    commands = parser.add_subparsers(dest="command")
    create = commands.add_parser("create", help="Create a new Taurus Pro project")
    create.add_argument("project_name")
    create.add_argument(
        "--template-dir", default=None, help="directory holding the project templates"
    )
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        run_create(args.project_name, args.template_dir)
    except (EOFError, KeyboardInterrupt):
        print("prompt failed: input was interrupted")
        return 1
    except GenerationError as exc:
        print(f"failed to generate project: {exc}")
        return 1
    return 0