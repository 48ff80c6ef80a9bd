"""Catalogue of the components a generated project can include."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Component:
    """A library a generated project can depend on."""

    name: str
    package: str
    version: str
    description: str
    required: bool = False
    dependencies: tuple[str, ...] = ()
    is_custom: bool = False


class ComponentDependencyError(ValueError):
    """A selected component depends on one that was not selected."""

    def __init__(self, component: str, dependency: str) -> None:
        super().__init__(
            f"component {component} depends on {dependency}, which was not selected"
        )
        self.component = component
        self.dependency = dependency


ALL_COMPONENTS: tuple[Component, ...] = (
    Component(
        name="config",
        package="github.com/stones-hub/taurus-pro-config",
        version="v0.0.2",
        description="Configuration management component",
        required=True,
        is_custom=True,
    ),
    Component(
        name="http",
        package="github.com/stones-hub/taurus-pro-http",
        version="v0.0.2",
        description="HTTP server component",
        required=True,
        dependencies=("config",),
        is_custom=True,
    ),
    Component(
        name="wire",
        package="github.com/google/wire",
        version="v0.5.0",
        description="Dependency injection tool",
        required=True,
        is_custom=False,
    ),
    Component(
        name="redis",
        package="github.com/go-redis/redis/v8",
        version="v8.11.5",
        description="Redis client component",
        required=False,
        is_custom=False,
    ),
)


def get_required_components() -> list[Component]:
    """Return the components every project includes, in catalogue order."""
    return [comp for comp in ALL_COMPONENTS if comp.required]


def get_optional_components() -> list[Component]:
    """Return the components a user may choose, in catalogue order."""
    return [comp for comp in ALL_COMPONENTS if not comp.required]


def get_component_by_name(name: str) -> Component | None:
    """Return the component with the given name, or None."""
    return next((comp for comp in ALL_COMPONENTS if comp.name == name), None)


def validate_components(selected: Iterable[str]) -> None:
    """Raise ComponentDependencyError if a selected component lacks a dependency."""
    names = list(selected)
    chosen = set(names)
    for name in names:
        comp = get_component_by_name(name)
        if comp is None:
            continue
        for dep in comp.dependencies:
            if dep not in chosen:
                raise ComponentDependencyError(name, dep)


def generate_go_mod_requires(selected: Iterable[str]) -> str:
    """Return the require block of go.mod listing the required components."""
    lines = ["require ("]
    lines.extend(
        f"\t{comp.package} {comp.version}" for comp in get_required_components()
    )
    lines.append(")")
    return "\n".join(lines)