"""Scaffolding for Go microservice projects: component catalogue, go.mod and wire.go generation, and a project-creation command."""

__version__ = "0.1.0"