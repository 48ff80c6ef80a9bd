# taurusgen

`taurusgen` creates new Go microservice projects from a template directory.
It does four things:

* It copies the template tree into the new project. In every copied file, the
  text `{{.ProjectName}}` is replaced with the last element of the project path.
* It writes a `go.mod` that lists the required components and the optional ones
  you chose.
* It scans the project's `app` directory for `wire.NewSet` provider sets and
  writes `app/wire.go` from them.
* It saves the component configuration to
  `config/autoload/components/components.yaml`.

## Installation

```
pip install .
```

Generation also runs `go version`, `go mod tidy` and `wire`, so `go` and `wire`
must be on your `PATH`. If `go version` fails or its output cannot be read,
`go.mod` is written with `go 1.21`.

## Templates

The package does not include a project template. Pass the directory that holds
your template with `--template-dir`, or as `template_dir` when you call it from
Python. The template must have an `app` directory or allow one to be created.
A `go.mod` at the top of the template is not copied, because a new one is
written.

## Creating a project

```
taurus create my-service --template-dir path/to/templates
```

The command asks two questions:

* The project path. The default is `./my-service`. If the path you enter does
  not end with the project name, the name is added to it.
* Which optional components to include, such as the Redis client. Answer with
  option numbers separated by spaces or commas. Leave the answer empty to choose
  none.

The required components are always included: configuration management, the HTTP
server and the wire dependency injection tool. After the project is created, the
command prints its path and the required and optional components it contains.

The exit status is 0 on success. It is 1 if generation fails or the prompt is
interrupted. Running `taurus` with no subcommand prints the help.

## Components

The component catalogue is in `taurusgen.components`:

```python
from taurusgen.components import (
    get_required_components,
    get_optional_components,
    get_component_by_name,
    validate_components,
)

names = [c.name for c in get_required_components()]
validate_components(names)        # raises ComponentDependencyError if a dependency is missing
redis = get_component_by_name("redis")   # a Component, or None
```

## Generating wire.go on its own

```python
from taurusgen.wire import generate_wire

path = generate_wire("path/to/project/app")
```

`generate_wire` reads the module name from the `go.mod` in the parent directory.
It walks the directory and skips `_test.go` and `wire_gen.go` files. It collects
every `var XxxSet = wire.NewSet(...)` whose struct `Xxx` is declared in the same
file. It then writes `wire.go`, with a `Taurus` struct and a `BuildTaurus`
injector, and returns the path of that file. If it fails, it raises
`WireGenerationError`.

You can also use the lower-level parts yourself: `taurusgen.scanner.Scanner` and
`taurusgen.wire.render_wire`.

## Using the generator from Python

```python
from taurusgen.cli import generate_component_config
from taurusgen.generator import ProjectGenerator

components = ["config", "http", "wire"]
gen = ProjectGenerator("out/my-service", components, "path/to/templates")
gen.component_config = generate_component_config(components)
gen.generate()
```

`generate` raises `GenerationError` if any step fails. If `component_config` is
not set, `components.yaml` is written empty.

## Running the tests

```
pip install .[test]
pytest
```