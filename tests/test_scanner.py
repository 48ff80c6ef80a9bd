import textwrap
from pathlib import Path

import pytest

from taurusgen.scanner import ProviderSetInfo, ScanError, Scanner

SERVICE = """\
package service

import (
    "github.com/google/wire"
)

// IndexService example
type IndexService struct{}

var IndexServiceSet = wire.NewSet(wire.Struct(new(IndexService), "*"))

func (s *IndexService) Home() string {
    return "Hello from my-service!"
}

type IndexService2 struct{}
"""

CONTROLLER = """\
package controller

import (
    "net/http"

    "my-service/app/service"

    "github.com/google/wire"
)

type IndexController struct {
    IndexService *service.IndexService
}

var IndexControllerSet = wire.NewSet(wire.Struct(new(IndexController), "*"))

func (c *IndexController) Home(w http.ResponseWriter, r *http.Request) {
    content := c.IndexService.Home()
    _ = content
}
"""

COMPONENT = """\
package component

import (
    "fmt"
    "sync"

    "github.com/google/wire"
)

type Component struct {
    mu         sync.RWMutex
    components map[string]interface{}
}

var ComponentSet = wire.NewSet(NewComponent)

func NewComponent() *Component {
    return &Component{
        components: make(map[string]interface{}),
    }
}

func (c *Component) MustGet(name string) interface{} {
    panic(fmt.Sprintf("component %s not found", name))
}
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path):
    _write(tmp_path / "app" / "service" / "index_service.go", SERVICE)
    _write(tmp_path / "app" / "controller" / "index_controller.go", CONTROLLER)
    _write(tmp_path / "app" / "component" / "component.go", COMPONENT)
    return tmp_path


def _scan_source(tmp_path, text):
    path = _write(tmp_path / "pkg" / "file.go", text)
    scanner = Scanner(tmp_path, "mod")
    scanner.scan_file(path)
    return scanner


def test_scan_dir_finds_sets_in_walk_order(project):
    scanner = Scanner(project, "my-service")
    scanner.scan_dir(project / "app")
    assert scanner.provider_sets == [
        ProviderSetInfo("ComponentSet", "app/component", "Component"),
        ProviderSetInfo("IndexControllerSet", "app/controller", "IndexController"),
        ProviderSetInfo("IndexServiceSet", "app/service", "IndexService"),
    ]


def test_generated_lists(project):
    scanner = Scanner(project, "my-service")
    scanner.scan_dir(project / "app")
    assert scanner.generate_wire_imports() == [
        "app/component",
        "app/controller",
        "app/service",
    ]
    assert scanner.generate_wire_provider_sets() == [
        "component.ComponentSet",
        "controller.IndexControllerSet",
        "service.IndexServiceSet",
    ]
    assert scanner.generate_application_fields()[2] == (
        "\tIndexService *service.IndexService"
    )


def test_imports_are_deduplicated(tmp_path):
    _write(tmp_path / "app" / "svc" / "a.go", SERVICE)
    _write(
        tmp_path / "app" / "svc" / "b.go",
        "package svc\nimport \"github.com/google/wire\"\n"
        "type Other struct{}\nvar OtherSet = wire.NewSet()\n",
    )
    scanner = Scanner(tmp_path, "m")
    scanner.scan_dir(tmp_path / "app")
    assert scanner.generate_wire_imports() == ["app/svc"]
    assert len(scanner.generate_wire_provider_sets()) == 2


def test_skips_test_and_generated_files(tmp_path):
    _write(tmp_path / "app" / "x" / "x_test.go", SERVICE)
    _write(tmp_path / "app" / "x" / "wire_gen.go", SERVICE)
    _write(tmp_path / "app" / "x" / "notes.txt", "not go {")
    scanner = Scanner(tmp_path, "m")
    scanner.scan_dir(tmp_path / "app")
    assert scanner.provider_sets == []


def test_set_without_matching_struct_is_ignored(tmp_path):
    scanner = _scan_source(
        tmp_path,
        "package p\nimport \"github.com/google/wire\"\nvar OrphanSet = wire.NewSet()\n",
    )
    assert scanner.provider_sets == []


def test_grouped_declarations(tmp_path):
    scanner = _scan_source(
        tmp_path,
        """\
        package p

        import "github.com/google/wire"

        type (
            Alpha struct{ n int }
            Beta  int
        )

        var (
            counter = 1
            AlphaSet = wire.NewSet(
                NewAlpha,
            )
            BetaSet = wire.NewSet()
        )
        """,
    )
    assert [p.name for p in scanner.provider_sets] == ["AlphaSet"]


def test_other_selector_is_not_a_new_set(tmp_path):
    scanner = _scan_source(
        tmp_path,
        """\
        package p
        type Foo struct{}
        var FooSet = w.NewSet()
        var Foo2Set = wire.Build()
        """,
    )
    assert scanner.provider_sets == []


def test_comments_strings_and_local_types_are_ignored(tmp_path):
    scanner = _scan_source(
        tmp_path,
        """\
        package p
        // type Fake struct{}
        /* type Other struct { */
        var text = "} type Quoted struct{"
        var raw = `{`
        func f() {
            type Local struct{}
            _ = Local{}
        }
        var FakeSet = wire.NewSet()
        var OtherSet = wire.NewSet()
        var QuotedSet = wire.NewSet()
        var LocalSet = wire.NewSet()
        """,
    )
    assert scanner.provider_sets == []


def test_generic_struct_and_typed_var(tmp_path):
    scanner = _scan_source(
        tmp_path,
        """\
        package p
        type Box[T any] struct{ v T }
        var BoxSet wire.ProviderSet = wire.NewSet(NewBox)
        """,
    )
    assert scanner.provider_sets == [ProviderSetInfo("BoxSet", "pkg", "Box")]


def test_package_path_at_root(tmp_path):
    scanner = Scanner(tmp_path, "m")
    assert scanner.package_path(tmp_path / "main.go") == "."
    assert scanner.package_path(tmp_path / "a" / "b" / "c.go") == "a/b"


def test_unterminated_string_is_a_scan_error(tmp_path):
    path = _write(tmp_path / "bad.go", 'package p\nvar s = "oops\n')
    with pytest.raises(ScanError):
        Scanner(tmp_path, "m").scan_file(path)


def test_unbalanced_braces_is_a_scan_error(tmp_path):
    path = _write(tmp_path / "bad.go", "package p\nfunc f() {\n")
    with pytest.raises(ScanError):
        Scanner(tmp_path, "m").scan_file(path)


def test_missing_package_clause_is_a_scan_error(tmp_path):
    path = _write(tmp_path / "bad.go", "type X struct{}\n")
    with pytest.raises(ScanError):
        Scanner(tmp_path, "m").scan_file(path)


def test_missing_directory_is_a_scan_error(tmp_path):
    with pytest.raises(ScanError):
        Scanner(tmp_path, "m").scan_dir(tmp_path / "absent")