"""Find wire provider sets in Go source files."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import NamedTuple

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """A directory or Go file could not be read or parsed."""


@dataclass(frozen=True)
class ProviderSetInfo:
    """Where a provider set lives and which struct it builds."""

    name: str
    pkg_path: str
    struct_type: str


class _Token(NamedTuple):
    kind: str
    text: str


_TOKEN_RE = re.compile(
    r"""
    (?P<newline>\n)
  | (?P<space>[ \t\r\f\v]+)
  | (?P<line_comment>//[^\n]*)
  | (?P<block_comment>/\*.*?\*/)
  | (?P<bad>/\*)
  | (?P<literal>`[^`]*`|"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*'|\.?[0-9](?:[eEpP][+-]|[\w.])*)
  | (?P<ident>[^\W\d]\w*)
  | (?P<op>\.\.\.|<<=|>>=|&\^=|&&|\|\||<-|\+\+|--|[-+*/%&|^<>=!:]=|<<|>>|&\^|[-+*/%&|^<>=!()\[\]{},;.:~])
    """,
    re.VERBOSE | re.DOTALL,
)

_KEYWORDS = frozenset(
    {
        "break", "case", "chan", "const", "continue", "default", "defer",
        "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
        "interface", "map", "package", "range", "return", "select", "struct",
        "switch", "type", "var",
    }
)
_SEMI_KEYWORDS = frozenset({"break", "continue", "fallthrough", "return"})
_SEMI_OPS = frozenset({")", "]", "}", "++", "--"})
_PAIRS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_PAIRS.values())
_TYPE_PARAM_FOLLOWERS = frozenset({",", "*", "[", "~", "("})


def _needs_semicolon(last: _Token | None) -> bool:
    if last is None:
        return False
    if last.kind in ("ident", "literal"):
        return True
    if last.kind == "keyword":
        return last.text in _SEMI_KEYWORDS
    return last.text in _SEMI_OPS


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None or match.lastgroup == "bad":
            line = source.count("\n", 0, pos) + 1
            raise ScanError(f"syntax error at line {line}")
        kind, text = match.lastgroup, match.group()
        pos = match.end()
        if kind == "newline" or (kind == "block_comment" and "\n" in text):
            if _needs_semicolon(tokens[-1] if tokens else None):
                tokens.append(_Token("op", ";"))
        elif kind == "ident":
            tokens.append(_Token("keyword" if text in _KEYWORDS else "ident", text))
        elif kind in ("literal", "op"):
            tokens.append(_Token(kind, text))
    if _needs_semicolon(tokens[-1] if tokens else None):
        tokens.append(_Token("op", ";"))
    _check_balanced(tokens)
    return tokens


def _check_balanced(tokens: list[_Token]) -> None:
    stack: list[str] = []
    for token in tokens:
        if token.kind != "op":
            continue
        if token.text in _PAIRS:
            stack.append(_PAIRS[token.text])
        elif token.text in _CLOSERS:
            if not stack or stack.pop() != token.text:
                raise ScanError(f"unexpected {token.text!r}")
    if stack:
        raise ScanError(f"missing {stack[-1]!r}")


def _split(tokens: list[_Token], separator: str) -> list[list[_Token]]:
    """Split tokens on a separator that is not nested in brackets."""
    parts: list[list[_Token]] = []
    current: list[_Token] = []
    depth = 0
    for token in tokens:
        if token.kind == "op":
            if token.text in _PAIRS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
            elif token.text == separator and depth == 0:
                if current:
                    parts.append(current)
                current = []
                continue
        current.append(token)
    if current:
        parts.append(current)
    return parts


def _matching(tokens: list[_Token], start: int) -> int:
    depth = 0
    for offset, token in enumerate(tokens[start:]):
        if token.kind != "op":
            continue
        if token.text in _PAIRS:
            depth += 1
        elif token.text in _CLOSERS:
            depth -= 1
            if depth == 0:
                return start + offset
    raise ScanError("unbalanced brackets")


def _specs(decl: list[_Token]) -> list[list[_Token]]:
    body = decl[1:]
    if body and body[0].text == "(" and _matching(body, 0) == len(body) - 1:
        return _split(body[1:-1], ";")
    return [body] if body else []


def _is_type_params(rest: list[_Token]) -> bool:
    inner = rest[1:_matching(rest, 0)]
    if len(inner) < 2 or inner[0].kind != "ident":
        return False
    follower = inner[1]
    return follower.kind in ("ident", "keyword") or follower.text in _TYPE_PARAM_FOLLOWERS


def _struct_name(spec: list[_Token]) -> str | None:
    if not spec or spec[0].kind != "ident":
        return None
    rest = spec[1:]
    if rest and rest[0].text == "[" and _is_type_params(rest):
        rest = rest[_matching(rest, 0) + 1:]
    if rest and rest[0].text == "=":
        rest = rest[1:]
    if rest and rest[0].kind == "keyword" and rest[0].text == "struct":
        return spec[0].text
    return None


def _var_names_and_value(spec: list[_Token]) -> tuple[list[str], list[_Token]]:
    names: list[str] = []
    rest = spec
    while rest and rest[0].kind == "ident":
        names.append(rest[0].text)
        if len(rest) > 1 and rest[1].text == ",":
            rest = rest[2:]
        else:
            rest = rest[1:]
            break
    parts = _split(rest, "=")
    if not rest or rest[0].text == "=":
        values = rest[1:]
    elif len(parts) > 1:
        values = rest[len(parts[0]) + 1:]
    else:
        values = []
    first = _split(values, ",")
    return names, (first[0] if first else [])


def _is_new_set_call(value: list[_Token]) -> bool:
    return (
        len(value) >= 4
        and value[0] == _Token("ident", "wire")
        and value[1].text == "."
        and value[2] == _Token("ident", "NewSet")
        and value[3].text == "("
        and _matching(value, 3) == len(value) - 1
    )


def _base(pkg_path: str) -> str:
    stripped = pkg_path.rstrip("/")
    if not stripped:
        return "/" if pkg_path else "."
    return stripped.rsplit("/", 1)[-1]


def _walk(path: str) -> Iterator[str]:
    if not os.path.isdir(path) or os.path.islink(path):
        yield path
        return
    for name in sorted(os.listdir(path)):
        yield from _walk(os.path.join(path, name))


class Scanner:
    """Collects provider sets declared with wire.NewSet in Go files."""

    def __init__(self, project_root, module_name):
        self.project_root = os.path.abspath(project_root)
        self.module_name = module_name
        self._provider_sets: list[ProviderSetInfo] = []

    @property
    def provider_sets(self) -> list[ProviderSetInfo]:
        """The provider sets found so far, in scan order."""
        return list(self._provider_sets)

    def scan_dir(self, directory) -> None:
        """Scan every non-test, non-generated .go file below directory."""
        directory = os.fspath(directory)
        try:
            os.lstat(directory)
            for path in _walk(directory):
                name = os.path.basename(path)
                if (
                    not name.endswith(".go")
                    or name.endswith("_test.go")
                    or name.endswith("wire_gen.go")
                ):
                    continue
                self.scan_file(path)
        except OSError as exc:
            raise ScanError(f"failed to walk {directory}: {exc}") from exc

    def scan_file(self, filename) -> None:
        """Record provider sets named after a struct declared in the same file."""
        filename = os.fspath(filename)
        logger.debug("Scanning file: %s", filename)
        try:
            source = Path(filename).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ScanError(f"failed to read file {filename}: {exc}") from exc

        try:
            decls = _split(_tokenize(source), ";")
        except ScanError as exc:
            raise ScanError(f"failed to parse file {filename}: {exc}") from exc
        if not decls or [t.text for t in decls[0][:1]] != ["package"] or len(
            decls[0]
        ) != 2 or decls[0][1].kind != "ident":
            raise ScanError(f"failed to parse file {filename}: expected package clause")

        pkg_path = self.package_path(filename)
        structs = {
            name
            for decl in decls
            if decl[0].text == "type"
            for spec in _specs(decl)
            if (name := _struct_name(spec)) is not None
        }
        for name in sorted(structs):
            logger.debug("Found struct: %s", name)

        for decl in decls:
            if decl[0].text != "var":
                continue
            for spec in _specs(decl):
                names, value = _var_names_and_value(spec)
                if not _is_new_set_call(value):
                    continue
                for name in names:
                    struct_type = name[:-3] if name.endswith("Set") else name
                    if struct_type in structs:
                        logger.debug(
                            "Found provider set: %s for struct: %s in package %s",
                            name, struct_type, pkg_path,
                        )
                        self._provider_sets.append(
                            ProviderSetInfo(name, pkg_path, struct_type)
                        )

    def package_path(self, filename) -> str:
        """Return the slash-separated directory of filename relative to the project root."""
        try:
            rel = os.path.relpath(os.path.abspath(filename), self.project_root)
        except ValueError as exc:
            logger.debug("Cannot relate %s to %s: %s", filename, self.project_root, exc)
            return ""
        return PurePath(rel).parent.as_posix()

    def generate_wire_imports(self) -> list[str]:
        """Return each distinct package path once, in order of first appearance."""
        return list(dict.fromkeys(info.pkg_path for info in self._provider_sets))

    def generate_wire_provider_sets(self) -> list[str]:
        """Return qualified provider set references such as pkg.NameSet."""
        return [f"{_base(info.pkg_path)}.{info.name}" for info in self._provider_sets]

    def generate_application_fields(self) -> list[str]:
        """Return struct field declarations for the application type."""
        return [
            f"\t{info.struct_type} *{_base(info.pkg_path)}.{info.struct_type}"
            for info in self._provider_sets
            if info.struct_type
        ]