"""Load a directory of Go source files as a package.

This is the loader both the scanner and the resolvers call. It applies the
target's build constraints, reads each buildable file's package clause and
import declarations, and reports the result as a :class:`Package`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from ..context import BuildContext
from ..errors import MalformedPackageError
from ..errors import NoBuildableSourceError
from ..errors import PackageIOError
from .constraints import ConstraintSyntaxError
from .constraints import TagMatcher
from .constraints import match_file_name
from .constraints import match_header
from .models import Package

logger = logging.getLogger(__name__)

# Non-Go files that still belong to a package when their name matches
OTHER_SOURCE_EXTENSIONS = frozenset(
    {".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".m", ".s", ".S", ".sx", ".f", ".F", ".f90", ".syso"}
)


class _SyntaxError(Exception):
    pass


def _tokens(source: str) -> Iterator[str]:
    """Yield the tokens of a Go file up to wherever the caller stops reading.

    Comments and whitespace are dropped. String literals are yielded with
    their quotes so the parser can tell them apart from identifiers.
    """
    i = 0
    n = len(source)
    while i < n:
        c = source[i]
        if c.isspace():
            i += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end < 0 else end + 1
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end < 0:
                raise _SyntaxError("comment not terminated")
            i = end + 2
        elif c == '"':
            j = i + 1
            while j < n and source[j] != '"':
                if source[j] == "\n":
                    raise _SyntaxError("newline in string")
                j += 2 if source[j] == "\\" else 1
            if j >= n:
                raise _SyntaxError("string literal not terminated")
            yield source[i : j + 1]
            i = j + 1
        elif c == "`":
            end = source.find("`", i + 1)
            if end < 0:
                raise _SyntaxError("raw string literal not terminated")
            yield source[i : end + 1]
            i = end + 1
        elif c.isalnum() or c == "_":
            j = i + 1
            while j < n and (source[j].isalnum() or source[j] == "_"):
                j += 1
            yield source[i:j]
            i = j
        else:
            yield c
            i += 1


def _unquote(literal: str) -> str:
    if literal.startswith("`"):
        return literal[1:-1]
    body = literal[1:-1]
    out = []
    i = 0
    while i < len(body):
        if body[i] == "\\" and i + 1 < len(body):
            out.append(body[i + 1])
            i += 2
        else:
            out.append(body[i])
            i += 1
    return "".join(out)


def _is_string(token: str | None) -> bool:
    return token is not None and token[:1] in ('"', "`")


def _is_ident(token: str | None) -> bool:
    return token is not None and (token[0].isalpha() or token[0] == "_")


def parse_header(source: str) -> tuple[str, list[str]]:
    """Read the package clause and import declarations of a Go file.

    Returns:
        Tuple of (package name, import paths in source order)

    Raises:
        ValueError: The header is not valid Go
    """
    tokens = _tokens(source)

    def advance() -> str | None:
        return next(tokens, None)

    try:
        if advance() != "package":
            raise _SyntaxError("expected 'package'")
        name = advance()
        if name is None or not _is_ident(name):
            raise _SyntaxError(f"expected package name, found {name!r}")

        imports: list[str] = []

        def import_spec(token: str | None) -> None:
            if token == "." or _is_ident(token):
                token = advance()
            if token is None or not _is_string(token):
                raise _SyntaxError(f"expected import path, found {token!r}")
            path = _unquote(token)
            if not path:
                raise _SyntaxError("empty import path")
            imports.append(path)

        token = advance()
        while token is not None:
            if token == ";":
                token = advance()
                continue
            if token != "import":
                break
            token = advance()
            if token == "(":
                token = advance()
                while token != ")":
                    if token is None:
                        raise _SyntaxError("import block not terminated")
                    if token != ";":
                        import_spec(token)
                    token = advance()
            else:
                import_spec(token)
            token = advance()
    except _SyntaxError as e:
        raise ValueError(str(e)) from e

    return name, imports


def import_dir(import_path: str, directory: Path, context: BuildContext) -> Package:
    """Load ``directory`` as the package known as ``import_path``.

    Args:
        import_path: Identifier to assign; never taken from the source
        directory: Directory holding the package's files
        context: Target platform used to evaluate build constraints

    Returns:
        The loaded package

    Raises:
        NoBuildableSourceError: No .go file survives the build constraints
        MalformedPackageError: Files disagree on the package name or a
            header does not parse
        PackageIOError: The directory or a file cannot be read
    """
    directory = Path(directory)
    match = TagMatcher(
        goos=context.goos,
        goarch=context.goarch,
        cgo_enabled=context.cgo_enabled,
        extra_tags=frozenset(context.build_tags),
    )

    try:
        with os.scandir(directory) as it:
            entries = sorted((e for e in it if e.is_file()), key=lambda e: e.name)
    except OSError as e:
        raise PackageIOError(directory, e) from e

    go_files: list[str] = []
    ignored: list[str] = []
    other: list[str] = []
    imports: set[str] = set()
    name = ""
    first_file = ""

    for entry in entries:
        file_name = entry.name
        ext = os.path.splitext(file_name)[1]
        if ext != ".go":
            if (
                ext in OTHER_SOURCE_EXTENSIONS
                and not file_name.startswith((".", "_"))
                and match_file_name(file_name, match)
            ):
                other.append(file_name)
            continue
        if file_name.startswith((".", "_")) or file_name.endswith("_test.go"):
            ignored.append(file_name)
            continue
        if not match_file_name(file_name, match):
            ignored.append(file_name)
            continue

        path = directory / file_name
        try:
            source = path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as e:
            raise MalformedPackageError(directory, f"{file_name}: not valid UTF-8") from e
        except OSError as e:
            raise PackageIOError(path, e) from e

        try:
            if not match_header(source, match):
                ignored.append(file_name)
                continue
        except ConstraintSyntaxError as e:
            raise MalformedPackageError(directory, f"{file_name}: {e}") from e

        try:
            file_package, file_imports = parse_header(source)
        except ValueError as e:
            raise MalformedPackageError(directory, f"{file_name}: {e}") from e

        if file_package == "documentation":
            ignored.append(file_name)
            continue
        if not name:
            name, first_file = file_package, file_name
        elif file_package != name:
            raise MalformedPackageError(
                directory, f"found packages {name} ({first_file}) and {file_package} ({file_name})"
            )

        go_files.append(file_name)
        imports.update(file_imports)

    if not go_files:
        raise NoBuildableSourceError(directory)

    logger.debug(f"[import] {import_path} <- {directory} ({len(go_files)} files, {len(imports)} imports)")
    return Package(
        import_path=import_path,
        dir=directory,
        name=name,
        imports=tuple(sorted(imports)),
        go_files=tuple(go_files),
        ignored_files=tuple(ignored),
        other_files=tuple(other),
        goroot=directory.is_relative_to(context.stdlib_root),
    )
