"""Build constraints: which files of a package belong to the target.

Two mechanisms decide whether a ``.go`` file is built:

- the file name (``x_linux.go``, ``x_arm64.go``, ``x_linux_arm64.go``)
- constraint comments in the file header, either ``//go:build <expr>`` or
  the legacy ``// +build`` lines; ``//go:build`` wins when both exist
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable
from dataclasses import dataclass

KNOWN_OS = frozenset(
    {
        "aix",
        "android",
        "darwin",
        "dragonfly",
        "freebsd",
        "hurd",
        "illumos",
        "ios",
        "js",
        "linux",
        "nacl",
        "netbsd",
        "openbsd",
        "plan9",
        "solaris",
        "wasip1",
        "windows",
        "zos",
    }
)

KNOWN_ARCH = frozenset(
    {
        "386",
        "amd64",
        "amd64p32",
        "arm",
        "armbe",
        "arm64",
        "arm64be",
        "loong64",
        "mips",
        "mipsle",
        "mips64",
        "mips64le",
        "mips64p32",
        "mips64p32le",
        "ppc",
        "ppc64",
        "ppc64le",
        "riscv",
        "riscv64",
        "s390",
        "s390x",
        "sparc",
        "sparc64",
        "wasm",
    }
)

UNIX_OS = frozenset(
    {
        "aix",
        "android",
        "darwin",
        "dragonfly",
        "freebsd",
        "hurd",
        "illumos",
        "ios",
        "linux",
        "netbsd",
        "openbsd",
        "solaris",
    }
)

# GOOS values that also satisfy another GOOS tag
_OS_ALIASES = {"android": "linux", "illumos": "solaris", "ios": "darwin"}

_RELEASE_TAG = re.compile(r"^go1\.\d+$")
_TOKEN = re.compile(r"\s*(&&|\|\||!|\(|\)|[A-Za-z0-9_.]+)")


class ConstraintSyntaxError(ValueError):
    """Raised for a ``//go:build`` expression that does not parse."""


@dataclass(frozen=True)
class TagMatcher:
    """Decides whether a single build tag is satisfied for a target."""

    goos: str
    goarch: str
    cgo_enabled: bool = False
    extra_tags: frozenset[str] = frozenset()

    def __call__(self, tag: str) -> bool:
        if tag in self.extra_tags:
            return True
        if tag in (self.goos, self.goarch):
            return True
        if _OS_ALIASES.get(self.goos) == tag:
            return True
        if tag == "unix":
            return self.goos in UNIX_OS
        if tag == "cgo":
            return self.cgo_enabled
        if tag == "gc":
            return True
        return bool(_RELEASE_TAG.match(tag))


def match_file_name(file_name: str, match: TagMatcher) -> bool:
    """Check the ``_GOOS``/``_GOARCH`` suffix rules of a source file name."""
    stem = os.path.splitext(file_name)[0]
    if stem.endswith("_test"):
        stem = stem[: -len("_test")]

    # The first element is never a constraint: linux.go builds everywhere.
    _, sep, rest = stem.partition("_")
    if not sep:
        return True
    parts = rest.split("_")

    if len(parts) >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
        return match(parts[-2]) and match(parts[-1])
    if parts[-1] in KNOWN_OS or parts[-1] in KNOWN_ARCH:
        return match(parts[-1])
    return True


class _ExprParser:
    """Recursive-descent parser for ``//go:build`` expressions.

    Grammar::

        expr   := and ('||' and)*
        and    := unary ('&&' unary)*
        unary  := '!' unary | '(' expr ')' | tag
    """

    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize(text)
        self.pos = 0

    def _tokenize(self, text: str) -> list[str]:
        tokens = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            m = _TOKEN.match(text, pos)
            if not m:
                raise ConstraintSyntaxError(f"unexpected character in build constraint: {text[pos:]!r}")
            tokens.append(m.group(1))
            pos = m.end()
        return tokens

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise ConstraintSyntaxError(f"unexpected end of build constraint: {self.text!r}")
        self.pos += 1
        return token

    def parse(self) -> Callable[[Callable[[str], bool]], bool]:
        node = self._or()
        if self._peek() is not None:
            raise ConstraintSyntaxError(f"unexpected {self._peek()!r} in build constraint: {self.text!r}")
        return node

    def _or(self):
        terms = [self._and()]
        while self._peek() == "||":
            self._next()
            terms.append(self._and())
        if len(terms) == 1:
            return terms[0]
        return lambda match: any(term(match) for term in terms)

    def _and(self):
        terms = [self._unary()]
        while self._peek() == "&&":
            self._next()
            terms.append(self._unary())
        if len(terms) == 1:
            return terms[0]
        return lambda match: all(term(match) for term in terms)

    def _unary(self):
        token = self._next()
        if token == "!":
            inner = self._unary()
            return lambda match: not inner(match)
        if token == "(":
            inner = self._or()
            if self._next() != ")":
                raise ConstraintSyntaxError(f"missing ) in build constraint: {self.text!r}")
            return inner
        if token in ("&&", "||", ")"):
            raise ConstraintSyntaxError(f"unexpected {token!r} in build constraint: {self.text!r}")
        return lambda match: match(token)


def eval_go_build(expr: str, match: Callable[[str], bool]) -> bool:
    """Evaluate the expression of a ``//go:build`` line."""
    return _ExprParser(expr).parse()(match)


def eval_plus_build(lines: list[str], match: Callable[[str], bool]) -> bool:
    """Evaluate legacy ``// +build`` lines.

    Space-separated options are ORed, comma-separated terms are ANDed, and
    separate lines are ANDed together.
    """
    for line in lines:
        satisfied = False
        for option in line.split():
            if all(_match_plus_term(term, match) for term in option.split(",")):
                satisfied = True
                break
        if not satisfied:
            return False
    return True


def _match_plus_term(term: str, match: Callable[[str], bool]) -> bool:
    if term.startswith("!!") or not term.lstrip("!"):
        return False
    if term.startswith("!"):
        return not match(term[1:])
    return match(term)


def header_constraints(source: str) -> tuple[str | None, list[str]]:
    """Extract the build constraints from a file header.

    Only comment lines that precede the package clause and are separated
    from it by a blank line count; a comment block directly above
    ``package`` is documentation.

    Returns:
        Tuple of (``//go:build`` expression or None, ``// +build`` arguments)
    """
    go_build: str | None = None
    plus_build: list[str] = []
    block: list[str] = []
    in_block_comment = False

    for raw in source.splitlines():
        line = raw.strip()
        if in_block_comment:
            if "*/" in line:
                in_block_comment = False
                block = []
            continue
        if not line:
            # Blank line: the preceding comment block is eligible.
            for comment in block:
                if comment.startswith("//go:build") and go_build is None:
                    go_build = comment[len("//go:build") :].strip()
                elif comment.startswith("// +build") or comment.startswith("//+build"):
                    plus_build.append(comment.split("+build", 1)[1].strip())
            block = []
            continue
        if line.startswith("//"):
            block.append(line)
            continue
        if line.startswith("/*"):
            block = []
            if "*/" not in line[2:]:
                in_block_comment = True
            continue
        break

    return go_build, plus_build


def match_header(source: str, match: TagMatcher) -> bool:
    """Check the header constraints of a Go source file."""
    go_build, plus_build = header_constraints(source)
    if go_build is not None:
        return eval_go_build(go_build, match)
    if plus_build:
        return eval_plus_build(plus_build, match)
    return True
