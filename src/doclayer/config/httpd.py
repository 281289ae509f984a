"""httpd-style configuration reader.

Turns configuration text into a flat, document-ordered tuple of
:class:`~doclayer.domain.directives.Directive` occurrences. Block openers
appear in the tuple before their contents; each occurrence points at its
enclosing block through ``parent``.

Supported syntax:
- ``#`` comment lines and blank lines
- trailing ``\\`` line continuation
- double- or single-quoted arguments (``\\"`` escapes the quote)
- ``<Block args>`` ... ``</Block>`` sections, matched case-insensitively
- ``Include`` / ``IncludeOptional`` with glob patterns, relative to the
  including file
"""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterator
from pathlib import Path

from doclayer.domain.directives import Directive
from doclayer.domain.errors import ConfigSyntaxError

logger = logging.getLogger(__name__)

_INCLUDE_DIRECTIVES = frozenset({"include", "includeoptional"})
_MAX_INCLUDE_DEPTH = 16


def split_args(text: str, *, source: str | None = None, line: int | None = None) -> list[str]:
    """Split a directive line into words, honouring quotes."""
    words: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch in "\"'":
            quote = ch
            i += 1
            buf: list[str] = []
            while i < n and text[i] != quote:
                if text[i] == "\\" and i + 1 < n and text[i + 1] == quote:
                    i += 1
                buf.append(text[i])
                i += 1
            if i >= n:
                msg = f"Unterminated {quote} quote"
                raise ConfigSyntaxError(msg, source=source, line=line)
            i += 1
            words.append("".join(buf))
            continue
        start = i
        while i < n and not text[i].isspace():
            i += 1
        words.append(text[start:i])
    return words


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(first_line_number, joined_line)`` with continuations applied."""
    pending: list[str] = []
    start = 0
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip()
        if not pending:
            start = number
        if line.endswith("\\"):
            pending.append(line[:-1])
            continue
        pending.append(line)
        yield start, " ".join(part.strip() for part in pending).strip()
        pending = []
    if pending:
        yield start, " ".join(part.strip() for part in pending).strip()


class _Reader:
    """Stateful walk over one configuration file and its includes."""

    def __init__(self) -> None:
        self.directives: list[Directive] = []

    def read_file(self, path: Path, parent: Directive | None, depth: int) -> None:
        if depth > _MAX_INCLUDE_DEPTH:
            msg = f"Include nesting deeper than {_MAX_INCLUDE_DEPTH} levels"
            raise ConfigSyntaxError(msg, source=str(path))
        logger.debug("Reading configuration %s", path)
        text = path.read_text(encoding="utf-8")
        self.read_text(text, source=str(path), parent=parent, depth=depth, base_dir=path.parent)

    def read_text(
        self,
        text: str,
        *,
        source: str | None,
        parent: Directive | None,
        depth: int = 0,
        base_dir: Path | None = None,
    ) -> None:
        stack: list[Directive] = []
        current = parent

        for number, line in _logical_lines(text):
            if not line or line.startswith("#"):
                continue

            if line.startswith("</"):
                if not line.endswith(">"):
                    msg = f"{line.split()[0]} directive missing closing '>'"
                    raise ConfigSyntaxError(msg, source=source, line=number)
                closing = line[2:-1].strip()
                if not stack:
                    msg = f"</{closing}> without matching <{closing}> section"
                    raise ConfigSyntaxError(msg, source=source, line=number)
                opened = stack.pop()
                if opened.block_name.casefold() != closing.casefold():
                    msg = f"Expected </{opened.block_name}> but saw </{closing}>"
                    raise ConfigSyntaxError(msg, source=source, line=number)
                current = opened.parent
                continue

            if line.startswith("<"):
                if not line.endswith(">"):
                    msg = f"{line.split()[0]}> directive missing closing '>'"
                    raise ConfigSyntaxError(msg, source=source, line=number)
                words = split_args(line[1:-1], source=source, line=number)
                if not words:
                    msg = "Empty section opener"
                    raise ConfigSyntaxError(msg, source=source, line=number)
                block = Directive(
                    name=f"<{words[0]}",
                    args=tuple(words[1:]),
                    parent=current,
                    source=source,
                    line=number,
                )
                self.directives.append(block)
                stack.append(block)
                current = block
                continue

            words = split_args(line, source=source, line=number)
            if words[0].casefold() in _INCLUDE_DIRECTIVES:
                self._include(words, current, source, number, depth, base_dir)
                continue
            self.directives.append(
                Directive(
                    name=words[0],
                    args=tuple(words[1:]),
                    parent=current,
                    source=source,
                    line=number,
                )
            )

        if stack:
            unclosed = stack[-1]
            msg = f"<{unclosed.block_name}> was not closed"
            raise ConfigSyntaxError(msg, source=source, line=unclosed.line)

    def _include(
        self,
        words: list[str],
        parent: Directive | None,
        source: str | None,
        line: int,
        depth: int,
        base_dir: Path | None,
    ) -> None:
        optional = words[0].casefold() == "includeoptional"
        if len(words) != 2:
            msg = f"{words[0]} takes one argument"
            raise ConfigSyntaxError(msg, source=source, line=line)

        pattern = Path(words[1])
        if not pattern.is_absolute():
            pattern = (base_dir or Path.cwd()) / pattern

        if glob.has_magic(str(pattern)):
            matches = sorted(Path(p) for p in glob.glob(str(pattern)))
            if not matches and not optional:
                msg = f"No matches for the wildcard {words[1]!r}"
                raise ConfigSyntaxError(msg, source=source, line=line)
        elif pattern.is_file():
            matches = [pattern]
        elif optional:
            matches = []
        else:
            msg = f"Could not open configuration file {pattern}"
            raise ConfigSyntaxError(msg, source=source, line=line)

        for match in matches:
            if match.is_file():
                self.read_file(match, parent, depth + 1)


def read_config_text(text: str, *, source: str | None = None) -> tuple[Directive, ...]:
    """Parse configuration *text* into directive occurrences."""
    reader = _Reader()
    reader.read_text(text, source=source, parent=None)
    return tuple(reader.directives)


def read_config_file(path: Path) -> tuple[Directive, ...]:
    """Parse the configuration file at *path*, following includes."""
    reader = _Reader()
    reader.read_file(path, parent=None, depth=0)
    return tuple(reader.directives)
