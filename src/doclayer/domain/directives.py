"""Directive occurrences and placement rules.

A :class:`Directive` is one use of a directive in the configuration tree.
Block openers keep the leading ``<`` in their name (``<VirtualHost``,
``<Directory``), matching how httpd reports them.

The ``parent`` link is a read-only structural reference. Validation only
ever walks it upward; nothing mutates it after the reader builds the tree.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from doclayer.domain.errors import ContextError, DirectiveSyntaxError, InvalidValueError
from doclayer.domain.types import ENABLE_DIRECTIVE, ENABLE_USAGE, LAYERS_DIRECTIVE, LAYERS_USAGE

# Blocks that scope configuration to a filesystem path or file pattern.
FORBIDDEN_CONTEXTS: tuple[str, ...] = (
    "<Directory",
    "<DirectoryMatch",
    "<Files",
    "<FilesMatch",
)
_FORBIDDEN_FOLDED = frozenset(name.casefold() for name in FORBIDDEN_CONTEXTS)


@dataclass(frozen=True, eq=False)
class Directive:
    """A single directive occurrence."""

    name: str
    args: tuple[str, ...] = ()
    parent: Directive | None = None
    source: str | None = None
    line: int | None = None

    @property
    def is_block(self) -> bool:
        return self.name.startswith("<")

    @property
    def block_name(self) -> str:
        """Name without the leading ``<`` (``VirtualHost`` for ``<VirtualHost``)."""
        return self.name[1:] if self.is_block else self.name

    def ancestors(self) -> Iterator[Directive]:
        """Yield enclosing block occurrences, innermost first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def __repr__(self) -> str:
        where = f" @{self.source}:{self.line}" if self.source else ""
        return f"Directive({self.name!r}, {self.args!r}{where})"


def validate_context(directive: Directive) -> None:
    """Reject *directive* if any enclosing block is a forbidden context.

    Raises:
        ContextError: naming the directive and the offending block.
    """
    for ancestor in directive.ancestors():
        if ancestor.name.casefold() in _FORBIDDEN_FOLDED:
            msg = f"{directive.name} not allowed within {ancestor.name} ...>"
            raise ContextError(
                msg,
                ancestor=ancestor.name,
                directive=directive.name,
                source=directive.source,
                line=directive.line,
            )


def parse_enable_flag(directive: Directive) -> bool:
    """Interpret an ``EnableDocumentRootLayers`` occurrence."""
    if len(directive.args) != 1:
        raise DirectiveSyntaxError(
            ENABLE_USAGE,
            directive=directive.name,
            source=directive.source,
            line=directive.line,
        )
    value = directive.args[0]
    if value not in ("On", "Off"):
        msg = f"{ENABLE_DIRECTIVE} On|Off, not {value}"
        raise InvalidValueError(
            msg,
            value=value,
            directive=directive.name,
            source=directive.source,
            line=directive.line,
        )
    return value == "On"


def parse_layer_dirs(directive: Directive) -> tuple[str, ...]:
    """Interpret a ``DocumentRootLayers`` occurrence."""
    if not directive.args:
        raise DirectiveSyntaxError(
            LAYERS_USAGE,
            directive=directive.name,
            source=directive.source,
            line=directive.line,
        )
    return directive.args


def check_layer_directive(directive: Directive) -> bool | tuple[str, ...]:
    """Validate placement and arguments of one of the two layer directives.

    Returns the parsed value: a bool for ``EnableDocumentRootLayers``, a
    tuple of directories for ``DocumentRootLayers``.
    """
    validate_context(directive)
    name = directive.name.casefold()
    if name == ENABLE_DIRECTIVE.casefold():
        return parse_enable_flag(directive)
    if name == LAYERS_DIRECTIVE.casefold():
        return parse_layer_dirs(directive)
    msg = f"Not a layer directive: {directive.name!r}"
    raise ValueError(msg)
