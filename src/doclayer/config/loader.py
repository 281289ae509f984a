"""Scope loader — builds the server layout from directive occurrences.

Scopes, outermost first:
- the main server (directives outside any scope block)
- ``<VirtualHost>`` sections
- ``<Location>`` / ``<LocationMatch>`` sections, in the server or a vhost

Other blocks (``<IfModule>``, ``<IfDefine>``, ...) are transparent: their
contents belong to the enclosing scope. ``<Directory*>`` and ``<Files*>``
are not scopes at all; the layer directives are rejected inside them.

Server and vhost effective configs are merged once here. Location configs
depend on the request URI and are merged per request in
:meth:`ServerLayout.select`.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from doclayer.config.httpd import read_config_file
from doclayer.domain.directives import Directive, check_layer_directive
from doclayer.domain.errors import ConfigSyntaxError
from doclayer.domain.scope import (
    DEFAULT_CONFIG,
    EffectiveConfig,
    ScopeConfig,
    merge_chain,
    merge_config,
)
from doclayer.domain.types import ENABLE_DIRECTIVE, LAYERS_DIRECTIVE, ScopeKind
from doclayer.infrastructure.filesystem import canonicalize, join_layer_path

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_ROOT = "/usr/local/apache2/htdocs"

_VHOST_BLOCK = "virtualhost"
_LOCATION_BLOCKS = frozenset({"location", "locationmatch"})
_LAYER_DIRECTIVES = frozenset({ENABLE_DIRECTIVE.casefold(), LAYERS_DIRECTIVE.casefold()})


# ---------------------------------------------------------------------------
# Frozen layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LocationScope:
    """A ``<Location>`` or ``<LocationMatch>`` section."""

    pattern: str
    config: ScopeConfig
    regex: re.Pattern[str] | None = None
    source: str | None = None
    line: int | None = None

    def matches(self, uri: str) -> bool:
        """Whether *uri* falls under this section."""
        if self.regex is not None:
            return self.regex.search(uri) is not None
        if self.pattern.endswith("/"):
            return uri.startswith(self.pattern)
        return uri == self.pattern or uri.startswith(self.pattern + "/")

    @property
    def label(self) -> str:
        if self.regex is not None:
            return f"<LocationMatch {self.pattern}>"
        return f"<Location {self.pattern}>"


@dataclass(frozen=True)
class HostScope:
    """The main server or one virtual host, with its own locations."""

    kind: ScopeKind
    label: str
    document_root: str
    config: ScopeConfig
    effective: EffectiveConfig
    server_name: str | None = None
    aliases: tuple[str, ...] = ()
    locations: tuple[LocationScope, ...] = ()

    def answers_to(self, host: str) -> bool:
        """Whether *host* (port already stripped, lowercased) names this scope."""
        if self.server_name is not None and host == self.server_name:
            return True
        return any(fnmatch.fnmatchcase(host, alias) for alias in self.aliases)


@dataclass(frozen=True)
class RequestScope:
    """Inputs the resolver needs for one request."""

    name: str
    document_root: str
    config: EffectiveConfig
    locations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ServerLayout:
    """All scopes from one configuration, frozen after load."""

    server: HostScope
    virtual_hosts: tuple[HostScope, ...] = ()
    source: str | None = None

    def host_for(self, host: str | None) -> HostScope:
        """Pick the virtual host for a ``Host`` header value.

        Exact ``ServerName`` or ``ServerAlias`` match first; otherwise the
        first virtual host; the main server when there are none.
        """
        if not self.virtual_hosts:
            return self.server
        wanted = _normalize_host(host) if host else None
        if wanted:
            for vhost in self.virtual_hosts:
                if vhost.answers_to(wanted):
                    return vhost
        return self.virtual_hosts[0]

    def select(self, host: str | None, uri: str) -> RequestScope:
        """Resolve the effective configuration for a request."""
        scope = self.host_for(host)
        sections = [*self.server.locations]
        if scope is not self.server:
            sections.extend(scope.locations)
        matched = [loc for loc in sections if loc.matches(uri)]
        config = merge_chain((loc.config for loc in matched), base=scope.effective)
        return RequestScope(
            name=scope.label,
            document_root=scope.document_root,
            config=config,
            locations=tuple(loc.label for loc in matched),
        )

    def scopes(self) -> list[dict[str, Any]]:
        """Flatten every scope for display, outermost first."""
        rows: list[dict[str, Any]] = []
        for host in (self.server, *self.virtual_hosts):
            rows.append(_scope_row(host.label, host.kind, host.document_root, host.effective))
            for loc in host.locations:
                effective = merge_config(host.effective, loc.config)
                row = _scope_row(loc.label, ScopeKind.LOCATION, host.document_root, effective)
                row["parent"] = host.label
                rows.append(row)
        return rows

    def layer_dirs(self) -> list[tuple[str, str]]:
        """Every layer directory a request could search, as ``(scope_label, dir)``.

        Layers are joined with the document root of each host they apply
        to: a vhost's inherited server layers and the server's
        ``<Location>`` layers are checked under the vhost's own root.
        Each directory is listed once, under the first scope that uses it.
        """
        found: dict[str, str] = {}
        for host in (self.server, *self.virtual_hosts):
            applicable = [(host.label, host.effective.layers)]
            if host is not self.server:
                applicable.extend(
                    (f"{host.label} {loc.label}", loc.config.layers)
                    for loc in self.server.locations
                )
            applicable.extend((loc.label, loc.config.layers) for loc in host.locations)
            for label, layers in applicable:
                for layer in layers:
                    directory = join_layer_path(layer, host.document_root, "")
                    found.setdefault(directory, label)
        return [(label, directory) for directory, label in found.items()]


def _scope_row(
    label: str, kind: ScopeKind, document_root: str, cfg: EffectiveConfig
) -> dict[str, Any]:
    return {
        "scope": label,
        "kind": str(kind),
        "document_root": document_root,
        "enabled": cfg.enabled,
        "layers": list(cfg.layers),
    }


def _normalize_host(host: str) -> str:
    """Lowercase and drop any ``:port`` suffix (IPv6 literals kept intact)."""
    host = host.strip().lower()
    if host.startswith("["):
        end = host.find("]")
        return host[: end + 1] if end != -1 else host
    return host.rsplit(":", 1)[0] if host.count(":") == 1 else host


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


@dataclass
class _LocationBuilder:
    directive: Directive
    config: ScopeConfig = field(default_factory=ScopeConfig)

    def build(self) -> LocationScope:
        d = self.directive
        args = d.args
        if d.block_name.casefold() == "locationmatch":
            if len(args) != 1:
                msg = f"{d.name}> takes one argument"
                raise ConfigSyntaxError(msg, source=d.source, line=d.line)
            pattern, regex = args[0], _compile(args[0], d)
        elif len(args) == 2 and args[0] == "~":
            pattern, regex = args[1], _compile(args[1], d)
        elif len(args) == 1:
            pattern, regex = args[0], None
        else:
            msg = f"{d.name}> takes one argument"
            raise ConfigSyntaxError(msg, source=d.source, line=d.line)
        return LocationScope(
            pattern=pattern,
            config=self.config,
            regex=regex,
            source=d.source,
            line=d.line,
        )


@dataclass
class _HostBuilder:
    kind: ScopeKind
    directive: Directive | None = None
    config: ScopeConfig = field(default_factory=ScopeConfig)
    document_root: str | None = None
    server_name: str | None = None
    aliases: list[str] = field(default_factory=list)
    locations: list[_LocationBuilder] = field(default_factory=list)

    @property
    def label(self) -> str:
        if self.directive is None:
            return "server"
        address = " ".join(self.directive.args)
        label = f"<VirtualHost {address}>" if address else "<VirtualHost>"
        return f"{label} {self.server_name}" if self.server_name else label


def _compile(pattern: str, directive: Directive) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        msg = f"Regular expression could not be compiled: {pattern!r} ({exc})"
        raise ConfigSyntaxError(msg, source=directive.source, line=directive.line) from exc


def _resolve_root(value: str, base: Path | None) -> str:
    """Absolute, canonical form of a ``DocumentRoot`` value."""
    path = Path(value)
    if not path.is_absolute() and base is not None:
        path = base / path
    return canonicalize(str(path.absolute()))


def build_layout(
    directives: Iterable[Directive],
    *,
    default_document_root: str = DEFAULT_DOCUMENT_ROOT,
    server_root: Path | None = None,
    fallback_root: Path | None = None,
    source: str | None = None,
) -> ServerLayout:
    """Assemble a :class:`ServerLayout` from directive occurrences.

    Relative ``DocumentRoot`` values are taken from *server_root* when given;
    otherwise from a server-level ``ServerRoot`` directive (itself relative
    to *fallback_root*); otherwise from *fallback_root*. Document roots are
    always absolute; with no base at all the working directory is used.

    Raises:
        ContextError: a layer directive sits inside a forbidden block.
        InvalidValueError: ``EnableDocumentRootLayers`` is not On/Off.
        DirectiveSyntaxError: a layer directive has the wrong arity.
        ConfigSyntaxError: scope blocks are nested illegally.
    """
    server = _HostBuilder(kind=ScopeKind.SERVER)
    vhosts: dict[int, _HostBuilder] = {}
    locations: dict[int, _LocationBuilder] = {}
    ordered_vhosts: list[_HostBuilder] = []
    declared_root: str | None = None

    def owner_of(directive: Directive) -> tuple[_HostBuilder, _LocationBuilder | None]:
        location: _LocationBuilder | None = None
        for ancestor in directive.ancestors():
            if location is None and id(ancestor) in locations:
                location = locations[id(ancestor)]
            if id(ancestor) in vhosts:
                return vhosts[id(ancestor)], location
        return server, location

    for directive in directives:
        name = directive.name.casefold()

        if directive.is_block:
            block = directive.block_name.casefold()
            if block == _VHOST_BLOCK:
                for ancestor in directive.ancestors():
                    if ancestor.block_name.casefold() in (_VHOST_BLOCK, *_LOCATION_BLOCKS):
                        msg = f"<VirtualHost> cannot occur within {ancestor.name}> section"
                        raise ConfigSyntaxError(msg, source=directive.source, line=directive.line)
                builder = _HostBuilder(kind=ScopeKind.VIRTUAL_HOST, directive=directive)
                vhosts[id(directive)] = builder
                ordered_vhosts.append(builder)
            elif block in _LOCATION_BLOCKS:
                host, enclosing = owner_of(directive)
                if enclosing is not None:
                    msg = f"{directive.name}> cannot occur within <Location> section"
                    raise ConfigSyntaxError(msg, source=directive.source, line=directive.line)
                loc = _LocationBuilder(directive=directive)
                locations[id(directive)] = loc
                host.locations.append(loc)
            continue

        if name in _LAYER_DIRECTIVES:
            value = check_layer_directive(directive)
            host, loc = owner_of(directive)
            target = loc if loc is not None else host
            if isinstance(value, bool):
                target.config = target.config.with_enabled(value)
            else:
                target.config = target.config.with_layers(*value)
            continue

        if name == "documentroot" and directive.args:
            host, loc = owner_of(directive)
            if loc is None:
                host.document_root = directive.args[0]
        elif name == "serverroot" and directive.args:
            host, loc = owner_of(directive)
            if host is server and loc is None:
                declared_root = directive.args[0]
        elif name == "servername" and directive.args:
            host, _ = owner_of(directive)
            host.server_name = _normalize_host(directive.args[0].split("://")[-1])
        elif name == "serveralias":
            host, _ = owner_of(directive)
            host.aliases.extend(alias.lower() for alias in directive.args)
        else:
            logger.debug("Ignoring directive %s", directive.name)

    base = server_root
    if base is None and declared_root is not None:
        base = Path(_resolve_root(declared_root, fallback_root))
    if base is None:
        base = fallback_root

    server_root_doc = _resolve_root(server.document_root or default_document_root, base)

    def vhost_root(vhost: _HostBuilder) -> str:
        if vhost.document_root is None:
            return server_root_doc
        return _resolve_root(vhost.document_root, base)

    server_effective = merge_config(DEFAULT_CONFIG, server.config)
    server_scope = HostScope(
        kind=ScopeKind.SERVER,
        label=server.label,
        document_root=server_root_doc,
        config=server.config,
        effective=server_effective,
        server_name=server.server_name,
        aliases=tuple(server.aliases),
        locations=tuple(loc.build() for loc in server.locations),
    )
    vhost_scopes = tuple(
        HostScope(
            kind=ScopeKind.VIRTUAL_HOST,
            label=vhost.label,
            document_root=vhost_root(vhost),
            config=vhost.config,
            effective=merge_config(server_effective, vhost.config),
            server_name=vhost.server_name,
            aliases=tuple(vhost.aliases),
            locations=tuple(loc.build() for loc in vhost.locations),
        )
        for vhost in ordered_vhosts
    )
    logger.debug(
        "Loaded layout: %d virtual host(s), server layers enabled=%s",
        len(vhost_scopes),
        server_effective.enabled,
    )
    return ServerLayout(server=server_scope, virtual_hosts=vhost_scopes, source=source)


def load_layout(
    path: Path,
    *,
    default_document_root: str = DEFAULT_DOCUMENT_ROOT,
    server_root: Path | None = None,
) -> ServerLayout:
    """Read the configuration file at *path* and build its layout.

    Without a *server_root* override or a ``ServerRoot`` directive, relative
    document roots are taken from the directory holding *path*.
    """
    directives = read_config_file(path)
    return build_layout(
        directives,
        default_document_root=default_document_root,
        server_root=server_root.absolute() if server_root is not None else None,
        fallback_root=path.resolve().parent,
        source=str(path),
    )
