"""Domain layer — scope configuration, directive rules, and resolution.

This layer depends on stdlib, pydantic, and the stat/join primitives in
:mod:`doclayer.infrastructure.filesystem`. It must never import from
services, commands, config, or output.
"""
