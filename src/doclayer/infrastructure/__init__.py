"""Infrastructure layer — filesystem primitives and the host request pipeline.

:mod:`~doclayer.infrastructure.filesystem` imports nothing from doclayer.
The pipeline bridges configuration, plugins, and per-request state.
"""
