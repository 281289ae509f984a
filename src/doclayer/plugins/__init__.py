"""Extension layer — request-pipeline plugins via pluggy.

Discovery: entry_points (pip-installed) in the ``doclayer.plugins`` group.
INVARIANT: Plugin load failures are warnings, never errors.
"""

from doclayer.plugins.manager import PluginManager

__all__ = ["PluginManager"]
