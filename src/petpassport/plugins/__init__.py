"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins in ``{root}/.petpassport/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from petpassport.plugins.event_bus import EventBus
from petpassport.plugins.manager import PluginManager

__all__ = ["EventBus", "PluginManager"]
