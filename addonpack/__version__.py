"""Version information for addonpack"""

__version__ = "0.4.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))
__license__ = "MIT"
