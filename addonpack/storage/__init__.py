# addonpack/storage/__init__.py
"""File layers and the virtual overlay for addonpack"""

from .base import FileLayer, normalize
from .memory import MemoryLayer
from .physical import PhysicalLayer
from .overlay import VirtualFileOverlay

__all__ = [
    'FileLayer',
    'normalize',
    'MemoryLayer',
    'PhysicalLayer',
    'VirtualFileOverlay',
]
