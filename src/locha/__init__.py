"""
locha: logical changes of OpenStreetMap objects.

Groups the object versions returned by the logical-history API into
change groups and drives selection of related changes.
"""

from .core import LoadStatus, LoChaSession, Status

__version__ = "0.1.0"

__all__ = ["LoChaSession", "LoadStatus", "Status", "__version__"]
