"""Version information for the Bobuild API client.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.2.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.2.0 - Lazy page iteration, explicit delete payload, structured logging
# 0.1.0 - Initial release (get, get_list, insert, insert_multiple, delete)
