"""provmap: content provider registry keyed by authority and class.

Resolves published provider records by authority name or component class,
partitioned into a global (system-owned) namespace and per-user namespaces.
"""

__version__ = "0.1.0"
