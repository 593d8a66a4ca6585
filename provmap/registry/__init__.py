"""Registry — the dual-index, user-partitioned provider map.

The registry provides:
- Lookup: find a published provider by authority or by component class
- Publication: record a provider in the scope its owner uid selects
- Removal: drop bindings when a provider dies or is uninstalled
- Diagnostics: dump and integrity-check the current bindings
"""

from provmap.registry.identity import UserIdentity
from provmap.registry.models import ComponentName, ProviderRecord
from provmap.registry.provider_map import ProviderMap

__all__ = [
    "ComponentName",
    "ProviderMap",
    "ProviderRecord",
    "UserIdentity",
]
