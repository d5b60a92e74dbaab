"""Registry of the capabilities the manager can delegate to."""

import logging
from typing import Dict, List, Optional

from ..types import CapabilityKind
from .base import BaseCapability

logger = logging.getLogger(__name__)


class CapabilityRegistry:
    """Maps each CapabilityKind to its implementation.

    The manager builds one delegation tool per registered capability and
    lists their descriptions in its system prompt.
    """

    def __init__(self):
        self._capabilities: Dict[CapabilityKind, BaseCapability] = {}

    def register(self, capability: BaseCapability) -> None:
        """Register a capability.

        Raises:
            ValueError: If the kind is already registered
        """
        if capability.kind in self._capabilities:
            raise ValueError(f"Capability '{capability.name}' is already registered")

        self._capabilities[capability.kind] = capability
        logger.debug(f"Registered capability: {capability.name}")

    def get(self, kind: CapabilityKind) -> Optional[BaseCapability]:
        return self._capabilities.get(kind)

    def kinds(self) -> List[CapabilityKind]:
        return list(self._capabilities)

    def get_all(self) -> List[BaseCapability]:
        return list(self._capabilities.values())

    def get_descriptions(self) -> str:
        """Formatted capability list for the manager prompt."""
        if not self._capabilities:
            return "No capabilities available."
        return "\n".join(
            f"- **{capability.name}** (delegate_to_{capability.name}): {capability.description}"
            for capability in self._capabilities.values()
        )

    def __len__(self) -> int:
        return len(self._capabilities)

    def __contains__(self, kind: CapabilityKind) -> bool:
        return kind in self._capabilities
