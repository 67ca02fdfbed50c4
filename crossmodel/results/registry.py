"""Registry of model descriptors supplied to the engine's callers."""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from crossmodel.results.models import CamelModel

logger = logging.getLogger(__name__)


class ModelDescriptor(CamelModel):
    """Display metadata for one supported model."""

    id: str
    display_name: str
    icon: str = "🤖"


DEFAULT_MODELS = (
    ModelDescriptor(id="gpt-4", display_name="GPT-4", icon="🧠"),
    ModelDescriptor(id="claude-3", display_name="Claude 3", icon="🎭"),
    ModelDescriptor(id="gemini-pro", display_name="Gemini Pro", icon="💎"),
)


class ModelRegistry:
    """Ordered set of supported models, injected rather than hardcoded."""

    def __init__(self, descriptors: Optional[Iterable[ModelDescriptor]] = None):
        """Initialize registry.

        Args:
            descriptors: Model descriptors in display order. Defaults to
                the GPT-4 / Claude 3 / Gemini Pro trio.

        Raises:
            ValueError: If two descriptors share an id
        """
        self._descriptors: Dict[str, ModelDescriptor] = {}
        for descriptor in descriptors if descriptors is not None else DEFAULT_MODELS:
            if descriptor.id in self._descriptors:
                raise ValueError(f"Duplicate model id: {descriptor.id}")
            self._descriptors[descriptor.id] = descriptor

    @classmethod
    def from_config(cls, cards: List[Dict[str, Any]]) -> "ModelRegistry":
        """Build a registry from plain dictionaries (camelCase or snake_case keys)."""
        return cls(ModelDescriptor.model_validate(card) for card in cards)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._descriptors

    def __iter__(self) -> Iterator[ModelDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)

    def ids(self) -> List[str]:
        return list(self._descriptors.keys())

    def get(self, model_id: str) -> Optional[ModelDescriptor]:
        return self._descriptors.get(model_id)

    def display_name(self, model_id: str) -> str:
        """Display name for a model id, falling back to the id itself."""
        descriptor = self._descriptors.get(model_id)
        return descriptor.display_name if descriptor else model_id

    def register(self, descriptor: ModelDescriptor) -> None:
        """Add or replace a model descriptor."""
        if descriptor.id in self._descriptors:
            logger.debug("Replacing descriptor for %s", descriptor.id)
        self._descriptors[descriptor.id] = descriptor
