"""
Defines the abstract interface of sample sources.

A sample source returns, on each call, a snapshot mapping every tracked
resource class to the latest reading of each component it knows about.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from ..models.stats import RESOURCE_CLASS_ATTRIBUTES, Snapshot

logger = logging.getLogger(__name__)


class AbstractSampleSource(ABC):
    """
    Abstract base class for sample sources.

    Subclasses fetch one snapshot per call to ``fetch_snapshot``. Instances
    are callable so they can be handed to the poll loop directly.
    """

    def __init__(self, node: str, resource_classes: Iterable[str]):
        """
        Args:
            node: Name of the node whose statistics are sampled.
            resource_classes: Classes to extract from each reading. Each
                must be a key of RESOURCE_CLASS_ATTRIBUTES.
        """
        self.node = node
        self.resource_classes: List[str] = list(resource_classes)
        unknown = [c for c in self.resource_classes if c not in RESOURCE_CLASS_ATTRIBUTES]
        if unknown:
            raise ValueError(f"Unknown resource classes: {unknown}")
        logger.debug(
            f"Initializing {self.__class__.__name__} for node '{node}' "
            f"with classes {self.resource_classes}"
        )

    @abstractmethod
    def fetch_snapshot(self) -> Snapshot:
        """
        Fetch the current readings of every component.

        Components or classes the source has no reading for are left out of
        the returned snapshot.

        Raises:
            SampleSourceError: If no snapshot can be obtained
        """

    def __call__(self) -> Snapshot:
        return self.fetch_snapshot()
