"""
Module to contain base class for write-out channels
"""
from abc import ABC, abstractmethod
from typing import Iterable, List

from core.item_rep import ItemRep


class DeliveryChannel(ABC):
    """
    Base interface for everything that receives compiled item reps.
    """

    name: str

    @abstractmethod
    async def deliver(self, reps: Iterable[ItemRep]) -> List[str]:
        """
        Deliver the compiled content of the given reps and return the
        locations written.
        Must raise exceptions on failure (handled upstream).
        """
        raise NotImplementedError
