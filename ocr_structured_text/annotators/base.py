"""
Protocol definitions for text annotators.
"""

from typing import List, Protocol, runtime_checkable

from ..models.data_structures import DataMatch, NameTag


@runtime_checkable
class TextAnnotator(Protocol):
    """Protocol for data detectors and named-entity taggers."""

    def detect_data(self, text: str) -> List[DataMatch]:
        """
        Find phone numbers, links, postal addresses and dates.

        E-mail addresses are reported as ``DataKind.LINK`` matches whose
        ``url`` uses the ``mailto:`` scheme. Matches are returned in text order.
        """
        ...

    def tag_names(self, text: str) -> List[NameTag]:
        """
        Tag person, place and organization names.

        Consecutive tokens of the same kind are reported as one span.
        """
        ...
