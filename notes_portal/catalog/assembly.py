"""
==============================================================================
Catalog Assembly Module
==============================================================================

Pure transform from raw file descriptors to a categorized Catalog.

Steps:
------
1. Drop descriptors whose name was already seen (first occurrence wins)
2. Attach ``category`` and ``numeric_order`` to each descriptor
3. Partition into a fresh bucket per configured category (plus default)
4. Sort each bucket by (numeric_order, name)
5. Sort the flat "all" list by (category key, numeric_order, name)

No I/O; the input list is never mutated.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .categories import CategoryTable
from .categorizer import Categorizer
from .models import Catalog, Category, FileDescriptor, NoteFile
from .numbering import NumberExtractor


# Module logger
logger = logging.getLogger(__name__)


def member_sort_key(note: NoteFile):
    return (note.numeric_order, note.name)


def catalog_sort_key(note: NoteFile):
    return (note.category, note.numeric_order, note.name)


class CatalogAssembler:
    """
    Build Catalog snapshots from descriptors.

    Example:
        >>> table = CategoryTable()
        >>> assembler = CatalogAssembler(table, Categorizer(table), NumberExtractor())
        >>> catalog = assembler.assemble(descriptors)
        >>> [c.key for c in catalog.categories.values() if c.files]
        ['DC', 'DP']
    """

    def __init__(
        self,
        table: CategoryTable,
        categorizer: Categorizer,
        extractor: NumberExtractor,
    ) -> None:
        self._table = table
        self._categorizer = categorizer
        self._extractor = extractor

    def enrich(self, descriptor: FileDescriptor) -> NoteFile:
        """Attach category and numeric order to one descriptor."""
        return NoteFile(
            **descriptor.model_dump(exclude={"category", "numeric_order"}),
            category=self._categorizer.categorize(descriptor.name),
            numeric_order=self._extractor.extract(descriptor.name),
        )

    def assemble(self, descriptors: Iterable[FileDescriptor]) -> Catalog:
        """
        Classify, partition and order descriptors.

        Args:
            descriptors: Raw records from any source, in any order

        Returns:
            Catalog whose categories partition its files
        """
        notes: List[NoteFile] = []
        seen = set()

        for descriptor in descriptors:
            if descriptor.name in seen:
                logger.warning(f"Duplicate note name skipped: {descriptor.name}")
                continue
            seen.add(descriptor.name)
            notes.append(self.enrich(descriptor))

        categories: Dict[str, Category] = {
            definition.key: Category.from_definition(definition)
            for definition in self._table
        }

        for note in notes:
            categories[note.category].files.append(note)

        for category in categories.values():
            category.files.sort(key=member_sort_key)
            if category.files:
                logger.debug(f"📚 {category.display_name}: {len(category.files)} files")

        notes.sort(key=catalog_sort_key)

        return Catalog(files=notes, categories=categories)
