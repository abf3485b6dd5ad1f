"""
Taxonomy Resolver
Maps category selections to their subcategories and derives complaint priority.

derive_priority is the only place the priority table is evaluated; the
priority preview endpoint and complaint intake both call it.
"""
import logging
from typing import Dict, List, Optional, Tuple

from complaints.errors import StoreUnavailable
from complaints.option_store import StaticOptionSource, normalize_key
from complaints.taxonomy_config import (
    OptionType,
    Priority,
    PRIORITY_RULES,
    OTHER_SUBCATEGORY,
)

logger = logging.getLogger('taxonomy')

SOURCE_STORE = "store"
SOURCE_FALLBACK = "fallback"


def derive_priority(category: Optional[str], sub_category: Optional[str]) -> str:
    """
    Derive the priority for a (category, subcategory) pair.

    Total and case-insensitive: unknown categories or subcategories get the
    default (medium) priority.
    """
    rules = PRIORITY_RULES.get(normalize_key(category))
    if not rules:
        return Priority.DEFAULT
    return rules.get(normalize_key(sub_category), Priority.DEFAULT)


class TaxonomyResolver:
    """
    Resolves taxonomy options from the dynamic store, degrading to the
    built-in tables when the store cannot be reached.

    The *_with_source variants also report where the answer came from so
    callers can tell an empty result apart from a failed lookup.
    """

    def __init__(self, store, fallback=None):
        self.store = store
        self.fallback = fallback or StaticOptionSource()

    def _lookup(self, option_type: str, parent_category: Optional[str] = None) -> Tuple[List[Dict], str]:
        try:
            return self.store.list_options(option_type, parent_category), SOURCE_STORE
        except StoreUnavailable as e:
            logger.warning(f"OPTION_FALLBACK | {option_type} | parent={parent_category} | {e}")
            return self.fallback.list_options(option_type, parent_category), SOURCE_FALLBACK

    def list_options_with_source(self, option_type: str,
                                 parent_category: Optional[str] = None) -> Tuple[List[Dict], str]:
        """Options of any type plus their source (store or fallback)"""
        return self._lookup(option_type, parent_category)

    def list_categories(self) -> List[Dict]:
        return self._lookup(OptionType.CATEGORY)[0]

    def list_departments(self) -> List[Dict]:
        return self._lookup(OptionType.DEPARTMENT)[0]

    def list_subcategories(self, category: str) -> List[Dict]:
        """Subcategories whose parent matches category; empty list when there are none"""
        return self._lookup(OptionType.SUB_CATEGORY, normalize_key(category))[0]

    def valid_subcategories(self, category: str) -> List[Dict]:
        """
        Strict subcategory lookup used when accepting a complaint.

        Raises:
            StoreUnavailable: never falls back, so a complaint is never
                validated against stale data
        """
        return self.store.list_options(OptionType.SUB_CATEGORY, normalize_key(category))

    def category_exists(self, category: str) -> bool:
        """Strict category check; raises StoreUnavailable rather than falling back"""
        wanted = normalize_key(category)
        return any(
            normalize_key(option['value']) == wanted
            for option in self.store.list_options(OptionType.CATEGORY)
        )

    def resolve_subcategory(self, category: str, sub_category: str) -> Optional[str]:
        """
        Return the stored spelling of sub_category under category, the
        OTHER_SUBCATEGORY escape value, or None if it does not belong.
        The escape value is only valid inside a known category.
        """
        wanted = normalize_key(sub_category)
        if wanted == OTHER_SUBCATEGORY:
            return OTHER_SUBCATEGORY if self.category_exists(category) else None
        for option in self.valid_subcategories(category):
            if normalize_key(option['value']) == wanted:
                return option['value']
        return None

    def derive_priority(self, category: str, sub_category: str) -> str:
        return derive_priority(category, sub_category)
