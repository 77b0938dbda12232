from typing import Dict, Iterable, List, Optional

from .database import Patch
from .models import PatchFilter


def _matches(patch: Patch, patch_filter: PatchFilter) -> bool:
    if patch_filter.loved and not patch.loved:
        return False
    if patch_filter.custom and not patch.custom:
        return False
    if patch_filter.category and patch.category != patch_filter.category:
        return False
    if patch_filter.tag and patch_filter.tag not in patch.tags:
        return False
    if patch_filter.bank and patch.bank != patch_filter.bank:
        return False
    if patch_filter.library and patch.library != patch_filter.library:
        return False
    return True


def filter_patches(patches: Iterable[Patch], patch_filter: Optional[PatchFilter] = None) -> List[Patch]:
    """Keep the patches matching every active criterion of ``patch_filter``."""
    if patch_filter is None:
        return list(patches)
    return [p for p in patches if _matches(p, patch_filter)]


def facet_values(patches: Iterable[Patch]) -> Dict[str, List[str]]:
    """Distinct non-empty categories, tags, banks and libraries, sorted."""
    categories, tags, banks, libraries = set(), set(), set(), set()
    for patch in patches:
        if patch.category:
            categories.add(patch.category)
        tags.update(t for t in patch.tags if t)
        if patch.bank:
            banks.add(patch.bank)
        if patch.library:
            libraries.add(patch.library)
    return {
        "categories": sorted(categories),
        "tags": sorted(tags),
        "banks": sorted(banks),
        "libraries": sorted(libraries),
    }
