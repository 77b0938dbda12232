from typing import Any, Mapping, Union

from .database import CatalogDB
from .models import PatchUpdate


class MetadataEditor:
    """Applies user edits to stored patches."""

    def __init__(self, db: CatalogDB):
        self.db = db

    def update(self, path: str, updates: Union[PatchUpdate, Mapping[str, Any]]) -> bool:
        if not isinstance(updates, PatchUpdate):
            updates = PatchUpdate.model_validate(dict(updates))
        return self.db.update_patch_metadata(path, updates)
