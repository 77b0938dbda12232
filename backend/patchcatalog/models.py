from pydantic import BaseModel, ConfigDict, Field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .database import Bank, Patch


# Patch Models
class PatchUpdate(BaseModel):
    """Sparse metadata edit: every field left as None keeps its stored value."""
    model_config = ConfigDict(extra="forbid")
    name: Optional[str] = None
    loved: Optional[bool] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    bank: Optional[str] = None
    library: Optional[str] = None


class PatchResponse(BaseModel):
    path: str
    name: str
    loved: bool = False
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    bank: str = ""
    library: str = ""
    checksum: str
    custom: bool = False

    @classmethod
    def from_patch(cls, patch: "Patch") -> "PatchResponse":
        """Convert Patch dataclass to response model."""
        return cls(
            path=patch.path,
            name=patch.name,
            loved=patch.loved,
            category=patch.category,
            tags=list(patch.tags),
            bank=patch.bank,
            library=patch.library,
            checksum=patch.checksum,
            custom=patch.custom
        )


# Bank Models
class BankResponse(BaseModel):
    id: int
    name: str
    library: str
    custom: bool = False

    @classmethod
    def from_bank(cls, bank: "Bank") -> "BankResponse":
        return cls(id=bank.id, name=bank.name, library=bank.library, custom=bank.custom)


# Filtering
class PatchFilter(BaseModel):
    loved: bool = False
    custom: bool = False
    category: Optional[str] = None
    tag: Optional[str] = None
    bank: Optional[str] = None
    library: Optional[str] = None


# Import / Export Models
class ImportRequest(BaseModel):
    root_dir: Optional[str] = None
    library: Optional[str] = None


class ExportRequest(BaseModel):
    paths: List[str]
    destination: str


class ExportResponse(BaseModel):
    files: List[str]


class UpdateResponse(BaseModel):
    success: bool = True
    updated: bool


class StatsResponse(BaseModel):
    total_patches: int
    total_banks: int
    loved_patches: int
    custom_patches: int
    by_library: Dict[str, int]
    by_bank: List[Dict[str, Any]]


class FacetsResponse(BaseModel):
    """Distinct values available for each filter."""
    categories: List[str]
    tags: List[str]
    banks: List[str]
    libraries: List[str]
