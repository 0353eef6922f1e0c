# schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Dict, Literal

from faraid.relationships import Relationship


class CamelModel(BaseModel):
    """JSON fields travel in camelCase (heirGroup, baseNumber); Python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Heir roster schemas (database) ---
class HeirBase(CamelModel):
    name: str
    relationship: str               # raw label, e.g. "Child", "Spouse", "Full Brother"
    gender: Optional[str] = None
    heir_group: str = ""            # UI grouping, e.g. "Sons"
    portions: float = 0             # legacy weight, not used by Fara'id math

class HeirCreate(HeirBase):
    pass

class Heir(HeirBase):
    id: int
    model_config = ConfigDict(from_attributes=True)


# --- Calculation input ---
class HeirInput(HeirBase):
    id: int
    impediment: Optional[str] = None   # e.g. "homicide", "apostasy": bars inheritance

class CalculationInput(CamelModel):
    estate_amount: float = Field(ge=0, allow_inf_nan=False)   # net distributable estate
    heirs: List[HeirInput] = []

    @field_validator("heirs")
    @classmethod
    def _unique_ids(cls, heirs: List[HeirInput]) -> List[HeirInput]:
        seen = set()
        for h in heirs:
            if h.id in seen:
                raise ValueError(f"duplicate heir id {h.id}")
            seen.add(h.id)
        return heirs


# --- Calculation output ---
class ShareResult(CamelModel):
    id: int
    name: str
    heir_group: str
    relationship: Relationship
    share_fraction: str          # "1/4", "1/6 + Residue", "Excluded"
    parts: float                 # parts out of base_number
    parts_fraction: str          # exact parts, e.g. "3/2"
    share_percentage: float
    share_amount: float
    reason: str

class GroupSummary(CamelModel):
    count: int
    total_share: float

class CalculationResult(CamelModel):
    estate_amount: float
    base_number: int             # 24, or the inflated total under Awl
    total_parts: float
    case: Literal["Standard", "Awl", "Radd"]
    notes: List[str]
    heirs: List[ShareResult]
    group_summary: Dict[str, GroupSummary]
    unmapped: List[int] = []     # heir ids whose relationship label was not recognized


# --- Legacy portion split ---
class PortionInput(CamelModel):
    estate_amount: float = Field(ge=0, allow_inf_nan=False)
    heirs: List[HeirInput] = []

class PortionShare(CamelModel):
    id: int
    name: str
    heir_group: str
    portions: float
    share_amount: float

class PortionGroupSummary(CamelModel):
    count: int
    total_share: float
    portions: float

class PortionResult(CamelModel):
    estate_amount: float
    total_portions: float
    share_per_portion: float
    heirs: List[PortionShare]
    group_summary: Dict[str, PortionGroupSummary]
