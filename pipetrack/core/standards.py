"""
Pipe weight standards.

Approximate unit weights (kg per 6 m T-type pipe) after GB/T 13295 / ISO 2531,
used to pre-fill sub-order weights when the order does not supply them.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional, Tuple

PIPE_STANDARDS: Dict[Tuple[str, str], int] = {
    ("DN100", "K9"): 95,
    ("DN100", "C40"): 85,
    ("DN100", "C30"): 80,
    ("DN150", "K9"): 144,
    ("DN150", "C40"): 130,
    ("DN150", "C30"): 120,
    ("DN200", "K9"): 199,
    ("DN200", "C40"): 180,
    ("DN200", "C30"): 170,
    ("DN300", "K9"): 326,
    ("DN300", "C40"): 300,
    ("DN300", "C30"): 280,
    ("DN400", "K9"): 478,
    ("DN400", "C40"): 440,
    ("DN400", "C30"): 410,
    ("DN500", "K9"): 654,
    ("DN500", "C40"): 600,
    ("DN500", "C30"): 560,
    ("DN600", "K9"): 852,
    ("DN600", "C40"): 780,
    ("DN600", "C30"): 730,
    ("DN800", "K9"): 1320,
    ("DN800", "C40"): 1200,
    ("DN800", "C30"): 1100,
    ("DN1000", "K9"): 1880,
    ("DN1000", "C40"): 1700,
    ("DN1000", "C25"): 1550,
    ("DN1200", "K9"): 2540,
    ("DN1200", "C40"): 2300,
    ("DN1200", "C25"): 2100,
}


# PUBLIC_INTERFACE
def get_standard_weight_kg(spec: str, level: str) -> Optional[int]:
    """Standard weight of one pipe in kg, or None if the spec/level pair is not tabulated."""
    return PIPE_STANDARDS.get((spec, level))


# PUBLIC_INTERFACE
def unit_weight_tonnes(spec: str, level: str) -> Optional[Decimal]:
    """Standard weight of one pipe in tonnes (the unit stored on sub-orders)."""
    kg = get_standard_weight_kg(spec, level)
    if kg is None:
        return None
    return Decimal(kg) / Decimal(1000)
