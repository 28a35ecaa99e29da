"""
Lookup of a target's named images (costumes) by name or number.
"""
import re
from typing import List, Optional

from .types import CostumeProto, CostumeTargetProto


_DASHES = re.compile("[-－﹣−‐⁃‑‒–—﹘―⎯⏤ーｰ─━]")


def to_half_width_int_text(text: str) -> str:
    """Convert full-width digits and dash variants to ASCII."""
    converted = "".join(
        chr(ord(ch) - 0xFEE0) if "０" <= ch <= "９" else ch
        for ch in text
    )
    return _DASHES.sub("-", converted)


def to_zero_based_index(number: int, length: int) -> Optional[int]:
    """
    Convert a 1-based number into a list index.

    Negative numbers count from the end. Out-of-range numbers clamp to the
    nearest valid index. Returns None for an empty list.
    """
    if length == 0:
        return None
    if number > length:
        return length - 1
    if number < 0:
        return max(0, length + number)
    return number - 1


def _parse_int_prefix(text: str) -> Optional[int]:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else None


def costume_index_by_name_or_number(costumes: List[CostumeProto], name: str) -> Optional[int]:
    """
    Find a costume index by exact name; failing that, treat ``name`` as a
    1-based number.

    Args:
        costumes: The target's costumes in order
        name: Costume name or number text

    Returns:
        Index into ``costumes`` or None
    """
    for index, costume in enumerate(costumes):
        if costume.name == name:
            return index
    number = _parse_int_prefix(to_half_width_int_text(name))
    if number is None or number == 0:
        return None
    return to_zero_based_index(number, len(costumes))


def costume_by_name_or_number(target: CostumeTargetProto, name: str) -> Optional[CostumeProto]:
    costumes = target.get_costumes()
    index = costume_index_by_name_or_number(costumes, name)
    if index is None:
        return None
    return costumes[index]
