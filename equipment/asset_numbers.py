"""
Asset numbers are written ``<base>/<sequence>``, e.g. ``NB-IT-2024/7``.

The sequence is a positive integer stored without leading zeros. A number
typed without a usable sequence gets the next free one for its base.
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional

SEQUENCE = re.compile(r'^0*([1-9]\d*)$')


@dataclass(frozen=True)
class AssetNumber:
    base: str
    sequence: Optional[str]

    @property
    def formatted(self) -> str:
        return f"{self.base}/{self.sequence}" if self.sequence else self.base


def parse_asset_number(raw) -> AssetNumber:
    """Split ``raw`` into base and sequence; sequence is None when missing or invalid"""
    text = (raw or '').strip()
    if '/' not in text:
        return AssetNumber(text, None)
    base, _, sequence = text.rpartition('/')
    match = SEQUENCE.match(sequence.strip())
    return AssetNumber(base.strip(), match.group(1) if match else None)


def next_sequence(base: str, taken: Iterable[str]) -> str:
    """One above the highest sequence already used with ``base``"""
    highest = 0
    for number in taken:
        parsed = parse_asset_number(number)
        if parsed.base.lower() == base.lower() and parsed.sequence:
            highest = max(highest, int(parsed.sequence))
    return str(highest + 1)


def normalize_asset_number(raw, taken: Iterable[str] = ()) -> AssetNumber:
    parsed = parse_asset_number(raw)
    if parsed.sequence is None and parsed.base:
        return AssetNumber(parsed.base, next_sequence(parsed.base, taken))
    return parsed
