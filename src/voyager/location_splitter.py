"""Best-effort split of a search phrase into term and place name.

"coffee in portland"      -> ("coffee", "portland")
"pizza downtown seattle"  -> ("pizza", "downtown seattle")
"crater lake"             -> ("crater lake", None)

Wrong splits are harmless: a place name that does not geocode falls back
to a plain search on the whole phrase.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LocationSplit:
    term: str
    location: Optional[str] = None


def split_location(text: str) -> LocationSplit:
    """Separate "<term> in <location>" or a trailing place name from text."""
    text = text.strip()

    if " in " in text:
        before, _, after = text.partition(" in ")
        before, after = before.strip(), after.strip()
        if before and after:
            return LocationSplit(term=before, location=after)
        return LocationSplit(term=text)

    tokens = text.split()
    if len(tokens) > 1:
        # assume the last one or two words name a place
        term = " ".join(tokens[:-2])
        if term:
            return LocationSplit(term=term, location=" ".join(tokens[-2:]))

    return LocationSplit(term=text)
