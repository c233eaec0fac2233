from __future__ import annotations

import re

from .fuzzy import find_best_match, similarity
from .models import ContactMatch

_CALL_PREFIX = re.compile(r"^(call|phone|ring|dial)\s+", re.IGNORECASE)


def strip_call_prefix(text: str) -> str:
    """'call lucy' -> 'lucy'. Only one leading verb is removed."""
    return _CALL_PREFIX.sub("", (text or "").lower().strip()).strip()


def match_contact_name(
    input: str,
    contact_names: list[str],
    threshold: float = 0.6,
    by_token: bool = False,
) -> ContactMatch:
    """
    Match a spoken name against the contact list.

    Names are compared as whole strings, so "lucy" scores low against
    "UWIMANA Lucy". With ``by_token`` each name is also scored per word and the
    better of the two scores is kept; this is opt-in because it changes which
    contact wins for short inputs.
    """
    clean = strip_call_prefix(input)

    if not by_token:
        result = find_best_match(clean, contact_names, threshold)
        return ContactMatch(name=result.match, confidence=result.score)

    best_name, best_score = None, 0.0
    for name in contact_names:
        lowered = name.lower()
        score = max([similarity(clean, lowered)] + [similarity(clean, t) for t in lowered.split()])
        if score > best_score:
            best_name, best_score = name, score

    if best_name is not None and best_score >= threshold:
        return ContactMatch(name=best_name, confidence=best_score)
    return ContactMatch(name=None, confidence=0.0)
