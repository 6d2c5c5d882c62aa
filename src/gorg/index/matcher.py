"""Positional substring scoring for repository names."""

from __future__ import annotations

from dataclasses import dataclass

from gorg.text import split_tokens

_DISTANCE_WEIGHTS = (1.0, 0.9, 0.8, 0.7)
_FAR_DISTANCE_WEIGHT = 0.6


@dataclass(slots=True, frozen=True)
class Keywords:
    """Tokenized query, reusable across many candidates."""

    parts: tuple[str, ...]

    @classmethod
    def parse(cls, query: str) -> Keywords:
        return cls(parts=tuple(split_tokens(query)))

    def is_empty(self) -> bool:
        return not self.parts

    def score(self, candidate: str) -> float:
        """Score candidate; 0.0 means at least one query token is missing.

        Every candidate token containing a query token contributes
        ``filled * 2 + index * 2 * distance`` where ``filled`` is the share of
        the candidate token covered by the query token, ``index`` rewards an
        early first occurrence and ``distance`` rewards aligned token
        positions. Lengths and offsets are measured in UTF-8 bytes.
        """
        if not self.parts:
            return 0.0
        targets = split_tokens(candidate)
        total = 0.0
        for part_index, part in enumerate(self.parts):
            part_len = _encoded_len(part)
            part_score = 0.0
            for target_index, target in enumerate(targets):
                offset = target.find(part)
                if offset < 0:
                    continue
                target_len = _encoded_len(target)
                filled = part_len / target_len
                index = 1.0 - _encoded_len(target[:offset]) / target_len
                distance = _distance_weight(abs(target_index - part_index))
                part_score += filled * 2.0 + index * 2.0 * distance
            if part_score == 0.0:
                return 0.0
            total += part_score
        return total


def score(query: str, candidate: str) -> float:
    """Score a single candidate against a raw query string."""
    return Keywords.parse(query).score(candidate)


def _distance_weight(distance: int) -> float:
    if distance < len(_DISTANCE_WEIGHTS):
        return _DISTANCE_WEIGHTS[distance]
    return _FAR_DISTANCE_WEIGHT


def _encoded_len(text: str) -> int:
    if text.isascii():
        return len(text)
    return len(text.encode("utf-8"))
