"""Best-effort worked-duration extraction from report payloads of unknown shape.

Two strategies feed one pool of candidates and the largest wins:

* key rules: a numeric (or numeric-string) leaf whose immediate key matches one of
  ``DURATION_KEY_RULES`` is converted with that rule's unit. Rules are tried in order
  and the first match wins for that leaf.
* string durations: any string leaf shaped like ``HH:MM:SS`` or ``PT1H30M`` is parsed
  directly.

New report schemas are supported by appending rules, not by changing the walk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from utils import finite_float

MS_PER_UNIT = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
}


@dataclass(frozen=True)
class DurationRule:
    pattern: re.Pattern[str]
    unit: str

    def matches(self, key: str) -> bool:
        return bool(self.pattern.search(key))


def _rule(regex: str, unit: str) -> DurationRule:
    return DurationRule(re.compile(regex, re.IGNORECASE), unit)


DURATION_KEY_RULES: tuple[DurationRule, ...] = (
    _rule(r"total.*(work|track).*(millisecond|ms)", "ms"),
    _rule(r"total.*(work|track).*(second|sec)", "s"),
    _rule(r"total.*(work|track).*(minute|min)", "m"),
    _rule(r"total.*(work|track).*(hour|hr)", "h"),
    _rule(r"(worked|tracked).*milliseconds?", "ms"),
    _rule(r"(worked|tracked).*seconds?", "s"),
    _rule(r"(worked|tracked).*minutes?", "m"),
    _rule(r"(worked|tracked).*hours?", "h"),
)

HMS_PATTERN = re.compile(r"^(\d{1,2}):(\d{2}):(\d{2})$")
ISO_PATTERN = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$", re.IGNORECASE)
# Leading numeric prefix, so "12.5h" reads as 12.5
NUMERIC_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def to_milliseconds(value: float, unit: str) -> float:
    """Convert a value in the given unit (ms, s, m, h) to milliseconds."""
    return value * MS_PER_UNIT.get(unit, 0)


def parse_duration_string(value: Any) -> int | None:
    """Parse 'HH:MM:SS' or 'PT#H#M#S' to milliseconds, or None if neither."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()

    match = HMS_PATTERN.match(trimmed)
    if match:
        hours, minutes, seconds = (int(part) for part in match.groups())
        return hours * MS_PER_UNIT["h"] + minutes * MS_PER_UNIT["m"] + seconds * MS_PER_UNIT["s"]

    match = ISO_PATTERN.match(trimmed)
    if match:
        try:
            hours, minutes, seconds = (int(part or 0) for part in match.groups())
        except ValueError:
            # digit runs past the interpreter's int conversion limit
            return None
        return hours * MS_PER_UNIT["h"] + minutes * MS_PER_UNIT["m"] + seconds * MS_PER_UNIT["s"]

    return None


def _leading_number(text: str) -> float | None:
    match = NUMERIC_PREFIX.match(text.strip())
    if not match:
        return None
    return float(match.group(0))


def _match_rule(key: str, rules: Iterable[DurationRule]) -> DurationRule | None:
    for rule in rules:
        if rule.matches(key):
            return rule
    return None


def iter_duration_candidates(
    node: Any,
    key_path: tuple[str, ...] = (),
    rules: Iterable[DurationRule] = DURATION_KEY_RULES,
) -> Iterator[float]:
    """Walk a JSON value and yield every duration candidate in milliseconds.

    Array elements inherit the key of the array itself.
    """
    rules = tuple(rules)
    stack: list[tuple[Any, tuple[str, ...]]] = [(node, key_path)]

    while stack:
        value, path = stack.pop()
        key = path[-1] if path else ""

        if value is None or isinstance(value, bool):
            continue

        if isinstance(value, (int, float)):
            number = finite_float(value)
            if number is None:
                continue
            rule = _match_rule(key, rules)
            if rule:
                yield to_milliseconds(number, rule.unit)

        elif isinstance(value, str):
            rule = _match_rule(key, rules)
            if rule:
                number = _leading_number(value)
                if number is not None:
                    yield to_milliseconds(number, rule.unit)
            parsed = parse_duration_string(value)
            if parsed is not None:
                yield parsed

        elif isinstance(value, list):
            stack.extend((item, path) for item in value)

        elif isinstance(value, dict):
            stack.extend((nested, path + (str(k),)) for k, nested in value.items())


def extract_duration_ms(
    payload: Any,
    rules: Iterable[DurationRule] = DURATION_KEY_RULES,
) -> float:
    """Largest plausible worked duration in the payload, or 0 when none is found."""
    best = 0
    for candidate in iter_duration_candidates(payload, rules=rules):
        # ISO strings can carry arbitrarily long digit runs
        value = finite_float(candidate)
        if value is not None and value > best:
            best = value
    return best


def format_duration(milliseconds: Any) -> str:
    """Render milliseconds as 'Xh Ym' with whole minutes."""
    if finite_float(milliseconds) is None or milliseconds <= 0:
        return "0h 0m"
    total_minutes = int(milliseconds // (1000 * 60))
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"
