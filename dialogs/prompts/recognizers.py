"""
Recognizers — turn raw reply text into typed prompt candidates.

Each recognizer returns None when nothing usable was found; that is a
normal outcome which the prompt routes through its validator.
"""
from __future__ import annotations

import calendar
import math
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel


# ══════════════════════════════════════════════════════════
#  TEXT
# ══════════════════════════════════════════════════════════

def recognize_text(text: str) -> Optional[str]:
    value = (text or "").strip()
    return value or None


# ══════════════════════════════════════════════════════════
#  NUMBER
# ══════════════════════════════════════════════════════════

_DECIMAL_COMMA_LANGS = {"de", "fr", "es", "it", "pt", "nl", "ru", "da", "sv", "nb", "fi", "pl", "tr"}

_UNITS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19,
}
_TENS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
_SCALES = {"hundred": 100, "thousand": 1000, "million": 1_000_000}

_WORD_RE = re.compile(r"[a-z]+")


def _number_pattern(decimal_sep: str) -> re.Pattern:
    group_sep = "." if decimal_sep == "," else ","
    g, d = re.escape(group_sep), re.escape(decimal_sep)
    return re.compile(
        rf"(?<![\w.,])[-+]?(?:\d{{1,3}}(?:{g}\d{{3}})+|\d+)(?:{d}\d+)?(?![\d])"
    )


def _uses_decimal_comma(locale: str) -> bool:
    return (locale or "").lower().split("-")[0] in _DECIMAL_COMMA_LANGS


def _to_number(token: str, decimal_sep: str) -> Union[int, float, Decimal]:
    group_sep = "." if decimal_sep == "," else ","
    normalized = token.replace(group_sep, "").replace(decimal_sep, ".")
    if "." not in normalized:
        try:
            return int(normalized)
        except ValueError:
            # longer than the interpreter's int-from-str limit
            return Decimal(normalized)
    value = float(normalized)
    return value if math.isfinite(value) else Decimal(normalized)


def _words_to_number(text: str) -> Optional[tuple[int, int]]:
    """
    Return (position, value) of the first English cardinal phrase.

    The phrase ends where another number would start: "one two three"
    is 1, "twenty twelve" is 20, while "twenty one" and "two hundred
    and five" are read whole.
    """
    total = current = 0
    start = None
    last = None                       # "unit" | "teen" | "tens" | "scale"
    for match in _WORD_RE.finditer(text.lower()):
        word = match.group(0)
        if word in _UNITS:
            kind = "unit" if _UNITS[word] < 10 else "teen"
            if last in ("unit", "teen") or (last == "tens" and kind == "teen"):
                break
            current += _UNITS[word]
        elif word in _TENS:
            kind = "tens"
            if last in ("unit", "teen", "tens"):
                break
            current += _TENS[word]
        elif word in _SCALES and last is not None:
            kind = "scale"
            scale = _SCALES[word]
            if scale == 100:
                current *= scale
            else:
                total += current * scale
                current = 0
        elif word == "and" and last == "scale":
            continue
        else:
            if last is not None:
                break
            continue
        if start is None:
            start = match.start()
        last = kind
    if last is None:
        return None
    return start, total + current


def recognize_number(text: str, locale: str = "") -> Optional[Union[int, float, Decimal]]:
    """
    First numeric token in `text` (digits first, then English words).

    Integral tokens come back as exact ints; a decimal too large for a
    float comes back as a Decimal.
    """
    text = text or ""
    decimal_sep = "," if _uses_decimal_comma(locale) else "."
    match = _number_pattern(decimal_sep).search(text)
    words = _words_to_number(text)

    if match and (words is None or match.start() <= words[0]):
        return _to_number(match.group(0), decimal_sep)
    if words is not None:
        return words[1]
    return None


# ══════════════════════════════════════════════════════════
#  CHOICE
# ══════════════════════════════════════════════════════════

class FoundChoice(BaseModel):
    value: str
    index: int
    score: float = 1.0
    synonym: str = ""


def _tokens(text: str) -> list[str]:
    return re.findall(r"\w+", (text or "").lower())


def recognize_choice(text: str, choices: list[str]) -> Optional[FoundChoice]:
    """
    Match a reply against enumerated choices.

    Order: exact value (case-insensitive), then a choice whose words
    appear contiguously in the reply (longest wins), then a 1-based index.
    """
    utterance = (text or "").strip().lower()
    if not utterance or not choices:
        return None

    for i, choice in enumerate(choices):
        if utterance == choice.strip().lower():
            return FoundChoice(value=choice, index=i, score=1.0, synonym=choice)

    reply_tokens = _tokens(utterance)
    best: Optional[FoundChoice] = None
    best_len = 0
    for i, choice in enumerate(choices):
        choice_tokens = _tokens(choice)
        n = len(choice_tokens)
        if not n or n > len(reply_tokens):
            continue
        for start in range(len(reply_tokens) - n + 1):
            if reply_tokens[start:start + n] == choice_tokens:
                if n > best_len:
                    best = FoundChoice(
                        value=choice, index=i,
                        score=round(n / len(reply_tokens), 3), synonym=choice,
                    )
                    best_len = n
                break
    if best is not None:
        return best

    ordinal = recognize_number(utterance)
    if isinstance(ordinal, int) and 1 <= ordinal <= len(choices):
        return FoundChoice(value=choices[ordinal - 1], index=ordinal - 1,
                           score=0.5, synonym=str(ordinal))
    return None


# ══════════════════════════════════════════════════════════
#  DATE / TIME
# ══════════════════════════════════════════════════════════

class DateTimeResolution(BaseModel):
    value: str                        # "2026-10-20", "07:00:00", "2026-10-20 07:00:00"
    type: str                         # date | time | datetime
    timex: str = ""


_MONTHS = {m.lower(): i for i, m in enumerate(calendar.month_name) if m}
_MONTHS.update({m.lower(): i for i, m in enumerate(calendar.month_abbr) if m})
_WEEKDAYS = {d.lower(): i for i, d in enumerate(calendar.day_name)}

_ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
_SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b")
_MONTH_DAY_RE = re.compile(
    r"\b(" + "|".join(sorted(_MONTHS, key=len, reverse=True)) + r")\.?\s+(\d{1,2})(?:st|nd|rd|th)?(?:,?\s+(\d{4}))?\b"
)
_DAY_MONTH_RE = re.compile(
    r"\b(\d{1,2})(?:st|nd|rd|th)?\s+(?:of\s+)?(" + "|".join(sorted(_MONTHS, key=len, reverse=True)) + r")\b(?:,?\s+(\d{4}))?"
)
_RELATIVE_RE = re.compile(r"\b(today|tonight|tomorrow|yesterday)\b")
_WEEKDAY_RE = re.compile(r"\b(?:(next|this)\s+)?(" + "|".join(_WEEKDAYS) + r")\b")

_CLOCK_RE = re.compile(r"\b(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(a\.?m\.?|p\.?m\.?)?(?!\w)")
_HOUR_MERIDIEM_RE = re.compile(r"\b(\d{1,2})\s*(a\.?m\.?|p\.?m\.?)(?!\w)")
_BARE_HOUR_RE = re.compile(r"\b(?:at|@|around|by)\s+(\d{1,2})(?:\s*o'?clock)?\b(?!\s*[:/\d])")
_NAMED_TIME_RE = re.compile(r"\b(noon|midday|midnight)\b")


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _find_date(text: str, today: date) -> Optional[date]:
    m = _ISO_DATE_RE.search(text)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _MONTH_DAY_RE.search(text)
    if m:
        year = int(m.group(3)) if m.group(3) else today.year
        return _safe_date(year, _MONTHS[m.group(1)], int(m.group(2)))

    m = _DAY_MONTH_RE.search(text)
    if m:
        year = int(m.group(3)) if m.group(3) else today.year
        return _safe_date(year, _MONTHS[m.group(2)], int(m.group(1)))

    m = _SLASH_DATE_RE.search(text)
    if m:
        year = int(m.group(3)) if m.group(3) else today.year
        if year < 100:
            year += 2000
        return _safe_date(year, int(m.group(1)), int(m.group(2)))

    m = _RELATIVE_RE.search(text)
    if m:
        offset = {"today": 0, "tonight": 0, "tomorrow": 1, "yesterday": -1}[m.group(1)]
        return today + timedelta(days=offset)

    m = _WEEKDAY_RE.search(text)
    if m:
        target = _WEEKDAYS[m.group(2)]
        ahead = (target - today.weekday()) % 7
        if ahead == 0 and m.group(1) == "next":
            ahead = 7
        return today + timedelta(days=ahead)
    return None


def _apply_meridiem(hour: int, meridiem: str) -> int:
    meridiem = meridiem.replace(".", "")
    if meridiem == "pm" and hour < 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def _find_times(text: str) -> list[time]:
    """All plausible readings of the first time expression in `text`."""
    m = _CLOCK_RE.search(text)
    if m:
        hour, minute = int(m.group(1)), int(m.group(2))
        second = int(m.group(3)) if m.group(3) else 0
        if m.group(4):
            hour = _apply_meridiem(hour, m.group(4))
        if hour < 24 and minute < 60 and second < 60:
            return [time(hour, minute, second)]

    m = _HOUR_MERIDIEM_RE.search(text)
    if m and 1 <= int(m.group(1)) <= 12:
        return [time(_apply_meridiem(int(m.group(1)), m.group(2)), 0)]

    m = _NAMED_TIME_RE.search(text)
    if m:
        return [time(0, 0) if m.group(1) == "midnight" else time(12, 0)]

    m = _BARE_HOUR_RE.search(text)
    if m:
        hour = int(m.group(1))
        if 1 <= hour <= 11:
            return [time(hour, 0), time(hour + 12, 0)]
        if hour == 12 or 13 <= hour <= 23:
            return [time(hour, 0)]
    return []


def recognize_datetime(text: str, reference: Optional[datetime] = None) -> Optional[list[DateTimeResolution]]:
    """
    Resolve date and time expressions.

    A bare hour such as "at 7" is ambiguous and yields both the morning and
    evening readings, in that order.
    """
    text = (text or "").lower()
    if not text.strip():
        return None
    reference = reference or datetime.now()

    found_date = _find_date(text, reference.date())
    found_times = _find_times(text)

    resolutions: list[DateTimeResolution] = []
    if found_date and found_times:
        for t in found_times:
            stamp = datetime.combine(found_date, t)
            resolutions.append(DateTimeResolution(
                value=stamp.strftime("%Y-%m-%d %H:%M:%S"), type="datetime",
                timex=stamp.strftime("%Y-%m-%dT%H:%M"),
            ))
    elif found_date:
        resolutions.append(DateTimeResolution(
            value=found_date.isoformat(), type="date", timex=found_date.isoformat(),
        ))
    else:
        for t in found_times:
            resolutions.append(DateTimeResolution(
                value=t.strftime("%H:%M:%S"), type="time", timex=t.strftime("T%H:%M"),
            ))
    return resolutions or None


def recognize_attachments(attachments: Optional[list[Any]]) -> list[Any]:
    return list(attachments or [])
