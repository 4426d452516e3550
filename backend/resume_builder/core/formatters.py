"""Normalization helpers for user-entered resume values.

- Phone numbers → "(XXX) XXX-XXXX" for US numbers
- Locations → "City, ST"
- Degree abbreviations → full degree names ("BS in Biology" →
  "Bachelor of Science in Biology")

Every formatter returns its input unchanged (apart from trimming) when it
cannot parse it.
"""

import re

# =============================================================================
# Phone Numbers
# =============================================================================


def format_phone_number(phone: str) -> str:
    """Format a US phone number as (XXX) XXX-XXXX.

    Handles 5551234567, 555-123-4567, 555.123.4567 and +1 555 123 4567.

    Args:
        phone: Raw phone number text.

    Returns:
        Formatted number, or the original text if it is not a 10-digit
        (or 1-prefixed 11-digit) US number.
    """
    if not phone:
        return ""

    digits = re.sub(r"\D", "", phone)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


# =============================================================================
# City / State
# =============================================================================

STATE_ABBREVIATIONS: dict[str, str] = {
    "alabama": "AL",
    "alaska": "AK",
    "arizona": "AZ",
    "arkansas": "AR",
    "california": "CA",
    "colorado": "CO",
    "connecticut": "CT",
    "delaware": "DE",
    "florida": "FL",
    "georgia": "GA",
    "hawaii": "HI",
    "idaho": "ID",
    "illinois": "IL",
    "indiana": "IN",
    "iowa": "IA",
    "kansas": "KS",
    "kentucky": "KY",
    "louisiana": "LA",
    "maine": "ME",
    "maryland": "MD",
    "massachusetts": "MA",
    "michigan": "MI",
    "minnesota": "MN",
    "mississippi": "MS",
    "missouri": "MO",
    "montana": "MT",
    "nebraska": "NE",
    "nevada": "NV",
    "new hampshire": "NH",
    "new jersey": "NJ",
    "new mexico": "NM",
    "new york": "NY",
    "north carolina": "NC",
    "north dakota": "ND",
    "ohio": "OH",
    "oklahoma": "OK",
    "oregon": "OR",
    "pennsylvania": "PA",
    "rhode island": "RI",
    "south carolina": "SC",
    "south dakota": "SD",
    "tennessee": "TN",
    "texas": "TX",
    "utah": "UT",
    "vermont": "VT",
    "virginia": "VA",
    "washington": "WA",
    "west virginia": "WV",
    "wisconsin": "WI",
    "wyoming": "WY",
    "district of columbia": "DC",
    "puerto rico": "PR",
    "guam": "GU",
    "virgin islands": "VI",
}

_VALID_ABBREVIATIONS = frozenset(STATE_ABBREVIATIONS.values())

_FORMATTED_LOCATION = re.compile(r"^(.+),\s*([A-Z]{2})$")
_COMMA_LOCATION = re.compile(r"^(.+),\s*(.+)$")


def title_case(text: str) -> str:
    """Capitalize the first letter of each space-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.lower().split(" "))


def format_city_state(location: str) -> str:
    """Normalize a location to "City, ST".

    Accepts "austin, TX", "Austin, Texas", "austin tx" and "austin texas".
    Multi-word state names are matched before shorter suffixes so that
    "charleston west virginia" resolves to WV, not VA.

    Args:
        location: Raw location text.

    Returns:
        "City, ST" when a state is recognized, otherwise the title-cased input.
    """
    trimmed = (location or "").strip()
    if not trimmed:
        return ""

    match = _FORMATTED_LOCATION.match(trimmed)
    if match and match.group(2) in _VALID_ABBREVIATIONS:
        return f"{title_case(match.group(1).strip())}, {match.group(2)}"

    match = _COMMA_LOCATION.match(trimmed)
    if match:
        city = title_case(match.group(1).strip())
        state_part = match.group(2).strip().lower()
        if state_part in STATE_ABBREVIATIONS:
            return f"{city}, {STATE_ABBREVIATIONS[state_part]}"
        if state_part.upper() in _VALID_ABBREVIATIONS:
            return f"{city}, {state_part.upper()}"

    words = trimmed.lower().split()
    if len(words) >= 2:
        last_word = words[-1].upper()
        if len(last_word) == 2 and last_word in _VALID_ABBREVIATIONS:
            return f"{title_case(' '.join(words[:-1]))}, {last_word}"

        # Longest suffix first
        for i in range(1, len(words)):
            potential_state = " ".join(words[i:])
            if potential_state in STATE_ABBREVIATIONS:
                city = title_case(" ".join(words[:i]))
                return f"{city}, {STATE_ABBREVIATIONS[potential_state]}"

    return title_case(trimmed)


# =============================================================================
# Degrees
# =============================================================================

# Keys are lowercase with dots removed ("B.S." → "bs")
DEGREE_ABBREVIATIONS: dict[str, str] = {
    # Bachelor's
    "bs": "Bachelor of Science",
    "bsc": "Bachelor of Science",
    "ba": "Bachelor of Arts",
    "be": "Bachelor of Engineering",
    "beng": "Bachelor of Engineering",
    "bba": "Bachelor of Business Administration",
    "bfa": "Bachelor of Fine Arts",
    "bsn": "Bachelor of Science in Nursing",
    # Master's
    "ms": "Master of Science",
    "msc": "Master of Science",
    "ma": "Master of Arts",
    "mba": "Master of Business Administration",
    "me": "Master of Engineering",
    "meng": "Master of Engineering",
    "med": "Master of Education",
    "mfa": "Master of Fine Arts",
    "msn": "Master of Science in Nursing",
    "mph": "Master of Public Health",
    "msw": "Master of Social Work",
    # Doctorates
    "phd": "Doctor of Philosophy",
    "md": "Doctor of Medicine",
    "jd": "Juris Doctor",
    "edd": "Doctor of Education",
    "dds": "Doctor of Dental Surgery",
    "dmd": "Doctor of Dental Medicine",
    "do": "Doctor of Osteopathic Medicine",
    "pharmd": "Doctor of Pharmacy",
    "dvm": "Doctor of Veterinary Medicine",
    # Associate
    "aa": "Associate of Arts",
    "as": "Associate of Science",
    "aas": "Associate of Applied Science",
    "aes": "Associate of Engineering Science",
}

# "BS of Computer Science" is rewritten with "in": the full names already
# contain "of" ("Bachelor of Science of ..." reads wrong).
_DEGREE_OF_FIELD = re.compile(r"^(\S+)\s+of\s+(.+)$", re.IGNORECASE)
_DEGREE_IN_FIELD = re.compile(r"^(\S+)\s+in\s+(.+)$", re.IGNORECASE)
_DEGREE_PREFIX = re.compile(r"^(\S+)\s+(.*)$")
_NUMERIC = re.compile(r"^\d+$")


def _lookup_degree(token: str) -> str | None:
    return DEGREE_ABBREVIATIONS.get(token.lower().replace(".", ""))


def expand_degree_abbreviation(degree: str) -> str:
    """Expand a leading degree abbreviation to its full name.

    Rules, first match wins:
        1. The whole value is an abbreviation: "B.S." → "Bachelor of Science".
        2. "<abbr> of <field>": "MS of Physics" → "Master of Science in Physics".
        3. "<abbr> in <field>" where the field is not a bare number:
           "BA in  History" → "Bachelor of Arts in History".
        4. "<abbr> <rest>": "BSc (Hons)" → "Bachelor of Science (Hons)".
        5. Anything else is returned trimmed ("My degree is BS", "BS/MS").

    Args:
        degree: Raw degree text.

    Returns:
        Expanded degree text, or "" for blank input.
    """
    text = (degree or "").strip()
    if not text:
        return ""

    full = _lookup_degree(text)
    if full:
        return full

    match = _DEGREE_OF_FIELD.match(text)
    if match:
        full = _lookup_degree(match.group(1))
        if full:
            return f"{full} in {match.group(2).strip()}"

    match = _DEGREE_IN_FIELD.match(text)
    if match and not _NUMERIC.match(match.group(2).strip()):
        full = _lookup_degree(match.group(1))
        if full:
            return f"{full} in {match.group(2).strip()}"

    match = _DEGREE_PREFIX.match(text)
    if match:
        full = _lookup_degree(match.group(1))
        if full:
            return f"{full} {match.group(2)}"

    return text
