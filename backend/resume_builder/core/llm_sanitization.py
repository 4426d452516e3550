"""LLM input sanitization for interview answers.

Security: user answers are echoed back to the model as conversation history.
Without filtering, a user could type a fake ``<extracted_data>`` block or a
role marker and have it treated as model output or instructions.

Accented characters are preserved: names like "José Müller" must reach the
resume record intact, so only invisible and structural content is removed.
"""

import re
import unicodedata

# =============================================================================
# Unicode Stripping Patterns
# =============================================================================

# Zero-width Unicode characters that can be used to bypass regex filters.
_ZERO_WIDTH_PATTERN = re.compile(
    "["
    "­"  # Soft hyphen
    "​-‏"  # Zero-width space, non-joiner, joiner, LRM, RLM
    "‪-‮"  # BiDi embedding controls
    "⁠-⁤"  # Word joiner, invisible operators
    "⁦-⁩"  # BiDi isolate controls
    "﻿"  # BOM / zero-width no-break space
    "]"
)

# Control characters to remove (except common whitespace)
_CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

# Replacement tokens for sanitized content
_REPLACEMENT_TAG = "[TAG]"
_REPLACEMENT_FILTERED = "[FILTERED]"
_REPLACEMENT_FILTERED_COLON = "[FILTERED]:"

# Each tuple: (pattern, replacement, flags)
_INJECTION_PATTERNS: list[tuple[str, str, int]] = [
    # Role override attempts at line start
    (r"^\s*SYSTEM\s*:", _REPLACEMENT_FILTERED_COLON, re.IGNORECASE | re.MULTILINE),
    (r"^\s*Assistant\s*:", _REPLACEMENT_FILTERED_COLON, re.IGNORECASE | re.MULTILINE),
    (r"^\s*Human\s*:", _REPLACEMENT_FILTERED_COLON, re.IGNORECASE | re.MULTILINE),
    # Role tags (XML and ChatML style)
    (r"<\s*/?\s*(?:system|user|assistant)\s*>", _REPLACEMENT_TAG, re.IGNORECASE),
    (r"<\|(?:system|user|assistant|im_start|im_end)\|>", _REPLACEMENT_TAG, re.IGNORECASE),
    # Structural tags with underscores, including the extracted_data block
    (r"<\s*/?\s*[a-z]+(?:_[a-z]+)+(?:\s[^>]*)?\s*>", _REPLACEMENT_TAG, re.IGNORECASE),
    # Instruction override attempts
    (
        r"ignore\s+(all\s+)?previous\s+instructions?",
        _REPLACEMENT_FILTERED,
        re.IGNORECASE,
    ),
    (r"disregard\s+(all\s+)?(prior|previous)", _REPLACEMENT_FILTERED, re.IGNORECASE),
    (r"new\s+instructions?\s*:", _REPLACEMENT_FILTERED_COLON, re.IGNORECASE),
    (r"\[/?INST\]", _REPLACEMENT_FILTERED, re.IGNORECASE),
]


def sanitize_llm_input(text: str) -> str:
    """Sanitize a user answer before it is sent to the model.

    Args:
        text: Raw user-provided answer.

    Returns:
        Text with invisible characters stripped and injection patterns
        neutralized. Empty input is returned unchanged.
    """
    if not text:
        return text

    # NFKC folds fullwidth/styled variants (Ａ → A) so the patterns below match
    result = unicodedata.normalize("NFKC", text)
    result = _ZERO_WIDTH_PATTERN.sub("", result)
    result = _CONTROL_CHAR_PATTERN.sub("", result)

    for pattern, replacement, flags in _INJECTION_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=flags)

    return result
