"""Email creation guide shown to users without an email address."""

from typing import Any

GMAIL_HELP_URL = "https://support.google.com/mail/answer/56256"

INLINE_EMAIL_GUIDE = f"""## Creating a Gmail Account (Free)

**What You Need:**
- A phone that can receive text messages
- About 5-10 minutes

**Quick Steps:**

1. **Go to gmail.com** in your web browser

2. **Click "Create account"** then choose "For myself"

3. **Enter your name** - use your real, professional name

4. **Choose your email address:**
   - Good: firstname.lastname@gmail.com
   - Avoid: nicknames or unprofessional words

5. **Create a password:**
   - At least 8 characters
   - Mix letters, numbers, and symbols
   - WRITE IT DOWN!

6. **Verify your phone:**
   - Enter your phone number
   - Type the 6-digit code from the text message

7. **Add birthday and agree to terms**

8. **Done!** Your new email is ready.

**Need more help?** Here's a detailed guide with pictures: {GMAIL_HELP_URL}"""


def get_inline_email_guide(language: str = "en") -> str:
    """Return the short guide. Only English copy exists."""
    return INLINE_EMAIL_GUIDE


def build_email_guide_content(language: str = "en") -> dict[str, Any]:
    """Special-content payload attached to a turn result."""
    return {
        "type": "email_guide",
        "content": get_inline_email_guide(language),
        "expandable": True,
    }


def suggest_professional_emails(full_name: str, limit: int = 5) -> list[str]:
    """Suggest Gmail addresses built from the user's name.

    Args:
        full_name: Name as given ("John Michael Smith").
        limit: Maximum suggestions.

    Returns:
        Addresses, most professional first; empty if fewer than two
        name parts are available.
    """
    parts = ["".join(ch for ch in part if ch.isalnum()) for part in full_name.lower().split()]
    parts = [part for part in parts if part]
    if len(parts) < 2:
        return []

    first, last = parts[0], parts[-1]
    middle = parts[1][0] if len(parts) > 2 else ""

    suggestions = [f"{first}.{last}@gmail.com", f"{first}{last}@gmail.com"]
    if middle:
        suggestions.append(f"{first}.{middle}.{last}@gmail.com")
    suggestions.append(f"{first[0]}{last}@gmail.com")
    suggestions.append(f"{first}.{last[0]}@gmail.com")
    return suggestions[:limit]
