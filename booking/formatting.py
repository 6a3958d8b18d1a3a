import re

NON_DIGITS = re.compile(r"\D")


def display_phone(raw: str) -> str:
    """Format a free-form phone for display, e.g. ``(82) 99888-7766``.

    Only Brazilian local (10/11 digits) and +55 numbers are reformatted;
    anything else comes back trimmed. The stored value is never changed.
    """
    text = (raw or "").strip()
    digits = NON_DIGITS.sub("", text)
    if len(digits) in (12, 13) and digits.startswith("55"):
        digits = digits[2:]
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return text
