"""
Normalization of user-authored text before it is interpolated into prompts
"""
from app.core.constants import MAX_AI_PROMPT_LENGTH


def sanitize_for_prompt(text: str, max_length: int = MAX_AI_PROMPT_LENGTH) -> str:
    """
    Flatten user text into a single quoted-safe line

    Truncates, escapes backslashes and double quotes, turns newlines into
    spaces and drops carriage returns, so the value cannot close the quoted
    habit name or start a new instruction line.

    Args:
        text: Raw habit name or criteria text
        max_length: Hard cap applied before escaping

    Returns:
        Sanitized text ("" for empty or non-string input)
    """
    if not text or not isinstance(text, str):
        return ""

    sanitized = text[:max_length]
    sanitized = (
        sanitized.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", " ")
        .replace("\r", "")
    )
    return sanitized.strip()
