import string

_AMOUNT_CHARS = frozenset(string.digits + ".,")


def extract_amount(line: str) -> float | None:
    """Pick the first amount-looking token from a line.

    Each whitespace-separated token is reduced to its digits, dots and commas;
    the first non-empty result that has a dot or more than one character is
    parsed with thousands separators removed. This is a heuristic, not a
    currency grammar: a two-digit box number ahead of the amount wins, and
    single-digit amounts without a decimal point are never picked.
    """
    for token in line.split():
        cleaned = "".join(ch for ch in token if ch in _AMOUNT_CHARS)
        if not cleaned or ("." not in cleaned and len(cleaned) <= 1):
            continue
        try:
            return float(cleaned.replace(",", ""))
        except ValueError:
            continue
    return None


def value_after_colon(line: str) -> str:
    """Return the text after the last colon, or the whole line, trimmed."""
    return line.rsplit(":", 1)[-1].strip()
