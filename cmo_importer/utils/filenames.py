from __future__ import annotations

import unicodedata


def _strip_accents(text: str) -> str:
    return "".join(
        c for c in unicodedata.normalize("NFD", text) if unicodedata.category(c) != "Mn"
    )


def sanitize_filename(value: str) -> str:
    """
    Turn a display label (author name, topic) into a document name.

    Accents are stripped, the text is lowercased and every run of characters
    that is not a letter or a digit becomes a single dash.  Leading and
    trailing dashes are removed, so a blank label yields ``""``.
    """
    text = _strip_accents((value or "").strip().lower())
    out = []
    prev_dash = False
    for ch in text:
        if ch.isalnum():
            out.append(ch)
            prev_dash = False
        else:
            if not prev_dash:
                out.append("-")
            prev_dash = True
    return "".join(out).strip("-")[:200]
