import re
import unicodedata

_ws = re.compile(r"\s+")
# Letters and digits in any script survive (å, ø, æ, ...); everything else is a separator
_non_word = re.compile(r"[\W_]+", re.UNICODE)


def normalize_text(s: str | None) -> str:
    # NFKC + casefold so "Å" typed as A + ring matches the precomposed form
    s = unicodedata.normalize("NFKC", s or "").casefold().strip()
    s = _non_word.sub(" ", s)
    s = _ws.sub(" ", s).strip()
    return s
