"""Japanese number readings (kana) for spoken operands.

Numbers are read in groups of four digits (万, 億, 兆), each group from
thousands/hundreds/tens/units tables that already carry the sound changes
(さんびゃく, ろっぴゃく, はっぴゃく, さんぜん, はっせん).
"""

ZERO = "ぜろ"

UNITS = ["", "いち", "に", "さん", "よん", "ご", "ろく", "なな", "はち", "きゅう"]
TENS = ["", "じゅう", "にじゅう", "さんじゅう", "よんじゅう", "ごじゅう",
        "ろくじゅう", "ななじゅう", "はちじゅう", "きゅうじゅう"]
HUNDREDS = ["", "ひゃく", "にひゃく", "さんびゃく", "よんひゃく", "ごひゃく",
            "ろっぴゃく", "ななひゃく", "はっぴゃく", "きゅうひゃく"]
THOUSANDS = ["", "せん", "にせん", "さんぜん", "よんせん", "ごせん",
             "ろくせん", "ななせん", "はっせん", "きゅうせん"]

# suffix per four-digit group, lowest first
GROUP_SUFFIXES = ["", "まん", "おく", "ちょう"]
LIMIT = 10_000 ** len(GROUP_SUFFIXES)


def _read_group(x: int) -> str:
    """Read 1..9999. Returns "" for 0."""
    return (
        THOUSANDS[x // 1000]
        + HUNDREDS[x % 1000 // 100]
        + TENS[x % 100 // 10]
        + UNITS[x % 10]
    )


def read_number(n: int) -> str:
    """Return the kana reading of a non-negative integer."""
    if n < 0:
        raise ValueError(f"cannot read negative number {n}")
    if n >= LIMIT:
        raise ValueError(f"{n} is too large to read")
    if n == 0:
        return ZERO

    parts = []
    for suffix in GROUP_SUFFIXES:
        n, group = divmod(n, 10_000)
        if group:
            parts.append(_read_group(group) + suffix)
        if not n:
            break
    return "".join(reversed(parts))
