"""English (Porter2) stemming of single words."""

_VOWELS = frozenset("aeiouy")
_LI_ENDINGS = frozenset("cdeghkmnrt")
_DOUBLES = ("bb", "dd", "ff", "gg", "mm", "nn", "pp", "rr", "tt")
_APOSTROPHES = str.maketrans({"\u2019": "'", "\u2018": "'", "\u201b": "'"})
_SPECIAL_PREFIXES = ("gener", "commun", "arsen")

_SPECIAL_WORDS = {
    "skis": "ski",
    "skies": "sky",
    "dying": "die",
    "lying": "lie",
    "tying": "tie",
    "idly": "idl",
    "gently": "gentl",
    "ugly": "ugli",
    "early": "earli",
    "only": "onli",
    "singly": "singl",
}

_INVARIANT_WORDS = frozenset(
    {
        "sky", "news", "howe", "atlas", "cosmos", "bias", "andes",
        "inning", "innings", "outing", "outings", "canning", "cannings",
        "herring", "herrings", "earring", "earrings", "proceed", "proceeds",
        "exceed", "exceeds", "succeed", "succeeds",
    }
)

# Suffixes are ordered so that the first match is always the longest one.
_STEP2 = {
    "ational": "ate",
    "fulness": "ful",
    "iveness": "ive",
    "ization": "ize",
    "ousness": "ous",
    "biliti": "ble",
    "lessli": "less",
    "tional": "tion",
    "alism": "al",
    "aliti": "al",
    "ation": "ate",
    "entli": "ent",
    "fulli": "ful",
    "iviti": "ive",
    "ousli": "ous",
    "anci": "ance",
    "abli": "able",
    "alli": "al",
    "ator": "ate",
    "enci": "ence",
    "izer": "ize",
    "bli": "ble",
    "ogi": "og",
    "li": "",
}

_STEP3 = {
    "ational": "ate",
    "tional": "tion",
    "alize": "al",
    "icate": "ic",
    "iciti": "ic",
    "ative": "",
    "ical": "ic",
    "ness": "",
    "ful": "",
}

_STEP4 = (
    "ement", "ance", "ence", "able", "ible", "ment",
    "ent", "ant", "ism", "ate", "iti", "ous", "ive", "ize",
    "ion", "al", "er", "ic",
)


def _region_start(text, start):
    """Index just after the first vowel followed by a non-vowel at or after start."""
    pairs = zip(text[start:], text[start + 1:])
    for offset, (prev, cur) in enumerate(pairs, start + 2):
        if prev in _VOWELS and cur not in _VOWELS:
            return offset
    return len(text)


def _regions(text):
    prefix = next((p for p in _SPECIAL_PREFIXES if text.startswith(p)), None)
    r1 = len(prefix) if prefix else _region_start(text, 0)
    return r1, _region_start(text, r1)


def _mark_ys(word):
    """Upper-case every y that acts as a consonant."""
    chars = []
    for ch in word:
        if ch == "y" and (not chars or chars[-1] in _VOWELS):
            ch = "Y"
        chars.append(ch)
    return "".join(chars)


def _ends_short_syllable(text):
    if len(text) == 2:
        return text[0] in _VOWELS and text[1] not in _VOWELS
    if len(text) >= 3:
        before, vowel, last = text[-3:]
        return (
            last not in _VOWELS
            and last not in "wxY"
            and vowel in _VOWELS
            and before not in _VOWELS
        )
    return False


def _has_vowel(text):
    return any(ch in _VOWELS for ch in text)


class _Word:
    """A word being stemmed, with the starts of its R1 and R2 regions."""

    def __init__(self, text):
        self.text = text
        self.r1, self.r2 = _regions(text)

    def match(self, suffixes):
        return next((s for s in suffixes if self.text.endswith(s)), None)

    def in_region(self, suffix, start):
        return len(self.text) - len(suffix) >= start

    def replace(self, suffix, replacement=""):
        self.text = self.text[: len(self.text) - len(suffix)] + replacement


def _step0(w):
    suffix = w.match(("'s'", "'s", "'"))
    if suffix:
        w.replace(suffix)


def _step1a(w):
    suffix = w.match(("sses", "ied", "ies", "us", "ss", "s"))
    if suffix == "sses":
        w.replace(suffix, "ss")
    elif suffix in ("ied", "ies"):
        w.replace(suffix, "i" if len(w.text) > 4 else "ie")
    elif suffix == "s" and _has_vowel(w.text[:-2]):
        w.replace(suffix)


def _step1b(w):
    suffix = w.match(("eedly", "ingly", "edly", "ing", "eed", "ed"))
    if suffix is None:
        return
    if suffix in ("eed", "eedly"):
        if w.in_region(suffix, w.r1):
            w.replace(suffix, "ee")
        return
    remainder = w.text[: -len(suffix)]
    if not _has_vowel(remainder):
        return
    w.text = remainder
    if remainder.endswith(("at", "bl", "iz")):
        w.text += "e"
    elif remainder.endswith(_DOUBLES):
        w.text = remainder[:-1]
    elif w.r1 >= len(remainder) and _ends_short_syllable(remainder):
        w.text += "e"


def _step1c(w):
    text = w.text
    if len(text) > 2 and text[-1] in "yY" and text[-2] not in _VOWELS:
        w.text = text[:-1] + "i"


def _step2(w):
    suffix = w.match(_STEP2)
    if suffix is None or not w.in_region(suffix, w.r1):
        return
    if suffix == "li":
        if len(w.text) >= 3 and w.text[-3] in _LI_ENDINGS:
            w.replace(suffix)
    elif suffix == "ogi":
        if len(w.text) >= 4 and w.text[-4] == "l":
            w.replace(suffix, _STEP2[suffix])
    else:
        w.replace(suffix, _STEP2[suffix])


def _step3(w):
    suffix = w.match(_STEP3)
    if suffix is None or not w.in_region(suffix, w.r1):
        return
    if suffix == "ative":
        if w.in_region(suffix, w.r2):
            w.replace(suffix)
    else:
        w.replace(suffix, _STEP3[suffix])


def _step4(w):
    suffix = w.match(_STEP4)
    if suffix is None or not w.in_region(suffix, w.r2):
        return
    if suffix == "ion":
        if len(w.text) >= 4 and w.text[-4] in "st":
            w.replace(suffix)
    else:
        w.replace(suffix)


def _step5(w):
    text = w.text
    last = len(text) - 1
    if w.r1 > last:
        return
    if text[-1] == "e":
        if w.r2 <= last or not _ends_short_syllable(text[:-1]):
            w.text = text[:-1]
    elif text.endswith("ll") and w.r2 <= last:
        w.text = text[:-1]


def stem(word):
    """Return the English stem of a single word, lower-cased."""
    word = word.strip().lower()
    if len(word.encode("utf-8")) <= 2:
        return word
    if word in _SPECIAL_WORDS:
        return _SPECIAL_WORDS[word]
    if word in _INVARIANT_WORDS:
        return word

    w = _Word(_mark_ys(word.translate(_APOSTROPHES).lstrip("'")))
    for step in (_step0, _step1a, _step1b, _step1c, _step2, _step3, _step4, _step5):
        step(w)
    return w.text.replace("Y", "y")