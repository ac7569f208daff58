"""
Interest catalog: built-in interests plus validation of user-edited ones.

An interest is a label with a short list of keywords. Built-in interests
ship with the app; custom ones are created and edited by the user and come
back to us as untrusted dicts, so everything here is about repairing input.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable

from .exceptions import ValidationError
from .extractors import fold_text, normalize_whitespace

MAX_KEYWORDS_PER_INTEREST = 12
MAX_KEYWORD_LENGTH = 48
MAX_ID_LENGTH = 40
MAX_LABEL_LENGTH = 60
MAX_CATALOG_SIZE = 30

_KEYWORD_SPLIT_RE = re.compile(r"[,;\n]")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


class InterestCategory(Enum):
    TECH = "tech"
    FRIKI = "friki"
    CUSTOM = "custom"

    @property
    def sort_order(self) -> int:
        return _CATEGORY_ORDER[self]

    @classmethod
    def parse(cls, value: Any) -> "InterestCategory":
        """Parse a category string; raises ValidationError if unknown."""
        if isinstance(value, InterestCategory):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown interest category: {value!r}")


_CATEGORY_ORDER = {
    InterestCategory.TECH: 0,
    InterestCategory.FRIKI: 1,
    InterestCategory.CUSTOM: 2,
}


@dataclass(frozen=True)
class Interest:
    """A named cluster of keywords."""
    id: str
    label: str
    keywords: tuple[str, ...]
    category: InterestCategory
    is_built_in: bool = False


def _builtin(id: str, label: str, category: InterestCategory, keywords: list[str]) -> Interest:
    return Interest(
        id=id,
        label=label,
        keywords=tuple(keywords),
        category=category,
        is_built_in=True,
    )


DEFAULT_INTERESTS: list[Interest] = [
    _builtin("java-spring", "Java / Spring", InterestCategory.TECH, [
        "java", "jvm", "spring", "spring boot", "hibernate", "maven", "gradle",
    ]),
    _builtin("devops", "DevOps", InterestCategory.TECH, [
        "devops", "kubernetes", "docker", "terraform", "ansible", "ci/cd",
        "gitops", "platform engineering", "observability",
    ]),
    _builtin("ia", "IA", InterestCategory.TECH, [
        "ai", "ml", "llm", "agent", "rag", "inference", "openai", "model",
    ]),
    _builtin("seguridad", "Seguridad", InterestCategory.TECH, [
        "security", "vulnerability", "cve", "zero-day", "xss", "csrf",
        "oauth", "encryption", "auth",
    ]),
    _builtin("cloud", "Cloud", InterestCategory.TECH, [
        "cloud", "aws", "azure", "gcp", "serverless", "lambda",
    ]),
    _builtin("anime", "Anime / Manga", InterestCategory.FRIKI, [
        "anime", "manga", "crunchyroll", "studio ghibli", "shonen", "temporada",
    ]),
    _builtin("videojuegos", "Videojuegos", InterestCategory.FRIKI, [
        "videojuego", "game", "nintendo", "playstation", "xbox", "switch", "steam",
    ]),
    _builtin("cine-series", "Cine y series", InterestCategory.FRIKI, [
        "película", "serie", "trailer", "netflix", "estreno", "marvel", "star wars",
    ]),
    _builtin("comics", "Cómics", InterestCategory.FRIKI, [
        "cómic", "comic", "dc", "marvel", "novela gráfica",
    ]),
]

# Ids used by earlier versions of the stored preferences
LEGACY_INTEREST_IDS: dict[str, str] = {
    "java_spring": "java-spring",
    "ai": "ia",
    "security": "seguridad",
    "gaming": "videojuegos",
    "games": "videojuegos",
    "movies": "cine-series",
    "cine": "cine-series",
    "series": "cine-series",
    "manga": "anime",
}


# ─────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────

def normalize_id(text: Any) -> str:
    """
    Turn arbitrary text into a slug.

    "Ciberseguridad & Redes" -> "ciberseguridad-redes"
    """
    slug = _NON_SLUG_RE.sub("-", fold_text(text)).strip("-")
    return slug[:MAX_ID_LENGTH].strip("-")


def sanitize_label(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return normalize_whitespace(value)[:MAX_LABEL_LENGTH].strip()


def sanitize_keywords(value: Any, max_count: int = MAX_KEYWORDS_PER_INTEREST) -> list[str]:
    """
    Clean a keyword list typed by the user.

    Accepts "a, b; c" style strings or lists. Keeps first-occurrence order and
    drops terms that only differ by case or accents.
    """
    if isinstance(value, str):
        candidates: Iterable[Any] = _KEYWORD_SPLIT_RE.split(value)
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        return []

    keywords: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if len(keywords) >= max_count:
            break
        if not isinstance(candidate, str):
            continue
        keyword = normalize_whitespace(candidate).lower()[:MAX_KEYWORD_LENGTH].strip()
        key = fold_text(keyword)
        if not keyword or key in seen:
            continue
        seen.add(key)
        keywords.append(keyword)
    return keywords


def _unique_id(base: str, taken: set[str]) -> str:
    if base not in taken:
        return base
    suffix = 2
    while True:
        suffix_text = f"-{suffix}"
        candidate = f"{base[:MAX_ID_LENGTH - len(suffix_text)].rstrip('-')}{suffix_text}"
        if candidate not in taken:
            return candidate
        suffix += 1


def _validated_fields(label: Any, keywords_input: Any) -> tuple[str, tuple[str, ...]]:
    clean_label = sanitize_label(label)
    if not clean_label:
        raise ValidationError("Interest label cannot be empty")
    keywords = sanitize_keywords(keywords_input)
    if not keywords:
        raise ValidationError("Interest needs at least one keyword")
    return clean_label, tuple(keywords)


# ─────────────────────────────────────────────────────────────
# User actions
# ─────────────────────────────────────────────────────────────

def build_custom_interest(
    label: Any,
    keywords_input: Any,
    existing_catalog: Iterable[Interest] = (),
) -> Interest:
    """
    Create a custom interest with an id that is unique within the catalog.

    Raises:
        ValidationError: if the label is empty or no keyword survives cleaning
    """
    clean_label, keywords = _validated_fields(label, keywords_input)
    taken = {interest.id for interest in existing_catalog}
    base = normalize_id(clean_label) or "custom"

    return Interest(
        id=_unique_id(base, taken),
        label=clean_label,
        keywords=keywords,
        category=InterestCategory.CUSTOM,
        is_built_in=False,
    )


def update_interest_draft(current: Interest, label: Any, keywords_input: Any) -> Interest:
    """Replace label and keywords; id and category never change."""
    clean_label, keywords = _validated_fields(label, keywords_input)
    return replace(current, label=clean_label, keywords=keywords)


# ─────────────────────────────────────────────────────────────
# Repairing untrusted catalogs and selections
# ─────────────────────────────────────────────────────────────

def parse_interest(raw: Any) -> Interest | None:
    """Build an Interest from a dict descriptor, or None if malformed."""
    if isinstance(raw, Interest):
        return raw
    if not isinstance(raw, dict):
        return None

    label = sanitize_label(raw.get("label"))
    keywords = sanitize_keywords(raw.get("keywords"))
    if not label or not keywords:
        return None

    raw_id = raw.get("id")
    interest_id = ""
    if isinstance(raw_id, str) and raw_id.strip():
        interest_id = normalize_id(LEGACY_INTEREST_IDS.get(raw_id.strip(), raw_id))
    interest_id = interest_id or normalize_id(label)
    if not interest_id:
        return None

    try:
        category = InterestCategory.parse(raw.get("category", InterestCategory.CUSTOM.value))
    except ValidationError:
        return None

    is_built_in = raw.get("isBuiltIn", raw.get("is_built_in", False))
    return Interest(
        id=interest_id,
        label=label,
        keywords=tuple(keywords),
        category=category,
        is_built_in=is_built_in is True,
    )


def catalog_sort_key(interest: Interest) -> tuple[int, str, str]:
    return (interest.category.sort_order, fold_text(interest.label), interest.label)


def sanitize_catalog(raw_list: Any) -> list[Interest]:
    """
    Repair a stored interest catalog.

    Malformed entries are dropped, the first entry wins on id collisions and
    the result is capped and sorted by category, then label.
    """
    if not isinstance(raw_list, (list, tuple)):
        return []

    catalog: list[Interest] = []
    seen: set[str] = set()
    for raw in raw_list:
        if len(catalog) >= MAX_CATALOG_SIZE:
            break
        interest = parse_interest(raw)
        if interest is None or interest.id in seen:
            continue
        seen.add(interest.id)
        catalog.append(interest)

    return sorted(catalog, key=catalog_sort_key)


def sanitize_selected_ids(raw_ids: Any, catalog: Iterable[Interest]) -> list[str]:
    """Keep the selected ids that exist in the catalog, mapping legacy ids."""
    if not isinstance(raw_ids, (list, tuple)):
        return []

    known = {interest.id for interest in catalog}
    selected: list[str] = []
    for raw_id in raw_ids:
        if not isinstance(raw_id, str):
            continue
        interest_id = normalize_id(LEGACY_INTEREST_IDS.get(raw_id.strip(), raw_id))
        if interest_id in known and interest_id not in selected:
            selected.append(interest_id)
    return selected


def get_interest(interest_id: str, catalog: Iterable[Interest] = DEFAULT_INTERESTS) -> Interest | None:
    for interest in catalog:
        if interest.id == interest_id:
            return interest
    return None


def sanitize_interest_selection(
    values: Any,
    catalog: Iterable[Interest] = DEFAULT_INTERESTS,
) -> list[Interest]:
    """
    Resolve a request's interests.

    Each value may be an id from the catalog or a full descriptor (custom
    interests travel with the request). Duplicates by id are dropped.
    """
    if not isinstance(values, (list, tuple)):
        return []

    catalog = list(catalog)
    resolved: list[Interest] = []
    seen: set[str] = set()
    for value in values:
        if len(resolved) >= MAX_CATALOG_SIZE:
            break
        if isinstance(value, str):
            ids = sanitize_selected_ids([value], catalog)
            interest = get_interest(ids[0], catalog) if ids else None
        else:
            interest = parse_interest(value)
        if interest is None or interest.id in seen:
            continue
        seen.add(interest.id)
        resolved.append(interest)
    return resolved
