"""
Source catalog: the curated feeds the app knows about.

Each source carries topic tags and a hand-curated list of related source
ids. Callers may also send ad-hoc sources with a request; those are cleaned
here and merged behind the static entries.
"""

from dataclasses import dataclass
from typing import Any, Iterable

from .extractors import normalize_whitespace
from .url_validator import SSRFError, validate_url

MAX_SOURCE_TEXT_LENGTH = 160
MAX_TOPIC_LENGTH = 48
MAX_TOPICS_PER_SOURCE = 8


@dataclass(frozen=True)
class SourceConfig:
    """A configured feed endpoint with topical metadata."""
    id: str
    name: str
    website_url: str
    feed_url: str
    description: str = ""
    topics: tuple[str, ...] = ()
    related_source_ids: tuple[str, ...] = ()
    is_recommendable: bool = True


def _source(
    id: str,
    name: str,
    website_url: str,
    feed_url: str,
    description: str,
    topics: list[str],
    related: list[str],
    is_recommendable: bool = True,
) -> SourceConfig:
    return SourceConfig(
        id=id,
        name=name,
        website_url=website_url,
        feed_url=feed_url,
        description=description,
        topics=tuple(topics),
        related_source_ids=tuple(related),
        is_recommendable=is_recommendable,
    )


SOURCES: list[SourceConfig] = [
    _source(
        "hn-front", "Hacker News", "https://news.ycombinator.com", "https://hnrss.org/frontpage",
        "Noticias de ingeniería, startups y cultura hacker.",
        ["backend", "frontend", "cloud", "devops", "ia", "seguridad", "open-source"],
        ["lobsters", "devops-com", "towards-data", "vidaextra"],
    ),
    _source(
        "lobsters", "Lobsters", "https://lobste.rs", "https://lobste.rs/rss",
        "Comunidad técnica con foco en software y arquitectura.",
        ["backend", "open-source", "devops", "seguridad"],
        ["hn-front", "devops-com", "krebsonsecurity"],
    ),
    _source(
        "infoq-java", "InfoQ Java", "https://www.infoq.com/java/", "https://feed.infoq.com/java",
        "Java enterprise, Spring y arquitectura backend.",
        ["java-spring", "backend", "cloud", "devops"],
        ["spring-blog", "baeldung"],
    ),
    _source(
        "spring-blog", "Spring Blog", "https://spring.io/blog", "https://spring.io/blog.atom",
        "Novedades oficiales de Spring Framework y Boot.",
        ["java-spring", "backend", "seguridad"],
        ["infoq-java", "baeldung"],
    ),
    _source(
        "baeldung", "Baeldung", "https://www.baeldung.com", "https://feeds.feedburner.com/Baeldung",
        "Tutoriales prácticos de backend, Java y seguridad.",
        ["java-spring", "backend", "seguridad", "mobile"],
        ["infoq-java", "spring-blog"],
        is_recommendable=False,
    ),
    _source(
        "devops-com", "DevOps.com", "https://devops.com", "https://devops.com/feed/",
        "Artículos sobre CI/CD, cloud y plataforma.",
        ["devops", "cloud", "seguridad", "open-source"],
        ["kubernetes-blog", "hn-front", "krebsonsecurity"],
    ),
    _source(
        "kubernetes-blog", "Kubernetes Blog", "https://kubernetes.io/blog/", "https://kubernetes.io/feed.xml",
        "Actualizaciones cloud-native y ecosistema Kubernetes.",
        ["cloud", "devops", "seguridad", "open-source"],
        ["devops-com", "lobsters"],
    ),
    _source(
        "towards-data", "Towards Data Science", "https://towardsdatascience.com",
        "https://towardsdatascience.com/feed",
        "Machine learning y aplicaciones de IA.",
        ["ia", "data", "backend"],
        ["ml-mastery", "hn-front"],
    ),
    _source(
        "ml-mastery", "Machine Learning Mastery", "https://machinelearningmastery.com",
        "https://machinelearningmastery.com/feed/",
        "Guías prácticas de modelado y experimentación ML.",
        ["ia", "data"],
        ["towards-data", "hn-front"],
    ),
    _source(
        "krebsonsecurity", "Krebs on Security", "https://krebsonsecurity.com",
        "https://krebsonsecurity.com/feed/",
        "Investigación de ciberseguridad y amenazas reales.",
        ["seguridad", "ciberseguridad"],
        ["the-hacker-news", "devops-com"],
    ),
    _source(
        "the-hacker-news", "The Hacker News", "https://thehackernews.com",
        "https://feeds.feedburner.com/TheHackersNews",
        "Noticias rápidas de vulnerabilidades y seguridad.",
        ["seguridad", "ciberseguridad"],
        ["krebsonsecurity", "devops-com"],
    ),
    _source(
        "anime-news-network", "Anime News Network", "https://www.animenewsnetwork.com",
        "https://www.animenewsnetwork.com/all/rss.xml",
        "Noticias de anime, manga y lanzamientos.",
        ["anime", "manga", "cultura-pop"],
        ["myanimelist-news", "vidaextra"],
    ),
    _source(
        "myanimelist-news", "MyAnimeList News", "https://myanimelist.net/news",
        "https://myanimelist.net/rss/news.xml",
        "Actualidad del ecosistema anime y manga.",
        ["anime", "manga"],
        ["anime-news-network"],
    ),
    _source(
        "vidaextra", "VidaExtra", "https://www.vidaextra.com", "https://www.vidaextra.com/index.xml",
        "Videojuegos y cultura gamer en español.",
        ["videojuegos", "cultura-pop", "nintendo"],
        ["hobbyconsolas", "nintendolife", "gamesradar"],
    ),
    _source(
        "hobbyconsolas", "HobbyConsolas", "https://www.hobbyconsolas.com", "https://www.hobbyconsolas.com/rss",
        "Videojuegos, cine, series y entretenimiento geek.",
        ["videojuegos", "cine", "series", "comics", "cultura-pop"],
        ["vidaextra", "gamesradar", "espinof"],
    ),
    _source(
        "gamesradar", "GamesRadar", "https://www.gamesradar.com", "https://www.gamesradar.com/feeds/all/",
        "Gaming, cine y series con enfoque internacional.",
        ["videojuegos", "cine", "series", "comics"],
        ["hobbyconsolas", "nintendolife", "comingsoon"],
    ),
    _source(
        "nintendolife", "Nintendo Life", "https://www.nintendolife.com",
        "https://www.nintendolife.com/feeds/latest",
        "Novedades de Nintendo Switch y franquicias clásicas.",
        ["nintendo", "videojuegos", "cultura-pop"],
        ["vidaextra", "gamesradar"],
    ),
    _source(
        "eurogamer", "Eurogamer", "https://www.eurogamer.net", "https://www.eurogamer.net/rss",
        "Cobertura global de gaming, hardware y lanzamientos.",
        ["videojuegos", "cultura-pop"],
        ["gamesradar", "kotaku"],
    ),
    _source(
        "kotaku", "Kotaku", "https://kotaku.com", "https://kotaku.com/rss",
        "Noticias y opinión de videojuegos y cultura internet.",
        ["videojuegos", "cultura-pop", "anime"],
        ["eurogamer", "gamesradar"],
    ),
    _source(
        "espinof", "Espinof", "https://www.espinof.com", "https://www.espinof.com/index.xml",
        "Noticias de cine, series y streaming en español.",
        ["cine", "series", "cultura-pop"],
        ["comingsoon", "hobbyconsolas"],
    ),
    _source(
        "comingsoon", "ComingSoon", "https://www.comingsoon.net", "https://www.comingsoon.net/feed/",
        "Trailers y novedades de cine, series y cómic.",
        ["cine", "series", "comics", "cultura-pop"],
        ["espinof", "gamesradar"],
    ),
]

_SOURCE_MAP = {source.id: source for source in SOURCES}


def is_known_source_id(source_id: Any) -> bool:
    return isinstance(source_id, str) and source_id in _SOURCE_MAP


def get_source(source_id: str) -> SourceConfig | None:
    return _SOURCE_MAP.get(source_id)


def get_sources_by_ids(source_ids: Iterable[str]) -> list[SourceConfig]:
    """Look up catalog sources in input order, skipping unknown ids."""
    return [_SOURCE_MAP[source_id] for source_id in source_ids if is_known_source_id(source_id)]


def sanitize_source_ids(values: Any) -> list[str]:
    """Deduplicate and keep only ids present in the catalog."""
    if not isinstance(values, (list, tuple)):
        return []
    result: list[str] = []
    for value in values:
        if is_known_source_id(value) and value not in result:
            result.append(value)
    return result


def merge_configs(base: Iterable[SourceConfig], overrides: Iterable[SourceConfig]) -> list[SourceConfig]:
    """
    Combine two source lists, keeping the first source per id and per feed URL.

    Base entries come first, so they win over overrides on any collision.
    """
    merged: list[SourceConfig] = []
    seen_ids: set[str] = set()
    seen_feed_urls: set[str] = set()

    for source in [*base, *overrides]:
        if source.id in seen_ids or source.feed_url in seen_feed_urls:
            continue
        merged.append(source)
        seen_ids.add(source.id)
        seen_feed_urls.add(source.feed_url)

    return merged


# ─────────────────────────────────────────────────────────────
# Ad-hoc sources sent with a request
# ─────────────────────────────────────────────────────────────

def _sanitize_text(value: Any, max_length: int = MAX_SOURCE_TEXT_LENGTH) -> str:
    if not isinstance(value, str):
        return ""
    return normalize_whitespace(value)[:max_length].strip()


def sanitize_http_url(value: Any) -> str:
    """Return the URL if it is an absolute public http(s) URL, else ""."""
    text = _sanitize_text(value)
    if not text:
        return ""
    try:
        return validate_url(text)
    except SSRFError:
        return ""


def sanitize_topics(values: Any) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    topics: list[str] = []
    for value in values:
        topic = _sanitize_text(value, MAX_TOPIC_LENGTH).lower()
        if not topic or topic in topics:
            continue
        topics.append(topic)
        if len(topics) >= MAX_TOPICS_PER_SOURCE:
            break
    return topics


def _field(raw: dict, camel: str, snake: str) -> Any:
    return raw.get(camel, raw.get(snake))


def sanitize_source_overrides(values: Any) -> list[SourceConfig]:
    """
    Build SourceConfig objects from caller-supplied dicts.

    Entries missing an id, name or valid URL are dropped, as are repeats of an
    id or feed URL already seen in the list.
    """
    if not isinstance(values, (list, tuple)):
        return []

    result: list[SourceConfig] = []
    seen_ids: set[str] = set()
    seen_feed_urls: set[str] = set()

    for raw in values:
        if not isinstance(raw, dict):
            continue

        source_id = _sanitize_text(raw.get("id"))
        name = _sanitize_text(raw.get("name"))
        website_url = sanitize_http_url(_field(raw, "websiteUrl", "website_url"))
        feed_url = sanitize_http_url(_field(raw, "feedUrl", "feed_url"))

        if not source_id or not name or not website_url or not feed_url:
            continue
        if source_id in seen_ids or feed_url in seen_feed_urls:
            continue

        result.append(SourceConfig(
            id=source_id,
            name=name,
            website_url=website_url,
            feed_url=feed_url,
            description=_sanitize_text(raw.get("description")),
            topics=tuple(sanitize_topics(raw.get("topics"))),
            related_source_ids=(),
        ))
        seen_ids.add(source_id)
        seen_feed_urls.add(feed_url)

    return result
