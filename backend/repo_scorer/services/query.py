from typing import Optional


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def build_search_query(
    language: Optional[str], since: Optional[str], extra_query: Optional[str]
) -> str:
    """Compose the upstream ``q`` parameter: language, created date, extra text."""
    parts = []
    if not _is_blank(language):
        parts.append(f"language:{language}")
    if not _is_blank(since):
        parts.append(f"created:>{since}")
    if not _is_blank(extra_query):
        parts.append(extra_query)
    return " ".join(parts).strip()


def query_signature(
    language: Optional[str], since: Optional[str], extra_query: Optional[str], limit: int
) -> str:
    # shared by the raw and scored caches; None and "" must collapse to the same key
    return "|".join([language or "", since or "", extra_query or "", str(limit)])
