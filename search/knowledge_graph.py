# knowledge_graph.py - upstream search call and the two-pass entity classifier
import logging
from typing import Callable, Iterable, List, Optional, Sequence, Set

import requests

from config import settings
from search.errors import ConfigurationError, InvalidInput, MalformedUpstreamResponse, UpstreamError
from search.models import AI_INVISIBLE, AMBIGUOUS, MACHINE_VERIFIED, NormalizedResult, SearchOutcome

logger = logging.getLogger(__name__)

SESSION = requests.Session()
SESSION.headers.update({
    "User-Agent": "entity-id-searcher/1.0",
    "Accept": "application/json",
})

RECOGNIZED_TYPES: Set[str] = {
    "Organization",
    "Corporation",
    "LocalBusiness",
    "RealEstateAgent",
    "HomeAndConstructionBusiness",
}

AMBIGUOUS_TYPES: Set[str] = {
    "Book",
    "Thing",
}


def validate_query(query) -> str:
    if not isinstance(query, str):
        raise InvalidInput("Brand name is required")
    q = query.strip()
    if not q:
        raise InvalidInput("Brand name is required")
    return q


def normalize_types(value) -> List[str]:
    """Upstream sends @type as a string or a list; always hand back a list."""
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [t for t in value if isinstance(t, str)]
    return []


def is_recognized_type(types: Iterable[str], recognized: Set[str] = RECOGNIZED_TYPES) -> bool:
    return any(t in recognized for t in types)


def is_ambiguous_type(types: Iterable[str], ambiguous: Set[str] = AMBIGUOUS_TYPES) -> bool:
    return any(t in ambiguous for t in types)


def first_match(items: Sequence[dict], predicate: Callable[[List[str]], bool]) -> Optional[dict]:
    """Return the first item (upstream order) whose type list satisfies predicate.

    Items without a ``result`` object are skipped.
    """
    for item in items:
        result = item.get("result") if isinstance(item, dict) else None
        if not isinstance(result, dict):
            continue
        if predicate(normalize_types(result.get("@type"))):
            return item
    return None


def _location(result: dict) -> Optional[str]:
    address = result.get("address")
    if isinstance(address, dict):
        return address.get("addressLocality") or None
    return None


def _score(item: dict) -> Optional[float]:
    raw = item.get("resultScore")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return float(raw)


def build_result(query: str, item: dict, verified: bool) -> NormalizedResult:
    result = item["result"]
    fields = {
        "name": result.get("name") or query,
        "types": normalize_types(result.get("@type")),
        "description": result.get("description"),
        "result_score": _score(item),
    }
    if verified:
        fields["entity_id"] = result.get("@id")
        fields["url"] = result.get("url")
        fields["location"] = _location(result)
    return NormalizedResult(**fields)


def classify_items(
    query: str,
    items: Sequence[dict],
    recognized: Set[str] = RECOGNIZED_TYPES,
    ambiguous: Set[str] = AMBIGUOUS_TYPES,
) -> SearchOutcome:
    """Map the upstream candidate list to a classification.

    Two ordered scans over the same list: a recognized-type candidate anywhere
    in the list wins over an ambiguous one that ranks above it.
    """
    if not items:
        return SearchOutcome(query=query, status=AI_INVISIBLE)

    hit = first_match(items, lambda types: is_recognized_type(types, recognized))
    if hit is not None:
        return SearchOutcome(query=query, status=MACHINE_VERIFIED, result=build_result(query, hit, True))

    hit = first_match(items, lambda types: is_ambiguous_type(types, ambiguous))
    if hit is not None:
        return SearchOutcome(query=query, status=AMBIGUOUS, result=build_result(query, hit, False))

    return SearchOutcome(query=query, status=AI_INVISIBLE)


def fetch_candidates(
    query: str,
    api_key: str,
    limit: int = settings.KG_RESULT_LIMIT,
    timeout: float = settings.KG_TIMEOUT_SECONDS,
) -> List[dict]:
    params = {"query": query, "key": api_key, "limit": limit}
    try:
        r = SESSION.get(settings.KG_SEARCH_URL, params=params, timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"Knowledge Graph request failed for '{query}': {type(e).__name__}")
        raise UpstreamError(f"Knowledge Graph API unreachable: {type(e).__name__}") from e

    if not r.ok:
        logger.warning(f"Knowledge Graph API returned {r.status_code} for '{query}'")
        raise UpstreamError(f"Knowledge Graph API error: {r.status_code}", status_code=r.status_code)

    try:
        data = r.json()
    except ValueError as e:
        ctype = r.headers.get("Content-Type", "unknown")
        logger.warning(f"Knowledge Graph API sent non-JSON body ({ctype}) for '{query}'")
        raise MalformedUpstreamResponse(f"Unexpected response from Knowledge Graph API: {e}") from e

    if not isinstance(data, dict):
        raise MalformedUpstreamResponse("Unexpected response from Knowledge Graph API: not a JSON object")
    items = data.get("itemListElement") or []
    if not isinstance(items, list):
        raise MalformedUpstreamResponse("Unexpected response from Knowledge Graph API: itemListElement is not a list")
    return items


def search_entity(query, api_key: Optional[str] = None, limit: Optional[int] = None) -> SearchOutcome:
    """Main routine: validate, call the knowledge graph, classify.

    Raises a SearchError subclass for every failure; nothing is retried.
    """
    q = validate_query(query)
    key = api_key if api_key is not None else settings.GOOGLE_KNOWLEDGE_GRAPH_API_KEY
    if not key:
        raise ConfigurationError(
            "API key not configured. Please add GOOGLE_KNOWLEDGE_GRAPH_API_KEY to your environment variables."
        )

    items = fetch_candidates(q, key, limit=limit or settings.KG_RESULT_LIMIT)
    outcome = classify_items(q, items)
    logger.info(f"Classified '{q}' as {outcome.status} from {len(items)} candidates")
    return outcome
