"""Service for turning imported word lists into catalogs."""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from wordstudy.config import settings
from wordstudy.errors import InvalidCatalogError
from wordstudy.models.study_models import Catalog, CatalogEntry, WordRecord

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("usphone", "ukphone", "translation", "definition", "pos", "tag")
_NUMBER_FIELDS = ("collins", "bnc", "frq")


def _optional_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return raw if isinstance(raw, str) else str(raw)


def _optional_number(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    try:
        return int(float(str(raw).strip()))
    except ValueError:
        return None


def _optional_flag(raw: Any) -> Optional[bool]:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes")
    return bool(raw)


def parse_word_record(raw: Union[WordRecord, Mapping[str, Any]], position: int = 0) -> WordRecord:
    """Build a word record from an imported mapping.

    Only ``value`` is mandatory. Optional fields that cannot be interpreted are
    dropped instead of failing the import; unknown fields are ignored.
    """
    if isinstance(raw, WordRecord):
        record = raw
    elif isinstance(raw, Mapping):
        value = raw.get("value")
        if not isinstance(value, str) or not value:
            raise InvalidCatalogError(f"Word record #{position} has no value")
        fields: Dict[str, Any] = {"value": value}
        for name in _TEXT_FIELDS:
            fields[name] = _optional_text(raw.get(name))
        for name in _NUMBER_FIELDS:
            fields[name] = _optional_number(raw.get(name))
        fields["oxford"] = _optional_flag(raw.get("oxford"))
        record = WordRecord(**fields)
    else:
        raise InvalidCatalogError(f"Word record #{position} is not an object")

    if not isinstance(record.value, str) or not record.value:
        raise InvalidCatalogError(f"Word record #{position} has no value")
    return record


def normalize(raw_list: Sequence[Union[WordRecord, Mapping[str, Any]]]) -> List[CatalogEntry]:
    """Give every record in a word list a catalog id.

    Ids combine the headword with its position, so repeated headwords stay
    distinguishable and reloading the same list yields the same ids.
    """
    if isinstance(raw_list, (str, bytes, Mapping)) or not isinstance(raw_list, Sequence):
        raise InvalidCatalogError("Word list must be a sequence of word records")

    entries = []
    for position, raw in enumerate(raw_list):
        record = parse_word_record(raw, position)
        entries.append(CatalogEntry(id=f"{record.value}-{position}", word=record))
    return entries


def parse_catalog(document: Mapping[str, Any]) -> Catalog:
    """Parse an imported dictionary document into a catalog."""
    if not isinstance(document, Mapping):
        raise InvalidCatalogError("Catalog document must be an object")

    word_list = document.get("wordList")
    if not isinstance(word_list, list):
        raise InvalidCatalogError("Catalog document has no word list")

    entries = normalize(word_list)
    name = document.get("name") or settings.study.default_catalog_name
    catalog = Catalog(
        name=str(name),
        entries=entries,
        type=str(document.get("type") or "DOCUMENT"),
        language=str(document.get("language") or ""),
    )
    logger.info(f"Parsed catalog {catalog.name!r} with {len(entries)} words")
    return catalog


def load_catalog_text(text: Union[str, bytes]) -> Catalog:
    """Decode a JSON dictionary document and parse it."""
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidCatalogError(f"Catalog is not valid JSON: {e}") from e
    return parse_catalog(document)


def empty_catalog(name: Optional[str] = None) -> Catalog:
    """Catalog used before anything has been imported."""
    return Catalog(name=name or settings.study.default_catalog_name)


def available_tags(entries: Sequence[Any]) -> List[str]:
    """Sorted distinct tags across entries."""
    tags = set()
    for entry in entries:
        tags.update(entry.word.tags)
    return sorted(tags)
