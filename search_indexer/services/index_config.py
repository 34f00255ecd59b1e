from __future__ import annotations

import hashlib
import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

FIRM_ALIAS = "firm"
PERSON_ALIAS = "person"


@dataclass(frozen=True, slots=True)
class IndexConfig:
    # logical alias, e.g. "firm" or "person"
    alias: str
    # physical index name on the cluster, alias plus 8 byte config digest
    name: str
    # mapping/settings payload the index is created from
    config: bytes


def index_name(alias: str, config: bytes) -> str:
    digest = hashlib.sha256(config).digest()
    return f"{alias}_{digest[:8].hex()}"


def new_index_config(config_func: Callable[[], bytes], alias: str) -> IndexConfig:
    config = config_func()
    return IndexConfig(alias=alias, name=index_name(alias, config), config=config)


def _canonical_json(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


_ADDRESS_PROPERTIES: dict[str, Any] = {
    "addressLines": {"type": "text"},
    "town": {"type": "text"},
    "county": {"type": "text"},
    "postcode": {"type": "keyword", "normalizer": "lowercase_normalizer"},
}

_INDEX_SETTINGS: dict[str, Any] = {
    "number_of_shards": 1,
    "number_of_replicas": 1,
    "analysis": {
        "normalizer": {
            "lowercase_normalizer": {"type": "custom", "filter": ["lowercase"]},
        },
    },
}

_FIRM_INDEX: dict[str, Any] = {
    "settings": _INDEX_SETTINGS,
    "mappings": {
        "properties": {
            "id": {"type": "long"},
            "firmName": {"type": "text"},
            "firmNumber": {"type": "keyword"},
            "email": {"type": "keyword", "normalizer": "lowercase_normalizer"},
            "phoneNumber": {"type": "keyword"},
            **_ADDRESS_PROPERTIES,
            "updatedAt": {"type": "date"},
        }
    },
}

_PERSON_INDEX: dict[str, Any] = {
    "settings": _INDEX_SETTINGS,
    "mappings": {
        "properties": {
            "id": {"type": "long"},
            "uId": {"type": "keyword"},
            "caseRecNumber": {"type": "keyword"},
            "personType": {"type": "keyword"},
            "firstname": {"type": "text"},
            "middlenames": {"type": "text"},
            "surname": {"type": "text"},
            "companyName": {"type": "text"},
            "dob": {"type": "keyword"},
            "email": {"type": "keyword", "normalizer": "lowercase_normalizer"},
            **_ADDRESS_PROPERTIES,
            "updatedAt": {"type": "date"},
        }
    },
}


def firm_index_config() -> bytes:
    return _canonical_json(_FIRM_INDEX)


def person_index_config() -> bytes:
    return _canonical_json(_PERSON_INDEX)


INDEX_CONFIG_FUNCS: dict[str, Callable[[], bytes]] = {
    FIRM_ALIAS: firm_index_config,
    PERSON_ALIAS: person_index_config,
}


def default_index_configs() -> list[IndexConfig]:
    return [new_index_config(config_func, alias) for alias, config_func in INDEX_CONFIG_FUNCS.items()]
