import hashlib
import json

import pytest

from search_indexer.services.index_config import (
    IndexConfig,
    default_index_configs,
    firm_index_config,
    index_name,
    new_index_config,
    person_index_config,
)


def test_index_name_uses_first_eight_digest_bytes():
    config = b'{"mappings":{}}'
    expected = hashlib.sha256(config).hexdigest()[:16]
    assert index_name("firm", config) == f"firm_{expected}"


def test_index_name_is_stable_for_identical_config():
    assert index_name("person", b"abc") == index_name("person", b"abc")


def test_index_name_changes_with_config():
    assert index_name("person", b"abc") != index_name("person", b"abd")


def test_new_index_config_builds_value_object():
    cfg = new_index_config(lambda: b"settings", "firm")
    assert cfg == IndexConfig(alias="firm", name=index_name("firm", b"settings"), config=b"settings")


def test_new_index_config_propagates_loader_errors():
    def broken() -> bytes:
        raise OSError("mapping file missing")

    with pytest.raises(OSError, match="mapping file missing"):
        new_index_config(broken, "firm")


def test_builtin_configs_are_canonical_json():
    firm = firm_index_config()
    assert firm == firm_index_config()
    assert json.loads(firm)["mappings"]["properties"]["firmName"] == {"type": "text"}
    assert "surname" in json.loads(person_index_config())["mappings"]["properties"]


def test_default_index_configs_order_and_names():
    configs = default_index_configs()
    assert [cfg.alias for cfg in configs] == ["firm", "person"]
    assert configs[0].name.startswith("firm_")
    assert len(configs[1].name) == len("person_") + 16
