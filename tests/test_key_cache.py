import json
import threading

import pytest

from aleo_sdk.errors import KeyIntegrityError
from aleo_sdk.keys.cache import CacheEntry, KeyCache, key_digest


def test_set_get_delete_clear():
    cache = KeyCache()
    entry = cache.set("credits.aleo/join", b"pk", b"vk")
    assert entry.digest.startswith("sha3-256:")
    assert cache.get("credits.aleo/join") == entry
    assert cache.contains("credits.aleo/join")
    assert "credits.aleo/split" not in cache
    assert cache.get("credits.aleo/split") is None

    cache.set("credits.aleo/split", b"pk2", b"vk2")
    assert cache.locators() == ["credits.aleo/join", "credits.aleo/split"]
    assert cache.delete("credits.aleo/join") is True
    assert cache.delete("credits.aleo/join") is False
    cache.clear()
    assert len(cache) == 0


def test_reinsert_overwrites():
    cache = KeyCache()
    cache.set("inclusion", b"a", b"b")
    cache.set("inclusion", b"c", b"d")
    assert cache.get("inclusion").proving_key == b"c"


def test_digest_binds_the_split_point():
    assert key_digest(b"ab", b"c") != key_digest(b"a", b"bc")


def test_tampered_entry_is_rejected():
    cache = KeyCache()
    good = cache.set("credits.aleo/join", b"pk", b"vk")
    cache._entries["credits.aleo/join"] = CacheEntry(b"evil", b"vk", good.digest)
    with pytest.raises(KeyIntegrityError):
        cache.get("credits.aleo/join")


def test_save_and_load_roundtrip(tmp_path):
    path = tmp_path / "keys.json"
    cache = KeyCache()
    cache.set("credits.aleo/join", b"\x00\x01pk", b"vk")
    cache.save(path)

    doc = json.loads(path.read_text())
    assert doc["schema_version"] == "1"
    assert doc["entries"]["credits.aleo/join"]["proving_key"] == "0001706b"

    loaded = KeyCache.load(path)
    assert loaded.get("credits.aleo/join") == cache.get("credits.aleo/join")


def test_load_detects_edited_file(tmp_path):
    path = tmp_path / "keys.json"
    cache = KeyCache()
    cache.set("credits.aleo/join", b"pk", b"vk")
    cache.save(path)

    doc = json.loads(path.read_text())
    doc["entries"]["credits.aleo/join"]["verifying_key"] = b"other".hex()
    path.write_text(json.dumps(doc))

    with pytest.raises(KeyIntegrityError):
        KeyCache.load(path).get("credits.aleo/join")


def test_load_rejects_unknown_schema(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text(json.dumps({"schema_version": "9", "entries": {}}))
    with pytest.raises(ValueError):
        KeyCache.load(path)


def test_concurrent_writers_leave_one_consistent_entry():
    cache = KeyCache()

    def writer(i: int) -> None:
        for _ in range(50):
            cache.set("credits.aleo/join", f"pk{i}".encode(), f"vk{i}".encode())

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    entry = cache.get("credits.aleo/join")
    assert entry is not None and entry.is_intact()
    assert entry.proving_key[2:] == entry.verifying_key[2:]
