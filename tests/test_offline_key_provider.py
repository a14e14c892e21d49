import pytest

from aleo_sdk.errors import InvalidSearchParamsError, KeyIntegrityError, KeyNotFoundError
from aleo_sdk.keys.cache import KeyCache
from aleo_sdk.keys.offline import OfflineKeyProvider
from aleo_sdk.keys.params import CachedKeySearch, RemoteKeySearch

from conftest import FakeKey


def test_cache_with_join_serves_join_but_not_split(engine):
    provider = OfflineKeyProvider(engine)
    provider.insert_join_keys(FakeKey("prover", "join"))

    proving_key, verifying_key = provider.function_keys(CachedKeySearch("credits.aleo/join"))
    assert proving_key == FakeKey("prover", "join")
    assert verifying_key == FakeKey("verifier", "join", "builtin")
    assert provider.join_keys() == (proving_key, verifying_key)

    with pytest.raises(KeyNotFoundError):
        provider.function_keys(CachedKeySearch("credits.aleo/split"))
    with pytest.raises(KeyNotFoundError):
        provider.split_keys()


def test_insert_rejects_wrong_proving_key(engine):
    provider = OfflineKeyProvider(engine)
    with pytest.raises(KeyIntegrityError) as ei:
        provider.insert_split_keys(FakeKey("prover", "join"))
    assert ei.value.locator == "credits.aleo/split"
    assert not provider.contains_keys("credits.aleo/split")


def test_insert_rejects_forged_key(engine):
    provider = OfflineKeyProvider(engine)
    with pytest.raises(KeyIntegrityError):
        provider.insert_fee_private_keys(FakeKey("prover", "fee_private", "forged"))
    assert len(provider.cache) == 0


def test_insert_unknown_function(engine):
    with pytest.raises(KeyIntegrityError):
        OfflineKeyProvider(engine).insert_credits_proving_key("mint", FakeKey("prover", "mint"))


def test_verification_flags_swapped_keys(engine):
    provider = OfflineKeyProvider(engine)
    # arbitrary pair stored under a credits locator without going through insert_*
    provider.cache_keys("credits.aleo/join", (FakeKey("prover", "split"), FakeKey("verifier", "split")))

    keys = provider.function_keys(CachedKeySearch("credits.aleo/join"))
    assert keys.proving_key.name == "split"
    with pytest.raises(KeyIntegrityError):
        provider.function_keys(CachedKeySearch("credits.aleo/join", verify_credits_keys=True))
    with pytest.raises(KeyIntegrityError):
        provider.join_keys()


def test_unknown_locator_never_passes_verification(engine):
    provider = OfflineKeyProvider(engine)
    provider.cache_keys("hello.aleo/main", (FakeKey("prover", "main"), FakeKey("verifier", "main")))
    assert provider.function_keys(CachedKeySearch("hello.aleo/main")).proving_key.name == "main"
    with pytest.raises(KeyIntegrityError):
        provider.function_keys(CachedKeySearch("hello.aleo/main", verify_credits_keys=True))


def test_remote_search_is_invalid_offline(engine):
    provider = OfflineKeyProvider(engine)
    with pytest.raises(InvalidSearchParamsError):
        provider.function_keys(RemoteKeySearch.for_credits("join"))


def test_every_named_insert_helper(engine):
    provider = OfflineKeyProvider(engine)
    names = [
        "bond_public",
        "claim_unbond_public",
        "fee_private",
        "fee_public",
        "inclusion",
        "join",
        "set_validator_state",
        "split",
        "transfer_private",
        "transfer_private_to_public",
        "transfer_public",
        "transfer_public_to_private",
        "unbond_delegator_as_validator",
        "unbond_public",
    ]
    for name in names:
        getattr(provider, f"insert_{name}_keys")(FakeKey("prover", name))
    assert len(provider.cache) == len(names)
    assert provider.transfer_keys("transfer_public_to_private").proving_key.name == "transfer_public_to_private"
    assert provider.inclusion_keys().verifying_key.is_verifier_for("inclusion")


def test_preseeded_from_disk(engine, tmp_path):
    path = tmp_path / "offline.json"
    seed = OfflineKeyProvider(engine)
    seed.insert_fee_public_keys(FakeKey("prover", "fee_public"))
    seed.cache.save(path)

    provider = OfflineKeyProvider.from_file(engine, path)
    assert provider.fee_public_keys().proving_key == FakeKey("prover", "fee_public")


def test_shared_cache_object(engine):
    cache = KeyCache()
    a = OfflineKeyProvider(engine, cache=cache)
    b = OfflineKeyProvider(engine, cache=cache)
    a.insert_join_keys(FakeKey("prover", "join"))
    assert b.contains_keys("credits.aleo/join")
    b.delete_keys("credits.aleo/join")
    assert not a.contains_keys("credits.aleo/join")
