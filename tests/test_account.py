import pytest

from aleo_sdk.account import Account, resolve_private_key
from aleo_sdk.errors import MissingPrivateKeyError

from conftest import make_ciphertext


def test_account_from_string(engine):
    account = Account.from_private_key_string(engine, "APrivateKey1alice")
    assert str(account) == "aleo1alice"
    assert repr(account) == "Account(address=aleo1alice)"


def test_new_account_from_seed(engine):
    account = Account(engine, seed=b"\x01\x02")
    assert str(account.private_key) == "APrivateKey10102"


def test_record_ownership_and_decryption(engine):
    account = Account(engine, "APrivateKey1alice")
    mine = make_ciphertext("alice", 42, "n1")
    theirs = make_ciphertext("bob", 7, "b1")

    assert account.owns_record_ciphertext(mine)
    assert not account.owns_record_ciphertext(theirs)
    assert not account.owns_record_ciphertext("garbage")
    assert [r.microcredits for r in account.decrypt_records([mine])] == [42]
    with pytest.raises(ValueError):
        account.decrypt_record(theirs)


def test_sign_and_verify(engine):
    account = Account(engine, "APrivateKey1alice")
    sig = account.sign(b"hello")
    assert account.verify(b"hello", sig)
    assert not account.verify(b"other", sig)


def test_resolve_private_key_order(engine):
    account = Account(engine, "APrivateKey1alice")
    assert resolve_private_key(engine, "APrivateKey1bob", account, "op").owner == "bob"
    assert resolve_private_key(engine, None, account, "op") is account.private_key
    with pytest.raises(MissingPrivateKeyError) as ei:
        resolve_private_key(engine, None, None, "transfer")
    assert ei.value.operation == "transfer"
