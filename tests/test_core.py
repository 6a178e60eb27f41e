from __future__ import annotations

import uuid

from invoicedesk.core.cache import ViewCache
from invoicedesk.core.security import get_password_hash, verify_password
from invoicedesk.core.utils import format_currency
from invoicedesk.db.session import Database


def test_format_currency() -> None:
    assert format_currency(0) == "$0.00"
    assert format_currency(666) == "$6.66"
    assert format_currency(125632) == "$1,256.32"


def test_view_cache_revalidate_drops_every_variant_of_a_path() -> None:
    cache = ViewCache()
    cache.set("/dashboard/invoices", "", ["a"])
    cache.set("/dashboard/invoices", "query=evil", ["b"])
    cache.set("/dashboard/customers", "", ["c"])

    assert cache.get("/dashboard/invoices", "query=evil") == ["b"]
    assert cache.revalidate_path("/dashboard/invoices") == 2
    assert not cache.is_cached("/dashboard/invoices")
    assert cache.get("/dashboard/invoices", "query=evil") is None
    assert cache.get("/dashboard/customers") == ["c"]
    assert cache.revalidate_path("/dashboard/invoices") == 0


def test_is_valid_id() -> None:
    value = uuid.uuid4()
    assert Database.is_valid_id(value)
    assert Database.is_valid_id(str(value))
    assert not Database.is_valid_id("")
    assert not Database.is_valid_id("64b7f1c2e4b0a1a2b3c4d5e6")
    assert not Database.is_valid_id(None)
    assert not Database.is_valid_id(12)
    assert Database.as_id(str(value)) == value


def test_password_hash_is_salted_and_verifiable() -> None:
    first = get_password_hash("123456")
    second = get_password_hash("123456")
    assert first != second
    assert first != "123456"
    assert verify_password("123456", first)
    assert not verify_password("654321", first)
