from app.services import events
from app.services.wishlist import Wishlist
from conftest import make_product


def test_toggle_adds_then_removes():
    wishlist = Wishlist("u1")
    product = make_product("a")
    assert wishlist.toggle(product) is True
    assert wishlist.contains("a")
    assert wishlist.toggle(product) is False
    assert len(wishlist) == 0


def test_add_ignores_duplicates():
    wishlist = Wishlist("u1")
    assert wishlist.add(make_product("a"))
    assert not wishlist.add(make_product("a"))
    assert [p.id for p in wishlist.items] == ["a"]


def test_remove_and_clear():
    wishlist = Wishlist("u1", [make_product("a"), make_product("b")])
    assert wishlist.remove("a")
    assert not wishlist.remove("a")
    wishlist.clear()
    assert wishlist.items == []


def test_changes_emit_signal():
    wishlist = Wishlist("u1")
    seen = []

    def receiver(sender, **kwargs):
        seen.append(sender)

    events.wishlist_changed.connect(receiver, sender=wishlist)
    try:
        wishlist.toggle(make_product("a"))
        wishlist.toggle(make_product("a"))
        wishlist.remove("a")
    finally:
        events.wishlist_changed.disconnect(receiver, sender=wishlist)
    assert len(seen) == 2


def test_document_round_trip_keeps_order():
    wishlist = Wishlist("u1", [make_product("b"), make_product("a")])
    restored = Wishlist.from_document("u1", wishlist.to_document())
    assert [p.id for p in restored.items] == ["b", "a"]
