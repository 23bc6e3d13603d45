from datetime import datetime

import pytest

from app.core.exceptions import OwnershipError, ResourceNotFoundError, StoreError
from app.db.seed import grant_admin
from app.models.product import ProductCreate
from app.models.user import Role, UserCreate
from app.services import lifecycle
from app.services.query import ProductQuery
from tests.conftest import FlakyDatabase


async def list_product(db, seller_uid="s1", **fields):
    data = {"category_id": "c1", "price": 250.0, "name": "Pixel 6"}
    data.update(fields)
    product = await lifecycle.create_product(db, seller_uid, ProductCreate(**data))
    return product.id


async def test_create_product_starts_listed(db):
    product_id = await list_product(db)
    product = await db.products.find_one({"id": product_id})
    assert product["seller_uid"] == "s1"
    assert product["booked"] is False
    assert product["paid"] is False
    assert product["advertised"] is False
    assert product["verified"] is False


async def test_create_product_ignores_client_lifecycle_flags(db):
    product_id = await list_product(db, paid=True, booked=True)
    product = await db.products.find_one({"id": product_id})
    assert product["paid"] is False
    assert product["booked"] is False


async def test_create_product_copies_seller_verification(db):
    await lifecycle.create_user(db, UserCreate(uid="s1", roles=["seller"]))
    await lifecycle.set_verified(db, "s1", True)
    product_id = await list_product(db)
    assert (await db.products.find_one({"id": product_id}))["verified"] is True


async def test_signup_cannot_self_verify(db):
    await lifecycle.create_user(db, UserCreate(uid="s1", roles=["seller"], verified=True))
    assert (await lifecycle.get_user(db, "s1"))["verified"] is False


async def test_repeated_signup_keeps_one_user(db):
    await lifecycle.create_user(db, UserCreate(uid="u1", name="First"))
    result = await lifecycle.create_user(db, UserCreate(uid="u1", name="Second"))
    assert result.matched_count == 1
    assert result.modified_count == 0
    assert await db.users.count_documents({"uid": "u1"}) == 1
    assert (await lifecycle.get_user(db, "u1"))["name"] == "First"


async def test_repeated_signup_keeps_granted_roles(db):
    await lifecycle.create_user(db, UserCreate(uid="a1", roles=["seller"]))
    await grant_admin(db, "a1")

    await lifecycle.create_user(db, UserCreate(uid="a1"))

    assert (await lifecycle.get_user(db, "a1"))["roles"] == ["seller", "admin"]


async def test_signup_ignores_server_owned_fields(db):
    await lifecycle.create_user(db, UserCreate(uid="u9", created_at="not-a-date", verified=True))
    user = await lifecycle.get_user(db, "u9")
    assert isinstance(user["created_at"], datetime)
    assert user["verified"] is False


async def test_two_buyers_book_the_same_product(db):
    product_id = await list_product(db)
    await lifecycle.book_product(db, product_id, "b1", {"meeting": "mall"})
    await lifecycle.book_product(db, product_id, "b2", {"meeting": "station"})

    assert await db.bookings.count_documents({"product_id": product_id}) == 2
    assert (await db.products.find_one({"id": product_id}))["booked"] is True


async def test_rebooking_updates_existing_booking(db):
    product_id = await list_product(db)
    first = await lifecycle.book_product(db, product_id, "b1", {"phone": "111"})
    second = await lifecycle.book_product(db, product_id, "b1", {"phone": "222"})

    assert first.upserted_id is not None
    assert second.upserted_id is None
    bookings = await lifecycle.list_buyer_bookings(db, "b1")
    assert len(bookings) == 1
    assert bookings[0]["phone"] == "222"
    assert bookings[0]["paid"] is False


async def test_booking_unknown_product(db):
    with pytest.raises(ResourceNotFoundError):
        await lifecycle.book_product(db, "missing", "b1", {})
    assert await db.bookings.count_documents({}) == 0


async def test_wishlist_upsert_keeps_latest_details(db):
    await lifecycle.add_to_wishlist(db, "abc", "s1", "b1", {"note": "first"})
    await lifecycle.add_to_wishlist(db, "abc", "s1", "b1", {"note": "second", "color": "blue"})

    entries = await db.wishlist.find({"product_id": "abc"}).to_list(None)
    assert len(entries) == 1
    assert entries[0]["note"] == "second"
    assert entries[0]["color"] == "blue"


async def test_buyer_wishlist_lists_products(db):
    wanted = await list_product(db, name="iPad")
    await list_product(db, name="Other")
    await lifecycle.add_to_wishlist(db, wanted, "s1", "b1", {})

    products = await lifecycle.list_buyer_wishlist(db, "b1")
    assert [p["id"] for p in products] == [wanted]
    assert await lifecycle.list_buyer_wishlist(db, "nobody") == []


async def test_remove_from_wishlist(db):
    await lifecycle.add_to_wishlist(db, "abc", "s1", "b1", {})
    await lifecycle.add_to_wishlist(db, "abc", "s1", "b2", {})
    result = await lifecycle.remove_from_wishlist(db, "abc", "b1")
    assert result.deleted_count == 1
    assert await db.wishlist.count_documents({"product_id": "abc"}) == 1


async def test_payment_marks_everything_paid(db):
    product_id = await list_product(db)
    other_id = await list_product(db, name="Other")
    await lifecycle.book_product(db, product_id, "b1", {})
    await lifecycle.book_product(db, product_id, "b2", {})
    await lifecycle.book_product(db, other_id, "b1", {})
    await lifecycle.add_to_wishlist(db, product_id, "s1", "b3", {})

    await lifecycle.record_payment(db, product_id, {"transaction_id": "pi_1", "price": 250.0})

    assert (await db.products.find_one({"id": product_id}))["paid"] is True
    assert await db.bookings.count_documents({"product_id": product_id, "paid": True}) == 2
    assert await db.wishlist.count_documents({"product_id": product_id, "paid": True}) == 1
    assert (await db.bookings.find_one({"product_id": other_id}))["paid"] is False

    payments = await db.payments.find({}).to_list(None)
    assert len(payments) == 1
    assert payments[0]["product_id"] == product_id
    assert payments[0]["transaction_id"] == "pi_1"


async def test_payment_for_unknown_product_writes_nothing(db):
    with pytest.raises(ResourceNotFoundError):
        await lifecycle.record_payment(db, "missing", {"transaction_id": "pi_1"})
    assert await db.payments.count_documents({}) == 0


async def test_payment_failure_reports_committed_steps(db):
    product_id = await list_product(db)
    flaky = FlakyDatabase(db, "wishlist", "update_many")

    with pytest.raises(StoreError) as exc_info:
        await lifecycle.record_payment(flaky, product_id, {"transaction_id": "pi_1"})

    assert exc_info.value.details == {"failed_step": "wishlist", "completed_steps": ["product", "bookings"]}
    assert await db.payments.count_documents({}) == 0


async def test_set_verified_propagates_to_products(db):
    await lifecycle.create_user(db, UserCreate(uid="s1", roles=["seller"]))
    first = await list_product(db)
    second = await list_product(db, name="Other")
    foreign = await list_product(db, seller_uid="s2")

    await lifecycle.set_verified(db, "s1", True)

    assert (await lifecycle.get_user(db, "s1"))["verified"] is True
    for product_id in (first, second):
        assert (await db.products.find_one({"id": product_id}))["verified"] is True
    assert (await db.products.find_one({"id": foreign}))["verified"] is False


async def test_set_verified_unknown_user(db):
    with pytest.raises(ResourceNotFoundError):
        await lifecycle.set_verified(db, "ghost", True)


async def test_advertise_requires_ownership(db):
    product_id = await list_product(db)
    with pytest.raises(OwnershipError):
        await lifecycle.set_advertised(db, product_id, True, "s2")

    await lifecycle.set_advertised(db, product_id, True, "s1")
    assert (await db.products.find_one({"id": product_id}))["advertised"] is True


async def test_delete_product_cascades(db):
    product_id = await list_product(db)
    kept_id = await list_product(db, name="Other")
    await lifecycle.book_product(db, product_id, "b1", {})
    await lifecycle.book_product(db, kept_id, "b1", {})
    await lifecycle.add_to_wishlist(db, product_id, "s1", "b2", {})

    counts = await lifecycle.delete_product(db, product_id, "s1")

    assert counts == {"products": 1, "bookings": 1, "wishlist": 1}
    assert await db.products.count_documents({}) == 1
    assert await db.bookings.count_documents({"product_id": kept_id}) == 1


async def test_delete_product_of_someone_else(db):
    product_id = await list_product(db)
    with pytest.raises(OwnershipError):
        await lifecycle.delete_product(db, product_id, "s2")
    assert await db.products.count_documents({"id": product_id}) == 1


async def test_paid_product_can_still_be_deleted(db):
    product_id = await list_product(db)
    await lifecycle.record_payment(db, product_id, {"transaction_id": "pi_1"})
    await lifecycle.delete_product(db, product_id, "s1")
    assert await db.products.count_documents({}) == 0
    assert await db.payments.count_documents({"product_id": product_id}) == 1


async def test_delete_seller_cascades(db):
    await lifecycle.create_user(db, UserCreate(uid="s1", roles=["seller"]))
    first = await list_product(db)
    second = await list_product(db, name="Other")
    foreign = await list_product(db, seller_uid="s2")
    await lifecycle.book_product(db, first, "b1", {})
    await lifecycle.book_product(db, foreign, "b1", {})
    await lifecycle.add_to_wishlist(db, second, "s1", "b2", {})

    await lifecycle.delete_user(db, "s1", Role.SELLER)

    assert await db.users.count_documents({"uid": "s1"}) == 0
    assert await db.products.count_documents({"seller_uid": "s1"}) == 0
    assert await db.bookings.count_documents({"product_id": {"$in": [first, second]}}) == 0
    assert await db.wishlist.count_documents({"product_id": {"$in": [first, second]}}) == 0
    assert await db.bookings.count_documents({"product_id": foreign}) == 1


async def test_delete_buyer_keeps_products(db):
    await lifecycle.create_user(db, UserCreate(uid="b1"))
    product_id = await list_product(db)
    await lifecycle.book_product(db, product_id, "b1", {})
    await lifecycle.book_product(db, product_id, "b2", {})
    await lifecycle.add_to_wishlist(db, product_id, "s1", "b1", {})

    counts = await lifecycle.delete_user(db, "b1", Role.BUYER)

    assert counts == {"bookings": 1, "wishlist": 1, "users": 1}
    assert await db.products.count_documents({"id": product_id}) == 1
    assert await db.bookings.count_documents({"buyer_uid": "b2"}) == 1


async def test_delete_unknown_user(db):
    with pytest.raises(ResourceNotFoundError):
        await lifecycle.delete_user(db, "ghost", Role.BUYER)


async def test_listing_hides_paid_products(db):
    paid_id = await list_product(db, name="Sold")
    open_id = await list_product(db, name="Open")
    for product_id in (paid_id, open_id):
        await lifecycle.set_advertised(db, product_id, True, "s1")
    await lifecycle.record_payment(db, paid_id, {})

    advertised = await lifecycle.list_products(db, ProductQuery(advertised=True))
    assert [p["id"] for p in advertised] == [open_id]

    receipt = await lifecycle.list_products(db, ProductQuery(product_id=paid_id))
    assert receipt[0]["paid"] is True

    own = await lifecycle.list_seller_products(db, "s1")
    assert {p["id"] for p in own} == {paid_id, open_id}


async def test_listing_combines_category_and_advertised(db):
    match = await list_product(db, category_id="phones")
    await list_product(db, category_id="phones", name="Plain")
    advertised_laptop = await list_product(db, category_id="laptops", name="Laptop")
    for product_id in (match, advertised_laptop):
        await lifecycle.set_advertised(db, product_id, True, "s1")

    products = await lifecycle.list_products(db, ProductQuery(category_id="phones", advertised=True))
    assert [p["id"] for p in products] == [match]


async def test_payment_keeps_provider_id(db):
    product_id = await list_product(db)
    await lifecycle.record_payment(db, product_id, {"provider_id": "pi_123", "amount": 500})

    payment = await db.payments.find_one({"product_id": product_id})
    assert payment["provider_id"] == "pi_123"
    assert payment["id"] != "pi_123"
    assert payment["amount"] == 500
