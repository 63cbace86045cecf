import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from services.shop_repository import PrismaShopRepository


def _product_record(**overrides):
    fields = dict(
        id="p-blue",
        productName="Blue Cotton Shirt",
        salesPrice=899,
        currentStock=5,
        category="men",
        productType="shirt",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def _db():
    db = MagicMock()
    for table in ("product", "cart", "cartitem", "wishlist", "order", "orderitem", "voucher", "user"):
        delegate = getattr(db, table)
        for method in ("find_first", "find_unique", "find_many", "create", "update", "delete", "count"):
            setattr(delegate, method, AsyncMock())
    return db


def test_exact_name_match_wins():
    db = _db()
    db.product.find_first.return_value = _product_record()
    repo = PrismaShopRepository(db)

    product = asyncio.run(repo.find_product_by_name("  blue cotton shirt "))

    assert product.id == "p-blue"
    assert product.price == 899.0
    assert product.in_stock
    db.product.find_first.assert_awaited_once()
    where = db.product.find_first.call_args.kwargs["where"]
    assert where["productName"] == {"equals": "blue cotton shirt", "mode": "insensitive"}
    assert where["published"] is True
    assert where["isGiftCard"] is False


def test_falls_back_to_substring_match():
    db = _db()
    db.product.find_first.side_effect = [None, _product_record(currentStock=0)]
    repo = PrismaShopRepository(db)

    product = asyncio.run(repo.find_product_by_name("cotton"))

    assert product.name == "Blue Cotton Shirt"
    assert product.in_stock is False
    second = db.product.find_first.call_args_list[1].kwargs["where"]
    assert second["productName"] == {"contains": "cotton", "mode": "insensitive"}


def test_blank_term_skips_the_query():
    db = _db()
    repo = PrismaShopRepository(db)

    assert asyncio.run(repo.find_product_by_name("   ")) is None
    db.product.find_first.assert_not_awaited()


def test_wishlist_lookup_uses_compound_key():
    db = _db()
    db.wishlist.find_unique.return_value = None
    repo = PrismaShopRepository(db)

    assert asyncio.run(repo.find_wishlist_entry("U1", "p-blue")) is None
    db.wishlist.find_unique.assert_awaited_once_with(
        where={"userId_productId": {"userId": "U1", "productId": "p-blue"}}
    )


def test_cart_is_created_on_first_use():
    db = _db()
    db.cart.find_unique.return_value = None
    db.cart.create.return_value = SimpleNamespace(id="cart-1", userId="U1")
    repo = PrismaShopRepository(db)

    cart = asyncio.run(repo.get_or_create_cart("U1"))

    assert cart.id == "cart-1"
    db.cart.create.assert_awaited_once_with(data={"userId": "U1"})


def test_increment_is_atomic_update():
    db = _db()
    repo = PrismaShopRepository(db)

    asyncio.run(repo.increment_cart_item("item-9"))

    db.cartitem.update.assert_awaited_once_with(
        where={"id": "item-9"}, data={"quantity": {"increment": 1}}
    )


def test_list_cart_maps_lines():
    db = _db()
    db.cart.find_unique.return_value = SimpleNamespace(
        id="cart-1",
        userId="U1",
        items=[
            SimpleNamespace(product=_product_record(), quantity=2),
            SimpleNamespace(product=None, quantity=1),
        ],
    )
    repo = PrismaShopRepository(db)

    lines = asyncio.run(repo.list_cart("U1"))

    assert len(lines) == 1
    assert lines[0].subtotal == 1798.0


# ---------------------------------------------------------------------
# View queries
# ---------------------------------------------------------------------

def test_vouchers_are_active_and_owned_or_received():
    db = _db()
    db.voucher.find_many.return_value = [
        SimpleNamespace(code="GIFT-1", type="GIFT_CARD", value=500, balance=None, discountType=None)
    ]
    repo = PrismaShopRepository(db)

    vouchers = asyncio.run(repo.list_vouchers("U1"))

    assert vouchers[0].remaining == 500.0
    where = db.voucher.find_many.call_args.kwargs["where"]
    assert where == {"OR": [{"issuedTo": "U1"}, {"sentTo": "U1"}], "status": "ACTIVE"}


def test_vendor_orders_are_grouped_per_order():
    order_a = SimpleNamespace(orderNumber="ORD-A", status="pending", createdAt=None)
    order_b = SimpleNamespace(orderNumber="ORD-B", status="delivered", createdAt=None)
    db = _db()
    db.orderitem.find_many.return_value = [
        SimpleNamespace(orderId="a", order=order_a, product=_product_record(), quantity=2, price=899),
        SimpleNamespace(orderId="b", order=order_b, product=_product_record(), quantity=1, price=899),
        SimpleNamespace(orderId="a", order=order_a, product=None, quantity=1, price=100),
    ]
    repo = PrismaShopRepository(db)

    orders = asyncio.run(repo.list_vendor_orders("V1"))

    assert [o.order_number for o in orders] == ["ORD-A", "ORD-B"]
    assert orders[0].total == 1898.0
    assert len(orders[0].lines) == 2
    where = db.orderitem.find_many.call_args.kwargs["where"]
    assert where == {"product": {"is": {"vendorId": "V1"}}}


def test_store_stats_are_aggregated_in_python():
    db = _db()
    db.order.find_many.return_value = [
        SimpleNamespace(totalAmount=100, status="PENDING"),
        SimpleNamespace(totalAmount=250, status="delivered"),
    ]
    db.product.find_many.return_value = [_product_record(currentStock=3), _product_record(currentStock=4)]
    db.user.count.return_value = 9
    repo = PrismaShopRepository(db)

    stats = asyncio.run(repo.store_stats())

    assert stats.revenue == 350.0
    assert stats.order_count == 2
    assert stats.pending_orders == 1
    assert stats.delivered_revenue == 250.0
    assert stats.product_count == 2
    assert stats.total_stock == 7
    assert stats.user_count == 9


def test_all_orders_carry_customer_name():
    db = _db()
    db.order.find_many.return_value = [
        SimpleNamespace(
            orderNumber="ORD-1",
            status="pending",
            totalAmount=899,
            createdAt=None,
            user=SimpleNamespace(name="Asha"),
        )
    ]
    repo = PrismaShopRepository(db)

    orders = asyncio.run(repo.list_all_orders())

    assert orders[0].customer_name == "Asha"
    assert orders[0].lines == []
    assert db.order.find_many.call_args.kwargs["include"] == {"user": True}
