import asyncio
import pytest

from marketplace.core.errors import NotFoundError, ValidationError
from marketplace.models.domain import Role, Service
from marketplace.services.marketplace import build_marketplace


@pytest.mark.asyncio
async def test_merchants_keep_seed_order():
    directory = build_marketplace(latency_ms=0).directory

    merchants = await directory.list_merchants()

    assert [m.id for m in merchants] == ["1", "2", "3", "4"]
    assert merchants[0].operating_hours["Monday-Friday"] == "8:00 AM - 10:00 PM"
    assert [s.id for s in merchants[1].services] == ["s2-1", "s2-2", "s2-3"]


@pytest.mark.asyncio
async def test_get_merchant_and_users():
    directory = build_marketplace(latency_ms=0).directory

    merchant = await directory.get_merchant("3")
    assert merchant.name == "Cityscape Boutique Hotel"

    with pytest.raises(NotFoundError):
        await directory.get_merchant("nope")

    users = await directory.list_users()
    assert [u.role for u in users] == [Role.CUSTOMER, Role.MERCHANT, Role.MERCHANT, Role.ADMIN]
    assert (await directory.get_user("merchant2")).merchant_id == "2"
    with pytest.raises(NotFoundError):
        await directory.get_user("ghost")


@pytest.mark.asyncio
async def test_update_services_replaces_catalog():
    directory = build_marketplace(latency_ms=0).directory

    updated = await directory.update_merchant_services("1", [Service(id="new", name="Counter Seat", price=5)])

    assert [s.name for s in updated.services] == ["Counter Seat"]
    assert [s.id for s in (await directory.get_merchant("1")).services] == ["new"]
    # Other merchants untouched
    assert len((await directory.get_merchant("2")).services) == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("services", [
    [Service(id="a", name="Bad", price=-1)],
    [Service(id="a", name="   ", price=1)],
    [Service(id="a", name="One", price=1), Service(id="a", name="Two", price=2)],
    [Service(id="a", name="NaN", price=float("nan"))],
])
async def test_update_services_validation(services):
    directory = build_marketplace(latency_ms=0).directory

    with pytest.raises(ValidationError):
        await directory.update_merchant_services("1", services)

    assert len((await directory.get_merchant("1")).services) == 3


@pytest.mark.asyncio
async def test_update_services_unknown_merchant():
    directory = build_marketplace(latency_ms=0).directory
    with pytest.raises(NotFoundError):
        await directory.update_merchant_services("42", [])


@pytest.mark.asyncio
async def test_empty_catalog_is_allowed():
    directory = build_marketplace(latency_ms=0).directory
    updated = await directory.update_merchant_services("4", [])
    assert updated.services == []


@pytest.mark.asyncio
async def test_catalog_edit_does_not_rewrite_history():
    market = build_marketplace(latency_ms=0)
    merchant = await market.directory.get_merchant("1")

    booking = await market.ledger.create_booking(
        "1", "2024-06-01", "18:00", 6, "", [merchant.services[2]]
    )
    await market.directory.update_merchant_services("1", [Service(id="only", name="Bar Stool", price=3)])

    stored = await market.ledger.get_booking(booking.id)
    assert stored.service_name == "Booth Seating (up to 6)"
    assert stored.booking_cost == 20
    assert len(stored.merchant.services) == 3
    assert (await market.directory.get_merchant("1")).services[0].name == "Bar Stool"


@pytest.mark.asyncio
async def test_resolve_services():
    directory = build_marketplace(latency_ms=0).directory

    services = await directory.resolve_services("1", ["s1-3", "s1-1"])
    assert [s.name for s in services] == ["Booth Seating (up to 6)", "Table for 2 Reservation"]

    with pytest.raises(ValidationError):
        await directory.resolve_services("1", ["s2-1"])
    with pytest.raises(ValidationError):
        await directory.resolve_services("1", ["s1-1", "s1-1"])
    with pytest.raises(NotFoundError):
        await directory.resolve_services("9", ["s1-1"])


@pytest.mark.asyncio
async def test_reads_are_detached_from_store():
    directory = build_marketplace(latency_ms=0).directory

    merchant = await directory.get_merchant("1")
    merchant.services.clear()

    assert len((await directory.get_merchant("1")).services) == 3


@pytest.mark.asyncio
async def test_concurrent_catalog_edits_never_mix():
    directory = build_marketplace(latency_ms=5).directory
    brunch = [Service(id="b1", name="Brunch", price=12), Service(id="b2", name="Mimosa", price=8)]
    dinner = [Service(id="d1", name="Dinner", price=30), Service(id="d2", name="Wine", price=9),
              Service(id="d3", name="Dessert", price=6)]

    results = await asyncio.gather(
        directory.update_merchant_services("1", brunch),
        directory.update_merchant_services("1", dinner),
        return_exceptions=True,
    )

    assert not any(isinstance(r, Exception) for r in results)
    final = [s.id for s in (await directory.get_merchant("1")).services]
    assert final in (["b1", "b2"], ["d1", "d2", "d3"])
