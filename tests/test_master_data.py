import asyncio

import pytest

from pipetrack.core.errors import ValidationError
from pipetrack.services.master_data import CATEGORIES, MasterDataRegistry
from pipetrack.services.orders import OrderService

from conftest import make_item, make_order


async def test_add_if_absent_appends_once_in_insertion_order(db_session):
    registry = MasterDataRegistry(db_session)
    async with registry.unit_of_work():
        assert await registry.add_if_absent("specs", "DN300")
        assert await registry.add_if_absent("specs", "DN100")
        assert not await registry.add_if_absent("specs", "DN300")

    assert await registry.list_category("specs") == ["DN300", "DN100"]


async def test_membership_is_case_sensitive(db_session):
    registry = MasterDataRegistry(db_session)
    await registry.register("levels", "K9")
    values = await registry.register("levels", "k9")
    assert values == ["K9", "k9"]


async def test_blank_values_are_ignored(db_session):
    registry = MasterDataRegistry(db_session)
    async with registry.unit_of_work():
        assert not await registry.add_if_absent("linings", "")
        assert not await registry.add_if_absent("linings", None)
    assert await registry.list_category("linings") == []


async def test_unknown_category_is_rejected(db_session):
    registry = MasterDataRegistry(db_session)
    with pytest.raises(ValidationError):
        await registry.register("colors", "red")
    with pytest.raises(ValidationError):
        await registry.list_category("colors")


async def test_list_all_has_every_category(db_session):
    registry = MasterDataRegistry(db_session)
    await registry.register("workshops", "一车间")
    everything = await registry.list_all()
    assert set(everything) == set(CATEGORIES)
    assert everything["workshops"] == ["一车间"]
    assert everything["specs"] == []


async def test_order_creation_feeds_the_registry(db_session):
    await OrderService(db_session).create_order(
        make_order(
            "ORD-MD",
            make_item(spec="DN500", level="C40", coating="环氧树脂"),
            make_item(spec="DN500", level="K9"),
            workshop="二车间",
            warehouse="待发区",
        )
    )
    everything = await MasterDataRegistry(db_session).list_all()
    assert everything["specs"] == ["DN500"]
    assert everything["levels"] == ["C40", "K9"]
    assert everything["coatings"] == ["环氧树脂", "沥青漆"]
    assert everything["interfaces"] == ["T型"]
    assert everything["workshops"] == ["二车间"]
    assert everything["warehouses"] == ["待发区"]


async def test_value_added_after_the_membership_check_is_skipped(db_session, monkeypatch):
    registry = MasterDataRegistry(db_session)
    await registry.register("workshops", "五车间")

    # Another writer committed the value between our check and our insert.
    async def stale_check(category, value):
        return False

    monkeypatch.setattr(registry.repo, "exists", stale_check)
    async with registry.unit_of_work():
        assert not await registry.add_if_absent("workshops", "五车间")

    assert await registry.list_category("workshops") == ["五车间"]


async def test_concurrent_registrations_of_one_value(file_session_factory):
    async def register():
        async with file_session_factory() as session:
            return await MasterDataRegistry(session).register("specs", "DN9999")

    results = await asyncio.gather(register(), register(), register())

    assert results == [["DN9999"]] * 3


async def test_concurrent_orders_sharing_a_new_value_both_succeed(file_session_factory):
    async def create(order_no):
        async with file_session_factory() as session:
            return await OrderService(session).create_order(
                make_order(order_no, make_item(spec="DN9999"), workshop="五车间")
            )

    first, second = await asyncio.gather(create("ORD-A"), create("ORD-B"))
    assert first != second

    async with file_session_factory() as session:
        registry = MasterDataRegistry(session)
        assert await registry.list_category("specs") == ["DN9999"]
        assert await registry.list_category("workshops") == ["五车间"]
        assert len(await OrderService(session).list_orders()) == 2
