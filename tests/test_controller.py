import asyncio

import pytest

from maddogs.controller import DashboardController
from maddogs.errors import DeleteError, InsertError, ValidationError
from maddogs.models import PlayerForm, PlayerInput

from .conftest import KIM


@pytest.mark.anyio
async def test_refresh_loads_snapshot_in_id_order(gateway):
    gateway.seed("Kim", **KIM)
    gateway.seed("Lee", pa=10, hits=3)
    controller = DashboardController(gateway)

    assert await controller.refresh() is True

    assert [player.name for player in controller.players] == ["Kim", "Lee"]
    assert controller.last_error is None


@pytest.mark.anyio
async def test_failed_refresh_keeps_previous_snapshot(gateway):
    gateway.seed("Kim", **KIM)
    controller = DashboardController(gateway)
    await controller.refresh()
    before = controller.players

    gateway.fail_list = "service unavailable"
    assert await controller.refresh() is False

    assert controller.players is before
    assert controller.last_error == "service unavailable"


@pytest.mark.anyio
async def test_submit_rejects_empty_name_before_network(gateway):
    controller = DashboardController(gateway)
    controller.update_form({"name": "   ", "pa": 4})

    with pytest.raises(ValidationError):
        await controller.submit()

    assert gateway.calls == []
    assert controller.form.pa == 4


@pytest.mark.anyio
async def test_submit_inserts_refreshes_and_clears_form(gateway):
    controller = DashboardController(gateway)
    controller.update_form({"name": "Kim", **KIM})

    assert await controller.submit() is True

    assert gateway.calls == ["insert", "list"]
    assert controller.form == PlayerForm()
    (kim,) = controller.derived()
    assert kim.at_bats == 16
    assert kim.ops == pytest.approx(1.125)
    assert kim.stolen_base_rate == pytest.approx(100.0)
    assert kim.ops_plus_index == pytest.approx(100.0)
    assert kim.war_proxy == pytest.approx(0.0)


@pytest.mark.anyio
async def test_failed_insert_keeps_form_and_reports_reason(gateway):
    gateway.fail_insert = "duplicate key value"
    controller = DashboardController(gateway)
    controller.update_form({"name": "Kim", **KIM})

    with pytest.raises(InsertError) as excinfo:
        await controller.submit()

    assert "duplicate key value" in excinfo.value.message
    assert controller.form.name == "Kim"
    assert controller.form.hits == 6
    assert gateway.calls == ["insert"]


@pytest.mark.anyio
async def test_duplicate_submit_is_ignored_while_in_flight(gateway):
    gateway.insert_gate = asyncio.Event()
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.submit(PlayerForm(name="Kim", **KIM)))
    await asyncio.sleep(0)
    second = await controller.submit(PlayerForm(name="Kim", **KIM))
    gateway.insert_gate.set()

    assert second is False
    assert await first is True
    assert len(gateway.rows) == 1


@pytest.mark.anyio
async def test_rejected_duplicate_submit_keeps_in_flight_form_for_retry(gateway):
    gateway.insert_gate = asyncio.Event()
    gateway.fail_insert = "duplicate key value"
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.submit(PlayerForm(name="Kim", **KIM)))
    await asyncio.sleep(0)
    assert await controller.submit(PlayerForm(name="Lee", pa=3)) is False
    gateway.insert_gate.set()

    with pytest.raises(InsertError):
        await first
    assert controller.form.name == "Kim"
    assert controller.form.hits == 6
    assert gateway.calls == ["insert"]


@pytest.mark.anyio
async def test_insert_leaves_form_untouched(gateway):
    controller = DashboardController(gateway)
    controller.update_form({"name": "Draft", "pa": 7})

    gateway.fail_insert = "boom"
    with pytest.raises(InsertError):
        await controller.insert(PlayerInput(name="ApiUser", pa=3))
    assert controller.form.name == "Draft"

    gateway.fail_insert = None
    assert await controller.insert(PlayerInput(name="ApiUser", pa=3)) is True
    assert controller.form.name == "Draft"
    assert controller.form.pa == 7
    assert [player.name for player in controller.players] == ["ApiUser"]


@pytest.mark.anyio
async def test_insert_shares_the_submit_lock(gateway):
    gateway.insert_gate = asyncio.Event()
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.submit(PlayerForm(name="Kim", **KIM)))
    await asyncio.sleep(0)
    assert await controller.insert(PlayerInput(name="Lee")) is False
    gateway.insert_gate.set()

    assert await first is True
    assert [row["name"] for row in gateway.rows.values()] == ["Kim"]


@pytest.mark.anyio
async def test_duplicate_delete_is_ignored_while_in_flight(gateway):
    kim = gateway.seed("Kim", **KIM)
    gateway.delete_gate = asyncio.Event()
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.delete(kim, confirmed=True))
    await asyncio.sleep(0)
    assert await controller.delete(kim, confirmed=True) is False
    gateway.delete_gate.set()

    assert await first is True
    assert gateway.calls.count("delete") == 1
    assert controller.players == ()


@pytest.mark.anyio
async def test_deletes_of_different_players_do_not_block_each_other(gateway):
    kim = gateway.seed("Kim", **KIM)
    lee = gateway.seed("Lee", pa=10, hits=3)
    gateway.delete_gate = asyncio.Event()
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.delete(kim, confirmed=True))
    second = asyncio.create_task(controller.delete(lee, confirmed=True))
    await asyncio.sleep(0)
    assert gateway.calls == ["delete", "delete"]
    gateway.delete_gate.set()

    assert await first is True
    assert await second is True
    assert gateway.rows == {}


@pytest.mark.anyio
async def test_overlapping_refreshes_are_serialized(gateway):
    gateway.seed("Kim", **KIM)
    gateway.list_gate = asyncio.Event()
    controller = DashboardController(gateway)

    first = asyncio.create_task(controller.refresh())
    second = asyncio.create_task(controller.refresh())
    await asyncio.sleep(0)
    assert gateway.calls == ["list"]

    gateway.seed("Lee", pa=10, hits=3)
    gateway.list_gate.set()

    assert await first is True
    assert await second is True
    assert gateway.calls == ["list", "list"]
    assert [player.name for player in controller.players] == ["Kim", "Lee"]


@pytest.mark.anyio
async def test_delete_requires_confirmation(gateway):
    player_id = gateway.seed("Kim", **KIM)
    controller = DashboardController(gateway)

    assert await controller.delete(player_id) is False
    assert gateway.calls == []


@pytest.mark.anyio
async def test_delete_refreshes_after_success(gateway):
    kim = gateway.seed("Kim", **KIM)
    gateway.seed("Lee", pa=10, hits=3)
    controller = DashboardController(gateway)
    await controller.refresh()

    assert await controller.delete(kim, confirmed=True) is True

    assert [player.name for player in controller.players] == ["Lee"]


@pytest.mark.anyio
async def test_failed_delete_raises_generic_error(gateway):
    kim = gateway.seed("Kim", **KIM)
    gateway.fail_delete = "permission denied for table players"
    controller = DashboardController(gateway)
    await controller.refresh()

    with pytest.raises(DeleteError) as excinfo:
        await controller.delete(kim, confirmed=True)

    assert excinfo.value.message == "Delete failed."
    assert len(controller.players) == 1


@pytest.mark.anyio
async def test_derived_stats_rebuild_only_when_snapshot_changes(gateway):
    gateway.seed("Kim", **KIM)
    controller = DashboardController(gateway)
    await controller.refresh()

    first = controller.derived()
    assert controller.derived()[0] is first[0]

    await controller.refresh()
    assert controller.derived()[0] is not first[0]
    assert controller.derived()[0] == first[0]


@pytest.mark.anyio
async def test_sorted_players_and_leaders(gateway):
    gateway.seed("Kim", **KIM)
    gateway.seed("Lee", pa=10, hits=2, walks=5)
    controller = DashboardController(gateway, sort_key="walks")
    await controller.refresh()

    assert [player.name for player in controller.sorted_players()] == ["Lee", "Kim"]
    assert [player.name for player in controller.sorted_players("ops")] == ["Kim", "Lee"]
    assert controller.leaders()["war_proxy"].name == "Kim"


def test_unknown_sort_key_is_rejected(gateway):
    with pytest.raises(KeyError):
        DashboardController(gateway, sort_key="vibes")
