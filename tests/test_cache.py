from _support import demand_json

from demandhub.client.application.demand_cache import DemandCache
from demandhub.common.models import Demand, DemandStatus


def _demand(demand_id: int, status: str = "pending") -> Demand:
    return Demand.model_validate(demand_json(demand_id, status))


def test_empty_cache() -> None:
    cache = DemandCache()
    assert cache.get_list() is None
    assert cache.get(1) is None


def test_put_keeps_item_and_list_in_sync() -> None:
    cache = DemandCache()
    cache.put_list([_demand(1), _demand(2)])

    approved = _demand(2, "approved")
    cache.put(approved)

    assert cache.get(2) == approved
    listed = cache.get_list() or []
    assert [d.status for d in listed] == [DemandStatus.PENDING, DemandStatus.APPROVED]


def test_put_without_list_only_stores_item() -> None:
    cache = DemandCache()
    cache.put(_demand(3))
    assert cache.get(3) is not None
    assert cache.get_list() is None


def test_add_prepends_new_demand() -> None:
    cache = DemandCache()
    cache.put_list([_demand(1)])
    cache.add(_demand(2))
    assert [d.id for d in cache.get_list() or []] == [2, 1]


def test_remove_and_clear() -> None:
    cache = DemandCache()
    cache.put_list([_demand(1), _demand(2)])
    cache.remove(1)
    assert cache.get(1) is None
    assert [d.id for d in cache.get_list() or []] == [2]
    cache.clear()
    assert cache.get_list() is None
    assert cache.get(2) is None


def test_get_list_returns_a_copy() -> None:
    cache = DemandCache()
    cache.put_list([_demand(1)])
    listed = cache.get_list() or []
    listed.clear()
    assert len(cache.get_list() or []) == 1
