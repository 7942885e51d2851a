"""
Tests for stored retroplanning plans (one per client).
"""

import pytest

from lib.errors import NotFoundError
from lib.retroplanning import compute_dates_from_deadline
from lib.retroplanning.plans import delete_plan, load_plan, save_plan


@pytest.fixture
def tasks():
    stubs = [
        {"id": "step-1", "label": "Brief", "duration_days": 2, "color": "cyan"},
        {"id": "step-2", "label": "Création", "duration_days": 5, "color": "violet"},
    ]
    return compute_dates_from_deadline(stubs, "2026-04-01")


class TestPlans:
    def test_no_plan(self, store):
        assert load_plan("client-acme", store=store) is None

    def test_save_and_load(self, store, tasks):
        saved = save_plan("client-acme", "2026-04-01", tasks, store=store)
        loaded = load_plan("client-acme", store=store)

        assert loaded.id == saved.id
        assert loaded.deadline == "2026-04-01"
        assert loaded.tasks == tasks
        assert loaded.generated_at == loaded.updated_at

    def test_resave_keeps_id_and_replaces_tasks(self, store, tasks):
        first = save_plan("client-acme", "2026-04-01", tasks, store=store)
        second = save_plan(
            "client-acme", "2026-05-01", tasks[:1], generated_at="2026-01-01T00:00:00+00:00",
            store=store,
        )
        loaded = load_plan("client-acme", store=store)

        assert second.id == first.id
        assert loaded.deadline == "2026-05-01"
        assert [t.id for t in loaded.tasks] == ["step-1"]
        assert loaded.generated_at == "2026-01-01T00:00:00+00:00"
        assert store.count("retroplanning") == 1

    def test_plans_are_per_client(self, store, tasks):
        save_plan("client-acme", "2026-04-01", tasks, store=store)
        save_plan("client-bloom", "2026-06-01", tasks, store=store)
        assert load_plan("client-bloom", store=store).deadline == "2026-06-01"
        assert store.count("retroplanning") == 2

    def test_missing_client(self, store, tasks):
        with pytest.raises(NotFoundError) as exc:
            save_plan("client-missing", "2026-04-01", tasks, store=store)
        assert exc.value.code == "CLIENT_NOT_FOUND"

    def test_delete(self, store, tasks):
        save_plan("client-acme", "2026-04-01", tasks, store=store)
        assert delete_plan("client-acme", store=store) is True
        assert load_plan("client-acme", store=store) is None
        assert delete_plan("client-acme", store=store) is False

    def test_deleted_with_client(self, store, tasks):
        save_plan("client-acme", "2026-04-01", tasks, store=store)
        store.delete("clients", "client-acme")
        assert load_plan("client-acme", store=store) is None
