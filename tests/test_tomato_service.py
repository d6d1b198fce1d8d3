from unittest.mock import patch

import pytest

from core.errors import NotFoundError, ValidationError
from services.tomatoes import TomatoService


def create_cherry(service: TomatoService, **overrides) -> str:
    fields = dict(
        name="Cherry Tomato",
        variety="Sweet 100",
        price=4.99,
        description="Small sweet tomatoes",
    )
    fields.update(overrides)
    return service.create(**fields)


class TestCreate:

    def test_create_stamps_timestamps_and_defaults(self, service, clock):
        tomato_id = service.create(name="Roma Tomato", variety="San Marzano", price=3.50)

        tomato = service.get(tomato_id)
        assert tomato.name == "Roma Tomato"
        assert tomato.variety == "San Marzano"
        assert tomato.price == 3.50
        assert tomato.description is None
        assert tomato.in_stock is True
        assert tomato.created_at == tomato.updated_at == clock.now

    def test_create_keeps_explicit_in_stock(self, service):
        tomato_id = create_cherry(service, in_stock=False)

        assert service.get(tomato_id).in_stock is False

    def test_create_accepts_zero_price(self, service):
        tomato_id = create_cherry(service, price=0)

        assert service.get(tomato_id).price == 0

    def test_ids_are_fresh_and_never_reused(self, service):
        first = create_cherry(service)
        second = create_cherry(service)
        service.delete(second)
        third = create_cherry(service)

        assert len({first, second, third}) == 3

    @pytest.mark.parametrize("missing", ["name", "variety", "price"])
    def test_create_requires_fields(self, service, store, missing):
        with pytest.raises(ValidationError) as excinfo:
            create_cherry(service, **{missing: None})

        assert excinfo.value.message == "Name, variety, and price are required fields"
        assert store.scan() == []

    def test_create_rejects_empty_name(self, service, store):
        with pytest.raises(ValidationError):
            create_cherry(service, name="")

        assert store.scan() == []

    @pytest.mark.parametrize("price", [-1, -0.01, "expensive", True, float("nan"), float("inf"), 10**400])
    def test_create_rejects_bad_price(self, service, store, price):
        with pytest.raises(ValidationError) as excinfo:
            create_cherry(service, price=price)

        assert excinfo.value.message == "Price must be a non-negative number"
        assert store.scan() == []

    def test_create_inserts_once(self, service, store):
        with patch.object(store, "insert", wraps=store.insert) as insert:
            create_cherry(service)

        insert.assert_called_once()

    def test_create_stores_integer_price_as_float(self, service):
        tomato_id = create_cherry(service, price=10**6)

        assert service.get(tomato_id).price == 1_000_000.0


class TestUpdate:

    def test_partial_update_merges_fields(self, service, clock):
        tomato_id = create_cherry(service)
        before = service.get(tomato_id)
        clock.advance()

        updated = service.update(tomato_id, {"price": 6.99, "in_stock": False})

        assert updated.price == 6.99
        assert updated.in_stock is False
        assert updated.name == before.name
        assert updated.variety == before.variety
        assert updated.description == before.description
        assert updated.created_at == before.created_at
        assert updated.updated_at > before.updated_at

    def test_update_result_matches_store(self, service):
        tomato_id = create_cherry(service)

        updated = service.update(tomato_id, {"name": "Super Cherry"})

        assert service.get(tomato_id) == updated

    def test_update_without_changes_is_noop(self, service, store, clock):
        tomato_id = create_cherry(service)
        before = service.get(tomato_id)
        clock.advance()

        with patch.object(store, "patch", wraps=store.patch) as store_patch:
            result = service.update(tomato_id, {})

        store_patch.assert_not_called()
        assert result == before
        assert service.get(tomato_id).updated_at == before.updated_at

    def test_update_ignores_unknown_keys(self, service, store):
        tomato_id = create_cherry(service)

        with patch.object(store, "patch", wraps=store.patch) as store_patch:
            service.update(tomato_id, {"id": "other", "created_at": 0})

        store_patch.assert_not_called()

    def test_updated_at_never_goes_backwards(self, service, clock):
        tomato_id = create_cherry(service)
        created = service.get(tomato_id)
        clock.now -= 5000

        updated = service.update(tomato_id, {"name": "Late Cherry"})

        assert updated.updated_at >= created.updated_at
        assert updated.created_at <= updated.updated_at

    def test_update_clears_description_with_explicit_null(self, service):
        tomato_id = create_cherry(service)

        updated = service.update(tomato_id, {"description": None})

        assert updated.description is None

    def test_update_missing_tomato(self, service, store):
        with patch.object(store, "patch", wraps=store.patch) as store_patch:
            with pytest.raises(NotFoundError):
                service.update("tomato_404", {"price": 1})

        store_patch.assert_not_called()

    def test_not_found_wins_over_bad_price(self, service):
        with pytest.raises(NotFoundError):
            service.update("tomato_404", {"price": -1})

    @pytest.mark.parametrize("price", [-1, "expensive", None, False, 10**400])
    def test_update_rejects_bad_price(self, service, price):
        tomato_id = create_cherry(service)
        before = service.get(tomato_id)

        with pytest.raises(ValidationError) as excinfo:
            service.update(tomato_id, {"price": price, "name": "Changed"})

        assert excinfo.value.message == "Price must be a non-negative number"
        assert service.get(tomato_id) == before

    @pytest.mark.parametrize("field, value", [
        ("name", None),
        ("variety", 42),
        ("in_stock", None),
        ("in_stock", "yes"),
        ("description", 7),
    ])
    def test_update_rejects_bad_field_types(self, service, field, value):
        tomato_id = create_cherry(service)

        with pytest.raises(ValidationError):
            service.update(tomato_id, {field: value})

    def test_update_loses_race_against_delete(self, service, store):
        tomato_id = create_cherry(service)
        real_patch = store.patch

        def delete_then_patch(target_id, fields):
            # another caller deletes the tomato between the check and the patch
            store.delete(target_id)
            real_patch(target_id, fields)

        with patch.object(store, "patch", side_effect=delete_then_patch):
            with pytest.raises(NotFoundError):
                service.update(tomato_id, {"price": 1.0})

        assert service.get(tomato_id) is None


class TestDelete:

    def test_delete_removes_tomato(self, service):
        tomato_id = create_cherry(service)
        other_id = create_cherry(service, name="Beefsteak Tomato")

        assert service.delete(tomato_id) == tomato_id

        assert service.get(tomato_id) is None
        assert [tomato.id for tomato in service.list_all()] == [other_id]

    def test_delete_missing_tomato(self, service, store):
        with patch.object(store, "delete", wraps=store.delete) as store_delete:
            with pytest.raises(NotFoundError):
                service.delete("tomato_404")

        store_delete.assert_not_called()

    def test_delete_twice(self, service):
        tomato_id = create_cherry(service)
        service.delete(tomato_id)

        with pytest.raises(NotFoundError):
            service.delete(tomato_id)

    def test_delete_loses_race(self, service, store):
        tomato_id = create_cherry(service)

        with patch.object(store, "delete", return_value=False):
            with pytest.raises(NotFoundError):
                service.delete(tomato_id)


class TestLookups:

    def test_get_missing_returns_none(self, service):
        assert service.get("tomato_404") is None

    def test_find_by_name_is_exact(self, service):
        first = create_cherry(service)
        second = create_cherry(service, variety="Sun Gold")
        create_cherry(service, name="Beefsteak Tomato", variety="Big Beef")
        create_cherry(service, name="cherry tomato")
        create_cherry(service, name="Cherry Tomatoes")

        found = service.find_by_name("Cherry Tomato")

        assert [tomato.id for tomato in found] == [first, second]

    def test_find_by_variety_uses_index(self, service, store):
        create_cherry(service)
        beef = create_cherry(service, name="Beefsteak Tomato", variety="Big Beef")

        with patch.object(store, "scan_index", wraps=store.scan_index) as scan_index:
            found = service.find_by_variety("Big Beef")

        scan_index.assert_called_once_with("by_variety", "Big Beef")
        assert [tomato.id for tomato in found] == [beef]

    def test_find_by_variety_matches_scan(self, service, store):
        for variety in ["Big Beef", "Sweet 100", "Big Beef", "big beef"]:
            create_cherry(service, variety=variety)

        assert service.find_by_variety("Big Beef") == store.scan({"variety": "Big Beef"})

    def test_round_trip(self, service, clock):
        tomato_id = service.create(name="Roma Tomato", variety="San Marzano", price=3.5)
        created = service.get(tomato_id)
        assert (created.name, created.variety, created.price) == ("Roma Tomato", "San Marzano", 3.5)

        clock.advance()
        service.update(tomato_id, {"variety": "Amish Paste", "description": "Paste tomato"})
        updated = service.get(tomato_id)
        assert updated.name == "Roma Tomato"
        assert updated.variety == "Amish Paste"
        assert updated.description == "Paste tomato"
        assert updated.price == 3.5

        service.delete(tomato_id)
        assert service.get(tomato_id) is None
