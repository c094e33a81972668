import threading
import time
from decimal import Decimal

import pytest

from order_desk import manager as manager_module
from order_desk.manager import OrderManager
from order_desk.models import OrderSubmission
from order_desk.persistence import InMemoryCartRepository
from order_desk.result import Err, Ok

from conftest import make_item


class FailingRepository:
    def __init__(self, fail_on: set[str]):
        self.fail_on = fail_on
        self.items = []

    def load(self):
        if "load" in self.fail_on:
            raise OSError("disk gone")
        return list(self.items)

    def save(self, items):
        if "save" in self.fail_on:
            raise OSError("disk full")
        self.items = list(items)

    def clear(self):
        if "clear" in self.fail_on:
            raise OSError("locked")
        self.items = []


class SlowRepository(InMemoryCartRepository):
    """Yields to other threads between reading and writing the cart."""

    def load(self):
        items = super().load()
        time.sleep(0.002)
        return items


class FakeClient:
    def __init__(self, result):
        self.result = result
        self.submitted = []

    def create_order(self, submission):
        self.submitted.append(submission)
        return self.result


def test_add_same_item_merges_quantities(manager):
    manager.add(make_item("A", quantity=2, price="5"))
    result = manager.add(make_item("A", quantity=3, price="5"))

    assert result.ok
    assert [(item.item_id, item.quantity) for item in result.value] == [("A", 5)]
    assert manager.calculate_total().value == Decimal("25")


def test_repeated_adds_sum_to_one_entry(manager):
    for qty in (1, 4, 2, 7):
        manager.add(make_item("A", quantity=qty))
    manager.add(make_item("B"))

    items = manager.load().value
    assert [item.item_id for item in items] == ["A", "B"]
    assert items[0].quantity == 14


def test_merge_keeps_existing_instructions_and_price(manager):
    manager.add(make_item("A", quantity=1, price="5", special_instructions="No onions"))
    items = manager.add(make_item("A", quantity=1, price="7")).value

    assert items[0].special_instructions == "No onions"
    assert items[0].unit_price == Decimal("5")


def test_add_rejects_non_positive_quantity(manager, repo):
    assert manager.add(make_item("A", quantity=0)) == Err(manager_module.INVALID_QUANTITY)
    assert repo.load() == []


@pytest.mark.parametrize("quantity", [0, -1, -20])
def test_update_quantity_below_one_removes(manager, quantity):
    manager.add(make_item("B", quantity=1, price="10"))

    result = manager.update_quantity("B", quantity)

    assert result == Ok([])


def test_update_quantity_sets_exact_value_only(manager):
    original = make_item("A", quantity=2, special_instructions="Extra sauce")
    manager.add(original)
    manager.add(make_item("C"))

    items = manager.update_quantity("A", 9).value

    assert items[0] == original.with_quantity(9)
    assert items[1].quantity == 1


def test_update_instructions_replaces_text(manager):
    manager.add(make_item("A", special_instructions="No onions"))

    items = manager.update_instructions("A", "Gluten free").value

    assert items[0].special_instructions == "Gluten free"


def test_remove_is_idempotent(manager):
    manager.add(make_item("A"))

    first = manager.remove("missing")
    second = manager.remove("A")
    third = manager.remove("A")

    assert [item.item_id for item in first.value] == ["A"]
    assert second == Ok([])
    assert third == Ok([])


def test_clear_then_load_is_empty(manager):
    manager.add(make_item("A"))
    manager.add(make_item("B"))

    assert manager.clear() == Ok(None)
    assert manager.load() == Ok([])


def test_total_is_sum_of_unit_price_times_quantity(manager):
    assert manager.calculate_total() == Ok(Decimal("0"))
    manager.add(make_item("A", quantity=3, price="2.10"))
    manager.add(make_item("B", quantity=2, price="0.45"))

    assert manager.calculate_total().value == Decimal("7.20")


@pytest.mark.parametrize(
    ("fail_on", "call", "tag"),
    [
        ({"load"}, lambda m: m.load(), manager_module.LOAD_FAILED),
        ({"save"}, lambda m: m.add(make_item("A")), manager_module.ADD_FAILED),
        ({"save"}, lambda m: m.update_quantity("A", 2), manager_module.UPDATE_FAILED),
        ({"save"}, lambda m: m.update_instructions("A", "x"), manager_module.INSTRUCTIONS_FAILED),
        ({"save"}, lambda m: m.remove("A"), manager_module.REMOVE_FAILED),
        ({"clear"}, lambda m: m.clear(), manager_module.CLEAR_FAILED),
        ({"load"}, lambda m: m.calculate_total(), manager_module.CALCULATION_FAILED),
        ({"load"}, lambda m: m.add(make_item("A")), manager_module.ADD_FAILED),
    ],
)
def test_storage_errors_become_tagged_failures(fail_on, call, tag):
    result = call(OrderManager(FailingRepository(fail_on)))

    assert not result.ok
    assert result.error == tag


def test_validate_submission_rules(manager):
    items = [make_item("A")]

    assert manager.validate_submission(OrderSubmission(items, 3, "Ana")) == Ok(True)
    assert manager.validate_submission(OrderSubmission([], 3, "Ana")).error == "Order must contain at least one item"
    assert manager.validate_submission(OrderSubmission(items, 0, "Ana")).error == "Valid table number is required"
    assert manager.validate_submission(OrderSubmission(items, 3, "  ")).error == "Customer name is required"
    bad_price = [make_item("A", price="-1", name="Soup")]
    assert manager.validate_submission(OrderSubmission(bad_price, 3, "Ana")).error == "Invalid price for Soup"


def test_submit_clears_cart_on_success(manager):
    manager.add(make_item("A", quantity=2))
    items = manager.load().value
    client = FakeClient(Ok("ORD-1"))

    result = manager.submit(OrderSubmission(items, 4, "Table 4"), client)

    assert result == Ok("ORD-1")
    assert client.submitted[0].table_number == 4
    assert manager.load() == Ok([])


def test_submit_keeps_cart_when_api_fails(manager):
    manager.add(make_item("A"))
    items = manager.load().value

    result = manager.submit(OrderSubmission(items, 4, "Table 4"), FakeClient(Err("Failed to submit order: 500")))

    assert result == Err("Failed to submit order: 500")
    assert len(manager.load().value) == 1


def test_submit_does_not_call_api_when_invalid(manager):
    client = FakeClient(Ok("ORD-1"))

    result = manager.submit(OrderSubmission([], 4, "Table 4"), client)

    assert not result.ok
    assert client.submitted == []


def test_concurrent_adds_are_not_lost():
    repo = SlowRepository()
    manager = OrderManager(repo)
    threads = [threading.Thread(target=manager.add, args=(make_item("A", 1),)) for _ in range(8)]

    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    items = repo.load()
    assert len(items) == 1
    assert items[0].quantity == 8
