"""Tests for the greedy settlement calculator."""

import uuid
from decimal import Decimal
from types import SimpleNamespace

from tripwise.services.settlement import TravelerBalance, net_balances, settle


def balance(name, should_pay, paid, traveler_id=None):
    return TravelerBalance(
        traveler_id=traveler_id or uuid.uuid4(),
        traveler_name=name,
        should_pay=Decimal(should_pay),
        actually_paid=Decimal(paid),
    )


def test_one_payer_two_travelers():
    alice = balance("Alice", "250", "500")
    bob = balance("Bob", "250", "0")

    transfers = settle([alice, bob])

    assert len(transfers) == 1
    t = transfers[0]
    assert (t.from_name, t.to_name, t.amount) == ("Bob", "Alice", Decimal("250"))
    assert t.to_dict()["amount"] == 250.0


def test_balanced_group_needs_no_transfers():
    assert settle([balance("A", "100", "100"), balance("B", "50", "50")]) == []


def test_differences_within_a_cent_are_settled():
    assert settle([balance("A", "100", "100.01"), balance("B", "100", "99.99")]) == []


def test_transfers_clear_every_balance():
    people = [
        balance("A", "300", "900"),
        balance("B", "300", "0"),
        balance("C", "300", "100"),
        balance("D", "300", "200"),
    ]
    transfers = settle(people)

    net = {p.traveler_id: p.balance for p in people}
    for t in transfers:
        net[t.from_traveler_id] += t.amount
        net[t.to_traveler_id] -= t.amount
    assert all(abs(v) <= Decimal("0.01") for v in net.values())

    debits = sum(-p.balance for p in people if p.balance < 0)
    assert sum(t.amount for t in transfers) == debits
    assert len(transfers) <= len(people) - 1


def test_largest_debtor_pays_largest_creditor_first():
    transfers = settle([
        balance("Small debtor", "100", "50"),
        balance("Big debtor", "100", "0"),
        balance("Creditor", "100", "250"),
    ])
    assert [t.from_name for t in transfers] == ["Big debtor", "Small debtor"]
    assert [t.amount for t in transfers] == [Decimal("100"), Decimal("50")]


def test_equal_balances_ordered_by_traveler_id():
    low = uuid.UUID("00000000-0000-0000-0000-000000000001")
    high = uuid.UUID("00000000-0000-0000-0000-000000000002")
    people = [
        balance("Second", "50", "0", traveler_id=high),
        balance("First", "50", "0", traveler_id=low),
        balance("Payer", "0", "100"),
    ]

    first = settle(people)
    again = settle(list(reversed(people)))

    assert [t.from_traveler_id for t in first] == [low, high]
    assert [t.to_dict() for t in first] == [t.to_dict() for t in again]


def test_transfers_stop_when_credit_is_exhausted():
    alice = balance("A", "750", "1000")
    bob = balance("B", "750", "0")

    transfers = settle([alice, bob])

    assert [t.to_dict() for t in transfers] == [{
        "from_traveler_id": str(bob.traveler_id),
        "from_name": "B",
        "to_traveler_id": str(alice.traveler_id),
        "to_name": "A",
        "amount": 250.0,
    }]


def test_net_balances_counts_only_paid_rows_of_sharers():
    a = SimpleNamespace(id=uuid.uuid4(), name="A")
    b = SimpleNamespace(id=uuid.uuid4(), name="B")
    kid = uuid.uuid4()

    def row(owner, payer, amount):
        return SimpleNamespace(traveler_id=owner, paid_by_traveler_id=payer, actual_amount=Decimal(amount))

    balances = net_balances([a, b], [
        row(a.id, a.id, "500"),
        row(b.id, a.id, "500"),
        row(b.id, None, "40"),
        row(kid, b.id, "30"),
    ])

    by_name = {x.traveler_name: x for x in balances}
    assert by_name["A"].should_pay == Decimal("500")
    assert by_name["A"].actually_paid == Decimal("1000")
    assert by_name["B"].should_pay == Decimal("500")
    assert by_name["B"].actually_paid == Decimal("30")
    assert [t.amount for t in settle(balances)] == [Decimal("470")]
