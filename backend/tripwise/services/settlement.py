"""Settlement calculator: who pays whom to square up after the trip."""

import uuid
from dataclasses import dataclass
from decimal import Decimal

from tripwise.services.currency_service import quantize_money

SETTLED_EPSILON = Decimal("0.01")


@dataclass
class TravelerBalance:
    traveler_id: uuid.UUID
    traveler_name: str
    should_pay: Decimal
    actually_paid: Decimal

    @property
    def balance(self) -> Decimal:
        """Positive: owed money. Negative: owes money."""
        return self.actually_paid - self.should_pay

    def to_dict(self) -> dict:
        return {
            "traveler_id": str(self.traveler_id),
            "traveler_name": self.traveler_name,
            "should_pay": float(quantize_money(self.should_pay)),
            "actually_paid": float(quantize_money(self.actually_paid)),
            "balance": float(quantize_money(self.balance)),
        }


@dataclass
class Transfer:
    from_traveler_id: uuid.UUID
    from_name: str
    to_traveler_id: uuid.UUID
    to_name: str
    amount: Decimal

    def to_dict(self) -> dict:
        return {
            "from_traveler_id": str(self.from_traveler_id),
            "from_name": self.from_name,
            "to_traveler_id": str(self.to_traveler_id),
            "to_name": self.to_name,
            "amount": float(quantize_money(self.amount)),
        }


def net_balances(sharers, paid_rows) -> list[TravelerBalance]:
    """Owed and paid sums per sharer, over actual rows that have a payer."""
    balances = {
        t.id: TravelerBalance(
            traveler_id=t.id,
            traveler_name=t.name,
            should_pay=Decimal("0"),
            actually_paid=Decimal("0"),
        )
        for t in sharers
    }
    for row in paid_rows:
        if row.paid_by_traveler_id is None:
            continue
        if row.traveler_id in balances:
            balances[row.traveler_id].should_pay += row.actual_amount
        if row.paid_by_traveler_id in balances:
            balances[row.paid_by_traveler_id].actually_paid += row.actual_amount
    return list(balances.values())


def settle(balances: list[TravelerBalance]) -> list[Transfer]:
    """Greedy largest-debtor to largest-creditor matching.

    Each round moves min(debt, credit) and settles at least one side, so the
    loop is capped at the number of unsettled travelers. Equal amounts are
    ordered by traveler id.
    """
    names = {b.traveler_id: b.traveler_name for b in balances}
    debts = {b.traveler_id: -b.balance for b in balances if b.balance < -SETTLED_EPSILON}
    credits = {b.traveler_id: b.balance for b in balances if b.balance > SETTLED_EPSILON}

    def largest(pool: dict) -> uuid.UUID:
        return min(pool, key=lambda tid: (-pool[tid], str(tid)))

    transfers: list[Transfer] = []
    for _ in range(len(debts) + len(credits)):
        if not debts or not credits:
            break

        debtor = largest(debts)
        creditor = largest(credits)
        amount = min(debts[debtor], credits[creditor])

        transfers.append(Transfer(
            from_traveler_id=debtor,
            from_name=names[debtor],
            to_traveler_id=creditor,
            to_name=names[creditor],
            amount=amount,
        ))

        debts[debtor] -= amount
        credits[creditor] -= amount
        if debts[debtor] <= SETTLED_EPSILON:
            del debts[debtor]
        if credits[creditor] <= SETTLED_EPSILON:
            del credits[creditor]

    return transfers
