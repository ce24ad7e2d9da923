"""Commission summary domain service."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from commtrack.database.base import Database
from commtrack.domain.commission import to_cents
from commtrack.domain.entities import (
    ZERO,
    ClientType,
    CommissionSummary,
    Insight,
    MonthlyTotal,
    Transaction,
)
from commtrack.domain.transaction import TransactionService


def format_money(amount: Decimal) -> str:
    """Format an amount as dollars with thousands separators."""
    amount = to_cents(amount)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


class SummaryService:
    """Service for building commission metrics and insights."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transaction_service = TransactionService(db)

    def get_filtered_transactions(self, **filters) -> list[Transaction]:
        """List transactions matching the summary filters.

        Accepts the same keyword filters as TransactionService.list_transactions.
        """
        return self.transaction_service.list_transactions(**filters)

    def summarize(self, **filters) -> CommissionSummary:
        """Compute totals for the filtered transactions."""
        return self.build_summary(self.get_filtered_transactions(**filters))

    def build_summary(self, transactions: Sequence[Transaction]) -> CommissionSummary:
        """Compute totals for a set of transactions."""
        total_nci = sum((txn.nci for txn in transactions), ZERO)
        count = len(transactions)
        return CommissionSummary(
            total_gci=sum((txn.gci for txn in transactions), ZERO),
            total_nci=total_nci,
            total_transactions=count,
            average_nci=to_cents(total_nci / count) if count else ZERO,
            total_volume=sum((txn.closed_price for txn in transactions), ZERO),
            total_referral_fees=sum((txn.referral_dollar for txn in transactions), ZERO),
        )

    def monthly_totals(self, **filters) -> list[MonthlyTotal]:
        """GCI/NCI totals per closing month, oldest month first."""
        return self.build_monthly_totals(self.get_filtered_transactions(**filters))

    def build_monthly_totals(self, transactions: Sequence[Transaction]) -> list[MonthlyTotal]:
        """Group transactions by closing month. Undated transactions are skipped."""
        months: dict[date, dict] = defaultdict(lambda: {"gci": ZERO, "nci": ZERO, "count": 0})
        for txn in transactions:
            if txn.closing_date is None:
                continue
            bucket = months[txn.closing_date.replace(day=1)]
            bucket["gci"] += txn.gci
            bucket["nci"] += txn.nci
            bucket["count"] += 1

        return [
            MonthlyTotal(month=month, gci=data["gci"], nci=data["nci"], transactions=data["count"])
            for month, data in sorted(months.items())
        ]

    def insights(self, **filters) -> list[Insight]:
        """Headline insights for the filtered transactions."""
        return self.build_insights(self.get_filtered_transactions(**filters))

    def build_insights(self, transactions: Sequence[Transaction]) -> list[Insight]:
        """Build headline insights.

        Includes, where the data allows: best month by NCI, top property
        type, average days to close, stronger client side and biggest deal.
        """
        if not transactions:
            return []

        insights = []

        monthly = self.build_monthly_totals(transactions)
        if monthly:
            best = max(monthly, key=lambda m: m.nci)
            insights.append(
                Insight(
                    label="Best Month",
                    value=best.month.strftime("%B %Y"),
                    detail=f"{format_money(best.nci)} earned",
                )
            )

        by_property: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for txn in transactions:
            by_property[txn.property_type.value] += txn.nci
        top_property, top_nci = max(by_property.items(), key=lambda item: item[1])
        insights.append(
            Insight(
                label="Top Property Type",
                value=top_property,
                detail=f"{format_money(top_nci)} in commissions",
            )
        )

        days_to_close = self.days_to_close(transactions)
        if days_to_close:
            average = round(sum(days_to_close) / len(days_to_close))
            insights.append(
                Insight(
                    label="Avg Days to Close",
                    value=f"{average} days",
                    detail=f"Based on {len(days_to_close)} transactions",
                )
            )

        side = self.stronger_side(transactions)
        if side is not None:
            client_type, share = side
            insights.append(
                Insight(
                    label="Stronger Side",
                    value=f"{client_type.value}s",
                    detail=f"{share}% of total income",
                )
            )

        biggest = max(transactions, key=lambda txn: txn.nci)
        insights.append(
            Insight(
                label="Biggest Deal",
                value=format_money(biggest.nci),
                detail=biggest.address,
            )
        )
        return insights

    def days_to_close(self, transactions: Sequence[Transaction]) -> list[int]:
        """Days from listing to closing, for transactions with a positive span."""
        spans = [
            (txn.closing_date - txn.list_date).days
            for txn in transactions
            if txn.list_date is not None and txn.closing_date is not None
        ]
        return [days for days in spans if days > 0]

    def stronger_side(self, transactions: Sequence[Transaction]) -> Optional[tuple[ClientType, int]]:
        """Client side with the larger NCI and its rounded share of buyer+seller NCI.

        Returns None when the combined NCI is not positive.
        """
        buyer = sum((t.nci for t in transactions if t.client_type is ClientType.BUYER), ZERO)
        seller = sum((t.nci for t in transactions if t.client_type is ClientType.SELLER), ZERO)
        combined = buyer + seller
        if combined <= 0:
            return None
        side = ClientType.BUYER if buyer > seller else ClientType.SELLER
        share = round(max(buyer, seller) / combined * 100)
        return side, int(share)

    def available_years(self) -> list[int]:
        """Closing years present in the store, newest first."""
        years = {
            txn.closing_date.year
            for txn in self.db.list_transactions()
            if txn.closing_date is not None
        }
        return sorted(years, reverse=True)
