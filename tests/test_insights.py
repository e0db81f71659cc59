from atlas_finance.aggregate import aggregate_by_month, summarize
from atlas_finance.insights import (
    describe_anomaly,
    detect_anomalies,
    monthly_summary_text,
    profitability_by_client,
    render_runway_report,
)
from atlas_finance.models import TransactionCreate, TransactionType


def _tx(desc: str, cents: int, client: str | None = None, d: str = "2025-02-01"):
    return TransactionCreate(
        date=d,
        description=desc,
        amount_cents=cents,
        type=TransactionType.from_cents(cents),
        project_client=client,
    )


def test_profitability_groups_by_client_descending():
    txs = [
        _tx("Invoice", 100000, "Acme Corp"),
        _tx("Hosting", -2500, "Acme Corp"),
        _tx("Rent", -80000),
        _tx("Retainer", 150000, "Globex"),
    ]

    ranked = profitability_by_client(txs)

    assert [(r.client, r.profit_cents) for r in ranked] == [
        ("Globex", 150000),
        ("Acme Corp", 97500),
        ("Uncategorized", -80000),
    ]
    assert str(ranked[1].profit) == "975.00"


def test_anomalies_use_mean_absolute_amount():
    txs = [
        _tx("Coffee", -500),
        _tx("Coffee", -500),
        _tx("Lunch", -1500),
        _tx("Laptop", -250000),
    ]

    found = detect_anomalies(txs)

    assert [t.description for t in found] == ["Laptop"]
    assert describe_anomaly(found[0]) == "Laptop: 2500.00 (unusual size)"


def test_anomalies_empty_and_uniform():
    assert detect_anomalies([]) == []
    assert detect_anomalies([_tx("A", -100), _tx("B", -100)]) == []


def test_monthly_summary_text():
    text = monthly_summary_text([_tx("Invoice", 150000), _tx("Hosting", -9900)])
    assert text == (
        "This month: 2 transactions. Income: 1500.00, Expenses: 99.00, Net: 1401.00."
    )


def test_render_runway_report():
    txs = [
        _tx("Invoice", 150000, d="2025-01-10"),
        _tx("Retainer", 50000, d="2025-02-01"),
        _tx("Hosting", -9900, d="2025-02-05"),
    ]

    report = render_runway_report(summarize(txs), aggregate_by_month(txs))
    lines = report.split("\n")

    assert lines[:4] == [
        "Income:   2000.00",
        "Expenses: 99.00",
        "Balance:  1901.00",
        "Runway:   19.2 mo",
    ]
    jan, feb = lines[-2:]
    assert jan.startswith("01/25") and jan.endswith("n/a")
    assert feb.startswith("02/25") and feb.endswith("19.2 mo")


def test_render_runway_report_without_rows():
    report = render_runway_report(summarize([]), [])
    assert report.split("\n")[-1] == "Runway:   n/a"
