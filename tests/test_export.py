from datetime import date

from atlas_finance.export import (
    CSV_HEADER,
    TEMPLATE_FILENAME,
    export_csv,
    export_filename,
    quote_field,
    template_csv,
    transaction_to_row,
)
from atlas_finance.models import Transaction, TransactionCreate, TransactionType


def test_header_only_for_empty_ledger():
    assert export_csv([]) == "date,description,amount,type,category,project_client"
    assert CSV_HEADER == "date,description,amount,type,category,project_client"


def test_rows_in_given_order_with_natural_amounts():
    txs = [
        TransactionCreate(
            date="2025-02-05",
            description="Software subscription",
            amount_cents=-9900,
            type=TransactionType.EXPENSE,
            category="Software",
        ),
        TransactionCreate(
            date="2025-02-01",
            description="Consulting fee",
            amount_cents=150050,
            type=TransactionType.INCOME,
            category="Software",
            project_client="Acme Corp",
        ),
    ]

    assert export_csv(txs).split("\n") == [
        CSV_HEADER,
        '2025-02-05,"Software subscription",99,expense,Software,',
        '2025-02-01,"Consulting fee",1500.5,income,Software,Acme Corp',
    ]


def test_type_column_follows_sign_not_stored_type():
    mislabeled = Transaction(
        id="t1",
        date="2025-02-01",
        description="Chargeback",
        amount_cents=-1234,
        type=TransactionType.INCOME,
    )
    zero = TransactionCreate(
        date="2025-02-02", description="Zero", amount_cents=0, type=TransactionType.EXPENSE
    )

    assert transaction_to_row(mislabeled) == '2025-02-01,"Chargeback",12.34,expense,,'
    assert transaction_to_row(zero).split(",")[3] == "income"


def test_description_quotes_are_doubled():
    assert quote_field('He said "hi"') == '"He said ""hi"""'
    assert quote_field("") == '""'


def test_filenames():
    assert export_filename(date(2025, 2, 9)) == "finance-transactions-2025-02-09.csv"
    assert TEMPLATE_FILENAME == "finance-import-template.csv"


def test_template_has_one_income_and_one_expense_row():
    lines = template_csv().split("\n")
    assert lines[0] == CSV_HEADER
    assert len(lines) == 3
    assert lines[1].split(",")[3] == "income"
    assert lines[2].split(",")[3] == "expense"
