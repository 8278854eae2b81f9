import pytest
import pytest_asyncio

from lunchmoney_skill.cache import PlaceholderResolver, ReferenceCache
from lunchmoney_skill.formatting import (
    format_accounts,
    format_amount,
    format_bulk_update_result,
    format_categories,
    format_category,
    format_currency,
    format_delete_result,
    format_recurring,
    format_summary,
    format_tags,
    format_transaction,
    format_transactions,
    format_user,
)
from lunchmoney_skill.models import Category, ManualAccount, SyncedAccount, Tag


@pytest_asyncio.fixture
async def cache(source):
    c = ReferenceCache(source)
    await c.initialize()
    return c


def _tx(**overrides):
    tx = {
        "id": 501,
        "date": "2026-02-03",
        "amount": "42.5000",
        "currency": "usd",
        "payee": "Trader Joe's",
        "category_id": 3,
        "manual_account_id": None,
        "plaid_account_id": 7,
        "tag_ids": [10],
        "status": "reviewed",
        "notes": None,
    }
    tx.update(overrides)
    return tx


def test_amount_formatting():
    assert format_amount("42.5", "usd") == "$42.50"
    assert format_amount(-3.456, "eur") == "-€3.46"
    assert format_amount("10", "sek") == "SEK 10.00"
    assert format_amount("0.005", "usd") == "$0.01"
    assert format_currency(-12) == "-$12.00"
    assert format_currency("NaN") == "$0.00"
    assert format_amount("-Infinity", "usd") == "$0.00"


@pytest.mark.asyncio
async def test_transaction_is_hydrated(cache):
    text = format_transaction(_tx(notes="weekly shop"), cache)
    assert text == (
        "2026-02-03  $42.50  Trader Joe's\n"
        "  Category: Groceries | Account: Sapphire [work]\n"
        "  ID: 501\n"
        "  Notes: weekly shop"
    )


@pytest.mark.asyncio
async def test_transaction_with_unknown_ids_renders_placeholders(cache):
    tx = _tx(category_id=42, plaid_account_id=None, manual_account_id=77, tag_ids=[10, 99],
             status="unreviewed")
    text = format_transaction(tx, cache)
    assert "Category: Category #42 | Account: Manual #77 (unreviewed) [work, Tag #99]" in text


@pytest.mark.asyncio
async def test_cash_transaction_without_tags(cache):
    text = format_transaction(_tx(category_id=None, plaid_account_id=None, tag_ids=[]), cache)
    assert "Category: Uncategorized | Account: Cash\n" in text
    assert "[" not in text


def test_transaction_in_degraded_mode():
    text = format_transaction(_tx(), PlaceholderResolver())
    assert "Category: Category #3 | Account: Plaid #7 [Tag #10]" in text


@pytest.mark.asyncio
async def test_transaction_list(cache):
    text = format_transactions([_tx(), _tx(id=502)], True, cache)
    assert text.startswith("Showing 2 transactions (more available")
    assert "ID: 502" in text
    assert format_transactions([_tx()], False, cache).startswith("Showing 1 transaction\n\n")
    assert format_transactions([], False, cache).startswith("No transactions found")


@pytest.mark.asyncio
async def test_bulk_update_preview(cache):
    text = format_bulk_update_result([_tx(id=i) for i in range(5)], cache)
    assert text.startswith("5 transactions updated.")
    assert "ID: 2" in text
    assert "ID: 3" not in text
    assert text.endswith("... and 2 more")


@pytest.mark.asyncio
async def test_flat_categories_resolve_group(cache):
    cats = [Category(id=3, name="Groceries", group_id=1), Category(id=4, name="Salary", is_income=True),
            Category(id=5, name="Orphan", group_id=88, archived=True)]
    assert format_categories(cats, "flat", cache).split("\n") == [
        "Groceries [group: Food] (ID: 3)",
        "Salary (income) (ID: 4)",
        "Orphan (archived) [group: Category #88] (ID: 5)",
    ]


def test_nested_categories():
    group = Category.from_api({
        "id": 1, "name": "Food", "is_group": True, "exclude_from_totals": True,
        "children": [{"id": 3, "name": "Groceries"}, {"id": 6, "name": "Dining"}],
    })
    text = format_categories([group, Category(id=2, name="Rent")], "nested", PlaceholderResolver())
    assert text == (
        "Food (excl. totals) (ID: 1)\n"
        "  - Groceries (ID: 3)\n"
        "  - Dining (ID: 6)\n"
        "Rent (ID: 2)"
    )
    assert format_categories([], "nested", PlaceholderResolver()) == "No categories found."


@pytest.mark.asyncio
async def test_single_category_with_description(cache):
    cat = Category(id=9, name="Coffee", group_id=1, description="Cafes")
    assert format_category(cat, cache) == "Coffee [group: Food] (ID: 9)\n  Description: Cafes"


def test_tags():
    tags = [Tag(id=10, name="work", description="Billable"), Tag(id=11, name="old", archived=True)]
    assert format_tags(tags) == "work: Billable (ID: 10)\nold (archived) (ID: 11)"
    assert format_tags([]).startswith("No tags found.")


def test_accounts_sections():
    manual = [ManualAccount.from_api({"id": 3, "name": "Checking", "display_name": "Main",
                                      "balance": "1200.5", "currency": "usd", "type": "cash",
                                      "institution_name": "Credit Union", "status": "closed"})]
    synced = [SyncedAccount.from_api({"id": 7, "name": "Chase Sapphire", "balance": "-45.10",
                                      "currency": "gbp", "institution_name": "Chase",
                                      "type": "credit", "subtype": "credit card", "status": "inactive"})]
    text = format_accounts(manual, synced)
    assert text == (
        "## Manual Accounts\n\n"
        "Main @ Credit Union (closed)\n"
        "  Balance: $1200.50 | Type: cash | ID: 3\n"
        "\n"
        "## Synced Accounts\n\n"
        "Chase Sapphire @ Chase (inactive)\n"
        "  Balance: -£45.10 | Type: credit/credit card | ID: 7"
    )
    assert format_accounts([], []) == "No accounts found."


@pytest.mark.asyncio
async def test_summary(cache):
    data = {
        "totals": {
            "inflow": {"other_activity": 3000, "recurring_activity": 0},
            "outflow": {"other_activity": 1000.25, "recurring_activity": 500, "uncategorized": 20},
        },
        "categories": [
            {"category_id": 3, "totals": {"other_activity": 200, "recurring_activity": 0,
                                          "budgeted": 300, "available": 100}},
            {"category_id": 2, "totals": {"other_activity": 0, "recurring_activity": 1500}},
            {"category_id": 4, "totals": {"other_activity": 0, "recurring_activity": 0}},
            {"category_id": 404, "totals": {"other_activity": 5, "recurring_activity": 0}},
        ],
    }
    text = format_summary(data, "2026-02-01", "2026-02-28", cache)
    assert text.split("\n") == [
        "Budget Summary: 2026-02-01 to 2026-02-28",
        "",
        "Income: $3000.00",
        "Spending: $1500.25",
        "Net: $1499.75",
        "Uncategorized spending: $20.00",
        "",
        "Category Breakdown:",
        "  Rent: $1500.00",
        "  Groceries: $200.00 (budget: $300.00, avail: $100.00)",
        "  Category #404: $5.00",
    ]


@pytest.mark.asyncio
async def test_recurring(cache):
    items = [
        {
            "id": 81,
            "description": "Streaming",
            "transaction_criteria": {"payee": "Netflix", "amount": "15.99", "currency": "usd",
                                     "granularity": "month", "quantity": 1,
                                     "manual_account_id": None, "plaid_account_id": 7},
            "overrides": {"category_id": 2},
            "matches": {"found_transactions": [{"id": 1}], "missing_transaction_dates": []},
        },
        {
            "id": 82,
            "transaction_criteria": {"payee": None, "amount": "100", "currency": "usd",
                                     "granularity": "week", "quantity": 2},
            "overrides": {"payee": "Cleaner"},
        },
    ]
    blocks = format_recurring(items, cache).split("\n\n")
    assert blocks[0] == (
        "Netflix: Streaming\n"
        "  $15.99 every month | Rent | Sapphire | Found: 1, Missing: 0\n"
        "  ID: 81"
    )
    assert blocks[1] == "Cleaner\n  $100.00 every 2 weeks | Uncategorized | Cash\n  ID: 82"
    assert format_recurring([], cache) == "No recurring items found for this period."


def test_user():
    text = format_user({"id": 1, "name": "Ada", "email": "ada@example.com",
                        "budget_name": "Home", "primary_currency": "usd"})
    assert "Currency: USD" in text
    assert text.startswith("Name: Ada\nEmail: ada@example.com")


def test_delete_result():
    assert format_delete_result("Tag", 5) == "Tag 5 deleted successfully."
    text = format_delete_result("Category", 3, {"transactions": 12, "rules": 0, "budgets": 1})
    assert "  transactions: 12" in text
    assert "rules" not in text
    assert text.endswith("Use force=true to delete anyway.")
