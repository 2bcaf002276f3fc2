"""Server-rendered HTML dashboard."""
import html
from typing import List

from expense_tracker.models.summary import CategoryTotal, TransactionSummary
from expense_tracker.models.transaction import Transaction, TransactionKind

# Same palette order as the category chart legend
COLORS = ["#ef4444", "#f97316", "#eab308", "#22c55e", "#06b6d4", "#8b5cf6", "#ec4899", "#6b7280"]


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _category_rows(categories: List[CategoryTotal], expense_total: float) -> str:
    if not categories:
        return '<p class="empty">No expenses in this period.</p>'
    rows = []
    for i, cat in enumerate(categories):
        percent = (cat.total / expense_total * 100) if expense_total else 0.0
        color = COLORS[i % len(COLORS)]
        rows.append(
            f"""<tr>
          <td>{html.escape(cat.category)}</td>
          <td><div class="bar"><span style="width: {percent:.1f}%; background: {color};"></span></div></td>
          <td class="num">{percent:.0f}%</td>
          <td class="num">{format_currency(cat.total)}</td>
          <td class="num">{cat.count}</td>
        </tr>"""
        )
    return (
        '<table><thead><tr><th>Category</th><th></th><th>Share</th><th>Total</th><th>Count</th></tr></thead>'
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def _transaction_rows(transactions: List[Transaction]) -> str:
    if not transactions:
        return '<p class="empty">No transactions yet.</p>'
    rows = []
    for tx in transactions:
        css = "income" if tx.kind == TransactionKind.INCOME else "expense"
        sign = "+" if tx.kind == TransactionKind.INCOME else "-"
        rows.append(
            f"""<tr>
          <td>{tx.occurred_at.strftime("%b %d, %Y")}</td>
          <td>{html.escape(tx.category)}</td>
          <td>{html.escape(tx.note or "")}</td>
          <td class="num {css}">{sign}{format_currency(tx.amount)}</td>
        </tr>"""
        )
    return (
        "<table><thead><tr><th>Date</th><th>Category</th><th>Note</th><th>Amount</th></tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


def render_dashboard(
    title: str,
    summary: TransactionSummary,
    categories: List[CategoryTotal],
    transactions: List[Transaction],
    period: str = "All time",
) -> str:
    """Render the dashboard page: summary cards, category breakdown and recent transactions."""
    balance_css = "income" if summary.balance >= 0 else "expense"
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{html.escape(title)}: Dashboard</title>
  <style>
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
           background: #0d1117; color: #c9d1d9; padding: 2rem; }}
    h1 {{ color: #58a6ff; margin-bottom: 0.5rem; }}
    h2 {{ color: #58a6ff; border-bottom: 1px solid #30363d;
          padding-bottom: 0.5rem; margin-bottom: 1rem; }}
    .subtitle {{ color: #8b949e; margin-bottom: 2rem; }}
    .cards {{ display: flex; gap: 1.5rem; flex-wrap: wrap; margin-bottom: 2rem; }}
    .card {{ flex: 1; min-width: 200px; background: #161b22;
             border: 1px solid #30363d; border-radius: 8px; padding: 1.5rem; }}
    .card .label {{ color: #8b949e; font-size: 0.9rem; }}
    .card .value {{ font-size: 1.6rem; font-weight: bold; margin-top: 0.5rem; }}
    .panels {{ display: flex; gap: 1.5rem; flex-wrap: wrap; }}
    .panel {{ flex: 1; min-width: 350px; background: #161b22;
              border: 1px solid #30363d; border-radius: 8px; padding: 1.5rem; }}
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ border-bottom: 1px solid #30363d; padding: 8px 12px; text-align: left; }}
    th {{ background: #21262d; color: #58a6ff; }}
    .num {{ text-align: right; }}
    .income {{ color: #22c55e; }}
    .expense {{ color: #ef4444; }}
    .bar {{ background: #21262d; border-radius: 4px; height: 10px; min-width: 120px; }}
    .bar span {{ display: block; height: 10px; border-radius: 4px; }}
    .empty {{ color: #8b949e; }}
  </style>
</head>
<body>
  <h1>Dashboard</h1>
  <p class="subtitle">Track your income and expenses &middot; {html.escape(period)}</p>
  <div class="cards">
    <div class="card"><div class="label">Total Income</div><div class="value income" id="income">{format_currency(summary.income)}</div></div>
    <div class="card"><div class="label">Total Expenses</div><div class="value expense" id="expense">{format_currency(summary.expense)}</div></div>
    <div class="card"><div class="label">Net Balance</div><div class="value {balance_css}" id="balance">{format_currency(summary.balance)}</div></div>
    <div class="card"><div class="label">Transactions</div><div class="value" id="count">{summary.transaction_count}</div></div>
  </div>
  <div class="panels">
    <div class="panel">
      <h2>Expense Categories</h2>
      {_category_rows(categories, summary.expense)}
    </div>
    <div class="panel">
      <h2>Recent Transactions</h2>
      {_transaction_rows(transactions)}
    </div>
  </div>
</body>
</html>"""
