from __future__ import annotations

import html
from datetime import datetime
from typing import Optional

import pandas as pd

from core.errors import ValidationError
from core.logger import get_logger
from core.model import BakeryState, Confirm, SaleLine
from core.utils import fmt_amount, parse_int, parse_number

log = get_logger("sales")

DEFAULT_BENEFIT = 100
DEFAULT_NUM = 1
UNKNOWN_CUSTOMER = "Unknown Customer"


def _check_index(state: BakeryState, index: int) -> int:
    i = int(index)
    if i < 0 or i >= len(state.sales):
        raise ValidationError("Sale line not found.")
    return i


def _normalize_customer(customer: Optional[str]) -> str:
    s = str(customer or "").strip()
    return s if s else UNKNOWN_CUSTOMER


def add_line(state: BakeryState, bread: Optional[str]) -> SaleLine:
    bread = (bread or "").strip()
    if not bread:
        raise ValidationError("Select a bread")

    line = SaleLine(bread=bread, benefit=DEFAULT_BENEFIT, num=DEFAULT_NUM)
    state.sales.append(line)
    state.persist("sales")
    return line


def set_markup(state: BakeryState, index: int, value) -> float:
    i = _check_index(state, index)
    state.sales[i].benefit = parse_number(value) or 0
    state.persist("sales")
    return state.sales[i].benefit


def set_count(state: BakeryState, index: int, value) -> int:
    # "3.7" -> 3, "abc" -> 0
    i = _check_index(state, index)
    state.sales[i].num = parse_int(value) or 0
    state.persist("sales")
    return state.sales[i].num


def line_amount(state: BakeryState, line: SaleLine) -> float:
    """Cached unit cost (0 when never costed) marked up, times the count."""
    cost_one = state.bread_costs.get(line.bread, 0)
    return cost_one * (1 + float(line.benefit) / 100) * int(line.num)


def total(state: BakeryState) -> float:
    return sum(line_amount(state, s) for s in state.sales)


def remove_line(state: BakeryState, index: int) -> SaleLine:
    i = _check_index(state, index)
    removed = state.sales.pop(i)
    state.persist("sales")
    return removed


def clear_all(state: BakeryState, confirm: Confirm) -> bool:
    """True when the ledger was cleared; the caller resets the customer field."""
    if not confirm("Are you sure you want to clear all sales?"):
        return False
    n = len(state.sales)
    state.sales.clear()
    state.persist("sales")
    log.info("Sales cleared (%d lines)", n)
    return True


def sales_frame(state: BakeryState) -> pd.DataFrame:
    rows = [
        {
            "Bread": s.bread,
            "Benefit %": float(s.benefit),
            "Number": int(s.num),
            "Sale Rate": line_amount(state, s),
        }
        for s in state.sales
    ]
    return pd.DataFrame(rows, columns=["Bread", "Benefit %", "Number", "Sale Rate"])


def build_invoice(
    state: BakeryState,
    customer_name: Optional[str],
    *,
    shop_name: str = "Nasim Bakery",
    now: Optional[datetime] = None,
) -> str:
    """
    Standalone printable HTML invoice: customer, date, one row per sale line
    (bread, count, amount) and the grand total.
    """
    customer = _normalize_customer(customer_name)
    now = now or datetime.now()
    esc = html.escape

    rows = "".join(
        f"<tr><td>{esc(s.bread)}</td><td>{int(s.num)}</td><td>{fmt_amount(line_amount(state, s))}</td></tr>"
        for s in state.sales
    )
    body = (
        '<div style="text-align:center;font-family:Segoe UI,Tahoma;">'
        f"<h2>{esc(shop_name)}</h2>"
        f"<p><b>Customer:</b> {esc(customer)}</p>"
        f"<p><b>Date:</b> {now.strftime('%Y-%m-%d %H:%M')}</p>"
        '<table border="1" cellspacing="0" cellpadding="6" '
        'style="width:100%;border-collapse:collapse;margin-top:10px;">'
        '<tr style="background:#f0f0f0;"><th>Bread</th><th>Number</th><th>Sale Rate</th></tr>'
        f"{rows}"
        '<tr><td colspan="2" style="text-align:right;"><b>Total:</b></td>'
        f"<td><b>{fmt_amount(total(state))}</b></td></tr>"
        "</table></div>"
    )
    return (
        "<html><head><title>Invoice</title></head>"
        f'<body onload="window.print()">{body}</body></html>'
    )
