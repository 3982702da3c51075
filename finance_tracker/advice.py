"""Advisory tips and warnings for reports and the dashboard.

Tips and warnings are two separate rule tables. They look at the same
categories with different thresholds (Food tip above 30%, Food warning
above 35%, and so on); keep both tables as they are.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from .budget_comparison import monthly_budget_total
from .config import CURRENCY_LABEL
from .formatting import format_amount, format_plain, to_fixed
from .models import BudgetLimit, ReportPeriod

FOOD = "Food"
TRANSPORT = "Transport"
HOUSING_CATEGORIES = ("Housing", "Rent")

# period -> divisor turning a period total into a per-day, per-week or per-month figure
PER_DAY = {ReportPeriod.WEEKLY: 7, ReportPeriod.MONTHLY: 30, ReportPeriod.YEARLY: 365}
PER_WEEK = {ReportPeriod.WEEKLY: 1, ReportPeriod.MONTHLY: 4, ReportPeriod.YEARLY: 52}
PER_MONTH = {ReportPeriod.WEEKLY: 4, ReportPeriod.MONTHLY: 1, ReportPeriod.YEARLY: 12}

TRANSPORT_APPROACHING = (
    "Your transport spending is approaching the monthly limit. "
    "Consider alternative transportation methods."
)


def _first_limit_by_category(budget_limits: Sequence[BudgetLimit]) -> Dict[str, BudgetLimit]:
    found: Dict[str, BudgetLimit] = {}
    for limit in budget_limits:
        found.setdefault(limit.category, limit)
    return found


def _amount_of(top_categories, category: str) -> float:
    return next((c.amount for c in top_categories if c.category == category), 0.0)


def generate_budget_tips(
    period: str,
    income: float,
    expenses: float,
    top_categories,
    budget_limits: Sequence[BudgetLimit],
    savings_rate: float,
) -> List[str]:
    """Softer, lower-threshold advice shown on the reports page."""
    tips: List[str] = []
    limits = _first_limit_by_category(budget_limits)

    if savings_rate < 10:
        tips.append("Try to save at least 10-20% of your income for financial security.")
    elif savings_rate >= 20:
        tips.append("Great job saving! You're saving more than 20% of your income.")

    for share in top_categories:
        limit = limits.get(share.category)

        if share.category == FOOD:
            if share.percentage > 30:
                tips.append(
                    f"Food expenses ({share.percentage}%) are high. "
                    "Consider meal planning and cooking at home more often."
                )
            if limit is not None and limit.daily_limit:
                daily = share.amount / PER_DAY[period]
                if daily > limit.daily_limit:
                    tips.append(
                        f"Your daily food spending ({CURRENCY_LABEL} {to_fixed(daily)}) exceeds your "
                        f"daily limit ({CURRENCY_LABEL} {format_plain(limit.daily_limit)}). "
                        "Try to reduce eating out."
                    )

        if share.category == TRANSPORT:
            if share.percentage > 20:
                tips.append(
                    f"Transport costs ({share.percentage}%) are high. "
                    "Consider carpooling or using public transport more often."
                )
            if limit is not None:
                weekly = share.amount / PER_WEEK[period]
                if weekly * 4 > limit.monthly_limit * 0.8:
                    tips.append(TRANSPORT_APPROACHING)

        if share.percentage > 40 and share.category not in (FOOD, TRANSPORT):
            tips.append(
                f"Your biggest expense category is {share.category} at {share.percentage}% "
                "of spending. Consider ways to reduce this."
            )

    if budget_limits:
        if period == ReportPeriod.MONTHLY and expenses > monthly_budget_total(budget_limits) * 0.9:
            tips.append(
                "You're approaching your monthly budget limits. "
                "Consider adjusting your spending for the rest of the month."
            )

        food_limit = limits.get(FOOD)
        if food_limit is not None and food_limit.daily_limit:
            daily_food = _amount_of(top_categories, FOOD) / PER_DAY[period]
            if daily_food > food_limit.daily_limit:
                tips.append(
                    f"Your daily food spending ({CURRENCY_LABEL} {to_fixed(daily_food)}) exceeds your "
                    f"daily limit ({CURRENCY_LABEL} {format_plain(food_limit.daily_limit)})."
                )

        transport_limit = limits.get(TRANSPORT)
        if transport_limit is not None and transport_limit.monthly_limit:
            monthly_transport = _amount_of(top_categories, TRANSPORT) / PER_MONTH[period]
            if monthly_transport > transport_limit.monthly_limit * 0.8:
                tips.append(TRANSPORT_APPROACHING)
    else:
        tips.append("Set up budget limits to track your spending against financial goals.")

    if income > 0 and expenses > income:
        tips.append(
            "Your expenses currently exceed your income. "
            "Review spending or explore ways to increase income."
        )
    elif income > 0 and expenses > income * 0.9:
        tips.append(
            "Your expenses are close to your income (over 90%). "
            "Keep an eye on spending to maintain a positive balance."
        )

    return tips


def generate_budget_warnings(
    period: str,
    income: float,
    expenses: float,
    top_categories,
    net_balance: float,
) -> List[str]:
    """Harsher, higher-threshold warnings shown on the reports page."""
    warnings: List[str] = []

    if net_balance < 0:
        warnings.append(
            f"Your {period} expenses ({CURRENCY_LABEL} {format_amount(expenses)}) exceed your "
            f"income ({CURRENCY_LABEL} {format_amount(income)}). "
            f"Net difference: {CURRENCY_LABEL} {format_amount(net_balance)}."
        )

    rate = net_balance / income * 100 if income > 0 else 0.0
    if income > 0 and rate < 5:
        warnings.append(
            f"Your savings rate ({to_fixed(rate, 1)}%) is low. Aim for 10-20% or more if possible."
        )

    for share in top_categories:
        if share.category == FOOD and share.percentage > 35:
            warnings.append(
                f"Food expenses ({share.percentage}%) are significantly high. "
                "Consider reviewing your meal planning and grocery shopping habits."
            )
        if share.category == TRANSPORT and share.percentage > 25:
            warnings.append(
                f"Transport costs ({share.percentage}%) are significantly high. "
                "Consider alternative transportation methods or carpooling."
            )
        if share.percentage > 30 and share.category not in (FOOD, TRANSPORT) + HOUSING_CATEGORIES:
            warnings.append(
                f"{share.category} makes up {share.percentage}% of your expenses, "
                "which is unusually high."
            )

    return warnings


def generate_warning_messages(
    today_expenses: float,
    month_expenses: float,
    daily_limit: float,
    monthly_limit: float,
    daily_warning: float,
    monthly_warning: float,
) -> List[str]:
    """Dashboard banners comparing today and this month against total limits."""
    messages: List[str] = []

    if daily_limit > 0:
        if today_expenses >= daily_limit:
            messages.append("You've exceeded your daily budget limit!")
        elif today_expenses >= daily_warning:
            messages.append("You're approaching your daily budget limit!")

    if monthly_limit > 0:
        if month_expenses >= monthly_limit:
            messages.append("You've exceeded your monthly budget limit!")
        elif month_expenses >= monthly_warning:
            messages.append("You're approaching your monthly budget limit!")

    return messages
