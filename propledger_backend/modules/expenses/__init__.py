"""Property expenses."""

from .models import Expense, ExpenseCategory
from .routers import router

__all__ = ["Expense", "ExpenseCategory", "router"]
