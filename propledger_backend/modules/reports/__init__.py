"""Financial, tax and rent roll reports."""

from .routers import router

__all__ = ["router"]
