"""Tenant correspondence: templates and generated letters."""

from .models import (
    Correspondence,
    CorrespondenceStatus,
    CorrespondenceTemplate,
    CorrespondenceType,
)
from .rendering import render_template
from .routers import router

__all__ = [
    "Correspondence",
    "CorrespondenceTemplate",
    "CorrespondenceStatus",
    "CorrespondenceType",
    "render_template",
    "router",
]
