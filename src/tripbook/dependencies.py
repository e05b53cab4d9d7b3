"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from datetime import date
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tripbook.db.session import get_db


def get_today() -> date:
    """The day pricing rules are evaluated against. Overridden in tests."""
    return date.today()


DB = Annotated[AsyncSession, Depends(get_db)]
Today = Annotated[date, Depends(get_today)]
