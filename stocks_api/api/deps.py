"""Request-scoped dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from stocks_api.db.store import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


StoreDep = Annotated[RecordStore, Depends(get_store)]
