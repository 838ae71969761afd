from __future__ import annotations

from typing import List

from fastapi import APIRouter

from stocks_api.api.deps import StoreDep

router = APIRouter()


@router.get("/tickers")
def list_tickers(store: StoreDep) -> List[str]:
    return store.list_tickers()
