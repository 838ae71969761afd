from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException

from stocks_api.api.deps import StoreDep
from stocks_api.dates import normalize_record
from stocks_api.schemas import DeleteResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_ticker(ticker: str) -> str:
    return ticker.strip().upper()


@router.post("/stocks_history", response_model=MessageResponse)
def insert_history(store: StoreDep, payload: Any = Body(...)) -> Dict[str, Any]:
    """
    Bulk upsert of history records.

    Body is a JSON array of objects. Each object's date is resolved from
    ``date`` (epoch millis), the legacy ``data`` field, or the current time.
    The batch is written atomically.
    """
    if not isinstance(payload, list):
        raise HTTPException(400, "Body must be a JSON array of records")
    if not all(isinstance(item, dict) for item in payload):
        raise HTTPException(400, "Every record must be a JSON object")

    records = [normalize_record(item) for item in payload]
    written = store.upsert_batch(records)
    logger.info("Upserted %d rows from a batch of %d records", written, len(payload))
    return {"message": "Data inserted successfully!"}


@router.get("/stocks_history/{ticker}")
def get_history(ticker: str, store: StoreDep) -> List[Dict[str, Any]]:
    return store.query_by_ticker(normalize_ticker(ticker))


@router.delete("/stocks_history/{ticker}", response_model=DeleteResponse)
def delete_history(ticker: str, store: StoreDep) -> Dict[str, Any]:
    t = normalize_ticker(ticker)
    changes = store.delete_by_ticker(t)
    logger.info("Deleted %d rows for %s", changes, t)
    return {"message": f"History for {t} deleted!", "changes": changes}


@router.delete("/stocks_history", response_model=DeleteResponse)
def delete_all_history(store: StoreDep) -> Dict[str, Any]:
    changes = store.delete_all()
    logger.info("Deleted all history (%d rows)", changes)
    return {"message": "All history deleted!", "changes": changes}
