"""Tests for SqlRecordStore against a real SQLite file in tmp_path."""

import pytest

from stocks_api.dates import normalize_record
from stocks_api.db.store import StorageError, collapse_duplicates


def rows(*records):
    return [normalize_record(r) for r in records]


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------

class TestUpsertBatch:
    def test_insert(self, store, sample_record):
        n = store.upsert_batch(rows(sample_record()))
        assert n == 1
        history = store.query_by_ticker("PETR4")
        assert len(history) == 1
        assert history[0]["preco_fechamento"] == pytest.approx(37.1)
        assert history[0]["quantidade_negocios"] == 40211

    def test_replace_on_conflict(self, store, sample_record):
        store.upsert_batch(rows(sample_record()))
        store.upsert_batch(rows(sample_record(preco_fechamento=40.0, preco_medio=None)))
        history = store.query_by_ticker("PETR4")
        assert len(history) == 1
        assert history[0]["preco_fechamento"] == pytest.approx(40.0)
        assert history[0]["preco_medio"] is None

    def test_duplicates_in_one_batch_keep_last(self, store, sample_record):
        n = store.upsert_batch(rows(
            sample_record(preco_fechamento=1.0),
            sample_record(preco_fechamento=2.0),
        ))
        assert n == 1
        assert store.query_by_ticker("PETR4")[0]["preco_fechamento"] == pytest.approx(2.0)

    def test_empty_batch(self, store):
        assert store.upsert_batch([]) == 0

    def test_failed_row_rolls_back_batch(self, store, sample_record):
        batch = rows(sample_record(date=1), sample_record(date=2))
        batch.append(dict(batch[0], ticker=None, date=3))
        with pytest.raises(StorageError):
            store.upsert_batch(batch)
        assert store.query_by_ticker("PETR4") == []
        assert store.list_tickers() == []


    def test_out_of_range_integer_raises_storage_error(self, store, sample_record):
        with pytest.raises(StorageError):
            store.upsert_batch(rows(sample_record(date=10**20)))
        assert store.list_tickers() == []


class TestCollapseDuplicates:
    def test_keeps_first_seen_order(self):
        out = collapse_duplicates([
            {"ticker": "A", "date": 1, "v": 1},
            {"ticker": "B", "date": 1, "v": 2},
            {"ticker": "A", "date": 1, "v": 3},
        ])
        assert [(r["ticker"], r["v"]) for r in out] == [("A", 3), ("B", 2)]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

class TestQueryByTicker:
    def test_ordered_by_date(self, store, sample_record):
        store.upsert_batch(rows(
            sample_record(date=300),
            sample_record(date=100),
            sample_record(date=200),
        ))
        assert [r["date"] for r in store.query_by_ticker("PETR4")] == [100, 200, 300]

    def test_dates_are_ints(self, store, sample_record):
        store.upsert_batch(rows(sample_record()))
        assert isinstance(store.query_by_ticker("PETR4")[0]["date"], int)

    def test_unknown_ticker(self, store):
        assert store.query_by_ticker("NOPE") == []


class TestListTickers:
    def test_distinct(self, store, sample_record):
        store.upsert_batch(rows(
            sample_record(ticker="AAA", date=1),
            sample_record(ticker="AAA", date=2),
            sample_record(ticker="AAA", date=3),
            sample_record(ticker="BBB", date=1),
        ))
        assert set(store.list_tickers()) == {"AAA", "BBB"}
        assert len(store.list_tickers()) == 2


# ---------------------------------------------------------------------------
# Deletes
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_by_ticker_is_scoped(self, store, sample_record):
        store.upsert_batch(rows(
            sample_record(ticker="AAA", date=1),
            sample_record(ticker="AAA", date=2),
            sample_record(ticker="BBB", date=1),
        ))
        assert store.delete_by_ticker("AAA") == 2
        assert store.query_by_ticker("AAA") == []
        assert len(store.query_by_ticker("BBB")) == 1

    def test_delete_missing_ticker(self, store):
        assert store.delete_by_ticker("AAA") == 0

    def test_delete_all(self, store, sample_record):
        store.upsert_batch(rows(
            sample_record(ticker="AAA", date=1),
            sample_record(ticker="BBB", date=1),
        ))
        assert store.delete_all() == 2
        assert store.list_tickers() == []
        assert store.query_by_ticker("AAA") == []
        assert store.delete_all() == 0

    def test_ensure_schema_is_repeatable(self, store, sample_record):
        store.upsert_batch(rows(sample_record()))
        store.ensure_schema()
        assert len(store.query_by_ticker("PETR4")) == 1
