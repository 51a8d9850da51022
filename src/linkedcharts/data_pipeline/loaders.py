"""Dataset loading for the example dashboards.

Loaders return plain ``pandas.DataFrame`` objects and raise
:class:`DatasetLoadError` for any failure, so the dashboard can show a
failure state instead of crashing the session.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
import yfinance as yf
from sklearn.datasets import load_breast_cancer

from linkedcharts.config.config import (
    CANCER_CLASS_FIELD,
    CANCER_CLASSES,
    STOCK_FETCH_ATTEMPTS,
    STOCK_FETCH_DELAY_S,
    STOCK_FIELDS,
)
from linkedcharts.utils.decorators import retry, timer
from linkedcharts.utils.io import ensure_dir
from linkedcharts.utils.logging import get_logger

logger = get_logger(__name__)

STOCK_COLUMNS: List[str] = ["Date", "Ticker", *STOCK_FIELDS]


class DatasetLoadError(Exception):
    """A dataset could not be obtained (missing file, bad schema, network failure)."""


# ----- Breast cancer -------------------------------------------------------

@timer
def load_breast_cancer_dataset(csv_path: Optional[str | Path] = None) -> pd.DataFrame:
    """Load the Wisconsin diagnostic breast cancer data.

    Without ``csv_path`` the copy bundled with scikit-learn is used. A CSV
    must hold numeric feature columns and either a ``Class`` column with
    ``malignant``/``benign`` labels or a 0/1 ``target`` column
    (0 = malignant, as in scikit-learn).
    """
    if csv_path is None:
        bunch = load_breast_cancer(as_frame=True)
        frame = bunch.frame.copy()
        frame[CANCER_CLASS_FIELD] = [bunch.target_names[t] for t in frame.pop("target")]
        logger.info(f"Loaded bundled breast cancer data: {len(frame)} records")
        return frame

    try:
        frame = pd.read_csv(csv_path)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DatasetLoadError(f"cannot read breast cancer CSV {csv_path}: {e}") from e

    if CANCER_CLASS_FIELD not in frame.columns:
        if "target" not in frame.columns:
            raise DatasetLoadError(
                f"{csv_path}: expected a {CANCER_CLASS_FIELD!r} or 'target' column"
            )
        try:
            frame[CANCER_CLASS_FIELD] = [CANCER_CLASSES[int(t)] for t in frame.pop("target")]
        except (ValueError, IndexError) as e:
            raise DatasetLoadError(f"{csv_path}: 'target' must be 0 or 1") from e

    unknown = set(frame[CANCER_CLASS_FIELD].unique()) - set(CANCER_CLASSES)
    if unknown:
        raise DatasetLoadError(f"{csv_path}: unexpected class labels {sorted(map(str, unknown))}")

    logger.info(f"Loaded breast cancer data from {csv_path}: {len(frame)} records")
    return frame


def feature_columns(frame: pd.DataFrame, exclude: Sequence[str] = (CANCER_CLASS_FIELD,)) -> List[str]:
    """Numeric columns usable as chart axes."""
    return [
        c for c in frame.columns
        if c not in exclude and pd.api.types.is_numeric_dtype(frame[c])
    ]


# ----- Stock prices ---------------------------------------------------------

class _EmptyDownload(RuntimeError):
    pass


@retry(max_attempts=STOCK_FETCH_ATTEMPTS, delay=STOCK_FETCH_DELAY_S)
def _download_prices(tickers: Sequence[str], start: str, end: str) -> pd.DataFrame:
    raw = yf.download(
        list(tickers),
        start=start,
        end=end,
        auto_adjust=False,
        progress=False,
        threads=False,
    )
    if raw is None or raw.empty:
        raise _EmptyDownload(f"Yahoo returned no rows for {list(tickers)}")
    return raw


def _to_long(raw: pd.DataFrame, tickers: Sequence[str]) -> pd.DataFrame:
    """Reshape a yfinance download (wide, one column block per ticker) to long format."""
    if isinstance(raw.columns, pd.MultiIndex):
        names = list(raw.columns.names)
        level = names.index("Ticker") if "Ticker" in names else 1
        frames = []
        for ticker in raw.columns.get_level_values(level).unique():
            sub = raw.xs(ticker, axis=1, level=level).copy()
            sub["Ticker"] = ticker
            frames.append(sub)
        long = pd.concat(frames)
    else:
        long = raw.copy()
        long["Ticker"] = tickers[0]
    long.columns.name = None
    return long.rename_axis("Date").reset_index()


def _normalise_prices(
    frame: pd.DataFrame,
    tickers: Sequence[str],
    start: Optional[str],
    end: Optional[str],
    origin: str,
) -> pd.DataFrame:
    missing = [c for c in STOCK_COLUMNS if c not in frame.columns]
    if missing:
        raise DatasetLoadError(f"{origin}: missing column(s) {missing}")

    frame = frame[STOCK_COLUMNS].copy()
    try:
        dates = pd.to_datetime(frame["Date"])
    except (ValueError, TypeError) as e:
        raise DatasetLoadError(f"{origin}: unreadable 'Date' values: {e}") from e
    if dates.dt.tz is not None:
        dates = dates.dt.tz_localize(None)
    frame["Date"] = dates
    frame = frame[frame["Ticker"].isin(list(tickers))]
    if start is not None:
        frame = frame[frame["Date"] >= pd.Timestamp(start)]
    if end is not None:
        frame = frame[frame["Date"] <= pd.Timestamp(end)]
    frame = frame.dropna(subset=["Close"])
    if frame.empty:
        raise DatasetLoadError(f"{origin}: no prices for {list(tickers)} between {start} and {end}")

    order = {t: i for i, t in enumerate(tickers)}
    frame = frame.sort_values(
        ["Ticker", "Date"], key=lambda s: s.map(order) if s.name == "Ticker" else s, kind="stable"
    )
    return frame.reset_index(drop=True)


def _cache_file(cache_dir: str | Path, tickers: Sequence[str], start: str, end: str) -> Path:
    digest = hashlib.sha1(f"{','.join(tickers)}|{start}|{end}".encode()).hexdigest()[:12]
    return Path(cache_dir) / f"prices_{digest}.csv"


@timer
def load_stock_prices(
    tickers: Sequence[str],
    start: str,
    end: str,
    *,
    csv_path: Optional[str | Path] = None,
    cache_dir: Optional[str | Path] = None,
) -> pd.DataFrame:
    """Daily prices for ``tickers`` in long format (``Date, Ticker, Open ... Volume``).

    ``csv_path`` (a local path or URL) replaces the Yahoo download. With
    ``cache_dir`` set, successful downloads are written there and reused.
    """
    tickers = list(dict.fromkeys(tickers))
    if not tickers:
        raise DatasetLoadError("no tickers requested")

    if csv_path is not None:
        try:
            frame = pd.read_csv(csv_path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise DatasetLoadError(f"cannot read price CSV {csv_path}: {e}") from e
        frame = _normalise_prices(frame, tickers, start, end, str(csv_path))
        logger.info(f"Loaded {len(frame)} price rows from {csv_path}")
        return frame

    cache = _cache_file(cache_dir, tickers, start, end) if cache_dir else None
    if cache is not None and cache.exists():
        try:
            frame = _normalise_prices(pd.read_csv(cache), tickers, start, end, str(cache))
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError, DatasetLoadError) as e:
            logger.warning(f"Discarding unusable price cache {cache}: {e}")
            cache.unlink(missing_ok=True)
        else:
            logger.info(f"Loaded {len(frame)} cached price rows from {cache}")
            return frame

    try:
        raw = _download_prices(tickers, start, end)
    except Exception as e:
        raise DatasetLoadError(f"price download failed for {tickers}: {e}") from e

    frame = _normalise_prices(_to_long(raw, tickers), tickers, start, end, "Yahoo")
    if cache is not None:
        ensure_dir(cache.parent)
        frame.to_csv(cache, index=False)
    logger.info(f"Downloaded {len(frame)} price rows for {tickers}")
    return frame
