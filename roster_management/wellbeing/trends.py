"""
Trend views over check-in history for the burnout monitor and team pulse.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from .models import CheckIn


HISTORY_COLUMNS = ['staff_id', 'timestamp', 'date', 'phase', 'phase_rank', 'energy', 'note']
TREND_LIMIT = 14


def history_frame(checkins: Iterable[CheckIn]) -> pd.DataFrame:
    """Check-ins as a DataFrame sorted by timestamp."""
    records = [
        {
            'staff_id': c.staff_id,
            'timestamp': c.timestamp,
            'date': c.timestamp.date().isoformat(),
            'phase': c.phase.value,
            'phase_rank': c.phase.rank,
            'energy': c.energy,
            'note': c.note
        }
        for c in sorted(checkins, key=lambda c: c.timestamp)
    ]
    return pd.DataFrame(records, columns=HISTORY_COLUMNS)


def recent_trend(checkins: Iterable[CheckIn], limit: int = TREND_LIMIT) -> pd.DataFrame:
    """The most recent ``limit`` check-ins, oldest first."""
    return history_frame(checkins).tail(limit).reset_index(drop=True)


def risk_level(energy: Optional[float]) -> Optional[str]:
    """
    Band used by the burnout monitor: 'ok' above 79, 'watch' above 49,
    'alert' otherwise, None when there is no reading.
    """
    if energy is None or (isinstance(energy, float) and np.isnan(energy)):
        return None
    if energy > 79:
        return 'ok'
    if energy > 49:
        return 'watch'
    return 'alert'


def _window(end_date: date, days: int) -> List[str]:
    if days < 1:
        raise ValueError("days must be at least 1")
    return [(end_date - timedelta(days=offset)).isoformat() for offset in range(days - 1, -1, -1)]


def burnout_grid(histories: Dict[str, List[CheckIn]],
                 end_date: date,
                 days: int = 7) -> pd.DataFrame:
    """
    Latest energy per staff member per day for the ``days`` ending at ``end_date``.

    Args:
        histories: Check-ins keyed by staff id
        end_date: Last day of the window (inclusive)
        days: Window length

    Returns:
        DataFrame indexed by staff id with one ISO-date column per day; days
        without a check-in are NaN
    """
    window = _window(end_date, days)
    staff_ids = sorted(histories)
    frame = history_frame(c for checkins in histories.values() for c in checkins)
    frame = frame[frame['date'].isin(window)]

    if frame.empty:
        return pd.DataFrame(np.nan, index=pd.Index(staff_ids, name='staff_id'), columns=window)

    grid = frame.groupby(['staff_id', 'date'])['energy'].last().unstack('date')
    grid = grid.reindex(index=staff_ids, columns=window).astype(float)
    grid.index.name = 'staff_id'
    grid.columns.name = None
    return grid


def team_pulse(histories: Dict[str, List[CheckIn]]) -> pd.DataFrame:
    """Mean energy and number of check-ins per day across all staff."""
    frame = history_frame(c for checkins in histories.values() for c in checkins)
    if frame.empty:
        return pd.DataFrame(columns=['date', 'mean_energy', 'checkins'])
    pulse = frame.groupby('date').agg(
        mean_energy=('energy', 'mean'),
        checkins=('energy', 'size')
    ).reset_index()
    return pulse
