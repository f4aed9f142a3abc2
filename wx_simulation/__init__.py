"""
Weather Simulation Module

Deterministic geography and synthetic weather for the demo platform.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .export import EXPORT_FORMATS, write_frame
from .forecast import DailyForecast, Forecast, generate_forecast
from .geo import (
    Cell,
    GeoPoint,
    Metro,
    USState,
    cells_for_metro,
    derive_states,
    metros_for_state,
    resolve_point,
    state_by_code,
)
from .rng import SeededStream, hash_string, stream_for

logger = logging.getLogger(__name__)


class SimulationGenerator:
    """Convenience facade producing forecast and geography DataFrames."""

    def __init__(self, forecast_days: int = 7):
        """
        Initialize the simulation generator.

        Args:
            forecast_days: Default number of days per generated forecast
        """
        if forecast_days < 1:
            raise ValueError(f"forecast_days must be at least 1, got {forecast_days}")
        self.forecast_days = forecast_days

        logger.info("SimulationGenerator initialized")

    def generate_forecast_frame(
        self,
        state_code: str,
        start_date: Union[str, date],
        days: Optional[int] = None,
        metro_id: Optional[str] = None,
        cell_id: Optional[str] = None,
    ) -> pd.DataFrame:
        """
        Generate a synthetic forecast for a place in the geo hierarchy.

        Args:
            state_code: Two-letter state code
            start_date: Start date in YYYY-MM-DD format or a date
            days: Number of forecast days (defaults to forecast_days)
            metro_id: Optional metro within the state
            cell_id: Optional cell within the metro

        Returns:
            DataFrame with one row per forecast day
        """
        if isinstance(start_date, str):
            start_date = date.fromisoformat(start_date)
        point = resolve_point(state_code, metro_id=metro_id, cell_id=cell_id)
        forecast = generate_forecast(point, start_date, days or self.forecast_days)
        df = forecast.to_frame()
        geo_id = cell_id or metro_id or state_code
        df.insert(0, "geo_id", geo_id)

        logger.info(f"Generated forecast with {len(df)} days for {geo_id}")
        return df

    def generate_geography_frame(self, level: str = "state") -> pd.DataFrame:
        """
        Flatten the geographic hierarchy down to the requested level.

        Args:
            level: 'state', 'metro' or 'cell'

        Returns:
            DataFrame with one row per entity at that level
        """
        if level not in ("state", "metro", "cell"):
            raise ValueError(f"Unsupported level: {level}")

        rows = []
        for state in derive_states():
            if level == "state":
                rows.append(
                    {
                        "id": state.code,
                        "name": state.name,
                        "lat": state.lat,
                        "lng": state.lng,
                        "region": state.region,
                        "climate": state.climate,
                        "coastal": state.coastal,
                    }
                )
                continue
            for metro in metros_for_state(state):
                if level == "metro":
                    rows.append(
                        {
                            "id": metro.id,
                            "parent_id": state.code,
                            "name": metro.name,
                            "lat": metro.lat,
                            "lng": metro.lng,
                            "tags": ",".join(metro.tags),
                        }
                    )
                    continue
                for cell in cells_for_metro(metro):
                    rows.append(
                        {
                            "id": cell.id,
                            "parent_id": metro.id,
                            "lat": cell.lat,
                            "lng": cell.lng,
                            "tags": ",".join(cell.tags),
                        }
                    )

        df = pd.DataFrame(rows)
        logger.info(f"Generated {len(df)} {level} rows")
        return df

    def export_data(self, data: pd.DataFrame, filepath: str, format: str = "csv") -> Path:
        """
        Write a generated frame to disk.

        Args:
            data: Forecast or geography frame
            filepath: Destination file
            format: One of EXPORT_FORMATS

        Returns:
            Path of the written file
        """
        path = write_frame(data, filepath, format)
        logger.info(f"Wrote {len(data)} rows to {path} ({format})")
        return path


__all__ = [
    "Cell",
    "DailyForecast",
    "EXPORT_FORMATS",
    "Forecast",
    "GeoPoint",
    "Metro",
    "SeededStream",
    "SimulationGenerator",
    "USState",
    "cells_for_metro",
    "derive_states",
    "generate_forecast",
    "hash_string",
    "metros_for_state",
    "resolve_point",
    "state_by_code",
    "stream_for",
    "write_frame",
]
