# wx_simulation/forecast.py
"""
Synthetic daily forecasts for a geographic point.

Temperature = 60F + seasonal sinusoid * climate amplitude - latitude cooling + noise.
All noise comes from a stream keyed by (point, start date, day offset), so a
forecast never depends on wall-clock time.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Iterator, Sequence, Tuple, Union

import pandas as pd

from .geo import GeoPoint
from .meteorology import dew_point_f, hdd, vpd
from .rng import hash_string, stream_for

logger = logging.getLogger(__name__)

TEMP_AMPLITUDE = {
    "desert": 24.0,
    "mountain": 22.0,
    "mediterranean": 18.0,
    "marine_west": 15.0,
    "humid_subtropical": 20.0,
}
DEFAULT_TEMP_AMPLITUDE = 21.0

RH_BIAS = {"desert": -15.0, "humid_subtropical": 15.0, "marine_west": 8.0}

HEAVY_PRECIP_IN = 0.4
PRECIP_TYPE_IN = 0.2


@dataclass(frozen=True)
class DailyForecast:
    date: date
    temp_f: float
    rh_pct: float
    precip_in: float
    wind_mph: float
    gust_mph: float
    condition: str
    precip_type: str
    dew_point_f: float
    vpd_kpa: float
    hdd: float
    cloud_cover: float
    uv_index: float
    pressure_hpa: float
    visibility_mi: float
    pop: float
    sunrise: datetime
    sunset: datetime


@dataclass(frozen=True)
class Forecast(Sequence[DailyForecast]):
    point: GeoPoint
    start: date
    days: Tuple[DailyForecast, ...]

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self) -> Iterator[DailyForecast]:
        return iter(self.days)

    def __getitem__(self, index):
        return self.days[index]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(day) for day in self.days], columns=FORECAST_COLUMNS)


FORECAST_COLUMNS = [
    "date", "temp_f", "rh_pct", "precip_in", "wind_mph", "gust_mph", "condition",
    "precip_type", "dew_point_f", "vpd_kpa", "hdd", "cloud_cover", "uv_index",
    "pressure_hpa", "visibility_mi", "pop", "sunrise", "sunset",
]


def _precip_bias(climate: str, doy: int) -> float:
    if climate == "desert":
        return -0.3
    if climate == "humid_subtropical":
        return 0.2
    if climate == "marine_west":
        return 0.15
    if climate == "mediterranean":
        # wet winters, dry summers
        return 0.2 if (doy > 270 or doy < 90) else -0.2
    return 0.0


def _wind_bias(climate: str, region: str) -> float:
    if climate == "mountain":
        return 5.0
    if region == "MIDWEST":
        return 3.0
    return 0.0


def _clock(day: date, hour: float) -> datetime:
    whole = math.floor(hour)
    minutes = math.floor((hour % 1) * 60)
    return datetime(day.year, day.month, day.day, whole, minutes)


def _base_seed(point: GeoPoint, start: date) -> int:
    coastal = "true" if point.coastal else "false"
    return hash_string(
        f"{point.lat:.2f}:{point.lng:.2f}:{start.isoformat()}:"
        f"{point.region}:{point.climate}:{coastal}"
    )


def generate_forecast(
    point: GeoPoint,
    start: Union[date, datetime],
    day_count: int,
) -> Forecast:
    """
    Generate a multi-day synthetic forecast.

    Args:
        point: Location, climate archetype and region of the forecast
        start: First forecast day (a datetime is truncated to its date)
        day_count: Number of consecutive days

    Returns:
        Forecast with one DailyForecast per day
    """
    if day_count < 0:
        raise ValueError(f"day_count must be non-negative, got {day_count}")
    if isinstance(start, datetime):
        start = start.date()

    base_seed = _base_seed(point, start)
    doy_start = start.timetuple().tm_yday
    temp_amp = TEMP_AMPLITUDE.get(point.climate, DEFAULT_TEMP_AMPLITUDE)
    rh_bias = RH_BIAS.get(point.climate, 0.0)
    precip_bias = _precip_bias(point.climate, doy_start)
    wind_bias = _wind_bias(point.climate, point.region)
    lat_adj = (50 - min(50.0, max(20.0, abs(point.lat)))) * 0.2  # cooler at higher lat

    days = []
    for i in range(day_count):
        day = start + timedelta(days=i)
        rnd = stream_for(f"{base_seed}-{i}")
        phase = math.sin(2 * math.pi * (doy_start + i) / 365)

        temp_f = 60 + phase * temp_amp - lat_adj + rnd.jitter(8)
        rh_pct = max(15.0, min(98.0, 55 + rh_bias + rnd.jitter(25) - phase * 8))
        precip_in = rnd() * 0.9 if rnd() > (0.75 - precip_bias) else 0.0
        wind_mph = max(0.0, 5 + wind_bias + rnd.jitter(10))
        cloud_cover = max(0.0, min(1.0, 0.5 + rnd.jitter(0.8)))
        uv_index = max(0.0, min(11.0, 7 + phase * 3 + rnd.jitter(2)))
        pressure_hpa = 1013 + rnd.jitter(20)
        visibility_mi = max(1.0, 10 + rnd.jitter(4) - precip_in * 6)
        gust_mph = max(wind_mph, wind_mph + abs(rnd() - 0.5) * 8)
        if precip_in > 0:
            pop = 0.6 + rnd.jitter(0.2)
        else:
            pop = 0.2 + rnd.jitter(0.2)
        pop = max(0.0, min(1.0, pop))

        if precip_in > PRECIP_TYPE_IN:
            precip_type = "Snow" if temp_f < 32 else "Rain"
        else:
            precip_type = ""

        if precip_in > HEAVY_PRECIP_IN and temp_f < 32:
            condition = "Snow"
        elif precip_in > HEAVY_PRECIP_IN:
            condition = "Rain"
        elif cloud_cover > 0.7:
            condition = "Cloudy"
        elif wind_mph > 22:
            condition = "Windy"
        else:
            condition = "Partly Cloudy" if rnd() > 0.5 else "Clear"

        # crude day-length approximation
        day_len = 12 + 4 * math.sin(2 * math.pi * (doy_start + i - 80) / 365) * math.cos(
            math.radians(abs(point.lat))
        )
        sunrise_hour = max(5.0, 12 - day_len / 2)
        sunset_hour = min(21.0, 12 + day_len / 2)

        days.append(
            DailyForecast(
                date=day,
                temp_f=temp_f,
                rh_pct=rh_pct,
                precip_in=precip_in,
                wind_mph=wind_mph,
                gust_mph=gust_mph,
                condition=condition,
                precip_type=precip_type,
                dew_point_f=float(dew_point_f(temp_f, rh_pct)),
                vpd_kpa=float(vpd(temp_f, rh_pct)),
                hdd=float(hdd(temp_f)),
                cloud_cover=cloud_cover,
                uv_index=uv_index,
                pressure_hpa=pressure_hpa,
                visibility_mi=visibility_mi,
                pop=pop,
                sunrise=_clock(day, sunrise_hour),
                sunset=_clock(day, sunset_hour),
            )
        )

    logger.debug(f"Generated {day_count}-day forecast for {point.lat:.2f},{point.lng:.2f}")
    return Forecast(point=point, start=start, days=tuple(days))


__all__ = ["DailyForecast", "FORECAST_COLUMNS", "Forecast", "generate_forecast"]
