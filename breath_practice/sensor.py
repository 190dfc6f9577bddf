"""
Breath Practice - Heart-rate sensor feed

Reads the standard Bluetooth LE Heart Rate Service and keeps a smoothed
heart rate and HRV estimate for presenters to show. The breathing state
machine never reads it.
"""

import asyncio
import logging
import struct
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

import numpy as np
from bleak import BleakClient, BleakScanner
from bleak.exc import BleakError

from .constants import (
    HEART_RATE_RANGE,
    HEART_RATE_SMOOTHING,
    HRV_SMOOTHING,
    INITIAL_HEART_RATE,
    INITIAL_HRV,
    MIN_RR_FOR_HRV,
    RR_WINDOW,
)
from .exceptions import (
    ConnectionError,
    SensorError,
    SensorNotFoundError,
    TimeoutError,
)

logger = logging.getLogger(__name__)


# BLE UUIDs
HR_SERVICE_UUID = "0000180d-0000-1000-8000-00805f9b34fb"
HR_MEASUREMENT_UUID = "00002a37-0000-1000-8000-00805f9b34fb"

# Heart Rate Measurement flags
_FLAG_HR_16BIT = 0x01
_FLAG_ENERGY = 0x08
_FLAG_RR = 0x10


@dataclass
class ScanResult:
    """A discovered heart-rate sensor"""
    name: str
    address: str
    rssi: int

    def __str__(self):
        return f"{self.name} ({self.address}) RSSI: {self.rssi}"


@dataclass
class HeartRateMeasurement:
    """One decoded Heart Rate Measurement notification"""
    heart_rate: int
    rr_intervals: List[float]  # milliseconds
    energy_expended: Optional[int] = None


@dataclass(frozen=True)
class HeartRateReading:
    """Smoothed values published to presenters"""
    heart_rate: float    # BPM
    hrv: float           # RMSSD, ms
    variability: float   # relative change of the latest HRV sample
    normalized: float    # heart rate mapped to 0-1


def parse_heart_rate_measurement(data: bytes) -> HeartRateMeasurement:
    """
    Decode a Heart Rate Measurement (0x2A37) payload

    Args:
        data: Raw characteristic value

    Returns:
        Decoded measurement with RR intervals converted to milliseconds

    Raises:
        SensorError: If the payload is truncated
    """
    if len(data) < 2:
        raise SensorError(f"Heart rate measurement too short ({len(data)} bytes)")

    flags = data[0]
    try:
        if flags & _FLAG_HR_16BIT:
            heart_rate = struct.unpack_from("<H", data, 1)[0]
            offset = 3
        else:
            heart_rate = data[1]
            offset = 2

        energy = None
        if flags & _FLAG_ENERGY:
            energy = struct.unpack_from("<H", data, offset)[0]
            offset += 2
    except struct.error as e:
        raise SensorError(f"Malformed heart rate measurement: {e}")

    rr_intervals = []
    if flags & _FLAG_RR:
        while offset + 1 < len(data):
            rr = struct.unpack_from("<H", data, offset)[0]
            rr_intervals.append(rr * 1000 / 1024)
            offset += 2

    return HeartRateMeasurement(
        heart_rate=heart_rate,
        rr_intervals=rr_intervals,
        energy_expended=energy,
    )


class HeartRateFilter:
    """
    Exponential smoothing of heart rate and HRV

    HRV is the RMSSD of the recent RR window; each new RMSSD sample is
    blended into the running value the same way heart rate is.
    """

    def __init__(self, window: int = RR_WINDOW):
        self.heart_rate = INITIAL_HEART_RATE
        self.hrv = INITIAL_HRV
        self.variability = 0.0
        self._rr_intervals: deque = deque(maxlen=window)

    @property
    def rr_count(self) -> int:
        return len(self._rr_intervals)

    def add_heart_rate(self, bpm: float) -> float:
        """Blend a new BPM sample; returns the smoothed heart rate"""
        if bpm <= 0:
            return self.heart_rate
        self.heart_rate = self.heart_rate * HEART_RATE_SMOOTHING + bpm * (1 - HEART_RATE_SMOOTHING)
        return self.heart_rate

    def add_rr_intervals(self, rr_ms: Iterable[float]) -> float:
        """Append RR intervals and refresh HRV once enough are available"""
        self._rr_intervals.extend(rr_ms)
        if len(self._rr_intervals) < MIN_RR_FOR_HRV:
            return self.hrv

        sample = rmssd(self._rr_intervals)
        self.hrv = self.hrv * HRV_SMOOTHING + sample * (1 - HRV_SMOOTHING)
        self.variability = abs(sample - self.hrv) / self.hrv if self.hrv else 0.0
        return self.hrv

    def normalized_heart_rate(self) -> float:
        """Heart rate mapped from 40-180 BPM to 0-1"""
        low, high = HEART_RATE_RANGE
        clamped = min(max(self.heart_rate, low), high)
        return (clamped - low) / (high - low)

    def pulse_interval(self) -> float:
        """Seconds between beats at the smoothed heart rate"""
        return 60.0 / self.heart_rate

    def reading(self) -> HeartRateReading:
        return HeartRateReading(
            heart_rate=self.heart_rate,
            hrv=self.hrv,
            variability=self.variability,
            normalized=self.normalized_heart_rate(),
        )


def rmssd(rr_ms: Iterable[float]) -> float:
    """Root mean square of successive RR differences (ms)"""
    rr = np.asarray(list(rr_ms), dtype=float)
    if rr.size < 2:
        return 0.0
    diffs = np.diff(rr)
    return float(np.sqrt(np.mean(diffs ** 2)))


class HeartRateMonitor:
    """
    BLE heart-rate sensor (chest strap, watch or armband)

    Usage:
        async with HeartRateMonitor() as monitor:
            await asyncio.sleep(10)
            print(monitor.reading.heart_rate)

    Or manually:
        monitor = HeartRateMonitor(address)
        await monitor.connect()
        ...
        await monitor.disconnect()
    """

    def __init__(self, address: Optional[str] = None, hr_filter: Optional[HeartRateFilter] = None):
        """
        Initialize monitor

        Args:
            address: Optional BLE address. If None, will scan for a sensor.
            hr_filter: Smoothing filter (default: a fresh HeartRateFilter)
        """
        self._address = address
        self._client: Optional[BleakClient] = None
        self._connected = False
        self._filter = hr_filter or HeartRateFilter()
        self.on_measurement: Optional[Callable[[HeartRateMeasurement], None]] = None

    @property
    def is_connected(self) -> bool:
        """Check if currently connected"""
        return self._connected and self._client is not None

    @property
    def address(self) -> Optional[str]:
        """Get the sensor address"""
        return self._address

    @property
    def hr_filter(self) -> HeartRateFilter:
        return self._filter

    @property
    def reading(self) -> HeartRateReading:
        """Latest smoothed reading"""
        return self._filter.reading()

    # -------------------------------------------------------------------------
    # Connection Management
    # -------------------------------------------------------------------------

    @staticmethod
    async def scan(timeout: float = 5.0) -> List[ScanResult]:
        """
        Scan for sensors advertising the Heart Rate Service

        Args:
            timeout: Scan duration in seconds

        Returns:
            Discovered sensors, strongest signal first
        """
        devices = []

        discovered = await BleakScanner.discover(
            timeout=timeout,
            return_adv=True,
            service_uuids=[HR_SERVICE_UUID],
        )
        for device, adv in discovered.values():
            devices.append(ScanResult(
                name=device.name or adv.local_name or "Unknown",
                address=device.address,
                rssi=adv.rssi if adv.rssi is not None else -100,
            ))

        return sorted(devices, key=lambda x: x.rssi, reverse=True)

    async def connect(self, timeout: float = 10.0) -> None:
        """
        Connect and subscribe to heart rate notifications

        Args:
            timeout: Connection timeout in seconds

        Raises:
            SensorNotFoundError: If no sensor found during scan
            ConnectionError: If connection fails
            TimeoutError: If the connection attempt times out
        """
        if not self._address:
            devices = await self.scan(timeout=5.0)
            if not devices:
                raise SensorNotFoundError("No heart rate sensor found. Is it worn and awake?")
            self._address = devices[0].address

        try:
            self._client = BleakClient(self._address, timeout=timeout)
            await self._client.connect()
            await self._client.start_notify(HR_MEASUREMENT_UUID, self._handle_notification)
            self._connected = True
            logger.info("Heart rate sensor connected: %s", self._address)
        except BleakError as e:
            self._client = None
            raise ConnectionError(f"Failed to connect: {e}")
        except asyncio.TimeoutError:
            self._client = None
            raise TimeoutError(f"Connection timed out after {timeout}s")

    async def disconnect(self) -> None:
        """Unsubscribe and disconnect"""
        if self._client:
            try:
                if self._client.is_connected:
                    await self._client.stop_notify(HR_MEASUREMENT_UUID)
                await self._client.disconnect()
            except BleakError as e:
                logger.debug("Ignoring disconnect error: %s", e)
            finally:
                self._connected = False
                self._client = None

    async def __aenter__(self):
        """Async context manager entry"""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.disconnect()
        return False

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def _handle_notification(self, sender, data: bytearray) -> None:
        try:
            measurement = parse_heart_rate_measurement(bytes(data))
        except SensorError as e:
            logger.warning("Dropping heart rate notification: %s", e)
            return

        self._filter.add_heart_rate(measurement.heart_rate)
        if measurement.rr_intervals:
            self._filter.add_rr_intervals(measurement.rr_intervals)

        if self.on_measurement:
            try:
                self.on_measurement(measurement)
            except Exception as e:
                logger.error("Measurement callback failed: %s", e)
