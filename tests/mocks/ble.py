"""
Mock BLE Components

Fakes for the parts of bleak used by breath_practice.sensor.
"""

from types import SimpleNamespace
from typing import Callable, Dict, List, Optional

from bleak.exc import BleakError


class FakeBleakClient:
    """
    Stand-in for bleak.BleakClient

    Instances register themselves in FakeBleakClient.instances so tests can
    reach the client the monitor created and push notifications into it.

    Usage:
        monkeypatch.setattr(sensor, "BleakClient", FakeBleakClient)
        await monitor.connect()
        FakeBleakClient.instances[-1].notify(bytes([0x00, 72]))
    """

    instances: List["FakeBleakClient"] = []
    fail_connect: Optional[BaseException] = None

    def __init__(self, address: str, timeout: float = 10.0):
        self.address = address
        self.timeout = timeout
        self.is_connected = False
        self.notify_callbacks: Dict[str, Callable] = {}
        self.stopped: List[str] = []
        self.disconnect_calls = 0
        FakeBleakClient.instances.append(self)

    @classmethod
    def reset(cls) -> None:
        cls.instances = []
        cls.fail_connect = None

    async def connect(self) -> None:
        if FakeBleakClient.fail_connect is not None:
            raise FakeBleakClient.fail_connect
        self.is_connected = True

    async def start_notify(self, uuid: str, callback: Callable) -> None:
        if not self.is_connected:
            raise BleakError("not connected")
        self.notify_callbacks[uuid] = callback

    async def stop_notify(self, uuid: str) -> None:
        self.stopped.append(uuid)
        self.notify_callbacks.pop(uuid, None)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.is_connected = False

    def notify(self, data: bytes, uuid: Optional[str] = None) -> None:
        """Deliver a notification to the subscribed callback"""
        if uuid is None:
            uuid = next(iter(self.notify_callbacks))
        self.notify_callbacks[uuid](self, bytearray(data))


def fake_scan_results(*devices):
    """
    Build a BleakScanner.discover(return_adv=True) result

    Args:
        devices: (name, address, rssi) tuples

    Returns:
        Dict mapping address to (device, advertisement data)
    """
    results = {}
    for name, address, rssi in devices:
        device = SimpleNamespace(name=name, address=address)
        adv = SimpleNamespace(local_name=name, rssi=rssi)
        results[address] = (device, adv)
    return results
