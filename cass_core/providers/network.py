"""后台网络连通性监测。

NetworkMonitor 在守护线程里定期探测一个 TCP 端点，并更新共享的布尔值。
读取不做额外同步：短暂过期的“已连接”只会多一次失败尝试，
过期的“已断开”只会少一次尝试，下一轮对话会重新读取。
"""

import socket
import threading
from typing import Optional

from cass_core.infrastructure.logging.logger import logger


class NetworkMonitor:
    def __init__(
        self,
        host: str = "8.8.8.8",
        port: int = 53,
        interval: float = 5.0,
        timeout: float = 2.0,
        initially_connected: bool = True,
    ):
        self._host = host
        self._port = port
        self._interval = interval
        self._timeout = timeout
        self._connected = initially_connected
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_settings(cls, cfg) -> "NetworkMonitor":
        return cls(
            host=cfg.connectivity_probe_host,
            port=cfg.connectivity_probe_port,
            interval=cfg.connectivity_probe_interval,
        )

    @property
    def is_connected(self) -> bool:
        return self._connected

    def set_connected(self, value: bool) -> None:
        """更新连通状态，供探测线程或外部路径监听回调调用。"""

        if value != self._connected:
            logger.info(
                "Network status changed",
                extra={"extra": {"status": "Connected" if value else "Disconnected"}},
            )
        self._connected = value

    def probe(self) -> bool:
        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout):
                return True
        except OSError:
            return False

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="cass-network-monitor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=self._timeout + 1.0)
            self._thread = None

    def _run(self) -> None:
        while True:
            self.set_connected(self.probe())
            if self._stop_event.wait(self._interval):
                break
