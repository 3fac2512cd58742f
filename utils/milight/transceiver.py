"""Transceiver backends carrying MiLight frames to and from the air.

The bridge never modulates frames itself. A backend either loops frames back
in-process (``MemoryTransceiver``) or hands them to an external radio daemon
over UDP (``UdpTransceiver``). Both feed received frames into bounded per-type
queues that capture requests wait on.
"""

from __future__ import annotations

import queue
import socket
import threading

from utils.constants import INBOUND_QUEUE_SIZE
from utils.logging import get_logger
from utils.milight.radio import RADIO_CONFIGS, RadioConfig, RadioType

logger = get_logger('milight.transceiver')

# Type byte prefixed to every datagram exchanged with the radio daemon
_WIRE_TYPE_CODES = {
    RadioType.RGBW: 0x00,
    RadioType.CCT: 0x01,
}
_WIRE_TYPES_BY_CODE = {code: radio_type for radio_type, code in _WIRE_TYPE_CODES.items()}


class Transceiver:
    """Base transceiver with per-type inbound frame queues."""

    name = 'base'

    def __init__(self, queue_size: int = INBOUND_QUEUE_SIZE):
        self._inbound: dict[RadioType, queue.Queue] = {
            radio_type: queue.Queue(maxsize=queue_size) for radio_type in RADIO_CONFIGS
        }

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def write(self, config: RadioConfig, frame: bytes) -> None:
        raise NotImplementedError

    def receive(self, config: RadioConfig, frame: bytes) -> None:
        """Deliver an inbound frame, dropping the oldest one when full."""
        if len(frame) != config.packet_length:
            logger.debug(
                f"Dropping {len(frame)} byte frame for {config.type.value}, "
                f"expected {config.packet_length}"
            )
            return

        inbound = self._inbound[config.type]
        try:
            inbound.put_nowait(bytes(frame))
        except queue.Full:
            try:
                inbound.get_nowait()
                inbound.put_nowait(bytes(frame))
            except (queue.Empty, queue.Full):
                pass

    def available(self, radio_type: RadioType) -> bool:
        inbound = self._inbound.get(radio_type)
        return inbound is not None and not inbound.empty()

    def next_frame(self, radio_type: RadioType, timeout: float | None = None) -> bytes | None:
        """Pop the next inbound frame, waiting up to ``timeout`` seconds."""
        inbound = self._inbound.get(radio_type)
        if inbound is None:
            return None
        try:
            if timeout is None or timeout <= 0:
                return inbound.get_nowait()
            return inbound.get(timeout=timeout)
        except queue.Empty:
            return None

    def get_status(self) -> dict:
        return {
            'backend': self.name,
            'pending': {
                radio_type.value: inbound.qsize() for radio_type, inbound in self._inbound.items()
            },
        }


class MemoryTransceiver(Transceiver):
    """In-process transceiver that records every frame written."""

    name = 'memory'

    def __init__(self, queue_size: int = INBOUND_QUEUE_SIZE, loopback: bool = False):
        super().__init__(queue_size=queue_size)
        self.loopback = loopback
        self.sent: list[tuple[RadioType, bytes]] = []
        self._sent_lock = threading.Lock()

    def write(self, config: RadioConfig, frame: bytes) -> None:
        with self._sent_lock:
            self.sent.append((config.type, bytes(frame)))
        if self.loopback:
            self.receive(config, frame)


class UdpTransceiver(Transceiver):
    """Exchanges frames with an external radio daemon over UDP.

    Outbound datagrams are ``[type byte][frame]``. Inbound datagrams in the
    same format are read by a background thread and queued per type.
    """

    name = 'udp'

    def __init__(
        self,
        radio_host: str,
        radio_port: int,
        listen_port: int,
        queue_size: int = INBOUND_QUEUE_SIZE,
    ):
        super().__init__(queue_size=queue_size)
        self._radio_addr = (radio_host, radio_port)
        self._listen_port = listen_port
        self._sock: socket.socket | None = None
        self._rx_thread: threading.Thread | None = None
        self._running = False
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(('', self._listen_port))
            sock.settimeout(1.0)
            self._sock = sock
            self._running = True
            self._rx_thread = threading.Thread(
                target=self._receive_loop, name='milight-udp-rx', daemon=True,
            )
            self._rx_thread.start()
        logger.info(
            f"UDP transceiver listening on :{self._listen_port}, "
            f"radio at {self._radio_addr[0]}:{self._radio_addr[1]}"
        )

    def stop(self) -> None:
        with self._lock:
            self._running = False
            rx_thread = self._rx_thread
            self._rx_thread = None
        if rx_thread and rx_thread.is_alive():
            rx_thread.join(timeout=1.5)
        with self._lock:
            if self._sock:
                try:
                    self._sock.close()
                except OSError:
                    pass
                self._sock = None

    def write(self, config: RadioConfig, frame: bytes) -> None:
        sock = self._sock
        if sock is None:
            logger.warning("UDP transceiver not started, frame dropped")
            return
        datagram = bytes([_WIRE_TYPE_CODES[config.type]]) + bytes(frame)
        try:
            sock.sendto(datagram, self._radio_addr)
        except OSError as e:
            logger.error(f"Failed to send frame to radio daemon: {e}")

    def _receive_loop(self) -> None:
        while self._running:
            sock = self._sock
            if sock is None:
                break
            try:
                datagram, _ = sock.recvfrom(512)
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"UDP receive error: {e}")
                break
            self._handle_datagram(datagram)

    def _handle_datagram(self, datagram: bytes) -> None:
        if len(datagram) < 2:
            return
        radio_type = _WIRE_TYPES_BY_CODE.get(datagram[0])
        if radio_type is None:
            logger.debug(f"Ignoring datagram with unknown type byte {datagram[0]:02X}")
            return
        self.receive(RADIO_CONFIGS[radio_type], datagram[1:])
