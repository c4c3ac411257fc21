"""Bounded traffic history for the tracked network interface."""

import logging
from collections import deque

logger = logging.getLogger(__name__)


class NetworkHistory:
    """
    Time series of cumulative counters and per-interval rates.

    Tracks one interface at a time. Totals and rates are kept in deques
    bounded by ``max_history``; the oldest sample is evicted first.
    A decrease in either counter is treated as a reset (wraparound): the
    sample is dropped and the next rate is measured from the reset value.
    """

    def __init__(self, max_history: int = 60) -> None:
        """
        Initialize an empty NetworkHistory.

        Args:
            max_history: Samples retained per series. At the default 2s
                refresh cadence, 60 samples cover two minutes.
        """
        self.max_history = max_history
        self.rx_history: deque[int] = deque(maxlen=max_history)
        self.tx_history: deque[int] = deque(maxlen=max_history)
        self.rx_rates: deque[int] = deque(maxlen=max_history)
        self.tx_rates: deque[int] = deque(maxlen=max_history)
        self.last_rx_bytes = 0
        self.last_tx_bytes = 0
        self.counter_wrapped = False
        self.current_interface = ""

    def select_interface(self, name: str) -> None:
        """Track ``name``, discarding history if it differs from the current one."""
        if name != self.current_interface:
            self.clear()
            self.current_interface = name

    def ingest(self, rx: int, tx: int) -> None:
        """Record one sample of cumulative received/transmitted byte counts."""
        if rx < self.last_rx_bytes or tx < self.last_tx_bytes:
            logger.debug(
                "Counter reset on %s: rx %d -> %d, tx %d -> %d",
                self.current_interface or "<none>",
                self.last_rx_bytes,
                rx,
                self.last_tx_bytes,
                tx,
            )
            self.counter_wrapped = True
            self.last_rx_bytes = rx
            self.last_tx_bytes = tx
            return

        # After a reset the baseline is the post-reset value
        if self.last_rx_bytes > 0 and self.last_tx_bytes > 0:
            self.rx_rates.append(rx - self.last_rx_bytes)
            self.tx_rates.append(tx - self.last_tx_bytes)

        self.rx_history.append(rx)
        self.tx_history.append(tx)

        self.last_rx_bytes = rx
        self.last_tx_bytes = tx
        self.counter_wrapped = False

    def clear(self) -> None:
        """Drop all samples and forget the last-seen counters."""
        self.rx_history.clear()
        self.tx_history.clear()
        self.rx_rates.clear()
        self.tx_rates.clear()
        self.last_rx_bytes = 0
        self.last_tx_bytes = 0
        self.counter_wrapped = False

    def latest_rates(self) -> tuple[int, int]:
        """Most recent (rx, tx) rate, or zeros before the first interval."""
        if not self.rx_rates:
            return 0, 0
        return self.rx_rates[-1], self.tx_rates[-1]
