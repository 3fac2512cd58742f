"""Resend counts per category of radio operation.

Counts are handed to each transmit call rather than set on the client, so the
client's baseline is never mutated while a request is being dispatched.
"""

from __future__ import annotations

from dataclasses import dataclass

import config
from utils.constants import DEFAULT_RESEND_COUNT


@dataclass(frozen=True)
class TransmissionPolicy:
    baseline: int = config.PACKET_REPEATS
    group_repeat_factor: int = config.HTTP_REPEAT_FACTOR
    default_count: int = DEFAULT_RESEND_COUNT

    def __post_init__(self) -> None:
        for name in ('baseline', 'group_repeat_factor', 'default_count'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f'{name} must be a positive integer, got {value!r}')

    @property
    def group_repeats(self) -> int:
        """Count for per-group commands sent over HTTP."""
        return self.baseline * self.group_repeat_factor

    @property
    def gateway_repeats(self) -> int:
        """Gateway-wide on/off ignores the configured baseline."""
        return self.default_count

    @property
    def cct_step_repeats(self) -> int:
        # Stepped CCT commands overshoot when repeated heavily
        return self.default_count
