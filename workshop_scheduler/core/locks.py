# workshop_scheduler/core/locks.py
"""Exclusão mútua por (oficina, dia) para a criação de agendamentos."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterator, Tuple

DayKey = Tuple[int, date]


class DayLockRegistry:
    """
    Um lock por (workshop_id, dia). Dois pedidos para o mesmo dia da mesma
    oficina rodam em série; dias ou oficinas diferentes não se bloqueiam.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[DayKey, threading.Lock] = {}
        self._waiters: Dict[DayKey, int] = {}

    @contextmanager
    def hold(self, workshop_id: int, day: date) -> Iterator[None]:
        key = (workshop_id, day)
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[key] -= 1
                # Remove locks sem ninguém esperando para o dicionário não crescer
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
