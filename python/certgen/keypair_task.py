"""Cancellable background key pair generation.

Idle --start()--> Running --> Completed | Failed | Cancelled

Generation runs on a low-priority daemon thread. The terminal outcome is
delivered exactly once through a concurrent.futures.Future, after the provider
call has returned. Cancellation is cooperative: the provider may observe the
cancel event, otherwise it takes effect when the provider call returns.
"""

from __future__ import annotations

import asyncio
import os
import sys
import threading
from concurrent.futures import Future
from enum import Enum
from typing import Callable, NamedTuple, Optional

from common.errors import GenerationInterrupted, InvalidTaskState, KeyGenerationFailure
from common.logger import get_logger
from provider.base_provider import BaseCryptoProvider
from provider.cryptography_provider import CryptographyProvider
from provider.types import KeyPair, KeyType

LOWEST_THREAD_NICENESS = 19
THREAD_NAME = "keypair-generator"


class TaskState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    FAILED = "Failed"

    @property
    def terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.CANCELLED, TaskState.FAILED)


class KeyPairOutcome(NamedTuple):
    state: TaskState
    key_pair: Optional[KeyPair] = None
    error: Optional[KeyGenerationFailure] = None


def _lower_thread_priority() -> None:
    """Best effort: on Linux, setpriority on a thread id renices only that thread."""
    if not sys.platform.startswith("linux"):
        return
    try:
        os.setpriority(os.PRIO_PROCESS, threading.get_native_id(), LOWEST_THREAD_NICENESS)
    except OSError as exc:
        get_logger(__name__).debug("keypair task: could not lower thread priority: %s", exc)


class KeyPairGenerationTask:
    def __init__(
        self,
        key_type: KeyType,
        key_size: int,
        provider: Optional[BaseCryptoProvider] = None,
    ):
        if isinstance(key_size, bool) or not isinstance(key_size, int) or key_size < 1:
            raise ValueError(f"Key size must be a positive integer, got {key_size!r}")
        self.key_type = KeyType(key_type)
        self.key_size = key_size
        self.provider: BaseCryptoProvider = provider or CryptographyProvider()

        self._lock = threading.Lock()
        self._state = TaskState.IDLE
        self._cancel_event = threading.Event()
        self._future: "Future[KeyPairOutcome]" = Future()
        self._thread: Optional[threading.Thread] = None

    def state(self) -> TaskState:
        with self._lock:
            return self._state

    def start(self) -> "KeyPairGenerationTask":
        with self._lock:
            if self._state is not TaskState.IDLE:
                raise InvalidTaskState(f"Cannot start a key generation task in state {self._state.value}")
            self._state = TaskState.RUNNING

        get_logger(__name__).debug(
            "keypair task: start type=%s size=%d", self.key_type.value, self.key_size
        )
        self._thread = threading.Thread(target=self._run, name=THREAD_NAME, daemon=True)
        self._thread.start()
        return self

    def cancel(self) -> bool:
        """Request cancellation. Never blocks; returns False if it had no effect."""
        with self._lock:
            if self._state is TaskState.IDLE:
                self._state = TaskState.CANCELLED
                deliver_now = True
            elif self._state is TaskState.RUNNING and not self._cancel_event.is_set():
                deliver_now = False
            else:
                return False
            self._cancel_event.set()

        get_logger(__name__).debug("keypair task: cancel requested type=%s", self.key_type.value)
        if deliver_now:
            self._future.set_result(KeyPairOutcome(TaskState.CANCELLED))
        return True

    def _run(self) -> None:
        log = get_logger(__name__)
        _lower_thread_priority()

        key_pair: Optional[KeyPair] = None
        error: Optional[KeyGenerationFailure] = None
        try:
            key_pair = self.provider.generate_key_pair(self.key_type, self.key_size, self._cancel_event)
        except GenerationInterrupted:
            pass
        except KeyGenerationFailure as exc:
            error = exc
        except Exception as exc:
            error = KeyGenerationFailure(f"{type(exc).__name__}: {exc}")
            error.__cause__ = exc

        with self._lock:
            if self._cancel_event.is_set():
                outcome = KeyPairOutcome(TaskState.CANCELLED)
            elif error is not None:
                outcome = KeyPairOutcome(TaskState.FAILED, error=error)
            elif key_pair is None:
                outcome = KeyPairOutcome(
                    TaskState.FAILED, error=KeyGenerationFailure("Key generation was interrupted")
                )
            else:
                outcome = KeyPairOutcome(TaskState.COMPLETED, key_pair=key_pair)
            self._state = outcome.state

        if outcome.state is TaskState.FAILED:
            log.warning("keypair task: failed type=%s reason=%s", self.key_type.value, outcome.error.reason)
        else:
            log.info(
                "keypair task: %s type=%s size=%d",
                outcome.state.value.lower(),
                self.key_type.value,
                self.key_size,
            )
        self._future.set_result(outcome)

    # ---------- result accessors ----------

    def done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: Optional[float] = None) -> KeyPairOutcome:
        """Block until the terminal outcome is available (concurrent.futures.TimeoutError on timeout)."""
        return self._future.result(timeout)

    def add_done_callback(self, fn: Callable[[KeyPairOutcome], None]) -> None:
        """Call fn once with the outcome; immediately if it is already available."""
        self._future.add_done_callback(lambda future: fn(future.result()))

    async def outcome(self) -> KeyPairOutcome:
        return await asyncio.wrap_future(self._future)

    def key_pair(self, timeout: Optional[float] = None) -> Optional[KeyPair]:
        """The generated key pair, None if cancelled; re-raises the failure if generation failed."""
        outcome = self.wait(timeout)
        if outcome.state is TaskState.FAILED:
            raise outcome.error
        return outcome.key_pair

    def __enter__(self) -> "KeyPairGenerationTask":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
