# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

import time
import functools
from typing import Callable

class RetryError(RuntimeError):
    pass


def retry(
    *,
    retries: int,
    delay: float,
    retry_on: tuple[type[Exception], ...] = (Exception,),
    on_retry: Callable[[int, Exception], None] | None = None,
    reraise: bool = False,
):
    """
    Retry decorator for idempotent bootstrap steps.

    The orchestrator wraps the reachability check in it so a host that is
    still booting (HostUnreachable) gets more attempts, while anything not
    listed in retry_on, such as AuthenticationFailed, escapes on the first try.

    retries: number of attempts, at least 1
    delay: seconds between attempts
    retry_on: exception types to retry
    on_retry: callback(attempt, exception), called for every failed attempt
    reraise: raise the last exception itself instead of RetryError, so callers
             keep the typed error (HostUnreachable carries host and port)
    """
    if retries < 1:
        raise ValueError("retries must be >= 1")

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            last_exc = None
            for attempt in range(1, retries + 1):
                try:
                    return fn(*args, **kwargs)
                except retry_on as exc:
                    last_exc = exc
                    if on_retry:
                        on_retry(attempt, exc)
                    if attempt == retries:
                        break
                    time.sleep(delay)
            if reraise:
                raise last_exc
            raise RetryError(f"{fn.__name__} failed after {retries} retries") from last_exc
        return wrapper
    return decorator
