from __future__ import annotations

import pytest

from src.bulkpost.scheduling.retry import retry_with_backoff
from tests.helpers.timing import RecordingSleep


class FlakyOperation:
    def __init__(self, failures: int, result: str = "success") -> None:
        self.failures = failures
        self.result = result
        self.calls = 0
        self.errors: list[Exception] = []

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            error = RuntimeError(f"fail {self.calls}")
            self.errors.append(error)
            raise error
        return self.result


@pytest.mark.asyncio
async def test_succeeds_on_first_attempt_without_sleeping() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=0)

    result = await retry_with_backoff(operation, sleep=sleep)

    assert result == "success"
    assert operation.calls == 1
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_retries_until_success_with_exponential_delays() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=2)

    result = await retry_with_backoff(
        operation, max_retries=3, base_delay=1.0, multiplier=2.0, sleep=sleep
    )

    assert result == "success"
    assert operation.calls == 3
    assert sleep.calls == [1.0, 2.0]


@pytest.mark.asyncio
async def test_raises_last_error_after_exhaustion() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=10)

    with pytest.raises(RuntimeError) as excinfo:
        await retry_with_backoff(operation, max_retries=2, base_delay=0.5, sleep=sleep)

    assert excinfo.value is operation.errors[-1]
    assert str(excinfo.value) == "fail 2"
    assert operation.calls == 2
    assert sleep.calls == [0.5]


@pytest.mark.asyncio
async def test_on_retry_receives_attempt_number_and_error() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=2)
    seen: list[tuple[int, str]] = []

    await retry_with_backoff(
        operation,
        max_retries=5,
        on_retry=lambda attempt, error: seen.append((attempt, str(error))),
        sleep=sleep,
    )

    assert seen == [(1, "fail 1"), (2, "fail 2")]


@pytest.mark.asyncio
async def test_on_retry_not_called_after_final_attempt() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=3)
    attempts: list[int] = []

    with pytest.raises(RuntimeError):
        await retry_with_backoff(
            operation,
            max_retries=3,
            on_retry=lambda attempt, _: attempts.append(attempt),
            sleep=sleep,
        )

    assert attempts == [1, 2]
    assert len(sleep.calls) == 2


@pytest.mark.asyncio
async def test_single_attempt_means_no_retry() -> None:
    sleep = RecordingSleep()
    operation = FlakyOperation(failures=1)

    with pytest.raises(RuntimeError):
        await retry_with_backoff(operation, max_retries=1, sleep=sleep)

    assert operation.calls == 1
    assert sleep.calls == []


@pytest.mark.asyncio
async def test_rejects_non_positive_max_retries() -> None:
    with pytest.raises(ValueError):
        await retry_with_backoff(FlakyOperation(failures=0), max_retries=0)


@pytest.mark.asyncio
async def test_final_error_keeps_operation_traceback() -> None:
    operation = FlakyOperation(failures=5)

    with pytest.raises(RuntimeError) as excinfo:
        await retry_with_backoff(operation, max_retries=2, sleep=RecordingSleep())

    assert excinfo.value is operation.errors[-1]
    assert excinfo.traceback[-1].name == "__call__"
