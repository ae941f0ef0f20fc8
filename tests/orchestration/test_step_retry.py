"""Tests for Step - retry and backoff behaviour."""

import logging
import time

import pytest

from core.domain.enums import BackoffKind, ErrorKind
from orchestration.errors import ContextValidationError, StepExecutionError
from orchestration.retry import Backoff, RetryConfig
from orchestration.step import Step, StepConfig
from orchestration.validation import CallableValidator


@pytest.fixture
def recorded_sleeps(monkeypatch):
    """Replace the backoff sleep with a recorder."""
    delays: list[float] = []

    async def fake_sleep(self, seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(Step, "_sleep", fake_sleep)
    return delays


@pytest.mark.asyncio
async def test_step_success_runs_once():
    """Test a succeeding step runs exactly once."""
    calls = {"n": 0}

    async def work(context):
        calls["n"] += 1
        context["done"] = True

    step = Step(work, StepConfig(name="work", retries=RetryConfig(max_attempts=3)))
    context: dict = {}

    await step.execute(context)

    assert calls["n"] == 1
    assert context == {"done": True}


@pytest.mark.asyncio
async def test_step_accepts_sync_work_function():
    """Test plain functions work as well as coroutines."""

    def work(context):
        context["value"] = 1

    step = Step(work, StepConfig(name="sync"))
    context: dict = {}

    await step.execute(context)

    assert context["value"] == 1


@pytest.mark.asyncio
async def test_step_retry_succeeds_after_failures(recorded_sleeps):
    """Test retry succeeds after initial failures."""
    counter = {"n": 0}

    async def flaky(context):
        counter["n"] += 1
        if counter["n"] < 3:
            raise ValueError("temporary error")

    step = Step(
        flaky,
        StepConfig(
            name="flaky",
            retries=RetryConfig(max_attempts=3, backoff=Backoff(BackoffKind.FIXED, 0.1)),
        ),
    )

    await step.execute({})

    assert counter["n"] == 3
    assert recorded_sleeps == [0.1, 0.1]


@pytest.mark.asyncio
async def test_step_fails_after_max_attempts(recorded_sleeps):
    """Test step fails after exactly max_attempts with the attempt count reported."""
    counter = {"n": 0}

    async def failing(context):
        counter["n"] += 1
        raise ValueError("always fails")

    step = Step(
        failing,
        StepConfig(
            name="failing",
            retries=RetryConfig(max_attempts=3, backoff=Backoff(BackoffKind.FIXED, 0.1)),
        ),
    )

    with pytest.raises(StepExecutionError) as exc_info:
        await step.execute({})

    error = exc_info.value
    assert counter["n"] == 3
    assert error.kind is ErrorKind.RETRY_EXHAUSTED
    assert error.attempts == 3
    assert error.step_name == "failing"
    assert isinstance(error.cause, ValueError)
    assert error.__cause__ is error.cause
    assert "Failed after 3 attempts. Last error: always fails" in str(error)
    assert str(error).startswith("Step 'failing' failed:")
    # No wait after the last attempt
    assert recorded_sleeps == [0.1, 0.1]


@pytest.mark.asyncio
async def test_step_exponential_backoff_doubles(recorded_sleeps):
    """Test exponential backoff waits delay, 2x delay, 4x delay."""

    async def failing(context):
        raise RuntimeError("nope")

    step = Step(
        failing,
        StepConfig(
            name="exp",
            retries=RetryConfig(
                max_attempts=4, backoff=Backoff(BackoffKind.EXPONENTIAL, 0.1)
            ),
        ),
    )

    with pytest.raises(StepExecutionError):
        await step.execute({})

    assert recorded_sleeps == pytest.approx([0.1, 0.2, 0.4])


@pytest.mark.asyncio
async def test_step_without_backoff_retries_immediately(recorded_sleeps):
    """Test no backoff means no sleeping between attempts."""
    counter = {"n": 0}

    async def failing(context):
        counter["n"] += 1
        raise RuntimeError("nope")

    step = Step(failing, StepConfig(name="nobackoff", retries=RetryConfig(max_attempts=3)))

    with pytest.raises(StepExecutionError):
        await step.execute({})

    assert counter["n"] == 3
    assert recorded_sleeps == []


@pytest.mark.asyncio
async def test_step_should_retry_false_stops_immediately(recorded_sleeps):
    """Test a vetoing should_retry gives exactly one attempt and no wait."""
    counter = {"n": 0}

    async def failing(context):
        counter["n"] += 1
        raise PermissionError("forbidden")

    step = Step(
        failing,
        StepConfig(
            name="veto",
            retries=RetryConfig(
                max_attempts=5,
                backoff=Backoff(BackoffKind.FIXED, 0.1),
                should_retry=lambda exc: not isinstance(exc, PermissionError),
            ),
        ),
    )

    with pytest.raises(StepExecutionError) as exc_info:
        await step.execute({})

    assert counter["n"] == 1
    assert exc_info.value.kind is ErrorKind.NON_RETRYABLE
    assert exc_info.value.attempts == 1
    assert str(exc_info.value) == "Step 'veto' failed: forbidden"
    assert recorded_sleeps == []


@pytest.mark.asyncio
async def test_step_default_is_single_attempt():
    """Test a step without retry config runs once."""
    counter = {"n": 0}

    async def failing(context):
        counter["n"] += 1
        raise ValueError("boom")

    step = Step(failing, StepConfig(name="once"))

    with pytest.raises(StepExecutionError) as exc_info:
        await step.execute({})

    assert counter["n"] == 1
    assert exc_info.value.attempts == 1


@pytest.mark.asyncio
async def test_step_fixed_backoff_real_timing():
    """Test fixed backoff really waits between attempts."""
    attempt_times: list[float] = []

    async def failing(context):
        attempt_times.append(time.perf_counter())
        raise ValueError("slow failure")

    step = Step(
        failing,
        StepConfig(
            name="timed",
            retries=RetryConfig(max_attempts=3, backoff=Backoff("fixed", 0.1)),
        ),
    )

    started = time.perf_counter()
    with pytest.raises(StepExecutionError):
        await step.execute({})
    elapsed = time.perf_counter() - started

    assert len(attempt_times) == 3
    assert elapsed >= 0.19
    gaps = [b - a for a, b in zip(attempt_times, attempt_times[1:])]
    for gap in gaps:
        assert 0.09 <= gap < 0.5


@pytest.mark.asyncio
async def test_step_validator_rejects_before_running():
    """Test validation failure surfaces as ContextValidationError and skips the work."""
    calls = {"n": 0}

    async def work(context):
        calls["n"] += 1

    step = Step(
        work,
        StepConfig(
            name="needs_user",
            validator=CallableValidator(lambda ctx: "user" in ctx, "user is required"),
        ),
    )

    with pytest.raises(ContextValidationError) as exc_info:
        await step.execute({})

    assert calls["n"] == 0
    assert exc_info.value.kind is ErrorKind.VALIDATION_FAILED
    assert exc_info.value.name == "needs_user"
    assert exc_info.value.errors == ["user is required"]


def test_step_config_rejects_empty_name():
    with pytest.raises(ValueError):
        StepConfig(name="")


def test_retry_config_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryConfig(max_attempts=0)


def test_backoff_rejects_negative_delay():
    with pytest.raises(ValueError):
        Backoff(BackoffKind.FIXED, -1)


def test_step_with_timeout_keeps_value():
    """Test the timeout is carried on the config."""
    step = Step(lambda ctx: None, StepConfig(name="slow", timeout=5.0))

    assert step.config.timeout == 5.0
    assert step.name == "slow"


def test_step_with_timeout_warns_it_is_not_enforced(caplog):
    with caplog.at_level(logging.WARNING, logger="orchestration.step"):
        Step(lambda ctx: None, StepConfig(name="bounded", timeout=1.5))

    assert any("not enforced" in r.getMessage() for r in caplog.records)
