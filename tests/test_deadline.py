import asyncio

from crosscheck.models.schemas import (
    ProviderCall,
    ProviderId,
    ProviderOutput,
    ProviderStatus,
)
from crosscheck.stages.deadline import with_deadline


CALL = ProviderCall(provider=ProviderId.OPENROUTER, model="deepseek/deepseek-chat")


async def _answer(delay: float) -> ProviderOutput:
    await asyncio.sleep(delay)
    return ProviderOutput(
        provider=CALL.provider,
        model=CALL.model,
        status=ProviderStatus.OK,
        elapsed_ms=int(delay * 1000),
        text="done",
    )


def test_fast_operation_returns_its_own_output() -> None:
    output = asyncio.run(with_deadline(CALL, _answer(0.0), 500))

    assert output.status == ProviderStatus.OK
    assert output.text == "done"


def test_slow_operation_becomes_timeout_output() -> None:
    output = asyncio.run(with_deadline(CALL, _answer(1.0), 20))

    assert output.status == ProviderStatus.TIMEOUT
    assert output.provider == ProviderId.OPENROUTER
    assert output.model == "deepseek/deepseek-chat"
    assert output.elapsed_ms == 20
    assert output.error == "timeout after 20ms"
    assert output.text is None


def test_abandoned_operation_result_is_discarded() -> None:
    finished = []

    async def slow() -> ProviderOutput:
        await asyncio.sleep(0.2)
        finished.append(True)
        return await _answer(0.0)

    async def scenario():
        output = await with_deadline(CALL, slow(), 10)
        await asyncio.sleep(0.3)
        return output

    output = asyncio.run(scenario())

    assert output.status == ProviderStatus.TIMEOUT
    assert finished == []


def test_completed_operation_leaves_nothing_pending() -> None:
    async def scenario():
        start = asyncio.get_running_loop().time()
        output = await with_deadline(CALL, _answer(0.0), 10_000)
        elapsed = asyncio.get_running_loop().time() - start
        return output, elapsed, asyncio.all_tasks() - {asyncio.current_task()}

    output, elapsed, pending = asyncio.run(scenario())

    assert output.status == ProviderStatus.OK
    assert elapsed < 1.0
    assert pending == set()
