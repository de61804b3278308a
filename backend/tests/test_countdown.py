import asyncio

from factories import FakeClock

from trivia_quiz.client.countdown import CountdownScheduler


def test_remaining_strictly_decreases_until_expiry():
    clock = FakeClock()
    observed = []
    fired = []

    async def on_expire():
        fired.append(clock.now)

    async def scenario():
        scheduler = CountdownScheduler(5, on_expire, clock=clock, sleep=record_then_sleep)
        holder.append(scheduler)
        scheduler.start()
        await scheduler.wait()
        return scheduler

    holder = []

    async def record_then_sleep(seconds):
        await clock.sleep(seconds)
        observed.append(holder[0].remaining())

    scheduler = asyncio.run(scenario())

    assert observed == [4.0, 3.0, 2.0, 1.0, 0.0]
    assert all(later < earlier for earlier, later in zip(observed, observed[1:]))
    assert len(fired) == 1
    assert scheduler.fired
    assert not scheduler.running
    assert clock.sleeps == 5


def test_remaining_is_recomputed_from_deadline():
    clock = FakeClock()

    async def scenario():
        scheduler = CountdownScheduler(900, _noop, clock=clock, sleep=clock.sleep)
        scheduler.start()
        clock.now += 61.4
        remaining = scheduler.tick()
        seconds = scheduler.remaining_seconds()
        scheduler.cancel()
        await scheduler.wait()
        return remaining, seconds

    remaining, seconds = asyncio.run(scenario())

    assert round(remaining, 1) == 838.6
    assert seconds == 839


def test_cancel_prevents_firing_and_is_idempotent():
    clock = FakeClock()
    fired = []

    async def on_expire():
        fired.append(True)

    async def scenario():
        scheduler = CountdownScheduler(3, on_expire, clock=clock, sleep=clock.sleep)
        scheduler.start()
        await asyncio.sleep(0)
        scheduler.cancel()
        scheduler.cancel()
        await scheduler.wait()
        return scheduler

    scheduler = asyncio.run(scenario())

    assert fired == []
    assert not scheduler.fired
    assert not scheduler.running


def test_unstarted_countdown_reports_full_duration():
    scheduler = CountdownScheduler(900, _noop)
    assert scheduler.remaining_seconds() == 900
    assert not scheduler.started
    scheduler.cancel()


async def _noop():
    return None
