"""
Tests for last-issued-wins availability refreshes.
"""

import asyncio
from typing import Dict, List, Tuple

import pendulum

from salon_booking.services.availability import AvailabilityService

from conftest import TODAY


class GatedProvider:
    """Provider whose responses are released manually, in any order."""

    def __init__(self, answers: Dict[str, Tuple[str, ...]]):
        self._answers = answers
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[Tuple[str, Tuple[str, ...]]] = []

    async def fetch_free_times(self, date, service_ids):
        key = date.to_date_string()
        self.calls.append((key, tuple(service_ids)))
        gate = self.gates.setdefault(key, asyncio.Event())
        await gate.wait()
        return self._answers[key]

    def release(self, key: str) -> None:
        self.gates.setdefault(key, asyncio.Event()).set()


class StubProvider:
    def __init__(self, times):
        self.times = times

    async def fetch_free_times(self, date, service_ids):
        return self.times


def test_refresh_returns_provider_times():
    service = AvailabilityService(StubProvider(("09:00 AM",)))

    times = asyncio.run(service.refresh(TODAY, ["Men's Haircut"]))

    assert times == ("09:00 AM",)
    assert service.latest_sequence == 1


def test_superseded_response_is_discarded_when_it_arrives_last():
    """Query A issued, then B; B resolves first, A later. A must not be shown."""
    day_a, day_b = TODAY, TODAY.add(days=1)
    provider = GatedProvider({
        day_a.to_date_string(): ("09:00 AM",),
        day_b.to_date_string(): ("02:00 PM",),
    })
    service = AvailabilityService(provider)

    async def scenario():
        task_a = asyncio.create_task(service.refresh(day_a, ["Men's Haircut"]))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(service.refresh(day_b, ["Men's Haircut"]))
        await asyncio.sleep(0)

        provider.release(day_b.to_date_string())
        result_b = await task_b
        provider.release(day_a.to_date_string())
        result_a = await task_a
        return result_a, result_b

    result_a, result_b = asyncio.run(scenario())

    assert result_b == ("02:00 PM",)
    assert result_a is None


def test_superseded_response_is_discarded_when_it_arrives_first():
    day_a, day_b = TODAY, TODAY.add(days=2)
    provider = GatedProvider({
        day_a.to_date_string(): ("09:00 AM",),
        day_b.to_date_string(): ("03:00 PM",),
    })
    service = AvailabilityService(provider)

    async def scenario():
        task_a = asyncio.create_task(service.refresh(day_a, ["Men's Beard"]))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(service.refresh(day_b, ["Men's Beard"]))
        await asyncio.sleep(0)

        provider.release(day_a.to_date_string())
        result_a = await task_a
        provider.release(day_b.to_date_string())
        return result_a, await task_b

    result_a, result_b = asyncio.run(scenario())

    assert result_a is None
    assert result_b == ("03:00 PM",)


def test_invalidate_supersedes_in_flight_query():
    provider = GatedProvider({TODAY.to_date_string(): ("09:00 AM",)})
    service = AvailabilityService(provider)

    async def scenario():
        task = asyncio.create_task(service.refresh(TODAY, ["Men's Haircut"]))
        await asyncio.sleep(0)
        service.invalidate()
        provider.release(TODAY.to_date_string())
        return await task

    assert asyncio.run(scenario()) is None


def test_issue_tags_queries_with_increasing_sequence():
    service = AvailabilityService(StubProvider(()))

    first = service.issue("2024-11-25", ["Men's Haircut"])
    second = service.issue(pendulum.date(2024, 11, 26), ["Men's Haircut", "Men's Beard"])

    assert second.sequence > first.sequence
    assert not service.is_current(first)
    assert service.is_current(second)
    assert second.services == ("Men's Haircut", "Men's Beard")
