from mergeverse.jobs import run_locked


class FakeLocks:
    def __init__(self):
        self.taken = set()

    async def acquire(self, key, ttl):
        if key in self.taken:
            return False
        self.taken.add(key)
        return True


async def test_run_locked_runs_once_per_lock():
    locks = FakeLocks()
    calls = []

    async def job():
        calls.append(1)
        return 3

    assert await run_locked('settle', job, acquire_lock=locks.acquire) == 3
    assert await run_locked('settle', job, acquire_lock=locks.acquire) is None
    assert calls == [1]
    assert locks.taken == {'job:settle'}


async def test_run_locked_logs_and_swallows_job_errors():
    async def job():
        raise RuntimeError("boom")

    assert await run_locked('broken', job, acquire_lock=FakeLocks().acquire) is None


async def test_jobs_drive_services(db, services):
    assert await run_locked('auctions', services.auctions.settle_expired, acquire_lock=FakeLocks().acquire) == 0
    created = await run_locked('monthly', services.giveaways.create_monthly, acquire_lock=FakeLocks().acquire)
    assert len(created) == len(services.catalog.gifts)
