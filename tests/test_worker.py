from __future__ import annotations

import asyncio

from cheque_manager import worker


def test_no_cron_job_when_reminders_disabled(monkeypatch) -> None:
    monkeypatch.setattr(worker, "ENABLE_REMINDERS", False)
    assert worker._cron_jobs() == []


def test_cron_job_follows_reminder_time(monkeypatch) -> None:
    monkeypatch.setattr(worker, "ENABLE_REMINDERS", True)
    monkeypatch.setattr(worker, "REMINDER_TIME", "18:30")

    jobs = worker._cron_jobs()

    assert len(jobs) == 1
    assert jobs[0].hour == 18
    assert jobs[0].minute == 30
    assert jobs[0].run_at_startup is True


def test_first_run_after_startup_is_tagged(monkeypatch) -> None:
    triggers = []

    async def fake_process(db, today=None, trigger="manual"):
        triggers.append(trigger)
        return {"trigger": trigger}

    monkeypatch.setattr(worker, "process_reminders", fake_process)
    monkeypatch.setattr(worker, "ENABLE_REMINDERS", True)

    worker_ctx = {}
    asyncio.run(worker.startup(worker_ctx))
    # Each job receives its own shallow copy of the worker context
    for job_id in ("job-1", "job-2", "job-3"):
        asyncio.run(worker.cheque_reminder_task({**worker_ctx, "job_id": job_id}))

    assert triggers == ["startup", "scheduled", "scheduled"]


def test_runs_are_scheduled_when_disabled_at_startup(monkeypatch) -> None:
    triggers = []

    async def fake_process(db, today=None, trigger="manual"):
        triggers.append(trigger)
        return {"trigger": trigger}

    monkeypatch.setattr(worker, "process_reminders", fake_process)
    monkeypatch.setattr(worker, "ENABLE_REMINDERS", False)

    worker_ctx = {}
    asyncio.run(worker.startup(worker_ctx))
    asyncio.run(worker.cheque_reminder_task({**worker_ctx, "job_id": "job-1"}))

    assert triggers == ["scheduled"]
