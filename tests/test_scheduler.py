"""Tests for the virtual clock scheduler"""
import sys
sys.path.insert(0, '..')

import pytest

from rogue_engine.errors import EngineError
from rogue_engine.scheduler import Scheduler


def test_nothing_runs_before_due():
    scheduler = Scheduler()
    ran = []
    scheduler.call_later(300, ran.append, "a")
    scheduler.advance(299)
    assert ran == []
    scheduler.advance(1)
    assert ran == ["a"]
    assert scheduler.now == 300


def test_due_time_then_insertion_order():
    scheduler = Scheduler()
    ran = []
    scheduler.call_later(200, ran.append, "late")
    scheduler.call_later(100, ran.append, "first")
    scheduler.call_later(100, ran.append, "second")
    scheduler.advance(1000)
    assert ran == ["first", "second", "late"]


def test_jobs_scheduled_by_jobs_run_in_the_same_window():
    scheduler = Scheduler()
    ran = []

    def chain(n):
        ran.append((n, scheduler.now))
        if n < 3:
            scheduler.call_later(100, chain, n + 1)

    scheduler.call_later(100, chain, 1)
    scheduler.advance(250)
    assert ran == [(1, 100), (2, 200)]
    scheduler.advance(50)
    assert ran[-1] == (3, 300)


def test_cancel_and_cancel_all():
    scheduler = Scheduler()
    ran = []
    handle = scheduler.call_later(10, ran.append, "cancelled")
    scheduler.call_later(20, ran.append, "kept")
    scheduler.cancel(handle)
    assert scheduler.pending == 1
    scheduler.advance(30)
    assert ran == ["kept"]

    scheduler.call_later(10, ran.append, "dropped")
    scheduler.cancel_all()
    assert scheduler.pending == 0
    assert scheduler.run_until_idle() == 0
    assert ran == ["kept"]


def test_run_until_idle_moves_clock():
    scheduler = Scheduler()
    ran = []
    scheduler.call_later(600, ran.append, 1)
    scheduler.call_later(1500, ran.append, 2)
    assert scheduler.run_until_idle() == 2
    assert ran == [1, 2]
    assert scheduler.now == 1500
    assert scheduler.next_due is None


def test_run_until_idle_gives_up_on_endless_chains():
    scheduler = Scheduler()

    def forever():
        scheduler.call_later(1, forever)

    scheduler.call_later(0, forever)
    with pytest.raises(EngineError):
        scheduler.run_until_idle(max_steps=50)


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        Scheduler().call_later(-1, print)
