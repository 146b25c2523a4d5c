import threading
from datetime import datetime, timedelta, timezone

import pytest

from runway.exceptions import AlertValidationError
from runway.models import AlertKind
from runway.services.alerts import AlertScheduler, render_message
from tests.conftest import FakeSmsSender


@pytest.fixture
def scheduler(sender, clock, timers):
    return AlertScheduler(sender=sender, clock=clock, timer_factory=timers)


def test_schedule_arms_one_timer(scheduler, clock, timers):
    result = scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=30), 'leave', 'San Francisco')

    assert result.success and not result.demo
    assert len(timers.live) == 1
    assert timers.live[0].interval == pytest.approx(1800)
    assert timers.live[0].daemon is True
    assert scheduler.get_pending('+15550001111', 'UA 1') is not None


def test_fire_sends_and_removes_entry(scheduler, clock, timers, sender):
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=5), AlertKind.LANDING, 'San Francisco')

    timers.live[0].fire()

    assert sender.sent == [('+15550001111', render_message('landing', 'UA 1', 'San Francisco'))]
    assert scheduler.pending_alerts == []


def test_same_key_replaces_pending_alert(scheduler, clock, timers, sender):
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=5), 'leave', 'San Francisco')
    first_timer = timers.timers[0]
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=10), 'landing', 'San Francisco')

    assert first_timer.cancelled
    assert len(timers.live) == 1
    assert len(scheduler.pending_alerts) == 1

    # A stale timer that slipped past cancel() must not deliver
    first_timer.fire()
    assert sender.sent == []

    timers.live[0].fire()
    assert len(sender.sent) == 1
    assert 'has landed' in sender.sent[0][1]


def test_different_flights_are_independent(scheduler, clock, timers):
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=5), 'leave', 'SFO')
    scheduler.schedule('+15550001111', 'BA 178', clock() + timedelta(minutes=5), 'leave', 'New York')
    assert len(timers.live) == 2


def test_stale_alert_rejected(scheduler, clock, timers):
    with pytest.raises(AlertValidationError) as excinfo:
        scheduler.schedule('+15550001111', 'UA 1', clock() - timedelta(seconds=120), 'leave', 'SFO')

    assert excinfo.value.error_code == 'ALERT_IN_PAST'
    assert timers.timers == []
    assert scheduler.pending_alerts == []


def test_recent_past_alert_fires_immediately(scheduler, clock, timers):
    result = scheduler.schedule('+15550001111', 'UA 1', clock() - timedelta(seconds=30), 'leave', 'SFO')
    assert result.success
    assert timers.live[0].interval == 0


@pytest.mark.parametrize('recipient, flight', [('', 'UA 1'), ('+15550001111', '')])
def test_missing_fields_rejected(scheduler, clock, recipient, flight):
    with pytest.raises(AlertValidationError) as excinfo:
        scheduler.schedule(recipient, flight, clock(), 'leave', 'SFO')
    assert excinfo.value.error_code == 'MISSING_FIELDS'


def test_delivery_failure_still_removes_entry(clock, timers):
    failing = FakeSmsSender(fail=True)
    scheduler = AlertScheduler(sender=failing, clock=clock, timer_factory=timers)
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=1), 'leave', 'SFO')

    timers.live[0].fire()

    assert scheduler.pending_alerts == []
    assert len(timers.timers) == 1  # no retry


def test_demo_mode_accepts_without_timer(clock, timers):
    scheduler = AlertScheduler(sender=None, clock=clock, timer_factory=timers)

    result = scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(hours=1), 'leave', 'SFO')

    assert result.success and result.demo
    assert result.to_dict()['demo'] is True
    assert timers.timers == []
    assert scheduler.pending_alerts == []


def test_demo_mode_still_validates(clock, timers):
    scheduler = AlertScheduler(sender=None, clock=clock, timer_factory=timers)
    with pytest.raises(AlertValidationError):
        scheduler.schedule('+15550001111', 'UA 1', clock() - timedelta(minutes=5), 'leave', 'SFO')


def test_long_delay_is_chained(sender, clock, timers):
    scheduler = AlertScheduler(
        sender=sender, clock=clock, timer_factory=timers,
        max_timer_delay=timedelta(days=1),
    )
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(days=2, hours=6), 'leave', 'SFO')

    assert timers.live[0].interval == pytest.approx(86400)

    clock.advance(days=1)
    timers.live[0].fire()
    assert sender.sent == []
    assert timers.live[-1].interval == pytest.approx(86400)

    clock.advance(days=1)
    timers.live[-1].fire()
    assert sender.sent == []
    assert timers.live[-1].interval == pytest.approx(6 * 3600)

    clock.advance(hours=6)
    timers.live[-1].fire()
    assert len(sender.sent) == 1
    assert scheduler.pending_alerts == []


def test_unknown_kind_uses_leave_template():
    assert render_message('fireworks', 'UA 1', 'SFO') == render_message(AlertKind.LEAVE, 'UA 1', 'SFO')
    assert AlertKind.parse(None) is AlertKind.LEAVE
    assert AlertKind.parse('Both_Landing') is AlertKind.BOTH_LANDING


def test_concurrent_replacements_leave_one_armed_timer(sender):
    created = []

    def recording_timer(*args, **kwargs):
        timer = threading.Timer(*args, **kwargs)
        created.append(timer)
        return timer

    scheduler = AlertScheduler(sender=sender, timer_factory=recording_timer)
    fires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    workers = 16
    barrier = threading.Barrier(workers)

    def schedule(n):
        barrier.wait()
        scheduler.schedule('+15550001111', 'UA 1', fires_at + timedelta(seconds=n), 'leave', 'SFO')

    threads = [threading.Thread(target=schedule, args=(n,)) for n in range(workers)]
    try:
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        armed = [timer for timer in created if not timer.finished.is_set()]
        pending = scheduler.pending_alerts

        assert len(created) == workers
        assert len(pending) == 1
        assert armed == [pending[0].timer]
        assert not pending[0].cancelled.is_set()
    finally:
        for timer in created:
            timer.cancel()

    assert sender.sent == []


def test_unexpected_sender_error_is_contained(clock, timers):
    class BrokenSender:
        def send(self, to, body):
            raise RuntimeError('socket closed')

    scheduler = AlertScheduler(sender=BrokenSender(), clock=clock, timer_factory=timers)
    scheduler.schedule('+15550001111', 'UA 1', clock() + timedelta(minutes=1), 'leave', 'SFO')

    timers.live[0].fire()

    assert scheduler.pending_alerts == []
    assert len(timers.timers) == 1
