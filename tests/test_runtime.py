"""Tests for the reconfiguration channel and the publish loop."""

import logging
import math
import threading

import pytest

from tfpublisher.core.frames import quaternion_from_rpy
from tfpublisher.core.types import (
    AngleUnits,
    ChangeAngleUnits,
    ChangeEuler,
    ChangeQuaternion,
    ChangeTranslation,
    RPYLimits,
)
from tfpublisher.runtime import (
    LoggingBroadcaster,
    RecordingBroadcaster,
    ReconfigureServer,
    TransformSender,
)
from tfpublisher.runtime.sender import Broadcaster


@pytest.fixture()
def server(engine) -> ReconfigureServer:
    return ReconfigureServer(engine)


@pytest.fixture()
def sender(state, server) -> TransformSender:
    return TransformSender(state, server, RecordingBroadcaster(), period_s=0.001)


def test_server_initializes_on_start(server):
    assert server.config.qw == pytest.approx(1.0)
    assert server.config.angle_units == AngleUnits.RADIANS
    assert server.limits == RPYLimits(-math.pi, math.pi)


def test_submitted_edits_apply_in_order(server, state):
    server.submit(ChangeTranslation(1, 0, 0))
    server.submit(ChangeTranslation(2, 0, 0))
    server.submit(ChangeEuler(0.0, 0.0, 0.5))
    assert server.pending() == 3
    assert state.transform.translation == (0.0, 0.0, 0.0)

    results = server.process_pending()

    assert len(results) == 3
    assert server.pending() == 0
    assert state.transform.translation == (2.0, 0.0, 0.0)
    assert server.config.x == 2.0
    assert server.config.yaw == pytest.approx(0.5)


def test_server_tracks_limits(server):
    server.update(ChangeAngleUnits(AngleUnits.DEGREES))
    assert server.limits == RPYLimits(-180.0, 180.0)
    assert server.config.angle_units == AngleUnits.DEGREES


def test_server_logs_diagnostics(server, caplog):
    with caplog.at_level(logging.WARNING, logger="tfpublisher"):
        server.update(ChangeQuaternion(0.0, 0.0, 0.0, 0.0))
        server.update(ChangeQuaternion(0.0, 0.0, 2.0, 0.0))

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "zero-length" in warnings[0].getMessage()
    assert "non-normalized" in warnings[1].getMessage()


def test_submit_from_many_threads(server, state):
    def worker(i):
        server.submit(ChangeTranslation(i, i, i))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(server.process_pending()) == 20
    x, y, z = state.transform.translation
    assert x == y == z


def test_send_stamps_publish_time(sender):
    transform = sender.send(42.0)
    assert transform.stamp == 42.0
    assert sender.broadcaster.sent == [transform]


def test_spin_once_future_dates_and_serves_edits(sender, server, clock):
    server.submit(ChangeEuler(0.0, 0.0, 1.0))

    transform = sender.spin_once()

    assert transform.stamp == pytest.approx(clock.now + 0.001)
    assert transform.rotation == pytest.approx(quaternion_from_rpy(0.0, 0.0, 1.0))


def test_run_with_count(sender):
    assert sender.run(count=3) == 3
    assert len(sender.broadcaster.sent) == 3


def test_stop_ends_run(state, server):
    sender = TransformSender(state, server, RecordingBroadcaster(), period_s=0.01)
    timer = threading.Timer(0.05, sender.stop)
    timer.start()
    try:
        sent = sender.run()
    finally:
        timer.cancel()

    assert sender.stopped
    assert sent >= 1


def test_invalid_period(state, server):
    with pytest.raises(ValueError, match="Period must be positive"):
        TransformSender(state, server, RecordingBroadcaster(), period_s=0.0)


def test_logging_broadcaster(state, caplog):
    broadcaster = LoggingBroadcaster()
    assert isinstance(broadcaster, Broadcaster)

    with caplog.at_level(logging.DEBUG, logger="tfpublisher.broadcast"):
        broadcaster.send(state.current(1.0))

    assert "base_link to camera" in caplog.records[-1].getMessage()
    assert caplog.records[-1].extra_data["transform"]["stamp"] == 1.0
