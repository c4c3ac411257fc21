"""Verification Test: Chaos Monkey - Random process termination resilience.

Randomly terminate dummy processes while the refresh pipeline keeps
sampling, and ensure no NoSuchProcess/ZombieProcess error escapes.
"""

import multiprocessing
import random
import time

import pytest

from gribble.monitor import TelemetryProvider
from gribble.state import AppState


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


class TestChaosMonkey:
    """Chaos Monkey verification suite tests."""

    def test_refresh_survives_process_termination(self, tmp_path):
        """
        Test that refreshing doesn't crash when processes die mid-poll.

        Processes can terminate at any time during enumeration. The
        provider must skip them without raising.
        """
        processes = []
        for _ in range(30):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)

        state = AppState(TelemetryProvider(), start_directory=tmp_path, now=0.0)

        try:
            for i, p in enumerate(random.sample(processes, 15)):
                p.terminate()
                try:
                    assert state.tick(2.0 * (i + 1)) is True
                except Exception as e:
                    pytest.fail(f"Refresh crashed with exception: {e}")
                assert len(state.processes) > 0
        finally:
            for p in processes:
                if p.is_alive():
                    p.terminate()
            for p in processes:
                p.join(timeout=1.0)

    def test_collect_processes_handles_terminated_process(self):
        """
        Test that process collection handles NoSuchProcess gracefully.
        """
        p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
        p.start()
        time.sleep(0.1)
        pid = p.pid
        p.terminate()
        p.join(timeout=1.0)

        provider = TelemetryProvider()

        try:
            provider.refresh()
            assert isinstance(provider.processes(), list)
            assert provider.process_details(pid) is None
        except Exception as e:
            pytest.fail(f"refresh raised an exception: {e}")

    def test_zombie_process_handling(self):
        """
        Test that collection handles zombie processes gracefully.

        A child that has exited but not been joined is a zombie until
        the parent waits for it.
        """
        provider = TelemetryProvider()
        p = multiprocessing.Process(target=dummy_worker, args=(0.1,))
        p.start()

        try:
            # Wait for it to complete naturally, but don't join yet
            time.sleep(0.3)
            for _ in range(3):
                snapshot = provider.refresh()
                assert isinstance(snapshot.processes, list)
        finally:
            p.join(timeout=1.0)
