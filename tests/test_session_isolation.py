"""
Tests for Session Isolation

Interleaved and concurrent sessions must each see only their own directory.
"""

import random
import threading

from mcp_server_dirlist.iteration_controller import IterationController
from mcp_server_dirlist.session_registry import SessionRegistry


class TestSessionIsolation:
    """Test session isolation in IterationController."""

    def setup_method(self):
        self.registry = SessionRegistry()
        self.controller = IterationController(self.registry)

    def teardown_method(self):
        self.registry.close_all()

    def test_interleaved_sessions_do_not_mix(self, make_dir):
        left = make_dir("left", 15, prefix="left")
        right = make_dir("right", 9, prefix="right")
        sessions = {
            self.controller.open_session(left, 100): ("left", []),
            self.controller.open_session(right, 100): ("right", []),
        }

        rng = random.Random(1234)
        live = list(sessions)
        while live:
            token = rng.choice(live)
            record = self.controller.fetch(token)
            if record is None:
                live.remove(token)
                continue
            sessions[token][1].append(record.name)

        for prefix, names in sessions.values():
            assert all(name.startswith(f"{prefix}_") for name in names)
        counts = sorted(len(names) for _, names in sessions.values())
        assert counts == [9, 15]

    def test_same_directory_sessions_are_independent(self, make_dir):
        root = make_dir("shared", 6)
        first = self.controller.open_session(root, 100)
        second = self.controller.open_session(root, 100)

        first_names = [self.controller.fetch(first).name for _ in range(3)]
        second_names = [self.controller.fetch(second).name for _ in range(6)]

        assert len(set(second_names)) == 6
        assert first_names == second_names[:3]

    def test_concurrent_sessions_in_threads(self, make_dir):
        roots = [make_dir(f"dir{n}", 20 + n, prefix=f"d{n}") for n in range(6)]
        results: dict[int, list[str]] = {}
        errors = []

        def drive(n: int) -> None:
            try:
                token = self.controller.open_session(roots[n], 1000)
                names = []
                while True:
                    record = self.controller.fetch(token)
                    if record is None:
                        break
                    names.append(record.name)
                results[n] = names
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=drive, args=(n,)) for n in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        for n, names in results.items():
            assert len(names) == 20 + n
            assert all(name.startswith(f"d{n}_") for name in names)
        assert len(self.registry) == 0
