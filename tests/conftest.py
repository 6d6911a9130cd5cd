from __future__ import annotations

from typing import Callable, Dict, List, Optional

import pytest

from firstboot.errors import CommandFailed, CommandNotFound


# ----------------- In-memory OS driver -----------------

class _FakeHandle:
    def __init__(self, system: "FakeSystem", path: str):
        self.system = system
        self.path = path
        self.closed = False

    def write(self, data: bytes) -> int:
        self.system.files[self.path] += data
        return len(data)

    def flush(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        self.system.log.append(("close", self.path))
        return False


class FakeSystem:
    """
    Records every side effect instead of touching the machine.

    ``fail`` maps a method name to an exception that method raises;
    ``command_errors`` maps a program name to a callable(argv) returning the
    exception to raise, or None to let that call succeed.
    """

    def __init__(self, hostname: str = "localhost"):
        self.hostname = hostname
        self.files: Dict[str, bytearray] = {}
        self.modes: Dict[str, int] = {}
        self.owners: Dict[str, tuple] = {}
        self.dirs: Dict[str, int] = {}
        self.users: Dict[str, int] = {"root": 0, "alice": 1000}
        self.groups: Dict[str, int] = {"root": 0, "wheel": 10, "alice": 1000}
        self.commands: List[List[str]] = []
        self.command_errors: Dict[str, Callable[[List[str]], Optional[Exception]]] = {}
        self.fail: Dict[str, Exception] = {}
        self.handles: List[_FakeHandle] = []
        self.log: List[tuple] = []

        self.files["/etc/hostname"] = bytearray(hostname.encode())
        self.modes["/etc/hostname"] = 0o644

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail:
            raise self.fail[op]

    # hostname
    def get_hostname(self) -> str:
        self._maybe_fail("get_hostname")
        return self.hostname

    def set_hostname(self, name: str) -> None:
        self._maybe_fail("set_hostname")
        self.log.append(("set_hostname", name))
        self.hostname = name

    # filesystem
    def file_mode(self, path: str) -> int:
        self._maybe_fail("file_mode")
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.modes[path]

    def remove(self, path: str) -> None:
        self._maybe_fail("remove")
        if path not in self.files:
            raise FileNotFoundError(path)
        del self.files[path]
        self.modes.pop(path, None)
        self.log.append(("remove", path))

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def ensure_dir(self, path: str, mode: int) -> None:
        self._maybe_fail("ensure_dir")
        self.dirs.setdefault(path, mode)

    def create_exclusive(self, path: str, data: bytes, mode: int) -> bool:
        self._maybe_fail("create_exclusive")
        if path in self.files:
            return False
        self.files[path] = bytearray(data)
        self.modes[path] = mode
        return True

    def open_for_write(self, path: str, mode: int) -> _FakeHandle:
        self._maybe_fail("open_for_write")
        self.files[path] = bytearray()
        self.modes[path] = mode
        self.log.append(("open", path, mode))
        h = _FakeHandle(self, path)
        self.handles.append(h)
        return h

    def chown(self, path: str, uid: int, gid: int) -> None:
        self._maybe_fail("chown")
        self.owners[path] = (uid, gid)
        self.log.append(("chown", path, uid, gid))

    # accounts
    def lookup_uid(self, name: str) -> int:
        return self.users[name]

    def lookup_gid(self, name: str) -> int:
        return self.groups[name]

    # processes
    def run(self, name: str, *args: str) -> None:
        argv = [name, *args]
        self.commands.append(argv)
        factory = self.command_errors.get(name)
        exc = factory(argv) if factory is not None else None
        if exc is not None:
            raise exc

    def command_missing(self, name: str) -> None:
        self.command_errors[name] = missing

    def command_exits(self, name: str, code: int) -> None:
        self.command_errors[name] = exits(code)

    def command_raises(self, name: str, exc: Exception) -> None:
        self.command_errors[name] = lambda argv: exc

    def read(self, path: str) -> str:
        return bytes(self.files[path]).decode()


def missing(argv) -> Exception:
    return CommandNotFound(f"command not found: {argv[0]}", argv)


def exits(code: int) -> Callable[[List[str]], Exception]:
    def _factory(argv):
        return CommandFailed(f"{' '.join(argv)} exited with status {code}", argv, returncode=code)
    return _factory


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)

    def kinds(self) -> List[str]:
        return [e.__class__.__name__ for e in self.events]


@pytest.fixture
def fake_system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture
def capture() -> Capture:
    return Capture()
