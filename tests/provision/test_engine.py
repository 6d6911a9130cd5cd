import pytest

from firstboot.config.loader import parse_config
from firstboot.config.models import FileSpec, ProvisionConfig, UserSpec
from firstboot.errors import CommandError, CommandFailed, FileApplyError, HostnameError, MarkerError
from firstboot.execution.runner import CommandRunner
from firstboot.observers.events import (
    AlreadyProvisioned,
    ProvisionSummary,
    StepFailed,
    UserCreated,
)
from firstboot.provision.engine import ProvisionOptions, Provisioner, apply_config


def _cfg(**kw):
    base = dict(instance_id="i-1", hostname="web-1")
    base.update(kw)
    return ProvisionConfig(**base)


def test_applies_every_step_in_order(fake_system, capture):
    cfg = parse_config("""
instance-id: i-1
hostname: web-1
users:
  - name: alice
    groups: [wheel]
files:
  - path: /etc/motd
    permissions: "0644"
    contents: hi
    owner: alice
    group: wheel
runcmd:
  - echo one
  - echo two
""")

    result = Provisioner(fake_system, observers=[capture]).apply(cfg)

    assert result.status == "DONE"
    assert (result.users, result.files, result.commands) == (1, 1, 2)
    assert fake_system.read("/var/cloud/i-1") == "i-1"
    assert fake_system.hostname == "web-1"
    assert fake_system.read("/etc/motd") == "hi"
    assert [c[0] for c in fake_system.commands] == ["useradd", "sh", "sh"]
    assert fake_system.commands[1:] == [["sh", "-c", "echo one"], ["sh", "-c", "echo two"]]
    assert capture.kinds() == [
        "ProvisionStarted", "HostnameApplied", "UserCreated", "FileWritten",
        "CommandCompleted", "CommandCompleted", "ProvisionSummary",
    ]
    assert len({e.run_id for e in capture.events}) == 1


def test_second_run_is_skipped(fake_system, capture):
    cfg = _cfg(runcmd=["touch /tmp/x"])
    p = Provisioner(fake_system, observers=[capture])

    assert p.apply(cfg).status == "DONE"
    fake_system.hostname = "changed-by-admin"
    fake_system.commands.clear()

    assert p.apply(cfg).status == "SKIPPED"
    assert fake_system.hostname == "changed-by-admin"
    assert fake_system.commands == []
    assert any(isinstance(e, AlreadyProvisioned) for e in capture.events)
    assert capture.events[-1].status == "SKIPPED"


def test_marker_error_aborts_before_any_change(fake_system):
    fake_system.fail["ensure_dir"] = PermissionError(13, "Permission denied")

    with pytest.raises(MarkerError):
        Provisioner(fake_system).apply(_cfg(runcmd=["reboot"]))
    assert fake_system.hostname == "localhost"
    assert fake_system.commands == []


def test_partial_apply_is_not_rolled_back(fake_system, capture):
    cfg = _cfg(files=[
        FileSpec(path="/etc/a", permissions="0644", contents="first", owner="root", group="root"),
        FileSpec(path="/etc/b", permissions="0644", contents="second", owner="ghost", group="root"),
        FileSpec(path="/etc/c", permissions="0644", contents="third", owner="root", group="root"),
    ], runcmd=["echo never"])

    with pytest.raises(FileApplyError) as ei:
        Provisioner(fake_system, observers=[capture]).apply(cfg)

    assert "ghost" in str(ei.value)
    assert fake_system.read("/etc/a") == "first"
    assert "/etc/c" not in fake_system.files
    assert fake_system.commands == []

    failed = [e for e in capture.events if isinstance(e, StepFailed)]
    assert len(failed) == 1
    assert (failed[0].step, failed[0].target) == ("mkfile", "/etc/b")
    summary = capture.events[-1]
    assert isinstance(summary, ProvisionSummary)
    assert (summary.status, summary.files) == ("FAILED", 1)


def test_failing_command_stops_the_run(fake_system):
    fake_system.command_errors["sh"] = lambda argv: (
        CommandFailed("sh exited with status 1", argv, returncode=1) if argv[-1] == "false" else None
    )

    with pytest.raises(CommandFailed):
        Provisioner(fake_system).apply(_cfg(runcmd=["true", "false", "echo after"]))
    assert [c[-1] for c in fake_system.commands] == ["true", "false"]


def test_hostname_failure_skips_users(fake_system):
    fake_system.fail["set_hostname"] = PermissionError(1, "Operation not permitted")

    with pytest.raises(HostnameError):
        Provisioner(fake_system).apply(_cfg(users=[UserSpec(name="alice")]))
    assert fake_system.commands == []


def test_user_fallback_reported_in_events(fake_system, capture):
    fake_system.command_missing("useradd")

    Provisioner(fake_system, observers=[capture]).apply(_cfg(users=[UserSpec(name="alice")]))

    created = [e for e in capture.events if isinstance(e, UserCreated)]
    assert created[0].strategy == "adduser"


def test_broken_observer_does_not_break_run(fake_system):
    class Boom:
        def notify(self, ev):
            raise RuntimeError("observer down")

    assert Provisioner(fake_system, observers=[Boom()]).apply(_cfg()).status == "DONE"


def test_options_are_honoured(fake_system):
    fake_system.files["/run/hn"] = bytearray(b"x")
    fake_system.modes["/run/hn"] = 0o644
    opts = ProvisionOptions(marker_dir="/tmp/markers", hostname_file="/run/hn")

    apply_config(_cfg(), system=fake_system, options=opts)

    assert fake_system.read("/tmp/markers/i-1") == "i-1"
    assert fake_system.read("/run/hn") == "web-1"
    assert fake_system.read("/etc/hostname") == "localhost"


def test_nul_byte_in_command_fails_the_step(fake_system, capture, monkeypatch):
    monkeypatch.setattr(fake_system, "run", CommandRunner().run)
    cfg = parse_config('instance-id: i-1\nhostname: web-1\nruncmd:\n  - "echo a\\0b"\n')

    with pytest.raises(CommandError):
        Provisioner(fake_system, observers=[capture]).apply(cfg)

    assert capture.kinds()[-2:] == ["StepFailed", "ProvisionSummary"]
    failed = capture.events[-2]
    assert failed.step == "runcmd"
    assert capture.events[-1].status == "FAILED"


def test_runcmd_logs_step_tag(fake_system, caplog):
    with caplog.at_level("INFO", logger="firstboot"):
        Provisioner(fake_system).apply(_cfg(runcmd=["echo hi"]))
    assert "[runcmd] running echo hi" in caplog.text
