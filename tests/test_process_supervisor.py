"""
Tests for weaver/process_supervisor.py

Children are short Python programs run with ``sys.executable -u -c``.
"""

import asyncio
import io
import os
import stat

import pytest

from weaver.cancellation import CancellationToken
from weaver.errors import OperationCancelled, ProcessExitError, ProcessSpawnError
from weaver.process_supervisor import BinaryResolver, ProcessSupervisor


def _py(code: str):
    return ["-u", "-c", code]


class TestBinaryResolver:

    def test_prefers_bin_dir(self, tmp_path):
        binary = tmp_path / "peer"
        binary.write_text("#!/bin/sh\n")
        binary.chmod(binary.stat().st_mode | stat.S_IEXEC)
        resolver = BinaryResolver(tmp_path)
        assert resolver.resolve("peer") == str(binary)
        assert resolver.is_available("peer")

    def test_absolute_path_is_untouched(self, python_exe):
        assert BinaryResolver("/nowhere").resolve(python_exe) == python_exe

    def test_unknown_binary_falls_back_to_name(self, tmp_path):
        resolver = BinaryResolver(tmp_path)
        assert resolver.resolve("surely-not-a-fabric-binary") == "surely-not-a-fabric-binary"
        assert not resolver.is_available("surely-not-a-fabric-binary")


class TestOneShot:

    @pytest.mark.asyncio
    async def test_captures_both_streams(self, python_supervisor, python_exe):
        result = await python_supervisor.execute(
            python_exe, _py("import sys; print('out'); print('err', file=sys.stderr)")
        )
        assert result.exit_code == 0
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"
        assert result.ready_observed is False

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_with_output(self, python_supervisor, python_exe):
        with pytest.raises(ProcessExitError) as exc:
            await python_supervisor.execute(
                python_exe, _py("import sys; print('partial'); print('boom', file=sys.stderr); sys.exit(3)")
            )
        assert exc.value.exit_code == 3
        assert "partial" in exc.value.stdout
        assert "boom" in exc.value.stderr
        assert "Stderr: boom" in str(exc.value)

    @pytest.mark.asyncio
    async def test_spawn_failure(self, python_supervisor, tmp_path):
        with pytest.raises(ProcessSpawnError):
            await python_supervisor.execute(str(tmp_path / "missing-binary"), [])

    @pytest.mark.asyncio
    async def test_env_reaches_child_only(self, python_supervisor, python_exe):
        result = await python_supervisor.execute(
            python_exe, _py("import os; print(os.environ['FABRIC_CFG_PATH'])"),
            env={"FABRIC_CFG_PATH": "/etc/hyperledger"},
        )
        assert result.stdout.strip() == "/etc/hyperledger"
        assert os.environ.get("FABRIC_CFG_PATH") != "/etc/hyperledger"

    @pytest.mark.asyncio
    async def test_echo_writes_to_sinks(self, python_exe):
        out, err = io.StringIO(), io.StringIO()
        supervisor = ProcessSupervisor(stdout=out, stderr=err)
        await supervisor.execute(python_exe, _py("import sys; print('hello'); print('warn', file=sys.stderr)"))
        assert out.getvalue() == "hello\n"
        assert err.getvalue() == "warn\n"

    @pytest.mark.asyncio
    async def test_echo_can_be_disabled_per_call(self, python_exe):
        out = io.StringIO()
        supervisor = ProcessSupervisor(stdout=out)
        result = await supervisor.execute(python_exe, _py("print('{\"approvals\": {}}')"), echo=False)
        assert out.getvalue() == ""
        assert "approvals" in result.stdout


class TestLongLines:

    @pytest.mark.asyncio
    async def test_line_beyond_stream_limit(self, python_supervisor, python_exe):
        code = (
            "import sys\n"
            "sys.stdout.write('x' * (2 * 1024 * 1024) + '\\n')\n"
            "for i in range(20000):\n"
            "    sys.stdout.write('line %d\\n' % i)\n"
        )
        result = await python_supervisor.execute(python_exe, _py(code))
        assert result.exit_code == 0
        first, rest = result.stdout.split("\n", 1)
        assert first == "x" * (2 * 1024 * 1024)
        assert rest.splitlines()[-1] == "line 19999"
        assert len(rest.splitlines()) == 20000

    @pytest.mark.asyncio
    async def test_ready_after_long_line(self, python_supervisor, python_exe):
        code = "import sys, time; print('y' * (3 * 1024 * 1024)); print('Listening on :7054'); time.sleep(30)"
        result = await python_supervisor.execute(python_exe, _py(code), ready_pattern=r"Listening on")
        try:
            assert result.ready_observed is True
        finally:
            await python_supervisor.stop(result, timeout=5)


class TestReadiness:

    SERVER = "import sys, time; print('booting'); print('Listening on http://0.0.0.0:7054'); time.sleep(30)"

    @pytest.mark.asyncio
    async def test_resolves_on_match_and_leaves_child_running(self, python_supervisor, python_exe):
        result = await python_supervisor.execute(python_exe, _py(self.SERVER), ready_pattern=r"Listening on")
        try:
            assert result.ready_observed is True
            assert result.running
            assert "booting" in result.stdout
        finally:
            code = await python_supervisor.stop(result, timeout=5)
        assert code is not None
        assert not result.running

    @pytest.mark.asyncio
    async def test_matches_stderr(self, python_supervisor, python_exe):
        code = "import sys, time; print('Started peer with ID=peer0', file=sys.stderr); time.sleep(30)"
        result = await python_supervisor.execute(python_exe, _py(code), ready_pattern=r"Started peer with ID")
        try:
            assert result.ready_observed is True
        finally:
            await python_supervisor.stop(result, timeout=5)

    @pytest.mark.asyncio
    async def test_exit_before_ready_raises(self, python_supervisor, python_exe):
        with pytest.raises(ProcessExitError) as exc:
            await python_supervisor.execute(python_exe, _py("print('no luck')"), ready_pattern=r"never")
        assert "before becoming ready" in exc.value.message
        assert exc.value.exit_code == 0


class TestCancellation:

    @pytest.mark.asyncio
    async def test_cancel_terminates_child(self, python_supervisor, python_exe):
        token = CancellationToken()

        async def cancel_soon():
            await asyncio.sleep(0.2)
            token.cancel("test over")

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(OperationCancelled):
            await python_supervisor.execute(python_exe, _py("import time; time.sleep(30)"), cancel=token)
        await canceller

    @pytest.mark.asyncio
    async def test_task_cancellation_stops_child(self, python_supervisor, python_exe, tmp_path):
        pid_file = tmp_path / "child.pid"
        code = f"import os, time; open({str(pid_file)!r}, 'w').write(str(os.getpid())); time.sleep(30)"
        task = asyncio.create_task(python_supervisor.execute(python_exe, _py(code)))
        for _ in range(200):
            if pid_file.exists() and pid_file.read_text():
                break
            await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        with pytest.raises(ProcessLookupError):
            os.kill(int(pid_file.read_text()), 0)

    @pytest.mark.asyncio
    async def test_already_cancelled_token_never_spawns(self, python_supervisor, tmp_path):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            await python_supervisor.execute(str(tmp_path / "missing-binary"), [], cancel=token)

    @pytest.mark.asyncio
    async def test_token_sleep(self):
        token = CancellationToken()
        assert await token.sleep(0.01) is False
        token.cancel("done")
        assert await token.sleep(5) is True
        assert token.reason == "done"
