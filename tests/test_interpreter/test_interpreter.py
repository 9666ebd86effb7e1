"""Tests for the operator evaluator."""

import asyncio
import os

import pytest
from shtree import AST, EXIT_SUCCESS, TERMINATE_SHELL, Shell


def sh(script: str, **kwargs):
    return AST.simple("sh", "-c", script, **kwargs)


TRUE = AST.simple("true")
FALSE = AST.simple("false")


class TestExit:
    """exit and quit stop the outer loop."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verb", ["exit", "quit"])
    async def test_exit_returns_sentinel(self, tmp_path, verb):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.simple(verb)) == TERMINATE_SHELL

    @pytest.mark.asyncio
    async def test_exit_ignores_parameters(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.simple("exit", "3", "now")) == TERMINATE_SHELL

    @pytest.mark.asyncio
    async def test_exit_ignores_redirection(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.simple("quit", stdout="x.txt")) == TERMINATE_SHELL
        assert not (tmp_path / "x.txt").exists()

    @pytest.mark.asyncio
    async def test_exit_stops_sequence(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.sequential(AST.simple("exit"), sh("echo ran > after.txt"))
        )
        assert status == TERMINATE_SHELL
        assert not (tmp_path / "after.txt").exists()

    @pytest.mark.asyncio
    async def test_exit_on_right_of_sequence(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(AST.sequential(FALSE, AST.simple("exit")))
        assert status == TERMINATE_SHELL

    @pytest.mark.asyncio
    async def test_exit_propagates_through_conditionals(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(
            AST.conditional_zero(AST.simple("exit"), TRUE)
        ) == TERMINATE_SHELL
        assert await shell.evaluate(
            AST.conditional_nonzero(AST.simple("exit"), TRUE)
        ) == TERMINATE_SHELL
        assert await shell.evaluate(
            AST.conditional_nonzero(FALSE, AST.simple("quit"))
        ) == TERMINATE_SHELL


class TestSequential:
    """A ; B"""

    @pytest.mark.asyncio
    async def test_result_is_right_status(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.sequential(FALSE, TRUE)) == 0
        assert await shell.evaluate(AST.sequential(TRUE, sh("exit 7"))) == 7

    @pytest.mark.asyncio
    async def test_both_sides_run(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        await shell.evaluate(
            AST.sequential(sh("echo a > a.txt; exit 1"), sh("echo b > b.txt"))
        )
        assert (tmp_path / "a.txt").read_text() == "a\n"
        assert (tmp_path / "b.txt").read_text() == "b\n"

    @pytest.mark.asyncio
    async def test_right_sees_left_state_changes(self, tmp_path):
        (tmp_path / "sub").mkdir()
        shell = Shell(cwd=str(tmp_path))
        result = await shell.capture(
            AST.sequential(
                AST.sequential(AST.simple("cd", "sub"), AST.assignment("SHTREE_SEQ", "yes")),
                sh('printf "%s %s" "$(pwd)" "$SHTREE_SEQ"'),
            )
        )
        sub = os.path.realpath(tmp_path / "sub")
        assert result.stdout == f"{sub} yes"


class TestConditionals:
    """A && B and A || B"""

    @pytest.mark.asyncio
    async def test_and_runs_right_on_success(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.conditional_zero(TRUE, sh("echo b > b.txt; exit 3"))
        )
        assert status == 3
        assert (tmp_path / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_and_skips_right_on_failure(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.conditional_zero(sh("exit 5"), sh("echo b > b.txt"))
        )
        assert status == 5
        assert not (tmp_path / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_or_runs_right_on_failure(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.conditional_nonzero(sh("exit 2"), sh("echo b > b.txt"))
        )
        assert status == 0
        assert (tmp_path / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_or_skips_right_on_success(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.conditional_nonzero(TRUE, sh("echo b > b.txt"))
        )
        assert status == 0
        assert not (tmp_path / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_or_returns_right_failure(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(AST.conditional_nonzero(FALSE, sh("exit 9")))
        assert status == 9

    @pytest.mark.asyncio
    async def test_failed_cd_short_circuits(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        result = await shell.capture(
            AST.conditional_zero(AST.simple("cd", "/nonexistent-shtree"), AST.simple("pwd"))
        )
        assert result.exit_code == 1
        assert result.stdout == ""


class TestParallel:
    """A & B"""

    @pytest.mark.asyncio
    async def test_both_succeed(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.parallel(TRUE, TRUE)) == 0

    @pytest.mark.asyncio
    async def test_one_fails(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.parallel(TRUE, sh("exit 4"))) != 0
        assert await shell.evaluate(AST.parallel(FALSE, TRUE)) != 0

    @pytest.mark.asyncio
    async def test_side_effects_of_both(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.parallel(sh("sleep 0.1; echo a > a.txt"), sh("echo b > b.txt"))
        )
        assert status == 0
        assert (tmp_path / "a.txt").read_text() == "a\n"
        assert (tmp_path / "b.txt").read_text() == "b\n"

    @pytest.mark.asyncio
    async def test_failing_side_does_not_abort_sibling(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.parallel(AST.simple("shtree-no-such-command"), sh("sleep 0.1; echo b > b.txt"))
        )
        assert status != 0
        assert (tmp_path / "b.txt").exists()

    @pytest.mark.asyncio
    async def test_state_changes_do_not_leak(self, tmp_path):
        (tmp_path / "sub").mkdir()
        shell = Shell(cwd=str(tmp_path), env={"SHTREE_PAR": "before"})
        status = await shell.evaluate(
            AST.parallel(AST.simple("cd", "sub"), AST.assignment("SHTREE_PAR", "after"))
        )
        assert status == 0
        assert shell.cwd == os.path.realpath(tmp_path)
        assert shell.env["SHTREE_PAR"] == "before"

    @pytest.mark.asyncio
    async def test_child_sees_parent_state(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        await shell.evaluate(AST.assignment("SHTREE_PAR", "inherited"))
        status = await shell.evaluate(
            AST.parallel(sh('printf "%s" "$SHTREE_PAR" > out.txt'), TRUE)
        )
        assert status == 0
        assert (tmp_path / "out.txt").read_text() == "inherited"

    @pytest.mark.asyncio
    async def test_exit_inside_is_a_failure(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.parallel(AST.simple("exit"), TRUE)) == 1
        assert await shell.evaluate(AST.parallel(TRUE, AST.simple("quit"))) == 1


class TestPipe:
    """A | B"""

    @pytest.mark.asyncio
    async def test_bytes_flow_to_consumer(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.pipe(AST.simple("printf", "abc"), AST.simple("cat", stdout="out.txt"))
        )
        assert status == 0
        assert (tmp_path / "out.txt").read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_status_is_consumer_status(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.pipe(sh("printf abc; exit 3"), AST.simple("cat", stdout="out.txt"))
        )
        assert status == 0
        assert (tmp_path / "out.txt").read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_consumer_failure(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        status = await shell.evaluate(
            AST.pipe(AST.simple("printf", "abc"), sh("cat > /dev/null; exit 4"))
        )
        assert status == 4

    @pytest.mark.asyncio
    async def test_multi_stage(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        result = await shell.capture(
            AST.pipe(
                AST.pipe(AST.simple("printf", "b\\na\\nc\\n"), AST.simple("sort")),
                AST.simple("head", "-n", "2"),
            )
        )
        assert result.exit_code == 0
        assert result.stdout == "a\nb\n"

    @pytest.mark.asyncio
    async def test_sequence_feeds_pipe(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        result = await shell.capture(
            AST.pipe(
                AST.sequential(AST.simple("echo", "one"), AST.simple("echo", "two")),
                AST.simple("wc", "-l"),
            )
        )
        assert result.stdout.strip() == "2"

    @pytest.mark.asyncio
    async def test_builtin_producer(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        result = await shell.capture(AST.pipe(AST.simple("pwd"), AST.simple("cat")))
        assert result.stdout == os.path.realpath(tmp_path) + "\n"

    @pytest.mark.asyncio
    async def test_builtin_writing_into_full_pipe(self, tmp_path):
        """A builtin blocked on a full pipe must not stall the consumer."""
        shell = Shell(cwd=str(tmp_path))
        tree = AST.pipe(
            AST.sequential(sh("head -c 65530 /dev/zero"), AST.simple("pwd")),
            AST.sequential(AST.simple("sleep", "0.5"), AST.simple("cat", stdout="out.bin")),
        )
        status = await asyncio.wait_for(shell.evaluate(tree), timeout=10)
        assert status == 0
        data = (tmp_path / "out.bin").read_bytes()
        cwd_line = os.fsencode(os.path.realpath(tmp_path)) + b"\n"
        assert len(data) == 65530 + len(cwd_line)
        assert data.endswith(cwd_line)

    @pytest.mark.asyncio
    async def test_state_changes_do_not_leak(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        await shell.evaluate(AST.pipe(AST.assignment("SHTREE_PIPE", "x"), TRUE))
        assert "SHTREE_PIPE" not in shell.env

    @pytest.mark.asyncio
    async def test_exit_inside_is_converted(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        assert await shell.evaluate(AST.pipe(AST.simple("exit"), TRUE)) == 0
        assert await shell.evaluate(AST.pipe(TRUE, AST.simple("exit"))) == 1


class TestStatusTracking:
    @pytest.mark.asyncio
    async def test_last_exit_code(self, tmp_path):
        shell = Shell(cwd=str(tmp_path))
        await shell.evaluate(sh("exit 6"))
        assert shell.last_exit_code == 6
        await shell.evaluate(TRUE)
        assert shell.last_exit_code == EXIT_SUCCESS
