"""
Tests for configuration units.
"""

import pytest

from machine_setup.command import CommandUnit
from machine_setup.config_item import ConfigUnit
from machine_setup.errors import UnsupportedOperation
from machine_setup.lib.distribution import Distribution
from machine_setup.protocols import Applyable
from machine_setup.status import Status


class TestApply:
    def test_delegates_to_attached_execution(self, ctx, spy):
        unit = ConfigUnit(command=CommandUnit(command="chsh -s /bin/zsh"))
        assert unit.apply(ctx) is Status.SUCCESS
        assert spy.lines("attached") == ["chsh -s /bin/zsh"]
        assert spy.lines("captured") == []

    def test_satisfied_check_skips_wrapped_unit(self, ctx, spy):
        spy.responses["test -L ~/.zshrc && echo linked"] = (0, "linked\n", "")
        unit = ConfigUnit.from_line("ln -sf ~/dotfiles/zshrc ~/.zshrc", check="test -L ~/.zshrc && echo linked")
        assert unit.apply(ctx) is Status.PASSED
        assert spy.lines() == ["test -L ~/.zshrc && echo linked"]

    def test_own_check_is_independent_of_wrapped_check(self, ctx, spy):
        spy.responses["inner-check"] = (0, "yes\n", "")
        unit = ConfigUnit(command=CommandUnit(command="payload", check="inner-check"), check="outer-check")
        assert unit.apply(ctx) is Status.PASSED
        assert spy.lines() == ["outer-check", "inner-check"]

    def test_failure_propagates(self, ctx, spy):
        spy.responses["false"] = (1, "", "")
        assert ConfigUnit.from_line("false").apply(ctx) is Status.FAILURE

    def test_wrapped_distribution_restriction_still_applies(self, make_ctx, spy):
        ctx = make_ctx(dist=Distribution.ARCH_LINUX)
        unit = ConfigUnit(command=CommandUnit(command="update-alternatives", distribution=Distribution.UBUNTU))
        assert unit.apply(ctx) is Status.SKIPPED
        assert spy.calls == []

    def test_announces_itself(self, ctx, capsys):
        ConfigUnit.from_line("git config --global pull.rebase true").apply(ctx)
        assert "Applying configuration" in capsys.readouterr().out


class TestRevert:
    def test_revert_is_unsupported(self, ctx, spy):
        with pytest.raises(UnsupportedOperation):
            ConfigUnit.from_line("chsh -s /bin/zsh").revert(ctx)
        assert spy.calls == []

    def test_unsupported_is_not_implemented_error(self, ctx):
        with pytest.raises(NotImplementedError):
            ConfigUnit.from_line("true").revert(ctx)


def test_config_unit_is_applyable():
    assert isinstance(ConfigUnit.from_line("true"), Applyable)
