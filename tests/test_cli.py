"""Tests for the depbump CLI and its commands."""

from unittest.mock import patch

import pytest

from depbump.cli import build_parser, main
from depbump.lib.config import ConfigStore
from depbump.lib.errors import AuthenticationFailure
from depbump.lib.types import PackageSpec, Preset
from depbump.workflow.engine import BatchResult


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "deps.yaml"


def save_preset(config_path, root):
    store = ConfigStore(config_path)
    store.save_root(str(root))
    store.save_preset("weekly", Preset(
        packages=[PackageSpec("@zz-common/zz-ui", "6.3.56")],
        branches=["web-login"],
    ))


class TestParser:

    def test_run_options(self):
        args = build_parser().parse_args(["run", "--preset", "weekly", "--branch-policy", "auto"])
        assert args.preset == "weekly"
        assert args.branch_policy == "auto"

    def test_rejects_unknown_policy(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run", "--branch-policy", "sometimes"])

    def test_cdn_requires_urls(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["cdn"])

    def test_verbosity_counts(self):
        assert build_parser().parse_args(["-vv", "branches"]).verbose == 2


class TestMain:
    """Exit codes and dispatch."""

    @patch("depbump.commands.run.cmd_run")
    def test_bare_command_runs_update(self, mock_run, config_path):
        mock_run.return_value = 0
        assert main(["--config", str(config_path)]) == 0
        args = mock_run.call_args[0][0]
        assert args.preset is None
        assert args.branch_policy is None

    @patch("depbump.commands.branches.cmd_branches")
    def test_depbump_error_exits_1(self, mock_cmd, config_path, capsys):
        mock_cmd.side_effect = AuthenticationFailure("Authentication failed after 3 attempts", attempts=3)
        assert main(["--config", str(config_path), "branches"]) == 1
        assert "ERROR: Authentication failed" in capsys.readouterr().err

    @patch("depbump.commands.branches.cmd_branches")
    def test_interrupt_exits_130(self, mock_cmd, config_path):
        mock_cmd.side_effect = KeyboardInterrupt
        assert main(["--config", str(config_path), "branches"]) == 130

    def test_presets_list_empty(self, config_path, capsys):
        assert main(["--config", str(config_path), "presets"]) == 0
        assert "No presets saved" in capsys.readouterr().out

    def test_presets_show_and_delete(self, config_path, tmp_path, capsys):
        save_preset(config_path, tmp_path)
        assert main(["--config", str(config_path), "presets", "show", "weekly"]) == 0
        assert "@zz-common/zz-ui@6.3.56" in capsys.readouterr().out
        assert main(["--config", str(config_path), "presets", "delete", "weekly"]) == 0
        assert main(["--config", str(config_path), "presets", "delete", "weekly"]) == 1

    def test_config_root(self, config_path, tmp_path):
        assert main(["--config", str(config_path), "config", "root", str(tmp_path)]) == 0
        assert ConfigStore(config_path).load().root == str(tmp_path.resolve())

    def test_config_root_rejects_missing_dir(self, config_path, tmp_path):
        assert main(["--config", str(config_path), "config", "root", str(tmp_path / "nope")]) == 1

    def test_invalid_config_file(self, config_path, capsys):
        config_path.write_text("update:\n  branch_policy: sometimes\n")
        assert main(["--config", str(config_path), "config", "show"]) == 1
        assert "branch_policy" in capsys.readouterr().err


class TestRunWithPreset:

    @patch("depbump.commands.run.execute")
    def test_replays_preset_without_prompting(self, mock_execute, config_path, tmp_path):
        save_preset(config_path, tmp_path)
        mock_execute.return_value = BatchResult(failed=["web"])
        # Individual project failures don't change the exit code
        assert main(["--config", str(config_path), "run", "--preset", "weekly", "--branch-policy", "reject"]) == 0
        config, root, preset = mock_execute.call_args[0]
        assert config.settings.branch_policy == "reject"
        assert root == tmp_path
        assert preset.branches == ["web-login"]

    def test_unknown_preset(self, config_path, tmp_path, capsys):
        save_preset(config_path, tmp_path)
        assert main(["--config", str(config_path), "run", "--preset", "daily"]) == 1
        assert "No preset named 'daily'" in capsys.readouterr().err


class TestRunWithPackages:

    @patch("depbump.commands.run.offer_save_preset")
    @patch("depbump.commands.run.execute")
    @patch("depbump.commands.run.select_branches")
    def test_packages_from_command_line(self, mock_select, mock_execute, mock_offer, config_path, tmp_path):
        store = ConfigStore(config_path)
        store.save_root(str(tmp_path))
        store.save_credentials("alice", "secret")
        mock_select.return_value = (["web-login"], [])
        mock_execute.return_value = BatchResult(succeeded=["web"])

        argv = ["--config", str(config_path), "run", "-p", "@zz-common/zz-ui@6.3.56", "-p", "@zz-common/utils@1.0.0"]
        assert main(argv) == 0
        preset = mock_execute.call_args[0][2]
        assert [str(p) for p in preset.packages] == ["@zz-common/zz-ui@6.3.56", "@zz-common/utils@1.0.0"]
        assert preset.branches == ["web-login"]

    def test_bad_package_spec(self, config_path, tmp_path, capsys):
        ConfigStore(config_path).save_root(str(tmp_path))
        assert main(["--config", str(config_path), "run", "-p", "react@latest"]) == 1
        assert "ERROR:" in capsys.readouterr().err
