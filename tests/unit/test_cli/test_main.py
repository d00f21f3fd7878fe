"""
Tests for the command-line entry point.
"""

from unittest.mock import MagicMock, patch

import pytest

from nodealloc.cli.main import apply_overrides, build_parser, main_cli, resolve_nodes
from nodealloc.cli.orchestrator import NodeReport
from nodealloc.models.config import AppConfig
from nodealloc.validation import ValidationError


@pytest.fixture
def mock_runner():
    with patch("nodealloc.cli.main.AllocationRunner") as runner_class:
        runner = MagicMock()
        runner.shutdown_requested = False
        runner.iter_reports.side_effect = lambda nodes: iter(
            NodeReport(node=node, lines=[f"Node\t{node}\t\t", "\tTotal\t1m\t1Mi"]) for node in nodes
        )
        runner_class.return_value = runner
        yield runner_class


@pytest.fixture
def cli_env():
    with patch("nodealloc.cli.main.check_command_installed", return_value=True) as installed, \
            patch("nodealloc.cli.main.signal.signal"):
        yield installed


@pytest.mark.unit
class TestApplyOverrides:
    """Test cases for command-line overrides of the configuration."""

    def test_no_overrides(self):
        args = build_parser().parse_args([])

        assert apply_overrides(AppConfig(), args) == AppConfig()

    def test_overrides(self):
        args = build_parser().parse_args(
            ["-d", "30", "-i", "2", "--classes", "cpu,memory", "-j", "8", "--no-cgtop"]
        )

        config = apply_overrides(AppConfig(), args)

        assert config.allocation.min_duration_seconds == 30.0
        assert config.allocation.poll_interval_seconds == 2.0
        assert config.allocation.resource_classes == ["cpu", "memory"]
        assert config.general.max_concurrent_nodes == 8
        assert config.cgtop.enabled is False

    def test_invalid_override(self):
        args = build_parser().parse_args(["--classes", "cpu,swap"])

        with pytest.raises(ValidationError):
            apply_overrides(AppConfig(), args)

    def test_input_config_is_untouched(self):
        base = AppConfig()
        apply_overrides(base, build_parser().parse_args(["-d", "99"]))

        assert base.allocation.min_duration_seconds == 10.0


@pytest.mark.unit
class TestResolveNodes:
    """Test cases for node selection."""

    def test_explicit_nodes(self):
        assert resolve_nodes(["worker-0", "master-0.example.com"], AppConfig()) == [
            "worker-0", "master-0.example.com",
        ]

    def test_invalid_node_name(self):
        with pytest.raises(ValidationError):
            resolve_nodes(["Worker_0"], AppConfig())

    def test_discovers_nodes(self):
        with patch("nodealloc.cli.main.list_nodes", return_value=["a", "b"]) as mock_list:
            assert resolve_nodes([], AppConfig()) == ["a", "b"]

        mock_list.assert_called_once_with(oc_binary="oc", timeout=60.0)


@pytest.mark.unit
class TestMainCli:
    """Test cases for main_cli."""

    def test_writes_reports_to_stdout(self, config_file, cli_env, mock_runner, capsys):
        main_cli(["--config", str(config_file), "worker-0", "worker-1"])

        out = capsys.readouterr().out
        assert out == (
            "Node\tworker-0\t\t\n\tTotal\t1m\t1Mi\n"
            "Node\tworker-1\t\t\n\tTotal\t1m\t1Mi\n"
        )
        config = mock_runner.call_args.args[0]
        assert config.general.max_concurrent_nodes == 2

    def test_failed_node_exits_non_zero(self, config_file, cli_env, mock_runner, capsys):
        mock_runner.return_value.iter_reports.side_effect = lambda nodes: iter([
            NodeReport(node="worker-0", lines=["Node\tworker-0\t\t"]),
            NodeReport(node="worker-1", error=RuntimeError("boom")),
        ])

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file), "worker-0", "worker-1"])

        assert exc_info.value.code == 1
        assert capsys.readouterr().out == "Node\tworker-0\t\t\n"

    def test_partial_report_is_written(self, config_file, cli_env, mock_runner, capsys):
        mock_runner.return_value.iter_reports.side_effect = lambda nodes: iter([
            NodeReport(
                node="worker-0",
                lines=["Node\tworker-0\t\t", "\tTotal\t15m\t6Mi"],
                error=RuntimeError("ssh failed"),
            ),
        ])

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file), "worker-0"])

        assert exc_info.value.code == 1
        assert capsys.readouterr().out == "Node\tworker-0\t\t\n\tTotal\t15m\t6Mi\n"

    def test_no_nodes_found(self, config_file, cli_env, mock_runner):
        with patch("nodealloc.cli.main.list_nodes", return_value=[]):
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["--config", str(config_file)])

        assert exc_info.value.code == 1
        mock_runner.assert_not_called()

    def test_invalid_node_exits(self, config_file, cli_env, mock_runner):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file), "not a node"])

        assert exc_info.value.code == 1

    def test_missing_config_exits(self, temp_dir, cli_env, mock_runner):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(temp_dir / "missing.toml"), "worker-0"])

        assert exc_info.value.code == 1

    def test_missing_oc_exits(self, config_file, mock_runner):
        with patch("nodealloc.cli.main.check_command_installed", return_value=False):
            with pytest.raises(SystemExit) as exc_info:
                main_cli(["--config", str(config_file), "worker-0"])

        assert exc_info.value.code == 1

    def test_missing_ssh_disables_cgtop(self, config_file, mock_runner):
        with patch(
            "nodealloc.cli.main.check_command_installed", side_effect=lambda name: name == "oc"
        ), patch("nodealloc.cli.main.signal.signal"):
            main_cli(["--config", str(config_file), "worker-0"])

        config = mock_runner.call_args.args[0]
        assert config.cgtop.enabled is False

    def test_signal_handlers_installed(self, config_file, mock_runner):
        with patch("nodealloc.cli.main.check_command_installed", return_value=True), \
                patch("nodealloc.cli.main.signal.signal") as mock_signal:
            main_cli(["--config", str(config_file), "worker-0"])

        assert mock_signal.call_count == 2
