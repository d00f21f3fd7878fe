"""
Unit tests for the kubelet report table.
"""

import pytest

from nodealloc.aggregation.renderer import format_usage, render, round_half_up
from nodealloc.models.stats import AccumulatorState, RunState

HEADER = "K8s API Node Stats System Component"


def state(usage):
    return AccumulatorState(
        started=0, ended=10, count=2, initial_value=usage, latest_value=usage,
        min_value=usage, max_value=usage, usage=usage,
    )


def run_state(**classes):
    """Build a RunState from class=[(component, usage), ...] keyword arguments."""
    return RunState(
        classes={
            resource_class: {name: state(usage) for name, usage in components}
            for resource_class, components in classes.items()
        },
        finished=True,
    )


@pytest.mark.unit
class TestUnitConversion:
    """Test cases for display units."""

    def test_nanocores_to_millicores(self):
        assert format_usage("cpu", 5_000_000) == "5m"

    def test_bytes_to_mebibytes(self):
        assert format_usage("rss", 2_097_152) == "2Mi"
        assert format_usage("usage", 2_097_152) == "2Mi"
        assert format_usage("memory", 2_097_152) == "2Mi"

    def test_rounds_to_nearest(self):
        assert format_usage("cpu", 1_499_999) == "1m"
        assert format_usage("cpu", 1_500_000) == "2m"
        assert format_usage("cpu", 2_500_000) == "3m"
        assert format_usage("memory", 1.5 * 1024 * 1024) == "2Mi"

    def test_missing_value(self):
        assert format_usage("cpu", None) == "-"

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2
        assert round_half_up(-2.5) == -3
        assert round_half_up(0) == 0


@pytest.mark.unit
class TestRender:
    """Test cases for the rendered table."""

    def test_three_column_layout(self):
        lines = render(run_state(
            cpu=[("kubelet", 5_000_000)],
            rss=[("kubelet", 2_097_152)],
            usage=[("kubelet", 3 * 1024 * 1024)],
        ))

        assert lines == [
            f"{HEADER}\tCores (avg)\tMemory RSS (avg)\tMemory Usage (avg)",
            "  kubelet\t5m\t2Mi\t3Mi",
            "Total\t5m\t2Mi\t3Mi",
        ]

    def test_two_column_layout(self):
        lines = render(run_state(
            cpu=[("runtime", 20_000_000)],
            memory=[("runtime", 100 * 1024 * 1024)],
        ))

        assert lines[0] == f"{HEADER}\tCores (avg)\tMemory (avg)"
        assert lines[1] == "  runtime\t20m\t100Mi"

    def test_rows_sorted_by_component_name(self):
        lines = render(run_state(cpu=[
            ("runtime", 1_000_000),
            ("kubelet", 2_000_000),
            ("pods", 3_000_000),
            ("misc", 4_000_000),
        ]))

        names = [line.split("\t")[0].strip() for line in lines[1:-1]]
        assert names == ["kubelet", "misc", "pods", "runtime"]

    def test_total_converts_the_sum(self):
        lines = render(run_state(cpu=[("kubelet", 1_400_000), ("runtime", 1_400_000)]))

        assert lines[-1] == "Total\t3m"

    def test_indent_prefixes_every_row(self):
        lines = render(
            run_state(cpu=[("kubelet", 5_000_000)], rss=[("kubelet", 1024 * 1024)]),
            indent="\t",
        )

        assert lines == [
            f"\t{HEADER}\tCores (avg)\tMemory RSS (avg)",
            "\t  kubelet\t5m\t1Mi",
            "\tTotal\t5m\t1Mi",
        ]

    def test_component_missing_from_a_class(self):
        lines = render(run_state(
            cpu=[("kubelet", 5_000_000), ("pods", 1_000_000)],
            rss=[("kubelet", 2_097_152)],
        ))

        assert lines[1] == "  kubelet\t5m\t2Mi"
        assert lines[2] == "  pods\t1m\t-"
        assert lines[3] == "Total\t6m\t2Mi"

    def test_empty_classes_are_not_displayed(self):
        lines = render(run_state(cpu=[("kubelet", 5_000_000)], rss=[]))

        assert lines[0] == f"{HEADER}\tCores (avg)"

    def test_empty_run_state(self):
        assert render(RunState()) == [HEADER, "Total"]

    def test_every_field_is_tab_separated(self):
        lines = render(run_state(
            cpu=[("kubelet", 5_000_000), ("runtime", 7_000_000)],
            rss=[("kubelet", 1), ("runtime", 2)],
            usage=[("kubelet", 1), ("runtime", 2)],
        ))

        assert all(len(line.split("\t")) == 4 for line in lines)
