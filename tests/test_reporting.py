import json
from pathlib import Path
import pytest
from cachesim.config import SimConfig
from cachesim.runtime.simulator import SimResult
from cachesim.utils.reporting import (
    generate_report_json, generate_report, format_comparison, generate_comparison_report,
)

@pytest.fixture
def sample_result():
    """Provides a small run: miss, hit, miss, hit."""
    return SimResult(hits=2, accesses=4, hit_history=[0, 1, 1, 2], access_history=[1, 2, 3, 4])

@pytest.fixture
def sample_config():
    """Provides a sample SimConfig."""
    return SimConfig(trace="sample.trace", cache_size_exp=5, line_size_exp=2, cache_type="sa", ways=1)

def test_generate_report_json(sample_result, sample_config):
    report = generate_report_json(sample_result, sample_config)

    assert report["trace"] == "sample.trace"
    assert report["policy"] == "lru"
    assert report["hits"] == 2
    assert report["misses"] == 2
    assert report["hit_rate"] == 0.5
    assert report["geometry"]["num_sets"] == 4
    assert report["geometry"]["lines_per_set"] == 2
    assert report["hit_history"] == [0, 1, 1, 2]

def test_generate_report_full(sample_result, sample_config, tmp_path: Path, capsys):
    """Tests the main generate_report function that writes all artifacts."""
    sample_config.report_dir = str(tmp_path)
    sample_config.ascii_chart = True

    generate_report(sample_result, sample_config)

    data = json.loads((tmp_path / "report.json").read_text())
    assert data["accesses"] == 4

    html_file = tmp_path / "report.html"
    assert html_file.exists()
    assert "Cache Hit Rate over Trace" in html_file.read_text(encoding='utf-8')

    captured = capsys.readouterr()
    assert "Cumulative Hit Rate (ASCII)" in captured.out
    assert "Hit rate : 50.00%" in captured.out
    assert "sa 32 B, 4 B lines, 4 sets x 2 lines" in captured.out

def test_generate_report_without_chart(sample_result, sample_config, tmp_path: Path, capsys):
    sample_config.report_dir = str(tmp_path)
    sample_config.chart = False

    generate_report(sample_result, sample_config)

    assert (tmp_path / "report.json").exists()
    assert not (tmp_path / "report.html").exists()
    assert "ASCII" not in capsys.readouterr().out

def test_format_comparison():
    rows = [
        {"cache_type": "dm", "policy": "lru", "num_sets": 8, "lines_per_set": 1,
         "hits": 5, "accesses": 10, "hit_rate": 0.5},
    ]
    table = format_comparison(rows)
    assert table.splitlines()[0].startswith("type")
    assert "50.00%" in table
    assert format_comparison([]) == "No runs to compare."

def test_generate_comparison_report(tmp_path: Path, capsys):
    rows = [{"cache_type": "fa", "policy": "fifo", "num_sets": 1, "lines_per_set": 8,
             "hits": 1, "accesses": 4, "hit_rate": 0.25}]
    generate_comparison_report(rows, SimConfig(report_dir=str(tmp_path)))
    assert json.loads((tmp_path / "compare.json").read_text()) == rows
    assert "25.00%" in capsys.readouterr().out
