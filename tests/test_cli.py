import json

from labor_sim.cli import build_config, main, parse_arguments
from labor_sim.engine import CSV_COLUMNS


def test_build_config_merges_sources(tmp_path):
    config_file = tmp_path / "scenario.json"
    config_file.write_text(json.dumps({"ai_adoption_rate": 60, "name": "From file"}))
    args = parse_arguments(
        [
            "--preset", "Policy Response",
            "--config", str(config_file),
            "--start-year", "2025",
            "--end-year", "2027",
            "--intervention", "wage_subsidy",
        ]
    )
    config = build_config(args)
    assert config["name"] == "From file"
    assert config["ai_adoption_rate"] == 60
    assert config["target_unemployment"] == 8.0
    assert (config["start_year"], config["end_year"]) == (2025, 2027)
    assert [i["type"] for i in config["interventions"]] == [
        "ubi", "job_retraining", "robot_tax", "wage_subsidy",
    ]


def test_csv_output(tmp_path):
    out = tmp_path / "run.csv"
    code = main(["--start-year", "2025", "--end-year", "2026", "--format", "csv", "--output", str(out)])
    assert code == 0
    lines = out.read_text().strip().splitlines()
    assert lines[0] == ",".join(CSV_COLUMNS)
    assert len(lines) == 14


def test_summary_to_stdout(capsys):
    assert main(["--preset", "Gradual Transition", "--start-year", "2025", "--end-year", "2026"]) == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["timeframe"]["start_year"] == 2025


def test_monte_carlo(tmp_path):
    out = tmp_path / "mc.json"
    code = main(
        ["--start-year", "2025", "--end-year", "2026", "--monte-carlo", "3", "--seed", "1",
         "--output", str(out)]
    )
    assert code == 0
    assert json.loads(out.read_text())["iterations"] == 3


def test_bad_baseline_file_fails_cleanly(tmp_path):
    assert main(["--baseline", str(tmp_path / "missing.json")]) == 1


def test_costs_report(capsys):
    code = main(["--preset", "Policy Response", "--start-year", "2025", "--end-year", "2026", "--costs"])
    assert code == 0
    costs = json.loads(capsys.readouterr().out)
    assert [c["type"] for c in costs["interventions"]] == ["ubi", "job_retraining", "robot_tax"]
    assert costs["net_cost"] == costs["total_cost"] - costs["total_revenue"]


def test_sensitivity_report(tmp_path):
    out = tmp_path / "sensitivity.json"
    code = main(
        ["--start-year", "2025", "--end-year", "2026", "--sensitivity", "ai_adoption",
         "--output", str(out)]
    )
    assert code == 0
    report = json.loads(out.read_text())
    assert report["parameter_id"] == "ai_adoption"
    assert len(report["results"]) == 8
    assert report["sensitivity"]["jobs_displaced"]["level"] in {"low", "medium", "high"}
