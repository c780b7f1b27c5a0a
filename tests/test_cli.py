"""Tests for the command-line interface."""

import json

import pytest

from followback.cli import create_parser, main
from followback.config import ConfigManager

ENV_VARS = [
    "FOLLOWBACK_PLATFORM_DOMAIN",
    "FOLLOWBACK_EXPORT_DIR",
    "FOLLOWBACK_LOG_LEVEL",
    "FOLLOWBACK_LOG_FORMAT",
    "FOLLOWBACK_PARALLEL",
    "FOLLOWBACK_MAX_INPUT_BYTES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def export_files(tmp_path, followers_export, following_export):
    followers = tmp_path / "followers_1.json"
    following = tmp_path / "following.json"
    followers.write_text(followers_export)
    following.write_text(following_export)
    return followers, following


class TestParser:
    """Test argument parsing."""

    def test_analyze_defaults(self):
        args = create_parser().parse_args(["analyze", "a.json", "b.html"])
        assert args.command == "analyze"
        assert args.kind == "auto"
        assert args.followers_kind is None
        assert args.following_kind is None
        assert args.export is False
        assert args.show_mutual is False

    def test_rejects_unknown_kind(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["analyze", "a", "b", "--kind", "csv"])

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestAnalyzeCommand:
    """Test the analyze command."""

    def test_lists_not_following_back(self, export_files, capsys):
        followers, following = export_files

        assert main(["analyze", str(followers), str(following)]) == 0

        out = capsys.readouterr().out
        assert "dave.x" in out
        assert "eve" in out
        assert "Not Following Back" in out

    def test_show_mutual(self, export_files, capsys):
        followers, following = export_files

        assert main(["analyze", str(followers), str(following), "--show-mutual"]) == 0

        assert "Mutual Followers" in capsys.readouterr().out

    def test_perfect_ratio(self, tmp_path, capsys):
        followers = tmp_path / "followers.txt"
        following = tmp_path / "following.txt"
        followers.write_text("alice bob")
        following.write_text("alice")

        assert main(["analyze", str(followers), str(following)]) == 0
        assert "Perfect follow ratio!" in capsys.readouterr().out

    def test_export(self, export_files, tmp_path):
        followers, following = export_files
        out_dir = tmp_path / "out"

        assert main(["analyze", str(followers), str(following), "--export", "-o", str(out_dir)]) == 0

        files = list(out_dir.glob("instagram-analysis-*.json"))
        assert len(files) == 1
        data = json.loads(files[0].read_text())
        assert data["not_following_back"] == ["dave.x", "eve"]
        assert data["mutual_followers"] == ["alice"]
        assert data["summary"]["follow_ratio"] == "100.00%"
        assert data["generated_at"].endswith("Z")

    def test_explicit_kinds(self, tmp_path, capsys, following_html):
        followers = tmp_path / "followers.dat"
        following = tmp_path / "following.dat"
        followers.write_text("alice")
        following.write_text(following_html)

        code = main(
            [
                "analyze", str(followers), str(following),
                "--followers-kind", "text", "--following-kind", "html",
            ]
        )

        assert code == 0
        out = capsys.readouterr().out
        assert "dave.x" in out

    def test_no_data(self, tmp_path, capsys):
        followers = tmp_path / "followers.txt"
        following = tmp_path / "following.txt"
        followers.write_text("")
        following.write_text("  \n ")

        assert main(["analyze", str(followers), str(following)]) == 1
        assert "No data found" in capsys.readouterr().err

    def test_malformed_json(self, tmp_path, capsys):
        followers = tmp_path / "followers.json"
        following = tmp_path / "following.json"
        followers.write_text("[]")
        following.write_text("{broken")

        assert main(["analyze", str(followers), str(following)]) == 1
        assert "following" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "nope.json"), str(tmp_path / "nope2.json")]) == 1
        assert "Error loading input" in capsys.readouterr().err

    def test_both_sides_from_stdin(self, capsys):
        assert main(["analyze", "-", "-"]) == 1
        assert "stdin" in capsys.readouterr().err


class TestNormalizeCommand:
    def test_prints_handles(self, capsys):
        assert main(["normalize", "https://www.instagram.com/Jane.Doe/", "@bob"]) == 0

        out = capsys.readouterr().out.split()
        assert out == ["jane.doe", "bob"]

    def test_rejected_value(self, capsys):
        assert main(["normalize", "alice", "!!!"]) == 1
        assert "rejected" in capsys.readouterr().err


class TestGenerateConfig:
    def test_prints_template(self, capsys):
        assert main(["generate-config"]) == 0
        assert json.loads(capsys.readouterr().out) == ConfigManager.DEFAULT_CONFIG

    def test_saves_template(self, tmp_path):
        path = tmp_path / "followback.json"
        assert main(["generate-config", "-o", str(path)]) == 0
        assert json.loads(path.read_text()) == ConfigManager.DEFAULT_CONFIG
