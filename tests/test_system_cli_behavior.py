"""
CLI Behavior Tests

Verifies that the command-line interface parses arguments correctly,
returns the right exit codes, and prints the expected output.

Test data and expected values are defined in tests/test_config.py.
Update that file to change test parameters without modifying this script.
"""

import pytest
from unittest.mock import patch

from main import create_parser, main
from ideaswipe.seed import DEFAULT_SEED_AUTHOR, SAMPLE_IDEAS

# Import externalized test configuration
from tests.test_config import CONFIG, EXPECTED


pytestmark = pytest.mark.cli_behavior


class TestArgumentParsing:
    """Tests for correct argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.seed is False
        assert args.feed is None
        assert args.stats is None
        assert args.backend is None
        assert args.author == DEFAULT_SEED_AUTHOR

    def test_backend_short_flag(self):
        args = create_parser().parse_args(["-b", "memory"])

        assert args.backend == "memory"

    @pytest.mark.parametrize("backend", CONFIG["available_backends"])
    def test_every_backend_accepted(self, backend):
        assert create_parser().parse_args(["--backend", backend]).backend == backend

    def test_unknown_backend_rejected(self):
        """
        GIVEN: CLI invoked with an unsupported backend
        WHEN: Arguments are parsed
        THEN: argparse exits with code 2
        """
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--backend", "postgres"])

        assert exc_info.value.code == 2

    def test_feed_and_stats_take_ids(self):
        args = create_parser().parse_args(["--feed", "alice", "--stats", "idea-1"])

        assert args.feed == "alice"
        assert args.stats == "idea-1"

    def test_version_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "1.0.0" in capsys.readouterr().out


class TestExitCodes:
    """Tests for main() return values."""

    def test_no_action_prints_help_and_fails(self, capsys):
        exit_code = main([])

        assert exit_code == EXPECTED["cli"]["error_exit_code"]
        assert "usage" in capsys.readouterr().out.lower()

    def test_show_config_succeeds(self, capsys):
        exit_code = main(["--show-config"])

        output = capsys.readouterr().out
        assert exit_code == EXPECTED["cli"]["success_exit_code"]
        assert "STORAGE_BACKEND" in output

    def test_seed_memory_succeeds(self, capsys):
        exit_code = main(["--backend", "memory", "--seed"])

        assert exit_code == 0
        assert f"Seeded {len(SAMPLE_IDEAS)} ideas" in capsys.readouterr().out

    def test_quiet_seed_prints_nothing(self, capsys):
        exit_code = main(["--backend", "memory", "--seed", "--quiet"])

        assert exit_code == 0
        assert capsys.readouterr().out == ""

    def test_stats_for_unknown_idea_fails(self, capsys):
        exit_code = main(["--backend", "memory", "--stats", "missing"])

        assert exit_code == EXPECTED["cli"]["error_exit_code"]
        assert "Idea not found" in capsys.readouterr().out

    def test_keyboard_interrupt_returns_130(self):
        with patch("main.get_storage", side_effect=KeyboardInterrupt):
            exit_code = main(["--backend", "memory", "--seed"])

        assert exit_code == EXPECTED["cli"]["interrupt_exit_code"]


class TestOutput:
    """Tests for what the CLI prints."""

    def test_seed_then_feed_lists_every_idea(self, capsys):
        exit_code = main(["--backend", "memory", "--seed", "--feed", "alice"])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert f"Feed for alice: {len(SAMPLE_IDEAS)} ideas" in output
        for sample in SAMPLE_IDEAS:
            assert sample["title"] in output

    def test_stats_output(self, capsys, memory_storage):
        with patch("main.get_storage", return_value=memory_storage):
            main(["--seed", "--quiet"])
            idea = memory_storage.list_excluding([])[0]
            memory_storage.upsert_interaction("u1", idea.id, True, 8)
            memory_storage.upsert_interaction("u2", idea.id, False)
            capsys.readouterr()

            exit_code = main(["--stats", idea.id])

        output = capsys.readouterr().out
        assert exit_code == 0
        assert idea.title in output
        assert "Interactions: 2" in output
        assert "Would use:    50%" in output
        assert "Mean rating:  8.0" in output

    def test_stats_without_ratings(self, capsys, memory_storage):
        with patch("main.get_storage", return_value=memory_storage):
            main(["--seed", "--quiet"])
            idea = memory_storage.list_excluding([])[0]
            capsys.readouterr()

            main(["--stats", idea.id])

        assert "no ratings" in capsys.readouterr().out

    def test_custom_author(self, memory_storage):
        with patch("main.get_storage", return_value=memory_storage):
            main(["--seed", "--author", "demo", "--quiet"])

        assert len(memory_storage.list_by_author("demo")) == len(SAMPLE_IDEAS)
