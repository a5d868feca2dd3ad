# Standard library imports
import json
import re
from pathlib import Path
from unittest.mock import patch

# Third-party imports
import pytest
import yaml
from typer.testing import CliRunner

# Local application imports
from flashdrill.cli.main import app
from flashdrill.models import Card
from flashdrill.settings import AppConfig
from flashdrill.storage import JsonCardStorage


runner = CliRunner()


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences (color and control codes) from text."""
    ansi_escape = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi_escape.sub("", text)


def normalize_output(text: str) -> str:
    """
    Normalize CLI output by removing ANSI escape sequences and collapsing
    consecutive whitespace into single spaces.
    """
    text = strip_ansi(text)
    return re.sub(r"\s+", " ", text).strip()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "flashdrill-data"


def _invoke(data_dir: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--data-dir", str(data_dir), *args], **kwargs)


def _saved(data_dir: Path):
    return json.loads((data_dir / "cards.json").read_text(encoding="utf-8"))


@pytest.fixture
def two_card_deck(data_dir: Path):
    JsonCardStorage(data_dir / "cards.json").save(
        [
            Card(prompt="Capital of France?", answer="Paris"),
            Card(prompt="Capital of Japan?", answer="Tokyo"),
        ]
    )


# --- cards ---


def test_cards_list_shows_example_deck_on_first_run(data_dir: Path):
    result = _invoke(data_dir, "cards", "list")

    assert result.exit_code == 0
    output = normalize_output(result.stdout)
    assert "April" in output
    assert "Sackhoff" in output
    assert not (data_dir / "cards.json").exists()


def test_cards_list_empty_deck(data_dir: Path):
    JsonCardStorage(data_dir / "cards.json").save([])
    result = _invoke(data_dir, "cards", "list")
    assert result.exit_code == 0
    assert "The deck is empty." in normalize_output(result.stdout)


def test_cards_add_persists_at_front(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "cards", "add", "  Capital of Peru? ", "Lima")

    assert result.exit_code == 0
    assert "The deck now has 3 cards." in normalize_output(result.stdout)
    assert _saved(data_dir) == [
        {"prompt": "Capital of Peru?", "answer": "Lima"},
        {"prompt": "Capital of France?", "answer": "Paris"},
        {"prompt": "Capital of Japan?", "answer": "Tokyo"},
    ]


def test_cards_add_on_first_run_saves_examples_too(data_dir: Path):
    result = _invoke(data_dir, "cards", "add", "Q", "A")

    assert result.exit_code == 0
    saved = _saved(data_dir)
    assert len(saved) == 5
    assert saved[0] == {"prompt": "Q", "answer": "A"}


def test_cards_add_blank_prompt_fails(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "cards", "add", "   ", "A")

    assert result.exit_code == 1
    assert "must not be blank" in normalize_output(result.stdout)
    assert len(_saved(data_dir)) == 2


def test_cards_delete(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "cards", "delete", "1")

    assert result.exit_code == 0
    output = normalize_output(result.stdout)
    assert "Deleted 'Capital of Japan?'" in output
    assert _saved(data_dir) == [{"prompt": "Capital of France?", "answer": "Paris"}]


def test_cards_delete_out_of_range(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "cards", "delete", "0", "9")

    assert result.exit_code == 1
    assert "out of range" in normalize_output(result.stdout)
    assert len(_saved(data_dir)) == 2


def test_cards_import(data_dir: Path, two_card_deck, tmp_path: Path):
    deck_file = tmp_path / "import.yml"
    with open(deck_file, "w") as f:
        yaml.dump(
            {"cards": [{"q": "Q1", "a": "A1"}, {"q": "Q2", "a": "A2"}]}, f
        )

    result = _invoke(data_dir, "cards", "import", str(deck_file))

    assert result.exit_code == 0
    assert "Imported 2 cards." in normalize_output(result.stdout)
    assert [c["prompt"] for c in _saved(data_dir)] == [
        "Q1",
        "Q2",
        "Capital of France?",
        "Capital of Japan?",
    ]


def test_cards_import_invalid_file(data_dir: Path, tmp_path: Path):
    deck_file = tmp_path / "invalid.yml"
    deck_file.write_text("cards:\n  - q: Only a question\n", encoding="utf-8")

    result = _invoke(data_dir, "cards", "import", str(deck_file))

    assert result.exit_code == 1
    assert "Import failed" in normalize_output(result.stdout)
    assert not (data_dir / "cards.json").exists()


def test_cards_import_non_utf8_file(data_dir: Path, tmp_path: Path):
    deck_file = tmp_path / "latin1.yml"
    deck_file.write_bytes(b"cards:\n  - q: \xff\n    a: x\n")

    result = _invoke(data_dir, "cards", "import", str(deck_file))

    assert result.exit_code == 1
    output = normalize_output(result.stdout)
    assert "Import failed" in output
    assert "not valid UTF-8" in output


# --- settings ---


def test_settings_show_defaults(data_dir: Path):
    result = _invoke(data_dir, "settings", "show")

    assert result.exit_code == 0
    output = normalize_output(result.stdout)
    for key in (
        "recycleIncorrectAnswers",
        "celebrateOnComplete",
        "hapticOnCorrect",
        "hapticOnIncorrect",
    ):
        assert key in output


def test_settings_set_persists(data_dir: Path):
    result = _invoke(data_dir, "settings", "set", "recycleIncorrectAnswers", "on")

    assert result.exit_code == 0
    saved = json.loads((data_dir / "settings.json").read_text(encoding="utf-8"))
    assert saved["recycleIncorrectAnswers"] is True


def test_settings_set_unknown_key(data_dir: Path):
    result = _invoke(data_dir, "settings", "set", "shuffle", "true")

    assert result.exit_code == 1
    assert "Unknown setting 'shuffle'" in normalize_output(result.stdout)


def test_settings_set_bad_value(data_dir: Path):
    result = _invoke(data_dir, "settings", "set", "hapticOnCorrect", "sometimes")
    assert result.exit_code == 1
    assert "expected a boolean" in normalize_output(result.stdout)


# --- play ---


def test_play_passes_config_and_duration(data_dir: Path):
    with patch("flashdrill.cli.main.play_logic") as mock_play:
        result = _invoke(data_dir, "play", "--duration", "30")

    assert result.exit_code == 0
    config = mock_play.call_args[0][0]
    assert isinstance(config, AppConfig)
    assert config.data_dir == data_dir
    assert mock_play.call_args[1] == {"round_duration": 30}


def test_data_dir_from_environment(data_dir: Path):
    with patch("flashdrill.cli.main.play_logic") as mock_play:
        result = runner.invoke(
            app, ["play"], env={"FLASHDRILL_DATA_DIR": str(data_dir)}
        )

    assert result.exit_code == 0
    assert mock_play.call_args[0][0].data_dir == data_dir


def test_play_rejects_zero_duration(data_dir: Path):
    result = _invoke(data_dir, "play", "--duration", "0")
    assert result.exit_code != 0


def test_play_full_round_through_stdin(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "play", input="r\nc\nr\nc\nn\n")

    assert result.exit_code == 0
    output = normalize_output(result.stdout)
    assert "Capital of Japan?" in output
    assert "Tokyo" in output
    assert "Deck cleared!" in output
    assert "You got through the whole deck!" in output
    assert "Thanks for playing!" in output
    # Game play never rewrites the saved deck.
    assert len(_saved(data_dir)) == 2


def test_play_abandoned_on_end_of_input(data_dir: Path, two_card_deck):
    result = _invoke(data_dir, "play", input="r\n")

    assert result.exit_code == 0
    assert "Game abandoned." in normalize_output(result.stdout)
