import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from core.i18n import LANGUAGES, t


def test_dutch_translation_loaded():
    assert t("Funding gap", "nl") == "Financieringstekort"
    assert t("UnknownKey", "nl") == "UnknownKey"


def test_english_falls_back_to_key():
    assert "en" in LANGUAGES
    assert t("Funding gap", "en") == "Funding gap"


def test_languages_discovered_from_files():
    assert LANGUAGES == ["en", "nl"]
