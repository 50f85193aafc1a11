# tests/test_normalizer.py
import unicodedata

from acstep.automaton import build_automaton
from acstep.normalizer import bytes_to_text, normalize_text


def test_bytes_to_text():
    assert bytes_to_text("café".encode("utf-8")) == "café"
    # invalid utf-8 falls back to latin1
    assert bytes_to_text(b"\xff\xfe") == "\xff\xfe"


def test_normalize_text_case_and_form():
    assert normalize_text("HeRS", to_lower=True) == "hers"
    assert normalize_text("HeRS") == "HeRS"
    decomposed = unicodedata.normalize("NFD", "café")
    assert normalize_text(decomposed) == unicodedata.normalize("NFC", "café")
    assert normalize_text(decomposed, form=None) == decomposed


def test_composed_and_decomposed_text_match_after_normalizing():
    ac = build_automaton([normalize_text("café")])
    text = normalize_text(unicodedata.normalize("NFD", "un café noir"))
    assert [(m.start, m.end) for m in ac.find_all(text)] == [(3, 6)]
