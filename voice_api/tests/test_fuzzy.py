import pytest

from voicecmd.fuzzy import (
    contains_fuzzy,
    distance,
    find_best_match,
    fuzzy_match_phonetic,
    similarity,
)
from voicecmd.phonetic import normalize_phonetic


PAIRS = [
    ("kitten", "sitting"),
    ("scan", "skan"),
    ("navigate", "nav"),
    ("", "help"),
    ("UWIMANA Lucy", "lucy"),
    ("hold on", "go on"),
]


class TestDistance:
    def test_classic_example(self):
        assert distance("kitten", "sitting") == 3

    def test_empty(self):
        assert distance("", "") == 0
        assert distance("", "abc") == 3

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric(self, a, b):
        assert distance(a, b) == distance(b, a)


class TestSimilarity:
    def test_identity(self):
        assert similarity("scan", "scan") == 1.0
        assert similarity("", "") == 1.0

    def test_case_insensitive(self):
        assert similarity("Scan", "SCAN") == 1.0

    def test_one_substitution(self):
        assert similarity("skan", "scan") == pytest.approx(0.75)

    def test_against_empty(self):
        assert similarity("abc", "") == 0.0

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_bounds(self, a, b):
        assert 0.0 <= similarity(a, b) <= 1.0


class TestNormalizePhonetic:
    def test_r_and_l_collapse(self):
        assert normalize_phonetic("road") == normalize_phonetic("load")
        assert normalize_phonetic("road") == "[rl]o+a+d"

    def test_v_and_b_collapse(self):
        assert normalize_phonetic("vat") == normalize_phonetic("bat")

    def test_only_word_initial_consonants(self):
        # the r in "very" is not word-initial
        assert normalize_phonetic("very") == "[vb]e+ry"

    def test_th(self):
        assert normalize_phonetic("think") == "[thd]i+nk"

    def test_vowel_runs(self):
        assert normalize_phonetic("aaa") == normalize_phonetic("a") == "a+"
        assert normalize_phonetic("goo") == normalize_phonetic("go")

    def test_lowercases(self):
        assert normalize_phonetic("ROAD") == normalize_phonetic("road")

    def test_accented_letter_is_a_word_boundary(self):
        assert normalize_phonetic("éra") == "é[rl]a+"
        assert normalize_phonetic("ébat") == "é[vb]a+t"

    def test_not_idempotent(self):
        once = normalize_phonetic("road")
        assert normalize_phonetic(once) != once
        assert normalize_phonetic(normalize_phonetic("a")) != normalize_phonetic("a")


class TestFindBestMatch:
    def test_best_option(self):
        result = find_best_match("skan", ["navigate", "scan", "help"], 0.6)
        assert result.match == "scan"
        assert result.score == pytest.approx(0.75)
        assert [m.option for m in result.all_matches] == ["scan"]

    def test_below_threshold(self):
        result = find_best_match("xyz", ["scan"], 0.5)
        assert result.match is None
        assert result.score == 0
        assert result.all_matches == []

    def test_tie_goes_to_first_option(self):
        assert find_best_match("hat", ["cat", "bat"], 0.5).match == "cat"
        assert find_best_match("hat", ["bat", "cat"], 0.5).match == "bat"

    def test_threshold_is_inclusive(self):
        result = find_best_match("skan", ["scan"], 0.75)
        assert result.match == "scan"
        assert result.score == 0.75

    def test_all_matches_sorted(self):
        result = find_best_match("scan", ["scam", "scan", "span"], 0.7)
        assert [m.option for m in result.all_matches] == ["scan", "scam", "span"]

    def test_empty_options(self):
        result = find_best_match("scan", [], 0.6)
        assert result.match is None
        assert result.score == 0


class TestContainsFuzzy:
    def test_earlier_word_wins(self):
        result = contains_fuzzy("stop go", ["go", "stop"], 0.7)
        assert result.found
        assert result.matched_word == "stop"

    def test_first_hit_not_best(self):
        # "scam" already clears the bar, so the perfect "scan" is never reached
        result = contains_fuzzy("scam scan", ["scan"], 0.7)
        assert result.found
        assert result.score == pytest.approx(0.75)

    def test_threshold_is_inclusive(self):
        result = contains_fuzzy("please skan", ["scan"], 0.75)
        assert result.found
        assert result.matched_word == "scan"

    def test_not_found(self):
        result = contains_fuzzy("hello there", ["scan"], 0.7)
        assert not result.found
        assert result.matched_word is None
        assert result.score == 0

    def test_empty_input(self):
        assert not contains_fuzzy("", ["scan"], 0.7).found


class TestFuzzyMatchPhonetic:
    def test_plain_match(self):
        result = fuzzy_match_phonetic("scan", "scan", 0.65)
        assert result.match
        assert result.score == 1.0

    def test_phonetic_fallback(self):
        assert similarity("road", "load") < 0.9
        result = fuzzy_match_phonetic("road", "load", 0.9)
        assert result.match
        assert result.score == 1.0

    def test_no_match(self):
        assert not fuzzy_match_phonetic("xyz", "scan", 0.65).match

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_never_below_plain_similarity(self, a, b):
        assert fuzzy_match_phonetic(a, b, 0.99).score >= similarity(a, b)
