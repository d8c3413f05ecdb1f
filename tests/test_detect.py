import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from nlcalc.core.normalize import normalize_text, substitute_answer, tokenize
from nlcalc.core.schema import Domain
from nlcalc.extractors import detect


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("What is 15 plus 27?", "what is 15 plus 27"),
        ("mean([1, 2, 3, 4, 5])", "mean(1, 2, 3, 4, 5)"),
        ("  Convert   32 °F  to celsius ", "convert 32 f to celsius"),
        ("√16 + π", "√16 + π"),
    ],
)
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


def test_normalize_is_idempotent():
    samples = ["What is 15 plus 27?", "Plot x^2 from -5 to 5!!", "mean([1,2])", "Convert 5 FEET to inches."]
    for sample in samples:
        once = normalize_text(sample)
        assert normalize_text(once) == once


def test_tokenize_splits_numbers_words_and_symbols():
    assert tokenize("what is 2.5 plus (3*4)") == ["what", "is", "2.5", "plus", "(", "3", "*", "4", ")"]


def test_substitute_answer_whole_word_only():
    assert substitute_answer("ans * 4", 5.0) == "5 * 4"
    assert substitute_answer("ANS + answer", 2.5) == "2.5 + answer"
    assert substitute_answer("ans * 2", -3.0) == "(-3) * 2"
    assert substitute_answer("ans * 4", None) == "ans * 4"


@pytest.mark.parametrize(
    "text, natural, domain",
    [
        ("2 + 3 * 4", False, Domain.ARITHMETIC),
        ("(1 + 2) / 3", False, Domain.ARITHMETIC),
        ("what is 15 plus 27", True, Domain.ARITHMETIC),
        ("plot x^2 from -5 to 5", True, Domain.GRAPHING),
        ("show scatter plot with points 1,2 3,4", True, Domain.GRAPHING),
        ("convert 5 feet to inches", True, Domain.UNIT_CONVERSION),
        ("how many meters is 5 feet", True, Domain.UNIT_CONVERSION),
        ("find the average of 10, 20, 30", True, Domain.STATISTICS),
        ("what is the sine of 30 degrees", True, Domain.TRIGONOMETRY),
    ],
)
def test_classify_routes_by_priority(text, natural, domain):
    classified = detect.classify(text)
    assert classified.is_natural_language is natural
    assert classified.domain == domain


def test_graphing_wins_over_other_keywords():
    assert detect.route("plot the mean of 1 2 3") == Domain.GRAPHING
    assert detect.route("convert the sum of 5 meters") == Domain.UNIT_CONVERSION


def test_math_symbols_make_input_literal():
    assert not detect.is_natural_language("sqrt(16)")
    assert not detect.is_natural_language("what is 2 + 2")
    assert detect.is_natural_language("graph sin(x)")


def test_keywords_match_whole_words_only():
    assert not detect.is_statistics_request("summary of 3 things")
    assert not detect.is_trigonometry_request("cosmos 4")
    assert not detect.is_conversion_request("remind me 5")


def test_classification_is_stable_under_normalisation():
    for raw in ["What is 15 plus 27?", "Plot x^2 from -5 to 5", "Convert 5 FEET to inches", "2+3"]:
        once = normalize_text(raw)
        assert detect.classify(once) == detect.classify(normalize_text(once))


@pytest.mark.parametrize(
    "expression, operation_type",
    [
        ("2 + 3 * 4", "arithmetic"),
        ("sin(30 deg)", "trigonometry"),
        ("log(100)", "logarithm"),
        ("ln(2)", "logarithm"),
        ("sqrt(16)", "square root"),
        ("√16", "square root"),
        ("2^8", "exponentiation"),
        ("2 ** 8", "exponentiation"),
        ("mean(1, 2, 3)", "statistics"),
    ],
)
def test_detect_operation_type(expression, operation_type):
    assert detect.detect_operation_type(expression) == operation_type
