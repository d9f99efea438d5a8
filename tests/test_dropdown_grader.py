from fillblank.services.dropdown_grader import evaluate, is_correct
from fillblank.services.schemas import AnswerOption
from fillblank.services.template_parser import parse

OPTIONS = [
    AnswerOption(blank_id=5, option_text="went", is_correct=True, order_index=0, id=10),
    AnswerOption(blank_id=5, option_text="goed", is_correct=False, order_index=1, id=11),
    AnswerOption(blank_id=6, option_text="ate", is_correct=True, order_index=0, id=20),
    AnswerOption(blank_id=6, option_text="eated", is_correct=False, order_index=1, id=21),
]

def test_selection_of_correct_option():
    assert is_correct(5, 10, OPTIONS) is True

def test_selection_of_wrong_option():
    assert is_correct(5, 11, OPTIONS) is False

def test_no_selection_is_ungraded():
    assert is_correct(5, None, OPTIONS) is None

def test_option_of_another_blank_is_false():
    assert is_correct(6, 10, OPTIONS) is False

def test_unknown_option_id_is_false():
    assert is_correct(5, 999, OPTIONS) is False

def test_blank_without_correct_option_is_ungraded():
    opts = [AnswerOption(7, "a", False, 0, 30), AnswerOption(7, "b", False, 1, 31)]
    assert is_correct(7, 30, opts) is None
    assert is_correct(7, 30, []) is None

def test_selection_coercion():
    assert is_correct(5, "10", OPTIONS) is True
    assert is_correct(5, 10.0, OPTIONS) is True
    assert is_correct(5, "ten", OPTIONS) is False
    assert is_correct(5, True, OPTIONS) is False
    assert is_correct(5, [10], OPTIONS) is False

def test_options_without_ids_cannot_be_selected():
    opts = [AnswerOption(1, "a", True, 0, None), AnswerOption(1, "b", False, 1, 2)]
    assert is_correct(1, 2, opts) is False

def test_evaluate_question():
    t = parse("Yesterday I {BLANK_5} home and {BLANK_6} dinner.")
    result = evaluate(t, {5: 10, 6: 10}, OPTIONS)
    assert result.results == {5: True, 6: False}
    assert result.all_correct is False
    assert evaluate(t, {5: 10, 6: 20}, OPTIONS).all_correct is True
    unanswered = evaluate(t, {5: 10}, OPTIONS)
    assert unanswered.results == {5: True, 6: None}
    assert unanswered.ungraded_blank_ids == (6,)
