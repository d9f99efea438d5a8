from fillblank.services.blank_registry import auto_generate_settings
from fillblank.services.schemas import AnswerOption, BlankSettings, CorrectAnswer, QuestionType, TextBlankConfig
from fillblank.services.validation import (
    Severity, validate_dropdown_question, validate_question, validate_text_question,
)

def test_text_question_ready():
    report = validate_text_question("{BLANK_1} and {BLANK_2}", [CorrectAnswer(1, "a"), CorrectAnswer(2, "b")])
    assert report.is_ready
    assert report.issues == ()

def test_text_question_missing_answer():
    report = validate_text_question("{BLANK_1} and {BLANK_2}", [CorrectAnswer(1, "a"), CorrectAnswer(2, "  ")])
    assert not report.is_ready
    assert [(i.code, i.blank_id) for i in report.errors] == [("missing_correct_answer", 2)]

def test_zero_blanks_valid_unless_declared():
    assert validate_text_question("Just text", []).is_ready
    declared = validate_text_question("Just text", [], declared_fill_blank=True)
    assert not declared.is_ready
    assert declared.codes() == ["no_blanks"]

def test_empty_text_when_declared():
    report = validate_text_question("   ", [], declared_fill_blank=True)
    assert "empty_question_text" in report.codes()

def test_orphaned_answers_are_warnings():
    report = validate_text_question("{BLANK_1}", [CorrectAnswer(1, "a"), CorrectAnswer(4, "z")])
    assert report.is_ready
    assert [(w.code, w.blank_id) for w in report.warnings] == [("orphaned_answer", 4)]

def test_non_contiguous_ids_warn():
    report = validate_text_question("{BLANK_1} {BLANK_3}", [CorrectAnswer(1, "a"), CorrectAnswer(3, "c")])
    assert report.is_ready
    assert report.codes() == ["non_contiguous_blank_ids"]
    assert report.warnings[0].severity == Severity.WARNING

def test_settings_mismatch_warns():
    stale = BlankSettings((TextBlankConfig(1),))
    report = validate_text_question("{BLANK_1} {BLANK_2}", [CorrectAnswer(1, "a"), CorrectAnswer(2, "b")], stale)
    assert report.is_ready
    assert report.codes() == ["settings_mismatch"]
    fresh = auto_generate_settings("{BLANK_1} {BLANK_2}")
    assert validate_text_question("{BLANK_1} {BLANK_2}", [CorrectAnswer(1, "a"), CorrectAnswer(2, "b")], fresh).issues == ()

def test_dropdown_ready():
    opts = [AnswerOption(1, "a", True, 0, 1), AnswerOption(1, "b", False, 1, 2)]
    assert validate_dropdown_question("{BLANK_1}", opts).is_ready

def test_dropdown_ambiguous_key_is_error():
    opts = [AnswerOption(1, "a", True, 0, 1), AnswerOption(1, "b", True, 1, 2)]
    report = validate_dropdown_question("{BLANK_1}", opts)
    assert not report.is_ready
    assert report.codes() == ["ambiguous_correct_option"]

def test_dropdown_missing_correct_and_too_few_options():
    report = validate_dropdown_question("{BLANK_1}", [AnswerOption(1, "a", False, 0, 1)])
    assert report.codes() == ["too_few_options", "missing_correct_option"]

def test_dropdown_empty_option_text():
    opts = [AnswerOption(1, "a", True, 0, 1), AnswerOption(1, " ", False, 1, 2)]
    report = validate_dropdown_question("{BLANK_1}", opts)
    assert [(i.code, i.message) for i in report.errors] == [("empty_option_text", "Option 2 of blank 1 is empty")]

def test_dropdown_orphaned_options_and_min_options():
    opts = [AnswerOption(1, "a", True, 0, 1), AnswerOption(2, "b", True, 0, 2)]
    report = validate_dropdown_question("{BLANK_1}", opts, min_options=1)
    assert report.is_ready
    assert report.codes() == ["orphaned_option"]

def test_validate_question_declares_fill_blank():
    assert validate_question(QuestionType.FILL_BLANK_TEXT, "no blanks", []).codes() == ["no_blanks"]
    assert validate_question("FILL_BLANK_DROPDOWN", "", []).codes() == ["empty_question_text", "no_blanks"]

def test_report_to_dict():
    data = validate_text_question("{BLANK_1}", []).to_dict()
    assert data["is_ready"] is False
    assert data["issues"][0] == {
        "code": "missing_correct_answer", "field": "correct_answers",
        "message": "Blank 1 has no correct answer", "blank_id": 1, "severity": "error",
    }

def test_overlong_token_is_text_not_a_blank():
    report = validate_text_question("Q {BLANK_" + "1" * 5000 + "}", [], declared_fill_blank=True)
    assert "no_blanks" in report.codes()
