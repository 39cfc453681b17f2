"""Tests for question bank loading."""

import json

import pytest

from quizbank.data.loader import load_default_bank, load_question_bank
from quizbank.data.schemas import Difficulty, Question


def test_load_json_object(bank_json_file):
    questions = load_question_bank(bank_json_file)
    assert [q.id for q in questions] == ["b1", "b2"]
    assert questions[0].answer_index == 1
    assert questions[0].tags == ("accounts", "rent")
    assert questions[1].difficulty is Difficulty.EXPERT
    assert questions[1].deep_dive == "Nested invocations beyond four fail."


def test_load_json_list_and_jsonl(tmp_path, bank_rows):
    as_list = tmp_path / "bank_list.json"
    as_list.write_text(json.dumps(bank_rows), encoding="utf-8")
    as_lines = tmp_path / "bank.jsonl"
    as_lines.write_text("\n".join(json.dumps(r) for r in bank_rows) + "\n\n", encoding="utf-8")

    assert load_question_bank(as_list) == load_question_bank(as_lines)


def test_load_csv(tmp_path):
    path = tmp_path / "bank.csv"
    path.write_text(
        "id,section,tags,difficulty,prompt,choice_a,choice_b,choice_c,answer_index,explanation\n"
        "c1,Tokens,tokens;accounts,Foundation,Where do balances live?,Mint,Token account,,B,Token accounts.\n"
        "c2,Runtime,,advanced,Parallel?,Yes,No,Maybe,0,Declared accounts.\n",
        encoding="utf-8",
    )
    questions = load_question_bank(path)
    assert questions[0].choices == ("Mint", "Token account")
    assert questions[0].answer_index == 1
    assert questions[0].tags == ("tokens", "accounts")
    assert questions[0].difficulty is Difficulty.FOUNDATION
    assert questions[1].tags == ()
    assert questions[1].answer_index == 0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_question_bank(tmp_path / "nope.json")


def test_unsupported_suffix(tmp_path):
    path = tmp_path / "bank.txt"
    path.write_text("[]")
    with pytest.raises(ValueError):
        load_question_bank(path)


def test_invalid_rows_raise_value_error(tmp_path, bank_rows):
    bank_rows[0]["answer_index"] = 7
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(bank_rows), encoding="utf-8")
    with pytest.raises(ValueError, match="out of range"):
        load_question_bank(path)


def test_duplicate_ids_rejected(tmp_path, bank_rows):
    bank_rows[1]["id"] = "b1"
    path = tmp_path / "dup.json"
    path.write_text(json.dumps(bank_rows), encoding="utf-8")
    with pytest.raises(ValueError, match="Duplicate id"):
        load_question_bank(path)


def test_empty_bank_rejected(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text('{"questions": []}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_question_bank(path)


def test_default_bank():
    questions = load_default_bank()
    assert len(questions) == 12
    assert len({q.id for q in questions}) == 12


class TestQuestion:
    def test_dedupes_tags(self):
        q = Question("x", "S", ("a", "b", "a"), "expert", "P", ("1", "2"), 0, "E")
        assert q.tags == ("a", "b")
        assert q.difficulty is Difficulty.EXPERT

    def test_rejects_bad_answer_index(self):
        with pytest.raises(ValueError):
            Question("x", "S", (), "expert", "P", ("1", "2"), 2, "E")

    def test_dict_roundtrip(self, bank_rows):
        q = Question.from_dict(bank_rows[1])
        assert Question.from_dict(q.to_dict()) == q
        assert "deep_dive" in q.to_dict()
