from unittest.mock import patch

from review_tracker.app import (
    cmd_add, cmd_assign, cmd_complete, cmd_due, cmd_hide, cmd_move, cmd_move_subject,
    cmd_remove, cmd_rename, main, run, selected_subject,
)
from review_tracker.dispatcher import Tracker
from review_tracker.persistence import PersistenceGateway


def make_tracker(state, day):
    return Tracker(state=state, clock=lambda: day)


def ids(entities):
    return [e.id for e in entities]


def test_selected_subject_falls_back_to_first(state, day):
    tracker = make_tracker(state, day)
    assert selected_subject(tracker, "b").id == "b"
    assert selected_subject(tracker, "gone").id == "a"
    assert selected_subject(Tracker(), None) is None


def test_cmd_add_appends_labelled_item(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", return_value="Kanji"):
        cmd_add(tracker, tracker.subjects[1])
    assert tracker.items[-1].label == "Kanji"
    assert tracker.items[-1].subject_id == "b"


def test_cmd_complete_uses_chosen_candidate(state, day):
    tracker = make_tracker(state, day)
    # second item of subject a, third candidate of [1, 3, 5]
    with patch("review_tracker.app.Prompt.ask", side_effect=["2", "3"]):
        cmd_complete(tracker, tracker.subjects[0])
    rep = tracker.item("a2").rep_info
    assert rep.interval == 5
    assert rep.last_completion == day


def test_cmd_move_translates_position_to_global_index(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["3", "1"]):
        cmd_move(tracker, tracker.subjects[0])
    assert ids(tracker.items) == ["a3", "a1", "b1", "a2", "b2"]


def test_cmd_move_subject(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", return_value="1"):
        cmd_move_subject(tracker, tracker.subjects[1])
    assert ids(tracker.subjects) == ["b", "a"]


def test_cmd_assign_reparents_item(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["1", "2"]):
        cmd_assign(tracker, tracker.subjects[0])
    assert tracker.item("a1").subject_id == "b"


def test_cmd_rename_subject(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["subject", "Biology"]):
        cmd_rename(tracker, tracker.subjects[0])
    assert tracker.subjects[0].label == "Biology"


def test_cmd_hide_toggles_visibility(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", return_value="1"):
        cmd_hide(tracker, tracker.subjects[1])
    assert tracker.item("b1").visible is False


def test_cmd_remove_subject_cascades(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["subject", "y"]):
        selected = cmd_remove(tracker, tracker.subjects[0])
    assert selected.id == "b"
    assert ids(tracker.items) == ["b1", "b2"]


def test_cmd_remove_subject_declined(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["subject", "n"]):
        selected = cmd_remove(tracker, tracker.subjects[0])
    assert selected.id == "a"
    assert len(tracker.items) == 5


def test_cmd_due_with_nothing_due(state, day, capsys):
    cmd_due(make_tracker(state, day))
    assert "Nothing due" in capsys.readouterr().out


def test_run_quits(state, day):
    tracker = make_tracker(state, day)
    with patch("review_tracker.app.Prompt.ask", side_effect=["list", "bogus", "due", "q"]):
        run(tracker)
    assert len(tracker.items) == 5


def test_run_without_subjects_only_allows_addsubject():
    tracker = Tracker()
    with patch("review_tracker.app.Prompt.ask", side_effect=["add", "addsubject", "Math", "quit"]):
        run(tracker)
    assert [s.label for s in tracker.subjects] == ["Math"]
    assert tracker.items == []


def test_main_persists_on_exit(tmp_db):
    with patch("review_tracker.app.Prompt.ask", side_effect=["addsubject", "Physics", "quit"]):
        main(tmp_db)
    restored = PersistenceGateway(tmp_db).restore()
    assert [s.label for s in restored.subjects] == ["subject1", "subject2", "Physics"]
