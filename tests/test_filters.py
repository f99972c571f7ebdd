from types import SimpleNamespace

from utils.filters import FilterCriteria, count_by, filter_items, normalize_choice

QUIZZES = [
    {"id": 1, "title": "Linear equations", "status": "active", "subject_id": 1,
     "subject": {"name": "Mathematics"}, "chapter": {"name": "Algebra"}},
    {"id": 2, "title": "Motion basics", "status": "completed", "subject_id": 2,
     "subject": {"name": "Physics"}, "chapter": {"name": "Kinematics"}},
    {"id": 3, "title": "Forces revision", "status": "active", "subject_id": 2,
     "subject": {"name": "Physics"}, "chapter": {"name": "Laws of Motion"}},
]

FIELDS = ("title", "subject.name", "chapter.name")


def test_all_sentinels_return_input_unchanged():
    criteria = FilterCriteria(search="", search_fields=FIELDS, exact={"status": "all", "subject_id": None})
    assert filter_items(QUIZZES, criteria) == QUIZZES


def test_search_matches_subject_name_when_title_does_not():
    criteria = FilterCriteria(search="PHYSICS", search_fields=FIELDS)
    assert [q["id"] for q in filter_items(QUIZZES, criteria)] == [2, 3]


def test_search_is_or_across_fields_and_filters_are_and():
    criteria = FilterCriteria(search="motion", search_fields=FIELDS, exact={"status": "active"})
    assert [q["id"] for q in filter_items(QUIZZES, criteria)] == [3]


def test_subject_filter_compares_as_string():
    criteria = FilterCriteria(exact={"subject_id": "2"})
    assert [q["id"] for q in filter_items(QUIZZES, criteria)] == [2, 3]


def test_unrecognized_value_is_treated_as_all():
    criteria = FilterCriteria(exact={"status": "archived"}, allowed={"status": ["active", "completed"]})
    assert filter_items(QUIZZES, criteria) == QUIZZES
    assert normalize_choice("archived", ["active"]) is None
    assert normalize_choice(" ALL ") is None
    assert normalize_choice("active", ["active"]) == "active"


def test_filtering_is_idempotent():
    criteria = FilterCriteria(search="a", search_fields=FIELDS, exact={"subject_id": 2})
    once = filter_items(QUIZZES, criteria)
    assert filter_items(once, criteria) == once


def test_missing_fields_never_match_or_raise():
    items = [{"id": 1}, {"id": 2, "subject": None}, SimpleNamespace(id=3, title="Atoms")]
    criteria = FilterCriteria(search="atoms", search_fields=("title", "subject.name"))
    assert [getattr(i, "id", None) or i["id"] for i in filter_items(items, criteria)] == [3]
    assert filter_items(items, FilterCriteria(exact={"status": "active"})) == []


def test_count_by_includes_zero_counts():
    counts = count_by(QUIZZES, "status", ["active", "completed", "archived"])
    assert counts == {"active": 2, "completed": 1, "archived": 0}
