"""Tests for parsing the users and goal fields."""

from tasks_generator.generation import parse_goal, parse_input, parse_roles
from tasks_generator.generation.input_parser import DEFAULT_VERB


class TestParseRoles:
    def test_commas_and_word_and(self):
        assert parse_roles("students, teachers and admins") == ["students", "teachers", "admins"]

    def test_semicolons_and_case(self):
        assert parse_roles("Sales AND Marketing; Admins") == ["sales", "marketing", "admins"]

    def test_and_inside_word_is_not_a_separator(self):
        assert parse_roles("brand managers, standard users") == ["brand managers", "standard users"]

    def test_empty_input(self):
        assert parse_roles("") == []

    def test_only_separators(self):
        assert parse_roles(" , ; and ,") == []

    def test_single_role_without_delimiters(self):
        assert parse_roles("  Nurses ") == ["nurses"]

    def test_duplicates_are_kept_in_order(self):
        assert parse_roles("admins, users, admins") == ["admins", "users", "admins"]


class TestParseGoal:
    def test_splits_verb_and_outcome(self):
        assert parse_goal("Track   student attendance") == ("track", "student attendance")

    def test_single_word_goal_falls_back_to_raw_goal(self):
        assert parse_goal("Ship") == ("ship", "Ship")

    def test_empty_goal_uses_default_verb(self):
        verb, outcome = parse_goal("")
        assert verb == DEFAULT_VERB
        assert outcome == ""

    def test_whitespace_goal(self):
        verb, outcome = parse_goal("   ")
        assert verb == DEFAULT_VERB
        assert outcome == "   "


class TestParseInput:
    def test_combines_roles_and_goal(self):
        parsed = parse_input("students and teachers", "Build a grading portal")

        assert parsed.roles == ["students", "teachers"]
        assert parsed.verb == "build"
        assert parsed.outcome == "a grading portal"
