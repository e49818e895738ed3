"""
Integration tests for the userdesk command line interface.
"""

import json

import pytest

from userdesk.cli.user_cli import main


def run(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code, capsys.readouterr().out


VALID_DRAFT = json.dumps({
    "name": "John Smith",
    "age": 25,
    "email": "user@example.com",
    "role": "editor",
    "company": "Acme",
})


@pytest.mark.integration
class TestValidateCommand:

    def test_valid_draft(self, capsys):
        code, out = run(["validate", "--draft", VALID_DRAFT], capsys)
        assert code == 0
        assert "Draft is valid" in out

    def test_invalid_draft_from_file(self, tmp_path, capsys):
        draft_file = tmp_path / "draft.json"
        draft_file.write_text(json.dumps({"name": "J", "age": 25, "email": "nope", "role": "viewer"}))

        code, out = run(["validate", "--draft", str(draft_file)], capsys)

        assert code == 1
        assert "name: Name must be between 2 and 50 characters long" in out
        assert "email: Email must be formatted properly" in out

    def test_malformed_json(self, capsys):
        code, out = run(["validate", "--draft", "{not json"], capsys)
        assert code == 1
        assert "not valid JSON" in out

    def test_missing_rules_file(self, tmp_path, capsys):
        code, out = run(["validate", "--draft", VALID_DRAFT, "--rules", str(tmp_path / "nope.yaml")], capsys)

        assert code == 1
        assert "could not load rules" in out


@pytest.mark.integration
class TestFilterCommand:

    def test_role_age_and_name(self, users_file, capsys):
        code, out = run(
            ["filter", "--users", users_file, "--role", "editor", "--age", "25", "--name", "jo"], capsys
        )

        assert code == 0
        assert [u["name"] for u in json.loads(out)] == ["Joann Ware", "Jo Blake"]

    def test_local_only(self, users_file, capsys):
        code, out = run(["filter", "--users", users_file, "--company", "ohm"], capsys)

        assert code == 0
        assert [u["name"] for u in json.loads(out)] == ["Connie Stewart", "Pat Wood"]

    def test_age_out_of_range(self, users_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["filter", "--users", users_file, "--age", "200"])
        assert exc_info.value.code == 2

    def test_missing_users_file(self, tmp_path, capsys):
        code, out = run(["filter", "--users", str(tmp_path / "none.json"), "--age", "25"], capsys)
        assert code == 1
        assert "could not load users" in out


@pytest.mark.integration
class TestCompaniesCommand:

    def test_sort_by_count(self, users_file, capsys):
        code, out = run(
            ["companies", "--users", users_file, "--sort-by", "count", "--sort-order", "desc"], capsys
        )

        assert code == 0
        lines = out.strip().splitlines()[2:]
        assert lines[0].split() == ["OHMNET", "2"]
        assert len(lines) == 3


@pytest.mark.integration
class TestShowCommand:

    def test_existing_user(self, users_file, capsys):
        code, out = run(["show", "--users", users_file, "--id", "588935f57546a2daea44de7c"], capsys)

        assert code == 0
        assert json.loads(out)["name"] == "Connie Stewart"

    def test_malformed_id(self, users_file, capsys):
        code, out = run(["show", "--users", users_file, "--id", "wrong"], capsys)

        assert code == 1
        assert "wasn't a legal Mongo Object ID" in out

    def test_unknown_id(self, users_file, capsys):
        code, out = run(["show", "--users", users_file, "--id", "000000000000000000000000"], capsys)

        assert code == 1
        assert "The requested user was not found" in out


@pytest.mark.integration
class TestAddCommand:

    def test_add_writes_output(self, users_file, tmp_path, capsys):
        output = tmp_path / "out.json"

        code, out = run(["add", "--users", users_file, "--draft", VALID_DRAFT, "--output", str(output)], capsys)

        assert code == 0
        assert "Added user John Smith" in out
        saved = json.loads(output.read_text())
        assert len(saved) == 6
        assert saved[-1]["name"] == "John Smith"
        assert "_id" in saved[-1]

    def test_add_without_company_rejected(self, users_file, capsys):
        draft = json.loads(VALID_DRAFT)
        del draft["company"]

        code, out = run(["add", "--users", users_file, "--draft", json.dumps(draft)], capsys)

        assert code == 1
        assert "Tried to add an illegal new user" in out
        with open(users_file) as f:
            assert len(json.load(f)) == 5

    def test_add_invalid_draft(self, users_file, capsys):
        draft = dict(json.loads(VALID_DRAFT), age=0)

        code, out = run(["add", "--users", users_file, "--draft", json.dumps(draft)], capsys)

        assert code == 1
        assert "age: Age must be between 1 and 100" in out

    def test_malformed_rules_file(self, users_file, tmp_path, capsys):
        rules_file = tmp_path / "rules.yaml"
        rules_file.write_text("rules: [unclosed\n")

        code, out = run(["add", "--users", users_file, "--draft", VALID_DRAFT, "--rules", str(rules_file)], capsys)

        assert code == 1
        assert "could not load rules" in out
        with open(users_file) as f:
            assert len(json.load(f)) == 5


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1
