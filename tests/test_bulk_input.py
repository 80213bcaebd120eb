from io import StringIO

import pytest

from ilo_cli.io.bulk_input import load_user_add_entries


def test_load_user_add_entries_from_json_file(tmp_path) -> None:
    source = tmp_path / "users.json"
    source.write_text(
        '[{"user_login": "ops", "user_name": "Operations", "password": "change-me", '
        '"reset_server_priv": true}]',
        encoding="utf-8",
    )

    users = load_user_add_entries(str(source))

    assert len(users) == 1
    assert users[0].user_login == "ops"
    assert users[0].reset_server_priv is True
    assert users[0].remote_cons_priv is True


def test_load_user_add_entries_from_csv_file(tmp_path) -> None:
    source = tmp_path / "users.csv"
    source.write_text(
        "login,name,password,admin_priv,remote_cons_priv\n"
        "ops,Operations,change-me,yes,0\n",
        encoding="utf-8",
    )

    users = load_user_add_entries(str(source))

    assert users[0].user_login == "ops"
    assert users[0].user_name == "Operations"
    assert users[0].admin_priv is True
    assert users[0].remote_cons_priv is False


def test_load_user_add_entries_from_stdin_object(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.stdin",
        StringIO('{"users": [{"USER_LOGIN": "a", "USER_NAME": "A", "PASSWORD": "p"}]}'),
    )

    users = load_user_add_entries("-")

    assert [user.user_login for user in users] == ["a"]


def test_invalid_boolean_is_rejected(tmp_path) -> None:
    source = tmp_path / "users.csv"
    source.write_text(
        "user_login,user_name,password,admin_priv\nops,Ops,pw,sometimes\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="Unsupported boolean value"):
        load_user_add_entries(str(source))


def test_json_object_without_users_list_is_rejected(tmp_path) -> None:
    source = tmp_path / "users.json"
    source.write_text('{"accounts": []}', encoding="utf-8")

    with pytest.raises(ValueError, match="'users' list"):
        load_user_add_entries(str(source))


def test_empty_input_is_rejected(tmp_path) -> None:
    source = tmp_path / "users.csv"
    source.write_text("  \n", encoding="utf-8")

    with pytest.raises(ValueError, match="Input is empty"):
        load_user_add_entries(str(source))
