from portal_app.manage import main
from portal_app.models import Role
from portal_app.services.auth import LocalAuth


def test_create_user(db_path, capsys):
    assert main(["--db", db_path, "create-user", "grace@example.com", "--role", "evaluator",
                 "--password", "eval-password"]) == 0
    assert "Created evaluator grace@example.com" in capsys.readouterr().out

    auth = LocalAuth(db_path)
    identity = auth.sign_in("grace@example.com", "eval-password")
    assert auth.get_role(identity.user_id) is Role.EVALUATOR


def test_duplicate_user_fails(db_path, capsys):
    args = ["--db", db_path, "create-user", "dev@example.com", "--password", "dev-password"]
    assert main(args) == 0
    assert main(args) == 1
    assert "already exists" in capsys.readouterr().err


def test_short_password_is_refused(db_path):
    assert main(["--db", db_path, "create-user", "dev@example.com", "--password", "short"]) == 2


def test_migrate(db_path, capsys):
    assert main(["--db", db_path, "migrate"]) == 0
    assert db_path in capsys.readouterr().out
