"""
Command registry and REPL tests
"""
import io
import logging

import pytest

from pwstore.core.file_ops import load, save
from pwstore.core.records.store import RecordStore
from pwstore.shell.commands import Command, CommandKind, CommandRegistry, build_registry
from pwstore.shell.repl import Shell, main


def prompts(*answers):
    """Password prompt that replays answers in order."""
    remaining = list(answers)

    def prompt(_label):
        return remaining.pop(0)

    return prompt


def raising(exc_type):
    """Password prompt that fails the way getpass does on Ctrl-D or Ctrl-C."""
    def prompt(_label):
        raise exc_type()

    return prompt


@pytest.fixture
def shell(store_path):
    return Shell(store_path, prompt_password=prompts())


class TestDispatch:

    def test_empty_line(self, shell):
        assert shell.execute("   \n") == "command expected"

    def test_unknown_command(self, shell):
        assert shell.execute("frobnicate x") == "unknown command frobnicate"

    def test_arity_checked_before_dispatch(self, shell):
        assert shell.execute("add only-id") == "usage: add <id> <value>"
        assert shell.execute("remove") == "usage: remove <id>"
        assert shell.execute("view a b") == "usage: view [prefix]"
        assert shell.execute("help me") == "usage: help"
        assert len(shell.store) == 0

    def test_add_view_remove(self, shell):
        assert shell.execute("add mail hunter2") == "added entry mail"
        assert shell.execute("add db s3cr3t") == "added entry db"
        assert shell.execute("add db other") == "entry db already exists"
        assert shell.execute("view") == "db\ts3cr3t\nmail\thunter2"
        assert shell.execute("view d") == "db\ts3cr3t"
        assert shell.execute("delete db") == "removed entry 'db'"
        assert shell.execute("remove db") == "could not find entry 'db'"

    def test_add_value_keeps_spaces(self, shell):
        shell.execute("add bank correct horse battery")
        assert shell.store.get("bank") == "correct horse battery"

    def test_add_tab_in_value_reported(self, shell):
        assert shell.execute("add k a\tb") == "value may not contain a tab"
        assert "k" not in shell.store

    def test_add_unencodable_text_reported(self, shell):
        assert shell.execute("add k\udcff v") == "identifier is not valid UTF-8 text"
        assert len(shell.store) == 0

    def test_view_empty_prints_nothing(self, shell):
        assert shell.execute("view") is None

    def test_generate(self, shell):
        assert len(shell.execute("generate 16")) == 16
        assert shell.execute("generate lots") == "lots is not a valid number"
        assert shell.execute("generate 0") == "length must be between 1 and 255"
        assert shell.execute("generate 256") == "length must be between 1 and 255"

    def test_help_lists_commands(self, shell):
        text = shell.execute("help")
        for name in ("view", "add", "remove", "delete", "generate", "save", "load", "quit"):
            assert name in text

    def test_quit(self, shell):
        assert shell.running
        shell.execute("exit")
        assert not shell.running


class TestSaveLoadCommands:

    def test_save_then_load(self, store_path):
        shell = Shell(store_path, prompt_password=prompts("pw", "pw", "pw"))
        shell.execute("add db s3cr3t")

        assert shell.execute("save") == f"{store_path} saved successfully"
        shell.execute("remove db")
        assert shell.execute("load") == f"{store_path} loaded successfully"
        assert shell.store.get("db") == "s3cr3t"

    def test_save_confirmation_mismatch(self, store_path):
        shell = Shell(store_path, prompt_password=prompts("pw", "typo"))
        assert shell.execute("save") == "passwords do not match"
        assert not store_path.exists()

    def test_save_explicit_path(self, tmp_path, store_path):
        other = tmp_path / "other.pws"
        shell = Shell(store_path, prompt_password=prompts("pw", "pw"))
        assert shell.execute(f"save {other}") == f"{other} saved successfully"
        assert other.exists()

    def test_save_to_missing_directory(self, tmp_path, store_path):
        target = tmp_path / "nope" / "x.pws"
        shell = Shell(store_path, prompt_password=prompts("pw", "pw"))
        assert shell.execute(f"save {target}").startswith(f"could not save {target}")

    def test_wrong_password_keeps_store(self, store_path):
        save(store_path, "right", RecordStore({"db": "s3cr3t"}))
        shell = Shell(store_path, prompt_password=prompts("wrong"))
        shell.execute("add local value")

        assert shell.execute("load") == "wrong password or corrupted file"
        assert list(shell.store.view()) == [("local", "value")]

    def test_load_missing_file(self, store_path):
        shell = Shell(store_path, prompt_password=prompts("pw"))
        assert shell.execute("load").startswith(f"could not load {store_path}")

    @pytest.mark.parametrize("interrupt", [EOFError, KeyboardInterrupt])
    def test_prompt_interrupt_cancels_save(self, store_path, interrupt):
        shell = Shell(store_path, prompt_password=raising(interrupt))
        shell.execute("add db s3cr3t")

        assert shell.execute("save") == "cancelled"
        assert not store_path.exists()
        assert shell.running

    @pytest.mark.parametrize("interrupt", [EOFError, KeyboardInterrupt])
    def test_prompt_interrupt_cancels_load(self, store_path, interrupt):
        save(store_path, "pw", RecordStore({"db": "s3cr3t"}))
        shell = Shell(store_path, prompt_password=raising(interrupt))
        shell.execute("add local value")

        assert shell.execute("load") == "cancelled"
        assert list(shell.store.view()) == [("local", "value")]


class TestRun:

    def test_run_script(self, store_path):
        shell = Shell(store_path, prompt_password=prompts())
        stdin = io.StringIO("add db s3cr3t\nview\nbogus\nquit\nadd never reached\n")
        stdout = io.StringIO()

        shell.run(stdin=stdin, stdout=stdout)

        assert stdout.getvalue() == "added entry db\ndb\ts3cr3t\nunknown command bogus\n"
        assert "never" not in shell.store

    def test_run_stops_at_eof(self, store_path):
        shell = Shell(store_path, prompt_password=prompts())
        stdout = io.StringIO()
        shell.run(stdin=io.StringIO("add a b"), stdout=stdout)
        assert stdout.getvalue() == "added entry a\n"

    def test_run_continues_after_cancelled_prompt(self, store_path):
        shell = Shell(store_path, prompt_password=raising(EOFError))
        stdout = io.StringIO()

        shell.run(stdin=io.StringIO("add db s3cr3t\nsave\nview\n"), stdout=stdout)

        assert stdout.getvalue() == "added entry db\ncancelled\ndb\ts3cr3t\n"


class TestRegistry:

    def test_duplicate_registration(self):
        registry = build_registry()
        with pytest.raises(ValueError):
            registry.register(Command("add", CommandKind.NO_STORE, lambda ctx, args: None))

    def test_alias_lookup(self):
        registry = build_registry()
        assert registry.get("delete") is registry.get("remove")
        assert registry.get("exit").name == "quit"

    def test_custom_read_only_command(self, store_path):
        registry = CommandRegistry().register(
            Command("count", CommandKind.READ_ONLY, lambda ctx, store, args: str(len(store)))
        )
        shell = Shell(store_path, prompt_password=prompts(), registry=registry)
        assert shell.execute("count") == "0"


class TestMain:

    @pytest.fixture(autouse=True)
    def _isolated(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PWSTORE_PATHS__DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("PWSTORE_PATHS__LOG_DIR", str(tmp_path / "logs"))
        monkeypatch.setenv("PWSTORE_LOGGING__ENABLE_CONSOLE", "false")
        yield
        package_logger = logging.getLogger("pwstore")
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)
        package_logger.propagate = True

    def test_main_uses_configured_data_dir(self, monkeypatch, capsys, tmp_path):
        monkeypatch.setattr("sys.stdin", io.StringIO("add db s3cr3t\nview\nquit\n"))

        assert main([]) == 0
        assert capsys.readouterr().out == "added entry db\ndb\ts3cr3t\n"
        assert (tmp_path / "data").is_dir()

    def test_main_file_and_log_level_overrides(self, monkeypatch, capsys, tmp_path):
        target = tmp_path / "work.pws"
        monkeypatch.setattr("getpass.getpass", prompts("pw", "pw"))
        monkeypatch.setattr("sys.stdin", io.StringIO("add db s3cr3t\nsave\nquit\n"))

        assert main(["--file", str(target), "--log-level", "DEBUG"]) == 0

        assert capsys.readouterr().out == f"added entry db\n{target} saved successfully\n"
        assert load(target, "pw").get("db") == "s3cr3t"
        assert logging.getLogger("pwstore").level == logging.DEBUG

    def test_main_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            main(["--log-level", "LOUD"])
