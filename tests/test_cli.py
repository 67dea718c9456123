import pytest
from click.testing import CliRunner

from workspace_snippets import cli as cli_module
from workspace_snippets.cli import UpdateSummary, cli
from workspace_snippets.core.locator import find_stanzas
from workspace_snippets.core.updater import FileUpdate, Updater
from workspace_snippets.errors import ConfigurationError

STANZA = 'git_override(\n    module_name = "foo",\n    commit = "",\n)\n'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def resolved(monkeypatch, context):
    """Skip the Git and network lookups and record the arguments."""
    calls = []

    def from_repository(directory, url_prefix, session=None, timeout=60):
        calls.append((url_prefix, timeout))
        return Updater(context)

    monkeypatch.setattr(cli_module.Updater, "from_repository", from_repository)
    return calls


def test_requires_files(runner):
    result = runner.invoke(cli, [])
    assert result.exit_code == 2


def test_updates_files(runner, resolved, tmp_path):
    path = tmp_path / "MODULE.bazel"
    path.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, [str(path)])

    assert result.exit_code == 0, result.output
    assert 'commit = "abc123"' in path.read_text(encoding="utf-8")
    assert resolved == [("https://github.com/", 60.0)]


def test_options_override_defaults(runner, resolved, tmp_path):
    path = tmp_path / "MODULE.bazel"
    path.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, ["--url-prefix", "https://example.com/", "--timeout", "5", str(path)])

    assert result.exit_code == 0, result.output
    assert resolved == [("https://example.com/", 5.0)]


def test_failed_file_does_not_stop_others(runner, resolved, tmp_path):
    good = tmp_path / "good.md"
    good.write_text(STANZA, encoding="utf-8")
    bad = tmp_path / "bad.md"
    bad.write_text("no stanza here\n", encoding="utf-8")

    result = runner.invoke(cli, [str(bad), str(tmp_path / "missing.md"), str(good)])

    assert result.exit_code == 1
    assert 'commit = "abc123"' in good.read_text(encoding="utf-8")
    assert bad.read_text(encoding="utf-8") == "no stanza here\n"


def test_fatal_error_touches_nothing(runner, monkeypatch, tmp_path):
    def from_repository(*args, **kwargs):
        raise ConfigurationError("no remote URL starts with https://github.com/")

    monkeypatch.setattr(cli_module.Updater, "from_repository", from_repository)
    path = tmp_path / "MODULE.bazel"
    path.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, [str(path)])

    assert result.exit_code == 1
    assert path.read_text(encoding="utf-8") == STANZA


def test_dry_run(runner, resolved, tmp_path):
    path = tmp_path / "MODULE.bazel"
    path.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, ["--dry-run", str(path)])

    assert result.exit_code == 0, result.output
    assert path.read_text(encoding="utf-8") == STANZA


def test_unparsable_stanza_is_a_warning(runner, resolved, tmp_path):
    path = tmp_path / "MODULE.bazel"
    content = "git_override(\n    commit = 1 if x else 2,\n)\n"
    path.write_text(content, encoding="utf-8")

    result = runner.invoke(cli, [str(path)])

    assert result.exit_code == 0, result.output
    assert "left unchanged" in result.output
    assert path.read_text(encoding="utf-8") == content


def test_url_prefix_from_environment(runner, resolved, monkeypatch, tmp_path):
    monkeypatch.setenv("WORKSPACE_SNIPPETS_URL_PREFIX", "https://gitlab.example/")
    path = tmp_path / "MODULE.bazel"
    path.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, [str(path)])

    assert result.exit_code == 0, result.output
    assert resolved == [("https://gitlab.example/", 60.0)]


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "update-workspace-snippets version" in result.output


def test_summary_counts_skipped_stanzas(tmp_path):
    (stanza,) = find_stanzas(STANZA)
    summary = UpdateSummary()
    summary.add(FileUpdate(tmp_path / "a.md", changed=True, skipped_stanzas=[stanza, stanza]))
    summary.add(FileUpdate(tmp_path / "b.md", changed=False, skipped_stanzas=[stanza]))
    summary.add(FileUpdate(tmp_path / "c.md", changed=False))

    assert summary.skipped_stanzas == 3
    assert list(summary.rows()) == [
        (tmp_path / "a.md", "updated (2 stanza(s) skipped)"),
        (tmp_path / "b.md", "up to date (1 stanza(s) skipped)"),
        (tmp_path / "c.md", "up to date"),
    ]
    assert summary.success


def test_deeply_nested_stanza_does_not_abort_the_run(runner, resolved, tmp_path):
    nested = tmp_path / "nested.md"
    content = "http_archive(\n    x = " + "[" * 300 + "]" * 300 + ",\n)\n"
    nested.write_text(content, encoding="utf-8")
    good = tmp_path / "good.md"
    good.write_text(STANZA, encoding="utf-8")

    result = runner.invoke(cli, [str(nested), str(good)])

    assert result.exit_code == 0, result.output
    assert "left unchanged" in result.output
    assert nested.read_text(encoding="utf-8") == content
    assert 'commit = "abc123"' in good.read_text(encoding="utf-8")
