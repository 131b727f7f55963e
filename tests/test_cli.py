import json
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from ctxctl import __version__
from ctxctl.cli import cli
from ctxctl.storage.context_storage import ContextStorage


@pytest.fixture
def runner():
    """Create a CLI runner for testing"""
    return CliRunner()


@pytest.fixture
def context_dir(tmp_path):
    """Context directory holding dev and prod"""
    storage = ContextStorage(tmp_path)
    storage.create_context("dev")
    storage.create_context("prod")
    return tmp_path


def test_cli_version(runner):
    result = runner.invoke(cli, ['--version'])
    assert result.exit_code == 0
    assert f'version {__version__}' in result.output


def test_help(runner):
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'manage named connection contexts' in result.output


def test_list_text(runner, context_dir):
    ContextStorage(context_dir).write_index("prod")
    result = runner.invoke(cli, ['list', '--directory', str(context_dir)])
    assert result.exit_code == 0
    assert 'Contexts found in' in result.output
    assert 'prod (default)' in result.output
    assert 'dev (default)' not in result.output


def test_list_json(runner, context_dir):
    ContextStorage(context_dir).write_index("prod")
    result = runner.invoke(cli, ['list', '--directory', str(context_dir), '-o', 'json'])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"contexts": ["dev", "prod"], "default": "prod"}


def test_directory_from_environment(runner, context_dir):
    result = runner.invoke(cli, ['list', '-o', 'json'], env={'CTXCTL_CONTEXTS': str(context_dir)})
    assert result.exit_code == 0
    assert json.loads(result.stdout)["contexts"] == ["dev", "prod"]


def test_new_and_delete(runner, tmp_path):
    """Full lifecycle through the command line"""
    result = runner.invoke(cli, ['new', 'dev', '--directory', str(tmp_path)])
    assert result.exit_code == 0
    assert 'Created context dev.json' in result.output

    result = runner.invoke(cli, ['default', 'dev', '--directory', str(tmp_path)])
    assert result.exit_code == 0
    assert 'Set new context successfully' in result.output

    result = runner.invoke(cli, ['del', 'dev', '--directory', str(tmp_path)])
    assert result.exit_code == 0
    assert 'Removed file successfully' in result.output
    assert ContextStorage(tmp_path).list_names() == []
    assert ContextStorage(tmp_path).read_index().name == 'dev'


def test_default_unknown_is_error(runner, context_dir):
    result = runner.invoke(cli, ['default', 'qa', '--directory', str(context_dir)])
    assert result.exit_code == 1
    assert 'context supplied was not found' in result.output
    assert 'Traceback' not in result.output


def test_default_interactive(runner, context_dir):
    """The real prompt picks by number"""
    result = runner.invoke(cli, ['default', '--directory', str(context_dir)], input='2\n')
    assert result.exit_code == 0
    assert 'Select a default context:' in result.output
    assert ContextStorage(context_dir).read_index().name == 'prod'


def test_default_interactive_eof(runner, context_dir):
    """Closing the input stream selects nothing"""
    result = runner.invoke(cli, ['default', '--directory', str(context_dir)], input='')
    assert result.exit_code == 1
    assert 'not found' in result.output


def test_delete_with_patched_chooser(runner, context_dir):
    with patch('ctxctl.cli.chooser', lambda choices, default, message: choices.index('dev')):
        result = runner.invoke(cli, ['del', '--directory', str(context_dir), '-o', 'json'])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"success": True}
    assert ContextStorage(context_dir).list_names() == ['prod']


def test_edit_uses_editor_env(runner, context_dir):
    with patch('ctxctl.commands.shutil.which', return_value='/usr/bin/nano'), \
         patch('ctxctl.commands.subprocess.run') as mock_run:
        result = runner.invoke(cli, ['edit', 'dev', '--directory', str(context_dir)],
                               env={'EDITOR': 'nano'})
    assert result.exit_code == 0
    assert 'Finished editing context successfully' in result.output
    mock_run.assert_called_once_with(['/usr/bin/nano', str(context_dir / 'dev.json')])


def test_edit_missing_editor(runner, context_dir):
    with patch('ctxctl.commands.shutil.which', return_value=None):
        result = runner.invoke(cli, ['edit', 'dev', '-e', 'nope', '--directory', str(context_dir)])
    assert result.exit_code == 1
    assert "Editor 'nope' not found" in result.output


def test_show_json(runner, context_dir):
    ContextStorage(context_dir).write_index('dev')
    result = runner.invoke(cli, ['show', '--directory', str(context_dir), '-o', 'json'])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data['control_port'] == 4222
    assert data['lattice_id'] == 'default'


def test_show_corrupt_context(runner, context_dir):
    (context_dir / 'dev.json').write_text('{broken')
    result = runner.invoke(cli, ['show', 'dev', '--directory', str(context_dir)])
    assert result.exit_code == 1
    assert 'Invalid JSON' in result.output


def test_missing_directory_error_prefix(runner, tmp_path):
    """Failures print a single 'Error:' line"""
    with patch('ctxctl.commands.ContextStorage.from_directory',
               return_value=ContextStorage(tmp_path / "missing")):
        result = runner.invoke(cli, ['list'])
    assert result.exit_code == 1
    assert 'Error: Error' not in result.output
    assert 'please ensure directory' in result.output
