"""Tests for the mit command-line dispatcher."""

import os
import subprocess
from pathlib import Path

import pytest

import sys
SCRIPTS_DIR = Path(__file__).resolve().parent.parent / 'scripts'
sys.path.insert(0, str(SCRIPTS_DIR))

import mit

SAMPLE_TODO = """\
(A) call mom @phone
{2015.01.01} old task
{2016.11.16}  pay rent @home
2016-11-01 water plants @home
{2016.Q4.00} review goals
"""


@pytest.fixture
def todo_file(tmp_path, monkeypatch):
    f = tmp_path / 'todo.txt'
    f.write_text(SAMPLE_TODO)
    monkeypatch.setenv('TODO_FILE', str(f))
    monkeypatch.delenv('TODO_DIR', raising=False)
    monkeypatch.delenv('TODOTXT_DATE_ON_ADD', raising=False)
    return f


def run_mit(capsys, *words):
    mit.main(['--date', '2016-11-13', *words])
    return capsys.readouterr()


def test_list_all(todo_file, capsys):
    out = run_mit(capsys).out
    assert out.index('This Quarter:') < out.index('Past Due:') < out.index('Wednesday:')
    assert '  old task (2)' in out
    assert '  pay rent @home (3)' in out
    assert 'call mom' not in out


def test_list_context(todo_file, capsys):
    out = run_mit(capsys, '@home').out
    assert 'pay rent' in out
    assert 'old task' not in out


def test_list_not_context(todo_file, capsys):
    out = run_mit(capsys, 'not', '@home').out
    assert 'pay rent' not in out
    assert 'old task' in out
    assert 'review goals' in out


def test_list_context_without_matches(todo_file, capsys):
    assert run_mit(capsys, '@work').out.strip() == 'No MITs found for @work.'


def test_add_mit(todo_file, capsys):
    out = run_mit(capsys, 'wed', '(B)', 'buy milk').out
    assert 'Added MIT 6' in out
    assert todo_file.read_text().splitlines()[-1] == '(B) {2016.11.16} buy milk'


def test_add_mit_with_creation_date(todo_file, capsys, monkeypatch):
    monkeypatch.setenv('TODOTXT_DATE_ON_ADD', '1')
    run_mit(capsys, 'q1', '(B)', 'plan', 'budget')
    assert todo_file.read_text().splitlines()[-1] == '(B) 2016-11-13 {2017.Q1.00} plan budget'


def test_quick_list_for_a_date(todo_file, capsys):
    out = run_mit(capsys, '2016.11.16').out
    assert 'Wednesday:' in out
    assert 'pay rent' in out
    assert 'old task' not in out
    assert todo_file.read_text() == SAMPLE_TODO


def test_quick_list_with_context(todo_file, capsys):
    out = run_mit(capsys, 'wed', '@phone').out
    assert out.strip() == 'No MITs found for @phone.'


def test_move(todo_file, capsys):
    out = run_mit(capsys, 'mv', '2', 'jan').out
    assert 'Moved MIT 2 from 2015.01.01 to 2017.01.00' in out
    assert todo_file.read_text().splitlines()[1] == '{2017.01.00} old task'


def test_move_promotes_plain_task(todo_file, capsys):
    run_mit(capsys, 'mv', '4', 'tomorrow')
    assert todo_file.read_text().splitlines()[3] == '2016-11-01 {2016.11.14} water plants @home'


def test_remove(todo_file, capsys):
    run_mit(capsys, 'rm', '3')
    assert todo_file.read_text().splitlines()[2] == 'pay rent @home'


def test_remove_plain_task_is_a_no_op(todo_file, capsys):
    out = run_mit(capsys, 'rm', '1').out
    assert 'not an MIT' in out
    assert todo_file.read_text() == SAMPLE_TODO


@pytest.mark.parametrize('words,message', [
    (['mv', 'x', 'today'], 'invalid task id'),
    (['mv', '2', 'someday'], 'invalid date'),
    (['mv', '99', 'today'], 'invalid task id'),
    (['rm', 'abc'], 'invalid task id'),
    (['rm', '42'], 'invalid task id'),
    (['someday', 'do', 'things'], 'invalid date'),
    (['mv', '2'], 'usage'),
])
def test_errors_leave_store_untouched(todo_file, capsys, words, message):
    with pytest.raises(SystemExit) as exc:
        run_mit(capsys, *words)
    assert exc.value.code == 1
    assert message in capsys.readouterr().err
    assert todo_file.read_text() == SAMPLE_TODO


def test_missing_todo_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv('TODO_FILE', str(tmp_path / 'nope.txt'))
    with pytest.raises(SystemExit) as exc:
        run_mit(capsys)
    assert exc.value.code == 1
    assert 'todo file not found' in capsys.readouterr().err


def test_todo_dir(tmp_path, monkeypatch, capsys):
    (tmp_path / 'todo.txt').write_text('{2016.11.13} from todo dir\n')
    monkeypatch.delenv('TODO_FILE', raising=False)
    monkeypatch.setenv('TODO_DIR', str(tmp_path))
    out = run_mit(capsys).out
    assert 'Today:' in out
    assert 'from todo dir (1)' in out


def test_usage_does_not_touch_store(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv('TODO_FILE', str(tmp_path / 'nope.txt'))
    assert 'mit mv ID DATE' in run_mit(capsys, 'usage').out


@pytest.mark.parametrize('flag', ['-h', '--help', '-v', '--version'])
def test_help_and_version_exit_zero(tmp_path, flag):
    env = os.environ.copy()
    env['TODO_FILE'] = str(tmp_path / 'nope.txt')
    proc = subprocess.run(
        [sys.executable, str(SCRIPTS_DIR / 'mit.py'), flag],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )
    assert proc.returncode == 0
    assert 'mit' in proc.stdout


def test_script_end_to_end(tmp_path):
    todo = tmp_path / 'todo.txt'
    todo.write_text('(A) 2016-11-01 call mom\n')
    env = os.environ.copy()
    env['TODO_FILE'] = str(todo)

    def run(*words):
        return subprocess.run(
            [sys.executable, str(SCRIPTS_DIR / 'mit.py'), '--date', '2016-11-13', *words],
            capture_output=True,
            text=True,
            check=False,
            env=env,
        )

    assert run('mv', '1', 'today').returncode == 0
    assert todo.read_text() == '(A) 2016-11-01 {2016.11.13} call mom\n'

    listing = run()
    assert listing.returncode == 0
    assert 'Today:\n  (A) 2016-11-01 call mom (1)' in listing.stdout

    failed = run('mv', '1', 'never')
    assert failed.returncode != 0
    assert 'invalid date' in failed.stderr

    assert run('rm', '1').returncode == 0
    assert todo.read_text() == '(A) 2016-11-01 call mom\n'


def test_rm_counts_lines_by_newline_only(tmp_path, monkeypatch, capsys):
    f = tmp_path / 'todo.txt'
    f.write_bytes(b'notes\x0cpage two\n{2016.11.16} pay rent\n')
    monkeypatch.setenv('TODO_FILE', str(f))
    out = run_mit(capsys, 'rm', '2').out
    assert 'no longer an MIT' in out
    assert f.read_bytes() == b'notes\x0cpage two\npay rent\n'


def test_rm_keeps_crlf_line_endings(tmp_path, monkeypatch, capsys):
    f = tmp_path / 'todo.txt'
    f.write_bytes(b'a\r\n{2016.11.16} pay rent\r\nb\r\n')
    monkeypatch.setenv('TODO_FILE', str(f))
    run_mit(capsys, 'rm', '2')
    assert f.read_bytes() == b'a\r\npay rent\r\nb\r\n'


@pytest.mark.parametrize('raw_id', ['²', '٣'])
def test_non_ascii_digit_id_is_rejected(todo_file, capsys, raw_id):
    with pytest.raises(SystemExit) as exc:
        run_mit(capsys, 'rm', raw_id)
    assert exc.value.code == 1
    assert 'invalid task id' in capsys.readouterr().err
    assert todo_file.read_text() == SAMPLE_TODO


@pytest.mark.parametrize('token', ['tomorrow', 'fri', 'jan', 'q1', '1d'])
def test_dates_past_year_9999_are_invalid(todo_file, capsys, token):
    with pytest.raises(SystemExit) as exc:
        mit.main(['--date', '9999-12-31', 'mv', '2', token])
    assert exc.value.code == 1
    assert 'invalid date' in capsys.readouterr().err
    assert todo_file.read_text() == SAMPLE_TODO
