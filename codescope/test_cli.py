"""
Tests for the command-line adapter.

Run with: python -m pytest codescope/test_cli.py -v
"""

import json
import logging

import pytest

from codescope.cli import iter_source_paths, main, read_sources

EVAL_SNIPPET = "if (a == null) { eval(x); }\n" * 10


@pytest.fixture(autouse=True)
def restore_logger():
    """configure_logging replaces handlers; put the package logger back afterwards."""
    logger = logging.getLogger('codescope')
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def project(tmp_path):
    (tmp_path / 'src').mkdir()
    (tmp_path / 'src' / 'app.js').write_text(EVAL_SNIPPET)
    (tmp_path / 'src' / 'util.py').write_text('def add(first, second):\n    return first + second\n')
    (tmp_path / 'README.md').write_text('# Demo\n')
    (tmp_path / 'node_modules').mkdir()
    (tmp_path / 'node_modules' / 'dep.js').write_text('eval(x);\n')
    return tmp_path


class TestSourceDiscovery:
    """Tests for directory expansion and file reading."""

    def test_directory_expansion(self, project):
        found = [p.relative_to(project).as_posix() for p in iter_source_paths([project])]
        assert found == ['src/app.js', 'src/util.py']

    def test_explicit_file_kept_even_if_unsupported(self, project):
        found = list(iter_source_paths([project / 'README.md']))
        assert found == [project / 'README.md']

    def test_missing_path_ignored(self, project):
        assert list(iter_source_paths([project / 'missing.js'])) == []

    def test_read_sources(self, project):
        files = read_sources([project / 'src'])
        assert [f.file_name for f in files] == ['app.js', 'util.py']
        assert files[0].content == EVAL_SNIPPET


class TestMain:
    """Tests for main()."""

    def test_summary_report(self, project, capsys):
        code = main([str(project), '--name', 'demo'])
        out = capsys.readouterr().out

        assert code == 0
        assert out.startswith('# demo analysis')
        assert 'Files analyzed: 2' in out

    def test_json_report(self, project, capsys):
        code = main([str(project / 'src'), '--report', 'json'])
        payload = json.loads(capsys.readouterr().out)

        assert code == 0
        assert [f['file_name'] for f in payload['files']] == ['app.js', 'util.py']
        assert payload['total_duplicate_pairs'] == 1

    def test_security_report(self, project, capsys):
        code = main([str(project / 'src' / 'app.js'), '--report', 'security'])
        out = capsys.readouterr().out

        assert code == 0
        assert '# Security Report' in out
        assert 'injection' in out

    def test_min_severity_filters(self, project, capsys):
        main([str(project / 'src' / 'app.js'), '--report', 'json', '--min-severity', 'critical'])
        payload = json.loads(capsys.readouterr().out)
        assert payload['files'][0]['security']['findings'] == []

    def test_invalid_setting_returns_2(self, project, capsys):
        code = main([str(project), '--window-size', '0'])
        assert code == 2
        assert 'Invalid analysis settings' in capsys.readouterr().err

    def test_no_files_returns_1(self, tmp_path, capsys):
        code = main([str(tmp_path)])
        assert code == 1
        assert 'no readable source files' in capsys.readouterr().err

    def test_only_unsupported_returns_1(self, project, capsys):
        code = main([str(project / 'README.md')])
        assert code == 1
        assert 'README.md: unsupported_language' in capsys.readouterr().out

    def test_log_file(self, project, tmp_path, capsys):
        log_file = tmp_path / 'run.log'
        main([str(project / 'src'), '--log-file', str(log_file)])
        capsys.readouterr()
        assert 'Analyzed 2 files' in log_file.read_text()
