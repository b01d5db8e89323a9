import logging
from unittest import mock

import pytest

from cdnadd import cli


def test_missing_name_prints_usage(capsys):
    with mock.patch("cdnadd.cli.run") as mock_run:
        cli.main([])
    assert "usage: cdnadd" in capsys.readouterr().out
    mock_run.assert_not_called()


def test_blank_name_prints_usage(capsys):
    with mock.patch("cdnadd.cli.run") as mock_run:
        cli.main(["   "])
    assert "usage: cdnadd" in capsys.readouterr().out
    mock_run.assert_not_called()


def test_ask_method_reprompts(scripted, caplog):
    ask = scripted(["svn", "", " GIT "])
    with caplog.at_level(logging.ERROR, logger="cdnadd"):
        assert cli.ask_method(ask) == "git"
    assert caplog.text.count("Invalid auto-update method") == 2


@mock.patch("cdnadd.cli.Publisher")
@mock.patch("cdnadd.cli.Assembler")
@mock.patch("cdnadd.cli.Downloader")
def test_run_npm(mock_downloader, mock_assembler, mock_publisher, scripted):
    config = mock.Mock(can_open_pull_requests=False)
    record = mock_assembler.return_value.from_npm.return_value

    assert cli.run("jquery", config, ask=scripted(["npm"])) is record
    mock_assembler.return_value.from_npm.assert_called_once_with("jquery")
    assert mock_publisher.call_args.args[3] is None
    mock_publisher.return_value.publish.assert_called_once_with(record)


@mock.patch("cdnadd.cli.Publisher")
@mock.patch("cdnadd.cli.GitHubClient")
@mock.patch("cdnadd.cli.Assembler")
@mock.patch("cdnadd.cli.Downloader")
def test_run_git_with_pull_requests(mock_downloader, mock_assembler, mock_github, mock_publisher, scripted):
    config = mock.Mock(can_open_pull_requests=True)

    cli.run("lib", config, ask=scripted(["git"]))
    mock_assembler.return_value.from_git.assert_called_once_with("lib")
    assert mock_publisher.call_args.args[3] is mock_github.return_value


@mock.patch("cdnadd.cli.Publisher")
@mock.patch("cdnadd.cli.Assembler")
@mock.patch("cdnadd.cli.Downloader")
def test_run_aborted_acquisition_publishes_nothing(mock_downloader, mock_assembler, mock_publisher, scripted):
    mock_assembler.return_value.from_npm.return_value = None
    assert cli.run("nope", mock.Mock(), ask=scripted(["npm"])) is None
    mock_publisher.assert_not_called()


@mock.patch("cdnadd.cli.Config")
@mock.patch("cdnadd.cli.run", return_value=None)
def test_main_exits_nonzero_without_record(mock_run, mock_config):
    with pytest.raises(SystemExit) as exc:
        cli.main(["nope", "--no-pr"])
    assert exc.value.code == 1
    mock_run.assert_called_once_with("nope", mock_config.return_value, False)


@mock.patch("cdnadd.cli.Config")
@mock.patch("cdnadd.cli.run", side_effect=KeyboardInterrupt)
def test_main_interrupted(mock_run, mock_config):
    with pytest.raises(SystemExit) as exc:
        cli.main(["lib"])
    assert exc.value.code == 1
