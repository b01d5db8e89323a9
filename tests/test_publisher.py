import json
from unittest import mock

import pytest

from cdnadd.filemap import FileMapEntry
from cdnadd.github import GitHubError
from cdnadd.publisher import Publisher, serialize
from cdnadd.record import AutoUpdate, LibraryRecord


def make_record():
    return LibraryRecord(
        name="Lib",
        description="A library",
        autoupdate=AutoUpdate("npm", "lib", [FileMapEntry("dist", ["*.js"])]),
        filename="lib.min.js",
    )


def test_serialize_is_indented_json():
    text = serialize(make_record())
    assert json.loads(text)["autoupdate"]["target"] == "lib"
    assert text.startswith('{\n  "name": "Lib"')


def test_print_mode(capsys):
    record = make_record()
    assert Publisher().publish(record) is None
    out = capsys.readouterr().out
    assert "Create new file on cdnjs/packages: packages/l/Lib.json" in out
    assert out.endswith(serialize(record))


def test_pull_request_mode(scripted):
    github = mock.Mock()
    github.create_pull_request.return_value = "https://github.com/cdnjs/packages/pull/9"
    publisher = Publisher(github=github, ask=scripted(["#1234"]))

    assert publisher.publish(make_record()) == "https://github.com/cdnjs/packages/pull/9"
    kwargs = github.create_pull_request.call_args.kwargs
    assert kwargs["repo"] == "cdnjs/packages"
    assert kwargs["branch"] == "add-library/Lib"
    assert kwargs["path"] == "packages/l/Lib.json"
    assert kwargs["content"] == serialize(make_record())
    assert kwargs["title"] == "Add Lib w/ npm auto-update"
    assert kwargs["body"].endswith("Resolves #1234")


def test_pull_request_body_without_issue():
    title, body = Publisher().pull_request_text(make_record())
    assert "Resolves" not in body
    assert "`lib`" in body


def test_pull_request_failure_prints_same_document(scripted, capsys):
    github = mock.Mock()
    github.create_pull_request.side_effect = GitHubError(422, "Reference already exists")
    record = make_record()
    before = serialize(record)

    assert Publisher(github=github, ask=scripted([""])).publish(record) is None
    out = capsys.readouterr().out
    assert out.endswith(before)
    assert json.loads(out[out.index("{"):]) == record.to_dict()


def test_record_without_autoupdate_is_rejected():
    with pytest.raises(ValueError):
        Publisher().publish(LibraryRecord(name="Lib"))
