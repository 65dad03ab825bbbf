# SPDX-License-Identifier: Apache-2.0
"""
Jolt CLI — encode/decode entrypoint.

Asserts:
  • encode/decode read stdin or a file and print to stdout
  • JOLT_MODE picks the default mode; --mode overrides it
  • codec failures exit 1 with a schema-valid error envelope on stderr
  • unusable input and bad arguments exit 2
  • to_plain renders every decoded value as plain JSON data
"""

import datetime
import io
import json

import pytest

from jolt_sdk import cli
from jolt_sdk.jolt.types import IsoDuration, Node, Path, Point, Relationship
from tests.utils.schema_registry import ERROR_ENVELOPE_SCHEMA_ID, assert_valid


@pytest.fixture
def stdin(monkeypatch):
    def feed(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))
    return feed


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv(cli.MODE_ENV, raising=False)
    monkeypatch.delenv(cli.LOG_LEVEL_ENV, raising=False)


def test_encode_strict(stdin, capsys):
    stdin('["A", 21, 42.3]')
    assert cli.main(["encode", "--mode", "strict"]) == cli.EXIT_OK
    out = capsys.readouterr().out.strip()
    assert json.loads(out) == {"[]": [{"U": "A"}, {"Z": "21"}, {"R": "42.3"}]}


def test_encode_defaults_to_sparse(stdin, capsys):
    stdin('["A", 21]')
    assert cli.main(["encode"]) == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"[]": [{"U": "A"}, 21]}


def test_mode_from_environment(stdin, capsys, monkeypatch):
    monkeypatch.setenv(cli.MODE_ENV, "strict")
    stdin("7")
    assert cli.main(["encode"]) == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"Z": "7"}


def test_mode_flag_beats_environment(stdin, capsys, monkeypatch):
    monkeypatch.setenv(cli.MODE_ENV, "strict")
    stdin("7")
    assert cli.main(["encode", "--mode", "sparse"]) == cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "7"


def test_encode_pretty(stdin, capsys):
    stdin('{"a": "b"}')
    assert cli.main(["encode", "--pretty"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "\n  " in out
    assert json.loads(out) == {"{}": {"a": {"U": "b"}}}


def test_decode_with_kind(stdin, capsys):
    stdin('{"T":"P42D"}')
    assert cli.main(["decode", "--kind", "duration"]) == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == "P42D"


def test_decode_from_file(tmp_path, capsys):
    src = tmp_path / "node.json"
    src.write_text(
        '{"()":{"id":1,"labels":{"[]":[{"U":"Person"}]},"properties":{"{}":{"name":{"U":"A"}}}}}',
        encoding="utf-8",
    )
    assert cli.main(["decode", str(src)]) == cli.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {
        "id": 1,
        "labels": ["Person"],
        "properties": {"name": "A"},
    }


def test_codec_error_prints_envelope(stdin, capsys):
    stdin('{"X":"1"}')
    assert cli.main(["decode"]) == cli.EXIT_CODEC_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    env = json.loads(captured.err)
    assert_valid(ERROR_ENVELOPE_SCHEMA_ID, env)
    assert env["code"] == "UNKNOWN_TAG"
    assert env["details"]["tag"] == "X"


def test_kind_mismatch_envelope(stdin, capsys):
    stdin('{"U":"x"}')
    assert cli.main(["decode", "--mode", "strict", "--kind", "integer"]) == cli.EXIT_CODEC_ERROR
    env = json.loads(capsys.readouterr().err)
    assert_valid(ERROR_ENVELOPE_SCHEMA_ID, env)
    assert env["code"] == "TAG_KIND_MISMATCH"


def test_overlong_integer_is_a_codec_error(stdin, capsys):
    stdin('{"Z":"%s"}' % ("7" * 5000))
    assert cli.main(["decode", "--kind", "integer"]) == cli.EXIT_CODEC_ERROR
    env = json.loads(capsys.readouterr().err)
    assert_valid(ERROR_ENVELOPE_SCHEMA_ID, env)
    assert env["code"] == "PAYLOAD_FORMAT"


def test_invalid_json_for_encode_is_usage_error(stdin, capsys):
    stdin("{not json")
    assert cli.main(["encode"]) == cli.EXIT_USAGE
    assert "not valid JSON" in capsys.readouterr().err


def test_missing_file_is_usage_error(tmp_path, capsys):
    assert cli.main(["decode", str(tmp_path / "missing.json")]) == cli.EXIT_USAGE
    assert "cannot read" in capsys.readouterr().err


def test_unknown_command_is_usage_error(capsys):
    assert cli.main(["frobnicate"]) == cli.EXIT_USAGE


def test_unknown_kind_is_usage_error(stdin):
    stdin("1")
    assert cli.main(["decode", "--kind", "nope"]) == cli.EXIT_USAGE


def test_to_plain_scalars():
    assert cli.to_plain(None) is None
    assert cli.to_plain(b"\x00\xff") == "00FF"
    assert cli.to_plain(datetime.date(2020, 12, 14)) == "2020-12-14"
    assert cli.to_plain(IsoDuration(days=3)) == "P3D"
    assert cli.to_plain(datetime.timedelta(hours=1)) == "PT1H"
    assert cli.to_plain(Point(4326, 1.0, 2.0)) == {"srid": 4326, "x": 1.0, "y": 2.0}
    assert cli.to_plain(Point(4979, 1.0, 2.0, 3.5))["z"] == 3.5


def test_to_plain_graph_values():
    a, b = Node(1, ("A",), {}), Node(2, ("B",), {})
    rel = Relationship(5, 1, 2, "KNOWS", {"since": datetime.date(2020, 1, 1)})
    plain = cli.to_plain(Path((a, rel, b)))
    assert [e["id"] for e in plain["elements"]] == [1, 5, 2]
    assert plain["elements"][1] == {
        "id": 5,
        "type": "KNOWS",
        "startNodeId": 1,
        "endNodeId": 2,
        "properties": {"since": "2020-01-01"},
    }
