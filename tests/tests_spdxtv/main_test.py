import pytest

import spdxtv.main


def test_main_parse_args():
    m = spdxtv.main.Main(name="spdxtv")
    m.argument_parser.add_argument("file")
    assert m.args is None

    m.parse_args(["--nocolor", "-v", "doc.spdx"])
    assert m.args.file == "doc.spdx"
    assert m.args.verbose == 1
    assert m.args.nocolor


def test_main_usage(capsys):
    m = spdxtv.main.Main(name="spdxtv")
    with pytest.raises(SystemExit):
        m.parse_args(["--help"])
    assert capsys.readouterr().out.startswith("usage: spdxtv")
