from pathlib import Path

from scriptlang.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_nested_if(capsys):
    main([str(EXAMPLES / 'program_3.scr')])
    out = capsys.readouterr().out.strip()
    assert out == '"negative"'
