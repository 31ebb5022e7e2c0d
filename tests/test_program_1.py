from pathlib import Path

from scriptlang.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_1_area(capsys):
    main([str(EXAMPLES / 'program_1.scr')])
    out = capsys.readouterr().out.strip()
    assert out == '42'
