from pathlib import Path

import pytest

from scriptlang.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_4_unbound_set(capsys):
    # `set y = 2` names a variable that was never declared
    with pytest.raises(SystemExit) as excinfo:
        main([str(EXAMPLES / 'program_4.scr')])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'Identifier not bound: y' in captured.err


def test_program_4_tokens(capsys):
    main(['--tokens', str(EXAMPLES / 'program_4.scr')])
    lines = capsys.readouterr().out.splitlines()
    assert lines[:4] == ['KWD_CONST', 'IDENTIFIER(greeting)', 'EQU', 'STRING(say "hi")']
    assert lines[-4:] == ['KWD_SET', 'IDENTIFIER(y)', 'EQU', 'NUMBER(2)']
