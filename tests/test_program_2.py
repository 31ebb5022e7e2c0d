from pathlib import Path

from scriptlang.__main__ import main

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_counter_closure(capsys):
    """The counter returned by `counter` keeps updating the `count` of its
    defining call after that call has returned; two discarded calls and a
    final one take it from 10 to 13."""
    main([str(EXAMPLES / 'program_2.scr')])
    out = capsys.readouterr().out.strip()
    assert out == '13'
