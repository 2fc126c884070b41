import io
import pytest
from atoms import UnknownWord
from interpreter import Interpreter, main, run_forth

def test_run_forth_starts_fresh():
    assert run_forth(': x 1 ;') == ''
    with pytest.raises(UnknownWord): run_forth('x')

def test_run_forth_decodes_utf8():
    assert run_forth('." héllo"') == 'héllo'

def test_execute_safely_reports_errors(interpreter, capsys):
    assert interpreter.execute_safely('1 2 + frobnicate') is False
    assert 'unknown word' in capsys.readouterr().err
    assert list(interpreter.runtime.data) == [3]

def test_execute_safely_keeps_earlier_definitions(interpreter, output):
    assert interpreter.execute_safely(': a 1 ; : b oops') is False
    assert interpreter.execute_safely('a .') is True
    assert output.decode() == '1 '

def test_execute_safely_shows_python_stack(output, capsys):
    interpreter = Interpreter(output.append, show_errors=True)
    interpreter.execute_safely('drop')
    assert 'Traceback' in capsys.readouterr().err

def test_loop_runs_lines_until_end_of_input(interpreter, output, monkeypatch):
    monkeypatch.setattr('sys.stdin', io.StringIO(': sq dup * ;\n7 sq .\nnope\n2 sq .\n'))
    interpreter.loop()
    assert output.decode() == '49 4 '

def test_main_runs_files(tmp_path, capsys):
    first = tmp_path / 'first.fs' ; first.write_text(': sq dup * ;\n')
    second = tmp_path / 'second.fs' ; second.write_text('6 sq . cr\n')
    assert main([str(first), str(second)]) == 0
    assert capsys.readouterr().out == '36 \n'

def test_main_stops_on_error(tmp_path, capsys):
    broken = tmp_path / 'broken.fs' ; broken.write_text('1 if 2')
    assert main([str(broken)]) == 1
    assert 'missing closing' in capsys.readouterr().err

def test_execute_safely_reports_runaway_recursion(interpreter, capsys):
    assert interpreter.execute_safely(': forever forever ; forever') is False
    assert 'too deep' in capsys.readouterr().err
    assert interpreter.execute_safely('1 .') is True

def test_main_reports_unreadable_file(tmp_path, capsys):
    good = tmp_path / 'good.fs' ; good.write_text('5 .')
    assert main([str(tmp_path / 'missing.fs'), str(good)]) == 1
    captured = capsys.readouterr()
    assert 'cannot read' in captured.err
    assert captured.out == ''
