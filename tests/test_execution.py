import logging
import pytest
from atoms import Compiled, Constant, ExecutionError, UnknownWord, StackUnderflow, MemoryOutOfRange
from execution import Memory, Runtime, Stack, MEMORY_SIZE
from interpreter import Interpreter
from patterns import ImmediateWord

@pytest.fixture
def runtime(output):
    return Runtime(output.append, memory_size=16)

def test_stack_is_lifo():
    stack = Stack('data')
    for value in (1, 2, 3): stack.push(value)
    assert stack.peek() == 3 and stack.peek(2) == 1
    assert [stack.pop(), stack.pop(), stack.pop()] == [3, 2, 1]
    assert len(stack) == 0

def test_stack_underflow():
    stack = Stack('return')
    with pytest.raises(StackUnderflow) as info: stack.pop()
    assert info.value.stack == 'return'
    stack.push(1)
    with pytest.raises(StackUnderflow): stack.peek(1)

def test_memory_bounds():
    memory = Memory(4)
    memory[3] = 7
    assert memory[3] == 7 and memory[0] == 0
    with pytest.raises(MemoryOutOfRange) as info: memory[4]
    assert info.value.address == 4
    with pytest.raises(MemoryOutOfRange): memory[-1] = 1
    assert list(memory.used()) == [(3, 7)]

def test_default_memory_size(output):
    assert len(Runtime(output.append).memory) == MEMORY_SIZE == 100000

def test_integers_are_pushed(runtime):
    runtime.run('1 -2 +3 0')
    assert list(runtime.data) == [1, -2, 3, 0]

def test_unknown_word(runtime):
    with pytest.raises(UnknownWord) as info: runtime.run('1 Nothing')
    assert info.value.name == 'nothing'
    with pytest.raises(UnknownWord): runtime.run('1_000')

def test_normal_words_run_their_body(runtime):
    runtime.register('three', Constant(3))
    runtime.register('six', Compiled(['three', 'three']))
    runtime.run('SIX')
    assert list(runtime.data) == [3, 3]

def test_immediate_word_runs_then_its_result(runtime):
    runtime.register('seven', Constant(7))
    runtime.register('nop', Compiled([]))
    runtime.register_immediate('now', ImmediateWord('now', Compiled(['seven'])))
    runtime.run('now')
    assert list(runtime.data) == [7]

def test_partitions_stay_disjoint(runtime):
    runtime.register('x', Constant(1))
    runtime.register_immediate('x', ImmediateWord('x', Constant(2)))
    assert 'x' not in runtime.words and 'x' in runtime.immediates
    runtime.register('x', Constant(3))
    assert 'x' in runtime.words and 'x' not in runtime.immediates

def test_define_records_the_most_recent_definition(runtime):
    runtime.define('a', Constant(1))
    assert runtime.recent == 'a'
    runtime.register('b', Constant(2))
    assert runtime.recent == 'a'

def test_unique_names_cannot_be_tokens(runtime):
    first, second = runtime.unique_name('if'), runtime.unique_name('if')
    assert first != second
    assert ' ' in first and ' ' in second
    assert runtime.here == 0

def test_allot_moves_here_forward(runtime):
    assert runtime.allot(3) == 0
    assert runtime.allot(0) == 3
    assert runtime.here == 3
    with pytest.raises(ExecutionError): runtime.allot(-1)
    with pytest.raises(MemoryOutOfRange): runtime.allot(14)
    assert runtime.here == 3

def test_emit_keeps_the_low_byte(runtime, output):
    runtime.emit(0x141)
    runtime.emit_text('é')
    assert bytes(output) == b'A\xc3\xa9'

def test_dump_logs_stacks_and_memory(runtime, caplog):
    caplog.set_level(logging.INFO, logger='execution')
    runtime.memory[5] = 9
    runtime.run('1 2')
    runtime.dump()
    assert 'data [1, 2]' in caplog.text
    assert '[5]=9' in caplog.text

def test_interpreters_are_isolated():
    first, second = Interpreter(lambda _: None), Interpreter(lambda _: None)
    first.execute(': only-here 1 ; variable v 5 v !')
    assert 'only-here' in first.runtime.words
    assert 'only-here' not in second.runtime.words
    assert second.runtime.here == 0 and second.runtime.memory[0] == 0
    with pytest.raises(UnknownWord): second.execute('only-here')

def test_runs_share_the_dictionary(run):
    run(': double 2 * ;')
    assert run('21 double .') == '42 '

def test_balanced_programs_leave_stacks_empty(interpreter):
    interpreter.execute(': t 1 2 + drop 3 >r r> drop ; t 4 0 do i drop loop')
    assert len(interpreter.runtime.data) == 0
    assert len(interpreter.runtime.returns) == 0

def test_verbose_trace(run, caplog):
    caplog.set_level(logging.DEBUG, logger='execution')
    run(': sq dup * ; 3 sq')
    assert 'RP: sq' in caplog.text
    assert 'RW: dup' in caplog.text and 'intrinsic<Dup>' in caplog.text
