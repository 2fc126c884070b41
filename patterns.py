''' All immediate words implementations, and the words they generate '''

from typing import Iterable, List, Optional
from atoms import Word, highlight
from execution import Runtime
from parsing import Pattern, Generated, Splice, UndefinedOperand

class Conditional(Word):
    ''' Runs one of two step lists depending on the top of stack. '''
    def __init__(self, then_steps: Iterable[str], else_steps: Iterable[str]) -> None:
        self.then_steps = tuple(then_steps) ; self.else_steps = tuple(else_steps)
    def execute(self, runtime: Runtime) -> None:
        runtime.run_words(self.then_steps if runtime.pop() != 0 else self.else_steps)

class CountedLoop(Word):
    '''
    Runs a step list for each index from start up to limit excluded.
    Limit and index sit on the return stack while the steps run.
    '''
    def __init__(self, steps: Iterable[str], plus: bool) -> None:
        self.steps = tuple(steps) ; self.plus = plus
    def execute(self, runtime: Runtime) -> None:
        i = runtime.pop()
        limit = runtime.pop()
        while i < limit:
            runtime.returns.push(limit)
            runtime.returns.push(i)
            runtime.run_words(self.steps)
            i = runtime.returns.pop()
            limit = runtime.returns.pop()
            i += runtime.pop() if self.plus else 1

class IndefiniteLoop(Word):
    ''' Runs first steps, then stops on a false flag or runs later steps. Forever without later steps. '''
    def __init__(self, first_steps: Iterable[str], later_steps: Optional[Iterable[str]]) -> None:
        self.first_steps = tuple(first_steps)
        self.later_steps = tuple(later_steps) if later_steps is not None else None
    def execute(self, runtime: Runtime) -> None:
        while True:
            runtime.run_words(self.first_steps)
            if self.later_steps is None: continue
            if runtime.pop() == 0: return
            runtime.run_words(self.later_steps)

class PrintString(Word):
    def __init__(self, text: str) -> None:
        self.text = text
    def execute(self, runtime: Runtime) -> None:
        runtime.emit_text(self.text)

class PushString(Word):
    ''' Pushes address and length of a string stored in memory. '''
    def __init__(self, address: int, length: int) -> None:
        self.address = address ; self.length = length
    def execute(self, runtime: Runtime) -> None:
        runtime.push(self.address)
        runtime.push(self.length)

class ImmediateWord(Pattern, builtin = False):
    ''' User definition marked immediate. Runs while compiling, compiles nothing. '''
    def __init__(self, name: str, word: Word) -> None:
        super().__init__(name, 'user defined')
        self.word = word
    def compile(self, runtime: Runtime) -> Generated:
        self.word.execute(runtime)
        return 'nop'

class CommentPattern(Pattern):
    ''' Pattern ( ... )  for comments. '''
    def __init__(self) : super().__init__('(', 'comment')
    def compile(self, runtime: Runtime) -> Generated:
        runtime.parser.read_until(')', required = False)
        return 'nop'

class LineCommentPattern(Pattern):
    ''' Pattern \\ ...  for comments up to the end of line. '''
    def __init__(self) : super().__init__('\\', 'comment up to end of line')
    def compile(self, runtime: Runtime) -> Generated:
        # the line may already be over, if the backslash ended it
        if runtime.parser.tokenizer.delimiter not in ('\n', '\r'):
            runtime.parser.read_until('\n\r', required = False)
        return 'nop'

class PrintStringPattern(Pattern):
    ''' Pattern ." ... "  to print a string. '''
    def __init__(self) : super().__init__('."', 'prints a string')
    def compile(self, runtime: Runtime) -> Generated:
        text = runtime.parser.read_until('"')
        name = runtime.unique_name('emit')
        runtime.register(name, PrintString(text))
        return name

class StringPattern(Pattern):
    ''' Pattern s" ... "  to store a null terminated string in memory. '''
    def __init__(self) : super().__init__('s"', '-- addr n , stores a string')
    def compile(self, runtime: Runtime) -> Generated:
        data = runtime.parser.read_until('"').encode('utf-8')
        address = runtime.allot(len(data) + 1)
        for offset, byte in enumerate(data): runtime.memory[address + offset] = byte
        runtime.memory[address + len(data)] = 0
        name = runtime.unique_name('str')
        runtime.register(name, PushString(address, len(data)))
        return name

class IfPattern(Pattern):
    ''' Pattern if ... [else ...] then, used to define conditional logic. '''
    def __init__(self) : super().__init__('if', 'flag -- , conditional logic')
    def compile(self, runtime: Runtime) -> Generated:
        name = runtime.unique_name('if')
        ender, then_steps = runtime.parser.compile_until(runtime, 'else', 'then')
        else_steps: List[str] = []
        if ender == 'else': _, else_steps = runtime.parser.compile_until(runtime, 'then')
        runtime.register(name, Conditional(then_steps, else_steps))
        return name

class DoPattern(Pattern):
    ''' Pattern do ... loop | +loop, for indexed loops. '''
    def __init__(self, prefix: str = 'do') : super().__init__(prefix, 'limit start -- , indexed loop')
    def compile(self, runtime: Runtime) -> Generated:
        name = runtime.unique_name('do')
        ender, steps = runtime.parser.compile_until(runtime, 'loop', '+loop')
        runtime.register(name, CountedLoop(steps, ender == '+loop'))
        return name

class QueryDoPattern(DoPattern):
    ''' Alias of do ... loop. '''
    def __init__(self) : super().__init__('?do')

class BeginPattern(Pattern):
    '''
    Pattern begin ... repeat, for forever loops.
    Pattern begin ... while ... repeat, for conditional loops.
    '''
    def __init__(self) : super().__init__('begin', 'loop with optional condition')
    def compile(self, runtime: Runtime) -> Generated:
        name = runtime.unique_name('begin')
        ender, first_steps = runtime.parser.compile_until(runtime, 'while', 'repeat')
        later_steps: Optional[List[str]] = None
        if ender == 'while': _, later_steps = runtime.parser.compile_until(runtime, 'repeat')
        runtime.register(name, IndefiniteLoop(first_steps, later_steps))
        return name

class PostponePattern(Pattern):
    ''' Pattern postpone ..., runs an immediate word now, or compiles a normal word as is. '''
    def __init__(self) : super().__init__('postpone', 'defers a word')
    def compile(self, runtime: Runtime) -> Generated:
        name = runtime.parser.parse_word(self.prefix)
        if name in runtime.immediates:
            result = runtime.immediates[name].compile(runtime)
            # a splice from the inner word belongs to the enclosing compilation
            return result if isinstance(result, Splice) else 'nop'
        if name in runtime.words: return Splice(name)
        raise UndefinedOperand(f'{highlight(self.prefix)} cannot find word {highlight(name)}')
