''' Base classes for words and errors '''

from typing import Set, Tuple, Type, Iterable, TYPE_CHECKING
from colorama import Fore as fg
if TYPE_CHECKING: from execution import Runtime

def highlight(name: str) -> str:
    return f'{fg.YELLOW}{name}{fg.RESET}'

class Error(Exception):
    ''' Abstract. Applicative Error. Rendered in red. '''
    def __init__(self, msg) -> None:
        super().__init__(f'{fg.LIGHTRED_EX}ERROR:{fg.RESET} {msg}')

class ExecutionError(Error):
    ''' Raised during execution. '''

class UnknownWord(ExecutionError):
    ''' Token is neither an integer, a normal word nor an immediate word. '''
    def __init__(self, name: str) -> None:
        super().__init__(f'unknown word {highlight(name)}')
        self.name = name

class StackUnderflow(ExecutionError):
    ''' Pop on an empty stack. '''
    def __init__(self, stack: str) -> None:
        super().__init__(f'{stack} stack underflow')
        self.stack = stack

class MemoryOutOfRange(ExecutionError):
    ''' Memory access outside of the cell array. '''
    def __init__(self, address: int) -> None:
        super().__init__(f'memory address {address} out of range')
        self.address = address

class DivisionByZero(ExecutionError):
    ''' Raised by / and % with a zero divisor. '''

class Word:
    ''' Abstract. Executable body of a dictionary entry. '''
    def execute(self, runtime: 'Runtime') -> None:
        raise ExecutionError(f'word {self} cannot be executed')

class Compiled(Word):
    ''' Body made of a step list, resolved lazily at each execution. '''
    def __init__(self, steps: Iterable[str]) -> None:
        self.steps: Tuple[str, ...] = tuple(steps)
    def __str__(self) -> str:
        return ' '.join(highlight(step) for step in self.steps)
    def execute(self, runtime: 'Runtime') -> None:
        runtime.run_words(self.steps)

class Constant(Word):
    ''' Pushes a fixed value. Backs constants, variables and created words. '''
    def __init__(self, value: int) -> None:
        self.value = value
    def __str__(self) -> str:
        return f'{fg.CYAN}{self.value}{fg.RESET}'
    def execute(self, runtime: 'Runtime') -> None:
        runtime.push(self.value)

class Intrinsic(Word):
    ''' Native implementation of a built-in word. '''
    classes : Set[Type['Intrinsic']] = set()
    def __init_subclass__(cls, builtin: bool = True) -> None:
        if builtin: Intrinsic.classes.add(cls)
    def __init__(self, value: str, comment: str = '', aliases: Tuple[str, ...] = ()) -> None:
        self.value = value
        self.comment = comment
        self.aliases = aliases
    def register(self, runtime: 'Runtime') -> None:
        for name in (self.value, *self.aliases): runtime.register(name, self)
    def __str__(self) -> str:
        desc = f' {fg.GREEN}( {self.comment} ){fg.RESET}' if self.comment else ''
        return f'{fg.LIGHTBLACK_EX}intrinsic<{type(self).__name__}>{fg.RESET}{desc}'
