''' All intrinsic implementations '''

import operator
from typing import Callable, Tuple
from atoms import Intrinsic, Compiled, Constant, DivisionByZero
from execution import Runtime
from parsing import UndefinedOperand
from patterns import ImmediateWord

def flag(cond: bool) -> int: return 1 if cond else 0

def truncated_div(x: int, y: int) -> int:
    if y == 0: raise DivisionByZero('division by zero')
    q = abs(x) // abs(y)
    return q if (x < 0) == (y < 0) else -q

def truncated_mod(x: int, y: int) -> int:
    return x - y * truncated_div(x, y)

class BinaryOperator(Intrinsic, builtin = False):
    ''' Abstract. Pops b then a, pushes the result of a op b. '''
    def __init__(self, value: str, op: Callable[[int, int], int], aliases: Tuple[str, ...] = ()) -> None:
        super().__init__(value, f'a b -- a{value}b', aliases)
        self.op = op
    def execute(self, runtime: Runtime) -> None:
        y = runtime.pop()
        x = runtime.pop()
        runtime.push(self.op(x, y))

class Add(BinaryOperator):
    def __init__(self): super().__init__('+', operator.add)

class Substract(BinaryOperator):
    def __init__(self): super().__init__('-', operator.sub)

class Multiply(BinaryOperator):
    def __init__(self): super().__init__('*', operator.mul)

class Divide(BinaryOperator):
    def __init__(self): super().__init__('/', truncated_div)

class Modulo(BinaryOperator):
    def __init__(self): super().__init__('%', truncated_mod)

class And(BinaryOperator):
    def __init__(self): super().__init__('and', operator.and_)

class Or(BinaryOperator):
    def __init__(self): super().__init__('or', operator.or_)

class Xor(BinaryOperator):
    def __init__(self): super().__init__('xor', operator.xor)

class Equals(BinaryOperator):
    def __init__(self): super().__init__('=', lambda x, y: flag(x == y), ('==',))

class NotEquals(BinaryOperator):
    def __init__(self): super().__init__('!=', lambda x, y: flag(x != y), ('/=', '<>'))

class LowerThan(BinaryOperator):
    def __init__(self): super().__init__('<', lambda x, y: flag(x < y))

class LowerOrEqual(BinaryOperator):
    def __init__(self): super().__init__('<=', lambda x, y: flag(x <= y))

class GreaterThan(BinaryOperator):
    def __init__(self): super().__init__('>', lambda x, y: flag(x > y))

class GreaterOrEqual(BinaryOperator):
    def __init__(self): super().__init__('>=', lambda x, y: flag(x >= y))

class Not(Intrinsic):
    def __init__(self): super().__init__('not', 'a -- a=0', ('0=',))
    def execute(self, runtime: Runtime) -> None:
        runtime.push(flag(runtime.pop() == 0))

class Increment(Intrinsic):
    def __init__(self): super().__init__('1+', 'a -- a+1')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(runtime.pop() + 1)

class Decrement(Intrinsic):
    def __init__(self): super().__init__('1-', 'a -- a-1')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(runtime.pop() - 1)

class Negate(Intrinsic):
    def __init__(self): super().__init__('negate', 'a -- -a')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(-runtime.pop())

class Nop(Intrinsic):
    def __init__(self): super().__init__('nop', '--', ('cells',))
    def execute(self, runtime: Runtime) -> None: pass

class Drop(Intrinsic):
    def __init__(self): super().__init__('drop', 'a --')
    def execute(self, runtime: Runtime) -> None:
        runtime.pop()

class Dup(Intrinsic):
    def __init__(self): super().__init__('dup', 'a -- a a')
    def execute(self, runtime: Runtime) -> None:
        x = runtime.pop()
        runtime.push(x) ; runtime.push(x)

class TwoDup(Intrinsic):
    def __init__(self): super().__init__('2dup', 'a b -- a b a b')
    def execute(self, runtime: Runtime) -> None:
        y = runtime.pop() ; x = runtime.pop()
        for value in (x, y, x, y): runtime.push(value)

class Swap(Intrinsic):
    def __init__(self): super().__init__('swap', 'a b -- b a')
    def execute(self, runtime: Runtime) -> None:
        y = runtime.pop() ; x = runtime.pop()
        runtime.push(y) ; runtime.push(x)

class ToReturn(Intrinsic):
    def __init__(self): super().__init__('>r', 'a -- , R: -- a')
    def execute(self, runtime: Runtime) -> None:
        runtime.returns.push(runtime.pop())

class FromReturn(Intrinsic):
    def __init__(self): super().__init__('r>', '-- a , R: a --')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(runtime.returns.pop())

class LoopIndex(Intrinsic):
    def __init__(self): super().__init__('i', '-- index')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(runtime.returns.peek())

class OuterLoopIndex(Intrinsic):
    def __init__(self): super().__init__('j', '-- outer index')
    def execute(self, runtime: Runtime) -> None:
        # R: outer-limit outer-index limit index
        runtime.push(runtime.returns.peek(2))

class Store(Intrinsic):
    def __init__(self): super().__init__('!', 'a addr --')
    def execute(self, runtime: Runtime) -> None:
        address = runtime.pop()
        runtime.memory[address] = runtime.pop()

class Fetch(Intrinsic):
    def __init__(self): super().__init__('@', 'addr -- a', ('c@',))
    def execute(self, runtime: Runtime) -> None:
        runtime.push(runtime.memory[runtime.pop()])

class Print(Intrinsic):
    def __init__(self): super().__init__('.', 'a --  , print a')
    def execute(self, runtime: Runtime) -> None:
        runtime.emit_text(f'{runtime.pop()} ')

class Emit(Intrinsic):
    def __init__(self): super().__init__('emit', 'c --  , print character c')
    def execute(self, runtime: Runtime) -> None:
        runtime.emit(runtime.pop())

class Blank(Intrinsic):
    def __init__(self): super().__init__('bl', '-- 32')
    def execute(self, runtime: Runtime) -> None:
        runtime.push(ord(' '))

class CarriageReturn(Intrinsic):
    def __init__(self): super().__init__('cr', 'print new line')
    def execute(self, runtime: Runtime) -> None:
        runtime.emit(ord('\n'))

class PrintBuffer(Intrinsic):
    def __init__(self): super().__init__('.s', 'addr n --  , print n cells from addr')
    def execute(self, runtime: Runtime) -> None:
        n = runtime.pop()
        address = runtime.pop()
        for i in range(n): runtime.emit(runtime.memory[address + i])

class Define(Intrinsic):
    def __init__(self): super().__init__(':', 'defines a new word, up to ;')
    def execute(self, runtime: Runtime) -> None:
        name = runtime.parser.parse_word(self.value)
        _, steps = runtime.parser.compile_until(runtime, ';')
        runtime.define(name, Compiled(steps))

class DefineVariable(Intrinsic):
    def __init__(self): super().__init__('variable', 'defines a one cell variable', ('create',))
    def execute(self, runtime: Runtime) -> None:
        name = runtime.parser.parse_word(self.value)
        runtime.define(name, Constant(runtime.allot(1)))

class DefineConstant(Intrinsic):
    def __init__(self): super().__init__('constant', 'a --  , defines a constant')
    def execute(self, runtime: Runtime) -> None:
        value = runtime.pop()
        runtime.define(runtime.parser.parse_word(self.value), Constant(value))

class Allot(Intrinsic):
    def __init__(self): super().__init__('allot', 'n --  , reserves n cells')
    def execute(self, runtime: Runtime) -> None:
        runtime.allot(runtime.pop())

class Immediate(Intrinsic):
    def __init__(self): super().__init__('immediate', 'makes the most recent definition immediate')
    def execute(self, runtime: Runtime) -> None:
        name = runtime.recent
        if name in runtime.immediates: return
        if name not in runtime.words:
            raise UndefinedOperand(f'{self.value} cannot find word {name!r}')
        ImmediateWord(name, runtime.words[name]).register(runtime)

class Words(Intrinsic):
    def __init__(self): super().__init__('words', 'print normal then immediate words')
    def execute(self, runtime: Runtime) -> None:
        for table in (runtime.words, runtime.immediates):
            # generated names contain a space
            names = sorted(name for name in table if ' ' not in name)
            runtime.emit_text(' '.join(names) + '\n')

class Dump(Intrinsic):
    def __init__(self): super().__init__('???', 'logs stacks and memory')
    def execute(self, runtime: Runtime) -> None:
        runtime.dump()
