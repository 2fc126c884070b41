''' Execution engine '''

import logging
import re
from typing import Callable, Dict, Iterable, Iterator, List
from atoms import Word, ExecutionError, UnknownWord, StackUnderflow, MemoryOutOfRange
from parsing import Parser, Pattern, Splice

log = logging.getLogger(__name__)

MEMORY_SIZE = 100000

# Receives every byte the program emits
Sink = Callable[[int], None]

class Stack:
    ''' LIFO of integers. Popping when empty is an underflow. '''
    def __init__(self, name: str) -> None:
        self.name = name
        self.content: List[int] = []
    def push(self, value: int) -> None:
        self.content.append(value)
    def pop(self) -> int:
        if len(self.content) == 0: raise StackUnderflow(self.name)
        return self.content.pop()
    def peek(self, i: int = 0) -> int:
        if len(self.content) <= i: raise StackUnderflow(self.name)
        return self.content[-(i+1)]
    def __len__(self) -> int: return len(self.content)
    def __iter__(self) -> Iterator[int]: return iter(self.content)
    def __str__(self) -> str: return f'{self.name} {self.content}'

class Memory:
    ''' Fixed size array of integer cells, with bound checked access. '''
    def __init__(self, size: int = MEMORY_SIZE) -> None:
        self.cells: List[int] = [0] * size
    def check(self, address: int) -> int:
        if not 0 <= address < len(self.cells): raise MemoryOutOfRange(address)
        return address
    def __getitem__(self, address: int) -> int:
        return self.cells[self.check(address)]
    def __setitem__(self, address: int, value: int) -> None:
        self.cells[self.check(address)] = value
    def __len__(self) -> int: return len(self.cells)
    def used(self) -> Iterable[tuple]:
        return ((address, value) for address, value in enumerate(self.cells) if value != 0)

class Runtime:
    '''
    Runtime environement for execution.
    Holds and manages the dictionary, both stacks, the memory and the input.
    '''

    INTEGER = re.compile(r'[-+]?[0-9]+')

    def __init__(self, sink: Sink, memory_size: int = MEMORY_SIZE) -> None:
        self.words: Dict[str, Word] = {}
        self.parser = Parser()
        self.data = Stack('data')
        self.returns = Stack('return')
        self.memory = Memory(memory_size)
        self.here = 0
        self.recent = ''
        self.serial = 0
        self.sink = sink

    @property
    def immediates(self) -> Dict[str, Pattern]:
        return self.parser.patterns

    def push(self, value: int) -> None: self.data.push(value)

    def pop(self) -> int: return self.data.pop()

    def emit(self, value: int) -> None:
        self.sink(value & 0xFF)

    def emit_text(self, text: str) -> None:
        for byte in text.encode('utf-8'): self.sink(byte)

    def register(self, name: str, word: Word) -> None:
        self.immediates.pop(name, None)
        self.words[name] = word

    def register_immediate(self, name: str, pattern: Pattern) -> None:
        self.words.pop(name, None)
        self.immediates[name] = pattern

    def define(self, name: str, word: Word) -> None:
        ''' Registers a user definition, which becomes the most recent one. '''
        self.register(name, word)
        self.recent = name

    def unique_name(self, kind: str) -> str:
        # contains a space, so that no token can ever refer to it
        name = f'<{kind} {self.serial}>'
        self.serial += 1
        return name

    def allot(self, cells: int) -> int:
        ''' Reserves cells at here, returns the address of the first one. '''
        if cells < 0: raise ExecutionError(f'cannot allot a negative amount {cells}')
        if self.here + cells > len(self.memory): raise MemoryOutOfRange(self.here + cells)
        address = self.here
        self.here += cells
        return address

    def execute(self, name: str) -> None:
        if name not in self.words: raise UnknownWord(name)
        self.words[name].execute(self)

    def run_word(self, token: str) -> None:
        ''' Integer literal, then normal word, then immediate word. '''
        token = token.lower()
        if Runtime.INTEGER.fullmatch(token):
            log.debug('RW: %s', token)
            self.push(int(token))
        elif token in self.words:
            word = self.words[token]
            log.debug('RW: %s %s', token, word)
            word.execute(self)
        elif token in self.immediates:
            pattern = self.immediates[token]
            log.debug('RW: %s %s', token, pattern)
            result = pattern.compile(self)
            self.execute(result.name if isinstance(result, Splice) else result)
        else:
            raise UnknownWord(token)

    def run_words(self, steps: Iterable[str]) -> None:
        for step in steps: self.run_word(step)

    def run(self, program: str) -> None:
        ''' Runs a whole program. Dictionary and memory persist across runs. '''
        self.parser.feed(program)
        while True:
            token = self.parser.next_word()
            if token is None: break
            log.debug('RP: %s', token)
            self.run_word(token)

    def dump(self) -> None:
        log.info('<<<<<<<<<<<<<<<<')
        log.info('%s', self.data)
        log.info('%s', self.returns)
        log.info('here %d', self.here)
        log.info(' '.join(f'[{address}]={value}' for address, value in self.memory.used()))
        log.info('>>>>>>>>>>>>>>>>')
