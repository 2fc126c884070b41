''' Parsing engine '''

import logging
from typing import Dict, Set, List, Optional, Tuple, Type, Union, TYPE_CHECKING
from colorama import Fore as fg
from atoms import Error, highlight
if TYPE_CHECKING: from execution import Runtime

log = logging.getLogger(__name__)

class ParsingError(Error):
    ''' Raised by the parser. '''

class UnterminatedDefinition(ParsingError):
    ''' Raised when the input ends before a construct is closed. '''
    def __init__(self, enders: Tuple[str, ...]) -> None:
        super().__init__(f'missing closing {" , ".join(highlight(e) for e in enders)}')
        self.enders = enders

class UndefinedOperand(ParsingError):
    ''' Raised when the operand of a defining word cannot be resolved. '''

class Splice:
    '''
    Result of an immediate word asking the enclosing compilation
    to take a word name literally, instead of a generated word.
    '''
    def __init__(self, name: str) -> None:
        self.name = name
    def __str__(self) -> str:
        return f'{fg.MAGENTA}<{self.name}>{fg.RESET}'

# Immediate words return either the name of a normal word, or a splice
Generated = Union[str, Splice]

class Tokenizer:
    '''
    Lexical tokenizer. Consumes a string one character at a time.
    Every control character (code point <= 32) is a separator.
    '''

    def __init__(self, input_str: str = '') -> None:
        self.feed(input_str)

    def feed(self, input_str: str) -> None:
        self.input = input_str ; self.position = 0
        self.delimiter: Optional[str] = None

    @staticmethod
    def is_separator(c: str) -> bool:
        return ord(c) <= 32

    def next_char(self) -> Optional[str]:
        if self.position >= len(self.input): return None
        c = self.input[self.position] ; self.position += 1
        return c

    def next_word(self) -> Optional[str]:
        ''' Returns the next word lower-cased, None at end of input. '''
        c = self.next_char()
        while c is not None and Tokenizer.is_separator(c): c = self.next_char()
        if c is None: return None
        chars = []
        while c is not None and not Tokenizer.is_separator(c):
            chars.append(c) ; c = self.next_char()
        # the separator ending the word is consumed as well
        self.delimiter = c
        return ''.join(chars).lower()

class Pattern:
    '''
    Abstract. An immediate word, run while compiling.
    It may consume further input, and yields what the caller should compile.
    '''
    classes : Set[Type['Pattern']] = set()
    def __init_subclass__(cls, builtin: bool = True) -> None:
        if builtin: Pattern.classes.add(cls)
    def __init__(self, prefix: str, comment: Optional[str] = None) -> None:
        self.prefix = prefix ; self.comment = comment
    def compile(self, runtime: 'Runtime') -> Generated:
        ... # to overload
    def register(self, runtime: 'Runtime') -> None:
        runtime.register_immediate(self.prefix, self)
    def __str__(self) -> str:
        desc = f' {fg.GREEN}( {self.comment} ){fg.RESET}' if self.comment is not None else ''
        return f'{fg.LIGHTBLACK_EX}pattern<{type(self).__name__}>{fg.RESET}{desc}'

class Parser:
    '''
    Gramatical parser.
    Owns the input and the immediate words, and compiles step lists from the input.
    '''

    def __init__(self) -> None:
        self.tokenizer = Tokenizer()
        self.patterns: Dict[str, Pattern] = {}

    def feed(self, input_str: str) -> None:
        self.tokenizer.feed(input_str)

    def next_char(self) -> Optional[str]:
        return self.tokenizer.next_char()

    def next_word(self) -> Optional[str]:
        return self.tokenizer.next_word()

    def parse_word(self, owner: str) -> str:
        word = self.next_word()
        if word is None: raise UndefinedOperand(f'{highlight(owner)} got end of input, wanted a word')
        return word

    def read_until(self, closing: str, required: bool = True) -> str:
        ''' Raw text up to one of the closing characters, which is consumed. '''
        chars = []
        while True:
            c = self.next_char()
            if c is None and required: raise UnterminatedDefinition(tuple(closing))
            if c is None or c in closing: return ''.join(chars)
            chars.append(c)

    def compile_until(self, runtime: 'Runtime', *enders: str) -> Tuple[str, List[str]]:
        '''
        Compiles words until one of the enders.
        Returns the matched ender and the step list.
        Immediate words run now, other words are kept as names and resolved when executed.
        '''
        steps: List[str] = []
        while True:
            word = self.next_word()
            if word is None: raise UnterminatedDefinition(enders)
            if word in enders: return word, steps
            if word in self.patterns:
                result = self.patterns[word].compile(runtime)
                if isinstance(result, Splice): log.debug('CS: splice %s', result)
                steps.append(result.name if isinstance(result, Splice) else result)
            else:
                steps.append(word)
