from typing import Callable
import pytest
from interpreter import Interpreter

@pytest.fixture
def output() -> bytearray:
    return bytearray()

@pytest.fixture
def interpreter(output: bytearray) -> Interpreter:
    return Interpreter(output.append)

@pytest.fixture
def run(interpreter: Interpreter, output: bytearray) -> Callable[[str], str]:
    ''' Runs a program on the shared interpreter, returns what this run emitted. '''
    def run(program: str) -> str:
        del output[:]
        interpreter.execute(program)
        return output.decode('utf-8')
    return run
