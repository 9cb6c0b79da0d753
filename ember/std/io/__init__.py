from .basic_io import BufferSink, ConsoleSink, OutputSink
from ember.environment import Environment
from ember.functions import NativeFunction
from ember.types import stringify
from typing import List, Any


def populate_io_environment(env: Environment, sink: OutputSink) -> Environment:
    """Install the `write` and `writeLine` natives, bound to `sink`."""

    def std_write(args: List[Any]) -> Any:
        sink.write(stringify(args[0]))
        return None

    def std_write_line(args: List[Any]) -> Any:
        sink.write_line(stringify(args[0]))
        return None

    env.define('write', NativeFunction('write', 1, std_write))
    env.define('writeLine', NativeFunction('writeLine', 1, std_write_line))

    return env


__all__ = [
    'BufferSink',
    'ConsoleSink',
    'OutputSink',
    'populate_io_environment',
]
