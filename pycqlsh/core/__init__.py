"""Shell core: rendering, schema reflection, completion and dispatch."""
from pycqlsh.core.dispatch import CommandRegistry, ContinueSignal
from pycqlsh.core.render import render
from pycqlsh.core.schema import describe_keyspace, describe_table

__all__ = ['CommandRegistry', 'ContinueSignal', 'render', 'describe_keyspace', 'describe_table']
