"""Constants used throughout the pycqlsh package."""

SHELL_NAME = 'pycqlsh'
CQL_SPEC_VERSION = '3.4.7'

# Output modes understood by the render engine
OUTPUT_MODES = ['tabular', 'json', 'csv', 'expanded']
DEFAULT_OUTPUT_MODE = 'tabular'
DEFAULT_MAX_WIDTH = 100

NO_ROWS_MARKER = '(No rows)'
EXPANDED_RULE = '-' * 13

STATEMENT_TERMINATOR = ';'
COMMENT_PREFIXES = ('--', '//')

DEFAULT_CONSISTENCY = 'ONE'
DEFAULT_SERIAL_CONSISTENCY = 'SERIAL'
DEFAULT_PAGE_SIZE = 100
CONSISTENCY_LEVELS = [
    'ANY', 'ONE', 'TWO', 'THREE', 'QUORUM', 'ALL',
    'LOCAL_QUORUM', 'LOCAL_ONE', 'SERIAL', 'LOCAL_SERIAL', 'EACH_QUORUM'
]
SERIAL_CONSISTENCY_LEVELS = ['SERIAL', 'LOCAL_SERIAL']

CQL_KEYWORDS = [
    'SELECT', 'FROM', 'WHERE', 'AND', 'OR', 'INSERT', 'INTO', 'VALUES', 'UPDATE', 'SET',
    'DELETE', 'CREATE', 'ALTER', 'DROP', 'TABLE', 'KEYSPACE', 'TYPE', 'INDEX', 'MATERIALIZED',
    'VIEW', 'USE', 'WITH', 'AS', 'ORDER', 'BY', 'ASC', 'DESC', 'LIMIT', 'ALLOW', 'FILTERING',
    'CONTAINS', 'USING', 'TTL', 'TIMESTAMP', 'IF', 'NOT', 'EXISTS', 'PRIMARY', 'KEY', 'FROZEN',
    'LIST', 'MAP', 'TUPLE', 'FUNCTION', 'RETURNS', 'CALLED', 'INPUT', 'LANGUAGE', 'AGGREGATE',
    'SFUNC', 'STYPE', 'FINALFUNC', 'INITCOND', 'ROLE', 'AUTHORIZE', 'GRANT', 'REVOKE', 'PERMISSION',
    'ON', 'TO', 'OF', 'MODIFY', 'DESCRIBE', 'TEXT', 'ASCII', 'BIGINT', 'BLOB', 'BOOLEAN', 'COUNTER',
    'DATE', 'DECIMAL', 'DOUBLE', 'FLOAT', 'INET', 'INT', 'SMALLINT', 'TIME', 'TIMEUUID',
    'TINYINT', 'UUID', 'VARCHAR', 'VARINT', 'TOKEN', 'WRITETIME', 'NULL', 'TRUE', 'FALSE'
]

# Names offered by completion at the start of a line
SPECIAL_COMMAND_NAMES = [
    'HELP', 'QUIT', 'EXIT', 'CLEAR', 'DESCRIBE', 'DESC', 'USE', 'SOURCE', 'CAPTURE',
    'TRACING', 'EXPAND', 'CONSISTENCY', 'SERIAL CONSISTENCY', 'PAGING',
    'SHOW VERSION', 'SHOW HOST', 'SHOW SESSION'
]
