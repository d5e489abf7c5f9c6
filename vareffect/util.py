import errno
import logging
import os
from typing import Dict, Iterable, List, Optional

import pandas as pd

ENV_VAR_PREFIX = 'VAREFFECT_'

logger = logging.getLogger('vareffect')


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


def cast(value, cast_func):
    """
    cast a value to a given type

    Example:
        >>> cast('1', int)
        1
    """
    if cast_func == bool:
        value = cast_boolean(value)
    else:
        value = cast_func(value)
    return value


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def output_tabbed_file(rows: Iterable[Dict], filename: str, header: Optional[List[str]] = None):
    """
    write a list of row dictionaries to a tab delimited file

    Args:
        rows: the rows to write
        filename: path to the output file
        header: the columns to output (and their order). Defaults to every key seen in the rows
    """
    rows = list(rows)
    if header is None:
        header = []
        for row in rows:
            for col in row:
                if col not in header:
                    header.append(col)
    if os.path.dirname(filename):
        mkdirp(os.path.dirname(filename))
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(rows, columns=header)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')
