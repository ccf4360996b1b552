from typing import Iterable, List, Optional, Sequence, Union

ArgLike = Union[str, Sequence[str], None]


def collapse_args(*args: ArgLike) -> List[str]:
    """
    Flatten a mix of single arguments and argument lists into one argument list.

    Relative order is preserved and empty strings (and None) are dropped, so
    optional flags can be passed as ``""`` or ``None`` when they do not apply.

    Examples
    --------
    >>> collapse_args("run", ["-v", "a:b"], "", "img")
    ['run', '-v', 'a:b', 'img']
    """
    result: List[str] = []
    for arg in args:
        if arg is None:
            continue
        if isinstance(arg, str):
            tokens: Iterable[Optional[str]] = [arg]
        else:
            tokens = arg
        result.extend(token for token in tokens if token)
    return result
