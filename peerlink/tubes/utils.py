import functools
import inspect


MAX_REPR = 64


def short_repr(value):
    if isinstance(value, (bytes, bytearray)) and len(value) > MAX_REPR:
        return f'{bytes(value[:MAX_REPR])!r}...(+{len(value) - MAX_REPR})'
    return repr(value)


def log(logger):
    def wrapper(func):
        signature = inspect.signature(func)
        @functools.wraps(func)
        def wrapped(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            names = list(bound.arguments)
            if names and names[0] == 'self':
                names = names[1:]
            args_info = ', '.join(f'{name}={short_repr(bound.arguments[name])}' for name in names)
            logger.debug(f"{func.__qualname__}({args_info})")
            return func(*args, **kwargs)
        return wrapped
    return wrapper
