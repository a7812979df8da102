from functools import wraps

_missing = object()


def memoize(maxsize=1000):
    """Make a memoization decorator. A negative value of `maxsize` means
    no size limit."""
    def deco(f):
        """Memoization decorator. Items of `kwargs` must be hashable."""
        memo = {}

        @wraps(f)
        def func(*args, **kwargs):
            key = (args, frozenset(kwargs.items()))
            value = memo.get(key, _missing)
            if value is _missing:
                value = f(*args, **kwargs)
                if 0 < maxsize <= len(memo):
                    try:
                        memo.popitem()
                    except KeyError:
                        # emptied by another thread
                        pass
                memo[key] = value
            return value
        return func
    return deco


def format_mass(mass, digits=2):
    """Render a mass rounded to `digits` decimals, the way it is displayed
    in tag strings (``<100.05>``)."""
    return str(round(mass, digits))
