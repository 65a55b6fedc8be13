"""Type-based dispatch for tripwire's syntax passes.

A TypeDispatcher routes a call to the method registered for the runtime type
of its first argument. The rewrite pass uses it to select the constrained
clauses of each statement kind (for-loop, if, switch, type switch) without a
chain of isinstance checks.
"""

__all__ = [
    "TypeDispatcher",
    "defaultdispatch",
    "dispatch",
    "TypeDispatchError",
    "TypeDispatchDeclarationError",
]

# Table key of the fallback handler.
DEFAULT = None


class TypeDispatchError(Exception):
    """Raised when a dispatcher has no handler for an argument's type."""
    pass


class TypeDispatchDeclarationError(Exception):
    """Raised while building a dispatcher class whose handlers are malformed.

    Happens when two handlers claim the same type, when no default handler
    exists, or when @dispatch receives something that is not a type.
    """
    pass


def _flatten_types(types):
    result = []
    for t in types:
        if isinstance(t, (list, tuple)):
            result.extend(_flatten_types(t))
        elif isinstance(t, type):
            result.append(t)
        else:
            raise TypeDispatchDeclarationError("Expected a type, got %r instead." % (t,))
    return result


def dispatch(*types):
    """Mark a method as the handler for the given types.

    Args:
        *types: Types (or nested lists of types) handled by the method.
    """
    def mark(f):
        f.__dispatch__ = tuple(_flatten_types(types))
        return f
    return mark


def defaultdispatch(f):
    """Mark a method as the fallback handler."""
    f.__dispatch__ = (DEFAULT,)
    return f


class typedispatcher(type):
    """Metaclass that collects @dispatch handlers into ``__typeDispatchTable__``.

    Handlers declared on the class take precedence over inherited ones, and
    the finished table must contain a default handler.
    """
    def __new__(mcls, name, bases, d):
        table = {}
        for attr, value in d.items():
            for t in getattr(value, "__dispatch__", ()):
                if t in table:
                    raise TypeDispatchDeclarationError(
                        "%s has declared with multiple handlers for type %s"
                        % (name, "default" if t is DEFAULT else t.__name__)
                    )
                table[t] = value

        for base in bases:
            for t, handler in getattr(base, "__typeDispatchTable__", {}).items():
                table.setdefault(t, handler)

        if DEFAULT not in table:
            raise TypeDispatchDeclarationError("%s has no default dispatch" % (name,))

        d["__typeDispatchTable__"] = table
        return type.__new__(mcls, name, bases, d)


def _raise_unhandled(self, node, *args):
    raise TypeDispatchError("%r cannot handle %r\n%r" % (type(self), type(node), node))


class TypeDispatcher(object, metaclass=typedispatcher):
    """Base class for dispatchers keyed on the type of the first argument.

    Subclasses decorate handlers with ``@dispatch(SomeType)`` and may
    override the default with ``@defaultdispatch``. Calling an instance runs
    the handler for ``type(arg)``, falling back along the MRO and finally to
    the default, which raises TypeDispatchError unless overridden.

    Example:
        >>> class Describe(TypeDispatcher):
        ...     @dispatch(int)
        ...     def visitInt(self, obj):
        ...         return "integer"
        ...     @defaultdispatch
        ...     def visitOther(self, obj):
        ...         return "other"
        >>> Describe()(3), Describe()("x")
        ('integer', 'other')
    """
    exceptionDefault = defaultdispatch(_raise_unhandled)

    def __call__(self, node, *args):
        table = type(self).__typeDispatchTable__
        handler = table.get(type(node))
        if handler is None:
            handler = next(
                (table[t] for t in type(node).__mro__ if t in table),
                table[DEFAULT],
            )
            # Resolved handlers are cached per concrete type.
            table[type(node)] = handler
        return handler(self, node, *args)
