"""Algebraic data types."""
import logging

from types import (
    DynamicClassAttribute,
    GenericAlias,
    MappingProxyType,
    new_class,
)
from typing import Any

from unions.errors import NonExhaustiveMatchError, UnionsError, VariantLookupError

__all__ = [
    "ADT",
    "ADTMeta",
    "NonExhaustiveMatchError",
    "UnionsError",
    "VariantLookupError",
]

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("unions")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("unions").addHandler(logging.NullHandler())

log = logging.getLogger(__name__)

_SUNDER_OPTIONS = ("_order_", "_ignore_", "_missing_")


def _is_descriptor(obj: Any) -> bool:
    return (
        hasattr(obj, "__get__") or hasattr(obj, "__set__") or hasattr(obj, "__delete__")
    )


def _is_dunder(name: str) -> bool:
    return (
        len(name) > 4
        and name[:2] == name[-2:] == "__"
        and name[2] != "_"
        and name[-3] != "_"
    )


def _is_sunder(name: str) -> bool:
    return (
        len(name) > 2
        and name[0] == name[-1] == "_"
        and name[1] != "_"
        and name[-2] != "_"
    )


def _is_private(cls_name: str, name: str) -> bool:
    # names mangled from `__name` inside the class body
    prefix = "_%s__" % cls_name.lstrip("_")
    return name.startswith(prefix) and not name.endswith("__")


class _ADTDict(dict):
    """
    Track variant order and ensure variant names are not reused.

    ADTMeta will use the names found in self._member_names as the variant
    names.
    """

    def __init__(self, cls_name: str):
        super().__init__()
        self._cls_name = cls_name
        self._member_names: dict[str, None] = {}  # a dict keeps insertion order
        self._ignore: list[str] = []

    def __setitem__(self, key: str, value: Any) -> None:
        if _is_private(self._cls_name, key):
            # a normal attribute, never a variant
            pass
        elif _is_sunder(key):
            if key not in _SUNDER_OPTIONS:
                raise ValueError(
                    "_sunder_ names, such as %r, are reserved for ADT use" % (key,)
                )
            if key == "_ignore_":
                if isinstance(value, str):
                    value = value.replace(",", " ").split()
                else:
                    value = list(value)
                self._ignore = value
                already = set(value) & set(self._member_names)
                if already:
                    raise ValueError(
                        "_ignore_ cannot specify already set names: %r" % (already,)
                    )
        elif _is_dunder(key):
            if key == "__order__":
                key = "_order_"
        elif key in self._member_names:
            # descriptor overwriting a variant?
            raise TypeError("%r already defined as %r" % (key, self[key]))
        elif key in self._ignore:
            pass
        elif _is_descriptor(value):
            # methods, properties and friends are shared behaviour
            pass
        else:
            if key in self:
                # variant overwriting a descriptor?
                raise TypeError("%r already defined as %r" % (key, self[key]))
            self._member_names[key] = None
        super().__setitem__(key, value)


class ADTMeta(type):
    """
    Metaclass for ADT
    """

    def __instancecheck__(cls, instance: Any) -> bool:
        return cls.__subclasscheck__(type(instance))

    def __subclasscheck__(cls, subclass: type) -> bool:
        # class variants are plain subclasses of the nested class; they point
        # back at the ADT that owns them
        owner = getattr(subclass, "_adt_", None)
        if owner is not None and type.__subclasscheck__(cls, owner):
            return True
        return type.__subclasscheck__(cls, subclass)

    @classmethod
    def __prepare__(metacls, cls, bases, **kwds):
        # check that previous variants do not exist
        metacls._check_for_existing_members(cls, bases)
        if len(bases) > 1:
            raise TypeError("ADTs do not support mixins")
        return _ADTDict(cls)

    def __new__(metacls, cls, bases, classdict, **kwds):
        # an ADT class is final once variants have been defined.
        #
        # remove any keys listed in _ignore_
        classdict.setdefault("_ignore_", []).append("_ignore_")
        ignore = classdict["_ignore_"]
        for key in ignore:
            classdict.pop(key, None)

        # save variants into a separate mapping so they don't get baked into
        # the new class
        members = {k: classdict[k] for k in classdict._member_names}
        for name in members:
            del classdict[name]

        # adjust the sunders
        _order_ = classdict.pop("_order_", None)

        # check for illegal variant names (any others?)
        invalid_names = set(members) & {"mro", ""}
        if invalid_names:
            raise ValueError(
                "Invalid variant name: {0}".format(",".join(invalid_names))
            )

        # create a default docstring if one has not been provided
        if "__doc__" not in classdict:
            classdict["__doc__"] = "An ADT."

        custom_methods = metacls._gather_user_methods(classdict) if bases else {}

        adt_class = super().__new__(metacls, cls, bases, classdict, **kwds)
        adt_class._member_names_ = []  # names in definition order
        adt_class._member_map_ = {}  # name->variant map
        adt_class._values_map_ = {}  # only for constants, not classes
        adt_class._value2member_map_ = {}  # value->constant map, hashable values
        adt_class._cls_set_ = set()

        # save DynamicClassAttribute attributes from super classes so we know
        # if we can take the shortcut of storing variants in the class dict
        dynamic_attributes = {
            k
            for c in adt_class.mro()
            for k, v in c.__dict__.items()
            if isinstance(v, DynamicClassAttribute)
        }

        for member_name, value in members.items():
            value_is_cls = isinstance(value, type)

            if value_is_cls:
                # We subclass the nested class so it carries the ADT's methods
                # and knows which ADT it belongs to
                member = new_class(
                    value.__name__,
                    (value,),
                    exec_body=metacls._variant_body(adt_class, value, custom_methods),
                )
            else:
                member = object.__new__(adt_class)
                member._value_ = value
                member._name_ = member_name

            # If another constant with the same value was already defined, the
            # new constant becomes an alias to the existing one.
            for canonical in adt_class._values_map_.values():
                if not value_is_cls and canonical._value_ == member._value_:
                    member = canonical
                    break
            else:
                # Aliases don't appear in variant names (only in __members__).
                adt_class._member_names_.append(member_name)
                if value_is_cls:
                    adt_class._cls_set_.add(member)
                else:
                    adt_class._values_map_[member_name] = member

            # performance boost for any variant that would not shadow
            # a DynamicClassAttribute
            if member_name not in dynamic_attributes:
                setattr(adt_class, member_name, member)
            adt_class._member_map_[member_name] = member
            if not value_is_cls:
                try:
                    # This may fail if value is not hashable. We can't add the
                    # value to the map, and by-value lookups for this value will
                    # be linear.
                    adt_class._value2member_map_.setdefault(value, member)
                except TypeError:
                    pass

        if _order_ is not None:
            if isinstance(_order_, str):
                _order_ = _order_.replace(",", " ").split()
            if list(_order_) != adt_class._member_names_:
                raise TypeError("variant order does not match _order_")

        log.debug("Defined ADT %s with variants %s", cls, adt_class._member_names_)
        return adt_class

    def __bool__(cls):
        """
        classes/types should always be True.
        """
        return True

    def __call__(cls, value):
        """
        Return the variant matching `value`.

        Constants are looked up by value, so ``Tree("empty") is Tree.EMPTY``;
        instances of class variants are returned unchanged.
        """
        return cls.__new__(cls, value)

    def __contains__(cls, obj):
        if isinstance(obj, type):
            return obj in cls._cls_set_
        return isinstance(obj, cls)

    def __delattr__(cls, attr):
        # nicer error message when someone tries to delete an attribute
        if attr in cls._member_map_:
            raise AttributeError("%s: cannot delete ADT variant." % cls.__name__)
        super().__delattr__(attr)

    def __dir__(cls):
        return [
            "__class__",
            "__doc__",
            "__members__",
            "__module__",
        ] + cls._member_names_

    def __getattr__(cls, name):
        """
        Return the variant matching `name`

        Variants that would shadow a DynamicClassAttribute (such as `name` and
        `value`) are not stored in the class dict, so they are found here.
        """
        if _is_dunder(name) or _is_sunder(name):
            raise AttributeError(name)
        try:
            return cls._member_map_[name]
        except KeyError:
            raise AttributeError(name) from None

    def __iter__(cls):
        """
        Returns variants in definition order.
        """
        return (cls._member_map_[name] for name in cls._member_names_)

    def __len__(cls):
        return len(cls._member_names_)

    @property
    def __members__(cls):
        """
        Returns a mapping of variant name->variant.

        This mapping lists all variants, including aliases. Note that this
        is a read-only view of the internal mapping.
        """
        return MappingProxyType(cls._member_map_)

    def __repr__(cls):
        return "<ADT %r>" % cls.__name__

    def __reversed__(cls):
        """
        Returns variants in reverse definition order.
        """
        return (cls._member_map_[name] for name in reversed(cls._member_names_))

    def __setattr__(cls, name, value):
        """
        Block attempts to reassign variants.

        A simple assignment to the class namespace only changes one of the
        several possible ways to get a variant from the ADT class, resulting
        in an inconsistent union.
        """
        member_map = cls.__dict__.get("_member_map_", {})
        if name in member_map:
            raise AttributeError("Cannot reassign variants.")
        super().__setattr__(name, value)

    def match(cls, value, /, **cases):
        """
        Dispatch on the variant of `value`, insisting on a complete match.

        Every variant of the ADT must be named exactly once in `cases`.
        Constant handlers are called with no arguments; class handlers are
        called with the variant's fields in ``__match_args__`` order (or with
        the instance itself when the class declares no ``__match_args__``).

        Adding a variant to an ADT therefore breaks every incomplete
        ``match`` call the first time it runs, rather than silently falling
        through.
        """
        missing = [name for name in cls._member_names_ if name not in cases]
        unknown = [name for name in cases if name not in cls._member_map_]
        if missing or unknown:
            problems = []
            if missing:
                problems.append("missing %s" % ", ".join(missing))
            if unknown:
                problems.append("unknown %s" % ", ".join(unknown))
            raise NonExhaustiveMatchError(
                "non-exhaustive match on %s: %s" % (cls.__name__, "; ".join(problems))
            )

        for name in cls._member_names_:
            member = cls._member_map_[name]
            if member is value:
                return cases[name]()
            if member is type(value):
                fields = getattr(member, "__match_args__", None)
                if fields is None:
                    return cases[name](value)
                return cases[name](*(getattr(value, f) for f in fields))
        raise NonExhaustiveMatchError(
            "%r is not a variant of %s" % (value, cls.__name__)
        )

    @staticmethod
    def _check_for_existing_members(class_name, bases):
        for chain in bases:
            for base in chain.__mro__:
                if isinstance(base, ADTMeta) and base._member_names_:
                    raise TypeError(
                        "%s: cannot extend ADT %r" % (class_name, base.__name__)
                    )

    @staticmethod
    def _gather_user_methods(classdict: dict[str, Any]) -> dict[str, Any]:
        res = {}
        for k, v in classdict.items():
            if _is_sunder(k):
                continue
            if callable(v) or _is_descriptor(v):
                res[k] = v

        return res

    @staticmethod
    def _variant_body(adt_class, value: type, methods: dict[str, Any]):
        def exec_body(ns: dict[str, Any]) -> None:
            # methods the variant defines itself win over the shared ones
            for k, v in methods.items():
                if k not in value.__dict__:
                    ns[k] = v
            ns["__module__"] = value.__module__
            ns["__qualname__"] = value.__qualname__
            ns["__doc__"] = value.__doc__
            ns["_adt_"] = adt_class

        return exec_body


class ADT(metaclass=ADTMeta):
    """
    An algebraic data type.

    Derive from this class to define new algebraic data types. Plain values
    assigned in the class body become constant variants; nested classes
    (usually dataclasses) become variants carrying data. Methods defined in
    the class body are shared by every variant.
    """

    def __new__(cls, value):
        # all constants are actually created during class construction
        # without calling this method; this method is called by the metaclass'
        # __call__ (i.e. Tree("empty") ), and by pickle
        val_type = type(value)
        if val_type is cls or val_type in cls._cls_set_:
            return value

        # by-value search for a matching constant
        # see if it's in the reverse mapping (for hashable values)
        try:
            return cls._value2member_map_[value]
        except KeyError:
            # Not found, no need to do long O(n) search
            pass
        except TypeError:
            # not there, now do long search -- O(n) behavior
            for member in cls._values_map_.values():
                if member._value_ == value:
                    return member

        # still not found -- try _missing_ hook
        result = cls._missing_(value)
        if isinstance(result, cls):
            return result
        raise VariantLookupError("%r is not a valid %s" % (value, cls.__qualname__))

    @classmethod
    def _missing_(cls, value):
        return None

    def __repr__(self):
        return "<%s.%s: %r>" % (self.__class__.__name__, self._name_, self._value_)

    def __str__(self):
        return "%s.%s" % (self.__class__.__name__, self._name_)

    def __dir__(self):
        """
        Returns all variants and all public methods
        """
        added_behavior = [
            m
            for cls in self.__class__.mro()
            for m in cls.__dict__
            if m[0] != "_" and m not in self._member_map_
        ] + [m for m in self.__dict__ if m[0] != "_"]
        return ["__class__", "__doc__", "__module__"] + added_behavior

    def __format__(self, format_spec):
        return str.__format__(str(self), format_spec)

    def __hash__(self):
        return hash(self._name_)

    def __reduce_ex__(self, proto):
        return self.__class__, (self._value_,)

    # DynamicClassAttribute is used to provide access to the `name` and
    # `value` properties of constants while keeping some measure of
    # protection from modification, while still allowing for an ADT to have
    # variants named `name` and `value`.  This works because variants are not
    # set directly on the ADT class -- __getattr__ is used to look them up.

    @DynamicClassAttribute
    def name(self):
        """The name of the constant."""
        return self._name_

    @DynamicClassAttribute
    def value(self):
        """The value of the constant."""
        return self._value_

    def __class_getitem__(cls, types):
        return GenericAlias(cls, types)
