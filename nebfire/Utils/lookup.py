from collections.abc import Mapping


class DefaultLookup(Mapping):
    """Sparse-or-uniform lookup table.

    Any key that was not set explicitly returns `default`. The explicit
    entries are copied on construction so two lookups never share state.
    """

    def __init__(self, default, values=None):
        self.default = default
        self._values = dict(values) if values is not None else {}

    @classmethod
    def from_value(cls, value, default, start=0):
        """Build a lookup from a scalar (uniform), a mapping or a sequence.

        For a sequence the position in the sequence, counted from `start`,
        is used as the key.
        """
        if value is None:
            return cls(default)
        if isinstance(value, Mapping):
            return cls(default, value)
        if isinstance(value, (list, tuple)):
            return cls(default, enumerate(value, start=start))
        return cls(value)

    def __getitem__(self, key):
        return self._values.get(key, self.default)

    def __setitem__(self, key, value):
        self._values[key] = value

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def is_uniform(self):
        return len(self._values) == 0

    def __repr__(self):
        return f"DefaultLookup(default={self.default!r}, values={self._values!r})"
