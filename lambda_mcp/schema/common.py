"""Ready-made field descriptors for common argument patterns."""

from . import fields


class CommonSchemas:
    """Pre-defined descriptors.

    Presets are shared frozen instances; ``enum``, ``array`` and ``object``
    are the builders and return a new descriptor per call.
    """

    # Basic types
    string = fields.string()
    number = fields.number()
    boolean = fields.boolean()

    # Optional types
    optional_string = fields.string().optional()
    optional_number = fields.number().optional()
    optional_boolean = fields.boolean().optional()

    # Common patterns
    email = fields.string(format="email")
    url = fields.string(format="url")
    uuid = fields.string(format="uuid")

    enum = staticmethod(fields.enum)
    array = staticmethod(fields.array)
    object = staticmethod(fields.obj)
