"""nforge - bootstrap launcher for the nforge Luau toolchain.

The launcher keeps a versioned copy of the bundled Luau scripts on disk
and hands every invocation over to ``lune``:

    nforge <args...>  ->  lune run <bundle>/nforge -- <args...>
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
